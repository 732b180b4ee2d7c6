"""Side-by-side report: bit-true model vs. float32 reference.

    fp16-compare add --random 20 --seed 1
    fp16-compare mul

Mismatches are expected wherever hardware truncation and float32 rounding
part ways; they are counted, not treated as failures.
"""

import argparse

import numpy as np

import reference
from adder import add
from float16 import CANONICAL_NAN
from multiplier import multiply

ADD_CASES = [
    (0xC0B0, 0x1CC0),  # truncation regression case
    (0x00E0, 0x5060),  # subnormal + normal
    (0x3C00, 0x3C00),  # 1.0 + 1.0
    (0x3C00, 0xBC00),  # 1.0 - 1.0
    (0x7C00, 0x3C00),  # inf + 1.0
    (0x7FFF, 0x3C00),  # nan + 1.0
    (0x5140, 0x1CC0),  # precision loss
    (0x3C00, 0x3800),  # 1.0 + 0.5
    (0x3C00, 0x0400),  # 1.0 + smallest normal
    (0x0400, 0x03FF),  # smallest normal + largest subnormal
]

MUL_CASES = [
    (0x3C00, 0x3C00),  # 1.0 * 1.0
    (0x3C00, 0x4000),  # 1.0 * 2.0
    (0x3C00, 0x4200),  # 1.0 * 3.0
    (0x4000, 0x3800),  # 2.0 * 0.5
    (0xC000, 0x4000),  # -2.0 * 2.0
    (0x0000, 0x3C00),  # 0 * 1.0
    (0x8000, 0x4000),  # -0 * 2.0
    (0x7C00, 0x3C00),  # inf * 1.0
    (0x7C00, 0x8000),  # inf * -0
    (0x7FFF, 0x3C00),  # nan * 1.0
    (0x3C00, 0x0400),  # 1.0 * smallest normal
]

RULE = "-" * 98


def compare_add(a: int, b: int) -> tuple[bool, str]:
    hw = add(a, b)
    tlm = reference.tlm_add(a, b)
    match = hw.result == tlm or (hw.nan and tlm == CANONICAL_NAN)

    notes = [] if match else ["Mismatch (Rounding Diff?)"]
    if hw.precision_lost:
        notes.append("P-Lost" if notes else "Precision Lost")

    row = (
        f"  0x{a:04X}   |  0x{b:04X}   || 0x{hw.result:04X}  | 0x{tlm:04X}  |   {'O' if match else 'X'}    "
        f"| {hw.overflow:d}  | {hw.zero:d} | {hw.nan:d}  | {hw.precision_lost:d}  | {', '.join(notes)}"
    )
    return match, row


def compare_mul(a: int, b: int) -> tuple[bool, str]:
    hw = multiply(a, b)
    tlm = reference.tlm_multiply(a, b)
    match = hw.result == tlm or (hw.nan and tlm == CANONICAL_NAN)

    row = (
        f"  0x{a:04X}   |  0x{b:04X}   || 0x{hw.result:04X}  | 0x{tlm:04X}  |   {'O' if match else 'X'}    "
        f"| {hw.overflow:d}  | {hw.zero:d} | {hw.nan:d}  | {hw.underflow:d}  | {'' if match else 'Mismatch'}"
    )
    return match, row


def run(op: str, cases: list[tuple[int, int]]) -> int:
    title = "Adder" if op == "add" else "Multiplier"
    last_flag = "PL" if op == "add" else "UF"
    compare = compare_add if op == "add" else compare_mul

    print(RULE)
    print(f" FP16 {title} Verification: Bit-True (HW) vs TLM (Float)")
    print(RULE)
    print(f"  Input A  |  Input B  || HW Res  | TLM Res | Match? | OF | Z | NaN| {last_flag} | Note")
    print(RULE)

    mismatches = 0
    for a, b in cases:
        match, row = compare(a, b)
        mismatches += not match
        print(row)

    print(RULE)
    print(f"Total Mismatches: {mismatches} (differences between HW Truncation & TLM Rounding)")
    return mismatches


def main(argv=None):
    parser = argparse.ArgumentParser(description="Compare the bit-true FP16 model with float32 arithmetic")
    parser.add_argument("op", choices=["add", "mul"], help="operation to check")
    parser.add_argument("--random", type=int, default=20, metavar="N", help="random operand pairs to append")
    parser.add_argument("--seed", type=int, default=None, help="seed for the random operands")
    args = parser.parse_args(argv)

    if args.random < 0:
        parser.error("--random must not be negative")

    rng = np.random.default_rng(args.seed)
    cases = list(ADD_CASES if args.op == "add" else MUL_CASES)
    cases += [(int(a), int(b)) for a, b in rng.integers(0, 0x10000, size=(args.random, 2))]

    run(args.op, cases)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
