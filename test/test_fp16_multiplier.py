import numpy as np

from float16 import decode, pack
from fp16_multiplier import FP16Multiplier, SignificandMultiplier
from multiplier import multiply, multiply_significands


def fields(bits):
    sign, exponent, fraction = decode(bits).unpack()
    return {"sign": sign, "exponent": exponent, "fraction": fraction}


def result_bits(result):
    return pack(result["sign"], result["exponent"], result["fraction"])


def check_multiplier(simulate, cases):
    dut = FP16Multiplier()

    async def bench(ctx):
        for a, b in cases:
            ctx.set(dut.a, fields(a))
            ctx.set(dut.b, fields(b))

            expected = multiply(a, b)
            result = result_bits(ctx.get(dut.result))

            assert result == expected.result, (
                f"0x{a:04X} * 0x{b:04X}: got 0x{result:04X}, expected 0x{expected.result:04X}"
            )
            assert ctx.get(dut.underflow) == expected.underflow, f"0x{a:04X} * 0x{b:04X}: underflow"
            assert ctx.get(dut.overflow) == expected.overflow, f"0x{a:04X} * 0x{b:04X}: overflow"
            assert ctx.get(dut.zero) == expected.zero, f"0x{a:04X} * 0x{b:04X}: zero"
            assert ctx.get(dut.nan) == expected.nan, f"0x{a:04X} * 0x{b:04X}: nan"

    simulate(dut, bench)


def test_multiplier_directed(simulate):
    check_multiplier(
        simulate,
        [
            (0x3C00, 0x3C00),
            (0x4200, 0x4200),
            (0x3C01, 0x3C01),
            (0xC000, 0x4000),
            (0x7BFF, 0x4000),
            (0x0400, 0x3800),
            (0x0400, 0x0400),
            (0x8400, 0x0400),
            (0x7C00, 0x8000),
            (0x8000, 0x4000),
        ],
    )


def test_multiplier_edge_pairs(simulate, edge_patterns):
    check_multiplier(simulate, [(a, b) for a in edge_patterns for b in edge_patterns])


def test_multiplier_random(simulate):
    rng = np.random.default_rng(2025)
    check_multiplier(simulate, [(int(a), int(b)) for a, b in rng.integers(0, 0x10000, size=(300, 2))])


def test_multiplier_near_range_limits(simulate):
    """Exponent sums around the subnormal boundary and the overflow threshold"""
    rng = np.random.default_rng(8)
    cases = []
    for total in [-12, -11, -10, -9, -1, 0, 1, 2, 29, 30, 31]:
        for _ in range(10):
            exp_a = int(rng.integers(1, 31))
            exp_b = total + 15 - exp_a
            if not 1 <= exp_b <= 30:
                continue
            a = (int(rng.integers(0, 2)) << 15) | (exp_a << 10) | int(rng.integers(0, 1024))
            b = (int(rng.integers(0, 2)) << 15) | (exp_b << 10) | int(rng.integers(0, 1024))
            cases.append((a, b))
    check_multiplier(simulate, cases)


def test_significand_multiplier(simulate, edge_patterns):
    dut = SignificandMultiplier()
    finite = [bits for bits in edge_patterns if not (decode(bits).is_nan or decode(bits).is_inf or decode(bits).is_zero)]

    async def bench(ctx):
        for a in finite:
            for b in finite:
                ctx.set(dut.a, fields(a))
                ctx.set(dut.b, fields(b))

                expected = multiply_significands(decode(a), decode(b))
                assert ctx.get(dut.sign) == expected.sign
                assert ctx.get(dut.exponent) == expected.exponent, f"0x{a:04X} * 0x{b:04X}: exponent"
                assert ctx.get(dut.significand) == expected.significand, f"0x{a:04X} * 0x{b:04X}: significand"

    simulate(dut, bench)
