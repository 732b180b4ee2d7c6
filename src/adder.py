"""Bit-true FP16 adder model.

Addition truncates: bits shifted out during alignment, carry normalization
and the final pack are never rounded back in, they only raise
``precision_lost``.
"""

from aligner import shift_right_sticky
from float16 import (
    EXPONENT_MAX,
    FRACTION_MASK,
    SIGNIFICAND_BITS,
    AddResult,
    ExtendedSignificand,
    decode,
    pack,
)
from normalizer import normalize_shift
from special_cases import resolve_add


def add_significands(
    x: ExtendedSignificand, y: ExtendedSignificand, width: int = SIGNIFICAND_BITS
) -> AddResult:
    """Add two finite operands whose hidden bit sits at bit ``width - 1``.

    ``width`` is 11 for a plain FP16 add and wider when the caller carries
    extra low-order bits (fused multiply-add); the result is truncated to 10
    fraction bits exactly once, at the end.
    """
    # Ties keep x as the big operand.
    if (y.exponent, y.significand) > (x.exponent, x.significand):
        big, small = y, x
    else:
        big, small = x, y

    shifted, sticky = shift_right_sticky(small.significand, big.exponent - small.exponent, width)
    sticky = sticky or x.sticky or y.sticky

    if big.sign == small.sign:
        total = big.significand + shifted
    else:
        total = big.significand - shifted

    if total == 0:
        # -0 only when both operands were negative
        return AddResult(pack(big.sign & small.sign, 0, 0), precision_lost=sticky)

    exponent = big.exponent
    if total >> width:
        sticky = sticky or bool(total & 1)
        total >>= 1
        exponent += 1
    else:
        total, exponent = normalize_shift(total, exponent, width)

    extra = width - SIGNIFICAND_BITS
    if extra:
        sticky = sticky or bool(total & ((1 << extra) - 1))
        total >>= extra

    if exponent >= EXPONENT_MAX:
        return AddResult(pack(big.sign, EXPONENT_MAX, 0), precision_lost=sticky)
    return AddResult(pack(big.sign, exponent, total & FRACTION_MASK), precision_lost=sticky)


def add(a: int, b: int) -> AddResult:
    x = decode(a)
    y = decode(b)

    special = resolve_add(x, y)
    if special is not None:
        return special

    return add_significands(x.extend(), y.extend())
