"""Native-float reference used only for differential testing.

Nothing in the bit-true model imports this module. ``tlm_*`` helpers compute
in float32 (the transaction-level view of the operation) and come back to
FP16 by truncation, so they agree with the hardware except where its
truncation and flag rules differ from a correctly rounded float32 result.
"""

from fractions import Fraction

import numpy as np

from float16 import BIAS, CANONICAL_NAN, FRACTION_BITS, POSITIVE_INFINITY, FP16


def to_float(bits: int) -> float:
    return float(np.array(bits, dtype=np.uint16).view(np.float16))


def from_float(value: float) -> int:
    """Convert through float32 to FP16, truncating toward zero.

    Follows the hardware's limits: float32 exponents below FP16's subnormal
    range flush to a signed zero, any NaN becomes the canonical NaN.
    """
    f32 = np.float32(value)
    if np.isnan(f32):
        return CANONICAL_NAN

    bits = int(np.array(f32, dtype=np.float32).view(np.uint32))
    sign = (bits >> 31) & 0x1

    if np.isinf(f32):
        return (sign << 15) | POSITIVE_INFINITY
    if f32 == 0:
        return sign << 15

    exponent = ((bits >> 23) & 0xFF) - 127 + BIAS
    mantissa = bits & 0x7FFFFF

    if exponent <= 0:
        if exponent < -10:
            return sign << 15
        mantissa = (mantissa | 0x800000) >> (1 - exponent)
        return (sign << 15) | (mantissa >> 13)
    if exponent >= 31:
        return (sign << 15) | POSITIVE_INFINITY
    return (sign << 15) | (exponent << FRACTION_BITS) | (mantissa >> 13)


def tlm_add(a: int, b: int) -> int:
    with np.errstate(over="ignore", invalid="ignore"):
        return from_float(np.float32(to_float(a)) + np.float32(to_float(b)))


def tlm_multiply(a: int, b: int) -> int:
    with np.errstate(over="ignore", invalid="ignore"):
        return from_float(np.float32(to_float(a)) * np.float32(to_float(b)))


def exact_value(bits: int) -> Fraction:
    """Exact rational value of a finite FP16 pattern."""
    value = FP16(bits)
    if value.is_nan or value.is_inf:
        raise ValueError(f"{value!r} has no finite value")

    x = value.extend()
    magnitude = Fraction(x.significand) * Fraction(2) ** (x.exponent - BIAS - FRACTION_BITS)
    return -magnitude if value.sign else magnitude


def exact_mac(a: int, b: int, c: int) -> Fraction:
    return exact_value(a) * exact_value(b) + exact_value(c)
