"""Bit-true FP16 multiplier model.

The product is truncated to 10 fraction bits without any sticky tracking:
unlike the adder, the multiplier raises no precision-lost flag. Its only
extra flag is ``underflow``, for products flushed to zero.
"""

from float16 import (
    BIAS,
    EXPONENT_MAX,
    FRACTION_BITS,
    FRACTION_MASK,
    PRODUCT_BITS,
    FP16,
    ExtendedSignificand,
    MulResult,
    decode,
    pack,
)
from special_cases import resolve_mul

# Below this exponent even a denormalizing shift cannot keep a fraction bit.
FLUSH_EXPONENT = -10


def multiply_significands(a: FP16, b: FP16) -> ExtendedSignificand:
    """Multiply two finite, non-zero operands without dropping any bit.

    The 22-bit significand has its hidden bit at bit 21: a product that
    reached bit 21 bumps the exponent, one that did not is moved up by one
    instead of shifting the low bit out. The exponent is biased and unclamped.
    """
    x = a.extend()
    y = b.extend()

    exponent = x.exponent + y.exponent - BIAS
    product = x.significand * y.significand

    if product >> (PRODUCT_BITS - 1):
        exponent += 1
    else:
        product <<= 1

    return ExtendedSignificand(a.sign ^ b.sign, exponent, product)


def multiply(a: int, b: int) -> MulResult:
    x = decode(a)
    y = decode(b)

    special = resolve_mul(x, y)
    if special is not None:
        return special

    product = multiply_significands(x, y)
    sign = product.sign
    exponent = product.exponent
    # back to a 21-bit product with the leading one at bit 20
    significand = product.significand >> 1

    if exponent >= EXPONENT_MAX:
        return MulResult(pack(sign, EXPONENT_MAX, 0))

    if exponent <= 0:
        if exponent < FLUSH_EXPONENT:
            return MulResult(pack(sign, 0, 0), underflow=True)
        significand >>= 1 - exponent
        exponent = 0

    return MulResult(pack(sign, exponent, (significand >> FRACTION_BITS) & FRACTION_MASK))
