"""Multiply-accumulate ``a * b + c`` in two rounding disciplines.

``DISCRETE`` packs the product to FP16 before adding, so it truncates twice.
``FUSED`` keeps the full 22-bit product and truncates once, after the add.
"""

import enum

from adder import add, add_significands
from aligner import shift_right_sticky
from float16 import PRODUCT_BITS, SIGNIFICAND_BITS, AddResult, ExtendedSignificand, decode
from lzc import leading_zeros
from multiplier import multiply, multiply_significands
from special_cases import resolve_add, resolve_mul


class MacMode(enum.Enum):
    DISCRETE = "discrete"
    FUSED = "fused"


def _justify_product(product: ExtendedSignificand) -> ExtendedSignificand:
    # Subnormal operands leave the leading one below bit 21; moving it up is
    # exact. A product below the normal range is then denormalized onto
    # exponent 1, where the adder expects unnormalized significands.
    shift = leading_zeros(product.significand, PRODUCT_BITS)
    significand = product.significand << shift
    exponent = product.exponent - shift

    if exponent >= 1:
        return ExtendedSignificand(product.sign, exponent, significand)

    significand, sticky = shift_right_sticky(significand, 1 - exponent, PRODUCT_BITS)
    return ExtendedSignificand(product.sign, 1, significand, sticky)


def _mac_discrete(a: int, b: int, c: int) -> AddResult:
    product = multiply(a, b)
    total = add(product.result, c)
    return AddResult(total.result, precision_lost=total.precision_lost or product.underflow)


def _mac_fused(a: int, b: int, c: int) -> AddResult:
    x = decode(a)
    y = decode(b)
    z = decode(c)

    special = resolve_mul(x, y)
    if special is not None:
        # NaN, Infinity or Zero product goes through the plain adder against c
        return add(special.result, c)

    product = multiply_significands(x, y)

    special = resolve_add(product, z)
    if special is not None:
        return special

    addend = z.extend()
    addend = addend._replace(significand=addend.significand << (PRODUCT_BITS - SIGNIFICAND_BITS))

    return add_significands(_justify_product(product), addend, width=PRODUCT_BITS)


def mac(a: int, b: int, c: int, mode: MacMode) -> AddResult:
    if mode is MacMode.DISCRETE:
        return _mac_discrete(a, b, c)
    if mode is MacMode.FUSED:
        return _mac_fused(a, b, c)
    raise ValueError(f"unknown MAC mode: {mode!r}")
