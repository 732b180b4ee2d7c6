"""NaN / Infinity / Zero handling that runs ahead of the numeric datapath.

When a resolver returns a result, the caller must use it as-is and skip
alignment, multiplication and normalization entirely.
"""

from float16 import CANONICAL_NAN, EXPONENT_MAX, FP16, AddResult, MulResult, pack


def resolve_add(a, b) -> AddResult | None:
    """Special cases of ``a + b``, in priority order.

    ``a`` may also be a finite :class:`float16.ExtendedSignificand` (the
    unrounded product of a fused MAC); only ``b`` can then trigger a rule.
    """
    if a.is_nan or b.is_nan:
        return AddResult(CANONICAL_NAN)
    if a.is_inf and b.is_inf and a.sign != b.sign:
        return AddResult(CANONICAL_NAN)
    if a.is_inf:
        return AddResult(a.bits)
    if b.is_inf:
        return AddResult(b.bits)
    return None


def resolve_mul(a: FP16, b: FP16) -> MulResult | None:
    sign = a.sign ^ b.sign

    if a.is_nan or b.is_nan:
        return MulResult(CANONICAL_NAN)
    if (a.is_inf and b.is_zero) or (b.is_inf and a.is_zero):
        return MulResult(CANONICAL_NAN)
    if a.is_inf or b.is_inf:
        return MulResult(pack(sign, EXPONENT_MAX, 0))
    if a.is_zero or b.is_zero:
        return MulResult(pack(sign, 0, 0))
    return None
