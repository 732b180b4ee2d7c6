from amaranth import *
from amaranth.build import Platform
from amaranth.lib import wiring
from amaranth.lib.wiring import In, Out

from float16 import BIAS, CANONICAL_NAN, EXPONENT_MAX, PRODUCT_BITS, Float16, status_flags
from multiplier import FLUSH_EXPONENT


class SignificandMultiplier(wiring.Component):
    """Sign, exponent and full-width significand of a * b

    Hardware counterpart of ``multiplier.multiply_significands``: the 22-bit
    significand has its hidden bit at bit 21 and nothing is truncated. The
    exponent is biased and may fall outside 1..30.
    """

    a: In(Float16)
    b: In(Float16)
    sign: Out(1)
    exponent: Out(signed(8))
    significand: Out(PRODUCT_BITS)

    def elaborate(self, platform: Platform | None) -> Module:
        m = Module()

        a_normal = self.a.exponent != 0
        b_normal = self.b.exponent != 0

        # ---- Result Sign ----
        m.d.comb += self.sign.eq(self.a.sign ^ self.b.sign)

        # ---- Significand Multiply ----
        a_sig = Cat(self.a.fraction, a_normal)
        b_sig = Cat(self.b.fraction, b_normal)

        product = Signal(PRODUCT_BITS)
        m.d.comb += product.eq(a_sig * b_sig)

        # ---- Exponent Addition ----
        exp_sum = Signal(signed(8))
        m.d.comb += exp_sum.eq(Mux(a_normal, self.a.exponent, 1) + Mux(b_normal, self.b.exponent, 1) - BIAS)

        # ---- Normalization ----
        with m.If(product[PRODUCT_BITS - 1]):
            m.d.comb += [
                self.significand.eq(product),
                self.exponent.eq(exp_sum + 1),
            ]
        with m.Else():
            m.d.comb += [
                self.significand.eq(product << 1),
                self.exponent.eq(exp_sum),
            ]

        return m


class FP16Multiplier(wiring.Component):
    """FP16 multiplier: result = a * b, truncating

    Bit-for-bit equivalent of ``multiplier.multiply``. There is no
    precision-lost output; ``underflow`` flags a product flushed to zero.
    """

    a: In(Float16)
    b: In(Float16)
    result: Out(Float16)
    overflow: Out(1)
    zero: Out(1)
    nan: Out(1)
    underflow: Out(1)

    def elaborate(self, platform: Platform | None) -> Module:
        m = Module()

        m.submodules.product = product = SignificandMultiplier()
        m.d.comb += product.a.eq(self.a)
        m.d.comb += product.b.eq(self.b)

        sign = product.sign
        exponent = product.exponent
        # leading one back at bit 20
        significand = product.significand[1:]

        # ---- Special Cases ----
        a_inf = self.a.is_inf()
        b_inf = self.b.is_inf()
        a_zero = self.a.is_zero()
        b_zero = self.b.is_zero()
        invalid = self.a.is_nan() | self.b.is_nan() | (a_inf & b_zero) | (b_inf & a_zero)

        denorm_shift = Signal(4)
        denormalized = Signal(PRODUCT_BITS - 1)
        m.d.comb += denorm_shift.eq(1 - exponent)
        m.d.comb += denormalized.eq(significand >> denorm_shift)

        with m.If(invalid):
            m.d.comb += self.result.as_value().eq(CANONICAL_NAN)
        with m.Elif(a_inf | b_inf):
            m.d.comb += [
                self.result.sign.eq(sign),
                self.result.exponent.eq(EXPONENT_MAX),
                self.result.fraction.eq(0),
            ]
        with m.Elif(a_zero | b_zero):
            m.d.comb += [
                self.result.sign.eq(sign),
                self.result.exponent.eq(0),
                self.result.fraction.eq(0),
            ]
        # ---- Exponent Range ----
        with m.Elif(exponent >= EXPONENT_MAX):
            m.d.comb += [
                self.result.sign.eq(sign),
                self.result.exponent.eq(EXPONENT_MAX),
                self.result.fraction.eq(0),
            ]
        with m.Elif(exponent < FLUSH_EXPONENT):
            m.d.comb += [
                self.result.sign.eq(sign),
                self.result.exponent.eq(0),
                self.result.fraction.eq(0),
                self.underflow.eq(1),
            ]
        with m.Elif(exponent <= 0):
            m.d.comb += [
                self.result.sign.eq(sign),
                self.result.exponent.eq(0),
                self.result.fraction.eq(denormalized[10:20]),
            ]
        with m.Else():
            m.d.comb += [
                self.result.sign.eq(sign),
                self.result.exponent.eq(exponent[:5]),
                self.result.fraction.eq(significand[10:20]),
            ]

        # ---- Flags ----
        overflow, zero, nan = status_flags(self.result)
        m.d.comb += [
            self.overflow.eq(overflow),
            self.zero.eq(zero),
            self.nan.eq(nan),
        ]

        return m
