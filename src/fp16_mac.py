from amaranth import *
from amaranth.build import Platform
from amaranth.lib import wiring
from amaranth.lib.wiring import In, Out

from aligner import Aligner
from float16 import (
    CANONICAL_NAN,
    PRODUCT_BITS,
    SIGNIFICAND_BITS,
    Float16,
    status_flags,
)
from fp16_adder import FP16Adder, SignificandAdder
from fp16_multiplier import FP16Multiplier, SignificandMultiplier
from lzc import LeadingZeroCounter
from normalizer import Normalizer


class FP16MAC(wiring.Component):
    """FP16 multiply-accumulate: result = a * b + c

    ``fused`` selects the rounding discipline, matching ``mac.mac``:

    - 0 (discrete): the packed FP16 product feeds the FP16 adder, truncating
      twice.
    - 1 (fused): the 22-bit product is aligned and added to c at full width
      and truncated once.

    A NaN, Infinity or Zero product takes the discrete path in both modes.
    """

    a: In(Float16)
    b: In(Float16)
    c: In(Float16)
    fused: In(1)
    result: Out(Float16)
    overflow: Out(1)
    zero: Out(1)
    nan: Out(1)
    precision_lost: Out(1)

    def elaborate(self, platform: Platform | None) -> Module:
        m = Module()

        # ---- Discrete Path ----
        m.submodules.mul = mul = FP16Multiplier()
        m.submodules.add = add = FP16Adder()

        m.d.comb += [
            mul.a.eq(self.a),
            mul.b.eq(self.b),
            add.a.eq(mul.result),
            add.b.eq(self.c),
        ]

        # ---- Fused Path ----
        m.submodules.product = product = SignificandMultiplier()
        m.submodules.lzc = lzc = LeadingZeroCounter(width=PRODUCT_BITS)
        m.submodules.justify = justify = Normalizer(width=PRODUCT_BITS)
        m.submodules.denorm = denorm = Aligner(width=PRODUCT_BITS)
        m.submodules.core = core = SignificandAdder(width=PRODUCT_BITS)

        m.d.comb += product.a.eq(self.a)
        m.d.comb += product.b.eq(self.b)

        # move the leading one of a subnormal-operand product up to bit 21
        m.d.comb += lzc.value.eq(product.significand)
        m.d.comb += justify.value_in.eq(product.significand)
        m.d.comb += justify.shift_amount.eq(lzc.count)

        product_exp = Signal(signed(8))
        m.d.comb += product_exp.eq(product.exponent - lzc.count)

        # below the normal range: denormalize onto exponent 1
        denorm_shift = Signal(7)
        m.d.comb += denorm_shift.eq(1 - product_exp)

        with m.If(denorm_shift > denorm.max_shift):
            m.d.comb += denorm.shift_amount.eq(denorm.max_shift)
        with m.Else():
            m.d.comb += denorm.shift_amount.eq(denorm_shift)
        m.d.comb += denorm.value_in.eq(justify.value_out)

        with m.If(product_exp < 1):
            m.d.comb += [
                core.a_exp.eq(1),
                core.a_sig.eq(denorm.value_out),
                core.a_sticky.eq(denorm.sticky),
            ]
        with m.Else():
            m.d.comb += [
                core.a_exp.eq(product_exp),
                core.a_sig.eq(justify.value_out),
            ]
        m.d.comb += core.a_sign.eq(product.sign)

        # c widened to the product's width
        c_normal = self.c.exponent != 0
        m.d.comb += [
            core.b_sign.eq(self.c.sign),
            core.b_exp.eq(Mux(c_normal, self.c.exponent, 1)),
            core.b_sig.eq(Cat(Const(0, PRODUCT_BITS - SIGNIFICAND_BITS), self.c.fraction, c_normal)),
        ]

        # ---- Select ----
        product_special = (
            self.a.is_nan() | self.a.is_inf() | self.a.is_zero() | self.b.is_nan() | self.b.is_inf() | self.b.is_zero()
        )

        with m.If(~self.fused | product_special):
            m.d.comb += self.result.eq(add.result)
            m.d.comb += self.precision_lost.eq(add.precision_lost | mul.underflow)
        with m.Elif(self.c.is_nan()):
            m.d.comb += self.result.as_value().eq(CANONICAL_NAN)
        with m.Elif(self.c.is_inf()):
            m.d.comb += self.result.eq(self.c)
        with m.Else():
            m.d.comb += self.result.eq(core.result)
            m.d.comb += self.precision_lost.eq(core.precision_lost)

        # ---- Flags ----
        overflow, zero, nan = status_flags(self.result)
        m.d.comb += [
            self.overflow.eq(overflow),
            self.zero.eq(zero),
            self.nan.eq(nan),
        ]

        return m
