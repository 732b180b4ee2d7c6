from amaranth import *
from amaranth.build import Platform
from amaranth.lib import wiring
from amaranth.lib.wiring import In, Out

from aligner import Aligner
from float16 import CANONICAL_NAN, EXPONENT_MAX, FRACTION_BITS, SIGNIFICAND_BITS, Float16, status_flags
from lzc import LeadingZeroCounter
from normalizer import Normalizer


class SignificandAdder(wiring.Component):
    """Align, add, normalize and truncate two finite extended operands

    Hardware counterpart of ``adder.add_significands``. Operands arrive with
    the hidden bit already prepended at bit ``width - 1`` and exponents
    clamped to >= 1. ``width`` is 11 for FP16 add and 22 for the fused MAC,
    whose extra low bits only feed ``precision_lost``.
    """

    def __init__(self, width: int = SIGNIFICAND_BITS, exp_width: int = 7):
        self.width = width
        self.exp_width = exp_width

        super().__init__(
            {
                "a_sign": In(1),
                "a_exp": In(exp_width),
                "a_sig": In(width),
                "a_sticky": In(1),
                "b_sign": In(1),
                "b_exp": In(exp_width),
                "b_sig": In(width),
                "b_sticky": In(1),
                "result": Out(Float16),
                "precision_lost": Out(1),
            }
        )

    def elaborate(self, platform: Platform | None) -> Module:
        m = Module()

        width = self.width
        extra = width - SIGNIFICAND_BITS

        m.submodules.aligner = aligner = Aligner(width=width)
        m.submodules.lzc = lzc = LeadingZeroCounter(width=width)
        m.submodules.normalizer = normalizer = Normalizer(width=width)

        # ---- Big/Small Select ----
        # exponent above significand: an unsigned compare is lexicographic
        swap = Signal()
        m.d.comb += swap.eq(Cat(self.b_sig, self.b_exp) > Cat(self.a_sig, self.a_exp))

        big_sign = Signal()
        big_exp = Signal(self.exp_width)
        big_sig = Signal(width)
        small_sign = Signal()
        small_exp = Signal(self.exp_width)
        small_sig = Signal(width)

        with m.If(swap):
            m.d.comb += [
                big_sign.eq(self.b_sign),
                big_exp.eq(self.b_exp),
                big_sig.eq(self.b_sig),
                small_sign.eq(self.a_sign),
                small_exp.eq(self.a_exp),
                small_sig.eq(self.a_sig),
            ]
        with m.Else():
            m.d.comb += [
                big_sign.eq(self.a_sign),
                big_exp.eq(self.a_exp),
                big_sig.eq(self.a_sig),
                small_sign.eq(self.b_sign),
                small_exp.eq(self.b_exp),
                small_sig.eq(self.b_sig),
            ]

        # ---- Alignment ----
        exp_diff = Signal(self.exp_width)
        m.d.comb += exp_diff.eq(big_exp - small_exp)

        with m.If(exp_diff > aligner.max_shift):
            m.d.comb += aligner.shift_amount.eq(aligner.max_shift)
        with m.Else():
            m.d.comb += aligner.shift_amount.eq(exp_diff)

        m.d.comb += aligner.value_in.eq(small_sig)

        align_sticky = Signal()
        m.d.comb += align_sticky.eq(aligner.sticky | self.a_sticky | self.b_sticky)

        # ---- Add / Subtract ----
        total = Signal(width + 1)
        with m.If(big_sign == small_sign):
            m.d.comb += total.eq(big_sig + aligner.value_out)
        with m.Else():
            m.d.comb += total.eq(big_sig - aligner.value_out)

        # ---- Normalization ----
        norm_sig = Signal(width)
        norm_exp = Signal(self.exp_width)
        norm_sticky = Signal()

        m.d.comb += lzc.value.eq(total[:width])
        m.d.comb += normalizer.value_in.eq(total[:width])

        limit = Signal(self.exp_width)
        m.d.comb += limit.eq(big_exp - 1)

        with m.If(lzc.count > limit):
            m.d.comb += normalizer.shift_amount.eq(limit)
        with m.Else():
            m.d.comb += normalizer.shift_amount.eq(lzc.count)

        with m.If(total[width]):  # carry out: shift right 1
            m.d.comb += [
                norm_sig.eq(total[1:]),
                norm_exp.eq(big_exp + 1),
                norm_sticky.eq(align_sticky | total[0]),
            ]
        with m.Else():
            m.d.comb += [
                norm_sig.eq(normalizer.value_out),
                norm_sticky.eq(align_sticky),
            ]
            with m.If(normalizer.value_out[width - 1]):
                m.d.comb += norm_exp.eq(big_exp - normalizer.shift_amount)
            with m.Else():  # ran out of exponent: subnormal
                m.d.comb += norm_exp.eq(0)

        # ---- Truncate & Pack ----
        lost = Signal()
        if extra:
            m.d.comb += lost.eq(norm_sticky | norm_sig[:extra].any())
        else:
            m.d.comb += lost.eq(norm_sticky)

        with m.If(total == 0):
            m.d.comb += [
                self.result.sign.eq(big_sign & small_sign),
                self.result.exponent.eq(0),
                self.result.fraction.eq(0),
                self.precision_lost.eq(align_sticky),
            ]
        with m.Elif(norm_exp >= EXPONENT_MAX):
            m.d.comb += [
                self.result.sign.eq(big_sign),
                self.result.exponent.eq(EXPONENT_MAX),
                self.result.fraction.eq(0),
                self.precision_lost.eq(lost),
            ]
        with m.Else():
            m.d.comb += [
                self.result.sign.eq(big_sign),
                self.result.exponent.eq(norm_exp),
                self.result.fraction.eq(norm_sig[extra : extra + FRACTION_BITS]),
                self.precision_lost.eq(lost),
            ]

        return m


class FP16Adder(wiring.Component):
    """FP16 adder: result = a + b, truncating, with status flags

    Bit-for-bit equivalent of ``adder.add``.
    """

    a: In(Float16)
    b: In(Float16)
    result: Out(Float16)
    overflow: Out(1)
    zero: Out(1)
    nan: Out(1)
    precision_lost: Out(1)

    def elaborate(self, platform: Platform | None) -> Module:
        m = Module()

        m.submodules.core = core = SignificandAdder(width=SIGNIFICAND_BITS)

        # ---- Extend Operands ----
        # subnormals: no hidden bit, exponent treated as 1
        a_normal = self.a.exponent != 0
        b_normal = self.b.exponent != 0

        m.d.comb += [
            core.a_sign.eq(self.a.sign),
            core.a_exp.eq(Mux(a_normal, self.a.exponent, 1)),
            core.a_sig.eq(Cat(self.a.fraction, a_normal)),
            core.b_sign.eq(self.b.sign),
            core.b_exp.eq(Mux(b_normal, self.b.exponent, 1)),
            core.b_sig.eq(Cat(self.b.fraction, b_normal)),
        ]

        # ---- Special Cases ----
        a_inf = self.a.is_inf()
        b_inf = self.b.is_inf()
        invalid = self.a.is_nan() | self.b.is_nan() | (a_inf & b_inf & (self.a.sign != self.b.sign))

        with m.If(invalid):
            m.d.comb += self.result.as_value().eq(CANONICAL_NAN)
        with m.Elif(a_inf):
            m.d.comb += self.result.eq(self.a)
        with m.Elif(b_inf):
            m.d.comb += self.result.eq(self.b)
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

