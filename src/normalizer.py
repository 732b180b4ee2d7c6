from amaranth import *
from amaranth.build import Platform
from amaranth.lib import wiring
from amaranth.lib.wiring import In, Out

from lzc import leading_zeros


def normalize_shift(significand: int, exponent: int, width: int) -> tuple[int, int]:
    """Left-justify a non-carrying sum without taking the exponent below 1.

    The leading one is moved up to the hidden-bit position (bit ``width - 1``)
    unless that would need more than ``exponent - 1`` shifts. A result that is
    still unnormalized is subnormal and gets exponent 0.
    """
    shift = min(leading_zeros(significand, width), exponent - 1)
    significand <<= shift
    exponent -= shift
    if not significand >> (width - 1):
        exponent = 0
    return significand, exponent


class Normalizer(wiring.Component):
    """Barrel shifter for significand normalization (left-shift)"""

    def __init__(self, width: int = 11):
        self.width = width
        self.shift_bits = (width - 1).bit_length()

        super().__init__(
            {
                "value_in": In(width),
                "shift_amount": In(self.shift_bits),
                "value_out": Out(width),
            }
        )

    def elaborate(self, platform: Platform | None) -> Module:
        m = Module()

        # ---- Left Shift ----
        m.d.comb += self.value_out.eq(self.value_in << self.shift_amount)

        return m
