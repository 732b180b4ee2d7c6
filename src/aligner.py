from amaranth import *
from amaranth.build import Platform
from amaranth.lib import wiring
from amaranth.lib.wiring import In, Out


def shift_right_sticky(value: int, amount: int, width: int) -> tuple[int, bool]:
    """Right-shift ``value`` by ``amount``, OR-ing every dropped bit into a sticky flag.

    Shifts of ``width + 2`` or more saturate: nothing survives and the sticky
    flag is simply ``value != 0``.
    """
    if amount >= width + 2:
        return 0, value != 0
    return value >> amount, (value & ((1 << amount) - 1)) != 0


class Aligner(wiring.Component):
    """Alignment shifter: value_out = value_in >> shift_amount

    ``sticky`` is set when any 1 bit falls off the bottom. The shift port is
    wide enough to reach ``width``, so a clamped shift amount behaves like the
    saturating case of ``shift_right_sticky``.
    """

    def __init__(self, width: int = 11):
        self.width = width
        self.shift_bits = (width + 2).bit_length()

        super().__init__(
            {
                "value_in": In(width),
                "shift_amount": In(self.shift_bits),
                "value_out": Out(width),
                "sticky": Out(1),
            }
        )

    @property
    def max_shift(self) -> int:
        return (1 << self.shift_bits) - 1

    def elaborate(self, platform: Platform | None) -> Module:
        m = Module()

        m.d.comb += self.value_out.eq(self.value_in >> self.shift_amount)
        # shifting the survivors back only restores value_in if nothing was lost
        m.d.comb += self.sticky.eq((self.value_out << self.shift_amount) != self.value_in)

        return m
