from amaranth import *
from amaranth.build import Platform
from amaranth.lib import wiring
from amaranth.lib.wiring import In, Out


def leading_zeros(value: int, width: int) -> int:
    """Leading zeros of ``value`` as a ``width``-bit word; ``width`` when no bit is set."""
    return width - value.bit_length()


class LeadingZeroCounter(wiring.Component):
    """Priority encoder counting zeros above the most significant set bit

    Saturates to ``width`` for an all-zero input, same as ``leading_zeros``.
    """

    def __init__(self, width: int = 11):
        self.width = width
        self.count_bits = width.bit_length()

        super().__init__(
            {
                "value": In(width),
                "count": Out(self.count_bits),
            }
        )

    def elaborate(self, platform: Platform | None) -> Module:
        m = Module()

        count = Const(self.width, self.count_bits)

        # higher bits are visited last and take priority
        for i in range(self.width):
            count = Mux(self.value[i], self.width - 1 - i, count)

        m.d.comb += self.count.eq(count)

        return m
