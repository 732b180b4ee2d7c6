import pytest

import lzc


@pytest.mark.parametrize(
    "value, width, expected",
    [
        (0, 11, 11),
        (1, 11, 10),
        (0x400, 11, 0),
        (0x7FF, 11, 0),
        (0x0FF, 11, 3),
        (1 << 21, 22, 0),
        (2, 22, 20),
        (0, 22, 22),
    ],
)
def test_leading_zeros(value, width, expected):
    assert lzc.leading_zeros(value, width) == expected


def test_lzc_exhaustive_11_bit(simulate):
    dut = lzc.LeadingZeroCounter(width=11)

    async def bench(ctx):
        for value in range(1 << 11):
            ctx.set(dut.value, value)
            count = ctx.get(dut.count)
            assert count == lzc.leading_zeros(value, 11), f"value=0b{value:011b}: got {count}"

    simulate(dut, bench)


def test_lzc_single_bits_22_bit(simulate):
    """Every single-bit and all-ones-below pattern of the product width"""
    dut = lzc.LeadingZeroCounter(width=22)

    test_cases = [0]
    for i in range(22):
        test_cases.append(1 << i)
        test_cases.append((2 << i) - 1)

    async def bench(ctx):
        for value in test_cases:
            ctx.set(dut.value, value)
            count = ctx.get(dut.count)
            assert count == lzc.leading_zeros(value, 22), f"value=0b{value:022b}: got {count}"

    simulate(dut, bench)
