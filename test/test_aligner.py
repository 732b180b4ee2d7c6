import numpy as np
import pytest

import aligner


@pytest.mark.parametrize(
    "value, amount, expected",
    [
        (0b10000000000, 0, (0b10000000000, False)),
        (0b10000000001, 1, (0b01000000000, True)),
        (0b10000000000, 10, (0b00000000001, False)),
        (0b10000000000, 11, (0, True)),
        (0b11111111111, 12, (0, True)),
        (0b11111111111, 13, (0, True)),
        (0b11111111111, 40, (0, True)),
        (0, 40, (0, False)),
    ],
)
def test_shift_right_sticky(value, amount, expected):
    assert aligner.shift_right_sticky(value, amount, 11) == expected


def test_aligner_no_shift(simulate):
    dut = aligner.Aligner(width=11)

    test_cases = [0b00000000000, 0b11111111111, 0b10101010101, 0b01010101010]

    async def bench(ctx):
        for value in test_cases:
            ctx.set(dut.value_in, value)
            ctx.set(dut.shift_amount, 0)

            assert ctx.get(dut.value_out) == value
            assert ctx.get(dut.sticky) == 0

    simulate(dut, bench)


def test_aligner_sticky(simulate):
    dut = aligner.Aligner(width=11)

    test_cases = [
        # (input, shift_amount, expected_output, expected_sticky)
        (0b10000000000, 1, 0b01000000000, 0),
        (0b10000000001, 1, 0b01000000000, 1),
        (0b10000000100, 2, 0b00100000001, 0),
        (0b10000000100, 3, 0b00010000000, 1),
        (0b11111111111, 10, 0b00000000001, 1),
        (0b10000000000, 11, 0b00000000000, 1),
        (0b00000000000, 11, 0b00000000000, 0),
    ]

    async def bench(ctx):
        for value, shift, expected, sticky in test_cases:
            ctx.set(dut.value_in, value)
            ctx.set(dut.shift_amount, shift)

            result = ctx.get(dut.value_out)
            assert result == expected, f"0b{value:011b} >> {shift}: got 0b{result:011b}, expected 0b{expected:011b}"
            assert ctx.get(dut.sticky) == sticky, f"0b{value:011b} >> {shift}: wrong sticky"

    simulate(dut, bench)


@pytest.mark.parametrize("width", [11, 22])
def test_aligner_matches_model(simulate, width):
    dut = aligner.Aligner(width=width)
    rng = np.random.default_rng(7)

    values = [int(v) for v in rng.integers(0, 1 << width, size=64)]

    async def bench(ctx):
        for value in values:
            for shift in range(dut.max_shift + 1):
                ctx.set(dut.value_in, value)
                ctx.set(dut.shift_amount, shift)

                expected, sticky = aligner.shift_right_sticky(value, shift, width)
                assert ctx.get(dut.value_out) == expected, f"0b{value:b} >> {shift}"
                assert ctx.get(dut.sticky) == sticky, f"0b{value:b} >> {shift}: wrong sticky"

    simulate(dut, bench)
