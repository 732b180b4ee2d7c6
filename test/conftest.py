import argparse

import pytest
from amaranth.sim import Simulator


def pytest_addoption(parser):
    parser.addoption(
        "--vcd",
        action=argparse.BooleanOptionalAction,
        default=False,
        help="whether to produce vcd files",
    )


@pytest.fixture
def simulate(request):
    """Run a testbench against a combinational DUT, dumping a VCD when --vcd is given."""

    def run(dut, bench):
        sim = Simulator(dut)
        sim.add_testbench(bench)

        if request.config.getoption("--vcd"):
            vcd_name = f"{dut.__class__.__name__}_{request.node.name}.vcd"
            with sim.write_vcd(vcd_name):
                sim.run()
        else:
            sim.run()

    return run


@pytest.fixture
def edge_patterns():
    """Zeros, subnormal and normal boundaries, values near one, infinities and NaNs"""
    return [
        0x0000, 0x8000,
        0x0001, 0x8001, 0x03FF, 0x83FF,
        0x0400, 0x8400, 0x07FF,
        0x3BFF, 0x3C00, 0xBC00, 0x3C01, 0xBC02,
        0x4000, 0xC0B0, 0x1CC0,
        0x7BFF, 0xFBFF,
        0x7C00, 0xFC00,
        0x7C01, 0x7FFF, 0xFE00,
    ]
