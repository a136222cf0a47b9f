from contextlib import contextmanager
import os
import unittest

from amaranth import *
from amaranth.sim import Simulator

from adschain.gateware.chain import AdsChain
from adschain.sim.harness import ChainHarness, StepDriver

class TestCase(unittest.TestCase):
    CLOCKS = {}

    @contextmanager
    def assertSimulation(self, module: Elaboratable, run_until=None, filename="test"):
        sim = Simulator(module)

        for domain, frequency in self.CLOCKS.items():
            sim.add_clock(1.0 / frequency, domain=domain)

        self.traces = list(module.ports()) if hasattr(module, "ports") else []

        yield sim

        # VCDs are only kept when asked for.
        vcd_dir = os.environ.get("ADSCHAIN_VCD_DIR")
        if vcd_dir:
            with sim.write_vcd(os.path.join(vcd_dir, f"{filename}.vcd"), traces=self.traces):
                self._run(sim, run_until)
        else:
            self._run(sim, run_until)

    def _run(self, sim, run_until):
        if run_until:
            sim.run_until(run_until)
        else:
            sim.run()

class ChainTestCase(TestCase):
    # Fast enough to simulate many sample periods: 265 ticks of settling,
    # 60 ticks of DataReady.
    DATA_RATE = 32000

    def setUp_chain(self, chain_length=1, data_rate=None):
        if data_rate is None:
            data_rate = self.DATA_RATE

        self.dut = AdsChain(chain_length, data_rate)
        self.config = self.dut.config
        self.harness = ChainHarness(self.dut)
        self.driver = StepDriver(self.harness)

    async def start_and_wait_ready(self, ctx) -> int:
        driver = self.driver
        driver.set_start(ctx, 1)
        await driver.clock(ctx)
        return await driver.wait_ready(ctx, limit=self.config.settle_cycles + 1)

def byte_sequence(first: int, count: int) -> bytes:
    return bytes((first + i) & 0xff for i in range(count))
