import logging
from collections import namedtuple

from amaranth import *
from amaranth.sim import Simulator

from adschain.gateware.chain import AdsChain
from adschain.gateware.common import BITS_PER_BYTE, CLOCK_FREQUENCY
from adschain.gateware.conversion import ConversionState

logger = logging.getLogger(__name__)

DEFAULT_SCLK_FREQUENCY = 8e6

OutputSignals = namedtuple("OutputSignals", [
    "dout",     # serial data bit
    "drdy_n",   # data ready, active low
    "error",    # previous frame not read exactly
])

class ChainHarness(Elaboratable):
    """
    Puts the master clock of an `AdsChain` under testbench control, so
    that every internal clock edge is an explicit step.
    """
    def __init__(self, dut: AdsChain):
        self.dut = dut

        # Input: master clock.
        self.clk = Signal()

    def elaborate(self, platform) -> Module:
        m = Module()

        m.domains.sync = ClockDomain("sync")
        m.d.comb += ClockSignal("sync").eq(self.clk)

        m.submodules.dut = self.dut

        return m

    def ports(self):
        return [self.clk] + self.dut.ports()

class StepDriver:
    """
    Host side of the chain, for use inside an Amaranth testbench.

    By default the master clock only advances on `clock()`, and serial
    clock edges take no master clock time at all. With `realtime` set,
    serial clock edges also advance the master clock according to the
    ratio of the two clock frequencies.
    """
    def __init__(self, harness: ChainHarness, sclk_frequency=DEFAULT_SCLK_FREQUENCY, realtime=False):
        self.harness = harness
        self.dut = harness.dut

        self.clock_half_period = 1.0 / CLOCK_FREQUENCY / 2
        self.sclk_half_period = 1.0 / sclk_frequency / 2
        self.realtime = realtime

        # Master clock ticks owed to elapsed serial clock time.
        self._phase = 0.0

        self.ticks = 0

    def set_start(self, ctx, level):
        ctx.set(self.dut.start, level)

    async def clock(self, ctx, count=1):
        for _ in range(count):
            ctx.set(self.harness.clk, 1)
            await ctx.delay(self.clock_half_period)
            ctx.set(self.harness.clk, 0)
            await ctx.delay(self.clock_half_period)
            self.ticks += 1

    async def _serial_delay(self, ctx):
        await ctx.delay(self.sclk_half_period)
        if self.realtime:
            self._phase += self.sclk_half_period * CLOCK_FREQUENCY
            while self._phase >= 1.0:
                self._phase -= 1.0
                await self.clock(ctx)

    async def sclk_rise(self, ctx):
        ctx.set(self.dut.sclk, 1)
        await self._serial_delay(ctx)

    async def sclk_fall(self, ctx):
        ctx.set(self.dut.sclk, 0)
        await self._serial_delay(ctx)

    def outputs(self, ctx) -> OutputSignals:
        return OutputSignals(
            dout=ctx.get(self.dut.dout),
            drdy_n=ctx.get(self.dut.drdy_n),
            error=ctx.get(self.dut.error),
        )

    def state(self, ctx) -> ConversionState:
        return ConversionState(ctx.get(self.dut.state))

    async def step(self, ctx, *, start=None, clock=False, sclk_rise=False, sclk_fall=False) -> OutputSignals:
        """
        Apply one step of inputs, in pin order: START level, master clock
        rising edge, SCLK rising edge, SCLK falling edge.
        """
        if start is not None:
            self.set_start(ctx, start)
        if clock:
            await self.clock(ctx)
        if sclk_rise:
            await self.sclk_rise(ctx)
        if sclk_fall:
            await self.sclk_fall(ctx)
        return self.outputs(ctx)

    async def read_bit(self, ctx) -> int:
        # DOUT is launched on the rising edge, sample it before falling.
        await self.sclk_rise(ctx)
        bit = ctx.get(self.dut.dout)
        await self.sclk_fall(ctx)
        return bit

    async def read_byte(self, ctx) -> int:
        value = 0
        for _ in range(BITS_PER_BYTE):
            value = (value << 1) | (await self.read_bit(ctx))
        return value

    async def read_bytes(self, ctx, count) -> bytes:
        return bytes([await self.read_byte(ctx) for _ in range(count)])

    async def read_frame(self, ctx) -> bytes:
        return await self.read_bytes(ctx, self.dut.config.frame_bytes)

    async def wait_ready(self, ctx, limit) -> int:
        """
        Clock until DRDY is low after an edge, returning the number of
        edges it took.
        """
        for ticks in range(1, limit + 1):
            await self.clock(ctx)
            if not ctx.get(self.dut.drdy_n):
                return ticks
        raise TimeoutError(f"DRDY still high after {limit} ticks")

    async def wait_state(self, ctx, state: ConversionState, limit) -> int:
        for ticks in range(1, limit + 1):
            await self.clock(ctx)
            if ctx.get(self.dut.state) == state:
                return ticks
        raise TimeoutError(f"{state.name} not reached after {limit} ticks")

def run(harness: ChainHarness, bench, vcd=None):
    sim = Simulator(harness)
    sim.add_testbench(bench)

    if vcd is not None:
        logger.info("writing %s", vcd)
        with sim.write_vcd(vcd, traces=harness.ports()):
            sim.run()
    else:
        sim.run()
