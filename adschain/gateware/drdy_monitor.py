from amaranth import *

class DrdyEdgeMonitor(Elaboratable):
    """
    Notices the host starting to read a frame. The real part returns DRDY
    high on the first falling SCLK edge of the read rather than at the
    end of the DataReady window.
    """
    def __init__(self):
        # Input: serial clock from the host.
        self.sclk = Signal()

        # Input: high while a frame may be read.
        self.data_ready = Signal()

        # Output: sticky until `data_ready` falls.
        self.read_started = Signal()

    def elaborate(self, platform) -> Module:
        m = Module()

        # Falling edge of SCLK.
        m.domains.capture = ClockDomain("capture", clk_edge="neg", async_reset=True, local=True)
        m.d.comb += [
            ClockSignal("capture").eq(self.sclk),
            ResetSignal("capture").eq(~self.data_ready),
        ]

        with m.If(self.data_ready):
            m.d.capture += self.read_started.eq(1)

        return m
