from amaranth import *

from .config import SamplingConfiguration
from .conversion import ConversionStateMachine
from .drdy_monitor import DrdyEdgeMonitor
from .shift import SerialShiftEngine

class AdsChain(Elaboratable):
    """
    Daisy chain of `chain_length` ADS129x devices in continuous
    conversion mode, seen from the host as a single device with one long
    frame.

    The `sync` domain is the master clock of the devices. SCLK is a plain
    input and may toggle at any time relative to it.

    DRDY is active low and reads "ready" (low) while idle. DOUT carries a
    free-running byte counter in place of conversion results.
    """
    def __init__(self, chain_length=None, data_rate=None, *, config: SamplingConfiguration = None):
        if config is None:
            kwargs = {}
            if chain_length is not None:
                kwargs["chain_length"] = chain_length
            if data_rate is not None:
                kwargs["data_rate"] = data_rate
            config = SamplingConfiguration(**kwargs)
        elif chain_length is not None or data_rate is not None:
            raise TypeError("pass either a configuration or chain_length/data_rate, not both")

        self.config = config

        # Input pins.
        self.start = Signal()
        self.sclk = Signal()

        # Output pins.
        self.dout = Signal()
        self.drdy_n = Signal()
        self.error = Signal()

        self.conversion = ConversionStateMachine(config)
        self.shifter = SerialShiftEngine(config.frame_bytes)
        self.monitor = DrdyEdgeMonitor()

        # Observation only.
        self.state = self.conversion.state
        self.data_ready = self.conversion.data_ready
        self.byte_count = self.shifter.byte_count
        self.bit_position = self.shifter.bit_position

    def elaborate(self, platform) -> Module:
        m = Module()

        conversion = m.submodules.conversion = self.conversion
        shifter = m.submodules.shifter = self.shifter
        monitor = m.submodules.monitor = self.monitor

        m.d.comb += [
            conversion.start.eq(self.start),
            conversion.byte_count.eq(shifter.byte_count),
            conversion.bit_position.eq(shifter.bit_position),

            shifter.sclk.eq(self.sclk),
            shifter.data_ready.eq(conversion.data_ready),

            monitor.sclk.eq(self.sclk),
            monitor.data_ready.eq(conversion.data_ready),

            self.dout.eq(shifter.dout),
            self.drdy_n.eq(conversion.busy | monitor.read_started),
            self.error.eq(conversion.error),
        ]

        return m

    def ports(self):
        return [
            self.start, self.sclk,
            self.dout, self.drdy_n, self.error,
        ]
