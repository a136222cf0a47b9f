from enum import IntEnum

from amaranth import *

from .config import SamplingConfiguration
from .timebase import Timebase

class ConversionState(IntEnum):
    IDLE          = 0
    SETTLING      = 1
    DATA_READY    = 2
    DATA_UPDATING = 3

class ConversionStateMachine(Elaboratable):
    """
    Continuous-conversion engine, clocked by the `sync` (master clock)
    domain.

    START low is an asynchronous reset of every register, phase timer
    included: `state` is IDLE and `error` is zero from the step START
    falls, whether or not a `sync` edge follows. With START high the
    engine settles, then alternates between DATA_READY windows and the
    short DATA_UPDATING pause for as long as START stays high.

    At the end of each DATA_READY window the frame counters of the serial
    shift engine are sampled, and `error` reports whether the host read
    anything other than exactly one frame.
    """
    def __init__(self, config: SamplingConfiguration):
        self.config = config

        # Input: START pin.
        self.start = Signal()

        # Inputs: frame counters from the serial shift engine.
        self.byte_count = Signal(range(config.frame_bytes + 1))
        self.bit_position = Signal(range(8))

        # Output: current state, forced to IDLE while START is low.
        self.state = Signal(ConversionState)

        # Output: level shared with the serial clock domains, high only
        # while in DATA_READY.
        self.data_ready = Signal()

        # Output: high while the state holds DRDY high regardless of reads.
        self.busy = Signal()

        # Output: error flag for the last completed window.
        self.error = Signal()

        self.timebase = Timebase(config)

    def elaborate(self, platform) -> Module:
        m = Module()

        # Master clock, held in reset while START is low.
        m.domains.conversion = ClockDomain("conversion", async_reset=True, local=True)
        m.d.comb += [
            ClockSignal("conversion").eq(ClockSignal("sync")),
            ResetSignal("conversion").eq(~self.start),
        ]

        m.submodules.timebase = DomainRenamer("conversion")(self.timebase)
        timebase = self.timebase
        timing = timebase.iface

        state = Signal(ConversionState)
        error_latch = Signal()

        frame_incomplete = Signal()
        m.d.comb += frame_incomplete.eq(
            (self.byte_count != self.config.frame_bytes) | (self.bit_position != 0)
        )

        with m.If(~self.start):
            m.d.comb += timebase.restart.eq(1)
            m.d.conversion += [
                state.eq(ConversionState.IDLE),
                error_latch.eq(0),
            ]
        with m.Else():
            with m.Switch(state):
                with m.Case(ConversionState.IDLE):
                    m.d.comb += timebase.restart.eq(1)
                    m.d.conversion += state.eq(ConversionState.SETTLING)

                with m.Case(ConversionState.SETTLING):
                    with m.If(timing.settle_done):
                        m.d.comb += timebase.restart.eq(1)
                        m.d.conversion += state.eq(ConversionState.DATA_READY)

                with m.Case(ConversionState.DATA_READY):
                    with m.If(timing.ready_done):
                        m.d.comb += timebase.restart.eq(1)
                        m.d.conversion += [
                            state.eq(ConversionState.DATA_UPDATING),
                            error_latch.eq(frame_incomplete),
                        ]

                with m.Case(ConversionState.DATA_UPDATING):
                    with m.If(timing.update_done):
                        m.d.comb += timebase.restart.eq(1)
                        m.d.conversion += state.eq(ConversionState.DATA_READY)

        m.d.comb += [
            self.state.eq(state),
            self.data_ready.eq(self.state == ConversionState.DATA_READY),
            self.busy.eq(
                (self.state == ConversionState.SETTLING) |
                (self.state == ConversionState.DATA_UPDATING)
            ),
            self.error.eq(error_latch),
        ]

        return m
