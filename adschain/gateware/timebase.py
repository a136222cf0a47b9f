from amaranth import *

from .config import SamplingConfiguration

class TimebaseInterface:
    def __init__(self, config: SamplingConfiguration):
        self.settle_cycles = config.settle_cycles
        self.ready_cycles = config.ready_cycles
        self.update_cycles = config.update_cycles

        # Ticks elapsed since the last restart.
        self.count = Signal(range(max(self.settle_cycles, self.ready_cycles, self.update_cycles)))

        # Phase boundaries: high during the last tick of the phase, so that
        # a transition taken on the next edge leaves the phase after
        # exactly `*_cycles` ticks.
        self.settle_done = Signal()
        self.ready_done = Signal()
        self.update_done = Signal()

class Timebase(Elaboratable):
    """
    Phase timer of the conversion engine, counting `sync` ticks since
    the last phase transition.
    """
    def __init__(self, config: SamplingConfiguration):
        # Input: a phase transition is taken on the next edge; the count
        # restarts from zero.
        self.restart = Signal()

        self.iface = TimebaseInterface(config)

    def elaborate(self, platform) -> Module:
        m = Module()

        iface = self.iface

        with m.If(self.restart):
            m.d.sync += iface.count.eq(0)
        with m.Else():
            m.d.sync += iface.count.eq(iface.count + 1)

        m.d.comb += [
            iface.settle_done.eq(iface.count == iface.settle_cycles - 1),
            iface.ready_done.eq(iface.count == iface.ready_cycles - 1),
            iface.update_done.eq(iface.count == iface.update_cycles - 1),
        ]

        return m
