from amaranth import *

from .common import BITS_PER_BYTE

class SerialShiftEngine(Elaboratable):
    """
    Serial data output of the chain.

    Each rising edge of SCLK while `data_ready` is high launches the next
    bit of a free-running byte counter, most significant bit first. While
    `data_ready` is low the frame counters are held in reset (without
    waiting for an SCLK edge) and DOUT is low. The byte counter itself is
    never reset, so the pattern carries on where the previous frame left
    off.

    `byte_count` saturates at `frame_bytes`: bytes read past one full frame
    still advance the pattern but are not counted, so an over-long read
    is not reported by the error latch.
    """
    def __init__(self, frame_bytes: int):
        self.frame_bytes = frame_bytes

        # Input: serial clock from the host.
        self.sclk = Signal()

        # Input: high while a frame may be read.
        self.data_ready = Signal()

        # Output: DOUT pin.
        self.dout = Signal()

        # Output: frame counters, sampled by the conversion engine at the
        # end of the window.
        self.byte_count = Signal(range(frame_bytes + 1))
        self.bit_position = Signal(range(BITS_PER_BYTE))

        # Synthetic sample data.
        self.pattern = Signal(8, reset_less=True)

    def elaborate(self, platform) -> Module:
        m = Module()

        # Rising edge of SCLK, held in reset outside the DataReady window.
        m.domains.launch = ClockDomain("launch", clk_edge="pos", async_reset=True, local=True)
        m.d.comb += [
            ClockSignal("launch").eq(self.sclk),
            ResetSignal("launch").eq(~self.data_ready),
        ]

        shift = Signal()

        with m.If(self.data_ready):
            m.d.launch += shift.eq(self.pattern[::-1].bit_select(self.bit_position, 1))

            with m.If(self.bit_position == BITS_PER_BYTE - 1):
                m.d.launch += [
                    self.bit_position.eq(0),
                    self.pattern.eq(self.pattern + 1),
                ]
                with m.If(self.byte_count != self.frame_bytes):
                    m.d.launch += self.byte_count.eq(self.byte_count + 1)
            with m.Else():
                m.d.launch += self.bit_position.eq(self.bit_position + 1)

        m.d.comb += self.dout.eq(shift & self.data_ready)

        return m
