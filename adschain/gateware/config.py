import logging

from .common import *

logger = logging.getLogger(__name__)

class ConfigurationError(ValueError):
    pass

class SamplingConfiguration:
    """
    Construction parameters of a daisy chain, and every tick count the
    timing model derives from them. Counts are in periods of the master
    clock (`CLOCK_FREQUENCY`).
    """

    __slots__ = ("_chain_length", "_data_rate")

    def __init__(self, chain_length: int = DEFAULT_CHAIN_LENGTH, data_rate: int = DEFAULT_DATA_RATE):
        for name, value in (("chain_length", chain_length), ("data_rate", data_rate)):
            if isinstance(value, bool) or not isinstance(value, int):
                raise ConfigurationError(f"{name} must be an integer, not {value!r}")
            if value < 1:
                raise ConfigurationError(f"{name} must be at least 1, not {value}")

        object.__setattr__(self, "_chain_length", chain_length)
        object.__setattr__(self, "_data_rate", data_rate)

        if self.ready_cycles < 1:
            raise ConfigurationError(
                f"data_rate {data_rate} leaves no DataReady window "
                f"({CLOCK_FREQUENCY // data_rate} ticks per sample)"
            )

        logger.debug("%r: settle=%d ready=%d update=%d frame=%d bytes",
            self, self.settle_cycles, self.ready_cycles, self.update_cycles, self.frame_bytes)

    def __setattr__(self, name, value):
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __repr__(self):
        return f"SamplingConfiguration(chain_length={self.chain_length}, data_rate={self.data_rate})"

    def __eq__(self, other):
        if not isinstance(other, SamplingConfiguration):
            return NotImplemented
        return (self.chain_length, self.data_rate) == (other.chain_length, other.data_rate)

    def __hash__(self):
        return hash((self.chain_length, self.data_rate))

    @property
    def chain_length(self) -> int:
        return self._chain_length

    @property
    def data_rate(self) -> int:
        return self._data_rate

    @property
    def frame_bytes(self) -> int:
        return BYTES_PER_DEVICE * self.chain_length

    @property
    def settle_cycles(self) -> int:
        return (SETTLE_PERIODS * CLOCK_FREQUENCY) // self.data_rate + SETTLE_EXTRA_CYCLES

    @property
    def ready_cycles(self) -> int:
        return CLOCK_FREQUENCY // self.data_rate - UPDATE_CYCLES

    @property
    def update_cycles(self) -> int:
        return UPDATE_CYCLES

    @property
    def sample_cycles(self) -> int:
        return self.ready_cycles + self.update_cycles
