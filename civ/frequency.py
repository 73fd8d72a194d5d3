"""Radio frequency value type.

CI-V carries frequencies as 5 little-endian BCD bytes: 10 decimal digits at
1 Hz resolution, so the largest representable value is 9,999,999,999 Hz.
"""

from dataclasses import dataclass

from civ import bcd
from civ.errors import FrequencyOutOfRangeError

MAX_HZ = 9_999_999_999
CIV_FREQUENCY_SIZE = 5


@dataclass(frozen=True, order=True)
class Frequency:
    """A frequency in Hz, bounded to 10 decimal digits."""

    hz: int

    def __post_init__(self) -> None:
        if not 0 <= self.hz <= MAX_HZ:
            raise FrequencyOutOfRangeError(self.hz)

    @classmethod
    def from_khz(cls, khz: float) -> "Frequency":
        return cls(round(khz * 1_000))

    @classmethod
    def from_mhz(cls, mhz: float) -> "Frequency":
        return cls(round(mhz * 1_000_000))

    @property
    def khz(self) -> float:
        return self.hz / 1_000

    @property
    def mhz(self) -> float:
        return self.hz / 1_000_000

    @classmethod
    def from_civ_bytes(cls, data: bytes) -> "Frequency":
        """Decode 5 CI-V BCD bytes (little-endian, 1 Hz resolution)."""
        if len(data) != CIV_FREQUENCY_SIZE:
            raise ValueError(f"Frequency needs {CIV_FREQUENCY_SIZE} bytes, got {len(data)}")
        return cls(bcd.decode_bcd_le(data))

    def to_civ_bytes(self) -> bytes:
        """Encode to 5 CI-V BCD bytes (little-endian, 1 Hz resolution)."""
        return bcd.encode_bcd_le(self.hz, CIV_FREQUENCY_SIZE)

    def __str__(self) -> str:
        mhz, rest = divmod(self.hz, 1_000_000)
        khz, hz = divmod(rest, 1_000)
        return f"{mhz}.{khz:03}.{hz:03} MHz"
