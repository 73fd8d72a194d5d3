"""Radio state snapshots.

Contains:
- Vfo: VFO A/B identifier
- VfoState: Last known settings of one VFO
- RadioState: Aggregate snapshot emitted by the poller
"""

from dataclasses import dataclass, field
from enum import Enum

from civ.frequency import Frequency
from civ.mode import OperatingMode


class Vfo(Enum):
    A = "A"
    B = "B"

    def toggle(self) -> "Vfo":
        return Vfo.B if self is Vfo.A else Vfo.A

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class VfoState:
    """Per-VFO fields. None means not (yet) read successfully."""

    frequency: Frequency | None = None
    mode: OperatingMode | None = None
    rf_power: int | None = None
    tone_mode: int | None = None
    duplex: int | None = None
    offset: Frequency | None = None
    tx_tone: int | None = None  # tenths of Hz
    rx_tone: int | None = None
    dtcs_tx_polarity: int | None = None
    dtcs_rx_polarity: int | None = None
    dtcs_code: int | None = None


@dataclass(frozen=True)
class RadioState:
    """Snapshot of everything the poller knows about the radio."""

    active_vfo: Vfo = Vfo.A
    vfo_a: VfoState = field(default_factory=VfoState)
    vfo_b: VfoState = field(default_factory=VfoState)
    s_meter: int | None = None
    af_level: int | None = None
    squelch: int | None = None
    baud_rate: int = 0
    tx_bps: float = 0.0
    rx_bps: float = 0.0

    @property
    def active(self) -> VfoState:
        return self.vfo_a if self.active_vfo is Vfo.A else self.vfo_b

    def vfo(self, which: Vfo) -> VfoState:
        return self.vfo_a if which is Vfo.A else self.vfo_b

    def throughput_percent(self) -> float:
        """Link utilization (TX + RX) as a percentage of the bit rate."""
        if self.baud_rate <= 0:
            return 0.0
        return (self.tx_bps + self.rx_bps) / self.baud_rate * 100
