"""Console reporting of radio state.

Contains:
- Report ABC: Base class for console reports
- StateReport: Prints a RadioState snapshot
- describe_tones: Tx/Rx tone summary for one VFO
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass

from civ.command import DuplexDirection
from civ.tones import ToneType, format_dtcs, format_tone, tone_types
from session.state import RadioState, Vfo, VfoState


class Report(ABC):
    """Abstract base class for console reports."""

    @abstractmethod
    def print(self) -> None:
        """Print the report to stdout."""
        pass

    @abstractmethod
    def success(self) -> bool:
        """Return True if the report indicates success."""
        pass


def _or_unknown(value: object) -> str:
    return "---" if value is None else str(value)


def _describe_one(kind: ToneType, tone: int | None, polarity: int | None, code: int | None) -> str:
    match kind:
        case ToneType.TPL:
            return f"TPL {format_tone(tone)}"
        case ToneType.DPL:
            return f"DPL {format_dtcs(polarity, code)}"
        case _:
            return "CSQ"


def describe_tones(state: VfoState) -> tuple[str, str]:
    """Return (tx, rx) tone descriptions such as ('TPL 141.3', 'CSQ')."""
    if state.tone_mode is None or (types := tone_types(state.tone_mode)) is None:
        return "---", "---"
    tx, rx = types
    return (
        _describe_one(tx, state.tx_tone, state.dtcs_tx_polarity, state.dtcs_code),
        _describe_one(rx, state.rx_tone, state.dtcs_rx_polarity, state.dtcs_code),
    )


def describe_duplex(direction: int | None) -> str:
    if direction is None:
        return "---"
    try:
        return str(DuplexDirection(direction))
    except ValueError:
        return f"{direction:#04x}"


@dataclass
class StateReport(Report):
    """Report of one RadioState snapshot."""

    state: RadioState

    def lines(self) -> list[str]:
        s = self.state
        out = []
        for vfo in (Vfo.A, Vfo.B):
            v = s.vfo(vfo)
            marker = "*" if vfo is s.active_vfo else " "
            tx, rx = describe_tones(v)
            out.append(
                f"{marker}VFO {vfo}: {_or_unknown(v.frequency)} {_or_unknown(v.mode)} "
                f"pwr={_or_unknown(v.rf_power)} {describe_duplex(v.duplex)} "
                f"offset={_or_unknown(v.offset)} Tx={tx} Rx={rx}"
            )
        out.append(
            f"S={_or_unknown(s.s_meter)} AF={_or_unknown(s.af_level)} "
            f"SQL={_or_unknown(s.squelch)}"
        )
        if s.baud_rate:
            out.append(
                f"Link: {s.baud_rate} baud, TX {s.tx_bps:,.0f} bps, RX {s.rx_bps:,.0f} bps "
                f"({s.throughput_percent():.1f}%)"
            )
        return out

    def print(self) -> None:
        """Print the state report."""
        for line in self.lines():
            print(line)

    def success(self) -> bool:
        """Return True if the active VFO's frequency was read."""
        return self.state.active.frequency is not None
