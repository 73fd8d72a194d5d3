"""Unit tests for state snapshots and the console report."""

import pytest

from civ.frequency import Frequency
from civ.mode import OperatingMode
from session.report import StateReport, describe_duplex, describe_tones
from session.state import RadioState, Vfo, VfoState

TUNED = VfoState(
    frequency=Frequency(145_500_000),
    mode=OperatingMode.FM,
    rf_power=255,
    tone_mode=0x01,
    duplex=0x11,
    offset=Frequency(600_000),
    tx_tone=885,
    rx_tone=1000,
    dtcs_tx_polarity=0,
    dtcs_rx_polarity=1,
    dtcs_code=23,
)


@pytest.mark.unit
class TestDescribe:
    """Tone and duplex descriptions."""

    def test_tone_on_transmit(self) -> None:
        assert describe_tones(TUNED) == ("TPL 88.5", "CSQ")

    def test_tsql(self) -> None:
        assert describe_tones(VfoState(tone_mode=0x09, tx_tone=885, rx_tone=1000)) == (
            "TPL 88.5",
            "TPL 100.0",
        )

    def test_dtcs_polarities(self) -> None:
        state = VfoState(tone_mode=0x07, dtcs_tx_polarity=0, dtcs_rx_polarity=1, dtcs_code=23)
        assert describe_tones(state) == ("DPL +023", "DPL -023")

    def test_unknown(self) -> None:
        assert describe_tones(VfoState()) == ("---", "---")
        assert describe_tones(VfoState(tone_mode=0x42)) == ("---", "---")

    def test_duplex(self) -> None:
        assert describe_duplex(0x10) == "SIMP"
        assert describe_duplex(0x12) == "DUP+"
        assert describe_duplex(None) == "---"
        assert describe_duplex(0x13) == "0x13"


@pytest.mark.unit
class TestRadioState:
    """Snapshot helpers."""

    def test_active(self) -> None:
        state = RadioState(active_vfo=Vfo.B, vfo_b=TUNED)
        assert state.active is TUNED
        assert state.vfo(Vfo.A) == VfoState()
        assert Vfo.B.toggle() is Vfo.A

    def test_throughput(self) -> None:
        state = RadioState(baud_rate=19200, tx_bps=960.0, rx_bps=960.0)
        assert state.throughput_percent() == pytest.approx(10.0)
        assert RadioState().throughput_percent() == 0.0


@pytest.mark.unit
class TestStateReport:
    """Console lines for a snapshot."""

    def test_lines(self) -> None:
        state = RadioState(vfo_a=TUNED, s_meter=120, af_level=128, squelch=40)
        lines = StateReport(state).lines()
        assert lines[0] == (
            "*VFO A: 145.500.000 MHz FM pwr=255 DUP- offset=0.600.000 MHz Tx=TPL 88.5 Rx=CSQ"
        )
        assert lines[1].startswith(" VFO B: --- ---")
        assert lines[2] == "S=120 AF=128 SQL=40"
        assert len(lines) == 3

    def test_link_line(self) -> None:
        state = RadioState(baud_rate=19200, tx_bps=1000.0, rx_bps=2000.0)
        lines = StateReport(state).lines()
        assert lines[-1] == "Link: 19200 baud, TX 1,000 bps, RX 2,000 bps (15.6%)"

    def test_success(self) -> None:
        assert StateReport(RadioState(vfo_a=TUNED)).success()
        assert not StateReport(RadioState(active_vfo=Vfo.B, vfo_a=TUNED)).success()

    def test_print(self, capsys: pytest.CaptureFixture[str]) -> None:
        StateReport(RadioState(vfo_a=TUNED)).print()
        assert "145.500.000 MHz" in capsys.readouterr().out
