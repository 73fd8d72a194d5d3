"""Integration tests over a real serial port backed by a pty.

The simulated radio echoes every byte, like the radio's USB CI-V port.
"""

import pytest

from civ.frequency import Frequency
from civ.mode import OperatingMode
from conftest import SimulatedRadio
from link.baud import auto_detect, probe
from link.device import open_serial
from session.config import RadioConfig
from session.radio import Radio


@pytest.mark.integration
class TestSerialLink:
    """Radio sessions through pyserial."""

    def test_read_and_set(self, pty_radio: tuple[str, SimulatedRadio]) -> None:
        port_name, simulated = pty_radio
        with Radio.connect(port_name, RadioConfig(timeout_s=2.0)) as radio:
            assert radio.read_frequency() == Frequency(145_000_000)
            radio.set_mode(OperatingMode.FM_N)
            assert simulated.mode == (0x05, 0x02)
            assert radio.read_mode() == OperatingMode.FM_N
            assert radio.rx_bytes > radio.tx_bytes

    def test_power_on_wakeup(self, pty_radio: tuple[str, SimulatedRadio]) -> None:
        port_name, simulated = pty_radio
        simulated.powered = False
        with Radio.connect(port_name, RadioConfig(timeout_s=2.0)) as radio:
            radio.power_on()
        assert simulated.powered

    def test_probe(self, pty_radio: tuple[str, SimulatedRadio]) -> None:
        port_name, _ = pty_radio
        transport = open_serial(port_name, 19200)
        try:
            assert probe(transport, window_s=1.0)
        finally:
            transport.close()

    def test_auto_detect(self, pty_radio: tuple[str, SimulatedRadio]) -> None:
        # A pty passes bytes at any rate, so the first candidate wins
        port_name, _ = pty_radio
        baud, transport = auto_detect(port_name, window_s=1.0)
        try:
            assert baud == 19200
        finally:
            transport.close()
