"""Link layer for CI-V radios.

This package moves bytes between a session and the radio:
- transport: Transport Protocol and the pyserial-backed SerialTransport
- device: Serial port setup and USB port lookup
- baud: Bit-rate discovery
"""

from link.baud import BAUD_RATES, DETECT_WINDOW_S, auto_detect
from link.device import find_radio_port, open_serial
from link.transport import SerialTransport, Transport

__all__ = [
    "BAUD_RATES",
    "DETECT_WINDOW_S",
    "SerialTransport",
    "Transport",
    "auto_detect",
    "find_radio_port",
    "open_serial",
]
