"""Serial device setup for CI-V radios.

Contains:
- log_device_info: Log information about a serial device
- find_radio_port: Find the USB serial port a radio is attached to
- open_serial: Open a serial port 8N1 and wrap it as a transport
"""

import logging
import os

import serial
import serial.tools.list_ports

from civ.constants import DEFAULT_READ_SLICE_S
from civ.errors import PortNotFoundError, TransportError
from link.transport import SerialTransport

logger = logging.getLogger(__name__)

# USB product string of the ID-52A Plus
DEFAULT_PRODUCT_MATCH = "ID-52PLUS"


def log_device_info(device: str) -> None:
    """Log information about a serial device."""
    real_path = os.path.realpath(device)
    if real_path.startswith("/dev/pts/"):
        logger.info(f"Device: {device} -> {real_path} (pty)")
        return

    ports = [p for p in serial.tools.list_ports.comports() if p.device == device]
    if not ports:
        logger.info(f"Device: {device} (not in port list)")
        return

    info = ports[0]
    logger.info(f"Device: {info.device} ({info.description})")
    if info.vid is not None:
        logger.debug(f"VID:PID: {info.vid:04x}:{info.pid:04x}, product={info.product}")


def find_radio_port(product_match: str = DEFAULT_PRODUCT_MATCH) -> str:
    """Return the first port whose USB product or description contains product_match.

    Raises:
        PortNotFoundError: If no port matches.
    """
    needle = product_match.lower()
    for info in sorted(serial.tools.list_ports.comports(), key=lambda p: p.device):
        fields = (info.product, info.description, info.interface)
        if any(f and needle in f.lower() for f in fields):
            logger.info(f"Found {product_match} on {info.device}")
            return info.device
    raise PortNotFoundError(f"No serial port matching '{product_match}' found")


def open_serial(device: str, baudrate: int) -> SerialTransport:
    """Open a serial port 8N1 with no flow control.

    Raises:
        TransportError: If the port cannot be opened.
    """
    log_device_info(device)
    try:
        ser = serial.Serial(
            port=device,
            baudrate=baudrate,
            bytesize=serial.EIGHTBITS,
            parity=serial.PARITY_NONE,
            stopbits=serial.STOPBITS_ONE,
            xonxoff=False,
            rtscts=False,
            timeout=DEFAULT_READ_SLICE_S,
            write_timeout=1.0,
        )
        ser.reset_output_buffer()
    except (serial.SerialException, OSError) as e:
        raise TransportError(f"Cannot open {device}: {e}") from e
    logger.debug(f"Serial port: {device} baudrate={ser.baudrate}")
    return SerialTransport(ser)
