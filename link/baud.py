"""Bit-rate discovery.

Tries each candidate rate in turn: open the port, clear stale input, ask for
the transceiver ID and wait for any well-formed frame addressed to the
controller. A wrong rate yields only noise, so the first such frame proves
the rate.
"""

import logging
import time
from collections.abc import Callable

from civ.command import ReadTransceiverId
from civ.constants import ADDR_CONTROLLER, ADDR_ID52, DEFAULT_READ_SLICE_S
from civ.errors import CivError, ResponseTimeoutError
from civ.frame import FrameBuffer
from link.device import open_serial
from link.transport import Transport

logger = logging.getLogger(__name__)

# Most common first
BAUD_RATES = (19200, 9600, 4800)
DETECT_WINDOW_S = 1.0


def probe(
    transport: Transport,
    radio_addr: int = ADDR_ID52,
    controller_addr: int = ADDR_CONTROLLER,
    window_s: float = DETECT_WINDOW_S,
) -> bool:
    """Send a transceiver ID query and wait for any reply to the controller."""
    transport.reset_input_buffer()
    transport.write(ReadTransceiverId().to_frame(radio_addr, controller_addr).encode())
    transport.flush()

    buffer = FrameBuffer()
    deadline = time.monotonic() + window_s
    while (remaining := deadline - time.monotonic()) > 0:
        transport.timeout = min(remaining, DEFAULT_READ_SLICE_S)
        chunk = transport.read(max(1, transport.in_waiting))
        if not chunk:
            continue
        buffer.feed(chunk)
        while (frame := buffer.next_frame()) is not None:
            if frame.dst == controller_addr:
                return True
            logger.debug(f"Ignoring {frame!r} during probe")
    return False


def auto_detect(
    port_name: str,
    opener: Callable[[str, int], Transport] = open_serial,
    rates: tuple[int, ...] = BAUD_RATES,
    radio_addr: int = ADDR_ID52,
    controller_addr: int = ADDR_CONTROLLER,
    window_s: float = DETECT_WINDOW_S,
) -> tuple[int, Transport]:
    """Find the bit rate the radio answers on.

    Returns (baud_rate, transport) with the transport left open.

    Raises:
        ResponseTimeoutError: If no candidate rate gets an answer.
    """
    for baud in rates:
        logger.info(f"Trying {port_name} at {baud} baud")
        try:
            transport = opener(port_name, baud)
        except CivError as e:
            logger.warning(f"Cannot open {port_name} at {baud}: {e}")
            continue

        try:
            found = probe(transport, radio_addr, controller_addr, window_s)
        except CivError as e:
            logger.warning(f"Probe at {baud} failed: {e}")
            found = False

        if found:
            logger.info(f"Radio answered at {baud} baud")
            return baud, transport
        transport.close()

    raise ResponseTimeoutError(f"No response from radio on {port_name} at any of {list(rates)} baud")
