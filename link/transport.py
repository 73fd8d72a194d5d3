"""Byte transport used by a radio session.

Contains:
- Transport Protocol: the operations a session needs from a link
- SerialTransport: a serial.Serial wrapper that reports failures as TransportError
"""

import logging
from typing import Protocol

import serial

from civ.constants import TRACE
from civ.errors import TransportError

logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Protocol for a byte link to the radio.

    serial.Serial satisfies it directly.
    """

    def write(self, data: bytes, /) -> int | None: ...
    def flush(self) -> None: ...
    def read(self, size: int = ..., /) -> bytes: ...
    @property
    def in_waiting(self) -> int: ...
    def reset_input_buffer(self) -> None: ...
    def close(self) -> None: ...

    @property
    def timeout(self) -> float | None: ...

    @timeout.setter
    def timeout(self, value: float | None) -> None: ...


class SerialTransport:
    """Transport over an open serial.Serial."""

    def __init__(self, ser: serial.Serial) -> None:
        self._ser = ser

    @property
    def port(self) -> str | None:
        return self._ser.port

    @property
    def baudrate(self) -> int:
        return self._ser.baudrate

    @property
    def timeout(self) -> float | None:
        return self._ser.timeout

    @timeout.setter
    def timeout(self, value: float | None) -> None:
        self._ser.timeout = value

    def write(self, data: bytes) -> int | None:
        logger.log(TRACE, f"TX {data.hex(' ')}")
        try:
            return self._ser.write(data)
        except (serial.SerialException, OSError) as e:
            raise TransportError(f"Write failed: {e}") from e

    def flush(self) -> None:
        try:
            self._ser.flush()
        except (serial.SerialException, OSError) as e:
            raise TransportError(f"Flush failed: {e}") from e

    @property
    def in_waiting(self) -> int:
        try:
            return self._ser.in_waiting
        except (serial.SerialException, OSError) as e:
            raise TransportError(f"Status query failed: {e}") from e

    def read(self, size: int = 1) -> bytes:
        try:
            data = self._ser.read(size)
        except (serial.SerialException, OSError) as e:
            raise TransportError(f"Read failed: {e}") from e
        if data:
            logger.log(TRACE, f"RX {data.hex(' ')}")
        return data

    def reset_input_buffer(self) -> None:
        try:
            self._ser.reset_input_buffer()
        except (serial.SerialException, OSError) as e:
            raise TransportError(f"Input reset failed: {e}") from e

    def close(self) -> None:
        self._ser.close()
