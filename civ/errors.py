"""Exceptions for the CI-V protocol stack.

All errors derive from CivError so callers can catch the whole family.
"""


class CivError(Exception):
    """Base class for CI-V errors."""

    pass


class TransportError(CivError):
    """Raised when the underlying link fails to read or write."""

    pass


class PortNotFoundError(CivError):
    """Raised when no serial port matches the radio."""

    pass


class InvalidFrameError(CivError):
    """Raised when a frame is malformed or does not match the expected reply.

    ``discard`` is set by the frame decoder to the number of buffer bytes
    (counted from the start of the buffer) that make up the bad span.
    """

    def __init__(self, message: str = "invalid CI-V frame", discard: int = 0) -> None:
        super().__init__(message)
        self.discard = discard


class NgError(CivError):
    """Raised when the radio answers NG (command rejected)."""

    def __init__(self, message: str = "radio returned NG (command rejected)") -> None:
        super().__init__(message)


class ResponseTimeoutError(CivError):
    """Raised when no matching reply arrives before the deadline."""

    def __init__(self, message: str = "timeout waiting for response") -> None:
        super().__init__(message)


class InvalidBcdError(CivError, ValueError):
    """Raised for a BCD nibble >= 10 on decode or a value > 99 on encode."""

    def __init__(self, value: int) -> None:
        super().__init__(f"invalid BCD data: {value:#04x}")
        self.value = value


class FrequencyOutOfRangeError(CivError, ValueError):
    """Raised when a frequency does not fit in 10 decimal digits."""

    def __init__(self, hz: int) -> None:
        super().__init__(f"frequency out of range: {hz} Hz")
        self.hz = hz


class UnknownModeError(CivError, ValueError):
    """Raised for a mode/filter byte pair with no known operating mode."""

    def __init__(self, mode_byte: int, filter_byte: int | None = None) -> None:
        super().__init__(f"unknown operating mode: {mode_byte:#04x}")
        self.mode_byte = mode_byte
        self.filter_byte = filter_byte
