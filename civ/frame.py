"""CI-V frame encoding/decoding.

Frames are delimited by a double preamble and a terminator:
  FE FE <dst> <src> <cmd> [<sub>] [<data...>] FD

The double preamble allows recovery from noise or a mid-stream connect: the
decoder skips anything before the first FE FE run. The terminator byte is
assumed never to appear inside address, command or data bytes.

A one-byte payload is always read as a sub-command with no data; the wire
format cannot tell the two apart.
"""

import logging
from dataclasses import dataclass

from civ.constants import EOM, MIN_FRAME_LENGTH, NG, OK, PREAMBLE
from civ.errors import InvalidFrameError

logger = logging.getLogger(__name__)

PREAMBLE_RUN = bytes([PREAMBLE, PREAMBLE])


@dataclass(frozen=True)
class Frame:
    """One CI-V message."""

    dst: int
    src: int
    command: int
    sub_command: int | None = None
    data: bytes = b""

    def encode(self) -> bytes:
        out = bytearray(PREAMBLE_RUN)
        out += bytes([self.dst, self.src, self.command])
        if self.sub_command is not None:
            out.append(self.sub_command)
        out += self.data
        out.append(EOM)
        return bytes(out)

    to_bytes = encode

    @property
    def is_ok(self) -> bool:
        return self.command == OK

    @property
    def is_ng(self) -> bool:
        return self.command == NG

    @property
    def payload(self) -> bytes:
        """Sub-command and data as they appear on the wire."""
        if self.sub_command is None:
            return self.data
        return bytes([self.sub_command]) + self.data

    def __repr__(self) -> str:
        sub = "--" if self.sub_command is None else f"{self.sub_command:02X}"
        return (
            f"Frame({self.src:02X}->{self.dst:02X} cmd={self.command:02X} "
            f"sub={sub} data={self.data.hex(' ').upper() or '-'})"
        )


def decode(buffer: bytes | bytearray) -> tuple[Frame, int, int] | None:
    """Find and decode the first frame in buffer.

    Returns (frame, start, consumed) where start is the offset of the
    preamble run and consumed counts bytes from start through the
    terminator. Callers discard start + consumed bytes. Returns None when
    no complete frame is present yet.

    Raises InvalidFrameError when the preamble..terminator span is shorter
    than a minimal frame; its ``discard`` covers the bad span.
    """
    start = buffer.find(PREAMBLE_RUN)
    if start < 0:
        return None

    # Header bytes follow the first two preamble bytes, even if more FE follow
    header = start + len(PREAMBLE_RUN)
    end = buffer.find(EOM, header)
    if end < 0:
        return None

    body = bytes(buffer[header:end])
    if len(body) < MIN_FRAME_LENGTH - len(PREAMBLE_RUN) - 1:
        span = bytes(buffer[start : end + 1])
        raise InvalidFrameError(f"frame too short: {span.hex(' ')}", discard=end + 1)

    dst, src, command = body[0], body[1], body[2]
    payload = body[3:]

    if command in (OK, NG) or not payload:
        sub_command, data = None, b""
    else:
        sub_command, data = payload[0], payload[1:]

    return Frame(dst, src, command, sub_command, data), start, end + 1 - start


class FrameBuffer:
    """Accumulates received bytes and yields complete frames.

    Leading garbage and malformed spans are dropped so the next frame is
    always reachable.
    """

    def __init__(self) -> None:
        self._buf = bytearray()

    def feed(self, data: bytes) -> None:
        self._buf += data

    def next_frame(self) -> Frame | None:
        """Pop the next well-formed frame, or None if none is complete."""
        while True:
            try:
                result = decode(self._buf)
            except InvalidFrameError as e:
                logger.debug(f"Discarding malformed frame: {e}")
                del self._buf[: e.discard]
                continue

            if result is None:
                self._drop_noise()
                return None

            frame, start, consumed = result
            if start > 0:
                logger.debug(f"Skipped {start} bytes before preamble")
            del self._buf[: start + consumed]
            return frame

    def _drop_noise(self) -> None:
        # With no preamble run, only a trailing FE can start the next frame
        if PREAMBLE_RUN in self._buf:
            return
        keep = 1 if self._buf[-1:] == bytes([PREAMBLE]) else 0
        dropped = len(self._buf) - keep
        if dropped:
            logger.debug(f"Dropped {dropped} bytes of line noise")
            del self._buf[:dropped]

    def clear(self) -> None:
        self._buf.clear()

    def __len__(self) -> int:
        return len(self._buf)
