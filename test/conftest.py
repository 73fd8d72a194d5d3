"""pytest configuration and fixtures for civ-serial tests.

Provides:
- MockTransport: In-memory transport with optional echo and scripted replies
- SimulatedRadio: Answers CI-V commands from in-memory radio state
- Fixtures for a transport, a simulated radio and a Radio session
- A pty pair fixture for integration tests
- Markers for unit vs integration tests
"""

import os
import re
import sys
import threading
import time
from collections.abc import Callable, Generator

import pytest

from civ import bcd
from civ.command import encode_dtcs, encode_tone
from civ.constants import ADDR_CONTROLLER, ADDR_ID52, EOM, NG, OK, PREAMBLE
from civ.frame import Frame, FrameBuffer
from session.config import RadioConfig
from session.radio import Radio


class MockTransport:
    """Mock transport for unit testing.

    Every complete frame written is echoed back (when echo is on), then
    followed by the next scripted reply, or by whatever the responder
    returns. ``chunk_size`` limits how many bytes one read hands out so
    tests can exercise partial frames.
    """

    def __init__(
        self,
        echo: bool = True,
        chunk_size: int | None = None,
        responder: Callable[[bytes], bytes] | None = None,
    ) -> None:
        self.echo = echo
        self.chunk_size = chunk_size
        self.responder = responder
        self.timeout: float | None = 0.1
        self.written = bytearray()
        self.bytes_read = 0
        self.reset_count = 0
        self.closed = False
        self._rx = bytearray()
        self._replies: list[bytes] = []
        self._lock = threading.Lock()

    def queue_reply(self, *frames: bytes) -> None:
        """Queue bytes to arrive after the next frame is written."""
        self._replies.append(b"".join(frames))

    def inject(self, data: bytes) -> None:
        """Inject data as if received from the radio."""
        with self._lock:
            self._rx += data

    def write(self, data: bytes, /) -> int:
        with self._lock:
            self.written += data
            if self.echo:
                self._rx += data
            if data.endswith(bytes([EOM])):
                if self._replies:
                    self._rx += self._replies.pop(0)
                elif self.responder is not None:
                    self._rx += self.responder(bytes(data))
            return len(data)

    def flush(self) -> None:
        pass

    @property
    def in_waiting(self) -> int:
        with self._lock:
            if self.chunk_size is not None:
                return min(len(self._rx), self.chunk_size)
            return len(self._rx)

    def read(self, size: int = 1, /) -> bytes:
        with self._lock:
            n = min(size, len(self._rx))
            if self.chunk_size is not None:
                n = min(n, self.chunk_size)
            data = bytes(self._rx[:n])
            del self._rx[:n]
            self.bytes_read += n
        if not data:
            # Block like a serial port would until its timeout expires
            time.sleep(self.timeout or 0)
        return data

    def reset_input_buffer(self) -> None:
        with self._lock:
            self._rx.clear()
            self.reset_count += 1

    def close(self) -> None:
        self.closed = True


def reply(command: int, sub: int | None = None, data: bytes = b"") -> bytes:
    """Bytes of a frame from the radio to the controller."""
    return Frame(ADDR_CONTROLLER, ADDR_ID52, command, sub, data).encode()


def echo_of(command: int, sub: int | None = None, data: bytes = b"") -> bytes:
    """Bytes of a frame from the controller to the radio."""
    return Frame(ADDR_ID52, ADDR_CONTROLLER, command, sub, data).encode()


_PREAMBLE_BURST = re.compile(rb"\xfe{3,}")


class SimulatedRadio:
    """Answers CI-V commands the way an ID-52A Plus does.

    Settings are plain attributes so tests can inspect or preset them.
    Commands listed in ``reject`` are answered NG; those in ``silent``
    get no answer at all.
    """

    def __init__(self, addr: int = ADDR_ID52) -> None:
        self.addr = addr
        self.frequency = 145_000_000
        self.mode = (0x05, 0x01)
        self.levels = {0x01: 128, 0x02: 255, 0x03: 40, 0x0A: 255}
        self.meters = {0x02: 120, 0x11: 0}
        self.tone_mode = 0x01
        self.duplex = 0x10
        self.offset = 600_000
        self.tones = {0x00: 885, 0x01: 1000}
        self.dtcs = (0, 0, 23)
        self.vfo_sub = 0xD0
        self.powered = True
        self.reject: set[int] = set()
        self.silent: set[int] = set()
        self.received: list[Frame] = []
        self._buffer = FrameBuffer()
        self._pending = b""

    def respond(self, data: bytes) -> bytes:
        """Feed bytes from the controller, return the radio's answer bytes.

        Like the radio's UART, a wake-up burst of preamble bytes counts as a
        single preamble. A trailing preamble run is held back until the next
        call, since the burst may be split across reads.
        """
        pending = _PREAMBLE_BURST.sub(bytes([PREAMBLE, PREAMBLE]), self._pending + data)
        held = len(pending) - len(pending.rstrip(bytes([PREAMBLE])))
        self._pending = pending[len(pending) - held :]
        self._buffer.feed(pending[: len(pending) - held])
        out = bytearray()
        while (frame := self._buffer.next_frame()) is not None:
            if frame.dst != self.addr:
                continue
            self.received.append(frame)
            out += self._answer(frame)
        return bytes(out)

    def _frame(self, to: int, command: int, sub: int | None = None, data: bytes = b"") -> bytes:
        return Frame(to, self.addr, command, sub, data).encode()

    def _answer(self, frame: Frame) -> bytes:
        c, sub, to = frame.command, frame.sub_command, frame.src
        if c in self.silent:
            return b""
        if c in self.reject:
            return self._frame(to, NG)
        ok = self._frame(to, OK)
        payload = frame.payload

        match c:
            case 0x03:
                return self._frame(to, 0x03, None, bcd.encode_bcd_le(self.frequency, 5))
            case 0x05:
                self.frequency = bcd.decode_bcd_le(payload)
                return ok
            case 0x04:
                return self._frame(to, 0x04, self.mode[0], bytes([self.mode[1]]))
            case 0x06:
                self.mode = (payload[0], payload[1])
                return ok
            case 0x07:
                self.vfo_sub = sub
                return ok
            case 0x14 if not frame.data:
                return self._frame(to, 0x14, sub, bcd.encode_bcd_be(self.levels[sub], 2))
            case 0x14:
                self.levels[sub] = bcd.decode_bcd_be(frame.data)
                return ok
            case 0x15:
                return self._frame(to, 0x15, sub, bcd.encode_bcd_be(self.meters[sub], 2))
            case 0x16 if not frame.data:
                return self._frame(to, 0x16, sub, bytes([self.tone_mode]))
            case 0x16:
                self.tone_mode = frame.data[0]
                return ok
            case 0x0F if sub is None:
                return self._frame(to, 0x0F, self.duplex)
            case 0x0F:
                self.duplex = sub
                return ok
            case 0x0C:
                return self._frame(to, 0x0C, None, bcd.encode_bcd_le(self.offset // 100, 3))
            case 0x0D:
                self.offset = bcd.decode_bcd_le(payload) * 100
                return ok
            case 0x1B if not frame.data and sub == 0x02:
                return self._frame(to, 0x1B, sub, encode_dtcs(*self.dtcs))
            case 0x1B if not frame.data:
                return self._frame(to, 0x1B, sub, encode_tone(self.tones[sub]))
            case 0x1B if sub == 0x02:
                d = frame.data
                code = bcd.decode_bcd_byte(d[1]) * 100 + bcd.decode_bcd_byte(d[2])
                self.dtcs = (d[0] >> 4, d[0] & 0x0F, code)
                return ok
            case 0x1B:
                d = frame.data
                self.tones[sub] = bcd.decode_bcd_byte(d[1]) * 100 + bcd.decode_bcd_byte(d[2])
                return ok
            case 0x18:
                self.powered = sub == 0x01
                return ok
            case 0x19:
                return self._frame(to, 0x19, 0x00, bytes([self.addr]))
            case _:
                return self._frame(to, NG)


@pytest.fixture
def transport() -> MockTransport:
    return MockTransport()


@pytest.fixture
def fast_config() -> RadioConfig:
    """Config with a short reply timeout so timeout tests run quickly."""
    return RadioConfig(timeout_s=0.3, read_slice_s=0.02)


@pytest.fixture
def radio(transport: MockTransport, fast_config: RadioConfig) -> Radio:
    return Radio(transport, fast_config)


@pytest.fixture
def simulated() -> SimulatedRadio:
    return SimulatedRadio()


@pytest.fixture
def sim_radio(simulated: SimulatedRadio, fast_config: RadioConfig) -> Radio:
    """A Radio session talking to a SimulatedRadio through an echoing transport."""
    return Radio(MockTransport(responder=simulated.respond), fast_config)


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: mark test as unit test")
    config.addinivalue_line("markers", "integration: mark test as integration test (uses a pty pair)")


@pytest.fixture
def pty_radio() -> Generator[tuple[str, SimulatedRadio], None, None]:
    """Run a SimulatedRadio behind a pty.

    Yields (port_name, simulated). The radio side echoes every byte back,
    like the radio's USB CI-V port with Echo Back ON.
    """
    if sys.platform not in ("linux", "darwin"):
        pytest.skip("pty fixture requires Linux/macOS")

    import pty
    import tty

    master_fd, slave_fd = pty.openpty()
    tty.setraw(slave_fd)
    port_name = os.ttyname(slave_fd)
    simulated = SimulatedRadio()
    running = True

    def serve() -> None:
        while running:
            try:
                data = os.read(master_fd, 256)
            except OSError:
                break
            if data:
                os.write(master_fd, data + simulated.respond(data))

    thread = threading.Thread(target=serve, daemon=True)
    thread.start()
    try:
        yield port_name, simulated
    finally:
        running = False
        os.close(slave_fd)
        os.close(master_fd)
        thread.join(timeout=1.0)
