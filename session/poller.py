"""Background polling of a radio.

Contains:
- RadioCommand variants: requests from a frontend to the poller
- RadioEvent variants: notifications from the poller to a frontend
- RadioPoller: worker thread that owns the Radio and polls it

The frontend never touches the Radio directly. It puts commands on
``poller.commands`` and reads events from ``poller.events``. Each loop
iteration executes at most one queued command, polls the active VFO and the
meters, and emits one StateUpdate.
"""

import logging
import queue
import threading
import time
from dataclasses import dataclass, replace

from civ.command import DuplexDirection
from civ.constants import BITS_PER_BYTE, DEFAULT_POLL_INTERVAL_S
from civ.errors import CivError
from civ.frequency import Frequency
from civ.mode import OperatingMode
from session.radio import Radio
from session.state import RadioState, Vfo, VfoState

logger = logging.getLogger(__name__)

# Minimum window for throughput sampling
RATE_WINDOW_S = 1.0


# -----------------------------------------------------------------------------
# Commands (frontend -> poller)
# -----------------------------------------------------------------------------


class RadioCommand:
    """Base class for poller commands."""


@dataclass(frozen=True)
class SetFrequency(RadioCommand):
    frequency: Frequency


@dataclass(frozen=True)
class SetMode(RadioCommand):
    mode: OperatingMode


@dataclass(frozen=True)
class SetAfLevel(RadioCommand):
    level: int


@dataclass(frozen=True)
class SetSquelch(RadioCommand):
    level: int


@dataclass(frozen=True)
class SetRfPower(RadioCommand):
    level: int


@dataclass(frozen=True)
class SelectVfo(RadioCommand):
    vfo: Vfo


@dataclass(frozen=True)
class SetDuplex(RadioCommand):
    direction: DuplexDirection


@dataclass(frozen=True)
class SetOffset(RadioCommand):
    hz: int


@dataclass(frozen=True)
class SetToneMode(RadioCommand):
    code: int


@dataclass(frozen=True)
class SetTxTone(RadioCommand):
    tenths: int


@dataclass(frozen=True)
class SetRxTone(RadioCommand):
    tenths: int


@dataclass(frozen=True)
class SetDtcsCode(RadioCommand):
    tx_polarity: int
    rx_polarity: int
    code: int


@dataclass(frozen=True)
class PowerOn(RadioCommand):
    pass


@dataclass(frozen=True)
class PowerOff(RadioCommand):
    pass


@dataclass(frozen=True)
class Quit(RadioCommand):
    pass


# -----------------------------------------------------------------------------
# Events (poller -> frontend)
# -----------------------------------------------------------------------------


class RadioEvent:
    """Base class for poller events."""


@dataclass(frozen=True)
class Connected(RadioEvent):
    pass


@dataclass(frozen=True)
class StateUpdate(RadioEvent):
    state: RadioState


@dataclass(frozen=True)
class Error(RadioEvent):
    message: str


@dataclass(frozen=True)
class Info(RadioEvent):
    message: str


@dataclass(frozen=True)
class Disconnected(RadioEvent):
    pass


def _read_or_none(read, what: str):
    """Run one read, mapping any protocol failure to None."""
    try:
        return read()
    except CivError as e:
        logger.debug(f"Poll of {what} failed: {e}")
        return None


@dataclass
class _RateSampler:
    """Turns byte counter deltas into bits per second."""

    last_time: float
    last_tx: int = 0
    last_rx: int = 0
    tx_bps: float = 0.0
    rx_bps: float = 0.0

    def update(self, tx_bytes: int, rx_bytes: int, now: float) -> None:
        elapsed = now - self.last_time
        if elapsed < RATE_WINDOW_S:
            return
        self.tx_bps = round((tx_bytes - self.last_tx) * BITS_PER_BYTE / elapsed)
        self.rx_bps = round((rx_bytes - self.last_rx) * BITS_PER_BYTE / elapsed)
        self.last_tx, self.last_rx, self.last_time = tx_bytes, rx_bytes, now


class RadioPoller:
    """Owns a Radio and polls it on a worker thread.

    Attributes:
        radio: The session; only the worker thread may use it once started.
        commands: Queue of RadioCommand from the frontend.
        events: Queue of RadioEvent for the frontend.
    """

    def __init__(self, radio: Radio, interval_s: float = DEFAULT_POLL_INTERVAL_S) -> None:
        self.radio = radio
        self.interval_s = interval_s
        self.commands: queue.Queue[RadioCommand] = queue.Queue()
        self.events: queue.Queue[RadioEvent] = queue.Queue()
        self.active_vfo = Vfo.A
        self._vfo_cache = {Vfo.A: VfoState(), Vfo.B: VfoState()}
        self._thread: threading.Thread | None = None

    def start(self) -> None:
        self._thread = threading.Thread(target=self.run, name="radio-poller", daemon=True)
        self._thread.start()

    def submit(self, command: RadioCommand) -> None:
        self.commands.put_nowait(command)

    def stop(self, timeout_s: float | None = None) -> None:
        """Ask the worker to quit and wait for it."""
        self.submit(Quit())
        if self._thread is not None:
            self._thread.join(timeout_s)

    def run(self) -> None:
        """Poll loop. Returns after a Quit command."""
        logger.info("Poller started")
        self.events.put(Connected())
        rates = _RateSampler(last_time=time.monotonic())

        while True:
            try:
                command = self.commands.get_nowait()
            except queue.Empty:
                command = None

            if isinstance(command, Quit):
                logger.info("Poller stopping")
                self.events.put(Disconnected())
                return
            if command is not None:
                self._execute(command)

            vfo_state, s_meter, af_level, squelch = self.poll_once()
            self._vfo_cache[self.active_vfo] = vfo_state

            rates.update(self.radio.tx_bytes, self.radio.rx_bytes, time.monotonic())

            state = RadioState(
                active_vfo=self.active_vfo,
                vfo_a=self._vfo_cache[Vfo.A],
                vfo_b=self._vfo_cache[Vfo.B],
                s_meter=s_meter,
                af_level=af_level,
                squelch=squelch,
                baud_rate=self.radio.config.baud_rate,
                tx_bps=rates.tx_bps,
                rx_bps=rates.rx_bps,
            )
            self.events.put(StateUpdate(state))
            time.sleep(self.interval_s)

    def _execute(self, command: RadioCommand) -> None:
        radio = self.radio
        logger.debug(f"Executing {command}")
        try:
            match command:
                case SetFrequency(frequency=f):
                    radio.set_frequency(f)
                case SetMode(mode=m):
                    radio.set_mode(m)
                case SetAfLevel(level=v):
                    radio.set_af_level(v)
                case SetSquelch(level=v):
                    radio.set_squelch(v)
                case SetRfPower(level=v):
                    radio.set_rf_power(v)
                case SelectVfo(vfo=vfo):
                    # The radio may switch even if the reply is lost
                    self.active_vfo = vfo
                    radio.select_vfo(vfo)
                case SetDuplex(direction=d):
                    radio.set_duplex(d)
                case SetOffset(hz=hz):
                    radio.set_offset(hz)
                case SetToneMode(code=code):
                    radio.set_tone_mode(code)
                case SetTxTone(tenths=t):
                    radio.set_tx_tone(t)
                case SetRxTone(tenths=t):
                    radio.set_rx_tone(t)
                case SetDtcsCode(tx_polarity=tx, rx_polarity=rx, code=code):
                    radio.set_dtcs(tx, rx, code)
                case PowerOn():
                    radio.power_on()
                    self.events.put(Info("Radio powered on"))
                case PowerOff():
                    radio.power_off()
                    self.events.put(Info("Radio powered off"))
                case _:
                    raise ValueError(f"Unknown command: {command}")
        except (CivError, ValueError) as e:
            logger.warning(f"{command} failed: {e}")
            self.events.put(Error(str(e)))

    def poll_once(self) -> tuple[VfoState, int | None, int | None, int | None]:
        """Read the active VFO's fields and the meters.

        Returns (vfo_state, s_meter, af_level, squelch). Each failed read is None.
        """
        radio = self.radio
        vfo_state = VfoState(
            frequency=_read_or_none(radio.read_frequency, "frequency"),
            mode=_read_or_none(radio.read_mode, "mode"),
            rf_power=_read_or_none(radio.read_rf_power, "RF power"),
            tone_mode=_read_or_none(radio.read_tone_mode, "tone mode"),
            duplex=_read_or_none(radio.read_duplex, "duplex"),
            offset=_read_or_none(radio.read_offset, "offset"),
            tx_tone=_read_or_none(radio.read_tx_tone, "Tx tone"),
            rx_tone=_read_or_none(radio.read_rx_tone, "Rx tone"),
        )
        dtcs = _read_or_none(radio.read_dtcs, "DTCS")
        if dtcs is not None:
            tx, rx, code = dtcs
            vfo_state = replace(vfo_state, dtcs_tx_polarity=tx, dtcs_rx_polarity=rx, dtcs_code=code)

        s_meter = _read_or_none(radio.read_s_meter, "S-meter")
        af_level = _read_or_none(radio.read_af_level, "AF level")
        squelch = _read_or_none(radio.read_squelch, "squelch")
        return vfo_state, s_meter, af_level, squelch
