"""Synchronous CI-V session with one radio.

Contains:
- Radio: request/response exchange over a Transport, plus typed helpers

Each send_command() owns the transport for one full exchange: the command is
written, then frames are read until its reply arrives. While waiting, the
reader discards:
  - malformed byte runs (logged, the wait continues)
  - echoes of our own frames (dst is not the controller)
  - unsolicited frames (the radio reports VFO changes on its own)
Echo skipping must come before the command-byte check, or a command's own
echo would be taken as its answer.
"""

import logging
import time
from dataclasses import replace
from typing import TypeVar

from civ import command as cmd
from civ.constants import PREAMBLE, TRACE
from civ.errors import InvalidFrameError, NgError, ResponseTimeoutError
from civ.frame import Frame, FrameBuffer
from civ.frequency import Frequency
from civ.gps import RawGpsPosition
from civ.mode import OperatingMode
from civ.response import (
    DtcsCodeResponse,
    DuplexResponse,
    FrequencyResponse,
    GpsPositionResponse,
    LevelResponse,
    MeterResponse,
    ModeResponse,
    Ng,
    OffsetResponse,
    Ok,
    Response,
    ToneFrequencyResponse,
    TransceiverIdResponse,
    VariousResponse,
    parse_response,
)
from link.baud import auto_detect
from link.device import open_serial
from link.transport import Transport
from session.config import RadioConfig
from session.state import Vfo

logger = logging.getLogger(__name__)

# Preamble bytes sent ahead of power-on so a sleeping radio syncs its UART
WAKEUP_PREAMBLE_COUNT = 25

R = TypeVar("R", bound=Response)


class Radio:
    """One radio on one transport.

    Attributes:
        transport: Link to the radio, owned by this session.
        config: Addresses and timing.
        tx_bytes: Total bytes written.
        rx_bytes: Total bytes read, including skipped frames and noise.
    """

    def __init__(self, transport: Transport, config: RadioConfig | None = None) -> None:
        self.transport = transport
        self.config = config or RadioConfig()
        self.tx_bytes = 0
        self.rx_bytes = 0
        self._buffer = FrameBuffer()

    @classmethod
    def connect(cls, port: str, config: RadioConfig | None = None) -> "Radio":
        """Open port at the configured bit rate."""
        config = config or RadioConfig()
        return cls(open_serial(port, config.baud_rate), config)

    @classmethod
    def auto_connect(cls, port: str, config: RadioConfig | None = None) -> "Radio":
        """Open port at whichever bit rate the radio answers on."""
        config = config or RadioConfig()
        baud, transport = auto_detect(
            port,
            radio_addr=config.radio_addr,
            controller_addr=config.controller_addr,
        )
        return cls(transport, replace(config, baud_rate=baud))

    def __enter__(self) -> "Radio":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def close(self) -> None:
        self.transport.close()

    # -------------------------------------------------------------------------
    # Exchange
    # -------------------------------------------------------------------------

    def send_command(self, command: cmd.Command) -> Response:
        """Send command and return its parsed reply.

        NG comes back as an Ng value, not an exception.

        Raises:
            ResponseTimeoutError: If no reply arrives within config.timeout_s.
            InvalidFrameError: If the reply has the wrong shape.
            TransportError: On link failure.
        """
        frame = command.to_frame(self.config.radio_addr, self.config.controller_addr)
        self._write(frame.encode())
        logger.debug(f"Sent {command}")
        reply = self.read_reply(command.command_byte())
        return parse_response(reply, command)

    def read_reply(self, expected_command: int) -> Frame:
        """Read frames until OK, NG or one with expected_command arrives."""
        deadline = time.monotonic() + self.config.timeout_s
        while True:
            while (frame := self._buffer.next_frame()) is not None:
                if self.config.echo_back and frame.dst != self.config.controller_addr:
                    logger.debug(f"Skipping echo {frame!r}")
                    continue
                if frame.is_ok or frame.is_ng or frame.command == expected_command:
                    logger.log(TRACE, f"Reply {frame!r}")
                    return frame
                logger.debug(f"Skipping unsolicited {frame!r}")

            remaining = deadline - time.monotonic()
            if remaining <= 0:
                raise ResponseTimeoutError(
                    f"No reply to command {expected_command:#04x} within {self.config.timeout_s}s"
                )
            self.transport.timeout = min(remaining, self.config.read_slice_s)
            chunk = self.transport.read(max(1, self.transport.in_waiting))
            if chunk:
                self.rx_bytes += len(chunk)
                self._buffer.feed(chunk)

    def _write(self, data: bytes) -> None:
        self.transport.write(data)
        self.transport.flush()
        self.tx_bytes += len(data)

    def _request(self, command: cmd.Command, expected: type[R] | tuple[type[Response], ...]) -> R:
        response = self.send_command(command)
        if isinstance(response, expected):
            return response
        if isinstance(response, Ng):
            raise NgError(f"Radio rejected {command}")
        raise InvalidFrameError(f"Unexpected reply {response} to {command}")

    # -------------------------------------------------------------------------
    # Frequency and mode
    # -------------------------------------------------------------------------

    def read_frequency(self) -> Frequency:
        return self._request(cmd.ReadFrequency(), FrequencyResponse).frequency

    def set_frequency(self, frequency: Frequency) -> None:
        self._request(cmd.SetFrequency(frequency), (Ok, FrequencyResponse))

    def read_mode(self) -> OperatingMode:
        return self._request(cmd.ReadMode(), ModeResponse).mode

    def set_mode(self, mode: OperatingMode) -> None:
        self._request(cmd.SetMode(mode), Ok)

    def select_vfo(self, vfo: Vfo) -> None:
        sub = self.config.vfo_a_sub if vfo is Vfo.A else self.config.vfo_b_sub
        self._request(cmd.SelectVfo(sub), Ok)

    def select_vfo_a(self) -> None:
        self.select_vfo(Vfo.A)

    def select_vfo_b(self) -> None:
        self.select_vfo(Vfo.B)

    # -------------------------------------------------------------------------
    # Levels and meters (0-255 raw scale)
    # -------------------------------------------------------------------------

    def read_level(self, sub: int) -> int:
        return self._request(cmd.ReadLevel(sub), LevelResponse).value

    def set_level(self, sub: int, value: int) -> None:
        self._request(cmd.SetLevel(sub, value), Ok)

    def read_af_level(self) -> int:
        return self.read_level(cmd.LEVEL_AF)

    def set_af_level(self, value: int) -> None:
        self.set_level(cmd.LEVEL_AF, value)

    def read_squelch(self) -> int:
        return self.read_level(cmd.LEVEL_SQUELCH)

    def set_squelch(self, value: int) -> None:
        self.set_level(cmd.LEVEL_SQUELCH, value)

    def read_rf_gain(self) -> int:
        return self.read_level(cmd.LEVEL_RF_GAIN)

    def set_rf_gain(self, value: int) -> None:
        self.set_level(cmd.LEVEL_RF_GAIN, value)

    def read_rf_power(self) -> int:
        return self.read_level(cmd.LEVEL_RF_POWER)

    def set_rf_power(self, value: int) -> None:
        self.set_level(cmd.LEVEL_RF_POWER, value)

    def read_meter(self, sub: int) -> int:
        return self._request(cmd.ReadMeter(sub), MeterResponse).value

    def read_s_meter(self) -> int:
        return self.read_meter(cmd.METER_S)

    def read_power_meter(self) -> int:
        return self.read_meter(cmd.METER_POWER)

    # -------------------------------------------------------------------------
    # Repeater settings
    # -------------------------------------------------------------------------

    def read_tone_mode(self) -> int:
        """Read the tone/squelch function code (0x00-0x09)."""
        return self._request(cmd.ReadVarious(cmd.VARIOUS_TONE_SQUELCH), VariousResponse).value

    def set_tone_mode(self, code: int) -> None:
        self._request(cmd.SetVarious(cmd.VARIOUS_TONE_SQUELCH, code), Ok)

    def read_duplex(self) -> int:
        return self._request(cmd.ReadDuplex(), DuplexResponse).direction

    def set_duplex(self, direction: cmd.DuplexDirection) -> None:
        self._request(cmd.SetDuplex(direction), Ok)

    def read_offset(self) -> Frequency:
        return self._request(cmd.ReadOffset(), OffsetResponse).offset

    def set_offset(self, hz: int) -> None:
        self._request(cmd.SetOffset(hz), Ok)

    def read_tx_tone(self) -> int:
        """Read the repeater (Tx) tone in tenths of Hz."""
        return self._request(cmd.ReadTone(cmd.TONE_TX), ToneFrequencyResponse).tenths

    def set_tx_tone(self, tenths: int) -> None:
        self._request(cmd.SetTone(cmd.TONE_TX, tenths), Ok)

    def read_rx_tone(self) -> int:
        """Read the TSQL (Rx) tone in tenths of Hz."""
        return self._request(cmd.ReadTone(cmd.TONE_RX), ToneFrequencyResponse).tenths

    def set_rx_tone(self, tenths: int) -> None:
        self._request(cmd.SetTone(cmd.TONE_RX, tenths), Ok)

    def read_dtcs(self) -> tuple[int, int, int]:
        """Read DTCS as (tx_polarity, rx_polarity, code)."""
        r = self._request(cmd.ReadTone(cmd.TONE_DTCS), DtcsCodeResponse)
        return r.tx_polarity, r.rx_polarity, r.code

    def set_dtcs(self, tx_polarity: int, rx_polarity: int, code: int) -> None:
        self._request(cmd.SetDtcs(tx_polarity, rx_polarity, code), Ok)

    # -------------------------------------------------------------------------
    # Power, identity, GPS
    # -------------------------------------------------------------------------

    def power_on(self) -> None:
        """Wake the radio and switch it on."""
        self._write(bytes([PREAMBLE]) * WAKEUP_PREAMBLE_COUNT)
        self._request(cmd.PowerOn(), Ok)

    def power_off(self) -> None:
        self._request(cmd.PowerOff(), Ok)

    def read_transceiver_id(self) -> int:
        return self._request(cmd.ReadTransceiverId(), TransceiverIdResponse).id

    def read_gps_position(self) -> RawGpsPosition:
        return self._request(cmd.ReadGpsPosition(), GpsPositionResponse).position
