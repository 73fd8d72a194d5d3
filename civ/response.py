"""Typed replies from the radio.

parse_response() interprets a received frame in the light of the command
that was sent. OK/NG frames are recognized before anything else; every
other reply must match the shape the command expects or InvalidFrameError
is raised.
"""

from dataclasses import dataclass

from civ import bcd, command as cmd
from civ.errors import InvalidFrameError
from civ.frame import Frame
from civ.frequency import CIV_FREQUENCY_SIZE, Frequency
from civ.gps import RawGpsPosition
from civ.mode import OperatingMode


class Response:
    """Base class for all replies."""


@dataclass(frozen=True)
class Ok(Response):
    pass


@dataclass(frozen=True)
class Ng(Response):
    pass


@dataclass(frozen=True)
class FrequencyResponse(Response):
    frequency: Frequency


@dataclass(frozen=True)
class ModeResponse(Response):
    mode: OperatingMode


@dataclass(frozen=True)
class LevelResponse(Response):
    sub: int
    value: int


@dataclass(frozen=True)
class MeterResponse(Response):
    sub: int
    value: int


@dataclass(frozen=True)
class TransceiverIdResponse(Response):
    id: int


@dataclass(frozen=True)
class VariousResponse(Response):
    """Raw value byte, not BCD-decoded."""

    sub: int
    value: int


@dataclass(frozen=True)
class DuplexResponse(Response):
    """Direction byte as reported (0x10 simplex, 0x11 DUP-, 0x12 DUP+)."""

    direction: int


@dataclass(frozen=True)
class OffsetResponse(Response):
    offset: Frequency


@dataclass(frozen=True)
class ToneFrequencyResponse(Response):
    sub: int
    tenths: int


@dataclass(frozen=True)
class DtcsCodeResponse(Response):
    tx_polarity: int
    rx_polarity: int
    code: int


@dataclass(frozen=True)
class GpsPositionResponse(Response):
    position: RawGpsPosition


def parse_response(frame: Frame, command: cmd.Command) -> Response:
    """Interpret frame as the reply to command."""
    if frame.is_ok:
        return Ok()
    if frame.is_ng:
        return Ng()

    match command:
        case cmd.ReadFrequency():
            return FrequencyResponse(_parse_frequency(frame))
        case cmd.SetFrequency():
            # Some firmware echoes the new frequency instead of answering OK
            if frame.command not in (cmd.CMD_SET_FREQ, cmd.CMD_READ_FREQ):
                raise InvalidFrameError(f"unexpected reply to set frequency: {frame!r}")
            return FrequencyResponse(_parse_frequency(frame))
        case cmd.ReadMode():
            return ModeResponse(_parse_mode(frame))
        case cmd.ReadLevel(sub=sub):
            return LevelResponse(sub, _parse_level(frame, sub))
        case cmd.ReadMeter(sub=sub):
            return MeterResponse(sub, _parse_level(frame, sub))
        case cmd.ReadTransceiverId():
            # Usually "19 00 <id>"; a bare one-byte payload is the ID itself
            sub = _require_sub(frame)
            return TransceiverIdResponse(frame.data[0] if frame.data else sub)
        case cmd.ReadVarious(sub=sub):
            _check_sub(frame, sub)
            if not frame.data:
                raise InvalidFrameError("various-function reply has no value byte")
            return VariousResponse(sub, frame.data[0])
        case cmd.ReadDuplex():
            return DuplexResponse(_require_sub(frame))
        case cmd.ReadOffset():
            return OffsetResponse(_parse_offset(frame))
        case cmd.ReadTone(sub=sub):
            return _parse_tone(frame, sub)
        case cmd.ReadGpsPosition():
            _check_sub(frame, 0x00)
            return GpsPositionResponse(RawGpsPosition.from_data(frame.data))
        case _:
            return Ok()


def _require_sub(frame: Frame) -> int:
    if frame.sub_command is None:
        raise InvalidFrameError(f"reply has no sub-command: {frame!r}")
    return frame.sub_command


def _check_sub(frame: Frame, expected: int) -> None:
    if _require_sub(frame) != expected:
        raise InvalidFrameError(
            f"reply sub-command {frame.sub_command:#04x} does not match {expected:#04x}"
        )


def _parse_frequency(frame: Frame) -> Frequency:
    # The decoder puts the first BCD byte in the sub-command slot
    payload = frame.payload
    if len(payload) != CIV_FREQUENCY_SIZE:
        raise InvalidFrameError(
            f"frequency reply needs {CIV_FREQUENCY_SIZE} bytes, got {len(payload)}"
        )
    return Frequency(bcd.decode_bcd_le(payload))


def _parse_offset(frame: Frame) -> Frequency:
    # 5 bytes are Hz like a frequency; 3 bytes are in 100 Hz steps
    payload = frame.payload
    if len(payload) == CIV_FREQUENCY_SIZE:
        return Frequency(bcd.decode_bcd_le(payload))
    if len(payload) == cmd.OFFSET_SIZE:
        return Frequency(bcd.decode_bcd_le(payload) * cmd.OFFSET_STEP_HZ)
    raise InvalidFrameError(
        f"offset reply needs {CIV_FREQUENCY_SIZE} or {cmd.OFFSET_SIZE} bytes, got {len(payload)}"
    )


def _parse_mode(frame: Frame) -> OperatingMode:
    mode_byte = _require_sub(frame)
    if not frame.data:
        raise InvalidFrameError("mode reply has no filter byte")
    return OperatingMode.from_civ_bytes(mode_byte, frame.data[0])


def _parse_level(frame: Frame, sub: int) -> int:
    _check_sub(frame, sub)
    if len(frame.data) != cmd.LEVEL_SIZE:
        raise InvalidFrameError(f"level reply needs {cmd.LEVEL_SIZE} bytes, got {len(frame.data)}")
    return bcd.decode_bcd_be(frame.data)


def _parse_tone(frame: Frame, sub: int) -> Response:
    _check_sub(frame, sub)
    d = frame.data
    if len(d) != 3:
        raise InvalidFrameError(f"tone reply needs 3 bytes, got {len(d)}")
    value = bcd.decode_bcd_byte(d[1]) * 100 + bcd.decode_bcd_byte(d[2])
    if sub == cmd.TONE_DTCS:
        return DtcsCodeResponse(d[0] >> 4, d[0] & 0x0F, value)
    if sub not in (cmd.TONE_TX, cmd.TONE_RX):
        raise InvalidFrameError(f"unknown tone sub-command {sub:#04x}")
    return ToneFrequencyResponse(sub, value)
