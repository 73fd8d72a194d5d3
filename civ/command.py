"""CI-V commands sent from the controller to the radio.

Contains:
- Command and sub-command byte constants
- DuplexDirection
- One frozen dataclass per command, each able to build its Frame
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import ClassVar

from civ import bcd
from civ.frame import Frame
from civ.frequency import Frequency
from civ.mode import OperatingMode

# Command bytes
CMD_READ_FREQ = 0x03
CMD_READ_MODE = 0x04
CMD_SET_FREQ = 0x05
CMD_SET_MODE = 0x06
CMD_VFO_MODE = 0x07
CMD_READ_OFFSET = 0x0C
CMD_SET_OFFSET = 0x0D
CMD_DUPLEX = 0x0F
CMD_LEVEL = 0x14
CMD_METER = 0x15
CMD_VARIOUS = 0x16
CMD_POWER = 0x18
CMD_READ_ID = 0x19
CMD_TONE = 0x1B
CMD_READ_GPS = 0x23

# Level (0x14) sub-commands
LEVEL_AF = 0x01
LEVEL_RF_GAIN = 0x02
LEVEL_SQUELCH = 0x03
LEVEL_RF_POWER = 0x0A

# Meter (0x15) sub-commands
METER_S = 0x02
METER_POWER = 0x11

# Various function (0x16) sub-commands
VARIOUS_TONE_SQUELCH = 0x5D  # Tone/squelch function, values 0x00-0x09

# Tone (0x1B) sub-commands
TONE_TX = 0x00  # Repeater tone
TONE_RX = 0x01  # TSQL tone
TONE_DTCS = 0x02

# Power (0x18) sub-commands
POWER_OFF = 0x00
POWER_ON = 0x01

# VFO select (0x07) sub-commands used by the ID-52A Plus; HF rigs use 0x00/0x01
VFO_A_SUB = 0xD0
VFO_B_SUB = 0xD1

OFFSET_SIZE = 3  # 100 Hz units
OFFSET_STEP_HZ = 100
LEVEL_SIZE = 2


class DuplexDirection(IntEnum):
    SIMPLEX = 0x10
    DUP_MINUS = 0x11
    DUP_PLUS = 0x12

    def __str__(self) -> str:
        return {0x10: "SIMP", 0x11: "DUP-", 0x12: "DUP+"}[self.value]


def encode_tone(tenths: int) -> bytes:
    """Encode a CTCSS tone (tenths of Hz) as [0x00, BCD, BCD]."""
    return bytes([0x00, bcd.encode_bcd_byte(tenths // 100), bcd.encode_bcd_byte(tenths % 100)])


def encode_dtcs(tx_polarity: int, rx_polarity: int, code: int) -> bytes:
    """Encode a DTCS code as [polarity nibbles, BCD, BCD]."""
    polarity = ((tx_polarity & 0x0F) << 4) | (rx_polarity & 0x0F)
    return bytes([polarity, bcd.encode_bcd_byte(code // 100), bcd.encode_bcd_byte(code % 100)])


@dataclass(frozen=True)
class Command:
    """Base class for all commands."""

    command: ClassVar[int]

    def command_byte(self) -> int:
        return self.command

    def sub_command_byte(self) -> int | None:
        return None

    def encode_data(self) -> bytes:
        return b""

    def to_frame(self, dst: int, src: int) -> Frame:
        """Build the frame for this command. Fails only on numeric encoding."""
        return Frame(dst, src, self.command_byte(), self.sub_command_byte(), self.encode_data())


@dataclass(frozen=True)
class ReadFrequency(Command):
    command = CMD_READ_FREQ


@dataclass(frozen=True)
class SetFrequency(Command):
    command = CMD_SET_FREQ
    frequency: Frequency

    def encode_data(self) -> bytes:
        return self.frequency.to_civ_bytes()


@dataclass(frozen=True)
class ReadMode(Command):
    command = CMD_READ_MODE


@dataclass(frozen=True)
class SetMode(Command):
    """Mode and filter travel as plain payload, with no sub-command."""

    command = CMD_SET_MODE
    mode: OperatingMode

    def encode_data(self) -> bytes:
        return bytes(self.mode.to_civ_bytes())


@dataclass(frozen=True)
class SelectVfo(Command):
    command = CMD_VFO_MODE
    sub: int = VFO_A_SUB

    def sub_command_byte(self) -> int | None:
        return self.sub


@dataclass(frozen=True)
class ReadLevel(Command):
    command = CMD_LEVEL
    sub: int

    def sub_command_byte(self) -> int | None:
        return self.sub


@dataclass(frozen=True)
class SetLevel(Command):
    command = CMD_LEVEL
    sub: int
    value: int

    def sub_command_byte(self) -> int | None:
        return self.sub

    def encode_data(self) -> bytes:
        return bcd.encode_bcd_be(self.value, LEVEL_SIZE)


@dataclass(frozen=True)
class ReadMeter(Command):
    command = CMD_METER
    sub: int

    def sub_command_byte(self) -> int | None:
        return self.sub


@dataclass(frozen=True)
class ReadVarious(Command):
    command = CMD_VARIOUS
    sub: int

    def sub_command_byte(self) -> int | None:
        return self.sub


@dataclass(frozen=True)
class SetVarious(Command):
    """The value byte is sent raw, not BCD."""

    command = CMD_VARIOUS
    sub: int
    value: int

    def sub_command_byte(self) -> int | None:
        return self.sub

    def encode_data(self) -> bytes:
        return bytes([self.value])


@dataclass(frozen=True)
class ReadDuplex(Command):
    command = CMD_DUPLEX


@dataclass(frozen=True)
class SetDuplex(Command):
    command = CMD_DUPLEX
    direction: DuplexDirection

    def sub_command_byte(self) -> int | None:
        return int(self.direction)


@dataclass(frozen=True)
class ReadOffset(Command):
    command = CMD_READ_OFFSET


@dataclass(frozen=True)
class SetOffset(Command):
    """Duplex offset in Hz, sent with 100 Hz resolution."""

    command = CMD_SET_OFFSET
    hz: int

    def encode_data(self) -> bytes:
        return bcd.encode_bcd_le(self.hz // OFFSET_STEP_HZ, OFFSET_SIZE)


@dataclass(frozen=True)
class ReadTone(Command):
    command = CMD_TONE
    sub: int

    def sub_command_byte(self) -> int | None:
        return self.sub


@dataclass(frozen=True)
class SetTone(Command):
    command = CMD_TONE
    sub: int
    tenths: int

    def sub_command_byte(self) -> int | None:
        return self.sub

    def encode_data(self) -> bytes:
        return encode_tone(self.tenths)


@dataclass(frozen=True)
class SetDtcs(Command):
    command = CMD_TONE
    tx_polarity: int
    rx_polarity: int
    code: int

    def sub_command_byte(self) -> int | None:
        return TONE_DTCS

    def encode_data(self) -> bytes:
        return encode_dtcs(self.tx_polarity, self.rx_polarity, self.code)


@dataclass(frozen=True)
class PowerOn(Command):
    command = CMD_POWER

    def sub_command_byte(self) -> int | None:
        return POWER_ON


@dataclass(frozen=True)
class PowerOff(Command):
    command = CMD_POWER

    def sub_command_byte(self) -> int | None:
        return POWER_OFF


@dataclass(frozen=True)
class ReadTransceiverId(Command):
    command = CMD_READ_ID

    def sub_command_byte(self) -> int | None:
        return 0x00


@dataclass(frozen=True)
class ReadGpsPosition(Command):
    command = CMD_READ_GPS

    def sub_command_byte(self) -> int | None:
        return 0x00
