"""Session configuration.

Contains:
- RadioConfig: addresses, link speed and timing for one radio session
- parse_address: Parse a CI-V address written as 0xB4 or B4
"""

import os
from dataclasses import dataclass, replace

from civ.command import VFO_A_SUB, VFO_B_SUB
from civ.constants import (
    ADDR_CONTROLLER,
    ADDR_ID52,
    DEFAULT_BAUDRATE,
    DEFAULT_READ_SLICE_S,
    DEFAULT_TIMEOUT_S,
)


def parse_address(text: str) -> int:
    """Parse a one-byte address. Bare values are read as hex, like the radio menu shows them."""
    text = text.strip()
    value = int(text[2:] if text.lower().startswith("0x") else text, 16)
    if not 0 <= value <= 0xFF:
        raise ValueError(f"Address out of range: {text}")
    return value


def _parse_bool(text: str) -> bool:
    return text.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class RadioConfig:
    """Settings for one radio session.

    Attributes:
        radio_addr: CI-V address of the radio.
        controller_addr: CI-V address this controller uses.
        baud_rate: Serial bit rate (ignored when discovery picks one).
        timeout_s: Deadline for a whole request/response exchange.
        echo_back: The link echoes our own frames back (USB CI-V echo).
        vfo_a_sub: VFO select sub-command for VFO A.
        vfo_b_sub: VFO select sub-command for VFO B.
        read_slice_s: Upper bound on a single transport read.
    """

    radio_addr: int = ADDR_ID52
    controller_addr: int = ADDR_CONTROLLER
    baud_rate: int = DEFAULT_BAUDRATE
    timeout_s: float = DEFAULT_TIMEOUT_S
    echo_back: bool = True
    vfo_a_sub: int = VFO_A_SUB
    vfo_b_sub: int = VFO_B_SUB
    read_slice_s: float = DEFAULT_READ_SLICE_S

    @classmethod
    def from_env(cls, base: "RadioConfig | None" = None) -> "RadioConfig":
        """Overlay CIV_* environment variables on base (or the defaults).

        CIV_VFO_SUBS takes two addresses separated by a comma, e.g. "00,01".
        """
        config = base or cls()
        env = os.environ
        changes: dict = {}
        if "CIV_RADIO_ADDR" in env:
            changes["radio_addr"] = parse_address(env["CIV_RADIO_ADDR"])
        if "CIV_CONTROLLER_ADDR" in env:
            changes["controller_addr"] = parse_address(env["CIV_CONTROLLER_ADDR"])
        if "CIV_BAUDRATE" in env:
            changes["baud_rate"] = int(env["CIV_BAUDRATE"])
        if "CIV_TIMEOUT_S" in env:
            changes["timeout_s"] = float(env["CIV_TIMEOUT_S"])
        if "CIV_ECHO_BACK" in env:
            changes["echo_back"] = _parse_bool(env["CIV_ECHO_BACK"])
        if "CIV_VFO_SUBS" in env:
            a, b = env["CIV_VFO_SUBS"].split(",")
            changes["vfo_a_sub"] = parse_address(a)
            changes["vfo_b_sub"] = parse_address(b)
        return replace(config, **changes)
