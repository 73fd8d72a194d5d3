"""Operating mode of the radio.

CI-V encodes the mode as a (mode_byte, filter_byte) pair. Narrow/wide
pairing exists for FM and AM only; DV ignores the filter byte.
"""

from enum import Enum

from civ.errors import UnknownModeError

MODE_AM = 0x02
MODE_FM = 0x05
MODE_DV = 0x17

FILTER_WIDE = 0x01
FILTER_NARROW = 0x02


class OperatingMode(Enum):
    """Modes supported by the ID-52A Plus."""

    FM = "FM"
    FM_N = "FM-N"
    AM = "AM"
    AM_N = "AM-N"
    DV = "DV"

    @classmethod
    def from_civ_bytes(cls, mode: int, filter_: int) -> "OperatingMode":
        """Decode a (mode_byte, filter_byte) pair."""
        if mode == MODE_DV:
            return cls.DV
        try:
            return _FROM_CIV[(mode, filter_)]
        except KeyError:
            raise UnknownModeError(mode, filter_) from None

    @classmethod
    def from_label(cls, label: str) -> "OperatingMode":
        """Look up a mode by its display label (case-insensitive)."""
        normalized = label.strip().upper().replace("_", "-")
        for mode in cls:
            if mode.value == normalized:
                return mode
        raise ValueError(f"Unknown mode '{label}'. Valid: {[m.value for m in cls]}")

    def to_civ_bytes(self) -> tuple[int, int]:
        return _TO_CIV[self]

    def toggle_width(self) -> "OperatingMode":
        """Swap wide and narrow. DV has no narrow variant and stays DV."""
        return _TOGGLE.get(self, self)

    @property
    def is_narrow(self) -> bool:
        return self in (OperatingMode.FM_N, OperatingMode.AM_N)

    def __str__(self) -> str:
        return self.value


_TO_CIV: dict[OperatingMode, tuple[int, int]] = {
    OperatingMode.FM: (MODE_FM, FILTER_WIDE),
    OperatingMode.FM_N: (MODE_FM, FILTER_NARROW),
    OperatingMode.AM: (MODE_AM, FILTER_WIDE),
    OperatingMode.AM_N: (MODE_AM, FILTER_NARROW),
    OperatingMode.DV: (MODE_DV, FILTER_WIDE),
}

_FROM_CIV = {pair: mode for mode, pair in _TO_CIV.items() if mode is not OperatingMode.DV}

_TOGGLE = {
    OperatingMode.FM: OperatingMode.FM_N,
    OperatingMode.FM_N: OperatingMode.FM,
    OperatingMode.AM: OperatingMode.AM_N,
    OperatingMode.AM_N: OperatingMode.AM,
}
