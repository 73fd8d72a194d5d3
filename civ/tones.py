"""Tone squelch tables and the tone/squelch function codes.

Contains:
- CTCSS_TONES: the 50 standard CTCSS tones, in tenths of Hz
- DTCS_CODES: the 104 standard DTCS codes (written as their octal digits)
- ToneType and the function code mapping used by command 0x16 sub 0x5D
- Display helpers for tones, codes and polarities
"""

import logging
from enum import Enum

logger = logging.getLogger(__name__)

CTCSS_TONES: tuple[int, ...] = (
    670, 693, 719, 744, 770, 797, 825, 854, 885, 915,
    948, 974, 1000, 1035, 1072, 1109, 1148, 1188, 1230, 1273,
    1318, 1365, 1413, 1462, 1514, 1567, 1598, 1622, 1655, 1679,
    1713, 1738, 1773, 1799, 1835, 1862, 1899, 1928, 1966, 1995,
    2035, 2065, 2107, 2181, 2257, 2291, 2336, 2418, 2503, 2541,
)

DTCS_CODES: tuple[int, ...] = (
    23, 25, 26, 31, 32, 36, 43, 47, 51, 53,
    54, 65, 71, 72, 73, 74, 114, 115, 116, 122,
    125, 131, 132, 134, 143, 145, 152, 155, 156, 162,
    165, 172, 174, 205, 212, 223, 225, 226, 243, 244,
    245, 246, 251, 252, 255, 261, 263, 265, 266, 271,
    274, 306, 311, 315, 325, 331, 332, 343, 346, 351,
    356, 364, 365, 371, 411, 412, 413, 423, 431, 432,
    445, 446, 452, 454, 455, 462, 464, 465, 466, 503,
    506, 516, 523, 526, 532, 546, 565, 606, 612, 624,
    627, 631, 632, 654, 662, 664, 703, 712, 723, 731,
    732, 734, 743, 754,
)

DTCS_POLARITY_NORMAL = 0
DTCS_POLARITY_REVERSE = 1


class ToneType(Enum):
    """Squelch signalling on one direction (transmit or receive)."""

    CSQ = "CSQ"  # Carrier squelch, no tone
    TPL = "TPL"  # CTCSS
    DPL = "DPL"  # DTCS

    def __str__(self) -> str:
        return self.value


# Function code -> (tx, rx)
TONE_FUNCTIONS: dict[int, tuple[ToneType, ToneType]] = {
    0x00: (ToneType.CSQ, ToneType.CSQ),
    0x01: (ToneType.TPL, ToneType.CSQ),
    0x02: (ToneType.CSQ, ToneType.TPL),
    0x03: (ToneType.CSQ, ToneType.DPL),
    0x04: (ToneType.CSQ, ToneType.TPL),
    0x05: (ToneType.CSQ, ToneType.DPL),
    0x06: (ToneType.DPL, ToneType.CSQ),
    0x07: (ToneType.DPL, ToneType.DPL),
    0x08: (ToneType.DPL, ToneType.TPL),
    0x09: (ToneType.TPL, ToneType.TPL),
}

# Preferred code for each pair; 0x04 and 0x05 duplicate 0x02 and 0x03
_FUNCTION_CODES: dict[tuple[ToneType, ToneType], int] = {
    (ToneType.CSQ, ToneType.CSQ): 0x00,
    (ToneType.TPL, ToneType.CSQ): 0x01,
    (ToneType.CSQ, ToneType.TPL): 0x02,
    (ToneType.CSQ, ToneType.DPL): 0x03,
    (ToneType.DPL, ToneType.CSQ): 0x06,
    (ToneType.DPL, ToneType.DPL): 0x07,
    (ToneType.DPL, ToneType.TPL): 0x08,
    (ToneType.TPL, ToneType.TPL): 0x09,
}

FALLBACK_FUNCTION_CODE = 0x09


def tone_types(code: int) -> tuple[ToneType, ToneType] | None:
    """Return (tx, rx) tone types for a function code, or None if unknown."""
    return TONE_FUNCTIONS.get(code)


def tone_function_code(tx: ToneType, rx: ToneType) -> int:
    """Return the function code for a (tx, rx) pair.

    TPL transmit with DPL receive has no code on the radio; it maps to
    TPL/TPL with a warning.
    """
    code = _FUNCTION_CODES.get((tx, rx))
    if code is None:
        logger.warning(f"No tone function for Tx {tx} / Rx {rx}, using Tx TPL / Rx TPL")
        return FALLBACK_FUNCTION_CODE
    return code


def format_tone(tenths: int | None) -> str:
    """Format a CTCSS tone in tenths of Hz (1413 -> '141.3')."""
    if tenths is None:
        return "---"
    return f"{tenths // 10}.{tenths % 10}"


def format_dtcs(polarity: int | None, code: int | None) -> str:
    """Format a DTCS code with polarity sign ('+023', '-754')."""
    if polarity is None:
        sign = "?"
    else:
        sign = "+" if polarity == DTCS_POLARITY_NORMAL else "-"
    if code is None:
        return f"{sign}---"
    return f"{sign}{code:03}"
