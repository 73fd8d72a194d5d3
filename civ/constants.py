"""Protocol definitions for the CI-V link.

Contains:
- Frame sentinel bytes (preamble, terminator, OK/NG)
- Conventional device and controller addresses
- Timing constants for replies and bit-rate discovery
- Logging configuration
"""

import logging
from typing import Final

# TRACE logging level (below DEBUG)
TRACE = 5
logging.addLevelName(TRACE, "TRACE")

# Frame sentinels
PREAMBLE: Final = 0xFE
EOM: Final = 0xFD
OK: Final = 0xFB
NG: Final = 0xFA

# Smallest valid frame: FE FE dst src cmd FD
MIN_FRAME_LENGTH: Final = 6

# ID-52A Plus factory address and the usual controller (PC) address
ADDR_ID52: Final = 0xB4
ADDR_CONTROLLER: Final = 0xE0

# Default timing constants
DEFAULT_BAUDRATE = 19200
DEFAULT_TIMEOUT_S = 1.0  # Whole request/response exchange
DEFAULT_READ_SLICE_S = 0.1  # Cap for a single transport read
DEFAULT_POLL_INTERVAL_S = 0.2  # Sleep between poll cycles

# 8N1: 1 start + 8 data + 1 stop
BITS_PER_BYTE = 10
