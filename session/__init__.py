"""Radio session package.

This package drives one radio over a link:
- config: RadioConfig (addresses, bit rate, timing, echo-back)
- radio: Radio request/response session and typed helpers
- state: Vfo, VfoState, RadioState snapshots
- poller: Background polling worker with command/event queues
- report: Console report of a state snapshot
"""

from session.config import RadioConfig
from session.poller import RadioCommand, RadioEvent, RadioPoller
from session.radio import Radio
from session.report import StateReport
from session.state import RadioState, Vfo, VfoState

__all__ = [
    "Radio",
    "RadioCommand",
    "RadioConfig",
    "RadioEvent",
    "RadioPoller",
    "RadioState",
    "StateReport",
    "Vfo",
    "VfoState",
]
