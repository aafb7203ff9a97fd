"""desru: a discrete event simulation core.

Core Objects: Event and EventScheduler.
"""

import datetime

from desru.events import Event, InvalidSchedule
from desru.log import EventLog, ExecutionRecord
from desru.scheduler import EventScheduler, stop_at_max_time

__all__ = [
    "Event",
    "EventLog",
    "EventScheduler",
    "ExecutionRecord",
    "InvalidSchedule",
    "stop_at_max_time",
]

__title__ = "desru"
__version__ = "0.2.0.dev0"
__license__ = "MIT"
_this_year = datetime.datetime.now(tz=datetime.UTC).date().year
__copyright__ = f"Copyright {_this_year} desru developers"
