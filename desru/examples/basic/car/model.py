"""
Simple Car
==========

A car that parks and drives in a loop. It parks for PARK_DURATION time units,
then drives for DRIVE_DURATION time units, and repeats. The process is not a
suspended function but a chain of events: every state change schedules the
next one.
"""

import logging

from desru import Event, EventScheduler

logger = logging.getLogger(__name__)

MAX_TIME = 15.0
PARK_DURATION = 5.0
DRIVE_DURATION = 2.0


def car(scheduler: EventScheduler, name: str = "car") -> Event:
    """Start the car process by parking at the current time."""
    return scheduler.schedule(
        Event(
            scheduler.current_time,
            lambda s: park(s, name),
            {"process": name, "state": "park"},
        )
    )


def park(scheduler: EventScheduler, name: str = "car") -> str:
    """Park, and schedule the start of the next trip."""
    logger.info("%s: start parking at %s", name, scheduler.current_time)
    scheduler.schedule(
        Event(
            scheduler.current_time + PARK_DURATION,
            lambda s: drive(s, name),
            {"process": name, "state": "drive"},
        )
    )
    return "park"


def drive(scheduler: EventScheduler, name: str = "car") -> str:
    """Drive, and schedule parking at the end of the trip."""
    logger.info("%s: start driving at %s", name, scheduler.current_time)
    scheduler.schedule(
        Event(
            scheduler.current_time + DRIVE_DURATION,
            lambda s: park(s, name),
            {"process": name, "state": "park"},
        )
    )
    return "drive"


def simulate(max_time: float = MAX_TIME) -> EventScheduler:
    """Run a single car until max_time and return the scheduler."""
    scheduler = EventScheduler()
    car(scheduler)
    scheduler.run_until_max_time(max_time)
    return scheduler
