"""Event scheduler driving desru's discrete event simulation.

The EventScheduler owns a heap of pending events, the current simulated time
and the execution log. Its run methods repeatedly pop the earliest event,
advance the clock to it, execute it and record the outcome. Actions receive
the scheduler and may schedule further events on it, which is how processes
are expressed: as chains of events rather than suspended threads.

Events are ordered by ``(scheduled_time, sequence)``. The sequence number is
assigned on scheduling, so events due at the same instant execute in the order
they were scheduled, including events scheduled by an action for the current
instant.

Time is never advanced past the last executed event. In particular,
run_until_max_time does not move the clock to ``max_time`` when it runs out of
due events, so ``current_time`` always equals the start time or the time of an
event that actually executed.
"""

from __future__ import annotations

import contextlib
import logging
import math
import warnings
from collections.abc import Callable, Iterator, Mapping
from heapq import heappop, heappush
from typing import TypeAlias

from desru.events import Action, Event, InvalidSchedule, check_time
from desru.log import EventLog, ExecutionRecord

__all__ = ["EventScheduler", "stop_at_max_time"]

logger = logging.getLogger(__name__)

StopCondition: TypeAlias = Callable[["EventScheduler"], bool]
LogFilter: TypeAlias = Callable[[ExecutionRecord], bool]


def stop_at_max_time(max_time: float) -> StopCondition:
    """Create a stop condition that halts once no pending event is due by ``max_time``.

    Args:
        max_time: the last simulated time at which events may still execute

    Returns:
        Callable: predicate for EventScheduler.run_until

    """

    def stop(scheduler: EventScheduler) -> bool:
        next_time = scheduler.peek_time()
        return next_time is None or next_time > max_time

    return stop


class EventScheduler:
    """Executes events in simulated time order and keeps a log of the outcomes.

    Attributes:
        start_time (float): the simulated time the scheduler starts at, and returns to on reset
        log (EventLog): read-only history of executed events

    """

    def __init__(self, start_time: float = 0.0) -> None:
        """Initialize an event scheduler.

        Args:
            start_time: the simulated epoch, defaults to 0.0
        """
        if not math.isfinite(start_time):
            raise ValueError(f"start_time must be finite, got {start_time}")

        self.start_time = float(start_time)
        self._current_time = self.start_time
        self._events: list[Event] = []
        self._next_sequence = 0
        self._log = EventLog()
        self._running = False

    @property
    def current_time(self) -> float:
        """Return the current simulated time."""
        return self._current_time

    @property
    def log(self) -> EventLog:
        """Return the execution log."""
        return self._log

    @property
    def next_sequence(self) -> int:
        """Return the sequence number the next scheduled event will get."""
        return self._next_sequence

    @property
    def is_running(self) -> bool:
        """Return whether a run method is currently executing events."""
        return self._running

    @property
    def pending_count(self) -> int:
        """Return the number of events waiting to be executed."""
        return len(self._events)

    def __len__(self) -> int:  # noqa: D105
        return len(self._events)

    def __repr__(self) -> str:
        """Return a string representation of the scheduler."""
        return (
            f"EventScheduler(time={self._current_time}, pending={len(self._events)}, "
            f"executed={len(self._log)})"
        )

    def peek_time(self) -> float | None:
        """Return the time of the next pending event, or None if there is none."""
        if not self._events:
            return None
        return self._events[0].scheduled_time

    def schedule(self, event: Event) -> Event:
        """Add the event to the pending queue.

        Safe to call from within an action.

        Args:
            event: the event to schedule

        Returns:
            Event: the scheduled event, with its sequence number assigned

        Raises:
            InvalidSchedule: if the event time is not finite, lies before the current time,
                or the event has already been scheduled

        """
        reason = None
        if event.is_scheduled or event.executed:
            reason = f"{event!r} has already been scheduled"
        elif not math.isfinite(event.scheduled_time):
            reason = f"event time must be finite, got {event.scheduled_time}"
        elif event.scheduled_time < self._current_time:
            reason = (
                f"Cannot schedule event in the past: event time ({event.scheduled_time}) "
                f"is before current time ({self._current_time})"
            )

        if reason is not None:
            logger.debug("Rejected schedule: %s", reason)
            raise InvalidSchedule(reason)

        event._assign_sequence(self._next_sequence)
        self._next_sequence += 1
        heappush(self._events, event)
        logger.debug("Event scheduled: %r", event)
        return event

    def timeout(
        self,
        delay: float,
        action: Action | None = None,
        context: Mapping[str, str] | None = None,
    ) -> Event:
        """Schedule a new event ``delay`` time units after the current time.

        Args:
            delay: non-negative time delta
            action: the callable to invoke with the scheduler, optional
            context: string metadata for the event, optional

        Returns:
            Event: the scheduled event

        Raises:
            InvalidSchedule: if delay is negative or not finite

        """
        delay = check_time(delay)
        if delay < 0:
            raise InvalidSchedule(
                f"Cannot schedule event in the past: delay ({delay}) is negative"
            )
        return self.schedule(Event(self._current_time + delay, action, context))

    def step(self, log_filter: LogFilter | None = None) -> ExecutionRecord | None:
        """Execute the next pending event.

        Args:
            log_filter: predicate deciding whether the record is appended to the log

        Returns:
            ExecutionRecord | None: the record of the executed event, None if nothing was pending

        """
        with self._run_guard():
            return self._execute_next(log_filter) if self._events else None

    def run_until(
        self, predicate: StopCondition, log_filter: LogFilter | None = None
    ) -> EventLog:
        """Execute events until ``predicate`` holds or no events are pending.

        The predicate is evaluated with the scheduler before each event is popped.

        Args:
            predicate: stop condition
            log_filter: predicate deciding whether a record is appended to the log,
                defaults to logging every executed event

        Returns:
            EventLog: the execution log

        """
        with self._run_guard():
            while self._events and not predicate(self):
                self._execute_next(log_filter)
        return self._log

    def run_until_max_time(
        self, max_time: float, log_filter: LogFilter | None = None
    ) -> EventLog:
        """Execute every pending event due at or before ``max_time``.

        The current time is left at the last executed event, it is not advanced to
        ``max_time``. An infinite ``max_time`` drains the queue.

        Args:
            max_time: the last simulated time at which events may execute
            log_filter: predicate deciding whether a record is appended to the log

        Returns:
            EventLog: the execution log

        """
        if math.isnan(max_time):
            raise ValueError("max_time must not be NaN")
        if max_time < self._current_time:
            warnings.warn(
                f"max_time ({max_time}) is before current time ({self._current_time}), "
                "no events will be executed",
                RuntimeWarning,
                stacklevel=2,
            )
        return self.run_until(stop_at_max_time(max_time), log_filter)

    def reset(self) -> None:
        """Discard pending events and the log, and return to the start time.

        The sequence counter keeps counting so ordering stays monotonic over the lifetime of the scheduler.
        """
        if self._running:
            raise RuntimeError("Cannot reset the scheduler while it is running")
        self._events.clear()
        self._log._clear()
        self._current_time = self.start_time

    def _execute_next(self, log_filter: LogFilter | None) -> ExecutionRecord:
        event = heappop(self._events)
        self._current_time = event.scheduled_time
        logger.debug("Executing %r", event)

        outcome = event.run(self)
        record = ExecutionRecord(
            self._current_time, event.context, outcome, event.sequence
        )
        if log_filter is None or log_filter(record):
            self._log._append(record)
        return record

    @contextlib.contextmanager
    def _run_guard(self) -> Iterator[None]:
        if self._running:
            raise RuntimeError("Scheduler is already running, run methods cannot be nested")
        self._running = True
        try:
            yield
        finally:
            self._running = False
