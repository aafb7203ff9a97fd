"""Core event type for desru's discrete event simulation.

An Event pairs a simulated time with an optional action and a free-form
string context. Events are handed to an EventScheduler, which assigns them a
sequence number and executes them exactly once in ``(time, sequence)`` order.

The module contains two components:
- InvalidSchedule: the error raised when an event cannot be scheduled
- Event: a single scheduled unit of work
"""

from __future__ import annotations

import math
import numbers
from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, TypeAlias

if TYPE_CHECKING:
    from desru.scheduler import EventScheduler

Action: TypeAlias = Callable[["EventScheduler"], str | None]

__all__ = ["Action", "Event", "InvalidSchedule"]


class InvalidSchedule(ValueError):  # noqa: N818
    """Raised when an event cannot be placed on the pending queue.

    Attributes:
        reason (str): human readable explanation of the rejection
    """

    def __init__(self, reason: str) -> None:
        """Initialize the error.

        Args:
            reason: why the schedule was rejected
        """
        super().__init__(reason)
        self.reason = reason


def check_time(time: float) -> float:
    """Return ``time`` as a float, raising InvalidSchedule if it is not finite."""
    if isinstance(time, bool) or not isinstance(time, numbers.Real):
        raise InvalidSchedule(f"event time must be a real number, got {time!r}")
    if not math.isfinite(time):
        raise InvalidSchedule(f"event time must be finite, got {time}")
    return float(time)


class Event:
    """A simulation event.

    Attributes:
        scheduled_time (float): The simulated time at which the event is due
        context (dict[str, str]): Metadata attached by the creator of the event
        sequence (int | None): Tie-breaker assigned by the scheduler, None until scheduled
        active (bool): Whether the action is invoked when the event is executed

    Notes:
        The action receives the scheduler executing the event and may schedule
        further events on it. It is invoked at most once; the event drops its
        reference to the action after execution.

        An inactive event is still popped and logged at its time, with outcome None.

    """

    __slots__ = ("_action", "_executed", "_scheduled_time", "_sequence", "active", "context")

    def __init__(
        self,
        scheduled_time: float,
        action: Action | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        """Initialize a simulation event.

        Args:
            scheduled_time: the instant of simulated time the event is due
            action: the callable to invoke with the scheduler, optional
            context: string metadata for the event, optional
        """
        if action is not None and not callable(action):
            raise TypeError("action must be callable or None")

        self._scheduled_time = check_time(scheduled_time)
        self._action = action
        self._sequence: int | None = None
        self._executed = False
        self.context: dict[str, str] = dict(context) if context else {}
        self.active = True

    @property
    def scheduled_time(self) -> float:  # noqa: D102
        return self._scheduled_time

    @property
    def sequence(self) -> int | None:  # noqa: D102
        return self._sequence

    @property
    def action(self) -> Action | None:  # noqa: D102
        return self._action

    @property
    def is_scheduled(self) -> bool:
        """Return whether a scheduler has already taken this event."""
        return self._sequence is not None

    @property
    def executed(self) -> bool:
        """Return whether this event has been run."""
        return self._executed

    def _assign_sequence(self, sequence: int) -> None:
        # only EventScheduler.schedule calls this
        self._sequence = sequence

    def run(self, scheduler: EventScheduler) -> str | None:
        """Execute this event.

        Args:
            scheduler: the scheduler handed to the action

        Returns:
            str | None: the outcome of the action, None if there is no action or the event is inactive

        Raises:
            RuntimeError: if the event has already been run

        """
        if self._executed:
            raise RuntimeError(f"{self!r} has already been executed")
        self._executed = True

        action, self._action = self._action, None
        if not self.active or action is None:
            return None
        return action(scheduler)

    def activate(self) -> None:
        """Invoke the action when this event is executed."""
        self.active = True

    def deactivate(self) -> None:
        """Skip the action when this event is executed."""
        self.active = False

    def __lt__(self, other: Event) -> bool:  # noqa: D105
        # total ordering for heapq, only meaningful once both events are scheduled
        return (self._scheduled_time, self._sequence) < (
            other._scheduled_time,
            other._sequence,
        )

    def __repr__(self) -> str:
        """Return a string representation of the event."""
        return (
            f"Event(time={self._scheduled_time}, sequence={self._sequence}, "
            f"active={self.active}, context={self.context})"
        )
