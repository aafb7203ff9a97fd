"""Tests for events.py."""

import math
from unittest.mock import MagicMock

import pytest

from desru import Event, EventScheduler, InvalidSchedule


def test_event_init():
    """Test Event initialization."""
    event = Event(5.0)

    assert event.scheduled_time == 5.0
    assert event.action is None
    assert event.context == {}
    assert event.sequence is None
    assert event.active
    assert not event.is_scheduled
    assert not event.executed

    # integer times are stored as floats
    event = Event(3)
    assert isinstance(event.scheduled_time, float)


def test_event_context_is_copied():
    """Test that the event keeps its own copy of the context."""
    context = {"key": "value"}
    event = Event(1.0, None, context)
    context["key"] = "changed"

    assert event.context == {"key": "value"}


@pytest.mark.parametrize("time", [math.nan, math.inf, -math.inf])
def test_event_rejects_non_finite_time(time):
    """Test that non-finite times are rejected on construction."""
    with pytest.raises(InvalidSchedule, match="finite"):
        Event(time)


def test_event_rejects_invalid_arguments():
    """Test that non-numeric times and non-callable actions are rejected."""
    with pytest.raises(InvalidSchedule, match="real number"):
        Event("5")
    with pytest.raises(InvalidSchedule):
        Event(True)
    with pytest.raises(TypeError, match="action must be callable"):
        Event(1.0, "not callable")


def test_invalid_schedule_reason():
    """Test that InvalidSchedule carries its reason and is a ValueError."""
    error = InvalidSchedule("bad time")
    assert error.reason == "bad time"
    assert str(error) == "bad time"
    assert isinstance(error, ValueError)


def test_event_run():
    """Test running an event directly."""
    scheduler = EventScheduler()
    action = MagicMock(return_value="Executed")
    event = Event(0.0, action, None)

    assert event.run(scheduler) == "Executed"
    action.assert_called_once_with(scheduler)
    assert event.executed
    # the action is dropped once used
    assert event.action is None


def test_event_run_only_once():
    """Test that an event cannot be executed twice."""
    scheduler = EventScheduler()
    action = MagicMock(return_value="Executed")
    event = Event(0.0, action)
    event.run(scheduler)

    with pytest.raises(RuntimeError, match="already been executed"):
        event.run(scheduler)
    action.assert_called_once()


def test_time_marker_event_run():
    """Test that an event without action returns None."""
    assert Event(0.0).run(EventScheduler()) is None


def test_inactive_event_run():
    """Test activate and deactivate."""
    scheduler = EventScheduler()
    action = MagicMock(return_value="Executed")
    event = Event(0.0, action)

    event.deactivate()
    assert not event.active
    event.activate()
    assert event.active

    event.deactivate()
    assert event.run(scheduler) is None
    action.assert_not_called()


def test_event_ordering():
    """Test comparison of scheduled events for sorting."""
    scheduler = EventScheduler()

    event1 = scheduler.schedule(Event(10.0))
    event2 = scheduler.schedule(Event(10.0))
    assert event1 < event2  # based on just sequence as tiebreaker

    event1 = scheduler.schedule(Event(11.0))
    event2 = scheduler.schedule(Event(10.0))
    assert event2 < event1


def test_event_repr():
    """Test that the representation shows time, sequence and context."""
    event = Event(2.5, lambda s: None, {"name": "a"})
    assert repr(event) == "Event(time=2.5, sequence=None, active=True, context={'name': 'a'})"
