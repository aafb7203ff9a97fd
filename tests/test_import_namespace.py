"""Test if namespaces importing work."""


def test_import():
    """This tests the top level desru namespace."""
    import desru  # noqa: PLC0415
    from desru.scheduler import EventScheduler  # noqa: PLC0415

    assert desru.EventScheduler is EventScheduler
    assert desru.Event is not None
    assert desru.InvalidSchedule is not None
    assert isinstance(desru.__version__, str)
