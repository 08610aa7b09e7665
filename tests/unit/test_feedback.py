"""Tests for the feedback signal bus."""

from __future__ import annotations

from guildhall.feedback import FeedbackBus, FeedbackSignal


def test_handlers_receive_signals_in_order():
    bus = FeedbackBus()
    received: list[tuple[str, FeedbackSignal]] = []
    bus.subscribe(lambda signal: received.append(("first", signal)))
    bus.subscribe(lambda signal: received.append(("second", signal)))

    bus.publish(FeedbackSignal.LEVEL_UP)

    assert received == [("first", FeedbackSignal.LEVEL_UP), ("second", FeedbackSignal.LEVEL_UP)]


def test_failing_handler_is_isolated(caplog):
    bus = FeedbackBus()
    received: list[FeedbackSignal] = []

    def broken(signal: FeedbackSignal) -> None:
        raise RuntimeError("speaker unplugged")

    bus.subscribe(broken)
    bus.subscribe(received.append)

    bus.publish(FeedbackSignal.SAVE_COMPLETED)

    assert received == [FeedbackSignal.SAVE_COMPLETED]
    errors = bus.last_publish_errors()
    assert len(errors) == 1 and "speaker unplugged" in str(errors[0])
    assert "feedback handler" in caplog.text


def test_errors_reset_on_next_publish():
    bus = FeedbackBus()
    calls = []

    def flaky(signal: FeedbackSignal) -> None:
        calls.append(signal)
        if len(calls) == 1:
            raise ValueError("first call fails")

    bus.subscribe(flaky)
    bus.publish(FeedbackSignal.ERROR)
    bus.publish(FeedbackSignal.ERROR)

    assert bus.last_publish_errors() == []


def test_unsubscribe():
    bus = FeedbackBus()
    received: list[FeedbackSignal] = []
    bus.subscribe(received.append)
    bus.unsubscribe(received.append)
    bus.unsubscribe(received.append)

    bus.publish(FeedbackSignal.WEEK_ADVANCED)

    assert received == []
