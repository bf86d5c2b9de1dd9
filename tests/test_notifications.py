"""Tests for the dashboard event broadcaster."""

import logging

import pytest

from github_issue_dashboard.notifications import DashboardEvent, EventBroadcaster


class TestEventBroadcaster:
    def test_publish_reaches_subscribers_in_order(self) -> None:
        broadcaster = EventBroadcaster()
        received: list[tuple[str, DashboardEvent]] = []
        broadcaster.subscribe(lambda event: received.append(("first", event)))
        broadcaster.subscribe(lambda event: received.append(("second", event)))

        event = broadcaster.publish("time_entry.created", {"id": "abc"})

        assert [name for name, _ in received] == ["first", "second"]
        assert received[0][1] is event
        assert event.type == "time_entry.created"
        assert event.data == {"id": "abc"}
        assert event.timestamp.tzinfo is not None

    def test_publish_without_subscribers(self) -> None:
        event = EventBroadcaster().publish("noop")

        assert event.data == {}

    def test_unsubscribe(self) -> None:
        broadcaster = EventBroadcaster()
        received = []
        unsubscribe = broadcaster.subscribe(received.append)

        unsubscribe()
        broadcaster.publish("ignored")

        assert received == []
        assert broadcaster.subscriber_count == 0

    def test_unsubscribe_unknown_is_noop(self) -> None:
        EventBroadcaster().unsubscribe(lambda event: None)

    def test_failing_subscriber_does_not_stop_delivery(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        broadcaster = EventBroadcaster()
        received = []

        def broken(event: DashboardEvent) -> None:
            raise RuntimeError("socket closed")

        broadcaster.subscribe(broken)
        broadcaster.subscribe(received.append)

        with caplog.at_level(logging.WARNING):
            broadcaster.publish("time_session.started")

        assert len(received) == 1
        assert "socket closed" in caplog.text
