"""Tests for GitHub webhook handling."""

import hashlib
import hmac

import pytest

from github_issue_dashboard.notifications import DashboardEvent, EventBroadcaster
from github_issue_dashboard.webhooks import (
    DEPENDENCIES_UPDATED,
    ISSUE_LABELS_UPDATED,
    REPOSITORY_LABELS_CHANGED,
    process_issue_event,
    process_webhook_event,
    verify_signature,
)


def issue_payload(action: str, body: str | None = None, labels=()) -> dict:
    return {
        "action": action,
        "issue": {
            "number": 5,
            "state": "open",
            "body": body,
            "labels": [{"name": name} for name in labels],
        },
        "repository": {"full_name": "acme/app"},
    }


@pytest.fixture
def events() -> EventBroadcaster:
    return EventBroadcaster()


@pytest.fixture
def received(events: EventBroadcaster) -> list[DashboardEvent]:
    received: list[DashboardEvent] = []
    events.subscribe(received.append)
    return received


class TestVerifySignature:
    def test_valid_signature(self) -> None:
        body = b'{"action": "edited"}'
        digest = hmac.new(b"s3cret", body, hashlib.sha256).hexdigest()

        assert verify_signature(body, f"sha256={digest}", "s3cret")

    def test_wrong_secret(self) -> None:
        body = b"{}"
        digest = hmac.new(b"other", body, hashlib.sha256).hexdigest()

        assert not verify_signature(body, f"sha256={digest}", "s3cret")

    def test_missing_header_or_secret(self) -> None:
        assert not verify_signature(b"{}", None, "s3cret")
        assert not verify_signature(b"{}", "sha256=abc", None)


class TestIssueEvents:
    def test_edit_reparses_body(
        self, events: EventBroadcaster, received: list[DashboardEvent]
    ) -> None:
        event = process_issue_event(
            issue_payload("edited", "Depends on: #2\nBlocks: other/lib#9"), events
        )

        assert received == [event]
        assert event.type == DEPENDENCIES_UPDATED
        assert event.data["repository"] == "acme/app"
        assert event.data["issueNumber"] == 5
        assert [
            (d["type"], d["issueNumber"], d.get("repository"))
            for d in event.data["dependencies"]
        ] == [("depends_on", 2, None), ("blocks", 9, "other/lib")]

    def test_edit_removing_references_publishes_empty_list(
        self, events: EventBroadcaster, received: list[DashboardEvent]
    ) -> None:
        process_issue_event(issue_payload("edited", None), events)

        assert received[0].data["dependencies"] == []

    def test_label_change_carries_metadata(
        self, events: EventBroadcaster, received: list[DashboardEvent]
    ) -> None:
        event = process_issue_event(
            issue_payload("labeled", labels=["bug", "priority:high"]), events
        )

        assert event.type == ISSUE_LABELS_UPDATED
        assert event.data["labels"] == ["bug", "priority:high"]
        assert event.data["metadata"]["priority"] == "high"

    def test_missing_repository_is_ignored(
        self, events: EventBroadcaster, received: list[DashboardEvent]
    ) -> None:
        payload = issue_payload("edited", "Depends on: #2")
        del payload["repository"]

        assert process_issue_event(payload, events) is None
        assert received == []

    def test_unhandled_action_is_ignored(
        self, events: EventBroadcaster, received: list[DashboardEvent]
    ) -> None:
        assert process_issue_event(issue_payload("assigned"), events) is None
        assert received == []


class TestDispatch:
    def test_issues_event(
        self, events: EventBroadcaster, received: list[DashboardEvent]
    ) -> None:
        event = process_webhook_event(
            "issues", issue_payload("opened", "Depends on: #3"), events
        )

        assert event.type == DEPENDENCIES_UPDATED

    def test_label_event(
        self, events: EventBroadcaster, received: list[DashboardEvent]
    ) -> None:
        event = process_webhook_event(
            "label",
            {
                "action": "created",
                "label": {"name": "size:xl"},
                "repository": {"full_name": "acme/app"},
            },
            events,
        )

        assert event.type == REPOSITORY_LABELS_CHANGED
        assert event.data == {
            "action": "created",
            "repository": "acme/app",
            "label": "size:xl",
        }

    def test_unknown_event(
        self, events: EventBroadcaster, received: list[DashboardEvent]
    ) -> None:
        assert process_webhook_event("push", {}, events) is None
        assert received == []
