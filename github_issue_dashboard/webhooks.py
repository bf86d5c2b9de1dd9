"""GitHub webhook handling.

Issue events re-parse the issue body so dependency views follow edits made
on GitHub, and label changes carry the issue's label metadata. Both are
published on the dashboard event channel.
"""

import hashlib
import hmac
import logging
from typing import Any

from .dependencies.parser import DependencyParser
from .metadata.labels import extract_metadata
from .notifications import DashboardEvent, EventBroadcaster

logger = logging.getLogger(__name__)

ISSUE_BODY_ACTIONS = frozenset({"opened", "edited", "closed", "reopened"})
ISSUE_LABEL_ACTIONS = frozenset({"labeled", "unlabeled"})

DEPENDENCIES_UPDATED = "issue.dependencies_updated"
ISSUE_LABELS_UPDATED = "issue.labels_updated"
REPOSITORY_LABELS_CHANGED = "repository.labels_changed"


def verify_signature(body: bytes, signature: str | None, secret: str | None) -> bool:
    """Check an ``X-Hub-Signature-256`` header against the raw request body.

    Without a configured secret every delivery is rejected.
    """
    if not secret or not signature:
        return False
    digest = hmac.new(secret.encode(), body, hashlib.sha256).hexdigest()
    return hmac.compare_digest(f"sha256={digest}", signature)


def _label_names(issue: dict[str, Any]) -> list[str]:
    return [label["name"] for label in issue.get("labels") or [] if "name" in label]


def process_issue_event(
    payload: dict[str, Any],
    events: EventBroadcaster,
    parser: DependencyParser | None = None,
) -> DashboardEvent | None:
    """Publish what an ``issues`` delivery changed.

    Returns:
        The published event, or None when the action carries nothing the
        dashboard shows or the payload lacks the issue or repository
    """
    issue = payload.get("issue")
    repository = payload.get("repository")
    if not issue or not repository:
        logger.warning("Ignoring issue event without issue or repository")
        return None

    action = payload.get("action")
    full_name = repository.get("full_name")
    number = issue.get("number")

    if action in ISSUE_BODY_ACTIONS:
        parser = parser or DependencyParser()
        dependencies = parser.parse(issue.get("body"), full_name)
        logger.info(
            f"Issue {full_name}#{number} {action}: "
            f"{len(dependencies)} dependencies"
        )
        return events.publish(
            DEPENDENCIES_UPDATED,
            {
                "action": action,
                "repository": full_name,
                "issueNumber": number,
                "state": issue.get("state"),
                "dependencies": [
                    d.model_dump(mode="json", by_alias=True) for d in dependencies
                ],
            },
        )

    if action in ISSUE_LABEL_ACTIONS:
        labels = _label_names(issue)
        return events.publish(
            ISSUE_LABELS_UPDATED,
            {
                "action": action,
                "repository": full_name,
                "issueNumber": number,
                "labels": labels,
                "metadata": extract_metadata(labels).model_dump(
                    mode="json", by_alias=True
                ),
            },
        )

    logger.debug(f"Ignoring issue action {action}")
    return None


def process_webhook_event(
    event_type: str,
    payload: dict[str, Any],
    events: EventBroadcaster,
    parser: DependencyParser | None = None,
) -> DashboardEvent | None:
    """Dispatch one delivery by its ``X-GitHub-Event`` type."""
    if event_type == "issues":
        return process_issue_event(payload, events, parser)

    if event_type == "label":
        label = payload.get("label") or {}
        repository = payload.get("repository") or {}
        return events.publish(
            REPOSITORY_LABELS_CHANGED,
            {
                "action": payload.get("action"),
                "repository": repository.get("full_name"),
                "label": label.get("name"),
            },
        )

    logger.debug(f"Ignoring webhook event {event_type}")
    return None
