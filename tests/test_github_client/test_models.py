"""Tests for GitHub client models."""

from datetime import datetime

import pytest
from pydantic import ValidationError

from github_issue_dashboard.github_client.models import (
    GitHubIssue,
    GitHubLabel,
    GitHubUser,
)


class TestGitHubUser:
    """Test GitHubUser model."""

    def test_valid_user(self) -> None:
        user = GitHubUser(login="testuser", id=12345)
        assert user.login == "testuser"
        assert user.id == 12345

    def test_missing_fields(self) -> None:
        with pytest.raises(ValidationError):
            GitHubUser(login="testuser")  # type: ignore[call-arg]


class TestGitHubLabel:
    """Test GitHubLabel model."""

    def test_label_without_description(self) -> None:
        label = GitHubLabel(name="enhancement", color="00ff00")
        assert label.description is None

    def test_missing_required_fields(self) -> None:
        with pytest.raises(ValidationError):
            GitHubLabel(name="bug")  # type: ignore[call-arg]


class TestGitHubIssue:
    """Test GitHubIssue model."""

    def test_defaults_and_label_names(self) -> None:
        issue = GitHubIssue(
            number=1,
            title="Add login",
            state="open",
            labels=[
                GitHubLabel(name="bug", color="ff0000"),
                GitHubLabel(name="priority:high", color="D93F0B"),
            ],
            user=GitHubUser(login="dev", id=1),
            created_at=datetime(2024, 1, 1),
            updated_at=datetime(2024, 1, 1),
        )

        assert issue.body is None
        assert issue.assignees == []
        assert issue.closed_at is None
        assert issue.label_names == ["bug", "priority:high"]
