"""Pydantic snapshots of the GitHub REST objects the dashboard reads.

API Reference: https://docs.github.com/en/rest/issues
"""

from datetime import datetime

from pydantic import BaseModel, Field


class GitHubUser(BaseModel):
    """Account that opened or is assigned to an issue.

    API Reference: https://docs.github.com/en/rest/users/users
    """

    login: str = Field(..., description="GitHub username/login (string)")
    id: int = Field(..., description="Unique user identifier (integer)")


class GitHubLabel(BaseModel):
    """Repository label; metadata labels use a ``prefix:value`` name.

    API Reference: https://docs.github.com/en/rest/issues/labels
    """

    name: str = Field(..., description="Name of the label (string)")
    color: str = Field(
        ..., description="Hexadecimal color code without leading # (string)"
    )
    description: str | None = Field(
        None, description="Short description of the label (string, max 100 characters)"
    )


class GitHubIssue(BaseModel):
    """GitHub issue model with the fields the dashboard reads.

    API Reference: https://docs.github.com/en/rest/issues/issues
    """

    number: int = Field(..., description="Issue number within the repository (integer)")
    title: str = Field(..., description="Short description/title of the issue (string)")
    body: str | None = Field(
        None, description="Detailed description of the issue in markdown (string)"
    )
    state: str = Field(..., description="Current state: 'open', 'closed' (string)")
    labels: list[GitHubLabel] = Field(
        default_factory=list, description="Array of labels attached to the issue"
    )
    user: GitHubUser = Field(..., description="Creator/author of the issue")
    assignees: list[GitHubUser] = Field(
        default_factory=list, description="Users assigned to the issue"
    )
    created_at: datetime = Field(
        ..., description="Timestamp of issue creation (ISO 8601)"
    )
    updated_at: datetime = Field(
        ..., description="Timestamp of last issue update (ISO 8601)"
    )
    closed_at: datetime | None = Field(
        None, description="Timestamp the issue was closed, if it is closed"
    )
    repository_name: str | None = Field(
        None, description="Full owner/repo name of the issue's repository"
    )

    @property
    def label_names(self) -> list[str]:
        return [label.name for label in self.labels]
