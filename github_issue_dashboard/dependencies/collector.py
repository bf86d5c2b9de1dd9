"""Collect graph input from GitHub issues."""

import logging

from ..github_client.client import GitHubClient
from ..github_client.models import GitHubIssue
from ..notifications import EventBroadcaster
from .models import IssueWithDependencies
from .parser import DependencyParser

logger = logging.getLogger(__name__)

SYNC_COMPLETED = "dependencies.synced"


def issue_to_graph_input(
    issue: GitHubIssue, repository: str, parser: DependencyParser | None = None
) -> IssueWithDependencies:
    """Parse one GitHub issue's body into a graph input record."""
    parser = parser or DependencyParser()
    state = issue.state if issue.state in ("open", "closed") else None
    return IssueWithDependencies(
        issue_number=issue.number,
        repository=repository,
        title=issue.title,
        state=state,
        dependencies=parser.parse(issue.body, repository),
    )


def collect_repository_dependencies(
    client: GitHubClient,
    org: str,
    repo: str,
    state: str = "open",
    limit: int = 100,
    events: EventBroadcaster | None = None,
) -> list[IssueWithDependencies]:
    """Fetch issues from a repository and parse their dependencies.

    Args:
        client: GitHub client used to list issues
        org: Organization name
        repo: Repository name
        state: Issue state (open, closed, all)
        limit: Maximum number of issues to fetch
        events: Receives a ``dependencies.synced`` event once the issues
            are parsed

    Returns:
        Graph input records, one per issue
    """
    repository = f"{org}/{repo}"
    parser = DependencyParser()
    issues = client.list_issues(org, repo, state=state, limit=limit)

    records = [issue_to_graph_input(issue, repository, parser) for issue in issues]
    with_deps = sum(1 for record in records if record.dependencies)
    logger.info(
        f"Collected {len(records)} issues from {repository}, "
        f"{with_deps} with dependencies"
    )
    if events is not None:
        events.publish(
            SYNC_COMPLETED,
            {
                "repository": repository,
                "state": state,
                "issues": len(records),
                "withDependencies": with_deps,
                "issueNumbers": [record.issue_number for record in records],
            },
        )
    return records


def collect_issue_dependencies(
    client: GitHubClient, org: str, repo: str, issue_number: int
) -> IssueWithDependencies:
    """Fetch one issue and parse its dependencies."""
    issue = client.get_issue(org, repo, issue_number)
    return issue_to_graph_input(issue, f"{org}/{repo}")
