"""PyGithub wrapper for the issue reads and label writes the dashboard needs."""

import logging
import os
import time
from collections.abc import Callable
from typing import TypeVar

from github import Github
from github.GithubException import RateLimitExceededException, UnknownObjectException
from github.Issue import Issue
from github.Label import Label
from github.NamedUser import NamedUser
from github.Repository import Repository

from .models import GitHubIssue, GitHubLabel, GitHubUser

logger = logging.getLogger(__name__)

T = TypeVar("T")

RATE_LIMIT_WAIT_SECONDS = 60


class GitHubClient:
    """Authenticated GitHub access that waits out rate limits."""

    def __init__(self, token: str | None = None):
        """Connect with ``token``, falling back to the GITHUB_TOKEN env var."""
        self.token = token or os.getenv("GITHUB_TOKEN")
        if not self.token:
            raise ValueError(
                "GitHub token is required. Set GITHUB_TOKEN environment variable."
            )

        self.github = Github(self.token)
        self._check_rate_limit()

    def _check_rate_limit(self) -> None:
        """Sleep until the reset when fewer than 10 core requests remain."""
        try:
            rate_limit = self.github.get_rate_limit()
            remaining = rate_limit.core.remaining

            logger.debug(f"GitHub API rate limit: {remaining} requests remaining")

            if remaining < 10:
                reset_time = rate_limit.core.reset.timestamp()
                sleep_time = reset_time - time.time() + 1
                logger.warning(
                    f"Rate limit low, sleeping for {sleep_time:.1f} seconds..."
                )
                time.sleep(sleep_time)

        except Exception as e:
            logger.warning(f"Could not check rate limit: {e}")

    def _with_retry(self, action: str, call: Callable[[], T]) -> T:
        """Run an API call, waiting out rate limits and logging other failures."""
        while True:
            try:
                return call()
            except RateLimitExceededException:
                logger.warning(f"Rate limit exceeded during {action}, waiting...")
                time.sleep(RATE_LIMIT_WAIT_SECONDS)
            except ValueError:
                raise
            except Exception as e:
                logger.error(f"Error during {action}: {e}")
                raise

    def _convert_user(self, github_user: NamedUser) -> GitHubUser:
        return GitHubUser(login=github_user.login, id=github_user.id)

    def _convert_label(self, github_label: Label) -> GitHubLabel:
        return GitHubLabel(
            name=github_label.name,
            color=github_label.color,
            description=github_label.description,
        )

    def _convert_issue(
        self, github_issue: Issue, repository_name: str | None = None
    ) -> GitHubIssue:
        return GitHubIssue(
            number=github_issue.number,
            title=github_issue.title,
            body=github_issue.body,
            state=github_issue.state,
            labels=[self._convert_label(label) for label in github_issue.labels],
            user=self._convert_user(github_issue.user),
            assignees=[self._convert_user(user) for user in github_issue.assignees],
            created_at=github_issue.created_at,
            updated_at=github_issue.updated_at,
            closed_at=github_issue.closed_at,
            repository_name=repository_name,
        )

    def get_repository(self, org: str, repo: str) -> Repository:
        """Look up a repository, raising ValueError when it does not exist."""
        try:
            return self.github.get_repo(f"{org}/{repo}")
        except UnknownObjectException:
            raise ValueError(f"Repository {org}/{repo} not found")

    def _get_github_issue(self, org: str, repo: str, issue_number: int) -> Issue:
        repository = self.get_repository(org, repo)
        try:
            return repository.get_issue(issue_number)
        except UnknownObjectException:
            raise ValueError(f"Issue #{issue_number} not found in {org}/{repo}")

    def get_issue(self, org: str, repo: str, issue_number: int) -> GitHubIssue:
        """Get a specific issue with its body and labels.

        Raises:
            ValueError: If repository or issue not found
        """
        self._check_rate_limit()

        def fetch() -> GitHubIssue:
            github_issue = self._get_github_issue(org, repo, issue_number)
            return self._convert_issue(github_issue, f"{org}/{repo}")

        return self._with_retry(f"fetch of issue #{issue_number}", fetch)

    def list_issues(
        self, org: str, repo: str, state: str = "open", limit: int = 100
    ) -> list[GitHubIssue]:
        """List issues in a repository, skipping pull requests.

        Args:
            org: Organization name
            repo: Repository name
            state: Issue state (open, closed, all)
            limit: Maximum number of issues to return

        Returns:
            List of GitHubIssue objects, newest first
        """
        self._check_rate_limit()

        def fetch() -> list[GitHubIssue]:
            repository = self.get_repository(org, repo)
            issues: list[GitHubIssue] = []
            for github_issue in repository.get_issues(state=state):
                if len(issues) >= limit:
                    break
                if github_issue.pull_request is not None:
                    continue
                issues.append(self._convert_issue(github_issue, f"{org}/{repo}"))
            logger.info(f"Fetched {len(issues)} {state} issues from {org}/{repo}")
            return issues

        return self._with_retry(f"issue listing for {org}/{repo}", fetch)

    def get_issue_labels(self, org: str, repo: str, issue_number: int) -> list[str]:
        """Get current label names for an issue.

        Raises:
            ValueError: If repository or issue not found
        """
        self._check_rate_limit()

        def fetch() -> list[str]:
            github_issue = self._get_github_issue(org, repo, issue_number)
            return [label.name for label in github_issue.labels]

        return self._with_retry(f"label fetch for issue #{issue_number}", fetch)

    def update_issue_labels(
        self, org: str, repo: str, issue_number: int, labels: list[str]
    ) -> bool:
        """Replace the full label set of an issue with ``labels``.

        Raises:
            ValueError: If repository or issue not found
        """
        self._check_rate_limit()

        def update() -> bool:
            github_issue = self._get_github_issue(org, repo, issue_number)
            # set_labels replaces every existing label
            github_issue.set_labels(*labels)
            logger.info(f"Updated labels for issue #{issue_number}: {labels}")
            return True

        return self._with_retry(f"label update for issue #{issue_number}", update)

    def get_repository_labels(self, org: str, repo: str) -> list[GitHubLabel]:
        """Get all labels defined in a repository."""
        self._check_rate_limit()

        def fetch() -> list[GitHubLabel]:
            repository = self.get_repository(org, repo)
            return [self._convert_label(label) for label in repository.get_labels()]

        return self._with_retry(f"label listing for {org}/{repo}", fetch)

    def create_label(
        self, org: str, repo: str, name: str, color: str, description: str = ""
    ) -> GitHubLabel:
        """Create a label in a repository.

        Args:
            org: Organization name
            repo: Repository name
            name: Label name
            color: Hex color without the leading #
            description: Label description

        Returns:
            The created label
        """
        self._check_rate_limit()

        def create() -> GitHubLabel:
            repository = self.get_repository(org, repo)
            label = repository.create_label(name, color, description)
            logger.info(f"Created label '{name}' in {org}/{repo}")
            return self._convert_label(label)

        return self._with_retry(f"creation of label '{name}'", create)
