"""Standardized CLI option definitions for consistent shorthand mappings."""

import typer

# GitHub location options
ORG_OPTION = typer.Option(..., "--org", "-o", help="GitHub organization name")

REPO_OPTION = typer.Option(..., "--repo", "-r", help="GitHub repository name")

ISSUE_NUMBER_OPTION = typer.Option(
    ..., "--issue-number", "-i", help="Issue number", min=1
)

ISSUE_NUMBER_OPTION_OPTIONAL = typer.Option(
    None,
    "--issue-number",
    "-i",
    help="Number of the issue the text belongs to (enables the self check)",
    min=1,
)

STATE_OPTION = typer.Option(
    "open", "--state", "-s", help="Issue state: open, closed, or all"
)

LIMIT_OPTION = typer.Option(100, "--limit", help="Maximum number of issues to fetch")

# Time tracking options
FULL_REPO_OPTION = typer.Option(
    ..., "--repo", "-r", help="Repository as owner/repo"
)

FULL_REPO_OPTION_OPTIONAL = typer.Option(
    None, "--repo", "-r", help="Repository as owner/repo"
)

USER_OPTION = typer.Option(
    None,
    "--user",
    "-u",
    envvar="DASHBOARD_USER",
    help="User id to track time for (defaults to the login name)",
)

DESCRIPTION_OPTION = typer.Option(
    None, "--description", "-m", help="What the time was spent on"
)

TAG_OPTION = typer.Option(
    None, "--tag", "-t", help="Tag for the entry (can be used multiple times)"
)

DATA_DIR_OPTION = typer.Option(
    None, "--data-dir", help="Data directory (defaults to DASHBOARD_DATA_DIR or data)"
)

# Output and behavior options
FORMAT_OPTION = typer.Option(
    "table", "--format", "-F", help="Output format: table or json"
)

DRY_RUN_OPTION = typer.Option(
    False, "--dry-run", "-d", help="Preview changes without applying them"
)
