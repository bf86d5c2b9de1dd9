"""CLI commands for issue metadata stored as labels."""

from typing import NoReturn

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..github_client.client import GitHubClient
from ..metadata.labels import (
    MetadataUpdate,
    all_label_definitions,
    extract_metadata,
    filter_metadata_labels,
    time_spent_bucket,
    update_metadata_labels,
    validate_metadata,
)
from .options import (
    DATA_DIR_OPTION,
    DRY_RUN_OPTION,
    ISSUE_NUMBER_OPTION,
    ORG_OPTION,
    REPO_OPTION,
)
from .time_tracking import tracked_minutes

console = Console()
app = typer.Typer(
    help="Read and write issue metadata (priority, category, size, status, "
    "time spent) stored as prefix:value labels.",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def _fail(message: str) -> NoReturn:
    console.print(f"❌ [red]Error: {escape(message)}[/red]")
    raise typer.Exit(1)


def _client() -> GitHubClient:
    try:
        return GitHubClient()
    except ValueError as e:
        _fail(str(e))


@app.command()
def show(
    org: str = ORG_OPTION,
    repo: str = REPO_OPTION,
    issue_number: int = ISSUE_NUMBER_OPTION,
) -> None:
    """Show the metadata encoded in an issue's labels."""
    client = _client()
    try:
        labels = client.get_issue_labels(org, repo, issue_number)
    except ValueError as e:
        _fail(str(e))

    metadata = extract_metadata(labels)
    table = Table(title=f"{org}/{repo}#{issue_number}")
    table.add_column("Field", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("Priority", metadata.priority)
    table.add_row("Category", metadata.category)
    table.add_row("Size", metadata.estimated_size)
    table.add_row("Status", metadata.status)
    table.add_row("Time spent", metadata.time_spent or "-")
    console.print(table)

    if not filter_metadata_labels(labels):
        console.print("[dim]No metadata labels set, showing defaults[/dim]")


@app.command()
def definitions() -> None:
    """List every metadata label with its color."""
    table = Table(title="Metadata Labels")
    table.add_column("Name", style="green")
    table.add_column("Color")
    table.add_column("Description")
    for definition in all_label_definitions():
        table.add_row(
            definition.name,
            f"[#{definition.color}]■[/] {definition.color}",
            definition.description,
        )
    console.print(table)


@app.command()
def setup(
    org: str = ORG_OPTION,
    repo: str = REPO_OPTION,
    dry_run: bool = DRY_RUN_OPTION,
) -> None:
    """Create any metadata labels missing from a repository."""
    client = _client()
    try:
        labels = client.get_repository_labels(org, repo)
    except ValueError as e:
        _fail(str(e))

    existing = {label.name.lower() for label in labels}
    missing = [d for d in all_label_definitions() if d.name.lower() not in existing]
    if not missing:
        console.print(f"✅ [green]{org}/{repo} already has every metadata label[/green]")
        return

    console.print(f"📋 [blue]{len(missing)} label(s) missing from {org}/{repo}[/blue]")
    for definition in missing:
        if dry_run:
            console.print(f"  Would create {definition.name} (#{definition.color})")
            continue
        try:
            client.create_label(
                org, repo, definition.name, definition.color, definition.description
            )
        except ValueError as e:
            _fail(str(e))
        console.print(f"  [green]✓[/green] Created {definition.name}")


@app.command(name="set")
def set_labels(
    org: str = ORG_OPTION,
    repo: str = REPO_OPTION,
    issue_number: int = ISSUE_NUMBER_OPTION,
    priority: str | None = typer.Option(
        None, "--priority", help="low, medium, high, critical"
    ),
    category: str | None = typer.Option(
        None, "--category", help="frontend, backend, design, testing, docs"
    ),
    size: str | None = typer.Option(
        None, "--size", help="xs, small, medium, large, xl"
    ),
    status: str | None = typer.Option(
        None, "--status", help="todo, in-progress, review, done"
    ),
    time_spent: str | None = typer.Option(
        None, "--time-spent", help="none, 0-2h, 2-4h, 4-8h, 8h+"
    ),
    from_tracking: bool = typer.Option(
        False,
        "--from-tracking",
        help="Set time-spent from the time recorded locally for this issue",
    ),
    data_dir: str | None = DATA_DIR_OPTION,
    dry_run: bool = DRY_RUN_OPTION,
) -> None:
    """Update metadata labels on an issue.

    Only the fields given are changed. Other labels are kept as they are.

    Examples:
        issue-dashboard labels set -o myorg -r myrepo -i 12 --priority high
        issue-dashboard labels set -o myorg -r myrepo -i 12 --from-tracking
    """
    if from_tracking and time_spent:
        _fail("Use either --time-spent or --from-tracking, not both")
    if from_tracking:
        minutes = tracked_minutes(data_dir, issue_number, f"{org}/{repo}")
        time_spent = time_spent_bucket(minutes)
        console.print(f"⏱  {minutes} minutes tracked, time-spent:{time_spent}")

    update = MetadataUpdate(
        priority=priority,
        category=category,
        estimated_size=size,
        status=status,
        time_spent=time_spent,
    )
    errors = validate_metadata(update)
    if errors:
        for error in errors:
            console.print(f"❌ [red]{error}[/red]")
        raise typer.Exit(1)
    if not any(update.model_dump().values()):
        _fail("Nothing to change")

    client = _client()
    try:
        current = client.get_issue_labels(org, repo, issue_number)
    except ValueError as e:
        _fail(str(e))
    labels = update_metadata_labels(current, update)

    added = [label for label in labels if label not in current]
    removed = [label for label in current if label not in labels]
    for label in added:
        console.print(f"  [green]+ {label}[/green]")
    for label in removed:
        console.print(f"  [red]- {label}[/red]")
    if not added and not removed:
        console.print("✅ [green]Labels already up to date[/green]")
        return
    if dry_run:
        console.print("[yellow]Dry run, no changes applied[/yellow]")
        return

    try:
        client.update_issue_labels(org, repo, issue_number, labels)
    except ValueError as e:
        _fail(str(e))
    console.print(f"✅ [green]Updated labels on {org}/{repo}#{issue_number}[/green]")
