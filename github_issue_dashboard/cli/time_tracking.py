"""CLI commands for tracking time spent on issues.

State is kept in a JSON file under the data directory so that sessions
survive between invocations.
"""

import getpass
import json
from contextlib import contextmanager
from collections.abc import Iterator
from pathlib import Path
from typing import NoReturn

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..config import DashboardConfig
from ..storage.manager import TimeTrackingStorage
from ..time_tracking.durations import format_duration, parse_duration
from ..time_tracking.models import TimeEntry, TimeEntryFilter, TimeEntryUpdate
from ..time_tracking.report import summarize
from ..time_tracking.session_manager import TimeSessionManager, minutes_between
from ..utils.date_parser import (
    parse_date_input,
    parse_end_date_input,
    resolve_report_range,
)
from .options import (
    DATA_DIR_OPTION,
    DESCRIPTION_OPTION,
    FORMAT_OPTION,
    FULL_REPO_OPTION,
    FULL_REPO_OPTION_OPTIONAL,
    TAG_OPTION,
    USER_OPTION,
)

console = Console()
app = typer.Typer(
    help="Track time spent on issues. Use 'start', 'pause', 'resume' and 'stop' "
    "for live sessions, 'log' for manual entries and 'report' for summaries.",
    context_settings={"help_option_names": ["-h", "--help"]},
)

ISSUE_ARGUMENT = typer.Argument(..., help="Issue number", min=1)


def _fail(message: str) -> NoReturn:
    console.print(f"❌ [red]Error: {escape(message)}[/red]")
    raise typer.Exit(1)


def _user(user: str | None) -> str:
    return user or getpass.getuser()


def _storage(data_dir: str | None) -> TimeTrackingStorage:
    config = DashboardConfig()
    if data_dir:
        config.data_dir = Path(data_dir)
    return TimeTrackingStorage(config.time_tracking_file)


@contextmanager
def _tracker(data_dir: str | None, save: bool = True) -> Iterator[TimeSessionManager]:
    """Load the stored state, yield a manager over it, then save it back."""
    storage = _storage(data_dir)
    try:
        snapshot = storage.load()
    except ValueError as e:
        _fail(str(e))
    manager = TimeSessionManager()
    manager.restore(snapshot)
    yield manager
    if save:
        storage.save(manager.snapshot())


def _entries_table(entries: list[TimeEntry], title: str = "Time Entries") -> Table:
    table = Table(title=title)
    table.add_column("ID", style="dim")
    table.add_column("Issue", style="green")
    table.add_column("User", style="cyan")
    table.add_column("Start")
    table.add_column("Duration", justify="right")
    table.add_column("Description")
    table.add_column("Tags")
    for entry in entries:
        table.add_row(
            entry.id[:8],
            f"{entry.repository}#{entry.issue_number}",
            entry.user_id,
            entry.start_time.strftime("%Y-%m-%d %H:%M"),
            format_duration(entry.duration),
            entry.description or "",
            ", ".join(entry.tags or []),
        )
    return table


def _print_json(data) -> None:
    console.print_json(json.dumps(data, ensure_ascii=False, default=str))


def _find_entry_id(manager: TimeSessionManager, prefix: str) -> str:
    matches = [
        entry.id for entry in manager.get_time_entries() if entry.id.startswith(prefix)
    ]
    if not matches:
        _fail(f"No time entry with id {prefix}")
    if len(matches) > 1:
        _fail(f"Id prefix {prefix} matches {len(matches)} entries, use more characters")
    return matches[0]


@app.command()
def start(
    issue_number: int = ISSUE_ARGUMENT,
    repo: str = FULL_REPO_OPTION,
    user: str | None = USER_OPTION,
    description: str | None = DESCRIPTION_OPTION,
    data_dir: str | None = DATA_DIR_OPTION,
) -> None:
    """Start tracking time on an issue.

    Any session you already have running or paused is stopped first.
    """
    user_id = _user(user)
    with _tracker(data_dir) as manager:
        previous = manager.get_active_session(user_id)
        session = manager.start_session(issue_number, repo, user_id, description)

    if previous is not None:
        console.print(
            f"⏹  Stopped previous session on "
            f"{previous.repository}#{previous.issue_number}"
        )
    console.print(
        f"[green]✓[/green] Started tracking {session.repository}#"
        f"{session.issue_number} for {user_id}"
    )


@app.command()
def pause(
    issue_number: int = ISSUE_ARGUMENT,
    repo: str = FULL_REPO_OPTION,
    user: str | None = USER_OPTION,
    data_dir: str | None = DATA_DIR_OPTION,
) -> None:
    """Pause your active session on an issue."""
    with _tracker(data_dir) as manager:
        session = manager.pause_session(issue_number, repo, _user(user))
    if session is None:
        _fail(f"No active session on {repo}#{issue_number}")
    console.print(f"⏸  Paused {repo}#{issue_number}")


@app.command()
def resume(
    issue_number: int = ISSUE_ARGUMENT,
    repo: str = FULL_REPO_OPTION,
    user: str | None = USER_OPTION,
    data_dir: str | None = DATA_DIR_OPTION,
) -> None:
    """Resume your paused session on an issue."""
    with _tracker(data_dir) as manager:
        session = manager.resume_session(issue_number, repo, _user(user))
    if session is None:
        _fail(f"No paused session on {repo}#{issue_number}")
    console.print(f"▶  Resumed {repo}#{issue_number}")


@app.command()
def stop(
    issue_number: int = ISSUE_ARGUMENT,
    repo: str = FULL_REPO_OPTION,
    user: str | None = USER_OPTION,
    description: str | None = DESCRIPTION_OPTION,
    data_dir: str | None = DATA_DIR_OPTION,
) -> None:
    """Stop your session on an issue and record the time."""
    with _tracker(data_dir) as manager:
        entry = manager.stop_session(issue_number, repo, _user(user), description)
    if entry is None:
        _fail(f"No session on {repo}#{issue_number}")
    console.print(
        f"[green]✓[/green] Recorded {format_duration(entry.duration)} on "
        f"{repo}#{issue_number}"
    )


@app.command()
def log(
    issue_number: int = ISSUE_ARGUMENT,
    duration: str = typer.Argument(..., help="Duration, e.g. 45m, 2h or '1h 30m'"),
    repo: str = FULL_REPO_OPTION,
    user: str | None = USER_OPTION,
    description: str | None = DESCRIPTION_OPTION,
    start_time: str | None = typer.Option(
        None, "--start", help="When the work started (defaults to now)"
    ),
    tag: list[str] | None = TAG_OPTION,
    data_dir: str | None = DATA_DIR_OPTION,
) -> None:
    """Record time spent without a live session."""
    try:
        minutes = parse_duration(duration)
        started = parse_date_input(start_time) if start_time else None
    except ValueError as e:
        _fail(str(e))

    with _tracker(data_dir) as manager:
        entry = manager.add_manual_entry(
            issue_number,
            repo,
            _user(user),
            minutes,
            description=description,
            start_time=started,
            tags=tag or None,
        )
    console.print(
        f"[green]✓[/green] Logged {format_duration(entry.duration)} on "
        f"{repo}#{issue_number} ({entry.id[:8]})"
    )


@app.command()
def status(
    user: str | None = USER_OPTION,
    data_dir: str | None = DATA_DIR_OPTION,
) -> None:
    """Show your current session."""
    user_id = _user(user)
    with _tracker(data_dir, save=False) as manager:
        session = manager.get_active_session(user_id)
        now = manager.now()

    if session is None:
        console.print(f"No session running for {user_id}")
        return

    state = "[green]active[/green]" if session.is_active else "[yellow]paused[/yellow]"
    elapsed = format_duration(max(0, minutes_between(session.start_time, now)))
    console.print(
        f"{session.repository}#{session.issue_number} ({state}) "
        f"started {session.start_time.strftime('%Y-%m-%d %H:%M')} UTC, {elapsed} ago"
    )
    if session.description:
        console.print(f"  {session.description}")


def _filter(
    issue_number: int | None,
    repo: str | None,
    user: str | None,
    tag: list[str] | None,
) -> TimeEntryFilter:
    return TimeEntryFilter(
        issue_number=issue_number, repository=repo, user_id=user, tags=tag or None
    )


@app.command()
def entries(
    issue_number: int | None = typer.Option(
        None, "--issue-number", "-i", help="Filter by issue number"
    ),
    repo: str | None = FULL_REPO_OPTION_OPTIONAL,
    user: str | None = typer.Option(None, "--user", "-u", help="Filter by user"),
    tag: list[str] | None = TAG_OPTION,
    start: str | None = typer.Option(None, "--start", help="Entries starting after"),
    end: str | None = typer.Option(None, "--end", help="Entries starting before"),
    limit: int = typer.Option(20, "--limit", help="Maximum number of entries"),
    output_format: str = FORMAT_OPTION,
    data_dir: str | None = DATA_DIR_OPTION,
) -> None:
    """List recorded time entries, newest first."""
    entry_filter = _filter(issue_number, repo, user, tag)
    try:
        if start:
            entry_filter.start_date = parse_date_input(start)
        if end:
            entry_filter.end_date = parse_end_date_input(end)
    except ValueError as e:
        _fail(str(e))

    with _tracker(data_dir, save=False) as manager:
        found = manager.get_time_entries(entry_filter)[:limit]

    if output_format == "json":
        _print_json([e.model_dump(mode="json", by_alias=True) for e in found])
        return
    if not found:
        console.print("[yellow]No time entries found[/yellow]")
        return
    console.print(_entries_table(found))


@app.command()
def edit(
    entry_id: str = typer.Argument(..., help="Entry id or unique id prefix"),
    duration: str | None = typer.Option(None, "--duration", help="New duration"),
    description: str | None = DESCRIPTION_OPTION,
    tag: list[str] | None = TAG_OPTION,
    start: str | None = typer.Option(None, "--start", help="New start time"),
    end: str | None = typer.Option(None, "--end", help="New end time"),
    data_dir: str | None = DATA_DIR_OPTION,
) -> None:
    """Change a recorded time entry."""
    changes: dict = {}
    try:
        if duration:
            changes["duration"] = parse_duration(duration)
        if start:
            changes["start_time"] = parse_date_input(start)
        if end:
            changes["end_time"] = parse_date_input(end)
    except ValueError as e:
        _fail(str(e))
    if description is not None:
        changes["description"] = description
    if tag:
        changes["tags"] = tag
    if not changes:
        _fail("Nothing to change")

    with _tracker(data_dir) as manager:
        full_id = _find_entry_id(manager, entry_id)
        try:
            entry = manager.update_time_entry(full_id, TimeEntryUpdate(**changes))
        except ValueError as e:
            _fail(str(e))

    console.print(
        f"[green]✓[/green] Updated {entry.id[:8]}: {format_duration(entry.duration)}"
    )


@app.command()
def delete(
    entry_id: str = typer.Argument(..., help="Entry id or unique id prefix"),
    data_dir: str | None = DATA_DIR_OPTION,
) -> None:
    """Delete a recorded time entry."""
    with _tracker(data_dir) as manager:
        full_id = _find_entry_id(manager, entry_id)
        manager.delete_time_entry(full_id)
    console.print(f"[green]✓[/green] Deleted {full_id[:8]}")


def _summary_table(title: str, rows: dict) -> Table:
    table = Table(title=title)
    table.add_column("Key", style="green")
    table.add_column("Total", justify="right")
    table.add_column("Entries", justify="right")
    table.add_column("Average", justify="right")
    for key, summary in rows.items():
        table.add_row(
            str(key),
            format_duration(summary.total_minutes),
            str(summary.entries_count),
            format_duration(summary.average_session_minutes),
        )
    return table


@app.command()
def report(
    start: str | None = typer.Option(None, "--start", help="Report start date"),
    end: str | None = typer.Option(None, "--end", help="Report end date (inclusive)"),
    last_days: int | None = typer.Option(None, "--last-days", help="Last N days"),
    last_weeks: int | None = typer.Option(None, "--last-weeks", help="Last N weeks"),
    last_months: int | None = typer.Option(
        None, "--last-months", help="Last N months"
    ),
    repo: str | None = FULL_REPO_OPTION_OPTIONAL,
    user: str | None = typer.Option(None, "--user", "-u", help="Filter by user"),
    tag: list[str] | None = TAG_OPTION,
    output_format: str = FORMAT_OPTION,
    data_dir: str | None = DATA_DIR_OPTION,
) -> None:
    """Summarize time spent by issue, user and day.

    Without date options the report covers the last 7 days.

    Examples:
        issue-dashboard time report --last-weeks 2
        issue-dashboard time report --start 2024-01-01 --end 2024-01-31
    """
    try:
        range_start, range_end = resolve_report_range(
            start, end, last_days, last_weeks, last_months
        )
    except ValueError as e:
        _fail(str(e))

    with _tracker(data_dir, save=False) as manager:
        time_report = manager.generate_report(
            range_start, range_end, _filter(None, repo, user, tag)
        )

    if output_format == "json":
        _print_json(time_report.model_dump(mode="json", by_alias=True))
        return

    summary = time_report.summary
    console.print(
        f"[bold]Time report ({time_report.period.type})[/bold] "
        f"{range_start:%Y-%m-%d} to {range_end:%Y-%m-%d}"
    )
    console.print(
        f"Total: {format_duration(summary.total_minutes)} "
        f"({summary.total_hours}h) in {summary.entries_count} entries "
        f"over {summary.active_days} days"
    )
    if not summary.entries_count:
        return

    console.print(_summary_table("By Issue", time_report.by_issue))
    console.print(_summary_table("By User", time_report.by_user))
    console.print(_summary_table("By Day", dict(sorted(time_report.by_day.items()))))


def tracked_minutes(
    data_dir: str | None, issue_number: int, repository: str
) -> int:
    """Total minutes recorded locally for an issue."""
    with _tracker(data_dir, save=False) as manager:
        return summarize(
            manager.get_time_entries(
                TimeEntryFilter(issue_number=issue_number, repository=repository)
            )
        ).total_minutes
