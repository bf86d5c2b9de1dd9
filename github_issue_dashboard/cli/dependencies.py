"""CLI commands for issue dependency analysis."""

import json
import sys
from pathlib import Path
from typing import NoReturn

import typer
from pydantic import TypeAdapter, ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..config import DashboardConfig
from ..dependencies.collector import (
    collect_issue_dependencies,
    collect_repository_dependencies,
)
from ..dependencies.graph import DependencyGraphBuilder
from ..dependencies.markdown import generate_dependency_markdown
from ..dependencies.models import (
    DependencyGraph,
    GraphMetadata,
    IssueDependency,
    IssueWithDependencies,
    ValidationResult,
)
from ..dependencies.parser import DependencyParser
from ..dependencies.validator import DependencyValidator
from ..github_client.client import GitHubClient
from .options import (
    FORMAT_OPTION,
    ISSUE_NUMBER_OPTION,
    ISSUE_NUMBER_OPTION_OPTIONAL,
    LIMIT_OPTION,
    ORG_OPTION,
    REPO_OPTION,
    STATE_OPTION,
)

console = Console()
app = typer.Typer(
    help="Parse, validate and graph dependencies between GitHub issues.",
    context_settings={"help_option_names": ["-h", "--help"]},
)

_DEPENDENCY_LIST = TypeAdapter(list[IssueDependency])
_ISSUE_LIST = TypeAdapter(list[IssueWithDependencies])


def _fail(message: str) -> NoReturn:
    console.print(f"❌ [red]Error: {escape(message)}[/red]")
    raise typer.Exit(1)


def _read_body(body: str | None, file: Path | None) -> str:
    if body is not None and file is not None:
        _fail("Use either --body or --file, not both")
    if body is not None:
        return body
    if file is not None:
        try:
            return file.read_text(encoding="utf-8")
        except OSError as e:
            _fail(f"Could not read {file}: {e}")
    if sys.stdin.isatty():
        _fail("Provide the issue body with --body, --file, or on stdin")
    return sys.stdin.read()


def _load_json(file: Path, adapter: TypeAdapter):
    try:
        return adapter.validate_json(file.read_bytes())
    except OSError as e:
        _fail(f"Could not read {file}: {e}")
    except ValidationError as e:
        _fail(f"Invalid data in {file}: {e}")


def _print_json(data) -> None:
    console.print_json(json.dumps(data, ensure_ascii=False, default=str))


def _dependency_table(dependencies: list[IssueDependency], title: str) -> Table:
    table = Table(title=title)
    table.add_column("Type", style="cyan")
    table.add_column("Issue", style="green")
    table.add_column("Description")
    for dep in dependencies:
        label = "depends on" if dep.type.value == "depends_on" else "blocks"
        table.add_row(label, dep.reference, dep.description or "")
    return table


def _print_validation(validation: ValidationResult) -> None:
    for error in validation.errors:
        console.print(f"❌ [red]{error}[/red]")
    for warning in validation.warnings:
        console.print(f"⚠️  [yellow]{warning}[/yellow]")
    if validation.is_valid and not validation.warnings:
        console.print("✅ [green]No dependency problems found[/green]")


def _report(
    dependencies: list[IssueDependency],
    validation: ValidationResult,
    output_format: str,
    title: str,
) -> None:
    if output_format == "json":
        _print_json(
            {
                "dependencies": [
                    d.model_dump(mode="json", by_alias=True, exclude_none=True)
                    for d in dependencies
                ],
                "validation": validation.model_dump(mode="json", by_alias=True),
            }
        )
        return

    if dependencies:
        console.print(_dependency_table(dependencies, title))
    else:
        console.print("[yellow]No dependencies found[/yellow]")
    _print_validation(validation)


@app.command()
def parse(
    body: str | None = typer.Option(None, "--body", "-b", help="Issue body text"),
    file: Path | None = typer.Option(
        None, "--file", "-f", help="File containing the issue body"
    ),
    repository: str | None = typer.Option(
        None, "--repository", help="owner/repo the body belongs to"
    ),
    issue_number: int | None = ISSUE_NUMBER_OPTION_OPTIONAL,
    output_format: str = FORMAT_OPTION,
) -> None:
    """Parse dependencies from issue body text.

    The body is read from --body, --file, or standard input.

    Examples:
        issue-dashboard deps parse --body "Depends on: #12, owner/lib#3"
        cat body.md | issue-dashboard deps parse --repository owner/repo
    """
    text = _read_body(body, file)
    dependencies = DependencyParser().parse(text, repository)
    validation = DependencyValidator().validate(dependencies, issue_number, repository)
    _report(dependencies, validation, output_format, "Dependencies")


@app.command()
def show(
    org: str = ORG_OPTION,
    repo: str = REPO_OPTION,
    issue_number: int = ISSUE_NUMBER_OPTION,
    output_format: str = FORMAT_OPTION,
) -> None:
    """Fetch an issue from GitHub and show its dependencies."""
    try:
        client = GitHubClient()
        with console.status(f"[bold green]Fetching {org}/{repo}#{issue_number}..."):
            record = collect_issue_dependencies(client, org, repo, issue_number)
    except ValueError as e:
        _fail(str(e))

    repository = f"{org}/{repo}"
    validation = DependencyValidator().validate(
        record.dependencies, issue_number, repository
    )
    title = f"{repository}#{issue_number}: {record.title or ''}"
    _report(record.dependencies, validation, output_format, title)


def _graph_table(graph: DependencyGraph) -> Table:
    table = Table(title="Dependency Graph")
    table.add_column("Issue", style="green")
    table.add_column("Title")
    table.add_column("State", style="cyan")
    table.add_column("Level", justify="right")
    table.add_column("Needs")

    needs: dict[int, list[str]] = {}
    for edge in graph.edges:
        needs.setdefault(edge.from_, []).append(f"#{edge.to}")

    ordered = sorted(
        graph.nodes, key=lambda n: (-n.level, n.repository, n.issue_number)
    )
    for node in ordered:
        table.add_row(
            f"{node.repository}#{node.issue_number}",
            node.title or "",
            node.state or "",
            str(node.level),
            ", ".join(needs.get(node.issue_number, [])),
        )
    return table


@app.command()
def graph(
    file: Path | None = typer.Option(
        None, "--file", "-f", help="JSON file with a list of issues and dependencies"
    ),
    org: str | None = typer.Option(None, "--org", "-o", help="GitHub organization"),
    repo: str | None = typer.Option(None, "--repo", "-r", help="GitHub repository"),
    state: str = STATE_OPTION,
    limit: int = LIMIT_OPTION,
    by_number: bool | None = typer.Option(
        None,
        "--by-number/--by-repository",
        help="Identify issues by number only when computing levels and cycles",
    ),
    output: Path | None = typer.Option(
        None, "--output", help="Write the graph as JSON to this file"
    ),
    output_format: str = FORMAT_OPTION,
) -> None:
    """Build a dependency graph from a JSON file or a GitHub repository.

    Examples:
        issue-dashboard deps graph --file issues.json
        issue-dashboard deps graph --org myorg --repo myrepo --state all
    """
    if file is None and not (org and repo):
        _fail("Provide --file, or both --org and --repo")
    if file is not None and (org or repo):
        _fail("Use either --file or --org/--repo, not both")

    if file is not None:
        issues = _load_json(file, _ISSUE_LIST)
    else:
        try:
            client = GitHubClient()
            with console.status(f"[bold green]Collecting issues from {org}/{repo}..."):
                issues = collect_repository_dependencies(
                    client, org, repo, state=state, limit=limit
                )
        except ValueError as e:
            _fail(str(e))

    if by_number is None:
        by_number = DashboardConfig().level_by_number
    dependency_graph = DependencyGraphBuilder(match_by_number_only=by_number).build(
        issues
    )
    metadata = GraphMetadata.from_graph(dependency_graph)
    payload = {
        "graph": dependency_graph.model_dump(mode="json", by_alias=True),
        "metadata": metadata.model_dump(mode="json", by_alias=True),
    }

    if output is not None:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(json.dumps(payload, indent=2, ensure_ascii=False))
        console.print(f"[green]✓[/green] Saved graph to {output}")

    if output_format == "json":
        _print_json(payload)
        return

    console.print(_graph_table(dependency_graph))
    console.print(
        f"Nodes: {metadata.total_nodes}  Edges: {metadata.total_edges}  "
        f"Max level: {metadata.max_level}"
    )
    if dependency_graph.cycles:
        for cycle in dependency_graph.cycles:
            path = " → ".join(f"#{n}" for n in cycle)
            console.print(f"⚠️  [yellow]Cycle: {path}[/yellow]")
    else:
        console.print("✅ [green]No cycles detected[/green]")


@app.command()
def validate(
    file: Path = typer.Option(
        ..., "--file", "-f", help="JSON file with a list of dependencies"
    ),
    issue_number: int | None = ISSUE_NUMBER_OPTION_OPTIONAL,
    repository: str | None = typer.Option(
        None, "--repository", help="owner/repo of the issue the list belongs to"
    ),
    output_format: str = FORMAT_OPTION,
) -> None:
    """Check a dependency list for self references, duplicates and conflicts."""
    dependencies = _load_json(file, _DEPENDENCY_LIST)
    validation = DependencyValidator().validate(dependencies, issue_number, repository)
    _report(dependencies, validation, output_format, "Dependencies")
    if not validation.is_valid:
        raise typer.Exit(1)


@app.command()
def markdown(
    file: Path | None = typer.Option(
        None, "--file", "-f", help="JSON file with a list of dependencies"
    ),
    body: str | None = typer.Option(
        None, "--body", "-b", help="Issue body to re-render the dependencies of"
    ),
) -> None:
    """Render dependencies as a ``## Dependencies`` markdown section."""
    if (file is None) == (body is None):
        _fail("Provide exactly one of --file or --body")

    if file is not None:
        dependencies = _load_json(file, _DEPENDENCY_LIST)
    else:
        dependencies = DependencyParser().parse(body)

    text = generate_dependency_markdown(dependencies)
    if not text:
        console.print("[yellow]No dependencies to render[/yellow]")
        return
    typer.echo(text)
