"""Dependency analysis endpoints."""

import logging
from typing import Literal

from fastapi import APIRouter, Depends
from pydantic import Field, PositiveInt

from ...dependencies.collector import collect_repository_dependencies
from ...dependencies.markdown import generate_dependency_markdown
from ...dependencies.models import (
    DependencyType,
    GraphMetadata,
    IssueDependency,
    IssueWithDependencies,
    ValidationResult,
)
from ...github_client.client import GitHubClient
from ...schema import DashboardModel
from ...services import DashboardServices
from ...storage.cache import make_key
from ..deps import get_services
from ..errors import ApiError
from ..responses import success

logger = logging.getLogger(__name__)

router = APIRouter(tags=["dependencies"])


class BodyRequest(DashboardModel):
    body: str
    repository: str | None = None
    issue_number: PositiveInt | None = None


class GraphRequest(DashboardModel):
    issues: list[IssueWithDependencies]


class DependencyListRequest(DashboardModel):
    dependencies: list[IssueDependency]
    issue_number: PositiveInt | None = None
    repository: str | None = None


class SyncRequest(DashboardModel):
    owner: str = Field(..., min_length=1)
    repo: str = Field(..., min_length=1)
    state: Literal["open", "closed", "all"] = "open"
    limit: PositiveInt = 100


def _parse_and_validate(
    services: DashboardServices, payload: BodyRequest
) -> tuple[list[IssueDependency], ValidationResult]:
    dependencies = services.parser.parse(payload.body, payload.repository)
    validation = services.validator.validate(
        dependencies, payload.issue_number, payload.repository
    )
    return dependencies, validation


@router.post("/parse")
def parse_dependencies(
    payload: BodyRequest, services: DashboardServices = Depends(get_services)
) -> dict:
    """Parse dependencies from an issue body."""
    key = make_key("parse", payload.model_dump(mode="json", by_alias=True))

    def compute() -> dict:
        dependencies, validation = _parse_and_validate(services, payload)
        return success(
            {
                "dependencies": dependencies,
                "validation": validation,
                "parsedFrom": "body",
            }
        )

    return services.parse_cache.get_or_compute(key, compute)


@router.post("/graph")
def build_graph(
    payload: GraphRequest, services: DashboardServices = Depends(get_services)
) -> dict:
    """Build a dependency graph across the given issues."""
    key = make_key(
        "graph",
        {
            "issues": [
                issue.model_dump(mode="json", by_alias=True) for issue in payload.issues
            ],
            "byNumber": services.graph_builder.match_by_number_only,
        },
    )

    def compute() -> dict:
        graph = services.graph_builder.build(payload.issues)
        logger.info(
            f"Built graph for {len(payload.issues)} issues: "
            f"{len(graph.nodes)} nodes, {len(graph.cycles)} cycles"
        )
        return success({"graph": graph, "metadata": GraphMetadata.from_graph(graph)})

    return services.graph_cache.get_or_compute(key, compute)


@router.post("/validate")
def validate_dependencies(
    payload: DependencyListRequest,
    services: DashboardServices = Depends(get_services),
) -> dict:
    """Check a dependency list for self references, duplicates and conflicts."""
    validation = services.validator.validate(
        payload.dependencies, payload.issue_number, payload.repository
    )
    return success({"validation": validation, "dependencies": payload.dependencies})


@router.post("/markdown")
def dependency_markdown(payload: DependencyListRequest) -> dict:
    """Render a dependency list as a markdown section."""
    markdown = generate_dependency_markdown(payload.dependencies)
    return success({"markdown": markdown, "dependencies": payload.dependencies})


@router.post("/analyze")
def analyze_body(
    payload: BodyRequest, services: DashboardServices = Depends(get_services)
) -> dict:
    """Parse, validate and re-render the dependencies of an issue body."""
    dependencies, validation = _parse_and_validate(services, payload)
    return success(
        {
            "originalBody": payload.body,
            "repository": payload.repository,
            "dependencies": dependencies,
            "validation": validation,
            "generatedMarkdown": generate_dependency_markdown(dependencies),
            "summary": {
                "totalDependencies": len(dependencies),
                "dependsOn": sum(
                    1 for d in dependencies if d.type == DependencyType.DEPENDS_ON
                ),
                "blocks": sum(
                    1 for d in dependencies if d.type == DependencyType.BLOCKS
                ),
                "crossRepository": sum(1 for d in dependencies if d.repository),
                "hasWarnings": bool(validation.warnings),
                "hasErrors": bool(validation.errors),
            },
        }
    )


@router.post("/sync")
def sync_repository(
    payload: SyncRequest, services: DashboardServices = Depends(get_services)
) -> dict:
    """Fetch a repository's issues from GitHub and build their graph.

    Publishes ``dependencies.synced`` to connected clients once the issues
    are parsed.
    """
    try:
        client = GitHubClient(services.config.github_token)
        issues = collect_repository_dependencies(
            client,
            payload.owner,
            payload.repo,
            state=payload.state,
            limit=payload.limit,
            events=services.events,
        )
    except ValueError as e:
        raise ApiError(str(e))

    graph = services.graph_builder.build(issues)
    return success(
        {
            "issues": issues,
            "graph": graph,
            "metadata": GraphMetadata.from_graph(graph),
        }
    )
