"""Pydantic models for issue dependency data."""

from dataclasses import dataclass
from enum import Enum
from typing import Literal

from pydantic import Field, PositiveInt

from ..schema import DashboardModel


class DependencyType(str, Enum):
    """Kind of relation between two issues."""

    DEPENDS_ON = "depends_on"
    BLOCKS = "blocks"


@dataclass(frozen=True)
class LocalRepo:
    """Reference to the repository the source issue lives in."""

    def __str__(self) -> str:
        return "current"


@dataclass(frozen=True)
class RemoteRepo:
    """Reference to another repository, as ``owner/repo``."""

    owner_repo: str

    def __str__(self) -> str:
        return self.owner_repo


RepoRef = LocalRepo | RemoteRepo


def resolve_repo_ref(explicit: str | None, current: str | None = None) -> RepoRef:
    """Resolve an explicit repository against the current repository.

    An explicit repository equal to the current one is the same repository,
    so it resolves to ``LocalRepo`` just like a bare ``#N`` reference.
    """
    if not explicit or explicit == current:
        return LocalRepo()
    return RemoteRepo(explicit)


class IssueDependency(DashboardModel):
    """A typed reference from one issue to another."""

    type: DependencyType = Field(..., description="depends_on or blocks")
    issue_number: PositiveInt = Field(..., description="Referenced issue number")
    repository: str | None = Field(
        None, description="owner/repo when the target is in another repository"
    )
    description: str | None = Field(None, description="Optional free-text note")

    @property
    def repo_ref(self) -> RepoRef:
        return resolve_repo_ref(self.repository)

    @property
    def dedup_key(self) -> str:
        return f"{self.type.value}:{self.repo_ref}:{self.issue_number}"

    @property
    def target_key(self) -> str:
        """Repository and issue number, ignoring the dependency type."""
        return f"{self.repo_ref}:{self.issue_number}"

    @property
    def reference(self) -> str:
        """Markdown issue reference, e.g. ``#12`` or ``owner/repo#12``."""
        if self.repository:
            return f"{self.repository}#{self.issue_number}"
        return f"#{self.issue_number}"

    @classmethod
    def from_ref(
        cls,
        dep_type: DependencyType,
        issue_number: int,
        repo_ref: RepoRef,
        description: str | None = None,
    ) -> "IssueDependency":
        repository = repo_ref.owner_repo if isinstance(repo_ref, RemoteRepo) else None
        return cls(
            type=dep_type,
            issue_number=issue_number,
            repository=repository,
            description=description,
        )


class IssueWithDependencies(DashboardModel):
    """Graph input: one issue and the dependencies parsed from it."""

    issue_number: PositiveInt
    repository: str = Field(..., min_length=1)
    title: str | None = None
    state: Literal["open", "closed"] | None = None
    dependencies: list[IssueDependency]


class DependencyNode(DashboardModel):
    """One (repository, issue number) pair in a dependency graph."""

    issue_number: int
    repository: str
    title: str | None = None
    state: Literal["open", "closed"] | None = None
    level: int = Field(0, ge=0, description="Longest dependency chain below")


class DependencyEdge(DashboardModel):
    """Directed edge meaning ``from`` needs ``to``."""

    from_: int = Field(..., alias="from")
    to: int
    type: DependencyType
    repository: str | None = None


class DependencyGraph(DashboardModel):
    """Nodes, edges and detected cycles for a set of issues."""

    nodes: list[DependencyNode] = Field(default_factory=list)
    edges: list[DependencyEdge] = Field(default_factory=list)
    cycles: list[list[int]] = Field(default_factory=list)

    def get_node(
        self, issue_number: int, repository: str | None = None
    ) -> DependencyNode | None:
        for node in self.nodes:
            if node.issue_number == issue_number and (
                repository is None or node.repository == repository
            ):
                return node
        return None


class GraphMetadata(DashboardModel):
    """Summary counts for a dependency graph."""

    total_nodes: int
    total_edges: int
    cycles_detected: int
    max_level: int

    @classmethod
    def from_graph(cls, graph: DependencyGraph) -> "GraphMetadata":
        return cls(
            total_nodes=len(graph.nodes),
            total_edges=len(graph.edges),
            cycles_detected=len(graph.cycles),
            max_level=max((node.level for node in graph.nodes), default=0),
        )


class ValidationResult(DashboardModel):
    """Outcome of validating a dependency list."""

    is_valid: bool
    warnings: list[str] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)
