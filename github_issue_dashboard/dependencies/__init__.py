"""Issue dependency parsing, graph building and validation."""

from .graph import DependencyGraphBuilder, build_dependency_graph
from .markdown import generate_dependency_markdown
from .models import (
    DependencyEdge,
    DependencyGraph,
    DependencyNode,
    DependencyType,
    GraphMetadata,
    IssueDependency,
    IssueWithDependencies,
    LocalRepo,
    RemoteRepo,
    RepoRef,
    ValidationResult,
    resolve_repo_ref,
)
from .parser import DependencyParser, parse_dependencies
from .validator import DependencyValidator, validate_dependencies

__all__ = [
    "DependencyParser",
    "DependencyGraphBuilder",
    "DependencyValidator",
    "DependencyType",
    "DependencyNode",
    "DependencyEdge",
    "DependencyGraph",
    "GraphMetadata",
    "IssueDependency",
    "IssueWithDependencies",
    "LocalRepo",
    "RemoteRepo",
    "RepoRef",
    "ValidationResult",
    "build_dependency_graph",
    "generate_dependency_markdown",
    "parse_dependencies",
    "resolve_repo_ref",
    "validate_dependencies",
]
