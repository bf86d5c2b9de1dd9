"""Dependency graph construction, depth levels and cycle detection.

Edges always point from the issue that needs something to the issue it
needs. A ``depends_on`` entry on X naming Y becomes ``X -> Y``; a ``blocks``
entry on X naming Y becomes ``Y -> X``.

Traversals use explicit stacks, so graph depth is not bounded by the
interpreter's recursion limit.
"""

import logging
from collections.abc import Hashable, Iterable, Iterator
from enum import Enum

from .models import (
    DependencyEdge,
    DependencyGraph,
    DependencyNode,
    DependencyType,
    IssueWithDependencies,
)

logger = logging.getLogger(__name__)

NodeKey = Hashable

_EXHAUSTED = object()


class VisitState(Enum):
    """Three-color DFS marking."""

    UNVISITED = "white"
    IN_PROGRESS = "gray"
    DONE = "black"


class DependencyGraphBuilder:
    """Builds dependency graphs across one or more repositories.

    Args:
        match_by_number_only: Identify nodes by issue number alone when
            computing levels and cycles. Issues from different repositories
            that share a number then collapse into one traversal node. Off
            by default; nodes are identified by (repository, issue number).
    """

    def __init__(self, match_by_number_only: bool = False):
        self.match_by_number_only = match_by_number_only

    def _key(self, repository: str, issue_number: int) -> NodeKey:
        if self.match_by_number_only:
            return issue_number
        return (repository, issue_number)

    def build(self, issues: Iterable[IssueWithDependencies]) -> DependencyGraph:
        """Build a dependency graph from issues and their parsed dependencies."""
        nodes: list[DependencyNode] = []
        node_map: dict[tuple[str, int], DependencyNode] = {}
        edges: list[DependencyEdge] = []
        edge_keys: list[tuple[NodeKey, NodeKey]] = []

        for issue in issues:
            source = (issue.repository, issue.issue_number)
            if source not in node_map:
                node = DependencyNode(
                    issue_number=issue.issue_number,
                    repository=issue.repository,
                    title=issue.title,
                    state=issue.state,
                )
                node_map[source] = node
                nodes.append(node)

            for dep in issue.dependencies:
                target_repo = dep.repository or issue.repository
                target = (target_repo, dep.issue_number)
                if target not in node_map:
                    node = DependencyNode(
                        issue_number=dep.issue_number, repository=target_repo
                    )
                    node_map[target] = node
                    nodes.append(node)

                source_key = self._key(*source)
                target_key = self._key(*target)
                if dep.type == DependencyType.DEPENDS_ON:
                    edges.append(
                        DependencyEdge(
                            from_=issue.issue_number,
                            to=dep.issue_number,
                            type=DependencyType.DEPENDS_ON,
                            repository=dep.repository,
                        )
                    )
                    edge_keys.append((source_key, target_key))
                else:
                    edges.append(
                        DependencyEdge(
                            from_=dep.issue_number,
                            to=issue.issue_number,
                            type=DependencyType.BLOCKS,
                            repository=dep.repository,
                        )
                    )
                    edge_keys.append((target_key, source_key))

        order = [self._key(node.repository, node.issue_number) for node in nodes]
        successors = _successor_map(order, edge_keys)

        levels = compute_levels(order, successors)
        for node, key in zip(nodes, order):
            node.level = levels.get(key, 0)

        cycles = [
            [_issue_number(key) for key in cycle]
            for cycle in detect_cycles(order, successors)
        ]
        if cycles:
            logger.warning(f"Detected {len(cycles)} dependency cycle(s): {cycles}")

        logger.debug(f"Built dependency graph: {len(nodes)} nodes, {len(edges)} edges")
        return DependencyGraph(nodes=nodes, edges=edges, cycles=cycles)


def _issue_number(key: NodeKey) -> int:
    return key[1] if isinstance(key, tuple) else key


def _successor_map(
    order: list[NodeKey], edge_keys: list[tuple[NodeKey, NodeKey]]
) -> dict[NodeKey, list[NodeKey]]:
    successors: dict[NodeKey, list[NodeKey]] = {key: [] for key in order}
    for source, target in edge_keys:
        successors.setdefault(source, []).append(target)
        successors.setdefault(target, [])
    return successors


def compute_levels(
    order: list[NodeKey], successors: dict[NodeKey, list[NodeKey]]
) -> dict[NodeKey, int]:
    """Longest dependency chain below each node.

    A node with no outgoing edges has level 0; otherwise its level is one
    more than the highest level among the nodes it needs. An edge back into
    a node still being computed counts as level 0 for that edge.
    """
    levels: dict[NodeKey, int] = {}

    for start in order:
        if start in levels:
            continue

        in_progress = {start}
        best = {start: 0}
        stack: list[tuple[NodeKey, Iterator[NodeKey]]] = [
            (start, iter(successors.get(start, [])))
        ]

        while stack:
            node, children = stack[-1]
            child = next(children, _EXHAUSTED)

            if child is _EXHAUSTED:
                stack.pop()
                in_progress.discard(node)
                levels[node] = best.pop(node)
                if stack:
                    parent = stack[-1][0]
                    best[parent] = max(best[parent], levels[node] + 1)
                continue

            if child in in_progress:
                best[node] = max(best[node], 1)
            elif child in levels:
                best[node] = max(best[node], levels[child] + 1)
            else:
                in_progress.add(child)
                best[child] = 0
                stack.append((child, iter(successors.get(child, []))))

    return levels


def detect_cycles(
    order: list[NodeKey], successors: dict[NodeKey, list[NodeKey]]
) -> list[list[NodeKey]]:
    """Find cycles with a three-color depth-first search.

    Each time an edge reaches a node on the current path, the path slice from
    that node back to itself is reported. Finished nodes are never revisited.
    """
    state = {key: VisitState.UNVISITED for key in successors}
    cycles: list[list[NodeKey]] = []

    for start in order:
        if state.get(start, VisitState.UNVISITED) != VisitState.UNVISITED:
            continue

        state[start] = VisitState.IN_PROGRESS
        path = [start]
        stack: list[tuple[NodeKey, Iterator[NodeKey]]] = [
            (start, iter(successors.get(start, [])))
        ]

        while stack:
            node, children = stack[-1]
            child = next(children, _EXHAUSTED)

            if child is _EXHAUSTED:
                state[node] = VisitState.DONE
                path.pop()
                stack.pop()
                continue

            child_state = state.get(child, VisitState.UNVISITED)
            if child_state == VisitState.IN_PROGRESS:
                cycles.append(path[path.index(child) :] + [child])
            elif child_state == VisitState.UNVISITED:
                state[child] = VisitState.IN_PROGRESS
                path.append(child)
                stack.append((child, iter(successors.get(child, []))))

    return cycles


def build_dependency_graph(
    issues: Iterable[IssueWithDependencies], match_by_number_only: bool = False
) -> DependencyGraph:
    """Build a dependency graph with a default builder."""
    return DependencyGraphBuilder(match_by_number_only).build(issues)
