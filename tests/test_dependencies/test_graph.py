"""Tests for dependency graph building."""

import pytest

from github_issue_dashboard.dependencies.graph import (
    DependencyGraphBuilder,
    build_dependency_graph,
    compute_levels,
    detect_cycles,
)
from github_issue_dashboard.dependencies.models import (
    DependencyType,
    GraphMetadata,
    IssueDependency,
    IssueWithDependencies,
)

REPO = "acme/app"


def depends_on(number: int, repository: str | None = None) -> IssueDependency:
    return IssueDependency(
        type=DependencyType.DEPENDS_ON, issue_number=number, repository=repository
    )


def blocks(number: int, repository: str | None = None) -> IssueDependency:
    return IssueDependency(
        type=DependencyType.BLOCKS, issue_number=number, repository=repository
    )


def issue(
    number: int, *deps: IssueDependency, repository: str = REPO, **kwargs
) -> IssueWithDependencies:
    return IssueWithDependencies(
        issue_number=number, repository=repository, dependencies=list(deps), **kwargs
    )


def levels(graph) -> dict[int, int]:
    return {node.issue_number: node.level for node in graph.nodes}


class TestGraphStructure:
    """Test nodes and edges."""

    def test_depends_on_edge_direction(self) -> None:
        """Test that depends-on points from the dependent issue."""
        graph = build_dependency_graph([issue(1, depends_on(2))])

        assert len(graph.edges) == 1
        edge = graph.edges[0]
        assert (edge.from_, edge.to, edge.type) == (1, 2, DependencyType.DEPENDS_ON)

    def test_blocks_edge_is_inverted(self) -> None:
        """Test that 'X blocks Y' becomes an edge from Y to X."""
        graph = build_dependency_graph([issue(1, blocks(2))])

        edge = graph.edges[0]
        assert (edge.from_, edge.to, edge.type) == (2, 1, DependencyType.BLOCKS)

    def test_referenced_issues_become_nodes(self) -> None:
        """Test that targets not in the input still get nodes."""
        graph = build_dependency_graph(
            [issue(1, depends_on(2), depends_on(9, "acme/lib"))]
        )

        assert [(n.repository, n.issue_number) for n in graph.nodes] == [
            (REPO, 1),
            (REPO, 2),
            ("acme/lib", 9),
        ]
        assert graph.edges[1].repository == "acme/lib"

    def test_node_details_copied_from_input(self) -> None:
        """Test title and state on input nodes."""
        graph = build_dependency_graph(
            [issue(1, title="Set up CI", state="closed")]
        )

        node = graph.get_node(1, REPO)
        assert node is not None
        assert node.title == "Set up CI"
        assert node.state == "closed"

    def test_empty_input(self) -> None:
        """Test building from no issues."""
        graph = build_dependency_graph([])

        assert graph.nodes == []
        assert graph.edges == []
        assert graph.cycles == []

    def test_edge_serializes_with_from_key(self) -> None:
        """Test the wire name of the edge source field."""
        graph = build_dependency_graph([issue(1, depends_on(2))])

        dumped = graph.model_dump(by_alias=True)
        assert dumped["edges"][0]["from"] == 1
        assert "issueNumber" in dumped["nodes"][0]


class TestLevels:
    """Test level computation."""

    def test_chain_levels(self) -> None:
        """Test levels along 1 -> 2 -> 3."""
        graph = build_dependency_graph(
            [issue(1, depends_on(2)), issue(2, depends_on(3)), issue(3)]
        )

        assert levels(graph) == {1: 2, 2: 1, 3: 0}

    def test_level_uses_longest_path(self) -> None:
        """Test that the deepest branch decides the level."""
        graph = build_dependency_graph(
            [
                issue(1, depends_on(2), depends_on(4)),
                issue(2, depends_on(3)),
            ]
        )

        assert levels(graph)[1] == 2

    def test_blocks_contributes_to_level(self) -> None:
        """Test that a blocked issue sits above its blocker."""
        graph = build_dependency_graph([issue(1, blocks(2))])

        assert levels(graph) == {1: 0, 2: 1}

    def test_cycle_levels_terminate(self) -> None:
        """Test that cycles do not loop forever."""
        graph = build_dependency_graph(
            [issue(1, depends_on(2)), issue(2, depends_on(1))]
        )

        assert levels(graph) == {1: 2, 2: 1}

    def test_deep_chain_does_not_hit_recursion_limit(self) -> None:
        """Test a chain longer than the default recursion limit."""
        count = 3000
        issues = [issue(n, depends_on(n + 1)) for n in range(1, count)]

        graph = build_dependency_graph(issues)

        assert graph.get_node(1).level == count - 1
        assert graph.get_node(count).level == 0

    def test_compute_levels_directly(self) -> None:
        successors = {"a": ["b"], "b": [], "c": ["a"]}

        assert compute_levels(["a", "b", "c"], successors) == {
            "a": 1,
            "b": 0,
            "c": 2,
        }


class TestCycles:
    """Test cycle detection."""

    def test_two_node_cycle(self) -> None:
        graph = build_dependency_graph(
            [issue(1, depends_on(2)), issue(2, depends_on(1))]
        )

        assert graph.cycles == [[1, 2, 1]]

    def test_self_loop(self) -> None:
        graph = build_dependency_graph([issue(1, depends_on(1))])

        assert graph.cycles == [[1, 1]]

    def test_acyclic_graph(self) -> None:
        graph = build_dependency_graph(
            [issue(1, depends_on(2)), issue(3, depends_on(2))]
        )

        assert graph.cycles == []

    def test_cycle_through_blocks(self) -> None:
        """Test a cycle formed by a depends-on and a blocks entry."""
        graph = build_dependency_graph(
            [issue(1, depends_on(2)), issue(1, blocks(2))]
        )

        assert graph.cycles == [[1, 2, 1]]

    def test_detect_cycles_directly(self) -> None:
        successors = {"a": ["b"], "b": ["c"], "c": ["a"], "d": ["a"]}

        assert detect_cycles(["a", "b", "c", "d"], successors) == [
            ["a", "b", "c", "a"]
        ]


    def test_three_node_cycle(self) -> None:
        graph = build_dependency_graph(
            [issue(1, depends_on(2)), issue(2, depends_on(3)), issue(3, depends_on(1))]
        )

        assert graph.cycles == [[1, 2, 3, 1]]

    def test_disjoint_cycles_reported_once_each(self) -> None:
        graph = build_dependency_graph(
            [
                issue(1, depends_on(2)),
                issue(2, depends_on(1)),
                issue(5, depends_on(6)),
                issue(6, depends_on(5)),
            ]
        )

        assert graph.cycles == [[1, 2, 1], [5, 6, 5]]


class TestNodeIdentity:
    """Test repository-aware node identity."""

    @pytest.fixture
    def shared_numbers(self) -> list[IssueWithDependencies]:
        """Issue #1 in two repositories, each depending on a local #2."""
        return [
            issue(1, depends_on(2), repository="acme/a"),
            issue(2, repository="acme/b"),
        ]

    def test_composite_keys_by_default(
        self, shared_numbers: list[IssueWithDependencies]
    ) -> None:
        """Test that acme/a#2 and acme/b#2 are separate nodes."""
        graph = DependencyGraphBuilder().build(shared_numbers)

        assert graph.get_node(2, "acme/a").level == 0
        assert graph.get_node(2, "acme/b").level == 0
        assert len(graph.nodes) == 3

    def test_match_by_number_only(self) -> None:
        """Test that numbers collapse across repositories when enabled."""
        issues = [
            issue(1, depends_on(2), repository="acme/a"),
            issue(2, depends_on(3), repository="acme/b"),
        ]

        by_repo = DependencyGraphBuilder().build(issues)
        by_number = DependencyGraphBuilder(match_by_number_only=True).build(issues)

        assert by_repo.get_node(1).level == 1
        assert by_number.get_node(1).level == 2


class TestGraphMetadata:
    def test_from_graph(self) -> None:
        graph = build_dependency_graph(
            [issue(1, depends_on(2)), issue(2, depends_on(1)), issue(3)]
        )

        metadata = GraphMetadata.from_graph(graph)

        assert metadata.total_nodes == 3
        assert metadata.total_edges == 2
        assert metadata.cycles_detected == 1
        assert metadata.max_level == 2
