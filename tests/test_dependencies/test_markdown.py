"""Tests for dependency markdown rendering."""

from github_issue_dashboard.dependencies.markdown import generate_dependency_markdown
from github_issue_dashboard.dependencies.models import DependencyType, IssueDependency
from github_issue_dashboard.dependencies.parser import parse_dependencies


class TestGenerateDependencyMarkdown:
    """Test generate_dependency_markdown."""

    def test_empty_list_renders_nothing(self) -> None:
        assert generate_dependency_markdown([]) == ""

    def test_grouped_output(self) -> None:
        """Test the exact layout of both groups."""
        deps = [
            IssueDependency(
                type=DependencyType.DEPENDS_ON, issue_number=1, description="Schema"
            ),
            IssueDependency(
                type=DependencyType.BLOCKS, issue_number=2, repository="acme/ui"
            ),
        ]

        assert generate_dependency_markdown(deps) == (
            "\n## Dependencies\n\n"
            "**Depends on:**\n"
            "- #1 (Schema)\n\n"
            "**Blocks:**\n"
            "- acme/ui#2\n\n"
        )

    def test_only_blocks_group(self) -> None:
        deps = [IssueDependency(type=DependencyType.BLOCKS, issue_number=7)]

        text = generate_dependency_markdown(deps)

        assert "**Depends on:**" not in text
        assert "**Blocks:**\n- #7\n" in text

    def test_group_keeps_input_order(self) -> None:
        deps = [
            IssueDependency(type=DependencyType.DEPENDS_ON, issue_number=n)
            for n in (3, 1, 2)
        ]

        text = generate_dependency_markdown(deps)

        assert text.index("#3") < text.index("#1") < text.index("#2")

    def test_rendered_section_parses_back(self) -> None:
        """Test that the parser reads rendered markdown back unchanged."""
        deps = [
            IssueDependency(
                type=DependencyType.DEPENDS_ON, issue_number=4, description="API"
            ),
            IssueDependency(
                type=DependencyType.DEPENDS_ON,
                issue_number=5,
                repository="acme/lib",
            ),
            IssueDependency(
                type=DependencyType.BLOCKS, issue_number=6, description="Release"
            ),
        ]

        body = "Intro paragraph\n" + generate_dependency_markdown(deps)

        assert parse_dependencies(body) == deps
