"""Rendering of dependency lists as an issue-body section."""

from .models import DependencyType, IssueDependency

SECTION_HEADING = "## Dependencies"

_GROUP_TITLES = {
    DependencyType.DEPENDS_ON: "Depends on",
    DependencyType.BLOCKS: "Blocks",
}


def _bullet(dep: IssueDependency) -> str:
    line = f"- {dep.reference}"
    if dep.description:
        line += f" ({dep.description})"
    return line


def generate_dependency_markdown(dependencies: list[IssueDependency]) -> str:
    """Render dependencies as a ``## Dependencies`` markdown section.

    Bullets are grouped under ``**Depends on:**`` and ``**Blocks:**`` lines,
    which the parser reads back as the bullets' type. An empty list renders
    as an empty string.
    """
    if not dependencies:
        return ""

    lines = ["", SECTION_HEADING, ""]
    for dep_type, title in _GROUP_TITLES.items():
        group = [dep for dep in dependencies if dep.type == dep_type]
        if not group:
            continue
        lines.append(f"**{title}:**")
        lines.extend(_bullet(dep) for dep in group)
        lines.append("")

    return "\n".join(lines) + "\n"
