"""Extraction of issue dependencies from issue body text.

Two independent passes run over the whole body:

* inline keyword lists, e.g. ``Depends on: #12, owner/repo#34`` or
  ``Blocks: #56`` (Japanese ``依存:`` / ``ブロック:`` work the same way);
* structured sections under a ``## Dependencies`` (or ``## 依存関係``)
  heading with bullets such as ``- Depends on: #12 (Database schema)``, or
  keyword-less bullets like ``- #12 (Database schema)`` grouped under a
  ``**Depends on:**`` / ``**Blocks:**`` line.

Results of both passes are merged and deduplicated, keeping first-seen order.
"""

import logging
import re

from pydantic import ValidationError

from .models import DependencyType, IssueDependency, resolve_repo_ref

logger = logging.getLogger(__name__)

_REPO = r"[\w.-]+/[\w.-]+"
_REF = rf"(?:{_REPO})?#[0-9]+"

ISSUE_REFERENCE_PATTERN = re.compile(rf"(?:(?P<repo>{_REPO}))?#(?P<number>[0-9]+)")

INLINE_PATTERN = re.compile(
    r"(?P<keyword>(?<![A-Za-z])depends\s+on|(?<![A-Za-z])blocks|依存|ブロック)"
    rf"\s*:\s*(?P<refs>{_REF}(?:\s*,\s*{_REF})*)",
    re.IGNORECASE,
)

SECTION_HEADING_PATTERN = re.compile(
    r"^\s*##\s*(?:Dependencies|依存関係)\s*$", re.IGNORECASE
)

SECTION_GROUP_PATTERN = re.compile(
    r"^\s*\*\*\s*(?P<keyword>depends\s+on|blocks|依存|ブロック)\s*:?\s*\*\*\s*:?\s*$",
    re.IGNORECASE,
)

SECTION_BULLET_PATTERN = re.compile(
    r"^\s*[-*]\s*(?:(?P<keyword>depends\s+on|blocks|依存|ブロック)\s*:\s*)?"
    rf"(?:(?P<repo>{_REPO}))?#(?P<number>[0-9]+)"
    r"(?:\s*\((?P<description>[^)]+)\))?",
    re.IGNORECASE,
)


def keyword_to_type(keyword: str) -> DependencyType:
    """Map a matched keyword to its dependency type."""
    lowered = keyword.lower()
    if lowered.startswith("depends") or keyword == "依存":
        return DependencyType.DEPENDS_ON
    return DependencyType.BLOCKS


class DependencyParser:
    """Parses dependency references out of issue bodies."""

    def parse(
        self, body: str | None, current_repository: str | None = None
    ) -> list[IssueDependency]:
        """Parse all dependencies from an issue body.

        Args:
            body: Issue body markdown
            current_repository: ``owner/repo`` of the issue the body belongs
                to. References to it are treated as same-repository.

        Returns:
            Deduplicated dependencies in first-seen order
        """
        if not body or not body.strip():
            return []

        found = self._parse_inline(body, current_repository)
        found.extend(self._parse_sections(body, current_repository))

        dependencies = deduplicate_dependencies(found)
        logger.debug(
            f"Parsed {len(dependencies)} dependencies "
            f"({len(found)} references before deduplication)"
        )
        return dependencies

    def _parse_inline(
        self, body: str, current_repository: str | None
    ) -> list[IssueDependency]:
        dependencies = []
        for match in INLINE_PATTERN.finditer(body):
            dep_type = keyword_to_type(match.group("keyword"))
            for ref in ISSUE_REFERENCE_PATTERN.finditer(match.group("refs")):
                dependency = self._build(
                    dep_type,
                    ref.group("repo"),
                    ref.group("number"),
                    None,
                    current_repository,
                )
                if dependency:
                    dependencies.append(dependency)
        return dependencies

    def _parse_sections(
        self, body: str, current_repository: str | None
    ) -> list[IssueDependency]:
        dependencies = []
        in_section = False
        group_type: DependencyType | None = None

        for line in body.splitlines():
            if SECTION_HEADING_PATTERN.match(line):
                in_section = True
                group_type = None
                continue
            if not in_section:
                continue
            stripped = line.strip()
            if not stripped:
                continue

            group = SECTION_GROUP_PATTERN.match(line)
            if group:
                group_type = keyword_to_type(group.group("keyword"))
                continue
            if not stripped.startswith(("-", "*")):
                in_section = False
                continue

            match = SECTION_BULLET_PATTERN.match(line)
            if not match:
                continue
            keyword = match.group("keyword")
            dep_type = keyword_to_type(keyword) if keyword else group_type
            if dep_type is None:
                continue
            dependency = self._build(
                dep_type,
                match.group("repo"),
                match.group("number"),
                match.group("description"),
                current_repository,
            )
            if dependency:
                dependencies.append(dependency)

        return dependencies

    def _build(
        self,
        dep_type: DependencyType,
        repository: str | None,
        number: str,
        description: str | None,
        current_repository: str | None,
    ) -> IssueDependency | None:
        try:
            issue_number = int(number)
        except ValueError:
            return None

        description = description.strip() if description else None
        try:
            return IssueDependency.from_ref(
                dep_type,
                issue_number,
                resolve_repo_ref(repository, current_repository),
                description or None,
            )
        except ValidationError:
            logger.debug(f"Dropping invalid issue reference #{number}")
            return None


def deduplicate_dependencies(
    dependencies: list[IssueDependency],
) -> list[IssueDependency]:
    """Collapse dependencies sharing a type, repository and issue number.

    The first occurrence wins: it keeps its position and every field,
    including a missing description. Later duplicates are dropped.
    """
    seen: set[str] = set()
    result: list[IssueDependency] = []
    for dependency in dependencies:
        if dependency.dedup_key in seen:
            continue
        seen.add(dependency.dedup_key)
        result.append(dependency)
    return result


def parse_dependencies(
    body: str | None, current_repository: str | None = None
) -> list[IssueDependency]:
    """Parse dependencies with a default parser."""
    return DependencyParser().parse(body, current_repository)
