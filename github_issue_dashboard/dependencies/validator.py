"""Validation of dependency lists."""

import logging

from .models import DependencyType, IssueDependency, ValidationResult

logger = logging.getLogger(__name__)


class DependencyValidator:
    """Checks dependency lists for self references, duplicates and conflicts."""

    def validate(
        self,
        dependencies: list[IssueDependency],
        current_issue: int | None = None,
        current_repository: str | None = None,
    ) -> ValidationResult:
        """Validate a dependency list.

        Args:
            dependencies: Dependencies to check
            current_issue: Number of the issue the list belongs to; enables
                the self-dependency check
            current_repository: ``owner/repo`` of that issue

        Returns:
            Warnings for duplicates and conflicts, errors for self references.
            ``is_valid`` is True when there are no errors.
        """
        warnings: list[str] = []
        errors: list[str] = []

        if current_issue is not None:
            for dep in dependencies:
                if dep.issue_number == current_issue and _is_same_repository(
                    dep, current_repository
                ):
                    errors.append(f"Issue cannot depend on itself: #{current_issue}")

        seen: set[str] = set()
        for dep in dependencies:
            if dep.dedup_key in seen:
                warnings.append(
                    f"Duplicate dependency found: {dep.type.value} #{dep.issue_number}"
                )
            seen.add(dep.dedup_key)

        depends_on = {
            dep.target_key: dep
            for dep in dependencies
            if dep.type == DependencyType.DEPENDS_ON
        }
        reported: set[str] = set()
        for dep in dependencies:
            if dep.type != DependencyType.BLOCKS:
                continue
            if dep.target_key in depends_on and dep.target_key not in reported:
                reported.add(dep.target_key)
                warnings.append(
                    "Conflicting dependency: issue both depends on and blocks "
                    f"#{dep.issue_number}"
                )

        if errors or warnings:
            logger.debug(
                f"Validation found {len(errors)} errors, {len(warnings)} warnings"
            )
        return ValidationResult(
            is_valid=not errors, warnings=warnings, errors=errors
        )


def _is_same_repository(dep: IssueDependency, current_repository: str | None) -> bool:
    return dep.repository is None or dep.repository == current_repository


def validate_dependencies(
    dependencies: list[IssueDependency],
    current_issue: int | None = None,
    current_repository: str | None = None,
) -> ValidationResult:
    """Validate dependencies with a default validator."""
    return DependencyValidator().validate(
        dependencies, current_issue, current_repository
    )
