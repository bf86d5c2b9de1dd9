"""Issue metadata encoded as ``prefix:value`` GitHub labels.

Five prefixes carry metadata: ``priority``, ``category``, ``size``,
``status`` and ``time-spent``. Any other label is left untouched when
metadata labels are rewritten.
"""

from collections.abc import Iterable
from enum import Enum

from pydantic import Field

from ..github_client.models import GitHubLabel
from ..schema import DashboardModel

DEFAULT_LABEL_COLOR = "CCCCCC"


class LabelPrefix(str, Enum):
    PRIORITY = "priority"
    CATEGORY = "category"
    SIZE = "size"
    STATUS = "status"
    TIME_SPENT = "time-spent"


LABEL_VALUES: dict[LabelPrefix, tuple[str, ...]] = {
    LabelPrefix.PRIORITY: ("low", "medium", "high", "critical"),
    LabelPrefix.CATEGORY: ("frontend", "backend", "design", "testing", "docs"),
    LabelPrefix.SIZE: ("xs", "small", "medium", "large", "xl"),
    LabelPrefix.STATUS: ("todo", "in-progress", "review", "done"),
    LabelPrefix.TIME_SPENT: ("none", "0-2h", "2-4h", "4-8h", "8h+"),
}

LABEL_COLORS: dict[LabelPrefix, dict[str, str]] = {
    LabelPrefix.PRIORITY: {
        "low": "0E8A16",
        "medium": "FBCA04",
        "high": "D93F0B",
        "critical": "B60205",
    },
    LabelPrefix.CATEGORY: {
        "frontend": "1D76DB",
        "backend": "0052CC",
        "design": "E99695",
        "testing": "5319E7",
        "docs": "006B75",
    },
    LabelPrefix.SIZE: {
        "xs": "C2E0C6",
        "small": "7057FF",
        "medium": "FBCA04",
        "large": "D93F0B",
        "xl": "B60205",
    },
    LabelPrefix.STATUS: {
        "todo": "D4C5F9",
        "in-progress": "FBCA04",
        "review": "FEF2C0",
        "done": "0E8A16",
    },
    LabelPrefix.TIME_SPENT: {
        "none": "F9F9F9",
        "0-2h": "C2E0C6",
        "2-4h": "FBCA04",
        "4-8h": "D93F0B",
        "8h+": "B60205",
    },
}

_DESCRIPTION_TEMPLATES = {
    LabelPrefix.PRIORITY: "Priority: {}",
    LabelPrefix.CATEGORY: "Category: {}",
    LabelPrefix.SIZE: "Estimated size: {}",
    LabelPrefix.STATUS: "Status: {}",
    LabelPrefix.TIME_SPENT: "Time spent: {}",
}

# metadata field name for each prefix
_FIELDS = {
    LabelPrefix.PRIORITY: "priority",
    LabelPrefix.CATEGORY: "category",
    LabelPrefix.SIZE: "estimated_size",
    LabelPrefix.STATUS: "status",
    LabelPrefix.TIME_SPENT: "time_spent",
}

# upper bounds in minutes for the time-spent buckets after "none"
_TIME_SPENT_BUCKETS = ((2 * 60, "0-2h"), (4 * 60, "2-4h"), (8 * 60, "4-8h"))


class LabelMetadata(DashboardModel):
    """Metadata read from an issue's labels, with defaults for missing ones."""

    priority: str = "medium"
    category: str = "backend"
    estimated_size: str = "medium"
    status: str = "todo"
    time_spent: str | None = None


class MetadataUpdate(DashboardModel):
    """Metadata values to write; unset values produce no label."""

    priority: str | None = None
    category: str | None = None
    estimated_size: str | None = None
    status: str | None = None
    time_spent: str | None = None


class LabelDefinition(DashboardModel):
    name: str
    color: str = Field(..., description="Hex color without leading #")
    description: str


LabelLike = str | GitHubLabel


def _label_name(label: LabelLike) -> str:
    return label if isinstance(label, str) else label.name


def _split(label: LabelLike) -> tuple[LabelPrefix, str] | None:
    name = _label_name(label).lower()
    prefix, sep, value = name.partition(":")
    if not sep:
        return None
    try:
        return LabelPrefix(prefix.strip()), value.strip()
    except ValueError:
        return None


def is_metadata_label(label: LabelLike) -> bool:
    return _split(label) is not None


def extract_metadata(labels: Iterable[LabelLike]) -> LabelMetadata:
    """Read metadata from labels.

    Matching is case-insensitive. Labels with values outside the known set
    are ignored, and fields with no valid label keep their defaults. When a
    prefix appears more than once the last valid label wins.
    """
    values: dict[str, str] = {}
    for label in labels:
        parsed = _split(label)
        if parsed is None:
            continue
        prefix, value = parsed
        if value in LABEL_VALUES[prefix]:
            values[_FIELDS[prefix]] = value
    return LabelMetadata(**values)


def metadata_to_labels(metadata: LabelMetadata | MetadataUpdate) -> list[str]:
    """Label names for every metadata value that is set."""
    labels = []
    for prefix, field in _FIELDS.items():
        value = getattr(metadata, field)
        if value:
            labels.append(f"{prefix.value}:{value}")
    return labels


def validate_metadata(metadata: MetadataUpdate) -> list[str]:
    """Error messages for every set value outside its allowed set."""
    errors = []
    names = {LabelPrefix.SIZE: "size", LabelPrefix.TIME_SPENT: "timeSpent"}
    for prefix, field in _FIELDS.items():
        value = getattr(metadata, field)
        allowed = LABEL_VALUES[prefix]
        if value and value not in allowed:
            name = names.get(prefix, prefix.value)
            errors.append(
                f"Invalid {name}: {value}. Must be one of: {', '.join(allowed)}"
            )
    return errors


def get_label_definition(prefix: LabelPrefix | str, value: str) -> LabelDefinition:
    """Name, color and description for a metadata label.

    Values outside the known set get the default gray color and an empty
    description.

    Raises:
        ValueError: If the prefix is not a metadata prefix
    """
    prefix = LabelPrefix(prefix)
    color = LABEL_COLORS[prefix].get(value)
    if color is None:
        return LabelDefinition(
            name=f"{prefix.value}:{value}", color=DEFAULT_LABEL_COLOR, description=""
        )
    return LabelDefinition(
        name=f"{prefix.value}:{value}",
        color=color,
        description=_DESCRIPTION_TEMPLATES[prefix].format(value),
    )


def all_label_definitions() -> list[LabelDefinition]:
    """Every metadata label a repository needs, grouped by prefix."""
    return [
        get_label_definition(prefix, value)
        for prefix, values in LABEL_VALUES.items()
        for value in values
    ]


def filter_metadata_labels(labels: Iterable[LabelLike]) -> list[LabelLike]:
    return [label for label in labels if is_metadata_label(label)]


def filter_non_metadata_labels(labels: Iterable[LabelLike]) -> list[LabelLike]:
    return [label for label in labels if not is_metadata_label(label)]


def merge_labels_with_metadata(
    existing: Iterable[LabelLike], metadata: LabelMetadata | MetadataUpdate
) -> list[str]:
    """Replace all metadata labels with those for ``metadata``.

    Labels that carry no metadata are kept, in their original order, ahead
    of the new metadata labels.
    """
    kept = [_label_name(label) for label in filter_non_metadata_labels(existing)]
    return kept + metadata_to_labels(metadata)


def update_metadata_labels(
    existing: Iterable[LabelLike], update: MetadataUpdate
) -> list[str]:
    """Apply a partial update, keeping metadata labels for untouched prefixes."""
    changed = {
        prefix for prefix, field in _FIELDS.items() if getattr(update, field)
    }
    kept = []
    for label in existing:
        parsed = _split(label)
        if parsed is None or parsed[0] not in changed:
            kept.append(_label_name(label))
    return kept + metadata_to_labels(update)


def time_spent_bucket(minutes: int) -> str:
    """The ``time-spent`` label value for a tracked total in minutes."""
    if minutes <= 0:
        return "none"
    for limit, bucket in _TIME_SPENT_BUCKETS:
        if minutes <= limit:
            return bucket
    return "8h+"
