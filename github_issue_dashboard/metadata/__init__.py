"""Label-encoded issue metadata."""

from .labels import (
    LABEL_COLORS,
    LABEL_VALUES,
    LabelDefinition,
    LabelMetadata,
    LabelPrefix,
    MetadataUpdate,
    all_label_definitions,
    extract_metadata,
    filter_metadata_labels,
    filter_non_metadata_labels,
    get_label_definition,
    merge_labels_with_metadata,
    metadata_to_labels,
    time_spent_bucket,
    update_metadata_labels,
    validate_metadata,
)

__all__ = [
    "LABEL_COLORS",
    "LABEL_VALUES",
    "LabelDefinition",
    "LabelMetadata",
    "LabelPrefix",
    "MetadataUpdate",
    "all_label_definitions",
    "extract_metadata",
    "filter_metadata_labels",
    "filter_non_metadata_labels",
    "get_label_definition",
    "merge_labels_with_metadata",
    "metadata_to_labels",
    "time_spent_bucket",
    "update_metadata_labels",
    "validate_metadata",
]
