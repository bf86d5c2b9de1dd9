"""Label metadata endpoints."""

from fastapi import APIRouter

from ...metadata.labels import (
    LABEL_VALUES,
    LabelPrefix,
    MetadataUpdate,
    all_label_definitions,
    extract_metadata,
    metadata_to_labels,
    validate_metadata,
)
from ...schema import DashboardModel
from ..errors import ApiError
from ..responses import success

router = APIRouter(tags=["metadata"])


class ExtractRequest(DashboardModel):
    labels: list[str]


class ConvertRequest(DashboardModel):
    metadata: MetadataUpdate


@router.get("/options")
def metadata_options() -> dict:
    """Allowed values for every metadata field."""
    return success(
        {
            "priority": LABEL_VALUES[LabelPrefix.PRIORITY],
            "category": LABEL_VALUES[LabelPrefix.CATEGORY],
            "estimatedSize": LABEL_VALUES[LabelPrefix.SIZE],
            "status": LABEL_VALUES[LabelPrefix.STATUS],
            "timeSpent": LABEL_VALUES[LabelPrefix.TIME_SPENT],
        }
    )


@router.get("/labels")
def label_definitions() -> dict:
    """Every metadata label a repository needs, with colors."""
    definitions = all_label_definitions()
    return success(definitions, count=len(definitions))


@router.post("/extract")
def extract(payload: ExtractRequest) -> dict:
    metadata = extract_metadata(payload.labels)
    return success({"labels": payload.labels, "extractedMetadata": metadata})


@router.post("/convert")
def convert(payload: ConvertRequest) -> dict:
    """Label names for a metadata object."""
    errors = validate_metadata(payload.metadata)
    if errors:
        raise ApiError("Invalid metadata", details=errors)
    return success(
        {
            "metadata": payload.metadata.model_dump(by_alias=True, exclude_none=True),
            "generatedLabels": metadata_to_labels(payload.metadata),
        }
    )
