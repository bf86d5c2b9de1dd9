"""Success envelope for API responses."""

from typing import Any

from fastapi.encoders import jsonable_encoder


def success(data: Any, **extra: Any) -> dict[str, Any]:
    """Wrap data as ``{"success": true, "data": ...}`` with camelCase keys."""
    body = {"success": True, "data": jsonable_encoder(data, by_alias=True)}
    body.update(jsonable_encoder(extra, by_alias=True))
    return body
