"""GitHub webhook receiver."""

import json
import logging

from fastapi import APIRouter, Depends, Request

from ...services import DashboardServices
from ...webhooks import process_webhook_event, verify_signature
from ..deps import get_services
from ..errors import ApiError
from ..responses import success

logger = logging.getLogger(__name__)

router = APIRouter(tags=["webhooks"])


@router.post("/github")
async def github_webhook(
    request: Request, services: DashboardServices = Depends(get_services)
) -> dict:
    """Verify a GitHub delivery and publish the change it describes."""
    body = await request.body()
    event_type = request.headers.get("x-github-event")
    delivery_id = request.headers.get("x-github-delivery")

    if not verify_signature(
        body,
        request.headers.get("x-hub-signature-256"),
        services.config.webhook_secret,
    ):
        logger.warning(f"Rejected webhook delivery {delivery_id}: invalid signature")
        raise ApiError("Invalid signature", status_code=401)
    if not event_type:
        raise ApiError("Missing X-GitHub-Event header")

    try:
        payload = json.loads(body)
    except ValueError:
        raise ApiError("Webhook body is not valid JSON")
    if not isinstance(payload, dict):
        raise ApiError("Webhook body must be a JSON object")

    event = process_webhook_event(
        event_type, payload, services.events, services.parser
    )
    logger.info(f"Processed webhook {event_type} delivery {delivery_id}")
    return success(
        {
            "deliveryId": delivery_id,
            "eventType": event_type,
            "published": event.type if event else None,
        },
        message="Webhook processed",
    )
