"""Webhook receiver for payment provider notifications"""

import json
import logging
from typing import Optional

import pydantic
from fastapi import APIRouter, Depends, Request

from ..core.config import Settings, get_settings
from ..dependencies import get_signature_verifier, get_webhook_processor
from ..models.webhook import WebhookPayload
from ..security.webhook_signature import WebhookSignatureVerifier
from ..services.webhook_processor import WebhookProcessor

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/webhook", tags=["Webhooks"])

ACKNOWLEDGED = {"success": True}


@router.post("")
async def receive_webhook(
    request: Request,
    settings: Settings = Depends(get_settings),
    verifier: Optional[WebhookSignatureVerifier] = Depends(get_signature_verifier),
    processor: WebhookProcessor = Depends(get_webhook_processor),
):
    """
    Receive a payment notification.

    Always acknowledged with 200 so the provider stops retrying; payloads
    that fail verification or processing are logged and not applied.
    """
    raw_body = await request.body()

    if verifier is not None:
        check = verifier.verify(headers=dict(request.headers), body=raw_body)
        if not check.is_valid:
            logger.warning(f"Webhook signature rejected: {check.error_message}")
            return ACKNOWLEDGED
    elif settings.require_webhook_signature:
        logger.error("Webhook received but no signing secret is configured; notification not applied")
        return ACKNOWLEDGED
    else:
        logger.warning("Webhook signature verification disabled")

    try:
        payload = WebhookPayload.model_validate(json.loads(raw_body))
    except (ValueError, pydantic.ValidationError) as e:
        logger.warning(f"Malformed webhook body ignored: {e}")
        return ACKNOWLEDGED

    logger.info(f"Received webhook {payload.type} for order {payload.order_id}")

    try:
        outcome = processor.process(payload)
        logger.debug(f"Webhook {payload.type} for order {payload.order_id}: {outcome.value}")
    except Exception:
        logger.exception(f"Webhook handler error for order {payload.order_id}")

    return ACKNOWLEDGED
