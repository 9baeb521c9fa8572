"""Webhook models"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel


class WebhookEventKind(str, Enum):
    PAYMENT_SUCCEEDED = "payment_succeeded"
    PAYMENT_FAILED = "payment_failed"
    PAYMENT_USER_DROPPED = "payment_user_dropped"
    UNRECOGNIZED = "unrecognized"


# Provider event types and the kind each one maps to
EVENT_TYPES = {
    "PAYMENT_SUCCESS_WEBHOOK": WebhookEventKind.PAYMENT_SUCCEEDED,
    "PAYMENT_FAILED_WEBHOOK": WebhookEventKind.PAYMENT_FAILED,
    "PAYMENT_USER_DROPPED_WEBHOOK": WebhookEventKind.PAYMENT_USER_DROPPED,
}


class WebhookData(BaseModel):
    order: dict[str, Any] = {}
    payment: dict[str, Any] = {}


class WebhookPayload(BaseModel):
    """Notification body sent by the payment provider"""
    type: Optional[str] = None
    data: WebhookData = WebhookData()

    @property
    def order_id(self) -> Optional[str]:
        order_id = self.data.order.get("order_id")
        return str(order_id) if order_id else None


class WebhookOutcome(str, Enum):
    APPLIED = "applied"
    DUPLICATE = "duplicate"
    IGNORED = "ignored"
