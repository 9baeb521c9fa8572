"""Payment request/response models for the payment API"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator


class OrderItemRef(BaseModel):
    """Product variant and quantity carried with an order"""
    product_id: str
    variant_id: str
    quantity: int = Field(gt=0)


class CreatePaymentRequest(BaseModel):
    """Request from the storefront to start a payment"""
    order_amount: float = Field(gt=0)
    customer_name: str = Field(min_length=1)
    customer_email: str = Field(min_length=3)
    customer_phone: str = Field(min_length=1)
    customer_id: Optional[str] = None
    return_url: Optional[str] = None
    notify_url: Optional[str] = None
    order_id: Optional[str] = None
    order_currency: Optional[str] = None
    order_note: Optional[str] = None
    order_tags: dict[str, str] = {}
    items: list[OrderItemRef] = []

    @field_validator("customer_name", "customer_email", "customer_phone")
    @classmethod
    def not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value


class OrderStatusRequest(BaseModel):
    """Request to look up an order's status"""
    order_id: str = Field(min_length=1)


class PaymentSession(BaseModel):
    """Order created with the gateway, handed to hosted checkout"""
    order_id: str
    payment_session_id: str
    order_status: str
    order_amount: float
    order_currency: str


class OrderRecordStatus(str, Enum):
    """Fulfilment-side status of an order in the ledger"""
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    ABANDONED = "abandoned"


class OrderRecord(BaseModel):
    """Order as recorded by the payment API"""
    order_id: str
    status: OrderRecordStatus = OrderRecordStatus.PENDING
    amount: float
    currency: str
    customer_id: str
    customer_email: str
    items: list[OrderItemRef] = []
    cf_order_id: Optional[str] = None
    payment_id: Optional[str] = None
    created_at: datetime
    updated_at: datetime


def envelope(data: Any) -> dict:
    """Wrap a payload the way every payment API success body is shaped"""
    if isinstance(data, BaseModel):
        data = data.model_dump(mode="json")
    return {"success": True, "data": data}
