"""Order and payment status models for the storefront"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Union

from pydantic import BaseModel, Field, field_validator


class OrderStatus(str, Enum):
    """Order status as reported by the payment provider"""
    ACTIVE = "ACTIVE"
    PAID = "PAID"
    EXPIRED = "EXPIRED"
    CANCELLED = "CANCELLED"


class PaymentStatus(str, Enum):
    """Status of a single payment attempt"""
    SUCCESS = "SUCCESS"
    FAILED = "FAILED"
    PENDING = "PENDING"
    USER_DROPPED = "USER_DROPPED"


# Provider statuses outside the enums above, read as the nearest status that
# never counts as paid. Unlisted values fall back to ACTIVE / PENDING.
ORDER_STATUS_ALIASES = {"TERMINATED": OrderStatus.CANCELLED, "TERMINATION_REQUESTED": OrderStatus.CANCELLED}
PAYMENT_STATUS_ALIASES = {
    "CANCELLED": PaymentStatus.FAILED,
    "VOID": PaymentStatus.FAILED,
    "NOT_ATTEMPTED": PaymentStatus.PENDING,
}


def _coerce_status(value: Any, enum: type[Enum], aliases: dict, fallback: Enum) -> Any:
    if not isinstance(value, str) or value in {member.value for member in enum}:
        return value
    return aliases.get(value, fallback)


class CustomerInfo(BaseModel):
    """Customer contact details, validated by the form layer beforehand"""
    name: str = ""
    email: str = ""
    phone: str = ""
    customer_id: Optional[str] = None

    def missing_fields(self) -> list[str]:
        return [name for name in ("name", "email", "phone") if not getattr(self, name).strip()]


class OrderLine(BaseModel):
    """Summary of one cart line carried along with the order"""
    item_id: str
    product_id: str
    variant_id: str
    name: str
    quantity: int
    price: float
    size: Optional[str] = None


class OrderRequest(BaseModel):
    """Gateway-agnostic order request built from a cart"""
    order_id: str
    amount: float = Field(gt=0)
    currency: str = "INR"
    customer_id: str
    customer_name: str
    customer_email: str
    customer_phone: str
    note: Optional[str] = None
    return_url: Optional[str] = None
    notify_url: Optional[str] = None
    tags: dict[str, str] = {}
    items: list[OrderLine] = []

    def to_backend_payload(self) -> dict[str, Any]:
        """Request body for the backend order-creation endpoint"""
        payload = {
            "order_id": self.order_id,
            "order_amount": self.amount,
            "order_currency": self.currency,
            "customer_id": self.customer_id,
            "customer_name": self.customer_name,
            "customer_email": self.customer_email,
            "customer_phone": self.customer_phone,
            "return_url": self.return_url,
            "order_note": self.note,
            "order_tags": self.tags,
            "items": [
                {
                    "product_id": line.product_id,
                    "variant_id": line.variant_id,
                    "quantity": line.quantity,
                }
                for line in self.items
            ],
        }
        if self.notify_url:
            payload["notify_url"] = self.notify_url
        return payload


class CreateOrderResult(BaseModel):
    """Order created by the backend, ready for hosted checkout"""
    order_id: str = Field(min_length=1)
    payment_session_id: str = Field(min_length=1)
    order_status: Optional[str] = None
    order_amount: Optional[float] = None
    order_currency: Optional[str] = None


class PaymentAttempt(BaseModel):
    """One payment attempt against an order"""
    cf_payment_id: Optional[Union[int, str]] = None
    payment_status: PaymentStatus
    payment_amount: Optional[float] = None
    payment_currency: Optional[str] = None
    payment_message: Optional[str] = None
    payment_time: Optional[str] = None
    payment_group: Optional[str] = None

    @field_validator("payment_status", mode="before")
    @classmethod
    def tolerate_unknown_status(cls, value: Any) -> Any:
        return _coerce_status(value, PaymentStatus, PAYMENT_STATUS_ALIASES, PaymentStatus.PENDING)


class OrderStatusResponse(BaseModel):
    """Current order status with its payment attempts"""
    order_id: str
    order_status: OrderStatus
    order_amount: Optional[float] = None
    order_currency: Optional[str] = None
    payment_link: Optional[str] = None
    customer_details: Optional[dict[str, Any]] = None
    payments: Optional[list[PaymentAttempt]] = None

    @field_validator("order_status", mode="before")
    @classmethod
    def tolerate_unknown_status(cls, value: Any) -> Any:
        return _coerce_status(value, OrderStatus, ORDER_STATUS_ALIASES, OrderStatus.ACTIVE)

    @property
    def latest_payment(self) -> Optional[PaymentAttempt]:
        if not self.payments:
            return None
        return self.payments[-1]


@dataclass(frozen=True)
class FlatResponse:
    """Backend body carrying the fields at top level"""
    payload: dict[str, Any]


@dataclass(frozen=True)
class EnvelopedResponse:
    """Backend body wrapped as {"success": ..., "data": {...}}"""
    success: bool
    payload: dict[str, Any] = field(default_factory=dict)
    message: Optional[str] = None


BackendResponse = Union[FlatResponse, EnvelopedResponse]
