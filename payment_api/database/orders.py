"""Order ledger for the payment API"""

from datetime import datetime, timezone
from typing import Optional

from ..models.payment import OrderItemRef, OrderRecord, OrderRecordStatus


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class OrderDatabase:
    """In-memory order storage"""

    def __init__(self):
        self.orders: dict[str, OrderRecord] = {}

    def exists(self, order_id: str) -> bool:
        return order_id in self.orders

    def create_order(
        self,
        order_id: str,
        amount: float,
        currency: str,
        customer_id: str,
        customer_email: str,
        items: list[OrderItemRef],
        cf_order_id: Optional[str] = None,
    ) -> OrderRecord:
        """Record an order created with the gateway"""
        now = _utcnow()
        order = OrderRecord(
            order_id=order_id,
            amount=amount,
            currency=currency,
            customer_id=customer_id,
            customer_email=customer_email,
            items=items,
            cf_order_id=cf_order_id,
            created_at=now,
            updated_at=now,
        )
        self.orders[order_id] = order
        return order

    def get_order(self, order_id: str) -> Optional[OrderRecord]:
        """Get an order by ID"""
        return self.orders.get(order_id)

    def update_status(
        self,
        order_id: str,
        status: OrderRecordStatus,
        payment_id: Optional[str] = None,
    ) -> Optional[OrderRecord]:
        """Update order status"""
        order = self.get_order(order_id)
        if not order:
            return None

        order.status = status
        if payment_id:
            order.payment_id = payment_id
        order.updated_at = _utcnow()
        return order

    def list_orders(self, limit: int = 50) -> list[OrderRecord]:
        """List recent orders"""
        orders = list(self.orders.values())
        orders.sort(key=lambda o: o.created_at, reverse=True)
        return orders[:limit]


# Singleton instance
order_db = OrderDatabase()


def get_order_db() -> OrderDatabase:
    return order_db
