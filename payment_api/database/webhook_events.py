"""Record of webhook side effects already applied"""

from datetime import datetime, timezone


class WebhookEventStore:
    """
    In-memory ledger of applied webhook events.

    Keyed by (order_id, event kind) so provider retries of the same event
    are recognized and skipped.
    """

    def __init__(self):
        self.applied: dict[tuple[str, str], datetime] = {}

    def is_applied(self, order_id: str, kind: str) -> bool:
        return (order_id, kind) in self.applied

    def mark_applied(self, order_id: str, kind: str) -> None:
        self.applied[(order_id, kind)] = datetime.now(timezone.utc)

    def count(self) -> int:
        return len(self.applied)


# Singleton instance
webhook_event_store = WebhookEventStore()


def get_webhook_event_store() -> WebhookEventStore:
    return webhook_event_store
