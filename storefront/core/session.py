"""Shopping session context"""

import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional, Protocol

import pydantic

from ..models.cart import CartAction, CartState
from ..services import cart as cart_reducer

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CartStore(Protocol):
    """Persistence capability for cart state"""

    def load(self, session_id: str) -> Optional[dict]:
        ...

    def save(self, session_id: str, data: dict) -> None:
        ...

    def delete(self, session_id: str) -> None:
        ...


class InMemoryCartStore:
    """In-memory cart persistence"""

    def __init__(self):
        self.carts: dict[str, dict] = {}

    def load(self, session_id: str) -> Optional[dict]:
        return self.carts.get(session_id)

    def save(self, session_id: str, data: dict) -> None:
        self.carts[session_id] = data

    def delete(self, session_id: str) -> None:
        self.carts.pop(session_id, None)


@dataclass
class ShoppingSession:
    """Customer shopping session"""
    session_id: str
    created_at: datetime
    updated_at: datetime
    store: CartStore
    cart: CartState = field(default_factory=CartState)

    def dispatch(self, action: CartAction) -> CartState:
        """Apply a cart action and persist the resulting state"""
        new_state = cart_reducer.apply(self.cart, action)
        if new_state is not self.cart:
            self.cart = new_state
            self.updated_at = _utcnow()
            self.store.save(self.session_id, new_state.model_dump(mode="json"))
        return self.cart


class SessionManager:
    """Manages shopping sessions"""

    def __init__(self, store: Optional[CartStore] = None):
        self.store = store or InMemoryCartStore()
        self.sessions: dict[str, ShoppingSession] = {}

    def create_session(self, session_id: Optional[str] = None) -> ShoppingSession:
        """Create a new session, restoring a persisted cart when one exists"""
        now = _utcnow()
        session = ShoppingSession(
            session_id=session_id or str(uuid.uuid4()),
            created_at=now,
            updated_at=now,
            store=self.store,
            cart=self._restore_cart(session_id) if session_id else CartState(),
        )
        self.sessions[session.session_id] = session
        return session

    def _restore_cart(self, session_id: str) -> CartState:
        data = self.store.load(session_id)
        if not data:
            return CartState()
        try:
            return CartState.model_validate(data)
        except pydantic.ValidationError as e:
            logger.warning(f"Discarding unreadable cart for session {session_id}: {e}")
            return CartState()

    def get_session(self, session_id: str) -> Optional[ShoppingSession]:
        """Get session by ID"""
        return self.sessions.get(session_id)

    def get_or_create_session(self, session_id: Optional[str] = None) -> ShoppingSession:
        """Get existing session or create new one"""
        if session_id and session_id in self.sessions:
            return self.sessions[session_id]
        return self.create_session(session_id)

    def delete_session(self, session_id: str) -> bool:
        """Delete a session and its persisted cart"""
        self.store.delete(session_id)
        if session_id in self.sessions:
            del self.sessions[session_id]
            return True
        return False

    def cleanup_old_sessions(self, max_age_hours: int = 24) -> int:
        """Drop in-memory sessions idle for longer than max_age_hours"""
        now = _utcnow()
        old_sessions = [
            sid for sid, session in self.sessions.items()
            if (now - session.updated_at).total_seconds() > max_age_hours * 3600
        ]
        for sid in old_sessions:
            del self.sessions[sid]
        return len(old_sessions)
