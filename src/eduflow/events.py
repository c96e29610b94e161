"""
eduflow.events  ──  auth-state listener registry.

One registry per Session Bus; listeners run synchronously, in registration
order, for every transition.
"""

from __future__ import annotations

from enum import Enum
from typing import Callable, Dict, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .core.session import Session

Listener = Callable[[str, Optional["Session"]], None]


class AuthEvent(str, Enum):
    SIGNED_IN = "SIGNED_IN"
    SIGNED_UP = "SIGNED_UP"
    SIGNED_OUT = "SIGNED_OUT"


class Subscription:
    """Handle returned by `on_auth_state_change`; `unsubscribe()` is idempotent."""

    def __init__(self, registry: "EventRegistry", token: int):
        self._registry = registry
        self._token = token

    def unsubscribe(self) -> None:
        self._registry.unregister(self._token)


class EventRegistry:
    """Ordered set of listeners keyed by a monotonically increasing token."""

    def __init__(self):
        self._listeners: Dict[int, Listener] = {}
        self._next_token = 0

    def __len__(self) -> int:
        return len(self._listeners)

    def register(self, listener: Listener) -> Subscription:
        token = self._next_token
        self._next_token += 1
        self._listeners[token] = listener
        return Subscription(self, token)

    def unregister(self, token: int) -> None:
        self._listeners.pop(token, None)

    def emit(self, event: AuthEvent, session: Optional["Session"]) -> None:
        """Call every listener; a listener's exception propagates to the emitter."""
        for listener in list(self._listeners.values()):
            listener(event.value, session)
