"""
eduflow.auth  ──  Session Bus for the local emulation.

No credential checks and no session persistence: signing in always works and
yields the same deterministic identity, and `get_session()` is always empty.
Profiles live in the Record Store's `profiles` table.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from .core.session import DEFAULT_ROLE, DEMO_EMAIL, AuthResponse, Session, User, UserMetadata
from .core.tables import RecordStore
from .events import AuthEvent, EventRegistry, Listener, Subscription

logger = logging.getLogger(__name__)


class SessionBus:
    def __init__(self, store: RecordStore, user_id: str = "demo-user-id"):
        self.store = store
        self.user_id = user_id
        self._registry = EventRegistry()

    # ---- subscription ---------------------------------------------------
    def on_auth_state_change(self, listener: Listener) -> Subscription:
        return self._registry.register(listener)

    # ---- transitions ----------------------------------------------------
    async def get_session(self) -> AuthResponse:
        return AuthResponse(data={"session": None})

    async def sign_in_with_password(self, credentials: Dict[str, Any]) -> AuthResponse:
        user = self._user(credentials.get("email"), role=self._stored_role())
        session = Session(user=user)
        logger.info("Signed in %s as %s", user.email, user.user_metadata.role)
        self._registry.emit(AuthEvent.SIGNED_IN, session)
        return AuthResponse(data={"user": user, "session": session})

    async def sign_up(self, credentials: Dict[str, Any]) -> AuthResponse:
        meta = (credentials.get("options") or {}).get("data") or {}
        role = meta.get("role") or DEFAULT_ROLE
        profiles = self.store.live("profiles")
        if not isinstance(profiles, dict):
            profiles = {}
            self.store.replace("profiles", profiles)
        profiles[self.user_id] = {
            "full_name": meta.get("full_name") or "Demo User",
            "role": role,
        }
        self.store.commit()

        user = self._user(credentials.get("email"), role=role, extra=meta)
        session = Session(user=user)
        logger.info("Signed up %s as %s", user.email, role)
        self._registry.emit(AuthEvent.SIGNED_UP, session)
        return AuthResponse(data={"user": user, "session": session})

    async def sign_out(self) -> AuthResponse:
        logger.info("Signed out")
        self._registry.emit(AuthEvent.SIGNED_OUT, None)
        return AuthResponse()

    async def update_user(self, attributes: Dict[str, Any]) -> AuthResponse:
        """Accepted and ignored: there is no credential store to update."""
        return AuthResponse(data={"user": User(id=self.user_id)})

    # ---- helpers --------------------------------------------------------
    def _stored_role(self) -> str:
        profiles = self.store.live("profiles")
        profile: Optional[Dict[str, Any]] = None
        if isinstance(profiles, dict):
            profile = profiles.get(self.user_id)
        return (profile or {}).get("role") or DEFAULT_ROLE

    def _user(self, email: Optional[str], role: str, extra: Optional[Dict[str, Any]] = None) -> User:
        return User(
            id=self.user_id,
            email=email or DEMO_EMAIL,
            user_metadata=UserMetadata(**{**(extra or {}), "role": role}),
        )
