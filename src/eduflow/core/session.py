"""
Identity / session models used by the Session Bus.

`UserMetadata` is a free-form bag (like the profile row it mirrors) that
always carries a `role`.
"""

from typing import Any, Dict

from pydantic import BaseModel

DEFAULT_ROLE = "learner"
DEMO_TOKEN = "demo-token"
DEMO_EMAIL = "demo@example.com"


class UserMetadata(BaseModel):
    role: str = DEFAULT_ROLE
    model_config = {"extra": "allow", "frozen": False, "arbitrary_types_allowed": True}


class User(BaseModel):
    id: str
    email: str = DEMO_EMAIL
    user_metadata: UserMetadata = UserMetadata()


class Session(BaseModel):
    """Ephemeral identity/token pairing; never persisted."""

    user: User
    access_token: str = DEMO_TOKEN


class AuthResponse(BaseModel):
    """Shape every Session Bus coroutine resolves to."""

    data: Dict[str, Any] = {}
    error: Any = None
