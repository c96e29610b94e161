"""
eduflow.config  ──  environment-driven settings.

    from eduflow.config import Settings

    settings = Settings.from_env()      # reads .env first, then os.environ
    settings.remote_configured          # False ➜ local emulation is used
"""

from __future__ import annotations

import logging
import os

from dotenv import load_dotenv
from pydantic import BaseModel

logger = logging.getLogger(__name__)

DEFAULT_SNAPSHOT_DB_URL = "sqlite:///eduflow_demo.db"
DEFAULT_STORAGE_KEY = "eduflow_demo_db"
DEFAULT_DEMO_USER_ID = "demo-user-id"

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off", ""}


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    logger.warning("Invalid boolean for %s=%r, using default %s", name, raw, default)
    return default


class Settings(BaseModel):
    """Resolved configuration for one client."""

    backend_url: str | None = None
    backend_key: str | None = None
    snapshot_db_url: str = DEFAULT_SNAPSHOT_DB_URL
    storage_key: str = DEFAULT_STORAGE_KEY
    faithful_queries: bool = False
    demo_user_id: str = DEFAULT_DEMO_USER_ID

    model_config = {"frozen": True}

    @classmethod
    def from_env(cls) -> "Settings":
        load_dotenv()
        return cls(
            backend_url=os.environ.get("EDUFLOW_BACKEND_URL") or None,
            backend_key=os.environ.get("EDUFLOW_BACKEND_KEY") or None,
            snapshot_db_url=os.environ.get(
                "EDUFLOW_SNAPSHOT_DB_URL", DEFAULT_SNAPSHOT_DB_URL
            ),
            storage_key=os.environ.get("EDUFLOW_STORAGE_KEY", DEFAULT_STORAGE_KEY),
            faithful_queries=_env_bool("EDUFLOW_FAITHFUL_QUERIES", False),
            demo_user_id=os.environ.get("EDUFLOW_DEMO_USER_ID", DEFAULT_DEMO_USER_ID),
        )

    @property
    def remote_configured(self) -> bool:
        """True when the backend URL looks like a real http(s) endpoint."""
        url = self.backend_url or ""
        return url.startswith("http://") or url.startswith("https://")


def configure_logging(level: int | str = logging.INFO) -> None:
    """Basic stderr logging for scripts; the library itself never calls this."""
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
