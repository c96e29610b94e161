"""
Public surface for eduflow.
Importing this module does **not** touch the database; call
`eduflow.create_client()` during application start-up.
"""

from .config import Settings
from .errors import BackendConfigError, EduflowError
from .events import AuthEvent
from .query import QueryResult
from .runtime import DemoClient, create_client

__all__ = [
    "AuthEvent",
    "BackendConfigError",
    "DemoClient",
    "EduflowError",
    "QueryResult",
    "Settings",
    "create_client",
]
