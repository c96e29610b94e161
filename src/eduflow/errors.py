"""
Exception types for eduflow.

The emulation deliberately raises very little: queries and mutations report
absence as empty data, never as errors. Only configuration mistakes surface
to callers.
"""


class EduflowError(Exception):
    """Base class for all eduflow errors."""


class BackendConfigError(EduflowError):
    """A remote backend is configured but no client could be built for it."""


class PersistenceError(EduflowError):
    """Writing a snapshot to the durable slot failed (absorbed by the adapter)."""
