from __future__ import annotations


class ValidationError(ValueError):
    """Raised when a request is missing a required field or carries a malformed value."""


class NotFoundError(LookupError):
    """Raised when the row targeted by a write does not exist."""


class SchemaInitializationError(RuntimeError):
    """Raised when the startup schema bootstrap cannot complete."""
