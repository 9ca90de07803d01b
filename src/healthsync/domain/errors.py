"""Domain error definitions."""

from __future__ import annotations


class HealthSyncError(Exception):
    """Base class for domain-level failures."""


class MalformedKeyError(HealthSyncError, ValueError):
    """Raised when a cache key cannot be encoded or parsed for its declared type."""

    def __init__(self, message: str, *, key: str | None = None) -> None:
        super().__init__(message)
        self.key = key


class EntityNotFoundError(HealthSyncError, LookupError):
    """Raised by a health source when the queried parent no longer exists upstream."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Parent entity not found upstream: {name}")
        self.name = name


class ValidationError(HealthSyncError, ValueError):
    """Raised when a cache result violates per-namespace id uniqueness."""
