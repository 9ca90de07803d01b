"""Domain port definitions for adapters."""

from __future__ import annotations

from .cache import CacheStore, RelationshipFilter
from .health import HealthSource

__all__ = [
    "CacheStore",
    "HealthSource",
    "RelationshipFilter",
]
