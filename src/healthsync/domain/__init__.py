"""Domain layer: keys, cache records and the health-refresh agent."""

from __future__ import annotations

from .agent import DEFAULT_HEALTH_ID, AgentScope, LoadBalancerHealthAgent, run
from .cache import (
    AgentDataType,
    AttributeValue,
    Authority,
    CacheRecord,
    CacheResult,
    CacheResultBuilder,
    Namespace,
    build_cache_result,
)
from .errors import EntityNotFoundError, HealthSyncError, MalformedKeyError, ValidationError
from .health import LoadBalancerType, MemberHealth, owns_subtype
from .keys import EntityKey, KeyType, decode_key, encode_key, key_matches

__all__ = [
    "DEFAULT_HEALTH_ID",
    "AgentDataType",
    "AgentScope",
    "AttributeValue",
    "Authority",
    "CacheRecord",
    "CacheResult",
    "CacheResultBuilder",
    "EntityKey",
    "EntityNotFoundError",
    "HealthSyncError",
    "KeyType",
    "LoadBalancerHealthAgent",
    "LoadBalancerType",
    "MalformedKeyError",
    "MemberHealth",
    "Namespace",
    "ValidationError",
    "build_cache_result",
    "decode_key",
    "encode_key",
    "key_matches",
    "owns_subtype",
    "run",
]
