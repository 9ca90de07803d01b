"""Port for the shared relationship cache."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence

    from healthsync.domain.cache import CacheRecord, CacheResult


@dataclass(frozen=True, slots=True)
class RelationshipFilter:
    """Which relationship namespaces a lookup should expand.

    ``namespaces=None`` expands everything; an empty set expands nothing.
    """

    namespaces: frozenset[str] | None = None

    @classmethod
    def none(cls) -> RelationshipFilter:
        return cls(namespaces=frozenset())

    @classmethod
    def all(cls) -> RelationshipFilter:
        return cls(namespaces=None)

    @classmethod
    def include(cls, *namespaces: str) -> RelationshipFilter:
        return cls(namespaces=frozenset(namespaces))

    def allows(self, namespace: str) -> bool:
        return self.namespaces is None or namespace in self.namespaces


@runtime_checkable
class CacheStore(Protocol):
    """Read side used by agents plus the apply hook their results feed."""

    def filter_identifiers(self, namespace: str, pattern: str) -> Sequence[str]: ...

    def get_all(
        self,
        namespace: str,
        ids: Iterable[str],
        relationship_filter: RelationshipFilter | None = None,
    ) -> Mapping[str, CacheRecord]: ...

    def apply(self, result: CacheResult) -> None: ...
