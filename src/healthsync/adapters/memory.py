"""In-memory cache store, loadable from and dumpable to JSON snapshots."""

from __future__ import annotations

import json
from logging import getLogger
from typing import TYPE_CHECKING, cast

from healthsync.domain.cache import CacheRecord
from healthsync.domain.keys import key_matches
from healthsync.domain.ports.cache import RelationshipFilter

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping
    from pathlib import Path

    from healthsync.domain.cache import CacheResult

log = getLogger(__name__)


class InMemoryCacheStore:
    """Dictionary-backed implementation of the cache store port.

    ``apply`` upserts: attributes of an incoming record replace the stored
    ones when non-empty, relationships are unioned per namespace.
    """

    def __init__(self, records: Mapping[str, Iterable[CacheRecord]] | None = None) -> None:
        self._namespaces: dict[str, dict[str, CacheRecord]] = {}
        for namespace, namespace_records in (records or {}).items():
            for record in namespace_records:
                self.put(namespace, record)

    def put(self, namespace: str, record: CacheRecord) -> None:
        self._namespaces.setdefault(namespace, {})[record.id] = record

    def namespaces(self) -> list[str]:
        return list(self._namespaces)

    def get(self, namespace: str, record_id: str) -> CacheRecord | None:
        return self._namespaces.get(namespace, {}).get(record_id)

    def filter_identifiers(self, namespace: str, pattern: str) -> list[str]:
        return [
            record_id
            for record_id in self._namespaces.get(namespace, {})
            if key_matches(pattern, record_id)
        ]

    def get_all(
        self,
        namespace: str,
        ids: Iterable[str],
        relationship_filter: RelationshipFilter | None = None,
    ) -> dict[str, CacheRecord]:
        active_filter = relationship_filter or RelationshipFilter.all()
        stored = self._namespaces.get(namespace, {})
        found: dict[str, CacheRecord] = {}
        for record_id in ids:
            record = stored.get(record_id)
            if record is None:
                continue
            found[record_id] = CacheRecord(
                id=record.id,
                attributes=record.attributes,
                relationships={
                    rel_namespace: rel_ids
                    for rel_namespace, rel_ids in record.relationships.items()
                    if active_filter.allows(rel_namespace)
                },
            )
        return found

    def apply(self, result: CacheResult) -> None:
        for namespace in result:
            for record in result[namespace]:
                self.put(namespace, self._merge(self.get(namespace, record.id), record))
        log.debug(
            "Applied %s records across %s namespaces", result.record_count, len(list(result))
        )

    @staticmethod
    def _merge(existing: CacheRecord | None, incoming: CacheRecord) -> CacheRecord:
        if existing is None:
            return incoming
        relationships = {name: set(ids) for name, ids in existing.relationships.items()}
        for name, ids in incoming.relationships.items():
            relationships.setdefault(name, set()).update(ids)
        return CacheRecord(
            id=incoming.id,
            attributes=incoming.attributes or existing.attributes,
            relationships={name: frozenset(ids) for name, ids in relationships.items()},
        )

    def to_dict(self) -> dict[str, list[dict[str, object]]]:
        return {
            namespace: [record.to_dict() for record in records.values()]
            for namespace, records in self._namespaces.items()
        }

    @classmethod
    def from_snapshot(cls, path: Path) -> InMemoryCacheStore:
        """Load a store from a JSON document of ``{namespace: [record, ...]}``."""

        with path.open(encoding="utf-8") as handle:
            payload = json.load(handle)
        if not isinstance(payload, dict):
            raise ValueError(f"Snapshot {path} must contain a JSON object")
        store = cls()
        for namespace, records in cast(dict[str, object], payload).items():
            if not isinstance(records, list):
                raise ValueError(f"Snapshot namespace '{namespace}' must be a list")
            for record in cast(list[object], records):
                if not isinstance(record, dict):
                    raise ValueError(f"Snapshot namespace '{namespace}' holds a non-object")
                store.put(namespace, CacheRecord.from_dict(cast(dict[str, object], record)))
        log.info("Loaded cache snapshot %s: namespaces=%s", path, len(store.namespaces()))
        return store

    def write_snapshot(self, path: Path) -> None:
        with path.open("w", encoding="utf-8") as handle:
            json.dump(self.to_dict(), handle, indent=2, sort_keys=True)


if TYPE_CHECKING:
    from healthsync.domain.ports.cache import CacheStore

    _store_check: CacheStore = InMemoryCacheStore()
