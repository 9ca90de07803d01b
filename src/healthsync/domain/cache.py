"""Cache records and the per-cycle result assembled from them."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from types import MappingProxyType
from typing import TYPE_CHECKING

from .errors import ValidationError

if TYPE_CHECKING:
    from collections.abc import Iterator

type AttributeValue = str | int | float | bool | Mapping[str, AttributeValue]
type Attributes = Mapping[str, AttributeValue]
type Relationships = Mapping[str, frozenset[str]]


class Namespace(StrEnum):
    """Partitions of the shared cache this package reads or writes."""

    LOAD_BALANCERS = "loadBalancers"
    INSTANCES = "instances"
    HEALTH = "health"


class Authority(StrEnum):
    AUTHORITATIVE = "authoritative"
    INFORMATIVE = "informative"


@dataclass(frozen=True, slots=True)
class AgentDataType:
    """Namespace an agent contributes to, and whether it owns that namespace."""

    namespace: str
    authority: Authority


@dataclass(frozen=True, slots=True)
class CacheRecord:
    """One cached entity: its key, attribute map and outgoing relationships."""

    id: str
    attributes: Attributes = field(default_factory=dict[str, "AttributeValue"])
    relationships: Relationships = field(default_factory=dict[str, frozenset[str]])

    def __post_init__(self) -> None:
        object.__setattr__(self, "attributes", MappingProxyType(dict(self.attributes)))
        object.__setattr__(
            self,
            "relationships",
            MappingProxyType(
                {namespace: frozenset(ids) for namespace, ids in self.relationships.items()}
            ),
        )

    def to_dict(self) -> dict[str, object]:
        return {
            "id": self.id,
            "attributes": _plain(self.attributes),
            "relationships": {
                namespace: sorted(ids) for namespace, ids in self.relationships.items()
            },
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, object]) -> CacheRecord:
        record_id = payload.get("id")
        if not isinstance(record_id, str):
            raise ValueError(f"Cache record payload without a string id: {payload!r}")
        attributes = payload.get("attributes") or {}
        relationships = payload.get("relationships") or {}
        if not isinstance(attributes, Mapping) or not isinstance(relationships, Mapping):
            raise ValueError(f"Malformed cache record payload for {record_id}")
        return cls(
            id=record_id,
            attributes=attributes,  # type: ignore[arg-type]
            relationships={
                str(namespace): frozenset(ids)  # type: ignore[arg-type]
                for namespace, ids in relationships.items()
            },
        )


def _plain(attributes: Attributes) -> dict[str, object]:
    plain: dict[str, object] = {}
    for name, value in attributes.items():
        plain[name] = _plain(value) if isinstance(value, Mapping) else value
    return plain


@dataclass(frozen=True, slots=True)
class CacheResult:
    """Complete output of one poll cycle, grouped by namespace."""

    records: Mapping[str, tuple[CacheRecord, ...]] = field(
        default_factory=dict[str, tuple[CacheRecord, ...]]
    )

    def __post_init__(self) -> None:
        object.__setattr__(self, "records", MappingProxyType(dict(self.records)))

    def __getitem__(self, namespace: str) -> tuple[CacheRecord, ...]:
        return self.records.get(namespace, ())

    def __iter__(self) -> Iterator[str]:
        return iter(self.records)

    @property
    def record_count(self) -> int:
        return sum(len(records) for records in self.records.values())

    def ids(self, namespace: str) -> list[str]:
        return [record.id for record in self[namespace]]

    def to_dict(self) -> dict[str, list[dict[str, object]]]:
        return {
            namespace: [record.to_dict() for record in records]
            for namespace, records in self.records.items()
        }


class CacheResultBuilder:
    """Collect records per namespace, rejecting duplicate ids."""

    def __init__(self, namespaces: Iterable[str] = ()) -> None:
        self._records: dict[str, dict[str, CacheRecord]] = {
            namespace: {} for namespace in namespaces
        }

    def add(self, namespace: str, record: CacheRecord) -> None:
        bucket = self._records.setdefault(namespace, {})
        if record.id in bucket:
            raise ValidationError(f"Duplicate id in namespace '{namespace}': {record.id}")
        bucket[record.id] = record

    def extend(self, namespace: str, records: Iterable[CacheRecord]) -> None:
        for record in records:
            self.add(namespace, record)

    def build(self) -> CacheResult:
        return CacheResult(
            records={
                namespace: tuple(bucket.values()) for namespace, bucket in self._records.items()
            }
        )


def build_cache_result(
    records_by_namespace: Mapping[str, Iterable[CacheRecord]],
) -> CacheResult:
    """Group records into a :class:`CacheResult`.

    Raises ``ValidationError`` when two records in one namespace share an id.
    """

    builder = CacheResultBuilder(records_by_namespace)
    for namespace, records in records_by_namespace.items():
        builder.extend(namespace, records)
    return builder.build()
