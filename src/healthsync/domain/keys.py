"""Structured cache keys.

A key is a ``:``-joined string: the type literal, then account and region,
then the type-specific scope, and finally the resource name or id, e.g.::

    loadBalancers:prod:us-east-1:vpc-1a2b:classic:frontend
    loadBalancers:prod:us-east-1:-:legacy-frontend
    instances:prod:us-east-1:i-0abc
    instanceHealth:prod:us-east-1:i-0abc:aws-load-balancer-instance-health

An absent scope field is written as ``-``. A type may have several layouts,
oldest first: a key is encoded with the oldest layout that can hold its
values, so keys without a newer field keep the shape older readers expect,
and decoding picks the layout by segment count. ``*`` in any field turns the
key into a glob pattern.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from enum import StrEnum
from typing import Final

from .errors import MalformedKeyError

DELIMITER: Final[str] = ":"
WILDCARD: Final[str] = "*"
ABSENT: Final[str] = "-"


class KeyType(StrEnum):
    LOAD_BALANCERS = "loadBalancers"
    INSTANCES = "instances"
    INSTANCE_HEALTH = "instanceHealth"


@dataclass(frozen=True, slots=True)
class _KeySchema:
    layouts: tuple[tuple[str, ...], ...]
    required: frozenset[str]

    @property
    def fields(self) -> tuple[str, ...]:
        return self.layouts[-1]

    def layout_for_segments(self, count: int) -> tuple[str, ...] | None:
        for layout in self.layouts:
            if len(layout) + 1 == count:
                return layout
        return None

    def layout_for_values(self, present: set[str]) -> tuple[str, ...]:
        for layout in self.layouts:
            if present.issubset(layout):
                return layout
        return self.fields


_SCHEMAS: Final[dict[KeyType, _KeySchema]] = {
    KeyType.LOAD_BALANCERS: _KeySchema(
        layouts=(
            ("account", "region", "sub_scope", "name"),
            ("account", "region", "sub_scope", "subtype", "name"),
        ),
        required=frozenset({"account", "region", "name"}),
    ),
    KeyType.INSTANCES: _KeySchema(
        layouts=(("account", "region", "name"),),
        required=frozenset({"account", "region", "name"}),
    ),
    KeyType.INSTANCE_HEALTH: _KeySchema(
        layouts=(("account", "region", "name", "provider"),),
        required=frozenset({"account", "region", "name", "provider"}),
    ),
}


@dataclass(frozen=True, slots=True, kw_only=True)
class EntityKey:
    """Typed, scoped identifier of a cached entity."""

    type: KeyType
    account: str
    region: str
    name: str
    sub_scope: str | None = None
    subtype: str | None = None
    provider: str | None = None

    def __post_init__(self) -> None:
        schema = _SCHEMAS[self.type]
        for field_ in fields(self):
            if field_.name == "type":
                continue
            value = getattr(self, field_.name)
            if field_.name not in schema.fields:
                if value is not None:
                    raise MalformedKeyError(
                        f"Field '{field_.name}' is not part of {self.type} keys"
                    )
                continue
            if value is None:
                if field_.name in schema.required:
                    raise MalformedKeyError(f"Missing '{field_.name}' for {self.type} key")
                continue
            _check_value(field_.name, value)

    @property
    def is_pattern(self) -> bool:
        return any(getattr(self, name) == WILDCARD for name in _SCHEMAS[self.type].fields)

    def encode(self) -> str:
        schema = _SCHEMAS[self.type]
        present = {name for name in schema.fields if getattr(self, name) is not None}
        segments = [str(self.type)]
        for name in schema.layout_for_values(present):
            value = getattr(self, name)
            segments.append(ABSENT if value is None else value)
        return DELIMITER.join(segments)

    @classmethod
    def parse(cls, key: str) -> EntityKey:
        segments = key.split(DELIMITER)
        try:
            key_type = KeyType(segments[0])
        except ValueError:
            raise MalformedKeyError(f"Unknown key type in '{key}'", key=key) from None

        schema = _SCHEMAS[key_type]
        layout = schema.layout_for_segments(len(segments))
        if layout is None:
            expected = ", ".join(str(len(option) + 1) for option in schema.layouts)
            raise MalformedKeyError(
                f"{key_type} key needs {expected} segments, got {len(segments)}: '{key}'",
                key=key,
            )

        components: dict[str, str | None] = dict.fromkeys(schema.fields)
        for name, segment in zip(layout, segments[1:], strict=True):
            if not segment:
                raise MalformedKeyError(f"Empty '{name}' segment in '{key}'", key=key)
            components[name] = None if segment == ABSENT else segment

        for name in schema.required:
            if components[name] is None:
                raise MalformedKeyError(f"Missing '{name}' in '{key}'", key=key)

        return cls(type=key_type, **components)  # type: ignore[arg-type]


def _check_value(name: str, value: str) -> None:
    if not value:
        raise MalformedKeyError(f"Empty value for '{name}'")
    if DELIMITER in value:
        raise MalformedKeyError(f"Value for '{name}' contains '{DELIMITER}': {value!r}")
    if value == ABSENT:
        raise MalformedKeyError(f"Value for '{name}' collides with the absent marker")


def encode_key(key_type: KeyType | str, **components: str | None) -> str:
    """Encode ``components`` as a key of ``key_type``."""

    try:
        resolved = KeyType(key_type)
    except ValueError:
        raise MalformedKeyError(f"Unknown key type: {key_type}") from None
    return EntityKey(type=resolved, **components).encode()  # type: ignore[arg-type]


def decode_key(key: str) -> EntityKey:
    """Parse ``key`` back into its components."""

    return EntityKey.parse(key)


def load_balancer_key(
    name: str,
    account: str,
    region: str,
    sub_scope: str | None = None,
    subtype: str | None = None,
) -> str:
    return EntityKey(
        type=KeyType.LOAD_BALANCERS,
        account=account,
        region=region,
        name=name,
        sub_scope=sub_scope,
        subtype=subtype,
    ).encode()


def instance_key(instance_id: str, account: str, region: str) -> str:
    return EntityKey(
        type=KeyType.INSTANCES, account=account, region=region, name=instance_id
    ).encode()


def instance_health_key(instance_id: str, account: str, region: str, provider: str) -> str:
    return EntityKey(
        type=KeyType.INSTANCE_HEALTH,
        account=account,
        region=region,
        name=instance_id,
        provider=provider,
    ).encode()


def key_matches(pattern: str, key: str) -> bool:
    """Return whether ``key`` matches the glob ``pattern`` field by field.

    Both sides are decoded first, so a pattern written in the current layout
    also finds keys written in an older one. ``*`` matches any value, and an
    absent optional field. Every other field must be equal, with ``-`` only
    matching an absent field. A key that does not decode never matches.
    """

    expected = decode_key(pattern)
    try:
        actual = decode_key(key)
    except MalformedKeyError:
        return False
    if expected.type is not actual.type:
        return False
    for name in _SCHEMAS[expected.type].fields:
        wanted = getattr(expected, name)
        if wanted not in (WILDCARD, getattr(actual, name)):
            return False
    return True
