"""Port for the authoritative source of member health."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from healthsync.domain.health import MemberHealth


@runtime_checkable
class HealthSource(Protocol):
    """Reports the current health of every member registered with a parent.

    Implementations raise ``EntityNotFoundError`` when the parent no longer
    exists upstream. Retry and backoff belong to the implementation.
    """

    def describe_health(self, parent_name: str) -> Sequence[MemberHealth]: ...
