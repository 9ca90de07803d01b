"""Translate health API payloads into domain values."""

from __future__ import annotations

from typing import TYPE_CHECKING

from healthsync.domain.health import MemberHealth

if TYPE_CHECKING:
    from .schema import InstanceHealthResponse, InstanceState


def translate_instance_state(payload: InstanceState) -> MemberHealth:
    return MemberHealth(
        member_id=payload.instance_id,
        state=payload.state,
        reason_code=payload.reason_code,
        description=payload.description,
    )


def translate_instance_health(payload: InstanceHealthResponse) -> list[MemberHealth]:
    return [translate_instance_state(state) for state in payload.instance_states]
