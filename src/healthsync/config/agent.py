"""Scope and identity of the health agent."""

from __future__ import annotations

from dataclasses import dataclass

from healthsync.domain.agent import DEFAULT_HEALTH_ID

from .env import optional_env_var, require_env_vars
from .errors import ConfigurationError


@dataclass(frozen=True, slots=True)
class AgentConfig:
    account: str
    region: str
    health_id: str = DEFAULT_HEALTH_ID


def get_agent_config(
    *,
    account: str | None = None,
    region: str | None = None,
) -> AgentConfig:
    """Build the agent config, letting explicit values override the environment."""

    overrides = {"HEALTHSYNC_ACCOUNT": account, "HEALTHSYNC_REGION": region}
    missing = [name for name, value in overrides.items() if value is None]
    values = require_env_vars(missing) if missing else {}
    resolved = {
        name: value if value is not None else values[name] for name, value in overrides.items()
    }
    for name, value in resolved.items():
        if not value.strip():
            raise ConfigurationError(f"Blank value for {name}")

    return AgentConfig(
        account=resolved["HEALTHSYNC_ACCOUNT"].strip(),
        region=resolved["HEALTHSYNC_REGION"].strip(),
        health_id=optional_env_var("HEALTHSYNC_HEALTH_ID") or DEFAULT_HEALTH_ID,
    )
