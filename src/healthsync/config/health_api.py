"""Health API configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from .env import optional_env_var, require_env_vars
from .http_resilience import RateLimit, ResilienceConfig

HEALTH_API_TIMEOUT_SECONDS = 10.0


@dataclass(frozen=True)
class HealthApiConfig:
    """Holds health API connection values."""

    base_url: str
    resilience: ResilienceConfig
    token: str | None = None


def get_health_api_config(*, resilience: ResilienceConfig | None = None) -> HealthApiConfig:
    values = require_env_vars(("HEALTH_API_BASE_URL",))
    base_url = values["HEALTH_API_BASE_URL"]
    token = optional_env_var("HEALTH_API_TOKEN")
    headers = {"Authorization": f"Bearer {token}"} if token else None
    return HealthApiConfig(
        base_url=base_url,
        token=token,
        resilience=resilience
        or ResilienceConfig(
            name="health-api",
            base_url=base_url,
            timeout_seconds=HEALTH_API_TIMEOUT_SECONDS,
            ratelimit=RateLimit(max_calls=10, per_seconds=1.0),
            default_headers=headers,
        ),
    )
