"""Application configuration helpers."""

from __future__ import annotations

from .agent import AgentConfig, get_agent_config
from .env import optional_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .health_api import HealthApiConfig, get_health_api_config
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy
from .logging import configure_logging

__all__ = [
    "AgentConfig",
    "ConfigurationError",
    "HealthApiConfig",
    "MissingConfigurationError",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "configure_logging",
    "get_agent_config",
    "get_health_api_config",
    "optional_env_var",
    "require_env_vars",
]
