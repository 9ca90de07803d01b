"""Application orchestration entry points."""

from __future__ import annotations

from contextlib import ExitStack
from logging import getLogger
from typing import TYPE_CHECKING

from healthsync.adapters.health_api import HttpHealthSource
from healthsync.config import get_agent_config
from healthsync.domain.agent import AgentScope, LoadBalancerHealthAgent

if TYPE_CHECKING:
    from healthsync.domain.cache import CacheResult
    from healthsync.domain.ports import CacheStore, HealthSource


log = getLogger(__name__)


def poll_load_balancer_health(
    *,
    cache_store: CacheStore,
    health_source: HealthSource | None = None,
    account: str | None = None,
    region: str | None = None,
    apply: bool = False,
) -> CacheResult:
    """Run one health poll cycle using the configured adapters.

    With ``apply=True`` the result is handed back to ``cache_store``.
    """

    config = get_agent_config(account=account, region=region)
    agent = LoadBalancerHealthAgent(
        scope=AgentScope(account=config.account, region=config.region),
        health_id=config.health_id,
    )
    log.info(
        "Starting health poll: agent=%s, health_id=%s, apply=%s",
        agent.agent_type,
        agent.health_id,
        apply,
    )

    with ExitStack() as stack:
        if health_source is None:
            health_source = stack.enter_context(HttpHealthSource())
        result = agent.run(cache_store, health_source)
    if apply:
        cache_store.apply(result)

    log.info(
        "Finished health poll: agent=%s, records=%s, applied=%s",
        agent.agent_type,
        result.record_count,
        apply,
    )
    return result
