"""Refresh load-balancer member health for parents already in the cache.

The agent does no discovery of its own. Load balancers are found through the
cache's identifier index, so health polling runs on its own cadence while a
separate discovery process owns topology.
"""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, Final

from .cache import (
    AgentDataType,
    Authority,
    CacheRecord,
    Namespace,
    build_cache_result,
)
from .errors import EntityNotFoundError
from .health import LoadBalancerType, owns_subtype
from .keys import WILDCARD, decode_key, instance_health_key, instance_key, load_balancer_key
from .ports.cache import RelationshipFilter

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from .cache import AttributeValue, CacheResult
    from .health import MemberHealth
    from .ports.cache import CacheStore
    from .ports.health import HealthSource

log = getLogger(__name__)

PROVIDER_NAME: Final[str] = "aws"
DEFAULT_HEALTH_ID: Final[str] = "aws-load-balancer-instance-health"
APPLICATION_ATTRIBUTE: Final[str] = "application"


@dataclass(frozen=True, slots=True)
class AgentScope:
    account: str
    region: str


@dataclass(slots=True)
class LoadBalancerHealthAgent:
    """Poll member health for the load balancers of one account and region."""

    scope: AgentScope
    health_id: str = DEFAULT_HEALTH_ID
    owned_type: LoadBalancerType = LoadBalancerType.CLASSIC

    @property
    def agent_type(self) -> str:
        return f"{self.scope.account}/{self.scope.region}/{type(self).__name__}"

    @property
    def provider_name(self) -> str:
        return PROVIDER_NAME

    @property
    def account_name(self) -> str:
        return self.scope.account

    @property
    def provided_data_types(self) -> tuple[AgentDataType, ...]:
        return (
            AgentDataType(Namespace.HEALTH, Authority.AUTHORITATIVE),
            AgentDataType(Namespace.INSTANCES, Authority.INFORMATIVE),
        )

    def run(self, cache_store: CacheStore, health_source: HealthSource) -> CacheResult:
        """Run one poll cycle and return the records replacing the previous one."""

        candidates = self.candidate_keys(cache_store)
        log.info("Describing items in %s: candidates=%s", self.agent_type, len(candidates))

        records: dict[str, list[CacheRecord]] = {Namespace.HEALTH: [], Namespace.INSTANCES: []}
        for candidate in candidates:
            parent = decode_key(candidate)
            if not owns_subtype(parent.subtype, self.owned_type):
                log.debug(
                    "Skipping %s: subtype %s is not %s", candidate, parent.subtype, self.owned_type
                )
                continue
            try:
                members = health_source.describe_health(parent.name)
            except EntityNotFoundError:
                # discovery may still list a load balancer that was just deleted
                log.debug("Load balancer %s no longer exists upstream", parent.name)
                continue
            self._cache_members(parent.name, members, cache_store, records)

        result = build_cache_result(records)
        log.info(
            "Caching %s items in %s: health=%s, instances=%s",
            result.record_count,
            self.agent_type,
            len(result[Namespace.HEALTH]),
            len(result[Namespace.INSTANCES]),
        )
        return result

    def candidate_keys(self, cache_store: CacheStore) -> list[str]:
        """Return known load-balancer keys in scope, de-duplicated in first-seen order."""

        any_sub_scope = load_balancer_key(
            WILDCARD, self.scope.account, self.scope.region, sub_scope=WILDCARD, subtype=WILDCARD
        )
        no_sub_scope = load_balancer_key(
            WILDCARD, self.scope.account, self.scope.region, sub_scope=None, subtype=WILDCARD
        )
        keys = [
            *cache_store.filter_identifiers(Namespace.LOAD_BALANCERS, any_sub_scope),
            *cache_store.filter_identifiers(Namespace.LOAD_BALANCERS, no_sub_scope),
        ]
        return list(dict.fromkeys(keys))

    def _cache_members(
        self,
        parent_name: str,
        members: Sequence[MemberHealth],
        cache_store: CacheStore,
        records: dict[str, list[CacheRecord]],
    ) -> None:
        if not members:
            return
        account, region = self.scope.account, self.scope.region
        member_keys = [instance_key(member.member_id, account, region) for member in members]
        cached = cache_store.get_all(
            Namespace.INSTANCES, list(dict.fromkeys(member_keys)), RelationshipFilter.none()
        )

        for member, member_key in zip(members, member_keys, strict=True):
            if member.still_registering:
                log.info(
                    "Instance '%s' is still registering with load balancer '%s'",
                    member.member_id,
                    parent_name,
                )
            health_key = instance_health_key(member.member_id, account, region, self.health_id)
            attributes = member.to_attributes(parent_name)
            application = _cached_application(cached, member_key)
            if application is not None:
                attributes[APPLICATION_ATTRIBUTE] = application

            records[Namespace.HEALTH].append(
                CacheRecord(
                    id=health_key,
                    attributes=attributes,
                    relationships={Namespace.INSTANCES: frozenset({member_key})},
                ),
            )
            records[Namespace.INSTANCES].append(
                CacheRecord(
                    id=member_key,
                    relationships={Namespace.HEALTH: frozenset({health_key})},
                ),
            )


def _cached_application(
    cached: Mapping[str, CacheRecord],
    member_key: str,
) -> AttributeValue | None:
    record = cached.get(member_key)
    if record is None:
        return None
    return record.attributes.get(APPLICATION_ATTRIBUTE)


def run(
    cache_store: CacheStore,
    health_source: HealthSource,
    scope: AgentScope,
) -> CacheResult:
    """Run one health poll cycle for ``scope``."""

    return LoadBalancerHealthAgent(scope=scope).run(cache_store, health_source)
