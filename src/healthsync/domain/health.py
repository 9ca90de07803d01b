"""Member health values reported by a health source."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from .cache import AttributeValue

STILL_REGISTERING_DESCRIPTION: Final[str] = "Instance registration is still in progress."
IN_SERVICE: Final[str] = "InService"


class LoadBalancerType(StrEnum):
    """Load-balancer flavors carried in the ``subtype`` key field."""

    CLASSIC = "classic"
    APPLICATION = "application"
    NETWORK = "network"


class HealthState(StrEnum):
    UP = "Up"
    DOWN = "Down"
    STARTING = "Starting"


def owns_subtype(subtype: str | None, owned: LoadBalancerType = LoadBalancerType.CLASSIC) -> bool:
    """Return whether a parent of ``subtype`` belongs to the agent owning ``owned``.

    Keys without a subtype predate the field and are classic load balancers.
    """

    if subtype is None:
        return owned is LoadBalancerType.CLASSIC
    return subtype == owned


@dataclass(frozen=True, slots=True)
class MemberHealth:
    """Health of one member as reported for one parent."""

    member_id: str
    state: str
    reason_code: str | None = None
    description: str | None = None

    @property
    def still_registering(self) -> bool:
        return self.description == STILL_REGISTERING_DESCRIPTION

    @property
    def health_state(self) -> HealthState:
        if self.state == IN_SERVICE:
            return HealthState.UP
        if self.still_registering:
            return HealthState.STARTING
        return HealthState.DOWN

    def to_attributes(self, parent_name: str) -> dict[str, AttributeValue]:
        attributes: dict[str, AttributeValue] = {
            "type": "loadBalancer",
            "state": self.state,
            "healthState": str(self.health_state),
            "parentName": parent_name,
        }
        if self.reason_code is not None:
            attributes["reasonCode"] = self.reason_code
        if self.description is not None:
            attributes["description"] = self.description
        return attributes
