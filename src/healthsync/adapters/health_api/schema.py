"""Health API response schemas."""

from __future__ import annotations

import logging
from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field

log = logging.getLogger(__name__)

LOAD_BALANCER_NOT_FOUND = "LoadBalancerNotFound"


class HealthApiBaseModel(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)
    _logged_extra_keys: ClassVar[set[str]] = set()

    def model_post_init(self, _context: object, /) -> None:
        extras = self.__pydantic_extra__
        if not extras:
            return
        new_keys = set(extras).difference(self._logged_extra_keys)
        if not new_keys:
            return
        self._logged_extra_keys.update(new_keys)
        log.warning(
            "Health API %s: unmodeled keys: %s",
            type(self).__name__,
            ", ".join(sorted(new_keys)),
        )


class InstanceState(HealthApiBaseModel):
    instance_id: str = Field(alias="instanceId")
    state: str
    reason_code: str | None = Field(default=None, alias="reasonCode")
    description: str | None = None


class InstanceHealthResponse(HealthApiBaseModel):
    load_balancer_name: str | None = Field(default=None, alias="loadBalancerName")
    instance_states: list[InstanceState] = Field(
        default_factory=list["InstanceState"], alias="instanceStates"
    )


class ErrorDetail(HealthApiBaseModel):
    code: str
    message: str | None = None


class ErrorResponse(HealthApiBaseModel):
    error: ErrorDetail
