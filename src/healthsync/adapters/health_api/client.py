"""HTTP health source backed by a JSON instance-health endpoint."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING, Literal
from urllib.parse import quote

import httpx

from healthsync.adapters.http_resilience import ResilientClient
from healthsync.config.health_api import HealthApiConfig, get_health_api_config
from healthsync.domain.errors import EntityNotFoundError

from .schema import LOAD_BALANCER_NOT_FOUND, ErrorResponse, InstanceHealthResponse
from .translator import translate_instance_health

if TYPE_CHECKING:
    from collections.abc import Callable
    from types import TracebackType

    from healthsync.config.http_resilience import ResilienceConfig
    from healthsync.domain.health import MemberHealth

log = getLogger(__name__)


class HealthApiError(RuntimeError):
    """Raised when the health API returns an application-level error."""

    def __init__(self, message: str, *, code: str | None = None) -> None:
        super().__init__(message)
        self.code = code


def _default_client_factory(config: ResilienceConfig) -> ResilientClient:
    return ResilientClient(config)


@dataclass(slots=True)
class HttpHealthSource:
    """Health source calling ``GET /loadBalancers/{name}/instanceHealth``.

    All calls made through one source share a single event loop and a single
    client, so the configured rate limit and connection pool span the whole
    poll cycle. Call :meth:`close` (or use the source as a context manager)
    once the cycle is done.
    """

    config: HealthApiConfig = field(default_factory=get_health_api_config)
    client_factory: Callable[[ResilienceConfig], ResilientClient] = field(
        default=_default_client_factory
    )
    _runner: asyncio.Runner | None = field(default=None, init=False, repr=False)
    _client: ResilientClient | None = field(default=None, init=False, repr=False)

    def __enter__(self) -> HttpHealthSource:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        self.close()
        return False

    def describe_health(self, parent_name: str) -> list[MemberHealth]:
        if self._runner is None:
            self._runner = asyncio.Runner()
        return self._runner.run(self._describe_health_async(parent_name))

    def close(self) -> None:
        if self._runner is None:
            return
        try:
            if self._client is not None:
                self._runner.run(self._client.aclose())
        finally:
            self._client = None
            self._runner.close()
            self._runner = None

    async def _describe_health_async(self, parent_name: str) -> list[MemberHealth]:
        if self._client is None:
            self._client = self.client_factory(self.config.resilience)
        payload = await self._perform_request(client=self._client, parent_name=parent_name)
        return translate_instance_health(payload)

    async def _perform_request(
        self,
        *,
        client: ResilientClient,
        parent_name: str,
    ) -> InstanceHealthResponse:
        path = f"loadBalancers/{quote(parent_name, safe='')}/instanceHealth"
        response = await client.get(path)
        if response.status_code == httpx.codes.NOT_FOUND:
            raise EntityNotFoundError(parent_name)

        payload = _json_payload(response)
        if isinstance(payload, dict) and "error" in payload:
            error_payload = ErrorResponse.model_validate(payload)
            if error_payload.error.code == LOAD_BALANCER_NOT_FOUND:
                raise EntityNotFoundError(parent_name)
            log.error(
                f"Health API error {error_payload.error.code} for {parent_name}: "
                f"{error_payload.error.message}"
            )
            raise HealthApiError(
                error_payload.error.message or error_payload.error.code,
                code=error_payload.error.code,
            )

        response.raise_for_status()
        if not isinstance(payload, dict):
            raise HealthApiError("Unexpected health API response payload")
        return InstanceHealthResponse.model_validate(payload)


def _json_payload(response: httpx.Response) -> object:
    try:
        return response.json()
    except ValueError:
        return None


if TYPE_CHECKING:
    from healthsync.domain.ports.health import HealthSource

    _source_check: HealthSource = HttpHealthSource()
