from __future__ import annotations

import pytest

_ENV_VARS = (
    "HEALTHSYNC_ACCOUNT",
    "HEALTHSYNC_REGION",
    "HEALTHSYNC_HEALTH_ID",
    "HEALTH_API_BASE_URL",
    "HEALTH_API_TOKEN",
)


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
