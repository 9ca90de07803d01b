from __future__ import annotations

import json
from typing import TYPE_CHECKING

import pytest

from healthsync import app as app_module
from healthsync.adapters.memory import InMemoryCacheStore
from healthsync.domain.cache import CacheRecord, CacheResult, Namespace
from healthsync.ui import cli as cli_module
from tests.helpers.health import FakeHealthSource, add_instance, add_load_balancer, in_service

if TYPE_CHECKING:
    from pathlib import Path


def _write_snapshot(path: Path) -> None:
    store = InMemoryCacheStore()
    add_load_balancer(store, "lb1")
    add_instance(store, "i-1", application="foo")
    store.write_snapshot(path)


def test_poll_passes_flags_and_writes_result(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    snapshot = tmp_path / "cache.json"
    output = tmp_path / "result.json"
    _write_snapshot(snapshot)
    captured: dict[str, object] = {}

    def fake_poll(**kwargs: object) -> CacheResult:
        captured.update(kwargs)
        return CacheResult({Namespace.HEALTH: (CacheRecord(id="h-1"),)})

    monkeypatch.setattr(cli_module, "poll_load_balancer_health", fake_poll)

    cli_module.main(
        [
            "poll",
            "--snapshot",
            str(snapshot),
            "--account",
            "test",
            "--region",
            "us-east-1",
            "--output",
            str(output),
        ]
    )

    assert captured["account"] == "test"
    assert captured["region"] == "us-east-1"
    assert captured["apply"] is False
    assert isinstance(captured["cache_store"], InMemoryCacheStore)
    assert json.loads(output.read_text()) == {
        "health": [{"id": "h-1", "attributes": {}, "relationships": {}}]
    }


def test_poll_with_apply_updates_snapshot(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    snapshot = tmp_path / "cache.json"
    _write_snapshot(snapshot)
    monkeypatch.setattr(
        app_module, "HttpHealthSource", lambda: FakeHealthSource({"lb1": [in_service("i-1")]})
    )

    cli_module.main(
        [
            "poll",
            "--snapshot",
            str(snapshot),
            "--account",
            "test",
            "--region",
            "us-east-1",
            "--output",
            str(tmp_path / "result.json"),
            "--apply",
        ]
    )

    updated = InMemoryCacheStore.from_snapshot(snapshot)
    health_ids = [record["id"] for record in updated.to_dict()["health"]]
    assert health_ids == ["instanceHealth:test:us-east-1:i-1:aws-load-balancer-instance-health"]


def test_decode_key_prints_components(capsys: pytest.CaptureFixture[str]) -> None:
    cli_module.main(["decode-key", "loadBalancers:test:us-east-1:-:lb1"])

    payload = json.loads(capsys.readouterr().out)
    assert payload == {
        "type": "loadBalancers",
        "account": "test",
        "region": "us-east-1",
        "name": "lb1",
        "subScope": None,
        "subtype": None,
        "provider": None,
        "pattern": False,
    }


def test_decode_key_rejects_malformed_key() -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["decode-key", "instances:test"])

    assert excinfo.value.code == 2


def test_poll_failure_exits_with_error(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    snapshot = tmp_path / "cache.json"
    _write_snapshot(snapshot)

    def failing_poll(**_: object) -> CacheResult:
        raise RuntimeError("upstream unavailable")

    monkeypatch.setattr(cli_module, "poll_load_balancer_health", failing_poll)

    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["poll", "--snapshot", str(snapshot)])

    assert excinfo.value.code == 1


def test_conflicting_records_exit_as_failure_not_bad_input(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    snapshot = tmp_path / "cache.json"
    store = InMemoryCacheStore()
    add_load_balancer(store, "lb1")
    add_load_balancer(store, "lb2")
    store.write_snapshot(snapshot)
    monkeypatch.setattr(
        app_module,
        "HttpHealthSource",
        lambda: FakeHealthSource({"lb1": [in_service("i-1")], "lb2": [in_service("i-1")]}),
    )

    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(
            ["poll", "--snapshot", str(snapshot), "--account", "test", "--region", "us-east-1"]
        )

    assert excinfo.value.code == 1
