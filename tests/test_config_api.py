from __future__ import annotations

import json
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from stagetime.config.defaults import ReporterConfig
from stagetime.runtime import emitter as emitter_module
from stagetime.runtime.policy import SampleEveryN
from stagetime.runtime.recorder import ReportRecord
from stagetime.service import config_api


@pytest.fixture
def client(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> TestClient:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(config_api, "CONFIG_PATH", tmp_path / "stagetime_config.json")
    monkeypatch.setattr(config_api, "CONFIG_TOKEN", None)
    monkeypatch.setattr(config_api, "_CONFIG_CACHE", ReporterConfig())
    monkeypatch.setattr(emitter_module, "_DEFAULT_EMITTER", None)
    return TestClient(config_api.app)


def test_health(client: TestClient) -> None:
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_get_config_returns_defaults(client: TestClient) -> None:
    payload = client.get("/config").json()

    assert payload["event"] == "time-report"
    assert payload["policy"]["kind"] == "always"
    assert payload["format"]["precision"] == 9


def test_patch_policy_applies_and_persists(client: TestClient, tmp_path: Path) -> None:
    response = client.patch("/config/policy", json={"kind": "sample", "every_n": 4})

    assert response.status_code == 200
    assert response.json()["every_n"] == 4
    stored = json.loads((tmp_path / "stagetime_config.json").read_text())
    assert stored["policy"]["kind"] == "sample"
    policy = emitter_module.get_default_emitter().policy
    assert isinstance(policy, SampleEveryN)
    assert policy.n == 4


def test_put_config_replaces(client: TestClient) -> None:
    response = client.put("/config", json={"level": "DEBUG", "format": {"print_order": "key"}})

    assert response.status_code == 200
    assert client.get("/config").json()["format"]["print_order"] == "key"
    assert emitter_module.get_default_emitter().options.print_order == "key"


@pytest.mark.parametrize(
    "method, path, body",
    [
        ("put", "/config", {"backend": "kafka"}),
        ("put", "/config", {"unknown": 1}),
        ("patch", "/config/policy", {"kind": "sometimes"}),
        ("patch", "/config/format", {"print_order": "random"}),
        ("put", "/config", {"level": 20}),
        ("patch", "/config/format", {"precision": 1.5}),
    ],
)
def test_invalid_updates_are_rejected(client: TestClient, method: str, path: str, body) -> None:
    response = getattr(client, method)(path, json=body)

    assert response.status_code == 400
    assert client.get("/config").json() == config_api.reporter_config_to_dict(ReporterConfig())


def test_unknown_section(client: TestClient) -> None:
    assert client.patch("/config/event", json={"x": 1}).status_code == 404


def test_stats(client: TestClient) -> None:
    emitter_module.get_default_emitter().emit(ReportRecord(name="X"))

    payload = client.get("/stats").json()

    assert payload["emitted"] == 1
    assert payload["suppressed"] == 0
    assert payload["dropped"] == 0
    assert payload["policy"] == "AlwaysEmit()"


def test_token_required_when_configured(client: TestClient, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(config_api, "CONFIG_TOKEN", "secret")

    assert client.get("/config").status_code == 401
    assert client.get("/config", headers={"X-API-Token": "secret"}).status_code == 200


def test_no_cross_origin_access_by_default(client: TestClient) -> None:
    response = client.get("/health", headers={"Origin": "http://localhost:5173"})

    assert "access-control-allow-origin" not in response.headers
