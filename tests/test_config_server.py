from __future__ import annotations

import importlib.util
import os
from pathlib import Path

import pytest

SCRIPT = Path(__file__).resolve().parents[1] / "scripts" / "config_server.py"


def _load_script():
    spec = importlib.util.spec_from_file_location("config_server", SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def test_config_and_cors_are_exported_before_launch(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    for name in ("STAGETIME_CONFIG", "STAGETIME_CONFIG_CORS"):
        monkeypatch.setenv(name, "unset")
        monkeypatch.delenv(name)
    module = _load_script()
    calls = []

    def fake_run(app: str, **kwargs) -> None:
        calls.append((app, kwargs, os.environ.get("STAGETIME_CONFIG"), os.environ.get("STAGETIME_CONFIG_CORS")))

    monkeypatch.setattr(module.uvicorn, "run", fake_run)
    target = tmp_path / "reporter.json"

    module.main(["--config", str(target), "--cors", "http://dash.local", "--port", "9000"])

    assert calls == [
        (
            "stagetime.service.config_api:app",
            {"host": "127.0.0.1", "port": 9000, "reload": False},
            str(target),
            "http://dash.local",
        )
    ]


def test_defaults_leave_environment_alone(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("STAGETIME_CONFIG", "unset")
    monkeypatch.delenv("STAGETIME_CONFIG")
    module = _load_script()
    monkeypatch.setattr(module.uvicorn, "run", lambda app, **kwargs: None)

    module.main([])

    assert "STAGETIME_CONFIG" not in os.environ
