"""Unit tests for settings loading."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from workflow_engine.engine.config import EngineSettings
from workflow_engine.server.config import ServerSettings

_ENV_VARS = (
    "LOG_LEVEL",
    "WORKFLOW_STATE_PATH",
    "WORKFLOW_STORE_BACKEND",
    "WORKFLOW_SERVER_HOST",
    "WORKFLOW_SERVER_PORT",
    "WORKFLOW_CORS_ORIGINS",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


def test_engine_settings_defaults() -> None:
    settings = EngineSettings()

    assert settings.log_level == "INFO"
    assert settings.store_backend == "json"
    assert settings.state_path == Path("workflow_state")


def test_settings_loads_from_dotenv(tmp_path: Path) -> None:
    (tmp_path / ".env").write_text(
        "\n".join(
            [
                "LOG_LEVEL=DEBUG",
                "WORKFLOW_STATE_PATH=/var/lib/workflows",
                "WORKFLOW_STORE_BACKEND=memory",
                "",
            ]
        ),
        encoding="utf-8",
    )

    settings = EngineSettings()

    assert settings.log_level == "DEBUG"
    assert settings.state_path == Path("/var/lib/workflows")
    assert settings.store_backend == "memory"


def test_rejects_unknown_backend(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("WORKFLOW_STORE_BACKEND", "redis")
    with pytest.raises(ValidationError):
        EngineSettings()


def test_server_settings_defaults() -> None:
    settings = ServerSettings()

    assert settings.store_backend == "memory"
    assert settings.host == "127.0.0.1"
    assert settings.port == 8000
    assert settings.parsed_cors_origins() == [
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ]


def test_server_settings_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("WORKFLOW_SERVER_PORT", "9001")
    monkeypatch.setenv("WORKFLOW_CORS_ORIGINS", " https://a.example , ,https://b.example")

    settings = ServerSettings()

    assert settings.port == 9001
    assert settings.parsed_cors_origins() == ["https://a.example", "https://b.example"]
