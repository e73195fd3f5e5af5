"""Configuration for the workflow engine.

Configuration is loaded from:
- environment variables
- and a local `.env` file (if present)

Nothing is required at startup; every setting has a usable default.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

StoreBackend = Literal["memory", "json"]


class EngineSettings(BaseSettings):
    """Settings for the CLI and the service layer.

    Environment variables:
    - LOG_LEVEL               (optional)
    - WORKFLOW_STATE_PATH     (optional)
    - WORKFLOW_STORE_BACKEND  (optional, "memory" or "json")

    Notes:
        Pydantic-settings supports overriding the env file in tests via:
        `EngineSettings(_env_file=path_to_env)`.
    """

    log_level: str = Field(
        default="INFO",
        validation_alias="LOG_LEVEL",
        description="Root logging level",
    )

    state_path: Path = Field(
        default=Path("workflow_state"),
        validation_alias="WORKFLOW_STATE_PATH",
        description="Directory where definitions and instances are persisted",
    )

    # The CLI is one process per command, so it only makes sense against the JSON store.
    store_backend: StoreBackend = Field(
        default="json",
        validation_alias="WORKFLOW_STORE_BACKEND",
        description="Which store implementation to use: memory | json",
    )

    model_config = SettingsConfigDict(
        env_prefix="",
        env_file=".env",
        extra="ignore",
    )

