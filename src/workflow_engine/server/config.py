"""Configuration for the REST server.

The server defaults to the in-memory store so it can start with no state
directory at all. Set WORKFLOW_STORE_BACKEND=json to keep data across restarts.
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from workflow_engine.engine.config import EngineSettings, StoreBackend


class ServerSettings(EngineSettings):
    """Settings for the REST API.

    Notes:
        - Store and logging knobs are shared with
          :class:`workflow_engine.engine.config.EngineSettings`; only the default
          backend differs.
    """

    store_backend: StoreBackend = Field(
        default="memory",
        validation_alias="WORKFLOW_STORE_BACKEND",
        description="Which store implementation to use: memory | json",
    )

    host: str = Field(default="127.0.0.1", validation_alias="WORKFLOW_SERVER_HOST")
    port: int = Field(default=8000, validation_alias="WORKFLOW_SERVER_PORT", ge=1, le=65535)

    # Dev-friendly CORS. Override via WORKFLOW_CORS_ORIGINS=...
    cors_origins: str = Field(
        default="http://localhost:5173,http://127.0.0.1:5173",
        validation_alias="WORKFLOW_CORS_ORIGINS",
        description="Comma-separated list of allowed CORS origins.",
    )

    model_config = SettingsConfigDict(env_prefix="", env_file=".env", extra="ignore")

    def parsed_cors_origins(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]
