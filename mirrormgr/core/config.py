from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field, PositiveFloat, PositiveInt, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

SUPPORTED_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="MIRRORMGR_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = "mirrormgr"
    environment: str = "production"
    api_host: str = "0.0.0.0"
    api_port: int = 14242
    log_level: str = "INFO"

    state_root: Path = Field(default=Path("/state"))
    database_url: str | None = None

    worker_url_template: str = "http://{mirror_id}:6000/"
    relay_timeout_seconds: PositiveFloat = 5.0
    relay_max_idle_connections: PositiveInt = 20

    @field_validator("state_root", mode="before")
    @classmethod
    def _normalize_path(cls, value: str | Path) -> Path:
        raw = str(value)
        if "~" in raw:
            raise ValueError("Home expansion syntax is not allowed in paths")
        if "$" in raw:
            raise ValueError("Environment variable syntax is not allowed in paths")
        path = Path(raw)
        if not path.is_absolute():
            raise ValueError("Path settings must be absolute")
        return path

    @model_validator(mode="after")
    def _validate_runtime_constraints(self) -> "Settings":
        self.state_root = self.state_root.resolve(strict=False)
        self.state_root.mkdir(parents=True, exist_ok=True)

        normalized_level = self.log_level.upper().strip()
        if normalized_level not in SUPPORTED_LOG_LEVELS:
            raise ValueError(f"log_level must be one of {sorted(SUPPORTED_LOG_LEVELS)}")
        self.log_level = normalized_level

        if "{mirror_id}" not in self.worker_url_template:
            raise ValueError("worker_url_template must contain the {mirror_id} placeholder")

        return self

    @property
    def effective_database_url(self) -> str:
        if self.database_url:
            return self.database_url
        db_path = self.state_root / "mirrormgr.sqlite3"
        return f"sqlite:///{db_path.as_posix()}"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
