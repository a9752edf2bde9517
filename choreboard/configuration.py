"""Mini README: Centralised configuration models and helpers for ChoreBoard.

Structure:
    * ChoreBoardSettings - Pydantic model describing runtime configuration.
    * get_settings - cached accessor for environment-aware settings.

Usage:
    Import ``get_settings`` to read environment variables (``CHOREBOARD_``
    prefix or a local ``.env`` file), choose where the household ledger is
    stored, and specify service ports. The configuration is cached so the cost
    of validation is incurred only once per process.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional, Union

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ChoreBoardSettings(BaseSettings):
    """Runtime configuration for the ChoreBoard service."""

    model_config = SettingsConfigDict(
        env_prefix="CHOREBOARD_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    environment: str = Field(
        "development",
        description="Environment label controlling debug toggles and logging levels.",
    )
    data_directory: Path = Field(
        Path("data"),
        description="Directory holding the persisted key-value records.",
        validate_default=True,
    )
    storage_backend: Literal["file", "memory"] = Field(
        "file",
        description=(
            "Key-value backend used for the ledger. ``memory`` keeps state only"
            " for the lifetime of the process."
        ),
    )
    interface_host: str = Field(
        "127.0.0.1",
        description="Network interface for the web service to bind to.",
    )
    interface_port: int = Field(
        8000,
        description="Default port the web service exposes.",
        ge=1,
        le=65535,
    )
    log_level: str = Field(
        "INFO",
        description="Root logging level applied by the CLI.",
    )

    @field_validator("data_directory", mode="before")
    @classmethod
    def _expand_path(cls, value: Optional[Union[str, Path]]) -> Path:
        """Ensure configured paths expand user directories and exist."""

        path = Path(value or "data").expanduser().resolve()
        path.mkdir(parents=True, exist_ok=True)
        return path

    @field_validator("log_level")
    @classmethod
    def _normalise_level(cls, value: str) -> str:
        """Upper-case level names so ``debug`` and ``DEBUG`` both work."""

        return value.strip().upper()


@lru_cache()
def get_settings() -> ChoreBoardSettings:
    """Return cached settings, ensuring consistent configuration across modules."""

    return ChoreBoardSettings()
