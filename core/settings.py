from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Literal

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

# Load .env file from project root
_env_path = Path(__file__).parent.parent / ".env"
if _env_path.exists():
    load_dotenv(_env_path)


class StorageSettings(BaseModel):
    backend: Literal["s3", "local"] = "s3"
    bucket: str = "dermchatbot"
    region: str | None = None
    endpoint_url: str | None = None
    local_root: str = "data/bucket"
    signed_url_ttl_seconds: int = Field(3600, gt=0)


class LayoutSettings(BaseModel):
    """Object key prefixes inside the bucket. Each one is a flat namespace."""

    image_prefix: str = "scin_dataset/scin_images/concatenated_images"
    json_prefix: str = "scin_dataset/scin_json/scin_json_initial_cases"
    json_new_prefix: str = "scin_dataset/scin_json/scin_new_json"
    history_prefix: str = "annotator_history"
    tracking_prefix: str = "user-tracking"

    @field_validator("*", mode="before")
    @classmethod
    def _strip_slashes(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip("/")
        return value


class ApiSettings(BaseModel):
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])

    @field_validator("cors_origins", mode="before")
    @classmethod
    def _split_origins(cls, value: Any) -> list[str]:
        if value is None:
            return ["*"]
        if isinstance(value, str):
            return [item.strip() for item in value.split(",") if item.strip()]
        return value


class Settings(BaseModel):
    storage: StorageSettings = Field(default_factory=StorageSettings)
    layout: LayoutSettings = Field(default_factory=LayoutSettings)
    api: ApiSettings = Field(default_factory=ApiSettings)

    @classmethod
    def load(cls, path: Path | None = None) -> "Settings":
        """Load settings from YAML configuration file.

        Args:
            path: Optional path to configuration file. If not provided, uses
                ANNOTATE_CONFIG environment variable or defaults to config/default.yaml.
                A missing default file yields the built-in defaults.

        Returns:
            Settings instance with loaded configuration and environment overrides.

        Raises:
            FileNotFoundError: If an explicitly requested configuration file does not exist.
            ValueError: If configuration is invalid.
        """
        explicit = path or os.getenv("ANNOTATE_CONFIG")
        config_path = Path(explicit) if explicit else Path("config/default.yaml")
        payload: dict[str, Any] = {}
        if config_path.exists():
            with config_path.open("r", encoding="utf-8") as fp:
                payload = yaml.safe_load(fp) or {}
        elif explicit:
            raise FileNotFoundError(f"Configuration file not found: {config_path}")
        _apply_env_overrides(payload)
        try:
            return cls(**payload)
        except Exception as exc:
            raise ValueError(f"Invalid configuration: {exc}") from exc


_ENV_OVERRIDES = {
    "ANNOTATE_STORAGE_BACKEND": ("storage", "backend"),
    "ANNOTATE_BUCKET": ("storage", "bucket"),
    "ANNOTATE_REGION": ("storage", "region"),
    "ANNOTATE_ENDPOINT_URL": ("storage", "endpoint_url"),
    "ANNOTATE_LOCAL_ROOT": ("storage", "local_root"),
    "ANNOTATE_CORS_ORIGINS": ("api", "cors_origins"),
}


def _apply_env_overrides(payload: dict[str, Any]) -> None:
    for env_name, (section, key) in _ENV_OVERRIDES.items():
        value = os.getenv(env_name)
        if value:
            payload.setdefault(section, {})[key] = value


@lru_cache(maxsize=1)
def get_settings(path: str | None = None) -> Settings:
    return Settings.load(Path(path) if path else None)


__all__ = [
    "Settings",
    "StorageSettings",
    "LayoutSettings",
    "ApiSettings",
    "get_settings",
]
