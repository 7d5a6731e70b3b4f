"""Configuration management with layered YAML + environment variable overrides."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, field_validator

DEFAULT_TIMEOUT_MS = 10000

# Environment variable -> (section, key)
_ENV_OVERRIDES = {
    "BASE_URL": ("api", "base_url"),
    "API_TIMEOUT": ("api", "timeout_ms"),
    "APP_NAME": ("app", "name"),
    "APP_VERSION": ("app", "version"),
    "SHRUTAM_STORAGE_DIR": ("storage", "directory"),
    "SHRUTAM_LOG_LEVEL": ("deployment", "log_level"),
}


def _deep_merge(base: dict, overlay: dict) -> dict:
    """Recursively merge overlay into base. Overlay values win."""
    result = base.copy()
    for key, value in overlay.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _load_yaml(path: Path) -> dict:
    """Load a YAML file, returning empty dict if file doesn't exist."""
    if not path.exists():
        return {}
    with open(path) as f:
        return yaml.safe_load(f) or {}


def _env_overlay(environ: Optional[dict[str, str]] = None) -> dict:
    """Build a config overlay from the recognised environment variables."""
    environ = os.environ if environ is None else environ
    overlay: dict[str, dict[str, Any]] = {}
    for var, (section, key) in _ENV_OVERRIDES.items():
        value = environ.get(var)
        if value is None or value == "":
            continue
        overlay.setdefault(section, {})[key] = value
    return overlay


class DeploymentConfig(BaseModel):
    mode: str = "local"
    log_level: str = "INFO"
    log_format: str = "text"
    log_dir: Optional[str] = None


class AppConfig(BaseModel):
    name: str = "Shrutam"
    version: str = "1.0.0"


class ApiConfig(BaseModel):
    base_url: str = ""
    timeout_ms: int = DEFAULT_TIMEOUT_MS

    @field_validator("timeout_ms", mode="before")
    @classmethod
    def timeout_or_default(cls, v: Any) -> int:
        """Absent, non-numeric or non-positive timeouts fall back to the default."""
        if v is None or isinstance(v, bool):
            return DEFAULT_TIMEOUT_MS
        try:
            timeout = int(str(v).strip())
        except ValueError:
            return DEFAULT_TIMEOUT_MS
        return timeout if timeout > 0 else DEFAULT_TIMEOUT_MS

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.strip().rstrip("/")


class StorageConfig(BaseModel):
    provider: str = "file"
    directory: str = "./data"


class SyncConfig(BaseModel):
    max_attempts: int = 1               # 1 = no retry; the cache is the fallback
    backoff_min_seconds: float = 1.0
    backoff_max_seconds: float = 10.0

    @field_validator("max_attempts")
    @classmethod
    def at_least_one_attempt(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"max_attempts must be at least 1, got {v}")
        return v


class ShrutamConfig(BaseModel):
    deployment: DeploymentConfig = DeploymentConfig()
    app: AppConfig = AppConfig()
    api: ApiConfig = ApiConfig()
    storage: StorageConfig = StorageConfig()
    sync: SyncConfig = SyncConfig()

    @classmethod
    def load(
        cls,
        deployment_mode: Optional[str] = None,
        config_dir: Optional[Path] = None,
        environ: Optional[dict[str, str]] = None,
    ) -> ShrutamConfig:
        """Load config from default.yaml, overlaid with deployment-specific YAML.

        Priority (lowest to highest):
        1. config/default.yaml
        2. config/{mode}.yaml
        3. Environment variables (BASE_URL, API_TIMEOUT, etc.)
        """
        environ = os.environ if environ is None else environ
        if config_dir is None:
            config_dir = Path(__file__).parent.parent.parent / "config"

        base = _load_yaml(config_dir / "default.yaml")
        mode = deployment_mode or environ.get(
            "SHRUTAM_DEPLOYMENT_MODE",
            base.get("deployment", {}).get("mode", "local"),
        )
        overlay = _load_yaml(config_dir / f"{mode}.yaml")
        merged = _deep_merge(base, overlay)
        merged = _deep_merge(merged, _env_overlay(environ))
        merged = _deep_merge(merged, {"deployment": {"mode": mode}})

        return cls(**merged)


def describe_environment(config: ShrutamConfig) -> tuple[list[str], list[str]]:
    """Return ``(lines, warnings)`` describing the effective API configuration."""
    lines = [
        f"BASE_URL: {config.api.base_url or '<unset>'}",
        f"API_TIMEOUT: {config.api.timeout_ms} ms",
        f"APP_NAME: {config.app.name}",
        f"APP_VERSION: {config.app.version}",
        f"STORAGE: {config.storage.provider} ({config.storage.directory})",
    ]
    warnings: list[str] = []
    if not config.api.base_url:
        warnings.append("BASE_URL is not set; remote fetches will fail and only cached data is served")
    elif "localhost" in config.api.base_url or "127.0.0.1" in config.api.base_url:
        warnings.append("BASE_URL points at localhost; this is unreachable from other devices")
    return lines, warnings
