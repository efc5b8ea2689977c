"""Configuration management using Pydantic Settings.

Provides environment-aware configuration with YAML file support
and environment variable overrides.
"""

from __future__ import annotations

import os
import re
from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(str, Enum):
    DEV = "dev"
    PROD = "prod"


class NormalizerConfig(BaseModel):
    harness_label: str = "Drafsport"
    cancellation_codes: list[str] = Field(
        default=["0", *[str(code) for code in range(20, 30)]]
    )
    pace_floor_seconds: float = 40.0
    strict_integrity: bool = False


class IOConfig(BaseModel):
    data_dir: str = "data/raw"
    output_path: str = "data/processed/results.parquet"
    csv_separator: str = ","


class LoggingConfig(BaseModel):
    level: str = "INFO"
    format: str = "json"


class AppSettings(BaseSettings):
    """Application settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_prefix="",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    environment: Environment = Environment.DEV

    normalizer: NormalizerConfig = Field(default_factory=NormalizerConfig)
    io: IOConfig = Field(default_factory=IOConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep merge two dictionaries, with override taking precedence."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _resolve_env_vars(config: dict[str, Any]) -> dict[str, Any]:
    """Resolve ${VAR} placeholders in config values from environment."""
    result: dict[str, Any] = {}
    for key, value in config.items():
        if isinstance(value, dict):
            result[key] = _resolve_env_vars(value)
        elif isinstance(value, str):
            has_unresolved = False

            def _replace(m: re.Match[str]) -> str:
                nonlocal has_unresolved
                env_val = os.getenv(m.group(1))
                if env_val is None:
                    has_unresolved = True
                    return ""
                return env_val

            resolved = re.sub(r"\$\{(\w+)\}", _replace, value)
            # Skip values with unresolved env vars so Pydantic defaults apply
            if not has_unresolved:
                result[key] = resolved
        else:
            result[key] = value
    return result


def _load_yaml_config(env: Environment) -> dict[str, Any]:
    """Load and merge YAML config files (base + environment-specific)."""
    config_dir = Path(__file__).resolve().parent.parent.parent / "config"

    base_path = config_dir / "base.yaml"
    env_path = config_dir / f"{env.value}.yaml"

    config: dict[str, Any] = {}

    if base_path.exists():
        with open(base_path) as f:
            base_config = yaml.safe_load(f) or {}
            config = _deep_merge(config, base_config)

    if env_path.exists():
        with open(env_path) as f:
            env_config = yaml.safe_load(f) or {}
            config = _deep_merge(config, env_config)

    return _resolve_env_vars(config)


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    """Load and cache application settings.

    Loads configuration in this order (later overrides earlier):
    1. Default values
    2. base.yaml
    3. {environment}.yaml
    4. Environment variables
    """
    env_str = os.getenv("ENVIRONMENT", "dev")
    env = Environment(env_str)

    yaml_config = _load_yaml_config(env)
    return AppSettings(environment=env, **yaml_config)
