"""Configuration management for the Aria assistant."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class DeviceConfig(BaseModel):
    """Device configuration."""

    name: str = "aria"
    platform: str = "python"
    mode: Literal["production", "development"] = "development"
    log_level: str = "INFO"


class ASIConfig(BaseModel):
    """Chat backend configuration (ASI:One-compatible chat completions)."""

    endpoint: str = "https://api.asi1.ai/v1"
    api_key: str | None = None
    fast_model: str = "asi1-fast"
    non_agentic_model: str = "asi1-mini"
    agentic_model: str = "asi1-fast-agentic"
    # None waits indefinitely
    timeout_seconds: float | None = None


class OpenAIConfig(BaseModel):
    """Vision and transcription backend configuration."""

    endpoint: str = "https://api.openai.com/v1"
    api_key: str | None = None
    vision_model: str = "gpt-4.1-mini"
    transcription_model: str = "gpt-4o-mini-transcribe"
    timeout_seconds: float | None = None


class Config(BaseSettings):
    """Main configuration for the Aria assistant."""

    model_config = SettingsConfigDict(
        env_prefix="ARIA_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    device: DeviceConfig = Field(default_factory=DeviceConfig)
    asi: ASIConfig = Field(default_factory=ASIConfig)
    openai: OpenAIConfig = Field(default_factory=OpenAIConfig)

    # Mock mode for development
    mock_mode: bool = False

    @classmethod
    def from_yaml(cls, path: Path | str) -> Config:
        """Load configuration from YAML file."""
        path = Path(path)
        if not path.exists():
            return cls()

        with open(path) as f:
            data = yaml.safe_load(f) or {}

        return cls(**data)

    def to_yaml(self, path: Path | str) -> None:
        """Save configuration to YAML file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "w") as f:
            yaml.dump(self.model_dump(), f, default_flow_style=False)


def _first_env(*names: str) -> str | None:
    for name in names:
        value = os.environ.get(name)
        if value:
            return value
    return None


def load_config(
    config_path: Path | str | None = None,
    env_override: bool = True,
) -> Config:
    """Load configuration from file and environment.

    Args:
        config_path: Path to config file. If None, searches standard locations.
        env_override: Whether to allow environment variables to override config.

    Returns:
        Loaded configuration.
    """
    search_paths = [
        Path("/etc/aria/config.yaml"),
        Path.home() / ".config" / "aria" / "config.yaml",
        Path("config.yaml"),
        Path("configs/aria.yaml"),
    ]

    if config_path:
        search_paths.insert(0, Path(config_path))

    config_file: Path | None = None
    for path in search_paths:
        if path.exists():
            config_file = path
            break

    if config_file:
        config = Config.from_yaml(config_file)
    else:
        config = Config()

    if env_override:
        # Backend keys are optional; a missing key only warns at call time
        asi_key = _first_env("ARIA_ASI_API_KEY", "ASI_ONE_API_KEY")
        if asi_key:
            config.asi.api_key = asi_key

        openai_key = _first_env("ARIA_OPENAI_API_KEY", "OPENAI_API_KEY")
        if openai_key:
            config.openai.api_key = openai_key

        if os.environ.get("ARIA_MOCK_MODE", "").lower() in ("1", "true", "yes"):
            config.mock_mode = True

    return config


def get_default_config() -> dict[str, Any]:
    """Get default configuration as dictionary."""
    return Config().model_dump()
