"""Configuration loading for devhud."""

import os
from dataclasses import dataclass
from pathlib import Path

import yaml

DEFAULT_DEBOUNCE_MS = 500
DEFAULT_API_PORT = 10350


@dataclass
class HudConfig:
    """Dashboard configuration."""

    debounce_seconds: float = DEFAULT_DEBOUNCE_MS / 1000
    log_level: str = "INFO"
    api_host: str = "127.0.0.1"
    api_port: int = DEFAULT_API_PORT

    @classmethod
    def from_env(cls) -> "HudConfig":
        """Load configuration from environment variables."""
        return cls(
            debounce_seconds=int(os.environ.get("DEVHUD_DEBOUNCE_MS", str(DEFAULT_DEBOUNCE_MS)))
            / 1000,
            log_level=os.environ.get("DEVHUD_LOG_LEVEL", "INFO"),
            api_host=os.environ.get("DEVHUD_API_HOST", "127.0.0.1"),
            api_port=int(os.environ.get("DEVHUD_API_PORT", str(DEFAULT_API_PORT))),
        )

    @classmethod
    def from_file(cls, path: Path) -> "HudConfig":
        """Load configuration from YAML file. Environment variables win when set."""
        config = cls.from_env()

        if not path.exists():
            return config

        with open(path) as f:
            data = yaml.safe_load(f)

        if not data:
            return config

        if "debounce_ms" in data and "DEVHUD_DEBOUNCE_MS" not in os.environ:
            config.debounce_seconds = int(data["debounce_ms"]) / 1000

        if "log_level" in data and "DEVHUD_LOG_LEVEL" not in os.environ:
            config.log_level = str(data["log_level"])

        if "api" in data:
            api = data["api"] or {}
            if "DEVHUD_API_HOST" not in os.environ:
                config.api_host = api.get("host", config.api_host)
            if "DEVHUD_API_PORT" not in os.environ:
                config.api_port = int(api.get("port", config.api_port))

        return config
