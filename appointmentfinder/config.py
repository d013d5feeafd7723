"""
Configuration management using Pydantic models loaded from YAML.
"""

import logging
from pathlib import Path
from typing import Literal, Optional

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from .adapters.http_slot_store import HttpSlotStore
from .adapters.json_slot_store import JsonSlotStore
from .services.availability_finder import SlotLoaderProtocol

LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class SlotStoreConfig(BaseModel):
    """Where slot data is read from."""
    backend: Literal["json", "http"] = "json"
    path: Optional[Path] = None
    url: Optional[str] = None
    timeout_seconds: float = 10.0

    @field_validator("timeout_seconds")
    @classmethod
    def validate_timeout(cls, value: float) -> float:
        """Ensure the timeout is positive."""
        if value <= 0:
            raise ValueError("timeout_seconds must be greater than zero")
        return value

    @model_validator(mode="after")
    def validate_backend_settings(self) -> "SlotStoreConfig":
        """Ensure the selected backend has what it needs."""
        if self.backend == "json" and self.path is None:
            raise ValueError("slot_store.path is required for the json backend")
        if self.backend == "http" and not self.url:
            raise ValueError("slot_store.url is required for the http backend")
        return self

    def build_loader(self, base_dir: Optional[Path] = None) -> SlotLoaderProtocol:
        """
        Create the slot loader for the configured backend.

        Relative JSON paths are resolved against ``base_dir`` (the config
        file's directory) when given.
        """
        if self.backend == "http":
            return HttpSlotStore(base_url=self.url, timeout_seconds=self.timeout_seconds)

        path = self.path
        if base_dir is not None and not path.is_absolute():
            path = base_dir / path
        return JsonSlotStore(path=path)


class AppConfig(BaseModel):
    """Application configuration."""
    slot_store: SlotStoreConfig
    log_level: str = "WARNING"
    display_timezone: str = "UTC"
    config_dir: Optional[Path] = Field(default=None, exclude=True)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Accept standard logging level names in any case."""
        level = value.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}, got {value!r}")
        return level

    def get_log_level(self) -> int:
        return logging.getLevelName(self.log_level)

    def build_loader(self) -> SlotLoaderProtocol:
        return self.slot_store.build_loader(base_dir=self.config_dir)

    @classmethod
    def load_from_yaml(cls, config_path: Path) -> "AppConfig":
        """
        Load configuration from YAML file.

        Args:
            config_path: Path to the YAML config file

        Returns:
            AppConfig instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config is invalid
        """
        if not config_path.exists():
            raise FileNotFoundError(
                f"Config file not found: {config_path}\n"
                f"Please create a config.yaml file. See config.example.yaml for reference."
            )

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in {config_path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ValueError("Config file must contain a mapping at the root level.")

        data["config_dir"] = config_path.parent
        return cls(**data)


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    # Look for config.yaml in current directory
    current_dir = Path.cwd()
    config_path = current_dir / "config.yaml"

    if not config_path.exists():
        # Try in the project root (parent of the package)
        project_root = Path(__file__).parent.parent
        config_path = project_root / "config.yaml"

    return config_path
