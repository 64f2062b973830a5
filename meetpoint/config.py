"""
Configuration management using Pydantic models loaded from YAML.
"""

import logging
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field, field_validator

from .domain.location_ranker import DEFAULT_TOP_K


class RankingConfig(BaseModel):
    """Settings for location ranking."""
    top_k: int = DEFAULT_TOP_K

    @field_validator("top_k")
    @classmethod
    def validate_top_k(cls, value: int) -> int:
        """Ensure at least one location is recommended."""
        if value < 1:
            raise ValueError(f"top_k must be at least 1, got {value}")
        return value


class AppConfig(BaseModel):
    """Application configuration."""
    catalog_path: Optional[Path] = None  # None: bundled campus catalog
    ranking: RankingConfig = Field(default_factory=RankingConfig)
    timezone: str = "America/New_York"
    log_level: str = "WARNING"

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Accept standard logging level names, case-insensitively."""
        level = value.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {value}")
        return level

    @classmethod
    def load_from_yaml(cls, config_path: Path) -> "AppConfig":
        """
        Load configuration from YAML file.

        Relative ``catalog_path`` values are resolved against the config
        file's directory.

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
                f"Please create a meetpoint.yaml file. See meetpoint.example.yaml for reference."
            )

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in {config_path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ValueError("Config file must contain a mapping at the root level.")

        config = cls(**data)
        if config.catalog_path is not None and not config.catalog_path.is_absolute():
            config.catalog_path = config_path.parent / config.catalog_path
        return config

    @classmethod
    def load_or_default(cls, config_path: Optional[Path] = None) -> "AppConfig":
        """Load the given or default config file, falling back to defaults if absent."""
        path = config_path or get_default_config_path()
        if config_path is None and not path.exists():
            return cls()
        return cls.load_from_yaml(path)


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    # Look for meetpoint.yaml in current directory
    current_dir = Path.cwd()
    config_path = current_dir / "meetpoint.yaml"

    if not config_path.exists():
        # Try in the project root (parent of meetpoint/)
        project_root = Path(__file__).parent.parent
        config_path = project_root / "meetpoint.yaml"

    return config_path
