"""
Configuration management for raw-volume tooling.

Handles loading, validation, and access to configuration.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml


# Default configuration path
DEFAULT_CONFIG_PATH = Path("/etc/raw-volume/raw-volume.yaml")

DEFAULT_LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


@dataclass
class LoggingConfig:
    """Logging settings."""

    level: str = "warning"
    file: str | None = None
    format: str = DEFAULT_LOG_FORMAT


@dataclass
class UDevConfig:
    """udev rule rendering settings."""

    security_tags: list[str] = field(default_factory=list)


@dataclass
class RawVolumeConfig:
    """Main configuration container."""

    logging: LoggingConfig = field(default_factory=LoggingConfig)
    udev: UDevConfig = field(default_factory=UDevConfig)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RawVolumeConfig:
        """Create configuration from dictionary."""
        return cls(
            logging=LoggingConfig(**data.get("logging", {})),
            udev=UDevConfig(**data.get("udev", {})),
        )


def load_config(path: str | Path | None = None) -> RawVolumeConfig:
    """
    Load configuration from YAML file.

    Args:
        path: Path to configuration file. If None, uses default paths.

    Returns:
        RawVolumeConfig instance with loaded settings.

    Raises:
        FileNotFoundError: If an explicit config file is not found.
        yaml.YAMLError: If config file is invalid YAML.
    """
    if path is None:
        candidates = [
            DEFAULT_CONFIG_PATH,
            Path("config/raw-volume.yaml"),
            Path("raw-volume.yaml"),
        ]
        for candidate in candidates:
            if candidate.exists():
                path = candidate
                break

    if path is None:
        return RawVolumeConfig()

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    with open(path) as f:
        data = yaml.safe_load(f) or {}

    return RawVolumeConfig.from_dict(data)


def validate_config(config: RawVolumeConfig) -> list[str]:
    """
    Validate configuration and return list of errors.

    Args:
        config: Configuration to validate.

    Returns:
        List of error messages. Empty list if valid.
    """
    errors: list[str] = []

    valid_log_levels = {"debug", "info", "warning", "error"}
    if config.logging.level not in valid_log_levels:
        errors.append(f"Invalid log level: {config.logging.level}")

    for tag in config.udev.security_tags:
        if not isinstance(tag, str) or not tag or '"' in tag or " " in tag:
            errors.append(f"Invalid udev security tag: {tag!r}")

    return errors


def setup_logging(config: RawVolumeConfig) -> None:
    """Configure logging based on config."""
    level = getattr(logging, config.logging.level.upper(), logging.WARNING)
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if config.logging.file:
        handlers.append(logging.FileHandler(config.logging.file))
    logging.basicConfig(
        level=level,
        format=config.logging.format,
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=handlers,
        force=True,
    )
