"""
Runtime Configuration

Central configuration for the integrity engine and its logging.
"""

from __future__ import annotations

import copy
import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv

from telemetry_integrity.schemas.errors import ConfigurationError

load_dotenv()

ENV_PREFIX = "TELEMETRY_INTEGRITY_"

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
_TRUE_VALUES = ("1", "true", "yes", "on")
_FALSE_VALUES = ("0", "false", "no", "off")


def _parse_bool(key: str, raw: str) -> bool:
    lowered = raw.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ConfigurationError(f"Invalid boolean for {key}: {raw!r}", key=key)


def _parse_int(key: str, raw: str) -> int:
    try:
        return int(raw.strip())
    except ValueError as e:
        raise ConfigurationError(f"Invalid integer for {key}: {raw!r}", key=key) from e


@dataclass
class IntegrityConfig:
    """
    Configuration for the Merkle integrity engine.

    Can be loaded from:
    - Environment variables (a .env file is honoured)
    - YAML file
    - Programmatic construction

    None of these settings affect hashing; roots are identical under
    every configuration.
    """
    log_level: str = "INFO"
    log_file: Optional[str] = None
    log_hash_prefix: int = 16
    strict_proof_length: bool = True

    def __post_init__(self) -> None:
        self.log_level = str(self.log_level).upper()
        if self.log_level not in _VALID_LOG_LEVELS:
            raise ConfigurationError(
                f"Unknown log level: {self.log_level}",
                key="log_level",
            )
        if isinstance(self.log_hash_prefix, bool) or not isinstance(self.log_hash_prefix, int):
            raise ConfigurationError("log_hash_prefix must be an integer", key="log_hash_prefix")
        if not 0 < self.log_hash_prefix <= 64:
            raise ConfigurationError(
                f"log_hash_prefix must be between 1 and 64, got {self.log_hash_prefix}",
                key="log_hash_prefix",
            )
        if isinstance(self.strict_proof_length, str):
            self.strict_proof_length = _parse_bool("strict_proof_length", self.strict_proof_length)
        if not isinstance(self.strict_proof_length, bool):
            raise ConfigurationError(
                f"strict_proof_length must be a boolean, got {self.strict_proof_length!r}",
                key="strict_proof_length",
            )

    @staticmethod
    def _get_env_overrides() -> dict[str, Any]:
        """
        Get configuration overrides from environment variables.

        This is the SINGLE source of truth for all env var reading.

        Supported variables:
        - TELEMETRY_INTEGRITY_LOG_LEVEL: Log level name
        - TELEMETRY_INTEGRITY_LOG_FILE: Optional log file path
        - TELEMETRY_INTEGRITY_LOG_HASH_PREFIX: Hex chars of a hash shown in logs
        - TELEMETRY_INTEGRITY_STRICT_PROOF_LENGTH: Check proof length against leaf count (true/false)
        """
        overrides: dict[str, Any] = {}

        if os.getenv(f"{ENV_PREFIX}LOG_LEVEL"):
            overrides["log_level"] = os.getenv(f"{ENV_PREFIX}LOG_LEVEL")
        if os.getenv(f"{ENV_PREFIX}LOG_FILE"):
            overrides["log_file"] = os.getenv(f"{ENV_PREFIX}LOG_FILE")
        if os.getenv(f"{ENV_PREFIX}LOG_HASH_PREFIX"):
            key = f"{ENV_PREFIX}LOG_HASH_PREFIX"
            overrides["log_hash_prefix"] = _parse_int(key, os.getenv(key, ""))
        if os.getenv(f"{ENV_PREFIX}STRICT_PROOF_LENGTH"):
            key = f"{ENV_PREFIX}STRICT_PROOF_LENGTH"
            overrides["strict_proof_length"] = _parse_bool(key, os.getenv(key, ""))

        return overrides

    @classmethod
    def from_env(cls) -> "IntegrityConfig":
        """Load configuration purely from environment variables."""
        return cls.from_dict(cls._get_env_overrides())

    @classmethod
    def from_yaml(cls, path: str | Path) -> "IntegrityConfig":
        """Load configuration from a YAML file."""
        import yaml
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            data = yaml.safe_load(f) or {}

        if not isinstance(data, dict):
            raise ConfigurationError(f"Config file must contain a mapping: {path}")

        # Allow the settings to sit under a top-level "integrity" key
        section = data.get("integrity", data)
        if section is None:
            section = {}
        if not isinstance(section, dict):
            raise ConfigurationError(
                f"'integrity' section must be a mapping: {path}",
                key="integrity",
            )
        return cls.from_dict(section)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "IntegrityConfig":
        """Load configuration from a dictionary (supports partial data)."""
        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Configuration must be a mapping, got {type(data).__name__}"
            )
        known = {"log_level", "log_file", "log_hash_prefix", "strict_proof_length"}
        unknown = set(data) - known
        if unknown:
            raise ConfigurationError(
                f"Unknown configuration keys: {sorted(unknown)}",
                details={"unknown": sorted(unknown)},
            )
        return cls(**data)

    def with_env_overrides(self) -> "IntegrityConfig":
        """
        Return a new config with environment variable overrides applied.

        This allows loading from a config file first, then overlaying env vars.
        """
        overrides = self._get_env_overrides()
        if not overrides:
            return self

        new_config = copy.deepcopy(self)
        for key, value in overrides.items():
            setattr(new_config, key, value)
        new_config.__post_init__()
        return new_config

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to a dictionary."""
        return {
            "log_level": self.log_level,
            "log_file": self.log_file,
            "log_hash_prefix": self.log_hash_prefix,
            "strict_proof_length": self.strict_proof_length,
        }


def setup_logging(level: str = "INFO", log_file: str | None = None) -> None:
    """Configure logging for applications embedding the engine."""
    log_level = getattr(logging, level.upper(), logging.INFO)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=log_level,
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
        handlers=handlers,
    )


def setup_logging_from_config(config: IntegrityConfig) -> None:
    """Configure logging from an IntegrityConfig."""
    setup_logging(config.log_level, config.log_file)


# Global default configuration
_default_config: Optional[IntegrityConfig] = None


def get_default_config() -> IntegrityConfig:
    """Get the default runtime configuration."""
    global _default_config
    if _default_config is None:
        _default_config = IntegrityConfig.from_env()
    return _default_config


def set_default_config(config: IntegrityConfig | None) -> None:
    """Set (or with None, reset) the default runtime configuration."""
    global _default_config
    _default_config = config
