"""
Runtime Configuration Module

Provides configuration loading and logging setup for the integrity engine.
"""

from .runtime import (
    IntegrityConfig,
    get_default_config,
    set_default_config,
    setup_logging,
    setup_logging_from_config,
)

__all__ = [
    "IntegrityConfig",
    "get_default_config",
    "set_default_config",
    "setup_logging",
    "setup_logging_from_config",
]
