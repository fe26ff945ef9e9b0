"""
Configuration management.

Server settings come from environment variables. The tier rule set is the
built-in default, optionally overridden by a JSON file named in
TIER_CONFIG_PATH.
"""

from __future__ import annotations

import json
import logging
import os
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Optional, Union

if TYPE_CHECKING:
    from core.tier_engine.config import TierConfiguration

logger = logging.getLogger(__name__)


@dataclass
class Config:
    """
    Application configuration.

    Loads from environment variables with sensible defaults.
    """

    # Server
    host: str = field(default_factory=lambda: os.getenv("HOST", "127.0.0.1"))
    port: int = field(default_factory=lambda: int(os.getenv("PORT", "8000")))
    debug: bool = field(default_factory=lambda: os.getenv("DEBUG", "false").lower() == "true")

    # Tier rules
    tier_config_path: Optional[str] = field(
        default_factory=lambda: os.getenv("TIER_CONFIG_PATH") or None
    )

    @classmethod
    def load(cls) -> "Config":
        """Load configuration from environment."""
        return cls()

    def to_dict(self) -> dict:
        """Convert config to dictionary."""
        return {
            "host": self.host,
            "port": self.port,
            "debug": self.debug,
            "tier_config_path": self.tier_config_path,
        }


# =============================================================================
# Tier Rule Set
# =============================================================================


def load_tier_configuration(path: Union[str, Path]) -> "TierConfiguration":
    """
    Load a tier rule set from a JSON override file.

    The file holds a JSON object of overrides applied on top of the default
    configuration, e.g. {"budget_thresholds": {"tier_4_min": 40000}}.

    Raises:
        OSError: If the file cannot be read
        ValueError: If the JSON is malformed or an override is invalid
    """
    from core.tier_engine.config import DEFAULT_TIER_CONFIGURATION

    path = Path(path)
    try:
        overrides = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValueError(f"Malformed tier configuration {path}: {e}") from e

    if not isinstance(overrides, dict):
        raise ValueError(f"Tier configuration {path} must contain a JSON object")

    config = DEFAULT_TIER_CONFIGURATION.with_overrides(overrides)
    logger.info("Loaded tier configuration from %s (%d overrides)", path, len(overrides))
    return config


# Active rule set for the process
_tier_configuration: Optional["TierConfiguration"] = None
_tier_configuration_lock = threading.Lock()


def get_tier_configuration() -> "TierConfiguration":
    """Get the active tier configuration, loading it once on first use."""
    global _tier_configuration
    config = _tier_configuration
    if config is not None:
        return config

    with _tier_configuration_lock:
        if _tier_configuration is None:
            path = Config.load().tier_config_path
            if path:
                _tier_configuration = load_tier_configuration(path)
            else:
                from core.tier_engine.config import DEFAULT_TIER_CONFIGURATION

                _tier_configuration = DEFAULT_TIER_CONFIGURATION
        return _tier_configuration


def install_tier_configuration(config: Optional["TierConfiguration"]) -> None:
    """
    Replace the active tier configuration.

    In-flight recommendations keep the instance they started with. Passing
    None resets to the environment-derived rule set on next use.
    """
    global _tier_configuration
    with _tier_configuration_lock:
        _tier_configuration = config
    if config is None:
        logger.info("Tier configuration reset to default")
    else:
        logger.info("Installed tier configuration")
