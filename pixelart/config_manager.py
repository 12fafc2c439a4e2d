"""Configuration persistence manager for the pixel art converter.

This module handles loading and saving of pixelation settings to/from JSON files.
"""

import json
import logging
from dataclasses import asdict, fields
from pathlib import Path
from typing import Optional, Tuple

from pixelart.models import CONFIG_FILE, Algorithm, PixelationConfig, PixelationError

logger = logging.getLogger(__name__)


class ConfigManager:
    """Handles loading and saving of pixelation configuration."""

    def __init__(self, config_path: Path = CONFIG_FILE):
        """Initialize config manager.

        Args:
            config_path: Path to configuration file (defaults to ~/.pixelart_config.json)
        """
        self.config_path = Path(config_path)

    def load(self) -> PixelationConfig:
        """Load configuration from file, returning defaults if not found.

        Returns:
            PixelationConfig with loaded or default values
        """
        defaults = PixelationConfig()
        if not self.config_path.exists():
            return defaults

        try:
            with open(self.config_path, "r") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Could not load config file: %s", e)
            return defaults

        if not isinstance(data, dict):
            logger.warning("Ignoring config file %s: expected a JSON object", self.config_path)
            return defaults

        # Update config with loaded values (fallback to defaults)
        values = {}
        for field in fields(PixelationConfig):
            if field.name in data:
                values[field.name] = data[field.name]

        try:
            config = PixelationConfig(**values)
            config.validate()
        except (PixelationError, TypeError) as e:
            logger.warning("Invalid values in %s, using defaults: %s", self.config_path, e)
            return defaults

        logger.info("Loaded configuration from %s", self.config_path)
        return config

    def save(self, config: PixelationConfig) -> Tuple[bool, Optional[str]]:
        """Save configuration to file.

        Args:
            config: PixelationConfig to save

        Returns:
            Tuple of (success: bool, error_message: Optional[str])
        """
        data = asdict(config)
        data["algorithm"] = config.algorithm.value
        try:
            with open(self.config_path, "w") as f:
                json.dump(data, f, indent=2)
            return True, None
        except OSError as e:
            return False, str(e)


def config_from_dict(data: dict) -> PixelationConfig:
    """Build a config from loosely typed values, e.g. CLI arguments."""
    values = {k: v for k, v in data.items() if v is not None}
    if "algorithm" in values:
        values["algorithm"] = Algorithm.parse(values["algorithm"])
    return PixelationConfig(**values)
