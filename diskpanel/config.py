"""Configuration management."""
import logging
from fractions import Fraction
from pathlib import Path
from typing import Dict, Optional

import yaml


logger = logging.getLogger(__name__)


class Config:
    """Application configuration manager."""

    def __init__(self, config_path: str = "config.yaml"):
        """
        Initialize configuration.

        Args:
            config_path: Path to configuration file
        """
        self.config_path = Path(config_path)
        self.config = self._load_config()

    def _load_config(self) -> Dict:
        """Load configuration from file, layered over the defaults."""
        config = self._default_config()
        if not self.config_path.exists():
            return config

        try:
            with open(self.config_path, 'r') as f:
                loaded = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            logger.error("Error loading config %s: %s. Using defaults.", self.config_path, e)
            return config

        if isinstance(loaded, dict):
            self._merge(config, loaded)
        return config

    @classmethod
    def _merge(cls, base: Dict, override: Dict):
        for key, value in override.items():
            if isinstance(value, dict) and isinstance(base.get(key), dict):
                cls._merge(base[key], value)
            else:
                base[key] = value

    @staticmethod
    def _default_config() -> Dict:
        """Get default configuration."""
        return {
            "disk": {
                "update_interval": "1",
                "byte_format": "human_scaled",
                "title": "Disk Usage",
                "aliases": {}
            },
            "colors": {
                "text": "default",
                "border": "blue"
            },
            "cli": {
                "refresh_rate": 1
            },
            "logging": {
                "level": "WARNING",
                "file": None
            }
        }

    def get(self, key: str, default: Optional[any] = None) -> any:
        """
        Get configuration value by key (supports dot notation).

        Args:
            key: Configuration key (e.g., 'disk.title')
            default: Default value if key not found

        Returns:
            Configuration value
        """
        keys = key.split('.')
        value = self.config

        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default

        return value

    def get_disk_config(self) -> Dict:
        """Get disk widget configuration."""
        return self.config.get("disk", {})

    def get_colors(self) -> Dict:
        """Get color theme configuration."""
        return self.config.get("colors", {})

    def get_logging_config(self) -> Dict:
        """Get logging configuration."""
        return self.config.get("logging", {})

    def get_update_interval(self) -> Fraction:
        """
        Get the disk polling cadence as rational seconds.

        Accepts integers, decimals or fraction strings such as '1/2'.

        Raises:
            ValueError: If the interval is not a positive number
        """
        raw = self.get("disk.update_interval", "1")
        interval = Fraction(str(raw))
        if interval <= 0:
            raise ValueError(f"disk.update_interval must be positive, got {raw!r}")
        return interval
