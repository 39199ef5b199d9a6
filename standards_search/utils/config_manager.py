"""
Configuration management for the search engine.

Handles loading and validating search defaults (thresholds, result limits,
default sort) from YAML, falling back to built-in defaults.
"""

import copy
import logging
from pathlib import Path
from typing import Any, Optional

import yaml

from standards_search.exceptions import ConfigurationError
from standards_search.models import SortField

logger = logging.getLogger(__name__)

# Default config path relative to project root
DEFAULT_CONFIG_PATH = Path(__file__).parent.parent.parent / 'config' / 'search_config.yaml'


class ConfigManager:
    """
    Manages search configuration including thresholds and result limits.

    Values from the YAML file are merged section by section over
    DEFAULT_CONFIG, so a partial file only overrides what it names.
    """

    DEFAULT_CONFIG = {
        'thresholds': {
            'fuzzy': 0.8,
            'duplicate': 0.82,
        },
        'duplicates': {
            'max_results': 5,
        },
        'suggestions': {
            'limit': 5,
        },
        'sorting': {
            'field': 'name',
            'direction': 'ascending',
        },
        'filters': {
            'expiring_soon_days': 30,
        },
    }

    def __init__(self, config_path: Optional[Path] = None):
        """
        Initialize the configuration manager.

        Args:
            config_path: Path to YAML configuration file
        """
        self.config_path = config_path
        self.config: dict[str, Any] = {}

        if config_path and Path(config_path).exists():
            self.load_config(Path(config_path))
        else:
            logger.info("No config file found, using defaults")
            self.config = copy.deepcopy(self.DEFAULT_CONFIG)

    @classmethod
    def from_default_path(cls) -> "ConfigManager":
        """Load config/search_config.yaml from the project root if present."""
        return cls(DEFAULT_CONFIG_PATH)

    def load_config(self, path: Path) -> dict[str, Any]:
        """
        Load configuration from YAML file.

        Args:
            path: Path to configuration file

        Returns:
            Loaded configuration dictionary

        Raises:
            FileNotFoundError: If config file does not exist
            yaml.YAMLError: If config file is invalid
            ConfigurationError: If a value is out of range
        """
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        try:
            with open(path, 'r', encoding='utf-8') as f:
                loaded_config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            logger.error(f"Failed to parse YAML config: {e}")
            raise

        if not loaded_config:
            logger.warning(f"Empty config file at {path}, using defaults")
            self.config = copy.deepcopy(self.DEFAULT_CONFIG)
        else:
            self.config = self._merge_with_defaults(loaded_config)

        errors = self.validate_config()
        if errors:
            raise ConfigurationError(f"Invalid configuration in {path}: " + "; ".join(errors))

        self.config_path = path
        logger.info(f"Loaded configuration from {path}")
        return self.config

    def get_threshold(self, name: str) -> float:
        """
        Get a threshold value by name.

        Args:
            name: Threshold name ('fuzzy' or 'duplicate')

        Raises:
            KeyError: If threshold name not found
        """
        if name not in self.config.get('thresholds', {}):
            raise KeyError(f"Threshold '{name}' not found in configuration")

        return float(self.config['thresholds'][name])

    def update_threshold(self, name: str, value: float) -> None:
        """
        Update a threshold value.

        Raises:
            ConfigurationError: If value is out of range
        """
        if not 0.0 <= value <= 1.0:
            raise ConfigurationError(f"Threshold value must be between 0 and 1, got {value}")

        thresholds = self.config.setdefault('thresholds', {})
        old_value = thresholds.get(name)
        thresholds[name] = value

        logger.info(f"Updated threshold '{name}': {old_value} -> {value}")

    def get_param(self, section: str, name: str) -> Any:
        """
        Get a parameter from a config section.

        Raises:
            KeyError: If section or parameter not found
        """
        if name not in self.config.get(section, {}):
            raise KeyError(f"Parameter '{section}.{name}' not found in configuration")

        return self.config[section][name]

    def get_all_config(self) -> dict[str, Any]:
        """Get a copy of the complete configuration dictionary."""
        return copy.deepcopy(self.config)

    def reset_to_defaults(self) -> None:
        """Reset configuration to default values."""
        self.config = copy.deepcopy(self.DEFAULT_CONFIG)
        logger.info("Configuration reset to defaults")

    def _merge_with_defaults(self, loaded_config: dict) -> dict:
        """Merge loaded config with defaults to ensure all keys exist."""
        merged = copy.deepcopy(self.DEFAULT_CONFIG)

        for section, values in loaded_config.items():
            if section in merged and isinstance(values, dict):
                merged[section].update(values)
            else:
                merged[section] = values

        return merged

    def validate_config(self) -> list[str]:
        """
        Validate the current configuration.

        Returns:
            List of validation error messages (empty if valid)
        """
        errors = []

        thresholds = self.config.get('thresholds', {})
        for name, value in thresholds.items():
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                errors.append(f"Threshold '{name}' must be numeric, got {type(value).__name__}")
            elif not 0.0 <= value <= 1.0:
                errors.append(f"Threshold '{name}' must be between 0 and 1, got {value}")

        for section, name in (('duplicates', 'max_results'),
                              ('suggestions', 'limit'),
                              ('filters', 'expiring_soon_days')):
            value = self.config.get(section, {}).get(name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                errors.append(f"{section}.{name} must be a non-negative integer")

        try:
            SortField.parse(self.config.get('sorting', {}).get('field'))
        except ConfigurationError as e:
            errors.append(f"sorting.field: {e}")

        direction = str(self.config.get('sorting', {}).get('direction', '')).lower()
        if direction not in ('asc', 'desc', 'ascending', 'descending'):
            errors.append(f"sorting.direction must be ascending or descending, got '{direction}'")

        return errors
