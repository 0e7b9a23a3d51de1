"""Configuration manager for loading and validating .waitretry.yml"""

import copy
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import ValidationError

from waitretry.domain.config import AppConfig, BackoffConfig

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = ".waitretry.yml"


class ConfigurationError(Exception):
    """Configuration validation error."""

    pass


class ConfigManager:
    """Manages configuration from .waitretry.yml and environment variables

    Configuration priority:
    1. Default values (defined in Pydantic models)
    2. .waitretry.yml file (searched from current directory upwards)
    3. Environment variables (WAITRETRY_*)
    4. CLI arguments (handled by CLI layer)
    """

    DEFAULT_CONFIG = {
        "backoff": {
            "policy": "exponential",
            "delay_ms": 200,
            "initial_delay_ms": 100,
            "factor": None,
            "min_delay_ms": 10,
            "max_delay_ms": 1000,
            "retry_count": 3,
            "fast_first": False,
            "seed": None,
        },
    }

    def __init__(self, config_path: Optional[Path] = None):
        """Initialize config manager

        Args:
            config_path: Path to .waitretry.yml (searches from current dir if None)

        Raises:
            ConfigurationError: If configuration validation fails
        """
        if isinstance(config_path, str):
            config_path = Path(config_path)
        self.config_path = config_path or self._find_config_file()
        try:
            self.config: AppConfig = self._load_config()
        except ValidationError as e:
            errors = []
            for error in e.errors():
                field = ".".join(str(x) for x in error["loc"])
                msg = error["msg"]
                errors.append(f"  - {field}: {msg}")
            raise ConfigurationError(
                "Configuration validation failed:\n" + "\n".join(errors)
            ) from e

    def _find_config_file(self) -> Optional[Path]:
        """Find .waitretry.yml starting from current directory

        Returns:
            Path to config file or None if not found
        """
        current = Path.cwd()
        for parent in [current] + list(current.parents):
            config_file = parent / CONFIG_FILE_NAME
            if config_file.exists():
                logger.info(f"Found config file: {config_file}")
                return config_file
        logger.debug(f"No {CONFIG_FILE_NAME} found, using defaults")
        return None

    def _load_config(self) -> AppConfig:
        """Load configuration from file and validate with Pydantic

        Raises:
            ValidationError: If configuration is invalid
        """
        config_dict = copy.deepcopy(self.DEFAULT_CONFIG)

        if self.config_path and self.config_path.exists():
            try:
                with open(self.config_path, "r", encoding="utf-8") as f:
                    file_config = yaml.safe_load(f) or {}
                if not isinstance(file_config, dict):
                    raise ValueError("top-level YAML value must be a mapping")
                config_dict = self._merge_config(config_dict, file_config)
                logger.info(f"Loaded configuration from {self.config_path}")
            except (OSError, yaml.YAMLError, ValueError) as e:
                logger.warning(f"Failed to load config from {self.config_path}: {e}")
                logger.info("Using default configuration")

        config_dict = self._apply_env_overrides(config_dict)

        return AppConfig(**config_dict)

    def _merge_config(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """Recursively merge configuration dictionaries"""
        result = base.copy()
        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._merge_config(result[key], value)
            else:
                result[key] = value
        return result

    def _apply_env_overrides(self, config: Dict[str, Any]) -> Dict[str, Any]:
        """Apply WAITRETRY_* environment variable overrides

        Values are passed through as strings; Pydantic coerces and validates them.
        """
        backoff = config.get("backoff")
        if not isinstance(backoff, dict):
            # Left for Pydantic to reject
            return config

        if os.getenv("WAITRETRY_POLICY"):
            backoff["policy"] = os.getenv("WAITRETRY_POLICY")

        if os.getenv("WAITRETRY_RETRY_COUNT"):
            backoff["retry_count"] = os.getenv("WAITRETRY_RETRY_COUNT")

        if os.getenv("WAITRETRY_SEED"):
            backoff["seed"] = os.getenv("WAITRETRY_SEED")

        return config

    def get_backoff_config(self) -> BackoffConfig:
        """Get backoff configuration

        Returns:
            Backoff configuration model
        """
        return self.config.backoff

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value by key (supports dot notation)

        Args:
            key: Configuration key (e.g., "backoff.retry_count" or "backoff")
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        keys = key.split(".")
        value = self.config.model_dump()
        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default
        return value
