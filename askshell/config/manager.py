"""Configuration manager for askshell."""

import sys
from typing import Any, Dict, List, Optional
from pathlib import Path

import yaml

from ..constants import (
    CONFIG_DIR, CONFIG_FILE, DEFAULT_AUTO_EXECUTE, DEFAULT_CONFIRM_DESTRUCTIVE, DEFAULT_ENABLE_DEBUG,
    DEFAULT_FLATTEN_MAX_LINE_LENGTH, DEFAULT_FOLLOW_OUTPUT, DEFAULT_PASTE_RESTORE_DELAY_MS,
    DEFAULT_STDERR_LIMIT, DEFAULT_TIMEOUT_SECONDS
)
from ..errors import ConfigError
from ..utils.logging import logger
from ..utils.helpers import ensure_directory_exists, safe_file_write
from .policy import BehaviorPolicy
from .templates import CONFIG_TEMPLATE

BOOLEAN_SETTINGS = {
    "auto_execute": DEFAULT_AUTO_EXECUTE,
    "confirm_destructive": DEFAULT_CONFIRM_DESTRUCTIVE,
    "follow_output": DEFAULT_FOLLOW_OUTPUT,
    "enable_debug": DEFAULT_ENABLE_DEBUG,
}

# name -> (default, minimum)
INTEGER_SETTINGS = {
    "timeout_seconds": (DEFAULT_TIMEOUT_SECONDS, 0),
    "flatten_max_line_length": (DEFAULT_FLATTEN_MAX_LINE_LENGTH, 1),
    "paste_restore_delay_ms": (DEFAULT_PASTE_RESTORE_DELAY_MS, 0),
    "stderr_limit": (DEFAULT_STDERR_LIMIT, 1),
}


class ConfigManager:
    """Manages configuration loading, validation, and setup for askshell."""

    def __init__(self, config_dir: Optional[Path] = None):
        """Initialize the configuration manager.

        Args:
            config_dir: Custom configuration directory path
        """
        self.config_dir = config_dir or CONFIG_DIR
        self.config_file = self.config_dir / CONFIG_FILE.name

        self.extra_destructive_patterns: Dict[str, str] = {}
        self.extra_safe_patterns: List[str] = []

        self._config: Optional[Dict[str, Any]] = None

    def initialize(self) -> None:
        """Write the config template if needed and load the configuration.

        Raises:
            ConfigError: The file exists but is unreadable or invalid
        """
        self._perform_initial_setup()
        self._config = self._load_config()
        self._populate_pattern_maps()

    def _perform_initial_setup(self) -> None:
        """Creates the config directory and a commented default config file."""
        if self.config_file.exists():
            return
        try:
            ensure_directory_exists(self.config_dir)
        except OSError:
            logger.warning("Continuing with default settings.")
            return
        if safe_file_write(self.config_file, CONFIG_TEMPLATE, "config template"):
            logger.system(f"Review {self.config_file} to change how commands are handled.")

    def _load_config(self) -> Dict[str, Any]:
        """Load and validate the configuration file."""
        if not self.config_file.exists():
            logger.debug(f"No configuration file at {self.config_file}; using defaults.")
            return self._validate({})

        try:
            with open(self.config_file, 'r') as f:
                config_data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Error parsing YAML file {self.config_file}: {e}") from e
        except OSError as e:
            raise ConfigError(f"Could not read {self.config_file}: {e}") from e

        if config_data is None:
            config_data = {}
        if not isinstance(config_data, dict):
            raise ConfigError(f"{self.config_file} is not a valid YAML dictionary.")

        config_data = self._validate(config_data)
        logger.debug(f"Configuration loaded successfully from {self.config_file}")
        return config_data

    def _validate(self, config_data: Dict[str, Any]) -> Dict[str, Any]:
        for key, default in BOOLEAN_SETTINGS.items():
            value = config_data.get(key, default)
            if not isinstance(value, bool):
                logger.warning(f"{key} in {self.config_file} must be true/false. Defaulting to {str(default).lower()}.")
                value = default
            config_data[key] = value

        for key, (default, minimum) in INTEGER_SETTINGS.items():
            value = config_data.get(key, default)
            # bool is an int subclass; "true" is not a timeout
            if isinstance(value, bool) or not isinstance(value, int) or value < minimum:
                raise ConfigError(f"{key} ('{value}') in {self.config_file} must be an integer >= {minimum}.")
            config_data[key] = value

        return config_data

    def _populate_pattern_maps(self) -> None:
        """Populate the extra destructive and safe pattern collections from config."""
        if not self._config:
            return

        destructive = self._config.get("extra_destructive_patterns") or {}
        if isinstance(destructive, dict):
            self.extra_destructive_patterns = {str(k): str(v) for k, v in destructive.items()}
        elif isinstance(destructive, list):
            self.extra_destructive_patterns = {str(p): "Matches a user-defined destructive pattern" for p in destructive}
        else:
            logger.warning(f"'extra_destructive_patterns' in {self.config_file} is not a list or map. Ignoring it.")
            self.extra_destructive_patterns = {}
        logger.debug(f"Loaded {len(self.extra_destructive_patterns)} extra destructive patterns.")

        safe = self._config.get("extra_safe_patterns") or []
        if isinstance(safe, list):
            self.extra_safe_patterns = [str(p) for p in safe]
        else:
            logger.warning(f"'extra_safe_patterns' in {self.config_file} is not a list. Ignoring it.")
            self.extra_safe_patterns = []
        logger.debug(f"Loaded {len(self.extra_safe_patterns)} extra safe patterns.")

    @property
    def config(self) -> Dict[str, Any]:
        """Get the current configuration."""
        if self._config is None:
            raise RuntimeError("Configuration not loaded. Call initialize() first.")
        return self._config.copy()

    def get(self, key: str, default: Any = None) -> Any:
        """Get a configuration value."""
        if self._config is None:
            raise RuntimeError("Configuration not loaded. Call initialize() first.")
        return self._config.get(key, default)

    def behavior_policy(self, **overrides: Any) -> BehaviorPolicy:
        """Build the runner's BehaviorPolicy, with optional per-invocation overrides."""
        values = {key: self.get(key) for key in BehaviorPolicy.__dataclass_fields__}
        values.update({k: v for k, v in overrides.items() if v is not None})
        return BehaviorPolicy(**values)

    def reload(self) -> None:
        """Reload the configuration from disk."""
        self._config = self._load_config()
        self._populate_pattern_maps()


def create_config_manager(config_dir: Optional[Path] = None) -> ConfigManager:
    """Create and initialize a configuration manager.

    Args:
        config_dir: Custom configuration directory path

    Returns:
        Initialized ConfigManager instance
    """
    manager = ConfigManager(config_dir)
    try:
        manager.initialize()
    except ConfigError as e:
        logger.error(str(e))
        sys.exit(1)
    return manager
