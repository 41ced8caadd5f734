"""Configuration management for askshell."""

from .manager import ConfigManager, create_config_manager
from .policy import BehaviorPolicy
from .templates import CONFIG_TEMPLATE

__all__ = [
    "ConfigManager",
    "create_config_manager",
    "BehaviorPolicy",
    "CONFIG_TEMPLATE",
]
