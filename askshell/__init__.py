"""
askshell - the command-handling core of a terminal AI assistant.

Takes the final text of an AI response, finds the shell command in it, judges
how risky it is, and either puts it on the user's prompt line for review or
runs it, offering a single sudo retry when it fails for lack of permission.
"""

__version__ = "0.3.0"
__author__ = "askshell Team"

# Main API imports
from .core.application import AskShell, create_application
from .core.runner import CommandRunner, create_command_runner
from .config.manager import ConfigManager, create_config_manager

__all__ = [
    "AskShell",
    "create_application",
    "CommandRunner",
    "create_command_runner",
    "ConfigManager",
    "create_config_manager",
    "__version__",
]
