"""Command classification, flattening and execution for askshell."""

from .detection import extract_command_text, is_likely_command
from .executor import (
    CommandExecutor, CommandResult, FailureKind, classify_failure, create_command_executor
)
from .flattener import FlattenResult, flatten_command, flatten_command_if_safe
from .safety import Classification, CommandSafetyChecker, RiskTier, create_safety_checker

__all__ = [
    "extract_command_text",
    "is_likely_command",
    "CommandExecutor",
    "CommandResult",
    "FailureKind",
    "classify_failure",
    "create_command_executor",
    "FlattenResult",
    "flatten_command",
    "flatten_command_if_safe",
    "Classification",
    "CommandSafetyChecker",
    "RiskTier",
    "create_safety_checker",
]
