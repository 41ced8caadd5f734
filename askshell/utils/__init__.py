"""Utility functions and helpers for askshell."""

from .logging import logger
from .helpers import (
    split_command_segments,
    get_base_command,
    can_split,
    truncate_text,
    tool_available,
    ensure_directory_exists,
    safe_file_write
)

__all__ = [
    "logger",
    "split_command_segments",
    "get_base_command",
    "can_split",
    "truncate_text",
    "tool_available",
    "ensure_directory_exists",
    "safe_file_write",
]
