"""Behavior policy consumed by the command runner."""

from dataclasses import dataclass

from ..constants import (
    DEFAULT_AUTO_EXECUTE, DEFAULT_CONFIRM_DESTRUCTIVE, DEFAULT_FLATTEN_MAX_LINE_LENGTH,
    DEFAULT_FOLLOW_OUTPUT, DEFAULT_PASTE_RESTORE_DELAY_MS, DEFAULT_STDERR_LIMIT,
    DEFAULT_TIMEOUT_SECONDS
)


@dataclass(frozen=True)
class BehaviorPolicy:
    auto_execute: bool = DEFAULT_AUTO_EXECUTE
    confirm_destructive: bool = DEFAULT_CONFIRM_DESTRUCTIVE
    timeout_seconds: int = DEFAULT_TIMEOUT_SECONDS
    flatten_max_line_length: int = DEFAULT_FLATTEN_MAX_LINE_LENGTH
    paste_restore_delay_ms: int = DEFAULT_PASTE_RESTORE_DELAY_MS
    stderr_limit: int = DEFAULT_STDERR_LIMIT
    follow_output: bool = DEFAULT_FOLLOW_OUTPUT
