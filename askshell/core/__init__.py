"""Core application logic for askshell."""

from .application import AskShell, create_application
from .models import (
    CommandCandidate, CommandOrigin, ExecutionReport, ExecutionRequest, ExecutionState
)
from .runner import CommandRunner, create_command_runner, decide

__all__ = [
    "AskShell",
    "create_application",
    "CommandCandidate",
    "CommandOrigin",
    "ExecutionReport",
    "ExecutionRequest",
    "ExecutionState",
    "CommandRunner",
    "create_command_runner",
    "decide",
]
