"""Exceptions raised inside askshell.

Classification, flattening and probing never raise; their "failure" modes are
values (an Unknown tier, a refused FlattenResult, the interactive fallback).
"""


class AskShellError(Exception):
    """Base class for askshell errors."""


class ConfigError(AskShellError):
    """The configuration file is unreadable or holds invalid values."""


class InjectionBackendUnavailable(AskShellError):
    """A delivery backend (clipboard, key simulation, multiplexer) failed.

    Always caught by the injector, which downgrades to the interactive
    fallback for the current invocation.
    """


class ProcessSpawnFailed(AskShellError):
    """The shell process for a command could not be started."""

    def __init__(self, command: str, reason: str):
        super().__init__(f"Could not start '{command}': {reason}")
        self.command = command
        self.reason = reason
