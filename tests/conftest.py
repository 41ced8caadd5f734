from typing import List, Optional

import pytest

from askshell.commands.executor import CommandResult
from askshell.commands.safety import create_safety_checker
from askshell.config.policy import BehaviorPolicy
from askshell.delivery.injector import DeliveryOutcome
from askshell.delivery.probe import INTERACTIVE_FALLBACK, InjectionMethod
from askshell.errors import ProcessSpawnFailed


class FakePrompter:
    """Scripted answers instead of a terminal."""

    def __init__(self, confirms: Optional[List[bool]] = None, edits: Optional[List[Optional[str]]] = None):
        self.confirms = list(confirms or [])
        self.edits = list(edits or [])
        self.confirm_messages: List[str] = []
        self.shown: List[str] = []

    def show(self, text: str) -> None:
        self.shown.append(text)

    def confirm(self, message: str) -> bool:
        self.confirm_messages.append(message)
        return self.confirms.pop(0) if self.confirms else False

    def edit(self, message: str, default: str) -> Optional[str]:
        return self.edits.pop(0) if self.edits else default


class FakeExecutor:
    """Records commands and replays queued (exit_code, stderr) results."""

    def __init__(self, results=None, follow: bool = False):
        self.results = list(results or [])
        self.follow = follow
        self.commands: List[str] = []

    def execute(self, command: str, timeout: Optional[int] = None) -> CommandResult:
        self.commands.append(command)
        outcome = self.results.pop(0) if self.results else (0, "")
        if isinstance(outcome, Exception):
            raise outcome
        if outcome == "timeout":
            return CommandResult(command, 124, error_message="Command timed out after 1 seconds", timed_out=True)
        exit_code, stderr = outcome
        return CommandResult(command, exit_code, stderr=stderr)


class FakeInjector:
    """Delivers nowhere; hands back the text as the user's accepted edit."""

    def __init__(self, accepted: Optional[str] = "__same__", handed_off: bool = False):
        self.accepted = accepted
        self.handed_off = handed_off
        self.delivered: List[str] = []

    def inject(self, text: str, method: InjectionMethod) -> DeliveryOutcome:
        self.delivered.append(text)
        if self.handed_off:
            return DeliveryOutcome(method)
        accepted = text if self.accepted == "__same__" else self.accepted
        return DeliveryOutcome(INTERACTIVE_FALLBACK, accepted_text=accepted)


@pytest.fixture
def checker():
    return create_safety_checker()


@pytest.fixture
def policy():
    return BehaviorPolicy()


@pytest.fixture
def spawn_failure():
    return ProcessSpawnFailed("ls", "No such file or directory")
