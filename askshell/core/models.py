"""Data passed into and out of the command runner."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from ..commands.executor import CommandResult, FailureKind
from ..commands.safety import RiskTier


class CommandOrigin(Enum):
    """Whether the caller asked for a command or we spotted one in a reply."""
    EXPLICIT = "explicit"
    AUTO_DETECTED = "auto_detected"


class ExecutionState(Enum):
    NOT_A_COMMAND = "not_a_command"
    CLASSIFIED = "classified"
    AUTO_RUN = "auto_run"
    AWAIT_CONFIRMATION = "await_confirmation"
    REJECTED = "rejected"
    DELIVERED = "delivered"
    EXECUTED = "executed"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    RETRY_WITH_SUDO = "retry_with_sudo"


TERMINAL_STATES = frozenset([
    ExecutionState.NOT_A_COMMAND,
    ExecutionState.REJECTED,
    ExecutionState.DELIVERED,
    ExecutionState.SUCCEEDED,
    ExecutionState.FAILED,
])


@dataclass(frozen=True)
class CommandCandidate:
    """One command extracted from one AI response. Never reused."""
    raw_text: str
    origin: CommandOrigin
    tier: RiskTier = RiskTier.UNKNOWN
    explanation: Optional[str] = None
    normalized: Optional[str] = None

    @property
    def text(self) -> str:
        """The form that gets classified, delivered and run."""
        return self.normalized if self.normalized is not None else self.raw_text


@dataclass(frozen=True)
class ExecutionRequest:
    """Input from the provider and CLI layers for one invocation."""
    response_text: str
    command_mode: bool = False
    bypass_confirmation: bool = False
    force_confirmation: bool = False

    @property
    def origin(self) -> CommandOrigin:
        return CommandOrigin.EXPLICIT if self.command_mode else CommandOrigin.AUTO_DETECTED


@dataclass
class ExecutionReport:
    """Structured account of one invocation, for the output layer."""
    command: str = ""
    risk_tier: RiskTier = RiskTier.UNKNOWN
    risk_explanation: Optional[str] = None
    injection_method: Optional[str] = None
    downgrade_reason: Optional[str] = None
    exit_code: Optional[int] = None
    failure_kind: Optional[FailureKind] = None
    stderr: str = ""
    error_message: Optional[str] = None
    sudo_offered: bool = False
    sudo_accepted: bool = False
    states: List[ExecutionState] = field(default_factory=list)

    @property
    def state(self) -> Optional[ExecutionState]:
        return self.states[-1] if self.states else None

    @property
    def finished(self) -> bool:
        return self.state in TERMINAL_STATES

    @property
    def executed(self) -> bool:
        return ExecutionState.EXECUTED in self.states

    def enter(self, state: ExecutionState) -> None:
        self.states.append(state)

    def record_result(self, result: CommandResult) -> None:
        self.command = result.command
        self.exit_code = result.exit_code
        self.failure_kind = result.failure_kind
        self.stderr = result.stderr
        self.error_message = result.error_message or None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "command": self.command,
            "risk_tier": self.risk_tier.value,
            "risk_explanation": self.risk_explanation,
            "injection_method": self.injection_method,
            "downgrade_reason": self.downgrade_reason,
            "exit_code": self.exit_code,
            "failure_kind": self.failure_kind.value if self.failure_kind else None,
            "stderr": self.stderr,
            "error_message": self.error_message,
            "sudo_offered": self.sudo_offered,
            "sudo_accepted": self.sudo_accepted,
            "state": self.state.value if self.state else None,
            "states": [s.value for s in self.states],
        }
