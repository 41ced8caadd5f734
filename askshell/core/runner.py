"""The confirm/deliver/run/retry state machine for one command."""

import shlex
import sys
from typing import Optional

from ..commands.detection import extract_command_text, is_likely_command
from ..commands.executor import CommandExecutor, FailureKind
from ..commands.flattener import flatten_command
from ..commands.safety import Classification, CommandSafetyChecker, RiskTier
from ..config.policy import BehaviorPolicy
from ..constants import CLR_BOLD_WHITE, CLR_GREEN, CLR_RED, CLR_RESET, CLR_YELLOW
from ..delivery.injector import CommandInjector
from ..delivery.probe import InjectionMethod
from ..errors import ProcessSpawnFailed
from ..utils.helpers import split_command_segments, tool_available
from ..utils.logging import logger
from ..utils.prompts import Prompter
from .models import (
    CommandCandidate, CommandOrigin, ExecutionReport, ExecutionRequest, ExecutionState
)


def decide(tier: RiskTier, policy: BehaviorPolicy, request: ExecutionRequest) -> ExecutionState:
    """Where a classified command goes next: AUTO_RUN or AWAIT_CONFIRMATION."""
    if request.bypass_confirmation:
        return ExecutionState.AUTO_RUN
    if tier is RiskTier.SAFE and policy.auto_execute and not request.force_confirmation:
        return ExecutionState.AUTO_RUN
    return ExecutionState.AWAIT_CONFIRMATION


def elevate(command: str) -> str:
    """The sudo form of *command*; compound commands run in one elevated shell."""
    if len(split_command_segments(command)) > 1:
        return f"sudo sh -c {shlex.quote(command)}"
    return f"sudo {command}"


class CommandRunner:
    """Takes one AI response from text to a delivered or executed command."""

    def __init__(self,
                 policy: BehaviorPolicy,
                 safety_checker: CommandSafetyChecker,
                 executor: CommandExecutor,
                 injector: CommandInjector,
                 prompter: Prompter):
        self.policy = policy
        self.safety_checker = safety_checker
        self.executor = executor
        self.injector = injector
        self.prompter = prompter

    def prepare(self, request: ExecutionRequest) -> Optional[CommandCandidate]:
        """Extract, flatten and classify the command in *request*.

        Returns:
            The candidate, or None when auto-detected text is not a command
        """
        text = extract_command_text(request.response_text)
        if request.origin is CommandOrigin.AUTO_DETECTED and not is_likely_command(text):
            return None
        if not text:
            return None

        flat = flatten_command(text, self.policy.flatten_max_line_length)
        normalized = flat.text if flat.flattened else None
        classification = self.safety_checker.classify(normalized or text)

        return CommandCandidate(
            raw_text=text,
            origin=request.origin,
            tier=classification.tier,
            explanation=classification.explanation,
            normalized=normalized,
        )

    def run(self, request: ExecutionRequest, method: InjectionMethod) -> ExecutionReport:
        """Drive one request through the state machine.

        Args:
            request: Response text and per-invocation flags
            method: Delivery method chosen by the environment prober for this run

        Returns:
            ExecutionReport ending in a terminal state
        """
        report = ExecutionReport()
        candidate = self.prepare(request)
        if candidate is None:
            logger.debug("Response does not look like a command; nothing to do.")
            report.enter(ExecutionState.NOT_A_COMMAND)
            return report

        report.command = candidate.text
        report.risk_tier = candidate.tier
        report.risk_explanation = candidate.explanation
        report.enter(ExecutionState.CLASSIFIED)
        self._surface_classification(candidate.text, candidate.tier, candidate.explanation)

        next_state = decide(candidate.tier, self.policy, request)
        report.enter(next_state)

        if next_state is ExecutionState.AUTO_RUN:
            if candidate.tier is not RiskTier.SAFE:
                logger.warning("Running without confirmation (--yes).")
            return self._execute(candidate.text, report)

        confirmed = False
        if candidate.tier is RiskTier.DESTRUCTIVE and self.policy.confirm_destructive:
            if not self.prompter.confirm("This command may be destructive. Continue anyway?"):
                return self._reject(report)
            confirmed = True

        outcome = self.injector.inject(candidate.text, method)
        report.injection_method = outcome.method.name
        report.downgrade_reason = outcome.downgrade_reason

        if outcome.handed_off:
            report.enter(ExecutionState.DELIVERED)
            return report

        if outcome.accepted_text is None:
            return self._reject(report)

        command = outcome.accepted_text
        if command != candidate.text:
            classification = self.safety_checker.classify(command)
            report.command = command
            report.risk_tier = classification.tier
            report.risk_explanation = classification.explanation
            if not self._confirm_edit(command, classification, confirmed):
                return self._reject(report)

        return self._execute(command, report)

    def _confirm_edit(self, command: str, classification: Classification, confirmed: bool) -> bool:
        """An edit that made the command destructive needs its own confirmation."""
        if not classification.is_destructive or not self.policy.confirm_destructive or confirmed:
            return True
        self._surface_classification(command, classification.tier, classification.explanation)
        return self.prompter.confirm("The edited command may be destructive. Run it anyway?")

    def _reject(self, report: ExecutionReport) -> ExecutionReport:
        logger.user("Command not run.")
        report.enter(ExecutionState.REJECTED)
        return report

    def _execute(self, command: str, report: ExecutionReport, allow_sudo_retry: bool = True) -> ExecutionReport:
        report.enter(ExecutionState.EXECUTED)
        print(f"{CLR_GREEN}Running: {CLR_RESET}{CLR_BOLD_WHITE}{command}{CLR_RESET}", file=sys.stderr)

        try:
            result = self.executor.execute(command, self.policy.timeout_seconds)
        except ProcessSpawnFailed as e:
            report.command = command
            report.failure_kind = FailureKind.OTHER
            report.error_message = str(e)
            report.enter(ExecutionState.FAILED)
            return report

        report.record_result(result)
        self._surface_result(result)

        if result.success:
            report.enter(ExecutionState.SUCCEEDED)
            return report

        report.enter(ExecutionState.FAILED)
        if allow_sudo_retry and self._can_retry_with_sudo(command, result.failure_kind):
            return self._retry_with_sudo(command, report)
        return report

    def _can_retry_with_sudo(self, command: str, kind: FailureKind) -> bool:
        if kind is not FailureKind.PERMISSION_DENIED:
            return False
        if command.lstrip().startswith("sudo "):
            return False
        return tool_available("sudo")

    def _retry_with_sudo(self, command: str, report: ExecutionReport) -> ExecutionReport:
        """Offer a single elevated re-run. Always asked, whatever the flags."""
        report.enter(ExecutionState.RETRY_WITH_SUDO)
        report.sudo_offered = True

        elevated = elevate(command)
        classification = self.safety_checker.classify(elevated)
        self._surface_classification(elevated, classification.tier, classification.explanation)

        if not self.prompter.confirm("Permission denied. Retry with sudo?"):
            logger.user("Declined sudo retry.")
            report.enter(ExecutionState.FAILED)
            return report

        report.sudo_accepted = True
        report.risk_tier = classification.tier
        report.risk_explanation = classification.explanation
        return self._execute(elevated, report, allow_sudo_retry=False)

    def _surface_classification(self, command: str, tier: RiskTier, explanation: Optional[str]) -> None:
        if tier is RiskTier.DESTRUCTIVE:
            print(f"{CLR_YELLOW}Warning: {CLR_RESET}{CLR_BOLD_WHITE}{command}{CLR_RESET}", file=sys.stderr)
            print(f"{CLR_YELLOW}  {explanation}{CLR_RESET}", file=sys.stderr)
        else:
            logger.system(f"Command classified as {tier.value}: {command}")

    def _surface_result(self, result) -> None:
        if not self.executor.follow and result.stdout:
            print(result.stdout, end="" if result.stdout.endswith("\n") else "\n")

        if result.success:
            print(f"{CLR_GREEN}Done{CLR_RESET}", file=sys.stderr)
            return

        if result.error_message:
            logger.error(result.error_message)
        print(f"{CLR_RED}Failed (exit code: {result.exit_code}){CLR_RESET}", file=sys.stderr)
        if result.stderr.strip() and not self.executor.follow:
            print(f"{CLR_RED}{result.stderr.strip()}{CLR_RESET}", file=sys.stderr)


def create_command_runner(policy: BehaviorPolicy,
                          safety_checker: CommandSafetyChecker,
                          executor: CommandExecutor,
                          injector: CommandInjector,
                          prompter: Prompter) -> CommandRunner:
    """Create a CommandRunner from its collaborators."""
    return CommandRunner(policy, safety_checker, executor, injector, prompter)
