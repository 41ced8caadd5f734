"""Main application class for askshell."""

import signal
import sys
from pathlib import Path
from typing import Optional

from ..commands import create_command_executor, create_safety_checker
from ..config.manager import create_config_manager
from ..delivery import create_injector, probe_environment, select_injection_method
from ..utils.logging import logger
from ..utils.prompts import create_prompter
from .models import ExecutionReport, ExecutionRequest, ExecutionState
from .runner import create_command_runner


class AskShell:
    """Reviews, delivers or runs the command contained in an AI response."""

    def __init__(self, config_dir: Optional[str] = None, debug: bool = False):
        """Initialize the askshell application.

        Args:
            config_dir: Custom configuration directory path
            debug: Enable debug logging
        """
        logger.set_debug(debug)

        config_path = Path(config_dir) if config_dir else None
        self.config_manager = create_config_manager(config_path)
        self.config = self.config_manager.config

        if not debug and self.config.get("enable_debug", False):
            logger.set_debug(True)

        self.safety_checker = create_safety_checker(
            self.config_manager.extra_destructive_patterns,
            self.config_manager.extra_safe_patterns
        )
        self.prompter = create_prompter()

        self._setup_signal_handlers()

        logger.debug("Application initialization complete")

    def handle_response(self,
                        response_text: str,
                        command_mode: bool = False,
                        bypass_confirmation: bool = False,
                        force_confirmation: bool = False,
                        timeout: Optional[int] = None,
                        follow: Optional[bool] = None) -> ExecutionReport:
        """Handle the final text of one AI response.

        Args:
            response_text: Complete response from the provider
            command_mode: The response was requested as a command
            bypass_confirmation: Run without asking, whatever the risk tier
            force_confirmation: Never auto-run, even safe commands
            timeout: Override for the configured timeout
            follow: Override for the configured output following

        Returns:
            ExecutionReport describing what happened
        """
        policy = self.config_manager.behavior_policy(timeout_seconds=timeout, follow_output=follow)
        request = ExecutionRequest(
            response_text=response_text,
            command_mode=command_mode,
            bypass_confirmation=bypass_confirmation,
            force_confirmation=force_confirmation,
        )

        # Probed fresh for every invocation, never stored
        environment = probe_environment()
        method = select_injection_method(environment)
        logger.debug(f"Selected injection method: {method.name}")

        runner = create_command_runner(
            policy,
            self.safety_checker,
            create_command_executor(policy.timeout_seconds, policy.stderr_limit, policy.follow_output),
            create_injector(environment, self.prompter, policy.paste_restore_delay_ms),
            self.prompter,
        )

        try:
            return runner.run(request, method)
        except KeyboardInterrupt:
            logger.system("Interrupted by user")
            report = ExecutionReport(command=response_text.strip())
            report.enter(ExecutionState.REJECTED)
            return report

    def _setup_signal_handlers(self) -> None:
        """Turn termination signals into SystemExit so cleanup handlers still run."""
        def signal_handler(sig, frame):
            logger.system(f"Received signal {sig}, shutting down gracefully...")
            sys.exit(128 + sig)

        signal.signal(signal.SIGTERM, signal_handler)

        if hasattr(signal, 'SIGHUP'):
            signal.signal(signal.SIGHUP, signal_handler)

    def get_config_summary(self) -> dict:
        """Get a summary of the current configuration."""
        return {
            "config_file": str(self.config_manager.config_file),
            "auto_execute": self.config.get("auto_execute"),
            "confirm_destructive": self.config.get("confirm_destructive"),
            "timeout_seconds": self.config.get("timeout_seconds"),
            "flatten_max_line_length": self.config.get("flatten_max_line_length"),
            "enable_debug": self.config.get("enable_debug"),
            "extra_destructive_patterns_count": len(self.config_manager.extra_destructive_patterns),
            "extra_safe_patterns_count": len(self.config_manager.extra_safe_patterns),
        }

    def print_config_summary(self) -> None:
        """Print a summary of the current configuration."""
        logger.system("Configuration Summary:")
        for key, value in self.get_config_summary().items():
            logger.system(f"  {key}: {value}")


def create_application(config_dir: Optional[str] = None, debug: bool = False) -> AskShell:
    """Create and initialize an AskShell application instance.

    Args:
        config_dir: Custom configuration directory path
        debug: Enable debug logging

    Returns:
        Initialized AskShell instance
    """
    return AskShell(config_dir, debug)
