"""Command-line interface for askshell."""

import argparse
import json
import sys
from typing import List, Optional

from colorama import init as colorama_init

from .core.application import create_application
from .core.models import ExecutionReport, ExecutionState
from .utils.logging import logger
from . import __version__


def create_parser() -> argparse.ArgumentParser:
    """Create the command-line argument parser."""
    parser = argparse.ArgumentParser(
        description="askshell: review, paste or run the shell command in an AI response.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  askshell -c "git status"                        # Treat the text as a command
  askshell "du -sh ~/Downloads"                   # Detect a command in a reply
  llm "free disk space?" | askshell               # Read the reply from stdin
  askshell -y -c "ls -la"                         # Run without asking

Delivery:
  Reviewed commands are pasted into the focused terminal when a graphical
  session is available, typed into the tmux/screen pane otherwise, and
  shown in an editable prompt as a last resort.
        """
    )

    parser.add_argument(
        'text',
        nargs='*',
        help="Response text. If empty, it is read from stdin."
    )

    parser.add_argument(
        '-c', '--command-mode',
        action='store_true',
        help="The text is a command that was asked for, not a free-form reply"
    )

    confirmation = parser.add_mutually_exclusive_group()
    confirmation.add_argument(
        '-y', '--yes',
        action='store_true',
        help="Run the command without confirmation, whatever its risk"
    )
    confirmation.add_argument(
        '--confirm',
        action='store_true',
        help="Always review the command, even when auto_execute is on"
    )

    parser.add_argument(
        '--no-follow',
        action='store_true',
        help="Capture the command's output instead of streaming it"
    )

    parser.add_argument(
        '--timeout',
        type=int,
        help="Seconds before the command is killed (0 for no limit)"
    )

    parser.add_argument(
        '--json',
        action='store_true',
        help="Print the execution report as JSON on stdout"
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'askshell {__version__}'
    )

    parser.add_argument(
        '--debug',
        action='store_true',
        help="Enable debug logging output"
    )

    parser.add_argument(
        '--config-dir',
        type=str,
        help="Custom configuration directory path"
    )

    parser.add_argument(
        '--config-summary',
        action='store_true',
        help="Show configuration summary and exit"
    )

    return parser


def read_response_text(words: List[str]) -> Optional[str]:
    """The response text from the arguments, or from stdin when it is piped."""
    if words:
        return " ".join(words)
    if sys.stdin.isatty():
        return None
    return sys.stdin.read()


def exit_status(report: ExecutionReport) -> int:
    """Child exit code when something ran, 1 for failure or rejection, else 0."""
    if report.exit_code is not None:
        return report.exit_code
    if report.state in (ExecutionState.FAILED, ExecutionState.REJECTED):
        return 1
    return 0


def main(args: Optional[List[str]] = None) -> None:
    """Main entry point for the CLI."""
    # Initialize colorama for cross-platform colored output
    colorama_init(autoreset=True)

    parser = create_parser()
    parsed_args = parser.parse_args(args)

    if parsed_args.timeout is not None and parsed_args.timeout < 0:
        parser.error("--timeout must be 0 or more")

    try:
        app = create_application(
            config_dir=parsed_args.config_dir,
            debug=parsed_args.debug
        )
    except SystemExit:
        # Configuration errors are already reported
        raise
    except Exception as e:
        logger.error(f"Failed to initialize askshell: {e}")
        sys.exit(1)

    if parsed_args.config_summary:
        app.print_config_summary()
        return

    text = read_response_text(parsed_args.text)
    if not text or not text.strip():
        parser.print_usage(sys.stderr)
        logger.error("No response text given.")
        sys.exit(1)

    report = app.handle_response(
        text,
        command_mode=parsed_args.command_mode,
        bypass_confirmation=parsed_args.yes,
        force_confirmation=parsed_args.confirm,
        timeout=parsed_args.timeout,
        follow=False if parsed_args.no_follow else None,
    )

    if parsed_args.json:
        print(json.dumps(report.to_dict()))

    sys.exit(exit_status(report))


if __name__ == "__main__":
    main()
