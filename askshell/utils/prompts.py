"""Terminal prompts: yes/no confirmations and the editable command prompt."""

import sys
from typing import Optional

from prompt_toolkit import prompt as pt_prompt

from ..constants import CLR_BOLD_WHITE, CLR_RESET, CLR_YELLOW
from .logging import logger


def _stdin_is_terminal() -> bool:
    try:
        return sys.stdin.isatty()
    except (AttributeError, ValueError):
        return False


class Prompter:
    """Asks the user things. Ctrl+C, EOF and a non-terminal stdin all mean "no"."""

    def show(self, text: str) -> None:
        """Print a command for the user to look at."""
        print(f"{CLR_BOLD_WHITE}{text}{CLR_RESET}")

    def confirm(self, message: str) -> bool:
        """Ask a yes/no question that defaults to no."""
        if not _stdin_is_terminal():
            logger.warning("stdin is not a terminal; treating confirmation as declined.")
            return False

        try:
            answer = input(f"{CLR_YELLOW}{message} [y/N]: {CLR_RESET}").strip().lower()
        except (EOFError, KeyboardInterrupt):
            print()
            return False
        return answer in ("y", "yes")

    def edit(self, message: str, default: str) -> Optional[str]:
        """Open a prompt pre-filled with *default*.

        Returns:
            The accepted text, or None when the user cancelled or cleared it
        """
        if not _stdin_is_terminal():
            logger.warning("stdin is not a terminal; the command cannot be edited here.")
            return None

        multiline = "\n" in default
        if multiline:
            logger.system("Multi-line command: press Esc then Enter to accept.")
        try:
            text = pt_prompt(message, default=default, multiline=multiline)
        except (EOFError, KeyboardInterrupt):
            return None

        text = text.strip()
        return text or None


def create_prompter() -> Prompter:
    """Create the terminal prompter."""
    return Prompter()
