"""Picking the command out of an AI response for askshell."""

import re
from typing import Optional

from ..constants import MAX_COMMAND_RESPONSE_LENGTH
from .flattener import looks_like_command_name


def parse_suggested_command(response: str) -> Optional[str]:
    """Extract a command wrapped in ```agent_command``` tags."""
    match = re.search(r"```agent_command\s*\n(.*?)\n?```", response, re.DOTALL)
    return match.group(1).strip() if match else None


def strip_code_fence(response: str) -> str:
    """Unwrap a response that is a single fenced code block.

    ```bash\\nls\\n``` becomes ``ls``; anything else is returned stripped.
    """
    text = response.strip()
    match = re.fullmatch(r"```[\w+-]*[ \t]*\n(.*?)\n?```", text, re.DOTALL)
    return match.group(1).strip() if match else text


def extract_command_text(response: str) -> str:
    """Return the command text contained in *response*."""
    suggested = parse_suggested_command(response)
    if suggested is not None:
        return suggested
    return strip_code_fence(response)


def is_likely_command(text: str) -> bool:
    """Heuristic: does auto-detected response text read as a shell command?"""
    text = text.strip()
    if not text or len(text) > MAX_COMMAND_RESPONSE_LENGTH:
        return False

    first_word = text.split()[0]
    return looks_like_command_name(first_word)
