"""Joining multi-line command blocks into one shell line for askshell.

A block is only rewritten when every line is provably an independent
command; anything ambiguous is handed back untouched. Joining uses ``&&`` so
a failing step stops the rest, which is what a user reading the block top
to bottom expects.
"""

import re
import shlex
from dataclasses import dataclass
from typing import List, Optional

from ..constants import DEFAULT_FLATTEN_MAX_LINE_LENGTH, KNOWN_COMMANDS, PATH_PREFIXES
from ..utils.helpers import can_split, get_base_command
from ..utils.logging import logger

JOIN_OPERATOR = " && "

# A line ending in one of these continues on the next line
_CONTINUATION = re.compile(r"(?:\\|\|\||&&|\|)\s*$")
_HEREDOC = "<<"
# A line ending in one of these does not wait for its command
_TRAILING_SEPARATORS = ("&", ";")


@dataclass(frozen=True)
class FlattenResult:
    """Outcome of a flatten attempt.

    ``refused_reason`` is the do-not-flatten signal: set whenever a multi-line
    block was left as it was.
    """
    text: str
    flattened: bool = False
    refused_reason: Optional[str] = None


def looks_like_command_name(token: Optional[str]) -> bool:
    """Whether *token* is a command name we recognize.

    Deliberately narrow: an unusual but valid command is reported as not a
    command, which only ever prevents a rewrite.
    """
    if not token:
        return False
    if token.startswith(PATH_PREFIXES):
        return True
    return token in KNOWN_COMMANDS


def _shell_tokens(line: str) -> List[str]:
    lexer = shlex.shlex(line, posix=True, punctuation_chars=True)
    lexer.whitespace_split = True
    lexer.commenters = ""
    return list(lexer)


def _refusal_reason(lines: List[str], max_line_length: int) -> Optional[str]:
    for line in lines:
        if _CONTINUATION.search(line):
            return f"line continues onto the next one: {line!r}"
        if _HEREDOC in line:
            return f"line starts a heredoc: {line!r}"
        if len(line) >= max_line_length:
            return f"line is {len(line)} chars, likely one wrapped command"
        if not can_split(line):
            return f"unbalanced quoting spans lines: {line!r}"
        tokens = _shell_tokens(line)
        if any(token.startswith("#") for token in tokens):
            return f"line has a comment that would swallow the rest: {line!r}"
        if tokens and tokens[-1] in _TRAILING_SEPARATORS:
            return f"line ends in a command separator: {line!r}"
        if not looks_like_command_name(get_base_command(line)):
            return f"line does not start with a known command: {line!r}"
    return None


def flatten_command(text: str,
                    max_line_length: int = DEFAULT_FLATTEN_MAX_LINE_LENGTH) -> FlattenResult:
    """Rewrite a multi-line block into a single ``&&``-joined line when safe.

    Args:
        text: Candidate command text
        max_line_length: Lines this long or longer block the rewrite

    Returns:
        FlattenResult; ``text`` is the original, unchanged, unless ``flattened``
    """
    lines = [line.strip() for line in text.splitlines() if line.strip()]
    if len(lines) <= 1:
        return FlattenResult(text)

    reason = _refusal_reason(lines, max_line_length)
    if reason:
        logger.debug(f"Not flattening command block: {reason}")
        return FlattenResult(text, refused_reason=reason)

    flat = JOIN_OPERATOR.join(lines)
    logger.debug(f"Flattened {len(lines)} lines into: {flat}")
    return FlattenResult(flat, flattened=True)


def flatten_command_if_safe(text: str,
                            max_line_length: int = DEFAULT_FLATTEN_MAX_LINE_LENGTH) -> str:
    """Return the flattened text, or *text* itself when it must not be rewritten."""
    return flatten_command(text, max_line_length).text
