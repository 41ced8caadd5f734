"""Helper utility functions for askshell."""

import re
import shlex
import shutil
from pathlib import Path
from typing import List, Optional

from ..utils.logging import logger

# Shell sequencing and pipeline operators, longest first
_SEGMENT_SPLIT = re.compile(r"\|\||&&|;|\||&|\n")
_ASSIGNMENT = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*=")


def split_command_segments(command: str) -> List[str]:
    """Split a command line into its pipeline/sequence segments.

    This is token matching, not shell parsing: operators inside quotes split
    too, which only ever makes callers more conservative.
    """
    return [part.strip() for part in _SEGMENT_SPLIT.split(command) if part.strip()]


def get_base_command(segment: str) -> Optional[str]:
    """Return the command name of a single segment.

    Leading ``VAR=value`` assignments are skipped, so ``FOO=1 make`` yields
    ``make``.
    """
    for part in segment.strip().split():
        if _ASSIGNMENT.match(part):
            continue
        return part
    return None


def can_split(line: str) -> bool:
    """Whether *line* has balanced quoting and escapes."""
    try:
        shlex.split(line)
    except ValueError:
        return False
    return True


def truncate_text(text: str, limit: int) -> str:
    """Keep the last *limit* characters of *text*; errors tend to be at the end."""
    if limit <= 0 or len(text) <= limit:
        return text
    return "..." + text[-limit:]


def tool_available(name: str) -> bool:
    """Return True if *name* is found on the system PATH."""
    return shutil.which(name) is not None


def ensure_directory_exists(directory: Path) -> None:
    """Ensure a directory exists, creating it if necessary."""
    try:
        directory.mkdir(parents=True, exist_ok=True)
        logger.debug(f"Directory ensured: {directory}")
    except OSError as e:
        logger.error(f"Failed to create directory {directory}: {e}")
        raise


def safe_file_write(file_path: Path, content: str, description: str = None) -> bool:
    """Safely write content to a file with error handling."""
    desc = description or f"file {file_path}"
    try:
        file_path.write_text(content)
        logger.system(f"Generated {desc}")
        return True
    except OSError as e:
        logger.error(f"Failed to write {desc}: {e}")
        return False
