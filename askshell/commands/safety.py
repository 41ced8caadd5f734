"""Command risk classification for askshell."""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Pattern, Tuple

from ..utils.logging import logger
from ..utils.helpers import split_command_segments


class RiskTier(Enum):
    """How much damage a command can do if run unreviewed."""
    SAFE = "safe"
    DESTRUCTIVE = "destructive"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class Classification:
    """Result of classifying one command string."""
    tier: RiskTier
    explanation: Optional[str] = None
    matched: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def is_destructive(self) -> bool:
        return self.tier is RiskTier.DESTRUCTIVE

    @property
    def is_safe(self) -> bool:
        return self.tier is RiskTier.SAFE


# A command name in command position: start of a line, after a sequencing or
# pipe operator, inside $( ) or backticks, optionally behind env assignments,
# flags and wrapper commands such as sudo/env/xargs, and optionally as a path.
_CMD_POSITION = (
    r"(?:^|[;&|(`{]|\$\()\s*"
    r"(?:(?:[A-Za-z_]\w*=\S*|sudo|doas|env|nohup|time|exec|command|nice|xargs|-\S+)\s+)*"
    r"(?:[\w.~-]*/)?"
)
# Everything up to the end of the current segment, ending in whitespace
_SAME_SEGMENT = r"(?:[^;&|\n]*\s)?"
_END = r"(?![\w-])"


def _cmd(name: str) -> str:
    return _CMD_POSITION + name


_DELETION = "Forced or recursive deletion (rm -r/-f) can irreversibly destroy files"
_ELEVATION = "Runs with superuser privileges"
_DISK = "Low-level disk tool can overwrite partitions or whole filesystems"
_PERMISSIONS = "Recursive permission or ownership change can lock out users or break the system"
_SYSTEM_WRITE = "Writes into a device or system path"
_PIPE_EXEC = "Pipes text straight into an interpreter, running code that was never reviewed"
_SIGKILL = "Uncatchable process termination (SIGKILL) gives processes no chance to clean up"

# (pattern, explanation); any match makes a command destructive
DESTRUCTIVE_PATTERNS: List[Tuple[str, str]] = [
    # Recursive/forced deletion
    (_cmd("rm") + r"\s+" + _SAME_SEGMENT + r"(?:-[a-zA-Z]*[rRf][a-zA-Z]*|--recursive|--force)" + _END,
     _DELETION),
    (_cmd("rm") + r"\s+" + _SAME_SEGMENT + r"(?:/|~/?|\$HOME/?)\*?(?=\s|$|[;&|)])",
     "Deletion targeting the root or home directory"),
    (_cmd("find") + r"[^;&|\n]*\s-delete" + _END,
     "find -delete removes every matching file"),
    (r"-exec(?:dir)?\s+(?:\S*/)?rm\b",
     "find -exec rm deletes every matching file"),
    (_cmd("shred") + _END,
     "shred overwrites file contents beyond recovery"),

    # Superuser elevation
    (_cmd(r"(?:sudo|doas|pkexec)") + _END, _ELEVATION),
    (_cmd("su") + r"(?=\s|$)", _ELEVATION),

    # Low-level disk tools
    (_cmd(r"(?:dd|fdisk|sfdisk|gdisk|cfdisk|parted|wipefs|blkdiscard|mkswap|mkfs(?:\.\w+)?)") + r"(?![\w.-])",
     _DISK),
    (r"\bof=/dev/(?!null\b)", _DISK),

    # Recursive permission/ownership change
    (_cmd(r"(?:chmod|chown|chgrp)") + r"\s+" + _SAME_SEGMENT + r"(?:-[a-zA-Z]*[rR][a-zA-Z]*|--recursive)" + _END,
     _PERMISSIONS),

    # Writes to device/system paths
    (r">>?\|?\s*/dev/(?!(?:null|stdout|stderr|tty|zero|random|urandom)(?![\w/])|fd/)", _SYSTEM_WRITE),
    (r">>?\|?\s*/(?:etc|boot|sys|proc|bin|sbin|usr|lib|lib32|lib64)(?=/|\s|$)", _SYSTEM_WRITE),
    (_cmd("tee") + r"\s+(?:-\S+\s+)*/(?:dev/(?!null\b)|etc/|boot/|sys/|proc/|bin/|sbin/|usr/|lib)",
     _SYSTEM_WRITE),
    (_cmd("mv") + r"\s+[^;&|\n]*\s/dev/null(?![\w/])",
     "Moving files onto /dev/null destroys them"),

    # Pipe-to-interpreter idioms
    (r"\|\s*(?:sudo\s+(?:-\S+\s+)*)?(?:\S*/)?(?:ba|z|k|c|tc|da|fi|a)?sh(?![\w.-])", _PIPE_EXEC),
    (r"\|\s*(?:sudo\s+(?:-\S+\s+)*)?(?:\S*/)?(?:python[\d.]*|perl|ruby|node|php|lua)(?:\s+-\S*)*\s*(?=$|[;&|)])",
     _PIPE_EXEC),
    (r"\b(?:ba|z)?sh\s+<\(\s*(?:curl|wget)\b", _PIPE_EXEC),
    (r"\beval\s+[\"']?\$\(\s*(?:curl|wget)\b", _PIPE_EXEC),

    # Uncatchable process termination
    (_cmd(r"(?:kill|pkill|killall)") + r"\s+" + _SAME_SEGMENT
     + r"-(?:9|KILL|SIGKILL|s\s+(?:9|KILL|SIGKILL)|-signal[=\s](?:9|KILL|SIGKILL))" + _END,
     _SIGKILL),
    (_cmd("killall") + _END, "killall terminates every process with a matching name"),
    (r":\s*\(\s*\)\s*\{\s*:\s*\|\s*:\s*&\s*\}\s*;\s*:", "Fork bomb exhausts system resources"),

    # Version control and containers
    (_cmd("git") + r"\s+push\s+" + _SAME_SEGMENT + r"(?:--force(?:-with-lease)?|-[a-zA-Z]*f[a-zA-Z]*)" + _END,
     "Force push rewrites remote history"),
    (_cmd("git") + r"\s+reset\s+" + _SAME_SEGMENT + r"--hard" + _END,
     "git reset --hard discards uncommitted changes"),
    (_cmd("git") + r"\s+clean\s+" + _SAME_SEGMENT + r"-[a-zA-Z]*[fdxX]",
     "git clean deletes untracked files"),
    (_cmd("docker") + r"\s+(?:system|volume|image|container|network|builder)\s+prune" + _END,
     "docker prune permanently removes Docker data"),
    (_cmd("docker") + r"\s+(?:rm|rmi)\s+" + _SAME_SEGMENT + r"(?:-[a-zA-Z]*f[a-zA-Z]*|--force)" + _END,
     "Forced removal of Docker containers or images"),
    (_cmd("docker") + r"\s+stop\s+\$\(", "Stops every container in a substituted list"),

    # Databases, scheduling, power state
    (r"(?i)\bDROP\s+(?:DATABASE|TABLE|SCHEMA)\b", "Drops a database object"),
    (r"(?i)\bTRUNCATE\s+TABLE\b", "Truncates a database table"),
    (_cmd("crontab") + r"\s+" + _SAME_SEGMENT + r"-[a-zA-Z]*r", "crontab -r deletes the whole crontab"),
    (_cmd(r"(?:shutdown|reboot|halt|poweroff)") + _END, "Changes the machine's power state"),
    (_cmd("systemctl") + r"\s+(?:poweroff|reboot|halt|kexec)" + _END, "Changes the machine's power state"),
]

# Read-only/informational commands. Matched against each segment separately.
SAFE_PATTERNS: List[str] = [
    r"^ls\b",
    r"^pwd\b",
    r"^cd\b",
    r"^cat\b",
    r"^head\b",
    r"^tail\b",
    r"^less\b",
    r"^more\b",
    r"^grep\b",
    r"^find\b(?!.*\s-(?:exec|execdir|ok|okdir|delete|fprint|fprintf|fls)\b)",
    r"^which\b",
    r"^whereis\b",
    r"^whoami\b",
    r"^date\b",
    r"^echo\b",
    r"^printf\b",
    r"^wc\b",
    r"^sort\b",
    r"^uniq\b",
    r"^diff\b",
    r"^file\b",
    r"^stat\b",
    r"^du\b",
    r"^df\b",
    r"^free\b",
    r"^top\b",
    r"^htop\b",
    r"^ps\b",
    r"^uptime\b",
    r"^uname\b",
    r"^hostname\s*$",
    r"^env\s*$",
    r"^printenv\b",
    # Git read-only
    r"^git\s+(status|log|diff|show|branch|remote|fetch|pull)\b",
    # Docker read-only
    r"^docker\s+(ps|images|logs|inspect|stats)\b",
    # Package managers (read-only)
    r"^(npm|yarn|pnpm)\s+(list|ls|info|view|search)\b",
    r"^cargo\s+(check|test|doc|search)\b",
    r"^pip3?\s+(list|show|search)\b",
    # Kubernetes read-only
    r"^kubectl\s+(get|describe|logs)\b",
]

# Redirections that write nowhere
_HARMLESS_REDIRECTS = re.compile(r"\d*>>?\s*/dev/null\b|\d*>&\d")


class CommandSafetyChecker:
    """Classifies commands as safe, destructive or unknown.

    Destructive signatures always win over allow-listed ones; anything that
    matches neither is unknown.
    """

    def __init__(self,
                 extra_destructive: Optional[Dict[str, str]] = None,
                 extra_safe: Optional[List[str]] = None):
        """Initialize safety checker with the default rule sets.

        Args:
            extra_destructive: Additional destructive patterns mapped to explanations
            extra_safe: Additional allow-list patterns
        """
        self.destructive_patterns: List[Tuple[Pattern, str]] = []
        self.safe_patterns: List[Pattern] = []

        for pattern, explanation in DESTRUCTIVE_PATTERNS:
            self.add_destructive_pattern(pattern, explanation)
        for pattern in SAFE_PATTERNS:
            self.add_safe_pattern(pattern)

        for pattern, explanation in (extra_destructive or {}).items():
            self.add_destructive_pattern(pattern, explanation)
        for pattern in extra_safe or []:
            self.add_safe_pattern(pattern)

    def classify(self, command: str) -> Classification:
        """Classify a command string.

        Args:
            command: Shell command text, possibly multi-line

        Returns:
            Classification with tier and, for destructive commands, an explanation
        """
        cmd = (command or "").strip()
        if not cmd:
            return Classification(RiskTier.UNKNOWN)

        matched = self._destructive_matches(cmd)
        if matched:
            explanation = "; ".join(dict.fromkeys(matched))
            logger.debug(f"Destructive pattern(s) in '{cmd}': {explanation}")
            return Classification(RiskTier.DESTRUCTIVE, explanation, tuple(matched))

        if self._is_allow_listed(cmd):
            return Classification(RiskTier.SAFE)

        return Classification(RiskTier.UNKNOWN)

    def is_destructive(self, command: str) -> bool:
        """Check if a command matches any destructive signature."""
        return self.classify(command).is_destructive

    def is_safe(self, command: str) -> bool:
        """Check if a command is safe for auto-execution."""
        return self.classify(command).is_safe

    def _destructive_matches(self, cmd: str) -> List[str]:
        return [explanation for pattern, explanation in self.destructive_patterns
                if pattern.search(cmd)]

    def _is_allow_listed(self, cmd: str) -> bool:
        # Substitutions run arbitrary code, redirections overwrite files
        if "$(" in cmd or "`" in cmd:
            return False
        cleaned = _HARMLESS_REDIRECTS.sub("", cmd)
        if ">" in cleaned:
            return False

        segments = split_command_segments(cleaned)
        if not segments:
            return False
        return all(any(p.search(segment) for p in self.safe_patterns) for segment in segments)

    def add_destructive_pattern(self, pattern: str, explanation: str) -> None:
        """Add a custom destructive pattern."""
        try:
            compiled = re.compile(pattern, re.MULTILINE)
        except re.error as e:
            logger.warning(f"Ignoring invalid destructive pattern '{pattern}': {e}")
            return
        self.destructive_patterns.append((compiled, explanation))
        logger.debug(f"Added destructive pattern: {pattern}")

    def add_safe_pattern(self, pattern: str) -> None:
        """Add a custom allow-list pattern."""
        try:
            compiled = re.compile(pattern)
        except re.error as e:
            logger.warning(f"Ignoring invalid safe pattern '{pattern}': {e}")
            return
        self.safe_patterns.append(compiled)
        logger.debug(f"Added safe pattern: {pattern}")

    def remove_pattern(self, pattern: str) -> None:
        """Remove a pattern from both destructive and safe lists."""
        self.destructive_patterns = [(p, e) for p, e in self.destructive_patterns
                                     if p.pattern != pattern]
        self.safe_patterns = [p for p in self.safe_patterns if p.pattern != pattern]
        logger.debug(f"Removed pattern: {pattern}")


def create_safety_checker(extra_destructive: Optional[Dict[str, str]] = None,
                          extra_safe: Optional[List[str]] = None) -> CommandSafetyChecker:
    """Create a command safety checker with default patterns."""
    return CommandSafetyChecker(extra_destructive, extra_safe)
