"""Constants used throughout the askshell package."""

from pathlib import Path
from colorama import Fore, Style

# Configuration paths
CONFIG_DIR = Path.home() / ".config" / "askshell"
CONFIG_FILE = CONFIG_DIR / "config.yaml"

# ANSI Color Codes (using colorama)
CLR_RESET = Style.RESET_ALL
CLR_RED = Fore.RED
CLR_BOLD_RED = Style.BRIGHT + Fore.RED
CLR_GREEN = Fore.GREEN
CLR_BOLD_GREEN = Style.BRIGHT + Fore.GREEN
CLR_YELLOW = Fore.YELLOW
CLR_BOLD_YELLOW = Style.BRIGHT + Fore.YELLOW
CLR_MAGENTA = Fore.MAGENTA
CLR_BOLD_MAGENTA = Style.BRIGHT + Fore.MAGENTA
CLR_CYAN = Fore.CYAN
CLR_BOLD_CYAN = Style.BRIGHT + Fore.CYAN
CLR_WHITE = Fore.WHITE
CLR_BOLD_WHITE = Style.BRIGHT + Fore.WHITE

# Default behavior policy values
DEFAULT_AUTO_EXECUTE = False
DEFAULT_CONFIRM_DESTRUCTIVE = True
DEFAULT_TIMEOUT_SECONDS = 30
DEFAULT_FLATTEN_MAX_LINE_LENGTH = 120
DEFAULT_PASTE_RESTORE_DELAY_MS = 300
DEFAULT_STDERR_LIMIT = 2000
DEFAULT_FOLLOW_OUTPUT = True
DEFAULT_ENABLE_DEBUG = False

# Time the clipboard gets to settle before the paste keystroke is sent
CLIPBOARD_SETTLE_SECONDS = 0.05

# Upper bound for any helper tool (xclip, tmux, osascript, ...) we shell out to
HELPER_TOOL_TIMEOUT = 2

# Responses longer than this are prose, not a command
MAX_COMMAND_RESPONSE_LENGTH = 500

# Exit codes the shell uses for "found but not executable" and "not found"
EXIT_CODE_NOT_EXECUTABLE = 126
EXIT_CODE_NOT_FOUND = 127
EXIT_CODE_TIMEOUT = 124

# Environment markers read by the environment prober
DISPLAY_MARKERS = ["WAYLAND_DISPLAY", "DISPLAY"]
SSH_MARKERS = ["SSH_CONNECTION", "SSH_CLIENT", "SSH_TTY"]
TMUX_MARKER = "TMUX"
TMUX_PANE_MARKER = "TMUX_PANE"
SCREEN_MARKER = "STY"

# Names accepted as the first token of a line by the flattener and the
# command detector. Entries ending in "/" or "~" are path prefixes.
KNOWN_COMMANDS = frozenset([
    "ls", "cd", "pwd", "rm", "rmdir", "cp", "mv", "ln", "mkdir", "touch",
    "cat", "echo", "printf", "grep", "egrep", "rg", "find", "fd", "sed",
    "awk", "cut", "tr", "sort", "uniq", "wc", "head", "tail", "less", "more",
    "diff", "file", "stat", "chmod", "chown", "chgrp", "sudo", "doas", "su",
    "apt", "apt-get", "dnf", "yum", "pacman", "zypper", "brew", "snap",
    "flatpak", "npm", "npx", "yarn", "pnpm", "pip", "pip3", "pipx", "poetry",
    "uv", "cargo", "rustc", "rustup", "go", "git", "gh", "docker",
    "docker-compose", "podman", "kubectl", "helm", "terraform", "systemctl",
    "service", "journalctl", "curl", "wget", "tar", "zip", "unzip", "gzip",
    "gunzip", "ssh", "scp", "rsync", "ps", "kill", "pkill", "killall", "top",
    "htop", "df", "du", "free", "uptime", "uname", "hostname", "whoami",
    "which", "whereis", "date", "env", "printenv", "export", "source",
    "ping", "traceroute", "netstat", "ss", "ip", "ifconfig", "iptables",
    "ufw", "python", "python3", "node", "deno", "bun", "ruby", "perl", "php",
    "java", "javac", "gcc", "g++", "clang", "make", "cmake", "ninja", "dd",
    "mkfs", "fdisk", "parted", "mount", "umount", "lsblk", "crontab",
    "xargs", "tee", "open", "xdg-open", "code", "vim", "nvim", "nano",
])
PATH_PREFIXES = ("./", "../", "/", "~/")
