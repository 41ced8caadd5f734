"""Configuration templates for askshell."""

CONFIG_TEMPLATE = """\
# config.yaml - askshell behavior settings
# Ensure this is valid YAML. Every key is optional; the values below are the defaults.
#
# auto_execute: Run commands classified as safe (ls, git status, ...) without asking.
# confirm_destructive: Ask an explicit yes/no before delivering or running a destructive command.
# timeout_seconds: Kill an executed command after this many seconds. 0 disables the limit.
# flatten_max_line_length: Multi-line commands are only joined with && when every line is shorter than this.
# paste_restore_delay_ms: How long the command stays on the clipboard after pasting it into the terminal.
# stderr_limit: Characters of a failed command's stderr kept for the report.
# follow_output: Stream a command's output to the terminal while it runs.
# enable_debug: Set to true for verbose debugging output.
#
# extra_destructive_patterns: Regular expressions that mark a command destructive,
#   mapped to the explanation shown to the user.
#   Example:
#     '\\bterraform\\s+destroy\\b': "Destroys managed infrastructure"
# extra_safe_patterns: Regular expressions (matched per pipeline segment) for
#   additional read-only commands.
#   Example:
#     - '^kubectl\\s+top\\b'

auto_execute: false
confirm_destructive: true
timeout_seconds: 30
flatten_max_line_length: 120
paste_restore_delay_ms: 300
stderr_limit: 2000
follow_output: true
enable_debug: false

extra_destructive_patterns: {}
extra_safe_patterns: []
"""
