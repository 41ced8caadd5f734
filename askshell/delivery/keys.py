"""Synthetic paste keystrokes.

Linux terminals paste with Ctrl+Shift+V (plain Ctrl+V is a literal-next key
in readline); macOS uses Cmd+V and Windows consoles Ctrl+V.
"""

from typing import List

from ..errors import InjectionBackendUnavailable
from ..utils.helpers import tool_available
from .probe import EnvironmentSnapshot
from .tools import run_tool


class PasteKeystroke:
    """One way of sending the paste key combination to the focused window."""

    def __init__(self, name: str, args: List[str]):
        self.name = name
        self.args = args

    def is_available(self) -> bool:
        return tool_available(self.args[0])

    def send(self) -> None:
        run_tool(self.args)

    def __repr__(self) -> str:
        return f"PasteKeystroke({self.name!r})"


WTYPE_PASTE = PasteKeystroke("wtype", ["wtype", "-M", "ctrl", "-M", "shift", "v", "-m", "shift", "-m", "ctrl"])
XDOTOOL_PASTE = PasteKeystroke("xdotool", ["xdotool", "key", "--clearmodifiers", "ctrl+shift+v"])
MACOS_PASTE = PasteKeystroke(
    "osascript",
    ["osascript", "-e", 'tell application "System Events" to keystroke "v" using command down'],
)
WINDOWS_PASTE = PasteKeystroke(
    "sendkeys",
    ["powershell", "-NoProfile", "-NonInteractive", "-Command",
     "Add-Type -AssemblyName System.Windows.Forms; [System.Windows.Forms.SendKeys]::SendWait('^v')"],
)


def keystroke_candidates(snapshot: EnvironmentSnapshot) -> List[PasteKeystroke]:
    """Keystroke senders worth trying in *snapshot*, preferred first."""
    if snapshot.is_windows:
        return [WINDOWS_PASTE]
    if snapshot.is_macos:
        return [MACOS_PASTE]

    candidates = []
    if snapshot.wayland_display:
        candidates.append(WTYPE_PASTE)
    if snapshot.x11_display:
        candidates.append(XDOTOOL_PASTE)
    return candidates


def select_paste_keystroke(snapshot: EnvironmentSnapshot) -> PasteKeystroke:
    """First installed keystroke sender for *snapshot*.

    Raises:
        InjectionBackendUnavailable: nothing can simulate the paste keys
    """
    for keystroke in keystroke_candidates(snapshot):
        if keystroke.is_available():
            return keystroke
    raise InjectionBackendUnavailable("no key simulation tool available for this session")
