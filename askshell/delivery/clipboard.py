"""System clipboard access and scoped ownership for askshell.

Clipboard tools per platform:

* Wayland: ``wl-copy`` / ``wl-paste``
* X11: ``xclip``, falling back to ``xsel``
* macOS: ``pbcopy`` / ``pbpaste``
* Windows: PowerShell ``Set-Clipboard`` / ``Get-Clipboard``
"""

import time
from typing import Callable, List, Optional

from ..errors import InjectionBackendUnavailable
from ..utils.helpers import tool_available
from ..utils.logging import logger
from .probe import EnvironmentSnapshot
from .tools import run_tool


class ClipboardBackend:
    """Reads and writes the clipboard through a pair of command-line tools."""

    def __init__(self, name: str, read_args: List[str], write_args: List[str]):
        self.name = name
        self.read_args = read_args
        self.write_args = write_args

    def is_available(self) -> bool:
        return tool_available(self.read_args[0]) and tool_available(self.write_args[0])

    def read(self) -> Optional[bytes]:
        """Current clipboard contents as raw bytes, or None when there are none."""
        try:
            return run_tool(self.read_args, capture=True)
        except InjectionBackendUnavailable as e:
            # Empty clipboards make xclip and wl-paste exit non-zero
            logger.debug(f"Clipboard read via {self.name} gave nothing: {e}")
            return None

    def write(self, text: str) -> None:
        try:
            data = text.encode("utf-8")
        except UnicodeEncodeError as e:
            raise InjectionBackendUnavailable(f"text cannot be put on the clipboard: {e}") from e
        self.write_bytes(data)

    def write_bytes(self, data: bytes) -> None:
        run_tool(self.write_args, input_data=data)

    def __repr__(self) -> str:
        return f"ClipboardBackend({self.name!r})"


_POWERSHELL = ["powershell", "-NoProfile", "-NonInteractive", "-Command"]

WAYLAND_CLIPBOARD = ClipboardBackend("wl-clipboard", ["wl-paste", "--no-newline"], ["wl-copy"])
XCLIP_CLIPBOARD = ClipboardBackend(
    "xclip",
    ["xclip", "-selection", "clipboard", "-o"],
    ["xclip", "-selection", "clipboard", "-i"],
)
XSEL_CLIPBOARD = ClipboardBackend("xsel", ["xsel", "--clipboard", "--output"], ["xsel", "--clipboard", "--input"])
MACOS_CLIPBOARD = ClipboardBackend("pbcopy", ["pbpaste"], ["pbcopy"])
WINDOWS_CLIPBOARD = ClipboardBackend(
    "powershell",
    _POWERSHELL + ["Get-Clipboard -Raw"],
    _POWERSHELL + ["[Console]::In.ReadToEnd() | Set-Clipboard"],
)


def clipboard_candidates(snapshot: EnvironmentSnapshot) -> List[ClipboardBackend]:
    """Clipboard backends worth trying in *snapshot*, preferred first."""
    if snapshot.is_windows:
        return [WINDOWS_CLIPBOARD]
    if snapshot.is_macos:
        return [MACOS_CLIPBOARD]

    candidates = []
    if snapshot.wayland_display:
        candidates.append(WAYLAND_CLIPBOARD)
    if snapshot.x11_display:
        candidates.extend([XCLIP_CLIPBOARD, XSEL_CLIPBOARD])
    return candidates


def select_clipboard_backend(snapshot: EnvironmentSnapshot) -> ClipboardBackend:
    """First installed clipboard backend for *snapshot*.

    Raises:
        InjectionBackendUnavailable: no usable clipboard tool
    """
    for backend in clipboard_candidates(snapshot):
        if backend.is_available():
            return backend
    raise InjectionBackendUnavailable("no clipboard tool available for this session")


class ClipboardSnapshot:
    """Scoped ownership of the clipboard.

    Entering saves the current contents; leaving restores them on every exit
    path, including exceptions and KeyboardInterrupt. When a paste was sent,
    restoration waits ``restore_delay`` seconds first so the paste reads our
    text and not the restored one.

        with ClipboardSnapshot(backend, 0.3) as clip:
            clip.write(command)
            send_paste_keystroke()
            clip.mark_pasted()
    """

    def __init__(self,
                 backend: ClipboardBackend,
                 restore_delay: float,
                 sleep: Callable[[float], None] = time.sleep):
        self.backend = backend
        self.restore_delay = restore_delay
        self.original: Optional[bytes] = None
        self.pasted = False
        self.restored = False
        self._sleep = sleep

    def __enter__(self) -> "ClipboardSnapshot":
        self.original = self.backend.read()
        logger.debug(f"Saved clipboard ({len(self.original or b'')} bytes) via {self.backend.name}")
        return self

    def write(self, text: str) -> None:
        self.backend.write(text)

    def mark_pasted(self) -> None:
        self.pasted = True

    def __exit__(self, exc_type, exc, tb) -> bool:
        try:
            if self.pasted:
                self._sleep(self.restore_delay)
        finally:
            self.restore()
        return False

    def restore(self) -> None:
        """Put the saved bytes back exactly; an empty clipboard is restored as empty."""
        try:
            self.backend.write_bytes(self.original or b"")
            self.restored = True
            logger.debug("Clipboard restored")
        except InjectionBackendUnavailable as e:
            logger.error(f"Could not restore clipboard contents: {e}")
