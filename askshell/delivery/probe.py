"""Environment probing: how can a command reach the user's shell?

``probe_environment`` gathers an immutable snapshot of the markers that
matter; ``select_injection_method`` turns a snapshot into a method and is a
pure function, so the choice can be tested from plain values.
"""

import os
import subprocess
import sys
from dataclasses import dataclass
from enum import Enum
from typing import Mapping, Optional

from ..constants import (
    DISPLAY_MARKERS, HELPER_TOOL_TIMEOUT, SCREEN_MARKER, SSH_MARKERS,
    TMUX_MARKER, TMUX_PANE_MARKER
)
from ..utils.logging import logger


class InjectionKind(Enum):
    GUI_PASTE = "gui_paste"
    MULTIPLEXER_SEND_KEYS = "multiplexer_send_keys"
    INTERACTIVE_FALLBACK = "interactive_fallback"


class Multiplexer(Enum):
    TMUX = "tmux"
    SCREEN = "screen"


@dataclass(frozen=True)
class InjectionMethod:
    """Delivery method chosen for one invocation.

    ``target`` is the tmux pane or screen session to type into.
    """
    kind: InjectionKind
    multiplexer: Optional[Multiplexer] = None
    target: Optional[str] = None

    @property
    def name(self) -> str:
        if self.multiplexer is not None:
            return self.multiplexer.value
        return self.kind.value

    @property
    def hands_off(self) -> bool:
        """True when delivery leaves the command in the user's shell prompt."""
        return self.kind is not InjectionKind.INTERACTIVE_FALLBACK


GUI_PASTE = InjectionMethod(InjectionKind.GUI_PASTE)
INTERACTIVE_FALLBACK = InjectionMethod(InjectionKind.INTERACTIVE_FALLBACK)


@dataclass(frozen=True)
class EnvironmentSnapshot:
    """The environment markers the method selection depends on."""
    platform: str
    wayland_display: Optional[str] = None
    x11_display: Optional[str] = None
    tmux: Optional[str] = None
    tmux_pane: Optional[str] = None
    screen_session: Optional[str] = None
    ssh_session: bool = False
    is_terminal: bool = True
    accessibility_granted: bool = False

    @property
    def is_macos(self) -> bool:
        return self.platform == "darwin"

    @property
    def is_windows(self) -> bool:
        return self.platform == "win32"

    @property
    def has_graphical_session(self) -> bool:
        if self.is_windows:
            return not self.ssh_session
        if self.is_macos:
            # Only usable through accessibility permission, checked separately
            return False
        return bool(self.wayland_display or self.x11_display)


def select_injection_method(snapshot: EnvironmentSnapshot) -> InjectionMethod:
    """Pick the delivery method for *snapshot*, highest priority first."""
    if not snapshot.is_terminal:
        return INTERACTIVE_FALLBACK

    if snapshot.has_graphical_session:
        return GUI_PASTE

    if snapshot.accessibility_granted:
        return GUI_PASTE

    if snapshot.tmux:
        return InjectionMethod(InjectionKind.MULTIPLEXER_SEND_KEYS, Multiplexer.TMUX, snapshot.tmux_pane)

    if snapshot.screen_session:
        return InjectionMethod(InjectionKind.MULTIPLEXER_SEND_KEYS, Multiplexer.SCREEN, snapshot.screen_session)

    return INTERACTIVE_FALLBACK


def _check_accessibility() -> bool:
    """Ask macOS whether the terminal may send synthetic key events."""
    script = 'ObjC.import("ApplicationServices"); $.AXIsProcessTrusted()'
    try:
        result = subprocess.run(
            ["osascript", "-l", "JavaScript", "-e", script],
            capture_output=True, text=True, timeout=HELPER_TOOL_TIMEOUT
        )
    except (OSError, subprocess.SubprocessError) as e:
        logger.debug(f"Accessibility check failed: {e}")
        return False
    return result.returncode == 0 and result.stdout.strip() == "true"


def _is_terminal() -> bool:
    try:
        return sys.stdout.isatty()
    except (AttributeError, ValueError):
        return False


def probe_environment(environ: Optional[Mapping[str, str]] = None,
                      platform: Optional[str] = None) -> EnvironmentSnapshot:
    """Collect an EnvironmentSnapshot for the current process.

    Never raises; a marker that cannot be read counts as absent.
    """
    env = os.environ if environ is None else environ
    platform = platform or sys.platform
    ssh_session = any(env.get(marker) for marker in SSH_MARKERS)

    accessibility = False
    if platform == "darwin" and not ssh_session:
        accessibility = _check_accessibility()

    wayland, x11 = (env.get(marker) or None for marker in DISPLAY_MARKERS)
    snapshot = EnvironmentSnapshot(
        platform=platform,
        wayland_display=wayland,
        x11_display=x11,
        tmux=env.get(TMUX_MARKER) or None,
        tmux_pane=env.get(TMUX_PANE_MARKER) or None,
        screen_session=env.get(SCREEN_MARKER) or None,
        ssh_session=ssh_session,
        is_terminal=_is_terminal(),
        accessibility_granted=accessibility,
    )
    logger.debug(f"Environment snapshot: {snapshot}")
    return snapshot
