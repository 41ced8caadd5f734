import pytest

from askshell.delivery import probe
from askshell.delivery.probe import (
    EnvironmentSnapshot, InjectionKind, Multiplexer, probe_environment, select_injection_method
)


def test_x11_display_selects_gui_paste() -> None:
    method = select_injection_method(EnvironmentSnapshot("linux", x11_display=":0"))
    assert method.kind is InjectionKind.GUI_PASTE


def test_wayland_display_selects_gui_paste() -> None:
    method = select_injection_method(EnvironmentSnapshot("linux", wayland_display="wayland-0"))
    assert method.kind is InjectionKind.GUI_PASTE


def test_graphical_session_beats_multiplexer() -> None:
    snapshot = EnvironmentSnapshot("linux", x11_display=":0", tmux="/tmp/tmux-1000/default,1,0")
    assert select_injection_method(snapshot).kind is InjectionKind.GUI_PASTE


def test_tmux_without_display() -> None:
    snapshot = EnvironmentSnapshot("linux", tmux="/tmp/tmux-1000/default,1,0", tmux_pane="%3")
    method = select_injection_method(snapshot)
    assert method.kind is InjectionKind.MULTIPLEXER_SEND_KEYS
    assert method.multiplexer is Multiplexer.TMUX
    assert method.target == "%3"
    assert method.name == "tmux"


def test_screen_without_display() -> None:
    method = select_injection_method(EnvironmentSnapshot("linux", screen_session="1234.pts-0.host"))
    assert method.multiplexer is Multiplexer.SCREEN
    assert method.target == "1234.pts-0.host"


def test_tmux_wins_over_screen() -> None:
    snapshot = EnvironmentSnapshot("linux", tmux="/tmp/tmux", screen_session="1234.pts-0.host")
    assert select_injection_method(snapshot).multiplexer is Multiplexer.TMUX


def test_nothing_available_falls_back() -> None:
    method = select_injection_method(EnvironmentSnapshot("linux"))
    assert method.kind is InjectionKind.INTERACTIVE_FALLBACK
    assert not method.hands_off


def test_no_terminal_falls_back_even_with_display() -> None:
    snapshot = EnvironmentSnapshot("linux", x11_display=":0", is_terminal=False)
    assert select_injection_method(snapshot).kind is InjectionKind.INTERACTIVE_FALLBACK


def test_macos_needs_accessibility() -> None:
    assert select_injection_method(EnvironmentSnapshot("darwin")).kind is InjectionKind.INTERACTIVE_FALLBACK
    granted = EnvironmentSnapshot("darwin", accessibility_granted=True)
    assert select_injection_method(granted).kind is InjectionKind.GUI_PASTE


@pytest.mark.parametrize("ssh, expected", [
    (False, InjectionKind.GUI_PASTE),
    (True, InjectionKind.INTERACTIVE_FALLBACK),
])
def test_windows_local_session_only(ssh, expected) -> None:
    snapshot = EnvironmentSnapshot("win32", ssh_session=ssh)
    assert select_injection_method(snapshot).kind is expected


def test_probe_reads_markers() -> None:
    snapshot = probe_environment(
        {"WAYLAND_DISPLAY": "wayland-0", "TMUX": "/tmp/tmux", "TMUX_PANE": "%1", "STY": ""},
        platform="linux",
    )
    assert snapshot.wayland_display == "wayland-0"
    assert snapshot.x11_display is None
    assert snapshot.tmux_pane == "%1"
    assert snapshot.screen_session is None
    assert not snapshot.ssh_session


def test_probe_detects_ssh() -> None:
    snapshot = probe_environment({"SSH_CONNECTION": "10.0.0.1 5000 10.0.0.2 22"}, platform="win32")
    assert snapshot.ssh_session


def test_probe_checks_accessibility_on_macos(monkeypatch) -> None:
    monkeypatch.setattr(probe, "_check_accessibility", lambda: True)
    assert probe_environment({}, platform="darwin").accessibility_granted


def test_probe_skips_accessibility_over_ssh(monkeypatch) -> None:
    def fail():
        raise AssertionError("accessibility must not be checked over SSH")

    monkeypatch.setattr(probe, "_check_accessibility", fail)
    assert not probe_environment({"SSH_TTY": "/dev/pts/1"}, platform="darwin").accessibility_granted
