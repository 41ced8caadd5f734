import subprocess
import sys
import time

import pytest

from askshell.commands.executor import (
    CommandExecutor, CommandResult, FailureKind, classify_failure, shell_invocation
)
from askshell.commands import executor as executor_module
from askshell.errors import ProcessSpawnFailed


def test_success_has_no_failure() -> None:
    assert classify_failure(0, "some warning") is FailureKind.SUCCESS


def test_permission_denied_from_stderr() -> None:
    assert classify_failure(1, "mkdir: cannot create directory '/opt/x': Permission denied") \
        is FailureKind.PERMISSION_DENIED


def test_permission_denied_from_exit_code() -> None:
    assert classify_failure(126, "") is FailureKind.PERMISSION_DENIED


def test_not_found() -> None:
    assert classify_failure(127, "") is FailureKind.NOT_FOUND
    assert classify_failure(1, "sh: 1: frobnicate: command not found") is FailureKind.NOT_FOUND


def test_other_failure() -> None:
    assert classify_failure(2, "ls: cannot access 'x': No such file or directory") is FailureKind.OTHER


def test_stderr_is_truncated_to_the_tail() -> None:
    result = CommandResult("x", 1, stderr="a" * 50 + "END", stderr_limit=10)
    assert result.stderr.endswith("END")
    assert len(result.stderr) == 13


def test_timed_out_result_is_other_failure() -> None:
    result = CommandResult("sleep 5", 124, error_message="timed out", timed_out=True)
    assert result.failure_kind is FailureKind.OTHER
    assert not result.success


def test_shell_invocation_uses_platform_shell(monkeypatch) -> None:
    monkeypatch.setattr(sys, "platform", "linux")
    assert shell_invocation("ls") == ["sh", "-c", "ls"]
    monkeypatch.setattr(sys, "platform", "win32")
    assert shell_invocation("dir") == ["cmd", "/C", "dir"]


class FakeProcess:
    pid = 4242

    def __init__(self, returncode=0, stdout="", stderr="", hang=False):
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr
        self.hang = hang
        self.killed = False

    def communicate(self, timeout=None):
        if self.hang and timeout is not None:
            raise subprocess.TimeoutExpired("sh", timeout)
        return self.stdout, self.stderr

    def kill(self):
        self.killed = True

    def wait(self, timeout=None):
        return self.returncode


def _fake_popen(process):
    calls = []

    def popen(args, **kwargs):
        calls.append((args, kwargs))
        return process

    return popen, calls


def test_execute_captures_output(monkeypatch) -> None:
    popen, calls = _fake_popen(FakeProcess(0, "hello\n", ""))
    monkeypatch.setattr(subprocess, "Popen", popen)

    result = CommandExecutor(default_timeout=5, follow=False).execute("echo hello")

    assert result.success
    assert result.stdout == "hello\n"
    assert calls[0][1]["stdout"] == subprocess.PIPE


@pytest.mark.skipif(sys.platform == "win32", reason="process groups are POSIX only")
def test_command_gets_its_own_process_group(monkeypatch) -> None:
    popen, calls = _fake_popen(FakeProcess())
    monkeypatch.setattr(subprocess, "Popen", popen)

    CommandExecutor().execute("true")

    assert callable(calls[0][1]["preexec_fn"])


def test_zero_timeout_means_no_limit(monkeypatch) -> None:
    process = FakeProcess(hang=True)
    popen, _ = _fake_popen(process)
    monkeypatch.setattr(subprocess, "Popen", popen)

    result = CommandExecutor(default_timeout=0).execute("sleep 1")

    assert not result.timed_out
    assert not process.killed


def test_follow_streams_stdout(monkeypatch) -> None:
    popen, calls = _fake_popen(FakeProcess())
    monkeypatch.setattr(subprocess, "Popen", popen)

    CommandExecutor(follow=True).execute("ls")

    assert calls[0][1]["stdout"] is None
    assert calls[0][1]["stderr"] == subprocess.PIPE


def test_timeout_kills_the_process_group(monkeypatch) -> None:
    process = FakeProcess(stderr="partial", hang=True)
    popen, _ = _fake_popen(process)
    monkeypatch.setattr(subprocess, "Popen", popen)
    killed = []
    monkeypatch.setattr(executor_module.os, "killpg", lambda pgid, sig: killed.append(pgid), raising=False)

    result = CommandExecutor(default_timeout=1).execute("sleep 10")

    assert result.timed_out
    assert result.exit_code == 124
    assert result.stderr == "partial"
    assert "timed out" in result.error_message
    if sys.platform == "win32":
        assert process.killed
    else:
        assert killed == [process.pid]


def test_interrupt_kills_the_process_group(monkeypatch) -> None:
    process = FakeProcess()

    def interrupted(timeout=None):
        raise KeyboardInterrupt

    process.communicate = interrupted
    popen, _ = _fake_popen(process)
    monkeypatch.setattr(subprocess, "Popen", popen)
    killed = []
    monkeypatch.setattr(executor_module.os, "killpg", lambda pgid, sig: killed.append(pgid), raising=False)

    with pytest.raises(KeyboardInterrupt):
        CommandExecutor().execute("sleep 10")
    assert killed == [process.pid] or process.killed


def test_spawn_failure_raises(monkeypatch) -> None:
    def popen(args, **kwargs):
        raise FileNotFoundError(2, "No such file or directory", "sh")

    monkeypatch.setattr(subprocess, "Popen", popen)

    with pytest.raises(ProcessSpawnFailed) as info:
        CommandExecutor().execute("ls")
    assert info.value.command == "ls"


@pytest.mark.skipif(sys.platform == "win32", reason="needs a POSIX shell")
def test_real_shell_exit_code_and_stderr() -> None:
    result = CommandExecutor(default_timeout=10, follow=False).execute("echo out; echo oops >&2; exit 3")
    assert result.exit_code == 3
    assert result.stdout.strip() == "out"
    assert result.stderr.strip() == "oops"
    assert result.failure_kind is FailureKind.OTHER


@pytest.mark.skipif(sys.platform == "win32", reason="needs a POSIX shell")
def test_timeout_also_stops_background_children(tmp_path) -> None:
    marker = tmp_path / "marker"

    result = CommandExecutor(default_timeout=1, follow=False).execute(
        f"(sleep 2; touch '{marker}') & wait")
    time.sleep(2.5)

    assert result.timed_out
    assert not marker.exists()
