from askshell.commands.detection import (
    extract_command_text, is_likely_command, parse_suggested_command, strip_code_fence
)


def test_agent_command_block_is_extracted() -> None:
    response = "Here you go:\n```agent_command\ndu -sh ~/Downloads\n```\nThat shows the size."
    assert parse_suggested_command(response) == "du -sh ~/Downloads"
    assert extract_command_text(response) == "du -sh ~/Downloads"


def test_missing_agent_command_block() -> None:
    assert parse_suggested_command("just text") is None


def test_single_fenced_block_is_unwrapped() -> None:
    assert strip_code_fence("```bash\nls -la\n```") == "ls -la"
    assert strip_code_fence("```\npwd\n```") == "pwd"


def test_plain_text_is_stripped_only() -> None:
    assert extract_command_text("  git status \n") == "git status"


def test_command_like_text() -> None:
    assert is_likely_command("ls -la")
    assert is_likely_command("./build.sh --release")


def test_prose_is_not_a_command() -> None:
    assert not is_likely_command("The capital of France is Paris.")
    assert not is_likely_command("")


def test_overlong_text_is_not_a_command() -> None:
    assert not is_likely_command("echo " + "x" * 600)
