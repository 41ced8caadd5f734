import pytest
import yaml

from askshell.config.manager import ConfigManager, create_config_manager
from askshell.config.policy import BehaviorPolicy
from askshell.config.templates import CONFIG_TEMPLATE
from askshell.constants import DEFAULT_TIMEOUT_SECONDS
from askshell.errors import ConfigError


def _write_config(tmp_path, text):
    (tmp_path / "config.yaml").write_text(text)
    return ConfigManager(tmp_path)


def test_template_is_written_on_first_run(tmp_path) -> None:
    config_dir = tmp_path / "askshell"
    manager = create_config_manager(config_dir)

    assert (config_dir / "config.yaml").read_text() == CONFIG_TEMPLATE
    assert manager.get("timeout_seconds") == DEFAULT_TIMEOUT_SECONDS
    assert manager.get("confirm_destructive") is True


def test_template_parses_to_the_defaults() -> None:
    data = yaml.safe_load(CONFIG_TEMPLATE)
    assert data["auto_execute"] is False
    assert data["timeout_seconds"] == DEFAULT_TIMEOUT_SECONDS


def test_values_are_loaded(tmp_path) -> None:
    manager = _write_config(tmp_path, "auto_execute: true\ntimeout_seconds: 5\n")
    manager.initialize()

    policy = manager.behavior_policy()
    assert policy.auto_execute is True
    assert policy.timeout_seconds == 5
    assert policy.confirm_destructive is True


def test_empty_file_uses_defaults(tmp_path) -> None:
    manager = _write_config(tmp_path, "")
    manager.initialize()
    assert manager.behavior_policy() == BehaviorPolicy()


def test_invalid_boolean_falls_back_to_default(tmp_path) -> None:
    manager = _write_config(tmp_path, "confirm_destructive: maybe\n")
    manager.initialize()
    assert manager.get("confirm_destructive") is True


@pytest.mark.parametrize("text", [
    "timeout_seconds: -1\n",
    "timeout_seconds: soon\n",
    "stderr_limit: true\n",
    "flatten_max_line_length: 0\n",
])
def test_invalid_integer_is_an_error(tmp_path, text) -> None:
    manager = _write_config(tmp_path, text)
    with pytest.raises(ConfigError):
        manager.initialize()


def test_unparseable_yaml_is_an_error(tmp_path) -> None:
    manager = _write_config(tmp_path, "auto_execute: [unclosed\n")
    with pytest.raises(ConfigError):
        manager.initialize()


def test_non_mapping_is_an_error(tmp_path) -> None:
    manager = _write_config(tmp_path, "- just\n- a list\n")
    with pytest.raises(ConfigError):
        manager.initialize()


def test_create_config_manager_exits_on_error(tmp_path) -> None:
    (tmp_path / "config.yaml").write_text("timeout_seconds: -3\n")
    with pytest.raises(SystemExit) as info:
        create_config_manager(tmp_path)
    assert info.value.code == 1


def test_overrides_replace_configured_values(tmp_path) -> None:
    manager = _write_config(tmp_path, "timeout_seconds: 5\nfollow_output: true\n")
    manager.initialize()

    policy = manager.behavior_policy(timeout_seconds=60, follow_output=False)
    assert policy.timeout_seconds == 60
    assert policy.follow_output is False
    assert manager.behavior_policy(timeout_seconds=None).timeout_seconds == 5


def test_extra_patterns(tmp_path) -> None:
    manager = _write_config(tmp_path, (
        "extra_destructive_patterns:\n"
        "  '\\bterraform\\s+destroy\\b': Tears down infrastructure\n"
        "extra_safe_patterns:\n"
        "  - '^make\\s+test\\b'\n"
    ))
    manager.initialize()

    assert manager.extra_destructive_patterns == {r"\bterraform\s+destroy\b": "Tears down infrastructure"}
    assert manager.extra_safe_patterns == [r"^make\s+test\b"]


def test_reload_picks_up_changes(tmp_path) -> None:
    manager = _write_config(tmp_path, "timeout_seconds: 5\n")
    manager.initialize()
    (tmp_path / "config.yaml").write_text("timeout_seconds: 9\n")
    manager.reload()
    assert manager.get("timeout_seconds") == 9
