import tomllib
from pathlib import Path

import pytest

from eval_bridge import ConfigurationError, EvalSettings
from eval_bridge import settings as settings_module


def test_defaults_come_from_bundled_toml() -> None:
    settings = EvalSettings()
    assert settings.timeout_seconds == 30
    assert settings.auto_execute is False
    assert settings.log_level == "WARNING"
    assert settings.python_executable == ""


def test_from_file_reads_eval_table(tmp_path: Path) -> None:
    config = tmp_path / "eval.toml"
    config.write_text(
        (
            "[eval]\n"
            "python_executable = \"/usr/bin/python3\"\n"
            "timeout_seconds = 5\n"
            "auto_execute = true\n"
            "log_level = \"debug\"\n"
        ),
        encoding="utf-8",
    )

    settings = EvalSettings.from_file(str(config))

    assert settings.python_executable == "/usr/bin/python3"
    assert settings.timeout_seconds == 5
    assert settings.auto_execute is True
    assert settings.log_level == "DEBUG"
    assert settings.config_path == str(config)


def test_from_file_accepts_top_level_keys_and_fills_defaults(tmp_path: Path) -> None:
    config = tmp_path / "eval.toml"
    config.write_text("timeout_seconds = 12\n", encoding="utf-8")

    settings = EvalSettings.from_file(str(config))

    assert settings.timeout_seconds == 12
    assert settings.auto_execute is False


def test_invalid_values_are_rejected(tmp_path: Path) -> None:
    with pytest.raises(ConfigurationError, match="timeout_seconds"):
        EvalSettings(timeout_seconds=0)
    with pytest.raises(ConfigurationError, match="log_level"):
        EvalSettings(log_level="LOUD")

    config = tmp_path / "eval.toml"
    config.write_text("[eval]\nauto_execute = \"yes\"\n", encoding="utf-8")
    with pytest.raises(ConfigurationError, match="auto_execute"):
        EvalSettings.from_file(str(config))


def test_missing_file_is_an_error(tmp_path: Path) -> None:
    with pytest.raises(ConfigurationError, match="not found"):
        EvalSettings.from_file(str(tmp_path / "missing.toml"))


def test_defaults_have_a_single_source(tmp_path: Path) -> None:
    bundled = tomllib.loads(
        (Path(settings_module.__file__).with_name("default_settings.toml")).read_text(encoding="utf-8")
    )["eval"]
    settings = EvalSettings()

    assert settings.python_executable == bundled["python_executable"]
    assert settings.timeout_seconds == bundled["timeout_seconds"]
    assert settings.auto_execute == bundled["auto_execute"]
    assert settings.log_level == bundled["log_level"]
    assert settings_module._read_settings_toml(tmp_path / "missing.toml") == {}
