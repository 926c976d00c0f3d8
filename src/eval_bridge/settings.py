from __future__ import annotations

import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .errors import ConfigurationError

_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def _default_settings_path() -> Path:
    """Return bundled default settings TOML path.

    Example:
        ```python
        path = _default_settings_path()
        ```
    """
    return Path(__file__).with_name("default_settings.toml")


def _read_settings_toml(path: Path) -> dict[str, Any]:
    """Read settings TOML and return the `[eval]` table (or the top level).

    Example:
        ```python
        raw = _read_settings_toml(Path("/tmp/eval.toml"))
        ```
    """
    if not path.exists():
        return {}
    try:
        raw = tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        raise ConfigurationError(f"Invalid settings file {path}: {exc}") from exc
    settings_obj = raw.get("eval", raw)
    if not isinstance(settings_obj, dict):
        raise ConfigurationError("Settings config must be a TOML table")
    return settings_obj


def _as_bool(value: Any, field_name: str) -> bool:
    """Validate a boolean settings field.

    Example:
        ```python
        enabled = _as_bool(True, "auto_execute")
        ```
    """
    if not isinstance(value, bool):
        raise ConfigurationError(f"'{field_name}' must be true or false")
    return value


_DEFAULT_SETTINGS_RAW = _read_settings_toml(_default_settings_path())
DEFAULT_PYTHON_EXECUTABLE = str(_DEFAULT_SETTINGS_RAW.get("python_executable", ""))
DEFAULT_TIMEOUT_SECONDS = int(_DEFAULT_SETTINGS_RAW.get("timeout_seconds", 30))
DEFAULT_AUTO_EXECUTE = _as_bool(_DEFAULT_SETTINGS_RAW.get("auto_execute", False), "auto_execute")
DEFAULT_LOG_LEVEL = str(_DEFAULT_SETTINGS_RAW.get("log_level", "WARNING"))


@dataclass(slots=True)
class EvalSettings:
    """Runtime settings for evaluation requests.

    Example:
        ```python
        settings = EvalSettings(timeout_seconds=10, auto_execute=True)
        ```
    """

    python_executable: str = DEFAULT_PYTHON_EXECUTABLE
    timeout_seconds: int = DEFAULT_TIMEOUT_SECONDS
    auto_execute: bool = DEFAULT_AUTO_EXECUTE
    log_level: str = DEFAULT_LOG_LEVEL
    config_path: str | None = None

    def __post_init__(self) -> None:
        """Validate fields after dataclass initialization.

        Example:
            ```python
            EvalSettings(timeout_seconds=5)
            ```
        """
        if isinstance(self.timeout_seconds, bool) or not isinstance(self.timeout_seconds, int):
            raise ConfigurationError("'timeout_seconds' must be an integer")
        if self.timeout_seconds < 1:
            raise ConfigurationError("'timeout_seconds' must be >= 1")
        self.log_level = str(self.log_level).upper()
        if self.log_level not in _LOG_LEVELS:
            raise ConfigurationError(
                f"'log_level' must be one of {', '.join(sorted(_LOG_LEVELS))}"
            )

    @classmethod
    def from_file(cls, config_path: str) -> "EvalSettings":
        """Create settings from a TOML file, filling gaps with bundled defaults.

        Example:
            ```python
            settings = EvalSettings.from_file("/tmp/eval.toml")
            ```
        """
        path = Path(config_path)
        if not path.exists():
            raise ConfigurationError(f"Settings file not found: {config_path}")
        raw = _read_settings_toml(path)
        try:
            timeout_seconds = int(raw.get("timeout_seconds", DEFAULT_TIMEOUT_SECONDS))
        except (TypeError, ValueError) as exc:
            raise ConfigurationError("'timeout_seconds' must be an integer") from exc
        return cls(
            python_executable=str(raw.get("python_executable", DEFAULT_PYTHON_EXECUTABLE)),
            timeout_seconds=timeout_seconds,
            auto_execute=_as_bool(raw.get("auto_execute", DEFAULT_AUTO_EXECUTE), "auto_execute"),
            log_level=str(raw.get("log_level", DEFAULT_LOG_LEVEL)),
            config_path=config_path,
        )
