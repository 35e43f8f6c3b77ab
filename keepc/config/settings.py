import os
import sys
from enum import Enum
from logging import DEBUG, ERROR, INFO, WARNING
from pathlib import Path
from typing import Optional

from pydantic.dataclasses import dataclass

from keepc.errors import ConfigDirUnavailable


APP_NAME = "keepc"

COMMANDS_FILE_NAME = "commands.json"

LOG_DIR_NAME = "logs"

COMMANDS_FILE_ENV = "KEEPC_COMMANDS_FILE"

LOG_LEVEL_ENV = "KEEPC_LOG_LEVEL"


def user_config_dir() -> Path:
    """
    The per-user config directory for this platform, following the usual
    conventions:
    - Linux and other POSIX: `$XDG_CONFIG_HOME` or `~/.config`
    - macOS: `~/Library/Application Support`
    - Windows: `%APPDATA%`
    """
    if sys.platform == "win32":
        appdata = os.environ.get("APPDATA")
        if not appdata:
            raise ConfigDirUnavailable("Could not determine config directory: APPDATA is not set")
        return Path(appdata)

    try:
        home = Path.home()
    except RuntimeError as e:
        raise ConfigDirUnavailable(f"Could not determine config directory: {e}") from e

    if sys.platform == "darwin":
        return home / "Library" / "Application Support"

    xdg_config_home = os.environ.get("XDG_CONFIG_HOME")
    # XDG only allows absolute paths here.
    if xdg_config_home and Path(xdg_config_home).is_absolute():
        return Path(xdg_config_home)
    return home / ".config"


def app_config_dir() -> Path:
    return user_config_dir() / APP_NAME


def commands_file_path() -> Path:
    """
    Location of the commands file. Can be overridden with `KEEPC_COMMANDS_FILE`.
    """
    override = os.environ.get(COMMANDS_FILE_ENV)
    if override:
        return Path(override).expanduser()
    return app_config_dir() / COMMANDS_FILE_NAME


def app_log_dir() -> Optional[Path]:
    """
    Log directory, or None if there is no usable config directory.
    """
    try:
        return app_config_dir() / LOG_DIR_NAME
    except ConfigDirUnavailable:
        return None


class LogLevel(Enum):
    debug = DEBUG
    info = INFO
    warning = WARNING
    error = ERROR

    @classmethod
    def parse(cls, level_str: str):
        canon_name = level_str.strip().lower()
        if canon_name == "warn":
            canon_name = "warning"
        try:
            return cls[canon_name]
        except KeyError:
            raise ValueError(
                f"Invalid log level: `{level_str}`. Valid options are: {', '.join(f'`{name}`' for name in cls.__members__)}"
            )

    def __str__(self):
        return self.name


@dataclass
class Settings:
    default_editor: str
    """The editor to use when `EDITOR` is not set."""

    console_log_level: LogLevel
    """The log level for console-based logging."""

    file_log_level: LogLevel
    """The log level for file-based logging."""


def _console_log_level_from_env() -> LogLevel:
    level_str = os.environ.get(LOG_LEVEL_ENV)
    if level_str:
        try:
            return LogLevel.parse(level_str)
        except ValueError:
            pass
    return LogLevel.warning


# Initial default settings.
_settings = Settings(
    default_editor="nano",
    console_log_level=_console_log_level_from_env(),
    file_log_level=LogLevel.info,
)


def global_settings() -> Settings:
    """
    Read access to global settings.
    """
    return _settings


## Tests


def test_log_level_parse():
    assert LogLevel.parse("WARN") == LogLevel.warning
    assert LogLevel.parse(" debug ") == LogLevel.debug
    try:
        LogLevel.parse("loud")
        assert False
    except ValueError as e:
        assert "loud" in str(e)


def test_commands_file_override():
    old = os.environ.get(COMMANDS_FILE_ENV)
    os.environ[COMMANDS_FILE_ENV] = "/tmp/keepc-test/commands.json"
    try:
        assert commands_file_path() == Path("/tmp/keepc-test/commands.json")
    finally:
        if old is None:
            del os.environ[COMMANDS_FILE_ENV]
        else:
            os.environ[COMMANDS_FILE_ENV] = old


def test_xdg_config_home():
    if sys.platform in ("win32", "darwin"):
        return
    old = os.environ.get("XDG_CONFIG_HOME")
    try:
        os.environ["XDG_CONFIG_HOME"] = "/tmp/xdg-config"
        assert user_config_dir() == Path("/tmp/xdg-config")
        assert app_config_dir() == Path("/tmp/xdg-config/keepc")

        os.environ["XDG_CONFIG_HOME"] = "relative/dir"
        assert user_config_dir() == Path.home() / ".config"
    finally:
        if old is None:
            os.environ.pop("XDG_CONFIG_HOME", None)
        else:
            os.environ["XDG_CONFIG_HOME"] = old

