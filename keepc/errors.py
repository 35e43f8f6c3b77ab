"""
Unified hierarchy of error types. These inherit from standard errors like
ValueError but are more fine-grained.
"""

from typing import Tuple, Type


class KeepcRuntimeError(ValueError):
    """Base class for keepc runtime errors."""

    pass


class SelfExplanatoryError(KeepcRuntimeError):
    """Common errors that arise from 'normal' problems that are largely self-explanatory,
    i.e., no stack trace should be necessary when reporting to the user."""

    pass


class InvalidInput(SelfExplanatoryError):
    """Raised when the wrong kind of input is given to a command."""

    pass


class EmptyCommandText(InvalidInput):
    """Raised when a blank command is submitted for saving."""

    def __init__(self):
        super().__init__("Command cannot be empty")


class SetupError(SelfExplanatoryError):
    """Raised when something in the environment isn't set up right."""

    pass


class ConfigDirUnavailable(SetupError):
    """Raised when the per-user config directory can't be determined."""

    pass


class StoreError(SelfExplanatoryError):
    """Raised when the commands file can't be read or written."""

    pass


class StoreCorrupt(StoreError):
    """Raised when the commands file exists but can't be parsed."""

    pass


class StoreWriteFailed(StoreError):
    """Raised when the commands file or its directory can't be written."""

    pass


class ExternalProcessError(SelfExplanatoryError):
    """Raised when the editor or shell can't be run or fails."""

    pass


class EditorLaunchFailed(ExternalProcessError):
    pass


class EditorNonZeroExit(ExternalProcessError):
    def __init__(self, editor: str, exit_code: int):
        super().__init__(f"Editor `{editor}` exited with non-zero status: {exit_code}")
        self.exit_code = exit_code


class ShellLaunchFailed(ExternalProcessError):
    pass


class ShellNonZeroExit(ExternalProcessError):
    """Raised when an executed command exits with a non-zero status."""

    def __init__(self, command: str, exit_code: int):
        super().__init__(f"Command exited with status {exit_code}: {command}")
        self.command = command
        self.exit_code = exit_code


def _nonfatal_exceptions() -> Tuple[Type[Exception], ...]:
    exceptions = [
        SelfExplanatoryError,
        FileNotFoundError,
        IOError,
    ]
    return tuple(exceptions)


NONFATAL_EXCEPTIONS = _nonfatal_exceptions()
"""Exceptions that are not fatal and usually don't merit a full stack trace."""


## Tests


def test_nonfatal_exceptions():
    assert isinstance(StoreCorrupt("bad file"), NONFATAL_EXCEPTIONS)
    assert isinstance(ShellNonZeroExit("false", 1), NONFATAL_EXCEPTIONS)
    assert isinstance(ConfigDirUnavailable("no home"), NONFATAL_EXCEPTIONS)
    assert not isinstance(KeyError("x"), NONFATAL_EXCEPTIONS)


def test_error_messages():
    e = ShellNonZeroExit("exit 3", 3)
    assert e.exit_code == 3
    assert "exit 3" in str(e)
    assert str(EmptyCommandText()) == "Command cannot be empty"
    assert isinstance(EmptyCommandText(), InvalidInput)
    assert isinstance(ConfigDirUnavailable("x"), SetupError)
