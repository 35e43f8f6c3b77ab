"""
Platform-specific tools: running the user's editor and shell.
"""

import os
import shlex
import subprocess
import sys
from enum import Enum
from functools import cache
from typing import Callable, List, Optional, Protocol, Sequence, Tuple

from keepc.config.logger import get_logger

log = get_logger(__name__)


class OSPlatform(Enum):
    macos = "macos"
    linux = "linux"
    windows = "windows"
    unknown = "unknown"


@cache
def detect_platform() -> OSPlatform:
    if sys.platform == "darwin":
        return OSPlatform.macos
    elif sys.platform.startswith("linux"):
        return OSPlatform.linux
    elif sys.platform == "win32":
        return OSPlatform.windows
    else:
        return OSPlatform.unknown


class ProcessRunner(Protocol):
    """
    Runs a program with the given arguments, inheriting stdin, stdout, and stderr,
    and waits for it to finish. Returns the exit status. Raises OSError if the
    program can't be started.
    """

    def run(self, program: str, args: Sequence[str]) -> int: ...


def exit_status(returncode: int) -> int:
    """
    Exit status as a shell reports it. A child killed by signal N has a
    negative return code and is reported as 128 + N.
    """
    return 128 - returncode if returncode < 0 else returncode


class SubprocessRunner:
    def run(self, program: str, args: Sequence[str]) -> int:
        log.info("Running: %s", shlex.join([program, *args]))
        completed = subprocess.run([program, *args])
        status = exit_status(completed.returncode)
        log.info("Exit status %s: %s", status, program)
        return status


class RecordingRunner:
    """
    Records calls instead of running anything. `on_run` can simulate the program,
    e.g. an editor changing a file. Returns `exit_code`, or raises `error` if set.
    """

    def __init__(
        self,
        exit_code: int = 0,
        on_run: Optional[Callable[[str, List[str]], None]] = None,
        error: Optional[OSError] = None,
    ):
        self.exit_code = exit_code
        self.on_run = on_run
        self.error = error
        self.calls: List[Tuple[str, List[str]]] = []

    def run(self, program: str, args: Sequence[str]) -> int:
        self.calls.append((program, list(args)))
        if self.error:
            raise self.error
        if self.on_run:
            self.on_run(program, list(args))
        return self.exit_code


def shell_invocation(command: str) -> Tuple[str, List[str]]:
    """
    The system shell and arguments to run a command string.
    """
    if detect_platform() == OSPlatform.windows:
        return "cmd", ["/C", command]
    else:
        return "sh", ["-c", command]


def editor_invocation(filename: str) -> Tuple[str, List[str]]:
    """
    The user's preferred editor, from `EDITOR` or the default. The value may
    include arguments, e.g. `code --wait`.
    """
    from keepc.config.settings import global_settings

    editor = os.getenv("EDITOR") or global_settings().default_editor
    editor_words = shlex.split(editor, posix=detect_platform() != OSPlatform.windows)
    if not editor_words:
        editor_words = [global_settings().default_editor]
    return editor_words[0], editor_words[1:] + [filename]


## Tests


def test_shell_invocation():
    program, args = shell_invocation("echo hi && ls")
    if detect_platform() == OSPlatform.windows:
        assert (program, args) == ("cmd", ["/C", "echo hi && ls"])
    else:
        assert (program, args) == ("sh", ["-c", "echo hi && ls"])


def test_editor_invocation():
    old = os.environ.get("EDITOR")
    try:
        os.environ["EDITOR"] = "code --wait"
        assert editor_invocation("/tmp/x.txt") == ("code", ["--wait", "/tmp/x.txt"])

        del os.environ["EDITOR"]
        assert editor_invocation("/tmp/x.txt") == ("nano", ["/tmp/x.txt"])
    finally:
        if old is None:
            os.environ.pop("EDITOR", None)
        else:
            os.environ["EDITOR"] = old


def test_recording_runner():
    runner = RecordingRunner(exit_code=3)
    assert runner.run("sh", ["-c", "exit 3"]) == 3
    assert runner.calls == [("sh", ["-c", "exit 3"])]

    failing = RecordingRunner(error=FileNotFoundError("no such program"))
    try:
        failing.run("nope", [])
        assert False
    except OSError:
        pass


def test_exit_status():
    assert exit_status(0) == 0
    assert exit_status(3) == 3
    assert exit_status(-9) == 137
    assert exit_status(-15) == 143


def test_subprocess_runner_signal_exit():
    if detect_platform() == OSPlatform.windows:
        return
    assert SubprocessRunner().run("sh", ["-c", "exit 4"]) == 4
    assert SubprocessRunner().run("sh", ["-c", "kill -9 $$"]) == 137
