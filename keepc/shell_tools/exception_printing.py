from typing import Callable

from rich.markup import escape

from keepc.config.logger import get_logger
from keepc.config.text_styles import COLOR_ERROR
from keepc.errors import NONFATAL_EXCEPTIONS, ShellNonZeroExit
from keepc.shell_ui.shell_output import cprint


log = get_logger(__name__)

EXIT_ERROR = 1

EXIT_INTERRUPTED = 130


def summarize_traceback(exception: Exception) -> str:
    exception_str = str(exception)
    lines = exception_str.splitlines()
    exc_type = type(exception).__name__
    return f"{exc_type}: " + "\n".join(
        [
            line
            for line in lines
            if line.strip() and not line.lstrip().startswith("Traceback")
            and not line.lstrip().startswith("The above exception") and not line.startswith("    ")
        ]
    )


def wrap_with_exception_printing(func: Callable[..., int]) -> Callable[..., int]:
    """
    Report errors from a CLI function and turn them into an exit status.
    Self-explanatory errors get a one-line summary, anything else a full traceback.
    """

    def command(*args) -> int:
        try:
            log.info(
                "Command function call: %s(%s)",
                func.__name__,
                (", ".join(str(arg) for arg in args)),
            )
            return func(*args)
        except ShellNonZeroExit as e:
            log.error(f"[{COLOR_ERROR}]Command failed:[/{COLOR_ERROR}] %s", escape(str(e)))
            return e.exit_code
        except NONFATAL_EXCEPTIONS as e:
            log.error(f"[{COLOR_ERROR}]Error:[/{COLOR_ERROR}] %s", escape(summarize_traceback(e)))
            log.info("Error details: %s", e, exc_info=True)
            return EXIT_ERROR
        except KeyboardInterrupt:
            cprint()
            log.info("Interrupted")
            return EXIT_INTERRUPTED
        except Exception as e:
            log.error(
                f"[{COLOR_ERROR}]Unexpected error:[/{COLOR_ERROR}] %s", escape(str(e)), exc_info=True
            )
            return EXIT_ERROR

    command.__name__ = func.__name__
    command.__doc__ = func.__doc__
    command.__wrapped__ = func.__wrapped__ if hasattr(func, "__wrapped__") else func
    return command


## Tests


def test_summarize_traceback():
    from keepc.errors import StoreCorrupt

    assert summarize_traceback(StoreCorrupt("Failed to parse\n\n  bad")) == (
        "StoreCorrupt: Failed to parse\n  bad"
    )


def test_exit_codes():
    from keepc.errors import EmptyCommandText

    def ok() -> int:
        return 0

    def shell_failed() -> int:
        raise ShellNonZeroExit("exit 4", 4)

    def empty() -> int:
        raise EmptyCommandText()

    def interrupted() -> int:
        raise KeyboardInterrupt()

    def broken() -> int:
        raise KeyError("oops")

    assert wrap_with_exception_printing(ok)() == 0
    assert wrap_with_exception_printing(shell_failed)() == 4
    assert wrap_with_exception_printing(empty)() == EXIT_ERROR
    assert wrap_with_exception_printing(interrupted)() == EXIT_INTERRUPTED
    assert wrap_with_exception_printing(broken)() == EXIT_ERROR
