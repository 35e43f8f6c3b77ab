import logging
import os
import threading
from collections.abc import Generator
from contextlib import contextmanager
from dataclasses import dataclass
from functools import cache
from logging import Formatter
from pathlib import Path
from typing import IO, Optional

import rich
from rich import reconfigure
from rich._null_file import NULL_FILE
from rich.console import Console
from rich.logging import RichHandler
from rich.theme import Theme

from keepc.config.settings import global_settings
from keepc.config.text_styles import EMOJI_ERROR, EMOJI_WARN, KeepcHighlighter, RICH_STYLES

LOG_FILE_NAME = "keepc.log"

_log_dir: Optional[Path] = None

_log_lock = threading.RLock()


@dataclass
class TlContext(threading.local):
    console: Optional[Console] = None


_tl_context = TlContext()
"""
Thread-local context override for Rich console.
"""


@cache
def get_highlighter():
    return KeepcHighlighter()


@cache
def get_theme():
    return Theme(RICH_STYLES)


reconfigure(theme=get_theme(), highlighter=get_highlighter())


def get_console() -> Console:
    """
    Return the Rich global console, unless it is overridden by a
    thread-local console.
    """
    return _tl_context.console or rich.get_console()


def new_console(file: Optional[IO[str]], record: bool) -> Console:
    """
    Create a new console with the our theme and highlighter.
    Use `get_console()` for the global console.
    """
    return Console(theme=get_theme(), highlighter=get_highlighter(), file=file, record=record)


@contextmanager
def record_console() -> Generator[Console, None, None]:
    """
    Context manager to temporarily override the global console with a thread-local
    console that records output.
    """
    old_console = _tl_context.console
    console = new_console(file=NULL_FILE, record=True)
    _tl_context.console = console

    try:
        yield console
    finally:
        _tl_context.console = old_console


_file_handler: Optional[logging.FileHandler] = None
_console_handler: Optional[RichHandler] = None


def logging_setup():
    """
    Set up or reset logging setup. Call at initial run and again if log directory changes.
    Replaces all previous handlers. Logs go to the console and, if we have a log
    directory, to a log file.
    """
    global _file_handler
    _file_handler = None
    if _log_dir:
        try:
            os.makedirs(_log_dir, exist_ok=True)
            _file_handler = logging.FileHandler(_log_dir / LOG_FILE_NAME, encoding="utf-8")
            _file_handler.setLevel(global_settings().file_log_level.value)
            _file_handler.setFormatter(
                Formatter("%(asctime)s %(levelname).1s %(name)s - %(message)s")
            )
        except OSError:
            # Console logging only.
            _file_handler = None

    global _console_handler
    _console_handler = RichHandler(
        # For now we use the fixed global console for logging.
        console=rich.get_console(),
        level=global_settings().console_log_level.value,
        show_time=False,
        show_path=False,
        show_level=False,
        highlighter=get_highlighter(),
        markup=True,
    )
    _console_handler.setLevel(global_settings().console_log_level.value)
    _console_handler.setFormatter(Formatter("%(message)s"))

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    # Remove any existing handlers.
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    root_logger.addHandler(_console_handler)
    if _file_handler:
        root_logger.addHandler(_file_handler)


def prefix(line, emoji: str = "", warn_emoji: str = ""):
    emojis = f"{warn_emoji}{emoji}".strip()
    return " ".join(filter(None, [emojis, line]))


def prefix_args(args, emoji: str = "", warn_emoji: str = ""):
    if len(args) > 0:
        args = (prefix(args[0], emoji, warn_emoji),) + args[1:]
    return args


class CustomLogger:
    """
    Custom logger to be clearer about user messages.
    """

    def __init__(self, name: str):
        self.logger = logging.getLogger(name)

    def debug(self, *args, **kwargs):
        self.logger.debug(*prefix_args(args), **kwargs)

    def info(self, *args, **kwargs):
        self.logger.info(*prefix_args(args), **kwargs)

    def warning(self, *args, **kwargs):
        self.logger.warning(*prefix_args(args, warn_emoji=EMOJI_WARN), **kwargs)

    def error(self, *args, **kwargs):
        self.logger.error(*prefix_args(args, warn_emoji=EMOJI_ERROR), **kwargs)

    # Fallback for other attributes/methods.
    def __getattr__(self, attr):
        return getattr(self.logger, attr)


def get_logger(name: str):
    return CustomLogger(name)


def reset_logging(log_dir: Optional[Path] = None):
    """
    Reset the log directory, if it has changed, and set up logging again.
    """
    global _log_lock
    with _log_lock:
        global _log_dir
        if log_dir and log_dir != _log_dir:
            _log_dir = log_dir

        logging_setup()


## Tests


def test_prefix_args():
    assert prefix_args(("Saved %s", "x")) == ("Saved %s", "x")
    assert prefix_args(("Oops",), warn_emoji=EMOJI_WARN) == (f"{EMOJI_WARN} Oops",)
    assert prefix_args(()) == ()


def test_record_console():
    with record_console() as console:
        get_console().print("hello")
        assert get_console() is console
    assert "hello" in console.export_text()
    assert get_console() is not console
