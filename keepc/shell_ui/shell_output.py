"""
Output to the shell UI. These are for user interaction, not logging.
"""

from typing import Optional

import rich.style
from rich.console import Group, OverflowMethod, RenderableType
from rich.text import Text

from keepc.config.logger import get_console
from keepc.config.text_styles import (
    COLOR_COMMAND,
    COLOR_DESCRIPTION,
    COLOR_HINT,
    COLOR_INDEX,
    COLOR_KEY,
    COLOR_STATUS,
    COMMAND_PREFIX,
)


null_style = rich.style.Style.null()


def rich_print(
    *args: RenderableType,
    width: Optional[int] = None,
    soft_wrap: Optional[bool] = None,
    overflow: Optional[OverflowMethod] = "fold",
    **kwargs,
):
    """
    Print to the Rich console, either the global console or a thread-local
    override, if one is active.
    """
    console = get_console()
    if len(args) == 0:
        renderable = ""
    elif len(args) == 1:
        renderable = args[0]
    else:
        renderable = Group(*args)

    console.print(renderable, width=width, soft_wrap=soft_wrap, overflow=overflow, **kwargs)


def cprint(
    message: RenderableType = "",
    *args,
    color=None,
    extra_indent: str = "",
    end="\n",
    width: Optional[int] = None,
):
    """
    Main way to print to the shell. Wraps `rich_print` with %-style formatting
    for string messages. Strings are printed as plain text, not markup.
    """
    if isinstance(message, str):
        text = message % args if args else message
        rich_print(Text(extra_indent + text, color or null_style), end=end, width=width)
    else:
        rich_print(message, end=end, width=width)


def format_command_entry(command: str, description: str, index: Optional[int] = None) -> Text:
    """
    A saved command for display, as `$ command: description` or, when listed for
    selection, as `[index] command: description`.
    """
    if index is None:
        head = Text(COMMAND_PREFIX, style=COLOR_HINT)
    else:
        head = Text(f"[{index}] ", style=COLOR_INDEX)
    parts = [head, Text(command, style=COLOR_COMMAND)]
    if description:
        parts.append(Text(f": {description}", style=COLOR_DESCRIPTION))
    return Text.assemble(*parts)


def format_name_and_description(name: str | Text, doc: str | Text) -> Text:
    if isinstance(name, str):
        name = Text(name, style=COLOR_KEY)

    return Text.assemble(name, (": ", COLOR_HINT), doc)


def print_command_entry(command: str, description: str, index: Optional[int] = None):
    cprint(format_command_entry(command, description, index))


def print_status(message: str, *args):
    cprint(message, *args, color=COLOR_STATUS)


## Tests


def test_format_command_entry():
    assert format_command_entry("ls -la", "list files").plain == "$ ls -la: list files"
    assert format_command_entry("ls -la", "").plain == "$ ls -la"
    assert format_command_entry("ls -la", "list files", index=2).plain == "[2] ls -la: list files"


def test_cprint_is_not_markup():
    from keepc.config.logger import record_console

    with record_console() as console:
        cprint("echo [bold]hi[/bold] %s", "there")
    assert "echo [bold]hi[/bold] there" in console.export_text()
