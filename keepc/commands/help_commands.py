from textwrap import dedent

from rich.text import Text

from keepc.commands.command_registry import all_commands
from keepc.config.settings import APP_NAME
from keepc.config.text_styles import COLOR_HEADING, COLOR_HINT, COLOR_KEY
from keepc.shell_ui.shell_output import cprint, format_name_and_description

USAGE = f"""
Usage: {APP_NAME} <command> [args...]
       {APP_NAME} <keywords...>   (search saved commands)
"""


def command_summary(func) -> str:
    """
    First paragraph of a command's docstring, on one line.
    """
    doc = dedent(func.__doc__ or "").strip()
    return " ".join(doc.split("\n\n")[0].split())


def print_help():
    cprint(Text(f"{APP_NAME}: keep and manage useful commands", style=COLOR_HEADING))
    cprint(dedent(USAGE).rstrip())
    cprint()
    cprint(Text("Commands:", style=COLOR_HEADING))
    for name, func in all_commands().items():
        cprint(format_name_and_description(Text(f"  {name}", style=COLOR_KEY), command_summary(func)))
    cprint()
    cprint("Options: --help, --version", color=COLOR_HINT)


## Tests


def test_print_help():
    import keepc.commands  # noqa: F401
    from keepc.config.logger import record_console

    with record_console() as console:
        print_help()
    output = console.export_text()
    for name in ["new", "list", "grep", "remove", "edit", "run"]:
        assert f"  {name}: " in output
    assert "  add: " not in output
    assert "Execute a saved command" in output
