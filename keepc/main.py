"""
Main entry point for the keepc command line.

Usage: `keepc <command> [args...]`, or `keepc <keywords...>` to search saved
commands when the first argument isn't a command name.
"""

import sys
from typing import List, Optional

import keepc.commands  # noqa: F401
from keepc.commands.command_env import CommandEnv
from keepc.commands.command_registry import is_command
from keepc.commands.help_commands import print_help
from keepc.commands.store_commands import print_matches
from keepc.config.logger import get_logger
from keepc.config.settings import commands_file_path
from keepc.config.setup import setup
from keepc.exec.command_exec import run_command
from keepc.file_storage.command_store import load_store
from keepc.shell_tools.exception_printing import wrap_with_exception_printing
from keepc.shell_ui.shell_output import cprint
from keepc.version import get_version_name

log = get_logger(__name__)

EXIT_USAGE = 2

HELP_ARGS = ["help", "--help", "-h"]


def search_fallback(args: List[str], env: CommandEnv) -> int:
    """
    Treat the arguments as a search pattern and print the matching commands.
    """
    pattern = " ".join(args)
    store = load_store(env.store_path)
    if print_matches(pattern, store):
        return 0

    cprint("Unrecognized command and no saved commands match: '%s'", pattern)
    return EXIT_USAGE


def default_env() -> CommandEnv:
    return CommandEnv(store_path=commands_file_path())


def option_fallback(args: List[str], env: Optional[CommandEnv] = None) -> int:
    """
    An unknown option may still be search keywords, e.g. `keepc -la`.
    """
    env = env or default_env()
    store = load_store(env.store_path)
    if print_matches(" ".join(args), store):
        return 0

    print(f"Unrecognized option: {args[0]}", file=sys.stderr)
    return EXIT_USAGE


def dispatch(args: List[str], env: Optional[CommandEnv] = None) -> int:
    env = env or default_env()
    log.info("Commands file: %s", env.store_path)

    name = args[0]
    if is_command(name):
        run_command(name, args[1:], env)
        return 0
    else:
        return search_fallback(args, env)


def main_with_args(args: List[str], env: Optional[CommandEnv] = None) -> int:
    # Do our own arg parsing since everything except these options is either
    # a command name or search keywords.
    if not args or args[0] in HELP_ARGS:
        print_help()
        return 0
    elif args == ["--version"]:
        print(get_version_name())
        return 0
    elif args[0].startswith("-"):
        return wrap_with_exception_printing(option_fallback)(args, env)

    return wrap_with_exception_printing(dispatch)(args, env)


def main():
    setup()
    sys.exit(main_with_args(sys.argv[1:]))


if __name__ == "__main__":
    main()
