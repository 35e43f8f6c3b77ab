from typing import Any, Callable, Dict, Iterable, Optional

from keepc.config.logger import get_logger
from keepc.errors import InvalidInput

log = get_logger(__name__)


CommandFunction = Callable[..., Any]

_commands: Dict[str, CommandFunction] = {}

_aliases: Dict[str, str] = {}


def keepc_command(name: Optional[str] = None, aliases: Iterable[str] = ()):
    """
    Register a command function under a name (the function name by default) and
    any aliases. Aliases work like the name but aren't shown in help.
    """

    def decorator(func: CommandFunction) -> CommandFunction:
        command_name = name or func.__name__
        _commands[command_name] = func
        for alias in aliases:
            _aliases[alias] = command_name
        return func

    return decorator


def all_commands() -> Dict[str, CommandFunction]:
    """
    All commands by primary name, in registration order.
    """
    return dict(_commands)


def is_command(name: str) -> bool:
    return name in _commands or name in _aliases


def look_up_command(name: str) -> CommandFunction:
    cmd = _commands.get(_aliases.get(name, name))
    if not cmd:
        raise InvalidInput(f"Command `{name}` not found")
    return cmd
