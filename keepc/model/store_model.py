from typing import Dict, List, Optional

from pydantic import BaseModel
from pydantic.dataclasses import dataclass


@dataclass(frozen=True)
class CommandEntry:
    """
    A saved shell command and its (possibly empty) description.
    """

    command: str
    description: str = ""


class CommandStore(BaseModel):
    """
    All saved commands, keyed by command text. This is also the persisted form:
    `{"commands": {"<command>": "<description>", ...}}`

    Iteration follows the order of the underlying mapping, i.e. the order in which
    commands were loaded or first added.
    """

    commands: Dict[str, str]

    def get(self, command: str) -> Optional[str]:
        return self.commands.get(command)

    def put(self, command: str, description: str = "") -> None:
        """
        Add a command, overwriting the description if the command already exists.
        """
        self.commands[command] = description

    def remove(self, command: str) -> bool:
        """
        Remove a command. Returns True if it was present.
        """
        return self.commands.pop(command, None) is not None

    def replace_all(self, commands: Dict[str, str]) -> None:
        self.commands = dict(commands)

    def entries(self) -> List[CommandEntry]:
        return [CommandEntry(command=cmd, description=desc) for cmd, desc in self.commands.items()]

    def __contains__(self, command: object) -> bool:
        return command in self.commands

    def __len__(self) -> int:
        return len(self.commands)


## Tests


def test_put_overwrites():
    store = CommandStore(commands={})
    store.put("ls -la", "list files")
    store.put("ls -la", "list all files")
    assert len(store) == 1
    assert store.get("ls -la") == "list all files"


def test_remove_and_entries():
    store = CommandStore(commands={"ls -la": "list files", "git status": ""})
    assert "git status" in store
    assert store.entries() == [
        CommandEntry("ls -la", "list files"),
        CommandEntry("git status", ""),
    ]
    assert store.remove("git status")
    assert not store.remove("git status")
    assert list(store.commands) == ["ls -la"]


def test_equality_ignores_order():
    a = CommandStore(commands={"a": "1", "b": "2"})
    b = CommandStore(commands={"b": "2", "a": "1"})
    assert a == b
