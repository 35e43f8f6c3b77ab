from dataclasses import dataclass, field
from pathlib import Path

from pydantic.dataclasses import dataclass as pydantic_dataclass

from keepc.form_input.prompt_input import ConsolePrompter, Prompter
from keepc.shell_tools.native_tools import ProcessRunner, SubprocessRunner


@dataclass
class CommandEnv:
    """
    Everything a command needs beyond the store itself: where the store lives,
    how to ask the user things, and how to run programs.
    """

    store_path: Path
    prompter: Prompter = field(default_factory=ConsolePrompter)
    runner: ProcessRunner = field(default_factory=SubprocessRunner)


@pydantic_dataclass(frozen=True)
class CommandResult:
    """
    What a command did. If `store_changed` is set, the store is saved afterwards.
    """

    store_changed: bool = False
