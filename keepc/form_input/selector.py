"""
Interactive choice among several matching commands.
"""

from enum import Enum
from typing import List, Optional

from pydantic.dataclasses import dataclass

from keepc.config.logger import get_logger
from keepc.form_input.prompt_input import Prompter, ScriptedPrompter
from keepc.model.store_model import CommandStore
from keepc.shell_ui.shell_output import cprint, print_command_entry

log = get_logger(__name__)


class SelectionStatus(Enum):
    selected = "selected"
    nothing_to_select = "nothing_to_select"
    no_selection = "no_selection"


@dataclass(frozen=True)
class Selection:
    status: SelectionStatus
    command: Optional[str] = None

    @property
    def is_selected(self) -> bool:
        return self.status == SelectionStatus.selected


def parse_choice(line: str, count: int) -> Optional[int]:
    """
    Parse a 1-based choice. Returns the 0-based index, or None if the input isn't
    a number in range.
    """
    try:
        choice = int(line.strip())
    except ValueError:
        return None
    if 1 <= choice <= count:
        return choice - 1
    return None


def select(
    matches: List[str], store: CommandStore, prompter: Prompter, action: str = "select"
) -> Selection:
    """
    Show the numbered matches and read the user's choice. Invalid input is not an
    error: it just means nothing was selected.
    """
    if not matches:
        return Selection(SelectionStatus.nothing_to_select)

    cprint("Found %s matching commands:", len(matches))
    for i, command in enumerate(matches, start=1):
        print_command_entry(command, store.get(command) or "", index=i)

    line = prompter.read_line(f"Enter a number to {action}: ")
    index = parse_choice(line, len(matches))
    if index is None:
        log.info("No valid selection from input: %r", line)
        return Selection(SelectionStatus.no_selection)

    return Selection(SelectionStatus.selected, matches[index])


## Tests


def test_parse_choice():
    assert parse_choice("1", 2) == 0
    assert parse_choice(" 2\n", 2) == 1
    assert parse_choice("0", 2) is None
    assert parse_choice("-1", 2) is None
    assert parse_choice("3", 2) is None
    assert parse_choice("abc", 2) is None
    assert parse_choice("", 2) is None


def test_select_nothing():
    prompter = ScriptedPrompter(["1"])
    selection = select([], CommandStore(commands={}), prompter)
    assert selection.status == SelectionStatus.nothing_to_select
    assert prompter.prompts == []


def test_select_valid_and_invalid():
    from keepc.config.logger import record_console

    store = CommandStore(commands={"ls -la": "list files", "git status": "repo state"})
    matches = ["ls -la", "git status"]

    with record_console() as console:
        selection = select(matches, store, ScriptedPrompter(["2"]), action="delete")
    assert selection.is_selected
    assert selection.command == "git status"
    output = console.export_text()
    assert "Found 2 matching commands:" in output
    assert "[1] ls -la: list files" in output
    assert "[2] git status: repo state" in output

    for bad_input in ["0", "abc", "3", "-2", ""]:
        prompter = ScriptedPrompter([bad_input])
        with record_console():
            selection = select(matches, store, prompter, action="delete")
        assert selection.status == SelectionStatus.no_selection
        assert selection.command is None
        assert prompter.prompts == ["Enter a number to delete: "]
