"""
Plain-text form of the store for editing in a text editor, one command per line:
`<command>:::<description>`
"""

from typing import Dict

from keepc.model.store_model import CommandStore

EDIT_DELIMITER = ":::"


def store_to_edit_text(store: CommandStore) -> str:
    return "".join(
        f"{command}{EDIT_DELIMITER}{description}\n"
        for command, description in store.commands.items()
    )


def parse_edit_text(text: str) -> Dict[str, str]:
    """
    Parse edited text back into commands. Each line is split on the first
    delimiter and both sides are stripped. Lines without the delimiter or with
    an empty command are dropped. A later line for the same command wins.
    """
    commands: Dict[str, str] = {}
    for line in text.splitlines():
        command, sep, description = line.partition(EDIT_DELIMITER)
        command = command.strip()
        if not sep or not command:
            continue
        commands[command] = description.strip()
    return commands


## Tests


def test_edit_text_round_trip():
    store = CommandStore(commands={"ls -la": "list files", "git status": ""})
    text = store_to_edit_text(store)
    assert text == "ls -la:::list files\ngit status:::\n"
    assert parse_edit_text(text) == store.commands


def test_parse_edit_text():
    text = "\n".join(
        [
            "  echo a:::b:::c  ",
            "no delimiter here",
            ":::orphan description",
            "",
            "du -sh *:::  disk usage  ",
            "du -sh *:::newer",
        ]
    )
    assert parse_edit_text(text) == {
        "echo a": "b:::c",
        "du -sh *": "newer",
    }
    assert parse_edit_text("") == {}
