from typing import List

from keepc.model.store_model import CommandStore


def pattern_keywords(pattern: str) -> List[str]:
    """
    Keywords of a search pattern: whitespace-separated, case-folded.
    """
    return [keyword.casefold() for keyword in pattern.split()]


def entry_matches(keywords: List[str], command: str, description: str) -> bool:
    """
    Every keyword must appear in either the command or the description.
    Keywords must already be case-folded.
    """
    command = command.casefold()
    description = description.casefold()
    return all(keyword in command or keyword in description for keyword in keywords)


def match(pattern: str, store: CommandStore) -> List[str]:
    """
    Commands matching all keywords in `pattern`, in store order. A pattern with
    no keywords matches nothing.
    """
    keywords = pattern_keywords(pattern)
    if not keywords:
        return []

    return [
        command
        for command, description in store.commands.items()
        if entry_matches(keywords, command, description)
    ]


## Tests


def _test_store() -> CommandStore:
    return CommandStore(
        commands={
            "ls -la": "list files",
            "git status": "repo state",
            "docker ps -a": "List ALL containers",
        }
    )


def test_single_keyword():
    store = _test_store()
    assert match("git", store) == ["git status"]
    assert match("status", store) == ["git status"]
    assert match("repo", store) == ["git status"]


def test_case_insensitive():
    store = _test_store()
    assert sorted(match("LIST", store)) == ["docker ps -a", "ls -la"]
    assert match("all", store) == ["docker ps -a"]


def test_all_keywords_required():
    store = _test_store()
    # "list" matches a description, "-a" matches a command.
    assert sorted(match("list -a", store)) == ["docker ps -a", "ls -la"]
    assert match("list containers", store) == ["docker ps -a"]
    assert match("git files", store) == []


def test_keyword_split_across_fields():
    store = CommandStore(commands={"git log --oneline": "compact history"})
    assert match("oneline history", store) == ["git log --oneline"]
    assert match("  ONELINE\thistory  ", store) == ["git log --oneline"]


def test_empty_pattern():
    store = _test_store()
    assert match("", store) == []
    assert match("   ", store) == []
    assert match("git", CommandStore(commands={})) == []


def test_match_property():
    store = _test_store()
    for pattern in ["l", "s a", "ps", "state git", "x", "-"]:
        keywords = pattern.lower().split()
        expected = {
            cmd
            for cmd, desc in store.commands.items()
            if all(k in cmd.lower() or k in desc.lower() for k in keywords)
        }
        assert set(match(pattern, store)) == expected, pattern
