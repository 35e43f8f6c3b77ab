"""
Reading and writing the commands file. The whole file is read and rewritten on
every change. Writes are atomic but there is no locking.
"""

import json
import os
import tempfile
from pathlib import Path

from pydantic import ValidationError
from strif import atomic_output_file

from keepc.config.logger import get_logger
from keepc.errors import StoreCorrupt, StoreWriteFailed
from keepc.model.store_model import CommandStore

log = get_logger(__name__)


def load_store(path: str | Path) -> CommandStore:
    """
    Load the commands file. A missing file is an empty store.
    """
    path = Path(path)
    if not path.exists():
        log.info("No commands file yet, starting empty: %s", path)
        return CommandStore(commands={})

    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise StoreCorrupt(f"Failed to read commands file: {path}: {e}") from e

    try:
        store = CommandStore.model_validate(json.loads(content))
    except (json.JSONDecodeError, ValidationError) as e:
        raise StoreCorrupt(f"Failed to parse commands file: {path}: {e}") from e

    log.info("Loaded %s commands from %s", len(store), path)
    return store


def store_to_json(store: CommandStore) -> str:
    return json.dumps(store.model_dump(), indent=2, ensure_ascii=False) + "\n"


def save_store(store: CommandStore, path: str | Path) -> None:
    """
    Save the full store, creating parent directories as needed.
    """
    path = Path(path)
    try:
        os.makedirs(path.parent, exist_ok=True)
    except OSError as e:
        raise StoreWriteFailed(f"Failed to create directory: {path.parent}: {e}") from e

    try:
        with atomic_output_file(path) as tmp_path:
            Path(tmp_path).write_text(store_to_json(store), encoding="utf-8")
    except OSError as e:
        raise StoreWriteFailed(f"Failed to write commands file: {path}: {e}") from e

    log.info("Saved %s commands to %s", len(store), path)


## Tests


def test_load_missing_file():
    with tempfile.TemporaryDirectory() as tmp_dir:
        store = load_store(Path(tmp_dir) / "nope" / "commands.json")
        assert len(store) == 0


def test_load_invalid_json():
    with tempfile.TemporaryDirectory() as tmp_dir:
        path = Path(tmp_dir) / "commands.json"
        path.write_text("{not json", encoding="utf-8")
        try:
            load_store(path)
            assert False
        except StoreCorrupt as e:
            assert str(path) in str(e)


def test_load_wrong_shape():
    with tempfile.TemporaryDirectory() as tmp_dir:
        path = Path(tmp_dir) / "commands.json"
        for content in ['{"commands": ["ls"]}', '{"commands": {"ls": 3}}', "[]", "{}"]:
            path.write_text(content, encoding="utf-8")
            try:
                load_store(path)
                assert False, content
            except StoreCorrupt:
                pass


def test_save_and_load():
    store = CommandStore(
        commands={
            "ls -la": "list files",
            "git status": "",
            "echo 'héllo, wörld' | tr a-z A-Z": "unicode: ✓ and \"quotes\"",
        }
    )
    with tempfile.TemporaryDirectory() as tmp_dir:
        path = Path(tmp_dir) / "config" / "keepc" / "commands.json"
        save_store(store, path)
        first = path.read_bytes()
        assert load_store(path) == store

        save_store(store, path)
        assert path.read_bytes() == first
        assert json.loads(first) == {"commands": store.commands}


def test_save_unwritable():
    with tempfile.TemporaryDirectory() as tmp_dir:
        blocker = Path(tmp_dir) / "file"
        blocker.write_text("", encoding="utf-8")
        try:
            save_store(CommandStore(commands={}), blocker / "commands.json")
            assert False
        except StoreWriteFailed:
            pass
