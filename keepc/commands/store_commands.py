import tempfile
from pathlib import Path

from keepc.commands.command_env import CommandEnv, CommandResult
from keepc.commands.command_registry import keepc_command
from keepc.config.logger import get_logger
from keepc.errors import (
    EditorLaunchFailed,
    EditorNonZeroExit,
    EmptyCommandText,
    InvalidInput,
    ShellLaunchFailed,
    ShellNonZeroExit,
)
from keepc.file_storage.edit_format import parse_edit_text, store_to_edit_text
from keepc.form_input.selector import select
from keepc.model.store_model import CommandStore
from keepc.search.keyword_search import match
from keepc.shell_tools.native_tools import editor_invocation, shell_invocation
from keepc.shell_ui.shell_output import cprint, print_command_entry, print_status

log = get_logger(__name__)


def _pattern_arg(command_name: str, args: tuple[str, ...]) -> str:
    if not args:
        raise InvalidInput(f"Command `{command_name}` requires a search pattern")
    return " ".join(args)


def _no_args(command_name: str, args: tuple[str, ...]) -> None:
    if args:
        raise InvalidInput(f"Command `{command_name}` takes no arguments")


def print_not_found(pattern: str) -> None:
    cprint("No commands found matching '%s'", pattern)


def print_matches(pattern: str, store: CommandStore) -> bool:
    """
    Print the commands matching `pattern`. Returns False if there were none.
    """
    matches = match(pattern, store)
    for command in matches:
        print_command_entry(command, store.get(command) or "")
    return bool(matches)


@keepc_command(aliases=["add"])
def new(env: CommandEnv, store: CommandStore, *args: str) -> CommandResult:
    """
    Add a new command. Prompts for the command and description if not given.
    """
    if len(args) > 2:
        raise InvalidInput("Command `new` takes at most a command and a description")

    if len(args) >= 1:
        command = args[0]
    else:
        command = env.prompter.read_line("Enter command: ").strip()
    if not command.strip():
        raise EmptyCommandText()

    if len(args) == 2:
        description = args[1]
    else:
        description = env.prompter.read_line("Enter description (optional): ").strip()

    if command in store:
        log.info("Replacing description of existing command: %s", command)
    store.put(command, description)
    print_status("Saved command: %s", command)
    return CommandResult(store_changed=True)


@keepc_command(name="list", aliases=["ls"])
def list_commands(env: CommandEnv, store: CommandStore, *args: str) -> CommandResult:
    """
    List all saved commands.
    """
    _no_args("list", args)
    if not len(store):
        cprint("No commands saved.")
        return CommandResult()

    for entry in store.entries():
        print_command_entry(entry.command, entry.description)
    return CommandResult()


@keepc_command(aliases=["find", "search"])
def grep(env: CommandEnv, store: CommandStore, *args: str) -> CommandResult:
    """
    Search for commands matching all the given keywords.
    """
    pattern = _pattern_arg("grep", args)
    if not print_matches(pattern, store):
        print_not_found(pattern)
    return CommandResult()


@keepc_command(aliases=["rm", "delete"])
def remove(env: CommandEnv, store: CommandStore, *args: str) -> CommandResult:
    """
    Delete a saved command, choosing among the matches.
    """
    pattern = _pattern_arg("remove", args)
    matches = match(pattern, store)
    if not matches:
        print_not_found(pattern)
        return CommandResult()

    selection = select(matches, store, env.prompter, action="delete")
    if not selection.command:
        return CommandResult()

    store.remove(selection.command)
    print_status("Deleted command: %s", selection.command)
    return CommandResult(store_changed=True)


@keepc_command()
def edit(env: CommandEnv, store: CommandStore, *args: str) -> CommandResult:
    """
    Edit all commands in a text editor, one `command:::description` per line.
    """
    _no_args("edit", args)

    with tempfile.NamedTemporaryFile(
        "w", suffix=".txt", prefix="keepc_", delete=False, encoding="utf-8"
    ) as tmp_file:
        tmp_file.write(store_to_edit_text(store))
        tmp_path = Path(tmp_file.name)

    try:
        program, editor_args = editor_invocation(str(tmp_path))
        try:
            exit_code = env.runner.run(program, editor_args)
        except OSError as e:
            raise EditorLaunchFailed(f"Failed to open editor: {program}: {e}") from e
        if exit_code != 0:
            raise EditorNonZeroExit(program, exit_code)

        try:
            edited_text = tmp_path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise InvalidInput(f"Edited commands are not valid UTF-8: {e}") from e
    finally:
        tmp_path.unlink(missing_ok=True)

    store.replace_all(parse_edit_text(edited_text))
    print_status("Commands updated.")
    return CommandResult(store_changed=True)


@keepc_command(aliases=["execute"])
def run(env: CommandEnv, store: CommandStore, *args: str) -> CommandResult:
    """
    Execute a saved command, choosing among the matches.
    """
    pattern = _pattern_arg("run", args)
    matches = match(pattern, store)
    if not matches:
        print_not_found(pattern)
        return CommandResult()

    selection = select(matches, store, env.prompter, action="execute")
    if not selection.command:
        return CommandResult()

    command = selection.command
    print_status("Executing: %s", command)
    program, shell_args = shell_invocation(command)
    try:
        exit_code = env.runner.run(program, shell_args)
    except OSError as e:
        raise ShellLaunchFailed(f"Failed to execute: {command}: {e}") from e
    if exit_code != 0:
        raise ShellNonZeroExit(command, exit_code)
    return CommandResult()


## Tests


def _test_env(tmp_dir: str, responses=(), runner=None) -> CommandEnv:
    from keepc.form_input.prompt_input import ScriptedPrompter
    from keepc.shell_tools.native_tools import RecordingRunner

    return CommandEnv(
        store_path=Path(tmp_dir) / "commands.json",
        prompter=ScriptedPrompter(list(responses)),
        runner=runner or RecordingRunner(),
    )


def _test_store() -> CommandStore:
    return CommandStore(commands={"ls -la": "list files", "git status": "repo state"})


def test_new_with_args_and_prompts():
    from keepc.config.logger import record_console

    store = CommandStore(commands={})
    with tempfile.TemporaryDirectory() as tmp_dir, record_console():
        env = _test_env(tmp_dir, responses=["  du -sh .  ", " disk usage "])
        assert new(env, store).store_changed
        assert store.get("du -sh .") == "disk usage"

        env = _test_env(tmp_dir, responses=["only asked for description"])
        new(env, store, "ls -la")
        assert store.get("ls -la") == "only asked for description"

        env = _test_env(tmp_dir)
        new(env, store, "ls -la", "latest")
        assert store.get("ls -la") == "latest"
        assert len(store) == 2
        assert env.prompter.prompts == []


def test_new_empty_command():
    store = CommandStore(commands={})
    with tempfile.TemporaryDirectory() as tmp_dir:
        env = _test_env(tmp_dir, responses=["   "])
        try:
            new(env, store)
            assert False
        except EmptyCommandText:
            pass
        assert len(store) == 0
        assert env.prompter.prompts == ["Enter command: "]


def test_list_and_grep_output():
    from keepc.config.logger import record_console

    store = _test_store()
    with tempfile.TemporaryDirectory() as tmp_dir:
        env = _test_env(tmp_dir)
        with record_console() as console:
            list_commands(env, store)
            grep(env, store, "status")
            grep(env, store, "nothing", "here")
            list_commands(env, CommandStore(commands={}))
        output = console.export_text()

    assert "$ ls -la: list files" in output
    assert output.count("$ git status: repo state") == 2
    assert "No commands found matching 'nothing here'" in output
    assert "No commands saved." in output


def test_remove_second_of_two():
    from keepc.config.logger import record_console

    store = _test_store()
    with tempfile.TemporaryDirectory() as tmp_dir, record_console():
        # "s" appears in both commands.
        env = _test_env(tmp_dir, responses=["2"])
        result = remove(env, store, "s")
        assert result.store_changed
        assert store.commands == {"ls -la": "list files"}


def test_remove_invalid_selection():
    from keepc.config.logger import record_console

    for bad_input in ["0", "abc", "3"]:
        store = _test_store()
        with tempfile.TemporaryDirectory() as tmp_dir, record_console():
            env = _test_env(tmp_dir, responses=[bad_input])
            result = remove(env, store, "s")
        assert not result.store_changed
        assert store == _test_store()


def test_remove_not_found():
    from keepc.config.logger import record_console

    store = _test_store()
    with tempfile.TemporaryDirectory() as tmp_dir, record_console() as console:
        env = _test_env(tmp_dir, responses=["1"])
        result = remove(env, store, "kubectl")
        assert not result.store_changed
        assert env.prompter.prompts == []
    assert "No commands found matching 'kubectl'" in console.export_text()


def test_run_selected_command():
    from keepc.config.logger import record_console
    from keepc.shell_tools.native_tools import RecordingRunner

    store = _test_store()
    runner = RecordingRunner()
    with tempfile.TemporaryDirectory() as tmp_dir, record_console() as console:
        env = _test_env(tmp_dir, responses=["1"], runner=runner)
        result = run(env, store, "git")
    assert not result.store_changed
    assert runner.calls == [shell_invocation("git status")]
    assert "Executing: git status" in console.export_text()


def test_run_nonzero_exit():
    from keepc.config.logger import record_console
    from keepc.shell_tools.native_tools import RecordingRunner

    store = _test_store()
    with tempfile.TemporaryDirectory() as tmp_dir, record_console():
        env = _test_env(tmp_dir, responses=["1"], runner=RecordingRunner(exit_code=7))
        try:
            run(env, store, "git")
            assert False
        except ShellNonZeroExit as e:
            assert e.exit_code == 7

        env = _test_env(tmp_dir, responses=["x"], runner=RecordingRunner(exit_code=7))
        run(env, store, "git")
        assert env.runner.calls == []


def test_edit_replaces_store():
    from keepc.config.logger import record_console
    from keepc.shell_tools.native_tools import RecordingRunner

    seen_text = []

    def fake_editor(program, args):
        path = Path(args[-1])
        seen_text.append(path.read_text(encoding="utf-8"))
        path.write_text("git status:::repo state, edited\nbroken line\nhtop::: \n", encoding="utf-8")

    store = _test_store()
    runner = RecordingRunner(on_run=fake_editor)
    with tempfile.TemporaryDirectory() as tmp_dir, record_console():
        env = _test_env(tmp_dir, runner=runner)
        result = edit(env, store)

    assert result.store_changed
    assert seen_text == ["ls -la:::list files\ngit status:::repo state\n"]
    assert store.commands == {"git status": "repo state, edited", "htop": ""}
    temp_file = Path(runner.calls[0][1][-1])
    assert not temp_file.exists()


def test_edit_failures_leave_store():
    from keepc.shell_tools.native_tools import RecordingRunner

    store = _test_store()
    with tempfile.TemporaryDirectory() as tmp_dir:
        env = _test_env(tmp_dir, runner=RecordingRunner(exit_code=1))
        try:
            edit(env, store)
            assert False
        except EditorNonZeroExit:
            pass

        env = _test_env(tmp_dir, runner=RecordingRunner(error=FileNotFoundError("no editor")))
        try:
            edit(env, store)
            assert False
        except EditorLaunchFailed:
            pass

    assert store == _test_store()


def test_edit_invalid_utf8():
    from keepc.shell_tools.native_tools import RecordingRunner

    def binary_editor(program, args):
        Path(args[-1]).write_bytes(b"ls -la:::\xff\xfe list\n")

    store = _test_store()
    runner = RecordingRunner(on_run=binary_editor)
    with tempfile.TemporaryDirectory() as tmp_dir:
        env = _test_env(tmp_dir, runner=runner)
        try:
            edit(env, store)
            assert False
        except InvalidInput as e:
            assert "UTF-8" in str(e)

    assert store == _test_store()
    assert not Path(runner.calls[0][1][-1]).exists()
