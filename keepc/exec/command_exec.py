from typing import Sequence

from keepc.commands.command_env import CommandEnv, CommandResult
from keepc.commands.command_registry import look_up_command
from keepc.config.logger import get_logger
from keepc.file_storage.command_store import load_store, save_store

log = get_logger(__name__)


def run_command(name: str, args: Sequence[str], env: CommandEnv) -> CommandResult:
    """
    Run a registered command: load the store fresh, run the command on it, and
    save the whole store back if the command changed it.
    """
    func = look_up_command(name)
    store = load_store(env.store_path)

    log.info("Command: %s %s", name, " ".join(args))
    result = func(env, store, *args)

    if result.store_changed:
        save_store(store, env.store_path)
    return result


## Tests


def test_run_command_saves_only_changes():
    import tempfile
    from pathlib import Path

    import keepc.commands  # noqa: F401
    from keepc.config.logger import record_console
    from keepc.form_input.prompt_input import ScriptedPrompter
    from keepc.shell_tools.native_tools import RecordingRunner

    with tempfile.TemporaryDirectory() as tmp_dir, record_console():
        env = CommandEnv(
            store_path=Path(tmp_dir) / "keepc" / "commands.json",
            prompter=ScriptedPrompter(),
            runner=RecordingRunner(),
        )
        run_command("list", [], env)
        assert not env.store_path.exists()

        run_command("add", ["git status", "repo state"], env)
        run_command("new", ["ls -la", "list files"], env)
        assert load_store(env.store_path).commands == {
            "git status": "repo state",
            "ls -la": "list files",
        }

        env.prompter = ScriptedPrompter(["1"])
        run_command("rm", ["git"], env)
        assert load_store(env.store_path).commands == {"ls -la": "list files"}
