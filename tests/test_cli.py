import json
import sys
from pathlib import Path

import pytest

from keepc.commands.command_env import CommandEnv
from keepc.config.logger import record_console
from keepc.config.settings import app_log_dir, COMMANDS_FILE_ENV, user_config_dir
from keepc.errors import ConfigDirUnavailable
from keepc.file_storage.command_store import load_store, save_store
from keepc.form_input.prompt_input import ScriptedPrompter
from keepc.main import main_with_args
from keepc.model.store_model import CommandStore
from keepc.shell_tools.native_tools import RecordingRunner, shell_invocation


@pytest.fixture
def env(tmp_path: Path) -> CommandEnv:
    return CommandEnv(
        store_path=tmp_path / "keepc" / "commands.json",
        prompter=ScriptedPrompter(),
        runner=RecordingRunner(),
    )


def run_cli(env: CommandEnv, *args: str) -> tuple[int, str]:
    with record_console() as console:
        exit_code = main_with_args(list(args), env)
    return exit_code, console.export_text()


def seed(env: CommandEnv, commands: dict[str, str]) -> None:
    save_store(CommandStore(commands=commands), env.store_path)


def test_add_list_and_search(env: CommandEnv):
    assert run_cli(env, "new", "ls -la", "list files")[0] == 0
    assert run_cli(env, "add", "git status", "repo state")[0] == 0

    exit_code, output = run_cli(env, "ls")
    assert exit_code == 0
    assert "$ ls -la: list files" in output
    assert "$ git status: repo state" in output

    for command in ["grep", "find", "search"]:
        exit_code, output = run_cli(env, command, "repo")
        assert exit_code == 0
        assert "$ git status: repo state" in output
        assert "ls -la" not in output

    data = json.loads(env.store_path.read_text(encoding="utf-8"))
    assert data == {"commands": {"ls -la": "list files", "git status": "repo state"}}


def test_new_prompts_for_missing_values(env: CommandEnv):
    env.prompter = ScriptedPrompter(["docker ps", "containers"])
    assert run_cli(env, "new")[0] == 0
    assert load_store(env.store_path).commands == {"docker ps": "containers"}


def test_new_empty_command_fails(env: CommandEnv):
    env.prompter = ScriptedPrompter([""])
    exit_code, _output = run_cli(env, "new")
    assert exit_code == 1
    assert not env.store_path.exists()


def test_fallback_search(env: CommandEnv):
    seed(env, {"ls -la": "list files", "git status": "repo state"})

    exit_code, output = run_cli(env, "git", "STATE")
    assert exit_code == 0
    assert "$ git status: repo state" in output

    exit_code, output = run_cli(env, "kubectl")
    assert exit_code == 2
    assert "no saved commands match: 'kubectl'" in output


def test_remove_with_selection(env: CommandEnv):
    seed(env, {"ls -la": "list files", "git status": "repo state"})

    env.prompter = ScriptedPrompter(["abc"])
    assert run_cli(env, "rm", "s")[0] == 0
    assert len(load_store(env.store_path)) == 2

    env.prompter = ScriptedPrompter(["2"])
    exit_code, output = run_cli(env, "delete", "s")
    assert exit_code == 0
    assert "Deleted command: git status" in output
    assert load_store(env.store_path).commands == {"ls -la": "list files"}


def test_run_propagates_exit_status(env: CommandEnv):
    seed(env, {"exit 3": "always fails"})
    env.prompter = ScriptedPrompter(["1"])
    env.runner = RecordingRunner(exit_code=3)

    exit_code, _output = run_cli(env, "execute", "fails")
    assert exit_code == 3
    assert env.runner.calls == [shell_invocation("exit 3")]


def test_edit_editor_failure_keeps_store(env: CommandEnv):
    seed(env, {"ls -la": "list files"})
    before = env.store_path.read_bytes()
    env.runner = RecordingRunner(exit_code=1)

    assert run_cli(env, "edit")[0] == 1
    assert env.store_path.read_bytes() == before


def test_corrupt_store(env: CommandEnv):
    env.store_path.parent.mkdir(parents=True)
    env.store_path.write_text("{oops", encoding="utf-8")

    assert run_cli(env, "list")[0] == 1
    assert run_cli(env, "new", "true", "")[0] == 1
    assert env.store_path.read_text(encoding="utf-8") == "{oops"


def test_usage_errors(env: CommandEnv, capsys):
    assert run_cli(env, "grep")[0] == 1
    assert run_cli(env, "list", "extra")[0] == 1

    assert main_with_args(["--bogus"], env) == 2
    assert "Unrecognized option: --bogus" in capsys.readouterr().err


def test_help(env: CommandEnv):
    for args in [(), ("help",), ("--help",), ("-h",)]:
        exit_code, output = run_cli(env, *args)
        assert exit_code == 0
        assert "Commands:" in output


def test_option_like_search(env: CommandEnv, capsys):
    seed(env, {"ls -la": "list files", "git status": "repo state"})

    exit_code, output = run_cli(env, "-la")
    assert exit_code == 0
    assert "$ ls -la: list files" in output
    assert "git status" not in output
    assert "Unrecognized option" not in capsys.readouterr().err

    exit_code, output = run_cli(env, "--bogus")
    assert exit_code == 2
    assert "$ " not in output
    assert "Unrecognized option: --bogus" in capsys.readouterr().err


@pytest.mark.skipif(sys.platform == "win32", reason="Windows uses APPDATA")
def test_config_dir_unavailable(monkeypatch):
    def no_home(cls):
        raise RuntimeError("Could not determine home directory.")

    monkeypatch.setattr(Path, "home", classmethod(no_home))
    monkeypatch.delenv(COMMANDS_FILE_ENV, raising=False)
    monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)

    with pytest.raises(ConfigDirUnavailable):
        user_config_dir()
    assert app_log_dir() is None

    with record_console():
        assert main_with_args(["list"]) == 1
