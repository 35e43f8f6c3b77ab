import subprocess
import tomllib
from importlib import metadata
from pathlib import Path
from typing import Optional

from keepc.config.settings import APP_NAME

_project_root = Path(__file__).parent.parent


def get_pyproject_version() -> str:
    pyproject_path = _project_root / "pyproject.toml"
    pyproject_data = tomllib.loads(pyproject_path.read_text())
    return pyproject_data["tool"]["poetry"]["version"]


def get_git_hash() -> Optional[str]:
    try:
        result = subprocess.run(
            ["git", "rev-parse", "--short", "HEAD"],
            cwd=_project_root,
            capture_output=True,
            text=True,
            check=True,
        )
        return result.stdout.strip()
    except (subprocess.CalledProcessError, OSError):
        return None


def get_version() -> str:
    try:
        # For development: use pyproject version + git hash.
        version = get_pyproject_version()
        git_hash = get_git_hash()
        return f"{version}+{git_hash}" if git_hash else version
    except (OSError, KeyError, tomllib.TOMLDecodeError):
        # Get the version from the installed package metadata.
        return metadata.version(APP_NAME)


def get_version_name() -> str:
    return f"{APP_NAME} {get_version()}"


if __name__ == "__main__":
    print(get_version())
