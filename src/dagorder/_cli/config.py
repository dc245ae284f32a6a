"""Configuration loading from pyproject.toml."""

import tomllib
from dataclasses import dataclass
from pathlib import Path


class ConfigError(Exception):
    """Error in dagorder configuration."""


@dataclass(slots=True, frozen=True)
class DagorderConfig:
    """Configuration loaded from the ``[tool.dagorder]`` table of pyproject.toml.

    Relative paths are resolved from the project root (directory containing pyproject.toml).
    """

    file: Path | None = None
    show_data: bool = False
    project_root: Path | None = None


def find_pyproject_toml(start_dir: Path | None = None) -> Path | None:
    """Find pyproject.toml by walking up from start_dir.

    Args:
        start_dir: Starting directory. Defaults to current working directory.

    Returns:
        Path to pyproject.toml if found, None otherwise.

    """
    if start_dir is None:
        start_dir = Path.cwd()

    current = start_dir.resolve()

    while True:
        candidate = current / "pyproject.toml"
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            return None
        current = parent


def load_config(pyproject_path: Path) -> DagorderConfig:
    """Load and validate [tool.dagorder] config from pyproject.toml.

    Args:
        pyproject_path: Path to pyproject.toml

    Returns:
        Parsed DagorderConfig

    Raises:
        ConfigError: If the configuration is invalid

    """
    project_root = pyproject_path.parent

    with pyproject_path.open("rb") as f:
        try:
            data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            msg = f"Invalid TOML in {pyproject_path}: {e}"
            raise ConfigError(msg) from e

    tool = data.get("tool", {})
    if not isinstance(tool, dict):
        msg = "Invalid [tool]: expected a table"
        raise ConfigError(msg)

    section = tool.get("dagorder", {})
    if not isinstance(section, dict):
        msg = "Invalid [tool.dagorder]: expected a table"
        raise ConfigError(msg)

    unknown = sorted(set(section) - {"file", "show-data"})
    if unknown:
        msg = f"Unknown [tool.dagorder] keys: {', '.join(unknown)}"
        raise ConfigError(msg)

    file_path: Path | None = None
    if "file" in section:
        file_value = section["file"]
        if not isinstance(file_value, str):
            msg = "Invalid [tool.dagorder].file: expected string path"
            raise ConfigError(msg)
        file_path = Path(file_value)
        if not file_path.is_absolute():
            file_path = project_root / file_path

    show_data = section.get("show-data", False)
    if not isinstance(show_data, bool):
        msg = "Invalid [tool.dagorder].show-data: expected boolean"
        raise ConfigError(msg)

    return DagorderConfig(file=file_path, show_data=show_data, project_root=project_root)


def get_config() -> DagorderConfig:
    """Get config from pyproject.toml in current directory or parents.

    Returns:
        DagorderConfig (may be empty if no pyproject.toml or no [tool.dagorder] section)

    """
    pyproject_path = find_pyproject_toml()
    if pyproject_path is None:
        return DagorderConfig()
    return load_config(pyproject_path)
