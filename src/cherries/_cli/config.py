"""Configuration loading from pyproject.toml."""

import tomllib
from dataclasses import dataclass
from pathlib import Path

DEFAULT_INDENT = 2


class ConfigError(Exception):
    """Error in cherries configuration."""


@dataclass(slots=True, frozen=True)
class CherriesConfig:
    """Configuration loaded from the ``[tool.cherries]`` table of pyproject.toml.

    Attributes:
        indent: JSON indentation used when writing documents.
        max_depth: Default number of levels drawn by ``cherries show``.
            None draws the whole tree.
        project_root: Directory containing the pyproject.toml, if one was found.

    """

    indent: int = DEFAULT_INDENT
    max_depth: int | None = None
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
            # Reached filesystem root
            return None
        current = parent


def _parse_positive_int(section: dict[str, object], key: str, *, minimum: int) -> int | None:
    if key not in section:
        return None
    value = section[key]
    # bool is an int subclass, but `indent = true` is a mistake
    if isinstance(value, bool) or not isinstance(value, int) or value < minimum:
        msg = f"Invalid [tool.cherries].{key}: expected integer >= {minimum}, got {value!r}"
        raise ConfigError(msg)
    return value


def load_config(pyproject_path: Path) -> CherriesConfig:
    """Load and validate [tool.cherries] config from pyproject.toml.

    Args:
        pyproject_path: Path to pyproject.toml

    Returns:
        Parsed CherriesConfig

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

    tool_section = data.get("tool", {})
    cherries_section = tool_section.get("cherries", {})

    if not isinstance(cherries_section, dict):
        msg = "Invalid [tool.cherries]: expected a table"
        raise ConfigError(msg)

    if not cherries_section:
        # No [tool.cherries] section - return defaults
        return CherriesConfig(project_root=project_root)

    indent = _parse_positive_int(cherries_section, "indent", minimum=0)
    max_depth = _parse_positive_int(cherries_section, "max_depth", minimum=1)

    return CherriesConfig(
        indent=DEFAULT_INDENT if indent is None else indent,
        max_depth=max_depth,
        project_root=project_root,
    )


def get_config() -> CherriesConfig:
    """Get config from pyproject.toml in current directory or parents.

    Returns:
        CherriesConfig (defaults if no pyproject.toml or no [tool.cherries] section)

    """
    pyproject_path = find_pyproject_toml()
    if pyproject_path is None:
        return CherriesConfig()
    return load_config(pyproject_path)
