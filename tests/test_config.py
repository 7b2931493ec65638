"""Tests for the configuration module."""

from pathlib import Path

import pytest

from cherries._cli.config import (
    DEFAULT_INDENT,
    CherriesConfig,
    ConfigError,
    find_pyproject_toml,
    get_config,
    load_config,
)


class TestFindPyprojectToml:
    """Tests for find_pyproject_toml function."""

    def test_finds_in_current_directory(self, tmp_path: Path) -> None:
        """Should find pyproject.toml in current directory."""
        pyproject = tmp_path / "pyproject.toml"
        pyproject.write_text("[project]\nname = 'test'\n")

        result = find_pyproject_toml(tmp_path)

        assert result == pyproject

    def test_finds_in_parent_directory(self, tmp_path: Path) -> None:
        """Should find pyproject.toml in parent directory."""
        pyproject = tmp_path / "pyproject.toml"
        pyproject.write_text("[project]\nname = 'test'\n")

        subdir = tmp_path / "traces" / "2024"
        subdir.mkdir(parents=True)

        result = find_pyproject_toml(subdir)

        assert result == pyproject

    def test_returns_none_when_not_found(self, tmp_path: Path) -> None:
        """Should return None when no pyproject.toml is found."""
        result = find_pyproject_toml(tmp_path)

        assert result is None


class TestLoadConfig:
    """Tests for loading [tool.cherries]."""

    def test_full_configuration(self, tmp_path: Path) -> None:
        """Should parse every supported key."""
        pyproject = tmp_path / "pyproject.toml"
        pyproject.write_text(
            """
[tool.cherries]
indent = 4
max_depth = 3
""",
        )

        config = load_config(pyproject)

        assert config.indent == 4
        assert config.max_depth == 3
        assert config.project_root == tmp_path

    def test_zero_indent_is_allowed(self, tmp_path: Path) -> None:
        """Should accept indent = 0."""
        pyproject = tmp_path / "pyproject.toml"
        pyproject.write_text("[tool.cherries]\nindent = 0\n")

        config = load_config(pyproject)

        assert config.indent == 0
        assert config.max_depth is None

    def test_no_tool_cherries_section(self, tmp_path: Path) -> None:
        """Should return defaults when no [tool.cherries] section."""
        pyproject = tmp_path / "pyproject.toml"
        pyproject.write_text(
            """
[project]
name = "test"
""",
        )

        config = load_config(pyproject)

        assert config.indent == DEFAULT_INDENT
        assert config.max_depth is None
        assert config.project_root == tmp_path

    def test_empty_tool_cherries_section(self, tmp_path: Path) -> None:
        """Should return defaults when [tool.cherries] is empty."""
        pyproject = tmp_path / "pyproject.toml"
        pyproject.write_text("[tool.cherries]\n")

        config = load_config(pyproject)

        assert config.indent == DEFAULT_INDENT
        assert config.max_depth is None


class TestLoadConfigErrors:
    """Tests for configuration error handling."""

    def test_invalid_toml_raises_error(self, tmp_path: Path) -> None:
        """Should raise ConfigError for invalid TOML."""
        pyproject = tmp_path / "pyproject.toml"
        pyproject.write_text("invalid toml [[[")

        with pytest.raises(ConfigError, match="Invalid TOML"):
            load_config(pyproject)

    def test_string_indent_raises_error(self, tmp_path: Path) -> None:
        """Should raise ConfigError when indent is not an integer."""
        pyproject = tmp_path / "pyproject.toml"
        pyproject.write_text('[tool.cherries]\nindent = "two"\n')

        with pytest.raises(ConfigError, match=r"\[tool.cherries\].indent"):
            load_config(pyproject)

    def test_boolean_indent_raises_error(self, tmp_path: Path) -> None:
        """Should reject booleans even though bool is an int subclass."""
        pyproject = tmp_path / "pyproject.toml"
        pyproject.write_text("[tool.cherries]\nindent = true\n")

        with pytest.raises(ConfigError, match="indent"):
            load_config(pyproject)

    def test_zero_max_depth_raises_error(self, tmp_path: Path) -> None:
        """Should require max_depth >= 1."""
        pyproject = tmp_path / "pyproject.toml"
        pyproject.write_text("[tool.cherries]\nmax_depth = 0\n")

        with pytest.raises(ConfigError, match="max_depth"):
            load_config(pyproject)

    def test_non_table_section_raises_error(self, tmp_path: Path) -> None:
        """Should raise ConfigError when tool.cherries is not a table."""
        pyproject = tmp_path / "pyproject.toml"
        pyproject.write_text('[tool]\ncherries = "yes"\n')

        with pytest.raises(ConfigError, match="expected a table"):
            load_config(pyproject)


class TestGetConfig:
    """Tests for get_config."""

    def test_reads_config_from_working_directory(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Should load the nearest pyproject.toml."""
        (tmp_path / "pyproject.toml").write_text("[tool.cherries]\nmax_depth = 2\n")
        monkeypatch.chdir(tmp_path)

        config = get_config()

        assert config.max_depth == 2
        assert config.project_root == tmp_path.resolve()


class TestCherriesConfigDataclass:
    """Tests for the CherriesConfig dataclass."""

    def test_default_values(self) -> None:
        """Should default to indent 2 and no depth limit."""
        config = CherriesConfig()

        assert config.indent == 2
        assert config.max_depth is None
        assert config.project_root is None

    def test_frozen(self) -> None:
        """Should be frozen (immutable)."""
        config = CherriesConfig()

        with pytest.raises(AttributeError):
            config.indent = 4  # type: ignore[misc]
