"""Tests for Rich tree rendering."""

import io

import pint
import pytest
from rich.console import Console

import cherries as ch

ureg = pint.UnitRegistry()


def _render(source, **kwargs) -> str:
    console = Console(file=io.StringIO(), width=100)
    ch.render_tree(source, console, **kwargs)
    return console.file.getvalue()


@pytest.fixture
def expression() -> ch.Node:
    return (ch.leaf(2, "a") + ch.leaf(3, "b")) * (ch.leaf(4, "c") - ch.leaf(1, "d"))


class TestBuildRichTree:
    def test_one_branch_per_child(self, expression: ch.Node) -> None:
        tree = ch.build_rich_tree(expression)

        assert len(tree.children) == 2
        assert len(tree.children[0].children) == 2
        assert tree.children[0].children[0].children == []

    def test_node_and_document_render_the_same(self, expression: ch.Node) -> None:
        assert _render(expression) == _render(expression.to_document())

    def test_invalid_max_depth(self, expression: ch.Node) -> None:
        with pytest.raises(ValueError, match="max_depth"):
            ch.build_rich_tree(expression, max_depth=0)


class TestRenderTree:
    def test_lines(self, expression: ch.Node) -> None:
        output = _render(expression)

        for line in ["(mul) = 15", "(add) = 5", "(sub) = 3", "a = 2", "b = 3", "c = 4", "d = 1"]:
            assert line in output

    def test_units_are_shown(self) -> None:
        output = _render(ch.leaf(ureg.Quantity(2.5, "meter"), "x"))

        assert "x = 2.5 meter" in output

    def test_dimensionless_has_no_unit(self) -> None:
        output = _render(ch.leaf(2.5, "x"))

        assert "dimensionless" not in output

    def test_max_depth_hides_deeper_levels(self, expression: ch.Node) -> None:
        output = _render(expression, max_depth=2)

        assert "(add) = 5" in output
        assert "a = 2" not in output
        assert "2 hidden" in output

    def test_markup_in_labels_is_escaped(self) -> None:
        output = _render(ch.leaf(1, "[bold]x[/bold]"))

        assert "[bold]x[/bold] = 1" in output
