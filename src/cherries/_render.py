"""Rendering utilities for expression trees.

Nodes and documents are drawn as Rich trees, one line per node::

    (mul) = 15
    ├── (add) = 5
    │   ├── a = 2
    │   └── b = 3
    └── (sub) = 3
        ├── c = 4
        └── d = 1
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from rich.markup import escape
from rich.tree import Tree

from ._document import ExprDocument, to_document
from ._quantity import DIMENSIONLESS

if TYPE_CHECKING:
    from rich.console import Console

    from ._node import Node


def _is_operation_label(label: str) -> bool:
    """Check for generated labels such as ``(add)`` or ``(map)``."""
    return label.startswith("(") and label.endswith(")")


def _format_value(value: Any, unit: str) -> str:
    if unit == DIMENSIONLESS:
        return escape(repr(value))
    return f"{escape(repr(value))} [dim]{escape(unit)}[/dim]"


def _format_label(document: ExprDocument) -> str:
    """Format a single node line with style."""
    style = "cyan" if _is_operation_label(document.label) else "bold"
    return f"[{style}]{escape(document.label)}[/{style}] = {_format_value(document.value, document.unit)}"


def _add_children_to_tree(
    parent: Tree,
    document: ExprDocument,
    level: int,
    max_depth: int | None,
) -> None:
    """Recursively add children to tree nodes."""
    if not document.subexpr:
        return
    if max_depth is not None and level >= max_depth:
        parent.add(f"[dim]… {len(document.subexpr)} hidden[/dim]")
        return
    for child in document.subexpr:
        branch = parent.add(_format_label(child))
        _add_children_to_tree(branch, child, level + 1, max_depth)


def build_rich_tree(source: Node[Any] | ExprDocument, max_depth: int | None = None) -> Tree:
    """Build a Rich tree for a node or a document.

    Args:
        source: The node or document to draw.
        max_depth: Number of levels to draw. Deeper levels are collapsed into a
            single "hidden" entry. None draws everything.

    Raises:
        ValueError: If max_depth is smaller than 1.

    """
    if max_depth is not None and max_depth < 1:
        msg = f"max_depth must be at least 1, got: {max_depth}"
        raise ValueError(msg)

    document = source if isinstance(source, ExprDocument) else to_document(source)
    tree = Tree(_format_label(document))
    _add_children_to_tree(tree, document, 1, max_depth)
    return tree


def render_tree(
    source: Node[Any] | ExprDocument,
    console: Console,
    *,
    max_depth: int | None = None,
) -> None:
    """Render a node or a document as a tree.

    Args:
        source: The node or document to render.
        console: Rich console to print to.
        max_depth: Number of levels to draw, see `build_rich_tree`.

    """
    console.print(build_rich_tree(source, max_depth=max_depth))
