"""Expression-tree nodes.

A `Node` pairs a name with a value and keeps the nodes its value was computed
from as ordered children. Leaves come from the `Leaf` builder; every other
node is produced by an operator, `Node.map`, or one of the folds in
`cherries._fold`, so the shape of a tree always mirrors the expression that
produced its root value.

Nodes are immutable. Every operation returns a new node and leaves its
operands untouched, so a node can be reused freely without aliasing issues.
"""

from __future__ import annotations

import logging
import operator
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from ._quantity import unit_of
from ._validate import ValidateChain

if TYPE_CHECKING:
    from collections.abc import Callable, Generator

    from ._document import ExprDocument
    from ._quantity import Decoder

logger = logging.getLogger(__name__)

T = TypeVar("T")
U = TypeVar("U")

LEAF_PLACEHOLDER = "(leaf)"
MAP_LABEL = "(map)"
ADD_LABEL = "(add)"
SUB_LABEL = "(sub)"
MUL_LABEL = "(mul)"
DIV_LABEL = "(div)"


class ConstructionError(ValueError):
    """A node could not be built from the supplied parts."""


def _check_name(name: object) -> str:
    if not isinstance(name, str) or not name:
        msg = f"Node name must be a non-empty string, got: {name!r}"
        raise ConstructionError(msg)
    return name


@dataclass(frozen=True, slots=True)
class Node(Generic[T]):
    """A named value together with the nodes it was computed from.

    Attributes:
        name: The label of this node. Operator nodes carry a canonical tag
            such as ``"(add)"``.
        value: The payload. For internal nodes this is the result of the
            producing operation applied to the children's values.
        children: The direct operands in evaluation order (empty for leaves).

    Equality is structural: two nodes are equal when their names, values and
    children are equal. Ordering comparisons look at the values only.

    """

    name: str
    value: T
    children: tuple[Node[Any], ...] = ()

    def __post_init__(self) -> None:
        _check_name(self.name)

    @property
    def quantity(self) -> T:
        """Alias of `value`."""
        return self.value

    @property
    def is_leaf(self) -> bool:
        """Check if this is a leaf node (has no children)."""
        return len(self.children) == 0

    @property
    def depth(self) -> int:
        """Number of levels in this subtree (1 for a leaf)."""
        depth = 0
        level: list[Node[Any]] = [self]
        while level:
            depth += 1
            level = [child for node in level for child in node.children]
        return depth

    @property
    def unit(self) -> str:
        """Unit string of the value, ``"dimensionless"`` when it has none."""
        return unit_of(self.value)

    def label(self, new_label: str) -> Node[T]:
        """Return a copy of this node with a new name.

        Value and children are kept as they are.

        Raises:
            ConstructionError: If the new label is empty.

        """
        return replace(self, name=_check_name(new_label))

    def labeled(self, new_label: str) -> Node[T]:
        """Same as `label`; reads better at the end of an expression."""
        return self.label(new_label)

    def map(self, func: Callable[[T], U]) -> Node[U]:
        """Apply a function to the value and record this node as its only child.

        The result is named ``"(map)"``; chain `labeled` to name it after the
        function::

            floored = x.map(math.floor).labeled("floor")

        """
        value = func(self.value)
        logger.debug("Mapped %s -> %r", self.name, value)
        return Node(name=MAP_LABEL, value=value, children=(self,))

    def validate(self, label: str, predicate: Callable[[T], bool]) -> ValidateChain[T]:
        """Start a validation chain on this node's value.

        See `cherries.ValidateChain` for the chaining and resolution rules.
        """
        return ValidateChain(self).validate(label, predicate)

    def iter_nodes(self) -> Generator[Node[Any]]:
        """Iterate over this node and all its descendants in pre-order."""
        stack: list[Node[Any]] = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def iter_leaves(self) -> Generator[Node[Any]]:
        """Iterate over the leaves of this subtree from left to right."""
        return (node for node in self.iter_nodes() if node.is_leaf)

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_document(self) -> ExprDocument:
        """Render this subtree as an `ExprDocument`."""
        from ._document import to_document  # noqa: PLC0415

        return to_document(self)

    def to_dict(self) -> dict[str, Any]:
        """Render this subtree as plain JSON-compatible data."""
        return self.to_document().to_dict()

    def to_json(self, indent: int | None = None) -> str:
        """Render this subtree as JSON text.

        The output is deterministic: rendering the same node twice gives the
        same string.
        """
        return self.to_document().to_json(indent=indent)

    @classmethod
    def from_document(cls, document: ExprDocument, decode: Decoder | None = None) -> Node[Any]:
        """Rebuild a tree from a document.

        Args:
            document: The document to rebuild.
            decode: Optional callable turning a stored ``(value, unit)`` pair
                into a payload. Without it the stored value is used as-is.

        """
        from ._document import from_document  # noqa: PLC0415

        return from_document(document, decode=decode)

    @classmethod
    def from_dict(cls, data: dict[str, Any], decode: Decoder | None = None) -> Node[Any]:
        """Rebuild a tree from the output of `to_dict`."""
        from ._document import document_from_dict  # noqa: PLC0415

        return cls.from_document(document_from_dict(data), decode=decode)

    @classmethod
    def from_json(cls, text: str | bytes, decode: Decoder | None = None) -> Node[Any]:
        """Rebuild a tree from the output of `to_json`."""
        from ._document import document_from_json  # noqa: PLC0415

        return cls.from_document(document_from_json(text), decode=decode)

    # ------------------------------------------------------------------
    # Operators
    # ------------------------------------------------------------------

    def __add__(self, other: object) -> Node[Any]:
        if not isinstance(other, Node):
            return NotImplemented
        return add_nodes(self, other)

    def __sub__(self, other: object) -> Node[Any]:
        if not isinstance(other, Node):
            return NotImplemented
        return subtract_nodes(self, other)

    def __mul__(self, other: object) -> Node[Any]:
        if not isinstance(other, Node):
            return NotImplemented
        return multiply_nodes(self, other)

    def __truediv__(self, other: object) -> Node[Any]:
        if not isinstance(other, Node):
            return NotImplemented
        return divide_nodes(self, other)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Node):
            return NotImplemented
        return self.value < other.value

    def __le__(self, other: object) -> bool:
        if not isinstance(other, Node):
            return NotImplemented
        return self.value <= other.value

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, Node):
            return NotImplemented
        return self.value > other.value

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, Node):
            return NotImplemented
        return self.value >= other.value


def _compose(
    name: str,
    op: Callable[[Any, Any], Any],
    left: Node[Any],
    right: Node[Any],
) -> Node[Any]:
    """Apply a binary operation to two nodes' values and record both as children.

    Errors raised by the operation itself are not caught.
    """
    value = op(left.value, right.value)
    logger.debug("Composed %s from %s and %s -> %r", name, left.name, right.name, value)
    return Node(name=name, value=value, children=(left, right))


def add_nodes(left: Node[Any], right: Node[Any]) -> Node[Any]:
    """Equivalent to ``left + right``."""
    return _compose(ADD_LABEL, operator.add, left, right)


def subtract_nodes(left: Node[Any], right: Node[Any]) -> Node[Any]:
    """Equivalent to ``left - right``."""
    return _compose(SUB_LABEL, operator.sub, left, right)


def multiply_nodes(left: Node[Any], right: Node[Any]) -> Node[Any]:
    """Equivalent to ``left * right``."""
    return _compose(MUL_LABEL, operator.mul, left, right)


def divide_nodes(left: Node[Any], right: Node[Any]) -> Node[Any]:
    """Equivalent to ``left / right``."""
    return _compose(DIV_LABEL, operator.truediv, left, right)


class _Missing:
    def __repr__(self) -> str:
        return "<missing>"


_MISSING: Any = _Missing()


@dataclass(frozen=True, slots=True)
class Leaf(Generic[T]):
    """Builder for leaf nodes.

    Each call returns a new builder, so partially configured builders can be
    shared. A value is required; the name defaults to ``"(leaf)"``.

    Example:
        x = Leaf().name("x").value(2.0).build()
        y = Leaf.new().value(3.0).build()

    """

    _name: str = LEAF_PLACEHOLDER
    _value: Any = _MISSING

    @classmethod
    def new(cls) -> Leaf[Any]:
        """Start an empty builder."""
        return cls()

    def name(self, name: str) -> Leaf[T]:
        """Set the leaf's name."""
        return replace(self, _name=name)

    def value(self, value: U) -> Leaf[U]:
        """Set the leaf's value."""
        return replace(self, _value=value)  # type: ignore[return-value]

    def build(self) -> Node[T]:
        """Finalize the builder into a leaf node.

        Raises:
            ConstructionError: If no value was supplied or the name is empty.

        """
        if self._value is _MISSING:
            msg = "Leaf requires a value; call .value(...) before .build()"
            raise ConstructionError(msg)
        return Node(name=_check_name(self._name), value=self._value)


def leaf(value: T, name: str = LEAF_PLACEHOLDER) -> Node[T]:
    """Build a leaf node in one call."""
    return Leaf().name(name).value(value).build()
