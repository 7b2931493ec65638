"""N-ary folds over nodes.

Each fold records every operand as a direct child of a single result node,
so ``sum_all(a, b, c)`` is one level deep where ``a + b + c`` would be two.
"""

from __future__ import annotations

import logging
import operator
from functools import reduce
from typing import TYPE_CHECKING, Any

from ._node import Node

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

logger = logging.getLogger(__name__)

SUM_LABEL = "(sum)"
PROD_LABEL = "(prod)"
MIN_LABEL = "(min)"
MAX_LABEL = "(max)"


def _fold(name: str, combine: Callable[[Sequence[Any]], Any], nodes: tuple[Node[Any], ...]) -> Node[Any]:
    if not nodes:
        msg = f"{name} requires at least one node"
        raise ValueError(msg)
    for node in nodes:
        if not isinstance(node, Node):
            msg = f"{name} operands must be Node instances, got: {type(node).__name__}"
            raise TypeError(msg)

    value = combine([node.value for node in nodes])
    logger.debug("Folded %d nodes into %s -> %r", len(nodes), name, value)
    return Node(name=name, value=value, children=nodes)


def sum_all(*nodes: Node[Any]) -> Node[Any]:
    """Add up the values of all nodes from left to right."""
    return _fold(SUM_LABEL, lambda values: reduce(operator.add, values), nodes)


def prod_all(*nodes: Node[Any]) -> Node[Any]:
    """Multiply the values of all nodes from left to right."""
    return _fold(PROD_LABEL, lambda values: reduce(operator.mul, values), nodes)


def minimum(*nodes: Node[Any]) -> Node[Any]:
    """Take the smallest value. The first of equal values wins."""
    return _fold(MIN_LABEL, min, nodes)


def maximum(*nodes: Node[Any]) -> Node[Any]:
    """Take the largest value. The first of equal values wins."""
    return _fold(MAX_LABEL, max, nodes)
