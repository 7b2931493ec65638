"""Validation of node values against named predicates.

A chain is started with `Node.validate` and extended with
`ValidateChain.validate`. Every predicate runs exactly once, as soon as it is
added, and a failing predicate never stops the chain: the point is to report
every violated rule in one pass. `ValidateChain.into_result` resolves the
chain into a `ValidationResult`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Generic, TypeVar

if TYPE_CHECKING:
    from collections.abc import Callable

    from ._node import Node

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class ValidationFailure:
    """Why a node was rejected.

    Attributes:
        label: Name of the validated node.
        messages: Labels of the failed predicates, in declaration order.
        tree: JSON rendering of the node at validation time. Not part of
            equality, it is there for diagnostics only.

    """

    label: str
    messages: tuple[str, ...]
    tree: str = field(default="", compare=False)

    def __str__(self) -> str:
        return f"{self.label}: {'; '.join(self.messages)}"


class NodeValidationError(Exception):
    """Raised by `ValidationResult.unwrap` when validation failed."""

    def __init__(self, failure: ValidationFailure) -> None:
        super().__init__(str(failure))
        self.failure = failure


@dataclass(frozen=True, slots=True)
class ValidationResult(Generic[T]):
    """Resolved outcome of a validation chain.

    Exactly one of `node` and `failure` is set.
    """

    node: Node[T] | None = None
    failure: ValidationFailure | None = None

    def __post_init__(self) -> None:
        if (self.node is None) == (self.failure is None):
            msg = "ValidationResult needs exactly one of node and failure"
            raise ValueError(msg)

    @property
    def ok(self) -> bool:
        """Check if every predicate held."""
        return self.failure is None

    def unwrap(self) -> Node[T]:
        """Return the validated node.

        Raises:
            NodeValidationError: If any predicate failed.

        """
        if self.node is None:
            raise NodeValidationError(self.failure)  # type: ignore[arg-type]
        return self.node


@dataclass(frozen=True, slots=True)
class ValidateChain(Generic[T]):
    """Accumulates the labels of failed predicates for one node.

    Attributes:
        node: The node under validation. Its value is what every predicate
            receives.
        failures: Labels of the predicates that returned a falsy result so far.

    """

    node: Node[T]
    failures: tuple[str, ...] = ()

    def validate(self, label: str, predicate: Callable[[T], bool]) -> ValidateChain[T]:
        """Run one more predicate against the node's value.

        Args:
            label: Message recorded when the predicate fails.
            predicate: Called once with the node's value.

        Returns:
            The chain, extended with `label` if the predicate failed.

        """
        if predicate(self.node.value):
            return self
        logger.debug("Validation of %s failed: %s", self.node.name, label)
        return replace(self, failures=(*self.failures, label))

    def into_result(self) -> ValidationResult[T]:
        """Resolve the chain.

        Returns:
            A result holding the original node if no predicate failed, or a
            `ValidationFailure` listing every failed predicate otherwise.

        """
        if not self.failures:
            return ValidationResult(node=self.node)
        return ValidationResult(
            failure=ValidationFailure(
                label=self.node.name,
                messages=self.failures,
                tree=self.node.to_json(),
            ),
        )
