"""Capabilities a payload value needs to take part in an expression tree.

Payloads are opaque to the tree. Arithmetic is delegated to the payload type
itself; this module only answers the questions serialization has to ask:

- Does the value carry a unit, and which one?
- What is its JSON-native form?
- How is a stored ``(value, unit)`` pair turned back into a payload?

Unit-carrying values are recognised structurally: anything exposing both
``magnitude`` and ``units`` (the interface of ``pint.Quantity``) is a quantity.
"""

from __future__ import annotations

from collections.abc import Callable
from decimal import Decimal
from fractions import Fraction
from typing import Any, Protocol, runtime_checkable

DIMENSIONLESS = "dimensionless"

Decoder = Callable[[Any, str], Any]


@runtime_checkable
class Quantity(Protocol):
    """A value with a magnitude and a unit."""

    @property
    def magnitude(self) -> Any: ...

    @property
    def units(self) -> Any: ...


class QuantityFactory(Protocol):
    """Anything that can build a quantity from a magnitude and a unit string."""

    def Quantity(self, value: Any, units: str) -> Any: ...  # noqa: N802


def is_quantity(value: Any) -> bool:
    """Check whether a value carries unit metadata."""
    return isinstance(value, Quantity)


def unit_of(value: Any) -> str:
    """Return the unit string of a value.

    Values without unit metadata, and quantities whose unit renders as an
    empty string, are reported as ``"dimensionless"``.
    """
    if not is_quantity(value):
        return DIMENSIONLESS
    unit = str(value.units)
    return unit or DIMENSIONLESS


def magnitude_of(value: Any) -> Any:
    """Strip the unit from a quantity. Other values are returned as-is."""
    if is_quantity(value):
        return value.magnitude
    return value


def _render_exact_number(value: Decimal | Fraction) -> int | float | str:
    """Render as an int or float when the JSON number reads back as the same value."""
    if isinstance(value, Decimal) and not value.is_finite():
        return str(value)
    if value == int(value):
        return int(value)
    as_float = float(value)
    restored = Decimal(repr(as_float)) if isinstance(value, Decimal) else Fraction(as_float)
    if restored == value:
        return as_float
    return str(value)


def render_value(value: Any) -> Any:  # noqa: PLR0911
    """Convert a payload to a JSON-native value.

    Args:
        value: The payload of a node.

    Returns:
        The magnitude for quantities, the value itself for JSON scalars, and a
        recursively rendered structure for containers. Pydantic models are
        dumped in JSON mode and numpy values go through ``tolist()``.
        `Decimal` and `Fraction` values become numbers when no precision is
        lost (``Decimal("1.10")`` gives ``1.1``) and text otherwise
        (``Fraction(1, 3)`` gives ``"1/3"``). Anything else is rendered with
        ``str``.

    """
    # Import BaseModel locally to keep this module free of import cycles
    from pydantic import BaseModel  # noqa: PLC0415

    if is_quantity(value):
        return render_value(value.magnitude)
    if hasattr(value, "tolist"):
        return value.tolist()
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    if isinstance(value, (Decimal, Fraction)):
        return _render_exact_number(value)
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if isinstance(value, dict):
        return {str(k): render_value(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [render_value(item) for item in value]
    return str(value)


def quantity_decoder(registry: QuantityFactory) -> Decoder:
    """Build a decoder that restores unit-carrying payloads.

    Args:
        registry: A unit registry exposing ``Quantity(value, units)``,
            e.g. ``pint.UnitRegistry()``.

    Returns:
        A callable mapping a stored ``(value, unit)`` pair to a payload.
        Dimensionless entries are returned as plain values.

    Example:
        ureg = pint.UnitRegistry()
        node = Node.from_json(text, decode=quantity_decoder(ureg))

    """

    def decode(value: Any, unit: str) -> Any:
        if unit == DIMENSIONLESS:
            return value
        return registry.Quantity(value, unit)

    return decode
