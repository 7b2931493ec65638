import logging
import tomllib
from collections.abc import Callable, Generator, Sequence
from pathlib import Path
from typing import TYPE_CHECKING, Any, TypeVar

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, SerializerFunctionWrapHandler, model_serializer

from ._jsontext import dumps, loads
from ._node import Node
from ._quantity import render_value, unit_of

if TYPE_CHECKING:
    from ._quantity import Decoder

logger = logging.getLogger(__name__)

T = TypeVar("T")


# =============================================================================
# Document Model
# =============================================================================


class ExprDocument(BaseModel):
    """Structured rendering of an expression tree.

    The serialized form is::

        {
          "label": "(add)",
          "value": 5,
          "unit": "dimensionless",
          "subexpr": [{"label": "a", ...}, {"label": "b", ...}]
        }

    Keys always appear in that order. ``subexpr`` is left out for leaves.

    Documents can be nested far deeper than pydantic's own serializer and JSON
    parser allow, so `to_dict`, `to_json` and `document_from_dict` build and
    read the nesting one entry at a time. Only the flat fields of each entry
    go through pydantic validation.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", ser_json_inf_nan="constants")

    label: str = Field(min_length=1)
    value: Any
    unit: str
    subexpr: list["ExprDocument"] | None = None

    @model_serializer(mode="wrap")
    def _omit_leaf_subexpr(self, handler: SerializerFunctionWrapHandler) -> dict[str, Any]:
        data = handler(self)
        if self.subexpr is None:
            data.pop("subexpr", None)
        return data

    @property
    def is_leaf(self) -> bool:
        """Check if this document describes a leaf."""
        return not self.subexpr

    def to_dict(self) -> dict[str, Any]:
        """Dump as plain JSON-compatible data."""
        built: dict[int, dict[str, Any]] = {}
        for document in _post_order(self, _document_children):
            data: dict[str, Any] = {"label": document.label, "value": document.value, "unit": document.unit}
            if document.subexpr is not None:
                data["subexpr"] = [built[id(child)] for child in document.subexpr]
            built[id(document)] = data
        return built[id(self)]

    def to_json(self, indent: int | None = None) -> str:
        """Dump as JSON text. ``indent=None`` gives the compact form."""
        return dumps(self.to_dict(), indent=indent)


def document_schema() -> dict[str, Any]:
    """Return the JSON schema of `ExprDocument`."""
    return ExprDocument.model_json_schema()


# =============================================================================
# Tree Walking
# =============================================================================


def _post_order(root: T, children_of: Callable[[T], Sequence[T]]) -> Generator[T]:
    """Yield every item of a tree after all of its children."""
    stack: list[tuple[T, bool]] = [(root, False)]
    while stack:
        item, expanded = stack.pop()
        if expanded:
            yield item
            continue
        stack.append((item, True))
        stack.extend((child, False) for child in reversed(children_of(item)))


def _node_children(node: Node[Any]) -> Sequence[Node[Any]]:
    return node.children


def _document_children(document: ExprDocument) -> Sequence[ExprDocument]:
    return document.subexpr or ()


def _entry_children(entry: Any) -> Sequence[Any]:
    if isinstance(entry, dict) and isinstance(entry.get("subexpr"), list):
        return entry["subexpr"]
    return ()


# =============================================================================
# Node <-> Document
# =============================================================================


def to_document(node: Node[Any]) -> ExprDocument:
    """Render a node and its descendants as an `ExprDocument`."""
    built: dict[int, ExprDocument] = {}
    for item in _post_order(node, _node_children):
        built[id(item)] = ExprDocument(
            label=item.name,
            value=render_value(item.value),
            unit=unit_of(item.value),
            subexpr=[built[id(child)] for child in item.children] if item.children else None,
        )
    return built[id(node)]


def from_document(document: ExprDocument, decode: "Decoder | None" = None) -> Node[Any]:
    """Rebuild a node tree from a document.

    Args:
        document: The document to rebuild.
        decode: Optional callable mapping each stored ``(value, unit)`` pair to
            a payload, e.g. `cherries.quantity_decoder`. Without it the stored
            value becomes the payload and the unit is dropped.

    """
    built: dict[int, Node[Any]] = {}
    for item in _post_order(document, _document_children):
        value = item.value if decode is None else decode(item.value, item.unit)
        children = tuple(built[id(child)] for child in item.subexpr or ())
        built[id(item)] = Node(name=item.label, value=value, children=children)
    return built[id(document)]


def document_from_dict(data: Any) -> ExprDocument:
    """Validate plain data (e.g. parsed JSON or TOML) as a document.

    Raises:
        pydantic.ValidationError: If any entry is not a valid document.

    """
    built: dict[int, ExprDocument] = {}
    for entry in _post_order(data, _entry_children):
        children = _entry_children(entry)
        fields = {**entry, "subexpr": [built[id(child)] for child in children]} if children else entry
        built[id(entry)] = ExprDocument.model_validate(fields)
    return built[id(data)]


def document_from_json(text: str | bytes) -> ExprDocument:
    """Parse JSON text as a document.

    Raises:
        json.JSONDecodeError: If the text is not valid JSON.
        pydantic.ValidationError: If any entry is not a valid document.

    """
    return document_from_dict(loads(text))


def _as_document(source: Node[Any] | ExprDocument) -> ExprDocument:
    if isinstance(source, ExprDocument):
        return source
    return to_document(source)


# =============================================================================
# Persistence
# =============================================================================


def export_to_json(source: Node[Any] | ExprDocument, output_path: Path, indent: int | None = 2) -> None:
    """Write a node (or an already rendered document) to a JSON file."""
    document = _as_document(source)
    output_path.write_text(document.to_json(indent=indent) + "\n", encoding="utf-8")
    logger.debug(f"Exported '{document.label}' to {output_path}")


def export_to_toml(source: Node[Any] | ExprDocument, output_path: Path) -> None:
    """Write a node (or an already rendered document) to a TOML file.

    Children are written as nested arrays of tables (``[[subexpr]]``).

    Raises:
        TypeError: If a value has no TOML representation (e.g. ``None``).

    """
    document = _as_document(source)
    with output_path.open("wb") as f:
        tomli_w.dump(document.to_dict(), f)
    logger.debug(f"Exported '{document.label}' to {output_path}")


def export_document(source: Node[Any] | ExprDocument, output_path: Path, indent: int | None = 2) -> None:
    """Write a document, choosing the format from the file suffix.

    Raises:
        ValueError: If the suffix is neither ``.json`` nor ``.toml``.

    """
    match output_path.suffix.lower():
        case ".json":
            export_to_json(source, output_path, indent=indent)
        case ".toml":
            export_to_toml(source, output_path)
        case suffix:
            msg = f"Unsupported document format '{suffix}' for {output_path}; expected .json or .toml"
            raise ValueError(msg)


def load_document(input_path: Path) -> ExprDocument:
    """Load a document from a JSON or TOML file.

    Raises:
        ValueError: If the suffix is neither ``.json`` nor ``.toml``, or the
            file is not valid JSON or TOML.
        pydantic.ValidationError: If the file content is not a valid document.

    """
    match input_path.suffix.lower():
        case ".json":
            document = document_from_json(input_path.read_bytes())
        case ".toml":
            with input_path.open("rb") as f:
                data = tomllib.load(f)
            document = document_from_dict(data)
        case suffix:
            msg = f"Unsupported document format '{suffix}' for {input_path}; expected .json or .toml"
            raise ValueError(msg)

    logger.debug(f"Loaded document '{document.label}' from {input_path}")
    return document


def load_node(input_path: Path, decode: "Decoder | None" = None) -> Node[Any]:
    """Load a document file and rebuild its node tree."""
    return from_document(load_document(input_path), decode=decode)
