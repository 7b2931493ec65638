"""Explainable computation traces."""

__all__ = [
    "DIMENSIONLESS",
    "ConstructionError",
    "ExprDocument",
    "Leaf",
    "Node",
    "NodeValidationError",
    "ValidateChain",
    "ValidationFailure",
    "ValidationResult",
    "add_nodes",
    "build_rich_tree",
    "divide_nodes",
    "document_schema",
    "export_document",
    "export_to_json",
    "export_to_toml",
    "from_document",
    "is_quantity",
    "leaf",
    "load_document",
    "load_node",
    "magnitude_of",
    "maximum",
    "minimum",
    "multiply_nodes",
    "prod_all",
    "quantity_decoder",
    "render_tree",
    "render_value",
    "subtract_nodes",
    "sum_all",
    "to_document",
    "unit_of",
]

from ._document import (
    ExprDocument,
    document_schema,
    export_document,
    export_to_json,
    export_to_toml,
    from_document,
    load_document,
    load_node,
    to_document,
)
from ._fold import maximum, minimum, prod_all, sum_all
from ._node import (
    ConstructionError,
    Leaf,
    Node,
    add_nodes,
    divide_nodes,
    leaf,
    multiply_nodes,
    subtract_nodes,
)
from ._quantity import DIMENSIONLESS, is_quantity, magnitude_of, quantity_decoder, render_value, unit_of
from ._render import build_rich_tree, render_tree
from ._validate import NodeValidationError, ValidateChain, ValidationFailure, ValidationResult
