"""JSON text for arbitrarily deep documents.

Expression trees nest one JSON object per level, and a running total built in
a loop easily goes several hundred levels deep. Both directions walk the text
with an explicit stack so that nesting depth is bounded by memory only.
Scalars go through the standard `json` module.

Non-finite floats are written as the ``NaN``, ``Infinity`` and ``-Infinity``
constants that `json` also reads back.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Iterator

_WHITESPACE = re.compile(r"[ \t\n\r]*")
_SCALARS = json.JSONDecoder()


# =============================================================================
# Encoding
# =============================================================================


@dataclass(slots=True)
class _OpenContainer:
    entries: Iterator[tuple[str | None, Any]]
    closer: str
    first: bool = True


def dumps(data: Any, indent: int | None = None) -> str:
    """Encode JSON-compatible data.

    The layout matches `json.dumps` with the same ``indent``, except that the
    compact form (``indent=None``) uses no spaces after separators.

    Raises:
        TypeError: If the data contains a value with no JSON form, or a
            mapping key that is not a string.

    """
    key_separator = ":" if indent is None else ": "
    parts: list[str] = []
    stack: list[_OpenContainer] = []

    def newline(level: int) -> str:
        return "" if indent is None else "\n" + " " * (indent * level)

    def emit(value: Any) -> None:
        if isinstance(value, dict):
            if not value:
                parts.append("{}")
                return
            parts.append("{")
            stack.append(_OpenContainer(iter(value.items()), "}"))
        elif isinstance(value, (list, tuple)):
            if not value:
                parts.append("[]")
                return
            parts.append("[")
            stack.append(_OpenContainer(((None, item) for item in value), "]"))
        else:
            parts.append(json.dumps(value))

    emit(data)
    while stack:
        container = stack[-1]
        entry = next(container.entries, None)
        if entry is None:
            stack.pop()
            parts.append(newline(len(stack)) + container.closer)
            continue

        if not container.first:
            parts.append(",")
        container.first = False
        parts.append(newline(len(stack)))

        key, value = entry
        if key is not None:
            if not isinstance(key, str):
                msg = f"JSON object keys must be strings, not {type(key).__name__}"
                raise TypeError(msg)
            parts.append(json.dumps(key) + key_separator)
        emit(value)

    return "".join(parts)


# =============================================================================
# Decoding
# =============================================================================


def _skip(text: str, pos: int) -> int:
    return _WHITESPACE.match(text, pos).end()  # type: ignore[union-attr]


def _read_key(text: str, pos: int) -> tuple[str, int]:
    if not text.startswith('"', pos):
        msg = "Expecting property name enclosed in double quotes"
        raise json.JSONDecodeError(msg, text, pos)
    key, pos = _SCALARS.raw_decode(text, pos)
    pos = _skip(text, pos)
    if not text.startswith(":", pos):
        msg = "Expecting ':' delimiter"
        raise json.JSONDecodeError(msg, text, pos)
    return key, _skip(text, pos + 1)


def loads(text: str | bytes) -> Any:
    """Decode JSON text.

    Accepts everything `json.loads` accepts, including the non-finite float
    constants.

    Raises:
        json.JSONDecodeError: If the text is not valid JSON.

    """
    if isinstance(text, (bytes, bytearray)):
        text = text.decode(json.detect_encoding(text), "surrogatepass")

    # Each entry is an open container and, for objects, the key being filled
    stack: list[list[Any]] = []
    pos = _skip(text, 0)
    while True:
        char = text[pos : pos + 1]
        if char in ("{", "["):
            closer = "}" if char == "{" else "]"
            pos = _skip(text, pos + 1)
            if text.startswith(closer, pos):
                value: Any = {} if char == "{" else []
                pos += 1
            else:
                if char == "{":
                    key, pos = _read_key(text, pos)
                    stack.append([{}, key])
                else:
                    stack.append([[], None])
                continue
        else:
            value, pos = _SCALARS.raw_decode(text, pos)

        # Attach the finished value and close every container it completes
        while stack:
            container, key = stack[-1]
            if isinstance(container, dict):
                container[key] = value
            else:
                container.append(value)

            pos = _skip(text, pos)
            char = text[pos : pos + 1]
            if char == ",":
                pos = _skip(text, pos + 1)
                if isinstance(container, dict):
                    stack[-1][1], pos = _read_key(text, pos)
                break

            closer = "}" if isinstance(container, dict) else "]"
            if char != closer:
                msg = f"Expecting ',' or '{closer}' delimiter"
                raise json.JSONDecodeError(msg, text, pos)
            stack.pop()
            value = container
            pos += 1
        else:
            pos = _skip(text, pos)
            if pos != len(text):
                msg = "Extra data"
                raise json.JSONDecodeError(msg, text, pos)
            return value
