"""
Schema inference over a parsed JSON value.

Walks a value tree and flattens it into a mapping of field path to the
primitive types observed there, keeping one example value per type.
"""

from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple

TYPE_STRING = "string"
TYPE_NUMBER = "number"
TYPE_NUMBER_INT = "number_int"
TYPE_NUMBER_FLOAT = "number_float"
TYPE_BOOL = "bool"
TYPE_UNKNOWN = "unknown"

# kind -> example text
SchemaEntry = Dict[str, str]
# field path -> entry
Schema = Dict[str, SchemaEntry]

_DIGITS = frozenset("0123456789")


class JsonNumber(str):
    """A JSON number kept as the exact text it had in the source document."""

    def __repr__(self) -> str:
        return f"JsonNumber({str.__repr__(self)})"


def merge_entry(existing: Optional[SchemaEntry], kind: str, example: str) -> SchemaEntry:
    """
    Merge one observation into the entry already stored for a field path.

    The latest example of a kind always wins. A null observation is dropped
    once the field has any real type, and ``number_int`` is dropped for good
    as soon as the field has seen a ``number_float``.
    """
    entry = dict(existing) if existing else {}
    entry[kind] = example

    if TYPE_UNKNOWN in entry and len(entry) > 1:
        del entry[TYPE_UNKNOWN]

    if TYPE_NUMBER_FLOAT in entry or kind == TYPE_NUMBER_FLOAT:
        entry.pop(TYPE_NUMBER_INT, None)

    return entry


def is_integral(text: str) -> bool:
    """True for an optional sign followed by decimal digits only."""
    if text[:1] in ("+", "-"):
        text = text[1:]
    return bool(text) and all(c in _DIGITS for c in text)


def _member_path(path: str, key: str, top_level: bool) -> str:
    # only members of the root drop the dot, and only without a prefix
    if top_level and not path:
        return key
    return f"{path}.{key}"


def _classify_number(text: str, categorize_numeric: bool) -> Tuple[str, str]:
    if not categorize_numeric:
        return TYPE_NUMBER, text
    if is_integral(text):
        return TYPE_NUMBER_INT, text
    return TYPE_NUMBER_FLOAT, text


def _classify(value: Any, categorize_numeric: bool) -> Optional[Tuple[str, str]]:
    """Return ``(kind, example)`` for a scalar, or None for containers."""
    if isinstance(value, JsonNumber):
        return _classify_number(str(value), categorize_numeric)
    if isinstance(value, str):
        return TYPE_STRING, value
    if value is None:
        return TYPE_UNKNOWN, "null"
    # bool is an int subclass, check it first
    if isinstance(value, bool):
        return TYPE_BOOL, "true" if value else "false"
    if isinstance(value, (int, float, Decimal)):
        return _classify_number(str(value), categorize_numeric)
    if isinstance(value, (dict, list)):
        return None
    raise TypeError(f"Unsupported JSON value of type {type(value).__name__}")


def traverse(prefix: str, value: Any, out: Schema, categorize_numeric: bool = False) -> None:
    """
    Visit ``value`` and every descendant, merging observations into ``out``.

    Object members are written at ``<path>.<key>`` (plain ``<key>`` for
    members of the root when there is no prefix) and array elements at
    ``<path>[]``. A scalar root is written at exactly ``prefix``.
    Uses an explicit stack, so nesting depth is not bounded by the
    interpreter's recursion limit.
    """
    stack = [(prefix, value, True)]
    while stack:
        path, node, top_level = stack.pop()

        observation = _classify(node, categorize_numeric)
        if observation is not None:
            kind, example = observation
            out[path] = merge_entry(out.get(path), kind, example)
            continue

        # Children go on the stack reversed so they are visited in document order
        if isinstance(node, dict):
            children = [
                (_member_path(path, str(key), top_level), child, False)
                for key, child in node.items()
            ]
        else:
            item_path = f"{path}[]"
            children = [(item_path, child, False) for child in node]
        stack.extend(reversed(children))


def infer_schema(value: Any, prefix: str = "", categorize_numeric: bool = False) -> Schema:
    """Build a fresh schema from a single parsed document."""
    schema: Schema = {}
    traverse(prefix, value, schema, categorize_numeric)
    return schema


def sorted_fields(schema: Schema) -> List[str]:
    return sorted(schema)


def sorted_kinds(entry: SchemaEntry) -> List[str]:
    return sorted(entry)
