"""Helpers for working with parsed JSON values."""

import hashlib
import json
from decimal import Decimal
from typing import Any, Dict, List, Union

from schemacheck.constants import ARRAY, BOOLEAN, INTEGER, NULL, NUMBER, OBJECT, STRING

JsonValue = Union[None, bool, int, float, str, List[Any], Dict[str, Any]]


def node_type(value: Any) -> str:
    """
    Get the JSON type name of a parsed JSON value.

    Python booleans are never numbers, Python ints are integers and
    Python floats are numbers even when they have no fractional part.

    Args:
        value (Any): The parsed JSON value.

    Returns:
        str: One of the seven JSON type names.

    Raises:
        TypeError: If the value is not part of the JSON data model.
    """
    if value is None:
        return NULL
    if isinstance(value, bool):
        return BOOLEAN
    if isinstance(value, int):
        return INTEGER
    if isinstance(value, (float, Decimal)):
        return NUMBER
    if isinstance(value, str):
        return STRING
    if isinstance(value, (list, tuple)):
        return ARRAY
    if isinstance(value, dict):
        return OBJECT
    raise TypeError(f"Value of type {type(value).__name__} is not a JSON value")


def is_number(value: Any) -> bool:
    """ True if the value is a JSON integer or number. """
    return isinstance(value, (int, float, Decimal)) and not isinstance(value, bool)


def is_integral(value: Any) -> bool:
    """ True if the value is a number without a fractional part. """
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    if isinstance(value, float):
        return value.is_integer()
    if isinstance(value, Decimal):
        return value == value.to_integral_value()
    return False


def to_decimal(value: Union[int, float, Decimal]) -> Decimal:
    """ Convert a JSON number to an exact decimal, the way it was written. """
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def json_equals(first: Any, second: Any) -> bool:
    """
    Structural equality of two JSON values.

    Numbers compare by mathematical value (1 equals 1.0), but a boolean
    never equals a number. Object member order does not matter.
    """
    if is_number(first) and is_number(second):
        return to_decimal(first) == to_decimal(second)
    first_type = node_type(first)
    if first_type != node_type(second):
        return False
    if first_type == ARRAY:
        return len(first) == len(second) and all(json_equals(a, b) for a, b in zip(first, second))
    if first_type == OBJECT:
        if set(first.keys()) != set(second.keys()):
            return False
        return all(json_equals(first[key], second[key]) for key in first)
    return first == second


def normalize(value: Any) -> Any:
    """
    Normalize a JSON value so that structurally equal values serialize identically.

    Integral floats become ints, tuples become lists.
    """
    if isinstance(value, bool) or value is None or isinstance(value, str):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    if isinstance(value, dict):
        return {key: normalize(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [normalize(item) for item in value]
    return value


def canonical_json(value: Any) -> str:
    """ Serialize a JSON value with sorted keys and no insignificant whitespace. """
    return json.dumps(normalize(value), sort_keys=True, separators=(',', ':'), ensure_ascii=False)


def get_tree_hash(value: Any) -> str:
    """
    Generate a hash from a JSON value.

    Args:
        value (Any): The JSON value to hash.

    Returns:
        str: The hex encoded SHA-256 of the canonical serialization.
    """
    s = canonical_json(value).encode('utf-8')
    return hashlib.sha256(s).hexdigest()


def unique_items(items: List[Any]) -> bool:
    """ True if no two elements of the list are structurally equal. """
    seen: Dict[str, Any] = {}
    for item in items:
        key = canonical_json(item)
        if key in seen:
            return False
        seen[key] = item
    return True
