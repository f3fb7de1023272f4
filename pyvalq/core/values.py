"""Helpers for interpreting loosely-typed input values.

Input data arrives as strings as often as it arrives as numbers, so rules
compare and measure values the way a form submission would be read: ``"3"``
is numeric, and ``"3"`` equals ``3``.
"""

import re
from typing import Any, Optional, Union

from ..utils.files import File

Number = Union[int, float]

_NUMERIC = re.compile(r"^\s*[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?\s*$")
_INTEGER = re.compile(r"^\s*[+-]?\d+\s*$")


def is_numeric(value: Any) -> bool:
    """Checks whether a value is a number or a numeric string."""
    if isinstance(value, bool):
        return False
    if isinstance(value, (int, float)):
        return True
    return isinstance(value, str) and bool(_NUMERIC.match(value))


def is_integer(value: Any) -> bool:
    """Checks whether a value is an integer or an integer string."""
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    if isinstance(value, float):
        return value.is_integer()
    return isinstance(value, str) and bool(_INTEGER.match(value))


def to_number(value: Any) -> Optional[Number]:
    """Converts a numeric value to an ``int`` or ``float``, or returns None."""
    if not is_numeric(value):
        return None
    if isinstance(value, (int, float)):
        return value
    if _INTEGER.match(value):
        return int(value)
    return float(value)


def to_text(value: Any) -> str:
    """Renders a scalar the way it would appear in a submitted form."""
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def loosely_equal(left: Any, right: Any) -> bool:
    """Compares two values numerically when both are numeric, else as text."""
    if is_numeric(left) and is_numeric(right):
        return to_number(left) == to_number(right)
    return to_text(left) == to_text(right)


def is_present(value: Any) -> bool:
    """Checks whether a value counts as provided.

    Missing values, None, blank strings and file fields submitted without a
    file are not present. Everything else is, including ``"0"`` and ``0``.
    """
    if value is None:
        return False
    if isinstance(value, str) and value.strip() == "":
        return False
    if isinstance(value, File):
        return value.path() != ""
    return True
