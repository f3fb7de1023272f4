"""Type-sensitive size semantics shared by the size-class rules.

The same rule means different things depending on what is measured:
``max:10`` caps a number at 10 when the attribute is declared numeric, a
file at 10 kilobytes, and anything else at 10 characters.
"""

from typing import Any, Collection, Mapping

from ..utils.files import File
from .context import ValidationContext
from .values import Number, to_number, to_text

NUMERIC_RULES = frozenset({"Numeric", "Integer"})
SIZE_RULES = frozenset({"Size", "Between", "Min", "Max"})


def get_size(attribute: str, value: Any, context: ValidationContext) -> Number:
    """Computes the magnitude the size-class rules compare against.

    Args:
        attribute (str): The attribute being validated.
        value (Any): The attribute's value.
        context (ValidationContext): The current pass, used to look up the
            attribute's declared rules.

    Returns:
        Number: The number itself for numeric attributes, kilobytes for
        files, the element count for lists and the character length for
        everything else.
    """
    if context.has_rule(attribute, NUMERIC_RULES):
        number = to_number(value)
        if number is not None:
            return number

    if isinstance(value, File):
        return value.size_bytes() / 1024

    if isinstance(value, (list, tuple)):
        return len(value)

    if isinstance(value, (bytes, bytearray)):
        return len(value)

    return len(to_text(value))


def size_type(attribute: str, rules: Collection[str], files: Mapping[str, Any]) -> str:
    """Classifies an attribute for picking a size message line.

    Args:
        attribute (str): The attribute being validated.
        rules (Collection[str]): The names of the attribute's rules.
        files (Mapping[str, Any]): The file values of the current pass.

    Returns:
        str: ``"numeric"``, ``"file"`` or ``"string"``.
    """
    if NUMERIC_RULES.intersection(rules):
        return "numeric"
    if attribute in files:
        return "file"
    return "string"
