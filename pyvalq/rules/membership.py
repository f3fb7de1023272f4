"""Rules that check a value against a list of allowed or forbidden values."""
from typing import Any, Callable, Dict, Sequence

from ..core.base_rule import BaseRule
from ..core.context import ValidationContext
from ..core.values import loosely_equal


def _is_member(value: Any, parameters: Sequence[str]) -> bool:
    return any(loosely_equal(value, parameter) for parameter in parameters)


def _values(parameters: Sequence[str]) -> Dict[str, str]:
    return {":values": ", ".join(parameters)}


class InRule(BaseRule):
    """The value must be one of the parameters; every element of a list must be."""

    name = "In"
    description = "The value must be one of the given values."

    def passes(self, attribute: str, value: Any, parameters: Sequence[str], context: ValidationContext) -> bool:
        if isinstance(value, (list, tuple)):
            return all(_is_member(item, parameters) for item in value)
        return _is_member(value, parameters)

    def placeholders(self, parameters: Sequence[str], label: Callable[[str], str]) -> Dict[str, str]:
        return _values(parameters)


class NotInRule(BaseRule):
    """The value must be none of the parameters; no element of a list may be."""

    name = "NotIn"
    description = "The value must not be one of the given values."

    def passes(self, attribute: str, value: Any, parameters: Sequence[str], context: ValidationContext) -> bool:
        if isinstance(value, (list, tuple)):
            return not any(_is_member(item, parameters) for item in value)
        return not _is_member(value, parameters)

    def placeholders(self, parameters: Sequence[str], label: Callable[[str], str]) -> Dict[str, str]:
        return _values(parameters)
