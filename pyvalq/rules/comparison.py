"""Rules that compare an attribute against another attribute."""
from typing import Any, Callable, Dict, Sequence

from ..core.base_rule import BaseRule
from ..core.context import ValidationContext
from ..core.values import loosely_equal


class SameRule(BaseRule):
    """The value must equal the value of another attribute."""

    name = "Same"
    description = "The value must match another field."
    min_parameters = 1

    def passes(self, attribute: str, value: Any, parameters: Sequence[str], context: ValidationContext) -> bool:
        other = parameters[0]
        return other in context.data and loosely_equal(value, context.data[other])

    def placeholders(self, parameters: Sequence[str], label: Callable[[str], str]) -> Dict[str, str]:
        return {":other": label(parameters[0])}


class DifferentRule(BaseRule):
    """The value must differ from the value of another attribute.

    A missing other attribute fails the rule rather than passing it.
    """

    name = "Different"
    description = "The value must differ from another field."
    min_parameters = 1

    def passes(self, attribute: str, value: Any, parameters: Sequence[str], context: ValidationContext) -> bool:
        other = parameters[0]
        return other in context.data and not loosely_equal(value, context.data[other])

    def placeholders(self, parameters: Sequence[str], label: Callable[[str], str]) -> Dict[str, str]:
        return {":other": label(parameters[0])}


class ConfirmedRule(SameRule):
    """The value must match ``{attribute}_confirmation``, e.g. a repeated password."""

    name = "Confirmed"
    description = "The value must match its _confirmation field."
    min_parameters = 0

    def passes(self, attribute: str, value: Any, parameters: Sequence[str], context: ValidationContext) -> bool:
        return super().passes(attribute, value, [f"{attribute}_confirmation"], context)

    def placeholders(self, parameters: Sequence[str], label: Callable[[str], str]) -> Dict[str, str]:
        return {}
