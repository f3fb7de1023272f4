"""Rules that check a value is a number."""
from typing import Any, Sequence

from ..core.base_rule import BaseRule
from ..core.context import ValidationContext
from ..core.values import is_integer, is_numeric


class NumericRule(BaseRule):
    name = "Numeric"
    description = "The value must be a number."

    def passes(self, attribute: str, value: Any, parameters: Sequence[str], context: ValidationContext) -> bool:
        return is_numeric(value)


class IntegerRule(BaseRule):
    name = "Integer"
    description = "The value must be an integer."

    def passes(self, attribute: str, value: Any, parameters: Sequence[str], context: ValidationContext) -> bool:
        return is_integer(value)
