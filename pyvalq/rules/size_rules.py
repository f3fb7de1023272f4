"""Rules that compare the size of a value.

What "size" means depends on the attribute: the number itself when the
attribute is also declared ``numeric`` or ``integer``, kilobytes for files,
and the character length otherwise (see `pyvalq.core.size`).
"""
from typing import Any, Callable, Dict, Sequence

from ..core.base_rule import BaseRule
from ..core.context import ValidationContext
from ..core.exceptions import ConfigurationError
from ..core.size import get_size
from ..core.values import Number, to_number


def _bound(rule: str, parameter: str) -> Number:
    """Reads a numeric rule parameter.

    Raises:
        ConfigurationError: If the parameter is not a number.
    """
    number = to_number(parameter)
    if number is None:
        raise ConfigurationError(f"Validation rule {rule} requires numeric parameters, got '{parameter}'.")
    return number


class SizeRule(BaseRule):
    name = "Size"
    description = "The size of the value must equal the given size."
    min_parameters = 1

    def passes(self, attribute: str, value: Any, parameters: Sequence[str], context: ValidationContext) -> bool:
        return get_size(attribute, value, context) == _bound(self.name, parameters[0])

    def placeholders(self, parameters: Sequence[str], label: Callable[[str], str]) -> Dict[str, str]:
        return {":size": parameters[0]}


class BetweenRule(BaseRule):
    """Inclusive on both ends."""

    name = "Between"
    description = "The size of the value must be between a minimum and a maximum."
    min_parameters = 2

    def passes(self, attribute: str, value: Any, parameters: Sequence[str], context: ValidationContext) -> bool:
        size = get_size(attribute, value, context)
        return _bound(self.name, parameters[0]) <= size <= _bound(self.name, parameters[1])

    def placeholders(self, parameters: Sequence[str], label: Callable[[str], str]) -> Dict[str, str]:
        return {":min": parameters[0], ":max": parameters[1]}


class MinRule(BaseRule):
    name = "Min"
    description = "The size of the value must be at least the given minimum."
    min_parameters = 1

    def passes(self, attribute: str, value: Any, parameters: Sequence[str], context: ValidationContext) -> bool:
        return get_size(attribute, value, context) >= _bound(self.name, parameters[0])

    def placeholders(self, parameters: Sequence[str], label: Callable[[str], str]) -> Dict[str, str]:
        return {":min": parameters[0]}


class MaxRule(BaseRule):
    name = "Max"
    description = "The size of the value may not exceed the given maximum."
    min_parameters = 1

    def passes(self, attribute: str, value: Any, parameters: Sequence[str], context: ValidationContext) -> bool:
        return get_size(attribute, value, context) <= _bound(self.name, parameters[0])

    def placeholders(self, parameters: Sequence[str], label: Callable[[str], str]) -> Dict[str, str]:
        return {":max": parameters[0]}
