"""Rules backed by the presence verifier.

Both rules take ``table[,column]`` where the column defaults to the
attribute name. ``unique`` additionally accepts an id to ignore and the
name of the id column, for validating updates of an existing record::

    email: unique:users,email,42,user_id
"""
from typing import Any, Sequence

from ..core.base_rule import BaseRule
from ..core.context import ValidationContext


def _column(attribute: str, parameters: Sequence[str]) -> str:
    return parameters[1] if len(parameters) > 1 and parameters[1] else attribute


class UniqueRule(BaseRule):
    name = "Unique"
    description = "The value must not exist yet in the given table."
    min_parameters = 1

    def passes(self, attribute: str, value: Any, parameters: Sequence[str], context: ValidationContext) -> bool:
        verifier = context.presence_verifier
        table, column = parameters[0], _column(attribute, parameters)

        exclude_id = parameters[2] if len(parameters) > 2 and parameters[2] else None
        id_column = parameters[3] if len(parameters) > 3 and parameters[3] else "id"

        return verifier.get_count(table, column, value, exclude_id, id_column) == 0


class ExistsRule(BaseRule):
    """Every element of a list value must exist."""

    name = "Exists"
    description = "The value must exist in the given table."
    min_parameters = 1

    def passes(self, attribute: str, value: Any, parameters: Sequence[str], context: ValidationContext) -> bool:
        verifier = context.presence_verifier
        table, column = parameters[0], _column(attribute, parameters)

        if isinstance(value, (list, tuple)):
            return verifier.get_multi_count(table, column, list(value)) >= len(value)

        return verifier.get_count(table, column, value) >= 1
