"""Rules that decide whether a value was provided at all.

Both rules here are implicit: they run even when the attribute is missing
or blank, because reporting exactly that is their purpose.
"""
from typing import Any, Sequence

from ..core.base_rule import BaseRule
from ..core.context import ValidationContext
from ..core.values import is_present, loosely_equal


class RequiredRule(BaseRule):
    """Fails for missing, None, blank and empty-file values."""

    name = "Required"
    description = "The value must be present and not blank."
    implicit = True

    def passes(self, attribute: str, value: Any, parameters: Sequence[str], context: ValidationContext) -> bool:
        return is_present(value)


class AcceptedRule(BaseRule):
    """Passes only for ``"yes"`` or ``"1"``, e.g. a terms-of-service checkbox."""

    name = "Accepted"
    description = "The value must be \"yes\" or \"1\"."
    implicit = True

    ACCEPTABLE = ("yes", "1")

    def passes(self, attribute: str, value: Any, parameters: Sequence[str], context: ValidationContext) -> bool:
        if not is_present(value) or isinstance(value, (list, tuple, dict)):
            return False
        return any(loosely_equal(value, accepted) for accepted in self.ACCEPTABLE)
