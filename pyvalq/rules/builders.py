"""Objects that build rule tokens in code.

Builders serialize to the textual rule grammar through ``str()``, so they
can be mixed into rule lists::

    rules = {
        "state": ["required", In(["draft", "published"])],
        "reason": [RequiredIf(lambda: needs_reason)],
    }
"""
from typing import Any, Callable, Iterable, Union


class In:
    """Builds an ``in`` rule, quoting each value so it may contain commas.

    Quotes inside a value are escaped by doubling them, which is the form
    `pyvalq.core.parser.parse_rule` reads back.
    """

    rule = "in"

    def __init__(self, values: Iterable[Any]) -> None:
        self.values = list(values)

    def __str__(self) -> str:
        quoted = ['"' + str(value).replace('"', '""') + '"' for value in self.values]
        return f"{self.rule}:{','.join(quoted)}"

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.values!r})"


class NotIn(In):
    rule = "not_in"


class RequiredIf:
    """Builds a ``required`` rule that only applies when a condition holds.

    Args:
        condition (Union[bool, Callable[[], Any]]): A boolean, or a
            zero-argument callable evaluated each time the rule is
            serialized.

    Raises:
        TypeError: If the condition is neither a boolean nor callable.
    """

    def __init__(self, condition: Union[bool, Callable[[], Any]]) -> None:
        if isinstance(condition, str) or not (isinstance(condition, bool) or callable(condition)):
            raise TypeError("Condition type must be 'callable' or 'bool'.")
        self.condition = condition

    def __str__(self) -> str:
        if callable(self.condition):
            return "required" if self.condition() else ""
        return "required" if self.condition else ""

    def __repr__(self) -> str:
        return f"RequiredIf({self.condition!r})"
