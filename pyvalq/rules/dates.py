"""Rules that compare dates.

Both the value and the rule parameter are parsed into timestamps. Accepted
forms are ``datetime``/``date`` objects, Unix timestamps, ISO 8601 strings,
a handful of common written formats, and the words ``now``, ``today``,
``tomorrow`` and ``yesterday``. A value that cannot be parsed fails the rule.
"""
from datetime import date, datetime, time, timedelta
from typing import Any, Callable, Dict, Optional, Sequence

from ..core.base_rule import BaseRule
from ..core.context import ValidationContext
from ..core.exceptions import ConfigurationError
from ..core.values import is_numeric, to_number

_FORMATS = (
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d %H:%M",
    "%Y/%m/%d",
    "%m/%d/%Y",
    "%d %B %Y",
    "%d %b %Y",
    "%B %d, %Y",
    "%b %d, %Y",
    "%B %d %Y",
)


def _relative(word: str) -> Optional[datetime]:
    midnight = datetime.combine(date.today(), time())
    return {
        "now": datetime.now(),
        "today": midnight,
        "tomorrow": midnight + timedelta(days=1),
        "yesterday": midnight - timedelta(days=1),
    }.get(word)


def parse_timestamp(value: Any) -> Optional[float]:
    """Converts a date-like value to a POSIX timestamp, or None if it is not one."""
    if isinstance(value, datetime):
        return value.timestamp()
    if isinstance(value, date):
        return datetime.combine(value, time()).timestamp()
    if is_numeric(value) and not isinstance(value, str):
        return float(to_number(value))
    if not isinstance(value, str) or not value.strip():
        return None

    text = value.strip()
    relative = _relative(text.lower())
    if relative is not None:
        return relative.timestamp()

    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).timestamp()
    except ValueError:
        pass

    for fmt in _FORMATS:
        try:
            return datetime.strptime(text, fmt).timestamp()
        except ValueError:
            continue

    if text.lstrip("@").isdigit():
        return float(text.lstrip("@"))
    return None


class _DateComparisonRule(BaseRule):
    min_parameters = 1

    def _bounds(self, value: Any, parameters: Sequence[str]):
        limit = parse_timestamp(parameters[0])
        if limit is None:
            raise ConfigurationError(f"Validation rule {self.name} requires a valid date, got '{parameters[0]}'.")
        return parse_timestamp(value), limit

    def placeholders(self, parameters: Sequence[str], label: Callable[[str], str]) -> Dict[str, str]:
        return {":date": parameters[0]}


class BeforeRule(_DateComparisonRule):
    name = "Before"
    description = "The value must be a date before the given date."

    def passes(self, attribute: str, value: Any, parameters: Sequence[str], context: ValidationContext) -> bool:
        timestamp, limit = self._bounds(value, parameters)
        return timestamp is not None and timestamp < limit


class AfterRule(_DateComparisonRule):
    name = "After"
    description = "The value must be a date after the given date."

    def passes(self, attribute: str, value: Any, parameters: Sequence[str], context: ValidationContext) -> bool:
        timestamp, limit = self._bounds(value, parameters)
        return timestamp is not None and timestamp > limit
