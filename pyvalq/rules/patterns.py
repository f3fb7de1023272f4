"""Rules that match a value against a regular expression."""
import logging
import re
from functools import lru_cache
from typing import Any, Pattern, Sequence

from ..core.base_rule import BaseRule
from ..core.context import ValidationContext
from ..core.exceptions import ConfigurationError
from ..core.values import to_text

logger = logging.getLogger(__name__)

_FLAGS = {"i": re.IGNORECASE, "m": re.MULTILINE, "s": re.DOTALL, "x": re.VERBOSE, "u": 0}
_DELIMITED = re.compile(r"^([/#~!%|@])(.*)\1([a-zA-Z]*)$", re.DOTALL)


@lru_cache(maxsize=256)
def compile_pattern(pattern: str) -> Pattern:
    """Compiles a pattern, accepting ``/body/flags`` delimited syntax.

    Raises:
        ConfigurationError: If the pattern is invalid or uses an unknown flag.
    """
    body, flags = pattern, 0
    match = _DELIMITED.match(pattern)
    if match:
        body = match.group(2)
        for flag in match.group(3):
            if flag not in _FLAGS:
                raise ConfigurationError(f"Unsupported regex flag '{flag}' in {pattern!r}.")
            flags |= _FLAGS[flag]
    try:
        return re.compile(body, flags)
    except re.error as e:
        raise ConfigurationError(f"Invalid regex {pattern!r}: {e}") from e


class _PatternRule(BaseRule):
    pattern: Pattern

    def passes(self, attribute: str, value: Any, parameters: Sequence[str], context: ValidationContext) -> bool:
        if isinstance(value, (list, tuple, dict)):
            return False
        return bool(self.pattern.fullmatch(to_text(value)))


class AlphaRule(_PatternRule):
    name = "Alpha"
    description = "The value may only contain letters."
    pattern = re.compile(r"[a-zA-Z]+")


class AlphaNumRule(_PatternRule):
    name = "AlphaNum"
    description = "The value may only contain letters and digits."
    pattern = re.compile(r"[a-zA-Z0-9]+")


class AlphaDashRule(_PatternRule):
    name = "AlphaDash"
    description = "The value may only contain letters, digits, dashes and underscores."
    pattern = re.compile(r"[a-zA-Z0-9_-]+")


class RegexRule(BaseRule):
    """The value must match the given pattern anywhere (use ``^``/``$`` to anchor).

    The parameter is taken verbatim, so the pattern may contain commas.
    """

    name = "Regex"
    description = "The value must match the given regular expression."
    min_parameters = 1

    def passes(self, attribute: str, value: Any, parameters: Sequence[str], context: ValidationContext) -> bool:
        if isinstance(value, (list, tuple, dict)):
            return False
        return bool(compile_pattern(parameters[0]).search(to_text(value)))
