"""Parses the textual rule grammar.

A rule token has the form ``name:p1,p2,...``. The name is everything before
the first colon and the parameters are a comma-separated, CSV-quoted list
after it::

    >>> parse_rule('in:"a","b,c"')
    RuleInvocation(name='In', parameters=('a', 'b,c'))

A rule set maps each attribute to either a pipe-separated string of tokens
(``"required|min:3"``) or a sequence of tokens. Tokens may also be builder
objects that serialize themselves through ``str()``.
"""

import csv
import re
from functools import lru_cache
from typing import Dict, Iterable, List, Mapping, NamedTuple, Tuple, Union

from .exceptions import RuleParseError

# Rules whose parameter is taken verbatim instead of being CSV-split.
UNSPLIT_RULES = frozenset({"Regex"})

_WORD_SEPARATORS = re.compile(r"[-_\s]+")
_SNAKE_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


class RuleInvocation(NamedTuple):
    """A parsed rule: its name and the ordered list of string parameters."""

    name: str
    parameters: Tuple[str, ...] = ()


RuleSet = Dict[str, Tuple[RuleInvocation, ...]]
RawRules = Mapping[str, Union[str, Iterable]]


def studly(name: str) -> str:
    """Normalizes a rule name to StudlyCase (``"not_in"`` becomes ``"NotIn"``).

    Only the first letter of each word is upper-cased, so names that are
    already StudlyCase (``"AlphaNum"``) are left untouched.
    """
    words = _WORD_SEPARATORS.split(name.strip())
    return "".join(word[:1].upper() + word[1:] for word in words if word)


def snake(name: str) -> str:
    """Converts a StudlyCase rule name to the snake_case used in message keys."""
    return _SNAKE_BOUNDARY.sub("_", name).lower()


@lru_cache(maxsize=1024)
def parse_rule(token: str) -> RuleInvocation:
    """Parses a single rule token into a `RuleInvocation`.

    Args:
        token (str): The rule token, e.g. ``"between:3,5"``.

    Returns:
        RuleInvocation: The normalized rule name and its parameters.

    Raises:
        RuleParseError: If the token has no name or its parameter list has
            malformed quoting.
    """
    name, separator, raw_parameters = token.strip().partition(":")
    name = studly(name)
    if not name:
        raise RuleParseError(token, "missing rule name")

    if not separator:
        return RuleInvocation(name)

    if name in UNSPLIT_RULES:
        return RuleInvocation(name, (raw_parameters,))

    return RuleInvocation(name, _parse_parameters(token, raw_parameters))


def _parse_parameters(token: str, raw_parameters: str) -> Tuple[str, ...]:
    """Splits a CSV parameter list, honoring double quotes and ``""`` escapes."""
    if "\n" in raw_parameters or "\r" in raw_parameters:
        raise RuleParseError(token, "line breaks are not allowed in parameters")
    try:
        rows = list(csv.reader([raw_parameters], strict=True))
    except csv.Error as e:
        raise RuleParseError(token, str(e)) from e
    return tuple(rows[0]) if rows else ()


def explode_rules(rules: RawRules) -> Dict[str, List[str]]:
    """Splits each attribute's rules into a list of raw token strings.

    Pipe-separated strings are exploded, sequences are taken as-is, and
    every token is serialized with ``str()`` so rule builders can be mixed
    in. Tokens that serialize to an empty string are dropped.

    Args:
        rules (RawRules): The attribute-to-rules mapping.

    Returns:
        Dict[str, List[str]]: The attribute-to-tokens mapping, in the
        original attribute order.
    """
    exploded: Dict[str, List[str]] = {}
    for attribute, attribute_rules in rules.items():
        if isinstance(attribute_rules, str):
            tokens = attribute_rules.split("|")
        elif not hasattr(attribute_rules, "__iter__"):
            tokens = str(attribute_rules).split("|")
        else:
            tokens = [str(rule) for rule in attribute_rules]
        exploded[attribute] = [token.strip() for token in tokens if token.strip()]
    return exploded


def parse_rule_set(rules: RawRules) -> RuleSet:
    """Parses a whole rule set up front.

    Parsing happens once, before any value is inspected, so a malformed
    token is reported before any partial validation work is done.

    Args:
        rules (RawRules): The attribute-to-rules mapping.

    Returns:
        RuleSet: The attribute-to-invocations mapping.

    Raises:
        RuleParseError: If any token is malformed.
    """
    return {
        attribute: tuple(parse_rule(token) for token in tokens)
        for attribute, tokens in explode_rules(rules).items()
    }
