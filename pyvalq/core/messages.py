"""Builds the error message for a failed rule.

Lines are looked up under dotted keys (``validation.required``). Inline
custom messages passed to the validator are consulted first, under the same
key without the ``validation.`` prefix, then the translator. For each
failure the first line found wins, in this order:

1.  ``validation.{attribute}.{rule}``, a line for this attribute only.
2.  ``validation.{rule}.{type}`` for the size-class rules, where type is
    ``numeric``, ``file`` or ``string``.
3.  ``validation.{rule}``, the generic line.

Placeholders are substituted afterwards: ``:attribute`` always, and
whatever the failed rule contributes (``:min``, ``:values``, ...).
"""

import logging
from typing import Mapping, Optional, Sequence

from ..utils.translator import Translator
from .base_rule import BaseRule
from .context import ValidationContext
from .parser import snake
from .size import SIZE_RULES, size_type

logger = logging.getLogger(__name__)

PREFIX = "validation"

_SIZE_KEYS = frozenset(snake(name) for name in SIZE_RULES)
_SIZE_TYPES = frozenset({"numeric", "file", "string"})


def _is_size_line(attribute: str, key: str) -> bool:
    """Checks whether `{attribute}.{key}` names a size-type line such as ``max.numeric``.

    An attribute called ``max`` failing ``numeric`` would otherwise pick up
    the ``max.numeric`` line as its own override.
    """
    return attribute in _SIZE_KEYS and key in _SIZE_TYPES


class MessageResolver:
    """Resolves and renders message lines.

    Args:
        translator (Translator): The translation backend.
        custom_messages (Optional[Mapping[str, str]]): Inline lines keyed
            without the ``validation.`` prefix, e.g. ``{"name.required": ...}``
            or ``{"attributes.name": "Full Name"}``.
    """

    def __init__(self, translator: Translator, custom_messages: Optional[Mapping[str, str]] = None) -> None:
        self.translator = translator
        self.custom_messages = dict(custom_messages or {})

    def message(
        self, attribute: str, rule_name: str, rule: BaseRule, parameters: Sequence[str], context: ValidationContext
    ) -> str:
        """Returns the rendered message for a failed rule.

        Args:
            attribute (str): The attribute that failed.
            rule_name (str): The name the rule was invoked by. Lines are
                keyed by this name, not by the rule object's own `name`.
            rule (BaseRule): The rule it failed.
            parameters (Sequence[str]): The parameters of the failed invocation.
            context (ValidationContext): The current pass.

        Returns:
            str: The message with all placeholders replaced.
        """
        line = self.template(attribute, rule_name, context)
        replacements = {":attribute": self.attribute_label(attribute)}
        replacements.update(rule.placeholders(parameters, self.attribute_label))
        for placeholder, replacement in replacements.items():
            line = line.replace(placeholder, replacement)
        return line

    def template(self, attribute: str, rule_name: str, context: ValidationContext) -> str:
        """Selects the raw line for a failed rule by the precedence above."""
        key = snake(rule_name)

        if not _is_size_line(attribute, key):
            line = self._line(f"{attribute}.{key}")
            if line is not None:
                return line

        if rule_name in SIZE_RULES:
            rule_names = [invocation.name for invocation in context.rules.get(attribute, ())]
            line = self._line(f"{key}.{size_type(attribute, rule_names, context.files)}")
            if line is not None:
                return line

        line = self._line(key)
        if line is not None:
            return line

        logger.debug(f"No message line for rule '{rule_name}' on '{attribute}'")
        return f"{PREFIX}.{key}"

    def attribute_label(self, attribute: str) -> str:
        """Returns the display name of an attribute.

        A registered ``validation.attributes.{attribute}`` line wins;
        otherwise underscores in the raw name become spaces.
        """
        label = self._line(f"attributes.{attribute}")
        if label is not None:
            return label
        return attribute.replace("_", " ")

    def _line(self, key: str) -> Optional[str]:
        """Returns the line for `key`, or None if neither source has one."""
        if key in self.custom_messages:
            return self.custom_messages[key]

        full_key = f"{PREFIX}.{key}"
        line = self.translator.translate(full_key)
        return None if line == full_key else line
