"""Maps rule names to the predicates that implement them.

Built-in rules are discovered once by walking the `pyvalq.rules` package
for `BaseRule` subclasses. Extensions registered at runtime are kept apart
from the built-ins and take precedence over them.
"""

import inspect
import logging
import os
import pkgutil
from importlib import import_module
from typing import Dict, Iterable, List, Mapping, Optional, Type, Union

from .base_rule import BaseRule, CallableRule, Predicate
from .exceptions import ConfigurationError
from .parser import studly

# Initialize a logger for this module.
logger = logging.getLogger(__name__)

RuleLike = Union[BaseRule, Predicate]


def discover_rules() -> List[Type[BaseRule]]:
    """Discovers all rule classes within the `pyvalq.rules` package.

    This function iterates through the modules in the `rules` package,
    inspects their members, and collects all concrete classes that are
    subclasses of `BaseRule`.

    Returns:
        List[Type[BaseRule]]: The discovered rule classes.
    """
    from .. import rules as rules_package

    discovered = []
    path = os.path.dirname(rules_package.__file__)

    for _, name, _ in pkgutil.iter_modules([path]):
        module = import_module(f"{rules_package.__name__}.{name}")
        for _, item in inspect.getmembers(module, inspect.isclass):
            if (
                issubclass(item, BaseRule)
                and item.__module__ == module.__name__
                and not inspect.isabstract(item)
                and not item.__name__.startswith("_")
                and item is not CallableRule
            ):
                discovered.append(item)
    return discovered


def _as_rule(name: str, predicate: RuleLike) -> BaseRule:
    if isinstance(predicate, BaseRule):
        return predicate
    if callable(predicate):
        return CallableRule(name, predicate)
    raise TypeError(f"Extension '{name}' must be a BaseRule or a callable, got {type(predicate).__name__}.")


class RuleRegistry:
    """A lookup table from rule name to rule object.

    Args:
        builtins (Optional[Iterable[BaseRule]]): The built-in rules. When
            omitted, every rule in `pyvalq.rules` is discovered and
            instantiated.
    """

    def __init__(self, builtins: Optional[Iterable[BaseRule]] = None) -> None:
        if builtins is None:
            builtins = [rule_class() for rule_class in discover_rules()]
        self._builtins: Dict[str, BaseRule] = {rule.name: rule for rule in builtins}
        self._extensions: Dict[str, BaseRule] = {}

    def register(self, name: str, predicate: RuleLike) -> None:
        """Adds or overrides a rule.

        Args:
            name (str): The rule name. It is normalized to StudlyCase so it
                matches parsed rule tokens (``"foo"`` registers ``"Foo"``).
            predicate (RuleLike): A `BaseRule` instance, or any callable taking
                ``(attribute, value, parameters, context)`` and returning a
                truthy value when the value passes.
        """
        name = studly(name)
        self._extensions[name] = _as_rule(name, predicate)
        logger.debug(f"Registered extension rule: {name}")

    def register_many(self, extensions: Mapping[str, RuleLike]) -> None:
        for name, predicate in extensions.items():
            self.register(name, predicate)

    def remove(self, name: str) -> None:
        """Removes a built-in or extension rule; unknown names are ignored."""
        name = studly(name)
        self._builtins.pop(name, None)
        self._extensions.pop(name, None)

    def resolve(self, name: str) -> BaseRule:
        """Returns the rule registered under `name`.

        Extensions are checked before built-ins.

        Raises:
            ConfigurationError: If no rule has that name.
        """
        rule = self._extensions.get(name) or self._builtins.get(name)
        if rule is None:
            raise ConfigurationError(f"Validation rule '{name}' does not exist.")
        return rule

    def has(self, name: str) -> bool:
        return name in self._extensions or name in self._builtins

    def is_implicit(self, name: str) -> bool:
        """Checks whether the rule registered under `name` runs on missing values."""
        rule = self._extensions.get(name) or self._builtins.get(name)
        return rule is not None and rule.implicit

    @property
    def extensions(self) -> Dict[str, BaseRule]:
        return dict(self._extensions)

    def rules(self) -> Dict[str, BaseRule]:
        """Returns every resolvable rule, extensions shadowing built-ins, sorted by name."""
        merged = {**self._builtins, **self._extensions}
        return {name: merged[name] for name in sorted(merged)}

    def copy(self) -> "RuleRegistry":
        """Returns an independent registry with the same rules."""
        clone = RuleRegistry(self._builtins.values())
        clone._extensions = dict(self._extensions)
        return clone
