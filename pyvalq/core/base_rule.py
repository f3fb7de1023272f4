"""
Base rule class that all validation rules inherit from.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Callable, Dict, Sequence

from .exceptions import ConfigurationError

if TYPE_CHECKING:
    from .context import ValidationContext

Predicate = Callable[[str, Any, Sequence[str], "ValidationContext"], Any]


class BaseRule(ABC):
    """Abstract base class for all validation rules.

    All rules must inherit from this class and implement the `passes`
    method. This ensures a consistent interface for the validation engine,
    allowing built-in rules and runtime extensions to be dispatched
    uniformly from the same registry.

    Attributes:
        name (str): The StudlyCase name the rule is invoked by (e.g. "Between").
        description (str): A brief explanation of what the rule checks.
        implicit (bool): Whether the rule runs even when the attribute is
            missing or empty. Only rules that themselves define presence
            (such as "Required") are implicit.
        min_parameters (int): The number of parameters the rule cannot do
            without.
    """

    name: str = "Unnamed"
    description: str = "No description provided"
    implicit: bool = False
    min_parameters: int = 0

    def __call__(self, attribute: str, value: Any, parameters: Sequence[str], context: "ValidationContext") -> bool:
        """Checks the parameter count, then evaluates the rule.

        Raises:
            ConfigurationError: If fewer than `min_parameters` were supplied.
        """
        self.require_parameters(parameters)
        return bool(self.passes(attribute, value, parameters, context))

    @abstractmethod
    def passes(self, attribute: str, value: Any, parameters: Sequence[str], context: "ValidationContext") -> bool:
        """Abstract method for implementing the rule's predicate.

        Args:
            attribute (str): The name of the attribute under validation.
            value (Any): The attribute's value.
            parameters (Sequence[str]): The rule's parameters, as strings.
            context (ValidationContext): The current validation pass.

        Returns:
            bool: True if the value satisfies the rule.
        """
        raise NotImplementedError("Subclasses must implement passes()")

    def placeholders(self, parameters: Sequence[str], label: Callable[[str], str]) -> Dict[str, str]:
        """Returns the rule-specific placeholders for its error message.

        Subclasses override this to expose parameters in messages, e.g.
        ``{":min": "3"}``. The ``:attribute`` placeholder is always filled
        in by the message resolver and need not be returned here.

        Args:
            parameters (Sequence[str]): The rule's parameters.
            label (Callable[[str], str]): Turns an attribute name into its
                display label, for rules that refer to other attributes.
        """
        return {}

    def require_parameters(self, parameters: Sequence[str]) -> None:
        """Raises if fewer than `min_parameters` parameters were supplied."""
        if len(parameters) < self.min_parameters:
            raise ConfigurationError(
                f"Validation rule {self.name} requires at least {self.min_parameters} parameter(s)."
            )

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name}>"


class CallableRule(BaseRule):
    """Adapts a plain function to the rule interface.

    Runtime extensions are usually closures; wrapping them lets the registry
    store them alongside the built-ins.
    """

    description = "Custom extension"

    def __init__(self, name: str, predicate: Predicate) -> None:
        self.name = name
        self.predicate = predicate

    def passes(self, attribute: str, value: Any, parameters: Sequence[str], context: "ValidationContext") -> bool:
        return self.predicate(attribute, value, parameters, context)
