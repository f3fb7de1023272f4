"""The read-only state of a single validation pass."""

from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Collection, Mapping, Optional

from .exceptions import ConfigurationError
from .parser import RuleInvocation, RuleSet

if TYPE_CHECKING:
    from ..utils.presence import PresenceVerifier


class ValidationContext:
    """Everything a rule may look at while it is being evaluated.

    The context is built once per pass and never mutated afterwards: the
    data, files and rules are exposed through read-only mapping views.

    Attributes:
        data (Mapping[str, Any]): The values under validation.
        files (Mapping[str, Any]): The file values under validation, keyed by
            attribute.
        rules (Mapping[str, Tuple[RuleInvocation, ...]]): The parsed rule set.
    """

    def __init__(
        self,
        data: Mapping[str, Any],
        rules: RuleSet,
        files: Optional[Mapping[str, Any]] = None,
        presence_verifier: Optional["PresenceVerifier"] = None,
    ) -> None:
        self.data = MappingProxyType(dict(data))
        self.files = MappingProxyType(dict(files or {}))
        self.rules = MappingProxyType(dict(rules))
        self._presence_verifier = presence_verifier

    def get_value(self, attribute: str) -> Any:
        """Returns an attribute's value from the data, falling back to the files."""
        if attribute in self.data:
            return self.data[attribute]
        return self.files.get(attribute)

    def has_rule(self, attribute: str, names: Collection[str]) -> bool:
        """Checks whether any of `names` is among an attribute's rules."""
        return self.get_rule(attribute, names) is not None

    def get_rule(self, attribute: str, names: Collection[str]) -> Optional[RuleInvocation]:
        """Returns the first of an attribute's rules whose name is in `names`."""
        for invocation in self.rules.get(attribute, ()):
            if invocation.name in names:
                return invocation
        return None

    @property
    def presence_verifier(self) -> "PresenceVerifier":
        """The presence verifier for database-backed rules.

        Raises:
            ConfigurationError: If no verifier was configured.
        """
        if self._presence_verifier is None:
            raise ConfigurationError("Presence verifier has not been set.")
        return self._presence_verifier
