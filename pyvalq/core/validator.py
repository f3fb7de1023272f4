"""Handles the core validation pass for pyvalq.

This module orchestrates validation, which includes:
1.  Parsing every rule token of the rule set up front.
2.  Building an immutable `ValidationContext` from the data and files.
3.  Evaluating every rule of every attribute, resolving each rule name
    through the `RuleRegistry`.
4.  Rendering a message for each failure and collecting the messages in a
    `MessageBag`, which is the result of the pass.

`Validator` is the object most callers use; `Factory` assembles validators
that share a translator, a presence verifier and a set of extensions.
"""

import logging
from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional

from ..utils.translator import ArrayTranslator, Translator, flatten_lines
from .base_rule import BaseRule
from .context import ValidationContext
from .exceptions import ConfigurationError
from .message_bag import MessageBag
from .messages import MessageResolver
from .parser import RawRules, RuleSet, explode_rules, parse_rule_set
from .registry import RuleLike, RuleRegistry
from .values import is_present

if TYPE_CHECKING:
    from ..utils.presence import PresenceVerifier
    from .config import Config

# Initialize a logger for this module.
logger = logging.getLogger(__name__)


class ValidationEngine:
    """Runs one validation pass over a context.

    Args:
        registry (RuleRegistry): Resolves rule names to rules.
        resolver (MessageResolver): Renders the message for each failure.
    """

    def __init__(self, registry: RuleRegistry, resolver: MessageResolver) -> None:
        self.registry = registry
        self.resolver = resolver

    def validate(self, context: ValidationContext) -> MessageBag:
        """Evaluates every rule of every attribute and collects the failures.

        Evaluation never stops early: all rules of all attributes are tried
        so the caller can report every problem at once.

        Args:
            context (ValidationContext): The data, files and rules of the pass.

        Returns:
            MessageBag: One message per failure, grouped by attribute.

        Raises:
            ConfigurationError: If a rule is unknown, lacks required
                parameters or needs a collaborator that is not configured.
        """
        messages = MessageBag()

        for attribute, invocations in context.rules.items():
            value = context.get_value(attribute)
            for invocation in invocations:
                if not self._is_validatable(invocation.name, value):
                    continue

                rule = self.registry.resolve(invocation.name)

                logger.debug(f"Evaluating {invocation.name}{list(invocation.parameters)} on '{attribute}'")
                try:
                    passed = rule(attribute, value, invocation.parameters, context)
                except ConfigurationError as e:
                    logger.error(f"Rule {invocation.name} on '{attribute}' is misconfigured: {e}")
                    raise

                if not passed:
                    logger.debug(f"'{attribute}' failed {invocation.name}")
                    messages.add(attribute, self.resolver.message(attribute, invocation.name, rule, invocation.parameters, context))

        return messages

    def _is_validatable(self, name: str, value: Any) -> bool:
        """A rule runs on present values; implicit rules also run on missing ones."""
        return is_present(value) or self.registry.is_implicit(name)


class Validator:
    """Validates one set of data against one set of rules.

    Rule tokens are parsed when the validator is created, so a malformed
    rule raises before any value is looked at.

    Args:
        translator (Translator): Resolves message lines.
        data (Mapping[str, Any]): The values under validation.
        rules (RawRules): The attribute-to-rules mapping, each entry either a
            pipe-separated string or a sequence of tokens.
        messages (Optional[Mapping[str, str]]): Inline message lines keyed
            without the ``validation.`` prefix.
        registry (Optional[RuleRegistry]): The rules to dispatch to. It is
            copied, so extensions added to this validator stay local.
        presence_verifier (Optional[PresenceVerifier]): Backs the ``unique``
            and ``exists`` rules.

    Raises:
        RuleParseError: If a rule token is malformed.
    """

    def __init__(
        self,
        translator: Translator,
        data: Mapping[str, Any],
        rules: RawRules,
        messages: Optional[Mapping[str, str]] = None,
        registry: Optional[RuleRegistry] = None,
        presence_verifier: Optional["PresenceVerifier"] = None,
    ) -> None:
        self.translator = translator
        self.data = dict(data)
        self.raw_rules = explode_rules(rules)
        self.rules: RuleSet = parse_rule_set(self.raw_rules)
        self.custom_messages = dict(messages or {})
        self.registry = registry.copy() if registry is not None else RuleRegistry()
        self.presence_verifier = presence_verifier
        self.files: Dict[str, Any] = {}
        self._errors: Optional[MessageBag] = None

    def validate(self) -> MessageBag:
        """Runs the validation pass and returns its messages.

        Raises:
            ConfigurationError: If the rules are misconfigured.
        """
        context = ValidationContext(self.data, self.rules, self.files, self.presence_verifier)
        engine = ValidationEngine(self.registry, MessageResolver(self.translator, self.custom_messages))
        self._errors = engine.validate(context)
        return self._errors

    def passes(self) -> bool:
        """Determines if the data passes the rules."""
        return self.validate().is_empty()

    def fails(self) -> bool:
        """Determines if the data fails the rules."""
        return not self.passes()

    @property
    def errors(self) -> MessageBag:
        """The messages of the last pass, running one if none has run yet."""
        if self._errors is None:
            self.validate()
        return self._errors

    def messages(self) -> MessageBag:
        return self.errors

    def get_data(self) -> Dict[str, Any]:
        return dict(self.data)

    def get_rules(self) -> Dict[str, List[str]]:
        """Returns the rule tokens per attribute, as exploded from the input."""
        return {attribute: list(tokens) for attribute, tokens in self.raw_rules.items()}

    def get_files(self) -> Dict[str, Any]:
        return dict(self.files)

    def set_files(self, files: Mapping[str, Any]) -> None:
        """Sets the file values under validation.

        Raises:
            ConfigurationError: If a validation pass has already run.
        """
        if self._errors is not None:
            raise ConfigurationError("Files must be set before the data is validated.")
        self.files = dict(files)

    def get_translator(self) -> Translator:
        return self.translator

    def set_translator(self, translator: Translator) -> None:
        self.translator = translator

    def get_presence_verifier(self) -> Optional["PresenceVerifier"]:
        return self.presence_verifier

    def set_presence_verifier(self, presence_verifier: "PresenceVerifier") -> None:
        self.presence_verifier = presence_verifier

    def add_extension(self, rule: str, extension: RuleLike) -> None:
        """Registers a custom rule for this validator only."""
        self.registry.register(rule, extension)

    def add_extensions(self, extensions: Mapping[str, RuleLike]) -> None:
        self.registry.register_many(extensions)

    def get_extensions(self) -> Dict[str, BaseRule]:
        return self.registry.extensions


class Factory:
    """Creates validators that share collaborators and extensions.

    Args:
        translator (Translator): Resolves message lines for every validator.
        presence_verifier (Optional[PresenceVerifier]): Backs the ``unique``
            and ``exists`` rules.
        registry (Optional[RuleRegistry]): The built-in rules. When omitted,
            the rules in `pyvalq.rules` are discovered.
        messages (Optional[Mapping[str, str]]): Inline message lines given
            to every validator; lines passed to `make` take precedence.
    """

    def __init__(
        self,
        translator: Translator,
        presence_verifier: Optional["PresenceVerifier"] = None,
        registry: Optional[RuleRegistry] = None,
        messages: Optional[Mapping[str, str]] = None,
    ) -> None:
        self.translator = translator
        self.presence_verifier = presence_verifier
        self.registry = registry if registry is not None else RuleRegistry()
        self.messages = dict(messages or {})

    @classmethod
    def from_config(cls, config: "Config") -> "Factory":
        """Builds a factory from the application configuration.

        The translator starts from the built-in English lines (unless
        ``use_default_lines`` is off) and then loads ``language_file``. A
        ``presence.database`` setting opens an sqlite presence verifier, and
        rules listed in ``disable_rules`` are removed.

        Args:
            config (Config): The application's configuration object.

        Returns:
            Factory: The configured factory.
        """
        from ..utils.presence import DatabasePresenceVerifier

        translator = ArrayTranslator.with_defaults() if config.get("use_default_lines", True) else ArrayTranslator()
        language_file = config.get("language_file")
        if language_file:
            translator.load_file(language_file)

        presence_verifier = None
        database = config.get("presence.database")
        if database:
            logger.info(f"Using sqlite presence verifier at {database}")
            presence_verifier = DatabasePresenceVerifier.connect(database)

        registry = RuleRegistry()
        for name in list(registry.rules()):
            if not config.is_rule_enabled(name):
                logger.info(f"Rule {name} disabled by configuration")
                registry.remove(name)

        return cls(translator, presence_verifier, registry, flatten_lines(config.get("messages", {})))

    def make(self, data: Mapping[str, Any], rules: RawRules, messages: Optional[Mapping[str, str]] = None) -> Validator:
        """Creates a validator for the given data and rules.

        Raises:
            RuleParseError: If a rule token is malformed.
        """
        return Validator(
            self.translator,
            data,
            rules,
            messages={**self.messages, **(messages or {})},
            registry=self.registry,
            presence_verifier=self.presence_verifier,
        )

    def extend(self, rule: str, extension: RuleLike) -> None:
        """Registers a custom rule for every validator made afterwards."""
        self.registry.register(rule, extension)

    def get_translator(self) -> Translator:
        return self.translator

    def get_presence_verifier(self) -> Optional["PresenceVerifier"]:
        return self.presence_verifier

    def set_presence_verifier(self, presence_verifier: "PresenceVerifier") -> None:
        self.presence_verifier = presence_verifier
