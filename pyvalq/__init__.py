"""pyvalq: Declarative, rule-based validation of input data.

This package validates a mapping of named values against per-attribute rule
chains written in a compact textual syntax (``"required|between:3,5"``) and
reports every failure as a human-readable, template-driven message.
"""

from .core.exceptions import ConfigurationError, RuleParseError
from .core.message_bag import MessageBag
from .core.validator import Factory, Validator

__version__ = "0.1.0"
__license__ = "MIT"

__all__ = [
    "__version__",
    "__license__",
    "ConfigurationError",
    "Factory",
    "MessageBag",
    "RuleParseError",
    "Validator",
]
