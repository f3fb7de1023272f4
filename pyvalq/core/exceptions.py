"""Exceptions raised for misconfigured validators.

Failing validation is never an exception: it is recorded in the message
bag. The exceptions here signal wiring bugs (unknown rules, missing rule
parameters, missing collaborators) and abort the validation pass.
"""

from typing import Optional


class ConfigurationError(Exception):
    """Raised when a validator is wired up incorrectly."""


class RuleParseError(ConfigurationError):
    """Raised when a rule token cannot be parsed.

    Attributes:
        token (str): The offending rule token.
    """

    def __init__(self, token: str, reason: Optional[str] = None) -> None:
        self.token = token
        message = f"Malformed rule '{token}'"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
