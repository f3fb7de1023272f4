"""Rules for addresses: IP addresses, e-mail addresses and URLs.

``active_url`` performs a DNS lookup and therefore blocks; no timeout is
imposed beyond the resolver's own.
"""
import ipaddress
import logging
import re
import socket
from typing import Any, Optional, Sequence
from urllib.parse import urlparse

from email_validator import EmailNotValidError, validate_email

from ..core.base_rule import BaseRule
from ..core.context import ValidationContext

logger = logging.getLogger(__name__)

_SCHEME = re.compile(r"^[A-Za-z][A-Za-z0-9+.-]*$")


class IpRule(BaseRule):
    name = "Ip"
    description = "The value must be an IPv4 or IPv6 address."

    def passes(self, attribute: str, value: Any, parameters: Sequence[str], context: ValidationContext) -> bool:
        try:
            ipaddress.ip_address(str(value))
        except ValueError:
            return False
        return True


class EmailRule(BaseRule):
    name = "Email"
    description = "The value must be a well-formed e-mail address."

    def passes(self, attribute: str, value: Any, parameters: Sequence[str], context: ValidationContext) -> bool:
        try:
            validate_email(str(value), check_deliverability=False)
        except EmailNotValidError as e:
            logger.debug(f"Invalid e-mail address for '{attribute}': {e}")
            return False
        return True


class UrlRule(BaseRule):
    """Requires a scheme and a host, e.g. ``http://example.com/path``."""

    name = "Url"
    description = "The value must be a well-formed URL."

    def passes(self, attribute: str, value: Any, parameters: Sequence[str], context: ValidationContext) -> bool:
        text = str(value)
        if not text or any(c.isspace() for c in text):
            return False
        try:
            parsed = urlparse(text)
        except ValueError:
            return False
        return bool(_SCHEME.match(parsed.scheme)) and bool(parsed.netloc)


def _host(url: str) -> Optional[str]:
    """Extracts the host of a URL, with or without a scheme."""
    url = url.strip().lower()
    if "://" not in url:
        url = f"//{url}"
    try:
        return urlparse(url).hostname
    except ValueError:
        return None


class ActiveUrlRule(BaseRule):
    """The URL's host must resolve in DNS."""

    name = "ActiveUrl"
    description = "The value must be a URL whose host resolves in DNS."

    def passes(self, attribute: str, value: Any, parameters: Sequence[str], context: ValidationContext) -> bool:
        host = _host(str(value))
        if not host:
            return False
        try:
            return bool(socket.getaddrinfo(host, None))
        except (socket.gaierror, UnicodeError) as e:
            logger.debug(f"DNS lookup for '{host}' failed: {e}")
            return False
