"""Collects the error messages produced by a validation pass.

Messages are grouped by attribute, keep the order they were added in, and
are deduplicated per attribute: adding the same text twice keeps only the
first occurrence.
"""

import json
from typing import Dict, Iterable, List, Mapping, Optional


class MessageBag:
    """An ordered, per-attribute multi-map of unique messages.

    Args:
        messages (Optional[Mapping[str, Iterable[str]]]): Initial messages,
            keyed by attribute.
        format (str): The default output format. ``:message`` is replaced
            with the message text and ``:key`` with its attribute.
    """

    def __init__(self, messages: Optional[Mapping[str, Iterable[str]]] = None, format: str = ":message") -> None:
        self.format = format
        self._messages: Dict[str, List[str]] = {}
        if messages:
            self.merge(messages)

    def add(self, key: str, message: str) -> "MessageBag":
        """Adds a message for an attribute unless it is already present."""
        bucket = self._messages.setdefault(key, [])
        if message not in bucket:
            bucket.append(message)
        return self

    def merge(self, messages: Mapping[str, Iterable[str]]) -> "MessageBag":
        """Adds every message of another mapping (or bag) to this one."""
        if isinstance(messages, MessageBag):
            messages = messages.get_messages()
        for key, bucket in messages.items():
            for message in bucket:
                self.add(key, message)
        return self

    def has(self, key: str) -> bool:
        """Checks whether an attribute has at least one message."""
        return bool(self._messages.get(key))

    def first(self, key: Optional[str] = None, format: Optional[str] = None) -> str:
        """Returns the first message for an attribute, or of the whole bag.

        Returns an empty string when there is no such message.
        """
        messages = self.get(key, format) if key is not None else self.all(format)
        return messages[0] if messages else ""

    def get(self, key: str, format: Optional[str] = None) -> List[str]:
        """Returns all messages for an attribute, formatted."""
        return [self._format(key, message, format) for message in self._messages.get(key, [])]

    def all(self, format: Optional[str] = None) -> List[str]:
        """Returns every message in the bag, formatted, attribute by attribute."""
        return [
            self._format(key, message, format)
            for key, bucket in self._messages.items()
            for message in bucket
        ]

    def keys(self) -> List[str]:
        """Returns the attributes that have messages, in insertion order."""
        return [key for key, bucket in self._messages.items() if bucket]

    def get_messages(self) -> Dict[str, List[str]]:
        """Returns a copy of the raw attribute-to-messages mapping."""
        return {key: list(bucket) for key, bucket in self._messages.items() if bucket}

    def set_format(self, format: str) -> "MessageBag":
        self.format = format
        return self

    def count(self) -> int:
        return sum(len(bucket) for bucket in self._messages.values())

    def is_empty(self) -> bool:
        return self.count() == 0

    def any(self) -> bool:
        return not self.is_empty()

    def to_json(self, **kwargs) -> str:
        return json.dumps(self.get_messages(), **kwargs)

    def _format(self, key: str, message: str, format: Optional[str]) -> str:
        return (format or self.format).replace(":key", key).replace(":message", message)

    def __len__(self) -> int:
        return self.count()

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.has(key)

    def __iter__(self):
        return iter(self.all())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MessageBag):
            return NotImplemented
        return self.get_messages() == other.get_messages()

    def __repr__(self) -> str:
        return f"MessageBag({self.get_messages()!r})"
