"""Resolves message keys to human-readable lines.

The validator never decides wording on its own. It asks a `Translator` for
lines such as ``validation.required`` and treats a translator that hands the
key back unchanged as "no line registered". `ArrayTranslator` is a small
dictionary-backed implementation, enough to use the validator standalone.
"""

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

try:
    import tomllib  # Available in Python 3.11+
except ImportError:
    import tomli as tomllib  # Fallback for Python versions < 3.11

logger = logging.getLogger(__name__)

# English lines for every built-in rule. Size-class rules carry one line per
# value type (numeric, file, string).
DEFAULT_LINES: Dict[str, str] = {
    "validation.accepted": "The :attribute must be accepted.",
    "validation.active_url": "The :attribute is not a valid URL.",
    "validation.after": "The :attribute must be a date after :date.",
    "validation.alpha": "The :attribute may only contain letters.",
    "validation.alpha_dash": "The :attribute may only contain letters, numbers, and dashes.",
    "validation.alpha_num": "The :attribute may only contain letters and numbers.",
    "validation.before": "The :attribute must be a date before :date.",
    "validation.between.numeric": "The :attribute must be between :min and :max.",
    "validation.between.file": "The :attribute must be between :min and :max kilobytes.",
    "validation.between.string": "The :attribute must be between :min and :max characters.",
    "validation.confirmed": "The :attribute confirmation does not match.",
    "validation.different": "The :attribute and :other must be different.",
    "validation.email": "The :attribute format is invalid.",
    "validation.exists": "The selected :attribute is invalid.",
    "validation.image": "The :attribute must be an image.",
    "validation.in": "The selected :attribute is invalid.",
    "validation.integer": "The :attribute must be an integer.",
    "validation.ip": "The :attribute must be a valid IP address.",
    "validation.max.numeric": "The :attribute may not be greater than :max.",
    "validation.max.file": "The :attribute may not be greater than :max kilobytes.",
    "validation.max.string": "The :attribute may not be greater than :max characters.",
    "validation.mimes": "The :attribute must be a file of type: :values.",
    "validation.min.numeric": "The :attribute must be at least :min.",
    "validation.min.file": "The :attribute must be at least :min kilobytes.",
    "validation.min.string": "The :attribute must be at least :min characters.",
    "validation.not_in": "The selected :attribute is invalid.",
    "validation.numeric": "The :attribute must be a number.",
    "validation.regex": "The :attribute format is invalid.",
    "validation.required": "The :attribute field is required.",
    "validation.same": "The :attribute and :other must match.",
    "validation.size.numeric": "The :attribute must be :size.",
    "validation.size.file": "The :attribute must be :size kilobytes.",
    "validation.size.string": "The :attribute must be :size characters.",
    "validation.unique": "The :attribute has already been taken.",
    "validation.url": "The :attribute format is invalid.",
}


class Translator(ABC):
    """Abstract translation backend."""

    @abstractmethod
    def translate(self, key: str, parameters: Optional[Mapping[str, Any]] = None) -> str:
        """Returns the line registered for `key`, or `key` itself if there is none.

        Args:
            key (str): The dotted message key, e.g. ``"validation.required"``.
            parameters (Optional[Mapping[str, Any]]): Placeholder replacements
                applied to the line.

        Returns:
            str: The translated line, or the unchanged key.
        """
        raise NotImplementedError


class ArrayTranslator(Translator):
    """A translator backed by a flat dictionary of lines.

    Args:
        lines (Optional[Mapping[str, str]]): The initial lines, keyed by their
            full dotted key.
    """

    def __init__(self, lines: Optional[Mapping[str, str]] = None) -> None:
        self.lines: Dict[str, str] = dict(lines or {})

    @classmethod
    def with_defaults(cls) -> "ArrayTranslator":
        """Creates a translator preloaded with the English `DEFAULT_LINES`."""
        return cls(DEFAULT_LINES)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "ArrayTranslator":
        """Creates a translator from a TOML language file.

        Nested tables are flattened into dotted keys, so a file containing::

            [validation]
            required = "The :attribute field is required."

        registers ``validation.required``.

        Raises:
            OSError: If the file cannot be read.
            tomllib.TOMLDecodeError: If the file is not valid TOML.
        """
        translator = cls()
        translator.load_file(path)
        return translator

    def load_file(self, path: Union[str, Path]) -> None:
        """Merges the lines of a TOML language file into this translator."""
        with open(path, "rb") as f:
            document = tomllib.load(f)
        lines = flatten_lines(document)
        logger.debug(f"Loaded {len(lines)} language lines from {path}")
        self.add_lines(lines)

    def add_lines(self, lines: Mapping[str, str]) -> None:
        """Registers or overrides lines."""
        self.lines.update(lines)

    def translate(self, key: str, parameters: Optional[Mapping[str, Any]] = None) -> str:
        line = self.lines.get(key, key)
        for placeholder, replacement in (parameters or {}).items():
            line = line.replace(placeholder, str(replacement))
        return line


def flatten_lines(document: Mapping[str, Any], prefix: str = "") -> Dict[str, str]:
    """Flattens nested tables into a dict of dotted keys."""
    flat: Dict[str, str] = {}
    for key, value in document.items():
        dotted = f"{prefix}.{key}" if prefix else key
        if isinstance(value, dict):
            flat.update(flatten_lines(value, dotted))
        else:
            flat[dotted] = str(value)
    return flat
