"""Rules for uploaded files.

Both rules only look at file values. Anything else, including a file field
that was submitted without a file, passes trivially; combine them with
``required`` to insist on an upload.
"""
from typing import Any, Callable, Dict, Sequence

from ..core.base_rule import BaseRule
from ..core.context import ValidationContext
from ..utils.files import File


class MimesRule(BaseRule):
    """The file's guessed extension must be one of the parameters."""

    name = "Mimes"
    description = "The file must be of one of the given types."

    def passes(self, attribute: str, value: Any, parameters: Sequence[str], context: ValidationContext) -> bool:
        if not isinstance(value, File) or value.path() == "":
            return True
        allowed = {parameter.strip().lower().lstrip(".") for parameter in parameters}
        return value.guessed_extension().lower() in allowed

    def placeholders(self, parameters: Sequence[str], label: Callable[[str], str]) -> Dict[str, str]:
        return {":values": ", ".join(parameters)}


class ImageRule(MimesRule):
    name = "Image"
    description = "The file must be an image (jpeg, png, gif or bmp)."

    IMAGE_EXTENSIONS = ("jpeg", "jpg", "png", "gif", "bmp")

    def passes(self, attribute: str, value: Any, parameters: Sequence[str], context: ValidationContext) -> bool:
        return super().passes(attribute, value, self.IMAGE_EXTENSIONS, context)

    def placeholders(self, parameters: Sequence[str], label: Callable[[str], str]) -> Dict[str, str]:
        return super().placeholders(self.IMAGE_EXTENSIONS, label)
