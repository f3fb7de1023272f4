"""File values that can be placed under validation.

Validators never open files themselves. They only need three facts about an
uploaded file: where it lives, how big it is and which extension its
content type maps to. Anything implementing `File` can be validated.
"""

import mimetypes
import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional, Union


class File(ABC):
    """Abstract capability of a file-backed value."""

    @abstractmethod
    def path(self) -> str:
        """Returns the file's path, or an empty string if nothing was uploaded."""
        raise NotImplementedError

    @abstractmethod
    def size_bytes(self) -> int:
        """Returns the file's size in bytes."""
        raise NotImplementedError

    @abstractmethod
    def guessed_extension(self) -> str:
        """Returns the extension guessed from the file's content type, without a dot."""
        raise NotImplementedError


class UploadedFile(File):
    """A file on the local filesystem.

    Args:
        path (Union[str, Path]): The path of the file. An empty path models a
            form field that was submitted without a file.
        size (Optional[int]): The size in bytes. When omitted it is read from
            disk (or 0 if the file does not exist).
        mime_type (Optional[str]): The content type. When omitted it is
            guessed from the path.
    """

    def __init__(self, path: Union[str, Path], size: Optional[int] = None, mime_type: Optional[str] = None) -> None:
        self._path = str(path) if path else ""
        self._size = size
        self.mime_type = mime_type or (mimetypes.guess_type(self._path)[0] if self._path else None)

    def path(self) -> str:
        return self._path

    def size_bytes(self) -> int:
        if self._size is None:
            try:
                self._size = os.path.getsize(self._path)
            except OSError:
                self._size = 0
        return self._size

    def guessed_extension(self) -> str:
        """Guesses the extension from the MIME type, falling back to the path suffix.

        ``mimetypes`` may map a type to several extensions; when the path's
        own suffix is one of them it is preferred, so ``photo.jpeg`` stays
        ``jpeg`` rather than becoming ``jpg``.
        """
        suffix = Path(self._path).suffix.lstrip(".").lower()
        if self.mime_type:
            candidates = [ext.lstrip(".") for ext in mimetypes.guess_all_extensions(self.mime_type)]
            if suffix in candidates:
                return suffix
            if candidates:
                return candidates[0]
        return suffix

    def __repr__(self) -> str:
        return f"UploadedFile({self._path!r})"
