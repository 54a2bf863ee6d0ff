"""
blockcrypt exception hierarchy.

All exceptions inherit from BlockCryptError for easy catching. File errors
also inherit from the matching builtin OSError subclasses.
"""

from pathlib import Path
from typing import Any


class BlockCryptError(Exception):
    """Base exception for all blockcrypt errors."""

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message)
        self.message = message
        self.context = context

    def __str__(self) -> str:
        if self.context:
            ctx = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
            return f"{self.message} ({ctx})"
        return self.message


class FileOpenError(BlockCryptError, OSError):
    """A file could not be opened, read or created."""

    def __init__(self, message: str, *, path: str | Path) -> None:
        super().__init__(message, path=str(path))
        self.path = str(path)


class SourceNotFoundError(FileOpenError, FileNotFoundError):
    """The file to transform (or a key file) does not exist."""


class KeyFormatError(BlockCryptError):
    """Key material could not be parsed or is unusable."""

    def __init__(self, message: str, *, key_type: str | None = None) -> None:
        super().__init__(message, key_type=key_type)
        self.key_type = key_type


class MissingKeyError(BlockCryptError):
    """Operation attempted without the required key loaded."""

    def __init__(self, message: str, *, key_type: str) -> None:
        super().__init__(message, key_type=key_type)
        self.key_type = key_type


class CipherError(BlockCryptError):
    """The asymmetric primitive rejected a block or failed."""

    def __init__(self, message: str, *, block_index: int | None = None) -> None:
        super().__init__(message, block_index=block_index)
        self.block_index = block_index


class TruncatedInputError(BlockCryptError):
    """Ciphertext length is not a whole number of ciphertext blocks."""

    def __init__(self, message: str, *, length: int, block_size: int) -> None:
        super().__init__(message, length=length, block_size=block_size)
        self.length = length
        self.block_size = block_size

    @property
    def remainder(self) -> int:
        return self.length % self.block_size
