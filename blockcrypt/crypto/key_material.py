"""
Key material for a block encryption session.

A KeyMaterial instance owns at most one RSA public key and at most one RSA
private key. Each slot is loaded independently, so a session built from two
files can end up holding only the key that parsed. Keys are released exactly
once when the session is closed.
"""

from collections.abc import Callable
from pathlib import Path
from typing import Self

import structlog
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPrivateKey, RSAPublicKey

from blockcrypt.crypto.pem import (
    key_size_bytes,
    load_private_key,
    load_public_key,
    public_key_to_pem,
    read_private_key_file,
    read_public_key_file,
)
from blockcrypt.exceptions import BlockCryptError, FileOpenError, KeyFormatError, MissingKeyError
from blockcrypt.models.crypto import PADDING_OVERHEAD, BlockSizes

logger = structlog.get_logger(__name__)

_PUBLIC = "public"
_PRIVATE = "private"


class KeyMaterial:
    """
    Holder for the public and/or private key of one session.

    Use as context manager for guaranteed release.

    Example:
        with KeyMaterial.from_pem_files("id_rsa.pub.pem", "id_rsa.pem") as keys:
            pipeline = BlockCipherPipeline(keys)
            pipeline.encrypt_file("report.pdf")
    """

    def __init__(
        self,
        public_key: RSAPublicKey | None = None,
        private_key: RSAPrivateKey | None = None,
    ) -> None:
        """
        Args:
            public_key: Parsed public key, if any.
            private_key: Parsed private key, if any.
        """
        self._public_key = public_key
        self._private_key = private_key
        self._closed = False
        self._load_errors: list[BlockCryptError] = []

    @classmethod
    def from_public_pem(cls, pem: str | bytes, *, strict: bool = False) -> Self:
        """
        Create an encrypt-only session from a PEM public key string.

        Args:
            pem: PEM-encoded public key.
            strict: Raise the parse failure instead of recording it.

        Returns:
            A session holding the public key, or no key if parsing failed.

        Raises:
            KeyFormatError: If ``strict`` and the key does not parse.
        """
        return cls._load({_PUBLIC: lambda: load_public_key(pem)}, strict=strict)

    @classmethod
    def from_private_pem(
        cls, pem: str | bytes, *, password: bytes | None = None, strict: bool = False
    ) -> Self:
        """Create a decrypt-only session from a PEM private key string."""
        return cls._load({_PRIVATE: lambda: load_private_key(pem, password)}, strict=strict)

    @classmethod
    def from_pem_files(
        cls,
        public_key_path: str | Path | None,
        private_key_path: str | Path | None,
        *,
        password: bytes | None = None,
        strict: bool = False,
    ) -> Self:
        """
        Create a session from PEM key files.

        Each key is loaded on its own. A key that fails to load leaves its slot
        empty and the failure is recorded in ``load_errors``; the other key is
        kept.

        Args:
            public_key_path: Public key file, or None to skip.
            private_key_path: Private key file, or None to skip.
            password: Password for an encrypted private key.
            strict: Release whatever was loaded and raise the first failure.

        Returns:
            The session.

        Raises:
            ValueError: If both paths are None.
            SourceNotFoundError: If ``strict`` and a key file does not exist.
            FileOpenError: If ``strict`` and a key file cannot be read.
            KeyFormatError: If ``strict`` and a key does not parse.
        """
        loaders: dict[str, Callable[[], RSAPublicKey | RSAPrivateKey]] = {}
        if public_key_path is not None:
            loaders[_PUBLIC] = lambda: read_public_key_file(public_key_path)
        if private_key_path is not None:
            loaders[_PRIVATE] = lambda: read_private_key_file(private_key_path, password)
        if not loaders:
            msg = "At least one key path is required"
            raise ValueError(msg)
        return cls._load(loaders, strict=strict)

    @classmethod
    def _load(
        cls,
        loaders: dict[str, Callable[[], RSAPublicKey | RSAPrivateKey]],
        *,
        strict: bool,
    ) -> Self:
        material = cls()
        for key_type, loader in loaders.items():
            try:
                key = loader()
            except (FileOpenError, KeyFormatError) as e:
                logger.warning("Failed to load key", key_type=key_type, error=str(e))
                material._load_errors.append(e)
                continue
            if key_type == _PUBLIC:
                material._public_key = key
            else:
                material._private_key = key
            logger.debug("Loaded key", key_type=key_type, key_size=key_size_bytes(key))

        if strict and material._load_errors:
            material.close()
            raise material._load_errors[0]
        return material

    def __enter__(self) -> Self:
        return self

    def __exit__(self, *_: object) -> None:
        self.close()

    def close(self) -> None:
        """Release both keys. Idempotent."""
        if self._closed:
            return
        self._public_key = None
        self._private_key = None
        self._closed = True
        logger.debug("Key material released")

    @property
    def is_closed(self) -> bool:
        return self._closed

    @property
    def has_public_key(self) -> bool:
        return self._public_key is not None

    @property
    def has_private_key(self) -> bool:
        return self._private_key is not None

    @property
    def load_errors(self) -> tuple[BlockCryptError, ...]:
        """Failures recorded while loading keys, in load order."""
        return tuple(self._load_errors)

    def require_public_key(self) -> RSAPublicKey:
        """
        Get the public key.

        Raises:
            MissingKeyError: If no public key is loaded or the session is closed.
        """
        self._check_closed(_PUBLIC)
        if self._public_key is None:
            msg = "Encryption requires a public key"
            raise MissingKeyError(msg, key_type=_PUBLIC)
        return self._public_key

    def require_private_key(self) -> RSAPrivateKey:
        """
        Get the private key.

        Raises:
            MissingKeyError: If no private key is loaded or the session is closed.
        """
        self._check_closed(_PRIVATE)
        if self._private_key is None:
            msg = "Decryption requires a private key"
            raise MissingKeyError(msg, key_type=_PRIVATE)
        return self._private_key

    def block_sizes(self, padding_overhead: int = PADDING_OVERHEAD) -> BlockSizes:
        """
        Block sizes for the loaded key.

        Uses the public key when present, otherwise the private key.

        Raises:
            MissingKeyError: If no key is loaded.
        """
        self._check_closed("any")
        key = self._public_key if self._public_key is not None else self._private_key
        if key is None:
            msg = "No key loaded"
            raise MissingKeyError(msg, key_type="any")
        return BlockSizes.for_key_size(key_size_bytes(key), padding_overhead)

    def public_key_pem(self) -> str:
        """Export the public key as PEM text."""
        return public_key_to_pem(self.require_public_key())

    def __repr__(self) -> str:
        if self._closed:
            return "KeyMaterial(<closed>)"
        slots = [
            name
            for name, present in ((_PUBLIC, self.has_public_key), (_PRIVATE, self.has_private_key))
            if present
        ]
        return f"KeyMaterial(<{', '.join(slots) or 'empty'}>)"

    def _check_closed(self, key_type: str) -> None:
        if self._closed:
            msg = "Key material has been released"
            raise MissingKeyError(msg, key_type=key_type)
