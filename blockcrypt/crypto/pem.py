"""
PEM key parsing.

Thin layer over ``cryptography.hazmat.primitives.serialization`` that maps
library errors to blockcrypt errors and rejects keys that cannot be used for
block encryption.
"""

from pathlib import Path

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPrivateKey, RSAPublicKey

from blockcrypt.exceptions import FileOpenError, KeyFormatError, SourceNotFoundError
from blockcrypt.models.crypto import PADDING_OVERHEAD


def key_size_bytes(key: RSAPublicKey | RSAPrivateKey) -> int:
    """Modulus size of ``key`` in bytes."""
    return (key.key_size + 7) // 8


def load_public_key(pem: str | bytes) -> RSAPublicKey:
    """
    Parse an RSA public key from PEM text.

    Args:
        pem: SubjectPublicKeyInfo or PKCS#1 PEM.

    Returns:
        The public key handle.

    Raises:
        KeyFormatError: If the text is not a usable RSA public key.
    """
    data = pem.encode("ascii", errors="replace") if isinstance(pem, str) else pem
    try:
        key = serialization.load_pem_public_key(data)
    except (ValueError, UnsupportedAlgorithm) as e:
        msg = f"Failed to parse public key: {e}"
        raise KeyFormatError(msg, key_type="public") from e
    if not isinstance(key, RSAPublicKey):
        msg = f"Expected an RSA public key, got {type(key).__name__}"
        raise KeyFormatError(msg, key_type="public")
    _check_key_size(key, "public")
    return key


def load_private_key(pem: str | bytes, password: bytes | None = None) -> RSAPrivateKey:
    """
    Parse an RSA private key from PEM text.

    Args:
        pem: PKCS#1 or PKCS#8 PEM.
        password: Password for encrypted PEM, if any.

    Returns:
        The private key handle.

    Raises:
        KeyFormatError: If the text is not a usable RSA private key or the
            password is missing or wrong.
    """
    data = pem.encode("ascii", errors="replace") if isinstance(pem, str) else pem
    try:
        key = serialization.load_pem_private_key(data, password=password)
    except (ValueError, TypeError, UnsupportedAlgorithm) as e:
        msg = f"Failed to parse private key: {e}"
        raise KeyFormatError(msg, key_type="private") from e
    if not isinstance(key, RSAPrivateKey):
        msg = f"Expected an RSA private key, got {type(key).__name__}"
        raise KeyFormatError(msg, key_type="private")
    _check_key_size(key, "private")
    return key


def read_public_key_file(path: str | Path) -> RSAPublicKey:
    """Read and parse a PEM public key file."""
    return load_public_key(_read_key_file(Path(path), "public"))


def read_private_key_file(path: str | Path, password: bytes | None = None) -> RSAPrivateKey:
    """Read and parse a PEM private key file."""
    return load_private_key(_read_key_file(Path(path), "private"), password)


def public_key_to_pem(key: RSAPublicKey) -> str:
    """Serialize a public key as SubjectPublicKeyInfo PEM text."""
    return key.public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    ).decode("ascii")


def _read_key_file(path: Path, key_type: str) -> bytes:
    try:
        return path.read_bytes()
    except FileNotFoundError as e:
        msg = f"{key_type.capitalize()} key file not found"
        raise SourceNotFoundError(msg, path=path) from e
    except OSError as e:
        msg = f"Failed to open {key_type} key file: {e}"
        raise FileOpenError(msg, path=path) from e
    except ValueError as e:
        msg = f"Invalid {key_type} key file path: {e}"
        raise FileOpenError(msg, path=path) from e


def _check_key_size(key: RSAPublicKey | RSAPrivateKey, key_type: str) -> None:
    size = key_size_bytes(key)
    if size > PADDING_OVERHEAD:
        return
    msg = f"Key modulus of {size} bytes is too small for block encryption"
    raise KeyFormatError(msg, key_type=key_type)
