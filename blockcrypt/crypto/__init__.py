"""
Cryptographic operations for blockcrypt.

This module provides:
- PEM key parsing
- Key material sessions (public and/or private RSA key)
- The single-block cipher protocol and its RSA implementation
"""

from blockcrypt.crypto.key_material import KeyMaterial
from blockcrypt.crypto.pem import (
    load_private_key,
    load_public_key,
    public_key_to_pem,
    read_private_key_file,
    read_public_key_file,
)
from blockcrypt.crypto.protocol import BlockCipher
from blockcrypt.crypto.rsa_backend import RsaBlockCipher

__all__ = [
    "KeyMaterial",
    "BlockCipher",
    "RsaBlockCipher",
    "load_public_key",
    "load_private_key",
    "read_public_key_file",
    "read_private_key_file",
    "public_key_to_pem",
]
