"""
blockcrypt: RSA encryption of arbitrary-size files.

The RSA primitive only encrypts one block smaller than the key per call.
blockcrypt splits files into key-sized blocks, streams them through the
primitive and reassembles the output byte for byte.

Example:
    ```python
    from blockcrypt import BlockCipherPipeline, KeyMaterial

    with KeyMaterial.from_pem_files("public.pem", "private.pem", strict=True) as keys:
        pipeline = BlockCipherPipeline(keys)
        encrypted = pipeline.encrypt_file("report.pdf")
        decrypted = pipeline.decrypt_file(encrypted)
    ```
"""

from blockcrypt.config import BlockCryptConfig
from blockcrypt.crypto.key_material import KeyMaterial
from blockcrypt.crypto.rsa_backend import RsaBlockCipher
from blockcrypt.exceptions import (
    BlockCryptError,
    CipherError,
    FileOpenError,
    KeyFormatError,
    MissingKeyError,
    SourceNotFoundError,
    TruncatedInputError,
)
from blockcrypt.models.crypto import PADDING_OVERHEAD, BlockSizes, PaddingScheme
from blockcrypt.pipeline import BlockCipherPipeline

__version__ = "0.1.0"

__all__ = [
    # Main entry points
    "BlockCipherPipeline",
    "BlockCryptConfig",
    "KeyMaterial",
    "RsaBlockCipher",
    # Models
    "BlockSizes",
    "PaddingScheme",
    "PADDING_OVERHEAD",
    # Exceptions
    "BlockCryptError",
    "FileOpenError",
    "SourceNotFoundError",
    "KeyFormatError",
    "MissingKeyError",
    "CipherError",
    "TruncatedInputError",
]
