"""
Single-block cipher protocol definition.

This defines the interface the pipeline drives, allowing the RSA primitive to
be swapped (or replaced by a test double) without changing the chunking code.
"""

from typing import Protocol, runtime_checkable

from blockcrypt.models.crypto import BlockSizes


@runtime_checkable
class BlockCipher(Protocol):
    """
    Abstract interface for a cipher that transforms one bounded block per call.
    """

    def encryption_block_sizes(self) -> BlockSizes:
        """
        Block sizes of the encrypting key.

        Raises:
            MissingKeyError: If the encrypting key is not available.
        """
        ...

    def decryption_block_sizes(self) -> BlockSizes:
        """
        Block sizes of the decrypting key.

        Raises:
            MissingKeyError: If the decrypting key is not available.
        """
        ...

    def encrypt_block(self, plaintext: bytes) -> bytes:
        """
        Encrypt a single block.

        Args:
            plaintext: At most ``max_plaintext_block`` bytes.

        Returns:
            Exactly ``ciphertext_block`` bytes.

        Raises:
            CipherError: If the primitive rejects the block.
        """
        ...

    def decrypt_block(self, ciphertext: bytes) -> bytes:
        """
        Decrypt a single block.

        Args:
            ciphertext: Exactly ``ciphertext_block`` bytes.

        Returns:
            At most ``max_plaintext_block`` bytes.

        Raises:
            CipherError: If the primitive fails (wrong key, corrupted block).
        """
        ...
