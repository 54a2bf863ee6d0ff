"""
Cryptographic domain models.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Self

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import padding

# 2 * SHA-1 digest size + 2, the OAEP-SHA1 cost. Also covers PKCS#1 v1.5 (11).
PADDING_OVERHEAD = 42


class PaddingScheme(Enum):
    """
    RSA padding schemes usable for block encryption.

    OAEP_SHA1 rejects ciphertext decrypted with the wrong private key.
    PKCS1V15 is kept for files written with it; the library applies implicit
    rejection on decryption, so a wrong key usually yields random bytes
    instead of an error.
    """

    OAEP_SHA1 = "oaep-sha1"
    PKCS1V15 = "pkcs1v15"  # wrong-key decryption is not detected

    @property
    def detects_wrong_key(self) -> bool:
        """Whether decrypting with a mismatched private key raises."""
        return self is PaddingScheme.OAEP_SHA1

    @property
    def min_overhead(self) -> int:
        """Smallest padding overhead in bytes the scheme can work with."""
        match self:
            case PaddingScheme.OAEP_SHA1:
                return 2 * hashes.SHA1.digest_size + 2
            case PaddingScheme.PKCS1V15:
                return 11

    def padding(self) -> padding.AsymmetricPadding:
        """Build the ``cryptography`` padding object for this scheme."""
        match self:
            case PaddingScheme.OAEP_SHA1:
                return padding.OAEP(
                    mgf=padding.MGF1(algorithm=hashes.SHA1()),
                    algorithm=hashes.SHA1(),
                    label=None,
                )
            case PaddingScheme.PKCS1V15:
                return padding.PKCS1v15()


@dataclass(frozen=True, kw_only=True)
class BlockSizes:
    """
    Block geometry derived from an RSA modulus size.

    Attributes:
        max_plaintext_block: Largest plaintext slice one encrypt call accepts.
        ciphertext_block: Exact size of every ciphertext block (the modulus size).
    """

    max_plaintext_block: int
    ciphertext_block: int

    def __post_init__(self) -> None:
        if self.max_plaintext_block <= 0:
            msg = "max_plaintext_block must be positive"
            raise ValueError(msg)
        if self.ciphertext_block < self.max_plaintext_block:
            msg = "ciphertext_block must not be smaller than max_plaintext_block"
            raise ValueError(msg)

    @classmethod
    def for_key_size(cls, key_size: int, padding_overhead: int = PADDING_OVERHEAD) -> Self:
        """
        Compute block sizes for a modulus of ``key_size`` bytes.

        Raises:
            ValueError: If the overhead is negative or not smaller than the key size.
        """
        if padding_overhead < 0:
            msg = "padding_overhead must be non-negative"
            raise ValueError(msg)
        if padding_overhead >= key_size:
            msg = f"Key size {key_size} bytes leaves no room for {padding_overhead} padding bytes"
            raise ValueError(msg)
        return cls(max_plaintext_block=key_size - padding_overhead, ciphertext_block=key_size)

    @property
    def padding_overhead(self) -> int:
        return self.ciphertext_block - self.max_plaintext_block

    def block_count(self, plaintext_length: int) -> int:
        """Number of plaintext blocks needed for ``plaintext_length`` bytes."""
        return -(-plaintext_length // self.max_plaintext_block)

    def ciphertext_length(self, plaintext_length: int) -> int:
        """Ciphertext size for a plaintext of ``plaintext_length`` bytes."""
        return self.block_count(plaintext_length) * self.ciphertext_block
