"""
Single-block RSA cipher using the ``cryptography`` library.
"""

import structlog
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPrivateKey, RSAPublicKey

from blockcrypt.crypto.key_material import KeyMaterial
from blockcrypt.crypto.pem import key_size_bytes
from blockcrypt.exceptions import CipherError, KeyFormatError
from blockcrypt.models.crypto import PADDING_OVERHEAD, BlockSizes, PaddingScheme

logger = structlog.get_logger(__name__)


class RsaBlockCipher:
    """
    BlockCipher implementation over RSA keys held by a KeyMaterial session.

    Encryption block sizes come from the public key, decryption block sizes
    from the private key.

    Example:
        cipher = RsaBlockCipher(keys)
        block = cipher.encrypt_block(b"hello")
        assert cipher.decrypt_block(block) == b"hello"
    """

    def __init__(
        self,
        key_material: KeyMaterial,
        *,
        padding_scheme: PaddingScheme = PaddingScheme.OAEP_SHA1,
        padding_overhead: int = PADDING_OVERHEAD,
    ) -> None:
        """
        Args:
            key_material: Session holding the keys.
            padding_scheme: RSA padding applied to every block.
            padding_overhead: Bytes reserved for padding in each plaintext block.
        """
        self._keys = key_material
        self._padding_scheme = padding_scheme
        self._padding_overhead = padding_overhead
        if key_material.has_private_key and not padding_scheme.detects_wrong_key:
            logger.warning(
                "Padding scheme cannot detect decryption with the wrong key",
                padding_scheme=padding_scheme.value,
            )

    @property
    def padding_scheme(self) -> PaddingScheme:
        return self._padding_scheme

    def encryption_block_sizes(self) -> BlockSizes:
        return self._block_sizes(self._keys.require_public_key(), "public")

    def decryption_block_sizes(self) -> BlockSizes:
        return self._block_sizes(self._keys.require_private_key(), "private")

    def encrypt_block(self, plaintext: bytes) -> bytes:
        """
        Encrypt one block with the public key.

        Raises:
            MissingKeyError: If no public key is loaded.
            CipherError: If the block is too large or the primitive fails.
        """
        public_key = self._keys.require_public_key()
        sizes = self._block_sizes(public_key, "public")
        if len(plaintext) > sizes.max_plaintext_block:
            msg = (
                f"Plaintext block of {len(plaintext)} bytes exceeds "
                f"maximum of {sizes.max_plaintext_block}"
            )
            raise CipherError(msg)
        try:
            return public_key.encrypt(bytes(plaintext), self._padding_scheme.padding())
        except Exception as e:
            msg = f"Failed to encrypt block: {e}"
            raise CipherError(msg) from e

    def decrypt_block(self, ciphertext: bytes) -> bytes:
        """
        Decrypt one block with the private key.

        Raises:
            MissingKeyError: If no private key is loaded.
            ValueError: If the block is not exactly ``ciphertext_block`` bytes.
            CipherError: If the primitive fails, e.g. the block was encrypted
                for a different key.

        With PKCS1V15 a block encrypted for a different key usually decrypts
        to random bytes instead of raising.
        """
        private_key = self._keys.require_private_key()
        sizes = self._block_sizes(private_key, "private")
        if len(ciphertext) != sizes.ciphertext_block:
            msg = (
                f"Ciphertext block must be exactly {sizes.ciphertext_block} bytes, "
                f"got {len(ciphertext)}"
            )
            raise ValueError(msg)
        try:
            return private_key.decrypt(bytes(ciphertext), self._padding_scheme.padding())
        except Exception as e:
            msg = f"Failed to decrypt block: {e}"
            raise CipherError(msg) from e

    def _block_sizes(self, key: RSAPublicKey | RSAPrivateKey, key_type: str) -> BlockSizes:
        try:
            return BlockSizes.for_key_size(key_size_bytes(key), self._padding_overhead)
        except ValueError as e:
            raise KeyFormatError(str(e), key_type=key_type) from e
