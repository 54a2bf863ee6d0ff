from unittest.mock import Mock

import pytest
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPublicKey
from structlog.testing import capture_logs

from blockcrypt.crypto.key_material import KeyMaterial
from blockcrypt.crypto.protocol import BlockCipher
from blockcrypt.crypto.rsa_backend import RsaBlockCipher
from blockcrypt.exceptions import CipherError, KeyFormatError, MissingKeyError
from blockcrypt.models.crypto import PaddingScheme


def test_rsa_block_cipher_implements_protocol(keys: KeyMaterial) -> None:
    assert isinstance(RsaBlockCipher(keys), BlockCipher)


def test_encrypt_block_returns_full_ciphertext_block(keys: KeyMaterial) -> None:
    cipher = RsaBlockCipher(keys)

    ciphertext = cipher.encrypt_block(b"hello")

    assert len(ciphertext) == 256
    assert cipher.decrypt_block(ciphertext) == b"hello"


def test_encrypt_block_accepts_maximum_plaintext(keys: KeyMaterial) -> None:
    cipher = RsaBlockCipher(keys)
    plaintext = bytes(range(214))

    assert cipher.decrypt_block(cipher.encrypt_block(plaintext)) == plaintext


def test_encrypt_block_rejects_oversize_plaintext(keys: KeyMaterial) -> None:
    cipher = RsaBlockCipher(keys)

    with pytest.raises(CipherError, match="exceeds maximum of 214"):
        cipher.encrypt_block(bytes(215))


def test_encrypt_block_accepts_empty_plaintext(keys: KeyMaterial) -> None:
    cipher = RsaBlockCipher(keys)

    assert cipher.decrypt_block(cipher.encrypt_block(b"")) == b""


def test_decrypt_block_rejects_short_block(keys: KeyMaterial) -> None:
    cipher = RsaBlockCipher(keys)

    with pytest.raises(ValueError, match="exactly 256 bytes"):
        cipher.decrypt_block(bytes(255))


def test_decrypt_block_with_wrong_key_raises_cipher_error(
    keys: KeyMaterial, other_keys: KeyMaterial
) -> None:
    ciphertext = RsaBlockCipher(keys).encrypt_block(b"secret")

    with pytest.raises(CipherError, match="Failed to decrypt block"):
        RsaBlockCipher(other_keys).decrypt_block(ciphertext)


def test_pkcs1v15_round_trip(keys: KeyMaterial) -> None:
    cipher = RsaBlockCipher(keys, padding_scheme=PaddingScheme.PKCS1V15)

    assert cipher.padding_scheme is PaddingScheme.PKCS1V15
    assert cipher.decrypt_block(cipher.encrypt_block(b"legacy")) == b"legacy"


def test_pkcs1v15_with_private_key_warns_wrong_key_is_undetected(keys: KeyMaterial) -> None:
    with capture_logs() as logs:
        RsaBlockCipher(keys, padding_scheme=PaddingScheme.PKCS1V15)

    [entry] = logs
    assert entry["log_level"] == "warning"
    assert entry["padding_scheme"] == "pkcs1v15"
    assert "wrong key" in entry["event"]


def test_oaep_and_encrypt_only_ciphers_do_not_warn(keys: KeyMaterial) -> None:
    encrypt_only = KeyMaterial(public_key=keys.require_public_key())

    with capture_logs() as logs:
        RsaBlockCipher(keys)
        RsaBlockCipher(encrypt_only, padding_scheme=PaddingScheme.PKCS1V15)

    assert logs == []


def test_pkcs1v15_wrong_key_never_returns_plaintext(
    keys: KeyMaterial, other_keys: KeyMaterial
) -> None:
    plaintext = b"legacy secret"
    legacy = RsaBlockCipher(keys, padding_scheme=PaddingScheme.PKCS1V15)
    ciphertext = legacy.encrypt_block(plaintext)
    wrong = RsaBlockCipher(other_keys, padding_scheme=PaddingScheme.PKCS1V15)

    try:
        recovered = wrong.decrypt_block(ciphertext)
    except CipherError:
        return
    assert recovered != plaintext


def test_encrypt_block_without_public_key_raises(keys: KeyMaterial) -> None:
    decrypt_only = KeyMaterial(private_key=keys.require_private_key())

    with pytest.raises(MissingKeyError):
        RsaBlockCipher(decrypt_only).encrypt_block(b"x")


def test_decrypt_block_without_private_key_raises(keys: KeyMaterial) -> None:
    encrypt_only = KeyMaterial(public_key=keys.require_public_key())

    with pytest.raises(MissingKeyError):
        RsaBlockCipher(encrypt_only).decrypt_block(bytes(256))


def test_primitive_failure_is_wrapped_in_cipher_error() -> None:
    public_key = Mock(spec=RSAPublicKey)
    public_key.key_size = 2048
    public_key.encrypt.side_effect = ValueError("Encryption failed")
    cipher = RsaBlockCipher(KeyMaterial(public_key=public_key))

    with pytest.raises(CipherError, match="Failed to encrypt block: Encryption failed"):
        cipher.encrypt_block(b"data")


def test_block_sizes_follow_each_key(keys: KeyMaterial) -> None:
    cipher = RsaBlockCipher(keys, padding_overhead=56)

    assert cipher.encryption_block_sizes().max_plaintext_block == 200
    assert cipher.decryption_block_sizes().ciphertext_block == 256


def test_overhead_larger_than_key_raises_key_format_error(keys: KeyMaterial) -> None:
    cipher = RsaBlockCipher(keys, padding_overhead=300)

    with pytest.raises(KeyFormatError):
        cipher.encryption_block_sizes()
