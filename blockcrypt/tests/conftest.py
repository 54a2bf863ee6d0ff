from collections.abc import Callable
from pathlib import Path

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from blockcrypt.config import BlockCryptConfig
from blockcrypt.crypto.key_material import KeyMaterial
from blockcrypt.pipeline import BlockCipherPipeline
from blockcrypt.tests.utils.framing_cipher import FramingCipher


@pytest.fixture(scope="session")
def private_key() -> rsa.RSAPrivateKey:
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def other_private_key() -> rsa.RSAPrivateKey:
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def public_pem(private_key: rsa.RSAPrivateKey) -> bytes:
    return private_key.public_key().public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    )


@pytest.fixture(scope="session")
def private_pem(private_key: rsa.RSAPrivateKey) -> bytes:
    return private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.TraditionalOpenSSL,
        encryption_algorithm=serialization.NoEncryption(),
    )


@pytest.fixture
def key_files(tmp_path: Path, public_pem: bytes, private_pem: bytes) -> tuple[Path, Path]:
    public_path = tmp_path / "public.pem"
    private_path = tmp_path / "private.pem"
    public_path.write_bytes(public_pem)
    private_path.write_bytes(private_pem)
    return public_path, private_path


@pytest.fixture
def keys(private_key: rsa.RSAPrivateKey) -> KeyMaterial:
    return KeyMaterial(public_key=private_key.public_key(), private_key=private_key)


@pytest.fixture
def other_keys(other_private_key: rsa.RSAPrivateKey) -> KeyMaterial:
    return KeyMaterial(
        public_key=other_private_key.public_key(), private_key=other_private_key
    )


@pytest.fixture
def framing_cipher() -> FramingCipher:
    return FramingCipher()


@pytest.fixture
def make_framing_pipeline(
    framing_cipher: FramingCipher,
) -> Callable[..., BlockCipherPipeline]:
    def _make(**config: object) -> BlockCipherPipeline:
        return BlockCipherPipeline(
            KeyMaterial(), BlockCryptConfig(**config), cipher=framing_cipher
        )

    return _make
