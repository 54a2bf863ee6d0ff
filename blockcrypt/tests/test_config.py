from pathlib import Path

import pytest

from blockcrypt.config import BlockCryptConfig
from blockcrypt.models.crypto import PaddingScheme


def test_default_config_matches_reference_behaviour() -> None:
    config = BlockCryptConfig()

    assert config.read_window_size == 10000
    assert config.padding_overhead == 42
    assert config.padding_scheme is PaddingScheme.OAEP_SHA1
    assert config.output_dir is None


def test_output_dir_string_is_converted_to_path() -> None:
    config = BlockCryptConfig(output_dir="/tmp/out")  # type: ignore[arg-type]

    assert config.output_dir == Path("/tmp/out")


@pytest.mark.parametrize("window", [0, -1])
def test_non_positive_read_window_is_rejected(window: int) -> None:
    with pytest.raises(ValueError, match="read_window_size must be positive"):
        BlockCryptConfig(read_window_size=window)


def test_overhead_below_scheme_minimum_is_rejected() -> None:
    with pytest.raises(ValueError, match="padding_overhead must be at least 42"):
        BlockCryptConfig(padding_overhead=11)


def test_pkcs1v15_accepts_smaller_overhead() -> None:
    config = BlockCryptConfig(padding_scheme=PaddingScheme.PKCS1V15, padding_overhead=11)

    assert config.padding_overhead == 11


def test_empty_prefix_is_rejected() -> None:
    with pytest.raises(ValueError, match="encrypted_prefix must not be empty"):
        BlockCryptConfig(encrypted_prefix="")


def test_prefix_with_separator_is_rejected() -> None:
    with pytest.raises(ValueError, match="decrypted_prefix must not contain path separators"):
        BlockCryptConfig(decrypted_prefix="out/")


def test_config_is_frozen() -> None:
    config = BlockCryptConfig()

    with pytest.raises(AttributeError):
        config.read_window_size = 1  # type: ignore[misc]
