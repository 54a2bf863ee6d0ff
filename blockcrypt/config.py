"""
blockcrypt configuration.
"""

import os
from dataclasses import dataclass
from pathlib import Path

from blockcrypt.models.crypto import PADDING_OVERHEAD, PaddingScheme


@dataclass(frozen=True, kw_only=True)
class BlockCryptConfig:
    """
    Attributes:
        read_window_size: Bytes read from the source file per read call.
        padding_scheme: RSA padding used for every block. PKCS1V15 cannot detect
            decryption with the wrong private key; use it only for legacy files.
        padding_overhead: Bytes subtracted from the key size to get the plaintext block size.
        output_dir: Directory for output files when no explicit path is given.
            Encryption defaults to the system temp directory, decryption to the
            current directory.
        encrypted_prefix: File name prefix for encrypted output.
        decrypted_prefix: File name prefix for decrypted output.
    """

    read_window_size: int = 10000
    padding_scheme: PaddingScheme = PaddingScheme.OAEP_SHA1
    padding_overhead: int = PADDING_OVERHEAD
    output_dir: Path | None = None
    encrypted_prefix: str = "encrypted_"
    decrypted_prefix: str = "decrypted_"

    def __post_init__(self) -> None:
        if self.output_dir is not None and not isinstance(self.output_dir, Path):
            object.__setattr__(self, "output_dir", Path(self.output_dir))
        if self.read_window_size <= 0:
            msg = "read_window_size must be positive"
            raise ValueError(msg)
        if self.padding_overhead < self.padding_scheme.min_overhead:
            msg = (
                f"padding_overhead must be at least {self.padding_scheme.min_overhead} "
                f"for {self.padding_scheme.name}"
            )
            raise ValueError(msg)
        for name in ("encrypted_prefix", "decrypted_prefix"):
            prefix = getattr(self, name)
            if not prefix:
                msg = f"{name} must not be empty"
                raise ValueError(msg)
            if os.sep in prefix or (os.altsep is not None and os.altsep in prefix):
                msg = f"{name} must not contain path separators"
                raise ValueError(msg)
