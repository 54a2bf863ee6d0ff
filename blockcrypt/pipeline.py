"""
Chunked RSA transform for buffers, streams and files.

The RSA primitive can only process one block smaller than the key per call.
The pipeline slices input into blocks the primitive accepts and concatenates
the results in order. Ciphertext carries no framing: every block is exactly
the key size, so decryption relies on positional slicing alone.
"""

import tempfile
from collections.abc import Callable, Iterator
from pathlib import Path
from typing import BinaryIO

import structlog

from blockcrypt.config import BlockCryptConfig
from blockcrypt.crypto.key_material import KeyMaterial
from blockcrypt.crypto.protocol import BlockCipher
from blockcrypt.crypto.rsa_backend import RsaBlockCipher
from blockcrypt.exceptions import (
    CipherError,
    FileOpenError,
    SourceNotFoundError,
    TruncatedInputError,
)
from blockcrypt.models.crypto import BlockSizes

logger = structlog.get_logger(__name__)


class BlockCipherPipeline:
    """
    Streams data through a single-block cipher.

    Memory use is bounded by one read window plus one partial block,
    whatever the file size.

    Example:
        ```python
        with KeyMaterial.from_pem_files("public.pem", "private.pem") as keys:
            pipeline = BlockCipherPipeline(keys)
            encrypted = pipeline.encrypt_file("report.pdf")
            decrypted = pipeline.decrypt_file(encrypted)
        ```
    """

    def __init__(
        self,
        key_material: KeyMaterial,
        config: BlockCryptConfig | None = None,
        *,
        cipher: BlockCipher | None = None,
    ) -> None:
        """
        Args:
            key_material: Session holding the keys.
            config: Pipeline configuration. Uses defaults if not provided.
            cipher: Single-block cipher. Defaults to RSA over ``key_material``.
        """
        self._config = config or BlockCryptConfig()
        self._keys = key_material
        self._cipher = cipher or RsaBlockCipher(
            key_material,
            padding_scheme=self._config.padding_scheme,
            padding_overhead=self._config.padding_overhead,
        )

    @property
    def config(self) -> BlockCryptConfig:
        return self._config

    @property
    def key_material(self) -> KeyMaterial:
        return self._keys

    def encryption_block_sizes(self) -> BlockSizes:
        return self._cipher.encryption_block_sizes()

    def decryption_block_sizes(self) -> BlockSizes:
        return self._cipher.decryption_block_sizes()

    # Buffers

    def encrypt_buffer(self, data: bytes) -> bytes:
        """
        Encrypt a buffer of any length.

        Args:
            data: Plaintext.

        Returns:
            ``ciphertext_block`` bytes per ``max_plaintext_block`` bytes of
            input (rounded up). Empty input gives empty output.

        Raises:
            MissingKeyError: If no public key is loaded.
            CipherError: If any block fails to encrypt.
        """
        sizes = self._cipher.encryption_block_sizes()
        return self._encrypt_blocks(memoryview(data), sizes, first_index=0)

    def decrypt_buffer(self, data: bytes) -> bytes:
        """
        Decrypt a buffer of whole ciphertext blocks.

        Args:
            data: Ciphertext, a multiple of ``ciphertext_block`` bytes.

        Returns:
            Plaintext.

        Raises:
            MissingKeyError: If no private key is loaded.
            TruncatedInputError: If the length is not a whole number of blocks.
                Nothing is decrypted in that case.
            CipherError: If any block fails to decrypt.
        """
        sizes = self._cipher.decryption_block_sizes()
        _check_whole_blocks(len(data), sizes.ciphertext_block)
        return self._decrypt_blocks(memoryview(data), sizes, first_index=0)

    # Streams

    def iter_encrypt(self, stream: BinaryIO, window_size: int | None = None) -> Iterator[bytes]:
        """
        Encrypt a readable binary stream window by window.

        Plaintext left over after the last whole block of a window is carried
        into the next one, so the output is identical to ``encrypt_buffer``
        on the whole content for any window size.

        Args:
            stream: Blocking binary stream to read plaintext from.
            window_size: Bytes per read. Defaults to ``config.read_window_size``.

        Yields:
            Ciphertext chunks in order.

        Raises:
            ValueError: If a read on a non-blocking stream returns ``None``.
        """
        sizes = self._cipher.encryption_block_sizes()
        window = self._window_size(window_size)
        index = 0
        for aligned in _aligned_reads(stream, window, sizes.max_plaintext_block):
            yield self._encrypt_blocks(aligned, sizes, first_index=index)
            index += sizes.block_count(len(aligned))

    def iter_decrypt(self, stream: BinaryIO, window_size: int | None = None) -> Iterator[bytes]:
        """
        Decrypt a readable binary stream window by window.

        An incomplete ciphertext block at the end of a window is carried into
        the next one. Bytes left over at end of stream mean the input is
        truncated.

        Args:
            stream: Blocking binary stream to read ciphertext from.
            window_size: Bytes per read. Defaults to ``config.read_window_size``.

        Yields:
            Plaintext chunks in order.

        Raises:
            TruncatedInputError: If the stream ends inside a ciphertext block.
            ValueError: If a read on a non-blocking stream returns ``None``.
        """
        sizes = self._cipher.decryption_block_sizes()
        block = sizes.ciphertext_block
        index = 0
        total = 0
        for aligned in _aligned_reads(stream, self._window_size(window_size), block):
            total += len(aligned)
            _check_whole_blocks(total, block)
            yield self._decrypt_blocks(aligned, sizes, first_index=index)
            index += len(aligned) // block

    # Files

    def encrypt_file(self, path: str | Path, output_path: str | Path | None = None) -> Path:
        """
        Encrypt a file.

        Args:
            path: File to encrypt.
            output_path: Destination. Defaults to ``encrypted_<name>`` in
                ``config.output_dir`` or the system temp directory.

        Returns:
            Path of the encrypted file.

        Raises:
            SourceNotFoundError: If ``path`` does not exist.
            FileOpenError: If the source cannot be read or the output cannot be created.
            MissingKeyError: If no public key is loaded.
            CipherError: If a block fails to encrypt. Partial output is left on disk.
        """
        source = _check_source(path)
        self._cipher.encryption_block_sizes()
        if output_path is not None:
            destination = Path(output_path)
        else:
            directory = self._config.output_dir or Path(tempfile.gettempdir())
            destination = directory / f"{self._config.encrypted_prefix}{source.name}"

        logger.debug("Encrypting file", path=str(source), destination=str(destination))
        self._transform_file(source, destination, self.iter_encrypt)
        logger.info("File encrypted", path=str(source), destination=str(destination))
        return destination

    def decrypt_file(self, path: str | Path, output_path: str | Path | None = None) -> Path:
        """
        Decrypt a file produced by ``encrypt_file``.

        Args:
            path: File to decrypt.
            output_path: Destination. Defaults to ``decrypted_<name>`` in
                ``config.output_dir`` or the current directory, with the
                encrypted prefix stripped from ``<name>``.

        Returns:
            Path of the decrypted file.

        Raises:
            SourceNotFoundError: If ``path`` does not exist.
            FileOpenError: If the source cannot be read or the output cannot be created.
            MissingKeyError: If no private key is loaded.
            TruncatedInputError: If the file is not a whole number of blocks.
            CipherError: If a block fails to decrypt. Partial output is left on disk.
        """
        source = _check_source(path)
        self._cipher.decryption_block_sizes()
        if output_path is not None:
            destination = Path(output_path)
        else:
            directory = self._config.output_dir or Path.cwd()
            name = source.name.removeprefix(self._config.encrypted_prefix) or source.name
            destination = directory / f"{self._config.decrypted_prefix}{name}"

        logger.debug("Decrypting file", path=str(source), destination=str(destination))
        self._transform_file(source, destination, self.iter_decrypt)
        logger.info("File decrypted", path=str(source), destination=str(destination))
        return destination

    def _transform_file(
        self,
        source: Path,
        destination: Path,
        transform: Callable[[BinaryIO], Iterator[bytes]],
    ) -> None:
        if destination.resolve() == source.resolve():
            msg = f"Output path must differ from input path: {source}"
            raise ValueError(msg)

        try:
            reader = source.open("rb")
        except OSError as e:
            msg = f"Unable to open file: {e}"
            raise FileOpenError(msg, path=source) from e

        with reader:
            try:
                destination.parent.mkdir(parents=True, exist_ok=True)
                writer = destination.open("wb")
            except OSError as e:
                msg = f"Unable to create output file: {e}"
                raise FileOpenError(msg, path=destination) from e

            with writer:
                for chunk in transform(reader):
                    writer.write(chunk)

    def _encrypt_blocks(self, data: memoryview, sizes: BlockSizes, first_index: int) -> bytes:
        step = sizes.max_plaintext_block
        out = bytearray()
        for offset in range(0, len(data), step):
            index = first_index + offset // step
            try:
                out += self._cipher.encrypt_block(data[offset : offset + step].tobytes())
            except CipherError as e:
                raise CipherError(e.message, block_index=index) from e
        return bytes(out)

    def _decrypt_blocks(self, data: memoryview, sizes: BlockSizes, first_index: int) -> bytes:
        step = sizes.ciphertext_block
        out = bytearray()
        for offset in range(0, len(data), step):
            index = first_index + offset // step
            try:
                out += self._cipher.decrypt_block(data[offset : offset + step].tobytes())
            except CipherError as e:
                raise CipherError(e.message, block_index=index) from e
        return bytes(out)

    def _window_size(self, window_size: int | None) -> int:
        if window_size is None:
            return self._config.read_window_size
        if window_size <= 0:
            msg = "window_size must be positive"
            raise ValueError(msg)
        return window_size


def _aligned_reads(stream: BinaryIO, window_size: int, block_size: int) -> Iterator[memoryview]:
    """
    Read ``stream`` in windows and re-cut the bytes on block boundaries.

    Every yielded chunk is a whole number of blocks, except the final one,
    which holds whatever is left at end of stream.

    Raises:
        ValueError: If the stream is non-blocking and a read returns ``None``.
    """
    pending = bytearray()
    while True:
        chunk = stream.read(window_size)
        if chunk is None:
            msg = "Stream read returned None; non-blocking streams are not supported"
            raise ValueError(msg)
        if not chunk:
            break
        pending += chunk
        whole = len(pending) - len(pending) % block_size
        if whole:
            aligned = bytes(pending[:whole])
            del pending[:whole]
            yield memoryview(aligned)
    if pending:
        yield memoryview(bytes(pending))


def _check_whole_blocks(length: int, block_size: int) -> None:
    if length % block_size == 0:
        return
    msg = f"Ciphertext length {length} is not a multiple of the {block_size}-byte block size"
    raise TruncatedInputError(msg, length=length, block_size=block_size)


def _check_source(path: str | Path) -> Path:
    source = Path(path)
    if not source.exists():
        msg = f"File not found: {source}"
        raise SourceNotFoundError(msg, path=source)
    if not source.is_file():
        msg = f"Not a regular file: {source}"
        raise FileOpenError(msg, path=source)
    return source
