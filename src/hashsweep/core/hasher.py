"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

hasher.py
Implements streaming content hashing with pluggable hash algorithms.

StreamHasher reads a binary stream block by block and feeds every block into an
incremental hash object, so files of any size are hashed in constant memory.
"""

import hashlib
import logging
from typing import BinaryIO, Callable, Dict, Optional, Protocol

import xxhash

from hashsweep.core.errors import HasherDisposedError

logger = logging.getLogger(__name__)

DEFAULT_BLOCK_SIZE = 2 * 1024 * 1024  # 2 MiB


class IncrementalHash(Protocol):
    def update(self, data: bytes) -> None: ...
    def digest(self) -> bytes: ...


class HashAlgorithm(Protocol):
    """
    Interface for generic hash algorithms.

    Allows plugging in different hashing functions like SHA-256, BLAKE2 or xxHash
    without affecting the rest of the scanning logic.
    """
    name: str
    digest_size: int

    def new(self) -> IncrementalHash:
        """Returns a fresh incremental hash object."""
        ...


class Sha256AlgorithmImpl:
    """SHA-256 (cryptographic). Default algorithm for fingerprints."""
    name = "sha256"
    digest_size = 32

    def new(self) -> IncrementalHash:
        return hashlib.sha256()


class Blake2bAlgorithmImpl:
    """BLAKE2b with a 512-bit digest (cryptographic)."""
    name = "blake2b"
    digest_size = 64

    def new(self) -> IncrementalHash:
        return hashlib.blake2b()


# Use the same way to implement and use any other hashing algorithm
class XXHashAlgorithmImpl:
    """xxHash3 128-bit. Not cryptographic, but much faster on large media libraries."""
    name = "xxh128"
    digest_size = 16

    def new(self) -> IncrementalHash:
        return xxhash.xxh3_128()


ALGORITHMS: Dict[str, HashAlgorithm] = {
    algorithm.name: algorithm
    for algorithm in (Sha256AlgorithmImpl(), Blake2bAlgorithmImpl(), XXHashAlgorithmImpl())
}


def get_algorithm(name: str) -> HashAlgorithm:
    """Looks up a registered algorithm by name ('sha256', 'blake2b', 'xxh128')."""
    try:
        return ALGORITHMS[name.lower()]
    except KeyError:
        raise ValueError(
            f"Unknown hash algorithm: '{name}'. Supported: {', '.join(sorted(ALGORITHMS))}"
        ) from None


class StreamHasher:
    """
    Computes digests of byte streams using any HashAlgorithm.

    The hasher can be used as a context manager. Once closed, every call
    raises HasherDisposedError instead of returning a result.
    """

    def __init__(self, algorithm: Optional[HashAlgorithm] = None, block_size: int = DEFAULT_BLOCK_SIZE):
        if block_size <= 0:
            raise ValueError("Block size must be positive")
        self.algorithm = algorithm or Sha256AlgorithmImpl()
        self.block_size = block_size
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def compute_hash(
            self,
            stream: BinaryIO,
            total_length: Optional[int] = None,
            progress_callback: Optional[Callable[[float], None]] = None
    ) -> bytes:
        """
        Reads the stream to its end and returns the raw digest bytes.

        Args:
            stream: Binary stream positioned where hashing should start.
            total_length: Expected number of bytes, used only for progress reporting.
            progress_callback: Receives the fraction of bytes consumed (0.0 - 1.0).

        Returns:
            Digest of length algorithm.digest_size. An empty stream yields the digest of b''.
        """
        self._ensure_open()
        hash_obj = self.algorithm.new()
        consumed = 0

        while True:
            block = stream.read(self.block_size)
            if not block:
                break
            hash_obj.update(block)
            consumed += len(block)
            if progress_callback and total_length:
                progress_callback(min(consumed / total_length, 1.0))

        return hash_obj.digest()

    def compute_file_hash(self, path: str) -> bytes:
        """Opens the file at `path` in binary mode and hashes its whole content."""
        self._ensure_open()
        with open(path, "rb") as f:
            return self.compute_hash(f)

    def close(self) -> None:
        if not self._closed:
            logger.debug(f"Disposing {self.algorithm.name} hasher")
        self._closed = True

    def __enter__(self) -> "StreamHasher":
        self._ensure_open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _ensure_open(self) -> None:
        if self._closed:
            raise HasherDisposedError(f"{type(self).__name__} has been disposed")
