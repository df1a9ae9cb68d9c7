"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

interfaces.py

Defines core interfaces (Protocols) used throughout the scanning system.
These protocols enforce structural typing using Python's `typing.Protocol` so that
storage backends and filesystems can be swapped without touching the engine.

Key Components:
---------------
- FileSystem: Directory enumeration and file operations (real disk or an in-memory double).
- FingerprintRepository: Stores fingerprints and exposes duplicate groupings.
- DirectoryScanner: Walks a directory and produces a ScanResult.
- Resolver: Acts on duplicate groups (delete, move, nothing).
- HashAlgorithm: Standardized interface for hash functions (see hasher.py).
"""

from typing import BinaryIO, Callable, List, Optional, Protocol

from hashsweep.core.hasher import HashAlgorithm
from hashsweep.core.models import DuplicateGroup, Fingerprint, ResolutionSummary, ScanResult


# ===== Interfaces =====

class FileSystem(Protocol):
    """
    Interface for the filesystem operations the engine needs.

    Enumeration methods raise OSError (or ValueError for malformed paths) when
    the directory cannot be listed; callers isolate those failures.
    """
    def list_subdirectories(self, path: str) -> List[str]: ...
    def list_files(self, path: str) -> List[str]: ...
    def open_read(self, path: str) -> BinaryIO: ...
    def file_size(self, path: str) -> int: ...
    def exists(self, path: str) -> bool: ...
    def is_dir(self, path: str) -> bool: ...
    def make_dirs(self, path: str) -> None: ...
    def move(self, source: str, destination: str) -> None: ...
    def delete(self, path: str) -> None: ...


class FingerprintRepository(Protocol):
    """
    Interface for fingerprint storage.

    The engine never assumes a particular backing store, only this contract.
    Concurrent access safety is the implementation's concern.
    """
    def add(self, fingerprint: Fingerprint) -> None:
        """Stores a fingerprint."""
        ...

    def get_all(
        self,
        filter: Optional[Callable[[Fingerprint], bool]] = None,
        order_by: Optional[Callable[[Fingerprint], object]] = None
    ) -> List[Fingerprint]:
        """Returns stored fingerprints, optionally filtered and ordered by a key function."""
        ...

    def get_duplicate_groupings(self) -> List[DuplicateGroup]:
        """
        Returns every group of 2+ fingerprints sharing a digest.
        The first file of each group is the canonical one.
        """
        ...

    def delete(self, fingerprint: Fingerprint) -> bool:
        """Removes a fingerprint. Returns False if it was not stored."""
        ...


class DirectoryScanner(Protocol):
    """
    Interface for walking a directory tree and fingerprinting its files.
    """
    def scan(
        self,
        directory: str,
        recursive: bool,
        stopped_flag: Optional[Callable[[], bool]] = None,
        progress_callback: Optional[Callable[[str, int, object], None]] = None
    ) -> ScanResult:
        """
        Scan files in `directory`.

        Args:
            directory: Directory to scan.
            recursive: Whether to descend into subdirectories.
            stopped_flag: Function that returns True if operation should be canceled.
            progress_callback: Optional callback for reporting progress (stage, current, total).

        Returns:
            ScanResult with fingerprints, skipped files and isolated errors.
        """
        ...


class Resolver(Protocol):
    """Interface for duplicate resolution strategies."""
    def resolve(self) -> ResolutionSummary: ...


__all__ = [
    "FileSystem",
    "FingerprintRepository",
    "DirectoryScanner",
    "Resolver",
    "HashAlgorithm",
]
