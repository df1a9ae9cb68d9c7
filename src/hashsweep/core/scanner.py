"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/scanner.py
Implements directory scanning: walks a tree, fingerprints every file and stores
the fingerprints in a FingerprintRepository.
Features:
- Depth-first walk with an explicit stack (no recursion limit on deep trees)
- Per-directory and per-file fault isolation (only OSError is recoverable)
- Optional bounded retry for transient read errors
- Cancellation through `stopped_flag`, returning the partial result
"""

import logging
import os
import time
from dataclasses import dataclass, field
from typing import Callable, Iterator, List, Optional

from hashsweep.core.filesystem import LocalFileSystem
from hashsweep.core.hasher import StreamHasher
from hashsweep.core.interfaces import FileSystem, FingerprintRepository
from hashsweep.core.models import ErrorKind, Fingerprint, ScanError, ScanResult

logger = logging.getLogger(__name__)

# Failures that will not go away by reading again
NON_TRANSIENT_ERRORS = (PermissionError, FileNotFoundError, IsADirectoryError, NotADirectoryError)


@dataclass
class _DirectoryFrame:
    directory: str
    head: ScanResult
    pending: Iterator[str]
    children: List[ScanResult] = field(default_factory=list)


class _ProgressReporter:
    """Forwards scan and hashing progress to a (stage, current, total) callback."""

    def __init__(self, callback: Optional[Callable[[str, int, object], None]]):
        self.callback = callback
        self.processed_files = 0

    def file_done(self) -> None:
        self.processed_files += 1
        if self.callback:
            self.callback("Scanning", self.processed_files, None)

    def hashing(self, fraction: float) -> None:
        if self.callback:
            self.callback("Hashing", int(fraction * 100), 100)


class DirectoryScannerImpl:
    """
    Scans directories and fingerprints the files found in them.

    The scanner keeps no state between calls; every `scan` is independent.

    Attributes:
        repository: Receives a fingerprint for every successfully hashed file
        hasher: StreamHasher used to digest file contents
        file_system: Filesystem access (LocalFileSystem by default)
        max_retries: Extra attempts for files failing with a transient OSError
        retry_delay: Seconds to wait between attempts
    """

    def __init__(
        self,
        repository: FingerprintRepository,
        hasher: Optional[StreamHasher] = None,
        file_system: Optional[FileSystem] = None,
        max_retries: int = 0,
        retry_delay: float = 0.0
    ):
        if repository is None:
            raise ValueError("A fingerprint repository is required")
        if max_retries < 0:
            raise ValueError("Retry count cannot be negative")
        self.repository = repository
        self.hasher = hasher or StreamHasher()
        self.file_system = file_system or LocalFileSystem()
        self.max_retries = max_retries
        self.retry_delay = retry_delay

    def scan(
        self,
        directory: str,
        recursive: bool,
        stopped_flag: Optional[Callable[[], bool]] = None,
        progress_callback: Optional[Callable[[str, int, object], None]] = None
    ) -> ScanResult:
        """
        Fingerprints every file in `directory` (and below it when `recursive`).

        The result equals merging, in order: the subdirectory enumeration error (if any),
        the results of every subdirectory, then the directory's own files.
        Never raises for I/O or permission problems; those end up in the result.
        """
        root = os.path.abspath(directory)
        logger.info(f"Scanning directory '{root}' (recursive: {recursive})")

        # Check for cancellation before starting
        if self._stop_requested(stopped_flag):
            logger.debug("Scan cancelled before start")
            return ScanResult(cancelled=True)

        start_time = time.time()
        progress = _ProgressReporter(progress_callback)
        cancelled = False
        result = ScanResult()

        stack = [self._open_directory(root, recursive)]
        while stack:
            frame = stack[-1]
            files_result = None

            if not cancelled and self._stop_requested(stopped_flag):
                logger.debug("Scan interrupted by user")
                cancelled = True

            if not cancelled:
                subdirectory = next(frame.pending, None)
                if subdirectory is not None:
                    stack.append(self._open_directory(subdirectory, recursive))
                    continue
                files_result = self._scan_files(frame.directory, stopped_flag, progress)
                cancelled = files_result.cancelled

            stack.pop()
            frame_result = ScanResult.merge_all([frame.head, *frame.children, files_result])
            if stack:
                stack[-1].children.append(frame_result)
            else:
                result = frame_result

        result.cancelled = cancelled
        elapsed_time = time.time() - start_time
        logger.info(
            f"Completed scan of '{root}' ({len(result.scanned_files)}/"
            f"{len(result.scanned_files) + len(result.skipped_files)} file(s) scanned, "
            f"{len(result.errors)} error(s)) in {elapsed_time:.2f} seconds"
        )
        return result

    def _open_directory(self, directory: str, recursive: bool) -> _DirectoryFrame:
        """Enters a directory: lists its subdirectories when recursive, isolating failures."""
        head = ScanResult()
        subdirectories: List[str] = []
        if recursive:
            try:
                subdirectories = self.file_system.list_subdirectories(directory)
            except (OSError, ValueError) as e:
                message = f"Could not enumerate subdirectories of directory '{directory}': {e}"
                logger.error(message)
                head.errors.append(
                    ScanError(path=directory, message=message, exception=e, kind=ErrorKind.ENUMERATION)
                )
        return _DirectoryFrame(directory=directory, head=head, pending=iter(subdirectories))

    def _scan_files(
        self,
        directory: str,
        stopped_flag: Optional[Callable[[], bool]],
        progress: _ProgressReporter
    ) -> ScanResult:
        """Fingerprints the files directly inside `directory`."""
        result = ScanResult()
        try:
            files = self.file_system.list_files(directory)
        except (OSError, ValueError) as e:
            message = f"Could not enumerate files of directory '{directory}': {e}"
            logger.error(message)
            result.errors.append(
                ScanError(path=directory, message=message, exception=e, kind=ErrorKind.ENUMERATION)
            )
            return result

        logger.debug(f"Scanning {len(files)} file(s) in '{directory}'")
        for path in files:
            if self._stop_requested(stopped_flag):
                result.cancelled = True
                return result

            try:
                fingerprint = self._fingerprint_with_retries(path, progress)
            except OSError as e:
                reason = f"Could not add record for file '{path}': {e}; skipping file."
                logger.error(reason)
                result.add_skipped(path, reason, e)
                continue

            result.scanned_files.append(fingerprint)
            progress.file_done()

        return result

    def _fingerprint_with_retries(self, path: str, progress: _ProgressReporter) -> Fingerprint:
        attempt = 0
        while True:
            try:
                return self._fingerprint_file(path, progress)
            except NON_TRANSIENT_ERRORS:
                raise
            except OSError as e:
                if attempt >= self.max_retries:
                    raise
                attempt += 1
                logger.warning(f"Error reading {path} ({e}); retry {attempt}/{self.max_retries}")
                if self.retry_delay:
                    time.sleep(self.retry_delay)

    def _fingerprint_file(self, path: str, progress: _ProgressReporter) -> Fingerprint:
        """Hashes one file, stores its fingerprint and returns it."""
        logger.debug(f"Scanning file '{path}'")
        with self.file_system.open_read(path) as stream:
            size = self.file_system.file_size(path)
            hashing_callback = progress.hashing if size > self.hasher.block_size else None
            digest = self.hasher.compute_hash(stream, total_length=size, progress_callback=hashing_callback)

        fingerprint = Fingerprint.from_path(path, size, digest, self.hasher.algorithm.name)
        self.repository.add(fingerprint)
        return fingerprint

    @staticmethod
    def _stop_requested(stopped_flag: Optional[Callable[[], bool]]) -> bool:
        return bool(stopped_flag and stopped_flag())
