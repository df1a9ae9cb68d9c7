"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/resolver.py
Resolves duplicate groups stored in a FingerprintRepository.

For every group the first file is canonical and is left alone; every other file
is deleted or moved. Per-file failures are logged and skipped. A misconfigured
move destination aborts the run before any file is touched.
"""

import logging
import os
from abc import ABC, abstractmethod
from typing import Optional

from hashsweep.core.errors import ResolverConfigurationError
from hashsweep.core.filesystem import LocalFileSystem
from hashsweep.core.interfaces import FileSystem, FingerprintRepository, Resolver
from hashsweep.core.models import DuplicateHandlingMethod, Fingerprint, ResolutionSummary
from hashsweep.services.file_service import FileService
from hashsweep.utils.convert_utils import ConvertUtils

logger = logging.getLogger(__name__)


class DuplicateResolver(ABC):
    """
    Base class for resolvers that act on the non-canonical members of each group.
    Subclasses implement `_process` for a single file.
    """
    method: DuplicateHandlingMethod
    verb: str
    past_tense: str

    def __init__(
        self,
        repository: FingerprintRepository,
        file_system: Optional[FileSystem] = None,
        dry_run: bool = False
    ):
        if repository is None:
            raise ValueError("A fingerprint repository is required")
        self.repository = repository
        self.file_system = file_system or LocalFileSystem()
        self.dry_run = dry_run

    def resolve(self) -> ResolutionSummary:
        """
        Applies this resolver's action to every duplicate file.

        Returns:
            ResolutionSummary with counts and bytes of processed files and per-file failures.

        Raises:
            ResolverConfigurationError: if the resolver cannot run; raised before any change.
        """
        logger.debug(f"Running {type(self).__name__} (dry run: {self.dry_run})")
        self._prepare()

        groups = self.repository.get_duplicate_groupings()
        summary = ResolutionSummary(action=self.method, groups=len(groups), dry_run=self.dry_run)

        for group in groups:
            logger.debug(f"{self.verb.title()} duplicate records with hash {group.digest}")
            preserved = group.canonical
            for fingerprint in group.duplicates:
                if fingerprint.full_path == preserved.full_path:
                    logger.warning(f"Skipping '{fingerprint.full_path}': same path as the preserved file")
                    continue
                logger.info(f"{self.verb.upper()} file '{fingerprint.full_path}'; "
                            f"duplicate of '{preserved.full_path}'")
                if self.dry_run:
                    summary.record(fingerprint)
                    continue

                try:
                    self._process(fingerprint)
                except OSError as e:
                    logger.error(f"Unable to {self.verb.lower()} file '{fingerprint.full_path}': {e}")
                    summary.failed.append((fingerprint.full_path, str(e)))
                    continue

                summary.record(fingerprint)
                self.repository.delete(fingerprint)

        prefix = "Would have processed" if self.dry_run else self.past_tense
        logger.info(
            f"{prefix} {summary.processed_count} duplicate file(s) "
            f"({summary.processed_bytes} bytes, {ConvertUtils.bytes_to_human(summary.processed_bytes)}); "
            f"{len(summary.failed)} failure(s)"
        )
        return summary

    def _prepare(self) -> None:
        """Validates configuration. Raises ResolverConfigurationError."""

    @abstractmethod
    def _process(self, fingerprint: Fingerprint) -> None:
        """Acts on one duplicate file. May raise OSError."""
        raise NotImplementedError


class DeleteResolver(DuplicateResolver):
    """Deletes duplicates, permanently or into the system trash."""
    method = DuplicateHandlingMethod.DELETE
    verb = "delete"
    past_tense = "Deleted"

    def __init__(
        self,
        repository: FingerprintRepository,
        file_system: Optional[FileSystem] = None,
        dry_run: bool = False,
        use_trash: bool = False
    ):
        super().__init__(repository, file_system, dry_run)
        self.use_trash = use_trash

    def _process(self, fingerprint: Fingerprint) -> None:
        if self.use_trash:
            FileService.move_to_trash(fingerprint.full_path)
        else:
            self.file_system.delete(fingerprint.full_path)


class MoveResolver(DuplicateResolver):
    """
    Moves duplicates into one destination directory, keeping their file names.
    Name collisions get a numeric suffix: photo.jpg → photo_(1).jpg → photo_(2).jpg.
    """
    method = DuplicateHandlingMethod.MOVE
    verb = "move"
    past_tense = "Moved"

    def __init__(
        self,
        repository: FingerprintRepository,
        destination: Optional[str],
        file_system: Optional[FileSystem] = None,
        dry_run: bool = False
    ):
        super().__init__(repository, file_system, dry_run)
        self.destination = destination

    def _prepare(self) -> None:
        if self.destination is None or not str(self.destination).strip():
            raise ResolverConfigurationError("No destination directory configured for moving duplicates")

        destination = os.path.abspath(self.destination)
        if self.file_system.exists(destination):
            if not self.file_system.is_dir(destination):
                raise ResolverConfigurationError(
                    f"Duplicate file destination '{destination}' exists and is not a directory"
                )
        elif not self.dry_run:
            try:
                self.file_system.make_dirs(destination)
            except (OSError, ValueError) as e:
                raise ResolverConfigurationError(
                    f"Unable to create duplicate file directory '{destination}': {e}"
                ) from e
            logger.info(f"Created duplicate file directory '{destination}'")
        self.destination = destination

    def _process(self, fingerprint: Fingerprint) -> None:
        target = self.unique_destination(fingerprint.file_name)
        self.file_system.move(fingerprint.full_path, target)
        logger.debug(f"Moved '{fingerprint.full_path}' to '{target}'")

    def unique_destination(self, file_name: str) -> str:
        """Returns a path inside the destination that does not exist yet."""
        candidate = os.path.join(self.destination, file_name)
        stem, extension = os.path.splitext(file_name)
        index = 1
        while self.file_system.exists(candidate):
            candidate = os.path.join(self.destination, f"{stem}_({index}){extension}")
            index += 1
        return candidate


class NullResolver:
    """Leaves duplicates alone; reports the groups only."""
    method = DuplicateHandlingMethod.NO_ACTION

    def __init__(self, repository: FingerprintRepository):
        self.repository = repository

    def resolve(self) -> ResolutionSummary:
        groups = self.repository.get_duplicate_groupings()
        logger.debug("Performing no action for duplicate files")
        return ResolutionSummary(action=self.method, groups=len(groups))


def create_resolver(
    method: DuplicateHandlingMethod,
    repository: FingerprintRepository,
    file_system: Optional[FileSystem] = None,
    move_to_dir: Optional[str] = None,
    use_trash: bool = False,
    dry_run: bool = False
) -> Resolver:
    """Builds the resolver matching `method`."""
    if method == DuplicateHandlingMethod.DELETE:
        return DeleteResolver(repository, file_system, dry_run=dry_run, use_trash=use_trash)
    if method == DuplicateHandlingMethod.MOVE:
        return MoveResolver(repository, move_to_dir, file_system, dry_run=dry_run)
    if method == DuplicateHandlingMethod.NO_ACTION:
        return NullResolver(repository)
    raise ValueError(f"Unexpected duplicate handling method: {method!r}")
