"""
Unified command orchestrator for scanning and duplicate resolution.
This is the SINGLE source of truth for business logic — used by the CLI and by library callers.
"""
import logging
from typing import Callable, List, Optional, Tuple

from hashsweep.core.filesystem import LocalFileSystem
from hashsweep.core.hasher import StreamHasher, get_algorithm
from hashsweep.core.interfaces import DirectoryScanner, FileSystem, FingerprintRepository
from hashsweep.core.models import (
    DuplicateGroup, DuplicateHandlingMethod, ResolutionParams, ResolutionSummary, ScanParams, ScanResult)
from hashsweep.core.repository import MemoryFingerprintRepository
from hashsweep.core.resolver import create_resolver
from hashsweep.core.scanner import DirectoryScannerImpl

logger = logging.getLogger(__name__)


class ScanCommand:
    """
    Orchestrates the entire workflow:
    1. Scan the root directory, storing fingerprints in the repository
    2. Collect duplicate groupings
    3. Resolve duplicates with the configured method (optional)

    Usage:
        command = ScanCommand()
        scan_result, groups, summary = command.execute(
            ScanParams(root_dir="~/Pictures"),
            ResolutionParams(method=DuplicateHandlingMethod.MOVE, move_to_dir="/tmp/dupes"),
            progress_callback=cli_progress_printer,
            stopped_flag=signal_handler_check
        )
    """

    def __init__(
        self,
        repository: Optional[FingerprintRepository] = None,
        file_system: Optional[FileSystem] = None
    ):
        self._repository = repository
        self._file_system = file_system or LocalFileSystem()

    @property
    def repository(self) -> Optional[FingerprintRepository]:
        return self._repository

    def execute(
            self,
            scan_params: ScanParams,
            resolution_params: Optional[ResolutionParams] = None,
            progress_callback: Optional[Callable[[str, int, Optional[int]], None]] = None,
            stopped_flag: Optional[Callable[[], bool]] = None
    ) -> Tuple[ScanResult, List[DuplicateGroup], Optional[ResolutionSummary]]:
        """
        Execute scan and (optionally) resolution with given parameters.

        Args:
            scan_params: Validated scan parameters
            resolution_params: What to do with duplicates; None or NO_ACTION only reports them
            progress_callback: (stage: str, current: int, total: Optional[int]) -> None
            stopped_flag: () -> bool (returns True if operation should stop)

        Returns:
            Tuple of (scan_result, duplicate_groups, resolution_summary or None)

        Raises:
            ResolverConfigurationError: If the resolver cannot run with its configuration
        """
        resolution_params = resolution_params or ResolutionParams()
        if self._repository is None:
            self._repository = MemoryFingerprintRepository(sort_order=resolution_params.sort_order)

        # Step 1: Scan
        with StreamHasher(get_algorithm(scan_params.algorithm), scan_params.block_size) as hasher:
            scanner: DirectoryScanner = DirectoryScannerImpl(
                repository=self._repository,
                hasher=hasher,
                file_system=self._file_system,
                max_retries=scan_params.max_retries,
                retry_delay=scan_params.retry_delay,
            )
            scan_result = scanner.scan(
                scan_params.root_dir,
                scan_params.recursive,
                stopped_flag=stopped_flag,
                progress_callback=progress_callback
            )

        # Step 2: Collect duplicate groups
        groups = self._repository.get_duplicate_groupings()
        logger.info(f"Found {len(groups)} duplicate group(s)")

        if scan_result.cancelled:
            logger.warning("Scan was cancelled; duplicates are reported but not resolved")
            return scan_result, groups, None

        # Step 3: Resolve
        return scan_result, groups, self.resolve(resolution_params)

    def resolve(self, resolution_params: ResolutionParams) -> Optional[ResolutionSummary]:
        """
        Resolves duplicates in the repository filled by a previous `execute`.
        Returns None for NO_ACTION.
        """
        if self._repository is None:
            raise RuntimeError("Nothing to resolve: no scan has been executed")
        if resolution_params.method == DuplicateHandlingMethod.NO_ACTION:
            return None

        resolver = create_resolver(
            resolution_params.method,
            self._repository,
            file_system=self._file_system,
            move_to_dir=resolution_params.move_to_dir,
            use_trash=resolution_params.use_trash,
            dry_run=resolution_params.dry_run,
        )
        return resolver.resolve()
