"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/models.py
Data models and domain logic for file scanning and duplicate resolution.
"""

import base64
import binascii
import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, List, Optional, Tuple

from hashsweep.core.hasher import DEFAULT_BLOCK_SIZE, get_algorithm


# =============================
# Enums
# =============================

class ErrorKind(Enum):
    """Closed set of recoverable failures recorded during a scan."""
    ENUMERATION = "enumeration"   # listing a directory failed
    FILE_ACCESS = "file-access"   # opening or reading a file failed

    def __repr__(self) -> str:
        return self.value


class SortOrder(Enum):
    """Ordering of files inside a duplicate group. The first file is the one kept."""
    SHORTEST_PATH = "shortest-path"
    SHORTEST_FILENAME = "shortest-filename"
    LEXICAL = "lexical"
    INSERTION = "insertion"

    @property
    def display_name(self) -> str:
        """Human-readable name for UI display."""
        mapping = {
            SortOrder.SHORTEST_PATH: "Shortest Path",
            SortOrder.SHORTEST_FILENAME: "Shortest Filename",
            SortOrder.LEXICAL: "Lexical Path",
            SortOrder.INSERTION: "Scan Order",
        }
        return mapping.get(self, self.value)


class DuplicateHandlingMethod(Enum):
    """What to do with the non-canonical members of each duplicate group."""
    NO_ACTION = "none"
    DELETE = "delete"
    MOVE = "move"

    @property
    def display_name(self) -> str:
        mapping = {
            DuplicateHandlingMethod.NO_ACTION: "No action",
            DuplicateHandlingMethod.DELETE: "Delete",
            DuplicateHandlingMethod.MOVE: "Move",
        }
        return mapping.get(self, self.value)

    def __repr__(self) -> str:
        return self.value


# ======================
#  Core Data Models
# ======================

@dataclass(frozen=True)
class Fingerprint:
    """
    Identifies a file by location, size and content digest.
    Two fingerprints for the same path are only equal if size and digest match too.
    """
    file_name: str
    directory_name: str
    file_size: int  # in bytes
    digest: str     # base64 of the raw hash bytes
    algorithm: str = "sha256"

    def __post_init__(self):
        if not self.file_name or not self.file_name.strip():
            raise ValueError("File name cannot be empty")
        if not self.directory_name or not self.directory_name.strip():
            raise ValueError("Directory name cannot be empty")
        if self.file_size < 0:
            raise ValueError("File size cannot be negative")

        expected_size = get_algorithm(self.algorithm).digest_size
        try:
            raw = base64.b64decode(self.digest, validate=True)
        except (binascii.Error, ValueError, TypeError):
            raise ValueError(f"Digest is not valid base64: '{self.digest}'") from None
        if len(raw) != expected_size:
            raise ValueError(
                f"Digest must decode to {expected_size} bytes for {self.algorithm}, got {len(raw)}"
            )

    @classmethod
    def from_path(cls, path: str, file_size: int, digest: bytes, algorithm: str = "sha256") -> "Fingerprint":
        """Builds a fingerprint from a full path and raw digest bytes."""
        return cls(
            file_name=os.path.basename(path),
            directory_name=os.path.dirname(path),
            file_size=file_size,
            digest=base64.b64encode(digest).decode("ascii"),
            algorithm=algorithm,
        )

    @property
    def full_path(self) -> str:
        return os.path.join(self.directory_name, self.file_name)

    @property
    def path_depth(self) -> int:
        """Number of path separators; smaller means closer to the filesystem root."""
        return self.full_path.rstrip(os.sep).count(os.sep)

    @property
    def raw_digest(self) -> bytes:
        return base64.b64decode(self.digest)

    def __repr__(self):
        return f"<Fingerprint path={self.full_path}, size={self.file_size}>"


@dataclass
class ScanError:
    """An error isolated during a scan. `path` is None when not file/directory specific."""
    path: Optional[str]
    message: str
    exception: Optional[BaseException] = None
    kind: ErrorKind = ErrorKind.FILE_ACCESS

    def __post_init__(self):
        if self.message is None or not str(self.message).strip():
            raise ValueError("Scan error message cannot be empty")


@dataclass
class ScanResult:
    """
    Accumulates the outcome of one traversal unit (a directory or a batch of files).

    Results are combined with `merge`, which is associative and has the empty
    ScanResult as identity:
        merge(merge(a, b), c) == merge(a, merge(b, c))
        merge(a, ScanResult()) == a
    """
    scanned_files: List[Fingerprint] = field(default_factory=list)
    skipped_files: Dict[str, str] = field(default_factory=dict)
    errors: List[ScanError] = field(default_factory=list)
    cancelled: bool = False

    def merge(self, other: Optional["ScanResult"]) -> "ScanResult":
        """Returns a new result with `self` first; `self` wins on skipped-path collisions."""
        return ScanResult.merge_all([self, other])

    __add__ = merge

    @staticmethod
    def merge_all(results: Iterable[Optional["ScanResult"]]) -> "ScanResult":
        """
        Left fold of `merge` over `results` in a single pass.
        None entries are ignored; the first result to report a skipped path wins.
        """
        combined = ScanResult()
        for result in results:
            if result is None:
                continue
            combined.scanned_files.extend(result.scanned_files)
            for path, reason in result.skipped_files.items():
                combined.skipped_files.setdefault(path, reason)
            combined.errors.extend(result.errors)
            combined.cancelled = combined.cancelled or result.cancelled
        return combined

    def add_skipped(self, path: str, reason: str, exception: Optional[BaseException] = None) -> None:
        """Records a skipped file together with its matching ScanError."""
        self.skipped_files.setdefault(path, reason)
        self.errors.append(ScanError(path=path, message=reason, exception=exception, kind=ErrorKind.FILE_ACCESS))

    @property
    def is_empty(self) -> bool:
        return not (self.scanned_files or self.skipped_files or self.errors)

    @property
    def total_size(self) -> int:
        return sum(fp.file_size for fp in self.scanned_files)

    def __repr__(self):
        return (f"<ScanResult scanned={len(self.scanned_files)}, skipped={len(self.skipped_files)}, "
                f"errors={len(self.errors)}>")


@dataclass
class DuplicateGroup:
    """
    Fingerprints sharing one digest. The first file is canonical and is never touched.
    """
    digest: str
    files: List[Fingerprint]

    @property
    def canonical(self) -> Fingerprint:
        return self.files[0]

    @property
    def duplicates(self) -> List[Fingerprint]:
        return self.files[1:]

    @property
    def duplicate_count(self) -> int:
        """How many files are in this group."""
        return len(self.files)

    @property
    def size(self) -> int:
        return self.files[0].file_size if self.files else 0

    @property
    def wasted_bytes(self) -> int:
        return sum(fp.file_size for fp in self.duplicates)

    def is_duplicate(self) -> bool:
        """True if this group contains at least two files."""
        return self.duplicate_count >= 2

    def __repr__(self):
        return f"<DuplicateGroup digest={self.digest}, count={len(self.files)}>"


@dataclass
class ResolutionSummary:
    """Outcome of a duplicate resolution run."""
    action: DuplicateHandlingMethod
    groups: int = 0
    processed_count: int = 0
    processed_bytes: int = 0
    failed: List[Tuple[str, str]] = field(default_factory=list)
    dry_run: bool = False

    def record(self, fingerprint: Fingerprint) -> None:
        self.processed_count += 1
        self.processed_bytes += fingerprint.file_size


"""
DTOs for scan and resolution parameters with built-in validation.
Interface-agnostic — used by the CLI and by library callers alike.
"""
from hashsweep.utils.convert_utils import ConvertUtils


@dataclass
class ScanParams:
    """Parameters for a scan operation with validation."""
    root_dir: str
    recursive: bool = True
    algorithm: str = "sha256"
    block_size: int = DEFAULT_BLOCK_SIZE
    max_retries: int = 0
    retry_delay: float = 0.0

    def __post_init__(self):
        """Validate parameters immediately after creation."""
        if not self.root_dir:
            raise ValueError("Root directory cannot be empty")
        if self.block_size <= 0:
            raise ValueError("Block size must be positive")
        if self.max_retries < 0:
            raise ValueError("Retry count cannot be negative")
        if self.retry_delay < 0:
            raise ValueError("Retry delay cannot be negative")
        # Raises ValueError for unknown names
        self.algorithm = get_algorithm(self.algorithm).name

    @staticmethod
    def from_human_readable(
            root_dir: str,
            recursive: bool = True,
            algorithm: str = "sha256",
            block_size_str: str = "2MB",
            max_retries: int = 0,
    ) -> "ScanParams":
        """
        Factory method to create params from human-readable inputs.
        Useful for CLI argument parsing.
        """
        return ScanParams(
            root_dir=root_dir,
            recursive=recursive,
            algorithm=algorithm,
            block_size=ConvertUtils.human_to_bytes(block_size_str),
            max_retries=max_retries,
        )


@dataclass
class ResolutionParams:
    """Parameters for duplicate resolution with validation."""
    method: DuplicateHandlingMethod = DuplicateHandlingMethod.NO_ACTION
    move_to_dir: Optional[str] = None
    use_trash: bool = False
    dry_run: bool = False
    sort_order: SortOrder = SortOrder.SHORTEST_PATH

    def __post_init__(self):
        if self.method == DuplicateHandlingMethod.MOVE and not (self.move_to_dir or "").strip():
            raise ValueError("A destination directory is required to move duplicates")
        if self.use_trash and self.method != DuplicateHandlingMethod.DELETE:
            raise ValueError("Trash can only be used with the delete method")
