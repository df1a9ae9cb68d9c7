"""
HashSweep — content fingerprinting and duplicate file resolution.

Core features:
- Block-wise content hashing (SHA-256 by default, BLAKE2b and xxHash128 available)
- Fault-isolating directory scan: unreadable files and directories are recorded, never fatal
- Duplicate groups with a deterministic canonical file that is always kept
- Delete (optionally to the system trash via send2trash) or move duplicates, with dry-run
- CLI interface with CSV fingerprint export
"""

# Get version
try:
    from importlib.metadata import version as _version
    __version__ = _version("hashsweep")
except Exception:
    try:
        import tomllib  # Python 3.11+
    except ImportError:
        import tomli as tomllib  # Python < 3.11: pip install tomli
    from pathlib import Path as _Path

    with open(_Path(__file__).resolve().parents[2] / "pyproject.toml", "rb") as f:
        __version__ = tomllib.load(f)["project"]["version"]

# Public API: only what users should import directly
from hashsweep.core import (
    Fingerprint, ScanResult, ScanError, DuplicateGroup, ScanParams, ResolutionParams,
    DuplicateHandlingMethod, SortOrder, StreamHasher, MemoryFingerprintRepository, DirectoryScannerImpl)
from hashsweep.commands import ScanCommand
from hashsweep.utils.convert_utils import ConvertUtils
from hashsweep.services import DuplicateService
from hashsweep.services.file_service import FileService

__all__ = [
    "ScanCommand",
    "ScanParams",
    "ResolutionParams",
    "DuplicateHandlingMethod",
    "SortOrder",
    "Fingerprint",
    "ScanResult",
    "ScanError",
    "DuplicateGroup",
    "StreamHasher",
    "MemoryFingerprintRepository",
    "DirectoryScannerImpl",
    "ConvertUtils",
    "DuplicateService",
    "FileService",
    "__version__",
]
