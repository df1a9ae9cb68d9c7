"""
Core engine — hasher, scanner, repository, and duplicate resolvers.

This package contains the foundation of hashsweep:
- StreamHasher + SHA-256 / BLAKE2b / xxHash algorithms: block-wise content hashing
- DirectoryScannerImpl: fault-isolating directory walk producing ScanResults
- MemoryFingerprintRepository: reference fingerprint store with duplicate groupings
- DeleteResolver / MoveResolver: keep the canonical file, act on the rest
- Models: Fingerprint, ScanResult, ScanError, DuplicateGroup and parameter objects

All components are pure Python with no UI dependencies.
"""

from .errors import HashSweepError, HasherDisposedError, ResolverConfigurationError
from .hasher import (
    StreamHasher, Sha256AlgorithmImpl, Blake2bAlgorithmImpl, XXHashAlgorithmImpl,
    get_algorithm, DEFAULT_BLOCK_SIZE)
from .models import (
    Fingerprint, ScanResult, ScanError, ErrorKind, DuplicateGroup, ResolutionSummary,
    DuplicateHandlingMethod, SortOrder, ScanParams, ResolutionParams)
from .filesystem import LocalFileSystem
from .sorter import Sorter
from .repository import MemoryFingerprintRepository
from .scanner import DirectoryScannerImpl
from .resolver import DuplicateResolver, DeleteResolver, MoveResolver, NullResolver, create_resolver

__all__ = [
    "HashSweepError",
    "HasherDisposedError",
    "ResolverConfigurationError",
    "StreamHasher",
    "Sha256AlgorithmImpl",
    "Blake2bAlgorithmImpl",
    "XXHashAlgorithmImpl",
    "get_algorithm",
    "DEFAULT_BLOCK_SIZE",
    "Fingerprint",
    "ScanResult",
    "ScanError",
    "ErrorKind",
    "DuplicateGroup",
    "ResolutionSummary",
    "DuplicateHandlingMethod",
    "SortOrder",
    "ScanParams",
    "ResolutionParams",
    "LocalFileSystem",
    "Sorter",
    "MemoryFingerprintRepository",
    "DirectoryScannerImpl",
    "DuplicateResolver",
    "DeleteResolver",
    "MoveResolver",
    "NullResolver",
    "create_resolver",
]
