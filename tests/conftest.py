"""
Shared fixtures for hashsweep tests.
Provides an in-memory FileSystem with failure injection, plus real temporary
directories with controlled test files.
"""
import io
import posixpath
import tempfile
from pathlib import Path
from typing import BinaryIO, Dict, List, Optional, Set, Tuple

import pytest

from hashsweep.core.hasher import StreamHasher, get_algorithm
from hashsweep.core.models import Fingerprint
from hashsweep.core.repository import MemoryFingerprintRepository


class MemoryFileSystem:
    """
    FileSystem double keyed by absolute POSIX paths.
    `fail(operation, path, exc)` makes the named operation raise `exc` for `path`.
    """

    def __init__(self):
        self.files: Dict[str, bytes] = {}
        self.directories: Set[str] = {"/"}
        self.failures: Dict[Tuple[str, str], BaseException] = {}
        self.calls: List[Tuple[str, str]] = []

    # Setup helpers
    def add_file(self, path: str, content: bytes = b"") -> None:
        self.add_directory(posixpath.dirname(path))
        self.files[path] = content

    def add_directory(self, path: str) -> None:
        while path not in self.directories:
            self.directories.add(path)
            path = posixpath.dirname(path)

    def fail(self, operation: str, path: str, exc: BaseException) -> None:
        self.failures[(operation, path)] = exc

    def _check(self, operation: str, path: str) -> None:
        self.calls.append((operation, path))
        exc = self.failures.get((operation, path))
        if exc is not None:
            raise exc

    # FileSystem protocol
    def list_subdirectories(self, path: str) -> List[str]:
        self._check("list_subdirectories", path)
        if path not in self.directories:
            raise FileNotFoundError(f"No such directory: '{path}'")
        return sorted(d for d in self.directories if d != path and posixpath.dirname(d) == path)

    def list_files(self, path: str) -> List[str]:
        self._check("list_files", path)
        if path not in self.directories:
            raise FileNotFoundError(f"No such directory: '{path}'")
        return sorted(f for f in self.files if posixpath.dirname(f) == path)

    def open_read(self, path: str) -> BinaryIO:
        self._check("open_read", path)
        if path not in self.files:
            raise FileNotFoundError(f"No such file: '{path}'")
        return io.BytesIO(self.files[path])

    def file_size(self, path: str) -> int:
        self._check("file_size", path)
        return len(self.files[path])

    def exists(self, path: str) -> bool:
        return path in self.files or path in self.directories

    def is_dir(self, path: str) -> bool:
        return path in self.directories

    def make_dirs(self, path: str) -> None:
        self._check("make_dirs", path)
        self.add_directory(path)

    def move(self, source: str, destination: str) -> None:
        self._check("move", source)
        self.files[destination] = self.files.pop(source)

    def delete(self, path: str) -> None:
        self._check("delete", path)
        del self.files[path]


# Layout mirrors a small home directory tree with nested and empty folders
TREE_FILES = {
    "/RootDirFile": b"root file",
    "/RootDirFile2": b"root file 2",
    "/dirwithfiles/TestFile.txt": b"test file",
    "/dirwithfiles/AnotherFile.dat": b"another file",
    "/dirwithfiles/YetAnotherFile.xml": b"<xml/>",
    "/dirwithfiles/beep": b"beep",
    "/dirwithfiles/meep.ext": b"meep",
    "/dirwithfiles/subdirwithfiles/SubdirFileA.1": b"subdir file a",
    "/dirwithfiles/subdirwithfiles/SubdirFileB.2": b"subdir file b",
    "/dirwithfiles/subdirwithfiles/Creep.ext": b"creep",
}
TREE_EMPTY_DIRS = ["/emptydir", "/dirwithfiles/emptysubdir"]


@pytest.fixture
def memory_fs() -> MemoryFileSystem:
    """Empty in-memory filesystem containing only '/'."""
    return MemoryFileSystem()


@pytest.fixture
def tree_fs() -> MemoryFileSystem:
    """In-memory filesystem with nested directories, unique files and two empty directories."""
    fs = MemoryFileSystem()
    for path, content in TREE_FILES.items():
        fs.add_file(path, content)
    for path in TREE_EMPTY_DIRS:
        fs.add_directory(path)
    return fs


@pytest.fixture
def repository() -> MemoryFingerprintRepository:
    return MemoryFingerprintRepository()


@pytest.fixture
def temp_dir():
    """Creates isolated temporary directory, auto-cleanup after test."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def test_files(temp_dir) -> Dict[str, Path]:
    """
    Creates controlled test files on disk:
    - 2 identical files (duplicates)
    - 2 unique files (different content)
    - 1 empty file
    - 1 file in a subdirectory identical to the first pair
    """
    files = {}

    content_a = b"A" * 1024
    files["dup1_a"] = temp_dir / "dup1_a.txt"
    files["dup1_b"] = temp_dir / "dup1_b.txt"
    files["dup1_a"].write_bytes(content_a)
    files["dup1_b"].write_bytes(content_a)

    files["unique1"] = temp_dir / "unique1.txt"
    files["unique1"].write_bytes(b"C" * 1500)
    files["unique2"] = temp_dir / "unique2.txt"
    files["unique2"].write_bytes(b"D" * 2500)

    files["empty"] = temp_dir / "empty.txt"
    files["empty"].write_bytes(b"")

    subdir = temp_dir / "subdir"
    subdir.mkdir()
    files["sub_dup"] = subdir / "dup_in_subdir.txt"
    files["sub_dup"].write_bytes(content_a)

    return files


@pytest.fixture
def make_fingerprint():
    """Builds the Fingerprint the scanner would produce for `content` at `path`."""
    def _make(path: str, content: bytes, algorithm: Optional[str] = None) -> Fingerprint:
        hasher = StreamHasher(get_algorithm(algorithm or "sha256"))
        digest = hasher.compute_hash(io.BytesIO(content))
        return Fingerprint.from_path(path, len(content), digest, hasher.algorithm.name)
    return _make
