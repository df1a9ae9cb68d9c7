"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/filesystem.py
FileSystem implementation backed by the local disk (os.scandir / shutil).
"""

import logging
import os
import shutil
from typing import BinaryIO, List

logger = logging.getLogger(__name__)


class LocalFileSystem:
    """
    Real filesystem access.
    Symbolic links to directories are reported as neither files nor subdirectories,
    so a walk can never loop. Symbolic links to files are listed as files, and so are
    dangling links, which then fail to open and are reported as skipped files.
    """

    def list_subdirectories(self, path: str) -> List[str]:
        with os.scandir(path) as entries:
            return [entry.path for entry in entries if entry.is_dir(follow_symlinks=False)]

    def list_files(self, path: str) -> List[str]:
        with os.scandir(path) as entries:
            return [entry.path for entry in entries if self._is_listable_file(entry)]

    def open_read(self, path: str) -> BinaryIO:
        return open(path, "rb")

    def file_size(self, path: str) -> int:
        return os.stat(path).st_size

    def exists(self, path: str) -> bool:
        return os.path.exists(path)

    def is_dir(self, path: str) -> bool:
        return os.path.isdir(path)

    def make_dirs(self, path: str) -> None:
        os.makedirs(path, exist_ok=True)

    def move(self, source: str, destination: str) -> None:
        logger.debug(f"Moving {source} -> {destination}")
        shutil.move(source, destination)

    def delete(self, path: str) -> None:
        logger.debug(f"Removing {path}")
        os.remove(path)

    @staticmethod
    def _is_listable_file(entry: os.DirEntry) -> bool:
        try:
            return entry.is_file() or (entry.is_symlink() and not entry.is_dir())
        except OSError as e:
            logger.debug(f"Could not stat {entry.path}: {e}")
            return False
