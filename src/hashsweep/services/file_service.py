"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

services/file_service.py
Cross-platform file operations that go beyond the FileSystem protocol.
"""
from pathlib import Path

from send2trash import send2trash


class FileService:
    """
    Safe file removal via the system trash.
    Errors surface as OSError subclasses so callers can isolate them per file.
    """

    @staticmethod
    def move_to_trash(file_path: str) -> None:
        """Moves a file to the system trash."""
        path = Path(file_path).resolve()

        if not path.exists():
            raise FileNotFoundError(f"File not found: {path}")

        # send2trash raises OSError subclasses (TrashPermissionError is a PermissionError)
        send2trash(str(path))
