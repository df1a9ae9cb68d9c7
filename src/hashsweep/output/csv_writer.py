"""
output/csv_writer.py
Writes fingerprints as CSV records (DirectoryName, FileName, FileSize, Base64Hash).
"""
import csv
import logging
from typing import Iterable, TextIO

from hashsweep.core.models import Fingerprint

logger = logging.getLogger(__name__)

CSV_HEADER = ["DirectoryName", "FileName", "FileSize", "Base64Hash"]


class CsvFingerprintWriter:
    """Streams fingerprints into any text stream opened with newline=''."""

    def __init__(self, stream: TextIO, write_header: bool = True):
        self._writer = csv.writer(stream)
        self._header_pending = write_header
        self.records_written = 0

    def write(self, fingerprint: Fingerprint) -> None:
        if self._header_pending:
            self._writer.writerow(CSV_HEADER)
            self._header_pending = False
        self._writer.writerow([
            fingerprint.directory_name,
            fingerprint.file_name,
            fingerprint.file_size,
            fingerprint.digest,
        ])
        self.records_written += 1

    def write_all(self, fingerprints: Iterable[Fingerprint]) -> int:
        for fingerprint in fingerprints:
            self.write(fingerprint)
        if self._header_pending:
            self._writer.writerow(CSV_HEADER)
            self._header_pending = False
        logger.debug(f"Wrote {self.records_written} fingerprint record(s)")
        return self.records_written

    @staticmethod
    def write_file(path: str, fingerprints: Iterable[Fingerprint]) -> int:
        """Writes all fingerprints to `path`, replacing any existing file."""
        with open(path, "w", newline="", encoding="utf-8") as f:
            return CsvFingerprintWriter(f).write_all(fingerprints)
