"""Report writers for scan results."""

from .csv_writer import CsvFingerprintWriter, CSV_HEADER

__all__ = ["CsvFingerprintWriter", "CSV_HEADER"]
