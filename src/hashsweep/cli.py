#!/usr/bin/env python3
"""
HashSweep CLI — Command line interface for fingerprinting files and resolving duplicates.
Scans first, shows what would happen, and only then deletes or moves anything.
"""
from __future__ import annotations  # Enable postponed evaluation of annotations (PEP 563)
import argparse
import logging
import os
import signal
import sys
import time
from enum import IntEnum
from pathlib import Path
from typing import List, NoReturn, Optional

from hashsweep.aliases import (
    ACTION_ALIASES, ACTION_CHOICES, ACTION_HELP_TEXT,
    SORT_ALIASES, SORT_CHOICES, SORT_HELP_TEXT,
    EPILOG_TEXT
)
from hashsweep.commands import ScanCommand
from hashsweep.core.errors import ResolverConfigurationError
from hashsweep.core.hasher import ALGORITHMS
from hashsweep.core.models import (
    DuplicateGroup, DuplicateHandlingMethod, ResolutionParams, ResolutionSummary, ScanParams, ScanResult)
from hashsweep.output.csv_writer import CsvFingerprintWriter
from hashsweep.services.duplicate_service import DuplicateService
from hashsweep.utils.convert_utils import ConvertUtils

LOG_FORMAT = "%(levelname)-8s | %(name)-25s | %(message)s"


class ExitState(IntEnum):
    SUCCESS = 0
    ERROR = 1
    COMPLETED_WITH_ERRORS = 2
    INTERRUPTED = 130


def configure_logging(verbosity: int, quiet: bool = False) -> None:
    """WARNING by default, -v → INFO, -vv → DEBUG, --quiet → ERROR."""
    if quiet:
        level = logging.ERROR
    elif verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(level=level, format=LOG_FORMAT, force=True)


class CLIApplication:
    """Main CLI application controller."""

    def __init__(self):
        self.start_time: float = time.time()
        self.verbose: bool = False
        self.quiet: bool = False
        self._interrupted: bool = False

    @staticmethod
    def parse_args(args=None) -> argparse.Namespace:
        """Parse and validate command-line arguments."""
        parser = argparse.ArgumentParser(
            prog="hashsweep",
            description="HashSweep — content fingerprinting and duplicate file resolution",
            formatter_class=argparse.RawTextHelpFormatter,
            epilog=EPILOG_TEXT
        )

        # Required arguments
        parser.add_argument(
            "--directory", "-d",
            required=True,
            type=str,
            help="Directory to scan"
        )
        parser.add_argument(
            "--recursive", "-r",
            action="store_true",
            help="Also scan all subdirectories"
        )

        # Hashing options
        parser.add_argument(
            "--algorithm",
            choices=sorted(ALGORITHMS.keys()),
            default="sha256",
            help="Hash algorithm. Default: sha256"
        )
        parser.add_argument(
            "--block-size",
            default="2MB",
            type=str,
            metavar='',
            help="Read block size for hashing (e.g., 512KB, 4MB). Default: 2MB"
        )
        parser.add_argument(
            "--retries",
            default=0,
            type=int,
            metavar='',
            help="Extra read attempts for files failing with transient I/O errors. Default: 0"
        )

        # Resolution options
        parser.add_argument(
            "--action",
            choices=ACTION_CHOICES,
            default="none",
            type=str,
            help=ACTION_HELP_TEXT
        )
        parser.add_argument(
            "--move-to",
            type=str,
            metavar='',
            dest="move_to",
            help="Destination directory for --action move (created if missing)"
        )
        parser.add_argument(
            "--trash",
            action="store_true",
            help="With --action delete: move duplicates to the system trash instead of deleting"
        )
        parser.add_argument(
            "--dry-run",
            action="store_true",
            dest="dry_run",
            help="Show what --action would do without changing any file"
        )
        parser.add_argument(
            "--sort",
            choices=SORT_CHOICES,
            default="shortest-path",
            type=str,
            help=SORT_HELP_TEXT
        )

        # Output options
        parser.add_argument(
            "--output", "-o",
            type=str,
            metavar='',
            help="Write fingerprints to this CSV file"
        )
        parser.add_argument(
            "--duplicates-only",
            action="store_true",
            dest="duplicates_only",
            help="With --output: only write files that belong to a duplicate group"
        )
        parser.add_argument(
            "--force",
            action="store_true",
            help="Skip confirmation prompt for --action delete/move (for automation/scripts)"
        )
        parser.add_argument(
            "--quiet", "-q",
            action="store_true",
            help="Suppress non-essential output"
        )
        parser.add_argument(
            "--verbose", "-v",
            action="count",
            default=0,
            help="Show progress and log messages (-vv for debug output)"
        )

        return parser.parse_args(args)

    def validate_args(self, args: argparse.Namespace) -> None:
        """Validate command-line arguments before execution."""
        action = ACTION_ALIASES[args.action]

        if args.force and action == DuplicateHandlingMethod.NO_ACTION:
            self.error_exit("--force can only be used with --action delete or --action move")
        if args.trash and action != DuplicateHandlingMethod.DELETE:
            self.error_exit("--trash can only be used with --action delete")
        if action == DuplicateHandlingMethod.MOVE and not args.move_to:
            self.error_exit("--action move requires --move-to")
        if args.move_to and action != DuplicateHandlingMethod.MOVE:
            self.warning("--move-to is ignored unless --action move is used")
        if args.duplicates_only and not args.output:
            self.error_exit("--duplicates-only can only be used with --output")
        if args.retries < 0:
            self.error_exit("Retry count cannot be negative")

        # Prevent interactive confirmation in non-TTY environments
        needs_confirmation = action != DuplicateHandlingMethod.NO_ACTION and not args.force and not args.dry_run
        if needs_confirmation and (not sys.stdin.isatty() or not sys.stdout.isatty()):
            self.error_exit(
                "Cannot request interactive confirmation in non-interactive session.\n"
                "Use --force flag to proceed without confirmation when piping output or running in scripts."
            )

        root_path = Path(args.directory).expanduser().resolve()
        if not root_path.exists():
            self.error_exit(f"Directory not found: {args.directory}")
        if not root_path.is_dir():
            self.error_exit(f"Path is not a directory: {args.directory}")

        try:
            block_size = ConvertUtils.human_to_bytes(args.block_size)
        except ValueError as e:
            self.error_exit(f"Invalid block size: {e}")
        if block_size <= 0:
            self.error_exit("Block size must be positive")

    def create_params(self, args: argparse.Namespace) -> tuple:
        """Create ScanParams and ResolutionParams from CLI arguments."""
        try:
            scan_params = ScanParams.from_human_readable(
                root_dir=str(Path(args.directory).expanduser().resolve()),
                recursive=args.recursive,
                algorithm=args.algorithm,
                block_size_str=args.block_size,
                max_retries=args.retries,
            )
            method = ACTION_ALIASES.get(args.action, DuplicateHandlingMethod.NO_ACTION)
            resolution_params = ResolutionParams(
                method=method,
                move_to_dir=str(Path(args.move_to).expanduser()) if method == DuplicateHandlingMethod.MOVE else None,
                use_trash=args.trash,
                dry_run=args.dry_run,
                sort_order=SORT_ALIASES[args.sort],
            )
            return scan_params, resolution_params
        except ValueError as e:
            self.error_exit(f"Parameter error: {e}")

    def progress_callback(self, stage: str, current: int, total: Optional[int]) -> None:
        """CLI progress callback - shows progress in console."""
        if not self.verbose:
            return

        if total and total > 0:
            percent = (current / total) * 100
            sys.stderr.write(f"\r  [{stage}] {current}/{total} ({percent:.1f}%)")
        else:
            sys.stderr.write(f"\r  [{stage}] {current} files processed...")
        sys.stderr.flush()

    def handle_sigint(self, signum, frame) -> None:
        """First Ctrl+C stops the scan after the current file; a second one aborts."""
        if self._interrupted:
            raise KeyboardInterrupt
        self._interrupted = True
        print("\n⚠️  Stopping after the current file (press Ctrl+C again to abort)", file=sys.stderr)

    def stopped_flag(self) -> bool:
        """True once the user pressed Ctrl+C during the scan."""
        return self._interrupted

    def output_results(self, scan_result: ScanResult, groups: List[DuplicateGroup]) -> None:
        """Output the scan summary and the duplicate groups as plain text."""
        if self.quiet:
            return

        print(f"\nScanned {len(scan_result.scanned_files)} files "
              f"({ConvertUtils.bytes_to_human(scan_result.total_size)}), "
              f"skipped {len(scan_result.skipped_files)}, errors: {len(scan_result.errors)}")
        if scan_result.cancelled:
            print("⚠️  Scan was interrupted; results are partial.")

        for error in scan_result.errors:
            print(f"   ! {error.message}", file=sys.stderr)

        if not groups:
            print("No duplicate groups found.")
            return

        total_files = sum(len(g.files) for g in groups)
        wasted = DuplicateService.calculate_space_savings(groups)
        print(f"\nFound {len(groups)} duplicate groups ({total_files} files, "
              f"{ConvertUtils.bytes_to_human(wasted)} reclaimable)")

        for idx, group in enumerate(groups, 1):
            size_str = ConvertUtils.bytes_to_human(group.size)
            print(f"\n📁 Group {idx} | Size: {size_str} | Files: {len(group.files)} | Hash: {group.digest}")
            print(f"   [KEEP] {group.canonical.full_path}")
            for fingerprint in group.duplicates:
                print(f"   [DUP]  {fingerprint.full_path}")

    def confirm_resolution(self, groups: List[DuplicateGroup], params: ResolutionParams, force: bool) -> bool:
        """Asks before deleting or moving. Returns False if the user declined."""
        files = DuplicateService.files_to_process(groups)
        if not files:
            return False

        verb = params.method.display_name.lower()
        target = f" to {params.move_to_dir}" if params.method == DuplicateHandlingMethod.MOVE else ""
        if params.use_trash:
            target = " to trash"
        print("=" * 60)
        print(f"Summary: {verb} {len(files)} files{target} "
              f"({ConvertUtils.bytes_to_human(DuplicateService.calculate_space_savings(groups))}), "
              f"keeping {len(groups)} files")

        if force or params.dry_run:
            if force and not params.dry_run:
                print("⚠️  WARNING: --force flag skips confirmation. Proceeding...")
            return True

        if not sys.stdin.isatty() or not sys.stdout.isatty():
            self.error_exit(
                "Lost interactive terminal during operation. "
                "Use --force to proceed in non-interactive environments."
            )

        response = input(f"Are you sure you want to {verb} {len(files)} files{target}? [y/N]: ")
        if response.strip().lower() not in ("y", "yes"):
            print("Operation cancelled by user.")
            return False
        return True

    def report_resolution(self, summary: ResolutionSummary) -> None:
        if self.quiet:
            return
        verb = summary.action.display_name.lower()
        size_str = ConvertUtils.bytes_to_human(summary.processed_bytes)
        if summary.dry_run:
            print(f"\nDry run: would {verb} {summary.processed_count} files ({size_str}).")
            return
        if summary.failed:
            print(f"\n⚠️  Partial success: {summary.processed_count} files processed ({size_str}).")
            print(f"Failed to {verb} {len(summary.failed)} file(s):")
            for path, error in summary.failed[:5]:
                print(f"  • {os.path.basename(path)}: {error}")
            if len(summary.failed) > 5:
                print(f"  ...and {len(summary.failed) - 5} more files")
        else:
            print(f"✅ Successfully processed {summary.processed_count} files ({size_str}).")

    def write_output(self, path: str, scan_result: ScanResult, groups: List[DuplicateGroup],
                     duplicates_only: bool) -> None:
        fingerprints = DuplicateService.duplicate_members(groups) if duplicates_only else scan_result.scanned_files
        try:
            count = CsvFingerprintWriter.write_file(path, fingerprints)
        except OSError as e:
            self.error_exit(f"Could not write output file '{path}': {e}")
        if not self.quiet:
            print(f"Wrote {count} fingerprint(s) to {path}")

    def warning(self, message: str) -> None:
        """Print a warning message to stderr."""
        if not self.quiet:
            print(f"⚠️  {message}", file=sys.stderr)

    @staticmethod
    def error_exit(message: str, code: int = ExitState.ERROR) -> NoReturn:
        """Print error and exit."""
        print(f"❌ Error: {message}", file=sys.stderr)
        sys.exit(int(code))

    def run(self, argv=None) -> int:
        """Main entry point. Returns the process exit code."""
        args = self.parse_args(argv)
        self.verbose = args.verbose > 0
        self.quiet = args.quiet
        configure_logging(args.verbose, args.quiet)

        self.validate_args(args)
        scan_params, resolution_params = self.create_params(args)

        if not self.quiet:
            print(f"Scanning directory: {scan_params.root_dir} (recursive: {scan_params.recursive})")

        command = ScanCommand()
        previous_handler = signal.signal(signal.SIGINT, self.handle_sigint)
        try:
            scan_result, groups, _ = command.execute(
                scan_params,
                ResolutionParams(sort_order=resolution_params.sort_order),
                progress_callback=self.progress_callback if self.verbose else None,
                stopped_flag=self.stopped_flag
            )
        except KeyboardInterrupt:
            print("\n⚠️  Operation cancelled by user (Ctrl+C)")
            return ExitState.INTERRUPTED
        finally:
            signal.signal(signal.SIGINT, previous_handler)
        if self.verbose:
            sys.stderr.write("\n")

        self.output_results(scan_result, groups)

        if args.output:
            self.write_output(args.output, scan_result, groups, args.duplicates_only)

        if resolution_params.method != DuplicateHandlingMethod.NO_ACTION and not scan_result.cancelled:
            if self.confirm_resolution(groups, resolution_params, args.force):
                try:
                    summary = command.resolve(resolution_params)
                except ResolverConfigurationError as e:
                    self.error_exit(str(e))
                self.report_resolution(summary)

        if self.verbose:
            elapsed = time.time() - self.start_time
            print(f"\n✅ Completed in {elapsed:.2f} seconds")

        if scan_result.cancelled:
            return ExitState.INTERRUPTED
        if scan_result.errors:
            return ExitState.COMPLETED_WITH_ERRORS
        return ExitState.SUCCESS


def main(argv=None) -> None:
    """Application entry point."""
    app = CLIApplication()
    try:
        code = app.run(argv)
    except KeyboardInterrupt:
        print("\n⚠️  Operation cancelled by user (Ctrl+C)")
        sys.exit(int(ExitState.INTERRUPTED))
    except Exception as e:
        if os.environ.get("DEBUG"):
            raise
        print(f"❌ Unexpected error: {e}", file=sys.stderr)
        sys.exit(int(ExitState.ERROR))
    sys.exit(int(code))


if __name__ == "__main__":
    main()
