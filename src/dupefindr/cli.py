#!/usr/bin/env python3
"""
dupefindr CLI — command line interface for duplicate file detection and cleanup.
Detection always completes before any file is touched; delete moves files to
the system trash, never a permanent erase.
"""
from __future__ import annotations  # Enable postponed evaluation of annotations (PEP 563)
import argparse
import signal
import sys
import os
import threading
import time
from datetime import datetime
from pathlib import Path
from typing import List, Optional, NoReturn
import logging

logging.basicConfig(
    level=logging.ERROR,
    format="%(levelname)-8s | %(name)-25s | %(message)s"
)

# === EARLY DEPENDENCY VALIDATION ===
_MISSING_DEPS = []
try:
    from send2trash import send2trash
except ImportError:
    _MISSING_DEPS.append("send2trash")

try:
    import xxhash
except ImportError:
    _MISSING_DEPS.append("xxhash")

if _MISSING_DEPS:
    print("❌ Missing required dependencies:", file=sys.stderr)
    print(f"   pip install {' '.join(_MISSING_DEPS)}", file=sys.stderr)
    print("\nOr install the package with its dependencies:", file=sys.stderr)
    print("   pip install dupefindr", file=sys.stderr)
    sys.exit(1)

# === NORMAL IMPORTS (after validation) ===
from dupefindr.core.errors import ConfigError, GroupSkipped, RunEscaped, ScanCancelled
from dupefindr.core.models import (
    ActionOutcome, ActionPlan, ActionResult, ScanParams, ScanProgress, ScanResult, Stage)
from dupefindr.commands import DeduplicationCommand
from dupefindr.utils.convert_utils import ConvertUtils
from dupefindr.services.report_service import ReportService
from dupefindr.aliases import (
    ACTION_ALIASES, ACTION_CHOICES, ACTION_HELP_TEXT,
    KEEP_CHOICES, KEEP_HELP_TEXT,
    ALGORITHM_CHOICES, ALGORITHM_HELP_TEXT,
    EPILOG_TEXT
)


class ProgressPrinter(threading.Thread):
    """Polls ScanProgress and redraws a single status line on stderr."""

    def __init__(self, progress: ScanProgress, interval: float = 0.1):
        super().__init__(daemon=True)
        self.progress = progress
        self.interval = interval
        self._done = threading.Event()

    def run(self) -> None:
        while not self._done.wait(self.interval):
            self.render()
        self.render()
        sys.stderr.write("\n")
        sys.stderr.flush()

    def render(self) -> None:
        snap = self.progress.snapshot()
        if snap.stage == Stage.SCAN:
            line = f"  [scan] {snap.files_discovered} files found..."
        elif snap.hash_total > 0 and snap.stage == Stage.HASH:
            percent = (snap.files_hashed / snap.hash_total) * 100
            line = f"  [hash] {snap.files_hashed}/{snap.hash_total} ({percent:.1f}%)"
        else:
            line = f"  [{snap.stage.value}] {snap.groups_found} duplicate groups"
        sys.stderr.write(f"\r{line:<60}")
        sys.stderr.flush()

    def stop(self) -> None:
        self._done.set()
        self.join()


class CLIApplication:
    """Main CLI application controller."""

    def __init__(self):
        self.start_time: float = time.time()
        self.verbose: bool = False
        self.quiet: bool = False
        self._stop_event = threading.Event()
        self._group_index = 0

        # Fix encoding for Windows consoles to prevent UnicodeEncodeError
        for stream in (sys.stdout, sys.stderr):
            if hasattr(stream, "reconfigure"):
                stream.reconfigure(encoding='utf-8')

    @staticmethod
    def parse_args(args=None) -> argparse.Namespace:
        """Parse command-line arguments."""
        parser = argparse.ArgumentParser(
            prog="dupefindr",
            description="dupefindr — find duplicate files and move, copy or delete them",
            formatter_class=argparse.RawTextHelpFormatter,
            epilog=EPILOG_TEXT
        )

        parser.add_argument(
            "action",
            choices=ACTION_CHOICES,
            help=ACTION_HELP_TEXT
        )

        # Scan options
        parser.add_argument(
            "--path", "-p",
            default=".",
            type=str,
            help="Directory to search for duplicates. Default: current directory"
        )
        parser.add_argument(
            "--recursive", "-r",
            action="store_true",
            help="Search subdirectories too"
        )

        # Filtering options
        parser.add_argument(
            "--wildcard", "-w",
            default="*",
            type=str,
            metavar='',
            help="Only consider file names matching this glob (e.g. '*.jpg'). Default: *"
        )
        parser.add_argument(
            "--exclusion-wildcard", "-x",
            default="",
            type=str,
            metavar='',
            dest="exclusion_wildcard",
            help="Ignore file names matching this glob (e.g. '*.tmp')"
        )
        parser.add_argument(
            "--include-hidden",
            action="store_true",
            dest="include_hidden",
            help="Include hidden files and directories"
        )
        parser.add_argument(
            "--include-empty",
            action="store_true",
            dest="include_empty",
            help="Include zero-byte files"
        )

        # Action options
        parser.add_argument(
            "--location", "-l",
            default=None,
            type=str,
            metavar='',
            help="Destination directory for move/copy"
        )
        parser.add_argument(
            "--dry-run",
            action="store_true",
            dest="dry_run",
            help="Report what would be done without touching any file"
        )
        parser.add_argument(
            "--keep",
            choices=KEEP_CHOICES,
            default="first",
            type=str,
            help=KEEP_HELP_TEXT
        )
        parser.add_argument(
            "--force",
            action="store_true",
            help="Skip the confirmation prompt for move/delete (for automation/scripts)"
        )
        parser.add_argument(
            "--interactive", "-i",
            action="store_true",
            help="Choose the keeper of every group yourself (or skip it, or stop)"
        )

        # Engine options
        parser.add_argument(
            "--threads", "-t",
            default=None,
            type=int,
            metavar='',
            help="Maximum number of hashing threads. Default: CPU count, at most 8"
        )
        parser.add_argument(
            "--algorithm",
            choices=ALGORITHM_CHOICES,
            default="xxh64",
            type=str,
            help=ALGORITHM_HELP_TEXT
        )
        parser.add_argument(
            "--chunk-size",
            default="1MB",
            type=str,
            metavar='',
            dest="chunk_size",
            help="Read buffer per file while hashing (e.g. 64KB, 4MB). Default: 1MB"
        )

        # Output options
        parser.add_argument(
            "--csv-file",
            default=None,
            type=str,
            metavar='',
            dest="csv_file",
            help="Write a CSV audit report (one row per duplicate file)"
        )
        parser.add_argument(
            "--quiet", "-q",
            action="store_true",
            help="Suppress non-essential output"
        )
        parser.add_argument(
            "--verbose", "-v",
            action="store_true",
            help="Show progress, statistics and info logs"
        )
        parser.add_argument(
            "--debug",
            action="store_true",
            help="Show debug logs for every file decision"
        )

        return parser.parse_args(args)

    def validate_args(self, args: argparse.Namespace) -> None:
        """Validate command-line arguments before execution."""
        action = ACTION_ALIASES[args.action]

        if action.needs_destination and not args.location:
            self.error_exit(f"'{args.action}' requires --location")

        if args.force and not action.mutates:
            self.error_exit("--force can only be used with move, copy or delete")

        if args.interactive:
            if not action.mutates:
                self.error_exit("--interactive can only be used with move, copy or delete")
            if not self.is_interactive():
                self.error_exit("--interactive needs an interactive terminal.")

        # Prevent interactive confirmation in non-TTY environments
        if self.needs_confirmation(args) and not args.force:
            if not self.is_interactive():
                self.error_exit(
                    "Cannot request interactive confirmation in non-interactive session.\n"
                    "Use --force to proceed without confirmation, or --dry-run to preview."
                )

        root_path = Path(args.path).resolve()
        if not root_path.exists():
            self.error_exit(f"Directory not found: {args.path}")
        if not root_path.is_dir():
            self.error_exit(f"Path is not a directory: {args.path}")

        if args.location:
            location = Path(args.location).resolve()
            if location.exists() and not location.is_dir():
                self.error_exit(f"Location is not a directory: {args.location}")

        if args.threads is not None and args.threads < 1:
            self.error_exit("--threads must be at least 1")

    @staticmethod
    def is_interactive() -> bool:
        return sys.stdin.isatty() and sys.stdout.isatty()

    @staticmethod
    def needs_confirmation(args: argparse.Namespace) -> bool:
        action = ACTION_ALIASES[args.action]
        return action.mutates and not args.dry_run

    def create_params(self, args: argparse.Namespace) -> ScanParams:
        """Create ScanParams from CLI arguments."""
        try:
            return ScanParams.from_cli_values(
                root_dir=str(Path(args.path).resolve()),
                action=args.action,
                keep=args.keep,
                chunk_size_str=args.chunk_size,
                destination=str(Path(args.location).resolve()) if args.location else None,
                wildcard=args.wildcard,
                exclusion_wildcard=args.exclusion_wildcard,
                recursive=args.recursive,
                include_hidden=args.include_hidden,
                include_empty=args.include_empty,
                dry_run=args.dry_run,
                max_workers=args.threads,
                hash_algorithm=args.algorithm,
            )
        except ConfigError as e:
            self.error_exit(f"Parameter error: {e}")

    def stopped_flag(self) -> bool:
        """True once the user pressed Ctrl+C during the scan."""
        return self._stop_event.is_set()

    def _request_stop(self, signum, frame) -> None:
        self._stop_event.set()

    def run_scan(self, command: DeduplicationCommand, params: ScanParams) -> ScanResult:
        """Run detection on this thread while a helper thread renders progress."""
        printer = ProgressPrinter(command.progress) if self.verbose else None
        previous_handler = signal.signal(signal.SIGINT, self._request_stop)
        if printer:
            printer.start()
        try:
            result = command.scan(params, stopped_flag=self.stopped_flag)
        except ScanCancelled:
            self.error_exit("Scan cancelled by user. No files were touched.", code=130)
        except ConfigError as e:
            self.error_exit(str(e))
        finally:
            if printer:
                printer.stop()
            signal.signal(signal.SIGINT, previous_handler)

        if self.verbose:
            print("\nDetection Statistics:")
            print(result.stats.print_summary())
        return result

    def output_results(self, result: ScanResult) -> None:
        """Print every group with its keeper and planned action."""
        if self.quiet:
            return

        if not result.groups:
            print("No duplicate groups found.")
            return

        total_files = sum(len(g.entries) for g in result.groups)
        print(f"\nFound {len(result.groups)} duplicate groups ({total_files} files)")

        for idx, plan in enumerate(result.plans, 1):
            self.print_group(idx, plan)

    @staticmethod
    def group_header(idx: int, plan: ActionPlan) -> str:
        size_str = ConvertUtils.bytes_to_human(plan.group.size)
        return (f"\n📁 Group {idx} | Size: {size_str} | Files: {plan.group.duplicate_count} "
                f"| Hash: {plan.group.digest_hex}")

    def print_group(self, idx: int, plan: ActionPlan) -> None:
        print(self.group_header(idx, plan))
        keeper = next(e for e in plan.group.entries if e.path == plan.keeper)
        print(f"   [KEEP] {keeper.path}  [modified: {self.format_mtime(keeper.mtime)}]")
        destinations = {t.source: t.destination for t in plan.targets}
        for entry in plan.group.entries:
            if entry.path == plan.keeper:
                continue
            destination = destinations.get(entry.path)
            suffix = f" -> {destination}" if destination else ""
            print(f"   [DUP]  {entry.path}  [modified: {self.format_mtime(entry.mtime)}]{suffix}")

    @staticmethod
    def format_mtime(mtime: float) -> str:
        return datetime.fromtimestamp(mtime).strftime("%Y-%m-%d %H:%M:%S")

    def choose_keeper(self, plan: ActionPlan) -> str:
        """
        Prompts for the keeper of one group and returns its path.
        Raises GroupSkipped on 's', RunEscaped on 'q' or end of input.
        """
        self._group_index += 1
        print(self.group_header(self._group_index, plan))
        entries = plan.group.entries
        for number, entry in enumerate(entries, 1):
            marker = "*" if entry.path == plan.keeper else " "
            print(f"  {marker}{number}) {entry.path}  [modified: {self.format_mtime(entry.mtime)}]")

        default = plan.group.paths.index(plan.keeper) + 1
        prompt = f"Keep which file? [1-{len(entries)}, Enter={default}, s=skip, q=quit]: "
        while True:
            try:
                response = input(prompt).strip().lower()
            except EOFError:
                raise RunEscaped() from None
            if not response:
                return plan.keeper
            if response in ("s", "skip"):
                raise GroupSkipped()
            if response in ("q", "quit"):
                raise RunEscaped()
            if response.isdigit() and 1 <= int(response) <= len(entries):
                return entries[int(response) - 1].path
            print(f"Invalid choice: '{response}'")

    def confirm(self, result: ScanResult, force: bool) -> bool:
        """Ask before touching files. Returns False if the user declines."""
        count = sum(len(p.targets) for p in result.plans)
        if force:
            if not self.quiet:
                print("⚠️  WARNING: --force flag skips confirmation. Proceeding...")
            return True

        # Safety check: confirm we're still in interactive mode
        if not self.is_interactive():
            self.error_exit(
                "Lost interactive terminal during operation. "
                "Use --force to proceed in non-interactive environments."
            )

        verb = result.params.action.value
        response = input(f"Are you sure you want to {verb} {count} files? [y/N]: ")
        if response.strip().lower() not in ("y", "yes"):
            print("Operation cancelled by user.")
            return False
        return True

    def report_outcomes(self, results: List[ActionResult]) -> None:
        """Print per-file outcomes of the executed (or dry-run) actions."""
        acted = [r for r in results if r.outcome in (
            ActionOutcome.PLANNED, ActionOutcome.EXECUTED, ActionOutcome.FAILED)]
        if self.quiet or not acted:
            return

        print()
        for r in acted:
            if r.outcome is ActionOutcome.FAILED:
                self.warning(f"{r.source}: {r.describe()}")
            elif self.verbose or r.outcome is ActionOutcome.PLANNED:
                print(f"   {r.describe():<14} {r.source}")

        executed = sum(1 for r in acted if r.outcome is ActionOutcome.EXECUTED)
        failed = sum(1 for r in acted if r.outcome is ActionOutcome.FAILED)
        if failed:
            print(f"\n⚠️  Partial success: {executed}/{len(acted)} files processed, {failed} failed.")
        elif executed:
            print(f"✅ Successfully processed {executed} files.")

    def print_summary(self, result: ScanResult) -> None:
        if self.quiet:
            return
        print("\n" + "=" * 60)
        print(f"Files scanned:     {result.files_scanned}")
        print(f"Duplicate groups:  {len(result.groups)}")
        print(f"Duplicate files:   {sum(len(g.entries) - 1 for g in result.groups)}")
        print(f"Reclaimable space: {ConvertUtils.bytes_to_human(result.wasted_bytes)}")
        if result.errors:
            print(f"Skipped (errors):  {len(result.errors)}")
            for error in result.errors[:5]:
                print(f"  • [{error.kind}] {error}")
            if len(result.errors) > 5:
                print(f"  ...and {len(result.errors) - 5} more")

    def write_report(self, csv_file: str, result: ScanResult) -> None:
        try:
            rows = ReportService.write_csv(csv_file, result.plans, result.results)
        except OSError as e:
            self.error_exit(f"Could not write report {csv_file}: {e}")
        if not self.quiet:
            print(f"Report written to {csv_file} ({rows} rows)")

    def warning(self, message: str) -> None:
        """Print a warning message to stderr."""
        if not self.quiet:
            print(f"⚠️  {message}", file=sys.stderr)

    @staticmethod
    def error_exit(message: str, code: int = 1) -> NoReturn:
        """Print error and exit."""
        print(f"❌ Error: {message}", file=sys.stderr)
        sys.exit(code)

    def run(self, argv: Optional[List[str]] = None) -> None:
        """Main entry point with conditional output behavior."""
        args = self.parse_args(argv)
        self.verbose = args.verbose or args.debug
        self.quiet = args.quiet and not self.verbose

        if args.debug:
            logging.getLogger().setLevel(logging.DEBUG)
        elif args.verbose:
            logging.getLogger().setLevel(logging.INFO)

        self.validate_args(args)
        params = self.create_params(args)

        if not self.quiet:
            print(f"Scanning directory: {params.root_dir}")
            print(f"Action: {params.action.display_name} | Keep: {params.keep.display_name}")
            if params.dry_run:
                print("Dry run: no files will be modified")

        command = DeduplicationCommand()
        result = self.run_scan(command, params)

        # Ctrl+C that landed after the scan returned
        if self._stop_event.is_set():
            self.error_exit("Scan cancelled by user. No files were touched.", code=130)

        if args.interactive:
            if not result.plans and not self.quiet:
                print("No duplicate groups found.")
            command.apply_interactively(result, self.choose_keeper)
            self.report_outcomes(result.results)
        else:
            self.output_results(result)
            if result.plans and (not self.needs_confirmation(args) or self.confirm(result, args.force)):
                command.apply(result)
                self.report_outcomes(result.results)

        self.print_summary(result)

        if args.csv_file:
            self.write_report(args.csv_file, result)

        # Show completion time
        elapsed = time.time() - self.start_time
        if self.verbose:
            print(f"\n✅ Completed in {elapsed:.2f} seconds")


def main() -> None:
    """Application entry point."""
    app = CLIApplication()
    try:
        app.run()
    except KeyboardInterrupt:
        print("\n⚠️  Operation cancelled by user (Ctrl+C)")
        sys.exit(130)
    except Exception as e:
        if os.environ.get("DEBUG"):
            raise
        print(f"❌ Unexpected error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
