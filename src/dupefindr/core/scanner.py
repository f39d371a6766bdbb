"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/scanner.py
Implements directory traversal with inline filtering.
Features:
- Uses os.scandir for fast traversal without extra stat calls
- Optional recursion (depth-first, entries sorted by name at each level)
- Never follows symbolic links, so directory cycles are impossible
- Unreadable directories are logged and skipped, the walk continues
"""

import os
import stat
import time
import logging
from typing import Iterator, List, Optional, Callable

from dupefindr.core.errors import ConfigError, ScanCancelled, WalkError
from dupefindr.core.filters import FileFilter
from dupefindr.core.interfaces import FileScanner
from dupefindr.core.models import FileEntry, ScanProgress

logger = logging.getLogger(__name__)


class FileScannerImpl(FileScanner):
    """
    Walks a directory tree and yields eligible regular files as FileEntry objects.

    Attributes:
        root_dir: Absolute path of the directory to scan
        recursive: Descend into subdirectories when True
        file_filter: Eligibility rules applied to every file
        errors: WalkError records collected during the last walk
    """

    def __init__(
        self,
        root_dir: str,
        recursive: bool = False,
        file_filter: Optional[FileFilter] = None,
        progress: Optional[ScanProgress] = None,
    ):
        self.root_dir = os.path.abspath(root_dir)
        self.recursive = recursive
        self.file_filter = file_filter or FileFilter()
        self.progress = progress
        self.errors: List[WalkError] = []
        self._order = 0
        self._stopped_flag: Optional[Callable[[], bool]] = None

    def validate_root(self) -> None:
        """Raises ConfigError if the root is missing or not a directory."""
        if not os.path.exists(self.root_dir):
            error_msg = f"Directory does not exist: {self.root_dir}"
            logger.error(error_msg)
            raise ConfigError(error_msg)
        if not os.path.isdir(self.root_dir):
            error_msg = f"Not a directory: {self.root_dir}"
            logger.error(error_msg)
            raise ConfigError(error_msg)

    def walk(self) -> Iterator[FileEntry]:
        """
        Lazily yields eligible files. Order is deterministic for a given
        filesystem snapshot: name order at every level, depth-first.
        """
        self.validate_root()
        self.errors = []
        self._order = 0
        logger.debug(f"Walking {self.root_dir} (recursive={self.recursive})")
        yield from self._walk_dir(self.root_dir)

    def scan(self, stopped_flag: Optional[Callable[[], bool]] = None) -> List[FileEntry]:
        """
        Runs the whole walk and returns the eligible files.
        Raises ScanCancelled if stopped_flag returns True mid-walk.
        """
        start_time = time.time()
        found_files = []

        # checked for every directory entry, accepted or not
        self._stopped_flag = stopped_flag
        try:
            for entry in self.walk():
                found_files.append(entry)
                if self.progress:
                    self.progress.file_discovered()
        finally:
            self._stopped_flag = None
        if stopped_flag and stopped_flag():
            raise ScanCancelled("Scan cancelled during directory walk")

        elapsed_time = time.time() - start_time
        logger.debug(f"Total scan time: {elapsed_time:.2f} seconds")
        logger.info(f"Scan completed. Found {len(found_files)} matching files.")
        return found_files

    def _walk_dir(self, dir_path: str) -> Iterator[FileEntry]:
        try:
            with os.scandir(dir_path) as it:
                dir_entries = sorted(it, key=lambda e: e.name)
        except OSError as e:
            self._record_error(dir_path, e)
            return

        for dir_entry in dir_entries:
            self._check_stopped()
            try:
                if dir_entry.is_symlink():
                    logger.debug(f"Skipping symbolic link: {dir_entry.path}")
                    continue

                if dir_entry.is_dir(follow_symlinks=False):
                    if not self.recursive:
                        logger.debug(f"Ignoring directory: {dir_entry.path}")
                        continue
                    if not self.file_filter.include_hidden and self._is_hidden(dir_entry):
                        logger.debug(f"Skipping hidden directory: {dir_entry.path}")
                        continue
                    yield from self._walk_dir(dir_entry.path)
                    continue

                if not dir_entry.is_file(follow_symlinks=False):
                    logger.debug(f"Skipping special file: {dir_entry.path}")
                    continue

                entry = self._process_file(dir_entry)
            except OSError as e:
                self._record_error(dir_entry.path, e)
                continue

            if entry is not None:
                yield entry

    def _process_file(self, dir_entry: os.DirEntry) -> Optional[FileEntry]:
        """
        Returns a FileEntry if the file passes the filter, else None.
        OSError from stat() propagates to the walk loop.
        """
        stat_result = dir_entry.stat(follow_symlinks=False)
        hidden = self._is_hidden(dir_entry, stat_result)

        reason = self.file_filter.rejection_reason(dir_entry.name, hidden, stat_result.st_size)
        if reason is not None:
            logger.debug(f"Skipping {dir_entry.path} ({reason})")
            return None

        entry = FileEntry(
            path=dir_entry.path,
            size=stat_result.st_size,
            is_hidden=hidden,
            mtime=stat_result.st_mtime,
            order=self._order,
        )
        self._order += 1
        logger.debug(f"Accepted file: {dir_entry.name} ({entry.size} bytes)")
        return entry

    @staticmethod
    def _is_hidden(dir_entry: os.DirEntry, stat_result: Optional[os.stat_result] = None) -> bool:
        """Dot-files everywhere, plus the hidden attribute on Windows."""
        if dir_entry.name.startswith("."):
            return True
        if stat_result is None:
            try:
                stat_result = dir_entry.stat(follow_symlinks=False)
            except OSError:
                return False
        attributes = getattr(stat_result, "st_file_attributes", 0)
        return bool(attributes & getattr(stat, "FILE_ATTRIBUTE_HIDDEN", 0))

    def _check_stopped(self) -> None:
        if self._stopped_flag and self._stopped_flag():
            logger.debug("Scan interrupted by user")
            raise ScanCancelled("Scan cancelled during directory walk")

    def _record_error(self, path: str, error: OSError) -> None:
        walk_error = WalkError(path, error.strerror or str(error))
        logger.warning(f"Skipping unreadable path: {walk_error}")
        self.errors.append(walk_error)
