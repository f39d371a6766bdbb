"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/hash_pool.py
Parallel content hashing over a bounded thread pool.

Every candidate is submitted as one job and owns one slot in the result
list, so each result is recorded exactly once regardless of completion
order. hash_all() only returns after every job has finished or failed.
An unreadable file becomes a HashError and is left out of the results;
the other jobs carry on.
"""

import os
import logging
from concurrent.futures import ThreadPoolExecutor, FIRST_COMPLETED, wait
from typing import List, Optional, Callable

from dupefindr.core.errors import HashError, ScanCancelled
from dupefindr.core.hasher import HasherImpl
from dupefindr.core.interfaces import Hasher
from dupefindr.core.models import FileEntry, HashedEntry, ScanProgress

logger = logging.getLogger(__name__)

DEFAULT_WORKER_CEILING = 8
STOP_POLL_INTERVAL = 0.1  # seconds between cancellation checks while waiting


def default_worker_count(ceiling: Optional[int] = None) -> int:
    """Available parallelism, capped by the ceiling."""
    ceiling = ceiling or DEFAULT_WORKER_CEILING
    return max(1, min(ceiling, os.cpu_count() or 1))


class HashWorkerPool:
    """
    One pool per scan. Not reusable across concurrent scans.

    Attributes:
        hasher: Computes the digest of a single file
        max_workers: Number of worker threads
        errors: HashError records from the last hash_all() call
    """

    def __init__(
        self,
        hasher: Optional[Hasher] = None,
        max_workers: Optional[int] = None,
        progress: Optional[ScanProgress] = None,
    ):
        self.hasher = hasher or HasherImpl()
        self.max_workers = default_worker_count(max_workers)
        self.progress = progress
        self.errors: List[HashError] = []

    def hash_all(
        self,
        candidates: List[FileEntry],
        stopped_flag: Optional[Callable[[], bool]] = None,
    ) -> List[HashedEntry]:
        """
        Hashes every candidate and returns results in submission order.
        Raises ScanCancelled if stopped_flag returns True before all jobs finish.
        """
        self.errors = []
        if not candidates:
            return []

        if self.progress:
            self.progress.start_hashing(len(candidates))

        slots: List[Optional[HashedEntry]] = [None] * len(candidates)
        failures: List[Optional[HashError]] = [None] * len(candidates)

        logger.debug(f"Hashing {len(candidates)} candidates with {self.max_workers} workers")
        with ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix="hash") as executor:
            futures = {
                executor.submit(self.hasher.compute_full_hash, entry): index
                for index, entry in enumerate(candidates)
            }
            pending = set(futures)

            while pending:
                if stopped_flag and stopped_flag():
                    executor.shutdown(wait=False, cancel_futures=True)
                    logger.debug("Hashing interrupted by user")
                    raise ScanCancelled("Scan cancelled during hashing")

                done, pending = wait(pending, timeout=STOP_POLL_INTERVAL, return_when=FIRST_COMPLETED)
                for future in done:
                    index = futures[future]
                    try:
                        slots[index] = HashedEntry(candidates[index], future.result())
                    except HashError as e:
                        logger.warning(f"Could not hash {e.path}: {e.reason}")
                        failures[index] = e
                    if self.progress:
                        self.progress.file_hashed()

            # a stop requested while the last jobs were finishing
            if stopped_flag and stopped_flag():
                logger.debug("Hashing interrupted by user")
                raise ScanCancelled("Scan cancelled during hashing")

        self.errors = [e for e in failures if e is not None]
        return [h for h in slots if h is not None]
