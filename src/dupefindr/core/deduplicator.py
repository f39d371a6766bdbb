"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

deduplicator.py
Implements the detection pipeline over already-filtered file entries:
    size grouping → parallel full-content hashing → (size, digest) aggregation
Unique sizes are discarded before any file is read.
"""
import time
import logging
from typing import List, Optional, Callable

from dupefindr.core.models import FileEntry, DuplicateGroup, DetectionResult, ScanProgress, ScanStats, Stage
from dupefindr.core.grouper import FileGrouperImpl
from dupefindr.core.hash_pool import HashWorkerPool
from dupefindr.core.interfaces import Deduplicator

logger = logging.getLogger(__name__)


# =============================
# Main Deduplicator Class
# =============================
class DeduplicatorImpl(Deduplicator):
    """
    Runs one detection. Build a fresh instance (and pool) per scan.
    """
    def __init__(
        self,
        grouper: Optional[FileGrouperImpl] = None,
        pool: Optional[HashWorkerPool] = None,
        progress: Optional[ScanProgress] = None,
    ):
        self.grouper = grouper or FileGrouperImpl()
        self.progress = progress or ScanProgress()
        self.pool = pool or HashWorkerPool(progress=self.progress)

    def find_duplicates(
        self,
        entries: List[FileEntry],
        stopped_flag: Optional[Callable[[], bool]] = None,
    ) -> DetectionResult:
        """
        Main detection pipeline.
        Args:
            entries: Eligible files in discovery order
            stopped_flag: Function that returns True if the run should be aborted.
        Returns:
            DetectionResult with groups ordered by their first member's discovery order
        Raises:
            ScanCancelled: if stopped_flag trips before hashing completes
        """
        stats = ScanStats()
        total_start_time = time.time()

        # Stage 1: size buckets
        self.progress.set_stage(Stage.SIZE)
        start_time = time.time()
        size_groups = self.grouper.group_by_size(entries)
        candidates = self.grouper.candidates(size_groups)
        stats.update_stage("size", len(size_groups), len(candidates), time.time() - start_time)
        logger.info(f"{len(candidates)} of {len(entries)} files share a size with another file")

        # Stage 2: hash candidates in parallel (barrier inside hash_all)
        start_time = time.time()
        hashed = self.pool.hash_all(candidates, stopped_flag=stopped_flag)

        # Stage 3: aggregate by (size, digest), re-imposing discovery order
        self.progress.set_stage(Stage.AGGREGATE)
        groups: List[DuplicateGroup] = self.grouper.group_by_digest(hashed)
        stats.update_stage("hash", len(groups), len(hashed), time.time() - start_time)
        self.progress.set_groups_found(len(groups))
        self.progress.set_stage(Stage.DONE)

        stats.total_time = time.time() - total_start_time
        logger.info(f"Found {len(groups)} duplicate groups")

        return DetectionResult(
            groups=groups,
            errors=list(self.pool.errors),
            stats=stats,
            files_scanned=len(entries),
        )
