"""
Core detection engine — walker, filter, grouper, hasher, hash pool and planner.

This package contains the performance-critical foundation of dupefindr:
- FileScannerImpl: deterministic directory walk with inline FileFilter
- HasherImpl + XXHashAlgorithmImpl / MD5AlgorithmImpl: streamed full-content hashing
- HashWorkerPool: bounded thread pool with one result slot per job
- FileGrouperImpl: size buckets and (size, digest) aggregation in discovery order
- DeduplicatorImpl: size → hash → aggregate pipeline
- ActionPlanner: keeper selection and collision-safe destinations

All components are pure Python with no UI dependencies.
"""

from .errors import (
    DupefindrError, ConfigError, ScanCancelled, FileError, WalkError, HashError, ActionError,
    InteractiveError, GroupSkipped, RunEscaped)
from .models import (
    FileEntry, HashedEntry, DuplicateGroup, ActionPlan, PlannedAction, ActionResult,
    ActionKind, ActionOutcome, KeepPolicy, ScanParams, ScanProgress, ProgressSnapshot,
    ScanStats, DetectionResult, ScanResult, Stage)
from .filters import FileFilter, accepts
from .scanner import FileScannerImpl
from .grouper import FileGrouperImpl
from .hasher import HasherImpl, XXHashAlgorithmImpl, MD5AlgorithmImpl, get_algorithm
from .hash_pool import HashWorkerPool, default_worker_count
from .deduplicator import DeduplicatorImpl
from .planner import ActionPlanner

__all__ = [
    "DupefindrError",
    "ConfigError",
    "ScanCancelled",
    "FileError",
    "WalkError",
    "HashError",
    "ActionError",
    "InteractiveError",
    "GroupSkipped",
    "RunEscaped",
    "FileEntry",
    "HashedEntry",
    "DuplicateGroup",
    "ActionPlan",
    "PlannedAction",
    "ActionResult",
    "ActionKind",
    "ActionOutcome",
    "KeepPolicy",
    "ScanParams",
    "ScanProgress",
    "ProgressSnapshot",
    "ScanStats",
    "DetectionResult",
    "ScanResult",
    "Stage",
    "FileFilter",
    "accepts",
    "FileScannerImpl",
    "FileGrouperImpl",
    "HasherImpl",
    "XXHashAlgorithmImpl",
    "MD5AlgorithmImpl",
    "get_algorithm",
    "HashWorkerPool",
    "default_worker_count",
    "DeduplicatorImpl",
    "ActionPlanner",
]
