"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/models.py
Data models and domain logic for file scanning, duplicate detection and action planning.
"""

from dataclasses import dataclass, field
from typing import List, Dict, Optional, Tuple, Union
import os
import threading
from enum import Enum

from dupefindr.core.errors import ConfigError, FileError


# =============================
# Enums
# =============================

class ActionKind(Enum):
    """
    What to do with the duplicates of each group.
    """
    FIND = "find"
    MOVE = "move"
    COPY = "copy"
    DELETE = "delete"

    @property
    def display_name(self) -> str:
        """Human-readable name for CLI output."""
        return self.value.capitalize()

    @property
    def needs_destination(self) -> bool:
        return self in (ActionKind.MOVE, ActionKind.COPY)

    @property
    def mutates(self) -> bool:
        """True if executing this action changes the filesystem."""
        return self is not ActionKind.FIND

    def __repr__(self) -> str:
        return self.value


class KeepPolicy(Enum):
    """
    Rule that selects the single keeper of a duplicate group.
    Ties under any policy fall back to discovery order.
    """
    FIRST = "first"
    NEWEST = "newest"
    OLDEST = "oldest"
    SHORTEST_PATH = "shortest-path"

    @property
    def display_name(self) -> str:
        mapping = {
            KeepPolicy.FIRST: "First discovered",
            KeepPolicy.NEWEST: "Newest",
            KeepPolicy.OLDEST: "Oldest",
            KeepPolicy.SHORTEST_PATH: "Shortest Path",
        }
        return mapping.get(self, self.value)


class ActionOutcome(Enum):
    KEPT = "kept"
    FOUND = "found"
    PLANNED = "planned"
    EXECUTED = "executed"
    FAILED = "failed"


class Stage(str, Enum):
    SCAN = "scan"
    SIZE = "size"
    HASH = "hash"
    AGGREGATE = "aggregate"
    DONE = "done"


# ======================
#  Core Data Models
# ======================

@dataclass(frozen=True)
class FileEntry:
    """
    A regular file discovered by the walker.
    `order` is the discovery index and defines every ordering downstream.
    """
    path: str
    size: int  # in bytes
    is_hidden: bool = False
    mtime: float = 0.0
    order: int = 0

    def __post_init__(self):
        if self.size < 0:
            raise ValueError("File size cannot be negative")

    @property
    def name(self) -> str:
        return os.path.basename(self.path)

    def __repr__(self):
        return f"<FileEntry path={self.path}, size={self.size}>"


@dataclass(frozen=True)
class HashedEntry:
    entry: FileEntry
    digest: bytes

    @property
    def size(self) -> int:
        return self.entry.size


@dataclass(frozen=True)
class DuplicateGroup:
    """
    Files with identical size and content digest.
    Entries are kept in discovery order.
    """
    size: int
    digest: bytes
    entries: Tuple[FileEntry, ...]

    def __post_init__(self):
        if len(self.entries) < 2:
            raise ValueError("A duplicate group needs at least two files")
        if any(e.size != self.size for e in self.entries):
            raise ValueError("Cannot add file with different size to a group.")

    @property
    def paths(self) -> List[str]:
        return [e.path for e in self.entries]

    @property
    def digest_hex(self) -> str:
        return self.digest.hex()

    @property
    def duplicate_count(self) -> int:
        """How many files are in this group."""
        return len(self.entries)

    @property
    def wasted_bytes(self) -> int:
        """Bytes reclaimable by keeping a single copy."""
        return self.size * (len(self.entries) - 1)

    def __repr__(self):
        return f"<DuplicateGroup size={self.size}, count={len(self.entries)}>"


@dataclass(frozen=True)
class PlannedAction:
    source: str
    destination: Optional[str] = None


@dataclass(frozen=True)
class ActionPlan:
    """
    What to do with one duplicate group. The keeper is never acted upon.
    A dry-run plan has the same targets as the real one; only the tag differs.
    """
    group: DuplicateGroup
    action: ActionKind
    keeper: str
    targets: Tuple[PlannedAction, ...] = ()
    dry_run: bool = False

    @property
    def duplicate_paths(self) -> List[str]:
        return [t.source for t in self.targets]


_OUTCOME_VERBS = {
    ActionKind.MOVE: ("move", "moved"),
    ActionKind.COPY: ("copy", "copied"),
    ActionKind.DELETE: ("delete", "deleted"),
}


@dataclass(frozen=True)
class ActionResult:
    source: str
    action: ActionKind
    outcome: ActionOutcome
    destination: Optional[str] = None
    reason: str = ""

    def describe(self) -> str:
        """Short text for reports: 'would delete', 'moved', 'failed: ...'."""
        if self.outcome is ActionOutcome.KEPT:
            return "kept"
        if self.outcome is ActionOutcome.FOUND:
            return "duplicate"
        if self.outcome is ActionOutcome.FAILED:
            return f"failed: {self.reason}" if self.reason else "failed"
        verb, past = _OUTCOME_VERBS[self.action]
        if self.outcome is ActionOutcome.PLANNED:
            return f"would {verb}"
        return past


# ======================
#  Progress and statistics
# ======================

@dataclass(frozen=True)
class ProgressSnapshot:
    stage: Stage
    files_discovered: int
    files_hashed: int
    hash_total: int
    groups_found: int


class ScanProgress:
    """
    Thread-safe counters polled by a progress indicator.
    Written by the pipeline (walker, hash workers, aggregator), read by anyone.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._stage = Stage.SCAN
        self._files_discovered = 0
        self._files_hashed = 0
        self._hash_total = 0
        self._groups_found = 0

    def set_stage(self, stage: Stage) -> None:
        with self._lock:
            self._stage = stage

    def file_discovered(self, count: int = 1) -> None:
        with self._lock:
            self._files_discovered += count

    def start_hashing(self, total: int) -> None:
        with self._lock:
            self._stage = Stage.HASH
            self._hash_total = total
            self._files_hashed = 0

    def file_hashed(self, count: int = 1) -> None:
        with self._lock:
            self._files_hashed += count

    def set_groups_found(self, count: int) -> None:
        with self._lock:
            self._groups_found = count

    def snapshot(self) -> ProgressSnapshot:
        with self._lock:
            return ProgressSnapshot(
                stage=self._stage,
                files_discovered=self._files_discovered,
                files_hashed=self._files_hashed,
                hash_total=self._hash_total,
                groups_found=self._groups_found,
            )


class ScanStats:
    """
    Statistics collected during the detection process.
    """
    def __init__(self):
        self.total_time: float = 0.0
        self.stage_stats: Dict[str, Dict[str, Union[int, float]]] = {}

    def update_stage(
            self,
            stage_name: str,
            groups_found: int,
            files_processed: int,
            duration: float
    ) -> None:
        if stage_name not in self.stage_stats:
            self.stage_stats[stage_name] = {
                "groups": 0,
                "files": 0,
                "time": 0.0
            }
        self.stage_stats[stage_name]["groups"] += groups_found
        self.stage_stats[stage_name]["files"] += files_processed
        self.stage_stats[stage_name]["time"] += duration

    def print_summary(self) -> str:
        labels = {
            "size": "📁 Size Groups",
            "hash": "🔍 Content Hash Groups",
        }

        lines = [
            "📊 Detection Statistics:",
            f"Total Execution Time: {self.total_time:.3f}s\n",
            "Stage: GROUPS / FILES / TIME"
        ]

        for stage, data in self.stage_stats.items():
            label = labels.get(stage.lower(), stage.title())
            lines.append(f"{label}: {data['groups']} / {data['files']} / {data['time']:.3f}s")

        return "\n".join(lines)


@dataclass
class DetectionResult:
    groups: List[DuplicateGroup]
    errors: List[FileError] = field(default_factory=list)
    stats: ScanStats = field(default_factory=ScanStats)
    files_scanned: int = 0

    @property
    def wasted_bytes(self) -> int:
        return sum(g.wasted_bytes for g in self.groups)


@dataclass
class ScanResult:
    """
    Everything one run produced. `results` stays empty until actions are applied.
    """
    groups: List[DuplicateGroup]
    plans: List[ActionPlan]
    params: "ScanParams"
    errors: List[FileError] = field(default_factory=list)
    stats: ScanStats = field(default_factory=ScanStats)
    files_scanned: int = 0
    results: List[ActionResult] = field(default_factory=list)

    @property
    def wasted_bytes(self) -> int:
        return sum(g.wasted_bytes for g in self.groups)

    @property
    def failed(self) -> List[ActionResult]:
        return [r for r in self.results if r.outcome is ActionOutcome.FAILED]


"""
DTO for scan parameters with built-in validation.
Interface-agnostic: built by the CLI, consumed by DeduplicationCommand.
"""
from dupefindr.utils.convert_utils import ConvertUtils

HASH_ALGORITHMS = ("xxh64", "xxh128", "md5")
DEFAULT_CHUNK_SIZE = 1024 * 1024


@dataclass
class ScanParams:
    """Parameters for one scan (and optional action) with validation."""
    root_dir: str
    wildcard: str = "*"
    exclusion_wildcard: str = ""
    recursive: bool = False
    include_hidden: bool = False
    include_empty: bool = False
    action: ActionKind = ActionKind.FIND
    destination: Optional[str] = None
    dry_run: bool = False
    keep: KeepPolicy = KeepPolicy.FIRST
    max_workers: Optional[int] = None
    hash_algorithm: str = "xxh64"
    chunk_size: int = DEFAULT_CHUNK_SIZE

    def __post_init__(self):
        """Validate parameters immediately after creation."""
        if not self.root_dir:
            raise ConfigError("Root directory cannot be empty")

        if not self.wildcard:
            raise ConfigError("Wildcard pattern cannot be empty")

        for pattern in (self.wildcard, self.exclusion_wildcard):
            if "/" in pattern or (os.sep != "/" and os.sep in pattern):
                raise ConfigError(f"Patterns match file names only, not paths: '{pattern}'")

        if self.action.needs_destination and not self.destination:
            raise ConfigError(f"Action '{self.action.value}' requires a destination directory")

        if self.max_workers is not None and self.max_workers < 1:
            raise ConfigError("Worker count must be at least 1")

        if self.hash_algorithm not in HASH_ALGORITHMS:
            raise ConfigError(
                f"Unknown hash algorithm '{self.hash_algorithm}'. "
                f"Valid options: {', '.join(HASH_ALGORITHMS)}"
            )

        if self.chunk_size < 1:
            raise ConfigError("Chunk size must be positive")

    @staticmethod
    def from_cli_values(
            root_dir: str,
            action: str = "find",
            keep: str = "first",
            chunk_size_str: str = "1MB",
            destination: Optional[str] = None,
            **options
    ) -> 'ScanParams':
        """
        Factory method to create params from loose string inputs.
        Useful for CLI argument parsing.
        """
        try:
            action_kind = ActionKind(action)
        except ValueError:
            raise ConfigError(f"Invalid action: '{action}'")
        try:
            keep_policy = KeepPolicy(keep)
        except ValueError:
            raise ConfigError(f"Invalid keep policy: '{keep}'")
        try:
            chunk_size = ConvertUtils.human_to_bytes(chunk_size_str)
        except ValueError as e:
            raise ConfigError(str(e))

        return ScanParams(
            root_dir=root_dir,
            action=action_kind,
            keep=keep_policy,
            chunk_size=chunk_size,
            destination=destination,
            **options
        )
