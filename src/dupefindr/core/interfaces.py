"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

interfaces.py

Defines core interfaces (Protocols) used throughout the detection pipeline.
These protocols enforce structural typing using Python's `typing.Protocol` so
that components can be swapped in tests without inheritance.

Key Components:
---------------
- HashState / HashAlgorithm: Incremental hash functions (xxHash, MD5, ...).
- Hasher: Computes the content digest of a single file.
- FileScanner: Walks a directory tree and yields eligible file entries.
- FileGrouper: Groups entries by size and by (size, digest).
- Deduplicator: Runs the whole detection pipeline.
"""

from typing import Protocol, List, Dict, Iterator, Optional, Callable
from dupefindr.core.models import (
    FileEntry,
    HashedEntry,
    DuplicateGroup,
    DetectionResult,
)


# ===== Interfaces =====

class HashState(Protocol):
    """Running hash object, as returned by hashlib.md5() or xxhash.xxh64()."""
    def update(self, data: bytes) -> None: ...
    def digest(self) -> bytes: ...


class HashAlgorithm(Protocol):
    """
    Interface for generic hash algorithms.

    Allows plugging in different hashing functions like MD5 or xxHash
    without affecting the rest of the detection logic.
    """
    name: str

    def new(self) -> HashState:
        """Returns a fresh incremental hash state."""
        ...


class Hasher(Protocol):
    """Interface for hashing the full content of a file."""
    def compute_full_hash(self, entry: FileEntry) -> bytes: ...


class FileScanner(Protocol):
    """
    Interface for walking file systems and collecting file metadata.
    """
    def walk(self) -> Iterator[FileEntry]:
        """Lazily yield eligible files in deterministic order."""
        ...

    def scan(
        self,
        stopped_flag: Optional[Callable[[], bool]] = None,
    ) -> List[FileEntry]:
        """Materialise walk() into a list, honouring cancellation."""
        ...


class FileGrouper(Protocol):
    """
    Interface for the two grouping steps of the pipeline.
    """
    def group_by_size(self, entries: List[FileEntry]) -> Dict[int, List[FileEntry]]:
        """Group entries by byte size, dropping sizes seen only once."""
        ...

    def group_by_digest(self, hashed: List[HashedEntry]) -> List[DuplicateGroup]:
        """Group hashed entries by (size, digest) in discovery order."""
        ...


class Deduplicator(Protocol):
    """
    Interface for the detection engine.

    Coordinates size grouping, parallel hashing and aggregation.
    """
    def find_duplicates(
        self,
        entries: List[FileEntry],
        stopped_flag: Optional[Callable[[], bool]] = None,
    ) -> DetectionResult:
        """
        Run size grouping → hashing → aggregation over already-filtered entries.

        Returns:
            DetectionResult with ordered groups, per-file errors and statistics.
        """
        ...
