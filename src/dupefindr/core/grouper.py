"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/grouper.py
Implements the two grouping steps of the pipeline:
size buckets before hashing, (size, digest) groups after it.
Both preserve discovery order, so the output never depends on which hash
worker finished first.
"""

from typing import List, Dict, Tuple, Any, Callable, TypeVar
from collections import defaultdict
from dupefindr.core.interfaces import FileGrouper
from dupefindr.core.models import FileEntry, HashedEntry, DuplicateGroup

T = TypeVar("T")


class FileGrouperImpl(FileGrouper):
    """
    Stateless grouping helpers; safe to share between scans.
    """

    def group_by_size(self, entries: List[FileEntry]) -> Dict[int, List[FileEntry]]:
        """
        Buckets entries by size in one pass.
        Buckets and their members keep first-seen order; single-member buckets are dropped.
        """
        return self._group_by(entries, lambda e: e.size)

    def group_by_digest(self, hashed: List[HashedEntry]) -> List[DuplicateGroup]:
        """
        Builds duplicate groups keyed by (size, digest).
        Input order is irrelevant: entries are re-sorted by discovery order first.
        """
        ordered = sorted(hashed, key=lambda h: h.entry.order)
        groups: Dict[Tuple[int, bytes], List[HashedEntry]] = self._group_by(
            ordered, lambda h: (h.size, h.digest)
        )
        return [
            DuplicateGroup(size=size, digest=digest, entries=tuple(h.entry for h in members))
            for (size, digest), members in groups.items()
        ]

    @staticmethod
    def candidates(size_groups: Dict[int, List[FileEntry]]) -> List[FileEntry]:
        """Flattens size buckets back into discovery order."""
        return sorted(
            (entry for bucket in size_groups.values() for entry in bucket),
            key=lambda e: e.order,
        )

    @staticmethod
    def _group_by(items: List[T], key_func: Callable[[T], Any]) -> Dict[Any, List[T]]:
        """
        Helper method to group items by any computed key.
        Args:
            items: Items to group, in the order they should appear
            key_func: Function that computes a hashable key from an item
        Returns:
            Dict[key, List[item]] with only keys shared by 2+ items
        """
        groups = defaultdict(list)
        for item in items:
            groups[key_func(item)].append(item)

        # dict preserves insertion order, i.e. the first member's position
        return {key: group for key, group in groups.items() if len(group) >= 2}
