"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/planner.py
Turns duplicate groups into action plans. Pure policy: never touches the filesystem.

Keeper rule
-----------
KeepPolicy.FIRST (default) keeps the first entry in group order, i.e. the
earliest-discovered file. Discovery is depth-first with names sorted at each
level, so this is the alphabetically-first path within a directory.
NEWEST / OLDEST compare modification times and SHORTEST_PATH compares path
length; every policy falls back to discovery order on ties.

Destination naming
------------------
Moved/copied duplicates land directly in the destination directory under
their own file name. A name already taken by an earlier target of the same
planner gets a numeric suffix: photo.jpg, photo-00001.jpg, photo-00002.jpg.
"""

import os
from typing import List, Optional, Set

from dupefindr.core.errors import ConfigError
from dupefindr.core.models import (
    ActionKind, ActionPlan, DuplicateGroup, FileEntry, KeepPolicy, PlannedAction
)

SAFE_SUFFIX_PADDING = 5


class ActionPlanner:
    """
    Plans actions for the groups of one scan.
    A planner remembers every path and destination it has handed out, so
    groups planned through the same instance never overlap.
    """

    def __init__(self, destination: Optional[str] = None, keep: KeepPolicy = KeepPolicy.FIRST):
        self.destination = os.path.abspath(destination) if destination else None
        self.keep = keep
        self._planned_paths: Set[str] = set()
        self._reserved_names: Set[str] = set()

    def select_keeper(self, group: DuplicateGroup) -> FileEntry:
        entries = group.entries
        if self.keep is KeepPolicy.NEWEST:
            return min(entries, key=lambda e: (-e.mtime, e.order))
        if self.keep is KeepPolicy.OLDEST:
            return min(entries, key=lambda e: (e.mtime, e.order))
        if self.keep is KeepPolicy.SHORTEST_PATH:
            return min(entries, key=lambda e: (len(e.path), e.order))
        return entries[0]

    def plan(
            self,
            group: DuplicateGroup,
            action: ActionKind,
            dry_run: bool = False,
            keeper: Optional[str] = None
    ) -> ActionPlan:
        """
        Builds the plan for one group. `keeper` overrides the keep policy
        with a path chosen by the user.
        Raises ValueError if a path of this group was already planned by this
        planner, or if `keeper` is not a member of the group.
        """
        if keeper is not None and keeper not in group.paths:
            raise ValueError(f"Keeper is not part of the group: {keeper}")

        if action.needs_destination and not self.destination:
            raise ConfigError(f"Action '{action.value}' requires a destination directory")

        overlap = [p for p in group.paths if p in self._planned_paths]
        if overlap:
            raise ValueError(f"File already belongs to another planned group: {overlap[0]}")
        self._planned_paths.update(group.paths)

        if keeper is None:
            keeper_entry = self.select_keeper(group)
        else:
            keeper_entry = next(e for e in group.entries if e.path == keeper)
        duplicates = [e for e in group.entries if e is not keeper_entry]

        if action is ActionKind.FIND:
            targets = ()
        elif action is ActionKind.DELETE:
            targets = tuple(PlannedAction(source=e.path) for e in duplicates)
        else:
            targets = tuple(
                PlannedAction(source=e.path, destination=self._reserve_destination(e.name))
                for e in duplicates
            )

        return ActionPlan(
            group=group,
            action=action,
            keeper=keeper_entry.path,
            targets=targets,
            dry_run=dry_run,
        )

    def plan_all(
        self,
        groups: List[DuplicateGroup],
        action: ActionKind,
        dry_run: bool = False
    ) -> List[ActionPlan]:
        return [self.plan(group, action, dry_run) for group in groups]

    def _reserve_destination(self, file_name: str) -> str:
        stem, suffix = os.path.splitext(file_name)
        candidate = file_name
        count = 0
        while os.path.normcase(candidate) in self._reserved_names:
            count += 1
            candidate = f"{stem}-{str(count).zfill(SAFE_SUFFIX_PADDING)}{suffix}"
        self._reserved_names.add(os.path.normcase(candidate))
        return os.path.join(self.destination, candidate)
