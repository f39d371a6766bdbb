"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/errors.py
Exception taxonomy for the detection engine and the action executor.

Only ConfigError (and ScanCancelled, on user request) stop a run.
GroupSkipped and RunEscaped only come from the interactive keeper prompt.
WalkError, HashError and ActionError are collected per file and reported
at the end, so one bad file never aborts detection of the rest of the tree.
"""


class DupefindrError(Exception):
    """Base class for all dupefindr errors."""


class ConfigError(DupefindrError):
    """Invalid root path, pattern or option. Raised before scanning starts."""


class ScanCancelled(DupefindrError):
    """The run was stopped before the hashing barrier; no actions may follow."""


class FileError(DupefindrError):
    """An error tied to a single path."""

    kind = "error"

    def __init__(self, path: str, reason: str):
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason

    def __eq__(self, other):
        if not isinstance(other, FileError):
            return NotImplemented
        return (type(self), self.path, self.reason) == (type(other), other.path, other.reason)

    def __hash__(self):
        return hash((type(self), self.path, self.reason))


class WalkError(FileError):
    """A directory (or one of its entries) could not be read; subtree skipped."""
    kind = "walk"


class HashError(FileError):
    """A candidate file could not be read; it is dropped from its size bucket."""
    kind = "hash"


class ActionError(FileError):
    """A move/copy/delete failed for one file."""
    kind = "action"


class InteractiveError(DupefindrError):
    """Raised by an interactive keeper prompt to change the flow of the run."""


class GroupSkipped(InteractiveError):
    """Leave the current group untouched and go on with the next one."""


class RunEscaped(InteractiveError):
    """Stop prompting; groups not yet confirmed are left untouched."""
