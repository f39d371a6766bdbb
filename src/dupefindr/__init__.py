"""
dupefindr — duplicate file finder with move/copy/delete actions.

Core features:
- Two-stage detection: size buckets first, then full-content hashes (xxHash or MD5)
  computed in parallel on a bounded thread pool
- Deterministic output: groups and files always in directory-walk order
- Actions on duplicates (move, copy, delete to system trash) with dry-run mode
- CSV audit report
"""

# Get version
from importlib.metadata import version as _version, PackageNotFoundError

try:
    __version__ = _version("dupefindr")
except PackageNotFoundError:
    __version__ = "0.0.0+unknown"

# Public API — only what users should import directly
from dupefindr.commands import DeduplicationCommand
from dupefindr.core import (
    ScanParams, ScanResult, ActionKind, KeepPolicy, FileEntry, DuplicateGroup, ActionPlan,
    ConfigError, ScanCancelled)
from dupefindr.utils.convert_utils import ConvertUtils
from dupefindr.services import FileService, ActionExecutor, ReportService

__all__ = [
    "DeduplicationCommand",
    "ScanParams",
    "ScanResult",
    "ActionKind",
    "KeepPolicy",
    "FileEntry",
    "DuplicateGroup",
    "ActionPlan",
    "ConfigError",
    "ScanCancelled",
    "ConvertUtils",
    "FileService",
    "ActionExecutor",
    "ReportService",
    "__version__",
]
