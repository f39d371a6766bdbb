"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/filters.py
Eligibility rules applied to every file the walker meets.

Rules are checked in a fixed order and the first failing rule rejects:
    1. hidden file while hidden files are excluded
    2. empty file while empty files are excluded
    3. name matches the exclusion wildcard
    4. name does not match the wildcard
Matching is shell-glob (`*`, `?`, `[...]`). Case follows the default filesystem
of the host: insensitive on Windows and macOS, sensitive elsewhere.
Pass case_sensitive to override.
"""

import fnmatch
import sys
from typing import Optional

from dupefindr.core.errors import ConfigError
from dupefindr.core.models import FileEntry, ScanParams

CASE_INSENSITIVE_HOST = sys.platform in ("win32", "darwin")


def validate_pattern(pattern: str) -> None:
    """
    Raises ConfigError for a character class that is never closed, e.g. 'img[0-9.jpg'.
    fnmatch would silently match such a `[` literally.
    """
    i = 0
    while i < len(pattern):
        if pattern[i] == "[":
            j = i + 1
            if j < len(pattern) and pattern[j] == "!":
                j += 1
            # a leading ']' is part of the class
            if j < len(pattern) and pattern[j] == "]":
                j += 1
            close = pattern.find("]", j)
            if close == -1:
                raise ConfigError(f"Unbalanced '[' in pattern: '{pattern}'")
            i = close
        i += 1


class FileFilter:
    """
    Pure predicate over (name, hidden status, size). No filesystem access.
    Raises ConfigError on construction if a pattern is malformed.
    """

    def __init__(
        self,
        wildcard: str = "*",
        exclusion_wildcard: str = "",
        include_hidden: bool = False,
        include_empty: bool = False,
        case_sensitive: Optional[bool] = None,
    ):
        validate_pattern(wildcard)
        validate_pattern(exclusion_wildcard)
        self.wildcard = wildcard or "*"
        self.exclusion_wildcard = exclusion_wildcard
        self.include_hidden = include_hidden
        self.include_empty = include_empty
        self.case_sensitive = not CASE_INSENSITIVE_HOST if case_sensitive is None else case_sensitive

    @classmethod
    def from_params(cls, params: ScanParams) -> "FileFilter":
        return cls(
            wildcard=params.wildcard,
            exclusion_wildcard=params.exclusion_wildcard,
            include_hidden=params.include_hidden,
            include_empty=params.include_empty,
        )

    def accepts(self, name: str, is_hidden: bool, size: int) -> bool:
        return self.rejection_reason(name, is_hidden, size) is None

    def rejection_reason(self, name: str, is_hidden: bool, size: int) -> Optional[str]:
        """Returns why a file is rejected, or None if it is eligible."""
        if is_hidden and not self.include_hidden:
            return "hidden"
        if size == 0 and not self.include_empty:
            return "empty"
        if self.exclusion_wildcard and self._matches(name, self.exclusion_wildcard):
            return f"matches exclusion '{self.exclusion_wildcard}'"
        if not self._matches(name, self.wildcard):
            return f"does not match '{self.wildcard}'"
        return None

    def _matches(self, name: str, pattern: str) -> bool:
        if self.case_sensitive:
            return fnmatch.fnmatchcase(name, pattern)
        return fnmatch.fnmatchcase(name.lower(), pattern.lower())


def accepts(entry: FileEntry, params: ScanParams) -> bool:
    """Applies the filter configured by `params` to an existing entry."""
    return FileFilter.from_params(params).accepts(entry.name, entry.is_hidden, entry.size)
