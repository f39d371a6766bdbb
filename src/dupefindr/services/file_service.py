"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

services/file_service.py
Filesystem operations used by the action executor.
Deletion moves files to the system trash (via send2trash), never a permanent erase.
Every failure is raised as ActionError for the single file involved.
"""
import os
import shutil
import logging
from pathlib import Path

from send2trash import send2trash

from dupefindr.core.errors import ActionError

logger = logging.getLogger(__name__)


class FileService:
    """
    Cross-platform move/copy/trash for a single file.
    """

    @staticmethod
    def delete(file_path: str) -> None:
        """Moves a file to the system trash."""
        path = Path(file_path)

        if not path.exists():
            raise ActionError(file_path, "File not found")

        try:
            send2trash(str(path))
        except Exception as e:
            raise ActionError(file_path, f"Failed to move to trash: {e}") from e
        logger.debug(f"Trashed {file_path}")

    @staticmethod
    def move(source: str, destination: str) -> None:
        """Moves a file, creating the destination directory. Never overwrites."""
        FileService._check_transfer(source, destination)
        try:
            shutil.move(source, destination)
        except (OSError, shutil.Error) as e:
            raise ActionError(source, f"Failed to move to {destination}: {e}") from e
        logger.debug(f"Moved {source} -> {destination}")

    @staticmethod
    def copy(source: str, destination: str) -> None:
        """Copies a file with its metadata, creating the destination directory. Never overwrites."""
        FileService._check_transfer(source, destination)
        try:
            shutil.copy2(source, destination)
        except (OSError, shutil.Error) as e:
            raise ActionError(source, f"Failed to copy to {destination}: {e}") from e
        logger.debug(f"Copied {source} -> {destination}")

    @staticmethod
    def _check_transfer(source: str, destination: str) -> None:
        if not os.path.isfile(source):
            raise ActionError(source, "File not found")
        if os.path.lexists(destination):
            raise ActionError(source, f"Destination already exists: {destination}")
        try:
            os.makedirs(os.path.dirname(destination), exist_ok=True)
        except OSError as e:
            raise ActionError(source, f"Cannot create destination directory: {e}") from e
