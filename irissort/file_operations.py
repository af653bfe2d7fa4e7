"""
Shared file operations: content hashing, safe copies and deletion.
"""

import hashlib
import shutil
from pathlib import Path
from typing import BinaryIO, Optional

from .constants import HASH_CHUNK_SIZE, get_logger
from .exceptions import DestinationDirectoryError


class FileOperations:
    """Utility class for hashing, copying and removing media files."""

    def __init__(self):
        self.logger = get_logger()

    @staticmethod
    def hash_file(fh: BinaryIO) -> str:
        """Return the SHA-256 digest of the whole file, restoring its position."""
        position = fh.tell()
        digest = hashlib.sha256()
        try:
            fh.seek(0)
            while chunk := fh.read(HASH_CHUNK_SIZE):
                digest.update(chunk)
        finally:
            fh.seek(position)
        return digest.hexdigest()

    @staticmethod
    def hash_path(path: Path) -> str:
        """Return the SHA-256 digest of the file at path."""
        with open(path, 'rb') as fh:
            return FileOperations.hash_file(fh)

    def ensure_directory(self, directory: Path) -> None:
        """Create directory and parents if needed."""
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise DestinationDirectoryError(f"Could not create folder {directory}: {e}") from e

    def copy_file(self, source_fh: BinaryIO, source: Path, dest: Path) -> None:
        """Copy the full content of an open source file to a new file at dest.

        The destination must not exist; a partial destination is removed when
        the copy fails. The source handle's position is restored.
        """
        position = source_fh.tell()
        try:
            source_fh.seek(0)
            dest_fh = open(dest, 'xb')
            try:
                with dest_fh:
                    shutil.copyfileobj(source_fh, dest_fh, HASH_CHUNK_SIZE)
            except OSError:
                dest.unlink(missing_ok=True)
                raise
        finally:
            source_fh.seek(position)

        # Keep the source timestamps on the copy
        try:
            shutil.copystat(source, dest)
        except OSError as e:
            self.logger.warning(f"Could not copy file times to {dest}: {e}")

        self.logger.info(f"{source} -> {dest}")

    def delete_safely(self, *files_to_delete: Optional[Path]) -> bool:
        """Unlink the file path(s) provided. Return all(success)."""
        success = True
        for file_to_delete in files_to_delete:
            if file_to_delete is None:
                continue

            try:
                file_to_delete.unlink()
                self.logger.debug(f"Removed {file_to_delete}")
            except FileNotFoundError:
                continue
            except OSError as e:
                self.logger.error(f"Could not remove {file_to_delete}: {e}")
                success = False

        return success
