"""
Collision resolution for destination paths.

A candidate path that is already taken is either the same file (content
hashes match) or a different file that happens to share a timestamp, in
which case the disambiguation counter is incremented.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import BinaryIO, Optional

from .constants import MAX_COLLISION_COUNTER, get_logger
from .destination import build_destination_path
from .exceptions import CollisionLimitError
from .file_operations import FileOperations


class CollisionAction(Enum):
    PLACE = "place"
    SKIP_DUPLICATE = "skip_duplicate"
    SKIP_DUPLICATE_REMOVE_SOURCE = "skip_duplicate_remove_source"


@dataclass(frozen=True)
class Resolution:
    """Outcome of collision resolution for one source file."""
    action: CollisionAction
    path: Path
    counter: int

    @property
    def is_duplicate(self) -> bool:
        return self.action is not CollisionAction.PLACE


class CollisionResolver:
    """Finds a free destination path or detects that the file is already there."""

    def __init__(self, output_root: Path, remove_duplicates: bool = False,
                 max_counter: int = MAX_COLLISION_COUNTER):
        self.output_root = output_root
        self.remove_duplicates = remove_duplicates
        self.max_counter = max_counter
        self.logger = get_logger()

    def resolve(self, source_fh: BinaryIO, timestamp: datetime, extension: str) -> Resolution:
        """Resolve the destination for an open source file.

        Hashing never moves the source handle. OSError from hashing either
        file propagates to the caller.
        """
        source_hash: Optional[str] = None

        for counter in range(self.max_counter + 1):
            candidate = build_destination_path(self.output_root, timestamp, counter, extension)
            if not candidate.exists():
                return Resolution(CollisionAction.PLACE, candidate, counter)

            # Source hash is computed once, the existing file on each iteration
            if source_hash is None:
                source_hash = FileOperations.hash_file(source_fh)
            dest_hash = FileOperations.hash_path(candidate)

            if source_hash == dest_hash:
                self.logger.warning(f"File already exists: {candidate}")
                action = (CollisionAction.SKIP_DUPLICATE_REMOVE_SOURCE if self.remove_duplicates
                          else CollisionAction.SKIP_DUPLICATE)
                return Resolution(action, candidate, counter)

            self.logger.debug(f"Different file with same path found: {candidate}")

        raise CollisionLimitError(
            f"No free destination name for {timestamp} after {self.max_counter} attempts")
