"""
Per-file outcomes and statistics tracking for sorting runs.
"""

from enum import Enum
from typing import Dict

from .sniffer import ContentType


class FileOutcome(Enum):
    """What happened to a single source file."""
    PLACED = "placed"
    SKIPPED_DUPLICATE = "skipped-duplicate"
    SKIPPED_UNDETERMINED = "skipped-undetermined"
    SKIPPED_UNSUPPORTED = "skipped-unsupported"
    SKIPPED_ERROR = "skipped-error"


class StatsManager:
    """Encapsulates statistics tracking for sorting runs."""

    def __init__(self):
        self._stats = {
            'photos': 0,
            'videos': 0,
            'duplicates': 0,
            'removed_duplicates': 0,
            'unsupported': 0,
            'undetermined': 0,
            'errors': 0,
            'total_size': 0,
        }

    def increment_duplicates(self, removed: bool = False) -> None:
        """Increment duplicate count, and removed count if the source was deleted."""
        self._stats['duplicates'] += 1
        if removed:
            self._stats['removed_duplicates'] += 1

    def increment_unsupported(self) -> None:
        self._stats['unsupported'] += 1

    def increment_undetermined(self) -> None:
        self._stats['undetermined'] += 1

    def increment_errors(self) -> None:
        self._stats['errors'] += 1

    def record_successful_file(self, content_type: ContentType, file_size: int) -> None:
        """Record a placed file, updating both count and size."""
        if content_type is ContentType.VIDEO:
            self._stats['videos'] += 1
        else:
            self._stats['photos'] += 1
        self._stats['total_size'] += file_size

    def record_outcome(self, outcome: FileOutcome) -> None:
        """Record a skip outcome. Placed files go through record_successful_file."""
        if outcome is FileOutcome.SKIPPED_UNSUPPORTED:
            self.increment_unsupported()
        elif outcome is FileOutcome.SKIPPED_UNDETERMINED:
            self.increment_undetermined()
        elif outcome is FileOutcome.SKIPPED_ERROR:
            self.increment_errors()

    def get_stats(self) -> Dict[str, int]:
        """Get a copy of current statistics."""
        return self._stats.copy()

    def get_total_files(self) -> int:
        """Get total count of placed files."""
        return self._stats['photos'] + self._stats['videos']

    def get_total_size_mb(self) -> float:
        """Get total size in megabytes."""
        return self._stats['total_size'] / (1024 * 1024)

    def has_errors(self) -> bool:
        return self._stats['errors'] > 0 or self._stats['undetermined'] > 0

    # Individual stat getters for reporting
    def get_photos(self) -> int:
        return self._stats['photos']

    def get_videos(self) -> int:
        return self._stats['videos']

    def get_duplicates(self) -> int:
        return self._stats['duplicates']

    def get_removed_duplicates(self) -> int:
        return self._stats['removed_duplicates']

    def get_unsupported(self) -> int:
        return self._stats['unsupported']

    def get_undetermined(self) -> int:
        return self._stats['undetermined']

    def get_errors(self) -> int:
        return self._stats['errors']
