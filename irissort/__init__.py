"""
irissort - Organize photos and videos into media-year quarter folders.

Sorts JPEG images and MP4 videos from one or more input folders into
{year}-{quarter} folders named by creation time, skipping content that is
already present in the output.
"""

__version__ = "0.2.0"
__copyright__ = "MIT License"


# Public API
from .cli import main
from .collisions import CollisionAction, CollisionResolver, Resolution
from .config import Config, SortConfig
from .core import MediaSorter
from .destination import build_destination_path, year_quarter
from .file_operations import FileOperations
from .sniffer import ContentType, classify
from .stats import FileOutcome, StatsManager
from .timestamps import TimestampResolver

__all__ = [ "main", "Config", "SortConfig", "MediaSorter", "CollisionResolver", "CollisionAction",
            "Resolution", "ContentType", "classify", "TimestampResolver", "build_destination_path",
            "year_quarter", "FileOperations", "FileOutcome", "StatsManager" ]
