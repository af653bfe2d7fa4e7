"""
Constants, shared logger and console for media organization.
"""

import logging
import shutil
import subprocess
from typing import NamedTuple, Optional

from rich.console import Console

PROGRAM = "irissort"

# Content sniffing reads this many bytes from the start of each file
SNIFF_SIZE = 512
SUPPORTED_MIME_TYPES = ("image/jpeg", "video/mp4")

# Entries whose name starts with this marker are never processed
HIDDEN_PREFIX = "."

# Seconds to wait for ffprobe before giving up on video metadata
VIDEO_PROBE_TIMEOUT = 5

# Upper bound on the disambiguation counter for one timestamp
MAX_COLLISION_COUNTER = 10000

EXIF_DATE_FORMAT = "%Y:%m:%d %H:%M:%S"
VIDEO_DATE_FORMAT = "%Y-%m-%dT%H:%M:%S.%fZ"
DEST_DATE_FORMAT = "%Y-%m-%d_%H-%M-%S"


class FilenamePattern(NamedTuple):
    """A filename timestamp layout and the width of the prefix it consumes."""
    layout: str
    width: int


# Filename timestamp layouts in priority order
FILENAME_PATTERNS = (
    FilenamePattern("%Y-%m-%d_%H-%M-%S", len("YYYY-MM-DD_HH-MM-SS")),
    FilenamePattern("IMG_%Y%m%d_%H%M%S", len("IMG_YYYYMMDD_HHMMSS")),
    FilenamePattern("PXL_%Y%m%d_%H%M%S", len("PXL_YYYYMMDD_HHMMSS")),
    FilenamePattern("IMG-%Y%m%d", len("IMG-YYYYMMDD")),
    FilenamePattern("signal-%Y-%m-%d-%H-%M-%S", len("signal-YYYY-MM-DD-HH-MM-SS")),
    FilenamePattern("image_%Y%m%d%H%M%S", len("image_YYYYMMDDHHMMSS")),
    FilenamePattern("%Y%m%d_%H%M%S", len("YYYYMMDD_HHMMSS")),
)

HASH_CHUNK_SIZE = 1024 * 1024

_console: Optional[Console] = None


def get_logger() -> logging.Logger:
    """Return the shared program logger."""
    return logging.getLogger(PROGRAM)


def get_console() -> Console:
    """Return the shared rich console."""
    global _console
    if _console is None:
        _console = Console()
    return _console


def check_tool_availability(cmd: str, version_flag: str = "-h") -> bool:
    """Check whether an external command-line tool can be executed."""
    if shutil.which(cmd) is None:
        return False
    try:
        subprocess.run([cmd, version_flag], capture_output=True, timeout=VIDEO_PROBE_TIMEOUT)
        return True
    except (OSError, subprocess.SubprocessError):
        return False


ffprobe_available = check_tool_availability("ffprobe", "-version")
