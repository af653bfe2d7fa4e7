"""
Content sniffing: classify files by their leading bytes rather than their names.
"""

from enum import Enum
from typing import BinaryIO, Optional

import filetype

from .constants import SNIFF_SIZE


class ContentType(Enum):
    """Supported content categories."""
    IMAGE = "image"
    VIDEO = "video"
    UNSUPPORTED = "unsupported"


_MIME_CATEGORIES = {
    "image/jpeg": ContentType.IMAGE,
    "video/mp4": ContentType.VIDEO,
}


def read_prefix(fh: BinaryIO, size: int = SNIFF_SIZE) -> bytes:
    """Read up to `size` bytes from the start of fh, restoring its position."""
    position = fh.tell()
    try:
        fh.seek(0)
        return fh.read(size)
    finally:
        fh.seek(position)


def detect_mime(fh: BinaryIO) -> Optional[str]:
    """Return the sniffed MIME type of fh, or None if it is not recognized."""
    kind = filetype.guess(read_prefix(fh))
    return kind.mime if kind else None


def classify(fh: BinaryIO) -> ContentType:
    """Classify an open binary file as image, video or unsupported.

    Only JPEG images and MP4 videos are supported; other encodings of either
    family are unsupported. I/O errors propagate to the caller.
    """
    return _MIME_CATEGORIES.get(detect_mime(fh), ContentType.UNSUPPORTED)
