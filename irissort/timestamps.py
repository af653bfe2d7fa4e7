"""Creation timestamp extraction from media metadata and filenames."""

import json
import os
import subprocess
import zoneinfo
from datetime import datetime, timezone
from pathlib import Path
from typing import BinaryIO, Callable, Mapping, Optional, Sequence

import exifread

from .constants import (EXIF_DATE_FORMAT, FILENAME_PATTERNS, VIDEO_DATE_FORMAT,
                        VIDEO_PROBE_TIMEOUT, FilenamePattern, ffprobe_available,
                        get_logger)
from .sniffer import ContentType


logger = get_logger()

TimestampStrategy = Callable[[BinaryIO, ContentType, Path], Optional[datetime]]


def image_creation_time(fh: BinaryIO, content_type: ContentType,
                        path: Path) -> Optional[datetime]:
    """Read the original capture time from the EXIF block of an image."""
    if content_type is not ContentType.IMAGE:
        return None

    position = fh.tell()
    try:
        tags = exifread.process_file(fh, details=False)
    except Exception as e:
        logger.debug(f"Could not decode EXIF data for {path}: {e}")
        return None
    finally:
        fh.seek(position)

    creation_time = canonical_exif_date(tags)
    if creation_time is None:
        logger.debug(f"No usable EXIF date tag found for {path}")
    return creation_time


def canonical_exif_date(tags: Mapping[str, object]) -> Optional[datetime]:
    """Parse the EXIF capture date, preferring DateTimeOriginal over DateTime."""
    for date_field in ["EXIF DateTimeOriginal", "Image DateTime"]:
        if date_field not in tags:
            continue

        try:
            return datetime.strptime(str(tags[date_field]).strip(), EXIF_DATE_FORMAT)
        except ValueError:
            continue

    return None


def video_creation_time(fh: BinaryIO, content_type: ContentType,
                        path: Path) -> Optional[datetime]:
    """Extract the container creation_time tag of a video with ffprobe.

    The probe is bounded by VIDEO_PROBE_TIMEOUT; every failure, including a
    timeout, is treated as missing metadata. Returns an aware UTC datetime.
    """
    if content_type is not ContentType.VIDEO:
        return None
    if not ffprobe_available:
        logger.debug(f"ffprobe not available, skipping video metadata for {path}")
        return None

    try:
        result = subprocess.run([
            "ffprobe", "-v", "quiet",
            "-print_format", "json",
            "-show_format",
            os.fspath(path)
        ], capture_output=True, text=True, check=True, timeout=VIDEO_PROBE_TIMEOUT)

        data = json.loads(result.stdout)
        tags = data.get("format", {}).get("tags", {})
        date_str = tags.get("creation_time")
        if not date_str:
            logger.debug(f"No creation_time tag found for {path}")
            return None

        return parse_video_creation_time(date_str)

    except subprocess.TimeoutExpired:
        logger.warning(f"ffprobe timed out after {VIDEO_PROBE_TIMEOUT}s for {path}")
        return None
    except subprocess.CalledProcessError as e:
        logger.debug(f"ffprobe failed for {path}: {e}")
        return None
    except (json.JSONDecodeError, AttributeError) as e:
        logger.debug(f"Failed to parse ffprobe JSON output for {path}: {e}")
        return None
    except ValueError as e:
        logger.debug(f"Unrecognized creation_time for {path}: {e}")
        return None
    except OSError as e:
        logger.debug(f"Could not run ffprobe for {path}: {e}")
        return None


def parse_video_creation_time(date_str: str) -> datetime:
    """Parse a container creation_time such as 2024-03-01T12:30:45.000000Z as UTC."""
    return datetime.strptime(date_str, VIDEO_DATE_FORMAT).replace(tzinfo=timezone.utc)


def parse_filename_timestamp(stem: str,
                             patterns: Sequence[FilenamePattern] = FILENAME_PATTERNS
                             ) -> Optional[datetime]:
    """Match the start of a filename stem against known timestamp layouts.

    Each pattern is tried on the prefix of its own width, so trailing text
    such as "-WA0001" or "_HDR" is ignored.
    """
    for pattern in patterns:
        if len(stem) < pattern.width:
            continue

        try:
            return datetime.strptime(stem[:pattern.width], pattern.layout)
        except ValueError:
            continue

    return None


def filename_creation_time(fh: BinaryIO, content_type: ContentType,
                           path: Path) -> Optional[datetime]:
    """Derive the creation time from the file's name."""
    creation_time = parse_filename_timestamp(path.stem)
    if creation_time:
        logger.debug(f"Creation time from filename: {path.name} = {creation_time}")
    return creation_time


DEFAULT_STRATEGIES = (image_creation_time, video_creation_time, filename_creation_time)


class TimestampResolver:
    """Runs timestamp strategies in order and returns the first result."""

    def __init__(self, tz_name: Optional[str] = None,
                 strategies: Sequence[TimestampStrategy] = DEFAULT_STRATEGIES):
        self.tz = zoneinfo.ZoneInfo(tz_name) if tz_name else timezone.utc
        self.strategies = tuple(strategies)

    def resolve(self, fh: BinaryIO, content_type: ContentType,
                path: Path) -> Optional[datetime]:
        """Return a naive creation time for the file, or None if undetermined."""
        for strategy in self.strategies:
            creation_time = strategy(fh, content_type, path)
            if creation_time is not None:
                logger.debug(f"{strategy.__name__}: {path} = {creation_time}")
                return self._naive(creation_time)

        return None

    def _naive(self, creation_time: datetime) -> datetime:
        # Metadata that carries a zone is shifted to the configured zone
        if creation_time.tzinfo is None:
            return creation_time
        return creation_time.astimezone(self.tz).replace(tzinfo=None)
