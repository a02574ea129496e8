"""Metadata extraction from image files."""

import logging
import math
import os
from collections import defaultdict
from datetime import datetime
from functools import partial
from typing import Any, Callable, Dict, Optional, Sequence

import exifread

from .filesystem import FileSystem, LocalFileSystem
from .models import GpsCoordinates, PhotoMetadata
from .utils import calculate_sha256

logger = logging.getLogger(__name__)

EXIF_DATE_FORMAT = "%Y:%m:%d %H:%M:%S"

# Directory name -> {tag name -> tag}
Directories = Dict[str, Dict[str, Any]]
MetadataParser = Callable[[str], Directories]


def read_exif_directories(file_path: str, filesystem: Optional[FileSystem] = None) -> Directories:
    """
    Read embedded EXIF tags grouped by the directory they come from.

    exifread returns flat keys like 'EXIF DateTimeOriginal' or
    'GPS GPSLatitude'; the part before the first space names the directory.

    Args:
        file_path: Path to image file
        filesystem: Filesystem to read through (local filesystem if None)

    Returns:
        Mapping like {'Image': {...}, 'EXIF': {...}, 'GPS': {...}}
    """
    filesystem = filesystem or LocalFileSystem()
    with filesystem.open_read(file_path) as f:
        tags = exifread.process_file(f, details=False)

    directories: Directories = defaultdict(dict)
    for key, tag in tags.items():
        directory, _, name = key.partition(' ')
        if name:
            directories[directory][name] = tag
    return dict(directories)


def _tag_values(tag: Any) -> Any:
    return getattr(tag, 'values', tag)


def _tag_text(tag: Any) -> Optional[str]:
    """Get a string tag value, None if empty."""
    if tag is None:
        return None
    values = _tag_values(tag)
    if isinstance(values, bytes):
        values = values.decode(errors='ignore')
    if not isinstance(values, str):
        values = str(tag)
    text = values.replace('\x00', '').strip()
    return text or None


def _tag_int(tag: Any) -> int:
    """Get a non-negative integer tag value, 0 if missing or unreadable."""
    if tag is None:
        return 0
    values = _tag_values(tag)
    if isinstance(values, (list, tuple)):
        values = values[0] if values else 0
    try:
        return max(int(values), 0)
    except (TypeError, ValueError):
        return 0


def _ratio_to_float(value: Any) -> float:
    # exifread ratios expose num/den and may carry a zero denominator
    num = getattr(value, 'num', None)
    if num is not None:
        den = value.den
        return float(num) / float(den) if den else 0.0
    return float(value)


def _dms_to_decimal(dms: Sequence[Any], ref: Optional[str]) -> float:
    """Convert (degrees, minutes, seconds) to signed decimal degrees."""
    parts = [_ratio_to_float(v) for v in dms] + [0.0, 0.0]
    degrees, minutes, seconds = parts[:3]
    decimal = degrees + (minutes / 60.0) + (seconds / 3600.0)
    if ref and ref.upper().startswith(('S', 'W')):
        decimal = -decimal
    return decimal


def parse_exif_datetime(tag: Any) -> Optional[datetime]:
    """Parse an EXIF 'YYYY:MM:DD HH:MM:SS' value; None if malformed."""
    text = _tag_text(tag)
    if not text:
        return None
    try:
        return datetime.strptime(text[:19], EXIF_DATE_FORMAT)
    except ValueError:
        logger.debug(f"Unparsable EXIF date: {text!r}")
        return None


def parse_gps(gps: Dict[str, Any]) -> Optional[GpsCoordinates]:
    """
    Get the location from a GPS directory.

    Args:
        gps: Tags of the GPS directory

    Returns:
        Coordinates, or None when absent, malformed or exactly (0, 0)
    """
    lat_tag = gps.get('GPSLatitude')
    lon_tag = gps.get('GPSLongitude')
    if lat_tag is None or lon_tag is None:
        return None

    try:
        latitude = _dms_to_decimal(_tag_values(lat_tag), _tag_text(gps.get('GPSLatitudeRef')))
        longitude = _dms_to_decimal(_tag_values(lon_tag), _tag_text(gps.get('GPSLongitudeRef')))
    except (TypeError, ValueError, ZeroDivisionError) as e:
        logger.debug(f"Unparsable GPS position: {e}")
        return None

    if not (math.isfinite(latitude) and math.isfinite(longitude)):
        return None

    location = GpsCoordinates(latitude, longitude)
    # (0, 0) means the camera had no fix
    return None if location.is_zero else location


class MetadataExtractor:
    """Extracts metadata and content hashes from image files."""

    def __init__(self, filesystem: Optional[FileSystem] = None,
                 parser: Optional[MetadataParser] = None):
        """
        Initialize extractor.

        Args:
            filesystem: Filesystem to read through (local filesystem if None)
            parser: EXIF reader returning tag directories; any exception it
                raises means the file has no usable embedded metadata
        """
        self.filesystem = filesystem or LocalFileSystem()
        self.parser = parser or partial(read_exif_directories, filesystem=self.filesystem)

    def extract(self, file_path: str) -> Optional[PhotoMetadata]:
        """
        Extract metadata from an image file.

        Returns None when the file is missing or unreadable; a failure to
        parse embedded metadata still yields a record with path, hash,
        size and file name.
        """
        try:
            if not self.filesystem.exists(file_path):
                return None

            file_size = self.filesystem.file_size(file_path)
            file_hash = calculate_sha256(file_path, filesystem=self.filesystem)
            file_name = os.path.basename(file_path)

            try:
                directories = self.parser(file_path)
            except Exception as e:
                logger.debug(f"Could not read EXIF from {file_path}: {e}")
                return PhotoMetadata(
                    source_path=file_path,
                    hash=file_hash,
                    file_size=file_size,
                    file_name=file_name,
                )

            exif = directories.get('EXIF', {})
            image = directories.get('Image', {})
            gps = directories.get('GPS', {})

            return PhotoMetadata(
                source_path=file_path,
                hash=file_hash,
                date_taken=parse_exif_datetime(exif.get('DateTimeOriginal')),
                location=parse_gps(gps) if gps else None,
                camera_make=_tag_text(image.get('Make')),
                camera_model=_tag_text(image.get('Model')),
                width=_tag_int(exif.get('ExifImageWidth')),
                height=_tag_int(exif.get('ExifImageLength')),
                file_size=file_size,
                file_name=file_name,
            )

        except Exception as e:
            logger.error(f"Error extracting metadata from {file_path}: {e}")
            return None
