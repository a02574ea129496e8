"""Destination path planning from organization patterns."""

import calendar
import logging
import os
import re
from datetime import datetime
from typing import List, Optional

from .config import PhotoManagerConfig
from .filesystem import FileSystem, LocalFileSystem
from .models import PhotoMetadata, PhotoOperation

logger = logging.getLogger(__name__)

UNKNOWN = "Unknown"

# Date used when a photo has no capture date and its file cannot be statted
MISSING_FILE_DATE = datetime(1601, 1, 1)

TOKEN_PATTERN = re.compile(r"\{(Year|MonthName|Month|Day|Location|Camera)\}", re.IGNORECASE)


def format_location(photo: PhotoMetadata) -> str:
    """Render coordinates as 'lat_lon' with two decimals, or 'Unknown'."""
    if photo.location is None:
        return UNKNOWN
    return f"{photo.location.latitude:.2f}_{photo.location.longitude:.2f}"


def render_pattern(pattern: str, photo: PhotoMetadata, date: datetime) -> str:
    """
    Substitute the {Year}, {Month}, {MonthName}, {Day}, {Location} and
    {Camera} tokens of a pattern.

    Tokens match case-insensitively and every occurrence is replaced.
    Substituted values are not scanned again, and unknown {...} tokens
    are left as they are.

    Args:
        pattern: Pattern like '{Year}/{Month}/{Location}'
        photo: Photo to render for
        date: Date to use for the date tokens

    Returns:
        Rendered relative path
    """
    values = {
        'year': f"{date.year:04d}",
        'month': f"{date.month:02d}",
        'monthname': calendar.month_name[date.month],
        'day': f"{date.day:02d}",
        'location': format_location(photo),
        'camera': photo.camera_make or UNKNOWN,
    }
    return TOKEN_PATTERN.sub(lambda match: values[match.group(1).lower()], pattern)


class PathPlanner:
    """Plans where each photo goes."""

    def __init__(self, filesystem: Optional[FileSystem] = None):
        self.filesystem = filesystem or LocalFileSystem()

    def effective_date(self, photo: PhotoMetadata) -> datetime:
        """Capture date, or the file's creation time when there is none."""
        if photo.date_taken is not None:
            return photo.date_taken
        try:
            return self.filesystem.creation_time(photo.source_path)
        except OSError as e:
            logger.warning(f"Cannot read creation time of {photo.source_path}: {e}")
            return MISSING_FILE_DATE

    def destination_for(self, photo: PhotoMetadata, config: PhotoManagerConfig) -> str:
        rendered = render_pattern(config.organization_pattern, photo, self.effective_date(photo))
        file_name = os.path.basename(photo.source_path)
        return os.path.join(config.destination_folder, rendered, file_name)

    def plan(self, photos: List[PhotoMetadata], config: PhotoManagerConfig) -> List[PhotoOperation]:
        """
        Plan one operation per photo, in input order.

        Args:
            photos: Photos to organize
            config: Run configuration

        Returns:
            Planned operations
        """
        operations = [
            PhotoOperation(
                source_path=photo.source_path,
                destination_path=self.destination_for(photo, config),
                operation_type=config.operation_type,
                metadata=photo,
            )
            for photo in photos
        ]
        logger.info(
            f"Planned {len(operations):,} {config.operation_type.value} operations "
            f"into {config.destination_folder}"
        )
        return operations
