"""Data model shared by the scanning, planning and execution stages."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import NamedTuple, Optional

from .errors import ConfigError


class OperationType(Enum):
    """Type of file operation to perform."""

    COPY = "copy"
    MOVE = "move"
    SYMLINK = "symlink"

    @classmethod
    def parse(cls, value: str) -> "OperationType":
        """Parse a mode name like 'copy' or 'Move'."""
        try:
            return cls(value.strip().lower())
        except ValueError:
            choices = ", ".join(member.value for member in cls)
            raise ConfigError(f"Unknown operation mode: {value!r} (expected one of: {choices})")


class DuplicateHandling(Enum):
    """How to handle duplicate files.

    Only SKIP has behavior. RENAME and OVERWRITE are accepted in configs
    but currently leave every scanned photo in the plan.
    """

    SKIP = "skip"
    RENAME = "rename"
    OVERWRITE = "overwrite"

    @classmethod
    def parse(cls, value: str) -> "DuplicateHandling":
        try:
            return cls(value.strip().lower())
        except ValueError:
            choices = ", ".join(member.value for member in cls)
            raise ConfigError(f"Unknown duplicate handling: {value!r} (expected one of: {choices})")


@dataclass(frozen=True)
class GpsCoordinates:
    """GPS position in signed decimal degrees."""
    latitude: float
    longitude: float

    @property
    def is_zero(self) -> bool:
        return self.latitude == 0 and self.longitude == 0


@dataclass(frozen=True)
class PhotoMetadata:
    """Metadata extracted from a single image file."""
    source_path: str
    hash: str
    date_taken: Optional[datetime] = None
    location: Optional[GpsCoordinates] = None
    camera_make: Optional[str] = None
    camera_model: Optional[str] = None
    width: int = 0
    height: int = 0
    file_size: int = 0
    file_name: str = ""


@dataclass(frozen=True)
class PhotoOperation:
    """A planned file operation tying a source to its computed destination."""
    source_path: str
    destination_path: str
    operation_type: OperationType
    metadata: Optional[PhotoMetadata] = None


class ScanProgress(NamedTuple):
    files_processed: int
    total_files: int
    current_file: Optional[str] = None


class OperationProgress(NamedTuple):
    operations_completed: int
    total_operations: int
    current_file: Optional[str] = None
