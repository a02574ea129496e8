"""
Photo Organizer

Scans folders of photos, reads their EXIF metadata and content hashes, and
copies, moves or links them into a folder tree built from a pattern such as
"{Year}/{Month}/{Location}".
"""

__version__ = "1.0.0"
__author__ = "Homelab Team"

from .cancellation import CancellationToken
from .config import Config, PhotoManagerConfig
from .duplicates import DuplicateDetector, DuplicateGroup
from .errors import (
    ConfigError,
    DirectoryNotFoundError,
    OperationCancelled,
    OperationFailedError,
    PhotoOrganizerError,
)
from .executor import OperationExecutor
from .extractor import MetadataExtractor
from .filesystem import FileSystem, LocalFileSystem
from .models import (
    DuplicateHandling,
    GpsCoordinates,
    OperationProgress,
    OperationType,
    PhotoMetadata,
    PhotoOperation,
    ScanProgress,
)
from .organizer import PhotoOrganizer
from .planner import PathPlanner
from .reporter import OrganizationReporter
from .scanner import PhotoScanner

__all__ = [
    'CancellationToken',
    'Config',
    'PhotoManagerConfig',
    'DuplicateDetector',
    'DuplicateGroup',
    'ConfigError',
    'DirectoryNotFoundError',
    'OperationCancelled',
    'OperationFailedError',
    'PhotoOrganizerError',
    'OperationExecutor',
    'MetadataExtractor',
    'FileSystem',
    'LocalFileSystem',
    'DuplicateHandling',
    'GpsCoordinates',
    'OperationProgress',
    'OperationType',
    'PhotoMetadata',
    'PhotoOperation',
    'ScanProgress',
    'PhotoOrganizer',
    'PathPlanner',
    'OrganizationReporter',
    'PhotoScanner',
]
