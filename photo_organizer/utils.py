"""Utility functions for photo organization."""

import hashlib
import logging
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

import psutil

from .filesystem import FileSystem, LocalFileSystem

logger = logging.getLogger(__name__)

DEFAULT_EXTENSIONS = ('.jpg', '.jpeg', '.png', '.heic', '.raw', '.cr2', '.nef')


def calculate_sha256(file_path: str, chunk_size: int = 65536,
                     filesystem: Optional[FileSystem] = None) -> str:
    """
    Calculate SHA256 hash of a file's full contents.

    Args:
        file_path: Path to file
        chunk_size: Size of chunks to read at a time
        filesystem: Filesystem to read through (local filesystem if None)

    Returns:
        SHA256 hash as hexadecimal string

    Raises:
        OSError: If the file cannot be read
    """
    filesystem = filesystem or LocalFileSystem()
    hasher = hashlib.sha256()
    with filesystem.open_read(file_path) as f:
        while chunk := f.read(chunk_size):
            hasher.update(chunk)
    return hasher.hexdigest()


def format_bytes(bytes_value: int) -> str:
    """
    Format bytes as human-readable string.

    Args:
        bytes_value: Size in bytes

    Returns:
        Formatted string like "1.2GB"
    """
    if bytes_value == 0:
        return "0B"

    units = ['B', 'KB', 'MB', 'GB', 'TB']
    unit_index = 0
    size = float(bytes_value)

    while size >= 1024.0 and unit_index < len(units) - 1:
        size /= 1024.0
        unit_index += 1

    return f"{size:.1f}{units[unit_index]}"


def get_available_space(path: Path) -> int:
    """
    Get available disk space for a path in bytes.

    Walks up to the nearest existing parent, since destination folders
    often do not exist yet.

    Args:
        path: Path to check

    Returns:
        Available space in bytes, 0 if it cannot be determined
    """
    path = Path(path).absolute()
    while not path.exists() and path != path.parent:
        path = path.parent
    try:
        usage = psutil.disk_usage(str(path))
        return usage.free
    except Exception as e:
        logger.error(f"Failed to get disk space for {path}: {e}")
        return 0


def normalize_extensions(extensions: Iterable[str]) -> Tuple[str, ...]:
    """Lower-case extensions and give each a leading dot ('JPG' -> '.jpg')."""
    normalized: List[str] = []
    for ext in extensions:
        ext = ext.strip().lower()
        if not ext:
            continue
        if not ext.startswith('.'):
            ext = '.' + ext
        normalized.append(ext)
    return tuple(normalized)


def parse_extension_list(value: str) -> Tuple[str, ...]:
    """Parse a comma-separated extension list like '.jpg,.png,heic'."""
    return normalize_extensions(value.split(','))


def matches_extension(file_name: str, extensions: Iterable[str]) -> bool:
    """
    Check if a file name ends with one of the extensions, ignoring case.

    Args:
        file_name: File name or path
        extensions: Extensions, normalized with normalize_extensions

    Returns:
        True if the file is selected
    """
    lowered = file_name.lower()
    return any(lowered.endswith(ext) for ext in extensions)
