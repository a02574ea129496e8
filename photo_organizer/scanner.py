"""Directory scanning and parallel metadata extraction."""

import logging
import os
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Callable, Iterable, List, Optional

from .cancellation import CancellationToken
from .errors import DirectoryNotFoundError, OperationCancelled
from .extractor import MetadataExtractor
from .filesystem import FileSystem, LocalFileSystem
from .models import PhotoMetadata, ScanProgress
from .utils import format_bytes, matches_extension, normalize_extensions

logger = logging.getLogger(__name__)

ScanProgressCallback = Callable[[ScanProgress], None]


class PhotoScanner:
    """Scans directories for image files and extracts their metadata."""

    def __init__(self, filesystem: Optional[FileSystem] = None,
                 extractor: Optional[MetadataExtractor] = None,
                 max_workers: Optional[int] = None):
        """
        Initialize scanner.

        Args:
            filesystem: Filesystem to enumerate (local filesystem if None)
            extractor: Metadata extractor (one over the same filesystem if None)
            max_workers: Parallel extractions; defaults to the CPU count
        """
        self.filesystem = filesystem or LocalFileSystem()
        self.extractor = extractor or MetadataExtractor(self.filesystem)
        self.max_workers = max_workers or os.cpu_count() or 1

    def find_files(self, directory: str, extensions: Iterable[str]) -> List[str]:
        """
        Recursively find files whose names end with one of the extensions.

        Raises:
            DirectoryNotFoundError: If directory does not exist
        """
        if not self.filesystem.is_dir(directory):
            raise DirectoryNotFoundError(f"Directory not found: {directory}")

        extensions = normalize_extensions(extensions)
        return [
            path for path in self.filesystem.walk_files(directory)
            if matches_extension(os.path.basename(path), extensions)
        ]

    def scan(self, directory: str, extensions: Iterable[str],
             progress_callback: Optional[ScanProgressCallback] = None,
             cancel_token: Optional[CancellationToken] = None) -> List[PhotoMetadata]:
        """
        Scan a directory recursively and extract metadata from every match.

        Args:
            directory: Root directory to scan
            extensions: Extensions to select, like ['.jpg', '.png']
            progress_callback: Called with a ScanProgress after each file
            cancel_token: Token checked before each extraction

        Returns:
            Metadata records in enumeration order; unreadable files are left out

        Raises:
            DirectoryNotFoundError: If directory does not exist
            OperationCancelled: If cancel_token was set during the scan
        """
        cancel_token = cancel_token or CancellationToken()
        files = self.find_files(directory, extensions)
        total_files = len(files)

        logger.info(f"Found {total_files:,} matching files in {directory}")
        if total_files == 0:
            return []

        # One slot per file, written only by the worker that owns the index
        slots: List[Optional[PhotoMetadata]] = [None] * total_files
        processed = 0

        def extract_into_slot(index: int) -> None:
            if cancel_token.is_cancelled:
                return
            slots[index] = self.extractor.extract(files[index])

        workers = min(self.max_workers, total_files)
        with ThreadPoolExecutor(max_workers=workers) as executor:
            future_to_index = {
                executor.submit(extract_into_slot, index): index
                for index in range(total_files)
            }

            try:
                for future in as_completed(future_to_index):
                    cancel_token.raise_if_cancelled()

                    file_path = files[future_to_index[future]]
                    try:
                        future.result()
                    except Exception as e:
                        logger.error(f"Exception processing {file_path}: {e}")

                    processed += 1
                    if progress_callback:
                        progress_callback(ScanProgress(processed, total_files, file_path))

                    cancel_token.raise_if_cancelled()
            except OperationCancelled:
                for pending in future_to_index:
                    pending.cancel()
                logger.warning(f"Scan cancelled after {processed:,}/{total_files:,} files")
                raise

        photos = [photo for photo in slots if photo is not None]
        skipped = total_files - len(photos)
        if skipped:
            logger.warning(f"Skipped {skipped:,} unreadable files")

        logger.info(
            f"Scan complete: {len(photos):,} photos, "
            f"{format_bytes(sum(p.file_size for p in photos))}"
        )
        return photos
