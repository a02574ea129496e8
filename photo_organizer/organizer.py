"""Photo organization: planning, duplicate handling and execution."""

import logging
from typing import List, Optional, Tuple

from .cancellation import CancellationToken
from .config import PhotoManagerConfig
from .duplicates import DuplicateDetector, DuplicateGroups
from .executor import OperationExecutor, OperationProgressCallback
from .filesystem import FileSystem, LocalFileSystem
from .models import DuplicateHandling, PhotoMetadata, PhotoOperation
from .planner import PathPlanner

logger = logging.getLogger(__name__)


class PhotoOrganizer:
    """Organizes photos based on configuration and metadata."""

    def __init__(self, filesystem: Optional[FileSystem] = None):
        """
        Initialize organizer.

        Args:
            filesystem: Filesystem shared by planning and execution
        """
        self.filesystem = filesystem or LocalFileSystem()
        self.planner = PathPlanner(self.filesystem)
        self.executor = OperationExecutor(self.filesystem)
        self.detector = DuplicateDetector()

    def plan_organization(self, photos: List[PhotoMetadata],
                          config: PhotoManagerConfig) -> List[PhotoOperation]:
        return self.planner.plan(photos, config)

    def execute_operations(self, operations: List[PhotoOperation],
                           progress_callback: Optional[OperationProgressCallback] = None,
                           cancel_token: Optional[CancellationToken] = None) -> int:
        return self.executor.execute(operations, progress_callback, cancel_token)

    def detect_duplicates(self, photos: List[PhotoMetadata]) -> DuplicateGroups:
        return self.detector.detect(photos)

    def skip_duplicates(self, photos: List[PhotoMetadata]
                        ) -> Tuple[List[PhotoMetadata], List[PhotoMetadata]]:
        """Drop all but the first photo of each duplicate group."""
        return self.detector.filter_duplicates(photos)

    def prepare(self, photos: List[PhotoMetadata], config: PhotoManagerConfig,
                skip_duplicates: bool = False) -> List[PhotoOperation]:
        """
        Apply the duplicate policy and plan the remaining photos.

        Args:
            photos: Scanned photos
            config: Run configuration
            skip_duplicates: Drop duplicates even if the policy does not say so

        Returns:
            Planned operations
        """
        if skip_duplicates:
            photos, _ = self.skip_duplicates(photos)
        elif config.handle_duplicates != DuplicateHandling.SKIP:
            logger.warning(
                f"Duplicate handling '{config.handle_duplicates.value}' is not "
                "implemented; duplicates will be planned like other photos"
            )
        return self.plan_organization(photos, config)
