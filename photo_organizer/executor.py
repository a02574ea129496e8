"""Execution of planned file operations."""

import logging
import os
import time
from typing import Callable, List, Optional

from .cancellation import CancellationToken
from .errors import OperationCancelled, OperationFailedError
from .filesystem import FileSystem, LocalFileSystem
from .models import OperationProgress, OperationType, PhotoOperation

logger = logging.getLogger(__name__)

OperationProgressCallback = Callable[[OperationProgress], None]


class OperationExecutor:
    """Performs planned operations one at a time, in order.

    Targets often share directories, so nothing here runs in parallel.
    """

    def __init__(self, filesystem: Optional[FileSystem] = None):
        self.filesystem = filesystem or LocalFileSystem()

    def execute_one(self, operation: PhotoOperation) -> None:
        """Perform a single operation, creating the destination directory first."""
        destination_dir = os.path.dirname(operation.destination_path)
        if destination_dir:
            self.filesystem.make_dirs(destination_dir)

        if operation.operation_type == OperationType.COPY:
            self.filesystem.copy_file(operation.source_path, operation.destination_path)
        elif operation.operation_type == OperationType.MOVE:
            self.filesystem.move(operation.source_path, operation.destination_path)
        elif operation.operation_type == OperationType.SYMLINK:
            self.filesystem.symlink(operation.source_path, operation.destination_path)
        else:
            raise ValueError(f"Unsupported operation type: {operation.operation_type}")

    def execute(self, operations: List[PhotoOperation],
                progress_callback: Optional[OperationProgressCallback] = None,
                cancel_token: Optional[CancellationToken] = None) -> int:
        """
        Execute operations sequentially.

        Operations already done are never rolled back, whether the batch
        is cancelled or fails.

        Args:
            operations: Planned operations
            progress_callback: Called with an OperationProgress after each one
            cancel_token: Token checked before each operation

        Returns:
            Number of operations completed

        Raises:
            OperationCancelled: If cancel_token is set before an operation starts
            OperationFailedError: If an operation fails; wraps the OSError
        """
        cancel_token = cancel_token or CancellationToken()
        total = len(operations)
        completed = 0
        start_time = time.time()

        for operation in operations:
            try:
                cancel_token.raise_if_cancelled()
            except OperationCancelled:
                logger.warning(f"Execution cancelled after {completed:,}/{total:,} operations")
                raise

            try:
                self.execute_one(operation)
            except OSError as e:
                logger.error(
                    f"Failed to {operation.operation_type.value} {operation.source_path} "
                    f"-> {operation.destination_path}: {e} "
                    f"({completed:,}/{total:,} operations completed)"
                )
                raise OperationFailedError(operation, e) from e

            completed += 1
            logger.debug(
                f"{operation.operation_type.value}: "
                f"{operation.source_path} -> {operation.destination_path}"
            )
            if progress_callback:
                progress_callback(OperationProgress(completed, total, operation.source_path))

        elapsed = time.time() - start_time
        logger.info(f"Executed {completed:,} operations in {elapsed:.1f}s")
        return completed
