"""Reports and statistics for scans and organization runs."""

import json
import logging
import os
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from .duplicates import DuplicateDetector, DuplicateGroups
from .models import PhotoMetadata, PhotoOperation
from .utils import format_bytes

logger = logging.getLogger(__name__)


class OrganizationReporter:
    """Generates reports and statistics for photo organization."""

    def __init__(self, detector: Optional[DuplicateDetector] = None):
        self.detector = detector or DuplicateDetector()

    def scan_summary(self, photos: List[PhotoMetadata],
                     groups: Optional[DuplicateGroups] = None) -> Dict[str, Any]:
        """
        Collect statistics about scanned photos.

        Args:
            photos: Scanned photos
            groups: Duplicate groups; detected if None

        Returns:
            Dictionary of counts and sizes
        """
        if groups is None:
            groups = self.detector.detect(photos)
        summary = self.detector.summarize(groups)

        return {
            'total_photos': len(photos),
            'total_size': sum(p.file_size for p in photos),
            'with_date': sum(1 for p in photos if p.date_taken is not None),
            'with_location': sum(1 for p in photos if p.location is not None),
            'with_camera': sum(1 for p in photos if p.camera_make),
            'duplicate_groups': len(summary),
            'duplicate_files': sum(len(g.files) for g in summary),
            'space_savings': sum(g.space_savings for g in summary),
        }

    def generate_scan_report(self, photos: List[PhotoMetadata],
                             groups: Optional[DuplicateGroups] = None) -> str:
        """Generate a human-readable property/value table for a scan."""
        stats = self.scan_summary(photos, groups)

        rows = [
            ("Total Photos", f"{stats['total_photos']:,}"),
            ("Total Size", format_bytes(stats['total_size'])),
            ("With Date", f"{stats['with_date']:,}"),
            ("With Location", f"{stats['with_location']:,}"),
            ("With Camera Info", f"{stats['with_camera']:,}"),
        ]
        if stats['duplicate_groups']:
            rows.append(("Duplicate Groups", f"{stats['duplicate_groups']:,}"))
            rows.append(("Duplicate Files", f"{stats['duplicate_files']:,}"))
            rows.append(("Reclaimable", format_bytes(stats['space_savings'])))

        width = max(len(name) for name, _ in rows)
        report = ["=" * 40]
        report.append(f"{'Property'.ljust(width)}  Value")
        report.append("-" * 40)
        for name, value in rows:
            report.append(f"{name.ljust(width)}  {value}")
        report.append("=" * 40)
        return "\n".join(report)

    def generate_preview(self, operations: List[PhotoOperation],
                         destination_folder: str, limit: int = 10) -> str:
        """
        List the first operations of a plan.

        Destinations are shown relative to destination_folder.
        """
        report = []
        for operation in operations[:limit]:
            source_name = os.path.basename(operation.source_path)
            destination = os.path.relpath(operation.destination_path, destination_folder)
            report.append(f"  {source_name} -> {destination}")

        if len(operations) > limit:
            report.append(f"  ... and {len(operations) - limit:,} more operations")
        return "\n".join(report)

    def save_report(self, operations: List[PhotoOperation], completed: int,
                    dry_run: bool, report_file: str) -> str:
        """
        Save a JSON report of an organization run.

        Args:
            operations: Planned operations
            completed: How many of them were executed
            dry_run: Whether the run was a dry run
            report_file: Path to write

        Returns:
            Path to saved report file
        """
        report_path = Path(report_file)
        report_path.parent.mkdir(parents=True, exist_ok=True)

        data = {
            'timestamp': datetime.now().isoformat(),
            'dry_run': dry_run,
            'total_operations': len(operations),
            'completed_operations': completed,
            'operations': [
                {
                    'source': op.source_path,
                    'destination': op.destination_path,
                    'type': op.operation_type.value,
                    'hash': op.metadata.hash if op.metadata else None,
                    'completed': index < completed,
                }
                for index, op in enumerate(operations)
            ],
        }

        try:
            with open(report_path, 'w') as f:
                json.dump(data, f, indent=2)
            logger.info(f"Report saved: {report_path}")
            return str(report_path)
        except Exception as e:
            logger.error(f"Failed to save report: {e}")
            raise
