"""Duplicate detection by content hash."""

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from .models import PhotoMetadata
from .utils import format_bytes

logger = logging.getLogger(__name__)

DuplicateGroups = Dict[str, List[PhotoMetadata]]


@dataclass
class DuplicateGroup:
    """Group of byte-identical photos."""
    hash: str
    files: List[PhotoMetadata]
    total_size: int = field(init=False, default=0)
    space_savings: int = field(init=False, default=0)

    def __post_init__(self):
        """Calculate derived properties after initialization."""
        self.total_size = sum(f.file_size for f in self.files)
        # Everything but the kept (first) file is reclaimable
        if self.files:
            self.space_savings = self.total_size - self.files[0].file_size

    @property
    def kept_file(self) -> PhotoMetadata:
        return self.files[0]


class DuplicateDetector:
    """Groups photos by content hash."""

    def detect(self, photos: List[PhotoMetadata]) -> DuplicateGroups:
        """
        Find photos sharing a content hash.

        Args:
            photos: Scanned photos

        Returns:
            Hash -> photos with that hash, only for hashes shared by two or
            more photos; each list keeps the input order
        """
        hash_groups: DuplicateGroups = defaultdict(list)
        for photo in photos:
            hash_groups[photo.hash].append(photo)

        return {
            file_hash: members
            for file_hash, members in hash_groups.items()
            if len(members) > 1
        }

    def filter_duplicates(
        self, photos: List[PhotoMetadata], groups: Optional[DuplicateGroups] = None
    ) -> Tuple[List[PhotoMetadata], List[PhotoMetadata]]:
        """
        Keep the first photo of every duplicate group and drop the rest.

        Args:
            photos: Scanned photos
            groups: Result of detect(photos); computed if None

        Returns:
            (kept, skipped), both in input order
        """
        if groups is None:
            groups = self.detect(photos)

        skipped_ids = {
            id(photo) for members in groups.values() for photo in members[1:]
        }
        kept = [photo for photo in photos if id(photo) not in skipped_ids]
        skipped = [photo for photo in photos if id(photo) in skipped_ids]

        if skipped:
            logger.info(
                f"Skipping {len(skipped):,} duplicate files from {len(groups):,} groups "
                f"({format_bytes(sum(p.file_size for p in skipped))})"
            )
        return kept, skipped

    def summarize(self, groups: DuplicateGroups) -> List[DuplicateGroup]:
        """Build DuplicateGroup records, largest reclaimable size first."""
        summary = [DuplicateGroup(hash=file_hash, files=members)
                   for file_hash, members in groups.items()]
        summary.sort(key=lambda g: g.space_savings, reverse=True)
        return summary
