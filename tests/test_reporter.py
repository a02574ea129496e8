"""Tests for scan reports and previews."""

import json
import os
from datetime import datetime

from photo_organizer.models import OperationType, PhotoOperation
from photo_organizer.reporter import OrganizationReporter


def make_operations(count, destination='/dest'):
    return [
        PhotoOperation(
            source_path=f'/source/IMG_{i:04d}.jpg',
            destination_path=os.path.join(destination, '2024', '10', f'IMG_{i:04d}.jpg'),
            operation_type=OperationType.COPY,
        )
        for i in range(count)
    ]


class TestScanReport:
    """Test scan statistics and the property table."""

    def test_summary_counts(self, make_photo, sydney_photo):
        photos = [
            sydney_photo,
            make_photo('/source/b.jpg', 'ABC123', file_size=100),
            make_photo('/source/c.jpg', 'OTHER', date_taken=datetime(2020, 1, 1), file_size=50),
        ]

        stats = OrganizationReporter().scan_summary(photos)

        assert stats['total_photos'] == 3
        assert stats['total_size'] == 150
        assert stats['with_date'] == 2
        assert stats['with_location'] == 1
        assert stats['with_camera'] == 1
        assert stats['duplicate_groups'] == 1
        assert stats['duplicate_files'] == 2

    def test_report_table(self, make_photo):
        photos = [make_photo(f'/source/{i}.jpg', f'h{i}', file_size=1024) for i in range(2)]

        report = OrganizationReporter().generate_scan_report(photos)

        assert 'Property' in report
        assert 'Total Photos' in report
        assert '2.0KB' in report
        assert 'Duplicate Groups' not in report

    def test_report_mentions_duplicates(self, make_photo):
        photos = [make_photo(f'/source/{i}.jpg', 'same', file_size=2048) for i in range(3)]

        report = OrganizationReporter().generate_scan_report(photos)

        assert 'Duplicate Groups' in report
        assert '4.0KB' in report


class TestPreview:
    """Test the operation preview listing."""

    def test_short_plan_listed_fully(self):
        preview = OrganizationReporter().generate_preview(make_operations(2), '/dest')
        lines = preview.splitlines()
        assert lines == [
            f"  IMG_0000.jpg -> {os.path.join('2024', '10', 'IMG_0000.jpg')}",
            f"  IMG_0001.jpg -> {os.path.join('2024', '10', 'IMG_0001.jpg')}",
        ]

    def test_long_plan_truncated(self):
        preview = OrganizationReporter().generate_preview(make_operations(25), '/dest')
        lines = preview.splitlines()
        assert len(lines) == 11
        assert lines[-1] == '  ... and 15 more operations'


class TestSaveReport:
    """Test the JSON run report."""

    def test_writes_operations_and_completion(self, tmp_path, make_photo):
        operations = make_operations(3)
        operations[0] = PhotoOperation(
            operations[0].source_path, operations[0].destination_path,
            OperationType.COPY, make_photo(file_hash='ABC123'),
        )
        report_file = tmp_path / 'reports' / 'run.json'

        saved = OrganizationReporter().save_report(operations, 2, False, str(report_file))

        assert saved == str(report_file)
        with open(report_file) as f:
            data = json.load(f)
        assert data['dry_run'] is False
        assert data['total_operations'] == 3
        assert data['completed_operations'] == 2
        assert [op['completed'] for op in data['operations']] == [True, True, False]
        assert data['operations'][0]['hash'] == 'ABC123'
        assert data['operations'][1]['hash'] is None
        assert data['operations'][0]['type'] == 'copy'
