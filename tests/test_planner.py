"""Tests for destination path planning."""

import os
from datetime import datetime

import pytest

from conftest import FixedTimeFileSystem
from photo_organizer.models import GpsCoordinates, OperationType
from photo_organizer.planner import PathPlanner, format_location, render_pattern


@pytest.fixture
def planner():
    """Planner whose files were all created on 2023-01-05."""
    return PathPlanner(FixedTimeFileSystem(datetime(2023, 1, 5, 8, 0, 0)))


class TestRenderPattern:
    """Test token substitution."""

    def test_year_month_location(self, sydney_photo):
        rendered = render_pattern('{Year}/{Month}/{Location}', sydney_photo, sydney_photo.date_taken)
        assert rendered == '2024/10/-33.83_151.00'

    def test_camera_and_day(self, sydney_photo):
        rendered = render_pattern('{Camera}/{Year}-{Month}-{Day}', sydney_photo, sydney_photo.date_taken)
        assert rendered == 'Apple/2024-10-15'

    def test_month_name(self, make_photo):
        photo = make_photo()
        assert render_pattern('{Year}/{MonthName}', photo, datetime(2024, 3, 9)) == '2024/March'

    def test_zero_padding(self, make_photo):
        photo = make_photo()
        assert render_pattern('{Year}/{Month}/{Day}', photo, datetime(987, 2, 3)) == '0987/02/03'

    def test_tokens_are_case_insensitive(self, sydney_photo):
        rendered = render_pattern('{YEAR}/{month}/{camera}', sydney_photo, sydney_photo.date_taken)
        assert rendered == '2024/10/Apple'

    def test_repeated_tokens_all_replaced(self, sydney_photo):
        rendered = render_pattern('{Year}/{Year}-{Month}', sydney_photo, sydney_photo.date_taken)
        assert rendered == '2024/2024-10'

    def test_unknown_tokens_left_verbatim(self, sydney_photo):
        rendered = render_pattern('{Year}/{Album}/{Month', sydney_photo, sydney_photo.date_taken)
        assert rendered == '2024/{Album}/{Month'

    def test_missing_values_become_unknown(self, make_photo):
        photo = make_photo()
        rendered = render_pattern('{Camera}/{Location}', photo, datetime(2024, 1, 1))
        assert rendered == 'Unknown/Unknown'

    def test_substituted_values_not_rescanned(self, make_photo):
        photo = make_photo(camera_make='{Year}')
        assert render_pattern('{Camera}', photo, datetime(2024, 1, 1)) == '{Year}'

    def test_location_two_decimals(self, make_photo):
        photo = make_photo(location=GpsCoordinates(40.712776, -74.005974))
        assert format_location(photo) == '40.71_-74.01'


class TestPathPlanner:
    """Test planning operations for photos."""

    def test_photo_without_location(self, planner, make_photo, run_config):
        photo = make_photo(date_taken=datetime(2024, 10, 15, 14, 30))
        config = run_config(organization_pattern='{Year}/{Month}/{Location}')

        [operation] = planner.plan([photo], config)

        assert operation.destination_path == os.path.join('/dest', '2024/10/Unknown', 'photo.jpg')
        assert operation.source_path == '/source/photo.jpg'
        assert operation.operation_type == OperationType.COPY
        assert operation.metadata is photo

    def test_destination_ends_with_file_name(self, planner, sydney_photo, run_config):
        [operation] = planner.plan([sydney_photo], run_config(organization_pattern='{Camera}'))
        assert operation.destination_path == os.path.join('/dest', 'Apple', 'photo.jpg')
        assert operation.destination_path.startswith('/dest')

    def test_falls_back_to_creation_time(self, planner, make_photo, run_config):
        photo = make_photo('/source/scan.png')

        [operation] = planner.plan([photo], run_config())

        assert operation.destination_path == os.path.join('/dest', '2023/01', 'scan.png')
        assert planner.filesystem.creation_time_calls == ['/source/scan.png']

    def test_capture_date_wins_over_creation_time(self, planner, sydney_photo, run_config):
        planner.plan([sydney_photo], run_config())
        assert planner.filesystem.creation_time_calls == []

    def test_one_operation_per_photo_in_order(self, planner, make_photo, run_config):
        photos = [make_photo(f'/source/{name}.jpg', name, date_taken=datetime(2020, 1, 1))
                  for name in ['c', 'a', 'b']]

        operations = planner.plan(photos, run_config(operation_type=OperationType.SYMLINK))

        assert [op.source_path for op in operations] == [p.source_path for p in photos]
        assert all(op.operation_type == OperationType.SYMLINK for op in operations)

    def test_planning_is_deterministic(self, planner, sydney_photo, make_photo, run_config):
        photos = [sydney_photo, make_photo('/source/other.jpg', 'x')]
        config = run_config(organization_pattern='{Year}/{MonthName}/{Location}')

        assert planner.plan(photos, config) == planner.plan(photos, config)

    def test_empty_input(self, planner, run_config):
        assert planner.plan([], run_config()) == []

    def test_nested_source_keeps_only_file_name(self, planner, make_photo, run_config):
        photo = make_photo('/source/2019/trip/IMG_1.JPG', date_taken=datetime(2019, 7, 4))
        [operation] = planner.plan([photo], run_config())
        assert operation.destination_path == os.path.join('/dest', '2019/07', 'IMG_1.JPG')

    def test_vanished_file_gets_fallback_date(self, tmp_path, make_photo, run_config, caplog):
        photo = make_photo(str(tmp_path / 'gone.jpg'))

        [operation] = PathPlanner().plan([photo], run_config())

        assert operation.destination_path == os.path.join('/dest', '1601/01', 'gone.jpg')
        assert 'Cannot read creation time' in caplog.text

    def test_empty_camera_make_is_unknown(self, planner, make_photo, run_config):
        photo = make_photo(camera_make='', date_taken=datetime(2024, 10, 15))

        [operation] = planner.plan([photo], run_config(organization_pattern='{Camera}/{Year}'))

        assert operation.destination_path == os.path.join('/dest', 'Unknown/2024', 'photo.jpg')
