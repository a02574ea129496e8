"""Shared fixtures for photo organizer tests."""

from datetime import datetime
from fractions import Fraction

import pytest
import yaml

from photo_organizer.config import PhotoManagerConfig
from photo_organizer.filesystem import LocalFileSystem
from photo_organizer.models import GpsCoordinates, PhotoMetadata


class FakeTag:
    """Stand-in for an exifread tag: raw values plus a printable form."""

    def __init__(self, values, printable=None):
        self.values = values
        self.printable = printable if printable is not None else str(values)

    def __str__(self):
        return self.printable


def dms(degrees, minutes, seconds):
    """Build an EXIF degrees/minutes/seconds value."""
    return [Fraction(degrees), Fraction(minutes), Fraction(seconds)]


class FixedTimeFileSystem(LocalFileSystem):
    """Local filesystem reporting a fixed creation time for every file."""

    def __init__(self, created):
        self.created = created
        self.creation_time_calls = []

    def creation_time(self, path):
        self.creation_time_calls.append(path)
        return self.created


@pytest.fixture
def source_dir(tmp_path):
    """Empty directory to put source photos in."""
    path = tmp_path / 'source'
    path.mkdir()
    return path


@pytest.fixture
def destination_dir(tmp_path):
    """Destination path that does not exist yet."""
    return tmp_path / 'organized'


@pytest.fixture
def create_test_files(source_dir):
    """Factory fixture: create files in the source tree with given content."""

    def _create(relative_path, content=b'test-content'):
        full_path = source_dir / relative_path
        full_path.parent.mkdir(parents=True, exist_ok=True)
        full_path.write_bytes(content)
        return full_path

    return _create


@pytest.fixture
def make_photo():
    """Factory fixture: build PhotoMetadata with sensible defaults."""

    def _make(source_path='/source/photo.jpg', file_hash='ABC123', **fields):
        fields.setdefault('file_name', source_path.rsplit('/', 1)[-1])
        return PhotoMetadata(source_path=source_path, hash=file_hash, **fields)

    return _make


@pytest.fixture
def sydney_photo(make_photo):
    """Photo taken 2024-10-15 with a GPS fix near Sydney."""
    return make_photo(
        date_taken=datetime(2024, 10, 15, 14, 30, 0),
        location=GpsCoordinates(-33.832108, 150.997711),
        camera_make='Apple',
        camera_model='iPhone 15 Pro',
    )


@pytest.fixture
def run_config():
    """Factory fixture: PhotoManagerConfig for /source -> /dest."""

    def _make(**fields):
        fields.setdefault('source_folder', '/source')
        fields.setdefault('destination_folder', '/dest')
        return PhotoManagerConfig(**fields)

    return _make


@pytest.fixture
def exif_directories():
    """Tag directories as read_exif_directories returns them for a phone photo."""
    return {
        'Image': {
            'Make': FakeTag('Apple'),
            'Model': FakeTag('iPhone 15 Pro'),
        },
        'EXIF': {
            'DateTimeOriginal': FakeTag('2024:10:15 14:30:00'),
            'ExifImageWidth': FakeTag([4032], '4032'),
            'ExifImageLength': FakeTag([3024], '3024'),
        },
        'GPS': {
            'GPSLatitude': FakeTag(dms(33, 49, Fraction(553888, 10000))),
            'GPSLatitudeRef': FakeTag('S'),
            'GPSLongitude': FakeTag(dms(150, 59, Fraction(518796, 10000))),
            'GPSLongitudeRef': FakeTag('E'),
        },
    }


@pytest.fixture
def write_config(tmp_path):
    """Factory fixture: write a YAML config file and return its path."""

    def _write(data, name='photo_organizer.yml'):
        config_path = tmp_path / name
        with open(config_path, 'w') as f:
            yaml.dump(data, f)
        return config_path

    return _write
