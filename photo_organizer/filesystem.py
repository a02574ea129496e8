"""Filesystem access used by the organizer.

Every component takes a ``FileSystem`` so tests can substitute a fake by
subclassing ``LocalFileSystem`` and overriding the calls they care about.
"""

import os
import shutil
from datetime import datetime
from pathlib import Path
from typing import BinaryIO, Iterator

# Buffer used when streaming file contents (80 KiB)
COPY_BUFFER_SIZE = 81920


class FileSystem:
    """Operations the organizer needs from a filesystem."""

    def exists(self, path: str) -> bool:
        raise NotImplementedError

    def is_dir(self, path: str) -> bool:
        raise NotImplementedError

    def is_file(self, path: str) -> bool:
        raise NotImplementedError

    def walk_files(self, root: str) -> Iterator[str]:
        """Yield every file below ``root`` recursively."""
        raise NotImplementedError

    def open_read(self, path: str) -> BinaryIO:
        raise NotImplementedError

    def open_write(self, path: str) -> BinaryIO:
        raise NotImplementedError

    def file_size(self, path: str) -> int:
        raise NotImplementedError

    def creation_time(self, path: str) -> datetime:
        raise NotImplementedError

    def same_file(self, first: str, second: str) -> bool:
        """True if both paths exist and name the same file."""
        raise NotImplementedError

    def make_dirs(self, path: str) -> None:
        """Create ``path`` and its missing parents; no error if it exists."""
        raise NotImplementedError

    def copy_file(self, source: str, destination: str) -> None:
        """Stream ``source`` into ``destination`` without loading it whole."""
        # Opening the destination for writing would truncate the source
        if self.same_file(source, destination):
            raise shutil.SameFileError(f"{source} and {destination} are the same file")
        with self.open_read(source) as src, self.open_write(destination) as dst:
            shutil.copyfileobj(src, dst, COPY_BUFFER_SIZE)

    def move(self, source: str, destination: str) -> None:
        raise NotImplementedError

    def symlink(self, target: str, link_path: str) -> None:
        raise NotImplementedError


class LocalFileSystem(FileSystem):
    """The real, local filesystem."""

    def exists(self, path: str) -> bool:
        return os.path.exists(path)

    def is_dir(self, path: str) -> bool:
        return os.path.isdir(path)

    def is_file(self, path: str) -> bool:
        return os.path.isfile(path)

    def walk_files(self, root: str) -> Iterator[str]:
        # Sorted so that enumeration order is stable between runs
        for dirpath, dirnames, filenames in os.walk(root):
            dirnames.sort()
            for filename in sorted(filenames):
                yield os.path.join(dirpath, filename)

    def open_read(self, path: str) -> BinaryIO:
        return open(path, 'rb')

    def open_write(self, path: str) -> BinaryIO:
        return open(path, 'wb')

    def file_size(self, path: str) -> int:
        return os.stat(path).st_size

    def creation_time(self, path: str) -> datetime:
        stat = os.stat(path)
        # st_birthtime only exists where the platform records it
        timestamp = getattr(stat, 'st_birthtime', None) or stat.st_mtime
        return datetime.fromtimestamp(timestamp)

    def same_file(self, first: str, second: str) -> bool:
        return os.path.exists(first) and os.path.exists(second) and os.path.samefile(first, second)

    def make_dirs(self, path: str) -> None:
        Path(path).mkdir(parents=True, exist_ok=True)

    def move(self, source: str, destination: str) -> None:
        # Rename on the same volume, copy + delete across volumes
        shutil.move(source, destination)

    def symlink(self, target: str, link_path: str) -> None:
        os.symlink(os.path.abspath(target), link_path)
