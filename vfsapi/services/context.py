"""
Shared file system context.

One FileSystemContext is built at application startup. It owns the tree, the
console operating on it, and the lock that serializes access: mutating
commands take the write lock, queries take the read lock.
"""

import logging
import threading
from contextlib import contextmanager
from typing import Iterator, List, Optional

from vfsapi.filesystem.console import FileSystemConsole
from vfsapi.filesystem.item import FileSystemItem, create_root
from vfsapi.filesystem.paths import VALID_VOLUME_NAMES

logger = logging.getLogger(__name__)


class ReadWriteLock:
    """
    Many readers or one writer.

    Waiting writers block new readers so a steady stream of queries cannot
    starve a mutation.
    """

    def __init__(self):
        self._condition = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._waiting_writers = 0

    def acquire_read(self):
        with self._condition:
            while self._writer or self._waiting_writers:
                self._condition.wait()
            self._readers += 1

    def release_read(self):
        with self._condition:
            self._readers -= 1
            if self._readers == 0:
                self._condition.notify_all()

    def acquire_write(self):
        with self._condition:
            self._waiting_writers += 1
            try:
                while self._writer or self._readers:
                    self._condition.wait()
            finally:
                self._waiting_writers -= 1
            self._writer = True

    def release_write(self):
        with self._condition:
            self._writer = False
            self._condition.notify_all()

    @contextmanager
    def read_locked(self) -> Iterator[None]:
        self.acquire_read()
        try:
            yield
        finally:
            self.release_read()

    @contextmanager
    def write_locked(self) -> Iterator[None]:
        self.acquire_write()
        try:
            yield
        finally:
            self.release_write()


class FileSystemContext:
    """
    Owner of the process-wide file system tree.

    Args:
        root: Root item of an already provisioned tree
    """

    def __init__(self, root: FileSystemItem):
        self.root = root
        self.console = FileSystemConsole(root)
        self.lock = ReadWriteLock()

    @classmethod
    def create(cls, volume_names: Optional[List[str]] = None) -> "FileSystemContext":
        """
        Provision a fresh tree with the given volumes.

        Args:
            volume_names: Volumes to attach under the root (defaults to all valid volumes)

        Returns:
            New context owning the tree
        """
        if volume_names is None:
            volume_names = list(VALID_VOLUME_NAMES)

        logger.info(f"Provisioning file system with volumes: {', '.join(volume_names)}")
        return cls(create_root(volume_names))

    def read_locked(self):
        return self.lock.read_locked()

    def write_locked(self):
        return self.lock.write_locked()

    def print_tree(self, print_root: bool = False) -> str:
        with self.read_locked():
            return self.console.print_tree(print_root)
