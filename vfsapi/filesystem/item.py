"""
File system item tree.

A FileSystemItem is a tagged node: its kind (root, volume, directory or file)
is fixed at creation and decides which fields matter. The parent owns its
children; the child's `parent` attribute is a navigational back-reference.

The tree performs structural checks only (name conflicts, emptiness, locks on
the item being discarded). Which kinds may appear where is decided by the
console before it calls in here.
"""

from enum import IntEnum
from typing import Dict, Iterator, List, Optional

from vfsapi.filesystem.errors import (
    LockedResourceError,
    NameConflictError,
    NotEmptyError,
    PathNotFoundError,
    WrongKindError,
)
from vfsapi.filesystem.names import UserNameSet, item_name_key

ROOT_NAME = "/"


class FileSystemItemKind(IntEnum):
    """Item kinds, in display order"""
    ROOT = 0
    VOLUME = 1
    DIRECTORY = 2
    FILE = 3

    @property
    def label(self) -> str:
        return self.name.lower()


CONTAINER_KINDS = (FileSystemItemKind.VOLUME, FileSystemItemKind.DIRECTORY)


class FileSystemItem:
    """
    A node of the in-memory file system.

    Attributes:
        kind: Item kind, never changes
        name: Item name, unique among siblings (case-insensitive)
        parent: Owning item, None for the root and for detached items
        locked_by: Users holding a lock (files only)
    """

    def __init__(self, kind: FileSystemItemKind, name: str, parent: Optional["FileSystemItem"] = None):
        self.kind = kind
        self.name = name
        self.parent = parent
        self.locked_by = UserNameSet()
        self._children: Dict[str, FileSystemItem] = {}

    def __repr__(self) -> str:
        return f"FileSystemItem({self.kind.label}, {self.name!r})"

    @property
    def child_items(self) -> List["FileSystemItem"]:
        return list(self._children.values())

    @property
    def is_locked(self) -> bool:
        return bool(self.locked_by)

    def get_child(self, name: str) -> Optional["FileSystemItem"]:
        return self._children.get(item_name_key(name))

    def has_child(self, name: str) -> bool:
        return item_name_key(name) in self._children

    def get_level(self) -> int:
        """Depth from the root (root = 0)"""
        level = 0
        item = self.parent
        while item is not None:
            level += 1
            item = item.parent
        return level

    def iter_ancestors(self) -> Iterator["FileSystemItem"]:
        item = self.parent
        while item is not None:
            yield item
            item = item.parent

    def walk(self) -> Iterator["FileSystemItem"]:
        """Yield this item and all of its descendants, depth-first"""
        stack = [self]
        while stack:
            item = stack.pop()
            yield item
            stack.extend(item._children.values())

    def path(self) -> str:
        """Absolute path of the item, e.g. /C:/docs/a.txt"""
        if self.kind == FileSystemItemKind.ROOT:
            return ROOT_NAME
        names = [self.name] + [
            item.name for item in self.iter_ancestors() if item.kind != FileSystemItemKind.ROOT
        ]
        return "/" + "/".join(reversed(names))

    # Structural mutation

    def _attach(self, item: "FileSystemItem") -> "FileSystemItem":
        key = item_name_key(item.name)
        if key in self._children:
            raise NameConflictError(
                f"'{self._children[key].name}' already exists in '{self.path()}'.",
                path=self.path(),
            )
        self._children[key] = item
        item.parent = self
        return item

    def _find_child(self, name: str, kind: Optional[FileSystemItemKind] = None) -> "FileSystemItem":
        item = self.get_child(name)
        if item is None or (kind is not None and item.kind != kind):
            label = kind.label if kind is not None else "item"
            raise PathNotFoundError(f"There is no {label} '{name}' in '{self.path()}'.", path=self.path())
        return item

    def _discard(self, item: "FileSystemItem"):
        del self._children[item_name_key(item.name)]
        if item.parent is self:
            item.parent = None

    def add_child_volume(self, name: str) -> "FileSystemItem":
        return self._attach(FileSystemItem(FileSystemItemKind.VOLUME, name))

    def add_child_directory(self, name: str) -> "FileSystemItem":
        """
        Create a directory under this item.

        Raises:
            NameConflictError: If a sibling with the same name exists
        """
        return self._attach(FileSystemItem(FileSystemItemKind.DIRECTORY, name))

    def add_child_file(self, name: str) -> "FileSystemItem":
        """
        Create a file under this item.

        Raises:
            NameConflictError: If a sibling with the same name exists
        """
        return self._attach(FileSystemItem(FileSystemItemKind.FILE, name))

    def add_child(self, item: "FileSystemItem") -> "FileSystemItem":
        """Attach an existing subtree; its previous parent is not touched"""
        return self._attach(item)

    def remove_child(self, item: "FileSystemItem"):
        """Detach a child by identity"""
        existing = self._children.get(item_name_key(item.name))
        if existing is not item:
            raise PathNotFoundError(f"'{item.name}' is not a child of '{self.path()}'.", path=self.path())
        self._discard(item)

    def remove_child_directory(self, name: str):
        """
        Remove an empty child directory.

        Raises:
            PathNotFoundError: If there is no such directory
            NotEmptyError: If the directory still has children
        """
        item = self._find_child(name, FileSystemItemKind.DIRECTORY)
        if item._children:
            raise NotEmptyError(f"Directory '{item.path()}' is not empty.", path=item.path())
        self._discard(item)

    def remove_child_directory_with_tree(self, name: str):
        """Remove a child directory and everything below it"""
        item = self._find_child(name, FileSystemItemKind.DIRECTORY)
        self._discard(item)

    def remove_child_file(self, name: str):
        """
        Remove a child file.

        Raises:
            PathNotFoundError: If there is no such file
            LockedResourceError: If the file is locked
        """
        item = self._find_child(name, FileSystemItemKind.FILE)
        if item.is_locked:
            raise LockedResourceError(
                f"File '{item.path()}' is locked by {', '.join(item.locked_by.ordered())}.",
                path=item.path(),
            )
        self._discard(item)

    # Locking

    def has_locks(self) -> bool:
        """True if this item or any file below it is locked"""
        return any(item.is_locked for item in self.walk())

    def _require_file(self):
        if self.kind != FileSystemItemKind.FILE:
            raise WrongKindError(f"'{self.path()}' is not a file.", path=self.path())

    def lock(self, user_name: str) -> bool:
        self._require_file()
        return self.locked_by.add(user_name)

    def unlock(self, user_name: str) -> bool:
        """Release the user's hold; other holders are unaffected"""
        self._require_file()
        return self.locked_by.remove(user_name)


def create_root(volume_names: Optional[List[str]] = None) -> FileSystemItem:
    """
    Build an empty tree with the given volumes attached to the root.

    Args:
        volume_names: Volumes to provision

    Returns:
        The root item
    """
    root = FileSystemItem(FileSystemItemKind.ROOT, ROOT_NAME)
    for name in volume_names or []:
        root.add_child_volume(name)
    return root
