"""
File system console.

The console is the command surface over a FileSystemItem tree. Every command
resolves its path(s) against the tree, checks the command's preconditions and
only then mutates the tree, so a failed command leaves the tree untouched.
"""

from itertools import groupby
from typing import Callable, List, Optional, Tuple

from vfsapi.filesystem.errors import (
    InvalidRelocationError,
    LockedResourceError,
    PathNotFoundError,
    WrongKindError,
)
from vfsapi.filesystem.item import CONTAINER_KINDS, FileSystemItem, FileSystemItemKind
from vfsapi.filesystem.names import item_name_key, validate_user_name
from vfsapi.filesystem.paths import combine_path, default_volume_path, is_absolute_path, split_path

ITEM_KIND_TAGS = {
    FileSystemItemKind.DIRECTORY: " [DIR]",
    FileSystemItemKind.FILE: " [FILE]",
}

INDENT = "| "
INDENT_TAIL = "_"


def normalize_current_directory(current_directory: Optional[str], default_directory: Optional[str] = None) -> str:
    """Blank current directory falls back to the default volume"""
    if current_directory is None or not current_directory.strip():
        return default_directory or default_volume_path()
    return current_directory.strip()


def make_absolute(current_directory: Optional[str], path: str, default_directory: Optional[str] = None) -> str:
    current_directory = normalize_current_directory(current_directory, default_directory)
    if is_absolute_path(path):
        return path
    return combine_path(current_directory, path)


class FileSystemConsole:
    """
    Path-addressed commands over a single file system tree.

    Args:
        root: Root item of the tree

    Raises:
        ValueError: If the given item is not a root
    """

    def __init__(self, root: FileSystemItem):
        if root is None:
            raise ValueError("root must not be None")
        if root.kind != FileSystemItemKind.ROOT:
            raise ValueError("Item must be a root item.")
        self.root = root

    @property
    def default_directory(self) -> str:
        """Volume that blank current directories resolve to"""
        return default_volume_path(volume.name for volume in self.root.child_items)

    # Resolution

    def _walk(self, segments: List[str], missing_message: str, path: str) -> FileSystemItem:
        item = self.root
        for segment in segments:
            item = item.get_child(segment)
            if item is None:
                raise PathNotFoundError(missing_message, path=path)
        return item

    def _resolve(
        self,
        current_directory: Optional[str],
        path: str,
        missing_message: str = "Destination path does not exist.",
    ) -> Tuple[str, FileSystemItem]:
        path = make_absolute(current_directory, path, self.default_directory)
        return path, self._walk(split_path(path), missing_message, path)

    def _resolve_parent(self, current_directory: Optional[str], path: str) -> Tuple[str, FileSystemItem, str]:
        path = make_absolute(current_directory, path, self.default_directory)
        segments = split_path(path)
        parent = self._walk(segments[:-1], "Destination path does not exist.", path)
        return path, parent, segments[-1]

    @staticmethod
    def _require_container(item: FileSystemItem, path: str):
        if item.kind not in CONTAINER_KINDS:
            raise WrongKindError(f"'{path}' is not a volume or a directory.", path=path)

    @staticmethod
    def _require_kind(item: FileSystemItem, kind: FileSystemItemKind, path: str):
        if item.kind != kind:
            raise WrongKindError(f"'{path}' is not a {kind.label}.", path=path)

    # Directory commands

    def make_directory(self, current_directory: Optional[str], directory: str) -> str:
        path, parent, name = self._resolve_parent(current_directory, directory)
        self._require_container(parent, path)
        parent.add_child_directory(name)
        return path

    def change_directory(self, current_directory: Optional[str], directory: str) -> str:
        path, item = self._resolve(current_directory, directory)
        self._require_container(item, path)
        return path

    def remove_directory(self, current_directory: Optional[str], directory: str) -> str:
        path, item = self._resolve(current_directory, directory)
        self._require_kind(item, FileSystemItemKind.DIRECTORY, path)
        item.parent.remove_child_directory(item.name)
        return path

    def delete_tree(self, current_directory: Optional[str], directory: str) -> str:
        path, item = self._resolve(current_directory, directory)
        self._require_kind(item, FileSystemItemKind.DIRECTORY, path)
        if item.has_locks():
            raise LockedResourceError(
                "Directory or its subdirectories contain one or more locked files.", path=path
            )
        item.parent.remove_child_directory_with_tree(item.name)
        return path

    # File commands

    def make_file(self, current_directory: Optional[str], file_name: str) -> str:
        path, parent, name = self._resolve_parent(current_directory, file_name)
        self._require_container(parent, path)
        parent.add_child_file(name)
        return path

    def delete_file(self, current_directory: Optional[str], file_name: str) -> str:
        path, item = self._resolve(current_directory, file_name)
        self._require_kind(item, FileSystemItemKind.FILE, path)
        item.parent.remove_child_file(item.name)
        return path

    def lock_file(self, user_name: str, current_directory: Optional[str], file_name: str) -> str:
        validate_user_name(user_name)
        path, item = self._resolve(current_directory, file_name)
        self._require_kind(item, FileSystemItemKind.FILE, path)
        item.lock(user_name)
        return path

    def unlock_file(self, user_name: str, current_directory: Optional[str], file_name: str) -> str:
        """Release the user's lock; unlocking a file the user does not hold is a no-op"""
        validate_user_name(user_name)
        path, item = self._resolve(current_directory, file_name)
        self._require_kind(item, FileSystemItemKind.FILE, path)
        item.unlock(user_name)
        return path

    # Copy / move

    def _resolve_relocation(
        self,
        current_directory: Optional[str],
        source_path: str,
        dest_path: str,
    ) -> Tuple[FileSystemItem, FileSystemItem]:
        """
        Resolve and validate the source and destination of a copy or move.

        Checks run in a fixed order and the first failure is raised.

        Returns:
            (source item, destination item)
        """
        source_path, source = self._resolve(current_directory, source_path, "Source path does not exist.")
        if source.kind not in (FileSystemItemKind.DIRECTORY, FileSystemItemKind.FILE):
            raise WrongKindError(f"'{source_path}' is not a directory or a file.", path=source_path)

        if source.kind == FileSystemItemKind.FILE and source.is_locked:
            raise LockedResourceError(f"File '{source_path}' is locked.", path=source_path)

        dest_path, dest = self._resolve(current_directory, dest_path)
        self._require_container(dest, dest_path)

        if source is dest:
            raise InvalidRelocationError("Source path and destination path must not be equal.", path=dest_path)

        if source.parent is dest:
            raise InvalidRelocationError("Source path cannot be copied or moved to its parent.", path=dest_path)

        if source.kind == FileSystemItemKind.DIRECTORY:
            if any(ancestor is source for ancestor in dest.iter_ancestors()):
                raise InvalidRelocationError(
                    "Source directory cannot be a parent of the destination directory.", path=dest_path
                )

        if source.has_locks():
            raise LockedResourceError(
                "Source path contains one or more locked files and cannot be copied or moved.",
                path=source_path,
            )

        return source, dest

    def copy(self, current_directory: Optional[str], source_path: str, dest_path: str):
        source, dest = self._resolve_relocation(current_directory, source_path, dest_path)
        copy_item_tree(source, dest)

    def move(self, current_directory: Optional[str], source_path: str, dest_path: str):
        source, dest = self._resolve_relocation(current_directory, source_path, dest_path)
        previous_parent = source.parent
        dest.add_child(source)
        previous_parent.remove_child(source)

    # Rendering

    def print_tree(self, print_root: bool = False) -> str:
        lines: List[str] = []
        _print_tree_helper(self.root, lines, print_root)
        return "\n".join(lines)


def copy_item_tree(item: FileSystemItem, dest: FileSystemItem) -> FileSystemItem:
    """
    Re-create `item` and its subtree under `dest`.

    Copies carry names and nesting only; locks are not copied.

    Returns:
        The new top-level copy
    """
    if item.kind not in (FileSystemItemKind.DIRECTORY, FileSystemItemKind.FILE):
        raise ValueError(f"{item!r} is not a directory or a file.")
    if dest.kind not in CONTAINER_KINDS:
        raise ValueError(f"{dest!r} is not a volume or a directory.")

    create: Callable[[str], FileSystemItem]
    if item.kind == FileSystemItemKind.DIRECTORY:
        create = dest.add_child_directory
    else:
        create = dest.add_child_file

    item_copy = create(item.name)
    for child in item.child_items:
        copy_item_tree(child, item_copy)
    return item_copy


def _format_item(item: FileSystemItem, print_root: bool) -> str:
    level = item.get_level()
    if not print_root:
        level -= 1

    indent = ""
    if level > 0:
        indent = (INDENT * level)[:-1] + INDENT_TAIL

    line = indent + item.name + ITEM_KIND_TAGS.get(item.kind, "")
    if item.is_locked:
        line += f" [LOCKED BY: {', '.join(item.locked_by.ordered())}]"
    return line


def _ordered_children(item: FileSystemItem) -> List[FileSystemItem]:
    by_kind = sorted(item.child_items, key=lambda child: child.kind)
    ordered: List[FileSystemItem] = []
    for _, group in groupby(by_kind, key=lambda child: child.kind):
        ordered.extend(sorted(group, key=lambda child: item_name_key(child.name)))
    return ordered


def _print_tree_helper(item: FileSystemItem, lines: List[str], print_root: bool):
    if item.kind != FileSystemItemKind.ROOT or print_root:
        lines.append(_format_item(item, print_root))

    for child in _ordered_children(item):
        _print_tree_helper(child, lines, print_root)
