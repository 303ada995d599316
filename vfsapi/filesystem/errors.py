"""
Error types raised by the virtual file system.

Every failure detected while resolving a path or checking a command's
preconditions is raised as a subclass of FileSystemError. Each subclass
carries the HTTP status code the API reports it with.
"""

from typing import Optional


class FileSystemError(Exception):
    """Base class for all file system failures"""

    status_code = 400
    kind = "file_system_error"

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.path = path

    def __str__(self) -> str:
        return self.message


class PathNotFoundError(FileSystemError):
    """A path segment has no matching child"""

    status_code = 404
    kind = "path_not_found"


class WrongKindError(FileSystemError):
    """The resolved item is not of the kind the command requires"""

    kind = "wrong_kind"


class NameConflictError(FileSystemError):
    """A sibling with the same name already exists"""

    status_code = 409
    kind = "name_conflict"


class NotEmptyError(FileSystemError):
    """Non-recursive removal of a directory that still has children"""

    status_code = 409
    kind = "not_empty"


class LockedResourceError(FileSystemError):
    """The target file, or a file inside the target subtree, is locked"""

    status_code = 423
    kind = "locked_resource"


class InvalidRelocationError(FileSystemError):
    """Copy or move between items that would make no sense or form a cycle"""

    kind = "invalid_relocation"


class InvalidArgumentError(FileSystemError):
    """Malformed path, command line or user name"""

    kind = "invalid_argument"
