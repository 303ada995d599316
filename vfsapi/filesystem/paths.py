"""
Path parsing for the virtual file system.

Paths are slash-delimited and start with a volume name when absolute:
`C:/docs/a.txt` and `/C:/docs/a.txt` designate the same file. Backslashes
are accepted as separators on input.
"""

from typing import Iterable, List, Optional, Tuple

from vfsapi.filesystem.errors import InvalidArgumentError
from vfsapi.filesystem.names import item_name_key

SEPARATOR = "/"
ALTERNATE_SEPARATOR = "\\"

# Ordered; the first entry is the default volume
VALID_VOLUME_NAMES: Tuple[str, ...] = ("C:", "D:")

RESERVED_CHARACTERS = frozenset('<>:"|?*')


def default_volume_path(volume_names: Optional[Iterable[str]] = None) -> str:
    """
    First valid volume, optionally restricted to the provisioned ones.

    Falls back to the first valid volume when none of the given names is valid.
    """
    if volume_names is not None:
        keys = {item_name_key(name) for name in volume_names}
        for volume in VALID_VOLUME_NAMES:
            if item_name_key(volume) in keys:
                return volume
    return VALID_VOLUME_NAMES[0]


def is_valid_volume_name(name: str) -> bool:
    key = item_name_key(name)
    return any(item_name_key(volume) == key for volume in VALID_VOLUME_NAMES)


def _normalize_separators(path: str) -> str:
    return path.replace(ALTERNATE_SEPARATOR, SEPARATOR)


def is_absolute_path(path: str) -> bool:
    """
    Check whether a path starts with a volume name.

    Args:
        path: Path to inspect

    Returns:
        True if the first segment (after an optional leading separator)
        is a valid volume name
    """
    if not path:
        return False

    path = _normalize_separators(path.strip())
    if path.startswith(SEPARATOR):
        path = path[1:]

    first_segment = path.split(SEPARATOR, 1)[0]
    return is_valid_volume_name(first_segment)


def validate_item_name(name: str) -> str:
    """
    Check that a directory or file name can be stored in the tree.

    Raises:
        InvalidArgumentError: If the name is blank, a relative marker,
            or contains a separator, reserved or control character
    """
    if not name or not name.strip():
        raise InvalidArgumentError("Name must not be empty.")

    if name in (".", ".."):
        raise InvalidArgumentError(f"'{name}' is not a valid name.")

    for char in name:
        if char in (SEPARATOR, ALTERNATE_SEPARATOR) or char in RESERVED_CHARACTERS or ord(char) < 32:
            raise InvalidArgumentError(f"Name '{name}' contains invalid character {char!r}.")

    return name


def split_path(path: str) -> List[str]:
    """
    Split a path into its segment names.

    One leading and one trailing separator are tolerated. The first segment
    of an absolute path is the volume name; every other segment must be a
    valid item name.

    Args:
        path: Path to split

    Returns:
        Ordered list of non-empty segment names

    Raises:
        InvalidArgumentError: If the path is blank or malformed
    """
    if path is None or not path.strip():
        raise InvalidArgumentError("Path must not be empty.")

    normalized = _normalize_separators(path.strip())
    if normalized.startswith(SEPARATOR):
        normalized = normalized[1:]
    if normalized.endswith(SEPARATOR):
        normalized = normalized[:-1]

    if not normalized:
        raise InvalidArgumentError(f"Path '{path}' has no segments.", path=path)

    segments = normalized.split(SEPARATOR)
    if any(not segment for segment in segments):
        raise InvalidArgumentError(f"Path '{path}' contains an empty segment.", path=path)

    absolute = is_valid_volume_name(segments[0])
    for index, segment in enumerate(segments):
        if index == 0 and absolute:
            continue
        validate_item_name(segment)

    return segments


def combine_path(base: str, relative: str) -> str:
    """
    Join a base path with a relative path.

    Relative markers are not resolved; the result is the plain
    concatenation of the two parts with a single separator.

    Args:
        base: Current directory
        relative: Path relative to the base

    Returns:
        Combined path string
    """
    base = _normalize_separators(base.strip()).rstrip(SEPARATOR)
    relative = _normalize_separators((relative or "").strip()).strip(SEPARATOR)

    if not relative:
        return base
    if not base:
        return relative
    return f"{base}{SEPARATOR}{relative}"
