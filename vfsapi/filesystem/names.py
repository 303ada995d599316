"""
Case-insensitive comparison policies for item names and user names.

Both policies are exposed as key functions so they plug straight into
sorted(), dict lookups and set membership.
"""

from typing import Iterable, Iterator, Dict, Optional

from vfsapi.filesystem.errors import InvalidArgumentError


def item_name_key(name: str) -> str:
    """Comparison key for file system item names"""
    return name.casefold()


def user_name_key(name: str) -> str:
    """Comparison key for user names"""
    return name.casefold()


def item_names_equal(first: str, second: str) -> bool:
    return item_name_key(first) == item_name_key(second)


def user_names_equal(first: str, second: str) -> bool:
    return user_name_key(first) == user_name_key(second)


def validate_user_name(user_name: Optional[str]) -> str:
    """
    Check that a user name is usable as a lock holder or session owner.

    Args:
        user_name: Name supplied by the caller

    Returns:
        The name unchanged

    Raises:
        InvalidArgumentError: If the name is missing, empty or whitespace
    """
    if user_name is None:
        raise InvalidArgumentError("User name is null.")
    if not isinstance(user_name, str) or not user_name.strip():
        raise InvalidArgumentError("User name is empty.")
    return user_name


class UserNameSet:
    """
    Set of user names compared case-insensitively.

    The spelling used on the first add is the one reported back.
    """

    def __init__(self, user_names: Iterable[str] = ()):
        self._names: Dict[str, str] = {}
        for user_name in user_names:
            self.add(user_name)

    def add(self, user_name: str) -> bool:
        """Add a name; returns False if it was already present"""
        validate_user_name(user_name)
        key = user_name_key(user_name)
        if key in self._names:
            return False
        self._names[key] = user_name
        return True

    def remove(self, user_name: str) -> bool:
        """Remove a name; returns False if it was not present"""
        validate_user_name(user_name)
        return self._names.pop(user_name_key(user_name), None) is not None

    def ordered(self) -> list[str]:
        return sorted(self._names.values(), key=user_name_key)

    def __contains__(self, user_name: object) -> bool:
        if not isinstance(user_name, str):
            return False
        return user_name_key(user_name) in self._names

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._names.values()))

    def __len__(self) -> int:
        return len(self._names)

    def __bool__(self) -> bool:
        return bool(self._names)

    def __repr__(self) -> str:
        return f"UserNameSet({self.ordered()!r})"
