"""
Session management for the file system service.

A session is opened per user name and identified by a random token. It also
remembers the user's current directory between commands.
"""

import logging
import secrets
import threading
from typing import Dict, List, Optional

from vfsapi.filesystem.names import user_name_key, validate_user_name
from vfsapi.filesystem.paths import default_volume_path

logger = logging.getLogger(__name__)

TOKEN_BYTES = 16


class SessionError(Exception):
    """Authorization failure; status_code is the HTTP status to report"""

    kind = "session_error"

    def __init__(self, message: str, status_code: int = 401):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class Session:
    """
    State of one connected user.

    Sessions are identified by user name (case-insensitive) and token.
    """

    def __init__(self, user_name: str, token: str, current_directory: Optional[str] = None):
        self.user_name = user_name
        self.token = token
        self.current_directory = current_directory or default_volume_path()


class SessionService:
    """
    Service for opening, looking up and closing user sessions.

    This service:
    - Issues a token per connected user name
    - Rejects a second connection for a name that is already connected
    - Validates (user name, token) pairs for each command

    Args:
        default_directory: Current directory of new sessions (the default volume if omitted)
    """

    def __init__(self, default_directory: Optional[str] = None):
        self.default_directory = default_directory or default_volume_path()
        self.sessions: Dict[str, Session] = {}
        self._lock = threading.Lock()

    @property
    def total_users(self) -> int:
        return len(self.sessions)

    def user_names(self) -> List[str]:
        with self._lock:
            return sorted((s.user_name for s in self.sessions.values()), key=user_name_key)

    def _find_session(self, user_name: str, token: str) -> Session:
        # Caller holds self._lock
        if not user_name or not token:
            raise SessionError("User name and token are required.")

        session = self.sessions.get(user_name_key(user_name.strip()))
        if session is None or not secrets.compare_digest(session.token, token):
            raise SessionError(f"User '{user_name}' is not authorized.")
        return session

    def authorize(self, user_name: str) -> Session:
        """
        Open a session for a user.

        Args:
            user_name: Name to connect as

        Returns:
            New Session with a fresh token

        Raises:
            InvalidArgumentError: If the user name is blank
            SessionError: If the user is already connected
        """
        validate_user_name(user_name)
        user_name = user_name.strip()
        key = user_name_key(user_name)

        with self._lock:
            if key in self.sessions:
                logger.warning(f"Rejected second connection for user: {user_name}")
                raise SessionError(f"User '{user_name}' is already connected.", status_code=409)

            session = Session(
                user_name=user_name,
                token=secrets.token_hex(TOKEN_BYTES),
                current_directory=self.default_directory,
            )
            self.sessions[key] = session

        logger.info(f"User connected: {user_name} ({self.total_users} total)")
        return session

    def get_session(self, user_name: str, token: str) -> Session:
        """
        Look up the session for a (user name, token) pair.

        Raises:
            SessionError: If the user is not connected or the token does not match
        """
        with self._lock:
            return self._find_session(user_name, token)

    def deauthorize(self, user_name: str, token: str) -> Session:
        """
        Close a session.

        Returns:
            The removed Session

        Raises:
            SessionError: If the pair does not identify an open session
        """
        with self._lock:
            session = self._find_session(user_name, token)
            del self.sessions[user_name_key(session.user_name)]

        logger.info(f"User disconnected: {session.user_name} ({self.total_users} total)")
        return session
