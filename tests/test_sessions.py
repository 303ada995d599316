"""
Tests for session management.
"""

import pytest

from vfsapi.filesystem.errors import InvalidArgumentError
from vfsapi.services.sessions import SessionError, SessionService


@pytest.fixture
def session_service():
    """Create a session service instance"""
    return SessionService()


class TestAuthorize:
    """Tests for opening sessions"""

    def test_initialization(self, session_service):
        """Test service starts with no sessions"""
        assert session_service.total_users == 0
        assert session_service.user_names() == []

    def test_authorize(self, session_service):
        """Test a session gets a token and the default directory"""
        session = session_service.authorize("alice")

        assert session.user_name == "alice"
        assert len(session.token) == 32
        assert session.current_directory == "C:"
        assert session_service.total_users == 1

    def test_tokens_differ(self, session_service):
        """Test each session gets its own token"""
        first = session_service.authorize("alice")
        second = session_service.authorize("bob")

        assert first.token != second.token
        assert session_service.user_names() == ["alice", "bob"]

    def test_name_is_trimmed(self, session_service):
        """Test surrounding whitespace is dropped from the user name"""
        assert session_service.authorize("  alice ").user_name == "alice"

    def test_already_connected(self, session_service):
        """Test the same user cannot connect twice in any casing"""
        session_service.authorize("alice")

        with pytest.raises(SessionError) as exc_info:
            session_service.authorize("ALICE")

        assert exc_info.value.status_code == 409
        assert session_service.total_users == 1

    @pytest.mark.parametrize("user_name", ["", "   ", None])
    def test_blank_user_name(self, session_service, user_name):
        """Test blank user names are rejected"""
        with pytest.raises(InvalidArgumentError):
            session_service.authorize(user_name)


class TestGetSession:
    """Tests for session lookup"""

    def test_get_session(self, session_service):
        """Test lookup by name and token"""
        session = session_service.authorize("alice")

        assert session_service.get_session("Alice", session.token) is session

    def test_wrong_token(self, session_service):
        """Test a mismatched token is refused"""
        session_service.authorize("alice")

        with pytest.raises(SessionError) as exc_info:
            session_service.get_session("alice", "not-the-token")

        assert exc_info.value.status_code == 401

    def test_unknown_user(self, session_service):
        """Test an unknown user is refused"""
        with pytest.raises(SessionError):
            session_service.get_session("nobody", "token")

    @pytest.mark.parametrize("user_name,token", [("", "t"), ("alice", ""), (None, None)])
    def test_missing_credentials(self, session_service, user_name, token):
        """Test both user name and token are required"""
        with pytest.raises(SessionError):
            session_service.get_session(user_name, token)


class TestDeauthorize:
    """Tests for closing sessions"""

    def test_deauthorize(self, session_service):
        """Test closing a session removes it"""
        session = session_service.authorize("alice")

        removed = session_service.deauthorize("alice", session.token)

        assert removed is session
        assert session_service.total_users == 0

    def test_reconnect_after_deauthorize(self, session_service):
        """Test a user may connect again after leaving"""
        session = session_service.authorize("alice")
        session_service.deauthorize("alice", session.token)

        again = session_service.authorize("alice")

        assert again.token != session.token

    def test_deauthorize_wrong_token(self, session_service):
        """Test a session is not closed with the wrong token"""
        session_service.authorize("alice")

        with pytest.raises(SessionError):
            session_service.deauthorize("alice", "bad")

        assert session_service.total_users == 1

    def test_stale_token_does_not_close_new_session(self, session_service):
        """Test the token of a closed session cannot close the user's next one"""
        first = session_service.authorize("alice")
        session_service.deauthorize("alice", first.token)
        second = session_service.authorize("alice")

        with pytest.raises(SessionError):
            session_service.deauthorize("alice", first.token)

        assert session_service.get_session("alice", second.token) is second
        assert session_service.total_users == 1


class TestDefaultDirectory:
    """Tests for the directory new sessions start in"""

    def test_configured_default_directory(self):
        """Test sessions start in the configured directory"""
        service = SessionService(default_directory="D:")

        assert service.authorize("alice").current_directory == "D:"

    def test_blank_default_directory(self):
        """Test a blank default falls back to C:"""
        assert SessionService(default_directory="").authorize("alice").current_directory == "C:"
