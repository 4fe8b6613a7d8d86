from unittest.mock import MagicMock, patch

import pytest

from app.database.repositories.conversations_repository import ConversationsRepository
from app.database.repositories.profiles_repository import ProfilesRepository
from app.documents.exceptions import ConversationNotFoundError


def _mock_connection(mock_get_conn: MagicMock) -> tuple[MagicMock, MagicMock]:
    """Wire up a mock connection + cursor and return (mock_conn, mock_cursor)."""
    mock_cursor = MagicMock()
    mock_conn = MagicMock()
    mock_conn.cursor.return_value.__enter__ = MagicMock(return_value=mock_cursor)
    mock_conn.cursor.return_value.__exit__ = MagicMock(return_value=False)
    mock_get_conn.return_value.__enter__ = MagicMock(return_value=mock_conn)
    mock_get_conn.return_value.__exit__ = MagicMock(return_value=False)
    return mock_conn, mock_cursor


class TestProfilesRepository:
    @patch("app.database.repositories.profiles_repository.get_connection")
    def test_returns_profile(self, mock_get_conn: MagicMock) -> None:
        _conn, mock_cursor = _mock_connection(mock_get_conn)
        mock_cursor.fetchone.return_value = {
            "id": "u1",
            "status": "approved",
            "role": "admin",
            "email": "u1@example.com",
        }

        profile = ProfilesRepository().find_by_user_id("u1")

        assert profile is not None
        assert profile.is_approved
        assert profile.is_admin

    @patch("app.database.repositories.profiles_repository.get_connection")
    def test_null_status_is_not_approved(self, mock_get_conn: MagicMock) -> None:
        _conn, mock_cursor = _mock_connection(mock_get_conn)
        mock_cursor.fetchone.return_value = {"id": "u1", "status": None, "role": None, "email": None}

        profile = ProfilesRepository().find_by_user_id("u1")

        assert profile is not None
        assert not profile.is_approved
        assert not profile.is_admin

    @patch("app.database.repositories.profiles_repository.get_connection")
    def test_missing_profile(self, mock_get_conn: MagicMock) -> None:
        _conn, mock_cursor = _mock_connection(mock_get_conn)
        mock_cursor.fetchone.return_value = None

        assert ProfilesRepository().find_by_user_id("u1") is None


class TestConversationsRepository:
    @patch("app.database.repositories.conversations_repository.get_connection")
    def test_find_owner_id(self, mock_get_conn: MagicMock) -> None:
        _conn, mock_cursor = _mock_connection(mock_get_conn)
        mock_cursor.fetchone.return_value = ("u1",)

        assert ConversationsRepository().find_owner_id("c1") == "u1"

    @patch("app.database.repositories.conversations_repository.get_connection")
    def test_find_owner_id_missing(self, mock_get_conn: MagicMock) -> None:
        _conn, mock_cursor = _mock_connection(mock_get_conn)
        mock_cursor.fetchone.return_value = None

        assert ConversationsRepository().find_owner_id("c1") is None

    @patch("app.database.repositories.conversations_repository.get_connection")
    def test_update_title_commits(self, mock_get_conn: MagicMock) -> None:
        mock_conn, mock_cursor = _mock_connection(mock_get_conn)
        mock_cursor.rowcount = 1

        ConversationsRepository().update_title("c1", "Budget review")

        assert mock_cursor.execute.call_args[0][1] == ("Budget review", "c1")
        mock_conn.commit.assert_called_once()

    @patch("app.database.repositories.conversations_repository.get_connection")
    def test_update_title_missing(self, mock_get_conn: MagicMock) -> None:
        _conn, mock_cursor = _mock_connection(mock_get_conn)
        mock_cursor.rowcount = 0

        with pytest.raises(ConversationNotFoundError):
            ConversationsRepository().update_title("c1", "Budget review")
