"""
Unit tests for the Database accessor (mocked psycopg2 pool)
"""
from unittest.mock import MagicMock, patch

import psycopg2
import pytest

from app.core.database import Database, create_pool_with_retry


class TestTransaction:

    def test_commits_and_releases(self, mock_db, mock_conn, mock_cursor):
        with mock_db.transaction() as cursor:
            cursor.execute("UPDATE products SET stock = stock - 1 WHERE id = %s", (1,))

        mock_conn.commit.assert_called_once()
        mock_conn.rollback.assert_not_called()
        mock_cursor.close.assert_called_once()
        mock_db._pool.putconn.assert_called_once_with(mock_conn)

    def test_rolls_back_and_releases_on_error(self, mock_db, mock_conn):
        with pytest.raises(RuntimeError):
            with mock_db.transaction():
                raise RuntimeError("insert failed")

        mock_conn.rollback.assert_called_once()
        mock_conn.commit.assert_not_called()
        mock_db._pool.putconn.assert_called_once_with(mock_conn)

    def test_execute_returns_affected_rows(self, mock_db, mock_cursor):
        mock_cursor.rowcount = 3

        assert mock_db.execute("DELETE FROM banners WHERE id = %s", (1,)) == 3


class TestPoolRetry:

    @patch("app.core.database.time.sleep")
    @patch("app.core.database.ThreadedConnectionPool")
    def test_retries_operational_errors(self, pool_class, sleep):
        pool = MagicMock()
        pool_class.side_effect = [psycopg2.OperationalError("SSL connection closed"), pool]

        assert create_pool_with_retry("postgresql://db", 1, 5) is pool
        sleep.assert_called_once_with(1.0)

    @patch("app.core.database.time.sleep")
    @patch("app.core.database.ThreadedConnectionPool")
    def test_gives_up_after_max_retries(self, pool_class, sleep):
        pool_class.side_effect = psycopg2.OperationalError("down")

        with pytest.raises(psycopg2.OperationalError):
            create_pool_with_retry("postgresql://db", 1, 5, max_retries=2)

        assert pool_class.call_count == 2

    def test_missing_database_url(self, monkeypatch):
        monkeypatch.setattr("app.core.database.settings.DATABASE_URL", "")

        with pytest.raises(Exception, match="DATABASE_URL not configured"):
            Database().fetch_one("SELECT 1")
