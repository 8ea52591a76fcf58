"""
Unit tests for database functionality.
"""

import pytest
from unittest.mock import patch, MagicMock
from fastapi import HTTPException
from sqlalchemy.exc import SQLAlchemyError

from core.database import _engine_options, create_tables, drop_tables, get_db, get_db_context
from models import Template


class TestDatabaseFunctions:
    """Test cases for database utility functions."""

    @patch('core.database.SessionLocal')
    def test_get_db_success(self, mock_session_local):
        """Test successful database session creation and cleanup."""
        mock_session = MagicMock()
        mock_session_local.return_value = mock_session

        db_iter = get_db()
        db = next(db_iter)
        assert db == mock_session

        with pytest.raises(StopIteration):
            next(db_iter)

        mock_session.close.assert_called_once()
        mock_session.rollback.assert_not_called()

    @patch('core.database.SessionLocal')
    def test_get_db_rolls_back_on_database_error(self, mock_session_local):
        """Errors raised inside the request roll the session back and propagate."""
        mock_session = MagicMock()
        mock_session_local.return_value = mock_session

        db_iter = get_db()
        next(db_iter)
        with pytest.raises(SQLAlchemyError):
            db_iter.throw(SQLAlchemyError("boom"))

        mock_session.rollback.assert_called_once()
        mock_session.close.assert_called_once()

    @patch('core.database.SessionLocal')
    def test_get_db_rolls_back_on_http_exception(self, mock_session_local):
        mock_session = MagicMock()
        mock_session_local.return_value = mock_session

        db_iter = get_db()
        next(db_iter)
        with pytest.raises(HTTPException):
            db_iter.throw(HTTPException(status_code=404, detail="Template not found"))

        mock_session.rollback.assert_called_once()

    @patch('core.database.SessionLocal')
    def test_get_db_context_commits(self, mock_session_local):
        """Test successful database context manager."""
        mock_session = MagicMock()
        mock_session_local.return_value = mock_session

        with get_db_context() as db:
            assert db == mock_session

        mock_session.commit.assert_called_once()
        mock_session.close.assert_called_once()

    @patch('core.database.SessionLocal')
    def test_get_db_context_rolls_back(self, mock_session_local):
        mock_session = MagicMock()
        mock_session_local.return_value = mock_session

        with pytest.raises(RuntimeError):
            with get_db_context():
                raise RuntimeError("fail")

        mock_session.rollback.assert_called_once()
        mock_session.commit.assert_not_called()

    @patch('core.database.Base.metadata.create_all')
    def test_create_tables(self, mock_create_all):
        create_tables()
        mock_create_all.assert_called_once()

    @patch('core.database.Base.metadata.create_all', side_effect=SQLAlchemyError("no db"))
    def test_create_tables_failure_propagates(self, mock_create_all):
        with pytest.raises(SQLAlchemyError):
            create_tables()

    @patch('core.database.Base.metadata.drop_all')
    def test_drop_tables(self, mock_drop_all):
        drop_tables()
        mock_drop_all.assert_called_once()

    def test_engine_options(self):
        assert _engine_options("sqlite://") == {"connect_args": {"check_same_thread": False}}
        options = _engine_options("postgresql://localhost/templates")
        assert options["pool_pre_ping"] is True


class TestTimestamps:
    """Test the insert/update timestamp listeners."""

    def test_timestamps_set_on_insert_and_update(self, db_session):
        template = Template(name="Stamped", width=10, height=10, layers=[])
        db_session.add(template)
        db_session.commit()

        assert template.created_at is not None
        assert template.updated_at == template.created_at
        first_updated = template.updated_at

        template.name = "Stamped again"
        db_session.commit()

        assert template.updated_at >= first_updated
        assert template.output_format == "png"
