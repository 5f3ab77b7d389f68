from unittest.mock import Mock

import pytest
from sqlalchemy.exc import OperationalError

import app.db.session as session_module
from app.core.errors import Internal


def test_get_db_closes_session(monkeypatch):
    db = Mock()
    monkeypatch.setattr(session_module, "SessionLocal", lambda: db)
    gen = session_module.get_db()
    assert next(gen) is db
    with pytest.raises(StopIteration):
        next(gen)
    db.close.assert_called_once()
    db.rollback.assert_not_called()


def test_get_db_turns_database_errors_into_internal(monkeypatch):
    db = Mock()
    monkeypatch.setattr(session_module, "SessionLocal", lambda: db)
    gen = session_module.get_db()
    next(gen)
    with pytest.raises(Internal) as exc_info:
        gen.throw(OperationalError("SELECT 1", {}, Exception("connection lost")))
    assert exc_info.value.to_dict() == {"error": "internal_error", "message": "Database error"}
    db.rollback.assert_called_once()
    db.close.assert_called_once()


def test_connect_args():
    assert session_module._connect_args("sqlite://") == {"check_same_thread": False}
    assert session_module._connect_args("postgresql://u:p@db/etched") == {"connect_timeout": 30}
