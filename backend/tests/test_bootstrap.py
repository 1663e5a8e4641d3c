import logging

from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from classweek.db import bootstrap


def test_schema_drift_is_empty_for_current_metadata(session_factory):
    engine = session_factory.kw["bind"]

    with engine.connect() as connection:
        missing_tables, missing_columns = bootstrap.find_schema_drift(connection)

    assert missing_tables == []
    assert missing_columns == {}


def test_empty_database_reports_every_table(monkeypatch, caplog):
    empty = create_engine("sqlite+pysqlite://", poolclass=StaticPool)
    monkeypatch.setattr(bootstrap, "engine", empty)

    with caplog.at_level(logging.WARNING, logger="classweek.db.bootstrap"):
        ok = bootstrap.ensure_runtime_schema_compatibility()

    assert ok is False
    assert "teaching_sessions" in caplog.text
    empty.dispose()
