from __future__ import annotations

import logging

from sqlalchemy import inspect

from classweek.db.session import engine

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS: dict[str, set[str]] = {
    "teachers": {"id", "name", "email"},
    "courses": {"id", "code", "name", "teacher_id"},
    "teaching_sessions": {"id", "course_id", "day_of_week", "start_time", "end_time", "room", "session_type"},
    "users": {"id", "email", "role", "teacher_id"},
    "enrollments": {"id", "user_id", "course_id"},
    "schedule_day_locks": {"day_of_week", "version"},
}


def find_schema_drift(connection) -> tuple[list[str], dict[str, list[str]]]:
    inspector = inspect(connection)
    table_names = set(inspector.get_table_names())
    missing_tables: list[str] = []
    missing_columns: dict[str, list[str]] = {}
    for table_name, columns in REQUIRED_COLUMNS.items():
        if table_name not in table_names:
            missing_tables.append(table_name)
            continue
        existing = {item["name"] for item in inspector.get_columns(table_name)}
        missing = sorted(columns - existing)
        if missing:
            missing_columns[table_name] = missing
    return missing_tables, missing_columns


def ensure_runtime_schema_compatibility() -> bool:
    """Log schema drift at startup. Returns True when the schema is usable as is."""
    with engine.connect() as connection:
        missing_tables, missing_columns = find_schema_drift(connection)
    if missing_tables:
        logger.warning(
            "Database is missing table(s) %s. Run `alembic upgrade head` before serving requests.",
            ", ".join(missing_tables),
        )
    for table_name, columns in missing_columns.items():
        logger.warning("Table %s is missing column(s) %s", table_name, ", ".join(columns))
    return not missing_tables and not missing_columns
