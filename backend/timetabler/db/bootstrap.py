from __future__ import annotations

import logging

from sqlalchemy import inspect

from timetabler.db.base import Base
from timetabler.db.session import engine
import timetabler.models  # noqa: F401

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS: dict[str, set[str]] = {
    "lecturers": {"id", "name", "preferred_days", "preferred_times"},
    "courses": {
        "id",
        "code",
        "expected_students",
        "duration_hours",
        "required_resources",
        "required_venue_type",
        "lecturer_id",
    },
    "venues": {"id", "name", "capacity", "type", "resources"},
    "schedule_entries": {"id", "course_id", "venue_id", "lecturer_id", "day", "start_time", "end_time"},
}


def _assert_required_columns() -> None:
    with engine.begin() as connection:
        inspector = inspect(connection)
        table_names = set(inspector.get_table_names())
        missing_tables = [name for name in REQUIRED_COLUMNS if name not in table_names]
        if missing_tables:
            raise RuntimeError(f"Missing required tables: {', '.join(sorted(missing_tables))}")

        missing_columns: list[str] = []
        for table_name, required in REQUIRED_COLUMNS.items():
            existing = {item["name"] for item in inspector.get_columns(table_name)}
            for column_name in sorted(required - existing):
                missing_columns.append(f"{table_name}.{column_name}")
        if missing_columns:
            raise RuntimeError(f"Missing required columns: {', '.join(missing_columns)}")


def ensure_runtime_schema() -> None:
    try:
        Base.metadata.create_all(bind=engine)
        _assert_required_columns()
    except Exception as exc:  # pragma: no cover - runtime environment dependent
        logger.exception("Runtime schema bootstrap failed")
        raise RuntimeError("Runtime schema bootstrap failed") from exc
