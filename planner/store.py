"""
planner/store.py -- SQLAlchemy Core persistence layer for tasks and events.

Pattern: Repository + Data Mapper. PlannerStore is the repository for both
entities; _row_to_task / _row_to_event are the mappers.

Ownership: every query carries a user_id filter. get/update/delete of a row
owned by someone else behaves exactly like a missing row (None / False).

Security: all queries use bound parameters. Column names for partial updates
come from a fixed whitelist, never from request input.
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Column, Integer, String, Table, Text, func, select
from sqlalchemy.engine import Engine

from core.config import get_settings
from core.database import create_db_engine, metadata
from planner.models import DEFAULT_EVENT_COLOR, Event, Task

TASK_STATUSES = ("todo", "in-progress", "done")

# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

tasks = Table(
    "tasks",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("user_id", Integer, nullable=False, index=True),
    Column("title", String(255), nullable=False),
    Column("description", Text),
    Column("status", String(20), nullable=False, server_default="todo"),
    Column("priority", String(10), nullable=False, server_default="medium"),
    Column("due_date", String(32)),
    Column("created_at", String(32), nullable=False),
    Column("updated_at", String(32), nullable=False),
)

events = Table(
    "events",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("user_id", Integer, nullable=False, index=True),
    Column("title", String(255), nullable=False),
    Column("date", String(32), nullable=False, index=True),
    Column("color", String(32), nullable=False, server_default=DEFAULT_EVENT_COLOR),
    Column("description", Text),
    Column("created_at", String(32), nullable=False),
    Column("updated_at", String(32), nullable=False),
)

_TASK_FIELDS = {"title", "description", "status", "priority", "due_date"}
_EVENT_FIELDS = {"title", "date", "color", "description"}


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def to_utc_iso(value: datetime) -> str:
    """Normalize a datetime to a UTC ISO 8601 string. Naive values are taken as UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat()


def _check_fields(fields: dict, allowed: set) -> None:
    unknown = set(fields) - allowed
    if unknown:
        raise ValueError(f"Unknown fields: {unknown!r}")


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class PlannerStore:
    """Repository for Task and Event entities.

    Usage:
        store = PlannerStore()
        task_id = store.create_task(Task(user_id=1, title="Write report"))
        store.update_task(task_id, 1, status="done")
        store.close()
    """

    def __init__(self, db_url: Optional[str] = None) -> None:
        self.engine: Engine = create_db_engine(db_url or get_settings().database_url)

    # ------------------------------------------------------------------
    # Tasks
    # ------------------------------------------------------------------

    def list_tasks(self, user_id: int) -> list[Task]:
        """Return the user's tasks, newest first."""
        with self.engine.connect() as conn:
            rows = conn.execute(
                tasks.select()
                .where(tasks.c.user_id == user_id)
                .order_by(tasks.c.created_at.desc(), tasks.c.id.desc())
            ).fetchall()
        return [_row_to_task(r) for r in rows]

    def create_task(self, task: Task) -> int:
        now = _now_iso()
        with self.engine.connect() as conn:
            result = conn.execute(
                tasks.insert().values(
                    user_id=task.user_id,
                    title=task.title,
                    description=task.description,
                    status=task.status,
                    priority=task.priority,
                    due_date=task.due_date,
                    created_at=now,
                    updated_at=now,
                )
            )
            conn.commit()
        return result.inserted_primary_key[0]

    def get_task(self, task_id: int, user_id: int) -> Optional[Task]:
        with self.engine.connect() as conn:
            row = conn.execute(
                tasks.select().where((tasks.c.id == task_id) & (tasks.c.user_id == user_id))
            ).fetchone()
        return _row_to_task(row) if row is not None else None

    def update_task(self, task_id: int, user_id: int, **fields) -> bool:
        """Apply a partial update. Returns False if the task is absent or not owned."""
        _check_fields(fields, _TASK_FIELDS)
        with self.engine.connect() as conn:
            result = conn.execute(
                tasks.update()
                .where((tasks.c.id == task_id) & (tasks.c.user_id == user_id))
                .values(**fields, updated_at=_now_iso())
            )
            conn.commit()
        return result.rowcount > 0

    def delete_task(self, task_id: int, user_id: int) -> bool:
        with self.engine.connect() as conn:
            result = conn.execute(tasks.delete().where((tasks.c.id == task_id) & (tasks.c.user_id == user_id)))
            conn.commit()
        return result.rowcount > 0

    def task_status_counts(self, user_id: int) -> dict[str, int]:
        """Return {"todo": N, "in-progress": N, "done": N} for the user's tasks."""
        counts = {status: 0 for status in TASK_STATUSES}
        with self.engine.connect() as conn:
            rows = conn.execute(
                select(tasks.c.status, func.count())
                .where(tasks.c.user_id == user_id)
                .group_by(tasks.c.status)
            ).fetchall()
        for status, count in rows:
            counts[status] = count
        return counts

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    def list_events(self, user_id: int) -> list[Event]:
        """Return the user's events in chronological order."""
        with self.engine.connect() as conn:
            rows = conn.execute(
                events.select().where(events.c.user_id == user_id).order_by(events.c.date, events.c.id)
            ).fetchall()
        return [_row_to_event(r) for r in rows]

    def create_event(self, event: Event) -> int:
        now = _now_iso()
        with self.engine.connect() as conn:
            result = conn.execute(
                events.insert().values(
                    user_id=event.user_id,
                    title=event.title,
                    date=event.date,
                    color=event.color or DEFAULT_EVENT_COLOR,
                    description=event.description,
                    created_at=now,
                    updated_at=now,
                )
            )
            conn.commit()
        return result.inserted_primary_key[0]

    def get_event(self, event_id: int, user_id: int) -> Optional[Event]:
        with self.engine.connect() as conn:
            row = conn.execute(
                events.select().where((events.c.id == event_id) & (events.c.user_id == user_id))
            ).fetchone()
        return _row_to_event(row) if row is not None else None

    def update_event(self, event_id: int, user_id: int, **fields) -> bool:
        """Apply a partial update. Returns False if the event is absent or not owned."""
        _check_fields(fields, _EVENT_FIELDS)
        with self.engine.connect() as conn:
            result = conn.execute(
                events.update()
                .where((events.c.id == event_id) & (events.c.user_id == user_id))
                .values(**fields, updated_at=_now_iso())
            )
            conn.commit()
        return result.rowcount > 0

    def delete_event(self, event_id: int, user_id: int) -> bool:
        with self.engine.connect() as conn:
            result = conn.execute(
                events.delete().where((events.c.id == event_id) & (events.c.user_id == user_id))
            )
            conn.commit()
        return result.rowcount > 0

    def count_upcoming_events(self, user_id: int, now: Optional[datetime] = None) -> int:
        """Count the user's events dated at or after now (default: current UTC time)."""
        cutoff = to_utc_iso(now or datetime.now(timezone.utc))
        with self.engine.connect() as conn:
            result = conn.execute(
                select(func.count())
                .select_from(events)
                .where((events.c.user_id == user_id) & (events.c.date >= cutoff))
            ).scalar()
        return result or 0

    def close(self) -> None:
        self.engine.dispose()


# ---------------------------------------------------------------------------
# Row mappers (Data Mapper pattern)
# ---------------------------------------------------------------------------


def _row_to_task(row) -> Task:
    return Task(
        id=row.id,
        user_id=row.user_id,
        title=row.title,
        description=row.description,
        status=row.status,
        priority=row.priority,
        due_date=row.due_date,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _row_to_event(row) -> Event:
    return Event(
        id=row.id,
        user_id=row.user_id,
        title=row.title,
        date=row.date,
        color=row.color,
        description=row.description,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )
