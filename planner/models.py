"""
planner/models.py -- Domain dataclasses for tasks and calendar events.

These are pure data containers with zero logic. Every record belongs to the
user in user_id; PlannerStore filters every read and write by it.
"""

from dataclasses import dataclass
from typing import Optional

DEFAULT_EVENT_COLOR = "#8B5CF6"


@dataclass
class Task:
    """A to-do item on the owner's task board.

    id is None before the record is written to the database.
    """

    user_id: int
    title: str
    description: Optional[str] = None
    status: str = "todo"  # "todo" | "in-progress" | "done"
    priority: str = "medium"  # "low" | "medium" | "high"
    due_date: Optional[str] = None  # ISO 8601
    id: Optional[int] = None
    created_at: str = ""
    updated_at: str = ""


@dataclass
class Event:
    """A calendar entry.

    date is stored as a UTC ISO 8601 string so ordering by the column is
    chronological.
    """

    user_id: int
    title: str
    date: str  # ISO 8601, UTC
    color: str = DEFAULT_EVENT_COLOR
    description: Optional[str] = None
    id: Optional[int] = None
    created_at: str = ""
    updated_at: str = ""
