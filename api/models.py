"""
API request and response models for TaskDash REST endpoints.

These Pydantic v2 models define the HTTP transport contract for the API layer.
They are intentionally separate from the dataclasses in auth/, team/, and
planner/, which own the internal domain representation. Route handlers map
between the two.

Key casing: user, task, event, and dashboard payloads are camelCase on the
wire (fullName, avatarUrl, dueDate, createdAt); Python code uses snake_case
and the alias generator bridges the two. Team-member payloads are snake_case
on the wire (user_id, added_by, full_name).

The password hash has no field anywhere in this module, so no response can
carry it.
"""

from datetime import datetime
from enum import Enum
from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, Field, StringConstraints, field_validator
from pydantic.alias_generators import to_camel

from auth.models import User
from planner.models import Event, Task
from team.models import SearchResult, TeamMemberView

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"

# bcrypt ignores (or, in recent releases, rejects) input past 72 bytes.
_BCRYPT_MAX_BYTES = 72

_Title = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=255)]
_Name = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=255)]
_Email = Annotated[str, StringConstraints(strip_whitespace=True, to_lower=True, max_length=255, pattern=EMAIL_PATTERN)]


class _CamelModel(BaseModel):
    """Base for payloads that are camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class RoleEnum(str, Enum):
    admin = "admin"
    member = "member"


class TaskStatusEnum(str, Enum):
    todo = "todo"
    in_progress = "in-progress"
    done = "done"


class TaskPriorityEnum(str, Enum):
    low = "low"
    medium = "medium"
    high = "high"


# ---------------------------------------------------------------------------
# Auth -- request models
# ---------------------------------------------------------------------------


class RegisterRequest(_CamelModel):
    """Request body for POST /api/auth/register. Accepts fullName or full_name."""

    email: _Email
    password: str = Field(min_length=6, max_length=_BCRYPT_MAX_BYTES)
    full_name: _Name

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value: str) -> str:
        if len(value.encode("utf-8")) > _BCRYPT_MAX_BYTES:
            raise ValueError(f"password must be at most {_BCRYPT_MAX_BYTES} bytes")
        return value


class LoginRequest(BaseModel):
    """Request body for POST /api/auth/login."""

    email: str = Field(min_length=1, max_length=255)
    password: str = Field(min_length=1, max_length=_BCRYPT_MAX_BYTES)

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value: str) -> str:
        if len(value.encode("utf-8")) > _BCRYPT_MAX_BYTES:
            raise ValueError(f"password must be at most {_BCRYPT_MAX_BYTES} bytes")
        return value


class ProfileUpdate(_CamelModel):
    """Request body for PUT /api/users/me. Only fields present in the body are changed."""

    full_name: Optional[_Name] = None
    avatar_url: Optional[str] = Field(default=None, max_length=2048)

    @field_validator("full_name")
    @classmethod
    def full_name_not_null(cls, value: Optional[str]) -> str:
        if value is None:
            raise ValueError("fullName may not be null")
        return value


# ---------------------------------------------------------------------------
# Auth / users -- response models
# ---------------------------------------------------------------------------


class UserResponse(_CamelModel):
    """Outward user shape. There is deliberately no password field."""

    id: int
    email: str
    full_name: str
    avatar_url: Optional[str] = None
    role: RoleEnum
    created_at: str
    updated_at: str

    @classmethod
    def from_user(cls, user: User) -> "UserResponse":
        return cls(
            id=user.id,
            email=user.email,
            full_name=user.full_name,
            avatar_url=user.avatar_url,
            role=user.role,
            created_at=user.created_at or "",
            updated_at=user.updated_at or "",
        )


class AuthResponse(BaseModel):
    """Response for POST /api/auth/register and POST /api/auth/login."""

    user: UserResponse
    token: str


class UserSearchResponse(BaseModel):
    """Response for GET /api/users/search."""

    users: list[UserResponse]
    total: int
    page: int
    pages: int

    @classmethod
    def from_result(cls, result: SearchResult) -> "UserSearchResponse":
        return cls(
            users=[UserResponse.from_user(u) for u in result.users],
            total=result.total,
            page=result.page,
            pages=result.pages,
        )


# ---------------------------------------------------------------------------
# Team members
# ---------------------------------------------------------------------------


class TeamMemberCreate(BaseModel):
    """Request body for POST /api/team-members."""

    user_id: int = Field(ge=1)


class TeamMemberResponse(BaseModel):
    """A membership joined with the subject's profile.

    Profile fields are null when the subject account has been deleted.
    """

    id: int
    user_id: int
    added_by: int
    created_at: str
    email: Optional[str] = None
    full_name: Optional[str] = None
    avatar_url: Optional[str] = None
    role: Optional[RoleEnum] = None

    @classmethod
    def from_view(cls, view: TeamMemberView) -> "TeamMemberResponse":
        return cls(
            id=view.id,
            user_id=view.user_id,
            added_by=view.added_by,
            created_at=view.created_at,
            email=view.email,
            full_name=view.full_name,
            avatar_url=view.avatar_url,
            role=view.role,
        )


# ---------------------------------------------------------------------------
# Tasks
# ---------------------------------------------------------------------------


class TaskCreate(_CamelModel):
    model_config = ConfigDict(use_enum_values=True)

    title: _Title
    description: Optional[str] = Field(default=None, max_length=5000)
    status: TaskStatusEnum = TaskStatusEnum.todo.value
    priority: TaskPriorityEnum = TaskPriorityEnum.medium.value
    due_date: Optional[datetime] = None


class TaskUpdate(_CamelModel):
    """Partial update. Fields left out of the body are not touched; title,
    status and priority may not be set to null."""

    model_config = ConfigDict(use_enum_values=True)

    title: Optional[_Title] = None
    description: Optional[str] = Field(default=None, max_length=5000)
    status: Optional[TaskStatusEnum] = None
    priority: Optional[TaskPriorityEnum] = None
    due_date: Optional[datetime] = None

    @field_validator("title", "status", "priority")
    @classmethod
    def not_null(cls, value):
        if value is None:
            raise ValueError("field may not be null")
        return value


class TaskResponse(_CamelModel):
    id: int
    user_id: int
    title: str
    description: Optional[str] = None
    status: TaskStatusEnum
    priority: TaskPriorityEnum
    due_date: Optional[str] = None
    created_at: str
    updated_at: str

    @classmethod
    def from_task(cls, task: Task) -> "TaskResponse":
        return cls(
            id=task.id,
            user_id=task.user_id,
            title=task.title,
            description=task.description,
            status=task.status,
            priority=task.priority,
            due_date=task.due_date,
            created_at=task.created_at,
            updated_at=task.updated_at,
        )


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------


class EventCreate(_CamelModel):
    title: _Title
    date: datetime
    color: Optional[str] = Field(default=None, max_length=32)
    description: Optional[str] = Field(default=None, max_length=5000)


class EventUpdate(_CamelModel):
    """Partial update. title, date and color may not be set to null."""

    title: Optional[_Title] = None
    date: Optional[datetime] = None
    color: Optional[str] = Field(default=None, max_length=32)
    description: Optional[str] = Field(default=None, max_length=5000)

    @field_validator("title", "date", "color")
    @classmethod
    def not_null(cls, value):
        if value is None:
            raise ValueError("field may not be null")
        return value


class EventResponse(_CamelModel):
    id: int
    user_id: int
    title: str
    date: str
    color: str
    description: Optional[str] = None
    created_at: str
    updated_at: str

    @classmethod
    def from_event(cls, event: Event) -> "EventResponse":
        return cls(
            id=event.id,
            user_id=event.user_id,
            title=event.title,
            date=event.date,
            color=event.color,
            description=event.description,
            created_at=event.created_at,
            updated_at=event.updated_at,
        )


# ---------------------------------------------------------------------------
# Dashboard
# ---------------------------------------------------------------------------


class DashboardResponse(_CamelModel):
    """Response for GET /api/dashboard -- the caller's own numbers only."""

    total_tasks: int
    task_counts: dict[str, int]
    upcoming_events: int
    team_size: int


# ---------------------------------------------------------------------------
# Shared envelopes
# ---------------------------------------------------------------------------


class MessageResponse(BaseModel):
    message: str


class ErrorDetail(BaseModel):
    """Machine-readable error payload."""

    model_config = ConfigDict(frozen=True)

    code: str
    message: str
    detail: Optional[str] = None


class ErrorResponse(BaseModel):
    """Top-level error envelope returned on 4xx/5xx responses."""

    model_config = ConfigDict(frozen=True)

    error: ErrorDetail


class HealthResponse(BaseModel):
    """Response for GET /api/health."""

    model_config = ConfigDict(frozen=True)

    status: str = "ok"
    version: str
    components: dict[str, str]
