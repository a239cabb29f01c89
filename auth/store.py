"""
auth/store.py -- SQLAlchemy Core persistence layer for user accounts.

Pattern: Repository + Data Mapper. UserStore is the repository; _row_to_user
is the mapper. Route and dependency code never touches SQL directly.

Security:
  All queries use bound parameters. No f-strings in SQL.

  email carries a UNIQUE constraint. Duplicate registration surfaces as
  sqlalchemy.exc.IntegrityError from create_user(); there is no separate
  "does this email exist" pre-check that two concurrent requests could both
  pass.

  First-user-is-admin: create_user() computes the role in the same INSERT ...
  SELECT statement that writes the row, so the user count it sees is the one
  the insert commits against.

Layer rule: no imports from api/, team/, or planner/.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import (
    Column,
    Integer,
    String,
    Table,
    Text,
    and_,
    case,
    func,
    literal,
    or_,
    select,
    text,
)
from sqlalchemy.engine import Engine

from auth.models import ROLE_ADMIN, ROLE_MEMBER, User
from core.config import get_settings
from core.database import create_db_engine, metadata

# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

users = Table(
    "users",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("email", String(255), nullable=False, unique=True),  # trimmed + lowercased
    Column("hashed_password", Text, nullable=False),
    Column("full_name", String(255), nullable=False, index=True),
    Column("avatar_url", Text),
    Column("role", String(30), nullable=False, server_default=ROLE_MEMBER),
    Column("created_at", String(32), nullable=False),
    Column("updated_at", String(32), nullable=False),
)

_PROFILE_FIELDS = {"full_name", "avatar_url"}


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def normalize_email(email: str) -> str:
    """Trim and lowercase an email address before comparison or storage."""
    return email.strip().lower()


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class UserStore:
    """Repository for User entities.

    Usage:
        store = UserStore()
        user_id = store.create_user(User(email="a@x.io", full_name="A", hashed_password=hash_password("pw")))
        user = store.get_by_email("a@x.io")
        store.close()
    """

    def __init__(self, db_url: str | None = None) -> None:
        self.engine: Engine = create_db_engine(db_url or get_settings().database_url)

    def ping(self) -> bool:
        """Return True if the database answers a trivial query."""
        with self.engine.connect() as conn:
            return conn.execute(text("SELECT 1")).scalar() == 1

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def create_user(self, user: User) -> int:
        """Insert a new user and return its assigned database ID.

        user.email is normalized here as well, so callers cannot bypass the
        case-folded uniqueness check by passing mixed case.

        The role is decided inside the INSERT: "admin" if the users table is
        empty at that moment, else "member". user.role is ignored.

        Raises sqlalchemy.exc.IntegrityError if the email already exists.
        """
        email = normalize_email(user.email)
        now = _now_iso()

        user_count = select(func.count()).select_from(users).correlate(None).scalar_subquery()
        role_expr = case((user_count == 0, literal(ROLE_ADMIN)), else_=literal(ROLE_MEMBER))

        source = select(
            literal(email),
            literal(user.hashed_password),
            literal(user.full_name.strip()),
            literal(user.avatar_url, Text),
            role_expr,
            literal(now),
            literal(now),
        )
        stmt = users.insert().from_select(
            ["email", "hashed_password", "full_name", "avatar_url", "role", "created_at", "updated_at"],
            source,
        )
        with self.engine.connect() as conn:
            conn.execute(stmt)
            user_id = conn.execute(select(users.c.id).where(users.c.email == email)).scalar_one()
            conn.commit()
        return user_id

    def update_profile(self, user_id: int, **fields) -> bool:
        """Update the caller-editable profile fields (full_name, avatar_url).

        Unknown keys raise ValueError rather than being ignored. Returns True
        if a row was updated, False if user_id was not found.
        """
        unknown = set(fields) - _PROFILE_FIELDS
        if unknown:
            raise ValueError(f"Unknown profile fields: {unknown!r}")
        if "full_name" in fields and fields["full_name"] is not None:
            fields["full_name"] = fields["full_name"].strip()
        with self.engine.connect() as conn:
            result = conn.execute(
                users.update().where(users.c.id == user_id).values(**fields, updated_at=_now_iso())
            )
            conn.commit()
        return result.rowcount > 0

    def delete_user(self, user_id: int) -> bool:
        """Permanently delete a user record. Returns True if deleted, False if not found.

        Team memberships and planner rows that reference the user are left in
        place. Tokens already issued for the user stop working because the
        access gate re-resolves the user id on every request.
        """
        with self.engine.connect() as conn:
            result = conn.execute(users.delete().where(users.c.id == user_id))
            conn.commit()
        return result.rowcount > 0

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def count_users(self) -> int:
        with self.engine.connect() as conn:
            result = conn.execute(select(func.count()).select_from(users)).scalar()
        return result or 0

    def get_by_id(self, user_id: int) -> User | None:
        """Look up a user by primary key. Returns None if not found."""
        with self.engine.connect() as conn:
            row = conn.execute(users.select().where(users.c.id == user_id)).fetchone()
        return _row_to_user(row) if row is not None else None

    def get_by_email(self, email: str) -> User | None:
        """Look up a user by email, case-insensitively. Returns None if not found."""
        with self.engine.connect() as conn:
            row = conn.execute(users.select().where(users.c.email == normalize_email(email))).fetchone()
        return _row_to_user(row) if row is not None else None

    def list_users(self) -> list[User]:
        """Return all users ordered by id. Admin-only operation."""
        with self.engine.connect() as conn:
            rows = conn.execute(users.select().order_by(users.c.id)).fetchall()
        return [_row_to_user(r) for r in rows]

    def search_users(
        self,
        query: str,
        exclude_ids: list[int],
        offset: int,
        limit: int,
    ) -> tuple[list[User], int]:
        """Case-insensitive substring match on email or full name.

        Returns (page_of_users, total_matches). Rows whose id is in exclude_ids
        are never returned or counted. The query is matched literally --
        autoescape=True neutralizes % and _ in user input.

        The needle is folded with str.lower; on SQLite the column side uses the
        same function (see core.database), so non-ASCII names match too.
        """
        needle = query.lower()
        condition = or_(
            func.lower(users.c.email).contains(needle, autoescape=True),
            func.lower(users.c.full_name).contains(needle, autoescape=True),
        )
        if exclude_ids:
            condition = and_(condition, users.c.id.not_in(exclude_ids))

        with self.engine.connect() as conn:
            total = conn.execute(select(func.count()).select_from(users).where(condition)).scalar() or 0
            rows = conn.execute(
                users.select().where(condition).order_by(users.c.id).offset(offset).limit(limit)
            ).fetchall()
        return [_row_to_user(r) for r in rows], total

    def close(self) -> None:
        self.engine.dispose()


# ---------------------------------------------------------------------------
# Row mappers (Data Mapper pattern)
# ---------------------------------------------------------------------------


def _row_to_user(row) -> User:
    return User(
        id=row.id,
        email=row.email,
        full_name=row.full_name,
        hashed_password=row.hashed_password,
        avatar_url=row.avatar_url,
        role=row.role,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )
