"""
team/store.py -- SQLAlchemy Core persistence layer for team memberships.

Pattern: Repository + Data Mapper (same as auth/store.py). TeamStore is the
repository; _row_to_view is the mapper.

Ownership: every read and delete is filtered by added_by. A caller asking for
a membership that belongs to another owner gets the same answer as for one
that does not exist (None / False) -- the route maps both to 404.

Uniqueness: UNIQUE(user_id, added_by) is a database constraint. add_member()
does not pre-check; a duplicate insert raises IntegrityError, so concurrent
duplicate adds cannot both succeed.

Read shape: list_members() and get_member() LEFT JOIN the users table at read
time to attach the subject's profile. Nothing is cached.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Column, Index, Integer, String, Table, UniqueConstraint, func, select
from sqlalchemy.engine import Engine

from auth.store import users
from core.config import get_settings
from core.database import create_db_engine, metadata
from team.models import TeamMemberView

logger = logging.getLogger("taskdash.team")

# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

team_members = Table(
    "team_members",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("user_id", Integer, nullable=False),  # subject
    Column("added_by", Integer, nullable=False),  # owner
    Column("created_at", String(32), nullable=False),
    UniqueConstraint("user_id", "added_by", name="uq_team_member_owner"),
    Index("ix_team_members_added_by", "added_by"),
)


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class TeamStore:
    """Repository for TeamMembership records.

    Usage:
        store = TeamStore()
        membership_id = store.add_member(owner_id=1, user_id=2)
        members = store.list_members(owner_id=1)
        store.remove_member(membership_id, owner_id=1)
        store.close()
    """

    def __init__(self, db_url: Optional[str] = None) -> None:
        self.engine: Engine = create_db_engine(db_url or get_settings().database_url)

    def _joined_select(self):
        return (
            select(
                team_members.c.id,
                team_members.c.user_id,
                team_members.c.added_by,
                team_members.c.created_at,
                users.c.email,
                users.c.full_name,
                users.c.avatar_url,
                users.c.role,
            )
            .select_from(team_members.outerjoin(users, users.c.id == team_members.c.user_id))
        )

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def add_member(self, owner_id: int, user_id: int) -> int:
        """Insert a (subject, owner) pair and return the new membership id.

        Does not check that user_id exists -- the route does that first.
        Raises sqlalchemy.exc.IntegrityError if owner_id already added user_id.
        """
        with self.engine.connect() as conn:
            result = conn.execute(
                team_members.insert().values(user_id=user_id, added_by=owner_id, created_at=_now_iso())
            )
            conn.commit()
        membership_id = result.inserted_primary_key[0]
        logger.info("User %d added user %d to their team (membership %d)", owner_id, user_id, membership_id)
        return membership_id

    def remove_member(self, membership_id: int, owner_id: int) -> bool:
        """Delete a membership only if owner_id created it.

        Returns False when the id does not exist and when it belongs to another
        owner; the two cases are indistinguishable to the caller.
        """
        with self.engine.connect() as conn:
            result = conn.execute(
                team_members.delete().where(
                    (team_members.c.id == membership_id) & (team_members.c.added_by == owner_id)
                )
            )
            conn.commit()
        if result.rowcount > 0:
            logger.info("User %d removed membership %d", owner_id, membership_id)
            return True
        return False

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def list_members(self, owner_id: int) -> list[TeamMemberView]:
        """Return owner_id's memberships, newest first, with subject profiles attached."""
        stmt = (
            self._joined_select()
            .where(team_members.c.added_by == owner_id)
            .order_by(team_members.c.created_at.desc(), team_members.c.id.desc())
        )
        with self.engine.connect() as conn:
            rows = conn.execute(stmt).fetchall()
        return [_row_to_view(r) for r in rows]

    def get_member(self, membership_id: int, owner_id: int) -> Optional[TeamMemberView]:
        """Return one membership in the list_members() shape, or None if not owned/absent."""
        stmt = self._joined_select().where(
            (team_members.c.id == membership_id) & (team_members.c.added_by == owner_id)
        )
        with self.engine.connect() as conn:
            row = conn.execute(stmt).fetchone()
        return _row_to_view(row) if row is not None else None

    def list_subject_ids(self, owner_id: int) -> list[int]:
        """Return the ids of every user owner_id has added."""
        with self.engine.connect() as conn:
            rows = conn.execute(
                select(team_members.c.user_id).where(team_members.c.added_by == owner_id)
            ).fetchall()
        return [r.user_id for r in rows]

    def count_members(self, owner_id: int) -> int:
        with self.engine.connect() as conn:
            result = conn.execute(
                select(func.count()).select_from(team_members).where(team_members.c.added_by == owner_id)
            ).scalar()
        return result or 0

    def count_memberships(self) -> int:
        """Return the number of membership records system-wide, across all owners."""
        with self.engine.connect() as conn:
            result = conn.execute(select(func.count()).select_from(team_members)).scalar()
        return result or 0

    def close(self) -> None:
        self.engine.dispose()


# ---------------------------------------------------------------------------
# Row mappers
# ---------------------------------------------------------------------------


def _row_to_view(row) -> TeamMemberView:
    return TeamMemberView(
        id=row.id,
        user_id=row.user_id,
        added_by=row.added_by,
        created_at=row.created_at,
        email=row.email,
        full_name=row.full_name,
        avatar_url=row.avatar_url,
        role=row.role,
    )
