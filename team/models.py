"""
team/models.py -- Domain dataclasses for team membership.

Pure data containers. TeamStore does the work.
"""

from dataclasses import dataclass
from typing import Optional

from auth.models import User


@dataclass
class TeamMembership:
    """One (subject, owner) pair as stored.

    user_id  -- the subject, the user who was added
    added_by -- the owner, the user who did the adding; the record belongs to them

    Neither id is a foreign key. Deleting a user leaves the row in place.
    """

    user_id: int
    added_by: int
    id: Optional[int] = None
    created_at: str = ""  # ISO 8601, set by store on insert


@dataclass
class TeamMemberView:
    """A membership joined with the subject's profile -- the read shape.

    Profile fields are None when the subject user no longer exists.
    """

    id: int
    user_id: int
    added_by: int
    created_at: str
    email: Optional[str] = None
    full_name: Optional[str] = None
    avatar_url: Optional[str] = None
    role: Optional[str] = None


@dataclass
class SearchResult:
    """One page of a user directory search."""

    users: list[User]
    total: int
    page: int
    pages: int
