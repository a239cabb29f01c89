"""
auth/models.py -- Domain dataclasses for authentication entities.

Pattern: Data class (pure data container, zero logic). Stores and routes do
the work; api/models.py owns the outward JSON shape.

Layer rule: no imports from api/, team/, or planner/.
"""

from __future__ import annotations

from dataclasses import dataclass

ROLE_ADMIN = "admin"
ROLE_MEMBER = "member"


@dataclass
class User:
    """Represents a registered identity in TaskDash.

    email is stored trimmed and lowercased; it is the login name.

    role is None on a User that has not been written yet. UserStore.create_user()
    then decides the role inside the INSERT: the first user ever stored becomes
    "admin", everyone after that "member".

    hashed_password is the bcrypt hash. It must never be copied into a response
    model -- api/models.UserResponse has no field for it.
    """

    email: str
    full_name: str
    hashed_password: str
    role: str | None = None  # "admin" | "member"; None = assigned on insert
    id: int | None = None
    avatar_url: str | None = None
    created_at: str | None = None
    updated_at: str | None = None

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN
