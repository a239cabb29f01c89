"""
auth/tokens.py -- JWT, password hashing, registration, and login utilities.

Security design decisions:
  JWT: python-jose with HS256. Tokens are signed with SECRET_KEY and carry
       the user id and an expiry (7 days by default). Nothing is stored
       server-side, so there is no revocation: logout is the client deleting
       its copy. Verification returns None on any failure -- the access gate
       turns that into a 401.

  Passwords: bcrypt with a fresh salt per hash and the cost factor from
       Settings.bcrypt_rounds (default 10). The _DUMMY_HASH constant enables
       timing equalization in authenticate_user() so response time does not
       reveal whether an email is registered.

  SECRET_KEY: sourced from core.config.get_settings(), which refuses to start
       without one.

Layer rule: no imports from api/, team/, or planner/. Import from core/
is allowed -- core/ is the kernel and has no reverse dependencies.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING

import bcrypt
from jose import JWTError, jwt

from auth.models import User
from auth.store import normalize_email
from core.config import get_settings

if TYPE_CHECKING:
    from auth.store import UserStore

logger = logging.getLogger("taskdash.auth")

# ---------------------------------------------------------------------------
# Config -- read once at module load via the lru_cache singleton
# ---------------------------------------------------------------------------

_settings = get_settings()

_ALGORITHM = "HS256"

# ---------------------------------------------------------------------------
# Password hashing (bcrypt -- direct usage, no passlib wrapper)
# ---------------------------------------------------------------------------


def hash_password(plain: str) -> str:
    """Return a salted bcrypt hash of the given plaintext password.

    bcrypt only looks at the first 72 bytes of input. The API layer caps
    passwords at 72 characters of printable text (Pydantic field).
    """
    salt = bcrypt.gensalt(rounds=_settings.bcrypt_rounds)
    return bcrypt.hashpw(plain.encode("utf-8"), salt).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    """Return True if the plaintext password matches the bcrypt hash.

    A mismatch is False, never an exception. A stored hash that bcrypt cannot
    parse raises ValueError -- that is a broken record, not a wrong password.
    """
    return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))


# Timing equalization dummy hash.
# Computed once at module load so the first login attempt is not measurably
# slower than subsequent ones.
_DUMMY_HASH: str = hash_password("taskdash_timing_dummy")


# ---------------------------------------------------------------------------
# JWT encode / decode
# ---------------------------------------------------------------------------


def create_access_token(user_id: int, expire_seconds: int = 0) -> str:
    """Encode a signed JWT carrying the user id.

    Args:
        user_id:        Numeric user ID stored in the DB.
        expire_seconds: Token lifetime in seconds. If 0 (default), uses
                        Settings.token_expire_seconds (7 days).
    """
    duration = expire_seconds if expire_seconds > 0 else _settings.token_expire_seconds
    expire = datetime.now(timezone.utc) + timedelta(seconds=duration)
    payload = {
        "sub": str(user_id),
        "user_id": user_id,
        "exp": expire,
    }
    return jwt.encode(payload, _settings.secret_key, algorithm=_ALGORITHM)


def decode_access_token(token: str) -> dict | None:
    """Decode and verify a JWT. Returns the payload dict or None on any failure.

    Failure covers a malformed token, a bad signature, an expired token, and
    a payload without an integer user_id. The caller must still check that
    the user id resolves to an existing user.
    """
    try:
        payload = jwt.decode(token, _settings.secret_key, algorithms=[_ALGORITHM])
    except JWTError:
        return None
    if not isinstance(payload.get("user_id"), int):
        return None
    return payload


# ---------------------------------------------------------------------------
# Registration and login
# ---------------------------------------------------------------------------


def register_user(store: UserStore, email: str, password: str, full_name: str) -> User:
    """Create an account and return the stored User.

    The email is trimmed and lowercased before it reaches the UNIQUE column.
    The store assigns the role (first account ever -> admin).

    Raises sqlalchemy.exc.IntegrityError if the email is already registered.
    """
    new_user = User(
        email=normalize_email(email),
        full_name=full_name.strip(),
        hashed_password=hash_password(password),
    )
    user_id = store.create_user(new_user)
    created = store.get_by_id(user_id)
    if created is None:
        raise RuntimeError(f"User {user_id} not found after insert")
    logger.info("Registered user %d (role=%s)", created.id, created.role)
    return created


def authenticate_user(store: UserStore, email: str, password: str) -> User | None:
    """Authenticate an email/password login with timing equalization.

    Always runs bcrypt whether or not the user exists:
    - Unknown email: bcrypt runs against _DUMMY_HASH (same cost as real check)
    - Wrong password: bcrypt runs against the real hash (same cost)

    Returns the User on success, None on any failure.
    """
    user = store.get_by_email(email)
    if user is None:
        verify_password(password, _DUMMY_HASH)
        return None
    if not verify_password(password, user.hashed_password):
        return None
    return user
