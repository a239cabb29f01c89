"""
auth/dependencies.py -- FastAPI Depends() helpers for authentication.

One auth method: the Authorization: Bearer <token> header. There is no
cookie and no API key path.

get_current_user() walks the gate in order and raises HTTP 401 at the first
failed step:
  1. no Authorization header (or not a Bearer header)
  2. token fails signature / expiry / shape checks
  3. the user id in the token no longer resolves to a user
On success the resolved User is returned to the route.

require_admin() wraps get_current_user() and raises HTTP 403 if the user is
not an admin -- unless admin_check_waived() says the check is off.

Layer rule: no imports from api/, team/, or planner/.
  The team store is reached through request.app.state, not imported.
"""

from __future__ import annotations

import logging

from fastapi import HTTPException, Request

from auth.models import User
from auth.tokens import decode_access_token

logger = logging.getLogger("taskdash.auth")

_BEARER_PREFIX = "Bearer "


def _unauthenticated(message: str) -> HTTPException:
    return HTTPException(
        status_code=401,
        detail={"code": "unauthorized", "message": message},
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_user(request: Request) -> User:
    """Require a valid bearer token. Raises HTTP 401 if the request is not authenticated.

    Use as a FastAPI dependency:
        @router.get("/protected")
        def route(user: User = Depends(get_current_user)): ...
    """
    auth_header = request.headers.get("Authorization", "")
    if not auth_header.startswith(_BEARER_PREFIX) or not auth_header[len(_BEARER_PREFIX) :].strip():
        raise _unauthenticated("Authentication required.")

    payload = decode_access_token(auth_header[len(_BEARER_PREFIX) :].strip())
    if payload is None:
        raise _unauthenticated("Invalid or expired token.")

    user_store = request.app.state.user_store
    user = user_store.get_by_id(payload["user_id"])
    if user is None:
        raise _unauthenticated("User not found.")
    return user


# ---------------------------------------------------------------------------
# Admin escalation
# ---------------------------------------------------------------------------


def admin_check_waived(membership_count: int) -> bool:
    """Return True when the admin-only check should be skipped.

    The rule: while no team membership exists anywhere in the system, any
    authenticated user passes an admin check. It is meant as a bootstrap
    window, but it is global (memberships of *any* owner count) and it closes
    for good the moment the first membership is written. See DESIGN.md,
    open question Q1.
    """
    return membership_count == 0


def require_admin(request: Request) -> User:
    """Require admin role. Raises HTTP 401 if unauthenticated, HTTP 403 if not admin.

    The membership count is read on every call; nothing is cached.
    """
    user = get_current_user(request)
    if user.is_admin:
        return user
    team_store = request.app.state.team_store
    if admin_check_waived(team_store.count_memberships()):
        logger.info("Admin check waived for user %d (no team memberships exist)", user.id)
        return user
    raise HTTPException(
        status_code=403,
        detail={"code": "forbidden", "message": "Admin access required."},
    )
