"""
api/routes/users.py -- Profile, directory search, and admin user management.

Routes:
  GET    /api/users/me        -- current user's profile
  PUT    /api/users/me        -- update fullName / avatarUrl
  GET    /api/users/search    -- directory search (excludes self and own team)
  GET    /api/users           -- list every account (admin)
  DELETE /api/users/{id}      -- delete an account (admin)

Admin routes use require_admin, which is waived while no team membership
exists anywhere (see auth.dependencies.admin_check_waived).
"""

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from api.models import MessageResponse, ProfileUpdate, UserResponse, UserSearchResponse
from auth.dependencies import get_current_user, require_admin
from auth.models import User
from auth.store import UserStore
from core.config import get_settings
from team.directory import search_users
from team.store import TeamStore

_settings = get_settings()

# Auth policy:
# - GET/PUT /api/users/me:   requires auth (get_current_user)
# - GET /api/users/search:   requires auth (get_current_user)
# - GET /api/users:          requires admin (require_admin)
# - DELETE /api/users/{id}:  requires admin (require_admin)
router = APIRouter()


@router.get("/users/me", response_model=UserResponse)
def read_me(current_user: User = Depends(get_current_user)) -> UserResponse:
    """Return the authenticated user's profile."""
    return UserResponse.from_user(current_user)


@router.put("/users/me", response_model=UserResponse)
def update_me(
    request: Request,
    body: ProfileUpdate,
    current_user: User = Depends(get_current_user),
) -> UserResponse:
    """Update the caller's own profile. Fields absent from the body are left alone."""
    user_store: UserStore = request.app.state.user_store
    updates = body.model_dump(exclude_unset=True)
    if updates:
        user_store.update_profile(current_user.id, **updates)
    updated = user_store.get_by_id(current_user.id)
    if updated is None:
        raise HTTPException(
            status_code=401,
            detail={"code": "unauthorized", "message": "User not found."},
        )
    return UserResponse.from_user(updated)


@router.get("/users/search", response_model=UserSearchResponse)
def search(
    request: Request,
    q: str = Query(default="", max_length=255),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=_settings.search_max_limit),
    current_user: User = Depends(get_current_user),
) -> UserSearchResponse:
    """Search the directory by email or name.

    Never returns the caller or anyone already on the caller's team. Queries
    shorter than two characters return an empty page.
    """
    user_store: UserStore = request.app.state.user_store
    team_store: TeamStore = request.app.state.team_store
    result = search_users(user_store, team_store, current_user.id, q, page=page, limit=limit)
    return UserSearchResponse.from_result(result)


@router.get("/users", response_model=list[UserResponse])
def list_users(request: Request, current_user: User = Depends(require_admin)) -> list[UserResponse]:
    """List all user accounts. Admin only."""
    user_store: UserStore = request.app.state.user_store
    return [UserResponse.from_user(u) for u in user_store.list_users()]


@router.delete("/users/{user_id}", response_model=MessageResponse)
def delete_user(
    request: Request,
    user_id: int,
    current_user: User = Depends(require_admin),
) -> MessageResponse:
    """Delete a user account. Admin only.

    Memberships that reference the deleted user are not removed; they show
    up in team listings with empty profile fields.
    """
    if user_id == current_user.id:
        raise HTTPException(
            status_code=400,
            detail={"code": "self_deletion", "message": "You cannot delete your own account."},
        )
    user_store: UserStore = request.app.state.user_store
    if not user_store.delete_user(user_id):
        raise HTTPException(
            status_code=404,
            detail={"code": "not_found", "message": "User not found."},
        )
    return MessageResponse(message="User deleted successfully")
