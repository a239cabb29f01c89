"""
api/routes/team.py -- Owner-scoped team membership routes.

Routes:
  GET    /api/team-members        -- the caller's team, newest first
  POST   /api/team-members        -- add a user to the caller's team
  DELETE /api/team-members/{id}   -- remove a membership the caller created

Every authenticated user owns their own team; there is no admin requirement
on these routes.

IDOR guard: DELETE passes both the membership id and current_user.id to the
store, whose WHERE clause requires both to match. Someone else's membership
id gets the same 404 as a nonexistent one.
"""

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.exc import IntegrityError

from api.models import MessageResponse, TeamMemberCreate, TeamMemberResponse
from auth.dependencies import get_current_user
from auth.models import User
from auth.store import UserStore
from team.store import TeamStore

# Auth policy:
# - every route: requires auth (get_current_user); records scoped to added_by
router = APIRouter()


@router.get("/team-members", response_model=list[TeamMemberResponse])
def list_team_members(
    request: Request,
    current_user: User = Depends(get_current_user),
) -> list[TeamMemberResponse]:
    """Return the caller's memberships with each subject's profile attached."""
    team_store: TeamStore = request.app.state.team_store
    return [TeamMemberResponse.from_view(v) for v in team_store.list_members(current_user.id)]


@router.post("/team-members", response_model=TeamMemberResponse, status_code=201)
def add_team_member(
    request: Request,
    body: TeamMemberCreate,
    current_user: User = Depends(get_current_user),
) -> TeamMemberResponse:
    """Add body.user_id to the caller's team.

    404 if the user does not exist. 409 if the caller already added them --
    detected by the UNIQUE(user_id, added_by) constraint, not a pre-check.
    """
    user_store: UserStore = request.app.state.user_store
    team_store: TeamStore = request.app.state.team_store

    if user_store.get_by_id(body.user_id) is None:
        raise HTTPException(
            status_code=404,
            detail={"code": "not_found", "message": "User not found."},
        )

    try:
        membership_id = team_store.add_member(current_user.id, body.user_id)
    except IntegrityError as exc:
        raise HTTPException(
            status_code=409,
            detail={"code": "conflict", "message": "This user is already in your team."},
        ) from exc

    view = team_store.get_member(membership_id, current_user.id)
    if view is None:
        raise HTTPException(
            status_code=500,
            detail={"code": "internal_error", "message": "Team member not found after write."},
        )
    return TeamMemberResponse.from_view(view)


@router.delete("/team-members/{membership_id}", response_model=MessageResponse)
def remove_team_member(
    request: Request,
    membership_id: int,
    current_user: User = Depends(get_current_user),
) -> MessageResponse:
    """Remove a membership. Only the user who added it can remove it."""
    team_store: TeamStore = request.app.state.team_store
    if not team_store.remove_member(membership_id, current_user.id):
        raise HTTPException(
            status_code=404,
            detail={
                "code": "not_found",
                "message": "Team member not found or you do not have permission.",
            },
        )
    return MessageResponse(message="Team member removed successfully")
