"""
api/routes/dashboard.py -- Aggregated counts for the caller's dashboard cards.

This is a read-only aggregate route -- no mutations here.
"""

from fastapi import APIRouter, Depends, Request

from api.models import DashboardResponse
from auth.dependencies import get_current_user
from auth.models import User
from planner.store import PlannerStore
from team.store import TeamStore

# Auth policy:
# - GET /api/dashboard: requires auth -- numbers are the caller's own
router = APIRouter()


@router.get("/dashboard", response_model=DashboardResponse)
def get_dashboard(request: Request, current_user: User = Depends(get_current_user)) -> DashboardResponse:
    """Return the caller's task, event, and team counts.

    Response:
      totalTasks      -- number of tasks the caller owns
      taskCounts      -- {"todo": N, "in-progress": N, "done": N}
      upcomingEvents  -- events dated now or later
      teamSize        -- memberships the caller has created
    """
    planner: PlannerStore = request.app.state.planner
    team_store: TeamStore = request.app.state.team_store

    task_counts = planner.task_status_counts(current_user.id)
    return DashboardResponse(
        total_tasks=sum(task_counts.values()),
        task_counts=task_counts,
        upcoming_events=planner.count_upcoming_events(current_user.id),
        team_size=team_store.count_members(current_user.id),
    )
