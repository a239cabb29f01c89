"""
api/routes/tasks.py -- The caller's task board.

Routes:
  GET    /api/tasks        -- list, newest first
  POST   /api/tasks        -- create
  PUT    /api/tasks/{id}   -- partial update
  DELETE /api/tasks/{id}   -- delete

Every query is filtered by the caller's user id; another user's task id is a 404.
"""

from fastapi import APIRouter, Depends, HTTPException, Request

from api.models import MessageResponse, TaskCreate, TaskResponse, TaskUpdate
from auth.dependencies import get_current_user
from auth.models import User
from planner.models import Task
from planner.store import PlannerStore, to_utc_iso

router = APIRouter()


def _not_found() -> HTTPException:
    return HTTPException(status_code=404, detail={"code": "not_found", "message": "Task not found."})


@router.get("/tasks", response_model=list[TaskResponse])
def list_tasks(request: Request, current_user: User = Depends(get_current_user)) -> list[TaskResponse]:
    planner: PlannerStore = request.app.state.planner
    return [TaskResponse.from_task(t) for t in planner.list_tasks(current_user.id)]


@router.post("/tasks", response_model=TaskResponse, status_code=201)
def create_task(
    request: Request,
    body: TaskCreate,
    current_user: User = Depends(get_current_user),
) -> TaskResponse:
    planner: PlannerStore = request.app.state.planner
    task_id = planner.create_task(
        Task(
            user_id=current_user.id,
            title=body.title,
            description=body.description,
            status=body.status,
            priority=body.priority,
            due_date=to_utc_iso(body.due_date) if body.due_date else None,
        )
    )
    created = planner.get_task(task_id, current_user.id)
    if created is None:
        raise _not_found()
    return TaskResponse.from_task(created)


@router.put("/tasks/{task_id}", response_model=TaskResponse)
def update_task(
    request: Request,
    task_id: int,
    body: TaskUpdate,
    current_user: User = Depends(get_current_user),
) -> TaskResponse:
    """Update only the fields present in the body. dueDate: null clears the due date."""
    planner: PlannerStore = request.app.state.planner
    updates = body.model_dump(exclude_unset=True)
    if updates.get("due_date") is not None:
        updates["due_date"] = to_utc_iso(updates["due_date"])

    if updates and not planner.update_task(task_id, current_user.id, **updates):
        raise _not_found()
    task = planner.get_task(task_id, current_user.id)
    if task is None:
        raise _not_found()
    return TaskResponse.from_task(task)


@router.delete("/tasks/{task_id}", response_model=MessageResponse)
def delete_task(
    request: Request,
    task_id: int,
    current_user: User = Depends(get_current_user),
) -> MessageResponse:
    planner: PlannerStore = request.app.state.planner
    if not planner.delete_task(task_id, current_user.id):
        raise _not_found()
    return MessageResponse(message="Task deleted successfully")
