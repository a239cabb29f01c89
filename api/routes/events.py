"""
api/routes/events.py -- The caller's calendar events.

Routes:
  GET    /api/events        -- list, chronological
  POST   /api/events        -- create (color defaults to #8B5CF6)
  PUT    /api/events/{id}   -- partial update
  DELETE /api/events/{id}   -- delete

Event dates are normalized to UTC before storage. Another user's event id is a 404.
"""

from fastapi import APIRouter, Depends, HTTPException, Request

from api.models import EventCreate, EventResponse, EventUpdate, MessageResponse
from auth.dependencies import get_current_user
from auth.models import User
from planner.models import DEFAULT_EVENT_COLOR, Event
from planner.store import PlannerStore, to_utc_iso

router = APIRouter()


def _not_found() -> HTTPException:
    return HTTPException(status_code=404, detail={"code": "not_found", "message": "Event not found."})


@router.get("/events", response_model=list[EventResponse])
def list_events(request: Request, current_user: User = Depends(get_current_user)) -> list[EventResponse]:
    planner: PlannerStore = request.app.state.planner
    return [EventResponse.from_event(e) for e in planner.list_events(current_user.id)]


@router.post("/events", response_model=EventResponse, status_code=201)
def create_event(
    request: Request,
    body: EventCreate,
    current_user: User = Depends(get_current_user),
) -> EventResponse:
    planner: PlannerStore = request.app.state.planner
    event_id = planner.create_event(
        Event(
            user_id=current_user.id,
            title=body.title,
            date=to_utc_iso(body.date),
            color=body.color or DEFAULT_EVENT_COLOR,
            description=body.description,
        )
    )
    created = planner.get_event(event_id, current_user.id)
    if created is None:
        raise _not_found()
    return EventResponse.from_event(created)


@router.put("/events/{event_id}", response_model=EventResponse)
def update_event(
    request: Request,
    event_id: int,
    body: EventUpdate,
    current_user: User = Depends(get_current_user),
) -> EventResponse:
    """Update only the fields present in the body."""
    planner: PlannerStore = request.app.state.planner
    updates = body.model_dump(exclude_unset=True)
    if "date" in updates:
        updates["date"] = to_utc_iso(updates["date"])

    if updates and not planner.update_event(event_id, current_user.id, **updates):
        raise _not_found()
    event = planner.get_event(event_id, current_user.id)
    if event is None:
        raise _not_found()
    return EventResponse.from_event(event)


@router.delete("/events/{event_id}", response_model=MessageResponse)
def delete_event(
    request: Request,
    event_id: int,
    current_user: User = Depends(get_current_user),
) -> MessageResponse:
    planner: PlannerStore = request.app.state.planner
    if not planner.delete_event(event_id, current_user.id):
        raise _not_found()
    return MessageResponse(message="Event deleted successfully")
