"""
Event management endpoints
"""

from typing import Any, Optional
from uuid import UUID
from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse

from app.schemas.event import EventForm, EventUpdate
from app.schemas.response import ActionFailure
from app.services.event_service import EventService, get_event_service

router = APIRouter()


def action_response(result, success_status: int = status.HTTP_200_OK) -> JSONResponse:
    """
    Serialize an action result with a status code matching its outcome
    """
    status_code = result.status_code if isinstance(result, ActionFailure) else success_status
    return JSONResponse(status_code=status_code, content=result.model_dump(mode="json"))


@router.get("")
async def list_events(
    search: Optional[str] = Query(None, max_length=100),
    sport: Optional[str] = Query(None),
    service: EventService = Depends(get_event_service)
) -> Any:
    """
    List the caller's events, optionally filtered by name and sport
    """
    return action_response(await service.list_events(search, sport))


@router.get("/{event_id}")
async def get_event(
    event_id: UUID,
    service: EventService = Depends(get_event_service)
) -> Any:
    """
    Get one event with its venues
    """
    return action_response(await service.get_event(event_id))


@router.post("")
async def create_event(
    form: EventForm,
    service: EventService = Depends(get_event_service)
) -> Any:
    """
    Create an event with at least one venue
    """
    return action_response(await service.create_event(form), status.HTTP_201_CREATED)


@router.put("/{event_id}")
async def update_event(
    event_id: UUID,
    form: EventForm,
    service: EventService = Depends(get_event_service)
) -> Any:
    """
    Replace an event's fields and venues
    """
    update = EventUpdate(id=event_id, **form.model_dump())
    return action_response(await service.update_event(update))


@router.delete("/{event_id}")
async def delete_event(
    event_id: UUID,
    service: EventService = Depends(get_event_service)
) -> Any:
    """
    Delete an event and its venues
    """
    return action_response(await service.delete_event(event_id))
