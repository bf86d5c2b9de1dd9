"""Time tracking endpoints."""

import logging
from datetime import datetime

from fastapi import APIRouter, Depends, Query
from pydantic import Field, PositiveInt

from ...schema import DashboardModel
from ...services import DashboardServices
from ...time_tracking.models import TimeEntryFilter, TimeEntryUpdate, ensure_utc
from ...time_tracking.report import summarize
from ..deps import get_services
from ..errors import ApiError
from ..responses import success

logger = logging.getLogger(__name__)

router = APIRouter(tags=["time tracking"])


class SessionRequest(DashboardModel):
    issue_number: PositiveInt
    repository: str = Field(..., min_length=1)
    user_id: str = Field(..., min_length=1)
    description: str | None = None


class ManualEntryRequest(DashboardModel):
    issue_number: PositiveInt
    repository: str = Field(..., min_length=1)
    user_id: str = Field(..., min_length=1)
    duration: PositiveInt = Field(..., description="Minutes spent")
    description: str | None = None
    start_time: datetime | None = None
    tags: list[str] | None = None


def entry_filter(
    issue_number: int | None = Query(None, alias="issueNumber"),
    repository: str | None = Query(None),
    user_id: str | None = Query(None, alias="userId"),
    start_date: datetime | None = Query(None, alias="startDate"),
    end_date: datetime | None = Query(None, alias="endDate"),
    tags: list[str] | None = Query(None),
) -> TimeEntryFilter:
    return TimeEntryFilter(
        issue_number=issue_number,
        repository=repository,
        user_id=user_id,
        start_date=start_date,
        end_date=end_date,
        tags=tags,
    )


def _publish(services: DashboardServices, event_type: str, payload) -> None:
    if payload is not None:
        services.events.publish(
            event_type, payload.model_dump(mode="json", by_alias=True)
        )


@router.post("/sessions/start")
def start_session(
    payload: SessionRequest, services: DashboardServices = Depends(get_services)
) -> dict:
    """Start a session, closing the user's previous one."""
    session = services.sessions.start_session(
        payload.issue_number, payload.repository, payload.user_id, payload.description
    )
    _publish(services, "time_session.started", session)
    return success(session)


@router.post("/sessions/pause")
def pause_session(
    payload: SessionRequest, services: DashboardServices = Depends(get_services)
) -> dict:
    session = services.sessions.pause_session(
        payload.issue_number, payload.repository, payload.user_id
    )
    _publish(services, "time_session.paused", session)
    return success(session)


@router.post("/sessions/resume")
def resume_session(
    payload: SessionRequest, services: DashboardServices = Depends(get_services)
) -> dict:
    session = services.sessions.resume_session(
        payload.issue_number, payload.repository, payload.user_id
    )
    _publish(services, "time_session.resumed", session)
    return success(session)


@router.post("/sessions/stop")
def stop_session(
    payload: SessionRequest, services: DashboardServices = Depends(get_services)
) -> dict:
    """Stop a session and return the resulting time entry."""
    entry = services.sessions.stop_session(
        payload.issue_number, payload.repository, payload.user_id, payload.description
    )
    _publish(services, "time_session.stopped", entry)
    return success(entry)


@router.get("/sessions/{user_id}")
def get_active_session(
    user_id: str, services: DashboardServices = Depends(get_services)
) -> dict:
    """The user's live session, active or paused."""
    return success(services.sessions.get_active_session(user_id))


@router.get("/sessions/{user_id}/active")
def get_user_sessions(
    user_id: str, services: DashboardServices = Depends(get_services)
) -> dict:
    """The user's sessions that are currently running (paused ones excluded)."""
    return success(services.sessions.get_user_sessions(user_id))


@router.post("/entries")
def add_manual_entry(
    payload: ManualEntryRequest, services: DashboardServices = Depends(get_services)
) -> dict:
    entry = services.sessions.add_manual_entry(
        payload.issue_number,
        payload.repository,
        payload.user_id,
        payload.duration,
        description=payload.description,
        start_time=payload.start_time,
        tags=payload.tags,
    )
    _publish(services, "time_entry.created", entry)
    return success(entry)


@router.get("/entries")
def list_entries(
    filter: TimeEntryFilter = Depends(entry_filter),
    services: DashboardServices = Depends(get_services),
) -> dict:
    entries = services.sessions.get_time_entries(filter)
    return success(entries, count=len(entries))


@router.patch("/entries/{entry_id}")
def update_entry(
    entry_id: str,
    payload: TimeEntryUpdate,
    services: DashboardServices = Depends(get_services),
) -> dict:
    try:
        entry = services.sessions.update_time_entry(entry_id, payload)
    except ValueError as e:
        raise ApiError(str(e))
    if entry is None:
        raise ApiError("Time entry not found", status_code=404)
    _publish(services, "time_entry.updated", entry)
    return success(entry)


@router.delete("/entries/{entry_id}")
def delete_entry(
    entry_id: str, services: DashboardServices = Depends(get_services)
) -> dict:
    if not services.sessions.delete_time_entry(entry_id):
        raise ApiError("Time entry not found", status_code=404)
    services.events.publish("time_entry.deleted", {"id": entry_id})
    return success({"id": entry_id, "deleted": True})


@router.get("/report")
def time_report(
    start: datetime = Query(...),
    end: datetime = Query(...),
    filter: TimeEntryFilter = Depends(entry_filter),
    services: DashboardServices = Depends(get_services),
) -> dict:
    """Report over entries starting within ``[start, end]``."""
    start, end = ensure_utc(start), ensure_utc(end)
    if start > end:
        raise ApiError("start must not be after end")
    return success(services.sessions.generate_report(start, end, filter))


@router.get("/summary")
def time_summary(
    filter: TimeEntryFilter = Depends(entry_filter),
    services: DashboardServices = Depends(get_services),
) -> dict:
    return success(summarize(services.sessions.get_time_entries(filter)))
