"""
Training session endpoints.

Listing, creation (one-off or recurring), partial updates, bulk deletion,
occurrence queries, the status sweep, coach listings and counters, plus the
attendance and metrics writes made against an occurrence.
"""

import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlmodel import Session

from academy.db.session import get_db
from academy.schemas.session import (AttendanceUpdate, CoachSessionStats, DeleteResult, MetricsUpdate,
                                     OccurrenceCount, SessionCreate, SessionDeleteRequest, SessionDocument,
                                     SessionStatus, SessionUpdate, StatusRefreshResult, )
from academy.services.performance_service import PerformanceService
from academy.services.training_session_service import MAX_PAGE_SIZE, TrainingSessionService

router = APIRouter()


@router.get("", summary="List an academy's sessions, paginated.", response_model=list[SessionDocument], )
def list_sessions(academy_id: str = Query(..., description="Owning academy"),
                  page: int = Query(1, ge=1), limit: int = Query(50, ge=1, le=MAX_PAGE_SIZE),
                  db: Session = Depends(get_db), ):
    service = TrainingSessionService(db)
    return service.list_sessions(academy_id, page, limit)


@router.post("", summary="Create a session or a recurring template.", response_model=SessionDocument,
             status_code=status.HTTP_201_CREATED, )
def create_session(data: SessionCreate, db: Session = Depends(get_db)):
    service = TrainingSessionService(db)
    return service.create_session(data)


@router.post("/delete", summary="Delete sessions of an academy.", response_model=DeleteResult, )
def delete_sessions(data: SessionDeleteRequest, db: Session = Depends(get_db)):
    service = TrainingSessionService(db)
    return service.delete_sessions(data.session_ids, data.academy_id, hard=data.hard)


@router.post("/status/refresh", summary="Reclassify and persist session statuses.",
             response_model=StatusRefreshResult, )
def refresh_statuses(academy_id: str = Query(...),
                     now: Optional[datetime.datetime] = Query(None, description="Reference time (defaults to now)"),
                     db: Session = Depends(get_db), ):
    service = TrainingSessionService(db)
    return service.refresh_statuses(academy_id, now)


@router.get("/coach/{coach_id}", summary="Sessions a coach is assigned to.", response_model=list[SessionDocument], )
def list_coach_sessions(coach_id: str, academy_id: str = Query(...), db: Session = Depends(get_db)):
    service = TrainingSessionService(db)
    return service.list_for_coach(coach_id, academy_id)


@router.get("/coach/{coach_id}/stats", summary="Session counters for a coach.", response_model=CoachSessionStats, )
def coach_stats(coach_id: str, academy_id: str = Query(...), db: Session = Depends(get_db)):
    service = TrainingSessionService(db)
    return service.coach_stats(coach_id, academy_id)


@router.get("/{session_id}", summary="Get a session.", response_model=SessionDocument, )
def get_session(session_id: str, db: Session = Depends(get_db)):
    service = TrainingSessionService(db)
    return service.get_session(session_id)


@router.patch("/{session_id}", summary="Update a session.", response_model=SessionDocument, )
def update_session(session_id: str, data: SessionUpdate, db: Session = Depends(get_db)):
    service = TrainingSessionService(db)
    return service.update_session(session_id, data)


@router.get("/{session_id}/occurrences", summary="Occurrences of a recurring template.",
            response_model=list[SessionDocument], )
def list_occurrences(session_id: str, academy_id: str = Query(...),
                     status_filter: Optional[SessionStatus] = Query(None, alias="status"),
                     db: Session = Depends(get_db), ):
    service = TrainingSessionService(db)
    return service.list_occurrences(session_id, academy_id, status_filter)


@router.get("/{session_id}/occurrences/count", summary="Number of occurrences of a template.",
            response_model=OccurrenceCount, )
def count_occurrences(session_id: str, academy_id: str = Query(...), db: Session = Depends(get_db)):
    service = TrainingSessionService(db)
    return service.count_occurrences(session_id, academy_id)


@router.patch("/{session_id}/attendance", summary="Mark a player's attendance.",
              status_code=status.HTTP_204_NO_CONTENT, )
def record_attendance(session_id: str, data: AttendanceUpdate, db: Session = Depends(get_db)):
    service = PerformanceService(db)
    service.record_attendance(session_id, data.player_id, data.status, data.marked_by)


@router.patch("/{session_id}/metrics", summary="Record a player's metrics for a session.",
              status_code=status.HTTP_204_NO_CONTENT, )
def record_metrics(session_id: str, data: MetricsUpdate, db: Session = Depends(get_db)):
    service = PerformanceService(db)
    service.record_metrics(session_id, data.player_id, data.attributes, data.session_rating, data.recorded_by)
