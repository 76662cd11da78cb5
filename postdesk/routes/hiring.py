"""
Hiring routes: event applications and their review.
"""
from fastapi import APIRouter, Depends, Query, Request, Response
from sqlalchemy.orm import Session
from typing import List, Optional

from ..auth import get_required_user
from ..config import get_settings
from ..database import get_db
from ..limiter import limiter
from ..models.applicant import Applicant
from ..models.event import Event
from ..models.user import User
from ..responses import bad_request, conflict, not_found
from ..schemas.applicant import (
    ApplicationCreate,
    ApplicantResponse,
    ApplicantStatusUpdate,
    ApplicantTeamUpdate,
)

settings = get_settings()

router = APIRouter(prefix="/api/hiring", tags=["hiring"])


def get_applicant_or_404(db: Session, applicant_id: int) -> Applicant:
    applicant = db.query(Applicant).filter(Applicant.id == applicant_id).first()
    if not applicant:
        not_found("Applicant", applicant_id)
    return applicant


# ============================================================
# APPLICANT
# ============================================================

@router.post("/apply", response_model=ApplicantResponse, status_code=201)
@limiter.limit(settings.apply_rate_limit)
def apply_for_hiring(
    request: Request,
    body: ApplicationCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_required_user),
):
    """Apply to help at an event. One application per user and event."""
    event = db.query(Event).filter(Event.id == body.event_id).first()
    if not event:
        bad_request("Event not found", "EVENT_NOT_FOUND", {"event_id": body.event_id})

    existing = db.query(Applicant).filter(
        Applicant.user_id == current_user.id,
        Applicant.event_id == body.event_id,
    ).first()
    if existing:
        conflict("You have already applied for this event")

    application = Applicant(
        user_id=current_user.id,
        event_id=body.event_id,
        role=body.role,
        team=body.team,
        motivation=body.motivation,
        status="PENDING",
    )
    db.add(application)
    db.commit()
    db.refresh(application)
    return application


@router.get("/my-application", response_model=ApplicantResponse)
def get_my_application(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_required_user),
):
    """The current user's most recent application."""
    application = db.query(Applicant).filter(
        Applicant.user_id == current_user.id
    ).order_by(Applicant.created_at.desc(), Applicant.id.desc()).first()
    if not application:
        not_found("Application")
    return application


# ============================================================
# ADMIN
# ============================================================

@router.get("/applicants", response_model=List[ApplicantResponse])
def get_applicants(
    event_id: int = Query(..., alias="eventId"),
    status: Optional[str] = None,
    team: Optional[str] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_required_user),
):
    """Applicants for one event, optionally filtered by status and team."""
    if status and status not in Applicant.STATUSES:
        bad_request(f"Unknown status: {status}", "INVALID_STATUS")

    query = db.query(Applicant).filter(Applicant.event_id == event_id)
    if status:
        query = query.filter(Applicant.status == status)
    if team:
        query = query.filter(Applicant.team == team)
    return query.order_by(Applicant.created_at).all()


@router.put("/applicants/{applicant_id}/status", response_model=ApplicantResponse)
def update_applicant_status(
    applicant_id: int,
    body: ApplicantStatusUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_required_user),
):
    applicant = get_applicant_or_404(db, applicant_id)
    applicant.status = body.status
    db.commit()
    db.refresh(applicant)
    return applicant


@router.put("/applicants/{applicant_id}/team", response_model=ApplicantResponse)
def update_applicant_team(
    applicant_id: int,
    body: ApplicantTeamUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_required_user),
):
    applicant = get_applicant_or_404(db, applicant_id)
    applicant.team = body.team
    db.commit()
    db.refresh(applicant)
    return applicant


@router.delete("/applicants/{applicant_id}", status_code=204)
def delete_applicant(
    applicant_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_required_user),
):
    applicant = get_applicant_or_404(db, applicant_id)
    db.delete(applicant)
    db.commit()
    return Response(status_code=204)
