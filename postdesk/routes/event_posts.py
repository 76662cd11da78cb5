"""
Event post routes: drafts, approval workflow, scheduling and publishing.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import datetime, timezone

from ..auth import get_required_user, require_roles
from ..config import get_settings
from ..database import get_db
from ..dependencies import get_scheduling
from ..logging_config import publish_logger
from ..models.event import Event
from ..models.event_post import EventPost
from ..models.user import User
from ..publishing import PostData, SocialPublisher, get_publisher
from ..responses import ApiException, bad_request, not_found
from ..scheduling import ScheduleStatus, SchedulingCore
from ..scheduling.models import as_utc
from ..schemas.event_post import (
    DraftPostCreate,
    EventPostCreate,
    EventPostUpdate,
    EventPostResponse,
    EventPostStatusResponse,
    RejectRequest,
    ScheduleRequest,
)
from ..schemas.schedule import ScheduleResponse

settings = get_settings()

router = APIRouter(prefix="/api/event-posts", tags=["event-posts"])

REJECTABLE_STATUSES = EventPost.APPROVABLE_STATUSES + ("APPROVED",)


def get_post_or_404(db: Session, post_id: int) -> EventPost:
    post = db.query(EventPost).filter(EventPost.id == post_id).first()
    if not post:
        not_found("Event post", post_id)
    return post


def require_event(db: Session, event_id: int) -> Event:
    event = db.query(Event).filter(Event.id == event_id).first()
    if not event:
        bad_request("Event not found", "EVENT_NOT_FOUND", {"event_id": event_id})
    return event


def active_schedule(core: SchedulingCore, post: EventPost):
    """The post's in-memory schedule if it exists and is still scheduled."""
    if not post.schedule_id:
        return None
    schedule = core.state.schedules.get(post.schedule_id)
    if schedule is None or schedule.status != ScheduleStatus.SCHEDULED:
        return None
    return schedule


def publish_now(db: Session, post: EventPost, publisher: SocialPublisher) -> EventPost:
    """Publish immediately; the outcome is stored before any error is raised."""
    result = publisher.create_post(PostData(
        caption=post.caption,
        organization_id=post.organization_id,
        image_url=post.image_url,
    ))

    post.linkedin_post_id = result.post_id
    if result.success:
        post.status = "PUBLISHED"
        post.external_ref = result.url or ""
    else:
        post.status = "FAILED"
    db.commit()
    db.refresh(post)

    if not result.success:
        publish_logger.warning("Publishing failed", post_id=post.id, error=result.error)
        raise ApiException(502, result.error or "Publishing failed", "PUBLISH_FAILED")

    publish_logger.info("Event post published", post_id=post.id, linkedin_post_id=result.post_id)
    return post


@router.post("/draft", response_model=EventPostResponse, status_code=201)
def create_draft_post(
    body: DraftPostCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_required_user),
):
    """Create a LinkedIn draft owned by the current user."""
    require_event(db, body.event_id)

    post = EventPost(
        name=body.name,
        platform="LINKEDIN",
        external_ref="",
        caption=body.caption,
        image_url=body.image_url,
        event_id=body.event_id,
        created_by=current_user.id,
        post_schedule_date=as_utc(body.post_schedule_date),
        status="DRAFT",
        organization_id=settings.linkedin_organization_id,
    )
    db.add(post)
    db.commit()
    db.refresh(post)
    return post


@router.post("", response_model=EventPostResponse, status_code=201)
def create_event_post(
    body: EventPostCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_required_user),
):
    """Create a post for any platform."""
    require_event(db, body.event_id)

    post = EventPost(
        name=body.name,
        platform=body.platform,
        external_ref=body.external_ref or "",
        caption=body.caption,
        image_url=body.image_url,
        event_id=body.event_id,
        created_by=current_user.id,
        post_schedule_date=as_utc(body.post_schedule_date),
        status="DRAFT",
    )
    db.add(post)
    db.commit()
    db.refresh(post)
    return post


@router.get("", response_model=List[EventPostResponse])
def get_event_posts(
    status: Optional[str] = None,
    event_id: Optional[int] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_required_user),
):
    """All event posts, newest first."""
    if status and status not in EventPost.STATUSES:
        bad_request(f"Unknown status: {status}", "INVALID_STATUS")

    query = db.query(EventPost)
    if status:
        query = query.filter(EventPost.status == status)
    if event_id:
        query = query.filter(EventPost.event_id == event_id)
    return query.order_by(EventPost.created_at.desc(), EventPost.id.desc()).all()


@router.get("/{post_id}", response_model=EventPostResponse)
def get_event_post(
    post_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_required_user),
):
    return get_post_or_404(db, post_id)


@router.put("/{post_id}", response_model=EventPostResponse)
def update_event_post(
    post_id: int,
    body: EventPostUpdate,
    db: Session = Depends(get_db),
    core: SchedulingCore = Depends(get_scheduling),
    current_user: User = Depends(get_required_user),
):
    """Partial update. Moving a scheduled post's date moves its schedule too."""
    post = get_post_or_404(db, post_id)

    update_data = body.model_dump(exclude_unset=True, exclude_none=True)
    if "post_schedule_date" in update_data:
        new_date = as_utc(update_data["post_schedule_date"])
        schedule = active_schedule(core, post)
        if post.status == "SCHEDULED" and schedule is not None:
            core.scheduler.update_schedule(schedule.id, new_date)
        update_data["post_schedule_date"] = new_date

    for field, value in update_data.items():
        setattr(post, field, value)
    post.updated_at = datetime.now(timezone.utc)

    db.commit()
    db.refresh(post)
    return post


@router.delete("/{post_id}")
def delete_event_post(
    post_id: int,
    db: Session = Depends(get_db),
    core: SchedulingCore = Depends(get_scheduling),
    current_user: User = Depends(get_required_user),
):
    """Delete a post and cancel its schedule if one is pending."""
    post = get_post_or_404(db, post_id)

    schedule = active_schedule(core, post)
    if schedule is not None:
        core.scheduler.cancel_schedule(schedule.id)

    db.delete(post)
    db.commit()
    return {"message": "Event post deleted successfully"}


@router.post("/{post_id}/approve", response_model=EventPostResponse)
def approve_post(
    post_id: int,
    db: Session = Depends(get_db),
    approver: User = Depends(require_roles(User.APPROVER_ROLES)),
):
    """Approve a draft. Only leads, sub-heads and admins may approve."""
    post = get_post_or_404(db, post_id)
    if post.status not in EventPost.APPROVABLE_STATUSES:
        bad_request(f"Cannot approve post with status: {post.status}", "INVALID_STATUS")

    post.status = "APPROVED"
    post.approved_by = approver.id
    post.approved_at = datetime.now(timezone.utc)
    db.commit()
    db.refresh(post)
    return post


@router.post("/{post_id}/reject", response_model=EventPostResponse)
def reject_post(
    post_id: int,
    body: RejectRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_required_user),
):
    """Reject a post with a reason."""
    post = get_post_or_404(db, post_id)
    if post.status not in REJECTABLE_STATUSES:
        bad_request(f"Cannot reject post with status: {post.status}", "INVALID_STATUS")

    post.status = "REJECTED"
    post.rejection_reason = body.rejection_reason
    db.commit()
    db.refresh(post)
    return post


@router.post("/{post_id}/schedule", response_model=EventPostResponse)
def schedule_post(
    post_id: int,
    body: Optional[ScheduleRequest] = None,
    db: Session = Depends(get_db),
    core: SchedulingCore = Depends(get_scheduling),
    publisher: SocialPublisher = Depends(get_publisher),
    current_user: User = Depends(get_required_user),
):
    """
    Schedule an approved post for its date, or publish it right away when
    that date has already passed.
    """
    post = get_post_or_404(db, post_id)
    if post.status != "APPROVED":
        bad_request("Post must be approved before scheduling", "INVALID_STATUS")
    if not post.caption:
        bad_request("Post must have a caption", "MISSING_CAPTION")

    post.organization_id = post.organization_id or settings.linkedin_organization_id
    if not post.organization_id:
        bad_request("Organization ID not found. Please reconnect LinkedIn.", "MISSING_ORGANIZATION")

    scheduled_time = as_utc(post.post_schedule_date)
    if scheduled_time <= core.scheduler.clock():
        return publish_now(db, post, publisher)

    tz_label = (body.timezone if body and body.timezone else None) or settings.default_timezone
    # Posts due within the hour are still scheduled, just without the e-mail reminder
    schedule = core.scheduler.create_schedule(
        str(post.id),
        scheduled_time,
        tz_label,
        with_reminder=core.scheduler.reminder_fits(scheduled_time),
    )

    post.status = "SCHEDULED"
    post.schedule_id = schedule.id
    db.commit()
    db.refresh(post)
    return post


@router.post("/{post_id}/publish", response_model=EventPostResponse)
def publish_scheduled_post(
    post_id: int,
    db: Session = Depends(get_db),
    core: SchedulingCore = Depends(get_scheduling),
    publisher: SocialPublisher = Depends(get_publisher),
    current_user: User = Depends(get_required_user),
):
    """Publish a scheduled post now and retire its schedule."""
    post = get_post_or_404(db, post_id)
    if post.status != "SCHEDULED":
        bad_request("Post is not scheduled", "INVALID_STATUS")
    if not post.caption or not post.organization_id:
        bad_request("Invalid post data", "INVALID_POST")

    # The schedule is retired even if publishing then fails; a FAILED post is not retried from it
    schedule = active_schedule(core, post)
    if schedule is not None:
        core.scheduler.cancel_schedule(schedule.id)

    return publish_now(db, post, publisher)


@router.get("/{post_id}/status", response_model=EventPostStatusResponse)
def get_post_status(
    post_id: int,
    db: Session = Depends(get_db),
    core: SchedulingCore = Depends(get_scheduling),
    current_user: User = Depends(get_required_user),
):
    """The post together with its schedule, if the schedule is still in memory."""
    post = get_post_or_404(db, post_id)
    response = EventPostStatusResponse.model_validate(post)
    if post.schedule_id:
        schedule = core.state.schedules.get(post.schedule_id)
        if schedule is not None:
            response.schedule = ScheduleResponse.model_validate(schedule)
    return response


@router.delete("/{post_id}/cancel", response_model=EventPostResponse)
def cancel_scheduled_post(
    post_id: int,
    db: Session = Depends(get_db),
    core: SchedulingCore = Depends(get_scheduling),
    current_user: User = Depends(get_required_user),
):
    """Take a scheduled post back to draft."""
    post = get_post_or_404(db, post_id)
    if post.status != "SCHEDULED":
        bad_request("Only scheduled posts can be cancelled", "INVALID_STATUS")

    schedule = active_schedule(core, post)
    if schedule is not None:
        core.scheduler.cancel_schedule(schedule.id)

    post.status = "DRAFT"
    post.linkedin_post_id = None
    post.schedule_id = None
    db.commit()
    db.refresh(post)
    return post
