"""
Meeting Summary Endpoints Module
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session, select
from issuedesk.db.session import get_db
from issuedesk.models.base import dump_for_table, utc_now_iso
from issuedesk.models.meeting_summary import (
    MeetingSummary, MeetingSummaryCreate, MeetingSummaryRead, MeetingSummaryUpdate,
)
from issuedesk.models.user import User
from issuedesk.api import deps

router = APIRouter()

JSON_FIELDS = ("files",)


def _get_summary_or_404(db: Session, summary_id: int) -> MeetingSummary:
    summary = db.get(MeetingSummary, summary_id)
    if not summary:
        raise HTTPException(status_code=404, detail="Meeting summary not found")
    return summary


@router.get("", response_model=List[MeetingSummaryRead])
def list_meeting_summaries(
    skip: int = 0,
    limit: int = 100,
    topic: Optional[str] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_active_user),
):
    """
    Retrieve meeting summaries, latest meeting first, optionally for one topic.
    """
    statement = select(MeetingSummary)
    if topic:
        statement = statement.where(MeetingSummary.meeting_topic == topic)
    statement = statement.order_by(MeetingSummary.meeting_date.desc()).offset(skip).limit(limit)
    return db.exec(statement).all()


@router.get("/topics", response_model=List[str])
def list_meeting_topics(
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_active_user),
):
    """
    Distinct non-empty meeting topics, sorted.
    """
    statement = select(MeetingSummary.meeting_topic).distinct()
    topics = {t.strip() for t in db.exec(statement).all() if t and t.strip()}
    return sorted(topics)


@router.get("/{summary_id}", response_model=MeetingSummaryRead)
def read_meeting_summary(
    summary_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_active_user),
):
    return _get_summary_or_404(db, summary_id)


@router.post("", response_model=MeetingSummaryRead, status_code=status.HTTP_201_CREATED)
def create_meeting_summary(
    summary_in: MeetingSummaryCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_active_user),
):
    summary = MeetingSummary(**dump_for_table(summary_in, JSON_FIELDS), created_by=current_user.user_name)
    db.add(summary)
    db.commit()
    db.refresh(summary)
    return summary


@router.patch("/{summary_id}", response_model=MeetingSummaryRead)
def update_meeting_summary(
    summary_id: int,
    summary_in: MeetingSummaryUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_active_user),
):
    summary = _get_summary_or_404(db, summary_id)
    for key, value in dump_for_table(summary_in, JSON_FIELDS, exclude_unset=True).items():
        if key == "files" and value is None:
            value = []
        setattr(summary, key, value)
    summary.updated_at = utc_now_iso()

    db.add(summary)
    db.commit()
    db.refresh(summary)
    return summary


@router.delete("/{summary_id}")
def delete_meeting_summary(
    summary_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_active_user),
):
    summary = _get_summary_or_404(db, summary_id)
    db.delete(summary)
    db.commit()
    return {"status": "success", "detail": "Meeting summary deleted"}
