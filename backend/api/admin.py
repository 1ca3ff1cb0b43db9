"""
Moderation endpoints for pending desk submissions.
"""
from __future__ import annotations

from typing import Dict, List

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from deskview.config import load_config
from deskview.core.submissions import SubmissionStore
from deskview.exceptions import SubmissionError
from deskview.state.models import DeskStatus

router = APIRouter(prefix="/api/admin", tags=["admin"])


class SubmissionEntry(BaseModel):
    id: int
    name: str
    title: str
    location: str
    profile_image_url: str | None = None
    submitted_photos: List[str] = Field(default_factory=list)
    status: str
    created_at: float | None = None
    approved_at: float | None = None


class SubmissionListResponse(BaseModel):
    items: List[SubmissionEntry]
    counts: Dict[str, int]
    unread: int


class ModerationResponse(BaseModel):
    id: int
    status: str


def get_store() -> SubmissionStore:
    cfg = load_config()
    return SubmissionStore(cfg["submissions_file"])


def _parse_status(value: str | None) -> DeskStatus | None:
    if value is None:
        return None
    try:
        return DeskStatus(value)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=f"Unknown status: {value}") from exc


@router.get("/submissions", response_model=SubmissionListResponse)
def list_submissions(status: str | None = None) -> SubmissionListResponse:
    store = get_store()
    rows = store.list(_parse_status(status))
    return SubmissionListResponse(
        items=[SubmissionEntry(**row) for row in rows],
        counts=store.counts(),
        unread=len(store.notifications("unread")),
    )


def _moderate(desk_id: int, status: DeskStatus) -> ModerationResponse:
    store = get_store()
    try:
        row = store.approve(desk_id) if status == DeskStatus.APPROVED else store.reject(desk_id)
    except SubmissionError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    store.mark_read(desk_id)
    return ModerationResponse(id=int(row["id"]), status=row["status"])


@router.post("/desks/{desk_id}/approve", response_model=ModerationResponse)
def approve_desk(desk_id: int) -> ModerationResponse:
    return _moderate(desk_id, DeskStatus.APPROVED)


@router.post("/desks/{desk_id}/reject", response_model=ModerationResponse)
def reject_desk(desk_id: int) -> ModerationResponse:
    return _moderate(desk_id, DeskStatus.REJECTED)
