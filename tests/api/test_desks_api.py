from __future__ import annotations

from pathlib import Path

import pytest
from fastapi import HTTPException

from backend.api import admin, index
from deskview.core.submissions import SubmissionStore


@pytest.fixture
def store(monkeypatch, tmp_path: Path) -> SubmissionStore:
    submissions = SubmissionStore(tmp_path / "submissions.json")
    monkeypatch.setattr(index, "get_store", lambda: submissions)
    monkeypatch.setattr(admin, "get_store", lambda: submissions)
    return submissions


def _request(name: str, **overrides) -> index.SubmitDeskRequest:
    fields = {
        "name": name,
        "title": "Researcher",
        "location": "Zurich",
        "profileImageUrl": "/uploads/profile.jpg",
        "photoUrls": ["/uploads/desk-1.jpg", "/uploads/desk-2.jpg"],
    }
    fields.update(overrides)
    return index.SubmitDeskRequest(**fields)


def test_health_and_routes():
    assert index.health() == {"ok": True}
    routes = index.list_routes()
    assert "/api/desks" in routes
    assert "/api/admin/submissions" in routes
    assert "/api/admin/desks/{desk_id}/approve" in routes
    assert "/api/desks/{slug}" in routes


def test_submission_is_hidden_until_approved(store):
    response = index.submit_desk(_request("Hedy Lamarr"))
    assert response.success is True
    assert index.list_desks() == []

    moderation = admin.approve_desk(response.deskId)
    assert moderation.status == "approved"

    desks = index.list_desks()
    assert [desk.slug for desk in desks] == ["hedy-lamarr"]
    assert desks[0].screen.firstPhoto == "/uploads/desk-1.jpg"
    assert desks[0].photos == ["/uploads/desk-1.jpg", "/uploads/desk-2.jpg"]
    assert index.get_desk("hedy-lamarr").name == "Hedy Lamarr"


def test_submit_missing_fields_returns_400(store):
    with pytest.raises(HTTPException) as excinfo:
        index.submit_desk(_request("Nobody", title=None))
    assert excinfo.value.status_code == 400
    assert "title" in excinfo.value.detail


def test_unknown_desk_slug_returns_404(store):
    with pytest.raises(HTTPException) as excinfo:
        index.get_desk("missing")
    assert excinfo.value.status_code == 404


def test_admin_listing_and_rejection(store):
    first = index.submit_desk(_request("Katherine Johnson"))
    index.submit_desk(_request("Dorothy Vaughan"))

    listing = admin.list_submissions()
    assert listing.counts == {"pending": 2, "approved": 0, "rejected": 0}
    assert listing.unread == 2

    admin.reject_desk(first.deskId)
    pending = admin.list_submissions(status="pending")
    assert [item.name for item in pending.items] == ["Dorothy Vaughan"]
    assert pending.unread == 1

    with pytest.raises(HTTPException) as excinfo:
        admin.list_submissions(status="archived")
    assert excinfo.value.status_code == 400

    with pytest.raises(HTTPException) as excinfo:
        admin.approve_desk(999)
    assert excinfo.value.status_code == 404
