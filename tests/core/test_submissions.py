from __future__ import annotations

import asyncio
import time
from pathlib import Path

import pytest

from deskview.core.catalog import DeskCatalog
from deskview.core.records import DEFAULT_DECOR, DEFAULT_FIRST_PHOTO, desk_from_row, slugify
from deskview.core.sources import store_source
from deskview.core.submissions import SubmissionStore, validate_submission
from deskview.exceptions import SubmissionError
from deskview.state.models import DeskRecord, DeskStatus


def _payload(name: str, **overrides) -> dict:
    payload = {
        "name": name,
        "title": "Designer",
        "location": "Porto",
        "profileImageUrl": f"/uploads/{slugify(name)}.jpg",
        "photoUrls": [f"/uploads/{slugify(name)}-desk.jpg"],
        "social": {"website": "https://example.org"},
    }
    payload.update(overrides)
    return payload


def test_slugify():
    assert slugify("Ada Lovelace") == "ada-lovelace"
    assert slugify("  José  O'Brien ") == "jos-obrien"
    assert slugify("") == ""


def test_validate_submission_lists_missing_fields():
    with pytest.raises(SubmissionError) as excinfo:
        validate_submission({"name": "Ada", "title": " "})
    assert str(excinfo.value) == "Missing required fields: title, location, profileImageUrl"


def test_desk_from_row_applies_defaults():
    record = desk_from_row({"id": 7, "name": "Linus T", "title": "Maintainer", "location": "Portland", "status": "approved"})

    assert record.decor == DEFAULT_DECOR
    assert record.monitor.img == "/assets/monitor.svg"
    assert record.screen.first_photo == DEFAULT_FIRST_PHOTO
    assert record.photos == ()
    assert record.slug == "linus-t"
    assert record.status == DeskStatus.APPROVED


def test_desk_from_row_uses_first_submitted_photo():
    record = desk_from_row(
        {"id": 8, "name": "Kay", "submitted_photos": ["/a.jpg", "/b.jpg"], "social_twitter": "https://t.example/kay"}
    )
    assert record.first_photo == "/a.jpg"
    assert record.social.twitter == "https://t.example/kay"
    assert record.status == DeskStatus.PENDING


def test_record_round_trips_through_wire_shape(make_desk):
    record = DeskRecord.from_dict(make_desk(4, "Margaret Hamilton"))
    wire = record.to_dict()

    assert wire["slug"] == "margaret-hamilton"
    assert wire["screen"]["firstPhoto"] == "/photos/4-1.jpg"
    assert DeskRecord.from_dict(wire) == record


def test_submit_then_moderate(tmp_path: Path):
    store = SubmissionStore(tmp_path / "submissions.json")
    first = store.submit(_payload("Ada Lovelace"))
    second = store.submit(_payload("Grace Hopper"))

    assert first["status"] == DeskStatus.PENDING.value
    assert [row["id"] for row in store.pending()] == [1, 2]
    assert len(store.notifications("unread")) == 2

    store.approve(first["id"])
    time.sleep(0.01)
    store.approve(second["id"])

    assert [row["name"] for row in store.approved()] == ["Grace Hopper", "Ada Lovelace"]
    assert store.counts() == {"pending": 0, "approved": 2, "rejected": 0}

    store.reject(first["id"])
    assert store.get(first["id"])["approved_at"] is None
    assert store.mark_read(first["id"]) is True
    assert store.mark_read(first["id"]) is False
    assert len(store.notifications("unread")) == 1


def test_unknown_desk_moderation_raises(tmp_path: Path):
    store = SubmissionStore(tmp_path / "submissions.json")
    with pytest.raises(SubmissionError):
        store.approve(404)


def test_invalid_submission_is_not_stored(tmp_path: Path):
    store = SubmissionStore(tmp_path / "submissions.json")
    with pytest.raises(SubmissionError):
        store.submit(_payload("Nobody", location=""))
    assert store.list() == []


def test_store_source_feeds_catalog(tmp_path: Path):
    store = SubmissionStore(tmp_path / "submissions.json")
    row = store.submit(_payload("Barbara Liskov"))
    store.submit(_payload("Still Pending"))
    store.approve(row["id"])

    catalog = DeskCatalog(store_source(store))
    asyncio.run(catalog.load())

    assert [desk.slug for desk in catalog.desks] == ["barbara-liskov"]
    assert catalog.find_by_slug("barbara-liskov").social.website == "https://example.org"
