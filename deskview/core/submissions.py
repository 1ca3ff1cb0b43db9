from __future__ import annotations

import json
import logging
import threading
import time
from pathlib import Path
from typing import Dict, List, Mapping, Optional

from deskview.core.records import desk_from_row
from deskview.exceptions import SubmissionError
from deskview.state.models import DeskRecord, DeskStatus

logger = logging.getLogger("deskview.core.submissions")

REQUIRED_FIELDS = ("name", "title", "location", "profileImageUrl")
STORE_VERSION = 1


def validate_submission(payload: Mapping[str, object]) -> None:
    """
    Raise SubmissionError naming every required field that is missing or blank.
    """
    missing = [key for key in REQUIRED_FIELDS if not str(payload.get(key) or "").strip()]
    if missing:
        raise SubmissionError(f"Missing required fields: {', '.join(missing)}")


def _row_from_payload(payload: Mapping[str, object], desk_id: int) -> dict:
    social = payload.get("social") or {}
    if not isinstance(social, Mapping):
        social = {}
    return {
        "id": desk_id,
        "name": str(payload["name"]).strip(),
        "title": str(payload["title"]).strip(),
        "location": str(payload["location"]).strip(),
        "profile_image_url": str(payload["profileImageUrl"]).strip(),
        "submitted_photos": [str(url) for url in payload.get("photoUrls") or []],
        "social_facebook": social.get("facebook") or None,
        "social_twitter": social.get("twitter") or None,
        "social_linkedin": social.get("linkedin") or None,
        "social_website": social.get("website") or None,
        "status": DeskStatus.PENDING.value,
        "created_at": time.time(),
        "approved_at": None,
    }


class SubmissionStore:
    """
    JSON-file store for desk submissions and their moderation status.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self._lock = threading.Lock()

    def _empty(self) -> dict:
        return {"desks": [], "notifications": [], "next_id": 1, "_version": STORE_VERSION}

    def _read(self) -> dict:
        if not self.path.exists():
            return self._empty()
        with self.path.open("r", encoding="utf-8") as handle:
            data = json.load(handle)
        if not isinstance(data, dict):
            return self._empty()
        data.setdefault("desks", [])
        data.setdefault("notifications", [])
        data.setdefault("next_id", max((int(row["id"]) for row in data["desks"]), default=0) + 1)
        return data

    def _write(self, data: dict) -> None:
        data["_version"] = STORE_VERSION
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("w", encoding="utf-8") as handle:
            json.dump(data, handle, indent=2, sort_keys=True)

    def submit(self, payload: Mapping[str, object]) -> dict:
        validate_submission(payload)
        with self._lock:
            data = self._read()
            desk_id = int(data["next_id"])
            row = _row_from_payload(payload, desk_id)
            data["desks"].append(row)
            data["notifications"].append({"desk_id": desk_id, "status": "unread"})
            data["next_id"] = desk_id + 1
            self._write(data)
        logger.info("Stored desk submission %s from %s", desk_id, row["name"])
        return row

    def get(self, desk_id: int) -> Optional[dict]:
        for row in self._read()["desks"]:
            if int(row["id"]) == int(desk_id):
                return row
        return None

    def list(self, status: Optional[DeskStatus] = None) -> List[dict]:
        rows = self._read()["desks"]
        if status is None:
            return list(rows)
        return [row for row in rows if row.get("status") == status.value]

    def pending(self) -> List[dict]:
        return self.list(DeskStatus.PENDING)

    def approved(self) -> List[dict]:
        rows = self.list(DeskStatus.APPROVED)
        return sorted(rows, key=lambda row: row.get("approved_at") or 0.0, reverse=True)

    def approved_records(self) -> List[DeskRecord]:
        return [desk_from_row(row) for row in self.approved()]

    def approve(self, desk_id: int) -> dict:
        return self._set_status(desk_id, DeskStatus.APPROVED)

    def reject(self, desk_id: int) -> dict:
        return self._set_status(desk_id, DeskStatus.REJECTED)

    def _set_status(self, desk_id: int, status: DeskStatus) -> dict:
        with self._lock:
            data = self._read()
            for row in data["desks"]:
                if int(row["id"]) == int(desk_id):
                    row["status"] = status.value
                    row["approved_at"] = time.time() if status == DeskStatus.APPROVED else None
                    self._write(data)
                    logger.info("Desk %s marked %s", desk_id, status.value)
                    return row
        raise SubmissionError(f"Unknown desk id: {desk_id}")

    def notifications(self, status: str = "unread") -> List[dict]:
        return [item for item in self._read()["notifications"] if item.get("status") == status]

    def mark_read(self, desk_id: int) -> bool:
        with self._lock:
            data = self._read()
            changed = False
            for item in data["notifications"]:
                if int(item["desk_id"]) == int(desk_id) and item.get("status") != "read":
                    item["status"] = "read"
                    changed = True
            if changed:
                self._write(data)
        return changed

    def counts(self) -> Dict[str, int]:
        summary = {status.value: 0 for status in DeskStatus}
        for row in self._read()["desks"]:
            key = row.get("status", DeskStatus.PENDING.value)
            summary[key] = summary.get(key, 0) + 1
        return summary


__all__ = ["REQUIRED_FIELDS", "validate_submission", "SubmissionStore"]
