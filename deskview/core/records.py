from __future__ import annotations

import re
from typing import Iterable, List, Mapping, Optional

from deskview.state.models import DeskRecord, DeskStatus, Placement, SocialLinks

DEFAULT_DECOR = "/assets/decor.svg"
DEFAULT_FIRST_PHOTO = "/assets/800x400.jpg"
DEFAULT_MONITOR = {
    "width": "37.54%",
    "height": "21.82%",
    "x": "20.70%",
    "y": "61.82%",
    "img": "/assets/monitor.svg",
}
DEFAULT_SCREEN = {
    "width": "25.26%",
    "height": "16.36%",
    "x": "27.02%",
    "y": "63.27%",
}

_WHITESPACE_RE = re.compile(r"\s+")
_SLUG_STRIP_RE = re.compile(r"[^a-z0-9-]")


def slugify(name: str) -> str:
    """Lower-case the name, turn whitespace runs into dashes and drop anything else non-alphanumeric."""
    value = _WHITESPACE_RE.sub("-", (name or "").strip().lower())
    return _SLUG_STRIP_RE.sub("", value)


def desk_from_row(row: Mapping[str, object]) -> DeskRecord:
    """
    Convert a stored submission row into the record shape served to the gallery.

    Missing decor, monitor and screen geometry fall back to the stock desk
    artwork; the screen shows the first submitted photo when one exists.
    """
    photos = [str(photo) for photo in row.get("submitted_photos") or []]
    screen_config = dict(row.get("screen_config") or DEFAULT_SCREEN)
    screen_config.setdefault("firstPhoto", photos[0] if photos else DEFAULT_FIRST_PHOTO)
    status_value = row.get("status", DeskStatus.PENDING.value)
    try:
        status = DeskStatus(status_value)
    except ValueError:
        status = DeskStatus.PENDING
    name = str(row.get("name", ""))
    return DeskRecord(
        id=row["id"],
        name=name,
        title=str(row.get("title", "")),
        location=str(row.get("location", "")),
        profile=row.get("profile_image_url"),
        decor=row.get("decor_svg_url") or DEFAULT_DECOR,
        monitor=Placement.from_dict(row.get("monitor_config") or DEFAULT_MONITOR),
        screen=Placement.from_dict(screen_config),
        photos=tuple(photos),
        social=SocialLinks(
            facebook=row.get("social_facebook") or None,
            twitter=row.get("social_twitter") or None,
            linkedin=row.get("social_linkedin") or None,
            website=row.get("social_website") or None,
        ),
        slug=slugify(name),
        status=status,
    )


def coerce_records(items: Iterable[object]) -> List[DeskRecord]:
    """
    Accept DeskRecord instances or wire-shaped mappings and return records in the same order.
    """
    records: List[DeskRecord] = []
    for item in items:
        if isinstance(item, DeskRecord):
            records.append(item)
        elif isinstance(item, Mapping):
            records.append(DeskRecord.from_dict(item))
        else:
            raise TypeError(f"Unsupported desk record type: {type(item).__name__}")
    return records


def find_slug_collisions(records: Iterable[DeskRecord]) -> dict[str, List[object]]:
    seen: dict[str, List[object]] = {}
    for record in records:
        seen.setdefault(record.slug, []).append(record.id)
    return {slug: ids for slug, ids in seen.items() if len(ids) > 1}


def match_id(candidate: object, desk_id: Optional[object]) -> bool:
    """Compare ids as-is first, then by string form (route parameters arrive as strings)."""
    if desk_id is None:
        return False
    return candidate == desk_id or str(candidate) == str(desk_id)


__all__ = [
    "DEFAULT_DECOR",
    "DEFAULT_FIRST_PHOTO",
    "DEFAULT_MONITOR",
    "DEFAULT_SCREEN",
    "slugify",
    "desk_from_row",
    "coerce_records",
    "find_slug_collisions",
    "match_id",
]
