from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping, Optional, Set, Tuple, Union

DeskId = Union[int, str]


class DeskStatus(str, Enum):
    """
    Moderation stages of a desk submission.
    """

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class ViewerPhase(str, Enum):
    """
    Phases of the pop-out → load → carousel-ready → pop-in sequence.
    """

    IDLE = "idle"
    SELECTING = "selecting"
    AWAITING_FIRST_PHOTO = "awaiting_first_photo"
    VIEWER_READY = "viewer_ready"
    SWITCHING = "switching"
    CLOSING = "closing"


@dataclass(frozen=True)
class Placement:
    """
    Overlay rectangle in percentage units (e.g. ``"37.54%"``) relative to the desk image.
    """

    width: str
    height: str
    x: str
    y: str
    img: Optional[str] = None
    first_photo: Optional[str] = None

    def to_dict(self) -> dict:
        payload = {"width": self.width, "height": self.height, "x": self.x, "y": self.y}
        if self.img is not None:
            payload["img"] = self.img
        if self.first_photo is not None:
            payload["firstPhoto"] = self.first_photo
        return payload

    @classmethod
    def from_dict(cls, payload: Mapping[str, object]) -> "Placement":
        first_photo = payload.get("firstPhoto", payload.get("first_photo"))
        img = payload.get("img")
        return cls(
            width=str(payload.get("width", "0%")),
            height=str(payload.get("height", "0%")),
            x=str(payload.get("x", "0%")),
            y=str(payload.get("y", "0%")),
            img=str(img) if img is not None else None,
            first_photo=str(first_photo) if first_photo is not None else None,
        )


@dataclass(frozen=True)
class SocialLinks:
    facebook: Optional[str] = None
    twitter: Optional[str] = None
    linkedin: Optional[str] = None
    website: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "facebook": self.facebook,
            "twitter": self.twitter,
            "linkedin": self.linkedin,
            "website": self.website,
        }

    @classmethod
    def from_dict(cls, payload: Optional[Mapping[str, object]]) -> "SocialLinks":
        payload = payload or {}
        return cls(
            facebook=payload.get("facebook") or None,
            twitter=payload.get("twitter") or None,
            linkedin=payload.get("linkedin") or None,
            website=payload.get("website") or None,
        )


@dataclass(frozen=True)
class DeskRecord:
    """
    One desk in the gallery, as delivered by the data source.
    """

    id: DeskId
    name: str
    title: str
    location: str
    profile: Optional[str]
    decor: Optional[str]
    monitor: Placement
    screen: Placement
    photos: Tuple[str, ...] = ()
    social: SocialLinks = field(default_factory=SocialLinks)
    slug: str = ""
    status: DeskStatus = DeskStatus.APPROVED

    @property
    def first_photo(self) -> Optional[str]:
        if self.screen.first_photo:
            return self.screen.first_photo
        return self.photos[0] if self.photos else None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "title": self.title,
            "location": self.location,
            "profile": self.profile,
            "decor": self.decor,
            "monitor": self.monitor.to_dict(),
            "screen": self.screen.to_dict(),
            "photos": list(self.photos),
            "social": self.social.to_dict(),
            "slug": self.slug,
            "status": self.status.value,
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, object]) -> "DeskRecord":
        # local import keeps models free of the records helpers at import time
        from deskview.core.records import slugify

        status_value = payload.get("status", DeskStatus.APPROVED.value)
        try:
            status = DeskStatus(status_value)
        except ValueError:
            status = DeskStatus.APPROVED
        name = str(payload.get("name", ""))
        return cls(
            id=payload["id"],
            name=name,
            title=str(payload.get("title", "")),
            location=str(payload.get("location", "")),
            profile=payload.get("profile"),
            decor=payload.get("decor"),
            monitor=Placement.from_dict(payload.get("monitor") or {}),
            screen=Placement.from_dict(payload.get("screen") or {}),
            photos=tuple(str(photo) for photo in payload.get("photos") or ()),
            social=SocialLinks.from_dict(payload.get("social")),
            slug=str(payload.get("slug") or slugify(name)),
            status=status,
        )


@dataclass(frozen=True)
class CloneDescriptor:
    """
    Geometry of the clicked gallery element, used to animate the pop-out clone and back.
    """

    x: float
    y: float
    width: float
    height: float
    image: Optional[str] = None

    def to_dict(self) -> dict:
        return {"x": self.x, "y": self.y, "width": self.width, "height": self.height, "image": self.image}


@dataclass(frozen=True)
class FlashEffect:
    """Deferred screen flash tied to a desk transition."""

    desk_id: DeskId
    kind: str = "screen"
    duration_ms: int = 400

    def to_dict(self) -> dict:
        return {"desk_id": self.desk_id, "kind": self.kind, "duration_ms": self.duration_ms}


@dataclass(frozen=True)
class SelectionTicket:
    """
    Identifies the selection an async completion signal belongs to.
    """

    desk_id: DeskId
    generation: int


@dataclass
class ViewerState:
    """
    Session-scoped viewer state. Only ViewerStateMachine writes to it.
    """

    selected_id: Optional[DeskId] = None
    hidden_ids: Set[DeskId] = field(default_factory=set)
    clone: Optional[CloneDescriptor] = None
    pending_flash: Optional[FlashEffect] = None
    photo_viewer_visible: bool = False
    photo_slider_visible: bool = True
    gallery_faded: bool = False
    carousel_locked: bool = False
    initial_photo_loading: bool = False
    desk_switching: bool = False
    photo_slider_transitioning: bool = False
    photo_viewer_ready: bool = False
    phase: ViewerPhase = ViewerPhase.IDLE
    generation: int = 0

    @classmethod
    def idle(cls, generation: int = 0) -> "ViewerState":
        return cls(generation=generation)

    @property
    def is_idle(self) -> bool:
        return self == ViewerState.idle(self.generation)

    def to_dict(self) -> dict:
        return {
            "selected_id": self.selected_id,
            "hidden_ids": sorted(self.hidden_ids, key=str),
            "clone": self.clone.to_dict() if self.clone else None,
            "pending_flash": self.pending_flash.to_dict() if self.pending_flash else None,
            "photo_viewer_visible": self.photo_viewer_visible,
            "photo_slider_visible": self.photo_slider_visible,
            "gallery_faded": self.gallery_faded,
            "carousel_locked": self.carousel_locked,
            "initial_photo_loading": self.initial_photo_loading,
            "desk_switching": self.desk_switching,
            "photo_slider_transitioning": self.photo_slider_transitioning,
            "photo_viewer_ready": self.photo_viewer_ready,
            "phase": self.phase.value,
            "generation": self.generation,
        }


__all__ = [
    "DeskId",
    "DeskStatus",
    "ViewerPhase",
    "Placement",
    "SocialLinks",
    "DeskRecord",
    "CloneDescriptor",
    "FlashEffect",
    "SelectionTicket",
    "ViewerState",
]
