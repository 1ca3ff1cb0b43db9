from __future__ import annotations

import logging
from typing import Any, List, Mapping, Optional

from deskview.core.audio import AudioBackend, AudioGate
from deskview.core.catalog import DeskCatalog, DeskSource
from deskview.core.effects import AmbientEffects, EffectsCoordinator
from deskview.core.images import ImageCache, ImageLoader
from deskview.core.overlays import EffectsSignal, OverlayCoordinator
from deskview.core.viewer import ViewerStateMachine
from deskview.state.models import (
    CloneDescriptor,
    DeskId,
    DeskRecord,
    FlashEffect,
    SelectionTicket,
    ViewerPhase,
)

logger = logging.getLogger("deskview.core.session")


class GallerySession:
    """
    Wires catalog, viewer, overlays, ambient effects and audio for one gallery session.

    Overlay PAUSE/RESUME signals are forwarded synchronously, so a resume can
    never overtake the pause issued earlier by the same interaction. Resume
    is suppressed while effects are disabled, an overlay is up or the photo
    viewer is shown.
    """

    def __init__(
        self,
        source: DeskSource,
        *,
        effects_sink: Optional[AmbientEffects] = None,
        audio: Optional[AudioGate] = None,
        effects_enabled: bool = True,
        images: Optional[ImageCache] = None,
    ) -> None:
        self.catalog = DeskCatalog(source)
        self.viewer = ViewerStateMachine(self.catalog)
        self.effects = EffectsCoordinator(effects_sink)
        self.effects.set_enabled(effects_enabled)
        self.overlays = OverlayCoordinator(self._on_overlay_signal)
        self.audio = audio
        self.images = images

    @classmethod
    def from_config(
        cls,
        config: Mapping[str, Any],
        source: DeskSource,
        *,
        audio_backend: Optional[AudioBackend] = None,
        effects_sink: Optional[AmbientEffects] = None,
        image_loader: Optional[ImageLoader] = None,
    ) -> "GallerySession":
        audio = None
        if audio_backend is not None:
            audio_cfg = config.get("audio") or {}
            audio = AudioGate.create(audio_backend)
            audio.initialize(audio_cfg.get("sounds") or {}, audio_cfg.get("default_volume", 0.5))
        return cls(
            source,
            effects_sink=effects_sink,
            audio=audio,
            effects_enabled=bool(config.get("effects_enabled", True)),
            images=ImageCache(image_loader) if image_loader is not None else None,
        )

    async def start(self) -> bool:
        return await self.catalog.load()

    def dispose(self) -> None:
        if self.audio is not None:
            self.audio.dispose()
        if self.images is not None:
            self.images.clear()

    async def warm_first_photos(self) -> List[str]:
        """Preload the first photo of every loaded desk so the viewer opens on a warm image."""
        if self.images is None:
            return []
        return await self.images.preload_many(desk.first_photo for desk in self.catalog.desks)

    @property
    def selected_desk(self) -> Optional[DeskRecord]:
        return self.viewer.selected_desk

    # ---------------------------------------------------------------- effects

    def _on_overlay_signal(self, signal: EffectsSignal) -> None:
        if signal is EffectsSignal.PAUSE:
            self.effects.pause()
        else:
            self.resume_effects()

    def resume_effects(self) -> bool:
        if not self.effects.enabled:
            logger.debug("Ambient effects disabled, not resuming")
            return False
        return self.effects.resume(self.overlays.any_visible, self.viewer.photo_viewer_visible)

    def set_effects_enabled(self, enabled: bool) -> None:
        self.effects.set_enabled(enabled)
        if enabled:
            self.resume_effects()
        else:
            self.effects.pause()

    # ------------------------------------------------------------------ viewer

    def open_desk(
        self,
        desk_id: DeskId,
        clone: Optional[CloneDescriptor] = None,
        flash: Optional[FlashEffect] = None,
    ) -> SelectionTicket:
        self.effects.pause()
        ticket = self.viewer.select_desk(desk_id, clone=clone, flash=flash)
        self.play("gallery_click")
        return ticket

    def first_photo_loaded(self, ticket: Optional[SelectionTicket] = None) -> bool:
        applied = self.viewer.set_initial_photo_loading(False, ticket)
        if applied:
            self.play("photoviewer_load")
        return applied

    def close_desk(self) -> Optional[CloneDescriptor]:
        return self.viewer.begin_close()

    def finish_close(self, ticket: Optional[SelectionTicket] = None) -> bool:
        if not self.viewer.finish_close(ticket):
            return False
        self.resume_effects()
        return True

    def apply_route(self, param: Optional[str]) -> Optional[SelectionTicket]:
        """
        Follow a URL parameter: a desk slug (or id) selects that desk, an empty parameter closes the viewer.
        """
        if not param:
            if self.viewer.selected_id is not None and self.viewer.phase != ViewerPhase.CLOSING:
                self.close_desk()
            return None
        desk = self.catalog.find_by_slug(param) or self.catalog.find_by_id(param)
        if desk is None:
            logger.warning("No desk matches route parameter %r", param)
            return None
        if desk.id == self.viewer.selected_id and self.viewer.phase != ViewerPhase.CLOSING:
            return self.viewer.ticket
        return self.open_desk(desk.id)

    # ------------------------------------------------------------------- audio

    def grant_interaction(self) -> None:
        if self.audio is not None:
            self.audio.grant_interaction()

    def play(self, name: str, **options: Any) -> bool:
        if self.audio is None:
            return False
        return self.audio.play(name, **options)


__all__ = ["GallerySession"]
