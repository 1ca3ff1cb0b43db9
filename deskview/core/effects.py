from __future__ import annotations

import logging
from typing import Optional, Protocol

logger = logging.getLogger("deskview.core.effects")


class AmbientEffects(Protocol):
    """Presentation-side handle that runs the gallery shuffle/jump animations."""

    def pause_effects(self) -> None: ...

    def resume_effects(self) -> None: ...


class EffectsCoordinator:
    """
    Gate over the gallery's ambient shuffle/jump effects.

    ``enabled`` is a master switch read by the integration layer; ``resume``
    itself only applies the overlay/viewer guard.
    """

    def __init__(self, sink: Optional[AmbientEffects] = None) -> None:
        self._sink = sink
        self.enabled: bool = True
        self.paused: bool = False

    def pause(self) -> None:
        self.paused = True
        if self._sink is not None:
            self._sink.pause_effects()

    def resume(self, overlay_any_visible: bool, photo_viewer_visible: bool) -> bool:
        """
        Resume ambient effects only when nothing covers the gallery. Returns True if the resume fired.
        """
        if overlay_any_visible or photo_viewer_visible:
            logger.debug(
                "Resume suppressed (overlay=%s viewer=%s)", overlay_any_visible, photo_viewer_visible
            )
            return False
        self.paused = False
        if self._sink is not None:
            self._sink.resume_effects()
        return True

    def set_enabled(self, enabled: bool) -> None:
        self.enabled = bool(enabled)


__all__ = ["AmbientEffects", "EffectsCoordinator"]
