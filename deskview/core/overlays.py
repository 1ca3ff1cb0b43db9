from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

logger = logging.getLogger("deskview.core.overlays")


class EffectsSignal(str, Enum):
    """
    Notification sent when an overlay claims or releases focus.
    """

    PAUSE = "pause"
    RESUME = "resume"


@dataclass
class OverlayState:
    about_visible: bool = False
    submit_visible: bool = False

    @property
    def any_visible(self) -> bool:
        return self.about_visible or self.submit_visible


class OverlayCoordinator:
    """
    Keeps the about and submit overlays mutually exclusive.

    The coordinator knows nothing about gallery effects; it only reports
    PAUSE/RESUME through the injected ``notify`` callable.
    """

    def __init__(self, notify: Optional[Callable[[EffectsSignal], None]] = None) -> None:
        self.state = OverlayState()
        self._notify = notify

    @property
    def about_visible(self) -> bool:
        return self.state.about_visible

    @property
    def submit_visible(self) -> bool:
        return self.state.submit_visible

    @property
    def any_visible(self) -> bool:
        return self.state.any_visible

    def show_about(self) -> None:
        if self.state.submit_visible:
            self.state.submit_visible = False
        self.state.about_visible = True
        self._emit(EffectsSignal.PAUSE)

    def show_submit(self) -> None:
        if self.state.about_visible:
            self.state.about_visible = False
        self.state.submit_visible = True
        self._emit(EffectsSignal.PAUSE)

    def hide_about(self) -> None:
        self.state.about_visible = False
        self._emit(EffectsSignal.RESUME)

    def hide_submit(self) -> None:
        self.state.submit_visible = False
        self._emit(EffectsSignal.RESUME)

    def _emit(self, signal: EffectsSignal) -> None:
        logger.debug("Overlay signal %s (about=%s submit=%s)", signal.value, self.about_visible, self.submit_visible)
        if self._notify is not None:
            self._notify(signal)


__all__ = ["EffectsSignal", "OverlayState", "OverlayCoordinator"]
