from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional, Protocol

logger = logging.getLogger("deskview.core.audio")

SOUND_NAMES = (
    "gallery_click",
    "gallery_hover",
    "gallery_shuffle",
    "gallery_jump",
    "header_click",
    "header_hover",
    "photoviewer_click",
    "photoviewer_hover",
    "photoviewer_load",
)
DEFAULT_VOLUME = 0.5


class AudioBackend(Protocol):
    """Output device used by AudioGate. Handles are whatever ``load`` returns."""

    def load(self, name: str, locator: str) -> Any: ...

    def play(self, handle: Any, *, volume: float, loop: bool, start_time: float) -> None: ...

    def stop(self, handle: Any) -> None: ...

    def release(self, handle: Any) -> None: ...


def _clamp_volume(value: float) -> float:
    return max(0.0, min(1.0, float(value)))


class AudioGate:
    """
    Fire-and-forget named sounds, gated on a one-time interaction grant and a mute switch.

    Sound is cosmetic: a sound that fails to load or play is logged and skipped.
    """

    def __init__(self, backend: AudioBackend) -> None:
        self._backend = backend
        self._handles: Dict[str, Any] = {}
        self._volumes: Dict[str, float] = {}
        self.default_volume: float = DEFAULT_VOLUME
        self.initialized: bool = False
        self.interaction_granted: bool = False
        self.muted: bool = False

    @classmethod
    def create(cls, backend: AudioBackend) -> "AudioGate":
        return cls(backend)

    def initialize(self, sounds: Mapping[str, str], default_volume: float = DEFAULT_VOLUME) -> None:
        """
        Register every ``name -> locator`` pair once. Repeated calls are ignored.
        """
        if self.initialized:
            return
        self.default_volume = _clamp_volume(default_volume)
        for name, locator in sounds.items():
            try:
                self._handles[name] = self._backend.load(name, locator)
            except Exception as exc:
                logger.warning("Could not load sound %r from %s: %s", name, locator, exc)
                continue
            self._volumes[name] = self.default_volume
        self.initialized = True
        logger.debug("Registered %s sounds", len(self._handles))

    def dispose(self) -> None:
        for name, handle in self._handles.items():
            try:
                self._backend.release(handle)
            except Exception as exc:
                logger.warning("Could not release sound %r: %s", name, exc)
        self._handles.clear()
        self._volumes.clear()
        self.initialized = False
        self.interaction_granted = False

    def grant_interaction(self) -> None:
        """Record the first user gesture; playback stays unlocked for the rest of the session."""
        if not self.interaction_granted:
            self.interaction_granted = True
            logger.info("Audio enabled after user interaction")

    @property
    def available_sounds(self) -> List[str]:
        return list(self._handles)

    def set_muted(self, muted: bool) -> None:
        self.muted = bool(muted)

    def toggle_mute(self) -> bool:
        self.muted = not self.muted
        return self.muted

    def set_volume(self, volume: float, name: Optional[str] = None) -> None:
        level = _clamp_volume(volume)
        if name is not None:
            if name in self._volumes:
                self._volumes[name] = level
            return
        self.default_volume = level
        for key in self._volumes:
            self._volumes[key] = level

    def play(
        self,
        name: str,
        volume: Optional[float] = None,
        loop: Optional[bool] = None,
        start_time: float = 0.0,
    ) -> bool:
        if name not in self._handles:
            logger.warning("Sound %r not found", name)
            return False
        handle = self._handles[name]
        if not self.interaction_granted:
            logger.debug("Audio not enabled yet for %r", name)
            return False
        if self.muted:
            return False
        level = _clamp_volume(volume) if volume is not None else self._volumes.get(name, self.default_volume)
        try:
            self._backend.play(handle, volume=level, loop=bool(loop), start_time=max(0.0, start_time))
        except Exception as exc:
            logger.warning("Could not play %r: %s", name, exc)
            return False
        return True

    def stop(self, name: str) -> None:
        if name not in self._handles:
            return
        try:
            self._backend.stop(self._handles[name])
        except Exception as exc:
            logger.warning("Could not stop %r: %s", name, exc)


__all__ = ["SOUND_NAMES", "DEFAULT_VOLUME", "AudioBackend", "AudioGate"]
