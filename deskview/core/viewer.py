from __future__ import annotations

import logging
from typing import Callable, FrozenSet, List, Optional

from deskview.core import gates
from deskview.core.catalog import DeskCatalog
from deskview.exceptions import InvalidTransition
from deskview.state.models import (
    CloneDescriptor,
    DeskId,
    DeskRecord,
    FlashEffect,
    SelectionTicket,
    ViewerPhase,
    ViewerState,
)

logger = logging.getLogger("deskview.core.viewer")

ViewerListener = Callable[[ViewerState], None]

_LOADING_PHASES = (ViewerPhase.SELECTING, ViewerPhase.AWAITING_FIRST_PHOTO, ViewerPhase.SWITCHING)


class ViewerStateMachine:
    """
    Owns the viewer state and sequences the pop-out → load → ready → pop-in flow.

    Every action is a synchronous write. Completion signals from the
    presentation layer may carry the SelectionTicket returned by
    ``select_desk``; signals whose ticket belongs to an older selection are
    dropped and the setter returns False.
    """

    def __init__(self, catalog: Optional[DeskCatalog] = None) -> None:
        self.state = ViewerState.idle()
        self._catalog = catalog
        self._listeners: List[ViewerListener] = []

    # ------------------------------------------------------------------ reads

    @property
    def phase(self) -> ViewerPhase:
        return self.state.phase

    @property
    def selected_id(self) -> Optional[DeskId]:
        return self.state.selected_id

    @property
    def selected_desk(self) -> Optional[DeskRecord]:
        if self._catalog is None or self.state.selected_id is None:
            return None
        return self._catalog.find_by_id(self.state.selected_id)

    @property
    def hidden_ids(self) -> FrozenSet[DeskId]:
        return frozenset(self.state.hidden_ids)

    @property
    def clone(self) -> Optional[CloneDescriptor]:
        return self.state.clone

    @property
    def pending_flash(self) -> Optional[FlashEffect]:
        return self.state.pending_flash

    @property
    def photo_viewer_visible(self) -> bool:
        return self.state.photo_viewer_visible

    @property
    def ticket(self) -> Optional[SelectionTicket]:
        if self.state.selected_id is None:
            return None
        return SelectionTicket(self.state.selected_id, self.state.generation)

    @property
    def logo_clickable(self) -> bool:
        return gates.logo_clickable(self.state)

    @property
    def desk_slider_interactive(self) -> bool:
        return gates.desk_slider_interactive(self.state)

    @property
    def carousel_interactive(self) -> bool:
        return gates.carousel_interactive(self.state)

    def subscribe(self, listener: ViewerListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # -------------------------------------------------------------- selection

    def select_desk(
        self,
        desk_id: DeskId,
        clone: Optional[CloneDescriptor] = None,
        flash: Optional[FlashEffect] = None,
    ) -> SelectionTicket:
        """
        Start showing ``desk_id``. Any transition in flight is abandoned: its
        clone and flash are replaced and a running slide is cleared.
        """
        if desk_id is None:
            raise InvalidTransition("select_desk", "desk id is required")
        state = self.state
        switching = state.photo_viewer_visible
        state.generation += 1
        state.selected_id = desk_id
        state.clone = clone
        state.pending_flash = flash
        state.desk_switching = True
        state.initial_photo_loading = True
        state.carousel_locked = True
        state.gallery_faded = True
        state.photo_viewer_ready = False
        state.photo_slider_transitioning = False
        if switching:
            # the viewer stays open, so the new desk takes over the hidden slot
            state.hidden_ids = {desk_id}
        state.phase = ViewerPhase.SWITCHING if switching else ViewerPhase.SELECTING
        self._changed("select_desk", desk_id=desk_id)
        return SelectionTicket(desk_id, state.generation)

    def set_selected_desk_id(self, desk_id: Optional[DeskId]) -> Optional[SelectionTicket]:
        if desk_id is None:
            self.reset_viewer_state()
            return None
        return self.select_desk(desk_id)

    def begin_pop_out(self, ticket: Optional[SelectionTicket] = None) -> bool:
        """The clone has started animating towards the viewer."""
        if self._is_stale(ticket, "begin_pop_out"):
            return False
        self._require_selection("begin_pop_out")
        state = self.state
        state.photo_viewer_visible = True
        state.hidden_ids.add(state.selected_id)
        if state.phase == ViewerPhase.SELECTING:
            state.phase = ViewerPhase.AWAITING_FIRST_PHOTO
        self._changed("begin_pop_out")
        return True

    # ----------------------------------------------------------------- setters

    def set_photo_viewer_visible(self, visible: bool, ticket: Optional[SelectionTicket] = None) -> bool:
        if visible:
            return self.begin_pop_out(ticket)
        if self._is_stale(ticket, "set_photo_viewer_visible"):
            return False
        state = self.state
        state.photo_viewer_visible = False
        state.photo_viewer_ready = False
        if state.phase != ViewerPhase.CLOSING and self._load_pending():
            state.phase = ViewerPhase.SELECTING
        self._changed("set_photo_viewer_visible", visible=False)
        return True

    def set_initial_photo_loading(self, loading: bool, ticket: Optional[SelectionTicket] = None) -> bool:
        if self._is_stale(ticket, "set_initial_photo_loading"):
            return False
        state = self.state
        if loading:
            self._require_selection("set_initial_photo_loading")
            state.photo_viewer_ready = False
            if state.phase == ViewerPhase.VIEWER_READY:
                state.phase = ViewerPhase.AWAITING_FIRST_PHOTO
        state.initial_photo_loading = bool(loading)
        self._changed("set_initial_photo_loading", loading=bool(loading))
        return True

    def set_desk_switching(self, switching: bool, ticket: Optional[SelectionTicket] = None) -> bool:
        if self._is_stale(ticket, "set_desk_switching"):
            return False
        if switching:
            self._require_selection("set_desk_switching")
        self.state.desk_switching = bool(switching)
        self._changed("set_desk_switching", switching=bool(switching))
        return True

    def set_photo_slider_transitioning(
        self, transitioning: bool, ticket: Optional[SelectionTicket] = None
    ) -> bool:
        if self._is_stale(ticket, "set_photo_slider_transitioning"):
            return False
        if transitioning:
            self._require_selection("set_photo_slider_transitioning")
        self.state.photo_slider_transitioning = bool(transitioning)
        self._changed("set_photo_slider_transitioning", transitioning=bool(transitioning))
        return True

    def set_photo_viewer_ready(self, ready: bool, ticket: Optional[SelectionTicket] = None) -> bool:
        if self._is_stale(ticket, "set_photo_viewer_ready"):
            return False
        state = self.state
        if not ready:
            state.photo_viewer_ready = False
            if state.phase == ViewerPhase.VIEWER_READY and self._load_pending():
                state.phase = ViewerPhase.AWAITING_FIRST_PHOTO
            self._changed("set_photo_viewer_ready", ready=False)
            return True

        self._require_selection("set_photo_viewer_ready")
        if state.initial_photo_loading:
            raise InvalidTransition("set_photo_viewer_ready", "first photo has not loaded yet")
        if state.phase == ViewerPhase.CLOSING:
            raise InvalidTransition("set_photo_viewer_ready", "viewer is closing")
        state.photo_viewer_ready = True
        state.photo_viewer_visible = True
        state.desk_switching = False
        state.carousel_locked = False
        state.phase = ViewerPhase.VIEWER_READY
        self._changed("set_photo_viewer_ready", ready=True)
        return True

    def set_photo_slider_visible(self, visible: bool) -> None:
        self.state.photo_slider_visible = bool(visible)
        self._changed("set_photo_slider_visible", visible=bool(visible))

    def set_carousel_locked(self, locked: bool) -> None:
        self.state.carousel_locked = bool(locked)
        self._changed("set_carousel_locked", locked=bool(locked))

    def set_gallery_faded(self, faded: bool) -> None:
        self.state.gallery_faded = bool(faded)
        self._changed("set_gallery_faded", faded=bool(faded))

    def set_selected_desk_clone(self, clone: Optional[CloneDescriptor]) -> None:
        self.state.clone = clone
        self._changed("set_selected_desk_clone")

    def set_pending_flash_effect(self, flash: Optional[FlashEffect]) -> None:
        self.state.pending_flash = flash
        self._changed("set_pending_flash_effect")

    def consume_pending_flash(self) -> Optional[FlashEffect]:
        flash = self.state.pending_flash
        if flash is not None:
            self.state.pending_flash = None
            self._changed("consume_pending_flash")
        return flash

    def add_hidden_desk_id(self, desk_id: DeskId) -> None:
        self.state.hidden_ids.add(desk_id)
        self._changed("add_hidden_desk_id", desk_id=desk_id)

    def clear_hidden_desk_ids(self) -> None:
        self.state.hidden_ids.clear()
        self._changed("clear_hidden_desk_ids")

    # ---------------------------------------------------------------- carousel

    def start_slide(self) -> bool:
        """Begin a carousel slide. Rejected while another slide, a load or a lock is active."""
        if not gates.carousel_interactive(self.state):
            logger.debug("Slide rejected in phase %s", self.state.phase.value)
            return False
        self.state.photo_slider_transitioning = True
        self._changed("start_slide")
        return True

    def finish_slide(self, ticket: Optional[SelectionTicket] = None) -> bool:
        return self.set_photo_slider_transitioning(False, ticket)

    # ----------------------------------------------------------------- closing

    def begin_close(self, ticket: Optional[SelectionTicket] = None) -> Optional[CloneDescriptor]:
        """
        Start the pop-in. Returns the clone descriptor to animate back, if any.
        """
        if self._is_stale(ticket, "begin_close") or self.state.selected_id is None:
            return None
        state = self.state
        state.phase = ViewerPhase.CLOSING
        state.carousel_locked = True
        state.photo_viewer_ready = False
        state.photo_slider_transitioning = False
        self._changed("begin_close")
        return state.clone

    def finish_close(self, ticket: Optional[SelectionTicket] = None) -> bool:
        if self._is_stale(ticket, "finish_close"):
            return False
        self.reset_viewer_state()
        return True

    def reset_viewer_state(self) -> None:
        self.state = ViewerState.idle(generation=self.state.generation + 1)
        self._changed("reset_viewer_state")

    # ---------------------------------------------------------------- internal

    def _is_stale(self, ticket: Optional[SelectionTicket], action: str) -> bool:
        if ticket is None or ticket.generation == self.state.generation:
            return False
        logger.debug(
            "Dropping %s for desk %s (generation %s, current %s)",
            action,
            ticket.desk_id,
            ticket.generation,
            self.state.generation,
        )
        return True

    def _load_pending(self) -> bool:
        state = self.state
        return state.selected_id is not None and (state.initial_photo_loading or state.desk_switching)

    def _require_selection(self, action: str) -> None:
        if self.state.selected_id is None:
            raise InvalidTransition(action, "no desk is selected")

    def _changed(self, action: str, **details: object) -> None:
        logger.debug("%s %s -> phase=%s", action, details or "", self.state.phase.value)
        for listener in list(self._listeners):
            listener(self.state)


__all__ = ["ViewerStateMachine", "ViewerListener"]
