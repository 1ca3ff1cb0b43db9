from __future__ import annotations

from deskview.state.models import ViewerState


def is_busy(state: ViewerState) -> bool:
    """
    True while a first photo is loading, a desk switch is running or the carousel is mid-slide.
    """
    return state.initial_photo_loading or state.desk_switching or state.photo_slider_transitioning


def logo_clickable(state: ViewerState) -> bool:
    return not (is_busy(state) or state.carousel_locked)


def desk_slider_interactive(state: ViewerState) -> bool:
    """
    The desk slider accepts input when nothing is loading or animating and the
    photo viewer is either ready or not shown at all.
    """
    if is_busy(state):
        return False
    return state.photo_viewer_ready or not state.photo_viewer_visible


def carousel_interactive(state: ViewerState) -> bool:
    if is_busy(state) or state.carousel_locked:
        return False
    return state.photo_viewer_visible and state.photo_viewer_ready


__all__ = ["is_busy", "logo_clickable", "desk_slider_interactive", "carousel_interactive"]
