from __future__ import annotations

import itertools

from deskview.core.gates import carousel_interactive, desk_slider_interactive, is_busy, logo_clickable
from deskview.state.models import ViewerState

FLAGS = (
    "initial_photo_loading",
    "desk_switching",
    "photo_slider_transitioning",
    "carousel_locked",
    "photo_viewer_ready",
    "photo_viewer_visible",
)


def _all_states():
    for values in itertools.product((False, True), repeat=len(FLAGS)):
        yield ViewerState(selected_id=1, **dict(zip(FLAGS, values)))


def test_desk_slider_blocked_whenever_first_photo_loading():
    for state in _all_states():
        if state.initial_photo_loading:
            assert desk_slider_interactive(state) is False


def test_any_busy_flag_blocks_every_gate():
    for state in _all_states():
        if is_busy(state):
            assert not logo_clickable(state)
            assert not desk_slider_interactive(state)
            assert not carousel_interactive(state)


def test_gate_formulas_over_all_flag_combinations():
    for state in _all_states():
        busy = state.initial_photo_loading or state.desk_switching or state.photo_slider_transitioning
        assert logo_clickable(state) == (not (busy or state.carousel_locked))
        assert desk_slider_interactive(state) == (
            not busy and (state.photo_viewer_ready or not state.photo_viewer_visible)
        )


def test_idle_gallery_is_fully_interactive():
    state = ViewerState.idle()
    assert logo_clickable(state)
    assert desk_slider_interactive(state)
    assert not carousel_interactive(state)


def test_visible_but_not_ready_viewer_blocks_desk_slider_only():
    state = ViewerState(selected_id=1, photo_viewer_visible=True)
    assert logo_clickable(state)
    assert not desk_slider_interactive(state)
