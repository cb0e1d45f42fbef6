from __future__ import annotations

import logging
import math

import pytest

from secp_explorer import (
    COMMANDS,
    DEFAULT_CONFIG,
    ExplorerConfig,
    Viewport,
    ViewportState,
    pan_down,
    pan_left,
    pan_right,
    pan_up,
    reset,
    zoom_in,
    zoom_out,
)


def test_zoom_in_halves_half_range_and_keeps_center() -> None:
    v = Viewport(1.5, -2.0, 10.0)

    out = zoom_in(v)

    assert out == Viewport(1.5, -2.0, 5.0)


def test_zoom_out_doubles_half_range() -> None:
    assert zoom_out(Viewport(0, 0, 10)).half_range == 20.0


def test_repeated_zoom_in_stops_exactly_at_minimum() -> None:
    v = Viewport(0, 0, 10)
    seen = []
    for _ in range(40):
        v = zoom_in(v)
        seen.append(v.half_range)

    assert min(seen) == DEFAULT_CONFIG.min_half_range
    assert v.half_range == DEFAULT_CONFIG.min_half_range


def test_repeated_zoom_out_stops_exactly_at_maximum() -> None:
    v = Viewport(0, 0, 10)
    for _ in range(40):
        v = zoom_out(v)
        assert v.half_range <= DEFAULT_CONFIG.max_half_range

    assert v.half_range == DEFAULT_CONFIG.max_half_range


def test_zoom_at_bound_is_a_noop() -> None:
    at_min = Viewport(3, 4, DEFAULT_CONFIG.min_half_range)
    at_max = Viewport(3, 4, DEFAULT_CONFIG.max_half_range)

    assert zoom_in(at_min) is at_min
    assert zoom_out(at_max) is at_max


def test_zoom_bounds_follow_config() -> None:
    cfg = ExplorerConfig(min_half_range=1, max_half_range=16, initial_half_range=4)

    assert zoom_in(Viewport(0, 0, 1.5), cfg).half_range == 1.0
    assert zoom_out(Viewport(0, 0, 12), cfg).half_range == 16.0


def test_pans_move_by_half_of_half_range() -> None:
    v = Viewport(0, 0, 10)

    assert pan_left(v) == Viewport(-5, 0, 10)
    assert pan_right(v) == Viewport(5, 0, 10)
    assert pan_up(v) == Viewport(0, 5, 10)
    assert pan_down(v) == Viewport(0, -5, 10)


def test_pan_right_twice_reaches_center_ten() -> None:
    v = pan_right(pan_right(Viewport(0, 0, 10)))

    assert v.center_x == 10.0
    assert v.x_domain == (0.0, 20.0)
    assert v.y_domain == (-10.0, 10.0)


def test_reset_returns_configured_initial_viewport() -> None:
    cfg = ExplorerConfig(initial_center_x=1, initial_center_y=2, initial_half_range=3)

    assert reset(Viewport(50, 50, 0.5), cfg) == Viewport(1, 2, 3)


@pytest.mark.parametrize("half_range", [0, -1, float("nan"), float("inf")])
def test_viewport_rejects_invalid_half_range(half_range: float) -> None:
    with pytest.raises(ValueError):
        Viewport(0, 0, half_range)


def test_viewport_accepts_string_coordinates() -> None:
    v = Viewport("1/2", "-3", "1e-2")

    assert (v.center_x, v.center_y, v.half_range) == (0.5, -3.0, 0.01)


def test_no_transition_leaves_bounds_from_any_legal_viewport() -> None:
    cfg = DEFAULT_CONFIG
    for half_range in (cfg.min_half_range, 1.5e-4, 1.0, 999.0, cfg.max_half_range):
        v = Viewport(-3.0, 7.0, half_range)
        for transition in COMMANDS.values():
            out = transition(v, cfg)
            assert out.half_range > 0
            assert out.within(cfg)


def test_state_apply_reports_change_and_noop(caplog) -> None:
    state = ViewportState(viewport=Viewport(0, 0, DEFAULT_CONFIG.max_half_range))

    with caplog.at_level(logging.DEBUG, logger="secp_explorer.viewport"):
        assert state.apply("zoom_out") is False
        assert state.apply("zoom_in") is True

    assert state.viewport.half_range == DEFAULT_CONFIG.max_half_range / 2
    assert "zoom_out: no-op" in caplog.text


def test_state_apply_unknown_command_raises_keyerror() -> None:
    state = ViewportState()

    with pytest.raises(KeyError, match="Unknown viewport command"):
        state.apply("rotate")


def test_state_rejects_initial_viewport_outside_bounds() -> None:
    with pytest.raises(ValueError, match="outside"):
        ViewportState(viewport=Viewport(0, 0, 5000))


def test_pan_that_would_overflow_is_a_noop() -> None:
    v = Viewport(1.7e308, 0, 1e308)

    assert pan_right(v) is v
    assert math.isfinite(pan_left(v).center_x)
