from __future__ import annotations

from importlib import import_module
from unittest.mock import patch

import numpy as np
import pytest

from secp_explorer import CurveExplorer, OneShotOutput, PlotResult, Viewport, explore

explorer_module = import_module("secp_explorer.CurveExplorer")


def test_initial_render_populates_trace_axes_and_readouts() -> None:
    explorer = CurveExplorer()

    result = explorer.result
    assert isinstance(result, PlotResult)
    assert len(result) > 0
    assert tuple(explorer.figure_widget.layout.xaxis.range) == (-10.0, 10.0)
    assert tuple(explorer.figure_widget.layout.yaxis.range) == (-10.0, 10.0)
    assert explorer.layout.range_label.value == "View Range: ±10.00"
    assert explorer.layout.center_label.value == "Center: (0.00, 0.00)"
    assert explorer.layout.resolution_label.value == "Resolution: 0.0200"


def test_trace_joins_both_branches_at_the_root() -> None:
    explorer = CurveExplorer()

    x_data = explorer.trace.x_data
    y_data = explorer.trace.y_data
    turn = int(np.argmin(x_data))

    assert not np.isnan(x_data).any()
    assert len(x_data) == len(explorer.result)
    assert np.all(np.diff(x_data[: turn + 1]) < 0)
    assert np.all(y_data[: turn + 1] > 0)
    assert np.all(y_data[turn + 1 :] < 0)


def test_pan_right_twice_moves_center_and_axes() -> None:
    explorer = CurveExplorer()

    assert explorer.apply("pan_right") is True
    assert explorer.pan_right() is True

    assert explorer.viewport == Viewport(10, 0, 10)
    assert explorer.result.viewport == explorer.viewport
    assert tuple(explorer.figure_widget.layout.xaxis.range) == (0.0, 20.0)
    assert explorer.layout.center_label.value == "Center: (10.00, 0.00)"


def test_zoom_in_refreshes_resolution_readout() -> None:
    explorer = CurveExplorer()

    explorer.zoom_in()

    assert explorer.viewport.half_range == 5.0
    assert explorer.result.resolution == pytest.approx(0.01)
    assert explorer.layout.resolution_label.value == "Resolution: 0.0100"


def test_button_click_runs_command() -> None:
    explorer = CurveExplorer()

    explorer.layout.buttons["pan_down"].click()

    assert explorer.viewport.center_y == -5.0


def test_reset_restores_configured_viewport() -> None:
    explorer = CurveExplorer(initial_half_range=4)
    explorer.zoom_out()
    explorer.pan_up()

    assert explorer.reset() is True
    assert explorer.viewport == Viewport(0, 0, 4)
    assert explorer.reset() is False


def test_controls_disabled_only_while_recomputing() -> None:
    explorer = CurveExplorer()
    observed = []
    original_apply = explorer.trace.apply

    def _spy(result):
        observed.append(
            (explorer.is_recomputing, all(b.disabled for b in explorer.layout.buttons.values()))
        )
        original_apply(result)

    explorer.trace.apply = _spy
    explorer.zoom_in()

    assert observed == [(True, True)]
    assert explorer.is_recomputing is False
    assert not any(b.disabled for b in explorer.layout.buttons.values())


def test_failed_sampling_still_clears_recomputing_flag(monkeypatch) -> None:
    explorer = CurveExplorer()

    def _boom(*args, **kwargs):
        raise RuntimeError("boom")

    monkeypatch.setattr(explorer_module, "sample_curve", _boom)

    with pytest.raises(RuntimeError, match="boom"):
        explorer.zoom_in()

    assert explorer.is_recomputing is False
    assert not any(b.disabled for b in explorer.layout.buttons.values())


def test_noop_command_does_not_resample() -> None:
    explorer = CurveExplorer(initial_half_range=1000)
    calls = []
    explorer.add_render_hook(calls.append)

    assert explorer.zoom_out() is False
    assert calls == []


def test_render_hooks_receive_results_and_failures_warn() -> None:
    explorer = CurveExplorer()
    seen = []

    def _bad(_result):
        raise ValueError("hook exploded")

    explorer.add_render_hook(_bad, hook_id="bad")
    good_id = explorer.add_render_hook(seen.append)

    with pytest.warns(UserWarning, match="Render hook bad failed"):
        explorer.pan_left()

    assert seen == [explorer.result]

    explorer.remove_render_hook(good_id)
    explorer.remove_render_hook("bad")
    with pytest.raises(KeyError):
        explorer.remove_render_hook("bad")


def test_add_render_hook_run_now_uses_current_result() -> None:
    explorer = CurveExplorer()
    seen = []

    explorer.add_render_hook(seen.append, run_now=True)

    assert seen == [explorer.result]


def test_unknown_command_raises_keyerror() -> None:
    explorer = CurveExplorer()

    with pytest.raises(KeyError):
        explorer.apply("spin")


def test_config_overrides_flow_into_sampling_and_tooltips() -> None:
    explorer = explore(sample_count=100, tooltip_decimals=2)

    assert isinstance(explorer, CurveExplorer)
    assert explorer.result.resolution == pytest.approx(0.1)
    assert ".2f" in explorer.trace.trace.hovertemplate


def test_starting_viewport_outside_bounds_is_rejected() -> None:
    with pytest.raises(ValueError):
        CurveExplorer(viewport=Viewport(0, 0, 1e-6))


def test_commands_lists_seven_names() -> None:
    assert set(CurveExplorer.commands()) == {
        "zoom_in", "zoom_out", "pan_left", "pan_right", "pan_up", "pan_down", "reset",
    }


def test_repr_names_curve_and_viewport() -> None:
    assert repr(CurveExplorer()) == "CurveExplorer(curve='SECP256K1', center=(0.0, 0.0), half_range=10.0)"


def test_run_now_hook_failure_warns_like_render_hooks() -> None:
    explorer = CurveExplorer()

    def _bad(_result):
        raise ValueError("early")

    with pytest.warns(UserWarning, match="Render hook eager failed: early"):
        hook_id = explorer.add_render_hook(_bad, hook_id="eager", run_now=True)

    assert hook_id == "eager"
    explorer.remove_render_hook("eager")


def test_constructor_is_display_side_effect_free() -> None:
    with patch.object(explorer_module, "display") as mocked_display:
        explorer = CurveExplorer()

    assert explorer.has_been_displayed is False
    mocked_display.assert_not_called()


def test_ipython_display_shows_one_shot_output_and_marks_displayed() -> None:
    explorer = CurveExplorer()

    with patch.object(explorer_module, "display") as mocked_display:
        explorer._ipython_display_()

    assert explorer.has_been_displayed is True
    mocked_display.assert_called_once()
    assert isinstance(mocked_display.call_args.args[0], OneShotOutput)


def test_show_displays_only_the_first_time() -> None:
    explorer = CurveExplorer()

    with patch.object(explorer_module, "display") as mocked_display:
        assert explorer.show() is True
        assert explorer.show() is False

    mocked_display.assert_called_once_with(explorer)
    assert explorer.has_been_displayed is True
