from __future__ import annotations

import numpy as np

from secp_explorer import SECP256K1, EllipticCurve, Viewport, sample_curve
from secp_explorer.explorer_plot import GAP_FACTOR, curve_polyline


def _segment_dx(xs: np.ndarray) -> np.ndarray:
    """Return |dx| of every drawn segment (both ends finite)."""
    drawn = ~np.isnan(xs[:-1]) & ~np.isnan(xs[1:])
    return np.abs(np.diff(xs))[drawn]


def test_branches_meet_at_the_leftmost_root() -> None:
    result = sample_curve(Viewport(0, 0, 10))
    xs, ys = curve_polyline(result)
    turn = int(np.argmin(xs))

    assert not np.isnan(xs).any()
    assert len(xs) == len(result)
    # the upper branch ends and the lower branch starts at the same grid x
    assert xs[turn + 1] == xs[turn]
    assert ys[turn] > 0 > ys[turn + 1]
    assert 0 <= xs[turn] - SECP256K1.real_root() <= result.resolution


def test_polyline_walks_upper_branch_leftward_then_lower_rightward() -> None:
    result = sample_curve(Viewport(0, 0, 10))
    xs, ys = curve_polyline(result)
    turn = int(np.argmin(xs))

    assert np.all(np.diff(xs[: turn + 1]) < 0)
    assert np.all(np.diff(xs[turn + 1 :]) > 0)
    assert xs[0] == xs[-1] == result.xs.max()


def test_no_chord_across_region_without_real_points() -> None:
    curve = EllipticCurve(a=-1, b=0)
    result = sample_curve(Viewport(0, 0, 2), curve=curve)
    xs, ys = curve_polyline(result, curve)

    # oval over [-1, 0] and the branch from x = 1 are separate pieces
    assert np.isnan(xs).sum() == 1
    assert np.all(_segment_dx(xs) <= GAP_FACTOR * result.resolution)
    gap = int(np.flatnonzero(np.isnan(xs))[0])
    assert np.nanmax(xs[:gap]) <= 0.0
    assert np.nanmin(xs[gap + 1 :]) >= 1.0


def test_vertical_clipping_splits_a_branch() -> None:
    # y reaches about 2.236 at x = -1, above the top of the view
    curve = EllipticCurve(a=-3, b=3)
    viewport = Viewport(0, 0, 2)
    result = sample_curve(viewport, curve=curve)
    xs, ys = curve_polyline(result, curve)

    # two runs per branch; none starts at a root, so none is joined
    assert np.isnan(xs).sum() == 3
    assert np.all(_segment_dx(xs) <= GAP_FACTOR * result.resolution)
    assert np.all(np.abs(ys[~np.isnan(ys)]) <= viewport.half_range)


def test_viewport_edge_is_not_joined_across_branches() -> None:
    result = sample_curve(Viewport(10, 0, 10))
    xs, ys = curve_polyline(result)
    left = result.xs.min()

    # x = 0 is the viewport edge, not a root, so no vertical segment there
    at_left = np.flatnonzero(xs == left)
    assert len(at_left) == 2
    assert np.isnan(xs[at_left.min() + 1 : at_left.max()]).any()


def test_empty_result_gives_empty_polyline() -> None:
    result = sample_curve(Viewport(-500, 0, 10))
    xs, ys = curve_polyline(result)

    assert len(result) == 0
    assert xs.size == 0 and ys.size == 0
