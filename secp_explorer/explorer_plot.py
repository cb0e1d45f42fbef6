"""Plotly trace binding for sampled curve points.

Purpose
-------
Defines ``CurveTrace``, the rendering collaborator that owns one Plotly
scatter trace on a ``FigureWidget`` and pushes a :class:`PlotResult` into it:
the points, plus the x/y axis domains of the viewport.

Important gotchas
-----------------
- ``apply()`` updates the existing trace in place inside ``batch_update`` so
  the frontend receives data and axis ranges in one message.
- A ``PlotResult`` interleaves the +y and -y branches in x order. Drawn as
  one polyline that would zig-zag across the x-axis, so ``curve_polyline``
  walks the upper branch right to left and then the lower branch left to
  right, meeting at the root where ``y**2`` changes sign.
- Within a branch, consecutive x-values more than ``1.5 * resolution`` apart
  are separated by a NaN so no chord is drawn where the curve has no visible
  points. An oval component (``a < 0``) is closed at its right root too.
"""

from __future__ import annotations

from typing import Optional

import numpy as np
import plotly.graph_objects as go

from .curve import SECP256K1, EllipticCurve
from .PlotResult import PlotResult

GAP_FACTOR = 1.5


def _runs(xs: np.ndarray, ys: np.ndarray, max_dx: float) -> list[tuple[np.ndarray, np.ndarray]]:
    """Split ascending ``xs`` into runs without a jump larger than ``max_dx``."""
    if xs.size == 0:
        return []
    cuts = np.flatnonzero(np.diff(xs) > max_dx) + 1
    return list(zip(np.split(xs, cuts), np.split(ys, cuts)))


def _has_no_point(curve: EllipticCurve, x: float) -> bool:
    with np.errstate(invalid="ignore", over="ignore"):
        return bool(curve.rhs(x) < 0)


def curve_polyline(result: PlotResult, curve: EllipticCurve = SECP256K1) -> tuple[np.ndarray, np.ndarray]:
    """Return trace arrays for ``result`` with NaN separating disjoint pieces.

    Each upper-branch run whose left end sits just right of a root of
    ``curve`` is joined to the lower-branch run starting at the same x. A run
    cut by the viewport edge or the vertical domain stays open.
    """
    step = result.resolution
    lower = np.signbit(result.ys)
    max_dx = GAP_FACTOR * step
    upper_runs = _runs(result.xs[~lower], result.ys[~lower], max_dx)
    lower_runs = _runs(result.xs[lower], result.ys[lower], max_dx)
    lower_by_start = {float(lx[0]): i for i, (lx, _) in enumerate(lower_runs)}

    pieces: list[tuple[np.ndarray, np.ndarray]] = []
    used: set[int] = set()
    for ux, uy in upper_runs:
        i = lower_by_start.get(float(ux[0]))
        if i is None or i in used or not _has_no_point(curve, ux[0] - step):
            pieces.append((ux, uy))
            continue
        used.add(i)
        lx, ly = lower_runs[i]
        px = np.concatenate((ux[::-1], lx))
        py = np.concatenate((uy[::-1], ly))
        if lx[-1] == ux[-1] and _has_no_point(curve, ux[-1] + step):
            px = np.append(px, ux[-1])
            py = np.append(py, uy[-1])
        pieces.append((px, py))
    pieces.extend(run for i, run in enumerate(lower_runs) if i not in used)

    if not pieces:
        return np.empty(0), np.empty(0)
    gap = np.array([np.nan])
    xs_parts: list[np.ndarray] = []
    ys_parts: list[np.ndarray] = []
    for n, (px, py) in enumerate(pieces):
        if n:
            xs_parts.append(gap)
            ys_parts.append(gap)
        xs_parts.append(px)
        ys_parts.append(py)
    return np.concatenate(xs_parts), np.concatenate(ys_parts)


def hover_template(decimals: int) -> str:
    """Return a Plotly hover template showing x and y with ``decimals`` digits."""
    fmt = f".{int(decimals)}f"
    return f"x: %{{x:{fmt}}}<br>y: %{{y:{fmt}}}<extra></extra>"


class CurveTrace:
    """
    One curve line on a Plotly ``FigureWidget``.

    Parameters
    ----------
    figure_widget : plotly.graph_objects.FigureWidget
        Widget that receives the trace.
    curve : EllipticCurve, optional
        Curve the results were sampled from; used to locate roots.
    name : str, optional
        Trace name shown in hover labels.
    color : str, optional
        Line color.
    tooltip_decimals : int, optional
        Digits used by the hover template.
    """

    def __init__(
        self,
        figure_widget: go.FigureWidget,
        *,
        curve: EllipticCurve = SECP256K1,
        name: str = "y",
        color: str = "#2563eb",
        tooltip_decimals: int = 4,
    ) -> None:
        self._figure_widget = figure_widget
        self._curve = curve
        self._result: Optional[PlotResult] = None
        figure_widget.add_scatter(
            x=[],
            y=[],
            mode="lines",
            name=name,
            line=dict(color=color, width=2),
            hovertemplate=hover_template(tooltip_decimals),
            showlegend=False,
        )
        self._trace = figure_widget.data[-1]

    @property
    def trace(self) -> go.Scatter:
        """Return the live Plotly trace handle."""
        return self._trace

    @property
    def result(self) -> Optional[PlotResult]:
        """Return the last applied result, if any."""
        return self._result

    @property
    def x_data(self) -> np.ndarray:
        """Return the x-values currently held by the trace (NaN separates pieces)."""
        return np.asarray(self._trace.x if self._trace.x is not None else (), dtype=float)

    @property
    def y_data(self) -> np.ndarray:
        """Return the y-values currently held by the trace (NaN separates pieces)."""
        return np.asarray(self._trace.y if self._trace.y is not None else (), dtype=float)

    def apply(self, result: PlotResult) -> None:
        """Replace the trace data and axis ranges with ``result``."""
        xs, ys = curve_polyline(result, self._curve)
        with self._figure_widget.batch_update():
            self._trace.x = xs
            self._trace.y = ys
            self._figure_widget.layout.xaxis.range = list(result.x_domain)
            self._figure_widget.layout.yaxis.range = list(result.y_domain)
        self._result = result


__all__ = ["CurveTrace", "curve_polyline", "hover_template"]
