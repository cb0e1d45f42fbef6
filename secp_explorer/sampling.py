"""Adaptive point sampling of a real elliptic curve inside a viewport.

Purpose
-------
Turn a :class:`~secp_explorer.viewport.Viewport` into a finite, renderable
set of curve points. This is a pure function: the same viewport, curve and
configuration always give a bit-identical :class:`PlotResult`.

Algorithm
---------
1. ``resolution = max(min_resolution, half_range / sample_count)`` so the
   on-screen density stays roughly constant across zoom levels, while the
   floor keeps the step count bounded as the half-range shrinks.
2. Scan x over ``[center_x - half_range, center_x + half_range]`` in steps of
   ``resolution``. The grid is ``x_start + i * resolution``; the last value
   is clipped onto ``x_end`` when rounding pushes it past.
3. At each x, ``y2 = x**3 + a*x + b``. Negative ``y2`` has no real point and
   is skipped silently.
4. Otherwise both ``(x, sqrt(y2))`` and ``(x, -sqrt(y2))`` are offered, and
   each is kept iff ``|y - center_y| <= half_range``. The two branches are
   filtered independently, so near the viewport's top or bottom edge only
   one of a mirrored pair may survive.
5. Points are ordered by x with a stable sort; the ``+y`` branch precedes the
   ``-y`` branch for the same x.

Robustness
----------
A non-finite or non-positive step, non-finite scan bounds, or a step count
above ``config.max_scan_steps`` aborts the pass with an empty result and a
logged warning instead of iterating.

Examples
--------
>>> from secp_explorer.viewport import Viewport
>>> result = sample_curve(Viewport(0, 0, 10))
>>> result.resolution
0.02
"""

from __future__ import annotations

import logging
import math
from typing import Optional

import numpy as np

from .curve import SECP256K1, EllipticCurve
from .explorer_config import DEFAULT_CONFIG, ExplorerConfig
from .PlotResult import PlotResult
from .viewport import Viewport

logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


def adaptive_resolution(half_range: float, config: ExplorerConfig = DEFAULT_CONFIG) -> float:
    """Return the sampling step for ``half_range``."""
    return max(config.min_resolution, half_range / config.sample_count)


def scan_grid(x_start: float, x_end: float, resolution: float, *, max_steps: int) -> Optional[np.ndarray]:
    """Return the x-values of one scan, or ``None`` when the scan is unusable.

    ``None`` is returned for a non-finite or non-positive ``resolution``,
    non-finite bounds, or when more than ``max_steps`` values would be
    visited.
    """
    if not (math.isfinite(resolution) and resolution > 0):
        logger.warning(f"Refusing to scan with resolution={resolution!r}")
        return None
    if not (math.isfinite(x_start) and math.isfinite(x_end)) or x_end < x_start:
        logger.warning(f"Refusing to scan non-finite or inverted bounds [{x_start!r}, {x_end!r}]")
        return None

    span_steps = (x_end - x_start) / resolution
    # Tolerate rounding so an end point that lands on the grid is included.
    if not math.isfinite(span_steps) or math.floor(span_steps + 1e-9) + 1 > max_steps:
        logger.warning(
            f"Refusing to scan {span_steps!r} steps (limit {max_steps}) "
            f"over [{x_start!r}, {x_end!r}] at resolution {resolution!r}"
        )
        return None

    count = int(math.floor(span_steps + 1e-9)) + 1
    xs = x_start + np.arange(count, dtype=float) * resolution
    return np.minimum(xs, x_end)


def sample_curve(
    viewport: Viewport,
    *,
    curve: EllipticCurve = SECP256K1,
    config: ExplorerConfig = DEFAULT_CONFIG,
    resolution: Optional[float] = None,
) -> PlotResult:
    """Sample ``curve`` inside ``viewport``.

    Parameters
    ----------
    viewport : Viewport
        Region to sample; the pass only reads this snapshot.
    curve : EllipticCurve, optional
        Curve to sample. Defaults to ``SECP256K1``.
    config : ExplorerConfig, optional
        Supplies ``sample_count``, ``min_resolution`` and ``max_scan_steps``.
    resolution : float, optional
        Explicit step overriding the adaptive one.

    Returns
    -------
    PlotResult
        Points sorted ascending by x. Empty when no part of the curve is
        visible or when the scan was aborted (``result.aborted``).
    """
    step = adaptive_resolution(viewport.half_range, config) if resolution is None else float(resolution)
    x_start, x_end = viewport.x_domain

    xs = scan_grid(x_start, x_end, step, max_steps=config.max_scan_steps)
    if xs is None:
        return PlotResult.empty(viewport, step, aborted=True)

    with np.errstate(invalid="ignore", over="ignore"):
        y2 = curve.rhs(xs)
        real = y2 >= 0
        x_real = xs[real]
        y_pos = np.sqrt(y2[real])

    y_neg = -y_pos
    keep_pos = np.abs(y_pos - viewport.center_y) <= viewport.half_range
    keep_neg = np.abs(y_neg - viewport.center_y) <= viewport.half_range

    # Interleave (x, +y), (x, -y) so branch order survives the stable sort.
    pair_x = np.column_stack((x_real, x_real)).ravel()
    pair_y = np.column_stack((y_pos, y_neg)).ravel()
    keep = np.column_stack((keep_pos, keep_neg)).ravel()

    out_x = pair_x[keep]
    out_y = pair_y[keep]
    order = np.argsort(out_x, kind="stable")
    return PlotResult(out_x[order], out_y[order], viewport, step, scanned=int(xs.size))


__all__ = ["adaptive_resolution", "sample_curve", "scan_grid"]
