"""Immutable result of one curve sampling pass.

A ``PlotResult`` holds the sampled points for one viewport, sorted by x, with
the viewport snapshot and step size that produced them. It is what the
rendering layer consumes: points plus the x/y axis domains.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterator, NamedTuple

import numpy as np

from .viewport import Viewport


class CurvePoint(NamedTuple):
    """One sampled curve coordinate."""

    x: float
    y: float


@dataclass(frozen=True, eq=False)
class PlotResult:
    """Immutable record of one sampling pass.

    Parameters
    ----------
    xs : numpy.ndarray
        Sampled x-coordinates, ascending. Read-only.
    ys : numpy.ndarray
        Matching y-coordinates. Read-only.
    viewport : Viewport
        Viewport the pass was computed for.
    resolution : float
        Step between consecutive scanned x-values.
    scanned : int
        Number of x-values visited by the scan.
    aborted : bool
        True when the scan was refused because the step or bounds were not
        usable (non-finite, non-positive, or too many steps).
    """

    xs: np.ndarray
    ys: np.ndarray
    viewport: Viewport
    resolution: float
    scanned: int = 0
    aborted: bool = False

    def __post_init__(self) -> None:
        xs = np.array(self.xs, dtype=float)
        ys = np.array(self.ys, dtype=float)
        if xs.shape != ys.shape or xs.ndim != 1:
            raise ValueError(f"xs and ys must be 1-d and equally long, got {xs.shape} and {ys.shape}")
        xs.setflags(write=False)
        ys.setflags(write=False)
        object.__setattr__(self, "xs", xs)
        object.__setattr__(self, "ys", ys)

    @classmethod
    def empty(cls, viewport: Viewport, resolution: float, *, aborted: bool = False) -> "PlotResult":
        """Return a result with no points."""
        return cls(np.empty(0), np.empty(0), viewport, resolution, scanned=0, aborted=aborted)

    @property
    def x_domain(self) -> tuple[float, float]:
        return self.viewport.x_domain

    @property
    def y_domain(self) -> tuple[float, float]:
        return self.viewport.y_domain

    @property
    def points(self) -> tuple[CurvePoint, ...]:
        """Return the points as ``CurvePoint`` tuples, in x order."""
        return tuple(CurvePoint(float(x), float(y)) for x, y in zip(self.xs, self.ys))

    def to_render_payload(self) -> Dict[str, Any]:
        """Return ``{"points", "x_domain", "y_domain"}`` for a chart widget."""
        return {
            "points": [{"x": p.x, "y": p.y} for p in self.points],
            "x_domain": list(self.x_domain),
            "y_domain": list(self.y_domain),
        }

    def __len__(self) -> int:
        return int(self.xs.size)

    def __iter__(self) -> Iterator[CurvePoint]:
        return iter(self.points)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PlotResult):
            return NotImplemented
        return (
            self.viewport == other.viewport
            and self.resolution == other.resolution
            and self.scanned == other.scanned
            and self.aborted == other.aborted
            and self.xs.tobytes() == other.xs.tobytes()
            and self.ys.tobytes() == other.ys.tobytes()
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return (
            f"PlotResult(points={len(self)}, viewport={self.viewport!r}, "
            f"resolution={self.resolution!r})"
        )


__all__ = ["CurvePoint", "PlotResult"]
