"""Viewport model and the legal transitions between viewports.

Purpose
-------
This module defines ``Viewport``, the square window of the plane currently on
screen, and the seven commands that move it: zoom in/out, pan in four
directions and reset. Transitions are total functions ``Viewport -> Viewport``;
``ViewportState`` keeps the current value and dispatches commands by name.

Notes
-----
The half-range always stays inside ``[config.min_half_range,
config.max_half_range]``. A zoom that would cross a bound lands exactly on it,
and a zoom requested while already at the bound is a no-op.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from .explorer_config import DEFAULT_CONFIG, ExplorerConfig
from .InputConvert import InputConvert

logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


@dataclass(frozen=True)
class Viewport:
    """Center and half-range of the visible square.

    Parameters
    ----------
    center_x : float
        Horizontal center.
    center_y : float
        Vertical center.
    half_range : float
        Half of the visible width (and height). Must be finite and > 0.

    Examples
    --------
    >>> Viewport(0, 0, 10).x_domain
    (-10.0, 10.0)
    """

    center_x: float
    center_y: float
    half_range: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "center_x", InputConvert(self.center_x, float))
        object.__setattr__(self, "center_y", InputConvert(self.center_y, float))
        half_range = InputConvert(self.half_range, float)
        if half_range <= 0:
            raise ValueError(f"half_range must be > 0, got {half_range!r}")
        object.__setattr__(self, "half_range", half_range)

    @classmethod
    def from_config(cls, config: ExplorerConfig = DEFAULT_CONFIG) -> "Viewport":
        """Return the configured initial viewport."""
        return cls(config.initial_center_x, config.initial_center_y, config.initial_half_range)

    @property
    def x_domain(self) -> tuple[float, float]:
        """Return ``(center_x - half_range, center_x + half_range)``."""
        return (self.center_x - self.half_range, self.center_x + self.half_range)

    @property
    def y_domain(self) -> tuple[float, float]:
        """Return ``(center_y - half_range, center_y + half_range)``."""
        return (self.center_y - self.half_range, self.center_y + self.half_range)

    def within(self, config: ExplorerConfig) -> bool:
        """Return True when ``half_range`` respects the configured zoom bounds."""
        return config.min_half_range <= self.half_range <= config.max_half_range


# SECTION: transitions [id: transitions]
# =============================================================================


def zoom_in(viewport: Viewport, config: ExplorerConfig = DEFAULT_CONFIG) -> Viewport:
    """Halve the half-range, never going below ``config.min_half_range``."""
    if viewport.half_range <= config.min_half_range:
        return viewport
    half_range = max(viewport.half_range / 2.0, config.min_half_range)
    return Viewport(viewport.center_x, viewport.center_y, half_range)


def zoom_out(viewport: Viewport, config: ExplorerConfig = DEFAULT_CONFIG) -> Viewport:
    """Double the half-range, never going above ``config.max_half_range``."""
    if viewport.half_range >= config.max_half_range:
        return viewport
    half_range = min(viewport.half_range * 2.0, config.max_half_range)
    return Viewport(viewport.center_x, viewport.center_y, half_range)


def _pan(viewport: Viewport, dx: float, dy: float) -> Viewport:
    step = viewport.half_range / 2.0
    center_x = viewport.center_x + dx * step
    center_y = viewport.center_y + dy * step
    if not (math.isfinite(center_x) and math.isfinite(center_y)):
        return viewport
    return Viewport(center_x, center_y, viewport.half_range)


def pan_left(viewport: Viewport, config: ExplorerConfig = DEFAULT_CONFIG) -> Viewport:
    """Move the center left by half of the half-range."""
    return _pan(viewport, -1.0, 0.0)


def pan_right(viewport: Viewport, config: ExplorerConfig = DEFAULT_CONFIG) -> Viewport:
    """Move the center right by half of the half-range."""
    return _pan(viewport, 1.0, 0.0)


def pan_up(viewport: Viewport, config: ExplorerConfig = DEFAULT_CONFIG) -> Viewport:
    """Move the center up by half of the half-range."""
    return _pan(viewport, 0.0, 1.0)


def pan_down(viewport: Viewport, config: ExplorerConfig = DEFAULT_CONFIG) -> Viewport:
    """Move the center down by half of the half-range."""
    return _pan(viewport, 0.0, -1.0)


def reset(viewport: Viewport, config: ExplorerConfig = DEFAULT_CONFIG) -> Viewport:
    """Return the configured initial viewport."""
    return Viewport.from_config(config)


Transition = Callable[[Viewport, ExplorerConfig], Viewport]

COMMANDS: Dict[str, Transition] = {
    "zoom_in": zoom_in,
    "zoom_out": zoom_out,
    "pan_left": pan_left,
    "pan_right": pan_right,
    "pan_up": pan_up,
    "pan_down": pan_down,
    "reset": reset,
}


# SECTION: ViewportState [id: ViewportState]
# =============================================================================


class ViewportState:
    """Own the current viewport and apply commands to it."""

    def __init__(
        self,
        config: ExplorerConfig = DEFAULT_CONFIG,
        viewport: Optional[Viewport] = None,
    ) -> None:
        self._config = config
        initial = viewport if viewport is not None else Viewport.from_config(config)
        if not initial.within(config):
            raise ValueError(
                f"half_range {initial.half_range!r} outside "
                f"[{config.min_half_range!r}, {config.max_half_range!r}]"
            )
        self._viewport = initial

    @property
    def viewport(self) -> Viewport:
        """Return the current viewport."""
        return self._viewport

    @property
    def config(self) -> ExplorerConfig:
        return self._config

    def apply(self, command: str) -> bool:
        """Apply ``command`` and return whether the viewport changed.

        Raises
        ------
        KeyError
            If ``command`` is not one of :data:`COMMANDS`.
        """
        try:
            transition = COMMANDS[command]
        except KeyError:
            raise KeyError(
                f"Unknown viewport command: {command!r}. Expected one of {sorted(COMMANDS)}"
            ) from None

        before = self._viewport
        after = transition(before, self._config)
        if after == before:
            logger.debug(f"{command}: no-op at {before}")
            return False
        self._viewport = after
        logger.debug(f"{command}: {before} -> {after}")
        return True


__all__ = [
    "COMMANDS",
    "Viewport",
    "ViewportState",
    "pan_down",
    "pan_left",
    "pan_right",
    "pan_up",
    "reset",
    "zoom_in",
    "zoom_out",
]
