"""Configuration contract for :class:`secp_explorer.CurveExplorer`.

All tunables of the explorer live in one frozen dataclass so the viewport
rules, the sampler and the widgets read the same numbers. Values are coerced
with :func:`InputConvert`, so strings like ``"1e-4"`` or ``"2**-10"`` are
accepted wherever a number is expected.
"""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from typing import Any

from .InputConvert import InputConvert

_FLOAT_FIELDS = (
    "initial_center_x",
    "initial_center_y",
    "initial_half_range",
    "min_half_range",
    "max_half_range",
    "min_resolution",
)
_INT_FIELDS = (
    "sample_count",
    "max_scan_steps",
    "tooltip_decimals",
    "readout_decimals",
    "resolution_decimals",
)


@dataclass(frozen=True)
class ExplorerConfig:
    """Viewport bounds, sampling density and display options.

    Parameters
    ----------
    initial_center_x, initial_center_y : float
        Center of the viewport at startup and after ``reset``.
    initial_half_range : float
        Half-range at startup and after ``reset``.
    min_half_range : float
        Smallest permitted half-range (the deepest zoom).
    max_half_range : float
        Largest permitted half-range.
    sample_count : int
        Number of sampling steps per half-range; the step size is
        ``max(min_resolution, half_range / sample_count)``.
    min_resolution : float
        Floor for the sampling step.
    max_scan_steps : int
        Hard cap on the number of x-values one sampling pass may visit. Must
        be at least ``2 * sample_count + 1``, the count at the adaptive step.
    tooltip_decimals : int
        Decimals shown in chart hover labels.
    readout_decimals : int
        Decimals of the range/center readouts.
    resolution_decimals : int
        Decimals of the resolution readout.
    plot_height : str
        CSS height of the chart container. Plotly needs a real pixel height.
    line_color : str
        Curve color.
    title : str
        Title shown above the controls.

    Raises
    ------
    ValueError
        If a value cannot be converted or violates the bounds described above.

    Examples
    --------
    >>> cfg = ExplorerConfig(min_half_range="1e-3")
    >>> cfg.min_half_range
    0.001
    >>> cfg.with_overrides(sample_count=100).sample_count
    100
    """

    initial_center_x: float = 0.0
    initial_center_y: float = 0.0
    initial_half_range: float = 10.0
    min_half_range: float = 1e-4
    max_half_range: float = 1000.0
    sample_count: int = 500
    min_resolution: float = 1e-6
    max_scan_steps: int = 1_000_000
    tooltip_decimals: int = 4
    readout_decimals: int = 2
    resolution_decimals: int = 4
    plot_height: str = "384px"
    line_color: str = "#2563eb"
    title: str = "Detailed SECP256K1 Elliptic Curve"

    def __post_init__(self) -> None:
        for name in _FLOAT_FIELDS:
            object.__setattr__(self, name, _convert(name, getattr(self, name), float))
        for name in _INT_FIELDS:
            object.__setattr__(self, name, _convert(name, getattr(self, name), int))

        if self.min_half_range <= 0:
            raise ValueError(f"min_half_range must be > 0, got {self.min_half_range!r}")
        if self.max_half_range < self.min_half_range:
            raise ValueError(
                f"max_half_range ({self.max_half_range!r}) must be >= min_half_range "
                f"({self.min_half_range!r})"
            )
        if not self.min_half_range <= self.initial_half_range <= self.max_half_range:
            raise ValueError(
                f"initial_half_range must lie in [{self.min_half_range!r}, "
                f"{self.max_half_range!r}], got {self.initial_half_range!r}"
            )
        if self.sample_count < 1:
            raise ValueError(f"sample_count must be >= 1, got {self.sample_count!r}")
        if self.min_resolution < 0:
            raise ValueError(f"min_resolution must be >= 0, got {self.min_resolution!r}")
        if self.max_scan_steps < 1:
            raise ValueError(f"max_scan_steps must be >= 1, got {self.max_scan_steps!r}")
        if 2 * self.sample_count + 1 > self.max_scan_steps:
            raise ValueError(
                f"max_scan_steps ({self.max_scan_steps!r}) must be >= 2 * sample_count + 1 "
                f"({2 * self.sample_count + 1!r}), or every default-resolution scan aborts"
            )
        for name in ("tooltip_decimals", "readout_decimals", "resolution_decimals"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be >= 0, got {getattr(self, name)!r}")

    def with_overrides(self, **overrides: Any) -> "ExplorerConfig":
        """Return a validated copy with ``overrides`` applied.

        Raises
        ------
        TypeError
            If an override names an unknown field.
        """
        known = {f.name for f in fields(self)}
        unknown = sorted(set(overrides) - known)
        if unknown:
            raise TypeError(f"Unknown ExplorerConfig field(s): {', '.join(unknown)}")
        return replace(self, **overrides)


def _convert(name: str, value: Any, dest_type: type) -> Any:
    try:
        return InputConvert(value, dest_type)
    except ValueError as e:
        raise ValueError(f"Invalid {name}: {e}") from e


DEFAULT_CONFIG = ExplorerConfig()


__all__ = ["DEFAULT_CONFIG", "ExplorerConfig"]
