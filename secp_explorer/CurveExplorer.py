"""Interactive explorer orchestration for the real SECP256K1 curve.

Purpose
-------
This module provides the public ``CurveExplorer`` class and the ``explore``
helper. An explorer shows ``y**2 = x**3 + 7`` over the reals in a Plotly
chart and lets the user zoom and pan the viewport with buttons; every command
resamples the curve for the new window.

Concepts and structure
----------------------
The implementation is composition-based:

- ``CurveExplorer`` coordinates commands, sampling and rendering.
- ``ViewportState`` (``viewport.py``) owns the current viewport and its legal
  transitions.
- ``sample_curve`` (``sampling.py``) turns a viewport into a ``PlotResult``.
- ``CurveTrace`` (``explorer_plot.py``) pushes a result into the Plotly trace.
- ``ExplorerLayout`` (``explorer_layout.py``) owns the widget tree.

Control flow for one command::

    button click -> apply(name) -> ViewportState.apply
                 -> render() -> sample_curve -> CurveTrace.apply
                 -> readouts -> render hooks

Important gotchas
-----------------
- Rendering is synchronous. While it runs, ``is_recomputing`` is True and the
  command buttons are disabled; both are restored in a ``finally`` block.
- A command that does not change the viewport (zoom at a bound) does not
  trigger a resample.

Logging
-------
This module uses the standard Python ``logging`` framework and installs a
``NullHandler``, so nothing is shown unless logging is configured::

    import logging
    logging.basicConfig(level=logging.INFO)   # or logging.DEBUG

Examples
--------
>>> from secp_explorer import CurveExplorer
>>> explorer = CurveExplorer()
>>> explorer.apply("zoom_in")  # doctest: +SKIP
>>> explorer  # doctest: +SKIP
"""

from __future__ import annotations

import itertools
import logging
import time
import warnings
from typing import Any, Callable, Dict, Hashable, Optional

import plotly.graph_objects as go
from IPython.display import display

from .curve import SECP256K1, EllipticCurve
from .explorer_config import DEFAULT_CONFIG, ExplorerConfig
from .explorer_layout import ExplorerLayout
from .explorer_plot import CurveTrace
from .PlotResult import PlotResult
from .sampling import sample_curve
from .viewport import COMMANDS, Viewport, ViewportState

# Module logger
# - Uses a NullHandler so importing this module never configures global logging.
# - Callers can enable logs via standard logging configuration.
logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())

RenderHook = Callable[[PlotResult], Any]


class CurveExplorer:
    """
    An interactive Plotly view of a real elliptic curve with zoom/pan buttons.

    Key features
    ------------
    - Seven commands: ``zoom_in``, ``zoom_out``, ``pan_left``, ``pan_right``,
      ``pan_up``, ``pan_down`` and ``reset``.
    - Adaptive sampling: the step shrinks with the visible range so the curve
      keeps a constant on-screen density.
    - Readouts of the visible range, center and sampling resolution.
    - Render hooks receiving every fresh ``PlotResult``.

    Examples
    --------
    >>> explorer = CurveExplorer()
    >>> explorer.viewport.half_range
    10.0
    >>> explorer.apply("pan_right")
    True
    >>> explorer.viewport.center_x
    5.0
    """

    __slots__ = [
        "_config", "_curve", "_state", "_layout", "_figure", "_trace", "_result",
        "_recomputing", "_hooks", "_hook_ids", "_render_info_last_log_t",
        "_render_debug_last_log_t", "_has_been_displayed",
    ]

    def __init__(
        self,
        config: Optional[ExplorerConfig] = None,
        *,
        curve: EllipticCurve = SECP256K1,
        viewport: Optional[Viewport] = None,
        debug: bool = False,
        **config_overrides: Any,
    ) -> None:
        """Create an explorer and render the initial viewport.

        Parameters
        ----------
        config : ExplorerConfig, optional
            Base configuration. Defaults to :data:`DEFAULT_CONFIG`.
        curve : EllipticCurve, optional
            Curve to display. Defaults to ``SECP256K1``.
        viewport : Viewport, optional
            Starting viewport instead of the configured initial one. ``reset``
            still returns to the configured one.
        debug : bool, optional
            Set this module's logger to DEBUG.
        **config_overrides : Any
            Field overrides applied on top of ``config``
            (e.g. ``sample_count=200``).

        Raises
        ------
        ValueError
            If the configuration or the starting viewport is invalid.
        TypeError
            If an override names an unknown configuration field.
        """
        base = config if config is not None else DEFAULT_CONFIG
        self._config = base.with_overrides(**config_overrides) if config_overrides else base
        self._curve = curve
        if debug:
            logger.setLevel(logging.DEBUG)

        # 1. Viewport model
        self._state = ViewportState(self._config, viewport)

        # 2. Layout (View)
        self._layout = ExplorerLayout(
            title=self._config.title,
            subtitle=curve.latex,
            plot_height=self._config.plot_height,
            properties=curve.properties,
        )

        # 3. Plotly runtime
        self._figure = go.FigureWidget()
        self._figure.update_layout(**self._default_figure_layout())
        self._trace = CurveTrace(
            self._figure,
            curve=curve,
            name="y",
            color=self._config.line_color,
            tooltip_decimals=self._config.tooltip_decimals,
        )
        self._layout.set_plot_widget(self._figure)

        # 4. State
        self._result: Optional[PlotResult] = None
        self._recomputing = False
        self._hooks: Dict[Hashable, RenderHook] = {}
        self._hook_ids = itertools.count()
        self._has_been_displayed = False
        self._render_info_last_log_t = 0.0
        self._render_debug_last_log_t = 0.0

        # 5. Bind Events
        self._layout.on_command(self.apply)

        self.render(reason="init")

    # --- Properties ---

    @property
    def config(self) -> ExplorerConfig:
        return self._config

    @property
    def curve(self) -> EllipticCurve:
        return self._curve

    @property
    def viewport(self) -> Viewport:
        """Return the current viewport."""
        return self._state.viewport

    @property
    def result(self) -> Optional[PlotResult]:
        """Return the most recent sampling result."""
        return self._result

    @property
    def is_recomputing(self) -> bool:
        """Return True while a synchronous resample is in progress."""
        return self._recomputing

    @property
    def layout(self) -> ExplorerLayout:
        return self._layout

    @property
    def figure_widget(self) -> go.FigureWidget:
        """Return the underlying Plotly FigureWidget."""
        return self._figure

    @property
    def trace(self) -> CurveTrace:
        return self._trace

    def _default_figure_layout(self) -> Dict[str, Any]:
        """Return the Plotly layout defaults for the chart."""
        axis = dict(
            type="linear",
            zeroline=True,
            zerolinewidth=1.5,
            zerolinecolor="#334155",
            showline=True,
            linecolor="#94a3b8",
            mirror=True,
            ticks="outside",
            showgrid=True,
            gridcolor="rgba(148,163,184,0.35)",
            griddash="dash",
            autorange=False,
        )
        return dict(
            autosize=True,
            template="plotly_white",
            showlegend=False,
            dragmode=False,
            hovermode="closest",
            margin=dict(l=60, r=30, t=20, b=50),
            font=dict(size=13, color="#1f2933"),
            paper_bgcolor="#ffffff",
            plot_bgcolor="#ffffff",
            xaxis=dict(title=dict(text="x"), **axis),
            yaxis=dict(title=dict(text="y"), **axis),
        )

    # --- Commands ---

    def apply(self, command: str) -> bool:
        """Run one viewport command and resample when the viewport changed.

        Parameters
        ----------
        command : str
            One of ``zoom_in``, ``zoom_out``, ``pan_left``, ``pan_right``,
            ``pan_up``, ``pan_down``, ``reset``.

        Returns
        -------
        bool
            Whether the viewport changed.

        Raises
        ------
        KeyError
            If ``command`` is unknown.
        """
        if self._recomputing:
            logger.debug(f"{command}: ignored while recomputing")
            return False
        changed = self._state.apply(command)
        if changed:
            self.render(reason=command)
        return changed

    def zoom_in(self) -> bool:
        return self.apply("zoom_in")

    def zoom_out(self) -> bool:
        return self.apply("zoom_out")

    def pan_left(self) -> bool:
        return self.apply("pan_left")

    def pan_right(self) -> bool:
        return self.apply("pan_right")

    def pan_up(self) -> bool:
        return self.apply("pan_up")

    def pan_down(self) -> bool:
        return self.apply("pan_down")

    def reset(self) -> bool:
        return self.apply("reset")

    @staticmethod
    def commands() -> tuple[str, ...]:
        """Return the names accepted by :meth:`apply`."""
        return tuple(COMMANDS)

    # --- Rendering ---

    def render(self, reason: str = "manual") -> PlotResult:
        """
        Resample the curve for the current viewport and redraw.

        Parameters
        ----------
        reason : str, optional
            Why the render happened (a command name, ``"init"`` or
            ``"manual"``); used for logging.

        Returns
        -------
        PlotResult
            The fresh result, also available as :attr:`result`.
        """
        viewport = self._state.viewport
        self._recomputing = True
        self._layout.set_busy(True)
        try:
            result = sample_curve(viewport, curve=self._curve, config=self._config)
            self._trace.apply(result)
            self._result = result
            self._update_readouts(result)
        finally:
            self._recomputing = False
            self._layout.set_busy(False)

        self._log_render(reason, result)
        self._run_hooks(result)
        return result

    def _update_readouts(self, result: PlotResult) -> None:
        cfg = self._config
        viewport = result.viewport
        self._layout.set_readouts(
            half_range=f"{viewport.half_range:.{cfg.readout_decimals}f}",
            center_x=f"{viewport.center_x:.{cfg.readout_decimals}f}",
            center_y=f"{viewport.center_y:.{cfg.readout_decimals}f}",
            resolution=f"{result.resolution:.{cfg.resolution_decimals}f}",
        )

    # --- Hooks ---

    def add_render_hook(self, callback: RenderHook, *, hook_id: Optional[Hashable] = None, run_now: bool = False) -> Hashable:
        """Register ``callback(result)`` to run after every render.

        Parameters
        ----------
        callback : callable
            Receives the fresh :class:`PlotResult`.
        hook_id : hashable, optional
            Identifier; generated when omitted. Reusing an id replaces the
            previous hook.
        run_now : bool, optional
            Call the hook immediately with the current result. A failure
            warns, as it does after a render.

        Returns
        -------
        hashable
            The hook identifier.
        """
        if hook_id is None:
            hook_id = f"hook:{next(self._hook_ids)}"
        self._hooks[hook_id] = callback
        if run_now and self._result is not None:
            self._call_hook(hook_id, callback, self._result)
        return hook_id

    def remove_render_hook(self, hook_id: Hashable) -> None:
        """Remove a hook registered with :meth:`add_render_hook`.

        Raises
        ------
        KeyError
            If no hook has that id.
        """
        if hook_id not in self._hooks:
            raise KeyError(f"Unknown render hook: {hook_id!r}")
        del self._hooks[hook_id]

    def _run_hooks(self, result: PlotResult) -> None:
        for h_id, callback in list(self._hooks.items()):
            self._call_hook(h_id, callback, result)

    @staticmethod
    def _call_hook(h_id: Hashable, callback: RenderHook, result: PlotResult) -> None:
        try:
            callback(result)
        except Exception as e:
            warnings.warn(f"Render hook {h_id} failed: {e}")

    # --- Internal / Plumbing ---

    def _log_render(self, reason: str, result: PlotResult) -> None:
        """Log render information with rate-limiting."""
        now = time.monotonic()
        if logger.isEnabledFor(logging.INFO) and (now - self._render_info_last_log_t) > 1.0:
            self._render_info_last_log_t = now
            logger.info(f"render(reason={reason}) points={len(result)}")

        if logger.isEnabledFor(logging.DEBUG) and (now - self._render_debug_last_log_t) > 0.5:
            self._render_debug_last_log_t = now
            logger.debug(
                f"viewport x={result.x_domain} y={result.y_domain} "
                f"resolution={result.resolution} scanned={result.scanned}"
            )

    def _ipython_display_(self, **kwargs: Any) -> None:
        """Display the explorer's widget tree (IPython display hook)."""
        self._has_been_displayed = True
        display(self._layout.output_widget)

    @property
    def has_been_displayed(self) -> bool:
        """Return True once the explorer has been shown in a notebook."""
        return self._has_been_displayed

    def show(self) -> bool:
        """Display the explorer unless it has already been displayed.

        Returns
        -------
        bool
            Whether this call displayed it.
        """
        if self._has_been_displayed:
            return False
        display(self)
        self._has_been_displayed = True
        return True

    def __repr__(self) -> str:
        v = self.viewport
        return (
            f"CurveExplorer(curve={self._curve.name!r}, center=({v.center_x}, {v.center_y}), "
            f"half_range={v.half_range})"
        )


def explore(config: Optional[ExplorerConfig] = None, **kwargs: Any) -> CurveExplorer:
    """Create a :class:`CurveExplorer`; keyword arguments go to its constructor.

    Examples
    --------
    >>> explorer = explore(initial_half_range=4)  # doctest: +SKIP
    >>> explorer  # doctest: +SKIP
    """
    return CurveExplorer(config, **kwargs)


__all__ = ["CurveExplorer", "explore"]
