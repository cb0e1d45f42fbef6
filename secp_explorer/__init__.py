"""Top-level public API for the ``secp_explorer`` package.

This module re-exports the notebook-facing surface so users can import from a
single namespace, for example:

>>> from secp_explorer import CurveExplorer, explore  # doctest: +SKIP

It exposes both the widget-level explorer and the pure building blocks
(viewport transitions and the curve sampler) for use outside a notebook.
"""

from .curve import SECP256K1, EllipticCurve
from .CurveExplorer import CurveExplorer, explore
from .explorer_config import DEFAULT_CONFIG, ExplorerConfig
from .explorer_layout import ExplorerLayout, OneShotOutput
from .explorer_plot import CurveTrace
from .InputConvert import InputConvert
from .PlotResult import CurvePoint, PlotResult
from .sampling import adaptive_resolution, sample_curve
from .viewport import (
    COMMANDS,
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

__version__ = "0.1.0"
