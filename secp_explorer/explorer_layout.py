"""Explorer layout primitives.

This module builds the notebook widget tree used by :class:`CurveExplorer`:
a title bar, the zoom/pan command pad, text readouts of the current viewport,
the chart container and a static panel of curve properties.
"""

from __future__ import annotations

import html
from collections.abc import Callable, Sequence
from typing import Any, Dict

import ipywidgets as widgets
from IPython.display import display

# SECTION: OneShotOutput [id: OneShotOutput]
# =============================================================================


class OneShotOutput(widgets.Output):
    """
    An Output widget that can only be displayed once.

    Widgets are live objects tied to the frontend; showing the same explorer
    twice gives two views fighting over one state. Displaying this output a
    second time raises ``RuntimeError`` instead.

    Examples
    --------
    >>> out = OneShotOutput()
    >>> out.has_been_displayed
    False
    """

    __slots__ = ("_displayed",)

    def __init__(self) -> None:
        super().__init__()
        self._displayed = False

    def _repr_mimebundle_(
        self, include: Any = None, exclude: Any = None, **kwargs: Any
    ) -> Any:
        """IPython rich display hook; refuses a second display."""
        if self._displayed:
            raise RuntimeError(
                "OneShotOutput has already been displayed. "
                "This widget supports only one-time display."
            )
        self._displayed = True
        return super()._repr_mimebundle_(include=include, exclude=exclude, **kwargs)

    @property
    def has_been_displayed(self) -> bool:
        """Return True once the widget has been displayed."""
        return self._displayed


# =============================================================================
# SECTION: ExplorerLayout (The View) [id: ExplorerLayout]
# =============================================================================

_BUTTON_STYLE = dict(button_color="#3b82f6", text_color="white")

# name -> (label, tooltip)
COMMAND_BUTTONS: Dict[str, tuple[str, str]] = {
    "zoom_in": ("Zoom In", "Halve the visible range"),
    "zoom_out": ("Zoom Out", "Double the visible range"),
    "pan_left": ("←", "Move left by half the range"),
    "pan_up": ("↑", "Move up by half the range"),
    "pan_down": ("↓", "Move down by half the range"),
    "pan_right": ("→", "Move right by half the range"),
    "reset": ("Reset", "Return to the initial view"),
}


class ExplorerLayout:
    """
    Manages the widget hierarchy of a :class:`CurveExplorer`.

    Responsibilities:
    - Building the title bar, command pad, readouts and plot container.
    - Exposing one button per viewport command.
    - Disabling the command pad while a recompute is running.
    - Rendering the static curve-properties list.
    """

    def __init__(
        self,
        title: str = "",
        subtitle: str = "",
        *,
        plot_height: str = "384px",
        properties: Sequence[str] = (),
    ) -> None:
        """Build the widget tree.

        Parameters
        ----------
        title : str, optional
            Heading text (HTML/LaTeX).
        subtitle : str, optional
            Line under the title, typically the curve equation.
        plot_height : str, optional
            CSS height of the chart container.
        properties : sequence[str], optional
            Bullet items of the properties panel.
        """
        # 1. Title Bar
        self.title_html = widgets.HTMLMath(value="", layout=widgets.Layout(margin="0px"))
        self.subtitle_html = widgets.HTMLMath(value="", layout=widgets.Layout(margin="0 0 6px 0"))
        self.set_title(title)
        self.set_subtitle(subtitle)

        # 2. Command pad: zoom row on top, arrow grid below.
        self.buttons: Dict[str, widgets.Button] = {
            name: widgets.Button(
                description=label,
                tooltip=tip,
                style=dict(_BUTTON_STYLE),
                layout=widgets.Layout(width="auto", min_width="56px"),
            )
            for name, (label, tip) in COMMAND_BUTTONS.items()
        }
        zoom_row = widgets.HBox(
            [self.buttons["zoom_in"], self.buttons["zoom_out"], self.buttons["reset"]],
            layout=widgets.Layout(gap="8px"),
        )
        arrow_grid = widgets.GridBox(
            [
                widgets.Box(),
                self.buttons["pan_up"],
                widgets.Box(),
                self.buttons["pan_left"],
                self.buttons["pan_down"],
                self.buttons["pan_right"],
            ],
            layout=widgets.Layout(
                grid_template_columns="repeat(3, 56px)",
                grid_gap="8px",
            ),
        )
        self.command_pad = widgets.VBox(
            [zoom_row, arrow_grid], layout=widgets.Layout(gap="8px")
        )

        # 3. Readouts
        self.range_label = widgets.HTML(value="")
        self.center_label = widgets.HTML(value="")
        self.resolution_label = widgets.HTML(value="")
        self.readouts = widgets.VBox(
            [self.range_label, self.center_label, self.resolution_label],
            layout=widgets.Layout(gap="2px"),
        )

        self.controls = widgets.HBox(
            [self.command_pad, self.readouts],
            layout=widgets.Layout(gap="16px", margin="0 0 8px 0", align_items="flex-start"),
        )

        # 4. Plot Area: Plotly needs a real pixel height.
        self.plot_container = widgets.Box(
            children=(),
            layout=widgets.Layout(
                width="100%",
                height=plot_height,
                min_width="320px",
                margin="0px",
                padding="0px",
            ),
        )

        # 5. Properties panel
        self.properties_header = widgets.HTML(
            "<b>Key Properties</b>", layout=widgets.Layout(margin="10px 0 0 0")
        )
        self.properties_html = widgets.HTMLMath(value="")
        self.set_properties(properties)

        # 6. Root Widget
        self.root_widget = widgets.VBox(
            [
                self.title_html,
                self.subtitle_html,
                self.controls,
                self.plot_container,
                self.properties_header,
                self.properties_html,
            ],
            layout=widgets.Layout(
                width="100%",
                padding="12px",
                border="1px solid rgba(15,23,42,0.08)",
                border_radius="10px",
            ),
        )

    @property
    def output_widget(self) -> OneShotOutput:
        """Return a OneShotOutput wrapping the layout, ready for display."""
        out = OneShotOutput()
        with out:
            display(self.root_widget)
        return out

    def set_title(self, text: str) -> None:
        self.title_html.value = f"<h2 style='margin:0'>{text}</h2>" if text else ""

    def set_subtitle(self, latex: str) -> None:
        self.subtitle_html.value = rf"\({latex}\)" if latex else ""

    def set_properties(self, items: Sequence[str]) -> None:
        """Render ``items`` as a bullet list; hide the panel when empty."""
        items = tuple(items)
        if items:
            self.properties_html.value = "<ul>" + "".join(f"<li>{item}</li>" for item in items) + "</ul>"
        else:
            self.properties_html.value = ""
        display_value = "block" if items else "none"
        self.properties_header.layout.display = display_value
        self.properties_html.layout.display = display_value

    def set_plot_widget(self, widget: widgets.Widget) -> None:
        """Place the chart widget in the plot container."""
        self.plot_container.children = (widget,)

    def set_readouts(self, *, half_range: str, center_x: str, center_y: str, resolution: str) -> None:
        """Update the readout labels with preformatted numbers."""
        self.range_label.value = f"View Range: ±{html.escape(half_range)}"
        self.center_label.value = f"Center: ({html.escape(center_x)}, {html.escape(center_y)})"
        self.resolution_label.value = f"Resolution: {html.escape(resolution)}"

    def set_busy(self, busy: bool) -> None:
        """Disable (``True``) or re-enable (``False``) every command button."""
        for button in self.buttons.values():
            button.disabled = bool(busy)

    def on_command(self, callback: Callable[[str], None]) -> None:
        """Call ``callback(name)`` whenever a command button is clicked."""
        for name, button in self.buttons.items():
            button.on_click(lambda _btn, _name=name: callback(_name))


__all__ = ["COMMAND_BUTTONS", "ExplorerLayout", "OneShotOutput"]
