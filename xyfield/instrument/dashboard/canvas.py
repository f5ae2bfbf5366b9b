from __future__ import annotations

from typing import Optional

import matplotlib.gridspec as gridspec
import matplotlib.pyplot as plt
import numpy as np
from matplotlib.collections import LineCollection

BACKGROUND = "#1a1a1a"
PANEL = "#262626"
MONOCHROME = "white"


class FieldCanvas:
    """Arrow field on top, a strip of controls underneath.

    The field axes use pixel data coordinates with y growing downward, so
    pointer `xdata`/`ydata` are canvas-local positions.
    """

    def __init__(self, *, figsize: tuple[float, float] = (9, 10), line_width: float = 1.5) -> None:
        self.fig = plt.figure(figsize=figsize, facecolor=BACKGROUND)
        self.fig.subplots_adjust(left=0.02, right=0.98, top=0.98, bottom=0.02)

        gs_main = gridspec.GridSpec(
            2,
            1,
            figure=self.fig,
            height_ratios=[88, 12],
            hspace=0.06,
        )
        self.ax_field = self.fig.add_subplot(gs_main[0, 0])
        self.ax_field.set_facecolor(BACKGROUND)
        self.ax_field.set_axis_off()

        # Controls: two sliders on the left, three buttons on the right.
        gs_controls = gs_main[1, 0].subgridspec(
            2,
            4,
            width_ratios=[50, 16, 16, 18],
            hspace=0.5,
            wspace=0.25,
        )
        self.ax_speed = self.fig.add_subplot(gs_controls[0, 0])
        self.ax_temperature = self.fig.add_subplot(gs_controls[1, 0])
        self.ax_reset = self.fig.add_subplot(gs_controls[:, 1])
        self.ax_pause = self.fig.add_subplot(gs_controls[:, 2])
        self.ax_rotate = self.fig.add_subplot(gs_controls[:, 3])
        for ax in (self.ax_speed, self.ax_temperature):
            ax.set_facecolor(PANEL)

        self.arrows = LineCollection([], linewidths=line_width, colors=MONOCHROME, capstyle="round")
        self.ax_field.add_collection(self.arrows)
        self.set_extent(*self.field_pixel_size())

        self.fig.canvas.draw_idle()

    def field_pixel_size(self) -> tuple[float, float]:
        bbox = self.ax_field.get_window_extent()
        return float(bbox.width), float(bbox.height)

    def set_extent(self, width: float, height: float) -> None:
        self.ax_field.set_xlim(0.0, width)
        self.ax_field.set_ylim(height, 0.0)

    def render(self, segments: np.ndarray, colors: Optional[np.ndarray] = None) -> list:
        self.arrows.set_segments(segments)
        self.arrows.set_color(MONOCHROME if colors is None else colors)
        return [self.arrows]
