"""Widgets and pointer wiring for the field dashboard.

Handlers only forward to the simulation's command methods; grids change
on the next animation frame.
"""

from __future__ import annotations

from typing import Callable, Optional

import matplotlib
from matplotlib.widgets import Button, Slider

from xyfield.field.config import MAX_SPEED, MIN_SPEED
from xyfield.field.simulator import XYSimulation
from xyfield.instrument.dashboard.canvas import FieldCanvas

ROTATE_KEY = "r"


class ControlPanel:
    """Speed/temperature sliders, reset and pause buttons, hold-to-rotate."""

    def __init__(
        self,
        canvas: FieldCanvas,
        simulation: XYSimulation,
        *,
        on_reset: Optional[Callable[[], None]] = None,
        on_pause: Optional[Callable[[bool], None]] = None,
    ) -> None:
        self.canvas = canvas
        self.sim = simulation
        self._on_reset = on_reset if on_reset is not None else simulation.request_reset
        self._on_pause = on_pause
        self._rotating_by: Optional[str] = None  # "pointer" or "key"

        self.speed_slider = Slider(
            canvas.ax_speed,
            "speed",
            MIN_SPEED,
            MAX_SPEED,
            valinit=simulation.params.speed,
            valstep=1,
            color="#3498db",
        )
        self.temperature_slider = Slider(
            canvas.ax_temperature,
            "temperature",
            0.0,
            1.0,
            valinit=simulation.params.temperature,
            color="#e74c3c",
        )
        for slider in (self.speed_slider, self.temperature_slider):
            slider.label.set_color("#ccc")
            slider.valtext.set_color("#ccc")

        self.reset_button = Button(canvas.ax_reset, "Reset", color="#333", hovercolor="#444")
        self.pause_button = Button(canvas.ax_pause, "Pause", color="#333", hovercolor="#444")
        self.rotate_button = Button(canvas.ax_rotate, "Hold to rotate", color="#333", hovercolor="#444")
        for button in (self.reset_button, self.pause_button, self.rotate_button):
            button.label.set_color("#ddd")
            button.label.set_fontsize(8)

        self.speed_slider.on_changed(self._speed_changed)
        self.temperature_slider.on_changed(self._temperature_changed)
        self.reset_button.on_clicked(lambda _event: self._on_reset())
        self.pause_button.on_clicked(lambda _event: self.toggle_pause())

        # The default toolbar binds `r` to "home"; take it while the panel is live.
        self._home_keymap: Optional[list[str]] = list(matplotlib.rcParams["keymap.home"])
        matplotlib.rcParams["keymap.home"] = [k for k in self._home_keymap if k != ROTATE_KEY]

        mpl = canvas.fig.canvas
        self._cids = [
            mpl.mpl_connect("button_press_event", self.on_press),
            mpl.mpl_connect("button_release_event", self.on_release),
            mpl.mpl_connect("motion_notify_event", self.on_motion),
            mpl.mpl_connect("axes_leave_event", self.on_axes_leave),
            mpl.mpl_connect("figure_leave_event", self.on_figure_leave),
            mpl.mpl_connect("key_press_event", self.on_key_press),
            mpl.mpl_connect("key_release_event", self.on_key_release),
        ]

    def disconnect(self) -> None:
        for cid in self._cids:
            self.canvas.fig.canvas.mpl_disconnect(cid)
        self._cids = []
        if self._home_keymap is not None:
            matplotlib.rcParams["keymap.home"] = self._home_keymap
            self._home_keymap = None

    # Widgets

    def _speed_changed(self, value: float) -> None:
        self.sim.set_speed(int(round(value)))

    def _temperature_changed(self, value: float) -> None:
        self.sim.set_temperature(min(1.0, max(0.0, float(value))))

    def toggle_pause(self) -> None:
        if self.sim.paused:
            self.sim.resume()
            self.pause_button.label.set_text("Pause")
        else:
            self.sim.pause()
            self.pause_button.label.set_text("Resume")
        if self._on_pause is not None:
            self._on_pause(self.sim.paused)
        self.canvas.fig.canvas.draw_idle()

    # Pointer

    def on_press(self, event) -> None:
        if event.inaxes is self.canvas.ax_rotate:
            self._start_rotation("pointer")
        elif event.inaxes is self.canvas.ax_field:
            self.sim.pointer_press(event.xdata, event.ydata)

    def on_release(self, _event) -> None:
        self.sim.pointer_release()
        if self._rotating_by == "pointer":
            self._stop_rotation()

    def on_motion(self, event) -> None:
        if self._rotating_by == "pointer" and event.inaxes is not self.canvas.ax_rotate:
            self._stop_rotation()
        if not self.sim.interaction.active:
            return
        if event.inaxes is self.canvas.ax_field:
            self.sim.pointer_move(event.xdata, event.ydata)
        else:
            self.sim.pointer_move(None, None)

    def on_axes_leave(self, event) -> None:
        if event.inaxes is self.canvas.ax_rotate:
            if self._rotating_by == "pointer":
                self._stop_rotation()
        elif event.inaxes is self.canvas.ax_field:
            self.sim.pointer_release()

    def on_figure_leave(self, _event) -> None:
        self.sim.pointer_release()
        self._stop_rotation()

    # Keyboard: holding `r` rotates as well.

    def on_key_press(self, event) -> None:
        if event.key == ROTATE_KEY:
            self._start_rotation("key")

    def on_key_release(self, event) -> None:
        if event.key == ROTATE_KEY:
            self._stop_rotation()

    def _start_rotation(self, source: str) -> None:
        self._rotating_by = source
        self.sim.rotation_start()

    def _stop_rotation(self) -> None:
        if not self.sim.rotation.active:
            return
        self._rotating_by = None
        self.sim.rotation_stop()
        self.canvas.fig.canvas.draw_idle()

