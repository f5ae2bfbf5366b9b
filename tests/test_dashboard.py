"""Dashboard wiring tests on the non-interactive Agg backend.

Events are fed to the ControlPanel handlers directly, the same way
matplotlib would deliver them.
"""

from __future__ import annotations

from types import SimpleNamespace

import matplotlib

matplotlib.use("Agg")

import pytest

from xyfield.field.config import FieldConfig
from xyfield.field.simulator import XYSimulation
import xyfield.instrument.dashboard as dashboard
from xyfield.instrument.dashboard.animation import Animation
from xyfield.instrument.dashboard.controls import ROTATE_KEY
from xyfield.instrument.dashboard.recorder import Recorder
from xyfield.instrument.dashboard.session import DashboardSession


@pytest.fixture
def session():
    sim = XYSimulation(FieldConfig(grid_size=(10, 10), cell_size=20.0, seed=5))
    s = DashboardSession(sim, fit_cells=12)
    yield s
    s.close()


def mouse(inaxes, x=None, y=None):
    return SimpleNamespace(inaxes=inaxes, xdata=x, ydata=y)


class TestSession:
    def test_headless_backend_does_not_show(self, session):
        assert session.show is False
        assert session.animation is None

    def test_lattice_fitted_to_field_axes(self, session):
        assert session.sim.dims == (12, 12)
        w, h = session.canvas.field_pixel_size()
        assert session.sim.cell_size == pytest.approx(min(w, h) / 12)

    def test_run_headless_draws_all_arrows(self, session):
        reports = session.run_headless(5)
        assert len(reports) == 5
        assert len(session.canvas.arrows.get_segments()) == 12 * 12 * 3

    def test_rejected_resize_keeps_lattice(self, session, monkeypatch):
        monkeypatch.setattr(session.canvas, "field_pixel_size", lambda: (0.0, 0.0))
        target = session.sim.target.clone()

        assert session.fit_to_window() is False
        assert session.sim.dims == (12, 12)
        assert (session.sim.target == target).all()

    def test_reset_while_paused_redraws(self, session):
        session.controls.toggle_pause()
        assert session.sim.paused
        before = session.sim.target.clone()

        session.reset()
        assert not (session.sim.target == before).all()
        assert session.sim.paused


class TestControls:
    def test_sliders_set_parameters(self, session):
        session.controls.speed_slider.set_val(3)
        session.controls.temperature_slider.set_val(0.4)
        assert session.sim.params.speed == 3
        assert session.sim.params.temperature == pytest.approx(0.4)

    def test_pause_button_toggles(self, session):
        controls = session.controls
        controls.toggle_pause()
        assert session.sim.paused
        assert controls.pause_button.label.get_text() == "Resume"

        controls.toggle_pause()
        assert not session.sim.paused
        assert controls.pause_button.label.get_text() == "Pause"

    def test_field_press_and_release(self, session):
        controls = session.controls
        controls.on_press(mouse(session.canvas.ax_field, 40.0, 50.0))
        assert session.sim.interaction.active
        assert (session.sim.interaction.x, session.sim.interaction.y) == (40.0, 50.0)

        controls.on_motion(mouse(session.canvas.ax_field, 60.0, 70.0))
        assert (session.sim.interaction.x, session.sim.interaction.y) == (60.0, 70.0)

        controls.on_release(mouse(None))
        assert not session.sim.interaction.active

    def test_motion_off_field_ends_interaction(self, session):
        controls = session.controls
        controls.on_press(mouse(session.canvas.ax_field, 40.0, 50.0))
        controls.on_motion(mouse(session.canvas.ax_reset, 0.5, 0.5))
        assert not session.sim.interaction.active

    def test_rotate_button_hold(self, session):
        controls = session.controls
        controls.on_press(mouse(session.canvas.ax_rotate, 0.5, 0.5))
        assert session.sim.rotation.active

        controls.on_release(mouse(session.canvas.ax_rotate, 0.5, 0.5))
        assert not session.sim.rotation.active

    def test_leaving_rotate_button_stops_rotation(self, session):
        controls = session.controls
        controls.on_press(mouse(session.canvas.ax_rotate, 0.5, 0.5))
        controls.on_motion(mouse(session.canvas.ax_field, 10.0, 10.0))
        assert not session.sim.rotation.active

    def test_figure_leave_stops_rotation(self, session):
        controls = session.controls
        controls.on_key_press(SimpleNamespace(key="r"))
        assert session.sim.rotation.active

        controls.on_figure_leave(SimpleNamespace())
        assert not session.sim.rotation.active

    def test_rotate_key(self, session):
        controls = session.controls
        controls.on_key_press(SimpleNamespace(key="r"))
        controls.on_motion(mouse(session.canvas.ax_field, 10.0, 10.0))
        assert session.sim.rotation.active

        controls.on_key_release(SimpleNamespace(key="r"))
        assert not session.sim.rotation.active

    def test_rotation_frame_skips_ticks(self, session):
        session.sim.set_speed(10)
        session.controls.on_press(mouse(session.canvas.ax_rotate, 0.5, 0.5))
        reports = session.run_headless(4)
        assert all(r.rotated for r in reports)
        assert session.sim.ticks == 0

    def test_rotate_key_not_bound_to_home_while_connected(self, session):
        """The toolbar's `r` = home binding would reset the view mid-rotation."""
        assert ROTATE_KEY not in matplotlib.rcParams["keymap.home"]

    def test_disconnect_restores_home_keymap(self):
        before = list(matplotlib.rcParams["keymap.home"])
        sim = XYSimulation(FieldConfig(grid_size=(10, 10), cell_size=20.0, seed=5))
        s = DashboardSession(sim, fit_cells=12)
        s.close()
        assert list(matplotlib.rcParams["keymap.home"]) == before


class TestPlumbing:
    def test_package_exports(self):
        assert sorted(dashboard.__all__) == [
            "Animation",
            "ControlPanel",
            "DashboardSession",
            "FieldCanvas",
            "Recorder",
        ]

    def test_idle_recorder(self, session):
        recorder = Recorder(session.canvas.fig)
        assert not recorder.recording
        recorder.grab_frame()
        recorder.stop()
        assert recorder.path is None

    def test_animation_close_detaches_callback(self, session):
        animation = Animation(session.canvas.fig, lambda _n: [session.canvas.arrows])
        animation.start()
        animation.stop()
        animation.close()
        assert animation.animation is None
        assert animation.animate_frame(0) == []
