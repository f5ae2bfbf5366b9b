from __future__ import annotations

from pathlib import Path
from typing import Optional

from xyfield.console import console
from xyfield.field.interaction import NOMINAL_FRAME_MS
from xyfield.field.lattice import LatticeConfigError
from xyfield.field.simulator import FrameReport, XYSimulation


class DashboardSession:
    """Live matplotlib window (and optional video) for one simulation.

    - the figure's field axes is the drawable; its pixel size drives the lattice
    - `FuncAnimation` is the refresh scheduler: one `frame()` per callback
    - when the backend is non-interactive, `run_headless()` drives frames directly
    """

    def __init__(
        self,
        simulation: XYSimulation,
        *,
        fit_cells: Optional[int] = None,
        fps: int = 60,
        video_path: Optional[Path] = None,
        show: bool = True,
    ) -> None:
        # Import pyplot lazily so the CLI can pick a backend first.
        import matplotlib.pyplot as plt

        from xyfield.instrument.dashboard.animation import Animation
        from xyfield.instrument.dashboard.canvas import FieldCanvas
        from xyfield.instrument.dashboard.controls import ControlPanel
        from xyfield.instrument.dashboard.recorder import Recorder

        self.sim = simulation
        self.fit_cells = fit_cells
        self.fps = int(max(1, fps))
        backend_name = str(plt.get_backend()).lower()
        self.show = bool(show and "agg" not in backend_name)
        self._plt = plt

        self.canvas = FieldCanvas()
        self.controls = ControlPanel(
            self.canvas,
            simulation,
            on_reset=self.reset,
            on_pause=self._paused_changed,
        )

        self.recorder: Optional[Recorder] = None
        if video_path is not None:
            self.recorder = Recorder(self.canvas.fig)
            self.recorder.start(Path(video_path), fps=self.fps)

        mpl = self.canvas.fig.canvas
        self._resize_cid = mpl.mpl_connect("resize_event", self._on_resize)
        self._close_cid = mpl.mpl_connect("close_event", self._on_close)
        self.fit_to_window()
        self.render()

        self.animation: Optional[Animation] = None
        if self.show:
            self.animation = Animation(
                self.canvas.fig,
                self._animate_frame,
                interval_ms=max(1, int(round(1000.0 / float(self.fps)))),
            )

    # ------------------------------------------------------------------
    # Sizing
    # ------------------------------------------------------------------

    def fit_to_window(self) -> bool:
        """Re-derive the lattice from the field axes' pixel size."""
        width, height = self.canvas.field_pixel_size()
        try:
            changed = self.sim.resize(width, height, cells=self.fit_cells)
        except LatticeConfigError as err:
            console.warn("Resize rejected, keeping the current lattice", detail=str(err))
            return False
        self.canvas.set_extent(*self.sim.canvas_size)
        if changed:
            w, h = self.sim.dims
            console.info(f"Lattice: {w} x {h}", detail=f"cell {self.sim.cell_size:.1f}px")
        return changed

    def _on_resize(self, _event) -> None:
        self.fit_to_window()
        self.render()

    # ------------------------------------------------------------------
    # Frames
    # ------------------------------------------------------------------

    def render(self) -> list:
        segments, colors = self.sim.arrow_segments()
        return self.canvas.render(segments, colors)

    def step(self, now_ms: Optional[float] = None) -> FrameReport:
        """One simulation frame followed by a draw (and a video frame)."""
        report = self.sim.frame(now_ms)
        if not report.paused or report.reinitialized:
            self.render()
            if self.recorder is not None:
                self.recorder.grab_frame()
        return report

    def _animate_frame(self, _frame_num: int) -> list:
        report = self.step()
        if report.paused and not report.reinitialized:
            return []
        return [self.canvas.arrows]

    def run_headless(self, frames: int) -> list[FrameReport]:
        """Drive `frames` frames on a synthetic 60 Hz clock without a window."""
        return [self.step(now_ms=i * NOMINAL_FRAME_MS) for i in range(int(frames))]

    def reset(self) -> None:
        self.sim.request_reset()
        if self.sim.paused:
            # The loop is idle, so consume the request and redraw now.
            self.step()
            self.canvas.fig.canvas.draw_idle()

    def _paused_changed(self, paused: bool) -> None:
        if self.animation is None:
            return
        if paused:
            self.animation.stop()
        else:
            self.animation.start()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def run(self) -> None:
        """Show the window and block until it is closed."""
        if not self.show:
            console.warn("Non-interactive backend", detail="use run_headless() or --headless")
            return
        if self.animation is not None:
            self.animation.start()
        self.sim.resume()
        self._plt.show()

    def _on_close(self, _event) -> None:
        if self.animation is not None:
            self.animation.stop()
        self.stop_recording()

    def stop_recording(self) -> None:
        if self.recorder is not None:
            self.recorder.stop()

    def close(self) -> None:
        self.stop_recording()
        if self.animation is not None:
            self.animation.close()
            self.animation = None
        self.controls.disconnect()
        self._plt.close(self.canvas.fig)
