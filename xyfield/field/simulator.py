from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, Iterable, Optional

import numpy as np
import torch
from tensordict import TensorDict

from ..instrument.protocol import InstrumentProtocol
from ..physics.engine import PhysicsStepStats, RelaxationEngine
from ..render.arrows import arrow_colors, arrow_segments
from ..render.interpolator import RenderInterpolator
from .config import FieldConfig, check_speed, check_temperature
from .interaction import NOMINAL_FRAME_MS, InteractionState, RotationState, pointer_override, rotate_grids
from .lattice import LatticeShape, ToroidalLattice


@dataclass(frozen=True)
class FrameReport:
    """What one call to `XYSimulation.frame` did."""
    frame: int
    ticked: bool = False
    rotated: bool = False
    paused: bool = False
    reinitialized: bool = False
    elapsed_ms: float = 0.0
    overridden: int = 0  # sites pinned to the pointer on this frame's tick


class XYSimulation:
    """Owns the target and display grids and advances them one frame at a time.

    The host calls `frame()` once per display refresh. Each frame runs
    exactly one of:
    - global rotation of both grids (while the rotate gesture is held)
    - tick-gated relaxation of the target grid, then display chasing

    UI callbacks go through the command methods (`pointer_*`, `rotation_*`,
    `set_*`, `request_reset`, `pause`/`resume`), which only change flags and
    parameters between frames.
    """

    def __init__(
        self,
        config: Optional[FieldConfig] = None,
        *,
        instruments: Optional[Iterable[InstrumentProtocol]] = None,
        clock: Optional[Callable[[], float]] = None,
    ) -> None:
        self.config = (config if config is not None else FieldConfig()).validate()
        self.params = self.config.parameters()

        self.generator = torch.Generator(device=self.config.device)
        if self.config.seed is not None:
            self.generator.manual_seed(int(self.config.seed))
        else:
            self.generator.seed()

        self.interaction = InteractionState()
        self.rotation = RotationState(base_angular_step=float(self.config.base_angular_step))
        self.interpolator = RenderInterpolator(
            base=self.config.render_interpolation_base,
            span=self.config.render_interpolation_span,
        )
        self.instruments: list[InstrumentProtocol] = list(instruments or [])
        self._clock = clock if clock is not None else (lambda: time.perf_counter() * 1000.0)

        self.frames = 0        # frames run (not counting paused ones)
        self.frame_count = 0   # frames eligible for a physics tick
        self.ticks = 0
        self.overridden = 0    # pointer-pinned site updates, summed over ticks
        self.paused = False
        self._last_frame_ms: Optional[float] = None
        self._reset_requested = False
        self._viewport: Optional[tuple[float, float]] = None

        self._allocate(self.config.lattice_shape())

    # ------------------------------------------------------------------
    # Lattice lifecycle
    # ------------------------------------------------------------------

    def _allocate(self, shape: LatticeShape) -> None:
        self.lattice = ToroidalLattice(shape, device=self.config.device, dtype=self.config.dtype)
        self.engine = RelaxationEngine(
            self.lattice,
            physics_interpolation=self.config.physics_interpolation,
            generator=self.generator,
        )
        self.target = self.lattice.random_angles(self.generator)
        self.display = self.target.clone()

    @property
    def dims(self) -> tuple[int, int]:
        return self.lattice.dims

    @property
    def cell_size(self) -> float:
        return self.lattice.cell_size

    @property
    def canvas_size(self) -> tuple[float, float]:
        """Drawable size in pixels; the lattice extent until a viewport is known."""
        if self._viewport is not None:
            return self._viewport
        return self.lattice.extent

    def reset(self) -> None:
        """Fill both grids with fresh independent uniform angles."""
        self.target = self.lattice.random_angles(self.generator)
        self.display = self.target.clone()

    def request_reset(self) -> None:
        """Reset at the start of the next frame."""
        self._reset_requested = True

    def resize(
        self,
        width: float,
        height: float,
        cell_size: Optional[float] = None,
        *,
        cells: Optional[int] = None,
    ) -> bool:
        """Re-derive the lattice from a drawable area.

        With `cells`, fit a `cells x cells` lattice to the smaller side;
        otherwise use `floor(dimension / cell_size)`. Raises
        `LatticeConfigError` and keeps the current grids when the input
        would give an empty lattice. Returns True when the grids were
        reinitialized.
        """
        if cells is not None:
            shape = LatticeShape.square_fit(width, height, cells)
        else:
            shape = LatticeShape.from_viewport(
                width, height, self.lattice.cell_size if cell_size is None else cell_size
            )

        self._viewport = (float(width), float(height))
        if shape.dims == self.lattice.dims:
            if shape.cell_size != self.lattice.cell_size:
                self.lattice = self.lattice.with_cell_size(shape.cell_size)
                self.engine.lattice = self.lattice
            return False

        self._allocate(shape)
        return True

    # ------------------------------------------------------------------
    # Parameters
    # ------------------------------------------------------------------

    def set_speed(self, speed: int) -> None:
        self.params.speed = check_speed(speed)

    def set_temperature(self, temperature: float) -> None:
        self.params.temperature = check_temperature(temperature)

    # ------------------------------------------------------------------
    # Pointer / rotation commands
    # ------------------------------------------------------------------

    def _in_bounds(self, x: Optional[float], y: Optional[float]) -> bool:
        if x is None or y is None:
            return False
        w, h = self.canvas_size
        return 0.0 <= float(x) < w and 0.0 <= float(y) < h

    def pointer_press(self, x: Optional[float], y: Optional[float]) -> None:
        if not self._in_bounds(x, y):
            self.interaction.release()
            return
        self.interaction.press(x, y)

    def pointer_move(self, x: Optional[float], y: Optional[float]) -> None:
        if not self.interaction.active:
            return
        if not self._in_bounds(x, y):
            self.interaction.release()
            return
        self.interaction.move(x, y)

    def pointer_release(self) -> None:
        self.interaction.release()

    def rotation_start(self) -> None:
        self.rotation.active = True

    def rotation_stop(self) -> None:
        self.rotation.active = False

    # ------------------------------------------------------------------
    # Loop control
    # ------------------------------------------------------------------

    def pause(self) -> None:
        self.paused = True

    def resume(self, now_ms: Optional[float] = None) -> None:
        """Resume from the current time; skipped frames are not replayed."""
        self.paused = False
        self._last_frame_ms = self._clock() if now_ms is None else float(now_ms)

    def frame(self, now_ms: Optional[float] = None) -> FrameReport:
        """Run one display frame."""
        reinitialized = False
        if self._reset_requested:
            self._reset_requested = False
            self.reset()
            reinitialized = True

        if self.paused:
            return FrameReport(frame=self.frames, paused=True, reinitialized=reinitialized)

        now = self._clock() if now_ms is None else float(now_ms)
        elapsed = 0.0 if self._last_frame_ms is None else max(0.0, now - self._last_frame_ms)
        self._last_frame_ms = now
        self.frames += 1

        if self.rotation.active:
            rotate_grids(self.rotation.increment(elapsed), self.target, self.display)
            return FrameReport(frame=self.frames, rotated=True, reinitialized=reinitialized, elapsed_ms=elapsed)

        self.frame_count += 1
        ticked = self.frame_count % self.params.frames_per_tick == 0
        stats = self.tick() if ticked else None
        self.interpolator.chase(self.display, self.target, temperature=self.params.temperature)
        return FrameReport(
            frame=self.frames,
            ticked=ticked,
            reinitialized=reinitialized,
            elapsed_ms=elapsed,
            overridden=0 if stats is None else stats.overridden,
        )

    def run(self, frames: int, *, frame_ms: float = NOMINAL_FRAME_MS, start_ms: float = 0.0) -> list[FrameReport]:
        """Run `frames` frames on a synthetic clock (headless use)."""
        return [self.frame(now_ms=start_ms + i * frame_ms) for i in range(int(frames))]

    def tick(self) -> Optional[PhysicsStepStats]:
        """One physics update of the target grid."""
        mask = angles = None
        if self.interaction.active and self.interaction.x is not None:
            mask, angles = pointer_override(
                self.lattice,
                self.interaction.x,
                self.interaction.y,
                radius_cells=self.config.interaction_radius,
            )
        new = self.engine.step(
            self.target,
            temperature=self.params.temperature,
            override_mask=mask,
            override_angles=angles,
        )
        self.target.copy_(new)
        self.ticks += 1
        stats = self.engine.last_stats
        if stats is not None:
            self.overridden += stats.overridden

        if self.instruments:
            snapshot = self.state()
            for instrument in self.instruments:
                instrument.update(snapshot)
        return stats

    # ------------------------------------------------------------------
    # Projections
    # ------------------------------------------------------------------

    def state(self) -> TensorDict:
        return TensorDict(
            {
                "target": self.target.clone(),
                "display": self.display.clone(),
                "frame": torch.tensor(self.frames),
                "tick": torch.tensor(self.ticks),
                "overridden": torch.tensor(self.overridden),
                "speed": torch.tensor(self.params.speed),
                "temperature": torch.tensor(self.params.temperature, dtype=self.config.dtype),
            },
            batch_size=[],
        )

    def arrow_segments(self) -> tuple[np.ndarray, Optional[np.ndarray]]:
        """Segments `(N * 3, 2, 2)` for the display grid, plus per-segment RGB or None."""
        angles = self.display.detach().cpu().numpy().reshape(-1)
        arrow_length = self.cell_size * self.config.arrow_scale
        segs = arrow_segments(
            angles,
            self.lattice.centers_x.cpu().numpy(),
            self.lattice.centers_y.cpu().numpy(),
            arrow_length=arrow_length,
            head_length=arrow_length * self.config.arrowhead_scale,
        )
        colors = arrow_colors(angles) if self.config.color_by_angle else None
        return segs, colors
