"""Pointer override and global rotation.

Event handlers only flip these flags; the simulator consumes them at the
start of the next frame.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

import torch

from .lattice import ToroidalLattice

NOMINAL_FRAME_MS = 1000.0 / 60.0
TWO_PI = 2.0 * math.pi


@dataclass
class InteractionState:
    """Pointer position in canvas pixels while a press is held."""
    active: bool = False
    x: Optional[float] = None
    y: Optional[float] = None

    def press(self, x: float, y: float) -> None:
        self.active = True
        self.x = float(x)
        self.y = float(y)

    def move(self, x: float, y: float) -> None:
        if not self.active:
            return
        self.x = float(x)
        self.y = float(y)

    def release(self) -> None:
        self.active = False
        self.x = None
        self.y = None


@dataclass
class RotationState:
    """Hold-to-rotate gesture."""
    active: bool = False
    base_angular_step: float = 0.02

    def increment(self, elapsed_ms: float) -> float:
        """Angle to add this frame, normalised to a 60 Hz frame."""
        return self.base_angular_step * (float(elapsed_ms) / NOMINAL_FRAME_MS)


def pointer_override(
    lattice: ToroidalLattice,
    x: float,
    y: float,
    *,
    radius_cells: float = 1.5,
) -> tuple[torch.Tensor, torch.Tensor]:
    """Sites whose centre lies closer than `radius_cells * cell_size` to `(x, y)`.

    Returns `(mask, angles)`, both flat `(N,)`; `angles` points from each
    cell centre toward the pointer.
    """
    dx = float(x) - lattice.centers_x
    dy = float(y) - lattice.centers_y
    mask = torch.hypot(dx, dy) < radius_cells * lattice.cell_size
    return mask, torch.atan2(dy, dx)


def rotate_grids(increment: float, *grids: torch.Tensor) -> None:
    """Add `increment` to every site of every grid, in place.

    Values are wrapped into `[0, 2π)` so long rotations do not grow the
    stored angles without bound.
    """
    for grid in grids:
        grid.add_(increment).remainder_(TWO_PI)
