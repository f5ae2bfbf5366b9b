from __future__ import annotations

import math
import numbers
from dataclasses import dataclass, field
from typing import Optional

import torch

from .lattice import LatticeShape

MIN_SPEED = 1
MAX_SPEED = 10


def check_speed(speed: int) -> int:
    if not isinstance(speed, numbers.Real) or isinstance(speed, bool):
        raise ValueError(f"speed must be an integer, got {speed!r}")
    if not math.isfinite(speed) or int(speed) != speed:
        raise ValueError(f"speed must be an integer, got {speed!r}")
    if not MIN_SPEED <= int(speed) <= MAX_SPEED:
        raise ValueError(f"speed must be in [{MIN_SPEED}, {MAX_SPEED}], got {speed}")
    return int(speed)


def check_temperature(temperature: float) -> float:
    if not isinstance(temperature, numbers.Real) or isinstance(temperature, bool):
        raise ValueError(f"temperature must be a number in [0, 1], got {temperature!r}")
    t = float(temperature)
    if not math.isfinite(t) or not 0.0 <= t <= 1.0:
        raise ValueError(f"temperature must be in [0, 1], got {temperature!r}")
    return t


@dataclass
class SimulationParameters:
    """Live-settable knobs. The core only reads them."""

    speed: int = 5
    temperature: float = 0.0

    def __post_init__(self) -> None:
        self.speed = check_speed(self.speed)
        self.temperature = check_temperature(self.temperature)

    @property
    def frames_per_tick(self) -> int:
        """Physics runs once every `11 - speed` frames."""
        return (MAX_SPEED + 1) - self.speed


@dataclass
class FieldConfig:
    """Configuration for the XY field simulation."""

    # Lattice
    grid_size: tuple[int, int] = (30, 30)
    cell_size: float = 20.0              # pixels per cell

    # Relaxation
    physics_interpolation: float = 0.2   # fraction moved toward the neighbour mean per tick

    # Display chasing: factor = base + span * temperature
    render_interpolation_base: float = 0.1
    render_interpolation_span: float = 0.9

    # Interaction
    interaction_radius: float = 1.5      # in cells
    base_angular_step: float = 0.02      # radians per nominal 60 Hz frame

    # Drawing
    arrow_scale: float = 0.45            # shaft length / cell size
    arrowhead_scale: float = 0.3         # head stroke length / shaft length
    color_by_angle: bool = True

    # Initial parameters
    speed: int = 5
    temperature: float = 0.0

    # Reproducibility
    seed: Optional[int] = None

    # Device
    device: str = "cpu"
    dtype: torch.dtype = field(default_factory=lambda: torch.float64)

    def validate(self) -> "FieldConfig":
        self.lattice_shape()
        check_speed(self.speed)
        check_temperature(self.temperature)
        if not 0.0 < self.physics_interpolation <= 1.0:
            raise ValueError(f"physics_interpolation must be in (0, 1], got {self.physics_interpolation}")
        lo = self.render_interpolation_base
        hi = self.render_interpolation_base + self.render_interpolation_span
        if not (0.0 < lo <= 1.0 and 0.0 < hi <= 1.0):
            raise ValueError(f"render interpolation must stay in (0, 1], got [{lo}, {hi}]")
        if self.interaction_radius < 0:
            raise ValueError("interaction_radius must be >= 0")
        return self

    def lattice_shape(self) -> LatticeShape:
        w, h = self.grid_size
        return LatticeShape(width=w, height=h, cell_size=self.cell_size)

    def parameters(self) -> SimulationParameters:
        return SimulationParameters(speed=self.speed, temperature=self.temperature)
