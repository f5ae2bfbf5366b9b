from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

import torch

from ..field.lattice import ToroidalLattice


@dataclass
class PhysicsStepStats:
    """Statistics from a single physics tick."""
    overridden: int
    temperature: float


def circular_mean(angles: torch.Tensor, dim: int = -1) -> torch.Tensor:
    """Angle of the summed unit vectors along `dim`.

    Neighbours at 350° and 10° give 0°, not 180°.
    """
    return torch.atan2(torch.sin(angles).sum(dim=dim), torch.cos(angles).sum(dim=dim))


def blend_angles(current: torch.Tensor, target: torch.Tensor, factor: float | torch.Tensor) -> torch.Tensor:
    """Move `current` toward `target` by linear interpolation of unit vectors.

    The result always lies on the shorter arc between the two angles.
    """
    keep = 1.0 - factor
    vx = torch.cos(current) * keep + torch.cos(target) * factor
    vy = torch.sin(current) * keep + torch.sin(target) * factor
    return torch.atan2(vy, vx)


class RelaxationEngine:
    """Synchronous local relaxation of the target grid.

    Each tick, every site:
    1. Is hard-set to the pointer direction if it lies inside the override mask
    2. Otherwise blends toward the circular mean of its four toroidal neighbours
    3. Then receives a uniform thermal kick of width `temperature * 2π`

    Neighbours are always read from a snapshot taken before any write
    (Jacobi-style update).
    """

    def __init__(
        self,
        lattice: ToroidalLattice,
        *,
        physics_interpolation: float = 0.2,
        generator: Optional[torch.Generator] = None,
    ) -> None:
        self.lattice = lattice
        self.physics_interpolation = float(physics_interpolation)
        self.generator = generator
        self.last_stats: Optional[PhysicsStepStats] = None

    def alignment_targets(self, snapshot: torch.Tensor) -> torch.Tensor:
        """Circular mean of the four neighbours for every site, flat `(N,)`."""
        flat = snapshot.reshape(-1)
        return circular_mean(flat[self.lattice.neighbors], dim=1)

    def thermal_kick(self, n: int, temperature: float) -> Optional[torch.Tensor]:
        if temperature <= 0.0:
            return None
        u = torch.rand(
            n,
            generator=self.generator,
            device=self.lattice.device,
            dtype=self.lattice.dtype,
        )
        return (u - 0.5) * (temperature * 2.0 * math.pi)

    def step(
        self,
        target: torch.Tensor,
        *,
        temperature: float,
        override_mask: Optional[torch.Tensor] = None,
        override_angles: Optional[torch.Tensor] = None,
    ) -> torch.Tensor:
        """Return the next target grid. `target` itself is not modified."""
        snapshot = target.reshape(-1).clone()

        aligned = self.alignment_targets(snapshot)
        new = blend_angles(snapshot, aligned, self.physics_interpolation)

        kick = self.thermal_kick(new.numel(), float(temperature))
        if kick is not None:
            new = new + kick

        overridden = 0
        if override_mask is not None and override_angles is not None:
            new = torch.where(override_mask, override_angles, new)
            overridden = int(override_mask.sum().item())

        self.last_stats = PhysicsStepStats(overridden=overridden, temperature=float(temperature))
        return new.reshape(target.shape)
