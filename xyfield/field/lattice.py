"""Toroidal lattice geometry.

Sites are indexed `(x, y)` with `0 <= x < width`, `0 <= y < height`. Grids are
torch tensors of shape `(width, height)`; the flat index of a site is
`x * height + y`, which matches `grid.reshape(-1)` for a contiguous tensor.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Union

import torch

IndexLike = Union[int, torch.Tensor]


class LatticeConfigError(ValueError):
    """Raised when sizing input would produce an empty or ragged lattice."""


def wrap(i: IndexLike, n: int) -> IndexLike:
    """Toroidal index: `((i % n) + n) % n`.

    Works for Python ints and integer tensors alike.
    """
    return ((i % n) + n) % n


@dataclass(frozen=True)
class LatticeShape:
    """Integer lattice dimensions plus the pixel size of one cell."""

    width: int
    height: int
    cell_size: float

    def __post_init__(self) -> None:
        if isinstance(self.width, bool) or isinstance(self.height, bool):
            raise LatticeConfigError("lattice dimensions must be integers")
        if int(self.width) != self.width or int(self.height) != self.height:
            raise LatticeConfigError(f"lattice dimensions must be integers, got {self.width}x{self.height}")
        if self.width < 1 or self.height < 1:
            raise LatticeConfigError(f"lattice must be at least 1x1, got {self.width}x{self.height}")
        if not math.isfinite(float(self.cell_size)) or self.cell_size <= 0:
            raise LatticeConfigError(f"cell_size must be a positive finite number, got {self.cell_size!r}")

    @property
    def dims(self) -> tuple[int, int]:
        return (int(self.width), int(self.height))

    @property
    def num_sites(self) -> int:
        return int(self.width) * int(self.height)

    @classmethod
    def from_viewport(cls, width: float, height: float, cell_size: float) -> "LatticeShape":
        """Derive `floor(dimension / cell_size)` cells from a drawable area."""
        _check_extent(width, height)
        if cell_size is None or not math.isfinite(float(cell_size)) or cell_size <= 0:
            raise LatticeConfigError(f"cell_size must be a positive finite number, got {cell_size!r}")
        return cls(
            width=int(math.floor(float(width) / float(cell_size))),
            height=int(math.floor(float(height) / float(cell_size))),
            cell_size=float(cell_size),
        )

    @classmethod
    def square_fit(cls, width: float, height: float, cells: int) -> "LatticeShape":
        """A `cells x cells` lattice whose side fits the smaller viewport side."""
        _check_extent(width, height)
        if cells < 1:
            raise LatticeConfigError(f"cells must be >= 1, got {cells}")
        return cls(width=int(cells), height=int(cells), cell_size=min(float(width), float(height)) / int(cells))


def _check_extent(width: float, height: float) -> None:
    if width is None or height is None:
        raise LatticeConfigError("viewport size is missing")
    if not (math.isfinite(float(width)) and math.isfinite(float(height))):
        raise LatticeConfigError(f"viewport size must be finite, got {width!r}x{height!r}")
    if width <= 0 or height <= 0:
        raise LatticeConfigError(f"viewport size must be positive, got {width}x{height}")


class ToroidalLattice:
    """Cached geometry for one lattice shape: neighbour table and cell centres."""

    def __init__(self, shape: LatticeShape, *, device: Union[str, torch.device] = "cpu", dtype: torch.dtype = torch.float64):
        self.shape = shape
        self.device = torch.device(device)
        self.dtype = dtype

        w, h = shape.dims
        xs = torch.arange(w, device=self.device).view(w, 1).expand(w, h)
        ys = torch.arange(h, device=self.device).view(1, h).expand(w, h)

        def flat(x: torch.Tensor, y: torch.Tensor) -> torch.Tensor:
            return (wrap(x, w) * h + wrap(y, h)).reshape(-1)

        # (N, 4): left, right, up, down
        self.neighbors = torch.stack(
            [flat(xs - 1, ys), flat(xs + 1, ys), flat(xs, ys - 1), flat(xs, ys + 1)],
            dim=1,
        )

        cell = float(shape.cell_size)
        self.centers_x = ((xs.to(dtype) + 0.5) * cell).reshape(-1)
        self.centers_y = ((ys.to(dtype) + 0.5) * cell).reshape(-1)

    @property
    def dims(self) -> tuple[int, int]:
        return self.shape.dims

    @property
    def cell_size(self) -> float:
        return float(self.shape.cell_size)

    @property
    def extent(self) -> tuple[float, float]:
        """Pixel extent covered by the cells."""
        w, h = self.dims
        return (w * self.cell_size, h * self.cell_size)

    def with_cell_size(self, cell_size: float) -> "ToroidalLattice":
        return ToroidalLattice(
            LatticeShape(self.shape.width, self.shape.height, cell_size),
            device=self.device,
            dtype=self.dtype,
        )

    def random_angles(self, generator: torch.Generator | None = None) -> torch.Tensor:
        """Independent uniform angles in `[0, 2π)`, shape `(width, height)`."""
        u = torch.rand(self.dims, generator=generator, device=self.device, dtype=self.dtype)
        return torch.remainder(u * (2.0 * math.pi), 2.0 * math.pi)
