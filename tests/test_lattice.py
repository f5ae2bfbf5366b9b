"""Tests for lattice geometry and sizing validation.

Run with:
    pytest tests/test_lattice.py -v
"""

from __future__ import annotations

import math

import pytest
import torch

from xyfield.field.config import FieldConfig, SimulationParameters
from xyfield.field.lattice import LatticeConfigError, LatticeShape, ToroidalLattice, wrap


class TestWrap:
    @pytest.mark.parametrize(
        "i, n, expected",
        [(0, 5, 0), (4, 5, 4), (5, 5, 0), (-1, 5, 4), (-6, 5, 4), (11, 5, 1)],
    )
    def test_int(self, i, n, expected):
        assert wrap(i, n) == expected

    def test_tensor(self):
        idx = torch.tensor([-2, -1, 0, 3, 4])
        assert wrap(idx, 3).tolist() == [1, 2, 0, 0, 1]


class TestLatticeShape:
    def test_from_viewport_floors(self):
        shape = LatticeShape.from_viewport(105.0, 59.0, 20.0)
        assert shape.dims == (5, 2)
        assert shape.cell_size == 20.0

    def test_square_fit_uses_smaller_side(self):
        shape = LatticeShape.square_fit(900.0, 600.0, 30)
        assert shape.dims == (30, 30)
        assert shape.cell_size == pytest.approx(20.0)

    @pytest.mark.parametrize(
        "width, height, cell",
        [(0, 100, 10), (100, -5, 10), (5, 100, 10), (100, 100, 0), (100, 100, -1),
         (math.inf, 100, 10), (100, math.nan, 10), (None, 100, 10), (100, 100, None)],
    )
    def test_from_viewport_rejects(self, width, height, cell):
        with pytest.raises(LatticeConfigError):
            LatticeShape.from_viewport(width, height, cell)

    def test_direct_rejects_empty(self):
        with pytest.raises(LatticeConfigError):
            LatticeShape(0, 4, 10.0)
        with pytest.raises(LatticeConfigError):
            LatticeShape(3, 4, 0.0)

    def test_error_is_value_error(self):
        assert issubclass(LatticeConfigError, ValueError)


class TestToroidalLattice:
    @pytest.fixture
    def lattice(self):
        return ToroidalLattice(LatticeShape(4, 3, 10.0))

    def test_neighbour_table(self, lattice):
        assert lattice.neighbors.shape == (12, 4)
        # site (0, 0): left (3, 0), right (1, 0), up (0, 2), down (0, 1)
        assert lattice.neighbors[0].tolist() == [3 * 3 + 0, 1 * 3 + 0, 0 * 3 + 2, 0 * 3 + 1]

    def test_every_site_has_four_neighbours_in_range(self, lattice):
        assert int(lattice.neighbors.min()) >= 0
        assert int(lattice.neighbors.max()) < 12

    def test_cell_centres(self, lattice):
        # flat index of (2, 1) is 2 * 3 + 1
        assert lattice.centers_x[7].item() == pytest.approx(25.0)
        assert lattice.centers_y[7].item() == pytest.approx(15.0)

    def test_random_angles_in_range(self, lattice):
        angles = lattice.random_angles(torch.Generator().manual_seed(1))
        assert angles.shape == (4, 3)
        assert float(angles.min()) >= 0.0
        assert float(angles.max()) < 2 * math.pi


class TestConfig:
    def test_defaults_validate(self):
        cfg = FieldConfig().validate()
        assert cfg.lattice_shape().dims == (30, 30)

    def test_bad_grid(self):
        with pytest.raises(LatticeConfigError):
            FieldConfig(grid_size=(0, 10)).validate()

    @pytest.mark.parametrize("speed", [0, 11, 2.5, True, None, "5", math.inf])
    def test_bad_speed(self, speed):
        with pytest.raises(ValueError):
            SimulationParameters(speed=speed)

    @pytest.mark.parametrize("temperature", [-0.1, 1.01, math.nan, None, "0.5", False])
    def test_bad_temperature(self, temperature):
        with pytest.raises(ValueError):
            SimulationParameters(temperature=temperature)

    @pytest.mark.parametrize("speed, frames", [(1, 10), (5, 6), (10, 1)])
    def test_frames_per_tick(self, speed, frames):
        assert SimulationParameters(speed=speed).frames_per_tick == frames
