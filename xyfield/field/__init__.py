"""Field state and per-frame stepping.

This package contains:
- **Lattice geometry** (`LatticeShape`, `ToroidalLattice`, `wrap`)
- **Configuration** (`FieldConfig`, `SimulationParameters`)
- **Interaction** (pointer override, global rotation)
- **Simulation** (`XYSimulation`), the single owner of both grids
"""

from __future__ import annotations

__all__ = [
    "FieldConfig",
    "LatticeConfigError",
    "LatticeShape",
    "SimulationParameters",
    "ToroidalLattice",
    "XYSimulation",
    "wrap",
]


def __getattr__(name: str):  # pragma: no cover
    # Keep imports lazy so `xyfield.physics` can import the lattice module.
    if name in ("LatticeConfigError", "LatticeShape", "ToroidalLattice", "wrap"):
        from . import lattice as _lattice

        return getattr(_lattice, name)
    if name in ("FieldConfig", "SimulationParameters"):
        from . import config as _config

        return getattr(_config, name)
    if name == "XYSimulation":
        from .simulator import XYSimulation as _XYSimulation

        return _XYSimulation
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
