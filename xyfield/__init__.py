"""XY phase field.

A 2-D lattice of phase angles relaxing toward local alignment, with a
display grid that chases the physics grid every frame.

Keep this module light so importing `xyfield.physics.*` does not pull in
matplotlib.
"""

from __future__ import annotations

__all__ = [
    "FieldConfig",
    "XYSimulation",
    "DashboardSession",
]


def __getattr__(name: str):  # pragma: no cover
    if name == "FieldConfig":
        from .field.config import FieldConfig as _FieldConfig

        return _FieldConfig
    if name == "XYSimulation":
        from .field.simulator import XYSimulation as _XYSimulation

        return _XYSimulation
    if name == "DashboardSession":
        from .instrument.dashboard.session import DashboardSession as _DashboardSession

        return _DashboardSession
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
