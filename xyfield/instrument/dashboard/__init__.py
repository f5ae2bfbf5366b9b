"""Dashboard for the XY field.

- FieldCanvas: figure layout, arrow LineCollection
- ControlPanel: sliders, buttons, pointer and rotate-gesture wiring
- Animation: FuncAnimation wrapper (the refresh scheduler)
- Recorder: frame capture and video export
- DashboardSession: ties the above to one `XYSimulation`
"""

from xyfield.instrument.dashboard.animation import Animation
from xyfield.instrument.dashboard.canvas import FieldCanvas
from xyfield.instrument.dashboard.controls import ControlPanel
from xyfield.instrument.dashboard.recorder import Recorder
from xyfield.instrument.dashboard.session import DashboardSession

__all__ = [
    "Animation",
    "ControlPanel",
    "DashboardSession",
    "FieldCanvas",
    "Recorder",
]
