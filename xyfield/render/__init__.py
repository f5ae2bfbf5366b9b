"""Display-side helpers: per-frame interpolation and arrow geometry."""

from .arrows import angle_hues, arrow_colors, arrow_segments
from .interpolator import RenderInterpolator

__all__ = [
    "RenderInterpolator",
    "angle_hues",
    "arrow_colors",
    "arrow_segments",
]
