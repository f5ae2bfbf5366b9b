"""Arrow geometry for drawing the display grid.

Each site becomes three line segments in canvas pixels (y grows downward):
the shaft from the cell centre along the angle, and two arrowhead strokes
drawn back from the tip at ±30° from the shaft.
"""

from __future__ import annotations

import math

import numpy as np
from matplotlib.colors import hsv_to_rgb

HEAD_ANGLE = math.pi / 6


def arrow_segments(
    angles: np.ndarray,
    centers_x: np.ndarray,
    centers_y: np.ndarray,
    *,
    arrow_length: float,
    head_length: float,
) -> np.ndarray:
    """Return segments of shape `(N * 3, 2, 2)`, ordered shaft, head-, head+ per site."""
    theta = np.asarray(angles, dtype=np.float64).reshape(-1)
    cx = np.asarray(centers_x, dtype=np.float64).reshape(-1)
    cy = np.asarray(centers_y, dtype=np.float64).reshape(-1)

    tip_x = cx + np.cos(theta) * arrow_length
    tip_y = cy + np.sin(theta) * arrow_length
    left_x = tip_x - head_length * np.cos(theta - HEAD_ANGLE)
    left_y = tip_y - head_length * np.sin(theta - HEAD_ANGLE)
    right_x = tip_x - head_length * np.cos(theta + HEAD_ANGLE)
    right_y = tip_y - head_length * np.sin(theta + HEAD_ANGLE)

    n = theta.shape[0]
    segs = np.empty((n, 3, 2, 2), dtype=np.float64)
    segs[:, 0, 0] = np.stack([cx, cy], axis=1)
    segs[:, 0, 1] = np.stack([tip_x, tip_y], axis=1)
    segs[:, 1, 0] = np.stack([tip_x, tip_y], axis=1)
    segs[:, 1, 1] = np.stack([left_x, left_y], axis=1)
    segs[:, 2, 0] = np.stack([tip_x, tip_y], axis=1)
    segs[:, 2, 1] = np.stack([right_x, right_y], axis=1)
    return segs.reshape(n * 3, 2, 2)


def angle_hues(angles: np.ndarray) -> np.ndarray:
    """Hue in [0, 1) from `degrees(angle) mod 360`."""
    deg = np.degrees(np.asarray(angles, dtype=np.float64).reshape(-1))
    return np.mod(deg, 360.0) / 360.0


def arrow_colors(angles: np.ndarray) -> np.ndarray:
    """Fully saturated RGB per segment, `(N * 3, 3)`; the three strokes of a site share a colour."""
    hues = angle_hues(angles)
    hsv = np.stack([hues, np.ones_like(hues), np.ones_like(hues)], axis=1)
    rgb = hsv_to_rgb(hsv)
    return np.repeat(rgb, 3, axis=0)
