from __future__ import annotations

import torch

from ..physics.engine import blend_angles


class RenderInterpolator:
    """Moves the display grid toward the target grid once per rendered frame.

    The chase factor grows with temperature, `base + span * temperature`:
    a cold field drifts smoothly, a hot one tracks the physics grid tightly.
    """

    def __init__(self, *, base: float = 0.1, span: float = 0.9) -> None:
        self.base = float(base)
        self.span = float(span)

    def factor(self, temperature: float) -> float:
        return self.base + float(temperature) * self.span

    def chase(self, display: torch.Tensor, target: torch.Tensor, *, temperature: float) -> torch.Tensor:
        """Blend `display` toward `target` in place and return it."""
        display.copy_(blend_angles(display, target, self.factor(temperature)))
        return display
