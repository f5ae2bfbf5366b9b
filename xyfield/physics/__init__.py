from .engine import PhysicsStepStats, RelaxationEngine, blend_angles, circular_mean

__all__ = [
    "PhysicsStepStats",
    "RelaxationEngine",
    "blend_angles",
    "circular_mean",
]
