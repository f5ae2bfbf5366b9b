"""Simple state-history instrument for field runs."""

from __future__ import annotations

from typing import Optional

from tensordict import TensorDict


class StateHistoryInstrument:
    """Capture post-tick snapshots for offline inspection.

    - snapshots are appended to an in-memory list (`history`)
    - `sample_every` keeps one snapshot out of every N updates
    - `max_frames` drops the oldest snapshots past the cap
    """

    def __init__(self, *, sample_every: int = 1, max_frames: Optional[int] = None) -> None:
        if sample_every < 1:
            raise ValueError(f"sample_every must be >= 1, got {sample_every}")
        if max_frames is not None and max_frames < 1:
            raise ValueError(f"max_frames must be >= 1, got {max_frames}")
        self.sample_every = int(sample_every)
        self.max_frames = max_frames
        self.history: list[TensorDict] = []
        self._seen = 0

    def update(self, state: TensorDict) -> None:
        self._seen += 1
        if (self._seen - 1) % self.sample_every != 0:
            return
        self.history.append(state.clone())
        if self.max_frames is not None and len(self.history) > self.max_frames:
            del self.history[0 : len(self.history) - self.max_frames]
