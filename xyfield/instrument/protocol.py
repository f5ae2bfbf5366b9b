"""Instrument protocol for the XY field.

Instruments receive a snapshot after every physics tick.
"""

from typing import Protocol

from tensordict import TensorDict


class InstrumentProtocol(Protocol):
    def update(self, state: TensorDict) -> None:
        """Update the instrument with the current (post-tick) field state."""
        raise NotImplementedError("Subclasses must implement this method")
