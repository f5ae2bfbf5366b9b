"""Instrumentation for the XY field (history capture, live dashboard)."""

from .history import StateHistoryInstrument
from .protocol import InstrumentProtocol

__all__ = [
    "InstrumentProtocol",
    "StateHistoryInstrument",
]
