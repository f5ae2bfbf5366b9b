"""Test suite for the XY phase field.

This package contains:
- Lattice and configuration tests
- Simulation frame-loop tests (tick gating, interaction, rotation, pause)
- Render projection and dashboard tests (Agg backend)
"""
