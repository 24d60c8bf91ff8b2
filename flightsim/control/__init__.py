"""
Flight controls for the simulation.

This module provides control identifiers and limits and the doublet input
generator. The trim solver lives in flightsim.control.trim.
"""

from .controls import FlightControl, CONTROL_LIMITS, limit_controls, neutral_controls
from .doublets import ControlInputGenerator, DEFAULT_DOUBLET_SERIES, Doublet, SimulationMode, make_doublet

__all__ = [
    'FlightControl',
    'CONTROL_LIMITS',
    'limit_controls',
    'neutral_controls',
    'ControlInputGenerator',
    'DEFAULT_DOUBLET_SERIES',
    'Doublet',
    'SimulationMode',
    'make_doublet'
]
