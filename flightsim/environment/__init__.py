"""
Environment models for flight simulation.

This module provides atmospheric models and environmental conditions.
"""

from .atmosphere import StandardAtmosphere
from .environment import Environment, EnvironmentParameter, GRAVITY

__all__ = ['StandardAtmosphere', 'Environment', 'EnvironmentParameter', 'GRAVITY']
