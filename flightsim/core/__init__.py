"""
Core 6-DOF flight dynamics components.

This module provides the fundamental building blocks for six-degree-of-freedom
aircraft flight simulation.
"""

from .aircraft import (
    Aircraft,
    BrakeSide,
    GroundContactPoint,
    LiftTable,
    MassProperties,
    ReferenceGeometry,
    StabilityDerivatives
)
from .aerodynamics import AerodynamicModel
from .dynamics import AircraftDynamics, angle_of_attack_rate
from .forces import ForceMomentAggregator, ForceMomentBundle
from .ground_reaction import AIRBORNE, GroundContact, GroundReaction
from .integrator import RK4Integrator
from .propulsion import ConstantThrustEngine, Engine, EngineSet, PropellerEngine
from .saturation import DEFAULT_LIMITS, SaturationLimits
from .state import SimulationState, WindParameters

__all__ = [
    'Aircraft',
    'BrakeSide',
    'GroundContactPoint',
    'LiftTable',
    'MassProperties',
    'ReferenceGeometry',
    'StabilityDerivatives',
    'AerodynamicModel',
    'AircraftDynamics',
    'angle_of_attack_rate',
    'ForceMomentAggregator',
    'ForceMomentBundle',
    'AIRBORNE',
    'GroundContact',
    'GroundReaction',
    'RK4Integrator',
    'ConstantThrustEngine',
    'Engine',
    'EngineSet',
    'PropellerEngine',
    'DEFAULT_LIMITS',
    'SaturationLimits',
    'SimulationState',
    'WindParameters'
]
