"""
flightsim: real-time 6-DOF fixed-wing flight simulation.

Typical use:

    >>> from flightsim import load_simulation_config, SimulationDriver
    >>> loaded = load_simulation_config('examples/navion.yaml')
    >>> driver = SimulationDriver(*loaded)
    >>> driver.run()
"""

from .exceptions import (ConfigurationError, FlightSimError, InvalidStateTransition, NumericDivergence,
                         SimulationFault)
from .config import SimulationConfiguration, create_analysis_config, create_default_config
from .control.controls import FlightControl, limit_controls, neutral_controls
from .control.doublets import ControlInputGenerator, Doublet, SimulationMode
from .control.trim import TrimSolver
from .core.aircraft import Aircraft
from .core.dynamics import AircraftDynamics
from .core.state import SimulationState
from .environment.environment import Environment
from .io.config import LoadedConfiguration, build_from_dict, create_example_config, load_simulation_config
from .simulation.driver import DriverStatus, SimulationDriver
from .simulation.log import OutputQuantity, SimulationLog

__version__ = '0.2.0'

__all__ = [
    'ConfigurationError',
    'FlightSimError',
    'InvalidStateTransition',
    'NumericDivergence',
    'SimulationFault',
    'SimulationConfiguration',
    'create_analysis_config',
    'create_default_config',
    'FlightControl',
    'limit_controls',
    'neutral_controls',
    'ControlInputGenerator',
    'Doublet',
    'SimulationMode',
    'TrimSolver',
    'Aircraft',
    'AircraftDynamics',
    'SimulationState',
    'Environment',
    'LoadedConfiguration',
    'build_from_dict',
    'create_example_config',
    'load_simulation_config',
    'DriverStatus',
    'SimulationDriver',
    'OutputQuantity',
    'SimulationLog',
]
