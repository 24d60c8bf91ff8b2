"""
Simulation Configuration System

Provides YAML-based configuration loading for aircraft parameters,
aerodynamics, propulsion, landing gear, initial conditions and
simulation setup.

Angles in the YAML file are given in degrees, except trim controls and
doublet amplitudes which are surface deflections in radians.
"""

from dataclasses import fields
from typing import Any, Dict, List, NamedTuple, Optional

import numpy as np
import yaml

from ..config import SimulationConfiguration
from ..control.controls import control_from_name, control_map_from_dict, control_map_to_dict
from ..control.doublets import DEFAULT_DOUBLET_SERIES, Doublet, SimulationMode
from ..core.aircraft import (Aircraft, BrakeSide, GroundContactPoint, LiftTable,
                             MassProperties, ReferenceGeometry, StabilityDerivatives)
from ..core.propulsion import ConstantThrustEngine, EngineSet, PropellerEngine
from ..core.saturation import SaturationLimits
from ..core.state import SimulationState
from ..exceptions import ConfigurationError


class LoadedConfiguration(NamedTuple):
    """Everything needed to start a SimulationDriver."""
    aircraft: Aircraft
    initial_state: SimulationState
    configuration: SimulationConfiguration


_DERIVATIVE_NAMES = {f.name for f in fields(StabilityDerivatives)}
_SATURATION_NAMES = {f.name for f in fields(SaturationLimits)}


def _section(parent: Dict[str, Any], key: str, required: bool = False) -> Dict[str, Any]:
    value = parent.get(key)
    if value is None:
        if required:
            raise ConfigurationError(f"Missing required section '{key}'")
        return {}
    if not isinstance(value, dict):
        raise ConfigurationError(f"Section '{key}' must be a mapping, got {type(value).__name__}")
    return value


def _number(section: Dict[str, Any], key: str, default: Optional[float] = None) -> float:
    value = section.get(key, default)
    if value is None:
        raise ConfigurationError(f"Missing required value '{key}'")
    if isinstance(value, bool):
        raise ConfigurationError(f"Value '{key}' must be a number, got {value!r}")
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"Value '{key}' must be a number, got {value!r}") from exc


def _vector(value: Any, name: str, length: int = 3) -> tuple:
    try:
        vector = tuple(float(v) for v in value)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"'{name}' must be a list of {length} numbers, got {value!r}") from exc
    if len(vector) != length:
        raise ConfigurationError(f"'{name}' must have {length} elements, got {len(vector)}")
    return vector


def _parse_derivatives(aero: Dict[str, Any]) -> StabilityDerivatives:
    derivatives = _section(aero, 'derivatives')
    unknown = set(derivatives) - _DERIVATIVE_NAMES
    if unknown:
        raise ConfigurationError(f"Unknown stability derivatives: {', '.join(sorted(unknown))}")
    return StabilityDerivatives(**{key: _number(derivatives, key) for key in derivatives})


def _parse_lift_table(aero: Dict[str, Any]) -> Optional[LiftTable]:
    table = _section(aero, 'lift_table')
    if not table:
        return None
    if 'alpha_deg' not in table or 'CL' not in table:
        raise ConfigurationError("lift_table needs 'alpha_deg' and 'CL' lists")
    alpha = _vector(table['alpha_deg'], 'lift_table.alpha_deg', len(table['alpha_deg']))
    CL = _vector(table['CL'], 'lift_table.CL', len(table['CL']))
    return LiftTable(alpha=tuple(np.radians(alpha)), CL=CL)


def _parse_engine(entry: Dict[str, Any]) -> Any:
    if not isinstance(entry, dict):
        raise ConfigurationError(f"Engine entry must be a mapping, got {entry!r}")

    engine_type = entry.get('type', 'propeller')
    position = _vector(entry.get('position', [0.0, 0.0, 0.0]), 'propulsion.position')

    if engine_type == 'constant_thrust':
        return ConstantThrustEngine(
            max_thrust=_number(entry, 'max_thrust', 500.0),
            position=position,
            name=entry.get('name', 'jet')
        )

    elif engine_type == 'propeller':
        return PropellerEngine(
            power_max=_number(entry, 'power_max', 260.0),
            prop_efficiency=_number(entry, 'efficiency', 0.8),
            static_thrust=_number(entry, 'static_thrust', 1000.0),
            position=position,
            name=entry.get('name', 'propeller')
        )

    else:
        raise ConfigurationError(f"Unknown propulsion model type: {engine_type}")


def _parse_engines(aircraft: Dict[str, Any]) -> EngineSet:
    propulsion = aircraft.get('propulsion', [])
    if isinstance(propulsion, dict):
        propulsion = [propulsion]
    if not isinstance(propulsion, list):
        raise ConfigurationError("'propulsion' must be a mapping or a list of mappings")
    return EngineSet(_parse_engine(entry) for entry in propulsion)


def _parse_gear_point(entry: Dict[str, Any]) -> GroundContactPoint:
    if not isinstance(entry, dict) or 'position' not in entry:
        raise ConfigurationError(f"Landing gear entry needs a 'position', got {entry!r}")

    brake = entry.get('brake', 'none')
    try:
        brake = BrakeSide(str(brake).lower())
    except ValueError as exc:
        raise ConfigurationError(f"Unknown brake side '{brake}'") from exc

    defaults = GroundContactPoint('default', (0.0, 0.0, 0.0))
    return GroundContactPoint(
        name=str(entry.get('name', 'gear')),
        position=_vector(entry['position'], 'landing_gear.position'),
        stiffness=_number(entry, 'stiffness', defaults.stiffness),
        damping=_number(entry, 'damping', defaults.damping),
        rolling_friction=_number(entry, 'rolling_friction', defaults.rolling_friction),
        side_friction=_number(entry, 'side_friction', defaults.side_friction),
        brake=brake,
        braking_friction=_number(entry, 'braking_friction', defaults.braking_friction),
        steerable=bool(entry.get('steerable', False)),
        steering_ratio=_number(entry, 'steering_ratio', defaults.steering_ratio)
    )


def build_aircraft(config_dict: Dict[str, Any]) -> Aircraft:
    """
    Build and validate the Aircraft from the 'aircraft' section.

    Raises
    ------
    ConfigurationError
        On missing sections, malformed values or an invalid aircraft
    """
    aircraft = _section(config_dict, 'aircraft', required=True)

    inertia = _section(aircraft, 'inertia', required=True)
    mass_properties = MassProperties(
        mass=_number(aircraft, 'mass'),
        Ixx=_number(inertia, 'Ixx'),
        Iyy=_number(inertia, 'Iyy'),
        Izz=_number(inertia, 'Izz'),
        Ixz=_number(inertia, 'Ixz', 0.0)
    )

    reference = _section(aircraft, 'reference', required=True)
    geometry = ReferenceGeometry(
        S=_number(reference, 'S'),
        b=_number(reference, 'b'),
        c=_number(reference, 'c')
    )

    aero = _section(aircraft, 'aerodynamics')
    gear = aircraft.get('landing_gear', []) or []
    if not isinstance(gear, list):
        raise ConfigurationError("'landing_gear' must be a list")

    result = Aircraft(
        name=str(aircraft.get('name', 'Unnamed Aircraft')),
        mass_properties=mass_properties,
        geometry=geometry,
        derivatives=_parse_derivatives(aero),
        center_of_gravity=_vector(aircraft.get('center_of_gravity', [0.0, 0.0, 0.0]), 'center_of_gravity'),
        aerodynamic_center=_vector(aircraft.get('aerodynamic_center', [0.0, 0.0, 0.0]), 'aerodynamic_center'),
        lift_table=_parse_lift_table(aero),
        ground_contact=tuple(_parse_gear_point(entry) for entry in gear),
        engines=_parse_engines(aircraft)
    )
    result.validate()
    return result


def build_initial_state(config_dict: Dict[str, Any]) -> SimulationState:
    """Build the initial state from the 'initial_state' section (angles in degrees)."""
    initial = _section(config_dict, 'initial_state')

    return SimulationState.from_flight_condition(
        altitude=_number(initial, 'altitude', 5000.0),
        airspeed=_number(initial, 'airspeed', 176.0),
        alpha=np.radians(_number(initial, 'alpha', 0.0)),
        beta=np.radians(_number(initial, 'beta', 0.0)),
        euler_angles=tuple(np.radians([_number(initial, 'roll', 0.0),
                                       _number(initial, 'pitch', 0.0),
                                       _number(initial, 'yaw', 0.0)])),
        north=_number(initial, 'north', 0.0),
        east=_number(initial, 'east', 0.0),
        angular_rates=tuple(np.radians(_vector(initial.get('rates_deg_s', [0.0, 0.0, 0.0]),
                                               'initial_state.rates_deg_s')))
    )


def _parse_doublets(simulation: Dict[str, Any]) -> tuple:
    entries = simulation.get('doublets')
    if entries is None:
        return DEFAULT_DOUBLET_SERIES
    if not isinstance(entries, list):
        raise ConfigurationError("'doublets' must be a list")

    doublets = []
    for entry in entries:
        if not isinstance(entry, dict) or 'control' not in entry:
            raise ConfigurationError(f"Doublet entry needs a 'control', got {entry!r}")
        doublets.append(Doublet(
            control=control_from_name(entry["control"]),
            start_ms=int(_number(entry, 'start_ms')),
            duration_ms=int(_number(entry, 'duration_ms')),
            amplitude=_number(entry, 'amplitude')
        ))
    return tuple(doublets)


def _parse_saturation(config_dict: Dict[str, Any]) -> SaturationLimits:
    saturation = _section(config_dict, 'saturation')
    unknown = set(saturation) - _SATURATION_NAMES
    if unknown:
        raise ConfigurationError(f"Unknown saturation limits: {', '.join(sorted(unknown))}")

    bounds = {}
    for key, value in saturation.items():
        try:
            axes = tuple(tuple(float(v) for v in axis) for axis in value)
        except (TypeError, ValueError) as exc:
            raise ConfigurationError(f"Saturation '{key}' must be three [min, max] pairs") from exc
        if len(axes) != 3 or any(len(axis) != 2 or axis[0] > axis[1] for axis in axes):
            raise ConfigurationError(f"Saturation '{key}' must be three [min, max] pairs")
        bounds[key] = axes
    return SaturationLimits(**bounds)


def build_configuration(config_dict: Dict[str, Any]) -> SimulationConfiguration:
    """Build the SimulationConfiguration from the 'simulation' and 'saturation' sections."""
    simulation = _section(config_dict, 'simulation')
    defaults = SimulationConfiguration()

    mode = simulation.get('mode', defaults.mode.value)
    try:
        mode = SimulationMode(str(mode).lower())
    except ValueError as exc:
        raise ConfigurationError(f"Unknown simulation mode '{mode}'") from exc

    max_time = simulation.get('max_time')
    if max_time is not None:
        max_time = _number(simulation, 'max_time')

    trim_controls = _section(simulation, 'trim_controls')

    return SimulationConfiguration(
        frequency_hz=_number(simulation, 'frequency_hz', defaults.frequency_hz),
        realtime=bool(simulation.get('realtime', defaults.realtime)),
        max_time=max_time,
        mode=mode,
        trim_controls=control_map_from_dict(trim_controls),
        doublets=_parse_doublets(simulation),
        ground_contact_enabled=bool(simulation.get('ground_contact', defaults.ground_contact_enabled)),
        terrain_elevation=_number(simulation, 'terrain_elevation', defaults.terrain_elevation),
        wind_ned=_vector(simulation.get('wind_ned', list(defaults.wind_ned)), 'simulation.wind_ned'),
        saturation=_parse_saturation(config_dict),
        min_airspeed=_number(simulation, 'min_airspeed', defaults.min_airspeed)
    )


def build_from_dict(config_dict: Dict[str, Any]) -> LoadedConfiguration:
    """
    Build aircraft, initial state and simulation configuration.

    Parameters
    ----------
    config_dict : dict
        Configuration dictionary (typically from YAML)

    Returns
    -------
    LoadedConfiguration
    """
    if not isinstance(config_dict, dict):
        raise ConfigurationError("Configuration must be a mapping at the top level")

    return LoadedConfiguration(
        aircraft=build_aircraft(config_dict),
        initial_state=build_initial_state(config_dict),
        configuration=build_configuration(config_dict)
    )


def load_simulation_config(yaml_file: str) -> LoadedConfiguration:
    """
    Load a simulation configuration from YAML file.

    Parameters
    ----------
    yaml_file : str
        Path to YAML configuration file

    Returns
    -------
    LoadedConfiguration
        Aircraft, initial state and configuration

    Examples
    --------
    >>> loaded = load_simulation_config('examples/navion.yaml')
    >>> driver = SimulationDriver(*loaded)
    """
    try:
        with open(yaml_file, 'r') as f:
            config_dict = yaml.safe_load(f)
    except OSError as exc:
        raise ConfigurationError(f"Cannot read configuration file {yaml_file}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Invalid YAML in {yaml_file}: {exc}") from exc

    return build_from_dict(config_dict)


def save_config(config_dict: Dict[str, Any], yaml_file: str):
    """
    Save a configuration dictionary to YAML file.

    Parameters
    ----------
    config_dict : dict
        Configuration to save
    yaml_file : str
        Output YAML file path
    """
    with open(yaml_file, 'w') as f:
        yaml.safe_dump(config_dict, f, default_flow_style=False, sort_keys=False)


def _gear(name: str, position: List[float], brake: str = 'none', steerable: bool = False) -> Dict[str, Any]:
    gear = {
        'name': name,
        'position': position,  # ft from CG, body axes
        'stiffness': 6000.0,   # lbf/ft
        'damping': 600.0,      # lbf*s/ft
        'rolling_friction': 0.02,
        'side_friction': 0.8,
        'brake': brake,
        'braking_friction': 0.5,
    }
    if steerable:
        gear['steerable'] = True
        gear['steering_ratio'] = 0.5
    return gear


def create_example_config() -> Dict[str, Any]:
    """
    Create example configuration dictionary (Ryan Navion).

    Returns
    -------
    dict
        Example configuration
    """
    config = {
        'aircraft': {
            'name': 'Navion',
            'mass': 85.4,  # slugs
            'inertia': {
                'Ixx': 1048.0,  # slug·ft²
                'Iyy': 3000.0,
                'Izz': 3530.0,
                'Ixz': 0.0
            },
            'reference': {
                'S': 184.0,  # ft²
                'b': 33.4,   # ft
                'c': 5.7     # ft
            },
            'center_of_gravity': [0.0, 0.0, 0.0],
            'aerodynamic_center': [0.0, 0.0, 0.0],
            'aerodynamics': {
                'derivatives': {
                    'CL_0': 0.41,
                    'CL_alpha': 4.44,
                    'CL_alphadot': 0.0,
                    'CL_q': 3.8,
                    'CL_de': 0.355,
                    'CL_df': 0.6,
                    'CD_0': 0.05,
                    'CD_alpha': 0.33,
                    'CD_alpha2': 0.0,
                    'CD_de': 0.0,
                    'CD_df': 0.1,
                    'CY_beta': -0.564,
                    'CY_dr': 0.157,
                    'Cl_beta': -0.074,
                    'Cl_p': -0.410,
                    'Cl_r': 0.107,
                    'Cl_da': -0.134,
                    'Cl_dr': 0.107,
                    'Cm_0': 0.0,
                    'Cm_alpha': -0.683,
                    'Cm_alphadot': -4.36,
                    'Cm_q': -9.96,
                    'Cm_de': -0.923,
                    'Cm_df': -0.1,
                    'Cn_beta': 0.071,
                    'Cn_p': -0.0575,
                    'Cn_r': -0.125,
                    'Cn_da': -0.0035,
                    'Cn_dr': -0.072
                }
            },
            'propulsion': [
                {
                    'type': 'propeller',
                    'name': 'IO-520',
                    'power_max': 260.0,     # HP
                    'efficiency': 0.8,
                    'static_thrust': 1000.0,  # lbf
                    'position': [5.0, 0.0, 0.0]  # ft from CG
                }
            ],
            'landing_gear': [
                _gear('nose', [5.0, 0.0, 3.5], steerable=True),
                _gear('left_main', [-1.0, -5.0, 3.5], brake='left'),
                _gear('right_main', [-1.0, 5.0, 3.5], brake='right'),
            ]
        },
        'initial_state': {
            'altitude': 5000.0,  # ft
            'airspeed': 176.0,   # ft/s
            'alpha': 0.0,        # deg
            'beta': 0.0,
            'roll': 0.0,
            'pitch': 0.0,
            'yaw': 0.0
        },
        'simulation': configuration_to_dict(SimulationConfiguration(
            trim_controls=control_map_from_dict({'throttle': 0.6})
        ))
    }

    return config


def configuration_to_dict(configuration: SimulationConfiguration) -> Dict[str, Any]:
    """'simulation' section equivalent of a SimulationConfiguration."""
    return {
        'frequency_hz': configuration.frequency_hz,
        'realtime': configuration.realtime,
        'max_time': configuration.max_time,
        'mode': configuration.mode.value,
        'ground_contact': configuration.ground_contact_enabled,
        'terrain_elevation': configuration.terrain_elevation,
        'wind_ned': list(configuration.wind_ned),
        'min_airspeed': configuration.min_airspeed,
        'trim_controls': control_map_to_dict(configuration.trim_controls),
        'doublets': [
            {'control': d.control.value, 'start_ms': d.start_ms,
             'duration_ms': d.duration_ms, 'amplitude': d.amplitude}
            for d in configuration.doublets
        ]
    }
