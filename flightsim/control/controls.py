"""
Flight control identifiers and deflection limits.

Each control carries a static [minimum, maximum] range. Surface
deflections are in radians, throttle and brakes are fractions in [0, 1].
"""

from enum import Enum
from typing import Dict, Mapping

import numpy as np

from ..exceptions import ConfigurationError


class FlightControl(Enum):
    """Control identifiers. Limits live in CONTROL_LIMITS."""

    ELEVATOR = 'elevator'
    AILERON = 'aileron'
    RUDDER = 'rudder'
    THROTTLE = 'throttle'
    FLAPS = 'flaps'
    BRAKE_LEFT = 'brake_left'
    BRAKE_RIGHT = 'brake_right'

    @property
    def minimum(self) -> float:
        return CONTROL_LIMITS[self][0]

    @property
    def maximum(self) -> float:
        return CONTROL_LIMITS[self][1]


# (minimum, maximum) per control
CONTROL_LIMITS = {
    FlightControl.ELEVATOR: (-0.436, 0.436),    # +/-25 deg
    FlightControl.AILERON: (-0.262, 0.262),     # +/-15 deg
    FlightControl.RUDDER: (-0.436, 0.436),      # +/-25 deg
    FlightControl.THROTTLE: (0.0, 1.0),
    FlightControl.FLAPS: (0.0, 0.524),          # 0-30 deg
    FlightControl.BRAKE_LEFT: (0.0, 1.0),
    FlightControl.BRAKE_RIGHT: (0.0, 1.0),
}


ControlMap = Dict[FlightControl, float]


def neutral_controls() -> ControlMap:
    """Control map with every control at zero."""
    return {control: 0.0 for control in FlightControl}


def limit_controls(controls: Mapping[FlightControl, float]) -> ControlMap:
    """
    Clamp every control to its [minimum, maximum] range.

    Parameters
    ----------
    controls : dict
        Control map, FlightControl -> value

    Returns
    -------
    dict
        New control map with all values inside their limits

    Raises
    ------
    ValueError
        If any value is NaN
    """
    limited = {}
    for control, value in controls.items():
        value = float(value)
        if np.isnan(value):
            raise ValueError(f"Control {control.value} is not a number")
        limited[control] = min(max(value, control.minimum), control.maximum)
    return limited


def control_from_name(name) -> FlightControl:
    """FlightControl for a member or a case-insensitive name."""
    if isinstance(name, FlightControl):
        return name
    try:
        return FlightControl[str(name).upper()]
    except KeyError:
        raise ConfigurationError(f"Unknown flight control: {name}") from None


def control_map_from_dict(values: Mapping) -> ControlMap:
    """
    Build a control map from a dictionary keyed by control name.

    Keys may be FlightControl members or case-insensitive names
    ('elevator', 'BRAKE_LEFT', ...). Controls not given are zero.

    Raises
    ------
    ConfigurationError
        If a name is unknown or a value is not numeric
    """
    controls = neutral_controls()
    for key, value in values.items():
        control = control_from_name(key)
        try:
            controls[control] = float(value)
        except (TypeError, ValueError):
            raise ConfigurationError(f"Control {control.name} must be numeric, got {value!r}") from None
    return controls


def control_map_to_dict(controls: Mapping[FlightControl, float]) -> Dict[str, float]:
    """Plain dictionary keyed by lower-case control name (for YAML output)."""
    return {control.value: float(value) for control, value in controls.items()}
