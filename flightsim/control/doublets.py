"""
Control input generation.

Produces the control map for each simulation tick, either from pilot
input or from a scripted series of doublets used for open-loop dynamic
stability analysis (aileron, then rudder, then elevator).
"""

from dataclasses import dataclass
from enum import Enum
from typing import Mapping, Optional, Sequence, Tuple

from .controls import ControlMap, FlightControl, limit_controls, neutral_controls


class SimulationMode(Enum):
    """Source of the control inputs."""
    PILOT = 'pilot'        # pilot/joystick map merged over trim
    ANALYSIS = 'analysis'  # scripted doublet series about trim


@dataclass(frozen=True)
class Doublet:
    """
    Square-wave doublet on one control.

    The control is held at trim + amplitude for duration_ms starting at
    start_ms, then at trim - amplitude for another duration_ms, then
    returns to trim.
    """
    control: FlightControl
    start_ms: int
    duration_ms: int
    amplitude: float


DEFAULT_DOUBLET_SERIES: Tuple[Doublet, ...] = (
    Doublet(FlightControl.AILERON, start_ms=10000, duration_ms=500, amplitude=0.035),
    Doublet(FlightControl.RUDDER, start_ms=14000, duration_ms=500, amplitude=0.035),
    Doublet(FlightControl.ELEVATOR, start_ms=52000, duration_ms=500, amplitude=0.035),
)


def make_doublet(controls: ControlMap,
                 time_ms: int,
                 start_ms: int,
                 duration_ms: int,
                 amplitude: float,
                 control: FlightControl,
                 trim_controls: Mapping[FlightControl, float]) -> ControlMap:
    """
    Apply one doublet to a control map.

    A time exactly on a segment boundary belongs to the segment that
    starts there.

    Parameters
    ----------
    controls : dict
        Control map to update (a new map is returned)
    time_ms : int
        Elapsed simulation time (ms)
    start_ms, duration_ms : int
        Doublet start time and half-period (ms)
    amplitude : float
        Deflection about trim
    control : FlightControl
        Control to excite
    trim_controls : dict
        Trim baseline

    Returns
    -------
    dict
        Updated control map
    """
    trim = trim_controls.get(control, 0.0)
    first_half_end = start_ms + duration_ms
    doublet_end = start_ms + 2 * duration_ms

    updated = dict(controls)
    if start_ms <= time_ms < first_half_end:
        updated[control] = trim + amplitude
    elif first_half_end <= time_ms < doublet_end:
        updated[control] = trim - amplitude
    else:
        updated[control] = trim

    return updated


class ControlInputGenerator:
    """
    Builds the control map for the current tick.

    Parameters
    ----------
    trim_controls : dict
        Straight-and-level trim baseline
    doublets : sequence of Doublet, optional
        Doublets applied in ANALYSIS mode
    """

    def __init__(self, trim_controls: Mapping[FlightControl, float],
                 doublets: Sequence[Doublet] = DEFAULT_DOUBLET_SERIES):
        baseline = neutral_controls()
        baseline.update(trim_controls)
        self.trim_controls = limit_controls(baseline)
        self.doublets = tuple(doublets)

    def doublet_series(self, controls: Mapping[FlightControl, float], elapsed_ms: int) -> ControlMap:
        """
        Apply the doublet series to a control map.

        Outside of a doublet's window its control is held at trim.
        """
        updated = dict(controls)
        for doublet in self.doublets:
            updated = make_doublet(updated, elapsed_ms,
                                   doublet.start_ms, doublet.duration_ms,
                                   doublet.amplitude, doublet.control,
                                   self.trim_controls)
        return updated

    def controls_for_tick(self, elapsed_ms: int,
                          mode: SimulationMode = SimulationMode.PILOT,
                          pilot_controls: Optional[Mapping[FlightControl, float]] = None) -> ControlMap:
        """
        Limited control map for one tick.

        Parameters
        ----------
        elapsed_ms : int
            Elapsed simulation time (ms)
        mode : SimulationMode
            PILOT merges pilot_controls over trim; ANALYSIS runs the doublets
        pilot_controls : dict, optional
            Latest pilot/joystick input (may be partial)
        """
        controls = dict(self.trim_controls)

        if mode is SimulationMode.ANALYSIS:
            controls = self.doublet_series(controls, elapsed_ms)
        elif pilot_controls:
            controls.update(pilot_controls)

        return limit_controls(controls)
