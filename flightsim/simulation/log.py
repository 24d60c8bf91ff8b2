"""
Simulation output log.

The driver thread is the only writer; consumers read immutable
snapshots and never touch the live storage.
"""

import threading
from enum import Enum
from types import MappingProxyType
from typing import List, Mapping, Tuple

import numpy as np
import pandas as pd


class OutputQuantity(Enum):
    """Named simulation outputs (units in the value)."""

    TIME = 'time_s'

    U = 'u_ftps'
    V = 'v_ftps'
    W = 'w_ftps'
    NORTH = 'north_ft'
    EAST = 'east_ft'
    ALTITUDE = 'altitude_ft'
    PHI = 'phi_rad'
    THETA = 'theta_rad'
    PSI = 'psi_rad'
    P = 'p_radps'
    Q = 'q_radps'
    R = 'r_radps'

    U_DOT = 'u_dot_ftps2'
    V_DOT = 'v_dot_ftps2'
    W_DOT = 'w_dot_ftps2'
    P_DOT = 'p_dot_radps2'
    Q_DOT = 'q_dot_radps2'
    R_DOT = 'r_dot_radps2'

    TAS = 'tas_ftps'
    ALPHA = 'alpha_rad'
    BETA = 'beta_rad'
    ALPHA_DOT = 'alpha_dot_radps'
    MACH = 'mach'
    VERTICAL_SPEED = 'vertical_speed_ftps'

    # Load factors (g) from the non-gravitational accelerations
    AN_X = 'an_x_g'
    AN_Y = 'an_y_g'
    AN_Z = 'an_z_g'

    ROLL_MOMENT = 'roll_moment_ftlbf'
    PITCH_MOMENT = 'pitch_moment_ftlbf'
    YAW_MOMENT = 'yaw_moment_ftlbf'
    THRUST = 'thrust_lbf'
    ON_GROUND = 'on_ground'

    ELEVATOR = 'elevator_rad'
    AILERON = 'aileron_rad'
    RUDDER = 'rudder_rad'
    THROTTLE = 'throttle'
    FLAPS = 'flaps_rad'


LogEntry = Mapping[OutputQuantity, float]


def make_log_entry(values: Mapping[OutputQuantity, float]) -> LogEntry:
    """Freeze a dictionary of outputs into a read-only log entry."""
    return MappingProxyType({quantity: float(value) for quantity, value in values.items()})


class SimulationLog:
    """
    Append-only, thread-safe sequence of log entries.

    Examples
    --------
    >>> log = SimulationLog()
    >>> log.append({OutputQuantity.TIME: 0.01})
    >>> log.snapshot()[0][OutputQuantity.TIME]
    0.01
    """

    def __init__(self):
        self._entries: List[LogEntry] = []
        self._lock = threading.Lock()

    def append(self, values: Mapping[OutputQuantity, float]) -> LogEntry:
        """Freeze and append one entry; returns the stored entry."""
        entry = make_log_entry(values)
        with self._lock:
            self._entries.append(entry)
        return entry

    def clear(self):
        with self._lock:
            self._entries = []

    def snapshot(self) -> Tuple[LogEntry, ...]:
        """Time-consistent copy of all entries appended so far."""
        with self._lock:
            return tuple(self._entries)

    def latest(self):
        """Most recent entry, or None when empty."""
        with self._lock:
            return self._entries[-1] if self._entries else None

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def series(self, quantity: OutputQuantity) -> np.ndarray:
        """Values of one quantity across a snapshot."""
        return np.array([entry[quantity] for entry in self.snapshot()])

    def to_dataframe(self) -> pd.DataFrame:
        """
        Snapshot as a DataFrame.

        Columns are the OutputQuantity values (e.g. 'alpha_rad').
        """
        return entries_to_dataframe(self.snapshot())

    def to_csv(self, path: str):
        """Write a snapshot to CSV."""
        self.to_dataframe().to_csv(path, index=False)


def entries_to_dataframe(entries) -> pd.DataFrame:
    """DataFrame from a sequence of log entries."""
    columns = [quantity.value for quantity in OutputQuantity]
    rows = [{quantity.value: value for quantity, value in entry.items()} for entry in entries]
    return pd.DataFrame(rows, columns=columns)
