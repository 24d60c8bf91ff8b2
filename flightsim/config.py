"""
Simulation configuration.

SimulationConfiguration is passed to the driver at initialization. It
carries everything that used to be ambient: tick rate, control mode,
trim baseline, doublet schedule, saturation limits and environment.
"""

from dataclasses import dataclass, field
from typing import Optional, Tuple

from .control.controls import ControlMap, neutral_controls
from .control.doublets import DEFAULT_DOUBLET_SERIES, Doublet, SimulationMode
from .core.saturation import DEFAULT_LIMITS, SaturationLimits


@dataclass(frozen=True)
class SimulationConfiguration:
    """
    Immutable configuration for one simulation run.

    Create modified copies with dataclasses.replace().
    """

    # ── Timing ───────────────────────────────────────────────────────────
    frequency_hz: float = 100.0
    realtime: bool = True
    max_time: Optional[float] = None  # s; None runs until stopped

    # ── Controls ─────────────────────────────────────────────────────────
    mode: SimulationMode = SimulationMode.PILOT
    trim_controls: ControlMap = field(default_factory=neutral_controls)
    doublets: Tuple[Doublet, ...] = DEFAULT_DOUBLET_SERIES

    # ── Ground ───────────────────────────────────────────────────────────
    ground_contact_enabled: bool = True
    terrain_elevation: float = 0.0  # ft

    # ── Environment ──────────────────────────────────────────────────────
    wind_ned: Tuple[float, float, float] = (0.0, 0.0, 0.0)  # ft/s

    # ── Numerics ─────────────────────────────────────────────────────────
    saturation: SaturationLimits = DEFAULT_LIMITS
    min_airspeed: float = 1.0  # ft/s, floor for non-dimensional rates

    @property
    def dt(self) -> float:
        """Tick interval (s)."""
        return 1.0 / self.frequency_hz


def create_default_config() -> SimulationConfiguration:
    """Default configuration: 100 Hz, real time, pilot mode."""
    return SimulationConfiguration()


def create_analysis_config(trim_controls: ControlMap, max_time: float = 60.0) -> SimulationConfiguration:
    """Fast, non-realtime configuration running the doublet series about trim."""
    return SimulationConfiguration(
        realtime=False,
        max_time=max_time,
        mode=SimulationMode.ANALYSIS,
        trim_controls=dict(trim_controls),
    )
