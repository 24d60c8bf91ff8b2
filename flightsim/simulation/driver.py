"""
Real-time simulation driver.

Owns the aircraft state and the output log and advances the state at a
fixed tick interval on one dedicated thread:

    controls -> environment -> RK4 over the dynamics -> saturation -> log

Other threads interact only through the control methods (pause, resume,
stop, reset, pilot input) and immutable snapshots.
"""

import logging
import threading
import time
from enum import Enum
from typing import Mapping, Optional, Tuple

import numpy as np

from ..config import SimulationConfiguration, create_default_config
from ..control.controls import FlightControl, limit_controls
from ..control.doublets import ControlInputGenerator, SimulationMode
from ..core.aircraft import Aircraft
from ..core.dynamics import AircraftDynamics, angle_of_attack_rate
from ..core.ground_reaction import GroundReaction
from ..core.integrator import RK4Integrator
from ..core.saturation import limit_angular_rates, limit_euler_angles, limit_linear_velocities
from ..core.state import SimulationState
from ..environment.environment import Environment, EnvironmentParameter
from ..exceptions import ConfigurationError, InvalidStateTransition, NumericDivergence, SimulationFault
from .log import LogEntry, OutputQuantity, SimulationLog

logger = logging.getLogger(__name__)


class DriverStatus(Enum):
    STOPPED = 'stopped'
    RUNNING = 'running'
    PAUSED = 'paused'


_CONTROL_OUTPUTS = {
    FlightControl.ELEVATOR: OutputQuantity.ELEVATOR,
    FlightControl.AILERON: OutputQuantity.AILERON,
    FlightControl.RUDDER: OutputQuantity.RUDDER,
    FlightControl.THROTTLE: OutputQuantity.THROTTLE,
    FlightControl.FLAPS: OutputQuantity.FLAPS,
}


class SimulationDriver:
    """
    Fixed-step, real-time 6-DOF simulation.

    Parameters
    ----------
    aircraft : Aircraft
        Static aircraft definition
    initial_state : SimulationState
        Initial condition; reset() returns here
    configuration : SimulationConfiguration, optional
        Run configuration (defaults to create_default_config())

    Notes
    -----
    Status transitions:

    - run:    STOPPED -> RUNNING
    - pause:  RUNNING -> PAUSED
    - resume: PAUSED  -> RUNNING
    - stop:   any     -> STOPPED
    - reset:  any     -> STOPPED, state and log back to the initial condition

    A failed tick (numeric divergence or an error raised by a model) also
    ends in STOPPED, with `failure` set until reset() is called. Once
    max_time is reached run() and step() are refused until reset().
    """

    def __init__(self, aircraft: Aircraft, initial_state: SimulationState,
                 configuration: Optional[SimulationConfiguration] = None):
        self._lock = threading.RLock()
        self._stop_event = threading.Event()
        self._resume_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._status = DriverStatus.STOPPED
        self._failure: Optional[SimulationFault] = None
        self._log = SimulationLog()
        self._pilot_controls: Mapping[FlightControl, float] = {}

        self.initialize(aircraft, initial_state, configuration)

    # ------------------------------------------------------------------
    # Setup
    # ------------------------------------------------------------------

    def initialize(self, aircraft: Aircraft, initial_state: SimulationState,
                   configuration: Optional[SimulationConfiguration] = None):
        """
        (Re)build the models for a new run.

        Only allowed while stopped. Clears the log and any failure.

        Raises
        ------
        ConfigurationError
            If the aircraft, configuration or initial state is invalid
        InvalidStateTransition
            If the driver is running or paused
        """
        if configuration is None:
            configuration = create_default_config()

        with self._lock:
            if self._status is not DriverStatus.STOPPED:
                raise InvalidStateTransition('initialize', self._status)

            aircraft.validate()
            self._validate(initial_state, configuration)

            environment = Environment(wind_ned=configuration.wind_ned)
            ground = GroundReaction(aircraft.ground_contact,
                                    terrain_elevation=configuration.terrain_elevation,
                                    enabled=configuration.ground_contact_enabled)

            self.aircraft = aircraft
            self.configuration = configuration
            self._environment = environment
            self._dynamics = AircraftDynamics(aircraft, ground,
                                              limits=configuration.saturation,
                                              min_airspeed=configuration.min_airspeed)
            self._integrator = RK4Integrator(configuration.dt)
            self._generator = ControlInputGenerator(configuration.trim_controls, configuration.doublets)
            self._mode = configuration.mode

            self._initial_state = SimulationState.from_array(
                initial_state.to_array(), initial_state.time, initial_state.alpha_dot,
                environment.wind_ned)
            self._state = self._initial_state
            self._pilot_controls = {}
            self._failure = None
            self._log.clear()

        logger.debug(f"Initialized '{aircraft.name}' at {configuration.frequency_hz:.0f} Hz, "
                     f"mode={configuration.mode.value}")
        logger.debug(f"Initial state: {self._initial_state}")

    @staticmethod
    def _validate(initial_state: SimulationState, configuration: SimulationConfiguration):
        if not initial_state.is_finite() or not np.isfinite(initial_state.time):
            raise ConfigurationError("Initial state contains non-finite values")

        if not (np.isfinite(configuration.frequency_hz) and configuration.frequency_hz > 0.0):
            raise ConfigurationError(f"Simulation frequency must be positive, got {configuration.frequency_hz}")

        if configuration.max_time is not None and not configuration.max_time > 0.0:
            raise ConfigurationError(f"max_time must be positive, got {configuration.max_time}")

        if not (np.isfinite(configuration.min_airspeed) and configuration.min_airspeed > 0.0):
            raise ConfigurationError(f"min_airspeed must be positive, got {configuration.min_airspeed}")

        if not np.all(np.isfinite(np.asarray(configuration.wind_ned, dtype=float))):
            raise ConfigurationError(f"Wind must be finite, got {tuple(configuration.wind_ned)}")

        if not np.isfinite(configuration.terrain_elevation):
            raise ConfigurationError(f"Terrain elevation must be finite, got {configuration.terrain_elevation}")

        for control, value in configuration.trim_controls.items():
            if np.isnan(value):
                raise ConfigurationError(f"Trim value for {control.value} is not a number")

        for doublet in configuration.doublets:
            if not np.isfinite(doublet.amplitude):
                raise ConfigurationError(f"Doublet amplitude for {doublet.control.value} must be finite")

        if not configuration.ground_contact_enabled and initial_state.altitude < configuration.terrain_elevation:
            raise ConfigurationError(
                f"Initial altitude {initial_state.altitude:.1f} ft is below terrain "
                f"({configuration.terrain_elevation:.1f} ft) with ground contact disabled")

    # ------------------------------------------------------------------
    # Published state
    # ------------------------------------------------------------------

    @property
    def status(self) -> DriverStatus:
        return self._status

    @property
    def failure(self) -> Optional[SimulationFault]:
        """Fault that halted the run, if any."""
        return self._failure

    @property
    def halted_by_divergence(self) -> bool:
        return isinstance(self._failure, NumericDivergence)

    @property
    def mode(self) -> SimulationMode:
        return self._mode

    @property
    def log(self) -> SimulationLog:
        return self._log

    @property
    def initial_state(self) -> SimulationState:
        return self._initial_state

    def snapshot(self) -> SimulationState:
        """Latest state (immutable)."""
        return self._state

    def log_snapshot(self) -> Tuple[LogEntry, ...]:
        """Copy of the log entries appended so far."""
        return self._log.snapshot()

    # ------------------------------------------------------------------
    # Inputs
    # ------------------------------------------------------------------

    def set_pilot_controls(self, controls: Mapping[FlightControl, float]):
        """
        Pilot/joystick input used from the next tick (PILOT mode).

        Raises
        ------
        ValueError
            If any value is NaN; the previous input is kept
        """
        self._pilot_controls = limit_controls(controls)

    def set_mode(self, mode: SimulationMode):
        """Switch between pilot input and the doublet series."""
        self._mode = mode
        logger.info(f"Control mode set to {mode.value}")

    # ------------------------------------------------------------------
    # State machine
    # ------------------------------------------------------------------

    def run(self, background: bool = True):
        """
        Start ticking.

        Parameters
        ----------
        background : bool, optional
            Spawn the tick thread. When False the caller advances the
            simulation with step().
        """
        with self._lock:
            if self._failure is not None:
                raise InvalidStateTransition('run', self._status, f"halted by {type(self._failure).__name__}, reset first")
            if self._finished():
                raise InvalidStateTransition('run', self._status, 'max_time reached, reset first')
            if self._status is not DriverStatus.STOPPED:
                raise InvalidStateTransition('run', self._status)

            self._status = DriverStatus.RUNNING
            self._stop_event.clear()
            self._resume_event.set()

            logger.info(f"Starting simulation: dt={self.configuration.dt}s, "
                        f"realtime={self.configuration.realtime}, max_time={self.configuration.max_time}")

            if background:
                self._thread = threading.Thread(target=self._run_loop, name='flightsim-driver', daemon=True)
                self._thread.start()

    def pause(self):
        with self._lock:
            if self._status is not DriverStatus.RUNNING:
                raise InvalidStateTransition('pause', self._status)
            self._status = DriverStatus.PAUSED
            self._resume_event.clear()
        logger.info(f"Simulation paused at t={self._state.time:.2f}s")

    def resume(self):
        with self._lock:
            if self._status is not DriverStatus.PAUSED:
                raise InvalidStateTransition('resume', self._status)
            self._status = DriverStatus.RUNNING
            self._resume_event.set()
        logger.info(f"Simulation resumed at t={self._state.time:.2f}s")

    def stop(self):
        """Stop ticking; takes effect before the next tick starts."""
        self._stop_event.set()
        self._resume_event.set()
        with self._lock:
            self._status = DriverStatus.STOPPED
        self._join_thread()
        logger.info(f"Simulation stopped at t={self._state.time:.2f}s")

    def reset(self):
        """Stop, restore the initial state and clear the log and failure."""
        self.stop()
        with self._lock:
            self._state = self._initial_state
            self._log.clear()
            self._failure = None
            self._pilot_controls = {}
            self._mode = self.configuration.mode
        logger.info("Simulation reset to initial conditions")

    def join(self, timeout: Optional[float] = None) -> bool:
        """
        Wait for the tick thread to finish.

        Returns
        -------
        bool
            True if no tick thread is alive afterwards
        """
        thread = self._thread
        if thread is None:
            return True
        thread.join(timeout)
        return not thread.is_alive()

    def _join_thread(self):
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join()
            self._thread = None

    # ------------------------------------------------------------------
    # Ticking
    # ------------------------------------------------------------------

    def step(self, dt: Optional[float] = None) -> SimulationState:
        """
        Advance the simulation by one tick.

        Parameters
        ----------
        dt : float, optional
            Step size (s); defaults to the configured tick interval

        Returns
        -------
        SimulationState
            New state

        Raises
        ------
        InvalidStateTransition
            If the driver is not running or max_time has been reached
        SimulationFault
            If the step failed (NumericDivergence for a non-finite value);
            the prior state is kept and the driver is stopped
        """
        with self._lock:
            if self._status is not DriverStatus.RUNNING:
                raise InvalidStateTransition('step', self._status)
            if self._finished():
                raise InvalidStateTransition('step', self._status, 'max_time reached')
            return self._tick(self.configuration.dt if dt is None else dt)

    def _finished(self) -> bool:
        max_time = self.configuration.max_time
        return max_time is not None and self._state.time >= max_time - 1e-9

    def _run_loop(self):
        dt = self.configuration.dt
        next_tick = time.perf_counter()

        while not self._stop_event.is_set():
            self._resume_event.wait()
            if self._stop_event.is_set():
                break

            with self._lock:
                if self._status is not DriverStatus.RUNNING:
                    continue
                try:
                    self._tick(dt)
                except SimulationFault:
                    break
                if self._finished():
                    self._status = DriverStatus.STOPPED
                    logger.info(f"Simulation complete: t={self._state.time:.2f}s, {len(self._log)} entries")
                    break

            if self.configuration.realtime:
                next_tick += dt
                delay = next_tick - time.perf_counter()
                if delay > 0.0:
                    self._stop_event.wait(delay)
                else:
                    next_tick = time.perf_counter()

    def _tick(self, dt: float) -> SimulationState:
        """Advance one step; any failure stops the driver and is raised as a SimulationFault."""
        state = self._state
        try:
            new_state, entry = self._advance(state, dt)
        except NumericDivergence as exc:
            cause = exc
            fault = NumericDivergence(f"{exc} at t={state.time:.3f}s", time=state.time, state=state)
        except Exception as exc:
            cause = exc
            fault = SimulationFault(f"{type(exc).__name__}: {exc} at t={state.time:.3f}s",
                                    time=state.time, state=state)
        else:
            self._state = new_state
            self._log.append(entry)
            return new_state

        self._failure = fault
        self._status = DriverStatus.STOPPED
        self._stop_event.set()
        logger.error(f"Simulation halted: {fault}")
        raise fault from cause

    def _advance(self, state: SimulationState, dt: float):
        elapsed_ms = int(round(state.time * 1000.0))

        controls = self._generator.controls_for_tick(elapsed_ms, self._mode, self._pilot_controls)
        environment = self._environment.parameters(state.altitude)

        x = state.to_array()
        first_stage = {}

        def derivative(xs):
            x_dot, bundle, contact = self._dynamics.evaluate(xs, controls, environment, state.alpha_dot, state.time)
            if not first_stage:
                first_stage.update(x_dot=x_dot, bundle=bundle, contact=contact)
            return x_dot

        x_new = self._integrator.step(x, derivative, dt)

        x_new[3:6] = limit_euler_angles(x_new[3:6])
        x_new[6:9] = limit_linear_velocities(x_new[6:9], self.configuration.saturation)
        x_new[9:12] = limit_angular_rates(x_new[9:12], self.configuration.saturation)

        alpha_dot = angle_of_attack_rate(x, first_stage['x_dot'])
        new_state = SimulationState.from_array(x_new, state.time + dt, alpha_dot, self._environment.wind_ned)

        return new_state, self._outputs(new_state, controls, environment, first_stage)

    @staticmethod
    def _outputs(state: SimulationState, controls, environment, stage) -> dict:
        x_dot = stage['x_dot']
        bundle = stage['bundle']
        g = environment[EnvironmentParameter.GRAVITY]
        accel = bundle.linear_acceleration

        values = {
            OutputQuantity.TIME: state.time,
            OutputQuantity.U: state.u,
            OutputQuantity.V: state.v,
            OutputQuantity.W: state.w,
            OutputQuantity.NORTH: state.north,
            OutputQuantity.EAST: state.east,
            OutputQuantity.ALTITUDE: state.altitude,
            OutputQuantity.PHI: state.phi,
            OutputQuantity.THETA: state.theta,
            OutputQuantity.PSI: state.psi,
            OutputQuantity.P: state.p,
            OutputQuantity.Q: state.q,
            OutputQuantity.R: state.r,
            OutputQuantity.U_DOT: x_dot[6],
            OutputQuantity.V_DOT: x_dot[7],
            OutputQuantity.W_DOT: x_dot[8],
            OutputQuantity.P_DOT: x_dot[9],
            OutputQuantity.Q_DOT: x_dot[10],
            OutputQuantity.R_DOT: x_dot[11],
            OutputQuantity.TAS: state.true_airspeed,
            OutputQuantity.ALPHA: state.alpha,
            OutputQuantity.BETA: state.beta,
            OutputQuantity.ALPHA_DOT: state.alpha_dot,
            OutputQuantity.MACH: state.true_airspeed / environment[EnvironmentParameter.SPEED_OF_SOUND],
            OutputQuantity.VERTICAL_SPEED: -state.velocity_ned[2],
            OutputQuantity.AN_X: accel[0] / g,
            OutputQuantity.AN_Y: accel[1] / g,
            OutputQuantity.AN_Z: -accel[2] / g,
            OutputQuantity.ROLL_MOMENT: bundle.total_moment[0],
            OutputQuantity.PITCH_MOMENT: bundle.total_moment[1],
            OutputQuantity.YAW_MOMENT: bundle.total_moment[2],
            OutputQuantity.THRUST: float(np.linalg.norm(bundle.thrust_force)),
            OutputQuantity.ON_GROUND: 1.0 if stage['contact'].on_ground else 0.0,
        }
        for control, quantity in _CONTROL_OUTPUTS.items():
            values[quantity] = controls.get(control, 0.0)

        return values
