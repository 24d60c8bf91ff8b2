"""
Core Component Tests

Tests for the building blocks of the 6-DOF model:
- Frame transformations and air data
- Simulation state
- Saturation limits
- Standard atmosphere and environment
- Aerodynamic and propulsion models
- RK4 integrator
"""

import pytest
import numpy as np
import os
import sys

# Add package root to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from flightsim.control.controls import FlightControl, neutral_controls
from flightsim.core.aerodynamics import AerodynamicModel
from flightsim.core.aircraft import (Aircraft, LiftTable, MassProperties, ReferenceGeometry,
                                     StabilityDerivatives)
from flightsim.core.frames import (air_data, body_to_ned_matrix, euler_rates,
                                   ned_to_body_matrix, wind_to_body_matrix)
from flightsim.core.integrator import RK4Integrator
from flightsim.core.propulsion import ConstantThrustEngine, EngineSet, PropellerEngine
from flightsim.core.saturation import (SaturationLimits, limit_angular_rates, limit_euler_angles,
                                       limit_linear_accelerations, limit_linear_velocities,
                                       limit_total_moments)
from flightsim.core.state import SimulationState, WindParameters
from flightsim.environment.atmosphere import StandardAtmosphere
from flightsim.environment.environment import Environment, EnvironmentParameter, GRAVITY, wind_vector
from flightsim.exceptions import ConfigurationError, NumericDivergence


def simple_aircraft(**kwargs):
    """Small test aircraft; keyword arguments override Aircraft fields."""
    params = dict(
        name='test',
        mass_properties=MassProperties(mass=50.0, Ixx=1000.0, Iyy=2000.0, Izz=2500.0),
        geometry=ReferenceGeometry(S=100.0, b=30.0, c=4.0),
    )
    params.update(kwargs)
    return Aircraft(**params)


class TestFrames:
    """Test frame transformations."""

    def test_identity_at_zero_attitude(self):
        """Level, north-pointing attitude gives the identity."""
        assert np.allclose(ned_to_body_matrix(0.0, 0.0, 0.0), np.eye(3))

    def test_orthonormal(self):
        """DCM is orthonormal with determinant +1."""
        R = ned_to_body_matrix(0.3, -0.2, 1.1)
        assert np.allclose(R @ R.T, np.eye(3))
        assert np.isclose(np.linalg.det(R), 1.0)

    def test_body_to_ned_is_transpose(self):
        """Inverse rotation is the transpose."""
        R = ned_to_body_matrix(0.1, 0.2, 0.3)
        assert np.allclose(body_to_ned_matrix(0.1, 0.2, 0.3), R.T)

    def test_yaw_rotation(self):
        """Heading east: north velocity appears on the body -y axis."""
        R = ned_to_body_matrix(0.0, 0.0, np.pi / 2)
        v_body = R @ np.array([10.0, 0.0, 0.0])
        assert np.allclose(v_body, [0.0, -10.0, 0.0], atol=1e-12)

    def test_euler_rates_level(self):
        """At zero attitude Euler rates equal body rates."""
        rates = euler_rates(np.zeros(3), np.array([0.1, 0.2, 0.3]))
        assert np.allclose(rates, [0.1, 0.2, 0.3])

    def test_euler_rates_finite_at_vertical(self):
        """Gimbal lock is guarded."""
        rates = euler_rates(np.array([0.0, np.pi / 2, 0.0]), np.array([0.0, 0.0, 0.1]))
        assert np.all(np.isfinite(rates))

    def test_wind_to_body_at_zero_angles(self):
        """Drag and lift map onto -x and -z at zero alpha and beta."""
        F = wind_to_body_matrix(0.0, 0.0) @ np.array([-10.0, 0.0, -100.0])
        assert np.allclose(F, [-10.0, 0.0, -100.0])

    def test_air_data(self):
        """Airspeed and flow angles from body velocity."""
        V, beta, alpha = air_data(np.array([100.0, 0.0, 10.0]))
        assert np.isclose(V, np.hypot(100.0, 10.0))
        assert np.isclose(alpha, np.arctan(0.1))
        assert beta == 0.0

    def test_air_data_at_rest(self):
        """Angles are zero when not moving."""
        assert air_data(np.zeros(3)) == (0.0, 0.0, 0.0)


class TestSimulationState:
    """Test simulation state."""

    def test_array_round_trip(self):
        """to_array/from_array preserve the 12 states."""
        x = np.arange(12, dtype=float) * 0.1
        state = SimulationState.from_array(x, time=1.5)
        assert np.allclose(state.to_array(), x)
        assert state.time == 1.5

    def test_altitude_is_negative_down(self):
        """NED down axis is negative altitude."""
        state = SimulationState.from_flight_condition(altitude=1200.0, airspeed=100.0)
        assert state.down == -1200.0
        assert state.altitude == 1200.0

    def test_flight_condition_air_data(self):
        """Air data recomputed from body velocity."""
        alpha = np.radians(4.0)
        state = SimulationState.from_flight_condition(5000.0, 150.0, alpha=alpha)

        assert np.isclose(state.true_airspeed, 150.0)
        assert np.isclose(state.alpha, alpha)
        assert np.isclose(state.beta, 0.0)
        assert state.wind_parameters == WindParameters(state.true_airspeed, state.beta, state.alpha)

    def test_headwind_reduces_airspeed(self):
        """Wind is subtracted from ground velocity."""
        x = np.zeros(12)
        x[6] = 100.0
        state = SimulationState.from_array(x, wind_ned=np.array([-20.0, 0.0, 0.0]))
        assert np.isclose(state.true_airspeed, 120.0)

    def test_is_finite(self):
        """NaN in the state vector is detected."""
        x = np.zeros(12)
        assert SimulationState.from_array(x).is_finite()
        x[10] = np.nan
        assert not SimulationState.from_array(x).is_finite()

    def test_velocity_ned(self):
        """Body velocity rotated into NED."""
        state = SimulationState.from_flight_condition(1000.0, 100.0, euler_angles=(0.0, 0.0, np.pi / 2))
        assert np.allclose(state.velocity_ned, [0.0, 100.0, 0.0], atol=1e-9)


class TestSaturation:
    """Test saturation limits."""

    def test_within_limits_unchanged(self):
        """Small values pass through."""
        accel = np.array([1.0, -2.0, 3.0])
        assert np.array_equal(limit_linear_accelerations(accel), accel)

    def test_clamped_to_bounds(self):
        """Each axis clamped independently."""
        assert np.allclose(limit_linear_velocities(np.array([-400.0, 600.0, 0.0])), [-300.0, 500.0, 0.0])
        assert np.allclose(limit_angular_rates(np.array([20.0, -20.0, 1.0])), [10.0, -10.0, 1.0])
        assert np.allclose(limit_total_moments(np.array([2e5, 0.0, -2e5])), [1e5, 0.0, -1e5])

    def test_idempotent(self):
        """Limiting twice equals limiting once."""
        rng = np.random.default_rng(0)
        for _ in range(50):
            values = rng.uniform(-2000.0, 2000.0, 3)
            for limit in (limit_linear_accelerations, limit_total_moments,
                          limit_linear_velocities, limit_angular_rates):
                once = limit(values)
                assert np.array_equal(limit(once), once)

    def test_monotonic(self):
        """Ordering of inputs is preserved."""
        a = np.array([-600.0, 10.0, 499.0])
        b = np.array([-550.0, 20.0, 800.0])
        assert np.all(limit_linear_accelerations(a) <= limit_linear_accelerations(b))

    def test_custom_limits(self):
        """Limits object overrides the defaults."""
        limits = SaturationLimits(linear_acceleration=((-1.0, 1.0),) * 3)
        assert np.allclose(limit_linear_accelerations(np.array([5.0, -5.0, 0.5]), limits), [1.0, -1.0, 0.5])

    def test_euler_angles_wrapped(self):
        """phi and psi wrap, theta clamps."""
        phi, theta, psi = limit_euler_angles(np.array([3.5, 2.0, -4.0]))
        assert np.isclose(phi, 3.5 - 2 * np.pi)
        assert np.isclose(theta, np.pi / 2)
        assert np.isclose(psi, -4.0 + 2 * np.pi)

    def test_euler_angles_in_range_unchanged(self):
        """Principal values pass through."""
        angles = np.array([0.5, -0.3, 3.0])
        assert np.allclose(limit_euler_angles(angles), angles)


class TestAtmosphere:
    """Test standard atmosphere and environment lookup."""

    def test_sea_level_conditions(self):
        """Test sea level standard conditions."""
        atm = StandardAtmosphere(0.0)

        assert np.isclose(atm.temperature, 518.67, rtol=1e-4)
        assert np.isclose(atm.pressure, 2116.22, rtol=1e-4)
        assert np.isclose(atm.density, 0.002377, rtol=1e-3)
        assert np.isclose(atm.speed_of_sound, 1116.4, rtol=0.01)

    def test_density_decreases_with_altitude(self):
        """Density falls through all layers."""
        densities = [StandardAtmosphere(h).density for h in (0.0, 10000.0, 40000.0, 70000.0)]
        assert all(a > b for a, b in zip(densities, densities[1:]))

    def test_altitude_clamped(self):
        """Altitudes above the model ceiling use the ceiling."""
        assert StandardAtmosphere(100000.0).density == StandardAtmosphere(80000.0).density
        assert StandardAtmosphere(-5000.0).density == StandardAtmosphere(-2000.0).density

    def test_environment_parameters(self):
        """Environment map combines atmosphere, gravity and wind."""
        env = Environment(wind_ned=(5.0, -3.0, 0.0)).parameters(5000.0)

        assert set(env) == set(EnvironmentParameter)
        assert np.isclose(env[EnvironmentParameter.DENSITY], StandardAtmosphere(5000.0).density)
        assert env[EnvironmentParameter.GRAVITY] == GRAVITY
        assert np.allclose(wind_vector(env), [5.0, -3.0, 0.0])


class TestAerodynamics:
    """Test the linear aerodynamic model."""

    @pytest.fixture
    def environment(self):
        return Environment().parameters(0.0)

    def test_zero_alpha_coefficients(self):
        """At zero angles and rates only the constant terms remain."""
        aircraft = simple_aircraft(derivatives=StabilityDerivatives(CL_0=0.3, CD_0=0.02, Cm_0=0.01))
        model = AerodynamicModel(aircraft)
        coeffs = model.coefficients(WindParameters(100.0, 0.0, 0.0), np.zeros(3), neutral_controls())

        assert np.isclose(coeffs['CL'], 0.3)
        assert np.isclose(coeffs['CD'], 0.02)
        assert np.isclose(coeffs['Cm'], 0.01)
        assert coeffs['CY'] == 0.0 and coeffs['Cl'] == 0.0 and coeffs['Cn'] == 0.0

    def test_body_forces(self, environment):
        """Lift up and drag back at zero alpha."""
        aircraft = simple_aircraft(derivatives=StabilityDerivatives(CL_0=0.5, CD_0=0.05))
        model = AerodynamicModel(aircraft)
        wind = WindParameters(100.0, 0.0, 0.0)

        q_bar = 0.5 * environment[EnvironmentParameter.DENSITY] * 100.0**2
        F = model.body_forces(wind, np.zeros(3), environment, neutral_controls())

        assert np.allclose(F, [-q_bar * 100.0 * 0.05, 0.0, -q_bar * 100.0 * 0.5])

    def test_elevator_pitch_moment(self, environment):
        """Trailing-edge-down elevator pitches nose down."""
        model = AerodynamicModel(simple_aircraft())
        controls = neutral_controls()
        controls[FlightControl.ELEVATOR] = 0.1
        M = model.aero_moments(WindParameters(100.0, 0.0, 0.0), np.zeros(3), environment, controls)
        assert M[1] < 0.0

    def test_zero_airspeed(self, environment):
        """No forces and finite coefficients at rest."""
        model = AerodynamicModel(simple_aircraft())
        wind = WindParameters(0.0, 0.0, 0.0)
        rates = np.array([0.5, 0.5, 0.5])

        coeffs = model.coefficients(wind, rates, neutral_controls())
        assert all(np.isfinite(list(coeffs.values())))
        assert np.allclose(model.body_forces(wind, rates, environment, neutral_controls()), 0.0)

    def test_lift_table(self):
        """Tabulated lift replaces the linear lift curve."""
        table = LiftTable(alpha=(0.0, 0.2, 0.3), CL=(0.2, 1.2, 0.8))
        model = AerodynamicModel(simple_aircraft(lift_table=table))

        assert np.isclose(table.lookup(0.1), 0.7)
        coeffs = model.coefficients(WindParameters(100.0, 0.0, 0.25), np.zeros(3), neutral_controls())
        assert np.isclose(coeffs['CL'], 1.0)


class TestPropulsion:
    """Test engine models."""

    @pytest.fixture
    def sea_level(self):
        return Environment().parameters(0.0)

    def test_constant_thrust(self, sea_level):
        """Thrust scales with throttle; offset gives a moment."""
        engine = ConstantThrustEngine(max_thrust=500.0, position=(0.0, 0.0, 1.0))
        F, M = engine.compute_thrust({FlightControl.THROTTLE: 0.5}, sea_level, 100.0)

        sigma = sea_level[EnvironmentParameter.DENSITY] / StandardAtmosphere.rho0
        assert np.allclose(F, [250.0 * sigma, 0.0, 0.0])
        assert np.allclose(M, [0.0, 250.0 * sigma, 0.0])

    def test_propeller_static_thrust_cap(self, sea_level):
        """At rest thrust is the static thrust times throttle."""
        engine = PropellerEngine(power_max=260.0, static_thrust=1000.0)
        sigma = sea_level[EnvironmentParameter.DENSITY] / StandardAtmosphere.rho0
        F, _ = engine.compute_thrust({FlightControl.THROTTLE: 0.5}, sea_level, 0.0)
        assert np.isclose(F[0], 500.0 * sigma)

    def test_propeller_power_limited(self, sea_level):
        """At cruise speed thrust follows eta * P / V."""
        engine = PropellerEngine(power_max=260.0, prop_efficiency=0.8)
        T = engine.thrust_magnitude(1.0, 1.0, 200.0)
        assert np.isclose(T, 0.8 * 260.0 * 550.0 / 200.0)

    def test_power_lapse_with_altitude(self):
        """Less power in thinner air."""
        engine = PropellerEngine()
        assert engine.shaft_power(1.0, 0.7) < engine.shaft_power(1.0, 1.0)
        assert engine.shaft_power(0.0, 1.0) == 0.0

    def test_engine_set_sums(self, sea_level):
        """Engine set adds forces and moments."""
        engines = EngineSet([
            ConstantThrustEngine(100.0, position=(0.0, -5.0, 0.0)),
            ConstantThrustEngine(100.0, position=(0.0, 5.0, 0.0)),
        ])
        F, M = engines.compute_thrust({FlightControl.THROTTLE: 1.0}, sea_level, 50.0)
        assert F[0] > 0.0
        assert np.allclose(M, 0.0)

    def test_empty_engine_set(self, sea_level):
        """No engines, no thrust."""
        F, M = EngineSet().compute_thrust({FlightControl.THROTTLE: 1.0}, sea_level, 50.0)
        assert np.array_equal(F, np.zeros(3)) and np.array_equal(M, np.zeros(3))


class TestAircraftValidation:
    """Test aircraft definition checks."""

    def test_valid_aircraft(self):
        simple_aircraft().validate()

    def test_non_positive_mass(self):
        with pytest.raises(ConfigurationError):
            simple_aircraft(mass_properties=MassProperties(0.0, 1.0, 1.0, 1.0)).validate()

    def test_inertia_not_positive_definite(self):
        with pytest.raises(ConfigurationError):
            simple_aircraft(mass_properties=MassProperties(10.0, 1.0, 1.0, 1.0, Ixz=5.0)).validate()

    def test_non_finite_geometry(self):
        with pytest.raises(ConfigurationError):
            simple_aircraft(geometry=ReferenceGeometry(np.nan, 10.0, 1.0)).validate()

    def test_lift_table_must_increase(self):
        with pytest.raises(ConfigurationError):
            simple_aircraft(lift_table=LiftTable((0.1, 0.0), (0.5, 0.0))).validate()


class TestRK4Integrator:
    """Test RK4 integrator."""

    @staticmethod
    def decay(x):
        return -0.5 * x

    def test_step_consistency(self):
        """Two steps of dt agree with one step of 2*dt."""
        integrator = RK4Integrator(dt=0.01)
        x0 = np.array([1.0, -2.0])

        two_steps = integrator.step(integrator.step(x0, self.decay), self.decay)
        one_step = integrator.step(x0, self.decay, dt=0.02)

        assert np.allclose(two_steps, one_step, atol=1e-9)
        assert np.allclose(two_steps, x0 * np.exp(-0.5 * 0.02), atol=1e-9)

    def test_integrate(self):
        """Integration history matches the exact solution."""
        integrator = RK4Integrator(dt=0.1)
        t, x = integrator.integrate(np.array([1.0]), (0.0, 2.0), self.decay)

        assert len(t) == 21
        assert x.shape == (21, 1)
        assert np.allclose(x[:, 0], np.exp(-0.5 * t), atol=1e-6)

    def test_input_not_modified(self):
        """step returns a new array."""
        x0 = np.array([1.0])
        RK4Integrator().step(x0, self.decay)
        assert x0[0] == 1.0

    def test_non_finite_derivative(self):
        """NaN in a stage raises NumericDivergence."""
        integrator = RK4Integrator()
        with pytest.raises(NumericDivergence):
            integrator.step(np.array([1.0]), lambda x: np.array([np.nan]))

    def test_overflow_detected(self):
        """Infinite result raises NumericDivergence."""
        integrator = RK4Integrator(dt=1.0)
        with pytest.raises(NumericDivergence):
            integrator.step(np.array([1e308]), lambda x: x * 1e10)

    def test_invalid_dt(self):
        """Non-positive step size rejected."""
        with pytest.raises(ValueError):
            RK4Integrator(dt=0.0)


if __name__ == "__main__":
    pytest.main([__file__, '-v'])
