"""
Configuration, Log and Plotting Tests

Tests for:
- YAML configuration loading and validation
- Simulation output log
- Time history plots
"""

import copy
import pytest
import numpy as np
import os
import sys

import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt

# Add package root to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from flightsim.control.controls import FlightControl
from flightsim.control.doublets import DEFAULT_DOUBLET_SERIES, SimulationMode
from flightsim.core.aircraft import BrakeSide
from flightsim.exceptions import ConfigurationError
from flightsim.io.config import (build_from_dict, create_example_config,
                                 load_simulation_config, save_config)
from flightsim.simulation.log import OutputQuantity, SimulationLog
from flightsim.visualization.plotting import plot_stability_response, plot_time_histories

NAVION_YAML = os.path.join(os.path.dirname(__file__), '..', 'examples', 'navion.yaml')


class TestYamlConfig:
    """Test loading the example YAML file."""

    @pytest.fixture
    def loaded(self):
        return load_simulation_config(NAVION_YAML)

    def test_aircraft(self, loaded):
        aircraft = loaded.aircraft

        assert aircraft.name == 'Navion'
        assert aircraft.mass_properties.mass == 85.4
        assert aircraft.geometry.S == 184.0
        assert aircraft.derivatives.Cm_alpha == -0.683
        assert len(aircraft.engines) == 1
        assert len(aircraft.ground_contact) == 3
        assert aircraft.lift_table is not None
        assert np.isclose(aircraft.lift_table.alpha[0], np.radians(-10.0))

    def test_landing_gear(self, loaded):
        nose, left, right = loaded.aircraft.ground_contact

        assert nose.steerable and nose.brake is BrakeSide.NONE
        assert left.brake is BrakeSide.LEFT
        assert right.brake is BrakeSide.RIGHT
        assert right.position == (-1.0, 5.0, 3.5)

    def test_initial_state(self, loaded):
        """Angles given in degrees are converted to radians."""
        state = loaded.initial_state

        assert np.isclose(state.altitude, 5000.0)
        assert np.isclose(state.true_airspeed, 176.0)
        assert np.isclose(state.alpha, np.radians(0.84))
        assert np.isclose(state.theta, np.radians(0.84))

    def test_configuration(self, loaded):
        configuration = loaded.configuration

        assert configuration.frequency_hz == 100.0
        assert configuration.max_time is None
        assert configuration.mode is SimulationMode.PILOT
        assert configuration.doublets == DEFAULT_DOUBLET_SERIES
        assert configuration.trim_controls[FlightControl.ELEVATOR] == -0.011
        assert configuration.trim_controls[FlightControl.THROTTLE] == 0.6
        assert configuration.saturation.linear_acceleration[0] == (-500.0, 500.0)

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError):
            load_simulation_config(str(tmp_path / 'missing.yaml'))

    def test_malformed_yaml(self, tmp_path):
        path = tmp_path / 'bad.yaml'
        path.write_text("aircraft: [unclosed\n")
        with pytest.raises(ConfigurationError):
            load_simulation_config(str(path))

    def test_non_mapping_top_level(self, tmp_path):
        path = tmp_path / 'list.yaml'
        path.write_text("- 1\n- 2\n")
        with pytest.raises(ConfigurationError):
            load_simulation_config(str(path))


class TestConfigDict:
    """Test building from configuration dictionaries."""

    @pytest.fixture
    def config(self):
        return create_example_config()

    def test_example_config_builds(self, config):
        loaded = build_from_dict(config)

        assert loaded.aircraft.name == 'Navion'
        assert loaded.configuration.trim_controls[FlightControl.THROTTLE] == 0.6
        assert loaded.aircraft.lift_table is None

    def test_save_and_reload(self, config, tmp_path):
        """Saved configuration loads back to the same definition."""
        path = str(tmp_path / 'navion.yaml')
        save_config(config, path)
        reloaded = load_simulation_config(path)
        original = build_from_dict(config)

        assert reloaded.aircraft.mass_properties == original.aircraft.mass_properties
        assert reloaded.aircraft.derivatives == original.aircraft.derivatives
        assert reloaded.aircraft.ground_contact == original.aircraft.ground_contact
        assert reloaded.configuration == original.configuration

    def test_missing_aircraft(self, config):
        del config['aircraft']
        with pytest.raises(ConfigurationError):
            build_from_dict(config)

    def test_unknown_derivative(self, config):
        config['aircraft']['aerodynamics']['derivatives']['Cx_wobble'] = 1.0
        with pytest.raises(ConfigurationError):
            build_from_dict(config)

    def test_unknown_engine_type(self, config):
        config['aircraft']['propulsion'][0]['type'] = 'rocket'
        with pytest.raises(ConfigurationError):
            build_from_dict(config)

    @pytest.mark.parametrize("mass", [0.0, -10.0, 'heavy', True])
    def test_invalid_mass(self, config, mass):
        config['aircraft']['mass'] = mass
        with pytest.raises(ConfigurationError):
            build_from_dict(config)

    def test_unknown_mode(self, config):
        config['simulation']['mode'] = 'autopilot'
        with pytest.raises(ConfigurationError):
            build_from_dict(config)

    def test_unknown_trim_control(self, config):
        config['simulation']['trim_controls']['canard'] = 0.1
        with pytest.raises(ConfigurationError):
            build_from_dict(config)

    def test_unknown_doublet_control(self, config):
        config['simulation']['doublets'][0]['control'] = 'canard'
        with pytest.raises(ConfigurationError):
            build_from_dict(config)

    def test_bad_saturation(self, config):
        config['saturation'] = {'angular_rate': [[1.0, -1.0], [0.0, 1.0], [0.0, 1.0]]}
        with pytest.raises(ConfigurationError):
            build_from_dict(config)

    def test_doublets_parsed(self, config):
        config['simulation']['doublets'] = [
            {'control': 'rudder', 'start_ms': 0, 'duration_ms': 200, 'amplitude': 0.05}
        ]
        doublet, = build_from_dict(config).configuration.doublets

        assert doublet.control is FlightControl.RUDDER
        assert doublet.duration_ms == 200

    def test_does_not_modify_input(self, config):
        before = copy.deepcopy(config)
        build_from_dict(config)
        assert config == before


class TestSimulationLog:
    """Test the output log."""

    @pytest.fixture
    def log(self):
        log = SimulationLog()
        for i in range(1, 4):
            log.append({OutputQuantity.TIME: 0.01 * i, OutputQuantity.ALPHA: 0.1 * i})
        return log

    def test_snapshot(self, log):
        snapshot = log.snapshot()

        assert isinstance(snapshot, tuple)
        assert len(snapshot) == 3
        assert snapshot[-1] is log.latest()

    def test_snapshot_unaffected_by_append(self, log):
        snapshot = log.snapshot()
        log.append({OutputQuantity.TIME: 0.04})

        assert len(snapshot) == 3
        assert len(log) == 4

    def test_series(self, log):
        assert np.allclose(log.series(OutputQuantity.ALPHA), [0.1, 0.2, 0.3])

    def test_clear(self, log):
        log.clear()
        assert len(log) == 0
        assert log.latest() is None

    def test_dataframe(self, log):
        """Columns named by output quantity with units."""
        df = log.to_dataframe()

        assert len(df) == 3
        assert list(df.columns) == [q.value for q in OutputQuantity]
        assert np.allclose(df['alpha_rad'], [0.1, 0.2, 0.3])

    def test_csv(self, log, tmp_path):
        path = tmp_path / 'log.csv'
        log.to_csv(str(path))

        header = path.read_text().splitlines()[0]
        assert header.startswith('time_s,')


class TestPlotting:
    """Test plot generation from log entries."""

    @pytest.fixture
    def entries(self):
        log = SimulationLog()
        for i in range(50):
            t = 0.01 * i
            values = {quantity: np.sin(t) for quantity in OutputQuantity}
            values[OutputQuantity.TIME] = t
            log.append(values)
        return log.snapshot()

    def test_time_histories(self, entries, tmp_path):
        path = tmp_path / 'histories.png'
        fig = plot_time_histories(entries, [OutputQuantity.ALPHA, OutputQuantity.TAS], save_path=str(path))

        assert len(fig.axes) == 2
        assert path.exists()
        plt.close(fig)

    def test_time_histories_needs_quantities(self, entries):
        with pytest.raises(ValueError):
            plot_time_histories(entries, [])

    def test_stability_response(self, entries):
        fig = plot_stability_response(entries)

        assert len(fig.axes) == 10
        plt.close(fig)


if __name__ == "__main__":
    pytest.main([__file__, '-v'])
