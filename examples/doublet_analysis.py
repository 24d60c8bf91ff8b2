"""
Open-Loop Doublet Stability Analysis

Trims the Navion for straight and level flight, then flies the default
doublet series (aileron, rudder, elevator) about trim as fast as the
machine allows and plots the response.

Usage:
    python examples/doublet_analysis.py [config.yaml] [max_time]
"""

import dataclasses
import logging
import os
import sys

import matplotlib
matplotlib.use('Agg')  # Use non-interactive backend
import numpy as np

# Add package root to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from flightsim import (AircraftDynamics, OutputQuantity, SimulationDriver, SimulationMode,
                       TrimSolver, load_simulation_config)
from flightsim.visualization import plot_stability_response, plot_time_histories

logger = logging.getLogger('doublet_analysis')


def main():
    logging.basicConfig(level=logging.INFO, format='%(asctime)s %(name)s %(levelname)s: %(message)s')

    config_path = sys.argv[1] if len(sys.argv) > 1 else os.path.join(os.path.dirname(__file__), 'navion.yaml')
    max_time = float(sys.argv[2]) if len(sys.argv) > 2 else 60.0
    output_dir = os.path.join(os.path.dirname(__file__), 'output')
    os.makedirs(output_dir, exist_ok=True)

    loaded = load_simulation_config(config_path)
    aircraft = loaded.aircraft
    initial = loaded.initial_state

    # ========================================
    # Trim
    # ========================================
    solver = TrimSolver(AircraftDynamics(aircraft))
    state_trim, controls_trim, info = solver.trim_straight_level(initial.altitude, initial.true_airspeed)

    logger.info(f"Trim: alpha={info['alpha_deg']:.2f} deg, elevator={info['elevator_deg']:.2f} deg, "
                f"throttle={info['throttle_pct']:.1f}% (residual {info['residual_norm']:.2e})")

    # ========================================
    # Doublet run
    # ========================================
    configuration = dataclasses.replace(
        loaded.configuration,
        realtime=False,
        max_time=max_time,
        mode=SimulationMode.ANALYSIS,
        trim_controls=controls_trim,
    )

    driver = SimulationDriver(aircraft, state_trim, configuration)
    driver.run()
    driver.join()

    if driver.halted_by_divergence:
        logger.error(f"Run diverged: {driver.failure}")
        return 1

    entries = driver.log_snapshot()
    final = driver.snapshot()
    logger.info(f"Final: t={final.time:.1f}s, altitude={final.altitude:.0f} ft, "
                f"airspeed={final.true_airspeed:.1f} ft/s, "
                f"max |p|={np.degrees(np.max(np.abs(driver.log.series(OutputQuantity.P)))):.1f} deg/s")

    driver.log.to_csv(os.path.join(output_dir, 'doublet_response.csv'))
    plot_stability_response(entries, save_path=os.path.join(output_dir, 'doublet_response.png'))
    plot_time_histories(entries,
                        [OutputQuantity.ALTITUDE, OutputQuantity.TAS, OutputQuantity.AN_Z],
                        title='Flight Path',
                        save_path=os.path.join(output_dir, 'flight_path.png'))

    logger.info(f"Results written to {output_dir}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
