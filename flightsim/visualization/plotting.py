"""
Standard Plotting Functions

Time-history plots of simulation log snapshots. Angles and rates stored
in radians are drawn in degrees.
"""

from typing import Optional, Sequence, Tuple

import numpy as np
import matplotlib.pyplot as plt
from matplotlib.figure import Figure

from ..simulation.log import LogEntry, OutputQuantity

# Quantities drawn in degrees
ANGULAR_QUANTITIES = {
    OutputQuantity.PHI, OutputQuantity.THETA, OutputQuantity.PSI,
    OutputQuantity.P, OutputQuantity.Q, OutputQuantity.R,
    OutputQuantity.P_DOT, OutputQuantity.Q_DOT, OutputQuantity.R_DOT,
    OutputQuantity.ALPHA, OutputQuantity.BETA, OutputQuantity.ALPHA_DOT,
    OutputQuantity.ELEVATOR, OutputQuantity.AILERON, OutputQuantity.RUDDER,
    OutputQuantity.FLAPS,
}


def quantity_label(quantity: OutputQuantity) -> str:
    """Axis label with the display unit, e.g. 'alpha (deg)'."""
    name = quantity.name.lower().replace('_', ' ')
    if quantity in ANGULAR_QUANTITIES:
        unit = quantity.value.split('_')[-1].replace('rad', 'deg')
        return f"{name} ({unit})"
    unit = quantity.value[len(quantity.name):].lstrip('_')
    return f"{name} ({unit})" if unit else name


def quantity_series(entries: Sequence[LogEntry], quantity: OutputQuantity) -> np.ndarray:
    """Values of one quantity in display units."""
    values = np.array([entry[quantity] for entry in entries], dtype=float)
    if quantity in ANGULAR_QUANTITIES:
        return np.degrees(values)
    return values


def plot_time_histories(
    entries: Sequence[LogEntry],
    quantities: Sequence[OutputQuantity],
    title: str = "Simulation Time Histories",
    figsize: Optional[Tuple[float, float]] = None,
    save_path: Optional[str] = None
) -> Figure:
    """
    Plot selected outputs vs time, one subplot per quantity.

    Parameters
    ----------
    entries : sequence of LogEntry
        Log snapshot (SimulationLog.snapshot())
    quantities : sequence of OutputQuantity
        Outputs to plot
    title : str, optional
        Main plot title
    figsize : Tuple[float, float], optional
        Figure size in inches (default scales with the number of plots)
    save_path : Optional[str], optional
        Path to save figure

    Returns
    -------
    Figure
        Matplotlib figure object
    """
    if not quantities:
        raise ValueError("At least one quantity is required")

    if figsize is None:
        figsize = (12, 2.2 * len(quantities) + 1.0)

    fig, axes = plt.subplots(len(quantities), 1, figsize=figsize, sharex=True, squeeze=False)
    axes = axes[:, 0]

    time = quantity_series(entries, OutputQuantity.TIME)

    for ax, quantity in zip(axes, quantities):
        ax.plot(time, quantity_series(entries, quantity), 'b-', linewidth=1.5)
        ax.set_ylabel(quantity_label(quantity), fontsize=10)
        ax.grid(True, alpha=0.3)

    axes[-1].set_xlabel('Time (s)', fontsize=11)
    fig.suptitle(title, fontsize=13, fontweight='bold')
    plt.tight_layout()

    if save_path:
        fig.savefig(save_path, dpi=150, bbox_inches='tight')

    return fig


def plot_stability_response(
    entries: Sequence[LogEntry],
    title: str = "Open-Loop Stability Response",
    figsize: Tuple[float, float] = (14, 10),
    save_path: Optional[str] = None
) -> Figure:
    """
    Plot the response to the doublet series.

    Left column shows the longitudinal motion (elevator, alpha, pitch rate,
    pitch attitude, airspeed), right column the lateral-directional motion
    (aileron, rudder, sideslip, roll rate, yaw rate).

    Parameters
    ----------
    entries : sequence of LogEntry
        Log snapshot
    title : str, optional
        Main plot title
    figsize : Tuple[float, float], optional
        Figure size in inches
    save_path : Optional[str], optional
        Path to save figure

    Returns
    -------
    Figure
        Matplotlib figure object
    """
    columns = (
        (OutputQuantity.ELEVATOR, OutputQuantity.ALPHA, OutputQuantity.Q,
         OutputQuantity.THETA, OutputQuantity.TAS),
        (OutputQuantity.AILERON, OutputQuantity.RUDDER, OutputQuantity.BETA,
         OutputQuantity.P, OutputQuantity.R),
    )
    colors = ('b', 'r')

    fig, axes = plt.subplots(5, 2, figsize=figsize, sharex=True)
    time = quantity_series(entries, OutputQuantity.TIME)

    for col, (quantities, color) in enumerate(zip(columns, colors)):
        for row, quantity in enumerate(quantities):
            ax = axes[row, col]
            ax.plot(time, quantity_series(entries, quantity), f'{color}-', linewidth=1.5)
            ax.set_ylabel(quantity_label(quantity), fontsize=10)
            ax.grid(True, alpha=0.3)
        axes[-1, col].set_xlabel('Time (s)', fontsize=11)

    axes[0, 0].set_title('Longitudinal', fontsize=11, fontweight='bold')
    axes[0, 1].set_title('Lateral-Directional', fontsize=11, fontweight='bold')

    fig.suptitle(title, fontsize=13, fontweight='bold')
    plt.tight_layout()

    if save_path:
        fig.savefig(save_path, dpi=150, bbox_inches='tight')

    return fig


def setup_plotting_style():
    """
    Set up default matplotlib plotting style for consistent appearance.

    Call this function once at the start of your script for consistent styling.
    """
    plt.rcParams['figure.facecolor'] = 'white'
    plt.rcParams['axes.facecolor'] = 'white'
    plt.rcParams['axes.grid'] = True
    plt.rcParams['grid.alpha'] = 0.3
    plt.rcParams['font.size'] = 10
    plt.rcParams['lines.linewidth'] = 1.5
