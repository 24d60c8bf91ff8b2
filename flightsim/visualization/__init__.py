"""
Visualization Module

Provides plotting capabilities for simulation log snapshots.
"""

from .plotting import (
    plot_time_histories,
    plot_stability_response,
    setup_plotting_style
)

__all__ = [
    'plot_time_histories',
    'plot_stability_response',
    'setup_plotting_style'
]
