"""
Simulation driver and output log.
"""

from .driver import DriverStatus, SimulationDriver
from .log import OutputQuantity, SimulationLog, entries_to_dataframe

__all__ = ['DriverStatus', 'SimulationDriver', 'OutputQuantity', 'SimulationLog', 'entries_to_dataframe']
