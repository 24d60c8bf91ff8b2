"""
Exception types raised by the flight simulation.

Only configuration problems and failed ticks are fatal. Out-of-range
physical quantities are clamped by the models and never raised.
"""


class FlightSimError(Exception):
    """Base class for all simulation errors."""


class ConfigurationError(FlightSimError):
    """Invalid aircraft definition or initial conditions."""


class SimulationFault(FlightSimError):
    """
    A tick failed and the run was halted.

    The exception raised by the failing model is chained as __cause__.

    Attributes
    ----------
    time : float
        Simulation time (s) of the last valid state
    state : object
        Last valid state, kept for diagnostics
    """

    def __init__(self, message: str, time: float = float('nan'), state=None):
        super().__init__(message)
        self.time = time
        self.state = state


class NumericDivergence(SimulationFault):
    """A derivative evaluation or integration step produced a non-finite value."""


class InvalidStateTransition(FlightSimError):
    """
    Driver operation requested in an incompatible driver state.

    Attributes
    ----------
    operation : str
        Name of the rejected operation
    status : object
        Driver status at the time of the request
    """

    def __init__(self, operation: str, status, reason: str = None):
        message = f"Cannot {operation} while simulation is {status.name.lower()}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.operation = operation
        self.status = status
