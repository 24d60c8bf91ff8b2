"""
Numerical integrator for 6-DOF flight dynamics.

Implements RK4 (Runge-Kutta 4th order, fixed step) with a finiteness
check on every stage.
"""

import numpy as np
from typing import Callable, Optional, Tuple

from ..exceptions import NumericDivergence


class RK4Integrator:
    """
    4th-order Runge-Kutta integrator (fixed time step).

    Classic RK4 method with good accuracy for smooth dynamics.
    """

    def __init__(self, dt: float = 0.01):
        """
        Initialize RK4 integrator.

        Parameters:
        -----------
        dt : float
            Fixed time step (seconds)
        """
        if not dt > 0.0:
            raise ValueError(f"Time step dt must be positive, got {dt}")
        self.dt = dt

    @staticmethod
    def _check(values: np.ndarray, stage: str) -> np.ndarray:
        if not np.all(np.isfinite(values)):
            raise NumericDivergence(f"Non-finite value in RK4 {stage}")
        return values

    def step(self, x: np.ndarray, derivative_func: Callable[[np.ndarray], np.ndarray],
             dt: Optional[float] = None) -> np.ndarray:
        """
        Advance state by one time step using RK4.

        Parameters:
        -----------
        x : np.ndarray
            Current state vector (not modified)
        derivative_func : Callable
            Function that computes x_dot = f(x)
        dt : float, optional
            Step size; defaults to the integrator's dt

        Returns:
        --------
        x_new : np.ndarray
            State at t + dt

        Raises:
        -------
        NumericDivergence
            If any stage derivative or the result is not finite
        """
        x = np.asarray(x, dtype=float)
        if dt is None:
            dt = self.dt

        k1 = self._check(derivative_func(x), 'stage k1')
        k2 = self._check(derivative_func(x + 0.5 * dt * k1), 'stage k2')
        k3 = self._check(derivative_func(x + 0.5 * dt * k2), 'stage k3')
        k4 = self._check(derivative_func(x + dt * k3), 'stage k4')

        # Weighted average
        x_new = x + (dt / 6.0) * (k1 + 2*k2 + 2*k3 + k4)

        return self._check(x_new, 'result')

    def integrate(self, x0: np.ndarray, t_span: Tuple[float, float],
                  derivative_func: Callable[[np.ndarray], np.ndarray]) -> Tuple[np.ndarray, np.ndarray]:
        """
        Integrate from t0 to tf.

        Parameters:
        -----------
        x0 : np.ndarray
            Initial state
        t_span : tuple
            (t0, tf) time span
        derivative_func : Callable
            State derivative function

        Returns:
        --------
        t_history : np.ndarray
            Time points
        x_history : np.ndarray, shape (n_steps, len(x0))
            State at each time point
        """
        t0, tf = t_span
        n_steps = int(round((tf - t0) / self.dt)) + 1

        t_history = t0 + self.dt * np.arange(n_steps)
        x_history = np.zeros((n_steps, len(x0)))

        x_history[0, :] = x0
        for i in range(1, n_steps):
            x_history[i, :] = self.step(x_history[i - 1], derivative_func)

        return t_history, x_history
