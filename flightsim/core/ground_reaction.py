"""
Ground reaction model.

Each contact point that penetrates the terrain produces a spring-damper
normal force and Coulomb-limited rolling/side friction. Forces are
returned in body frame together with their moments about the CG.
"""

import numpy as np
from dataclasses import dataclass, field
from typing import Mapping, Sequence, Tuple

from .aircraft import BrakeSide, GroundContactPoint
from .state import SimulationState
from ..control.controls import FlightControl


@dataclass(frozen=True)
class GroundContact:
    """Result of one ground reaction evaluation."""
    force: np.ndarray = field(default_factory=lambda: np.zeros(3))
    moment: np.ndarray = field(default_factory=lambda: np.zeros(3))
    on_ground: bool = False
    compression: Tuple[float, ...] = ()


AIRBORNE = GroundContact()


class GroundReaction:
    """
    Spring-damper landing gear on flat terrain.

    Parameters
    ----------
    points : sequence of GroundContactPoint
        Contact geometry relative to the CG
    terrain_elevation : float, optional
        Terrain height (ft, positive up)
    enabled : bool, optional
        When False every evaluation is airborne
    velocity_epsilon : float, optional
        Slip speed (ft/s) at which friction reaches its Coulomb limit
    """

    def __init__(self, points: Sequence[GroundContactPoint], terrain_elevation: float = 0.0,
                 enabled: bool = True, velocity_epsilon: float = 0.5):
        self.points = tuple(points)
        self.terrain_elevation = terrain_elevation
        self.enabled = enabled
        self.velocity_epsilon = velocity_epsilon

    def _brake(self, point: GroundContactPoint, controls: Mapping[FlightControl, float]) -> float:
        if point.brake is BrakeSide.LEFT:
            return controls.get(FlightControl.BRAKE_LEFT, 0.0)
        if point.brake is BrakeSide.RIGHT:
            return controls.get(FlightControl.BRAKE_RIGHT, 0.0)
        return 0.0

    def _friction(self, mu: float, normal: float, slip: float) -> float:
        return -mu * normal * np.clip(slip / self.velocity_epsilon, -1.0, 1.0)

    def evaluate(self, state: SimulationState, controls: Mapping[FlightControl, float]) -> GroundContact:
        """
        Compute the total ground reaction.

        Returns
        -------
        GroundContact
            Body-frame force (lbf) and moment about the CG (ft*lbf);
            exactly zero with on_ground False when no point penetrates
        """
        if not self.enabled or not self.points:
            return AIRBORNE

        R_bn = state.body_to_ned
        R_nb = R_bn.T
        position = state.position
        velocity_ned = R_bn @ state.velocity_body
        omega = state.angular_rates

        heading = np.array([np.cos(state.psi), np.sin(state.psi), 0.0])

        force = np.zeros(3)
        moment = np.zeros(3)
        compression = []
        on_ground = False

        for point in self.points:
            r = np.asarray(point.position, dtype=float)
            point_ned = position + R_bn @ r
            depth = self.terrain_elevation + point_ned[2]
            compression.append(max(depth, 0.0))
            if depth <= 0.0:
                continue

            point_velocity = velocity_ned + R_bn @ np.cross(omega, r)

            # Spring-damper normal force, never pulling the point down
            normal = max(point.stiffness * depth + point.damping * point_velocity[2], 0.0)
            if normal == 0.0:
                continue
            on_ground = True

            steer = 0.0
            if point.steerable:
                steer = point.steering_ratio * controls.get(FlightControl.RUDDER, 0.0)
            c, s = np.cos(steer), np.sin(steer)
            rolling_dir = np.array([c * heading[0] - s * heading[1], s * heading[0] + c * heading[1], 0.0])
            side_dir = np.array([-rolling_dir[1], rolling_dir[0], 0.0])

            mu_roll = point.rolling_friction + self._brake(point, controls) * point.braking_friction
            f_roll = self._friction(mu_roll, normal, point_velocity @ rolling_dir)
            f_side = self._friction(point.side_friction, normal, point_velocity @ side_dir)

            point_force_ned = f_roll * rolling_dir + f_side * side_dir + np.array([0.0, 0.0, -normal])
            point_force = R_nb @ point_force_ned

            force += point_force
            moment += np.cross(r, point_force)

        if not on_ground:
            return GroundContact(compression=tuple(compression))

        return GroundContact(force, moment, True, tuple(compression))

    def total_ground_forces(self, state: SimulationState, controls: Mapping[FlightControl, float]) -> np.ndarray:
        return self.evaluate(state, controls).force

    def total_ground_moments(self, state: SimulationState, controls: Mapping[FlightControl, float]) -> np.ndarray:
        return self.evaluate(state, controls).moment
