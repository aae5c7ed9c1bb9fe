"""Small kinematics and energy helpers shared by the pendulum models."""

import math
from typing import Tuple


def polar_to_cartesian(
    r: float,
    theta: float,
    origin_x: float = 0.0,
    origin_y: float = 0.0,
) -> Tuple[float, float]:
    """Point at distance r from the origin, angle theta from the downward vertical."""
    return origin_x + r * math.sin(theta), origin_y - r * math.cos(theta)


def tangential_velocity(r: float, theta: float, omega: float) -> Tuple[float, float]:
    """Time derivative of polar_to_cartesian for a rod of fixed length."""
    v = r * omega
    return v * math.cos(theta), v * math.sin(theta)


def normalize_angle(angle: float) -> float:
    """Wrap an angle to [-pi, pi]; non-finite angles give NaN."""
    if not math.isfinite(angle):
        return math.nan
    return math.remainder(angle, 2 * math.pi)


def kinetic_energy(mass: float, speed: float) -> float:
    return 0.5 * mass * speed * speed


def potential_energy(mass: float, gravity: float, height: float) -> float:
    return mass * gravity * height


def clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))
