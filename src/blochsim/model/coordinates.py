"""
Spherical/Cartesian conversion on the Bloch sphere.

Physics convention: theta is the colatitude measured from +Z (|0⟩),
phi the azimuth measured from +X in the XY plane.
"""
from __future__ import annotations

import math
from typing import TYPE_CHECKING

import numpy as np

from blochsim.config import POLE_EPS, NORM_TOLERANCE

if TYPE_CHECKING:
    import numpy.typing as npt

TWO_PI = 2.0 * math.pi


def to_cartesian(theta: float, phi: float, radius: float = 1.0) -> npt.NDArray[np.float64]:
    """
    Convert Bloch angles to a Cartesian vector.

    Args:
        theta: Colatitude in radians.
        phi: Azimuth in radians.
        radius: Length of the returned vector. Renderers draw the arrow slightly
            shorter than the sphere, the engine always uses 1.

    Returns:
        Array of shape (3,) with (x, y, z).
    """
    sin_t = math.sin(theta)
    return np.array([
        radius * sin_t * math.cos(phi),
        radius * sin_t * math.sin(phi),
        radius * math.cos(theta),
    ])


def to_spherical(x: float, y: float, z: float) -> tuple[float, float]:
    """
    Convert a Cartesian vector to (theta, phi).

    The vector does not need to be normalized. Phi is returned in [0, 2π).
    Pole normalization is NOT applied here, see `normalize_angles`.
    """
    r = max(math.hypot(x, y, z), NORM_TOLERANCE)
    # acos is undefined just outside [-1, 1]
    theta = math.acos(min(1.0, max(-1.0, z / r)))
    phi = math.atan2(y, x)
    if phi < 0.0:
        phi += TWO_PI
    # atan2 can return values that round up to exactly 2π after the shift
    if phi >= TWO_PI:
        phi = 0.0
    return theta, phi


def is_at_pole(theta: float, eps: float = POLE_EPS) -> bool:
    """True if theta is within `eps` of either pole."""
    return abs(theta) < eps or abs(theta - math.pi) < eps


def normalize_angles(theta: float, phi: float, eps: float = POLE_EPS) -> tuple[float, float]:
    """Force phi to 0 at the poles where the azimuth is undefined."""
    if is_at_pole(theta, eps):
        return theta, 0.0
    return theta, phi


def angles_from_vector(vector: npt.ArrayLike) -> tuple[float, float]:
    """Convert a Cartesian vector to pole-normalized (theta, phi)."""
    x, y, z = np.asarray(vector, dtype=float).reshape(3)
    theta, phi = to_spherical(float(x), float(y), float(z))
    return normalize_angles(theta, phi)


def clamp_theta(theta: float) -> float:
    return min(math.pi, max(0.0, theta))


def wrap_phi(phi: float) -> float:
    """Wrap an azimuth into [0, 2π)."""
    wrapped = math.fmod(phi, TWO_PI)
    if wrapped < 0.0:
        wrapped += TWO_PI
    if wrapped >= TWO_PI:
        wrapped = 0.0
    return wrapped
