"""
Rotation of Bloch vectors.

`rotate` implements Rodrigues' rotation formula for an arbitrary axis,
`rotate_x`, `rotate_y` and `rotate_z` are the closed forms for the
coordinate axes and give the same result as `rotate` for those axes.
"""
from __future__ import annotations

import math
from typing import TYPE_CHECKING

import numpy as np

from blochsim.config import NORM_TOLERANCE

if TYPE_CHECKING:
    import numpy.typing as npt

X_AXIS = (1.0, 0.0, 0.0)
Y_AXIS = (0.0, 1.0, 0.0)
Z_AXIS = (0.0, 0.0, 1.0)


def _as_vector(vector: npt.ArrayLike) -> npt.NDArray[np.float64]:
    arr = np.asarray(vector, dtype=float)
    if arr.shape != (3,):
        raise ValueError(f"Expected a 3-vector, got shape {arr.shape}.")
    return arr


def unit_axis(axis: npt.ArrayLike) -> npt.NDArray[np.float64]:
    """Normalize a rotation axis. The H gate axis (1, 0, 1) is given unnormalized."""
    n = _as_vector(axis)
    length = float(np.linalg.norm(n))
    if length < NORM_TOLERANCE:
        raise ValueError("Rotation axis must have non-zero length.")
    return n / length


def rotate(vector: npt.ArrayLike, axis: npt.ArrayLike, angle: float) -> npt.NDArray[np.float64]:
    """
    Rotate `vector` by `angle` radians about `axis` (right-hand rule).

    v' = v cos(a) + (n x v) sin(a) + n (n . v)(1 - cos(a))

    Args:
        vector: The vector to rotate, shape (3,).
        axis: Rotation axis, any non-zero length.
        angle: Rotation angle in radians.

    Returns:
        The rotated vector as a new array.
    """
    v = _as_vector(vector)
    n = unit_axis(axis)
    cos_a = math.cos(angle)
    sin_a = math.sin(angle)
    return v * cos_a + np.cross(n, v) * sin_a + n * float(np.dot(n, v)) * (1.0 - cos_a)


def rotate_x(vector: npt.ArrayLike, angle: float) -> npt.NDArray[np.float64]:
    x, y, z = _as_vector(vector)
    cos_a = math.cos(angle)
    sin_a = math.sin(angle)
    return np.array([x, y * cos_a - z * sin_a, y * sin_a + z * cos_a])


def rotate_y(vector: npt.ArrayLike, angle: float) -> npt.NDArray[np.float64]:
    x, y, z = _as_vector(vector)
    cos_a = math.cos(angle)
    sin_a = math.sin(angle)
    return np.array([x * cos_a + z * sin_a, y, -x * sin_a + z * cos_a])


def rotate_z(vector: npt.ArrayLike, angle: float) -> npt.NDArray[np.float64]:
    x, y, z = _as_vector(vector)
    cos_a = math.cos(angle)
    sin_a = math.sin(angle)
    return np.array([x * cos_a - y * sin_a, x * sin_a + y * cos_a, z])


def rotation_matrix(axis: npt.ArrayLike, angle: float) -> npt.NDArray[np.float64]:
    """3x3 matrix form of `rotate`: R = I cos(a) + [n]x sin(a) + n n^T (1 - cos(a))."""
    n = unit_axis(axis)
    cos_a = math.cos(angle)
    sin_a = math.sin(angle)
    cross = np.array([
        [0.0, -n[2], n[1]],
        [n[2], 0.0, -n[0]],
        [-n[1], n[0], 0.0],
    ])
    return np.eye(3) * cos_a + cross * sin_a + np.outer(n, n) * (1.0 - cos_a)


def rotate_about(vector: npt.ArrayLike, axis: npt.ArrayLike, angle: float) -> npt.NDArray[np.float64]:
    """Dispatch to the closed form when `axis` is a coordinate axis."""
    a = tuple(float(c) for c in _as_vector(axis))
    if a == X_AXIS:
        return rotate_x(vector, angle)
    if a == Y_AXIS:
        return rotate_y(vector, angle)
    if a == Z_AXIS:
        return rotate_z(vector, angle)
    return rotate(vector, axis, angle)
