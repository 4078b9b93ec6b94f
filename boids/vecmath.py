"""Small 3D vector helpers over float64 numpy arrays of shape (3,)."""

import math
import numpy as np


def vec3(x: float = 0.0, y: float = 0.0, z: float = 0.0) -> np.ndarray:
    """Create a new float64 3-vector."""
    return np.array([x, y, z], dtype=np.float64)


def length(v: np.ndarray) -> float:
    """Euclidean length."""
    return math.sqrt(v[0] * v[0] + v[1] * v[1] + v[2] * v[2])


def distance(a: np.ndarray, b: np.ndarray) -> float:
    """Euclidean distance between two points."""
    dx = a[0] - b[0]
    dy = a[1] - b[1]
    dz = a[2] - b[2]
    return math.sqrt(dx * dx + dy * dy + dz * dz)


def normalize(v: np.ndarray) -> np.ndarray:
    """
    Return a unit vector in the direction of v.

    The zero vector normalizes to the zero vector rather than NaN, so an
    empty average heading produces no steering.
    """
    mag = length(v)
    if mag == 0:
        return np.zeros(3)
    return v / mag


def cross(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """Cross product a x b."""
    return vec3(
        a[1] * b[2] - a[2] * b[1],
        a[2] * b[0] - a[0] * b[2],
        a[0] * b[1] - a[1] * b[0],
    )


def clamp_length(v: np.ndarray, max_length: float) -> np.ndarray:
    """Rescale v in place to max_length if it is longer. Returns v."""
    mag = length(v)
    if mag > max_length:
        v /= mag
        v *= max_length
    return v
