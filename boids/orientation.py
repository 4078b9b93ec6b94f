"""
Facing rotation derived from a bird's velocity.

Rotations are 3x3 matrices whose columns are the bird's local X, Y and Z
axes expressed in world space. Nothing here touches kinematic state.
"""

import math
import numpy as np

from .vecmath import cross, length, normalize

WORLD_UP = np.array([0.0, 1.0, 0.0])


def rotation_y(angle: float) -> np.ndarray:
    """Rotation matrix about the Y axis."""
    c = math.cos(angle)
    s = math.sin(angle)
    return np.array([
        [c, 0.0, s],
        [0.0, 1.0, 0.0],
        [-s, 0.0, c],
    ])


# Bird models are authored turned half way round relative to their heading
MODEL_OFFSET = rotation_y(math.pi)


def look_at_rotation(direction: np.ndarray, up: np.ndarray = WORLD_UP) -> np.ndarray:
    """
    Rotation that points an object's local +Z axis along `direction`.

    Args:
        direction: Vector from the object toward the point it should face
        up: World up vector used to fix roll

    Returns:
        3x3 rotation matrix
    """
    z = np.array(direction, dtype=np.float64)
    if length(z) == 0:
        z[2] = 1.0
    z = normalize(z)

    x = cross(up, z)
    if length(x) == 0:
        # Facing straight along up: nudge off the pole so roll is defined
        if abs(up[2]) == 1:
            z[0] += 0.0001
        else:
            z[2] += 0.0001
        z = normalize(z)
        x = cross(up, z)

    x = normalize(x)
    y = cross(z, x)
    return np.column_stack((x, y, z))


def orientation_from_velocity(velocity: np.ndarray, current: np.ndarray,
                              model_direction: int = -1,
                              rest_speed: float = 0.01) -> np.ndarray:
    """
    Derive a facing rotation from a velocity vector.

    Birds moving at or below `rest_speed` keep `current` (the same object
    is returned), so noise-scale velocities never make them jitter.

    Args:
        velocity: Current velocity
        current: Previously derived orientation
        model_direction: 1 if the model is authored facing +Z, -1 if facing -Z
        rest_speed: Speed threshold below which orientation is left alone

    Returns:
        3x3 rotation matrix
    """
    if length(velocity) <= rest_speed:
        return current

    direction = normalize(velocity)
    if model_direction == -1:
        direction = -direction

    return look_at_rotation(direction) @ MODEL_OFFSET


def forward_axis(orientation: np.ndarray, model_direction: int = -1) -> np.ndarray:
    """
    World-space heading encoded in an orientation produced by this module.

    A query for collaborators (cameras, tests) that need the direction a bird
    faces without its velocity.
    """
    return -model_direction * orientation[:, 2]


def quaternion_from_matrix(m: np.ndarray) -> np.ndarray:
    """Convert a rotation matrix to a unit quaternion (x, y, z, w)."""
    m11, m12, m13 = m[0, 0], m[0, 1], m[0, 2]
    m21, m22, m23 = m[1, 0], m[1, 1], m[1, 2]
    m31, m32, m33 = m[2, 0], m[2, 1], m[2, 2]
    trace = m11 + m22 + m33

    if trace > 0:
        s = 0.5 / math.sqrt(trace + 1.0)
        w = 0.25 / s
        x = (m32 - m23) * s
        y = (m13 - m31) * s
        z = (m21 - m12) * s
    elif m11 > m22 and m11 > m33:
        s = 2.0 * math.sqrt(1.0 + m11 - m22 - m33)
        w = (m32 - m23) / s
        x = 0.25 * s
        y = (m12 + m21) / s
        z = (m13 + m31) / s
    elif m22 > m33:
        s = 2.0 * math.sqrt(1.0 + m22 - m11 - m33)
        w = (m13 - m31) / s
        x = (m12 + m21) / s
        y = 0.25 * s
        z = (m23 + m32) / s
    else:
        s = 2.0 * math.sqrt(1.0 + m33 - m11 - m22)
        w = (m21 - m12) / s
        x = (m13 + m31) / s
        y = (m23 + m32) / s
        z = 0.25 * s

    return np.array([x, y, z, w])


def matrix_from_quaternions(q: np.ndarray) -> np.ndarray:
    """Rotation matrices for an (n, 4) array of (x, y, z, w) quaternions."""
    q = np.asarray(q, dtype=np.float64).reshape(-1, 4)
    x, y, z, w = q[:, 0], q[:, 1], q[:, 2], q[:, 3]

    m = np.empty((len(q), 3, 3))
    m[:, 0, 0] = 1 - 2 * (y * y + z * z)
    m[:, 0, 1] = 2 * (x * y - z * w)
    m[:, 0, 2] = 2 * (x * z + y * w)
    m[:, 1, 0] = 2 * (x * y + z * w)
    m[:, 1, 1] = 1 - 2 * (x * x + z * z)
    m[:, 1, 2] = 2 * (y * z - x * w)
    m[:, 2, 0] = 2 * (x * z - y * w)
    m[:, 2, 1] = 2 * (y * z + x * w)
    m[:, 2, 2] = 1 - 2 * (x * x + y * y)
    return m
