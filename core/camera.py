"""Orbit camera for the flock viewer."""

import math
import numpy as np
from OpenGL.GL import *
from OpenGL.GLU import *
from config import boids as config


class Camera:
    """
    Orbital camera around a target point.

    The target either stays at the world origin or eases toward a point
    given by follow(), which the viewer uses to track a single flock.
    """

    def __init__(self):
        self.reset()
        self.zoom_smoothing = 8.0
        self.follow_smoothing = 3.0

    def reset(self):
        self.radius = config.CAMERA["initial_radius"]
        self.target_radius = self.radius
        self.theta = config.CAMERA["initial_theta"]
        self.phi = config.CAMERA["initial_phi"]
        self.target = np.zeros(3)
        self.follow_point = None

    def get_direction(self) -> np.ndarray:
        """Unit vector from the target toward the camera."""
        theta_rad = math.radians(self.theta)
        phi_rad = math.radians(self.phi)
        return np.array([
            math.cos(phi_rad) * math.cos(theta_rad),
            math.sin(phi_rad),
            math.cos(phi_rad) * math.sin(theta_rad),
        ])

    def get_position(self) -> np.ndarray:
        return self.target + self.radius * self.get_direction()

    def rotate(self, d_theta: float, d_phi: float):
        """Rotate the camera by the given angles in degrees."""
        self.theta = (self.theta + d_theta) % 360
        self.phi = float(np.clip(self.phi + d_phi, config.CAMERA["min_phi"], config.CAMERA["max_phi"]))

    def _clamp_radius(self, r: float) -> float:
        return float(np.clip(r, config.CAMERA["min_radius"], config.CAMERA["max_radius"]))

    def zoom(self, delta: float):
        """Immediately zoom by the given amount."""
        self.radius = self._clamp_radius(self.radius + delta)
        self.target_radius = self.radius

    def zoom_smooth(self, delta: float):
        """Ease toward a new zoom over the next frames."""
        self.target_radius = self._clamp_radius(self.target_radius + delta)

    def follow(self, point):
        """Track a point (None returns to the world origin)."""
        self.follow_point = None if point is None else np.asarray(point, dtype=np.float64)

    def update(self, dt: float):
        self.radius += (self.target_radius - self.radius) * min(self.zoom_smoothing * dt, 1.0)
        self.radius = self._clamp_radius(self.radius)

        goal = np.zeros(3) if self.follow_point is None else self.follow_point
        self.target = self.target + (goal - self.target) * min(self.follow_smoothing * dt, 1.0)

    def apply(self):
        """Load the view transform into the modelview matrix."""
        pos = self.get_position()
        glLoadIdentity()
        gluLookAt(
            pos[0], pos[1], pos[2],
            self.target[0], self.target[1], self.target[2],
            0, 1, 0
        )
