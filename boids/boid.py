"""Individual bird entity with position, velocity, and flocking behaviors."""

import numpy as np
from dataclasses import dataclass, field
from typing import Optional, Sequence

from .orientation import MODEL_OFFSET, orientation_from_velocity
from .params import FlockingParams
from .vecmath import clamp_length, distance, length, normalize


@dataclass(eq=False)
class Bird:
    """
    A single bird in a flock.

    Kinematic arrays are only ever mutated in place, so views held by
    collaborators stay valid for the bird's lifetime.

    Attributes:
        position: 3D position vector
        velocity: 3D velocity vector
        acceleration: 3D force accumulator (reset each tick)
        orientation: 3x3 facing rotation derived from velocity
        params: Steering constants
        flock: Owning flock, whose members are this bird's neighbors
    """
    position: np.ndarray = field(default_factory=lambda: np.zeros(3))
    velocity: np.ndarray = field(default_factory=lambda: np.zeros(3))
    acceleration: np.ndarray = field(default_factory=lambda: np.zeros(3))
    orientation: np.ndarray = field(default_factory=lambda: MODEL_OFFSET.copy())
    params: FlockingParams = field(default_factory=FlockingParams)
    flock: Optional["Flock"] = field(default=None, repr=False)

    def __post_init__(self):
        self.position = np.array(self.position, dtype=np.float64)
        self.velocity = np.array(self.velocity, dtype=np.float64)
        self.acceleration = np.array(self.acceleration, dtype=np.float64)
        self.orientation = np.array(self.orientation, dtype=np.float64)

        # Point the bird the way it is about to move
        self.update_orientation()

    @property
    def speed(self) -> float:
        return length(self.velocity)

    def apply_force(self, force: np.ndarray):
        """Add a force to the bird's acceleration."""
        self.acceleration += force

    def update(self, neighbors: Optional[Sequence["Bird"]] = None):
        """
        Advance this bird by one tick.

        Neighbors default to the owning flock's members. Birds earlier in
        the flock have already moved this tick when this one reads them.
        """
        if neighbors is None:
            if self.flock is None:
                raise ValueError("Bird has no flock; pass neighbors explicitly")
            neighbors = self.flock.birds

        self.apply_flocking_behavior(neighbors)

        self.velocity += self.acceleration
        clamp_length(self.velocity, self.params.max_speed)

        self.position += self.velocity

        self.acceleration[:] = 0.0

        self.update_orientation()

        # Evaluated on the new position; integrated next tick
        self.check_boundaries()

    def update_orientation(self):
        """Recompute orientation from the current velocity."""
        self.orientation = orientation_from_velocity(
            self.velocity,
            self.orientation,
            self.params.model_direction,
            self.params.rest_speed,
        )

    def flocking_force(self, birds: Sequence["Bird"]) -> np.ndarray:
        """Weighted sum of separation, alignment and cohesion, without applying it."""
        p = self.params
        return (
            self.separate(birds) * p.separation_force
            + self.align(birds) * p.alignment_force
            + self.cohere(birds) * p.cohesion_force
        )

    def apply_flocking_behavior(self, birds: Sequence["Bird"]):
        p = self.params
        separation = self.separate(birds) * p.separation_force
        alignment = self.align(birds) * p.alignment_force
        cohesion = self.cohere(birds) * p.cohesion_force

        self.apply_force(separation)
        self.apply_force(alignment)
        self.apply_force(cohesion)

    def _neighbors_within(self, birds: Sequence["Bird"], radius: float):
        for other in birds:
            if other is self:
                continue
            d = distance(self.position, other.position)
            if 0 < d < radius:
                yield other, d

    def separate(self, birds: Sequence["Bird"]) -> np.ndarray:
        """Average of unit vectors away from close neighbors, weighted by 1/distance."""
        steer = np.zeros(3)
        count = 0

        for other, d in self._neighbors_within(birds, self.params.separation_distance):
            diff = normalize(self.position - other.position)
            steer += diff / d
            count += 1

        if count > 0:
            steer /= count

        return steer

    def align(self, birds: Sequence["Bird"]) -> np.ndarray:
        """Steering toward the average heading of nearby birds at full speed."""
        steer = np.zeros(3)
        count = 0

        for other, _ in self._neighbors_within(birds, self.params.alignment_distance):
            steer += other.velocity
            count += 1

        if count > 0:
            steer /= count
            steer = normalize(steer) * self.params.max_speed
            steer -= self.velocity

        return steer

    def cohere(self, birds: Sequence["Bird"]) -> np.ndarray:
        """Steering toward the center of nearby birds."""
        center = np.zeros(3)
        count = 0

        for other, _ in self._neighbors_within(birds, self.params.cohesion_distance):
            center += other.position
            count += 1

        if count > 0:
            center /= count
            return self.seek(center)

        return center

    def seek(self, target: np.ndarray) -> np.ndarray:
        """Calculate steering force toward a target."""
        desired = normalize(target - self.position) * self.params.max_speed
        return desired - self.velocity

    def boundary_force(self) -> np.ndarray:
        """Constant push back toward the world cube on every axis the bird has left."""
        bounds = self.params.world_size
        turn = self.params.turn_factor
        steer = np.zeros(3)

        for i in range(3):
            if self.position[i] > bounds:
                steer[i] = -turn
            elif self.position[i] < -bounds:
                steer[i] = turn

        return steer

    def check_boundaries(self):
        self.apply_force(self.boundary_force())
