"""Flock management - sequential all-pairs steering, optionally through a Numba kernel."""

import math
import numpy as np
from numba import njit
from typing import Iterator, List, Optional

from .boid import Bird
from .params import FlockingParams


# ============================================================================
# NUMBA JIT-COMPILED FLOCK SWEEP
# ============================================================================

@njit(cache=True)
def update_flock_numba(
    positions: np.ndarray,
    velocities: np.ndarray,
    accelerations: np.ndarray,
    separation_distance: float,
    alignment_distance: float,
    cohesion_distance: float,
    separation_force: float,
    alignment_force: float,
    cohesion_force: float,
    max_speed: float,
    world_size: float,
    turn_factor: float,
    num_birds: int
):
    """
    Numba JIT-compiled flock tick, mirroring Bird.update operation for operation.

    Birds are processed strictly in index order and read the arrays live, so
    bird i sees birds < i already moved this tick. Do not parallelize the
    outer loop.
    """
    for i in range(num_birds):
        px = positions[i, 0]
        py = positions[i, 1]
        pz = positions[i, 2]
        vx = velocities[i, 0]
        vy = velocities[i, 1]
        vz = velocities[i, 2]

        sep_x, sep_y, sep_z = 0.0, 0.0, 0.0
        ali_x, ali_y, ali_z = 0.0, 0.0, 0.0
        coh_x, coh_y, coh_z = 0.0, 0.0, 0.0
        sep_count = 0
        ali_count = 0
        coh_count = 0

        for j in range(num_birds):
            if i == j:
                continue

            dx = px - positions[j, 0]
            dy = py - positions[j, 1]
            dz = pz - positions[j, 2]
            dist = math.sqrt(dx * dx + dy * dy + dz * dz)

            if dist <= 0.0:
                continue

            if dist < separation_distance:
                sep_x += (dx / dist) / dist
                sep_y += (dy / dist) / dist
                sep_z += (dz / dist) / dist
                sep_count += 1

            if dist < alignment_distance:
                ali_x += velocities[j, 0]
                ali_y += velocities[j, 1]
                ali_z += velocities[j, 2]
                ali_count += 1

            if dist < cohesion_distance:
                coh_x += positions[j, 0]
                coh_y += positions[j, 1]
                coh_z += positions[j, 2]
                coh_count += 1

        if sep_count > 0:
            sep_x /= sep_count
            sep_y /= sep_count
            sep_z /= sep_count

        if ali_count > 0:
            ali_x /= ali_count
            ali_y /= ali_count
            ali_z /= ali_count

            mag = math.sqrt(ali_x * ali_x + ali_y * ali_y + ali_z * ali_z)
            if mag > 0.0:
                ali_x = (ali_x / mag) * max_speed
                ali_y = (ali_y / mag) * max_speed
                ali_z = (ali_z / mag) * max_speed
            else:
                ali_x, ali_y, ali_z = 0.0, 0.0, 0.0

            ali_x -= vx
            ali_y -= vy
            ali_z -= vz

        if coh_count > 0:
            coh_x = coh_x / coh_count - px
            coh_y = coh_y / coh_count - py
            coh_z = coh_z / coh_count - pz

            mag = math.sqrt(coh_x * coh_x + coh_y * coh_y + coh_z * coh_z)
            if mag > 0.0:
                coh_x = (coh_x / mag) * max_speed
                coh_y = (coh_y / mag) * max_speed
                coh_z = (coh_z / mag) * max_speed
            else:
                coh_x, coh_y, coh_z = 0.0, 0.0, 0.0

            coh_x -= vx
            coh_y -= vy
            coh_z -= vz

        # Accumulator still holds last tick's boundary push
        ax = accelerations[i, 0]
        ay = accelerations[i, 1]
        az = accelerations[i, 2]
        ax += sep_x * separation_force
        ay += sep_y * separation_force
        az += sep_z * separation_force
        ax += ali_x * alignment_force
        ay += ali_y * alignment_force
        az += ali_z * alignment_force
        ax += coh_x * cohesion_force
        ay += coh_y * cohesion_force
        az += coh_z * cohesion_force

        vx += ax
        vy += ay
        vz += az

        speed = math.sqrt(vx * vx + vy * vy + vz * vz)
        if speed > max_speed:
            vx = (vx / speed) * max_speed
            vy = (vy / speed) * max_speed
            vz = (vz / speed) * max_speed

        velocities[i, 0] = vx
        velocities[i, 1] = vy
        velocities[i, 2] = vz

        positions[i, 0] = px + vx
        positions[i, 1] = py + vy
        positions[i, 2] = pz + vz

        for dim in range(3):
            accelerations[i, dim] = 0.0
            pos = positions[i, dim]
            if pos > world_size:
                accelerations[i, dim] = -turn_factor
            elif pos < -world_size:
                accelerations[i, dim] = turn_factor


def warmup_numba():
    """Pre-compile the Numba flock sweep."""
    n = 8
    pos = np.random.rand(n, 3).astype(np.float64) * 10
    vel = (np.random.rand(n, 3).astype(np.float64) - 0.5) * 0.2
    acc = np.zeros((n, 3), dtype=np.float64)
    update_flock_numba(pos, vel, acc, 5.0, 25.0, 10.0, 0.5, 0.1, 0.01, 0.2, 50.0, 0.1, n)


# ============================================================================
# FLOCK CLASS
# ============================================================================

class Flock:
    """
    An ordered group of birds that are each other's only neighbors.

    Membership, not proximity, decides who can influence whom: birds of
    different flocks never see each other no matter how close they fly.
    """

    def __init__(self, flock_id: int = 0, origin: Optional[np.ndarray] = None,
                 params: Optional[FlockingParams] = None, model_index: int = 0,
                 use_numba: bool = False):
        self.id = flock_id
        self.origin = np.zeros(3) if origin is None else np.array(origin, dtype=np.float64)
        self.params = params if params is not None else FlockingParams()
        self.model_index = model_index
        self.use_numba = use_numba
        self.birds: List[Bird] = []

    def __len__(self) -> int:
        return len(self.birds)

    def __iter__(self) -> Iterator[Bird]:
        return iter(self.birds)

    def __repr__(self) -> str:
        return f"Flock(id={self.id}, birds={len(self.birds)})"

    def add_bird(self, bird: Bird) -> Bird:
        """Append a bird; it stays a member for the rest of the run."""
        if bird.flock is not None and bird.flock is not self:
            raise ValueError(f"Bird already belongs to flock {bird.flock.id}")
        if bird.params != self.params:
            raise ValueError("Bird parameters differ from its flock's")
        if any(member is bird for member in self.birds):
            return bird
        bird.flock = self
        self.birds.append(bird)
        return bird

    def update(self):
        """Advance every bird by one tick, in insertion order."""
        if self.use_numba:
            self._update_numba()
            return

        for bird in self.birds:
            bird.update()

    def _update_numba(self):
        n = len(self.birds)
        if n == 0:
            return

        positions = self.positions()
        velocities = self.velocities()
        accelerations = np.array([b.acceleration for b in self.birds], dtype=np.float64)

        p = self.params
        update_flock_numba(
            positions,
            velocities,
            accelerations,
            float(p.separation_distance),
            float(p.alignment_distance),
            float(p.cohesion_distance),
            float(p.separation_force),
            float(p.alignment_force),
            float(p.cohesion_force),
            float(p.max_speed),
            float(p.world_size),
            float(p.turn_factor),
            n
        )

        for i, bird in enumerate(self.birds):
            bird.position[:] = positions[i]
            bird.velocity[:] = velocities[i]
            bird.acceleration[:] = accelerations[i]
            bird.update_orientation()

    def positions(self) -> np.ndarray:
        """Copy of member positions, shape (n, 3)."""
        if not self.birds:
            return np.zeros((0, 3))
        return np.array([b.position for b in self.birds], dtype=np.float64)

    def velocities(self) -> np.ndarray:
        """Copy of member velocities, shape (n, 3)."""
        if not self.birds:
            return np.zeros((0, 3))
        return np.array([b.velocity for b in self.birds], dtype=np.float64)

    def centroid(self) -> np.ndarray:
        """Mean member position (origin for an empty flock)."""
        if not self.birds:
            return self.origin.copy()
        return self.positions().mean(axis=0)
