"""
Simulation owner: every flock, the shared parameters and the tick clock.

One tick advances each flock once, in creation order. The elapsed frame
time passed to tick() is only accumulated for collaborators; integration
always uses a fixed unit step, so bird speed depends on the frame rate
the caller ticks at.
"""

import numpy as np
from typing import Iterator, List, Optional

from config import boids as config
from .boid import Bird
from .flock import Flock, warmup_numba
from .orientation import quaternion_from_matrix
from .params import FlockingParams
from .spawn import RandomSource, make_rng, populate_flocks


class Simulation:
    """Owns all flocks and advances them once per tick."""

    def __init__(self, params: Optional[FlockingParams] = None,
                 num_flocks: int = config.FLOCKS["count"],
                 birds_per_flock: int = config.FLOCKS["birds_per_flock"],
                 rng: Optional[RandomSource] = None,
                 seed: Optional[int] = config.FLOCKS["seed"],
                 use_numba: bool = config.FLOCKS["use_numba"]):
        if num_flocks < 0:
            raise ValueError(f"num_flocks must not be negative, got {num_flocks}")
        if birds_per_flock < 0:
            raise ValueError(f"birds_per_flock must not be negative, got {birds_per_flock}")

        self.params = params if params is not None else FlockingParams.from_config()
        self.num_flocks = num_flocks
        self.birds_per_flock = birds_per_flock
        # An injected generator owns the random stream and seed is ignored
        self.seed = seed if rng is None else None
        self._custom_rng = rng is not None
        self.rng = rng if rng is not None else make_rng(seed)
        self.use_numba = use_numba

        self.flocks: List[Flock] = []
        self.ticks = 0
        self.elapsed = 0.0
        self._populated = False

    @property
    def world_size(self) -> float:
        return self.params.world_size

    @property
    def num_birds(self) -> int:
        return sum(len(flock) for flock in self.flocks)

    def birds(self) -> Iterator[Bird]:
        """All birds, flock by flock, in creation order."""
        for flock in self.flocks:
            yield from flock.birds

    def populate(self) -> List[Flock]:
        """Create the flocks. May only run once per simulation."""
        if self._populated:
            raise RuntimeError("Simulation is already populated")

        if self.use_numba:
            warmup_numba()

        self.flocks = populate_flocks(
            self.num_flocks,
            self.birds_per_flock,
            params=self.params,
            rng=self.rng,
            use_numba=self.use_numba,
        )
        self._populated = True

        print(f"[Sim] Spawned {self.num_flocks} flocks x {self.birds_per_flock} birds "
              f"({'numba' if self.use_numba else 'python'} sweep, seed={'custom' if self._custom_rng else self.seed})")
        return self.flocks

    def add_flock(self, flock: Flock) -> Flock:
        """Adopt a hand-built flock (used by tests and tools)."""
        if flock.params != self.params:
            raise ValueError("Flock parameters differ from the simulation's")
        self.flocks.append(flock)
        self._populated = True
        return flock

    def step(self):
        """Advance every flock by one tick."""
        for flock in self.flocks:
            flock.update()
        self.ticks += 1

    def tick(self, dt: float = 0.0):
        """
        Frame callback: record elapsed time, then step once.

        dt is informational only and does not scale integration.
        """
        self.elapsed += dt
        self.step()

    def run(self, ticks: int):
        for _ in range(ticks):
            self.step()

    def positions(self) -> np.ndarray:
        """Positions of all birds, shape (n, 3)."""
        birds = list(self.birds())
        if not birds:
            return np.zeros((0, 3))
        return np.array([b.position for b in birds], dtype=np.float64)

    def velocities(self) -> np.ndarray:
        """Velocities of all birds, shape (n, 3)."""
        birds = list(self.birds())
        if not birds:
            return np.zeros((0, 3))
        return np.array([b.velocity for b in birds], dtype=np.float64)

    def orientations(self) -> np.ndarray:
        """Orientation matrices of all birds, shape (n, 3, 3)."""
        birds = list(self.birds())
        if not birds:
            return np.zeros((0, 3, 3))
        return np.array([b.orientation for b in birds], dtype=np.float64)

    def quaternions(self) -> np.ndarray:
        """Orientations as (x, y, z, w) quaternions, shape (n, 4)."""
        return np.array([quaternion_from_matrix(m) for m in self.orientations()]).reshape(-1, 4)

    def flock_indices(self) -> np.ndarray:
        """Owning flock id of each bird, aligned with positions()."""
        return np.array([flock.id for flock in self.flocks for _ in flock.birds], dtype=np.int32)

    def model_indices(self) -> np.ndarray:
        """Mesh index of each bird, aligned with positions()."""
        return np.array([flock.model_index for flock in self.flocks for _ in flock.birds],
                        dtype=np.int32)

    def snapshot(self) -> dict:
        """Read-only copy of everything a renderer or recorder needs."""
        return {
            "tick": self.ticks,
            "elapsed": self.elapsed,
            "positions": self.positions(),
            "orientations": self.orientations(),
            "flock_indices": self.flock_indices(),
        }
