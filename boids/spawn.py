"""Randomized flock placement and initial bird velocities."""

import numpy as np
from typing import List, Optional, Protocol

from config import boids as config
from .boid import Bird
from .flock import Flock
from .params import FlockingParams


class RandomSource(Protocol):
    """Anything with numpy Generator's `random(size)`; uniform floats in [0, 1)."""

    def random(self, size=None): ...


def make_rng(seed: Optional[int] = None) -> np.random.Generator:
    """Random source for spawning. seed=None draws fresh OS entropy."""
    return np.random.default_rng(seed)


def rand_float_spread(rng: RandomSource, spread, size: int = 3) -> np.ndarray:
    """
    Uniform values in [-spread/2, spread/2].

    `spread` may be a scalar or a per-axis sequence.
    """
    spread = np.asarray(spread, dtype=np.float64)
    return spread * (0.5 - np.asarray(rng.random(size), dtype=np.float64))


def spawn_bird(flock: Flock, rng: RandomSource,
               jitter: float = config.FLOCKS["spawn_jitter"],
               velocity_spread: float = config.FLOCKS["velocity_spread"]) -> Bird:
    """Create a bird near the flock origin and add it to the flock."""
    position = flock.origin + rand_float_spread(rng, jitter)
    velocity = rand_float_spread(rng, velocity_spread)
    bird = Bird(position=position, velocity=velocity, params=flock.params)
    return flock.add_bird(bird)


def populate_flocks(num_flocks: int, birds_per_flock: int,
                    params: Optional[FlockingParams] = None,
                    rng: Optional[RandomSource] = None,
                    jitter: float = config.FLOCKS["spawn_jitter"],
                    velocity_spread: float = config.FLOCKS["velocity_spread"],
                    num_models: int = len(config.MODELS),
                    use_numba: bool = False) -> List[Flock]:
    """
    Create `num_flocks` flocks of `birds_per_flock` birds each.

    Flock centers are drawn within the world half-extent on X and Z and half
    of it on Y; every bird gets independent jitter around its center and an
    independent small velocity.

    Args:
        num_flocks: Number of flocks
        birds_per_flock: Birds in each flock
        params: Steering constants shared by every bird
        rng: Random source; defaults to an unseeded numpy Generator
        jitter: Full width of the per-axis spawn offset
        velocity_spread: Full width of the per-axis initial velocity
        num_models: Number of bird meshes to cycle through by flock id
        use_numba: Run each flock's sweep through the compiled kernel

    Returns:
        Flocks in creation order
    """
    if num_flocks < 0:
        raise ValueError(f"num_flocks must not be negative, got {num_flocks}")
    if birds_per_flock < 0:
        raise ValueError(f"birds_per_flock must not be negative, got {birds_per_flock}")

    params = params if params is not None else FlockingParams()
    rng = rng if rng is not None else make_rng()
    size = params.world_size
    center_spread = (size, size / 2, size)

    flocks = []
    for i in range(num_flocks):
        center = rand_float_spread(rng, center_spread)
        flock = Flock(
            flock_id=i,
            origin=center,
            params=params,
            model_index=i % max(num_models, 1),
            use_numba=use_numba,
        )
        for _ in range(birds_per_flock):
            spawn_bird(flock, rng, jitter, velocity_spread)
        flocks.append(flock)

    return flocks
