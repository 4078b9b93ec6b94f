"""Bird flocking engine."""

from .params import FlockingParams
from .boid import Bird
from .flock import Flock, warmup_numba
from .simulation import Simulation
from .spawn import make_rng, populate_flocks

__all__ = ["FlockingParams", "Bird", "Flock", "Simulation", "make_rng", "populate_flocks",
           "warmup_numba"]
