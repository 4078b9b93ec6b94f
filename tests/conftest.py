"""Shared fixtures for the flocking tests."""

from pathlib import Path

import numpy as np
import pytest

from boids import Bird, Flock, FlockingParams

ROOT = Path(__file__).resolve().parents[1]


@pytest.fixture
def project_root():
    """Return path to project root."""
    return ROOT


@pytest.fixture
def params():
    """Stock steering constants."""
    return FlockingParams()


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def make_flock(params):
    """Build a flock from explicit positions and (optionally) velocities."""

    def _make(positions, velocities=None, use_numba=False, flock_params=None, flock_id=0):
        p = flock_params or params
        flock = Flock(flock_id=flock_id, params=p, use_numba=use_numba)
        if velocities is None:
            velocities = [(0.0, 0.0, 0.0)] * len(positions)
        for pos, vel in zip(positions, velocities):
            flock.add_bird(Bird(position=pos, velocity=vel, params=p))
        return flock

    return _make


def clone_flock(flock: Flock, use_numba: bool) -> Flock:
    """Deep copy of a flock's kinematic state into a new flock."""
    copy = Flock(flock_id=flock.id, origin=flock.origin, params=flock.params, use_numba=use_numba)
    for bird in flock.birds:
        copy.add_bird(Bird(
            position=bird.position.copy(),
            velocity=bird.velocity.copy(),
            acceleration=bird.acceleration.copy(),
            orientation=bird.orientation.copy(),
            params=bird.params,
        ))
    return copy
