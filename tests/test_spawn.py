"""Tests for flock placement and the pluggable random source."""

import numpy as np
import pytest

from boids import FlockingParams, make_rng, populate_flocks
from boids.spawn import rand_float_spread


class ConstantSource:
    """Random source that always returns the same value."""

    def __init__(self, value):
        self.value = value
        self.calls = 0

    def random(self, size=None):
        self.calls += 1
        return np.full(size, self.value)


class TestRandFloatSpread:

    def test_midpoint_is_zero(self):
        np.testing.assert_array_equal(rand_float_spread(ConstantSource(0.5), 10.0), np.zeros(3))

    def test_range_ends(self):
        np.testing.assert_allclose(rand_float_spread(ConstantSource(0.0), 10.0), [5, 5, 5])
        assert np.all(rand_float_spread(ConstantSource(0.999999), 10.0) > -5.0)

    def test_per_axis_spread(self):
        np.testing.assert_allclose(rand_float_spread(ConstantSource(0.0), (50, 25, 50)), [25, 12.5, 25])

    def test_bounds_with_real_rng(self, rng):
        values = np.array([rand_float_spread(rng, 0.2) for _ in range(500)])
        assert np.all(values <= 0.1)
        assert np.all(values > -0.1)


class TestPopulateFlocks:

    def test_counts_and_ids(self, rng):
        flocks = populate_flocks(25, 4, rng=rng)
        assert len(flocks) == 25
        assert [f.id for f in flocks] == list(range(25))
        assert all(len(f) == 4 for f in flocks)
        assert all(bird.flock is f for f in flocks for bird in f.birds)

    def test_model_index_cycles(self, rng):
        flocks = populate_flocks(7, 1, rng=rng, num_models=3)
        assert [f.model_index for f in flocks] == [0, 1, 2, 0, 1, 2, 0]

    def test_spawn_region(self, rng):
        params = FlockingParams()
        w = params.world_size
        flocks = populate_flocks(40, 4, params=params, rng=rng)
        for flock in flocks:
            assert abs(flock.origin[0]) <= w / 2
            assert abs(flock.origin[1]) <= w / 4
            assert abs(flock.origin[2]) <= w / 2
            for bird in flock.birds:
                assert np.all(np.abs(bird.position - flock.origin) <= 2.5)
                assert np.all(np.abs(bird.velocity) <= 0.1)

    def test_birds_share_flock_params(self, rng):
        params = FlockingParams.from_config(world_size=30.0)
        flocks = populate_flocks(3, 3, params=params, rng=rng)
        assert all(bird.params is params for f in flocks for bird in f.birds)

    def test_constant_source(self):
        """A midpoint source puts every bird at rest on the origin."""
        source = ConstantSource(0.5)
        flocks = populate_flocks(2, 3, rng=source)
        for flock in flocks:
            for bird in flock.birds:
                np.testing.assert_array_equal(bird.position, np.zeros(3))
                np.testing.assert_array_equal(bird.velocity, np.zeros(3))
        # One center draw per flock, position and velocity draws per bird
        assert source.calls == 2 * (1 + 3 * 2)

    def test_same_seed_same_sky(self):
        a = populate_flocks(5, 4, rng=make_rng(99))
        b = populate_flocks(5, 4, rng=make_rng(99))
        for fa, fb in zip(a, b):
            np.testing.assert_array_equal(fa.positions(), fb.positions())
            np.testing.assert_array_equal(fa.velocities(), fb.velocities())

    def test_different_seed_different_sky(self):
        a = populate_flocks(5, 4, rng=make_rng(1))
        b = populate_flocks(5, 4, rng=make_rng(2))
        assert not np.allclose(a[0].positions(), b[0].positions())

    def test_empty(self, rng):
        assert populate_flocks(0, 4, rng=rng) == []
        assert all(len(f) == 0 for f in populate_flocks(3, 0, rng=rng))

    @pytest.mark.parametrize("num_flocks,birds_per_flock", [(-1, 4), (2, -1)])
    def test_negative_counts_rejected(self, num_flocks, birds_per_flock):
        with pytest.raises(ValueError):
            populate_flocks(num_flocks, birds_per_flock, rng=make_rng(0))
