"""Tests for flock membership, sequential update order and the Numba sweep."""

import numpy as np
import pytest

from boids import Bird, Flock, FlockingParams
from boids.spawn import populate_flocks
from conftest import clone_flock


class TestMembership:

    def test_add_bird_sets_owner(self, params):
        flock = Flock(params=params)
        bird = flock.add_bird(Bird(params=params))
        assert bird.flock is flock
        assert len(flock) == 1
        assert list(flock) == [bird]

    def test_add_twice_is_noop(self, params):
        flock = Flock(params=params)
        bird = Bird(params=params)
        flock.add_bird(bird)
        flock.add_bird(bird)
        assert len(flock) == 1

    def test_bird_constructed_with_flock_is_appended(self, params):
        flock = Flock(params=params)
        bird = Bird(params=params, flock=flock)
        flock.add_bird(bird)
        assert flock.birds == [bird]

    def test_bird_cannot_join_second_flock(self, params):
        first = Flock(flock_id=0, params=params)
        second = Flock(flock_id=1, params=params)
        bird = first.add_bird(Bird(params=params))
        with pytest.raises(ValueError, match="flock 0"):
            second.add_bird(bird)

    def test_params_must_match(self, params):
        flock = Flock(params=params)
        with pytest.raises(ValueError):
            flock.add_bird(Bird(params=FlockingParams.from_config(max_speed=0.3)))

    def test_centroid(self, make_flock):
        flock = make_flock([(0, 0, 0), (2, 0, 0), (1, 3, 0)])
        np.testing.assert_allclose(flock.centroid(), [1, 1, 0])

    def test_empty_flock(self):
        flock = Flock(origin=(1, 2, 3))
        flock.update()
        assert flock.positions().shape == (0, 3)
        np.testing.assert_array_equal(flock.centroid(), [1, 2, 3])


class TestSequentialUpdate:

    def test_update_matches_bird_by_bird(self, make_flock):
        positions = [(0, 0, 0), (2, 1, 0), (4, -1, 1), (-3, 0, 2)]
        velocities = [(0.1, 0, 0), (0, 0.1, 0), (0, 0, 0.1), (0.05, 0.05, 0)]
        flock = make_flock(positions, velocities)
        manual = make_flock(positions, velocities)

        for _ in range(5):
            flock.update()
            for bird in manual.birds:
                bird.update()

        np.testing.assert_array_equal(flock.positions(), manual.positions())
        np.testing.assert_array_equal(flock.velocities(), manual.velocities())

    def test_later_birds_see_moved_neighbors(self, make_flock):
        """Insertion order changes the outcome within a tick."""
        a_first = make_flock([(0, 0, 0), (2, 0, 0), (4, 0, 0)])
        a_last = make_flock([(4, 0, 0), (2, 0, 0), (0, 0, 0)])

        a_first.update()
        a_last.update()

        bird_a_first = a_first.birds[0]
        bird_a_last = a_last.birds[2]
        assert not np.allclose(bird_a_first.position, bird_a_last.position)

        # The first bird to move only saw unmoved neighbors
        expected = -0.375 * 0.5 + 0.2 * 0.01
        assert bird_a_first.velocity[0] == pytest.approx(expected)

    def test_flock_does_not_touch_other_flocks(self, make_flock):
        ours = make_flock([(0, 0, 0), (3, 0, 0)], flock_id=0)
        theirs = make_flock([(1, 0, 0), (2, 0, 0)], flock_id=1)
        before = theirs.positions()
        ours.update()
        np.testing.assert_array_equal(theirs.positions(), before)


class TestNumbaSweep:

    def test_matches_python(self, rng, params):
        # Centered near a corner so the boundary push is exercised too
        flock = populate_flocks(1, 12, params=params, rng=rng, jitter=12.0)[0]
        for bird in flock.birds:
            bird.position += np.array([45.0, 20.0, -45.0])

        python_flock = clone_flock(flock, use_numba=False)
        numba_flock = clone_flock(flock, use_numba=True)

        for _ in range(150):
            python_flock.update()
            numba_flock.update()

        np.testing.assert_allclose(numba_flock.positions(), python_flock.positions(), rtol=0, atol=1e-9)
        np.testing.assert_allclose(numba_flock.velocities(), python_flock.velocities(), rtol=0, atol=1e-9)
        for p, n in zip(python_flock.birds, numba_flock.birds):
            np.testing.assert_allclose(n.acceleration, p.acceleration, rtol=0, atol=1e-9)
            np.testing.assert_allclose(n.orientation, p.orientation, atol=1e-9)

    def test_literal_pair(self, make_flock):
        flock = make_flock([(0, 0, 0), (3, 0, 0)], use_numba=True)
        flock.update()
        assert flock.birds[0].velocity[0] == pytest.approx(-1 / 6 + 0.002)

    def test_keeps_bird_arrays(self, make_flock):
        flock = make_flock([(0, 0, 0), (1, 0, 0)], use_numba=True)
        position = flock.birds[0].position
        flock.update()
        assert flock.birds[0].position is position

    def test_speed_clamped(self, rng, params):
        flock = populate_flocks(1, 10, params=params, rng=rng, velocity_spread=4.0, use_numba=True)[0]
        for _ in range(20):
            flock.update()
            speeds = np.linalg.norm(flock.velocities(), axis=1)
            assert np.all(speeds <= params.max_speed + 1e-12)
