"""End-to-end tests for the Simulation owner."""

import itertools

import numpy as np
import pytest

from boids import Bird, Flock, FlockingParams, Simulation
from boids.spawn import make_rng
from conftest import clone_flock


def mean_pairwise_distance(positions):
    pairs = list(itertools.combinations(range(len(positions)), 2))
    return sum(np.linalg.norm(positions[i] - positions[j]) for i, j in pairs) / len(pairs)


class TestLifecycle:

    def test_populate(self):
        sim = Simulation(num_flocks=3, birds_per_flock=2, seed=1, use_numba=False)
        flocks = sim.populate()
        assert flocks is sim.flocks
        assert sim.num_birds == 6
        assert len(list(sim.birds())) == 6

    def test_populate_only_once(self):
        sim = Simulation(num_flocks=1, birds_per_flock=1, seed=1, use_numba=False)
        sim.populate()
        with pytest.raises(RuntimeError):
            sim.populate()

    def test_negative_counts_rejected(self):
        with pytest.raises(ValueError):
            Simulation(num_flocks=-1, use_numba=False)

    def test_add_flock_params_must_match(self):
        sim = Simulation(num_flocks=0, use_numba=False)
        with pytest.raises(ValueError):
            sim.add_flock(Flock(params=FlockingParams.from_config(max_speed=0.5)))

    def test_seed_reproducible(self):
        a = Simulation(num_flocks=4, birds_per_flock=4, seed=11, use_numba=False)
        b = Simulation(num_flocks=4, birds_per_flock=4, seed=11, use_numba=False)
        a.populate()
        b.populate()
        a.run(30)
        b.run(30)
        np.testing.assert_array_equal(a.positions(), b.positions())

    def test_injected_rng_overrides_seed(self, capsys):
        injected = Simulation(num_flocks=2, birds_per_flock=3, rng=make_rng(5), seed=99, use_numba=False)
        seeded = Simulation(num_flocks=2, birds_per_flock=3, seed=5, use_numba=False)
        injected.populate()
        seeded.populate()

        assert injected.seed is None
        assert "seed=custom" in capsys.readouterr().out
        np.testing.assert_array_equal(injected.positions(), seeded.positions())


class TestTicking:

    def test_tick_counts_and_accumulates_time(self):
        sim = Simulation(num_flocks=1, birds_per_flock=2, seed=3, use_numba=False)
        sim.populate()
        sim.tick(0.25)
        sim.tick(0.5)
        assert sim.ticks == 2
        assert sim.elapsed == pytest.approx(0.75)

    def test_frame_time_does_not_scale_motion(self):
        fast = Simulation(num_flocks=2, birds_per_flock=3, seed=5, use_numba=False)
        slow = Simulation(num_flocks=2, birds_per_flock=3, seed=5, use_numba=False)
        fast.populate()
        slow.populate()
        for _ in range(10):
            fast.tick(1 / 240)
            slow.tick(0.5)
        np.testing.assert_array_equal(fast.positions(), slow.positions())

    def test_flocks_ignore_each_other(self, make_flock):
        """Overlapping flocks evolve exactly as they would alone."""
        positions = [(0, 0, 0), (1.5, 0, 0), (0, 1.5, 0)]
        velocities = [(0.1, 0, 0), (0, 0.1, 0), (0, 0, 0.1)]
        first = make_flock(positions, velocities, flock_id=0)
        second = make_flock([(0.5, 0.5, 0), (1, -1, 0)], [(-0.1, 0, 0), (0, 0, -0.1)], flock_id=1)
        alone = clone_flock(first, use_numba=False)

        crowded = Simulation(num_flocks=0, use_numba=False)
        crowded.add_flock(first)
        crowded.add_flock(second)
        solo = Simulation(num_flocks=0, use_numba=False)
        solo.add_flock(alone)

        crowded.run(100)
        solo.run(100)
        np.testing.assert_array_equal(first.positions(), alone.positions())

    @pytest.mark.parametrize("use_numba", [False, True])
    def test_speed_never_exceeds_limit(self, use_numba):
        sim = Simulation(num_flocks=25, birds_per_flock=4, seed=2024, use_numba=use_numba)
        sim.populate()
        limit = sim.params.max_speed
        for _ in range(200):
            sim.step()
            assert np.all(np.linalg.norm(sim.velocities(), axis=1) <= limit + 1e-12)

    def test_birds_stay_near_world(self):
        sim = Simulation(num_flocks=10, birds_per_flock=4, seed=8, use_numba=True)
        sim.populate()
        sim.run(3000)
        assert np.all(np.abs(sim.positions()) < sim.world_size + 10.0)


class TestCohesion:

    def test_four_birds_stay_together(self, rng, params):
        """Started on one point with a single moving bird, the flock stays bounded."""
        flock = Flock(params=params)
        for i in range(4):
            velocity = rng.uniform(-0.1, 0.1, size=3) if i == 0 else np.zeros(3)
            flock.add_bird(Bird(position=np.zeros(3), velocity=velocity, params=params))

        sim = Simulation(params=params, num_flocks=0, use_numba=False)
        sim.add_flock(flock)

        samples = []
        for tick in range(3000):
            sim.step()
            if tick >= 500:
                samples.append(mean_pairwise_distance(flock.positions()))

        assert np.mean(samples) < params.cohesion_distance
        # The group actually spread out; it did not stay stacked on one point
        assert np.mean(samples) > 0.5


class TestSnapshots:

    def test_shapes_and_alignment(self):
        sim = Simulation(num_flocks=3, birds_per_flock=2, seed=4, use_numba=False)
        sim.populate()
        sim.run(5)

        assert sim.positions().shape == (6, 3)
        assert sim.velocities().shape == (6, 3)
        assert sim.orientations().shape == (6, 3, 3)
        assert sim.quaternions().shape == (6, 4)
        np.testing.assert_array_equal(sim.flock_indices(), [0, 0, 1, 1, 2, 2])
        assert sim.model_indices().shape == (6,)

    def test_snapshot_is_a_copy(self):
        sim = Simulation(num_flocks=1, birds_per_flock=2, seed=4, use_numba=False)
        sim.populate()
        snap = sim.snapshot()
        snap["positions"][:] = 1000.0
        assert np.all(sim.positions() != 1000.0)
        assert snap["tick"] == 0

    def test_empty_simulation(self):
        sim = Simulation(num_flocks=0, use_numba=False)
        sim.populate()
        sim.step()
        assert sim.positions().shape == (0, 3)
        assert sim.quaternions().shape == (0, 4)
