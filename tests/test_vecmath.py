"""Tests for the small vector helpers."""

import math

import numpy as np

from boids.vecmath import clamp_length, cross, distance, length, normalize, vec3


class TestVecmath:

    def test_length_and_distance(self):
        assert length(vec3(3, 4, 12)) == 13.0
        assert distance(vec3(1, 1, 1), vec3(1, 1, 4)) == 3.0

    def test_normalize_unit_length(self):
        n = normalize(vec3(0.3, -2.0, 5.0))
        assert math.isclose(length(n), 1.0, rel_tol=1e-12)

    def test_normalize_zero_vector_is_zero(self):
        """Zero stays zero instead of turning into NaN."""
        n = normalize(np.zeros(3))
        assert np.array_equal(n, np.zeros(3))
        assert not np.any(np.isnan(n))

    def test_cross_right_handed(self):
        assert np.array_equal(cross(vec3(1, 0, 0), vec3(0, 1, 0)), vec3(0, 0, 1))

    def test_clamp_length_in_place(self):
        v = vec3(3.0, 4.0, 0.0)
        out = clamp_length(v, 1.0)
        assert out is v
        np.testing.assert_allclose(v, [0.6, 0.8, 0.0])

    def test_clamp_length_leaves_short_vectors(self):
        v = vec3(0.1, 0.0, 0.0)
        clamp_length(v, 0.2)
        assert np.array_equal(v, vec3(0.1, 0.0, 0.0))
