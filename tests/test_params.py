"""Tests for FlockingParams validation and config loading."""

import dataclasses

import pytest

from boids import FlockingParams
from config import boids as config


class TestFlockingParams:

    def test_defaults_follow_config(self):
        p = FlockingParams()
        assert p.separation_distance == config.BOIDS["separation_distance"]
        assert p.cohesion_distance == config.BOIDS["cohesion_distance"]
        assert p.alignment_distance == config.BOIDS["alignment_distance"]
        assert p.max_speed == config.BOIDS["max_speed"]
        assert p.world_size == config.BOIDS["world_size"]
        assert p.model_direction == config.MODEL["direction"]

    def test_stock_constants(self):
        p = FlockingParams()
        assert (p.separation_distance, p.cohesion_distance, p.alignment_distance) == (5.0, 10.0, 25.0)
        assert (p.separation_force, p.cohesion_force, p.alignment_force) == (0.5, 0.01, 0.1)
        assert p.max_speed == 0.2
        assert p.turn_factor == 0.1

    def test_from_config_overrides(self):
        p = FlockingParams.from_config(world_size=35.0, cohesion_force=0.02)
        assert p.world_size == 35.0
        assert p.cohesion_force == 0.02
        assert p.max_speed == FlockingParams().max_speed

    def test_from_config_rejects_unknown_keys(self):
        with pytest.raises(ValueError, match="wingspan"):
            FlockingParams.from_config(wingspan=3.0)

    @pytest.mark.parametrize("field,value", [
        ("separation_distance", 0.0),
        ("max_speed", -0.1),
        ("world_size", 0.0),
        ("cohesion_force", -0.01),
        ("turn_factor", -1.0),
        ("model_direction", 0),
    ])
    def test_invalid_values_rejected(self, field, value):
        with pytest.raises(ValueError):
            FlockingParams.from_config(**{field: value})

    def test_frozen(self):
        p = FlockingParams()
        with pytest.raises(dataclasses.FrozenInstanceError):
            p.max_speed = 1.0

    def test_value_equality(self):
        assert FlockingParams() == FlockingParams.from_config()
        assert FlockingParams() != FlockingParams.from_config(max_speed=0.3)

    def test_as_dict_round_trip(self):
        p = FlockingParams.from_config(turn_factor=0.2)
        assert FlockingParams(**p.as_dict()) == p
