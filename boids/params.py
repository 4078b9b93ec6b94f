"""Immutable steering parameters shared by every bird in a simulation."""

from dataclasses import dataclass, fields, replace

from config import boids as config


@dataclass(frozen=True)
class FlockingParams:
    """
    Tuning constants for the flocking rules.

    Attributes:
        separation_distance: Neighbors closer than this push the bird away
        cohesion_distance: Neighbors closer than this pull the bird toward their center
        alignment_distance: Neighbors closer than this share their heading
        separation_force: Weight of the separation rule
        cohesion_force: Weight of the cohesion rule
        alignment_force: Weight of the alignment rule
        max_speed: Velocity magnitude limit (world units per tick)
        world_size: Half-extent of the world cube
        turn_factor: Corrective force applied per axis outside the cube
        rest_speed: Speed at or below which orientation is frozen
        model_direction: Authored forward axis of the bird model (+1 = +Z, -1 = -Z)
    """
    separation_distance: float = config.BOIDS["separation_distance"]
    cohesion_distance: float = config.BOIDS["cohesion_distance"]
    alignment_distance: float = config.BOIDS["alignment_distance"]
    separation_force: float = config.BOIDS["separation_force"]
    cohesion_force: float = config.BOIDS["cohesion_force"]
    alignment_force: float = config.BOIDS["alignment_force"]
    max_speed: float = config.BOIDS["max_speed"]
    world_size: float = config.BOIDS["world_size"]
    turn_factor: float = config.BOIDS["turn_factor"]
    rest_speed: float = config.BOIDS["rest_speed"]
    model_direction: int = config.MODEL["direction"]

    def __post_init__(self):
        for name in ("separation_distance", "cohesion_distance", "alignment_distance",
                     "max_speed", "world_size"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive, got {getattr(self, name)!r}")
        for name in ("separation_force", "cohesion_force", "alignment_force",
                     "turn_factor", "rest_speed"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must not be negative, got {getattr(self, name)!r}")
        if self.model_direction not in (-1, 1):
            raise ValueError(f"model_direction must be 1 or -1, got {self.model_direction!r}")

    @classmethod
    def from_config(cls, **overrides) -> "FlockingParams":
        """Build parameters from config.boids, replacing any given fields."""
        known = {f.name for f in fields(cls)}
        unknown = set(overrides) - known
        if unknown:
            raise ValueError(f"Unknown flocking parameter(s): {', '.join(sorted(unknown))}")
        return replace(cls(), **overrides)

    def as_dict(self) -> dict:
        return {f.name: getattr(self, f.name) for f in fields(self)}
