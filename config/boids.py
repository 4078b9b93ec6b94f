"""Configuration for the 3D bird flocking simulation."""

WINDOW = {
    "width": 1280,
    "height": 720,
    "title": "Flock Sky"
}

CAMERA = {
    "fov": 60.0,
    "near_clip": 0.1,
    "far_clip": 1000.0,
    "initial_radius": 60.0,
    "initial_theta": 90.0,    # Looking down -Z from the +Z side
    "initial_phi": 1.5,
    "min_radius": 5.0,
    "max_radius": 400.0,
    "min_phi": -89.0,
    "max_phi": 89.0,
    "keyboard_rotate_speed": 60.0,
    "keyboard_zoom_speed": 20.0,
    "mouse_sensitivity": 0.3
}

GRID = {
    "color": (0.25, 0.25, 0.45)
}

BOIDS = {
    # Neighbor radii
    "separation_distance": 5.0,
    "cohesion_distance": 10.0,
    "alignment_distance": 25.0,

    # Rule weights
    "separation_force": 0.5,
    "cohesion_force": 0.01,
    "alignment_force": 0.1,

    "max_speed": 0.2,          # World units per tick, not per second
    "world_size": 50.0,        # Half-extent of the world cube
    "turn_factor": 0.1,        # Constant push back inside the cube
    "rest_speed": 0.01,        # Below this birds keep their last heading
}

FLOCKS = {
    "count": 25,
    "birds_per_flock": 4,
    "spawn_jitter": 5.0,             # Full width of per-bird offset around the center
    "velocity_spread": 0.2,          # Full width of initial velocity per axis
    "seed": None,                    # None = different sky every run
    "use_numba": True,
}

# Direction the bird model faces in its original state
# 1 means model faces +Z, -1 means model faces -Z
MODEL = {
    "direction": -1,
    "length": 1.6,
    "wingspan": 2.2,
    "obj_scale": 0.05,         # Applied to meshes loaded from MODELS
}

# One mesh per flock, cycled by flock id. Missing files fall back to the
# built-in procedural bird.
MODELS = [
    "assets/stork.obj",
    "assets/stork.obj",
    "assets/stork.obj",
]

COLORS = {
    "background": (0.047, 0.039, 0.165, 1.0),
    "fog": (0.102, 0.137, 0.494, 1.0),
    "text": (0.9, 0.9, 0.9),
    "palette": [
        (0.95, 0.95, 1.00),
        (0.80, 0.72, 0.95),
        (0.70, 0.85, 1.00),
    ],
}
