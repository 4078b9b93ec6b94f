"""
Recording Presets
=================

Named flock configurations for offline recording. Each preset fixes the
flock layout, any steering overrides, and how many frames to keep.

Categories:
- REFERENCE: The stock sky the viewer opens with
- SMALL: Few birds, quick to record and easy to follow
- LARGE: Many birds per flock, slower all-pairs steering
"""

from typing import Dict, List, Optional, Tuple

PRESETS: Dict[str, dict] = {}

# -----------------------------------------------------------------------------
# REFERENCE
# -----------------------------------------------------------------------------

PRESETS["reference"] = {
    "name": "Reference Sky",
    "description": "25 flocks of 4 birds with the stock steering constants",
    "category": "REFERENCE",
    "num_flocks": 25,
    "birds_per_flock": 4,
    "params": {},
    "total_frames": 1200,
    "ticks_per_frame": 1,
    "target_fps": 60,
}

# -----------------------------------------------------------------------------
# SMALL
# -----------------------------------------------------------------------------

PRESETS["pair"] = {
    "name": "Single Pair",
    "description": "One flock of two birds, handy for eyeballing separation",
    "category": "SMALL",
    "num_flocks": 1,
    "birds_per_flock": 2,
    "params": {},
    "total_frames": 600,
    "ticks_per_frame": 1,
    "target_fps": 60,
}

PRESETS["quick"] = {
    "name": "Quick Check",
    "description": "Five small flocks, short run",
    "category": "SMALL",
    "num_flocks": 5,
    "birds_per_flock": 4,
    "params": {},
    "total_frames": 200,
    "ticks_per_frame": 2,
    "target_fps": 30,
}

# -----------------------------------------------------------------------------
# LARGE
# -----------------------------------------------------------------------------

PRESETS["murmuration"] = {
    "name": "Murmuration",
    "description": "Four dense flocks of 60 birds with stronger cohesion",
    "category": "LARGE",
    "num_flocks": 4,
    "birds_per_flock": 60,
    "params": {"cohesion_force": 0.02, "alignment_force": 0.15},
    "total_frames": 1800,
    "ticks_per_frame": 1,
    "target_fps": 60,
}

PRESETS["crowded_sky"] = {
    "name": "Crowded Sky",
    "description": "60 flocks of 8 birds in a tighter world cube",
    "category": "LARGE",
    "num_flocks": 60,
    "birds_per_flock": 8,
    "params": {"world_size": 35.0},
    "total_frames": 1200,
    "ticks_per_frame": 1,
    "target_fps": 60,
}


# =============================================================================
# UTILITY FUNCTIONS
# =============================================================================

CATEGORY_ORDER = ["REFERENCE", "SMALL", "LARGE"]


def get_preset_list() -> List[Tuple[str, dict]]:
    """All presets sorted by category, then key."""
    return sorted(
        PRESETS.items(),
        key=lambda item: (CATEGORY_ORDER.index(item[1]["category"])
                          if item[1]["category"] in CATEGORY_ORDER else 99, item[0])
    )


def print_preset_menu():
    """Print formatted preset selection menu."""
    current_category = None

    print("\n" + "=" * 70)
    print("  FLOCK RECORDING PRESETS")
    print("=" * 70)

    for idx, (key, preset) in enumerate(get_preset_list()):
        if preset["category"] != current_category:
            current_category = preset["category"]
            print(f"\n{'─' * 70}")
            print(f"  {current_category}")
            print(f"{'─' * 70}")

        birds = preset["num_flocks"] * preset["birds_per_flock"]
        print(f"  [{idx:2d}] {preset['name']:<20} {key:<14} {birds:>5} birds | "
              f"{preset['total_frames']:>5} frames")
        print(f"       {preset['description']}")

    print(f"\n{'=' * 70}")


def get_preset_by_index(index: int) -> Tuple[Optional[str], Optional[dict]]:
    """Get preset by menu index."""
    presets = get_preset_list()
    if 0 <= index < len(presets):
        return presets[index]
    return None, None


def get_preset_config(key: str) -> Optional[dict]:
    """A copy of preset `key` with a default session name, or None if unknown."""
    if key not in PRESETS:
        return None

    preset = dict(PRESETS[key])
    preset["params"] = dict(preset["params"])
    preset["preset"] = key
    preset["session_name"] = key
    return preset
