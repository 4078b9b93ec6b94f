"""
3D Bird Flocks
==============

Real-time flocking of many independent bird flocks inside a world cube.

Controls:
    - W/S: Rotate camera up/down
    - A/D: Rotate camera left/right
    - Q/E: Zoom in/out
    - Mouse drag: Rotate camera
    - Mouse wheel: Zoom
    - F: Follow next flock, C: back to whole sky
    - SPACE: Pause, R: Respawn flocks
    - ESC: Quit

Usage:
    python main.py            # Random sky
    python main.py --seed 7   # Reproducible sky
"""

import argparse

from core import Application


def main():
    parser = argparse.ArgumentParser(description="3D bird flocking viewer")
    parser.add_argument("--seed", type=int, default=None, help="Seed for flock placement")
    args = parser.parse_args()

    app = Application(seed=args.seed)
    app.run()


if __name__ == "__main__":
    main()
