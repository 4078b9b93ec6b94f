"""
Flock Recording Playback
========================

Plays back frames saved by tools.record.

Usage:
    python -m tools.playback <session_name>                # Playback at the recorded rate
    python -m tools.playback <session_name> --fps 30       # Custom FPS
    python -m tools.playback <session_name> --speed 2.0    # 2x playback speed
    python -m tools.playback <session_name> --loop         # Loop playback

Controls during playback:
    Mouse drag  - Rotate camera
    Scroll      - Zoom in/out
    WASD        - Rotate camera
    Q/E         - Zoom in/out
    SPACE       - Pause/Resume
    LEFT/RIGHT  - Step frame
    UP/DOWN     - Adjust playback speed
    R           - Restart from beginning
    L           - Toggle loop mode
    ESC         - Quit
"""

import argparse
import numpy as np

import pygame
from pygame.locals import *
from OpenGL.GL import *
from OpenGL.GLU import *

from config import boids as config
from core.camera import Camera
from core.input_handler import InputHandler
from rendering import BirdRenderer, Grid, TextRenderer
from boids.orientation import matrix_from_quaternions
from tools.record import RECORDINGS_DIR, get_completed_frames, load_frame, load_metadata


class PlaybackApp:
    """Replays a recorded flock session."""

    def __init__(self, session_name: str, fps: int = None, loop: bool = False,
                 initial_speed: float = 1.0):
        self.session_name = session_name
        self.rec_dir = RECORDINGS_DIR / session_name
        if not (self.rec_dir / "metadata.json").exists():
            raise FileNotFoundError(f"Recording not found: {session_name}")

        self.metadata = load_metadata(self.rec_dir)
        self.frame_count = get_completed_frames(self.rec_dir)
        if self.frame_count == 0:
            raise ValueError(f"No frames found in recording: {session_name}")

        self.target_fps = fps or self.metadata.get("target_fps", 60)
        self.loop = loop
        self.speed = initial_speed

        print(f"[Playback] Loading: {session_name}")
        print(f"[Playback] Flocks: {self.metadata['num_flocks']} x {self.metadata['birds_per_flock']} birds")
        print(f"[Playback] Frames: {self.frame_count}")

        # Recordings are small; keep every frame in memory
        self.frames = [load_frame(self.rec_dir, i) for i in range(self.frame_count)]

        pygame.init()
        pygame.display.set_mode(
            (config.WINDOW["width"], config.WINDOW["height"]),
            DOUBLEBUF | OPENGL
        )
        pygame.display.set_caption(f"Flock Playback: {session_name}")

        world_size = self.metadata.get("params", {}).get("world_size", config.BOIDS["world_size"])
        self.camera = Camera()
        self.input_handler = InputHandler(self.camera)
        self.grid = Grid(world_size)
        self.bird_renderer = BirdRenderer()
        self.text_renderer = TextRenderer()
        self.clock = pygame.time.Clock()

        self.current_frame = 0.0
        self.playing = True
        self.running = True

        self._setup_gl()

    def _setup_gl(self):
        glClearColor(*config.COLORS["background"])
        glEnable(GL_DEPTH_TEST)
        glEnable(GL_FOG)
        glFogi(GL_FOG_MODE, GL_LINEAR)
        glFogfv(GL_FOG_COLOR, config.COLORS["fog"])
        glFogf(GL_FOG_START, 60.0)
        glFogf(GL_FOG_END, 160.0)

        glMatrixMode(GL_PROJECTION)
        glLoadIdentity()
        gluPerspective(
            config.CAMERA["fov"],
            config.WINDOW["width"] / config.WINDOW["height"],
            config.CAMERA["near_clip"],
            config.CAMERA["far_clip"]
        )
        glMatrixMode(GL_MODELVIEW)

    def _handle_events(self):
        for event in pygame.event.get():
            if event.type == KEYDOWN:
                if event.key == K_SPACE:
                    self.playing = not self.playing
                    continue
                elif event.key == K_RIGHT:
                    self.current_frame = min(int(self.current_frame) + 1, self.frame_count - 1)
                elif event.key == K_LEFT:
                    self.current_frame = max(int(self.current_frame) - 1, 0)
                elif event.key == K_UP:
                    self.speed = min(self.speed * 2, 16.0)
                elif event.key == K_DOWN:
                    self.speed = max(self.speed / 2, 0.125)
                elif event.key == K_r:
                    self.current_frame = 0.0
                    continue
                elif event.key == K_l:
                    self.loop = not self.loop
            if not self.input_handler.handle_event(event):
                self.running = False
        # Viewer-only actions from the shared handler do not apply here
        self.input_handler.take_actions()

    def _advance(self, dt: float):
        self.input_handler.handle_continuous_input(min(dt, 0.05))
        self.camera.update(min(dt, 0.05))

        if not self.playing:
            return

        self.current_frame += dt * self.target_fps * self.speed
        if self.current_frame >= self.frame_count:
            if self.loop:
                self.current_frame %= self.frame_count
            else:
                self.current_frame = self.frame_count - 1
                self.playing = False

    def _render(self):
        glClear(GL_COLOR_BUFFER_BIT | GL_DEPTH_BUFFER_BIT)
        self.camera.apply()
        self.grid.draw()

        frame = self.frames[int(self.current_frame)]
        flock_indices = frame["flock_indices"]
        self.bird_renderer.draw(
            frame["positions"],
            matrix_from_quaternions(frame["quaternions"]),
            flock_indices,
            flock_indices,
        )

        screen_size = (config.WINDOW["width"], config.WINDOW["height"])
        state = "playing" if self.playing else "paused"
        self.text_renderer.draw_lines([
            f"Frame {int(self.current_frame) + 1}/{self.frame_count}  (tick {frame['tick']})  [{state}]",
            f"Speed: {self.speed:g}x  Loop: {'on' if self.loop else 'off'}",
        ], 10, 10, screen_size)

        pygame.display.flip()

    def run(self):
        while self.running:
            dt = self.clock.tick(120) / 1000.0
            self._handle_events()
            self._advance(dt)
            self._render()
        pygame.quit()


def main():
    parser = argparse.ArgumentParser(description="Flock recording playback")
    parser.add_argument("session", help="Session name under recordings/")
    parser.add_argument("--fps", type=int, help="Playback frame rate (default: recorded target)")
    parser.add_argument("--speed", type=float, default=1.0, help="Initial speed multiplier")
    parser.add_argument("--loop", action="store_true", help="Loop playback")
    args = parser.parse_args()

    app = PlaybackApp(args.session, fps=args.fps, loop=args.loop, initial_speed=args.speed)
    app.run()


if __name__ == "__main__":
    main()
