"""Viewer application: drives the simulation once per frame and draws it."""

import pygame
from pygame.locals import *
from OpenGL.GL import *
from OpenGL.GLU import *

from config import boids as config
from .camera import Camera
from .input_handler import InputHandler
from rendering import BirdRenderer, Grid, TextRenderer
from boids import Simulation


class Application:
    """Main application managing the frame loop and rendering."""

    def __init__(self, seed=config.FLOCKS["seed"]):
        pygame.init()
        pygame.display.set_mode(
            (config.WINDOW["width"], config.WINDOW["height"]),
            DOUBLEBUF | OPENGL
        )
        pygame.display.set_caption(config.WINDOW["title"])

        self.camera = Camera()
        self.input_handler = InputHandler(self.camera)

        self.simulation = self._create_simulation(seed)

        # The simulation exists before any mesh is resolved; a bad asset only
        # changes how birds look
        self.grid = Grid(self.simulation.world_size)
        self.bird_renderer = BirdRenderer(model_direction=self.simulation.params.model_direction)
        self.text_renderer = TextRenderer()

        self.clock = pygame.time.Clock()
        self.running = True
        self.paused = False
        self.followed = None
        self.fps = 0

        self._setup_gl()

    def _create_simulation(self, seed) -> Simulation:
        simulation = Simulation(seed=seed)
        simulation.populate()
        return simulation

    def _setup_gl(self):
        """Initialize OpenGL settings."""
        glClearColor(*config.COLORS["background"])
        glEnable(GL_DEPTH_TEST)
        glEnable(GL_FOG)
        glFogi(GL_FOG_MODE, GL_LINEAR)
        glFogfv(GL_FOG_COLOR, config.COLORS["fog"])
        glFogf(GL_FOG_START, 60.0)
        glFogf(GL_FOG_END, 100.0 + self.camera.radius)

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
            if not self.input_handler.handle_event(event):
                self.running = False

        for action in self.input_handler.take_actions():
            if action == "pause":
                self.paused = not self.paused
                print(f"[App] {'Paused' if self.paused else 'Running'}")
            elif action == "reseed":
                print("[App] Respawning flocks...")
                self.simulation = self._create_simulation(None)
                self.followed = None
                self.camera.follow(None)
            elif action == "follow_next" and self.simulation.flocks:
                self.followed = 0 if self.followed is None else (self.followed + 1) % len(self.simulation.flocks)
                print(f"[App] Following flock {self.followed}")
            elif action == "follow_none":
                self.followed = None
                self.camera.follow(None)

    def _update(self, dt: float):
        # Camera easing only; the simulation step ignores dt
        cam_dt = min(dt, 0.05)

        self.input_handler.handle_continuous_input(cam_dt)
        if not self.paused:
            self.simulation.tick(dt)

        if self.followed is not None:
            self.camera.follow(self.simulation.flocks[self.followed].centroid())
        self.camera.update(cam_dt)

    def _render(self):
        glClear(GL_COLOR_BUFFER_BIT | GL_DEPTH_BUFFER_BIT)
        self.camera.apply()

        self.grid.draw()

        sim = self.simulation
        self.bird_renderer.draw(
            sim.positions(),
            sim.orientations(),
            sim.flock_indices(),
            sim.model_indices(),
        )

        screen_size = (config.WINDOW["width"], config.WINDOW["height"])
        following = "all" if self.followed is None else f"flock {self.followed}"
        self.text_renderer.draw_lines([
            f"Flocks: {len(sim.flocks)}  Birds: {sim.num_birds}  |  FPS: {self.fps:.0f}",
            f"Tick: {sim.ticks}  t={sim.elapsed:.1f}s{'  [paused]' if self.paused else ''}",
            f"θ: {self.camera.theta:.1f}°  φ: {self.camera.phi:.1f}°  Zoom: {self.camera.radius:.1f}  View: {following}",
        ], 10, 10, screen_size)

        pygame.display.flip()

    def run(self):
        """Main application loop."""
        print("[App] Starting main loop...")
        while self.running:
            dt = self.clock.tick() / 1000.0
            self.fps = self.clock.get_fps()

            self._handle_events()
            self._update(dt)
            self._render()

        pygame.quit()
        print("[App] Shutdown complete")
