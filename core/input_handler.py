"""Keyboard and mouse input for the flock viewer."""

import pygame
from pygame.locals import *
from config import boids as config

from .camera import Camera


class InputHandler:
    """
    Maps pygame input onto the camera and viewer actions.

    Viewer actions (pause, reseed, follow) are reported through the
    `actions` set, which the application drains every frame.
    """

    def __init__(self, camera: Camera):
        self.camera = camera
        self.mouse_dragging = False
        self.last_mouse_pos = (0, 0)
        self.actions = set()

    def handle_event(self, event: pygame.event.Event) -> bool:
        """
        Handle a single pygame event.
        Returns False if the application should quit, True otherwise.
        """
        if event.type == QUIT:
            return False
        elif event.type == KEYDOWN:
            if event.key == K_ESCAPE:
                return False
            elif event.key == K_SPACE:
                self.actions.add("pause")
            elif event.key == K_r:
                self.actions.add("reseed")
            elif event.key == K_f:
                self.actions.add("follow_next")
            elif event.key == K_c:
                self.actions.add("follow_none")
        elif event.type == MOUSEBUTTONDOWN:
            if event.button == 1:
                self.mouse_dragging = True
                self.last_mouse_pos = pygame.mouse.get_pos()
        elif event.type == MOUSEBUTTONUP:
            if event.button == 1:
                self.mouse_dragging = False
        elif event.type == MOUSEWHEEL:
            self.camera.zoom_smooth(-event.y * config.CAMERA["keyboard_zoom_speed"] * 0.5)

        return True

    def take_actions(self) -> set:
        actions, self.actions = self.actions, set()
        return actions

    def handle_continuous_input(self, dt: float):
        """Held keys and mouse drag, applied every frame."""
        keys = pygame.key.get_pressed()
        rot = config.CAMERA["keyboard_rotate_speed"] * dt
        zoom = config.CAMERA["keyboard_zoom_speed"] * dt

        d_theta = (keys[K_d] - keys[K_a]) * rot
        d_phi = (keys[K_w] - keys[K_s]) * rot
        if d_theta or d_phi:
            self.camera.rotate(d_theta, d_phi)

        if keys[K_q]:
            self.camera.zoom(-zoom)
        if keys[K_e]:
            self.camera.zoom(zoom)

        if self.mouse_dragging:
            x, y = pygame.mouse.get_pos()
            dx = x - self.last_mouse_pos[0]
            dy = y - self.last_mouse_pos[1]
            sensitivity = config.CAMERA["mouse_sensitivity"]
            self.camera.rotate(dx * sensitivity, -dy * sensitivity)
            self.last_mouse_pos = (x, y)
