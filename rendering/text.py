"""HUD text overlay."""

import pygame
from OpenGL.GL import *

from config import boids as config


class TextRenderer:
    """Blits pygame-rendered text onto the GL framebuffer."""

    def __init__(self, font_name: str = "monospace", font_size: int = 18, line_spacing: int = 25):
        pygame.font.init()
        self.font = pygame.font.SysFont(font_name, font_size)
        self.line_spacing = line_spacing
        self.color = tuple(int(c * 255) for c in config.COLORS["text"])

    def draw_text(self, text: str, x: int, y: int, screen_size: tuple):
        """
        Draw one line of text.

        Args:
            text: The string to render
            x: X position from left edge
            y: Y position from top edge
            screen_size: (width, height) of the screen
        """
        surface = self.font.render(text, True, self.color)
        pixels = pygame.image.tostring(surface, "RGBA", True)
        w, h = surface.get_size()

        glMatrixMode(GL_PROJECTION)
        glPushMatrix()
        glLoadIdentity()
        glOrtho(0, screen_size[0], 0, screen_size[1], -1, 1)
        glMatrixMode(GL_MODELVIEW)
        glPushMatrix()
        glLoadIdentity()

        glDisable(GL_FOG)
        glEnable(GL_BLEND)
        glBlendFunc(GL_SRC_ALPHA, GL_ONE_MINUS_SRC_ALPHA)
        glRasterPos2f(x, screen_size[1] - y - h)
        glDrawPixels(w, h, GL_RGBA, GL_UNSIGNED_BYTE, pixels)
        glDisable(GL_BLEND)
        glEnable(GL_FOG)

        glPopMatrix()
        glMatrixMode(GL_PROJECTION)
        glPopMatrix()
        glMatrixMode(GL_MODELVIEW)

    def draw_lines(self, lines, x: int, y: int, screen_size: tuple):
        """Draw several lines stacked downward from (x, y)."""
        for i, line in enumerate(lines):
            self.draw_text(line, x, y + i * self.line_spacing, screen_size)
