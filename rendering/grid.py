"""Wireframe world cube for spatial reference."""

import itertools
from OpenGL.GL import *
from config import boids as config


def cube_edges(e: float):
    """The 12 edges of an axis-aligned cube of half-extent e, as point pairs."""
    corners = list(itertools.product((-e, e), repeat=3))
    for a, b in itertools.combinations(corners, 2):
        # Corners joined by an edge differ on exactly one axis
        if sum(1 for i in range(3) if a[i] != b[i]) == 1:
            yield a, b


class Grid:
    """Draws the world boundary cube that birds are steered back into."""

    def __init__(self, half_extent: float = config.BOIDS["world_size"]):
        self.half_extent = half_extent
        self.color = config.GRID["color"]
        self._edges = list(cube_edges(half_extent))

    def draw(self):
        glBegin(GL_LINES)
        glColor3f(*self.color)
        for a, b in self._edges:
            glVertex3f(*a)
            glVertex3f(*b)
        glEnd()
