"""Bird rendering - one mesh per flock model, transformed by Numba and drawn from VBOs."""

import numpy as np
from pathlib import Path
from OpenGL.GL import *
from OpenGL.arrays import vbo

from config import boids as config
from boids.mesh import bird_mesh, pack_meshes, resolve_mesh, transform_meshes

PROJECT_ROOT = Path(__file__).parent.parent


class BirdRenderer:
    """Draws every bird of a simulation at its position and orientation."""

    def __init__(self, model_paths=None, model_direction: int = config.MODEL["direction"]):
        model_paths = config.MODELS if model_paths is None else model_paths
        fallback = bird_mesh(model_direction=model_direction)

        meshes = []
        self.loaded = []
        for path in model_paths:
            path = Path(path)
            if not path.is_absolute():
                path = PROJECT_ROOT / path
            mesh, ok = resolve_mesh(path, fallback=fallback)
            meshes.append(mesh)
            self.loaded.append(ok)
        if not meshes:
            meshes.append(fallback)
            self.loaded.append(False)

        self._mesh_vertices, self._mesh_starts, self._mesh_counts = pack_meshes(meshes)
        self.palette = np.array(config.COLORS["palette"], dtype=np.float32)

        self._vertices = np.zeros((0, 3), dtype=np.float32)
        self._vert_colors = np.zeros((0, 3), dtype=np.float32)

        self._vbo_vertices = None
        self._vbo_colors = None
        self._vbos_initialized = False
        self._vbo_failed = False

    def _init_vbos(self):
        """Initialize VBOs for fast GPU rendering."""
        if self._vbos_initialized or self._vbo_failed:
            return

        try:
            self._vbo_vertices = vbo.VBO(self._vertices, usage=GL_DYNAMIC_DRAW)
            self._vbo_colors = vbo.VBO(self._vert_colors, usage=GL_DYNAMIC_DRAW)
            self._vbos_initialized = True
        except Exception as e:
            # Fallback to client-side arrays
            print(f"[Render] VBO init failed, using vertex arrays: {e}")
            self._vbo_failed = True

    def _build_vertices(self, positions, orientations, flock_indices, model_indices) -> int:
        """Build world-space vertex data for all birds. Returns the vertex count."""
        num_birds = len(positions)
        if num_birds == 0:
            return 0

        model_indices = np.asarray(model_indices, dtype=np.int64) % len(self._mesh_counts)
        per_bird = self._mesh_counts[model_indices]
        offsets = np.zeros(num_birds, dtype=np.int64)
        offsets[1:] = np.cumsum(per_bird)[:-1]
        total = int(per_bird.sum())

        if len(self._vertices) < total:
            self._vertices = np.zeros((total, 3), dtype=np.float32)
            self._vert_colors = np.zeros((total, 3), dtype=np.float32)

        colors = self.palette[np.asarray(flock_indices) % len(self.palette)]

        transform_meshes(
            np.ascontiguousarray(positions, dtype=np.float64),
            np.ascontiguousarray(orientations, dtype=np.float64),
            model_indices,
            colors,
            self._mesh_vertices,
            self._mesh_starts,
            self._mesh_counts,
            offsets,
            self._vertices,
            self._vert_colors,
            num_birds
        )
        return total

    def draw(self, positions, orientations, flock_indices, model_indices):
        """Render birds from a simulation snapshot."""
        if not self._vbos_initialized:
            self._init_vbos()

        total_verts = self._build_vertices(positions, orientations, flock_indices, model_indices)
        if total_verts == 0:
            return

        glDisable(GL_CULL_FACE)

        if self._vbos_initialized:
            self._vbo_vertices.set_array(self._vertices[:total_verts])
            self._vbo_colors.set_array(self._vert_colors[:total_verts])

            self._vbo_vertices.bind()
            glEnableClientState(GL_VERTEX_ARRAY)
            glVertexPointer(3, GL_FLOAT, 0, None)

            self._vbo_colors.bind()
            glEnableClientState(GL_COLOR_ARRAY)
            glColorPointer(3, GL_FLOAT, 0, None)

            glDrawArrays(GL_TRIANGLES, 0, total_verts)

            self._vbo_vertices.unbind()
            self._vbo_colors.unbind()
            glDisableClientState(GL_VERTEX_ARRAY)
            glDisableClientState(GL_COLOR_ARRAY)
        else:
            glEnableClientState(GL_VERTEX_ARRAY)
            glEnableClientState(GL_COLOR_ARRAY)

            glVertexPointer(3, GL_FLOAT, 0, self._vertices[:total_verts])
            glColorPointer(3, GL_FLOAT, 0, self._vert_colors[:total_verts])
            glDrawArrays(GL_TRIANGLES, 0, total_verts)

            glDisableClientState(GL_VERTEX_ARRAY)
            glDisableClientState(GL_COLOR_ARRAY)
