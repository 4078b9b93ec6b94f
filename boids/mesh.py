"""Bird meshes: OBJ loading, the built-in procedural bird, and per-frame vertex transforms."""

import numpy as np
from numba import njit, prange
from pathlib import Path
from typing import List, Sequence, Tuple

from config import boids as config


def load_obj(path) -> np.ndarray:
    """
    Load triangles from a Wavefront OBJ file.

    Only `v` and `f` records are read. Polygons are fan-triangulated and
    negative (relative) indices are supported.

    Args:
        path: File to read

    Returns:
        float32 array of shape (n_triangles, 3, 3)

    Raises:
        OSError: The file cannot be read
        ValueError: The file holds no faces or a face references a missing vertex
    """
    vertices: List[Tuple[float, float, float]] = []
    triangles = []

    with open(path, "r") as f:
        for line_no, line in enumerate(f, start=1):
            parts = line.split()
            if not parts:
                continue
            if parts[0] == "v":
                if len(parts) < 4:
                    raise ValueError(f"{path}:{line_no}: vertex needs 3 coordinates")
                vertices.append((float(parts[1]), float(parts[2]), float(parts[3])))
            elif parts[0] == "f":
                if len(parts) < 4:
                    raise ValueError(f"{path}:{line_no}: face needs at least 3 vertices")
                face = [_resolve_index(token, len(vertices), path, line_no) for token in parts[1:]]
                for k in range(1, len(face) - 1):
                    triangles.append((vertices[face[0]], vertices[face[k]], vertices[face[k + 1]]))

    if not triangles:
        raise ValueError(f"{path}: no faces found")

    return np.array(triangles, dtype=np.float32)


def _resolve_index(token: str, num_vertices: int, path, line_no: int) -> int:
    index = int(token.split("/")[0])
    resolved = num_vertices + index if index < 0 else index - 1
    if not 0 <= resolved < num_vertices:
        raise ValueError(f"{path}:{line_no}: vertex index {index} out of range")
    return resolved


def bird_mesh(length: float = config.MODEL["length"],
              wingspan: float = config.MODEL["wingspan"],
              model_direction: int = config.MODEL["direction"]) -> np.ndarray:
    """
    Low-poly bird: a cross-shaped body and two swept wings.

    The nose sits on the local axis that the orientation model maps onto
    the direction of travel (+Z when model_direction is -1).
    """
    s = -model_direction
    half = length / 2
    body_w = length * 0.12
    body_h = length * 0.1

    nose = (0.0, 0.0, s * half)
    tail = (0.0, 0.0, -s * half)
    left = (-body_w, 0.0, 0.0)
    right = (body_w, 0.0, 0.0)
    top = (0.0, body_h, 0.0)
    bottom = (0.0, -body_h, 0.0)

    root_front = (0.0, 0.0, s * length * 0.15)
    root_back = (0.0, 0.0, -s * length * 0.15)
    left_tip = (-wingspan / 2, length * 0.05, -s * length * 0.1)
    right_tip = (wingspan / 2, length * 0.05, -s * length * 0.1)

    triangles = [
        (nose, left, tail),
        (nose, tail, right),
        (nose, top, tail),
        (nose, tail, bottom),
        (root_front, left_tip, root_back),
        (root_front, root_back, right_tip),
    ]
    return np.array(triangles, dtype=np.float32)


def resolve_mesh(path, scale: float = config.MODEL["obj_scale"],
                 fallback: np.ndarray = None) -> Tuple[np.ndarray, bool]:
    """
    Load a bird mesh, falling back to the procedural bird on any load failure.

    A missing or broken asset never stops the simulation; the bird just
    flies with the built-in shape.

    Returns:
        (triangles, loaded_from_file)
    """
    try:
        return load_obj(Path(path)) * np.float32(scale), True
    except (OSError, ValueError) as e:
        print(f"[Mesh] Could not load {path}: {e}; using built-in bird")
        return (bird_mesh() if fallback is None else fallback), False


def pack_meshes(meshes: Sequence[np.ndarray]) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Stack triangle meshes into one vertex array for the transform kernel.

    Returns:
        (vertices (V, 3), starts per mesh, vertex counts per mesh)
    """
    counts = np.array([len(m) * 3 for m in meshes], dtype=np.int64)
    starts = np.zeros(len(meshes), dtype=np.int64)
    if len(meshes) > 1:
        starts[1:] = np.cumsum(counts)[:-1]
    vertices = np.concatenate([m.reshape(-1, 3) for m in meshes]).astype(np.float32)
    return vertices, starts, counts


@njit(parallel=True, cache=True)
def transform_meshes(
    positions: np.ndarray,
    orientations: np.ndarray,
    model_indices: np.ndarray,
    colors: np.ndarray,
    mesh_vertices: np.ndarray,
    mesh_starts: np.ndarray,
    mesh_counts: np.ndarray,
    out_offsets: np.ndarray,
    vertices: np.ndarray,
    vert_colors: np.ndarray,
    num_birds: int
):
    """Numba JIT-compiled placement of each bird's mesh in world space."""
    for b in prange(num_birds):
        m = model_indices[b]
        start = mesh_starts[m]
        count = mesh_counts[m]
        out = out_offsets[b]

        px, py, pz = positions[b, 0], positions[b, 1], positions[b, 2]
        r = orientations[b]
        cr, cg, cb = colors[b, 0], colors[b, 1], colors[b, 2]

        for k in range(count):
            lx = mesh_vertices[start + k, 0]
            ly = mesh_vertices[start + k, 1]
            lz = mesh_vertices[start + k, 2]

            vertices[out + k, 0] = r[0, 0] * lx + r[0, 1] * ly + r[0, 2] * lz + px
            vertices[out + k, 1] = r[1, 0] * lx + r[1, 1] * ly + r[1, 2] * lz + py
            vertices[out + k, 2] = r[2, 0] * lx + r[2, 1] * ly + r[2, 2] * lz + pz

            vert_colors[out + k, 0] = cr
            vert_colors[out + k, 1] = cg
            vert_colors[out + k, 2] = cb
