"""Vertex-wise coordinate transformations."""

from __future__ import annotations

import logging
from typing import Callable

import numpy as np

from meshgallery.exceptions import TransformError
from meshgallery.mesh.triangulation import Triangulation

logger = logging.getLogger(__name__)


def transform(
    func: Callable[[np.ndarray], np.ndarray],
    tria: Triangulation,
) -> None:
    """Map every vertex of the mesh through ``func``, in place.

    ``func`` receives a copy of one vertex position and returns the new
    position. Plain functions and objects implementing ``__call__`` work
    alike.

    Args:
        func: Point-to-point mapping.
        tria: Mesh to modify.

    Raises:
        TransformError: If ``func`` returns a point of the wrong shape or
            a non-finite coordinate.

    Example:
        >>> def shear(p):
        ...     return np.array([p[0] + p[1], p[1]])
        >>> transform(shear, tria)
    """
    vertices = tria.vertices
    for i, point in enumerate(vertices):
        new_point = np.asarray(func(point.copy()), dtype=float)
        if new_point.shape != point.shape:
            raise TransformError(
                f"Transform returned shape {new_point.shape} for vertex {i}, "
                f"expected {point.shape}"
            )
        if not np.all(np.isfinite(new_point)):
            raise TransformError(f"Transform returned {new_point} for vertex {i}")
        vertices[i] = new_point

    logger.debug("Transformed %d vertices", len(vertices))


def shift_vertices(
    tria: Triangulation,
    predicate: Callable[[np.ndarray], bool],
    shift: np.ndarray | list[float],
) -> list[int]:
    """Move the vertices selected by ``predicate`` by ``shift``.

    Vertices are visited cell by cell, the way a user would walk a mesh.
    Shared vertices are seen several times, but each one is tested and
    moved only on its first visit.

    Args:
        tria: Mesh to modify.
        predicate: Called with the current vertex position.
        shift: Displacement added to every selected vertex.

    Returns:
        Indices of the moved vertices, in visiting order.
    """
    shift = np.asarray(shift, dtype=float)
    if shift.shape != (tria.dim,):
        raise TransformError(f"shift must have shape ({tria.dim},)")

    visited = set()
    moved = []
    for cell in tria.active_cells():
        for i in range(cell.n_vertices):
            index = cell.vertex_index(i)
            if index in visited:
                continue
            visited.add(index)

            v = cell.vertex(i)
            if predicate(v):
                v += shift
                moved.append(index)

    logger.debug("Shifted %d vertices by %s", len(moved), shift)
    return moved


def minimal_edge_lengths(tria: Triangulation) -> np.ndarray:
    """Return the length of the shortest edge touching each vertex."""
    edges = tria.edges()
    lengths = np.linalg.norm(
        tria.vertices[edges[:, 0]] - tria.vertices[edges[:, 1]], axis=1
    )
    minimal = np.full(tria.n_vertices, np.inf)
    np.minimum.at(minimal, edges[:, 0], lengths)
    np.minimum.at(minimal, edges[:, 1], lengths)
    return minimal


def distort_random(
    factor: float,
    tria: Triangulation,
    keep_boundary: bool = True,
    seed: int | np.random.Generator | None = None,
) -> None:
    """Move vertices in random directions, in place.

    Each vertex moves by ``factor`` times the length of its shortest
    adjacent edge, in a uniformly random direction. Keeping ``factor``
    below 0.5 keeps cells from inverting.

    Args:
        factor: Size of the displacement relative to the local edge length.
        tria: Mesh to modify.
        keep_boundary: If True, boundary vertices stay where they are.
        seed: Seed or numpy Generator for reproducible distortions.
    """
    if factor < 0:
        raise ValueError("factor must be non-negative")

    rng = np.random.default_rng(seed)
    minimal = minimal_edge_lengths(tria)

    directions = rng.standard_normal((tria.n_vertices, tria.dim))
    norms = np.linalg.norm(directions, axis=1)
    norms[norms == 0.0] = 1.0
    shifts = directions / norms[:, None] * (factor * minimal)[:, None]

    movable = np.isfinite(minimal)
    if keep_boundary:
        movable &= ~tria.boundary_vertex_mask()

    tria.vertices[movable] += shifts[movable]
    logger.debug(
        "Distorted %d of %d vertices (factor=%g)",
        int(movable.sum()),
        tria.n_vertices,
        factor,
    )
