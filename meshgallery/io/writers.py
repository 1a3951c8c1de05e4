"""Mesh export utilities."""

from __future__ import annotations

import logging
from pathlib import Path

import numpy as np
from matplotlib.collections import LineCollection
from matplotlib.figure import Figure
from mpl_toolkits.mplot3d.art3d import Line3DCollection

from meshgallery.mesh.triangulation import FACE_VERTICES, Triangulation

logger = logging.getLogger(__name__)

# Fixed camera for 3D output
ELEVATION = 30.0
AZIMUTH = -60.0


def _boundary_segments(tria: Triangulation) -> np.ndarray:
    """Return the vertex pairs of every edge lying on the boundary."""
    pairs = set()
    for c, f, _ in tria.boundary_faces():
        ring = [int(tria.cells[c, i]) for i in FACE_VERTICES[tria.dim][f]]
        if tria.dim == 2:
            pairs.add(tuple(sorted(ring)))
        else:
            for a, b in zip(ring, ring[1:] + ring[:1]):
                pairs.add((min(a, b), max(a, b)))
    return np.array(sorted(pairs), dtype=np.int64).reshape(-1, 2)


def write_eps(
    tria: Triangulation,
    path: str | Path,
    linewidth: float = 0.5,
) -> None:
    """Draw the mesh edges and save them as encapsulated PostScript.

    Boundary edges are drawn twice as thick as interior edges. Three
    dimensional meshes are drawn as a wireframe from a fixed viewpoint.

    Args:
        tria: Mesh to draw.
        path: Output file path (typically .eps extension).
        linewidth: Width of interior edges in points.

    Raises:
        OSError: If the file cannot be written.

    Example:
        >>> write_eps(tria, "output/grid-1.eps")
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    vertices = tria.vertices
    edges = tria.edges()
    boundary = _boundary_segments(tria)

    fig = Figure(figsize=(6, 6))
    if tria.dim == 2:
        ax = fig.add_subplot(111)
        ax.add_collection(
            LineCollection(vertices[edges], colors="black", linewidths=linewidth)
        )
        ax.add_collection(
            LineCollection(vertices[boundary], colors="black", linewidths=2 * linewidth)
        )
        ax.autoscale_view()
        ax.set_aspect("equal", adjustable="datalim")
    else:
        ax = fig.add_subplot(111, projection="3d")
        ax.add_collection3d(
            Line3DCollection(vertices[edges], colors="black", linewidths=linewidth)
        )
        ax.add_collection3d(
            Line3DCollection(vertices[boundary], colors="black", linewidths=2 * linewidth)
        )
        lower, upper = vertices.min(axis=0), vertices.max(axis=0)
        ax.set_xlim(lower[0], upper[0])
        ax.set_ylim(lower[1], upper[1])
        ax.set_zlim(lower[2], upper[2])
        ax.set_box_aspect(upper - lower)
        ax.view_init(elev=ELEVATION, azim=AZIMUTH)
    ax.set_axis_off()

    fig.savefig(path, format="eps", bbox_inches="tight")
    logger.debug("Wrote %d edges to %s", len(edges), path)
