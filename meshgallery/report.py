"""Console summary and EPS rendering of a mesh."""

from __future__ import annotations

import logging
from collections import Counter
from pathlib import Path

from meshgallery.io.writers import write_eps
from meshgallery.mesh.triangulation import Triangulation

logger = logging.getLogger(__name__)


def count_boundary_ids(tria: Triangulation) -> dict[int, int]:
    """Tally the boundary ids of all boundary faces, by ascending id."""
    counts: Counter[int] = Counter()
    for cell in tria.active_cells():
        for f in range(cell.n_faces):
            face = cell.face(f)
            if face.at_boundary():
                counts[face.boundary_id] += 1
    return dict(sorted(counts.items()))


def mesh_info(tria: Triangulation, filename: str | Path) -> dict:
    """Print a summary of the mesh and write it to an EPS file.

    The summary lists the dimension, the number of active cells and how
    many boundary faces carry each boundary id.

    Args:
        tria: Mesh to report on.
        filename: Path of the EPS file to write.

    Returns:
        Dictionary with the reported values.

    Raises:
        OSError: If the EPS file cannot be written.
    """
    boundary_count = count_boundary_ids(tria)

    print("Mesh info:")
    print(f" dimension: {tria.dim}")
    print(f" no. of cells: {tria.n_active_cells}")
    print(
        " boundary indicators: "
        + "".join(f"{tag}({count} times) " for tag, count in boundary_count.items())
    )

    write_eps(tria, filename)
    print(f" written to {filename}")
    print()

    logger.debug("Reported %r to %s", tria, filename)
    return {
        "dimension": tria.dim,
        "n_active_cells": tria.n_active_cells,
        "boundary_ids": boundary_count,
        "filename": str(filename),
    }
