"""Seven ways of making a mesh.

Each ``grid_N`` function builds its own mesh, prints a summary and writes
``grid-N.eps`` to the configured output directory. They share no state and
can be run in any order; :func:`run_all` runs them one after the other.
"""

from __future__ import annotations

import logging

import numpy as np

from meshgallery.config import GalleryConfig
from meshgallery.io.readers import read_msh
from meshgallery.mesh.boundary import HyperBallBoundary
from meshgallery.mesh.extrusion import extrude_triangulation
from meshgallery.mesh.generators import (
    hyper_cube_with_cylindrical_hole,
    merge_triangulations,
    subdivided_hyper_rectangle,
)
from meshgallery.mesh.transform import distort_random, shift_vertices, transform
from meshgallery.report import mesh_info

logger = logging.getLogger(__name__)


def grid_1(config: GalleryConfig | None = None) -> dict:
    """Read a mesh from a gmsh file."""
    config = config or GalleryConfig()
    tria = read_msh(config.input_mesh)
    return mesh_info(tria, config.output_path(1))


def grid_2(config: GalleryConfig | None = None) -> dict:
    """Glue a rectangle to the right side of the square with a hole."""
    config = config or GalleryConfig()
    tria1 = hyper_cube_with_cylindrical_hole(0.25, 1.0)
    tria2 = subdivided_hyper_rectangle((3, 2), (1.0, -1.0), (4.0, 1.0))
    tria = merge_triangulations(tria1, tria2)
    return mesh_info(tria, config.output_path(2))


def grid_3(config: GalleryConfig | None = None) -> dict:
    """Move the top vertices, then refine with the hole kept round."""
    config = config or GalleryConfig()
    tria = hyper_cube_with_cylindrical_hole(0.25, 1.0)

    shift_vertices(tria, lambda v: abs(v[1] - 1.0) < 1e-5, (0.0, 0.5))

    tria.set_boundary(1, HyperBallBoundary((0.0, 0.0), 0.25))
    tria.refine_global(2)
    info = mesh_info(tria, config.output_path(3))
    tria.set_boundary(1)
    return info


def grid_4(config: GalleryConfig | None = None) -> dict:
    """Extrude the square with a hole into a 3D slab."""
    config = config or GalleryConfig()
    tria = hyper_cube_with_cylindrical_hole(0.25, 1.0)
    out = extrude_triangulation(tria, 3, 2.0)
    return mesh_info(out, config.output_path(4))


def grid_5_transform(p: np.ndarray) -> np.ndarray:
    """Bend a strip along a sine wave."""
    return np.array([p[0], p[1] + np.sin(p[0] / 5.0 * np.pi)])


def grid_5(config: GalleryConfig | None = None) -> dict:
    """Apply a plain function to every vertex of a long strip."""
    config = config or GalleryConfig()
    tria = subdivided_hyper_rectangle((14, 2), (0.0, 0.0), (10.0, 1.0))
    transform(grid_5_transform, tria)
    return mesh_info(tria, config.output_path(5))


class Grid6Func:
    """Cluster vertices towards y = 1 with a tanh stretching."""

    def trans(self, y: float) -> float:
        return np.tanh(2 * y) / np.tanh(2)

    def __call__(self, p: np.ndarray) -> np.ndarray:
        return np.array([p[0], self.trans(p[1])])


def grid_6(config: GalleryConfig | None = None) -> dict:
    """Apply a callable object to every vertex of the unit square."""
    config = config or GalleryConfig()
    tria = subdivided_hyper_rectangle((40, 40), (0.0, 0.0), (1.0, 1.0))
    transform(Grid6Func(), tria)
    return mesh_info(tria, config.output_path(6))


def grid_7(config: GalleryConfig | None = None) -> dict:
    """Randomly jiggle the interior vertices of the unit square."""
    config = config or GalleryConfig()
    tria = subdivided_hyper_rectangle((16, 16), (0.0, 0.0), (1.0, 1.0))
    distort_random(0.3, tria, keep_boundary=True, seed=config.seed)
    return mesh_info(tria, config.output_path(7))


GRIDS = (grid_1, grid_2, grid_3, grid_4, grid_5, grid_6, grid_7)


def run_all(config: GalleryConfig | None = None) -> list[dict]:
    """Run every demonstration in order and return their summaries."""
    config = config or GalleryConfig()
    summaries = []
    for grid in GRIDS:
        logger.info("Running %s", grid.__name__)
        summaries.append(grid(config))
    return summaries
