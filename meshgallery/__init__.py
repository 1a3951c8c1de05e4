"""meshgallery - seven ways of making a quadrilateral mesh.

Coarse meshes come from gmsh; the package then reads, merges, moves,
refines, extrudes and distorts them, and reports each result as a short
console summary plus an EPS picture.

Example:
    >>> from meshgallery import HyperBallBoundary, hyper_cube_with_cylindrical_hole
    >>> tria = hyper_cube_with_cylindrical_hole(0.25, 1.0)
    >>> tria.set_boundary(1, HyperBallBoundary((0.0, 0.0), 0.25))
    >>> tria.refine_global(2)
    >>> from meshgallery.report import mesh_info
    >>> info = mesh_info(tria, "grid-3.eps")
"""

from meshgallery.exceptions import (
    MeshGalleryError,
    MeshGenerationError,
    MeshReadError,
    TransformError,
)
from meshgallery.mesh import (
    ExtrusionConfig,
    HyperBallBoundary,
    StraightBoundary,
    Triangulation,
    distort_random,
    extrude_triangulation,
    hyper_cube_with_cylindrical_hole,
    merge_triangulations,
    subdivided_hyper_rectangle,
    transform,
)
from meshgallery.config import GalleryConfig

__version__ = "0.1.0"

__all__ = [
    # Main API
    "Triangulation",
    "StraightBoundary",
    "HyperBallBoundary",
    "ExtrusionConfig",
    "GalleryConfig",
    "subdivided_hyper_rectangle",
    "hyper_cube_with_cylindrical_hole",
    "merge_triangulations",
    "extrude_triangulation",
    "transform",
    "distort_random",
    # Exceptions
    "MeshGalleryError",
    "MeshGenerationError",
    "MeshReadError",
    "TransformError",
]
