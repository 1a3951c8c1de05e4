"""Mesh generation and manipulation."""

from meshgallery.mesh.boundary import HyperBallBoundary, StraightBoundary
from meshgallery.mesh.triangulation import (
    CellAccessor,
    FaceAccessor,
    Triangulation,
    face_key,
)
from meshgallery.mesh.generators import (
    delete_duplicated_vertices,
    hyper_cube_with_cylindrical_hole,
    merge_triangulations,
    subdivided_hyper_rectangle,
)
from meshgallery.mesh.extrusion import ExtrusionConfig, extrude_triangulation
from meshgallery.mesh.transform import (
    distort_random,
    minimal_edge_lengths,
    shift_vertices,
    transform,
)

__all__ = [
    "Triangulation",
    "CellAccessor",
    "FaceAccessor",
    "face_key",
    "StraightBoundary",
    "HyperBallBoundary",
    "subdivided_hyper_rectangle",
    "hyper_cube_with_cylindrical_hole",
    "merge_triangulations",
    "delete_duplicated_vertices",
    "ExtrusionConfig",
    "extrude_triangulation",
    "transform",
    "shift_vertices",
    "distort_random",
    "minimal_edge_lengths",
]
