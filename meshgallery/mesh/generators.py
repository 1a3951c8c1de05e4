"""Coarse mesh generation using gmsh, and merging of triangulations."""

from __future__ import annotations

import logging
from typing import Callable, Sequence

import gmsh
import numpy as np
from scipy.spatial import cKDTree

from meshgallery.exceptions import MeshGenerationError
from meshgallery.mesh.triangulation import Triangulation

logger = logging.getLogger(__name__)

# gmsh element type codes
GMSH_LINE = 1
GMSH_TRIANGLE = 2
GMSH_QUADRANGLE = 3
GMSH_HEXAHEDRON = 5

CELL_TYPES = {2: GMSH_QUADRANGLE, 3: GMSH_HEXAHEDRON}
FACE_TYPES = {2: GMSH_LINE, 3: GMSH_QUADRANGLE}


def from_gmsh_model(dim: int, boundary_entities: dict[int, int]) -> Triangulation:
    """Build a Triangulation from the mesh of the current gmsh model.

    Must be called between ``gmsh.initialize()`` and ``gmsh.finalize()``,
    after the model has been meshed or opened.

    Args:
        dim: Dimension of the cells to collect (2 for quadrilaterals,
            3 for hexahedra).
        boundary_entities: Mapping from gmsh entity tag of dimension
            ``dim - 1`` to the boundary id given to its elements.

    Returns:
        Triangulation holding every cell of type ``dim``. Nodes not used by
        any cell are dropped.

    Raises:
        MeshGenerationError: If the model holds no cells of the requested type.
    """
    node_tags, coords, _ = gmsh.model.mesh.getNodes()
    coords = np.asarray(coords, dtype=float).reshape(-1, 3)[:, :dim]
    position = {int(tag): i for i, tag in enumerate(node_tags)}

    _, cell_nodes = gmsh.model.mesh.getElementsByType(CELL_TYPES[dim])
    if len(cell_nodes) == 0:
        raise MeshGenerationError(
            f"No {dim}D cells of gmsh type {CELL_TYPES[dim]} found"
        )
    cells = np.array([position[int(t)] for t in cell_nodes], dtype=np.int64)

    # Drop unused nodes (geometry points, lower-dimensional leftovers)
    used, cells = np.unique(cells, return_inverse=True)
    cells = cells.reshape(-1, 2**dim)
    renumber = {int(old): new for new, old in enumerate(used)}

    boundary_ids = {}
    for entity, boundary_id in boundary_entities.items():
        _, face_nodes = gmsh.model.mesh.getElementsByType(
            FACE_TYPES[dim], tag=entity
        )
        faces = np.array(
            [position[int(t)] for t in face_nodes], dtype=np.int64
        ).reshape(-1, 2 ** (dim - 1))
        for face in faces.tolist():
            if all(v in renumber for v in face):
                boundary_ids[tuple(renumber[v] for v in face)] = boundary_id

    logger.debug(
        "Extracted %d cells, %d vertices, %d tagged faces from gmsh",
        len(cells),
        len(used),
        len(boundary_ids),
    )
    return Triangulation(coords[used], cells, boundary_ids)


def _generate_quadrilaterals(
    name: str,
    build_geometry: Callable[[], dict[int, int]],
) -> Triangulation:
    """Run gmsh on a structured 2D geometry and collect the quadrilaterals.

    Args:
        name: gmsh model name.
        build_geometry: Callable creating transfinite, recombined surfaces in
            ``gmsh.model.geo``. Returns the mapping from boundary curve tag
            to boundary id.

    Raises:
        MeshGenerationError: If gmsh fails or leaves triangles behind.
    """
    gmsh.initialize()

    try:
        # Suppress terminal output
        gmsh.option.setNumber("General.Terminal", 0)
        gmsh.model.add(name)

        boundary_curves = build_geometry()
        gmsh.model.geo.synchronize()
        gmsh.model.mesh.generate(2)

        triangles, _ = gmsh.model.mesh.getElementsByType(GMSH_TRIANGLE)
        if len(triangles):
            raise MeshGenerationError(
                f"gmsh left {len(triangles)} triangles in {name!r}; "
                "expected a fully recombined quadrilateral mesh"
            )

        tria = from_gmsh_model(2, boundary_curves)
        logger.debug("Generated %s: %r", name, tria)
        return tria

    except MeshGenerationError:
        raise
    except Exception as e:
        raise MeshGenerationError(f"Mesh generation failed: {e}") from e

    finally:
        gmsh.finalize()


def _structured_patch(curve_loop: Sequence[int]) -> int:
    """Create a transfinite, recombined plane surface from a curve loop."""
    loop = gmsh.model.geo.addCurveLoop(list(curve_loop))
    surface = gmsh.model.geo.addPlaneSurface([loop])
    gmsh.model.geo.mesh.setTransfiniteSurface(surface)
    gmsh.model.geo.mesh.setRecombine(2, surface)
    return surface


def subdivided_hyper_rectangle(
    repetitions: Sequence[int],
    p1: Sequence[float],
    p2: Sequence[float],
) -> Triangulation:
    """Rectangle split into a structured grid of quadrilaterals.

    Args:
        repetitions: Number of cells along x and along y.
        p1: One corner of the rectangle.
        p2: The opposite corner.

    Returns:
        Triangulation with ``repetitions[0] * repetitions[1]`` cells. All
        boundary faces carry boundary id 0.

    Raises:
        MeshGenerationError: If the arguments do not describe a rectangle.

    Example:
        >>> tria = subdivided_hyper_rectangle((14, 2), (0.0, 0.0), (10.0, 1.0))
        >>> tria.n_active_cells
        28
    """
    if len(repetitions) != 2 or len(p1) != 2 or len(p2) != 2:
        raise MeshGenerationError("Only two-dimensional rectangles are supported")
    nx, ny = (int(n) for n in repetitions)
    if nx < 1 or ny < 1:
        raise MeshGenerationError("Repetitions must be positive")

    x0, x1 = sorted((float(p1[0]), float(p2[0])))
    y0, y1 = sorted((float(p1[1]), float(p2[1])))
    if x0 == x1 or y0 == y1:
        raise MeshGenerationError("Rectangle has zero extent")

    def build() -> dict[int, int]:
        geo = gmsh.model.geo
        corners = [
            geo.addPoint(x0, y0, 0),
            geo.addPoint(x1, y0, 0),
            geo.addPoint(x1, y1, 0),
            geo.addPoint(x0, y1, 0),
        ]
        sides = [geo.addLine(corners[i], corners[(i + 1) % 4]) for i in range(4)]
        for side, n in zip(sides, (nx, ny, nx, ny)):
            geo.mesh.setTransfiniteCurve(side, n + 1)
        _structured_patch(sides)
        return {side: 0 for side in sides}

    return _generate_quadrilaterals("subdivided_hyper_rectangle", build)


def hyper_cube_with_cylindrical_hole(
    inner_radius: float = 0.25,
    outer_radius: float = 1.0,
) -> Triangulation:
    """Square ``[-R, R]^2`` with a circular hole of radius ``r``, as 8 quads.

    The inner vertices sit on the circle at 45 degree steps. Cell edges are
    straight; attach a :class:`HyperBallBoundary` to boundary id 1 before
    refining to have new vertices follow the hole.

    Args:
        inner_radius: Radius ``r`` of the hole.
        outer_radius: Half the side length ``R`` of the square.

    Returns:
        Triangulation whose outer boundary has id 0 and whose hole has id 1.

    Raises:
        MeshGenerationError: If the radii are not ``0 < r < R``.
    """
    if not 0 < inner_radius < outer_radius:
        raise MeshGenerationError(
            f"Need 0 < inner_radius < outer_radius, got "
            f"{inner_radius} and {outer_radius}"
        )

    angles = np.arange(8) * np.pi / 4
    directions = np.column_stack([np.cos(angles), np.sin(angles)])
    inner = inner_radius * directions
    # Same directions, stretched out to the square
    outer = outer_radius * directions / np.abs(directions).max(axis=1)[:, None]

    def build() -> dict[int, int]:
        geo = gmsh.model.geo
        inner_points = [geo.addPoint(x, y, 0) for x, y in inner]
        outer_points = [geo.addPoint(x, y, 0) for x, y in outer]

        radial = [geo.addLine(a, b) for a, b in zip(inner_points, outer_points)]
        outer_lines = [
            geo.addLine(outer_points[k], outer_points[(k + 1) % 8]) for k in range(8)
        ]
        inner_lines = [
            geo.addLine(inner_points[k], inner_points[(k + 1) % 8]) for k in range(8)
        ]
        for line in radial + outer_lines + inner_lines:
            geo.mesh.setTransfiniteCurve(line, 2)

        for k in range(8):
            _structured_patch(
                [radial[k], outer_lines[k], -radial[(k + 1) % 8], -inner_lines[k]]
            )

        boundary_curves = {line: 0 for line in outer_lines}
        boundary_curves.update({line: 1 for line in inner_lines})
        return boundary_curves

    return _generate_quadrilaterals("hyper_cube_with_cylindrical_hole", build)


def delete_duplicated_vertices(
    vertices: np.ndarray,
    cells: np.ndarray,
    tolerance: float = 1e-10,
) -> tuple[np.ndarray, np.ndarray]:
    """Join vertices closer than ``tolerance`` and renumber the cells.

    Args:
        vertices: Vertex coordinates, shape (n, dim).
        cells: Cell connectivity into ``vertices``.
        tolerance: Distance below which two vertices are the same.

    Returns:
        Tuple of (unique vertices, renumbered cells).
    """
    vertices = np.asarray(vertices, dtype=float)
    cells = np.asarray(cells, dtype=np.int64)

    tree = cKDTree(vertices)
    pairs = tree.query_pairs(r=tolerance, output_type="ndarray")

    # Map each vertex to the lowest index of its cluster
    target = np.arange(len(vertices))
    for i, j in sorted(map(tuple, pairs.tolist())):
        target[j] = min(target[j], target[i])

    keep, inverse = np.unique(target, return_inverse=True)
    inverse = inverse.reshape(-1)
    logger.debug("Joined %d duplicated vertices", len(vertices) - len(keep))
    return vertices[keep], inverse[cells]


def merge_triangulations(
    tria1: Triangulation,
    tria2: Triangulation,
    tolerance: float = 1e-10,
) -> Triangulation:
    """Merge two meshes that touch along coincident vertices.

    Vertices of the two meshes that coincide are joined, which turns the
    shared faces into interior faces. Boundary ids are not carried over:
    every boundary face of the result has id 0.

    Args:
        tria1: First mesh.
        tria2: Second mesh, of the same dimension.
        tolerance: Distance below which two vertices are joined.

    Returns:
        New Triangulation with the cells of both inputs.

    Raises:
        MeshGenerationError: If the dimensions differ or a cell collapses.
    """
    if tria1.dim != tria2.dim:
        raise MeshGenerationError(
            f"Cannot merge a {tria1.dim}D mesh with a {tria2.dim}D mesh"
        )

    vertices = np.vstack([tria1.vertices, tria2.vertices])
    cells = np.vstack([tria1.cells, tria2.cells + tria1.n_vertices])
    vertices, cells = delete_duplicated_vertices(vertices, cells, tolerance)

    collapsed = [c for c, cell in enumerate(cells) if len(set(cell.tolist())) < len(cell)]
    if collapsed:
        raise MeshGenerationError(
            f"Merging collapsed {len(collapsed)} cells; tolerance is too large"
        )

    merged = Triangulation(vertices, cells)
    logger.debug("Merged %r and %r into %r", tria1, tria2, merged)
    return merged
