"""Quadrilateral and hexahedral triangulations.

A :class:`Triangulation` is a thin record around two numpy arrays, the vertex
positions and the cell-to-vertex connectivity, plus the integer tags carried
by boundary faces and the boundary descriptions attached to those tags.

Local numbering follows gmsh: quadrilaterals are counter-clockwise, hexahedra
list their bottom quadrilateral first and then the top one.
"""

from __future__ import annotations

import itertools
import logging
from typing import Iterator, Sequence

import numpy as np

from meshgallery.exceptions import MeshGenerationError
from meshgallery.mesh.boundary import StraightBoundary

logger = logging.getLogger(__name__)

REFERENCE_VERTICES = {
    2: ((0, 0), (1, 0), (1, 1), (0, 1)),
    3: (
        (0, 0, 0),
        (1, 0, 0),
        (1, 1, 0),
        (0, 1, 0),
        (0, 0, 1),
        (1, 0, 1),
        (1, 1, 1),
        (0, 1, 1),
    ),
}

# Local vertices of each face, listed in cyclic order.
FACE_VERTICES = {
    2: ((0, 1), (1, 2), (2, 3), (3, 0)),
    3: (
        (0, 3, 2, 1),
        (0, 1, 5, 4),
        (1, 2, 6, 5),
        (2, 3, 7, 6),
        (3, 0, 4, 7),
        (4, 5, 6, 7),
    ),
}


def _edge_vertices(dim: int) -> tuple[tuple[int, int], ...]:
    ref = REFERENCE_VERTICES[dim]
    return tuple(
        (i, j)
        for i, j in itertools.combinations(range(len(ref)), 2)
        if sum(a != b for a, b in zip(ref[i], ref[j])) == 1
    )


def _face_planes(dim: int) -> tuple[tuple[int, int], ...]:
    """Return the (axis, side) of the reference plane holding each face."""
    ref = REFERENCE_VERTICES[dim]
    planes = []
    for local in FACE_VERTICES[dim]:
        for axis in range(dim):
            values = {ref[i][axis] for i in local}
            if len(values) == 1:
                planes.append((axis, values.pop()))
                break
    return tuple(planes)


EDGE_VERTICES = {dim: _edge_vertices(dim) for dim in (2, 3)}
FACE_PLANES = {dim: _face_planes(dim) for dim in (2, 3)}


def face_key(vertex_indices: Sequence[int]) -> tuple[int, ...]:
    """Return the orientation-independent key of a face."""
    return tuple(sorted(int(v) for v in vertex_indices))


class FaceAccessor:
    """View of one face of a cell."""

    def __init__(self, tria: Triangulation, vertex_indices: tuple[int, ...]):
        self._tria = tria
        self._vertex_indices = vertex_indices
        self._key = face_key(vertex_indices)

    @property
    def vertex_indices(self) -> tuple[int, ...]:
        """Global vertex indices in cyclic order."""
        return self._vertex_indices

    @property
    def key(self) -> tuple[int, ...]:
        """Sorted vertex indices identifying the face."""
        return self._key

    def at_boundary(self) -> bool:
        """Return True if no other cell shares this face."""
        return self._tria.is_boundary_face(self._key)

    @property
    def boundary_id(self) -> int:
        """Boundary tag of the face (0 unless set otherwise)."""
        return self._tria.boundary_id(self._key)

    def set_boundary_id(self, boundary_id: int) -> None:
        self._tria.set_boundary_id(self._key, boundary_id)

    def center(self) -> np.ndarray:
        return self._tria.vertices[list(self._vertex_indices)].mean(axis=0)


class CellAccessor:
    """View of one active cell.

    Vertex positions are returned as numpy views into the triangulation, so
    ``cell.vertex(i)[1] += 0.5`` moves the vertex for every cell sharing it.
    """

    def __init__(self, tria: Triangulation, index: int):
        self._tria = tria
        self._index = index

    @property
    def index(self) -> int:
        return self._index

    @property
    def n_vertices(self) -> int:
        return self._tria.vertices_per_cell

    @property
    def n_faces(self) -> int:
        return self._tria.faces_per_cell

    def vertex_index(self, i: int) -> int:
        return int(self._tria.cells[self._index, i])

    def vertex_indices(self) -> list[int]:
        return [int(v) for v in self._tria.cells[self._index]]

    def vertex(self, i: int) -> np.ndarray:
        """Return the mutable position of local vertex ``i``."""
        return self._tria.vertices[self.vertex_index(i)]

    def center(self) -> np.ndarray:
        return self._tria.vertices[self.vertex_indices()].mean(axis=0)

    def face(self, f: int) -> FaceAccessor:
        cell = self._tria.cells[self._index]
        local = FACE_VERTICES[self._tria.dim][f]
        return FaceAccessor(self._tria, tuple(int(cell[i]) for i in local))

    def at_boundary(self) -> bool:
        return any(self.face(f).at_boundary() for f in range(self.n_faces))

    def __repr__(self) -> str:
        return f"CellAccessor(index={self._index}, vertices={self.vertex_indices()})"


class Triangulation:
    """Unstructured mesh of quadrilaterals (2D) or hexahedra (3D).

    Args:
        vertices: Vertex coordinates, shape (n_vertices, dim) with dim 2 or 3.
        cells: Cell connectivity, shape (n_cells, 2**dim).
        boundary_ids: Optional mapping from face vertex indices to boundary
            tag. Boundary faces not listed carry tag 0.

    Raises:
        MeshGenerationError: If the arrays are inconsistent.

    Example:
        >>> tria = Triangulation([(0, 0), (1, 0), (1, 1), (0, 1)], [(0, 1, 2, 3)])
        >>> tria.n_active_cells
        1
        >>> tria.refine_global(2)
        >>> tria.n_active_cells
        16
    """

    def __init__(
        self,
        vertices: np.ndarray | Sequence[Sequence[float]],
        cells: np.ndarray | Sequence[Sequence[int]],
        boundary_ids: dict[Sequence[int], int] | None = None,
    ):
        self._vertices = np.array(vertices, dtype=float)
        if self._vertices.ndim != 2 or self._vertices.shape[1] not in (2, 3):
            raise MeshGenerationError(
                "vertices must have shape (n_vertices, 2) or (n_vertices, 3)"
            )

        dim = self._vertices.shape[1]
        self._cells = np.array(cells, dtype=np.int64).reshape(-1, 2**dim)
        if len(self._cells) == 0:
            raise MeshGenerationError("A triangulation needs at least one cell")
        if self._cells.min() < 0 or self._cells.max() >= len(self._vertices):
            raise MeshGenerationError("Cell connectivity refers to unknown vertices")

        if dim == 2:
            self._orient_counter_clockwise()
        self._cells.setflags(write=False)

        self._boundary_ids: dict[tuple[int, ...], int] = {}
        for vertex_indices, tag in (boundary_ids or {}).items():
            self._boundary_ids[face_key(vertex_indices)] = int(tag)

        self._boundaries: dict[int, StraightBoundary] = {}
        self._n_levels = 1
        self._faces: dict[tuple[int, ...], list[tuple[int, int]]] | None = None

    def _orient_counter_clockwise(self) -> None:
        xy = self._vertices[self._cells]
        x, y = xy[..., 0], xy[..., 1]
        twice_area = np.sum(
            x * np.roll(y, -1, axis=1) - np.roll(x, -1, axis=1) * y, axis=1
        )
        flip = twice_area < 0
        if np.any(flip):
            self._cells[flip] = self._cells[flip][:, [0, 3, 2, 1]]

    # ------------------------------------------------------------------
    # Basic properties
    # ------------------------------------------------------------------

    @property
    def dim(self) -> int:
        """Spatial (and cell) dimension."""
        return self._vertices.shape[1]

    @property
    def vertices(self) -> np.ndarray:
        """Vertex coordinates. Writable: edits move the mesh."""
        return self._vertices

    @property
    def cells(self) -> np.ndarray:
        """Read-only cell connectivity, shape (n_cells, vertices_per_cell)."""
        return self._cells

    @property
    def n_vertices(self) -> int:
        return len(self._vertices)

    @property
    def n_active_cells(self) -> int:
        return len(self._cells)

    @property
    def n_levels(self) -> int:
        """Number of refinement levels, 1 for an unrefined mesh."""
        return self._n_levels

    @property
    def vertices_per_cell(self) -> int:
        return 2**self.dim

    @property
    def faces_per_cell(self) -> int:
        return 2 * self.dim

    @property
    def boundary_ids(self) -> dict[tuple[int, ...], int]:
        """Explicitly set boundary tags, keyed by sorted face vertex indices."""
        return self._boundary_ids.copy()

    def active_cells(self) -> Iterator[CellAccessor]:
        for index in range(self.n_active_cells):
            yield CellAccessor(self, index)

    # ------------------------------------------------------------------
    # Faces and boundary
    # ------------------------------------------------------------------

    def _face_map(self) -> dict[tuple[int, ...], list[tuple[int, int]]]:
        if self._faces is None:
            faces: dict[tuple[int, ...], list[tuple[int, int]]] = {}
            for c, cell in enumerate(self._cells.tolist()):
                for f, local in enumerate(FACE_VERTICES[self.dim]):
                    key = face_key([cell[i] for i in local])
                    faces.setdefault(key, []).append((c, f))

            shared = [key for key, owners in faces.items() if len(owners) > 2]
            if shared:
                raise MeshGenerationError(
                    f"{len(shared)} faces are shared by more than two cells"
                )
            self._faces = faces
        return self._faces

    def is_boundary_face(self, key: Sequence[int]) -> bool:
        owners = self._face_map().get(face_key(key))
        if owners is None:
            raise MeshGenerationError(f"{tuple(key)} is not a face of this mesh")
        return len(owners) == 1

    def boundary_faces(self) -> list[tuple[int, int, tuple[int, ...]]]:
        """Return (cell index, local face number, face key) of every boundary face."""
        faces = [
            (owners[0][0], owners[0][1], key)
            for key, owners in self._face_map().items()
            if len(owners) == 1
        ]
        return sorted(faces)

    @property
    def n_boundary_faces(self) -> int:
        return sum(1 for owners in self._face_map().values() if len(owners) == 1)

    def boundary_id(self, key: Sequence[int]) -> int:
        return self._boundary_ids.get(face_key(key), 0)

    def set_boundary_id(self, key: Sequence[int], boundary_id: int) -> None:
        """Tag a boundary face.

        Raises:
            MeshGenerationError: If the face is interior.
        """
        if not self.is_boundary_face(key):
            raise MeshGenerationError(
                f"Face {tuple(key)} is interior and cannot carry a boundary id"
            )
        self._boundary_ids[face_key(key)] = int(boundary_id)

    def get_boundary_ids(self) -> list[int]:
        """Return the sorted tags used on the boundary."""
        return sorted({self.boundary_id(key) for _, _, key in self.boundary_faces()})

    def boundary_vertex_mask(self) -> np.ndarray:
        mask = np.zeros(self.n_vertices, dtype=bool)
        for _, _, key in self.boundary_faces():
            mask[list(key)] = True
        return mask

    def edges(self) -> np.ndarray:
        """Return every cell edge once, as sorted vertex pairs of shape (n_edges, 2)."""
        pairs = self._cells[:, np.array(EDGE_VERTICES[self.dim])].reshape(-1, 2)
        return np.unique(np.sort(pairs, axis=1), axis=0)

    # ------------------------------------------------------------------
    # Boundary descriptions
    # ------------------------------------------------------------------

    def set_boundary(
        self,
        boundary_id: int,
        description: StraightBoundary | None = None,
    ) -> None:
        """Attach a boundary description to a tag, or detach it when None."""
        if description is None:
            self._boundaries.pop(boundary_id, None)
            logger.debug("Detached boundary description from id %d", boundary_id)
        else:
            self._boundaries[boundary_id] = description
            logger.debug("Attached %r to boundary id %d", description, boundary_id)

    def get_boundary(self, boundary_id: int) -> StraightBoundary:
        return self._boundaries.get(boundary_id, StraightBoundary())

    def _curved_entities(self) -> dict[tuple[int, ...], StraightBoundary]:
        """Map boundary faces and their edges to attached descriptions."""
        curved: dict[tuple[int, ...], StraightBoundary] = {}
        if not self._boundaries:
            return curved

        for c, f, key in self.boundary_faces():
            description = self._boundaries.get(self.boundary_id(key))
            if description is None:
                continue
            curved[key] = description
            if self.dim == 3:
                local = FACE_VERTICES[3][f]
                ring = [int(self._cells[c, i]) for i in local]
                for a, b in zip(ring, ring[1:] + ring[:1]):
                    curved[face_key((a, b))] = description
        return curved

    # ------------------------------------------------------------------
    # Refinement
    # ------------------------------------------------------------------

    def refine_global(self, times: int = 1) -> None:
        """Bisect every cell along each axis, ``times`` times over."""
        if times < 0:
            raise ValueError("times must be non-negative")
        for _ in range(times):
            self._refine_once()
        logger.debug(
            "Refined %d time(s): %d active cells", times, self.n_active_cells
        )

    def _refine_once(self) -> None:
        dim = self.dim
        ref = REFERENCE_VERTICES[dim]
        curved = self._curved_entities()

        # Half-step lattice points of the reference cell, corners first
        lattice = sorted(
            itertools.product(range(3), repeat=dim), key=lambda h: h.count(1)
        )

        new_vertices = list(self._vertices)
        index_of: dict[tuple[int, ...], int] = {}
        new_cells = []
        new_boundary_ids: dict[tuple[int, ...], int] = {}

        for cell in self._cells.tolist():
            local: dict[tuple[int, ...], int] = {}
            for h in lattice:
                corners = [
                    cell[i]
                    for i, r in enumerate(ref)
                    if all(h[d] == 2 * r[d] for d in range(dim) if h[d] != 1)
                ]
                key = face_key(corners)
                if key in index_of:
                    local[h] = index_of[key]
                    continue

                free = [d for d in range(dim) if h[d] == 1]
                if not free:
                    index = corners[0]
                else:
                    neighbours = []
                    for d in free:
                        for side in (0, 2):
                            g = list(h)
                            g[d] = side
                            neighbours.append(new_vertices[local[tuple(g)]])
                    point = np.mean(neighbours, axis=0)
                    description = curved.get(key)
                    if description is not None:
                        point = description.project(point)
                    index = len(new_vertices)
                    new_vertices.append(point)

                index_of[key] = index
                local[h] = index

            children = {}
            for offset in itertools.product(range(2), repeat=dim):
                child = [local[tuple(o + r[d] for d, o in enumerate(offset))] for r in ref]
                children[offset] = child
                new_cells.append(child)

            for f, (axis, side) in enumerate(FACE_PLANES[dim]):
                parent = face_key([cell[i] for i in FACE_VERTICES[dim][f]])
                if parent not in self._boundary_ids:
                    continue
                tag = self._boundary_ids[parent]
                for offset, child in children.items():
                    if offset[axis] == side:
                        child_face = face_key([child[i] for i in FACE_VERTICES[dim][f]])
                        new_boundary_ids[child_face] = tag

        cells = np.array(new_cells, dtype=np.int64)
        cells.setflags(write=False)
        self._vertices = np.array(new_vertices, dtype=float)
        self._cells = cells
        self._boundary_ids = new_boundary_ids
        self._faces = None
        self._n_levels += 1

    # ------------------------------------------------------------------

    def copy(self) -> Triangulation:
        """Return an independent copy, including attached descriptions."""
        other = Triangulation(self._vertices, self._cells, self._boundary_ids)
        other._boundaries = dict(self._boundaries)
        other._n_levels = self._n_levels
        return other

    def __repr__(self) -> str:
        return (
            f"Triangulation(dim={self.dim}, n_vertices={self.n_vertices}, "
            f"n_active_cells={self.n_active_cells})"
        )
