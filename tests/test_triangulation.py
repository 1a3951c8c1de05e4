import numpy as np
import pytest

from meshgallery.exceptions import MeshGenerationError
from meshgallery.mesh.boundary import HyperBallBoundary, StraightBoundary
from meshgallery.mesh.triangulation import Triangulation, face_key
from meshgallery.report import count_boundary_ids


def test_single_cell_counts(unit_square):
    assert unit_square.dim == 2
    assert unit_square.n_active_cells == 1
    assert unit_square.n_vertices == 4
    assert unit_square.faces_per_cell == 4
    assert unit_square.n_boundary_faces == 4
    assert count_boundary_ids(unit_square) == {0: 4}


def test_clockwise_cells_are_reoriented():
    tria = Triangulation([(0, 0), (1, 0), (1, 1), (0, 1)], [(0, 3, 2, 1)])
    assert tria.cells[0].tolist() == [0, 1, 2, 3]


def test_cells_are_read_only(unit_square):
    with pytest.raises(ValueError):
        unit_square.cells[0, 0] = 3


def test_invalid_input_rejected():
    with pytest.raises(MeshGenerationError):
        Triangulation([(0, 0, 0, 0)], [(0,)])
    with pytest.raises(MeshGenerationError):
        Triangulation([(0, 0), (1, 0), (1, 1), (0, 1)], [(0, 1, 2, 7)])
    with pytest.raises(MeshGenerationError):
        Triangulation([(0, 0), (1, 0)], np.empty((0, 4), dtype=int))


def test_interior_and_boundary_faces(make_grid):
    tria = make_grid(2, 2)
    cell = next(tria.active_cells())
    assert cell.face(0).at_boundary()
    assert not cell.face(1).at_boundary()
    assert tria.n_boundary_faces == 8
    assert tria.boundary_vertex_mask().sum() == 8
    assert len(tria.edges()) == 12


def test_set_boundary_id_on_interior_face_raises(make_grid):
    tria = make_grid(2, 1)
    with pytest.raises(MeshGenerationError):
        tria.set_boundary_id((1, 4), 5)


def test_vertex_accessor_is_a_view(make_grid):
    tria = make_grid(2, 2)
    cells = list(tria.active_cells())
    # Vertex 4 is the centre, shared by all four cells
    local = cells[0].vertex_indices().index(4)
    cells[0].vertex(local)[0] += 0.25
    assert tria.vertices[4, 0] == pytest.approx(0.75)
    local = cells[3].vertex_indices().index(4)
    assert cells[3].vertex(local)[0] == pytest.approx(0.75)


def test_refine_global_square(unit_square):
    unit_square.refine_global(2)
    assert unit_square.n_active_cells == 16
    assert unit_square.n_vertices == 25
    assert unit_square.n_boundary_faces == 16
    assert unit_square.n_levels == 3
    assert sorted(np.unique(unit_square.vertices[:, 0])) == pytest.approx(
        [0.0, 0.25, 0.5, 0.75, 1.0]
    )


def test_refine_global_cube(unit_cube):
    unit_cube.refine_global()
    assert unit_cube.n_active_cells == 8
    assert unit_cube.n_vertices == 27
    assert unit_cube.n_boundary_faces == 24


def test_refine_zero_times_is_a_no_op(unit_square):
    unit_square.refine_global(0)
    assert unit_square.n_active_cells == 1


def test_refine_negative_times_raises(unit_square):
    with pytest.raises(ValueError):
        unit_square.refine_global(-1)


def test_children_inherit_boundary_ids(unit_square):
    unit_square.set_boundary_id((0, 1), 3)
    unit_square.refine_global()
    assert count_boundary_ids(unit_square) == {0: 6, 3: 2}

    tagged = [key for key, tag in unit_square.boundary_ids.items() if tag == 3]
    for key in tagged:
        assert np.allclose(unit_square.vertices[list(key), 1], 0.0)


def test_refinement_follows_attached_boundary():
    radius = np.sqrt(2.0)
    tria = Triangulation([(-1, -1), (1, -1), (1, 1), (-1, 1)], [(0, 1, 2, 3)])
    tria.set_boundary(0, HyperBallBoundary((0.0, 0.0), radius))
    tria.refine_global(2)

    mask = tria.boundary_vertex_mask()
    radii = np.linalg.norm(tria.vertices[mask], axis=1)
    assert radii == pytest.approx(np.full(mask.sum(), radius))
    assert np.allclose(tria.vertices[~mask].mean(axis=0), 0.0)


def test_detached_boundary_falls_back_to_straight(unit_square):
    ball = HyperBallBoundary((0.5, 0.5), 1.0)
    unit_square.set_boundary(0, ball)
    assert unit_square.get_boundary(0) is ball
    unit_square.set_boundary(0)
    assert isinstance(unit_square.get_boundary(0), StraightBoundary)

    unit_square.refine_global()
    assert np.allclose(unit_square.vertices.min(axis=0), 0.0)
    assert np.allclose(unit_square.vertices.max(axis=0), 1.0)


def test_copy_is_independent(unit_square):
    other = unit_square.copy()
    other.vertices[0] += 1.0
    other.refine_global()
    assert unit_square.vertices[0].tolist() == [0.0, 0.0]
    assert unit_square.n_active_cells == 1


def test_face_key_ignores_orientation():
    assert face_key((4, 1, 3)) == face_key((3, 4, 1)) == (1, 3, 4)
