import numpy as np
import pytest

from meshgallery.exceptions import MeshGenerationError
from meshgallery.mesh.extrusion import ExtrusionConfig, extrude_triangulation
from meshgallery.mesh.generators import hyper_cube_with_cylindrical_hole
from meshgallery.report import count_boundary_ids


class TestExtrusionConfig:
    def test_uniform(self):
        config = ExtrusionConfig.uniform(0.5, 4)
        assert config.n_layers == 4
        assert config.is_uniform
        assert config.total_height == pytest.approx(2.0)
        assert config.get_layer_boundaries(normalized=False) == pytest.approx(
            [0.0, 0.5, 1.0, 1.5, 2.0]
        )

    def test_graded_sums_to_total_height(self):
        config = ExtrusionConfig.graded(total_height=3.0, n_layers=5, grading=1.5)
        heights = config.layer_heights
        assert not config.is_uniform
        assert heights.sum() == pytest.approx(3.0)
        assert heights[1:] / heights[:-1] == pytest.approx(np.full(4, 1.5))

    def test_graded_with_unit_grading_is_uniform(self):
        assert ExtrusionConfig.graded(2.0, 4).is_uniform

    def test_normalized_boundaries(self):
        config = ExtrusionConfig([1.0, 3.0])
        assert config.get_layer_boundaries() == pytest.approx([0.0, 0.25, 1.0])

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"layer_heights": 1.0},
            {"layer_heights": [1.0, -1.0]},
            {"layer_heights": [1.0, 2.0], "n_layers": 3},
            {"layer_heights": []},
        ],
    )
    def test_invalid(self, kwargs):
        with pytest.raises(ValueError):
            ExtrusionConfig(**kwargs)


def test_extrude_structured_grid(make_grid):
    tria = make_grid(2, 2)
    out = extrude_triangulation(tria, n_slices=3, height=2.0)

    assert out.dim == 3
    assert out.n_active_cells == 8
    assert out.n_vertices == 27
    assert sorted(np.unique(out.vertices[:, 2])) == pytest.approx([0.0, 1.0, 2.0])
    # Lateral faces keep id 0, bottom gets 1, top gets 2
    assert count_boundary_ids(out) == {0: 16, 1: 4, 2: 4}


def test_extruded_hexahedra_have_positive_height(make_grid):
    out = extrude_triangulation(make_grid(1, 1), n_slices=2, height=1.0)
    cell = out.cells[0]
    assert np.all(out.vertices[cell[4:], 2] > out.vertices[cell[:4], 2])


def test_extrude_hole_keeps_lateral_ids():
    tria = hyper_cube_with_cylindrical_hole(0.25, 1.0)
    out = extrude_triangulation(tria, 3, 2.0)
    assert out.n_active_cells == 16
    assert count_boundary_ids(out) == {0: 16, 1: 16, 2: 8, 3: 8}
    assert sum(count_boundary_ids(out).values()) == out.n_boundary_faces


def test_extrude_with_graded_config(make_grid):
    config = ExtrusionConfig([1.0, 3.0])
    out = extrude_triangulation(make_grid(1, 1), n_slices=3, height=2.0, config=config)
    assert sorted(np.unique(out.vertices[:, 2])) == pytest.approx([0.0, 0.5, 2.0])


def test_extrude_then_refine(make_grid):
    out = extrude_triangulation(make_grid(2, 2), 3, 2.0)
    out.refine_global()
    assert out.n_active_cells == 64
    assert count_boundary_ids(out) == {0: 64, 1: 16, 2: 16}


def test_extrude_rejects_bad_input(make_grid, unit_cube):
    with pytest.raises(MeshGenerationError):
        extrude_triangulation(unit_cube, 3, 1.0)
    with pytest.raises(MeshGenerationError):
        extrude_triangulation(make_grid(1, 1), 1, 1.0)
    with pytest.raises(MeshGenerationError):
        extrude_triangulation(make_grid(1, 1), 3, 1.0, config=ExtrusionConfig([1.0]))
