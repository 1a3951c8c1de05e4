import pytest

from meshgallery.report import count_boundary_ids, mesh_info


def test_mesh_info_output(unit_square, output_dir, capsys):
    unit_square.set_boundary_id((1, 2), 7)
    path = output_dir / "square.eps"

    info = mesh_info(unit_square, path)

    out = capsys.readouterr().out.splitlines()
    assert out == [
        "Mesh info:",
        " dimension: 2",
        " no. of cells: 1",
        " boundary indicators: 0(3 times) 7(1 times) ",
        f" written to {path}",
        "",
    ]
    assert info == {
        "dimension": 2,
        "n_active_cells": 1,
        "boundary_ids": {0: 3, 7: 1},
        "filename": str(path),
    }
    assert path.exists()


def test_tally_is_sorted_and_complete(make_grid):
    tria = make_grid(3, 3)
    faces = tria.boundary_faces()
    tria.set_boundary_id(faces[0][2], 9)
    tria.set_boundary_id(faces[1][2], 4)

    tally = count_boundary_ids(tria)
    assert list(tally) == sorted(tally)
    assert sum(tally.values()) == tria.n_boundary_faces == 12


def test_tally_for_hexahedra(unit_cube):
    assert count_boundary_ids(unit_cube) == {0: 6}


def test_mesh_info_unwritable_path(unit_square, tmp_path):
    blocker = tmp_path / "file"
    blocker.write_text("")
    with pytest.raises(OSError):
        mesh_info(unit_square, blocker / "square.eps")
