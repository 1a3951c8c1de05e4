import pytest

from meshgallery import GalleryConfig
from meshgallery.__main__ import main
from meshgallery.exceptions import MeshReadError
from meshgallery.gallery import GRIDS, grid_1, grid_3, run_all

EXPECTED_CELLS = [6, 14, 128, 16, 28, 1600, 256]


@pytest.fixture
def config(output_dir):
    return GalleryConfig(output_dir=output_dir, seed=7)


def test_run_all(config, capsys):
    summaries = run_all(config)

    assert [s["n_active_cells"] for s in summaries] == EXPECTED_CELLS
    assert [s["dimension"] for s in summaries] == [2, 2, 2, 3, 2, 2, 2]
    for n in range(1, 8):
        assert config.output_path(n).exists()
    assert capsys.readouterr().out.count("Mesh info:") == 7


def test_grids_are_independent(config):
    assert len(GRIDS) == 7
    first = grid_3(config)
    second = grid_3(config)
    assert first == second


def test_grid_3_boundary(config):
    info = grid_3(config)
    assert info["boundary_ids"] == {0: 32, 1: 32}


def test_grid_1_missing_input(output_dir):
    config = GalleryConfig(output_dir=output_dir, input_mesh=output_dir / "nope.msh")
    with pytest.raises(MeshReadError):
        grid_1(config)


def test_config_defaults():
    config = GalleryConfig()
    assert config.input_mesh.name == "untitled.msh"
    assert config.input_mesh.exists()
    assert config.output_path(5).name == "grid-5.eps"
    assert config.seed is None


def test_cli(output_dir, capsys):
    assert main(["--output-dir", str(output_dir), "--seed", "3"]) == 0
    assert sorted(p.name for p in output_dir.iterdir()) == [
        f"grid-{n}.eps" for n in range(1, 8)
    ]
    assert "no. of cells: 1600" in capsys.readouterr().out
