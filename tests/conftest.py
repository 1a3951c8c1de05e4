"""
PyTest Configuration File

Shared fixtures for the meshgallery test suite. The hand-built meshes let
the core mesh operations be tested without going through gmsh.
"""

import pytest

from meshgallery.mesh.triangulation import Triangulation


def structured_quads(nx, ny, width=1.0, height=1.0):
    """Return an nx-by-ny grid of quadrilaterals on [0, width] x [0, height]."""
    vertices = [
        (width * i / nx, height * j / ny)
        for j in range(ny + 1)
        for i in range(nx + 1)
    ]
    row = nx + 1
    cells = [
        (j * row + i, j * row + i + 1, (j + 1) * row + i + 1, (j + 1) * row + i)
        for j in range(ny)
        for i in range(nx)
    ]
    return Triangulation(vertices, cells)


@pytest.fixture
def make_grid():
    """Factory for structured quadrilateral grids."""
    return structured_quads


@pytest.fixture
def unit_square():
    """Single quadrilateral cell on the unit square."""
    return Triangulation([(0, 0), (1, 0), (1, 1), (0, 1)], [(0, 1, 2, 3)])


@pytest.fixture
def unit_cube():
    """Single hexahedral cell on the unit cube."""
    vertices = [
        (0, 0, 0), (1, 0, 0), (1, 1, 0), (0, 1, 0),
        (0, 0, 1), (1, 0, 1), (1, 1, 1), (0, 1, 1),
    ]
    return Triangulation(vertices, [tuple(range(8))])


@pytest.fixture
def output_dir(tmp_path):
    """Directory for files written during a test."""
    path = tmp_path / "output"
    path.mkdir()
    return path

