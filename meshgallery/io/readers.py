"""Mesh readers built on the gmsh Python API."""

from __future__ import annotations

import logging
from pathlib import Path

import gmsh

from meshgallery.exceptions import MeshReadError
from meshgallery.mesh.generators import GMSH_HEXAHEDRON, from_gmsh_model
from meshgallery.mesh.triangulation import Triangulation

logger = logging.getLogger(__name__)


class MshReader:
    """Reader for gmsh ``.msh`` files (MSH2 or MSH4).

    Cells are taken from hexahedra if the file has any, otherwise from
    quadrilaterals. The physical tag of each boundary line (2D) or
    boundary quadrilateral (3D) becomes that face's boundary id.
    """

    def read(self, path: str | Path) -> Triangulation:
        """Read a triangulation from a mesh file.

        Args:
            path: Path to the ``.msh`` file.

        Returns:
            Triangulation of the file's quadrilaterals or hexahedra.

        Raises:
            MeshReadError: If the file is missing or holds no usable cells.
        """
        path = Path(path)

        if not path.exists():
            raise MeshReadError(f"File not found: {path}")

        gmsh.initialize()
        try:
            gmsh.option.setNumber("General.Terminal", 0)
            gmsh.open(str(path))

            hex_tags, _ = gmsh.model.mesh.getElementsByType(GMSH_HEXAHEDRON)
            dim = 3 if len(hex_tags) else 2

            boundary_entities = {}
            for _, physical in gmsh.model.getPhysicalGroups(dim - 1):
                for entity in gmsh.model.getEntitiesForPhysicalGroup(dim - 1, physical):
                    boundary_entities[int(entity)] = int(physical)

            tria = from_gmsh_model(dim, boundary_entities)
            logger.debug("Read %r from %s", tria, path)
            return tria

        except Exception as e:
            raise MeshReadError(f"Failed to read mesh file {path}: {e}") from e

        finally:
            gmsh.finalize()


def read_msh(path: str | Path) -> Triangulation:
    """Convenience function to read a gmsh mesh file.

    Args:
        path: Path to the ``.msh`` file.

    Returns:
        Triangulation read from the file.
    """
    return MshReader().read(path)
