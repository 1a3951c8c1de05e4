"""Extrusion of 2D quadrilateral meshes into 3D hexahedral meshes."""

from __future__ import annotations

import logging

import numpy as np

from meshgallery.exceptions import MeshGenerationError
from meshgallery.mesh.triangulation import Triangulation

logger = logging.getLogger(__name__)


class ExtrusionConfig:
    """Layer thicknesses for an extrusion, from bottom to top.

    Args:
        layer_heights: Either a constant thickness or a sequence of
            thicknesses. A constant requires ``n_layers``.
        n_layers: Number of layers (required if layer_heights is a scalar).

    Example:
        >>> ExtrusionConfig(layer_heights=1.0, n_layers=2).n_layers
        2
        >>> ExtrusionConfig(layer_heights=[0.5, 1.0, 2.0]).is_uniform
        False
    """

    def __init__(
        self,
        layer_heights: float | list[float] | np.ndarray,
        n_layers: int | None = None,
    ):
        if isinstance(layer_heights, (int, float)):
            if n_layers is None:
                raise ValueError(
                    "n_layers must be provided when layer_heights is a scalar"
                )
            if n_layers < 1:
                raise ValueError("n_layers must be at least 1")
            self._layer_heights = np.full(n_layers, float(layer_heights))
            self._uniform = True
        else:
            self._layer_heights = np.asarray(layer_heights, dtype=float)
            if self._layer_heights.ndim != 1 or len(self._layer_heights) == 0:
                raise ValueError("layer_heights must be a non-empty 1D array")
            if n_layers is not None and n_layers != len(self._layer_heights):
                raise ValueError(
                    f"n_layers ({n_layers}) does not match length of "
                    f"layer_heights ({len(self._layer_heights)})"
                )
            self._uniform = bool(
                np.allclose(self._layer_heights, self._layer_heights[0])
            )

        if np.any(self._layer_heights <= 0):
            raise ValueError("All layer heights must be positive")

    @classmethod
    def uniform(cls, layer_height: float, n_layers: int) -> ExtrusionConfig:
        """Create configuration with ``n_layers`` layers of equal height."""
        return cls(layer_heights=layer_height, n_layers=n_layers)

    @classmethod
    def graded(
        cls,
        total_height: float,
        n_layers: int,
        grading: float = 1.0,
    ) -> ExtrusionConfig:
        """Create configuration with geometrically graded layers.

        Grading > 1 makes layers thicker towards the top, grading < 1
        thicker towards the bottom.

        Args:
            total_height: Total height of all layers combined.
            n_layers: Number of layers.
            grading: Ratio of successive layer heights. Default: 1.0 (uniform).
        """
        if grading == 1.0:
            return cls.uniform(total_height / n_layers, n_layers)

        # h_i = h_0 * grading^i, summing to total_height
        h0 = total_height * (grading - 1) / (grading**n_layers - 1)
        return cls(layer_heights=h0 * grading ** np.arange(n_layers))

    @property
    def n_layers(self) -> int:
        return len(self._layer_heights)

    @property
    def layer_heights(self) -> np.ndarray:
        return self._layer_heights.copy()

    @property
    def total_height(self) -> float:
        return float(self._layer_heights.sum())

    @property
    def is_uniform(self) -> bool:
        return self._uniform

    @property
    def normalized_heights(self) -> np.ndarray:
        """Layer heights scaled to sum to 1.0."""
        return self._layer_heights / self.total_height

    def get_layer_boundaries(self, normalized: bool = True) -> np.ndarray:
        """Return z-coordinates of the layer interfaces.

        Args:
            normalized: If True, return values in [0, 1]. If False, return
                actual heights.

        Returns:
            Array of shape (n_layers + 1,) starting at 0.
        """
        heights = self.normalized_heights if normalized else self._layer_heights
        boundaries = np.zeros(self.n_layers + 1)
        boundaries[1:] = np.cumsum(heights)
        if normalized:
            boundaries[-1] = 1.0
        return boundaries

    def __repr__(self) -> str:
        mode = "uniform" if self._uniform else "variable"
        return (
            f"ExtrusionConfig(n_layers={self.n_layers}, "
            f"total_height={self.total_height:.2f}, mode={mode})"
        )


def extrude_triangulation(
    tria: Triangulation,
    n_slices: int,
    height: float,
    config: ExtrusionConfig | None = None,
) -> Triangulation:
    """Sweep a 2D quadrilateral mesh along +z into a hexahedral mesh.

    The 2D mesh is copied onto ``n_slices`` planes between z = 0 and
    z = ``height`` and consecutive planes are joined into hexahedra, giving
    ``n_slices - 1`` layers.

    Boundary ids: the lateral faces keep the id of the 2D boundary edge
    they were swept from. Faces on the bottom plane get ``max_id + 1`` and
    faces on the top plane ``max_id + 2``, where ``max_id`` is the largest
    id on the 2D boundary.

    Args:
        tria: Two-dimensional mesh.
        n_slices: Number of vertex planes, at least 2.
        height: Total extent in z.
        config: Optional layer configuration replacing the uniform layers.
            Its layer heights are scaled to sum to ``height``.

    Returns:
        New three-dimensional Triangulation.

    Raises:
        MeshGenerationError: If the input is not 2D or the layering is invalid.

    Example:
        >>> tria3d = extrude_triangulation(tria2d, n_slices=3, height=2.0)
        >>> tria3d.n_active_cells == 2 * tria2d.n_active_cells
        True
    """
    if tria.dim != 2:
        raise MeshGenerationError(
            f"Only 2D meshes can be extruded, got a {tria.dim}D mesh"
        )
    if n_slices < 2:
        raise MeshGenerationError("n_slices must be at least 2")
    if height <= 0:
        raise MeshGenerationError("height must be positive")

    if config is None:
        config = ExtrusionConfig.uniform(height / (n_slices - 1), n_slices - 1)
    elif config.n_layers != n_slices - 1:
        raise MeshGenerationError(
            f"config has {config.n_layers} layers but n_slices={n_slices} "
            f"needs {n_slices - 1}"
        )
    z_levels = config.get_layer_boundaries(normalized=True) * height

    n_base = tria.n_vertices
    base = tria.vertices
    vertices = np.vstack(
        [np.column_stack([base, np.full(n_base, z)]) for z in z_levels]
    )

    quads = tria.cells
    cells = np.vstack(
        [
            np.hstack([quads + layer * n_base, quads + (layer + 1) * n_base])
            for layer in range(config.n_layers)
        ]
    )

    edge_ids = [
        (key, tria.boundary_id(key)) for _, _, key in tria.boundary_faces()
    ]
    max_id = max(boundary_id for _, boundary_id in edge_ids)

    boundary_ids = {}
    for (a, b), boundary_id in edge_ids:
        for layer in range(config.n_layers):
            lower = layer * n_base
            upper = (layer + 1) * n_base
            boundary_ids[(a + lower, b + lower, b + upper, a + upper)] = boundary_id
    top = config.n_layers * n_base
    for quad in quads.tolist():
        boundary_ids[tuple(quad)] = max_id + 1
        boundary_ids[tuple(v + top for v in quad)] = max_id + 2

    extruded = Triangulation(vertices, cells, boundary_ids)
    logger.debug("Extruded %r into %r", tria, extruded)
    return extruded
