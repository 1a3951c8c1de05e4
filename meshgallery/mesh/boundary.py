"""Boundary descriptions used to place new vertices during refinement."""

from __future__ import annotations

from typing import Sequence

import numpy as np

from meshgallery.exceptions import MeshGenerationError


class StraightBoundary:
    """Flat boundary: new points are the mean of their parent points.

    This is what every boundary tag uses when no other description is
    attached to it.
    """

    def project(self, point: np.ndarray) -> np.ndarray:
        """Return the point itself."""
        return np.asarray(point, dtype=float)

    def get_new_point_on_line(self, p0: np.ndarray, p1: np.ndarray) -> np.ndarray:
        """Return the point to insert between two vertices of a boundary edge."""
        midpoint = 0.5 * (np.asarray(p0, dtype=float) + np.asarray(p1, dtype=float))
        return self.project(midpoint)

    def get_new_point_on_face(self, points: np.ndarray) -> np.ndarray:
        """Return the point to insert in the middle of a boundary face."""
        return self.project(np.asarray(points, dtype=float).mean(axis=0))

    def __repr__(self) -> str:
        return "StraightBoundary()"


class HyperBallBoundary(StraightBoundary):
    """Circle (2D) or sphere (3D) boundary.

    New points are pushed radially outward (or inward) until they lie at
    ``radius`` from ``center``.

    Args:
        center: Centre of the ball.
        radius: Radius of the ball.

    Example:
        >>> boundary = HyperBallBoundary((0.0, 0.0), 0.25)
        >>> boundary.get_new_point_on_line((0.25, 0.0), (0.0, 0.25))
        array([0.1767767, 0.1767767])
    """

    def __init__(self, center: Sequence[float], radius: float):
        if radius <= 0:
            raise ValueError("Radius must be positive")
        self._center = np.asarray(center, dtype=float)
        self._radius = float(radius)

    @property
    def center(self) -> np.ndarray:
        """Centre of the ball."""
        return self._center.copy()

    @property
    def radius(self) -> float:
        """Radius of the ball."""
        return self._radius

    def project(self, point: np.ndarray) -> np.ndarray:
        """Project a point radially onto the ball's surface.

        Raises:
            MeshGenerationError: If the point coincides with the centre.
        """
        point = np.asarray(point, dtype=float)
        offset = point - self._center
        distance = np.linalg.norm(offset)
        if distance == 0.0:
            raise MeshGenerationError(
                "Cannot project the centre of a HyperBallBoundary onto its surface"
            )
        return self._center + offset * (self._radius / distance)

    def __repr__(self) -> str:
        return f"HyperBallBoundary(center={self._center.tolist()}, radius={self._radius})"
