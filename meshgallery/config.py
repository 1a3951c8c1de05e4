"""Run configuration for the mesh gallery."""

from __future__ import annotations

from pathlib import Path

from meshgallery.exceptions import MeshGalleryError

DATA_DIR = Path(__file__).parent / "data"
DEFAULT_INPUT_MESH = DATA_DIR / "untitled.msh"


class GalleryConfig:
    """Where the gallery reads its input and writes its pictures.

    Args:
        output_dir: Directory receiving ``grid-1.eps`` to ``grid-7.eps``.
            Default: current directory.
        input_mesh: Mesh file read by the first demonstration. Default: the
            ``untitled.msh`` shipped with the package.
        seed: Seed for the random distortion. None draws fresh entropy.

    Example:
        >>> config = GalleryConfig(output_dir="out", seed=42)
        >>> config.output_path(3)
        PosixPath('out/grid-3.eps')
    """

    def __init__(
        self,
        output_dir: str | Path = ".",
        input_mesh: str | Path | None = None,
        seed: int | None = None,
    ):
        self._output_dir = Path(output_dir)
        self._input_mesh = Path(input_mesh) if input_mesh else DEFAULT_INPUT_MESH
        if seed is not None and seed < 0:
            raise MeshGalleryError("seed must be non-negative")
        self._seed = seed

    @property
    def output_dir(self) -> Path:
        return self._output_dir

    @property
    def input_mesh(self) -> Path:
        return self._input_mesh

    @property
    def seed(self) -> int | None:
        return self._seed

    def output_path(self, n: int) -> Path:
        """Return the EPS path of demonstration ``n``."""
        return self._output_dir / f"grid-{n}.eps"

    def __repr__(self) -> str:
        return (
            f"GalleryConfig(output_dir={str(self._output_dir)!r}, "
            f"input_mesh={str(self._input_mesh)!r}, seed={self._seed})"
        )
