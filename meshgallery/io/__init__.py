"""I/O utilities for reading and writing meshes."""

from meshgallery.io.readers import MshReader, read_msh
from meshgallery.io.writers import write_eps

__all__ = [
    "MshReader",
    "read_msh",
    "write_eps",
]
