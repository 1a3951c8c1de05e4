"""Custom exceptions for the meshgallery package."""


class MeshGalleryError(Exception):
    """Base exception for meshgallery package."""

    pass


class MeshGenerationError(MeshGalleryError):
    """Mesh generation or manipulation failed."""

    pass


class MeshReadError(MeshGalleryError):
    """Failed to read a mesh from file."""

    pass


class TransformError(MeshGalleryError):
    """A vertex transform produced an invalid point."""

    pass
