"""Geometry providers: each reports the boundary offsets of a laid-out page strip."""

from split_reviewer.geometry.base import GeometryProvider, StaticGeometry
from split_reviewer.geometry.pymupdf_strip import PyMuPDFStripGeometry

__all__ = ["GeometryProvider", "StaticGeometry", "PyMuPDFStripGeometry"]

REGISTRY: dict[str, type[GeometryProvider]] = {
    "pymupdf": PyMuPDFStripGeometry,
}


def get_geometry(name: str) -> type[GeometryProvider]:
    """Return geometry provider class for the given name. Raises KeyError if unknown."""
    if name not in REGISTRY:
        raise KeyError(f"Unknown geometry provider: {name}. Available: {list(REGISTRY)}")
    return REGISTRY[name]
