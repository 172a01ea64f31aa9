"""PyMuPDF-based strip layout: page thumbnails of equal height, left to right with a fixed gap."""

import logging
from pathlib import Path

import fitz  # PyMuPDF

from split_reviewer.errors import DocumentError
from split_reviewer.geometry.base import GeometryProvider

log = logging.getLogger(__name__)

# Thumbnail height (px) every page is scaled to
DEFAULT_THUMBNAIL_HEIGHT = 200.0
# Horizontal gap (px) between neighbouring thumbnails; boundaries sit in its middle
DEFAULT_PAGE_GAP = 16.0


def _open(pdf_path: str | Path) -> fitz.Document:
    try:
        return fitz.open(str(pdf_path))
    except Exception as e:
        raise DocumentError(f"Failed to open PDF {pdf_path}: {e}") from e


def pdf_page_count(pdf_path: str | Path) -> int:
    with _open(pdf_path) as doc:
        return doc.page_count


def _thumbnail_widths(pdf_path: Path, height: float) -> list[float]:
    widths: list[float] = []
    with _open(pdf_path) as doc:
        for page in doc:
            rect = page.rect
            if rect.height <= 0:
                log.warning("page %d of %s has no height; using a square thumbnail", page.number + 1, pdf_path.name)
                widths.append(height)
                continue
            widths.append(rect.width * height / rect.height)
    if not widths:
        raise DocumentError(f"{pdf_path} has no pages")
    return widths


class PyMuPDFStripGeometry(GeometryProvider):
    """Computes the boundary offsets a horizontal thumbnail strip of the PDF would have."""

    def __init__(
        self,
        pdf_path: str | Path,
        *,
        thumbnail_height: float = DEFAULT_THUMBNAIL_HEIGHT,
        page_gap: float = DEFAULT_PAGE_GAP,
        origin: float = 0.0,
    ):
        self.pdf_path = Path(pdf_path)
        self.thumbnail_height = thumbnail_height
        self.page_gap = page_gap
        self.origin = origin
        self._positions: list[float] | None = None
        self._widths = _thumbnail_widths(self.pdf_path, thumbnail_height)

    @property
    def page_count(self) -> int:
        return len(self._widths)

    @property
    def thumbnail_widths(self) -> list[float]:
        return list(self._widths)

    def boundary_positions(self) -> list[float]:
        if self._positions is None:
            self._positions = self._layout()
        return list(self._positions)

    def _layout(self) -> list[float]:
        n = len(self._widths)
        if n == 0:
            return []
        half_gap = self.page_gap / 2
        positions = [self.origin]
        x = self.origin
        for i, width in enumerate(self._widths):
            x += width
            if i < n - 1:
                positions.append(x + half_gap)
                x += self.page_gap
            else:
                positions.append(x)
        log.debug("strip layout for %s: %d boundaries, width %.1f", self.pdf_path.name, len(positions), x)
        return positions
