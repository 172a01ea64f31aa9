"""Snap index: the ordered pixel positions of every page boundary on the strip."""

import logging
from dataclasses import dataclass
from typing import Sequence

from split_reviewer.errors import (
    GeometryNotReadyError,
    InvalidTargetSnapError,
    UnresolvableMarkerPositionError,
)

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class SnapIndex:
    """
    Boundary positions indexed 0..page_count.

    Index i is the boundary just before page i + 1: index 0 is the document start,
    index page_count the document end.
    """

    positions: tuple[float, ...]

    @classmethod
    def build(cls, page_count: int, positions: Sequence[float]) -> "SnapIndex":
        """
        Build from the geometry provider's boundary offsets.

        Raises GeometryNotReadyError if fewer than page_count + 1 positions are attached
        (the caller defers and retries), ValueError on a malformed layout.
        """
        if page_count < 1:
            raise ValueError(f"page_count must be >= 1, got {page_count}")
        expected = page_count + 1
        if len(positions) < expected:
            raise GeometryNotReadyError(page_count, len(positions))
        if len(positions) > expected:
            raise ValueError(f"Expected {expected} boundary positions, got {len(positions)}")
        values = tuple(float(p) for p in positions)
        for prev, cur in zip(values, values[1:]):
            if cur < prev:
                raise ValueError(f"Boundary positions must be non-decreasing: {prev} then {cur}")
        log.debug("snap index built: %d pages, %s..%s", page_count, values[0], values[-1])
        return cls(values)

    @property
    def page_count(self) -> int:
        return len(self.positions) - 1

    @property
    def start(self) -> float:
        return self.positions[0]

    @property
    def end(self) -> float:
        return self.positions[-1]

    def __len__(self) -> int:
        return len(self.positions)

    def __getitem__(self, index: int) -> float:
        return self.positions[index]

    def nearest(self, x: float) -> int:
        """Index of the position closest to x; ties go to the lowest index."""
        if not self.positions:
            raise InvalidTargetSnapError("Snap index is empty")
        best = 0
        best_diff = abs(x - self.positions[0])
        for i, pos in enumerate(self.positions[1:], start=1):
            diff = abs(x - pos)
            if diff < best_diff:
                best, best_diff = i, diff
        return best

    def index_of(self, position: float) -> int | None:
        """Index of the first boundary exactly at position, or None."""
        for i, pos in enumerate(self.positions):
            if pos == position:
                return i
        return None

    def require_index(self, position: float) -> int:
        idx = self.index_of(position)
        if idx is None:
            raise UnresolvableMarkerPositionError(position)
        return idx

    def position_for_page(self, page: int) -> float:
        """Position of the boundary in front of a 1-based page (where a section starting there begins)."""
        if not 1 <= page <= self.page_count:
            raise ValueError(f"Page {page} out of range 1..{self.page_count}")
        return self.positions[page - 1]
