"""Abstract interface for geometry providers: where each page boundary sits on the strip."""

from abc import ABC, abstractmethod
from typing import Sequence


class GeometryProvider(ABC):
    """Interface that each layout source must implement."""

    @property
    @abstractmethod
    def page_count(self) -> int:
        """Number of pages laid out on the strip."""
        ...

    @abstractmethod
    def boundary_positions(self) -> list[float]:
        """
        Pixel offset of every boundary attached so far, left to right:
        before page 1, between each pair of pages, after the last page.
        Complete once it holds page_count + 1 entries.
        """
        ...

    def is_ready(self) -> bool:
        return len(self.boundary_positions()) >= self.page_count + 1


class StaticGeometry(GeometryProvider):
    """Positions reported by a host view; boundaries can be attached one by one as they render."""

    def __init__(self, page_count: int, positions: Sequence[float] = ()):
        self._page_count = page_count
        self._positions = [float(p) for p in positions]

    @property
    def page_count(self) -> int:
        return self._page_count

    def attach(self, position: float) -> None:
        self._positions.append(float(position))

    def boundary_positions(self) -> list[float]:
        return list(self._positions)
