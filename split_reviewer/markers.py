"""
Marker set: the ordered split lines of a session, plus the passes that mutate it.

A drag is applied as three separate passes so each can be tested on its own:

    remove_crossed   - drop every marker the drag sweeps over (and an unlocked one at the target)
    relocate         - move the dragged marker; a locked one leaves a locked copy behind
    dedup_overlaps   - collapse unlocked markers that sit on (or within tolerance of) a kept one

The passes return new lists and never touch their input, so a rejected gesture leaves
the set exactly as it was.
"""

import logging
from typing import Iterable, Iterator, Sequence

from split_reviewer.models import Marker, Proposal
from split_reviewer.snap import SnapIndex

log = logging.getLogger(__name__)

# Two unlocked markers closer than this (pixels) are treated as one
DEFAULT_OVERLAP_TOLERANCE = 1.0


def sort_markers(markers: Iterable[Marker]) -> list[Marker]:
    return sorted(markers, key=lambda m: m.position)


def remove_crossed(
    markers: Sequence[Marker],
    dragged_index: int,
    origin: float,
    target: float,
) -> list[Marker]:
    """
    Drop every other marker strictly between origin and target, and an unlocked marker
    resting exactly on target. Locked markers always survive.
    """
    low, high = min(origin, target), max(origin, target)
    kept: list[Marker] = []
    for i, marker in enumerate(markers):
        if i == dragged_index or marker.locked:
            kept.append(marker)
            continue
        if low < marker.position < high or marker.position == target:
            log.debug("drag sweeps marker at %s", marker.position)
            continue
        kept.append(marker)
    return kept


def relocate(markers: Sequence[Marker], dragged_index: int, target: float) -> list[Marker]:
    """
    Put the dragged marker on target.

    An unlocked marker just moves. A locked marker stays where it is and an unlocked
    copy is placed on target, so the number of locked markers never changes.
    """
    dragged = markers[dragged_index]
    out: list[Marker] = []
    for i, marker in enumerate(markers):
        if i != dragged_index:
            out.append(marker)
        elif dragged.locked:
            out.append(Marker(position=dragged.position, locked=True))
            out.append(Marker(position=target, locked=False))
        else:
            out.append(dragged.model_copy(update={"position": target}))
    return out


def dedup_overlaps(markers: Sequence[Marker], tolerance: float = DEFAULT_OVERLAP_TOLERANCE) -> list[Marker]:
    """
    Keep every locked marker; keep an unlocked marker only if it is farther than
    tolerance from all markers kept before it (in iteration order). Result is sorted.
    """
    locked = [m for m in markers if m.locked]
    kept_positions = [m.position for m in locked]
    unlocked: list[Marker] = []
    for marker in markers:
        if marker.locked:
            continue
        if any(abs(pos - marker.position) <= tolerance for pos in kept_positions):
            log.debug("dropping overlapping marker at %s", marker.position)
            continue
        kept_positions.append(marker.position)
        unlocked.append(marker)
    return sort_markers(locked + unlocked)


class MarkerSet:
    """Ordered collection of markers; always sorted by position."""

    def __init__(
        self,
        markers: Iterable[Marker] = (),
        *,
        overlap_tolerance: float = DEFAULT_OVERLAP_TOLERANCE,
    ):
        self.overlap_tolerance = overlap_tolerance
        self._markers: list[Marker] = sort_markers(markers)

    @classmethod
    def seed(
        cls,
        snap: SnapIndex,
        proposals: Iterable[Proposal],
        *,
        overlap_tolerance: float = DEFAULT_OVERLAP_TOLERANCE,
    ) -> "MarkerSet":
        """
        Locked caps at both ends plus one unlocked marker per interior proposal start.
        Proposals on page 1 (or past the end) and duplicate positions are skipped.
        """
        page_count = snap.page_count
        markers = [Marker(position=snap.start, locked=True)]
        seen: set[float] = set()
        for proposal in proposals:
            idx = proposal.start_page - 1
            if not 0 < idx < page_count:
                continue
            pos = snap[idx]
            if pos in seen:
                log.debug("proposal at page %d duplicates an existing marker", proposal.start_page)
                continue
            seen.add(pos)
            markers.append(Marker(position=pos, locked=False))
        markers.append(Marker(position=snap.end, locked=True))
        return cls(markers, overlap_tolerance=overlap_tolerance)

    @classmethod
    def from_start_pages(
        cls,
        snap: SnapIndex,
        start_pages: Iterable[int],
        *,
        overlap_tolerance: float = DEFAULT_OVERLAP_TOLERANCE,
    ) -> "MarkerSet":
        """Rebuild from a list of section start pages (used after editing a section's range)."""
        markers = [Marker(position=snap.start, locked=True), Marker(position=snap.end, locked=True)]
        for page in start_pages:
            if 1 < page <= snap.page_count:
                markers.append(Marker(position=snap[page - 1]))
        return cls(dedup_overlaps(markers, overlap_tolerance), overlap_tolerance=overlap_tolerance)

    @property
    def markers(self) -> list[Marker]:
        return list(self._markers)

    def __len__(self) -> int:
        return len(self._markers)

    def __getitem__(self, index: int) -> Marker:
        return self._markers[index]

    def __iter__(self) -> Iterator[Marker]:
        return iter(list(self._markers))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MarkerSet):
            return NotImplemented
        return self._markers == other._markers

    def __repr__(self) -> str:
        inner = ", ".join(f"{m.position:g}{'L' if m.locked else ''}" for m in self._markers)
        return f"MarkerSet([{inner}])"

    def positions(self) -> list[float]:
        return [m.position for m in self._markers]

    @property
    def locked_count(self) -> int:
        return sum(1 for m in self._markers if m.locked)

    def snapshot(self) -> list[Marker]:
        """Deep copy of the markers, for equality checks and rollback."""
        return [m.model_copy() for m in self._markers]

    def replace(self, markers: Iterable[Marker]) -> None:
        self._markers = sort_markers(markers)

    def is_leftmost(self, index: int) -> bool:
        return self._markers[index].position == min(m.position for m in self._markers)

    def is_rightmost(self, index: int) -> bool:
        return self._markers[index].position == max(m.position for m in self._markers)

    def apply_drag(self, index: int, target: float) -> None:
        """Run the three drag passes for a gesture already validated by the drag resolver."""
        origin = self._markers[index].position
        swept = remove_crossed(self._markers, index, origin, target)
        # remove_crossed keeps the dragged marker, so its index shifts by the removals before it
        dragged = self._markers[index]
        new_index = next(i for i, m in enumerate(swept) if m is dragged)
        moved = relocate(swept, new_index, target)
        self._markers = dedup_overlaps(moved, self.overlap_tolerance)

    def remap(self, old: SnapIndex, new: SnapIndex) -> None:
        """Move every marker to the same boundary index in a new layout."""
        remapped: list[Marker] = []
        for marker in self._markers:
            idx = old.index_of(marker.position)
            if idx is None or idx >= len(new):
                log.warning("cannot remap marker at %s to new layout; dropping it", marker.position)
                continue
            remapped.append(marker.model_copy(update={"position": new[idx]}))
        self._markers = sort_markers(remapped)
