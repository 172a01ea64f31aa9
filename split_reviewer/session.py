"""
Review session: the state machine a host view drives.

    UNINITIALIZED --geometry ready--> GEOMETRY_READY --proposals--> SEEDED --first drop--> INTERACTIVE

Proposals may arrive before the geometry; they are held until the snap index can be
built. All mutation happens synchronously in the handler of one event, and only one
drag may be in flight at a time.
"""

import logging
from enum import Enum
from typing import Iterable, Sequence

from split_reviewer.drag import resolve_drag
from split_reviewer.errors import GeometryNotReadyError, SessionBusyError, SessionStateError
from split_reviewer.geometry.base import GeometryProvider
from split_reviewer.markers import DEFAULT_OVERLAP_TOLERANCE, MarkerSet
from split_reviewer.models import (
    Cut,
    DragOutcome,
    Proposal,
    Section,
    SessionSnapshot,
)
from split_reviewer.sections import derive_sections
from split_reviewer.snap import SnapIndex

log = logging.getLogger(__name__)


class SessionState(str, Enum):
    UNINITIALIZED = "uninitialized"
    GEOMETRY_READY = "geometry_ready"
    SEEDED = "seeded"
    INTERACTIVE = "interactive"


class ReviewSession:
    """Marker set, snap index and derived sections for one document."""

    def __init__(
        self,
        page_count: int,
        *,
        overlap_tolerance: float = DEFAULT_OVERLAP_TOLERANCE,
        document_path: str | None = None,
        source_paths: Sequence[str] = (),
    ):
        if page_count < 1:
            raise ValueError(f"page_count must be >= 1, got {page_count}")
        self.page_count = page_count
        self.overlap_tolerance = overlap_tolerance
        self.document_path = document_path
        self.source_paths: list[str] = list(source_paths)
        self.state = SessionState.UNINITIALIZED
        self.snap: SnapIndex | None = None
        self.markers: MarkerSet | None = None
        self.proposals: list[Proposal] = []
        self.sections: list[Section] = []
        self.active_snap_index: int | None = None
        self._pending_proposals: list[Proposal] | None = None
        self._dragging: int | None = None

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    def on_geometry(self, geometry: GeometryProvider | Sequence[float]) -> bool:
        """
        Geometry notification. Builds (or rebuilds, on relayout) the snap index.
        Returns False and changes nothing while the layout is not fully attached.
        """
        self._ensure_idle()
        if isinstance(geometry, GeometryProvider):
            if geometry.page_count != self.page_count:
                raise ValueError(
                    f"Geometry reports {geometry.page_count} pages, session has {self.page_count}"
                )
            positions = geometry.boundary_positions()
        else:
            positions = list(geometry)
        try:
            snap = SnapIndex.build(self.page_count, positions)
        except GeometryNotReadyError as e:
            log.debug("deferring snap index: %s", e)
            return False

        old, self.snap = self.snap, snap
        if self.markers is not None and old is not None and old != snap:
            log.info("layout changed; remapping %d markers", len(self.markers))
            self.markers.remap(old, snap)
            self._recompute()
        if self.state is SessionState.UNINITIALIZED:
            self.state = SessionState.GEOMETRY_READY
        if self._pending_proposals is not None:
            pending, self._pending_proposals = self._pending_proposals, None
            self._seed(pending)
        return True

    def on_proposals(self, proposals: Iterable[Proposal]) -> None:
        """Proposal arrival. Seeds the marker set now, or once geometry is ready."""
        self._ensure_idle()
        proposals = list(proposals)
        if self.snap is None:
            log.debug("holding %d proposals until geometry is ready", len(proposals))
            self._pending_proposals = proposals
            return
        self._seed(proposals)

    def _seed(self, proposals: list[Proposal]) -> None:
        if self.snap is None:
            raise SessionStateError("Cannot seed markers before the geometry is ready")
        self.proposals = proposals
        self.markers = MarkerSet.seed(self.snap, proposals, overlap_tolerance=self.overlap_tolerance)
        self.sections = []
        self.active_snap_index = None
        self.state = SessionState.SEEDED
        self._recompute()
        log.info("seeded %d markers from %d proposals", len(self.markers), len(proposals))

    # ------------------------------------------------------------------
    # Gestures
    # ------------------------------------------------------------------

    @property
    def is_dragging(self) -> bool:
        return self._dragging is not None

    def begin_drag(self, index: int) -> None:
        self._ensure_ready()
        self._ensure_idle()
        markers, _ = self._layout()
        if not 0 <= index < len(markers):
            raise IndexError(f"No marker at index {index} (have {len(markers)})")
        self._dragging = index

    def cancel_drag(self) -> None:
        self._dragging = None

    def end_drag(self, observed_x: float, *, in_track: bool = True) -> DragOutcome:
        """Drop the marker picked up by begin_drag at strip offset observed_x."""
        if self._dragging is None:
            raise SessionStateError("end_drag called without begin_drag")
        markers, snap = self._layout()
        index, self._dragging = self._dragging, None
        outcome = resolve_drag(markers, snap, index, observed_x, in_track=in_track)
        if outcome.accepted:
            self.active_snap_index = outcome.target_index
            self.state = SessionState.INTERACTIVE
            self._recompute()
        return outcome

    def drag(self, index: int, observed_x: float, *, in_track: bool = True) -> DragOutcome:
        """begin_drag + end_drag in one call."""
        self.begin_drag(index)
        return self.end_drag(observed_x, in_track=in_track)

    # ------------------------------------------------------------------
    # Section list edits
    # ------------------------------------------------------------------

    def edit_section(
        self,
        index: int,
        *,
        start_page: int | None = None,
        end_page: int | None = None,
    ) -> bool:
        """
        Move a section's start page and/or end page. The end page is moved by moving
        the next section's start. Out-of-range pages are ignored (returns False).
        """
        self._ensure_ready()
        self._ensure_idle()
        _, snap = self._layout()
        if not 0 <= index < len(self.sections):
            raise IndexError(f"No section at index {index}")
        for value in (start_page, end_page):
            if value is not None and not 1 <= value <= self.page_count:
                log.info("ignoring section edit: page %d out of range", value)
                return False

        edited = [s.model_copy() for s in self.sections]
        if start_page is not None:
            edited[index] = edited[index].model_copy(update={"start_page": start_page})
        if end_page is not None and index + 1 < len(edited):
            edited[index + 1] = edited[index + 1].model_copy(update={"start_page": end_page + 1})

        self.markers = MarkerSet.from_start_pages(
            snap,
            (s.start_page for s in edited),
            overlap_tolerance=self.overlap_tolerance,
        )
        self.sections = edited
        self.state = SessionState.INTERACTIVE
        self._recompute()
        return True

    def rename_section(self, index: int, name: str) -> None:
        """Give a section a user-chosen name; later derivations keep it while the start page is unchanged."""
        self._ensure_idle()
        if not 0 <= index < len(self.sections):
            raise IndexError(f"No section at index {index}")
        self.sections[index] = self.sections[index].model_copy(update={"name": name, "user_named": True})

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def position_for_page(self, page: int) -> float:
        """Strip offset to scroll to when jumping to a page."""
        if self.snap is None:
            raise SessionStateError("Geometry not ready")
        return self.snap.position_for_page(page)

    def cuts(self) -> list[Cut]:
        return [
            Cut(start_page=s.start_page, end_page=s.end_page, pdf_name=s.name)
            for s in self.sections
        ]

    def to_snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            page_count=self.page_count,
            state=self.state.value,
            document_path=self.document_path,
            source_paths=list(self.source_paths),
            overlap_tolerance=self.overlap_tolerance,
            snap_positions=list(self.snap.positions) if self.snap else [],
            markers=self.markers.snapshot() if self.markers else [],
            proposals=list(self.proposals),
            sections=list(self.sections),
            active_snap_index=self.active_snap_index,
        )

    @classmethod
    def from_snapshot(cls, snapshot: SessionSnapshot) -> "ReviewSession":
        session = cls(
            snapshot.page_count,
            overlap_tolerance=snapshot.overlap_tolerance,
            document_path=snapshot.document_path,
            source_paths=snapshot.source_paths,
        )
        session.state = SessionState(snapshot.state)
        if snapshot.snap_positions:
            session.snap = SnapIndex.build(snapshot.page_count, snapshot.snap_positions)
        if session.state in (SessionState.SEEDED, SessionState.INTERACTIVE):
            session.markers = MarkerSet(
                [m.model_copy() for m in snapshot.markers],
                overlap_tolerance=snapshot.overlap_tolerance,
            )
        session.proposals = list(snapshot.proposals)
        session.sections = list(snapshot.sections)
        session.active_snap_index = snapshot.active_snap_index
        return session

    # ------------------------------------------------------------------

    def _recompute(self) -> None:
        markers, snap = self._layout()
        named: list[Proposal | Section] = [*self.sections, *self.proposals]
        self.sections = derive_sections(markers, snap, named)

    def _ensure_idle(self) -> None:
        if self._dragging is not None:
            raise SessionBusyError(f"Drag of marker {self._dragging} is in progress")

    def _ensure_ready(self) -> None:
        if self.state not in (SessionState.SEEDED, SessionState.INTERACTIVE):
            raise SessionStateError(f"Session is {self.state.value}; proposals and geometry are required")

    def _layout(self) -> tuple[MarkerSet, SnapIndex]:
        if self.markers is None or self.snap is None:
            raise SessionStateError(f"Session is {self.state.value}; no markers on a laid-out strip yet")
        return self.markers, self.snap
