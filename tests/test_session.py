"""Tests for split_reviewer.session: event ordering, gestures, edits and snapshots."""
from __future__ import annotations

import pytest

from split_reviewer.errors import SessionBusyError, SessionStateError
from split_reviewer.geometry import StaticGeometry
from split_reviewer.models import Proposal, RejectReason
from split_reviewer.session import ReviewSession, SessionState

FIVE_PAGE_POSITIONS = [0.0, 10.0, 20.0, 30.0, 40.0, 50.0]


def _pages(session: ReviewSession) -> list[tuple[int, int, str]]:
    return [(s.start_page, s.end_page, s.name) for s in session.sections]


@pytest.fixture
def session(proposals: list[Proposal]) -> ReviewSession:
    s = ReviewSession(5, document_path="/docs/bundle.pdf", source_paths=["/out/a.pdf", "/out/b.pdf"])
    s.on_geometry(FIVE_PAGE_POSITIONS)
    s.on_proposals(proposals)
    return s


class TestLifecycle:
    def test_geometry_then_proposals(self) -> None:
        s = ReviewSession(5)
        assert s.state is SessionState.UNINITIALIZED
        assert s.on_geometry(FIVE_PAGE_POSITIONS)
        assert s.state is SessionState.GEOMETRY_READY
        s.on_proposals([Proposal(start_page=3, end_page=5)])
        assert s.state is SessionState.SEEDED
        assert _pages(s) == [(1, 2, "Section 1"), (3, 5, "Section 2")]

    def test_proposals_wait_for_geometry(self) -> None:
        s = ReviewSession(5)
        s.on_proposals([Proposal(start_page=3, end_page=5)])
        assert s.state is SessionState.UNINITIALIZED
        assert s.markers is None
        s.on_geometry(FIVE_PAGE_POSITIONS)
        assert s.state is SessionState.SEEDED
        assert s.markers is not None
        assert s.markers.positions() == [0, 20, 50]

    def test_partial_geometry_is_deferred(self) -> None:
        geometry = StaticGeometry(5, [0, 10, 20])
        s = ReviewSession(5)
        assert not geometry.is_ready()
        assert not s.on_geometry(geometry)
        assert s.state is SessionState.UNINITIALIZED
        assert s.snap is None
        for x in (30, 40, 50):
            geometry.attach(x)
        assert s.on_geometry(geometry)
        assert s.snap is not None and len(s.snap) == 6

    def test_geometry_page_count_mismatch(self) -> None:
        with pytest.raises(ValueError):
            ReviewSession(4).on_geometry(StaticGeometry(5, FIVE_PAGE_POSITIONS))

    def test_drag_before_seeding(self) -> None:
        s = ReviewSession(5)
        s.on_geometry(FIVE_PAGE_POSITIONS)
        with pytest.raises(SessionStateError):
            s.drag(0, 10)

    def test_relayout_remaps_markers(self, session: ReviewSession) -> None:
        before = _pages(session)
        assert session.on_geometry([0, 20, 40, 60, 80, 100])
        assert session.markers is not None
        assert session.markers.positions() == [0, 40, 100]
        assert _pages(session) == before

    def test_reseeding_replaces_markers(self, session: ReviewSession) -> None:
        session.on_proposals([Proposal(start_page=4, end_page=5, name="Payslip")])
        assert session.markers is not None
        assert session.markers.positions() == [0, 30, 50]
        assert _pages(session) == [(1, 3, "Section 1"), (4, 5, "Payslip")]


class TestGestures:
    def test_drag_recomputes_sections(self) -> None:
        s = ReviewSession(5)
        s.on_geometry(FIVE_PAGE_POSITIONS)
        s.on_proposals([Proposal(start_page=3, end_page=5)])
        outcome = s.drag(1, 38)
        assert outcome.accepted
        assert s.state is SessionState.INTERACTIVE
        assert s.active_snap_index == 4
        assert _pages(s) == [(1, 4, "Section 1"), (5, 5, "Section 2")]

    def test_rejected_drag_changes_nothing(self, session: ReviewSession) -> None:
        assert session.markers is not None
        markers_before = session.markers.snapshot()
        sections_before = list(session.sections)
        outcome = session.drag(0, 3)
        assert outcome.reason is RejectReason.END_CAP
        assert session.markers.snapshot() == markers_before
        assert session.sections == sections_before
        assert session.state is SessionState.SEEDED
        assert session.active_snap_index is None

    def test_out_of_track_changes_nothing(self, session: ReviewSession) -> None:
        assert session.markers is not None
        before = session.markers.snapshot()
        assert session.drag(1, 38, in_track=False).rejected
        assert session.markers.snapshot() == before

    def test_one_drag_at_a_time(self, session: ReviewSession) -> None:
        session.begin_drag(1)
        assert session.is_dragging
        with pytest.raises(SessionBusyError):
            session.begin_drag(0)
        with pytest.raises(SessionBusyError):
            session.on_proposals([])
        with pytest.raises(SessionBusyError):
            session.on_geometry(FIVE_PAGE_POSITIONS)
        session.end_drag(38)
        assert not session.is_dragging
        session.begin_drag(0)
        session.cancel_drag()
        assert not session.is_dragging

    def test_end_without_begin(self, session: ReviewSession) -> None:
        with pytest.raises(SessionStateError):
            session.end_drag(10)

    def test_begin_on_missing_marker(self, session: ReviewSession) -> None:
        with pytest.raises(IndexError):
            session.begin_drag(9)

    def test_names_follow_start_pages(self, session: ReviewSession) -> None:
        session.drag(1, 38)
        assert _pages(session) == [(1, 4, "Intro"), (5, 5, "Section 2")]
        session.drag(1, 21)
        assert _pages(session) == [(1, 2, "Intro"), (3, 5, "Offer-Letter")]

    def test_end_caps_survive_any_gesture(self, session: ReviewSession) -> None:
        assert session.markers is not None and session.snap is not None
        for index, x in [(0, 14), (3, 2), (1, 33), (0, 41), (2, 8), (1, 50)]:
            if index < len(session.markers):
                session.drag(index, x)
            at_start = [m for m in session.markers if m.position == session.snap.start]
            at_end = [m for m in session.markers if m.position == session.snap.end]
            assert len(at_start) == 1 and at_start[0].locked
            assert len(at_end) == 1 and at_end[0].locked
            assert session.markers.locked_count == 2
            assert session.sections[0].start_page == 1
            assert session.sections[-1].end_page == 5


class TestSectionEdits:
    def test_edit_end_moves_next_start(self, session: ReviewSession) -> None:
        assert session.edit_section(0, end_page=3)
        assert _pages(session) == [(1, 3, "Intro"), (4, 5, "Offer-Letter")]
        assert session.markers is not None
        assert session.markers.positions() == [0, 30, 50]

    def test_edit_start(self, session: ReviewSession) -> None:
        assert session.edit_section(1, start_page=2)
        assert _pages(session) == [(1, 1, "Intro"), (2, 5, "Offer-Letter")]

    def test_edit_out_of_range_ignored(self, session: ReviewSession) -> None:
        before = _pages(session)
        assert not session.edit_section(1, start_page=9)
        assert _pages(session) == before

    def test_edit_unknown_section(self, session: ReviewSession) -> None:
        with pytest.raises(IndexError):
            session.edit_section(5, start_page=2)

    def test_rename_is_inherited(self) -> None:
        s = ReviewSession(5)
        s.on_geometry(FIVE_PAGE_POSITIONS)
        s.on_proposals([Proposal(start_page=3, end_page=5)])
        s.rename_section(1, "Payslip")
        s.drag(0, 12)
        assert _pages(s) == [(1, 1, "Section 1"), (2, 2, "Section 2"), (3, 5, "Payslip")]


class TestQueries:
    def test_position_for_page(self, session: ReviewSession) -> None:
        assert session.position_for_page(3) == 20.0

    def test_cuts(self, session: ReviewSession) -> None:
        cuts = session.cuts()
        assert [(c.start_page, c.end_page, c.pdf_name, c.is_modify) for c in cuts] == [
            (1, 2, "Intro", True),
            (3, 5, "Offer-Letter", True),
        ]

    def test_snapshot_round_trip(self, session: ReviewSession) -> None:
        session.drag(1, 38)
        restored = ReviewSession.from_snapshot(session.to_snapshot())
        assert restored.state is SessionState.INTERACTIVE
        assert restored.markers == session.markers
        assert restored.sections == session.sections
        assert restored.snap == session.snap
        assert restored.active_snap_index == 4
        assert restored.source_paths == ["/out/a.pdf", "/out/b.pdf"]
        assert restored.drag(1, 21).accepted


class TestUserNames:
    @pytest.fixture
    def renamed(self) -> ReviewSession:
        s = ReviewSession(5)
        s.on_geometry(FIVE_PAGE_POSITIONS)
        s.on_proposals([Proposal(start_page=3, end_page=5, name="bgv_doc_payslip_3-5")])
        return s

    @pytest.mark.parametrize("name", ["Offer Letter", "Section 7", "2024 payslip 3-5"])
    def test_rename_kept_verbatim_after_drag(self, renamed: ReviewSession, name: str) -> None:
        renamed.rename_section(1, name)
        assert renamed.drag(0, 12).accepted
        assert renamed.sections[-1].name == name
        assert renamed.sections[-1].user_named

    def test_rename_survives_snapshot(self, renamed: ReviewSession) -> None:
        renamed.rename_section(1, "Offer Letter")
        restored = ReviewSession.from_snapshot(renamed.to_snapshot())
        restored.drag(0, 12)
        assert _pages(restored)[-1] == (3, 5, "Offer Letter")

    def test_blank_rename_falls_back(self, renamed: ReviewSession) -> None:
        renamed.rename_section(1, "  ")
        renamed.drag(0, 12)
        assert renamed.sections[-1].name == "payslip"
        assert not renamed.sections[-1].user_named

    def test_derived_names_are_not_user_named(self, renamed: ReviewSession) -> None:
        assert [s.user_named for s in renamed.sections] == [False, False]


class TestInconsistentState:
    def test_seeded_snapshot_without_layout(self) -> None:
        snapshot = ReviewSession(5).to_snapshot().model_copy(update={"state": "seeded"})
        s = ReviewSession.from_snapshot(snapshot)
        with pytest.raises(SessionStateError):
            s.begin_drag(0)
        with pytest.raises(SessionStateError):
            s.edit_section(0, start_page=2)
        assert not s.is_dragging
