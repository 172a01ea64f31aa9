"""
Split Reviewer: adjust proposed page splits of a PDF bundle by dragging markers on a page strip.

Use as a library:

    from split_reviewer import ReviewSession, Proposal
    session = ReviewSession(page_count=5)
    session.on_geometry([0, 10, 20, 30, 40, 50])
    session.on_proposals([Proposal(start_page=3, end_page=5)])
    session.drag(1, 38.0)
    session.sections   # [Section(1-4), Section(5-5)]

Or run the CLI:

    split-reviewer open bundle.pdf
"""

from split_reviewer.api import commit_review, open_review
from split_reviewer.models import DragOutcome, Marker, Proposal, RejectReason, Section
from split_reviewer.session import ReviewSession, SessionState

__all__ = [
    "open_review",
    "commit_review",
    "ReviewSession",
    "SessionState",
    "Marker",
    "Proposal",
    "Section",
    "DragOutcome",
    "RejectReason",
]
