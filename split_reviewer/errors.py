"""Exceptions raised by the split reviewer.

The first group is recovered inside the core (deferral, rejected gesture, skipped
marker). The second group signals a host that broke the session contract. The last
group wraps failures of the external collaborators.
"""


class SplitReviewError(Exception):
    """Base class for all split reviewer errors."""


class GeometryNotReadyError(SplitReviewError):
    """Fewer boundary positions than pages + 1 are available yet."""

    def __init__(self, page_count: int, available: int):
        super().__init__(
            f"Geometry not ready: need {page_count + 1} boundary positions, have {available}"
        )
        self.page_count = page_count
        self.available = available


class InvalidTargetSnapError(SplitReviewError):
    """No snap position can be chosen for a gesture (empty snap index)."""


class BoundaryViolationError(SplitReviewError):
    """A drag would move an end marker outward or onto itself."""


class UnresolvableMarkerPositionError(SplitReviewError):
    """A marker rests on a position that is not a snap position."""

    def __init__(self, position: float):
        super().__init__(f"Marker position {position} is not a snap position")
        self.position = position


class SessionBusyError(SplitReviewError):
    """A drag is already in progress."""


class SessionStateError(SplitReviewError):
    """Operation is not allowed in the session's current state."""


class ProposalSourceError(SplitReviewError):
    """Proposals could not be obtained from the configured source."""


class CommitError(SplitReviewError):
    """The commit request failed."""


class DocumentError(SplitReviewError):
    """The PDF could not be opened or has no pages."""
