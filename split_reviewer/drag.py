"""
Drag resolver: turn a drop coordinate into a marker-set mutation, or reject it.

A rejected gesture is not an error: the marker set is left untouched and the caller
gets a DragOutcome with the reason so the view can snap the marker back.
"""

import logging

from split_reviewer.errors import (
    BoundaryViolationError,
    InvalidTargetSnapError,
    UnresolvableMarkerPositionError,
)
from split_reviewer.markers import MarkerSet
from split_reviewer.models import DragOutcome, RejectReason
from split_reviewer.snap import SnapIndex

log = logging.getLogger(__name__)


def strip_offset(client_x: float, container_left: float, scroll_left: float = 0.0) -> float:
    """Convert a viewport x coordinate to an offset within the scrollable strip content."""
    return client_x - container_left + scroll_left


def check_end_caps(markers: MarkerSet, index: int, current_index: int, target_index: int) -> None:
    """
    The leftmost marker may only move right and the rightmost only left.
    Raises BoundaryViolationError otherwise.
    """
    if markers.is_leftmost(index) and target_index <= current_index:
        raise BoundaryViolationError(
            f"leftmost marker cannot move from snap {current_index} to {target_index}"
        )
    if markers.is_rightmost(index) and target_index >= current_index:
        raise BoundaryViolationError(
            f"rightmost marker cannot move from snap {current_index} to {target_index}"
        )


def resolve_drag(
    markers: MarkerSet,
    snap: SnapIndex,
    index: int,
    observed_x: float,
    *,
    in_track: bool = True,
) -> DragOutcome:
    """
    Resolve a drop of marker `index` at strip offset `observed_x`.

    On acceptance the marker set is mutated (sweep, relocate, dedup); on rejection
    it is not touched at all.
    """
    if not 0 <= index < len(markers):
        log.info("drag rejected: no marker at index %d", index)
        return DragOutcome(accepted=False, reason=RejectReason.UNKNOWN_MARKER)

    try:
        target_index = snap.nearest(observed_x)
    except InvalidTargetSnapError as e:
        log.info("drag rejected: %s", e)
        return DragOutcome(accepted=False, reason=RejectReason.INVALID_TARGET_SNAP)
    target = snap[target_index]

    try:
        current_index = snap.require_index(markers[index].position)
    except UnresolvableMarkerPositionError as e:
        log.warning("drag rejected: %s", e)
        return DragOutcome(
            accepted=False,
            reason=RejectReason.UNRESOLVED_MARKER,
            target_index=target_index,
            target_position=target,
        )

    try:
        check_end_caps(markers, index, current_index, target_index)
    except BoundaryViolationError as e:
        log.info("drag rejected: %s", e)
        return DragOutcome(
            accepted=False,
            reason=RejectReason.END_CAP,
            target_index=target_index,
            target_position=target,
        )

    if not in_track:
        log.info("drag rejected: marker %d dropped outside the track", index)
        return DragOutcome(
            accepted=False,
            reason=RejectReason.OUT_OF_TRACK,
            target_index=target_index,
            target_position=target,
        )

    markers.apply_drag(index, target)
    log.debug("marker %d dropped on snap %d (%s)", index, target_index, target)
    return DragOutcome(accepted=True, target_index=target_index, target_position=target)
