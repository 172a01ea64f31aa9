"""Section deriver: marker positions → contiguous, named page ranges."""

import logging
import re
from typing import Iterable, Sequence

from split_reviewer.errors import UnresolvableMarkerPositionError
from split_reviewer.models import Marker, Proposal, Section
from split_reviewer.snap import SnapIndex

log = logging.getLogger(__name__)

FALLBACK_NAME = "Section {ordinal}"

# Page numbers and page ranges ("12", "3-7") carry no name information
_NUMERIC_TOKEN = re.compile(r"^\d+(-\d+)*$")
_FALLBACK_LABEL = re.compile(r"^Section \d+$")
_SEPARATORS = re.compile(r"[_\\/]")


def display_name(raw: str | None) -> str:
    """Last non-numeric token of raw after turning separators into spaces; "" if none."""
    if not raw:
        return ""
    tokens = [t for t in _SEPARATORS.sub(" ", raw).split() if not _NUMERIC_TOKEN.match(t)]
    return tokens[-1] if tokens else ""


def is_fallback_name(name: str) -> bool:
    """True for the positional "Section N" labels, which are never carried to another section."""
    return bool(_FALLBACK_LABEL.match(name))


def _name_for(start_page: int, named: Sequence[Proposal | Section]) -> tuple[str, bool]:
    """(name, user_named) of the first usable candidate starting at start_page; ("", False) if none."""
    for candidate in named:
        if candidate.start_page != start_page:
            continue
        if isinstance(candidate, Section) and candidate.user_named and candidate.name.strip():
            return candidate.name, True
        if is_fallback_name(candidate.name):
            continue
        name = display_name(candidate.name)
        if name:
            return name, False
    return "", False


def resolved_indices(markers: Iterable[Marker], snap: SnapIndex) -> list[int]:
    """Sorted snap indices of the markers; markers off the snap grid are skipped with a warning."""
    indices: list[int] = []
    for marker in sorted(markers, key=lambda m: m.position):
        try:
            indices.append(snap.require_index(marker.position))
        except UnresolvableMarkerPositionError as e:
            log.warning("excluding marker from sections: %s", e)
    return sorted(indices)


def derive_sections(
    markers: Iterable[Marker],
    snap: SnapIndex,
    named: Sequence[Proposal | Section] = (),
) -> list[Section]:
    """
    One section per pair of neighbouring markers.

    Names come from the first entry of `named` with the same start page; sections
    without one are labelled "Section N" (N = 1-based position in the result).
    Reviewer-given names (Section.user_named) are carried over verbatim.
    """
    indices = resolved_indices(markers, snap)
    sections: list[Section] = []
    for a, b in zip(indices, indices[1:]):
        if b <= a:
            continue
        start_page, end_page = a + 1, b
        name, user_named = _name_for(start_page, named)
        if not name:
            name = FALLBACK_NAME.format(ordinal=len(sections) + 1)
        sections.append(
            Section(start_page=start_page, end_page=end_page, name=name, user_named=user_named)
        )
    return sections
