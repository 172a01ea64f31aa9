"""Turn an analysis-service response into proposals with readable names."""

import logging
import re
from typing import Iterable

from pydantic import ValidationError

from split_reviewer.models import OutputFile, Proposal, ProposalResponse

log = logging.getLogger(__name__)

DEFAULT_SECTION_NAME = "Section"

# "offer_letter_3", "payslip 4-6", "form_2_3" → trailing page numbers
_PAGE_SUFFIX = re.compile(r"(_|\s)\d+([-_\d]*)$")
_WORD_SPLIT = re.compile(r"[_\s]+")


def name_from_path(path: str, boilerplate_tokens: Iterable[str] = ()) -> str:
    """
    File stem of path with trailing page numbers and boilerplate words removed,
    joined with "-". Falls back to "Section".
    """
    stem = re.split(r"[\\/]", path)[-1]
    stem = re.sub(r"\.pdf$", "", stem, flags=re.IGNORECASE)
    stem = _PAGE_SUFFIX.sub("", stem)
    drop = {t.lower() for t in boilerplate_tokens}
    words = [w for w in _WORD_SPLIT.split(stem) if w and w.lower() not in drop]
    return "-".join(words) or DEFAULT_SECTION_NAME


def proposal_from_output_file(item: OutputFile, boilerplate_tokens: Iterable[str] = ()) -> Proposal:
    end = item.end_page if item.is_multipage and item.end_page is not None else item.start_page
    name = item.name or name_from_path(item.path, boilerplate_tokens)
    return Proposal(start_page=item.start_page, end_page=end, name=name)


def proposals_from_response(
    response: ProposalResponse,
    boilerplate_tokens: Iterable[str] = (),
) -> list[Proposal]:
    """Convert every output file to a Proposal; malformed entries are logged and skipped."""
    tokens = list(boilerplate_tokens)
    proposals: list[Proposal] = []
    for item in response.output_files:
        try:
            proposals.append(proposal_from_output_file(item, tokens))
        except ValidationError as e:
            log.warning("skipping malformed proposal %s: %s", item.path or item.start_page, e)
    return proposals
