"""
Public API: open a review session for a PDF and commit it from code.

    from split_reviewer import open_review, commit_review
    session = open_review("bundle.pdf", proposals_file="proposals.json")
    session.drag(1, 412.0)
    commit_review(session)
"""

from pathlib import Path
from typing import Any, Sequence

from split_reviewer.commit import CommitClient, build_commit_request
from split_reviewer.config import load_config
from split_reviewer.geometry import get_geometry
from split_reviewer.models import Proposal
from split_reviewer.naming import proposals_from_response
from split_reviewer.proposals import get_source
from split_reviewer.session import ReviewSession


def open_review(
    pdf_path: str | Path,
    *,
    proposals: Sequence[Proposal] | None = None,
    proposals_file: str | Path | None = None,
    source: str | None = None,
    geometry: str = "pymupdf",
    config: dict[str, Any] | None = None,
) -> ReviewSession:
    """
    Lay the PDF out as a strip, obtain proposals and return a seeded session.

    Args:
        pdf_path: Path to the PDF under review.
        proposals: Proposals to seed with directly (skips any source).
        proposals_file: Saved analysis-service response to read proposals from.
        source: Proposal source name ('service', 'llm'); default from config.
        geometry: Geometry provider name ('pymupdf' default).
        config: Settings; default load_config().

    Returns:
        ReviewSession in the SEEDED state.

    Raises:
        DocumentError if the PDF cannot be opened.
        ProposalSourceError if proposals cannot be obtained.
    """
    cfg = config if config is not None else load_config()
    pdf_path = Path(pdf_path)
    layout = get_geometry(geometry)(
        pdf_path,
        thumbnail_height=float(cfg["thumbnail_height"]),
        page_gap=float(cfg["page_gap"]),
    )

    source_paths: list[str] = []
    if proposals is None:
        if proposals_file is not None:
            src = get_source("file", path=proposals_file)
        else:
            name = source or cfg["proposal_source"]
            if name == "llm":
                src = get_source("llm", model=cfg["llm_model"])
            else:
                src = get_source(name, base_url=cfg["service_url"], timeout=float(cfg["request_timeout"]))
        response = src.fetch(pdf_path)
        source_paths = [f.path for f in response.output_files if f.path]
        proposals = proposals_from_response(response, cfg["boilerplate_tokens"])

    session = ReviewSession(
        layout.page_count,
        overlap_tolerance=float(cfg["overlap_tolerance"]),
        document_path=str(pdf_path.resolve()),
        source_paths=source_paths,
    )
    session.on_proposals(proposals)
    session.on_geometry(layout)
    return session


def commit_review(
    session: ReviewSession,
    *,
    client: CommitClient | None = None,
    config: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Send the session's sections to the cut service; returns the service's JSON reply."""
    cfg = config if config is not None else load_config()
    request = build_commit_request(session)
    client = client or CommitClient(cfg["service_url"], timeout=float(cfg["request_timeout"]))
    return client.commit(request)
