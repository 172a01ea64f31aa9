"""Commit collaborator: send the final sections to the cut service."""

import logging
from typing import Any, Sequence

import requests

from split_reviewer.errors import CommitError
from split_reviewer.models import CommitRequest, FinalPath
from split_reviewer.session import ReviewSession

log = logging.getLogger(__name__)

DEFAULT_SERVICE_URL = "http://localhost:5000"
CUT_ENDPOINT = "/cut_pdf"


def build_commit_request(
    session: ReviewSession,
    original_file_path: str | None = None,
    old_file_paths: Sequence[str] | None = None,
) -> CommitRequest:
    """One final_paths entry for the session's document, one cut per section."""
    path = original_file_path or session.document_path
    if not path:
        raise CommitError("No original file path for the commit request")
    if not session.sections:
        raise CommitError("Session has no sections to commit")
    old = list(old_file_paths) if old_file_paths is not None else list(session.source_paths)
    return CommitRequest(
        final_paths=[FinalPath(original_file_path=str(path), cuts=session.cuts(), old_file_paths=old)]
    )


class CommitClient:
    """POSTs a CommitRequest to <service_url>/cut_pdf."""

    def __init__(self, base_url: str | None = None, timeout: float = 60.0):
        self.base_url = (base_url or DEFAULT_SERVICE_URL).rstrip("/")
        self.timeout = timeout

    def commit(self, request: CommitRequest) -> dict[str, Any]:
        url = self.base_url + CUT_ENDPOINT
        n_cuts = sum(len(fp.cuts) for fp in request.final_paths)
        log.info("committing %d cuts to %s", n_cuts, url)
        try:
            resp = requests.post(url, json=request.model_dump(), timeout=self.timeout)
            resp.raise_for_status()
            body = resp.json() if resp.content else {}
        except (requests.RequestException, ValueError) as e:
            log.warning("commit failed: %s", e)
            raise CommitError(f"Cut service at {url} failed: {e}") from e
        return body if isinstance(body, dict) else {"result": body}
