"""Analysis service backend: POST the document folder to /process, get proposed output files back."""

import logging
from pathlib import Path

import requests
from pydantic import ValidationError

from split_reviewer.errors import ProposalSourceError
from split_reviewer.models import ProposalResponse

log = logging.getLogger(__name__)

DEFAULT_SERVICE_URL = "http://localhost:5000"
PROCESS_ENDPOINT = "/process"


class AnalysisServiceSource:
    """Proposal source backed by the document analysis HTTP service."""

    def __init__(self, base_url: str | None = None, timeout: float = 60.0):
        self.base_url = (base_url or DEFAULT_SERVICE_URL).rstrip("/")
        self.timeout = timeout

    def fetch(self, pdf_path: Path) -> ProposalResponse:
        url = self.base_url + PROCESS_ENDPOINT
        payload = {"folder_path": str(Path(pdf_path).parent)}
        log.info("requesting proposals from %s", url)
        try:
            resp = requests.post(url, json=payload, timeout=self.timeout)
            resp.raise_for_status()
            return ProposalResponse.model_validate(resp.json())
        except (requests.RequestException, ValueError, ValidationError) as e:
            log.warning("proposal request failed: %s", e)
            raise ProposalSourceError(f"Analysis service at {url} failed: {e}") from e

    @property
    def name(self) -> str:
        return "service"
