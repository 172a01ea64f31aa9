"""Proposals read from a saved analysis-service response (JSON file)."""

import json
from pathlib import Path

from pydantic import ValidationError

from split_reviewer.errors import ProposalSourceError
from split_reviewer.models import ProposalResponse


class JsonFileSource:
    """Reads {"output_files": [...]} from a file; the PDF path is ignored."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def fetch(self, pdf_path: Path) -> ProposalResponse:
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
            return ProposalResponse.model_validate(data)
        except (OSError, json.JSONDecodeError, ValidationError) as e:
            raise ProposalSourceError(f"Cannot read proposals from {self.path}: {e}") from e

    @property
    def name(self) -> str:
        return "file"
