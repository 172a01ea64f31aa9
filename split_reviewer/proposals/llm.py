"""
LLM proposal source: show an LLM the opening text of every page and ask where
the logical documents inside the PDF begin. Uses OpenRouter through the OpenAI SDK.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any

import fitz  # PyMuPDF
from openai import OpenAI

from split_reviewer.config import load_env
from split_reviewer.errors import ProposalSourceError
from split_reviewer.models import OutputFile, ProposalResponse

log = logging.getLogger(__name__)

OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"
DEFAULT_LLM_MODEL = "openai/gpt-4o-mini"

# Characters of text shown per page; enough for a letterhead or form title
PAGE_EXCERPT_CHARS = 400

SPLIT_SYSTEM = (
    "You split scanned document bundles into their individual documents. "
    "Given the opening text of each page, answer with a JSON array only: "
    '[{"start_page": int, "end_page": int, "name": "short_document_type"}, ...] '
    "covering every page exactly once, in page order."
)


def page_excerpts(pdf_path: Path, max_chars: int = PAGE_EXCERPT_CHARS) -> list[str]:
    excerpts: list[str] = []
    with fitz.open(str(pdf_path)) as doc:
        for page in doc:
            text = " ".join(page.get_text("text").split())
            excerpts.append(text[:max_chars])
    return excerpts


def parse_split_response(response: str | None, page_count: int) -> list[OutputFile]:
    """Extract [{start_page, end_page, name}] from an LLM reply; drops entries outside 1..page_count."""
    if not response or not response.strip():
        return []
    text = response.strip()
    if "```" in text:
        start = text.find("[")
        end = text.rfind("]") + 1
        if start >= 0 and end > start:
            text = text[start:end]
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        log.warning("LLM split response not valid JSON: %s", e)
        return []
    if not isinstance(data, list):
        return []
    files: list[OutputFile] = []
    for item in data:
        if not isinstance(item, dict):
            continue
        try:
            start_page = int(item.get("start_page"))
            end_page = int(item.get("end_page", start_page))
        except (TypeError, ValueError):
            continue
        if not 1 <= start_page <= page_count:
            continue
        end_page = max(start_page, min(end_page, page_count))
        name = item.get("name") if isinstance(item.get("name"), str) else None
        files.append(
            OutputFile(
                start_page=start_page,
                end_page=end_page,
                is_multipage=end_page > start_page,
                name=(name or "").strip() or None,
            )
        )
    return files


class LLMProposalSource:
    """Proposal source that asks an LLM (OpenRouter) to find document boundaries."""

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        base_url: str | None = None,
    ):
        load_env()
        self._api_key = api_key or os.environ.get("OPENROUTER_API_KEY", "")
        self._base_url = base_url or OPENROUTER_BASE_URL
        self._model = os.environ.get("OPENROUTER_MODEL") or model or DEFAULT_LLM_MODEL
        self._client: Any = None

    def _get_client(self) -> OpenAI:
        if self._client is None:
            if not self._api_key:
                raise ProposalSourceError(
                    "OpenRouter API key not set. Set OPENROUTER_API_KEY or pass api_key=..."
                )
            self._client = OpenAI(base_url=self._base_url, api_key=self._api_key)
        return self._client

    def fetch(self, pdf_path: Path) -> ProposalResponse:
        excerpts = page_excerpts(Path(pdf_path))
        prompt = "\n".join(f"Page {i + 1}: {text or '(no text)'}" for i, text in enumerate(excerpts))
        client = self._get_client()
        try:
            resp = client.chat.completions.create(
                model=self._model,
                messages=[
                    {"role": "system", "content": SPLIT_SYSTEM},
                    {"role": "user", "content": prompt},
                ],
                max_tokens=max(512, len(excerpts) * 40),
                temperature=0.0,
            )
        except Exception as e:
            log.warning("LLM split request failed: %s", e)
            raise ProposalSourceError(f"LLM proposal request failed: {e}") from e
        choice = resp.choices[0] if resp.choices else None
        content = choice.message.content if choice and choice.message else None
        files = parse_split_response(content, len(excerpts))
        if not files:
            raise ProposalSourceError("LLM returned no usable sections")
        log.info("LLM proposed %d sections for %s", len(files), Path(pdf_path).name)
        return ProposalResponse(output_files=files)

    @property
    def name(self) -> str:
        return "llm"
