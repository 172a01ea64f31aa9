"""Shared fixtures: a 5-page strip with boundaries every 10px, and PDF factories."""
from __future__ import annotations

from pathlib import Path

import fitz
import pytest

from split_reviewer.models import Proposal
from split_reviewer.snap import SnapIndex

FIVE_PAGE_POSITIONS = [0.0, 10.0, 20.0, 30.0, 40.0, 50.0]


@pytest.fixture
def snap() -> SnapIndex:
    return SnapIndex.build(5, FIVE_PAGE_POSITIONS)


@pytest.fixture
def proposals() -> list[Proposal]:
    return [
        Proposal(start_page=1, end_page=2, name="Intro"),
        Proposal(start_page=3, end_page=5, name="Offer-Letter"),
    ]


@pytest.fixture(autouse=True)
def _isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Never read a developer's .split_reviewer.json or service env during tests."""
    monkeypatch.setenv("SPLIT_REVIEWER_CONFIG", str(tmp_path / "config" / ".split_reviewer.json"))
    monkeypatch.delenv("SPLIT_REVIEWER_SERVICE_URL", raising=False)


@pytest.fixture
def make_pdf(tmp_path: Path):
    """Factory: write a PDF whose pages have the given (width, height) sizes."""

    def _make(sizes: list[tuple[float, float]], name: str = "bundle.pdf") -> Path:
        path = tmp_path / name
        doc = fitz.open()
        for width, height in sizes:
            page = doc.new_page(width=width, height=height)
            page.insert_text((10, 20), f"Page {page.number + 1}")
        doc.save(str(path))
        doc.close()
        return path

    return _make
