"""Tests for split_reviewer.commit and commit_review."""
from __future__ import annotations

import json
from typing import Any

import pytest
import requests

from split_reviewer import commit as commit_module
from split_reviewer.api import commit_review
from split_reviewer.commit import CommitClient, build_commit_request
from split_reviewer.errors import CommitError
from split_reviewer.models import Proposal
from split_reviewer.session import ReviewSession

FIVE_PAGE_POSITIONS = [0.0, 10.0, 20.0, 30.0, 40.0, 50.0]


class _FakeResponse:
    def __init__(self, payload: Any, status: int = 200):
        self._payload = payload
        self.status_code = status
        self.content = json.dumps(payload).encode() if payload is not None else b""

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self) -> Any:
        return self._payload


@pytest.fixture
def session(proposals: list[Proposal]) -> ReviewSession:
    s = ReviewSession(5, document_path="/docs/bundle.pdf", source_paths=["/out/Intro_1-2.pdf"])
    s.on_geometry(FIVE_PAGE_POSITIONS)
    s.on_proposals(proposals)
    return s


class TestBuildCommitRequest:
    def test_payload_shape(self, session: ReviewSession) -> None:
        session.drag(1, 31)
        payload = build_commit_request(session).model_dump()
        assert payload == {
            "final_paths": [
                {
                    "original_file_path": "/docs/bundle.pdf",
                    "cuts": [
                        {"start_page": 1, "end_page": 3, "pdf_name": "Intro", "is_modify": True},
                        {"start_page": 4, "end_page": 5, "pdf_name": "Section 2", "is_modify": True},
                    ],
                    "old_file_paths": ["/out/Intro_1-2.pdf"],
                }
            ]
        }

    def test_overrides(self, session: ReviewSession) -> None:
        request = build_commit_request(session, original_file_path="/other.pdf", old_file_paths=[])
        assert request.final_paths[0].original_file_path == "/other.pdf"
        assert request.final_paths[0].old_file_paths == []

    def test_needs_document_path(self, proposals: list[Proposal]) -> None:
        s = ReviewSession(5)
        s.on_geometry(FIVE_PAGE_POSITIONS)
        s.on_proposals(proposals)
        with pytest.raises(CommitError):
            build_commit_request(s)

    def test_needs_sections(self) -> None:
        with pytest.raises(CommitError):
            build_commit_request(ReviewSession(5, document_path="/docs/bundle.pdf"))


class TestCommitClient:
    def test_posts_to_cut_endpoint(self, monkeypatch: pytest.MonkeyPatch, session: ReviewSession) -> None:
        calls: list[tuple[str, Any]] = []

        def fake_post(url: str, json: Any = None, timeout: float = 0) -> _FakeResponse:
            calls.append((url, json))
            return _FakeResponse({"status": "ok"})

        monkeypatch.setattr(commit_module.requests, "post", fake_post)
        result = CommitClient("http://svc:5000").commit(build_commit_request(session))
        assert result == {"status": "ok"}
        [(url, body)] = calls
        assert url == "http://svc:5000/cut_pdf"
        assert [c["pdf_name"] for c in body["final_paths"][0]["cuts"]] == ["Intro", "Offer-Letter"]

    def test_empty_reply(self, monkeypatch: pytest.MonkeyPatch, session: ReviewSession) -> None:
        monkeypatch.setattr(commit_module.requests, "post", lambda *a, **k: _FakeResponse(None))
        assert CommitClient().commit(build_commit_request(session)) == {}

    def test_failure_is_commit_error(self, monkeypatch: pytest.MonkeyPatch, session: ReviewSession) -> None:
        monkeypatch.setattr(commit_module.requests, "post", lambda *a, **k: _FakeResponse({}, status=502))
        with pytest.raises(CommitError):
            CommitClient().commit(build_commit_request(session))

    def test_commit_review_uses_config(self, monkeypatch: pytest.MonkeyPatch, session: ReviewSession) -> None:
        urls: list[str] = []

        def fake_post(url: str, **kwargs: Any) -> _FakeResponse:
            urls.append(url)
            return _FakeResponse(["done"])

        monkeypatch.setattr(commit_module.requests, "post", fake_post)
        config = {"service_url": "http://cut:9000/", "request_timeout": 5}
        assert commit_review(session, config=config) == {"result": ["done"]}
        assert urls == ["http://cut:9000/cut_pdf"]
