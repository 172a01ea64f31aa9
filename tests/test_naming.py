"""Tests for split_reviewer.naming."""
from __future__ import annotations

import logging

import pytest

from split_reviewer.models import OutputFile, ProposalResponse
from split_reviewer.naming import name_from_path, proposals_from_response

BOILERPLATE = ["mohan", "r", "bgv", "doc"]


class TestNameFromPath:
    @pytest.mark.parametrize(
        ("path", "expected"),
        [
            ("C:\\docs\\Mohan R_ BGV Doc_Offer_Letter_3.pdf", "Offer-Letter"),
            ("/srv/out/Mohan R_ BGV Doc_Payslip_4-6.pdf", "Payslip"),
            ("relieving letter 7.PDF", "relieving-letter"),
            ("Mohan_R_BGV_Doc_2.pdf", "Section"),
            ("", "Section"),
        ],
    )
    def test_cleanup(self, path: str, expected: str) -> None:
        assert name_from_path(path, BOILERPLATE) == expected

    def test_boilerplate_is_optional(self) -> None:
        assert name_from_path("out/BGV_Payslip_3.pdf") == "BGV-Payslip"


class TestProposalsFromResponse:
    def test_single_page_ignores_end_page(self) -> None:
        response = ProposalResponse(
            output_files=[OutputFile(start_page=3, end_page=5, is_multipage=False, path="x/Offer_3.pdf")]
        )
        [proposal] = proposals_from_response(response)
        assert (proposal.start_page, proposal.end_page, proposal.name) == (3, 3, "Offer")

    def test_multipage_uses_end_page(self) -> None:
        response = ProposalResponse(
            output_files=[OutputFile(start_page=3, end_page=5, is_multipage=True, path="x/Offer_3-5.pdf")]
        )
        [proposal] = proposals_from_response(response)
        assert (proposal.start_page, proposal.end_page) == (3, 5)

    def test_explicit_name_wins(self) -> None:
        response = ProposalResponse(
            output_files=[OutputFile(start_page=1, path="x/Offer_1.pdf", name="Cover")]
        )
        assert proposals_from_response(response)[0].name == "Cover"

    def test_malformed_entry_skipped(self, caplog: pytest.LogCaptureFixture) -> None:
        response = ProposalResponse.model_validate(
            {
                "output_files": [
                    {"start_page": 4, "end_page": 2, "is_multipage": True, "path": "bad.pdf"},
                    {"start_page": 0, "path": "zero.pdf"},
                    {"start_page": 2, "path": "good_2.pdf"},
                ]
            }
        )
        with caplog.at_level(logging.WARNING, logger="split_reviewer.naming"):
            proposals = proposals_from_response(response)
        assert [p.start_page for p in proposals] == [2]
        assert "bad.pdf" in caplog.text
