#!/usr/bin/env python3
"""
Open a review session for every PDF in example_docs/ and print the proposed sections.

Run from repo root (analysis service must be running, see .split_reviewer.json):
    python scripts/propose_example_docs.py
"""
from pathlib import Path

from split_reviewer import open_review
from split_reviewer.errors import SplitReviewError
from split_reviewer.store import save_session

REPO_ROOT = Path(__file__).resolve().parent.parent
EXAMPLE_DOCS = REPO_ROOT / "example_docs"
SESSIONS = REPO_ROOT / "review_sessions"


def main() -> None:
    if not EXAMPLE_DOCS.is_dir():
        print(f"Missing {EXAMPLE_DOCS}")
        return
    SESSIONS.mkdir(parents=True, exist_ok=True)
    pdfs = sorted(EXAMPLE_DOCS.glob("*.pdf"))
    if not pdfs:
        print(f"No PDFs in {EXAMPLE_DOCS}")
        return
    for pdf in pdfs:
        out = SESSIONS / (pdf.stem[:50].replace(" ", "-").lower() + ".session.json")
        print(f"Reviewing {pdf.name} → {out} ...")
        try:
            session = open_review(pdf)
        except SplitReviewError as e:
            print(f"  Error: {e}")
            continue
        save_session(session, out)
        for s in session.sections:
            print(f"  {s.start_page:>4}-{s.end_page:<4} {s.name}")


if __name__ == "__main__":
    main()
