"""
CLI entry point: drive a review session from the shell.

    split-reviewer open bundle.pdf                    # lay out, fetch proposals, write bundle.session.json
    split-reviewer open bundle.pdf -p proposals.json  # seed from a saved service response
    split-reviewer markers bundle.session.json        # list split markers
    split-reviewer drag bundle.session.json 1 412     # drop marker 1 at strip offset 412
    split-reviewer edit bundle.session.json 0 --end 3
    split-reviewer rename bundle.session.json 1 Payslip
    split-reviewer commit bundle.session.json         # send cuts to the cut service
"""

import json
import logging
from pathlib import Path

import typer

from split_reviewer.api import commit_review, open_review
from split_reviewer.commit import build_commit_request
from split_reviewer.errors import CommitError, SplitReviewError
from split_reviewer.proposals import REGISTRY as SOURCES
from split_reviewer.session import ReviewSession
from split_reviewer.store import load_session, save_session
from split_reviewer.tools import config_app

app = typer.Typer(
    name="split-reviewer",
    help="Review and adjust proposed page splits of a PDF bundle.",
)
app.add_typer(config_app, name="config")


def _setup_logging(verbose: bool) -> None:
    if verbose:
        logging.basicConfig(level=logging.INFO, format="%(message)s")


def _load(path: Path) -> ReviewSession:
    if not path.is_file():
        typer.echo(f"Error: session file not found: {path}", err=True)
        raise typer.Exit(1)
    try:
        return load_session(path)
    except (ValueError, OSError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


def _echo_sections(session: ReviewSession) -> None:
    if not session.sections:
        typer.echo("No sections.")
        return
    for i, s in enumerate(session.sections):
        pages = f"p. {s.start_page}" if s.start_page == s.end_page else f"pp. {s.start_page}-{s.end_page}"
        typer.echo(f"[{i}] {s.name} ({pages})")


@app.command("open")
def open_cmd(
    pdf: Path = typer.Argument(..., help="Path to the PDF bundle", path_type=Path),
    session_path: Path | None = typer.Option(
        None,
        "-s",
        "--session",
        help="Session file to write (default: <pdf>.session.json next to the PDF)",
        path_type=Path,
    ),
    proposals_file: Path | None = typer.Option(
        None,
        "-p",
        "--proposals",
        help="Saved analysis-service response (JSON) to seed from",
        path_type=Path,
    ),
    source: str | None = typer.Option(
        None,
        "--source",
        help=f"Proposal source: {', '.join(n for n in SOURCES if n != 'file')} (default from config)",
    ),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Print diagnostic info"),
) -> None:
    """Lay out the PDF, fetch split proposals and start a review session."""
    _setup_logging(verbose)
    if not pdf.is_file():
        typer.echo(f"Error: PDF not found: {pdf}", err=True)
        raise typer.Exit(1)
    if source is not None and source not in SOURCES:
        typer.echo(f"Error: unknown source '{source}'. Choose: {', '.join(SOURCES)}", err=True)
        raise typer.Exit(1)
    try:
        session = open_review(pdf, proposals_file=proposals_file, source=source)
    except SplitReviewError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    out = session_path or pdf.with_suffix(".session.json")
    save_session(session, out)
    typer.echo(f"{session.page_count} pages, {len(session.proposals)} proposals")
    _echo_sections(session)
    typer.echo(f"\nSession → {out}")


@app.command("sections")
def sections_cmd(
    session_path: Path = typer.Argument(..., help="Session file", path_type=Path),
) -> None:
    """List the current sections."""
    _echo_sections(_load(session_path))


@app.command("markers")
def markers_cmd(
    session_path: Path = typer.Argument(..., help="Session file", path_type=Path),
) -> None:
    """List split markers with their strip offset and page boundary."""
    session = _load(session_path)
    if session.markers is None or session.snap is None:
        typer.echo("Session is not seeded yet.")
        return
    for i, m in enumerate(session.markers):
        idx = session.snap.index_of(m.position)
        where = "?" if idx is None else ("start" if idx == 0 else "end" if idx == session.page_count else f"before p. {idx + 1}")
        lock = " (locked)" if m.locked else ""
        typer.echo(f"[{i}] x={m.position:g} {where}{lock}")


@app.command("drag")
def drag_cmd(
    session_path: Path = typer.Argument(..., help="Session file", path_type=Path),
    index: int = typer.Argument(..., help="Marker index (see 'markers')"),
    x: float = typer.Argument(..., help="Drop offset on the strip (pixels)"),
    out_of_track: bool = typer.Option(False, "--out-of-track", help="Marker was dropped outside the track"),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Print diagnostic info"),
) -> None:
    """Drop a marker at a strip offset; it snaps to the nearest page boundary."""
    _setup_logging(verbose)
    session = _load(session_path)
    try:
        outcome = session.drag(index, x, in_track=not out_of_track)
    except (IndexError, SplitReviewError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)
    if outcome.rejected:
        typer.echo(f"Rejected ({outcome.reason.value}); nothing changed.")
        raise typer.Exit(2)
    save_session(session, session_path)
    typer.echo(f"Snapped to boundary {outcome.target_index} (x={outcome.target_position:g})")
    _echo_sections(session)


@app.command("edit")
def edit_cmd(
    session_path: Path = typer.Argument(..., help="Session file", path_type=Path),
    section: int = typer.Argument(..., help="Section index (see 'sections')"),
    start: int | None = typer.Option(None, "--start", help="New first page"),
    end: int | None = typer.Option(None, "--end", help="New last page"),
) -> None:
    """Change a section's first and/or last page."""
    session = _load(session_path)
    if start is None and end is None:
        typer.echo("Error: give --start and/or --end", err=True)
        raise typer.Exit(1)
    try:
        changed = session.edit_section(section, start_page=start, end_page=end)
    except (IndexError, SplitReviewError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)
    if not changed:
        typer.echo(f"Error: pages must be within 1..{session.page_count}", err=True)
        raise typer.Exit(1)
    save_session(session, session_path)
    _echo_sections(session)


@app.command("rename")
def rename_cmd(
    session_path: Path = typer.Argument(..., help="Session file", path_type=Path),
    section: int = typer.Argument(..., help="Section index (see 'sections')"),
    name: str = typer.Argument(..., help="New section name"),
) -> None:
    """Rename a section."""
    session = _load(session_path)
    try:
        session.rename_section(section, name)
    except (IndexError, SplitReviewError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)
    save_session(session, session_path)
    _echo_sections(session)


@app.command("commit")
def commit_cmd(
    session_path: Path = typer.Argument(..., help="Session file", path_type=Path),
    dry_run: bool = typer.Option(False, "--dry-run", help="Print the request instead of sending it"),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Print diagnostic info"),
) -> None:
    """Send the final sections to the cut service."""
    _setup_logging(verbose)
    session = _load(session_path)
    try:
        if dry_run:
            typer.echo(json.dumps(build_commit_request(session).model_dump(), indent=2))
            return
        result = commit_review(session)
    except CommitError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)
    typer.echo(f"Split committed: {len(session.sections)} sections")
    if result:
        typer.echo(json.dumps(result, indent=2))


def main() -> None:
    """Entry point for the split-reviewer console script."""
    app()


if __name__ == "__main__":
    main()
