"""Save and load a review session as JSON, so a session can span several CLI runs."""

import json
from pathlib import Path

from pydantic import ValidationError

from split_reviewer.models import SessionSnapshot
from split_reviewer.session import ReviewSession

SESSION_VERSION = 1


def save_session(session: ReviewSession, out_path: Path) -> None:
    """Write the session snapshot to JSON, stamped with SESSION_VERSION."""
    data = session.to_snapshot().model_dump(mode="json")
    data["session_version"] = SESSION_VERSION
    out_path = Path(out_path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    with open(out_path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)


def load_session(path: Path) -> ReviewSession:
    """Load a session written by save_session. Raises ValueError if the file is not a session."""
    path = Path(path)
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    version = data.pop("session_version", None)
    if version is not None and version > SESSION_VERSION:
        raise ValueError(f"{path} was written by a newer version (session_version {version})")
    try:
        snapshot = SessionSnapshot.model_validate(data)
    except ValidationError as e:
        raise ValueError(f"{path} is not a review session: {e}") from e
    return ReviewSession.from_snapshot(snapshot)
