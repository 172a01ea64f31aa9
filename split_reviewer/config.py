"""
Config: one JSON file (.split_reviewer.json) with service endpoints, layout and merge settings.
Found via SPLIT_REVIEWER_CONFIG, else cwd or its parents, else the repo root.
Missing keys fall back to DEFAULTS; a broken file is reported but never fatal.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict

from dotenv import load_dotenv

log = logging.getLogger(__name__)

CONFIG_FILENAME = ".split_reviewer.json"

DEFAULTS: Dict[str, Any] = {
    "service_url": "http://localhost:5000",
    "request_timeout": 60.0,
    "overlap_tolerance": 1.0,
    "boilerplate_tokens": [],
    "thumbnail_height": 200.0,
    "page_gap": 16.0,
    "proposal_source": "service",
    "llm_model": "openai/gpt-4o-mini",
}

# Env var -> config key; env wins over the file
ENV_OVERRIDES = {
    "SPLIT_REVIEWER_SERVICE_URL": "service_url",
}


def load_env() -> None:
    """Load .env from cwd or the repo root (OPENROUTER_API_KEY, service overrides)."""
    repo = _find_repo_root()
    for path in (Path.cwd() / ".env", repo / ".env" if repo else None):
        if path is not None and path.is_file():
            load_dotenv(path)
            break


def _find_repo_root() -> Path | None:
    """Walk up from package dir to find a directory containing pyproject.toml or the config file."""
    start = Path(__file__).resolve().parent
    for parent in [start, *start.parents]:
        if (parent / "pyproject.toml").exists() or (parent / CONFIG_FILENAME).exists():
            return parent
    return None


def _find_config_file() -> Path | None:
    env_path = os.environ.get("SPLIT_REVIEWER_CONFIG")
    if env_path:
        p = Path(env_path).resolve()
        return p if p.exists() else None
    for d in [Path.cwd(), *Path.cwd().parents]:
        cf = d / CONFIG_FILENAME
        if cf.exists():
            return cf.resolve()
    repo = _find_repo_root()
    if repo is not None and (repo / CONFIG_FILENAME).exists():
        return (repo / CONFIG_FILENAME).resolve()
    return None


def get_config_path() -> Path:
    """Path of the config file in use, or where a new one would be written."""
    env_path = os.environ.get("SPLIT_REVIEWER_CONFIG")
    if env_path:
        return Path(env_path).resolve()
    found = _find_config_file()
    if found is not None:
        return found
    return (Path.cwd() / CONFIG_FILENAME).resolve()


def load_config() -> Dict[str, Any]:
    """Config merged over DEFAULTS, with env overrides applied. Private keys start with '_'."""
    out = dict(DEFAULTS)
    path = _find_config_file()
    out["_config_file"] = str(path or get_config_path())
    out["_no_file"] = path is None
    if path is not None:
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            log.warning("could not read config %s: %s; using defaults", path, e)
            out["_load_error"] = True
            data = {}
        if isinstance(data, dict):
            out.update({k: v for k, v in data.items() if k in DEFAULTS})
    for env_key, key in ENV_OVERRIDES.items():
        value = os.environ.get(env_key)
        if value:
            out[key] = value
    return out


def save_config(data: Dict[str, Any]) -> Path:
    """Write the known keys of data to the config file; returns its path."""
    path = Path(data["_config_file"]) if data.get("_config_file") else get_config_path()
    to_save = {k: data[k] for k in DEFAULTS if k in data}
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(to_save, f, indent=2)
    return path


def _coerce(key: str, raw: str) -> Any:
    default = DEFAULTS[key]
    if isinstance(default, bool):
        return raw.strip().lower() in ("1", "true", "yes", "on")
    if isinstance(default, float):
        return float(raw)
    if isinstance(default, int):
        return int(raw)
    if isinstance(default, list):
        return [t.strip() for t in raw.split(",") if t.strip()]
    return raw


def set_value(key: str, raw: str) -> Dict[str, Any]:
    """Set one key from its string form (lists are comma-separated). Saves config."""
    if key not in DEFAULTS:
        return {"ok": False, "error": f"Unknown config key '{key}'. Known: {', '.join(DEFAULTS)}"}
    try:
        value = _coerce(key, raw)
    except ValueError:
        return {"ok": False, "error": f"Invalid value for {key}: {raw!r}"}
    data = load_config()
    data[key] = value
    path = save_config(data)
    return {"ok": True, "key": key, "value": value, "path": str(path)}


def get_setting(key: str) -> Any:
    return load_config()[key]
