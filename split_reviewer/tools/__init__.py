"""CLI sub-apps: one module per tool."""

from split_reviewer.tools.config import config_app

__all__ = ["config_app"]
