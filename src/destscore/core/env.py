"""
Process environment and project paths.

The catalog path in settings is relative (`data/catalogs/...`), while the CLI, the
API server and pytest may all start from different working directories. Relative
paths are therefore resolved against the project root, located once per process.

Environment variables:
- `DESTSCORE_PROJECT_ROOT`: pin the project root explicitly
- `DESTSCORE_ENV_FILE`: load this dotenv file instead of `<root>/.env`
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv

_TRUTHY = {"1", "true", "yes", "y", "on"}


def _is_project_root(path: Path) -> bool:
    if (path / "pyproject.toml").is_file() and (path / "src" / "destscore").is_dir():
        return True
    return (path / ".env").is_file() or (path / "data" / "catalogs").is_dir()


def _search_upwards(start: Path) -> Path | None:
    start = start.resolve()
    for candidate in (start, *start.parents):
        if _is_project_root(candidate):
            return candidate
    return None


@lru_cache
def get_project_root() -> Path:
    """Locate the project root: env override, then cwd ancestors, then this file's ancestors."""
    pinned = os.getenv("DESTSCORE_PROJECT_ROOT")
    if pinned:
        return Path(pinned).expanduser().resolve()
    return _search_upwards(Path.cwd()) or _search_upwards(Path(__file__).parent) or Path.cwd().resolve()


@lru_cache
def load_dotenv_if_present() -> Path | None:
    """Load the dotenv file once, without overriding variables already set.

    Returns the file that was loaded, or None when there is nothing to load.
    """
    explicit = os.getenv("DESTSCORE_ENV_FILE")
    env_path = Path(explicit).expanduser().resolve() if explicit else get_project_root() / ".env"
    if not env_path.is_file():
        return None
    load_dotenv(dotenv_path=env_path, override=False)
    return env_path


def resolve_project_path(path: str | Path) -> Path:
    """Absolute paths pass through; relative ones are taken from the project root."""
    p = Path(path).expanduser()
    return p if p.is_absolute() else (get_project_root() / p).resolve()


def env_flag(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in _TRUTHY


def env_list(name: str) -> list[str]:
    """Comma-separated env var as a list of non-empty, stripped items."""
    return [item.strip() for item in os.getenv(name, "").split(",") if item.strip()]
