"""Path resolution for the plan worker - single source of truth for .pawl layout."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

PAWL_DIR = ".pawl"
PLANS_SUBDIR = "plans"
PLAN_SUFFIX = ".md"
SESSION_SUFFIX = ".session"


def get_plan_dir(repo_root: Path) -> Path:
    """Return ``<repo_root>/.pawl/plans``."""
    return Path(repo_root) / PAWL_DIR / PLANS_SUBDIR


def plan_path(plan_dir: Path, task: str) -> Path:
    return plan_dir / f"{task}{PLAN_SUFFIX}"


def session_path(plan_dir: Path, task: str) -> Path:
    return plan_dir / f"{task}{SESSION_SUFFIX}"


def relative_plan_path(task: str) -> str:
    """Plan location as shown to users, relative to the repo root."""
    return f"{PAWL_DIR}/{PLANS_SUBDIR}/{task}{PLAN_SUFFIX}"


def find_project_root(start: Optional[Path] = None) -> Optional[Path]:
    """Walk up from ``start`` (default: cwd) looking for a ``.pawl/`` directory.

    Returns:
        The first directory containing ``.pawl/``, or None when the
        filesystem root is reached without finding one.
    """
    current = Path(start or Path.cwd()).resolve()
    for candidate in (current, *current.parents):
        if (candidate / PAWL_DIR).is_dir():
            return candidate
    return None
