"""
Atomic-write persistence layer for plan artifacts.

Each captured plan produces two files in ``.pawl/plans``: the plan body
(``<task>.md``) and the id of the session that produced it
(``<task>.session``), so an orchestrator can later resume or audit it.
"""

from __future__ import annotations

import logging
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from pawl_plan.config.paths import get_plan_dir, plan_path, session_path

logger = logging.getLogger(__name__)


@dataclass
class PlanArtifacts:
    """A plan and the session id it was written with."""

    task: str
    plan: str
    session_id: str
    plan_path: Path
    session_path: Path


def ensure_plan_dir(repo_root: Path) -> Path:
    """
    Ensure the .pawl/plans directory exists.

    Returns:
        Path to the .pawl/plans directory
    """
    plan_dir = get_plan_dir(repo_root)
    plan_dir.mkdir(parents=True, exist_ok=True)
    return plan_dir


def atomic_write_with_fsync(path: Path, content: str) -> None:
    """
    Write content to a file atomically with fsync for durability.

    The content goes to a temp file in the same directory, which is flushed,
    fsynced and then renamed over ``path``. An existing file is replaced.

    Args:
        path: Target file path
        content: Content to write to the file

    Raises:
        OSError: If the write operation fails
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    fd, temp_path = tempfile.mkstemp(
        dir=path.parent,
        prefix=f".{path.name}.",
        suffix=".tmp"
    )

    try:
        # newline="" keeps the agent's line endings byte-for-byte
        with os.fdopen(fd, 'w', encoding='utf-8', newline='') as f:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())

        os.replace(temp_path, path)

        dir_fd = os.open(path.parent, os.O_RDONLY | os.O_DIRECTORY)
        try:
            os.fsync(dir_fd)
        finally:
            os.close(dir_fd)

    except Exception:
        try:
            os.unlink(temp_path)
        except OSError:
            pass
        raise


def write_plan_artifacts(
    plan_dir: Path,
    task: str,
    plan: str,
    session_id: str,
) -> PlanArtifacts:
    """
    Persist a plan and its session id, overwriting earlier artifacts.

    Args:
        plan_dir: The .pawl/plans directory
        task: Task name; used as the file stem
        plan: Plan body, written verbatim
        session_id: Session that produced the plan

    Returns:
        PlanArtifacts describing what was written
    """
    artifacts = PlanArtifacts(
        task=task,
        plan=plan,
        session_id=session_id,
        plan_path=plan_path(plan_dir, task),
        session_path=session_path(plan_dir, task),
    )
    atomic_write_with_fsync(artifacts.plan_path, plan)
    atomic_write_with_fsync(artifacts.session_path, session_id)
    logger.info(
        "Wrote plan artifacts: task=%s, session=%s, chars=%d",
        task, session_id, len(plan),
    )
    return artifacts


def read_plan_artifacts(plan_dir: Path, task: str) -> Optional[PlanArtifacts]:
    """
    Read back the artifacts of an earlier run.

    Returns:
        PlanArtifacts, or None unless both the plan and session files exist
    """
    plan_file = plan_path(plan_dir, task)
    session_file = session_path(plan_dir, task)
    if not plan_file.is_file() or not session_file.is_file():
        return None

    with open(plan_file, "r", encoding="utf-8", newline="") as f:
        plan = f.read()
    session_id = session_file.read_text(encoding="utf-8").strip()
    return PlanArtifacts(
        task=task,
        plan=plan,
        session_id=session_id,
        plan_path=plan_file,
        session_path=session_file,
    )
