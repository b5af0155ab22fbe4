"""Environment variable validation for the plan worker.

The orchestrator passes the task name, the prompt file and the repository
root through the environment. This module checks that they are present and
turns them into a ``WorkerEnv``.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from pawl_plan.config.defaults import ENV_REPO_ROOT, ENV_TASK, ENV_TASK_FILE
from pawl_plan.config.paths import find_project_root, get_plan_dir

logger = logging.getLogger(__name__)


class MissingEnvironmentError(RuntimeError):
    """Raised when one or more required worker inputs are not set."""

    def __init__(self, missing: list[str]):
        self.missing = missing
        super().__init__(f"Missing required environment: {', '.join(missing)}")


@dataclass
class WorkerEnv:
    """Resolved inputs for a single worker run."""

    task: str
    task_file: Path
    repo_root: Path

    @property
    def plan_dir(self) -> Path:
        return get_plan_dir(self.repo_root)


@dataclass
class EnvValidationResult:
    """Result of environment variable validation."""

    task_set: bool
    task_file_set: bool
    repo_root_set: bool
    is_valid: bool
    missing_required: list[str]
    warnings: list[str]

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "task_configured": self.task_set,
            "task_file_configured": self.task_file_set,
            "repo_root_configured": self.repo_root_set,
            "is_valid": self.is_valid,
            "missing_required": self.missing_required,
            "warnings": self.warnings,
        }


def validate_environment() -> EnvValidationResult:
    """
    Validate that the worker's environment variables are set.

    A missing ``PAWL_REPO_ROOT`` is only a warning when a ``.pawl/``
    directory can be found above the current directory.

    Returns:
        EnvValidationResult with configuration status and any warnings
    """
    task = os.environ.get(ENV_TASK, "")
    task_file = os.environ.get(ENV_TASK_FILE, "")
    repo_root = os.environ.get(ENV_REPO_ROOT, "")

    missing_required = []
    warnings = []

    if not task:
        missing_required.append(ENV_TASK)
    if not task_file:
        missing_required.append(ENV_TASK_FILE)
    elif not Path(task_file).is_file():
        warnings.append(f"{ENV_TASK_FILE} does not point to a file: {task_file}")
    if not repo_root:
        if find_project_root() is None:
            missing_required.append(ENV_REPO_ROOT)
        else:
            warnings.append(f"{ENV_REPO_ROOT} not set; using the nearest .pawl/ directory")

    return EnvValidationResult(
        task_set=bool(task),
        task_file_set=bool(task_file),
        repo_root_set=bool(repo_root),
        is_valid=len(missing_required) == 0,
        missing_required=missing_required,
        warnings=warnings,
    )


def load_worker_env(
    task: Optional[str] = None,
    task_file: Optional[str] = None,
    repo_root: Optional[str] = None,
) -> WorkerEnv:
    """
    Resolve worker inputs from explicit values, then the environment.

    The repository root additionally falls back to the nearest ancestor of
    the current directory that contains ``.pawl/``.

    Raises:
        MissingEnvironmentError: if any input cannot be resolved
    """
    task = task or os.environ.get(ENV_TASK)
    task_file = task_file or os.environ.get(ENV_TASK_FILE)
    root: Optional[Path] = None
    if repo_root or os.environ.get(ENV_REPO_ROOT):
        root = Path(repo_root or os.environ[ENV_REPO_ROOT])
    else:
        root = find_project_root()
        if root is not None:
            logger.debug("Discovered project root at %s", root)

    missing = []
    if not task:
        missing.append(ENV_TASK)
    if not task_file:
        missing.append(ENV_TASK_FILE)
    if root is None:
        missing.append(ENV_REPO_ROOT)
    if missing:
        raise MissingEnvironmentError(missing)

    return WorkerEnv(task=task, task_file=Path(task_file), repo_root=root)
