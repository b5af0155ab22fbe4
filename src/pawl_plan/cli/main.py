#!/usr/bin/env python
from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from dotenv import load_dotenv

from pawl_plan.config.defaults import ENV_REPO_ROOT, ENV_TASK, ENV_TASK_FILE

logger = logging.getLogger(__name__)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    # Suppress verbose debug logs from the SDK
    logging.getLogger("claude_agent_sdk").setLevel(logging.WARNING)
    logging.getLogger("pawl_plan").setLevel(logging.DEBUG if verbose else logging.INFO)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pawl-plan-worker",
        description="Run one planning session and save the plan to .pawl/plans",
    )
    parser.add_argument("--task", help=f"Task name (default: ${ENV_TASK})")
    parser.add_argument("--task-file", help=f"Prompt file (default: ${ENV_TASK_FILE})")
    parser.add_argument(
        "--repo-root",
        help=f"Repository root (default: ${ENV_REPO_ROOT}, then the nearest .pawl/)",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose logging")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    _configure_logging(args.verbose)
    load_dotenv(Path.cwd() / ".env")

    # Imported after logging is configured
    from pawl_plan.env_validator import load_worker_env, validate_environment
    from pawl_plan.worker import PlanWorker

    if not (args.task or args.task_file or args.repo_root):
        for warning in validate_environment().warnings:
            logger.warning(warning)

    env = load_worker_env(
        task=args.task,
        task_file=args.task_file,
        repo_root=args.repo_root,
    )
    # Values already set, including those from the cwd .env, take precedence
    load_dotenv(env.repo_root / ".env")
    outcome = asyncio.run(PlanWorker(env).run())
    return int(outcome)


if __name__ == "__main__":
    sys.exit(main())
