"""Plan worker: run one prompt through a planning session and keep the plan.

Execution Traces:
- Happy: agent calls ExitPlanMode, artifacts written, returns PLAN_WRITTEN
- Failure: stream ends without ExitPlanMode, returns NO_PLAN
- Edge: prompt file or SDK errors propagate to the caller
"""

from __future__ import annotations

import logging
import uuid
from enum import IntEnum
from pathlib import Path
from typing import Optional

from claude_agent_sdk import ClaudeAgentOptions, ClaudeSDKClient

from pawl_plan.cli.formatting.output import ConsoleOutput
from pawl_plan.config.defaults import PERMISSION_MODE
from pawl_plan.env_validator import WorkerEnv
from pawl_plan.persistence import ensure_plan_dir
from pawl_plan.tool_policy import PlanCapture

logger = logging.getLogger(__name__)


class WorkerOutcome(IntEnum):
    """Terminal state of a run; the value is the process exit code."""

    PLAN_WRITTEN = 0
    NO_PLAN = 1


def new_session_id() -> str:
    return str(uuid.uuid4())


class PlanWorker:
    """Drives a single planning session for one task."""

    def __init__(
        self,
        env: WorkerEnv,
        session_id: Optional[str] = None,
        output: Optional[ConsoleOutput] = None,
    ):
        self.env = env
        self.session_id = session_id or new_session_id()
        self.output = output or ConsoleOutput()
        self.capture: Optional[PlanCapture] = None

    def build_options(self, plan_dir: Path) -> ClaudeAgentOptions:
        """Session options: plan mode, our tool policy and a fixed session id."""
        self.capture = PlanCapture(
            task=self.env.task,
            plan_dir=plan_dir,
            session_id=self.session_id,
            output=self.output,
        )
        return ClaudeAgentOptions(
            permission_mode=PERMISSION_MODE,
            cwd=str(self.env.repo_root),
            can_use_tool=self.capture.can_use_tool,
            extra_args={"session-id": self.session_id},
        )

    async def run(self) -> WorkerOutcome:
        """Run the session to completion.

        Returns:
            PLAN_WRITTEN once ExitPlanMode has been captured, NO_PLAN if the
            agent finished without calling it.
        """
        plan_dir = ensure_plan_dir(self.env.repo_root)
        prompt = self.env.task_file.read_text(encoding="utf-8")
        options = self.build_options(plan_dir)

        logger.info(
            "Starting planning session: task=%s, session=%s, prompt_chars=%d",
            self.env.task, self.session_id, len(prompt),
        )

        async with ClaudeSDKClient(options=options) as client:
            await client.query(prompt)
            async for message in client.receive_response():
                logger.debug("Session message: %s", type(message).__name__)
                if self.capture.finished:
                    break

        if self.capture.finished:
            logger.info("Plan captured: %s", self.capture.artifacts.plan_path)
            return WorkerOutcome.PLAN_WRITTEN

        logger.warning("Session %s ended without a plan", self.session_id)
        self.output.print_warning("AI did not produce a plan")
        return WorkerOutcome.NO_PLAN
