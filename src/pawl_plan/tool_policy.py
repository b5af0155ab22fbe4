"""Tool-use arbitration for a headless planning session.

The SDK calls ``can_use_tool`` for every tool the agent wants to run.
Two tools are handled here; everything else is allowed unchanged:

- ``ExitPlanMode`` carries the finished plan. It is written to disk and the
  session is interrupted, because allowing it would take the agent out of
  plan mode and into executing the plan.
- ``AskUserQuestion`` would block on a terminal nobody is watching, so each
  question is answered with its first option.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Optional

from claude_agent_sdk.types import (
    PermissionResultAllow,
    PermissionResultDeny,
    ToolPermissionContext,
)

from pawl_plan.cli.formatting.output import ConsoleOutput
from pawl_plan.config.defaults import (
    ASK_USER_QUESTION_TOOL,
    EXIT_PLAN_TOOL,
    FALLBACK_ANSWER,
)
from pawl_plan.config.paths import relative_plan_path
from pawl_plan.persistence import PlanArtifacts, write_plan_artifacts

logger = logging.getLogger(__name__)

PLAN_CAPTURED_MESSAGE = "Plan captured. Stop here; the plan will be executed separately."


def answer_questions(tool_input: dict[str, Any]) -> dict[str, str]:
    """Pick an answer for every question in an AskUserQuestion input.

    The input has the SDK's shape::

        {questions: [{question, header, options: [{label, description}]}]}

    Each question is answered with the label of its first option, or
    ``"yes"`` when it has none.

    Returns:
        Mapping of question text to answer
    """
    answers: dict[str, str] = {}
    for q in tool_input.get("questions") or []:
        options = q.get("options") or []
        label = (options[0] or {}).get("label") if options else None
        answers[q.get("question")] = label or FALLBACK_ANSWER
    return answers


class PlanCapture:
    """
    Per-run tool policy that captures the plan from ``ExitPlanMode``.

    Usage:
        capture = PlanCapture(task="login-page", plan_dir=plan_dir, session_id=sid)
        options = ClaudeAgentOptions(can_use_tool=capture.can_use_tool, ...)

        # After the stream ends or breaks:
        if capture.finished:
            print(capture.artifacts.plan_path)
    """

    def __init__(
        self,
        task: str,
        plan_dir: Path,
        session_id: str,
        output: Optional[ConsoleOutput] = None,
    ):
        self.task = task
        self.plan_dir = plan_dir
        self.session_id = session_id
        self.output = output or ConsoleOutput()
        self.artifacts: Optional[PlanArtifacts] = None

    @property
    def finished(self) -> bool:
        """True once a plan has been written."""
        return self.artifacts is not None

    async def can_use_tool(
        self,
        tool_name: str,
        tool_input: dict[str, Any],
        context: Optional[ToolPermissionContext] = None,
    ) -> PermissionResultAllow | PermissionResultDeny:
        """Decide on a tool request.

        Conforms to the claude_agent_sdk can_use_tool callback signature:
        (tool_name, tool_input, context) -> PermissionResultAllow | PermissionResultDeny
        """
        logger.debug("Tool request: tool=%s", tool_name)

        if tool_name == EXIT_PLAN_TOOL:
            return self._capture_plan(tool_input)

        if tool_name == ASK_USER_QUESTION_TOOL:
            answers = answer_questions(tool_input)
            logger.info("Auto-answered %d question(s)", len(answers))
            return PermissionResultAllow(updated_input={**tool_input, "answers": answers})

        return PermissionResultAllow(updated_input=tool_input)

    def _capture_plan(self, tool_input: dict[str, Any]) -> PermissionResultDeny:
        if self.finished:
            logger.warning(
                "Ignoring repeated %s for task=%s; plan already written",
                EXIT_PLAN_TOOL, self.task,
            )
            return PermissionResultDeny(message=PLAN_CAPTURED_MESSAGE, interrupt=True)

        self.artifacts = write_plan_artifacts(
            self.plan_dir,
            self.task,
            tool_input.get("plan") or "",
            self.session_id,
        )
        self.output.print_success(f"Plan saved to {relative_plan_path(self.task)}")
        return PermissionResultDeny(message=PLAN_CAPTURED_MESSAGE, interrupt=True)
