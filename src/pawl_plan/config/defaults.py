"""Default configuration values for the plan worker.

Usage:
    from pawl_plan.config.defaults import EXIT_PLAN_TOOL, FALLBACK_ANSWER
"""

from __future__ import annotations

# =============================================================================
# Environment
# =============================================================================

ENV_TASK = "PAWL_TASK"
ENV_TASK_FILE = "PAWL_TASK_FILE"
ENV_REPO_ROOT = "PAWL_REPO_ROOT"

# =============================================================================
# Agent session
# =============================================================================

# Keeps the agent reasoning and proposing without executing side effects
PERMISSION_MODE = "plan"

EXIT_PLAN_TOOL = "ExitPlanMode"
ASK_USER_QUESTION_TOOL = "AskUserQuestion"

# Answer used for a question that offers no options
FALLBACK_ANSWER = "yes"

# =============================================================================
# Console
# =============================================================================

LOG_PREFIX = "[plan-worker]"
