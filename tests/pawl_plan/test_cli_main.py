"""Tests for the pawl-plan-worker entry point."""

import logging
import os

import pytest
from unittest.mock import AsyncMock, patch

from pawl_plan.cli.main import build_parser, main
from pawl_plan.env_validator import MissingEnvironmentError
from pawl_plan.worker import WorkerOutcome

from fakes import FakeClientFactory, FakeMessage, ToolCall


@pytest.fixture(autouse=True)
def restore_logger_levels():
    """main() sets package logger levels; put them back after each test."""
    loggers = [logging.getLogger(name) for name in ("pawl_plan", "claude_agent_sdk")]
    levels = [logger.level for logger in loggers]
    yield
    for logger, level in zip(loggers, levels):
        logger.setLevel(level)


@pytest.fixture
def project(tmp_path, monkeypatch):
    repo = tmp_path / "repo"
    repo.mkdir()
    prompt = tmp_path / "prompt.txt"
    prompt.write_text("Add a login page")
    monkeypatch.chdir(repo)
    env = {
        "PAWL_TASK": "login",
        "PAWL_TASK_FILE": str(prompt),
        "PAWL_REPO_ROOT": str(repo),
    }
    with patch.dict(os.environ, env, clear=True):
        yield repo


def test_parser_defaults():
    args = build_parser().parse_args([])

    assert args.task is None
    assert args.task_file is None
    assert args.repo_root is None
    assert args.verbose is False


def test_plan_written_exits_zero(project, capsys):
    factory = FakeClientFactory([ToolCall("ExitPlanMode", {"plan": "1. Add route 2. Add form"})])

    with patch("pawl_plan.worker.ClaudeSDKClient", factory):
        code = main([])

    assert code == 0
    assert (project / ".pawl" / "plans" / "login.md").read_text() == "1. Add route 2. Add form"
    session_id = (project / ".pawl" / "plans" / "login.session").read_text()
    assert factory.last.options.extra_args["session-id"] == session_id
    assert "Plan saved to .pawl/plans/login.md" in capsys.readouterr().out


def test_no_plan_exits_one(project, capsys):
    factory = FakeClientFactory([FakeMessage("no plan today")])

    with patch("pawl_plan.worker.ClaudeSDKClient", factory):
        code = main([])

    assert code == 1
    assert not (project / ".pawl" / "plans" / "login.md").exists()
    assert "AI did not produce a plan" in capsys.readouterr().err


def test_flags_override_environment(project, tmp_path):
    other_prompt = tmp_path / "other.txt"
    other_prompt.write_text("Something else")
    run = AsyncMock(return_value=WorkerOutcome.PLAN_WRITTEN)

    with patch("pawl_plan.worker.PlanWorker.run", run), \
            patch("pawl_plan.worker.PlanWorker.__init__", return_value=None) as init:
        code = main(["--task", "other", "--task-file", str(other_prompt)])

    assert code == 0
    env = init.call_args.args[0]
    assert env.task == "other"
    assert env.task_file == other_prompt
    assert env.repo_root == project


def test_missing_environment_propagates(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    with patch.dict(os.environ, {}, clear=True), \
            patch("pawl_plan.env_validator.find_project_root", return_value=None):
        with pytest.raises(MissingEnvironmentError):
            main([])


def test_verbose_sets_debug(project):
    run = AsyncMock(return_value=WorkerOutcome.NO_PLAN)

    with patch("pawl_plan.worker.PlanWorker.run", run):
        assert main(["--verbose"]) == 1

    assert logging.getLogger("pawl_plan").level == logging.DEBUG
    assert logging.getLogger("claude_agent_sdk").level == logging.WARNING


def test_verbose_level_does_not_leak():
    assert logging.getLogger("pawl_plan").level == logging.NOTSET
    assert logging.getLogger("claude_agent_sdk").level == logging.NOTSET


def test_loads_repo_root_dotenv(project, tmp_path, monkeypatch):
    (project / ".env").write_text("ANTHROPIC_API_KEY=from-repo\n")
    monkeypatch.chdir(tmp_path)
    run = AsyncMock(return_value=WorkerOutcome.PLAN_WRITTEN)

    with patch("pawl_plan.worker.PlanWorker.run", run):
        assert main([]) == 0

    assert os.environ["ANTHROPIC_API_KEY"] == "from-repo"


def test_cwd_dotenv_takes_precedence(project, tmp_path, monkeypatch):
    (project / ".env").write_text("ANTHROPIC_API_KEY=from-repo\n")
    (tmp_path / ".env").write_text("ANTHROPIC_API_KEY=from-cwd\n")
    monkeypatch.chdir(tmp_path)
    run = AsyncMock(return_value=WorkerOutcome.PLAN_WRITTEN)

    with patch("pawl_plan.worker.PlanWorker.run", run):
        assert main([]) == 0

    assert os.environ["ANTHROPIC_API_KEY"] == "from-cwd"
