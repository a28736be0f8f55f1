from pathlib import Path
from unittest.mock import MagicMock

import pytest

from portico.bootstrap.ci import JobStatus, PipelineRunner, StepStatus
from portico.bootstrap.pipeline import Job, PipelineDefinition, Step, default_pipeline
from portico.bootstrap.process import CommandResult, CommandRunner
from portico.config.settings import PorticoConfig


def _fake_runner(failing: dict[str, int] | None = None) -> MagicMock:
    """A CommandRunner whose shell commands succeed unless listed in ``failing``."""
    failing = failing or {}
    runner = MagicMock(spec=CommandRunner)
    runner.run_shell.side_effect = lambda command: CommandResult(command, failing.get(command, 0))
    return runner


@pytest.fixture
def pipeline() -> PipelineDefinition:
    return default_pipeline(PorticoConfig())


def test_main_branch_runs_both_jobs(pipeline):
    outcome = PipelineRunner(_fake_runner()).run(pipeline, "main")

    assert outcome.succeeded
    assert [job.status for job in outcome.jobs] == [JobStatus.SUCCESS, JobStatus.SUCCESS]


def test_action_steps_are_skipped_locally(pipeline):
    runner = _fake_runner()
    outcome = PipelineRunner(runner).run(pipeline, "main")

    checkout = outcome.job("build-and-test").steps[0]
    assert checkout.step.name == "Checkout"
    assert checkout.status is StepStatus.SKIPPED
    assert "actions/checkout@v4" not in [call.args[0] for call in runner.run_shell.call_args_list]


def test_lighthouse_failure_does_not_fail_build_and_test(pipeline):
    runner = _fake_runner({"npm run lhci": 1})

    outcome = PipelineRunner(runner).run(pipeline, "main")

    build_and_test = outcome.job("build-and-test")
    assert build_and_test.status is JobStatus.SUCCESS
    assert build_and_test.steps[-1].status is StepStatus.TOLERATED
    assert outcome.job("deploy").status is JobStatus.SUCCESS
    assert outcome.succeeded


def test_non_main_branch_skips_deploy(pipeline):
    runner = _fake_runner()

    outcome = PipelineRunner(runner).run(pipeline, "feature/new-layout")

    deploy = outcome.job("deploy")
    assert outcome.job("build-and-test").status is JobStatus.SUCCESS
    assert deploy.status is JobStatus.SKIPPED
    assert deploy.steps == []
    assert "main" in deploy.reason
    assert outcome.succeeded


def test_failing_lint_fails_job_and_skips_deploy(pipeline):
    runner = _fake_runner({"npm run lint": 2})

    outcome = PipelineRunner(runner).run(pipeline, "main")

    build_and_test = outcome.job("build-and-test")
    statuses = {step.step.name: step.status for step in build_and_test.steps}
    assert build_and_test.status is JobStatus.FAILED
    assert statuses["Run linters"] is StepStatus.FAILED
    assert statuses["Build site"] is StepStatus.SKIPPED
    assert statuses["Lighthouse CI"] is StepStatus.SKIPPED
    assert outcome.job("deploy").status is JobStatus.SKIPPED
    assert not outcome.succeeded


def test_dry_run_executes_nothing(pipeline):
    runner = _fake_runner()

    outcome = PipelineRunner(runner, dry_run=True).run(pipeline, "main")

    runner.run_shell.assert_not_called()
    planned = [step for step in outcome.job("build-and-test").steps if step.status is StepStatus.PLANNED]
    assert [step.step.run for step in planned] == [
        "npm ci",
        "python -m pip install portico",
        "npm run format:check",
        "npm run lint",
        "npm run build",
        "npm run lhci",
    ]


def test_shell_steps_run_in_project_root(tmp_path: Path):
    definition = PipelineDefinition(
        name="local",
        jobs=(Job(id="only", steps=(Step(name="touch", run="echo ok > marker.txt"),)),),
    )

    outcome = PipelineRunner(CommandRunner(tmp_path)).run(definition, "main")

    assert outcome.succeeded
    assert (tmp_path / "marker.txt").read_text().strip() == "ok"
