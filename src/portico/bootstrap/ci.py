"""Local evaluation of a pipeline definition.

Shell steps run in the project root; action steps (``uses``) only exist on
the hosted runner and are reported as skipped.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum

from portico.bootstrap.pipeline import Job, PipelineDefinition, Step
from portico.bootstrap.process import CommandRunner

logger = logging.getLogger(__name__)


class StepStatus(str, Enum):
    SUCCESS = "success"
    FAILED = "failed"
    TOLERATED = "tolerated"
    SKIPPED = "skipped"
    PLANNED = "planned"


class JobStatus(str, Enum):
    SUCCESS = "success"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass(frozen=True, slots=True)
class StepOutcome:
    step: Step
    status: StepStatus
    returncode: int | None = None


@dataclass(slots=True)
class JobOutcome:
    job_id: str
    status: JobStatus
    steps: list[StepOutcome] = field(default_factory=list)
    reason: str | None = None


@dataclass(slots=True)
class PipelineOutcome:
    branch: str
    jobs: list[JobOutcome] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return all(job.status is not JobStatus.FAILED for job in self.jobs)

    def job(self, job_id: str) -> JobOutcome:
        for job in self.jobs:
            if job.job_id == job_id:
                return job
        raise KeyError(job_id)


class PipelineRunner:
    """Evaluate jobs in order for a given branch."""

    def __init__(self, runner: CommandRunner, *, dry_run: bool = False) -> None:
        self._runner = runner
        self._dry_run = dry_run

    def _skip_reason(self, job: Job, branch: str, finished: dict[str, JobOutcome]) -> str | None:
        for need in job.needs:
            outcome = finished.get(need)
            if outcome is None or outcome.status is not JobStatus.SUCCESS:
                return f"needs '{need}' to succeed"
        if job.branch is not None and job.branch != branch:
            return f"only runs on branch '{job.branch}'"
        return None

    def _run_step(self, step: Step) -> StepOutcome:
        if step.run is None:
            logger.info("  [dim]%s: skipped (%s runs on the hosted runner)[/dim]", step.name, step.uses)
            return StepOutcome(step, StepStatus.SKIPPED)
        if self._dry_run:
            logger.info("  %s: would run `%s`", step.name, step.run)
            return StepOutcome(step, StepStatus.PLANNED)

        result = self._runner.run_shell(step.run)
        if result.ok:
            return StepOutcome(step, StepStatus.SUCCESS, result.returncode)
        if step.continue_on_error:
            logger.warning("  %s exited with %d; continuing", step.name, result.returncode)
            return StepOutcome(step, StepStatus.TOLERATED, result.returncode)
        logger.error("  %s exited with %d", step.name, result.returncode)
        return StepOutcome(step, StepStatus.FAILED, result.returncode)

    def run_job(self, job: Job) -> JobOutcome:
        outcome = JobOutcome(job_id=job.id, status=JobStatus.SUCCESS)
        for step in job.steps:
            if outcome.status is JobStatus.FAILED:
                outcome.steps.append(StepOutcome(step, StepStatus.SKIPPED))
                continue
            step_outcome = self._run_step(step)
            outcome.steps.append(step_outcome)
            if step_outcome.status is StepStatus.FAILED:
                outcome.status = JobStatus.FAILED
                outcome.reason = f"step '{step.name}' failed"
        return outcome

    def run(self, definition: PipelineDefinition, branch: str) -> PipelineOutcome:
        result = PipelineOutcome(branch=branch)
        finished: dict[str, JobOutcome] = {}
        for job in definition.jobs:
            reason = self._skip_reason(job, branch, finished)
            if reason is not None:
                logger.info("Job %s skipped: %s", job.id, reason)
                outcome = JobOutcome(job_id=job.id, status=JobStatus.SKIPPED, reason=reason)
            else:
                logger.info("Job %s", job.id)
                outcome = self.run_job(job)
            finished[job.id] = outcome
            result.jobs.append(outcome)
        return result


__all__ = [
    "JobOutcome",
    "JobStatus",
    "PipelineOutcome",
    "PipelineRunner",
    "StepOutcome",
    "StepStatus",
]
