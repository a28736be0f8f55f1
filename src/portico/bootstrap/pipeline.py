"""CI/CD pipeline definition (GitHub Actions workflow)."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from portico.bootstrap.exceptions import PipelineDefinitionError
from portico.config.settings import PorticoConfig

logger = logging.getLogger(__name__)

_BRANCH_CONDITION_RE = re.compile(r"""^github\.ref\s*==\s*'refs/heads/(?P<branch>[^']+)'$""")


@dataclass(frozen=True, slots=True)
class Step:
    """A workflow step: either an action (``uses``) or a shell command (``run``)."""

    name: str
    uses: str | None = None
    run: str | None = None
    inputs: dict[str, Any] = field(default_factory=dict)
    continue_on_error: bool = False

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"name": self.name}
        if self.uses:
            data["uses"] = self.uses
        if self.inputs:
            data["with"] = dict(self.inputs)
        if self.run:
            data["run"] = self.run
        if self.continue_on_error:
            data["continue-on-error"] = True
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Step:
        return cls(
            name=str(data.get("name") or data.get("uses") or data.get("run") or "unnamed step"),
            uses=data.get("uses"),
            run=data.get("run"),
            inputs=dict(data.get("with") or {}),
            continue_on_error=bool(data.get("continue-on-error", False)),
        )


@dataclass(frozen=True, slots=True)
class Job:
    """A job; ``branch`` restricts it to runs triggered from that branch."""

    id: str
    steps: tuple[Step, ...]
    needs: tuple[str, ...] = ()
    branch: str | None = None
    runs_on: str = "ubuntu-latest"

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        if self.needs:
            data["needs"] = self.needs[0] if len(self.needs) == 1 else list(self.needs)
        if self.branch:
            data["if"] = f"github.ref == 'refs/heads/{self.branch}'"
        data["runs-on"] = self.runs_on
        data["steps"] = [step.to_dict() for step in self.steps]
        return data


@dataclass(frozen=True, slots=True)
class PipelineDefinition:
    name: str
    jobs: tuple[Job, ...]
    push_branches: tuple[str, ...] = ("main",)
    pull_requests: bool = True

    def job(self, job_id: str) -> Job:
        for job in self.jobs:
            if job.id == job_id:
                return job
        raise KeyError(job_id)

    def to_dict(self) -> dict[str, Any]:
        triggers: dict[str, Any] = {"push": {"branches": list(self.push_branches)}}
        if self.pull_requests:
            triggers["pull_request"] = {}
        return {
            "name": self.name,
            "on": triggers,
            "jobs": {job.id: job.to_dict() for job in self.jobs},
        }

    def to_yaml(self) -> str:
        return yaml.safe_dump(self.to_dict(), sort_keys=False, default_flow_style=False, width=4096)


def _setup_steps(config: PorticoConfig) -> list[Step]:
    settings = config.bootstrap
    node_version: Any = int(settings.node_version) if settings.node_version.isdigit() else settings.node_version
    return [
        Step(name="Checkout", uses="actions/checkout@v4"),
        Step(
            name="Use Node.js",
            uses="actions/setup-node@v4",
            inputs={"node-version": node_version, "cache": settings.package_manager},
        ),
        Step(
            name="Use Python",
            uses="actions/setup-python@v5",
            inputs={"python-version": settings.python_version},
        ),
        Step(name="Install dependencies", run=f"{settings.package_manager} ci"),
        Step(name="Install site builder", run=f"python -m pip install {settings.site_builder_requirement}"),
    ]


def default_pipeline(config: PorticoConfig) -> PipelineDefinition:
    """Build-and-test on every push and pull request; deploy from the main branch."""
    settings = config.bootstrap
    pm = settings.package_manager

    build_and_test = Job(
        id="build-and-test",
        steps=(
            *_setup_steps(config),
            Step(name="Check formatting (Prettier)", run=f"{pm} run format:check"),
            Step(name="Run linters", run=f"{pm} run lint"),
            Step(name="Build site", run=f"{pm} run build"),
            Step(name="Lighthouse CI", run=f"{pm} run lhci", continue_on_error=True),
        ),
    )
    deploy = Job(
        id="deploy",
        needs=(build_and_test.id,),
        branch=settings.main_branch,
        steps=(
            *_setup_steps(config),
            Step(name="Build site", run=f"{pm} run build"),
            Step(
                name="Deploy to GitHub Pages",
                uses=settings.deploy_action,
                inputs={
                    "github_token": "${{ secrets.GITHUB_TOKEN }}",
                    "publish_dir": f"./{config.build.output_dir}",
                },
            ),
        ),
    )
    return PipelineDefinition(name="CI/CD", jobs=(build_and_test, deploy), push_branches=(settings.main_branch,))


def write_pipeline(definition: PipelineDefinition, path: Path) -> Path:
    """Write ``definition`` to ``path``, overwriting any existing file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(definition.to_yaml(), encoding="utf-8")
    logger.info("Wrote pipeline definition to %s", path)
    return path


def _parse_job(path: Path, job_id: str, data: dict[str, Any]) -> Job:
    needs = data.get("needs") or ()
    if isinstance(needs, str):
        needs = (needs,)

    branch = None
    condition = data.get("if")
    if condition:
        match = _BRANCH_CONDITION_RE.match(str(condition).strip())
        if match is None:
            raise PipelineDefinitionError(path, f"job '{job_id}' has an unsupported condition: {condition}")
        branch = match["branch"]

    return Job(
        id=job_id,
        steps=tuple(Step.from_dict(step) for step in data.get("steps") or ()),
        needs=tuple(needs),
        branch=branch,
        runs_on=str(data.get("runs-on", "ubuntu-latest")),
    )


def load_pipeline(path: Path) -> PipelineDefinition:
    """Read a workflow file written by :func:`write_pipeline`."""
    if not path.is_file():
        raise PipelineDefinitionError(path, "file not found (run 'portico bootstrap' first)")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise PipelineDefinitionError(path, str(e)) from e
    if not isinstance(data, dict) or not isinstance(data.get("jobs"), dict):
        raise PipelineDefinitionError(path, "expected a mapping with a 'jobs' section")

    # YAML 1.1 reads a bare `on:` key as boolean True
    triggers = data.get("on", data.get(True)) or {}
    push = (triggers.get("push") or {}) if isinstance(triggers, dict) else {}
    jobs = tuple(_parse_job(path, str(job_id), job or {}) for job_id, job in data["jobs"].items())

    known = {job.id for job in jobs}
    for job in jobs:
        missing = [need for need in job.needs if need not in known]
        if missing:
            raise PipelineDefinitionError(path, f"job '{job.id}' needs unknown job(s): {', '.join(missing)}")

    return PipelineDefinition(
        name=str(data.get("name", path.stem)),
        jobs=jobs,
        push_branches=tuple(push.get("branches") or ()),
        pull_requests=isinstance(triggers, dict) and "pull_request" in triggers,
    )


__all__ = ["Job", "PipelineDefinition", "Step", "default_pipeline", "load_pipeline", "write_pipeline"]
