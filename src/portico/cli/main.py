"""Main Typer application for Portico."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.panel import Panel
from rich.table import Table

from portico.bootstrap.ci import JobStatus, PipelineRunner, StepStatus
from portico.bootstrap.pipeline import load_pipeline
from portico.bootstrap.process import CommandRunner
from portico.bootstrap.runner import BootstrapReport, Bootstrapper
from portico.build.config import BuildConfig
from portico.build.server import DEFAULT_HOST, DEFAULT_PORT, serve_site
from portico.build.site import BuildResult, SiteBuilder
from portico.cli.errorhandler import handle_cli_errors
from portico.config.settings import find_portico_config, is_production, load_portico_config
from portico.logging_setup import configure_logging, console
from portico.utils.git import get_current_branch

MAX_OUTPUTS_TO_SHOW = 20
# Never matches a job's branch condition, so deploy-style jobs stay skipped
UNKNOWN_BRANCH = "HEAD"

ProjectDirOption = Annotated[
    Path,
    typer.Option("--project-dir", "-C", help="Project directory; portico.toml is searched for upward from here"),
]

app = typer.Typer(
    name="portico",
    help="Static portfolio site builder with a quality-gates bootstrapper",
    add_completion=False,
)

logger = logging.getLogger(__name__)


@app.callback()
def main(
    ctx: typer.Context,
    *,
    debug: Annotated[bool, typer.Option("--debug", help="Show full tracebacks and debug logs")] = False,
) -> None:
    """Configure logging before any command runs."""
    configure_logging("DEBUG" if debug else None)
    ctx.obj = {"debug": debug}


def _debug(ctx: typer.Context) -> bool:
    return bool((ctx.obj or {}).get("debug", False))


def _display_path(path: Path, root: Path) -> str:
    return str(path.relative_to(root)) if path.is_relative_to(root) else str(path)


def _project_root(project_dir: Path) -> Path:
    """Return the directory holding the nearest ``portico.toml`` at or above ``project_dir``.

    Without one, ``project_dir`` itself is the root and defaults apply.
    """
    config_path = find_portico_config(project_dir)
    if config_path is None:
        return project_dir.resolve()
    return config_path.parent


def _print_build_summary(result: BuildResult, config: BuildConfig) -> None:
    table = Table(
        title=f"📦 Build Output ({len(result.rendered)} rendered, {len(result.copied)} copied)",
        show_header=True,
        header_style="bold magenta",
    )
    table.add_column("Source", style="cyan", no_wrap=True)
    table.add_column("Output", style="green")
    table.add_column("Kind", style="dim")

    for record in result.records[:MAX_OUTPUTS_TO_SHOW]:
        table.add_row(
            _display_path(record.source, config.project_root),
            str(record.output.relative_to(config.output_dir)),
            record.kind.value,
        )
    console.print(table)
    if len(result.records) > MAX_OUTPUTS_TO_SHOW:
        console.print(f"[dim]… and {len(result.records) - MAX_OUTPUTS_TO_SHOW} more[/dim]")
    if config.path_prefix:
        console.print(f"🔗 Path prefix: [cyan]{config.path_prefix}[/cyan]")


def _run_build(project_dir: Path, *, production: bool) -> tuple[BuildResult, BuildConfig]:
    project_root = _project_root(project_dir)
    config = load_portico_config(project_root)
    build_config = BuildConfig.from_settings(config.build, project_root, production=production)
    logger.info(
        "Building %s -> %s (%s)",
        build_config.input_dir,
        build_config.output_dir,
        "production" if production else "development",
    )
    return SiteBuilder(build_config).build(), build_config


@app.command()
def build(
    ctx: typer.Context,
    *,
    project_dir: ProjectDirOption = Path(),
    production: Annotated[
        bool | None,
        typer.Option(
            "--production/--development",
            help="Apply the configured path prefix (default: PORTICO_ENV=production)",
        ),
    ] = None,
) -> None:
    """Render the site into the output directory."""
    with handle_cli_errors(debug=_debug(ctx)):
        mode = is_production() if production is None else production
        result, build_config = _run_build(project_dir, production=mode)
    _print_build_summary(result, build_config)


@app.command()
def serve(
    ctx: typer.Context,
    *,
    project_dir: ProjectDirOption = Path(),
    host: Annotated[str, typer.Option(help="Interface to bind")] = DEFAULT_HOST,
    port: Annotated[int, typer.Option(help="Port to listen on")] = DEFAULT_PORT,
) -> None:
    """Build in development mode and serve the output directory."""
    with handle_cli_errors(debug=_debug(ctx)):
        result, build_config = _run_build(project_dir, production=False)
        console.print(
            f"[green]Built {len(result.records)} file(s).[/green] "
            f"Serving on [cyan]http://{host}:{port}/[/cyan] (Ctrl+C to stop)"
        )
        serve_site(build_config.output_dir, host=host, port=port)


def _print_bootstrap_summary(report: BootstrapReport) -> None:
    root = report.project_root
    written = "\n".join(f"  • {path.relative_to(root)}" for path in report.written)
    added = ", ".join(report.scripts_added) if report.scripts_added else "none (all present)"
    hook_line = ""
    if report.hook is not None:
        how = "written directly" if report.hook.used_fallback else "registered via husky"
        hook_line = f"🪝 Pre-commit hook: {report.hook.path.relative_to(root)} ({how})\n"
    workflow_line = f"🚀 CI/CD workflow: {report.workflow.relative_to(root)}\n" if report.workflow else ""

    console.print(
        Panel(
            f"[bold green]✅ Quality gates are configured.[/bold green]\n\n"
            f"📥 Installed: {', '.join(report.installed)}\n"
            f"📝 Config files:\n{written}\n"
            f"📜 Scripts added: {added}\n"
            f"{hook_line}"
            f"{workflow_line}\n"
            "[bold]Try:[/bold] [cyan]npm run format:check[/cyan], [cyan]npm run lint[/cyan], "
            "[cyan]npm run build[/cyan]\n"
            "Then commit and push to see CI run on GitHub.",
            title="🛠️ Quality Gates Setup",
            border_style="green",
        )
    )


@app.command()
def bootstrap(ctx: typer.Context) -> None:
    """Install and configure formatting, linting, hooks and CI in the current project."""
    with handle_cli_errors(debug=_debug(ctx)):
        project_root = Path.cwd()
        config = load_portico_config(project_root)
        report = Bootstrapper(project_root, config).run()
    _print_bootstrap_summary(report)


_STEP_STYLES = {
    StepStatus.SUCCESS: "green",
    StepStatus.FAILED: "red",
    StepStatus.TOLERATED: "yellow",
    StepStatus.SKIPPED: "dim",
    StepStatus.PLANNED: "blue",
}


@app.command()
def ci(
    ctx: typer.Context,
    *,
    branch: Annotated[
        str | None, typer.Option(help="Branch to evaluate as (default: current git branch)")
    ] = None,
    dry_run: Annotated[bool, typer.Option("--dry-run", help="Show the plan without running commands")] = False,
    project_dir: ProjectDirOption = Path(),
) -> None:
    """Evaluate the CI/CD pipeline definition locally."""
    with handle_cli_errors(debug=_debug(ctx)):
        project_root = _project_root(project_dir)
        config = load_portico_config(project_root)
        definition = load_pipeline(project_root / config.bootstrap.workflow_path)
        target_branch = branch or get_current_branch(project_root)
        if target_branch is None:
            target_branch = UNKNOWN_BRANCH
            logger.warning(
                "Could not determine the current branch; evaluating as '%s' so branch-restricted "
                "jobs are skipped. Pass --branch to choose one.",
                UNKNOWN_BRANCH,
            )
        outcome = PipelineRunner(CommandRunner(project_root), dry_run=dry_run).run(definition, target_branch)

    table = Table(title=f"🧪 {definition.name} on '{outcome.branch}'", header_style="bold magenta")
    table.add_column("Job", style="cyan", no_wrap=True)
    table.add_column("Status")
    table.add_column("Details", style="dim")
    for job in outcome.jobs:
        style = {JobStatus.SUCCESS: "green", JobStatus.FAILED: "red"}.get(job.status, "dim")
        details = job.reason or ", ".join(
            f"[{_STEP_STYLES[step.status]}]{step.step.name}[/]" for step in job.steps
        )
        table.add_row(job.job_id, f"[{style}]{job.status.value}[/]", details)
    console.print(table)

    if not outcome.succeeded:
        raise typer.Exit(1)
