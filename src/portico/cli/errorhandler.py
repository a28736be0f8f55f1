"""CLI error handling utilities."""

from collections.abc import Generator
from contextlib import contextmanager

import typer

from portico.bootstrap.exceptions import (
    BootstrapError,
    ManifestNotFoundError,
    PipelineDefinitionError,
    ToolInvocationError,
)
from portico.build.exceptions import BuildError, LayoutNotFoundError, TemplateRenderError
from portico.config.exceptions import ConfigError
from portico.logging_setup import console


SIGNAL_EXIT_BASE = 128


def exit_status(returncode: int) -> int:
    """Map a child's return code to our exit status, shell style.

    A child killed by signal N (negative return code) becomes 128 + N.
    """
    if returncode < 0:
        return SIGNAL_EXIT_BASE + abs(returncode)
    return returncode or 1


@contextmanager
def handle_cli_errors(*, debug: bool = False) -> Generator[None, None, None]:
    """Context manager to handle CLI errors gracefully.

    Args:
        debug: If True, re-raise so the full traceback is shown.

    """
    try:
        yield
    except (KeyboardInterrupt, SystemExit, typer.Exit):
        raise
    except ManifestNotFoundError as e:
        if debug:
            raise
        console.print(f"[bold red]📦 Manifest Missing:[/bold red] {e}")
        raise typer.Exit(1) from e
    except ToolInvocationError as e:
        if debug:
            raise
        console.print(f"[bold red]🔧 Tool Failed:[/bold red] {e}")
        raise typer.Exit(exit_status(e.returncode)) from e
    except PipelineDefinitionError as e:
        if debug:
            raise
        console.print(f"[bold red]🧪 Pipeline Error:[/bold red] {e}")
        raise typer.Exit(1) from e
    except BootstrapError as e:
        if debug:
            raise
        console.print(f"[bold red]🛠️ Bootstrap Error:[/bold red] {e}")
        raise typer.Exit(1) from e
    except (TemplateRenderError, LayoutNotFoundError) as e:
        if debug:
            raise
        console.print(f"[bold red]📝 Template Error:[/bold red] {e}")
        raise typer.Exit(1) from e
    except BuildError as e:
        if debug:
            raise
        console.print(f"[bold red]🏗️ Build Failed:[/bold red] {e}")
        raise typer.Exit(1) from e
    except ConfigError as e:
        if debug:
            raise
        console.print(f"[bold red]⚙️ Configuration Error:[/bold red] {e}")
        raise typer.Exit(1) from e
    except Exception as e:
        if debug:
            console.print_exception(show_locals=False)
            raise typer.Exit(1) from e

        console.print(f"[bold red]💥 An unexpected error occurred:[/bold red] {e}")
        console.print("[dim]Run with [bold]--debug[/bold] for more details.[/dim]")
        raise typer.Exit(1) from e
