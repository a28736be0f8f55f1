"""A module for Portico's command-line interface."""

from portico.cli.main import app

__all__ = ["app", "main"]


def main() -> None:
    """Entry point for the CLI."""
    app()
