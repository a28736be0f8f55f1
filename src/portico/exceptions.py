"""Centralized exceptions for the Portico application."""


class PorticoError(Exception):
    """Base exception for all Portico errors."""
