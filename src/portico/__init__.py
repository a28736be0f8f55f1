"""Portico: portfolio site builder and quality-gates bootstrapper."""

__version__ = "0.1.0"
__all__ = ["__version__"]
