"""Command line interface for jjhooks."""

from .main import main, run

__all__ = ["main", "run"]
