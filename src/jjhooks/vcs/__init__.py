"""Version-control adapters."""

from .jj import EvologEntry, JJClient, JJResult

__all__ = ["EvologEntry", "JJClient", "JJResult"]
