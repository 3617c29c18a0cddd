"""Implementations of the jjhooks settings commands."""
