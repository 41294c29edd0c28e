"""Boundary to the operating system."""

from .process import ProcessError, run

__all__ = ["ProcessError", "run"]
