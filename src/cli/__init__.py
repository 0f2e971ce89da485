"""Command line interface for the catalogue metrics pipeline."""

from .__main__ import main

__all__ = ["main"]
