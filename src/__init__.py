"""Catalogue metrics: normalize retail catalogue CSV exports and derive sales metrics."""

__version__ = "0.1.0"
