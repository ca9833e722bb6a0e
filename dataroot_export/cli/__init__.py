"""Command line interface for the export engine."""

from .main import app, main

__all__ = ["app", "main"]
