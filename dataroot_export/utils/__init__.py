"""Utility helpers shared across the export engine."""

from .progress import create_progress_bar, emit_progress, progress_callback

__all__ = ["create_progress_bar", "emit_progress", "progress_callback"]
