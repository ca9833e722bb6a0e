"""
Export target engine delivering files and row data into a writable dataroot.

Destinations are resolved from per-job export settings that control naming
(timestamp suffixes), collisions (overwrite or skip) and pre-overwrite
backups.
"""

__all__ = [
    "cli",
    "config",
    "errors",
    "models",
    "services",
    "utils",
]
