"""
Velero-UI Wizards - Interactive terminal drivers.

This module contains the interactive wizard used by the CLI.
"""

from .operation import run_operation_wizard, render_step, render_outcome

__all__ = [
    "run_operation_wizard",
    "render_step",
    "render_outcome",
]
