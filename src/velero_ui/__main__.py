"""
Main entry point for running velero-ui as a module.

Usage:
    python -m velero_ui
    python -m velero_ui run --debug
    python -m velero_ui init-config
"""

from .cli import app

if __name__ == "__main__":
    app()
