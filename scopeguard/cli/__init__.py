"""Command-line interface for scopeguard."""

from .main import ExitCode, app, cli_main

__all__ = [
    'ExitCode',
    'app',
    'cli_main',
]
