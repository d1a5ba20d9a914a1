"""Allow running as `python -m scopeguard`."""

from .cli.main import app

app()
