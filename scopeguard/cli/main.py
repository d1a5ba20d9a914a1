#!/usr/bin/env python3
"""Main CLI entry point for scopeguard using Typer.

The CLI loads a fetch filter configuration and classifies URIs with it,
which is the quickest way to check a scope setup before starting a crawl.
"""

import json
import logging
from enum import IntEnum
from pathlib import Path
from typing import List, Optional

import typer
from typing_extensions import Annotated

from .. import __version__
from ..config import ConfigLoadError, load_filter_config, save_default_config
from ..filters import DefaultFetchFilter, create_fetch_filter_from_config
from ..models import FetchFilterConfig, FetchStatus
from ..utils import InvalidPatternError


app = typer.Typer(
    name="scopeguard",
    help="scopeguard - URI admission control for security-testing crawlers",
    add_completion=False
)


class ExitCode(IntEnum):
    """CLI exit codes for scripting and CI use."""
    SUCCESS = 0           # Every URI checked is VALID, or rejections were not requested to fail
    REJECTED = 1          # At least one URI was not VALID and --fail-on-reject was given
    CONFIG_ERROR = 3      # Configuration or setup error


STATUS_SYMBOLS = {
    FetchStatus.VALID: "✅",
    FetchStatus.OUT_OF_SCOPE: "🚫",
    FetchStatus.OUT_OF_CONTEXT: "🚫",
    FetchStatus.ILLEGAL_PROTOCOL: "⛔",
    FetchStatus.USER_RULES: "✋",
}


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S"
    )


def _build_filter(config_file: Optional[Path], env: Optional[str]) -> DefaultFetchFilter:
    """Load configuration and build a sealed filter, exiting on configuration errors."""
    try:
        if config_file is None:
            config = FetchFilterConfig()
        else:
            config = load_filter_config(config_file, environment=env)
        return create_fetch_filter_from_config(config)
    except (ConfigLoadError, InvalidPatternError) as e:
        typer.echo(f"❌ Configuration error: {e}", err=True)
        raise typer.Exit(code=ExitCode.CONFIG_ERROR.value)


def _read_uri_file(path: Path) -> List[str]:
    """Read URIs one per line, skipping blank lines and # comments."""
    uris = []
    with open(path, 'r') as f:
        for line in f:
            line = line.strip()
            if line and not line.startswith('#'):
                uris.append(line)
    return uris


@app.callback()
def main():
    """
    scopeguard - decide which discovered URIs a crawler may fetch.
    """
    pass


@app.command(name="version")
def show_version():
    """Show version information."""
    typer.echo(f"scopeguard v{__version__}")


@app.command()
def check(
    uris: Annotated[
        Optional[List[str]],
        typer.Argument(help="URIs to classify")
    ] = None,

    config_file: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Path to fetch filter YAML configuration")
    ] = None,

    env: Annotated[
        Optional[str],
        typer.Option("--env", "-e", help="Environment overrides to apply from the config file")
    ] = None,

    input_file: Annotated[
        Optional[Path],
        typer.Option("--input", "-i", help="File with one URI per line")
    ] = None,

    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output results as JSON")
    ] = False,

    fail_on_reject: Annotated[
        bool,
        typer.Option("--fail-on-reject", help="Exit with code 1 if any URI is not VALID")
    ] = False,

    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Verbose logging")
    ] = False,
):
    """
    Classify URIs with the configured fetch filter.

    Examples:

        scopeguard check --config scope.yaml https://example.com/login

        scopeguard check --config scope.yaml --env staging --input urls.txt --json
    """
    _configure_logging(verbose)

    all_uris = list(uris or [])
    if input_file is not None:
        if not input_file.exists():
            typer.echo(f"❌ Input file not found: {input_file}", err=True)
            raise typer.Exit(code=ExitCode.CONFIG_ERROR.value)
        all_uris.extend(_read_uri_file(input_file))

    if not all_uris:
        typer.echo("❌ No URIs specified. Provide URIs as arguments or use --input", err=True)
        raise typer.Exit(code=ExitCode.CONFIG_ERROR.value)

    fetch_filter = _build_filter(config_file, env)
    decisions = [fetch_filter.explain(uri) for uri in all_uris]

    if json_output:
        typer.echo(json.dumps([d.model_dump(mode="json") for d in decisions], indent=2))
    else:
        for decision in decisions:
            symbol = STATUS_SYMBOLS[decision.status]
            typer.echo(f"{symbol} {decision.status.value:<16} {decision.uri}")

    if fail_on_reject and any(not d.is_valid for d in decisions):
        raise typer.Exit(code=ExitCode.REJECTED.value)


@app.command()
def explain(
    uri: Annotated[
        str,
        typer.Argument(help="URI to explain")
    ],

    config_file: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Path to fetch filter YAML configuration")
    ] = None,

    env: Annotated[
        Optional[str],
        typer.Option("--env", "-e", help="Environment overrides to apply from the config file")
    ] = None,
):
    """Show which rule decided the verdict for a URI."""
    fetch_filter = _build_filter(config_file, env)
    decision = fetch_filter.explain(uri)

    typer.echo(f"URI:      {decision.uri}")
    typer.echo(f"Host:     {decision.host or '-'}")
    typer.echo(f"Status:   {decision.status.value}")
    typer.echo(f"Reason:   {decision.reason.value}")
    typer.echo(f"Rule:     {decision.matched_rule or '-'}")


@app.command(name="init-config")
def init_config(
    output: Annotated[
        Path,
        typer.Argument(help="Where to write the default configuration")
    ],

    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Overwrite an existing file")
    ] = False,
):
    """Write a default fetch filter configuration file."""
    if output.exists() and not force:
        typer.echo(f"❌ {output} already exists (use --force to overwrite)", err=True)
        raise typer.Exit(code=ExitCode.CONFIG_ERROR.value)

    try:
        save_default_config(output)
    except ConfigLoadError as e:
        typer.echo(f"❌ {e}", err=True)
        raise typer.Exit(code=ExitCode.CONFIG_ERROR.value)

    typer.echo(f"✅ Wrote default configuration to {output}")


def cli_main():
    """Entry point for console script."""
    app()


if __name__ == "__main__":
    app()
