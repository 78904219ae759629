"""CLI interface for mdxserve.

Command-line tool for serving an MDX documentation directory.
"""

import logging
import sys
from pathlib import Path

import click

from mdxserve.config import CliSettings, Config


@click.group()
def cli() -> None:
    """mdxserve - serve MDX documentation with index.html fallback."""


@cli.command()
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="Path to configuration file (default: auto-discover mdxserve.toml)",
)
@click.option(
    "--root",
    "-r",
    "root_dir",
    type=click.Path(exists=True, path_type=Path, file_okay=False),
    default=None,
    help="Documentation root directory (overrides config)",
)
@click.option(
    "--host",
    default=None,
    help="Host to bind to (overrides config)",
)
@click.option(
    "--port",
    "-p",
    type=int,
    default=None,
    help="Port to bind to (overrides PORT and config, default: 3000)",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose output (log every path resolution)",
)
def serve(
    config_path: Path | None,
    root_dir: Path | None,
    host: str | None,
    port: int | None,
    verbose: bool,
) -> None:
    """Start the documentation server."""
    from mdxserve.server import run_server

    cli_settings = CliSettings(host=host, port=port, root_dir=root_dir)
    try:
        config = Config.load(config_path, cli_settings)
    except (FileNotFoundError, ValueError) as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        sys.exit(1)

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    click.echo(f"Starting server on {config.server.host}:{config.server.port}")
    click.echo(f"Root directory: {config.docs.root_dir}")
    click.echo(f"Fallback: {config.docs.fallback}")

    run_server(config)


if __name__ == "__main__":
    cli()
