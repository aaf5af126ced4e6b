"""
Command-line diagnostics for dt-managed.
"""

from __future__ import annotations

import json
import logging
import sys

import click
import httpx

from dt_managed import __version__
from dt_managed.config import ConfigError, get_config
from dt_managed.o11y.client import ManagedClient

logger = logging.getLogger(__name__)


def _setup_logging(debug: bool) -> None:
    if debug:
        logging.basicConfig(level=logging.DEBUG)
        return
    try:
        level = get_config().log_level
    except ConfigError:
        level = "INFO"
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO))


@click.group()
@click.version_option(version=__version__)
def main():
    """dt-managed - client for a managed observability environment."""
    pass


@main.command()
@click.option("--debug", is_flag=True, help="Enable debug logging")
def config(debug):
    """Show current configuration."""
    _setup_logging(debug)

    try:
        cfg = get_config()
    except ConfigError as e:
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(1)

    click.echo("dt-managed Configuration")
    click.echo("=" * 40)
    click.echo(f"Environment ID: {cfg.environment_id}")
    click.echo(f"API URL: {cfg.api_url}")
    click.echo(f"Dashboard URL: {cfg.dashboard_url}")
    click.echo(f"API Token: {cfg.masked_token()}")
    click.echo(f"Log Level: {cfg.log_level}")
    click.echo(f"Tracing: {'Enabled' if cfg.tracing_enabled else 'Disabled'}")


@main.command()
@click.option("--output", "-o", default="text", type=click.Choice(["text", "json"]))
@click.option("--debug", is_flag=True, help="Enable debug logging")
def status(output, debug):
    """Check connectivity and cluster version."""
    _setup_logging(debug)

    try:
        client = ManagedClient.from_config(get_config())
    except ConfigError as e:
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(1)

    with client:
        connected = client.validate_connection()
        version = None
        supported = None
        if connected:
            try:
                version = client.get_cluster_version().get("version")
                supported = client.validate_minimum_version(version or "")
            except httpx.HTTPError as e:
                logger.debug(f"Cluster version unavailable: {e}")

    if output == "json":
        click.echo(json.dumps({
            "url": client.base_url,
            "connected": connected,
            "version": version,
            "supported": supported,
            "minimum_version": ManagedClient.MINIMUM_VERSION,
        }, indent=2))
    else:
        click.echo("dt-managed Status")
        click.echo("=" * 40)
        click.echo(f"Environment: {client.base_url}")
        click.echo(f"  Connection: {'✓ OK' if connected else '✗ Failed'}")
        if version:
            marker = "✓" if supported else "✗"
            click.echo(f"  Version: {marker} {version} (minimum {ManagedClient.MINIMUM_VERSION})")
        else:
            click.echo("  Version: ○ Not available")

    if not connected:
        sys.exit(1)


if __name__ == "__main__":
    main()
