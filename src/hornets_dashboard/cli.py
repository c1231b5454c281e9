"""Command-line interface for the Hornets dashboard.

Usage:
    hornets-dashboard serve --port 8000
    hornets-dashboard roster
    hornets-dashboard stats --season 2024 --source game_logs --output stats.json
"""

import asyncio
import logging
import sys
from pathlib import Path

import click
import msgspec

from .core.config import get_settings
from .core.http import ExternalAPIError
from .providers.balldontlie_nba import BallDontLieNBA
from .services.dashboard import DashboardService

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)


def _client() -> BallDontLieNBA:
    settings = get_settings()
    if not settings.balldontlie_api_key:
        click.echo("ERROR: BALLDONTLIE_API_KEY environment variable not set", err=True)
        sys.exit(1)
    return BallDontLieNBA(
        settings.balldontlie_api_key,
        base_url=settings.balldontlie_base_url,
        requests_per_minute=settings.balldontlie_requests_per_minute,
        timeout=settings.balldontlie_timeout,
    )


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug logging")
def cli(debug: bool):
    """Hornets stats dashboard CLI."""
    if debug:
        logging.getLogger().setLevel(logging.DEBUG)


@cli.command()
@click.option("--host", default=None, help="Bind address (default: API_HOST)")
@click.option("--port", default=None, type=int, help="Port (default: API_PORT)")
@click.option("--reload", is_flag=True, help="Reload on code changes")
def serve(host: str | None, port: int | None, reload: bool):
    """Run the web dashboard."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "hornets_dashboard.api.main:app",
        host=host or settings.api_host,
        port=port or settings.api_port,
        reload=reload,
    )


@cli.command()
def roster():
    """Print the configured team's roster."""
    asyncio.run(_roster())


async def _roster():
    settings = get_settings()
    async with _client() as client:
        service = DashboardService.from_settings(client, settings)
        try:
            players = await service.get_roster()
        except ExternalAPIError as e:
            click.echo(f"FAILED: {e.message}", err=True)
            sys.exit(1)

    for player in players:
        click.echo(f"{player.id:>8}  {player.position or '-':<4} {player.display_name}")


@cli.command()
@click.option("--season", default=None, type=int, help="Season year (default: SEASON)")
@click.option(
    "--source",
    type=click.Choice(["game_logs", "season_averages"]),
    default=None,
    help="Stats source (default: STATS_SOURCE)",
)
@click.option("--output", type=click.Path(dir_okay=False, path_type=Path), default=None,
              help="Write JSON to a file instead of stdout")
def stats(season: int | None, source: str | None, output: Path | None):
    """Build the dashboard payload and print it as JSON."""
    asyncio.run(_stats(season, source, output))


async def _stats(season: int | None, source: str | None, output: Path | None):
    settings = get_settings()
    if source:
        settings = settings.model_copy(update={"stats_source": source})

    async with _client() as client:
        service = DashboardService.from_settings(client, settings)
        try:
            payload = await service.build_dashboard(season)
        except ExternalAPIError as e:
            click.echo(f"FAILED: {e.message}", err=True)
            sys.exit(1)

    data = msgspec.json.format(msgspec.json.encode(payload.to_dict()), indent=2)
    if output:
        output.write_bytes(data)
        click.echo(f"Wrote {len(payload.players)} players to {output}")
    else:
        click.echo(data.decode())


def main():
    cli()


if __name__ == "__main__":
    main()
