"""
Story API CLI Tool

Usage:
    story-api serve    - Start the API server
    story-api teams    - Show the teams in the token mapping
"""
import sys

import click
from rich.console import Console
from rich.table import Table

from story_api import __version__
from story_api.auth.tokens import TokenMappingError, load_team_tokens
from story_api.config import get_settings

console = Console()


@click.group()
@click.version_option(version=__version__, prog_name="Story API")
def main():
    """Publish and update team-owned story bundles."""


@main.command()
@click.option("--host", default="0.0.0.0", help="Interface to bind")
@click.option("--port", default=8080, help="Port to run server on")
@click.option("--reload", is_flag=True, help="Reload on code changes")
def serve(host, port, reload):
    """Start the API server."""
    import uvicorn

    settings = get_settings()
    console.print(f"[green]Starting Story API on {host}:{port}[/green]")
    console.print(f"Storage: [cyan]{settings.STORAGE_BACKEND.value}[/cyan], root: [cyan]{settings.STORY_ROOT}[/cyan]")
    uvicorn.run("story_api.main:app", host=host, port=port, reload=reload)


@main.command()
def teams():
    """Load the token mapping and list its teams. Tokens are never shown."""
    try:
        tokens = load_team_tokens(get_settings())
    except TokenMappingError as e:
        console.print(f"[red]✗ {e}[/red]")
        sys.exit(1)

    table = Table(title=f"Teams ({len(tokens.teams)})")
    table.add_column("Team", style="cyan")
    for team in tokens.teams:
        table.add_row(team)
    console.print(table)


if __name__ == "__main__":
    main()
