"""Command-line interface for the Inclusive Hiring core."""

import asyncio
from typing import Dict, List, Optional, Tuple

import typer
from rich.console import Console
from rich.table import Table

from inclusive_hiring.config import settings
from inclusive_hiring.core.errors import MarketplaceError
from inclusive_hiring.core.models import Facet, Job

app = typer.Typer(
    name="ihc",
    help="Inclusive Hiring - accessible job catalog and application lifecycle",
    add_completion=False,
)
console = Console()


@app.command()
def serve(
    host: str = typer.Option(settings.api_host, help="Host to bind to"),
    port: int = typer.Option(settings.api_port, help="Port to bind to"),
    reload: bool = typer.Option(settings.reload, help="Enable auto-reload"),
) -> None:
    """Start the API server."""
    import uvicorn

    console.print(f"Starting Inclusive Hiring API on {host}:{port}")
    uvicorn.run(
        "inclusive_hiring.api.main:app",
        host=host,
        port=port,
        reload=reload,
    )


@app.command()
def config() -> None:
    """Show current configuration."""
    table = Table(title="Inclusive Hiring Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Debug Mode", str(settings.debug))
    table.add_row("Log Level", settings.log_level)
    table.add_row("Gateway Timeout (s)", str(settings.gateway_timeout_seconds))
    table.add_row("Gateway Latency (s)", str(settings.gateway_latency_seconds))
    table.add_row("Seed Demo Data", str(settings.seed_demo_data))
    table.add_row("API Host", settings.api_host)
    table.add_row("API Port", str(settings.api_port))

    console.print(table)


def _jobs_table(title: str, jobs: List[Job]) -> Table:
    table = Table(title=title)
    table.add_column("Title", style="cyan")
    table.add_column("Company")
    table.add_column("Location")
    table.add_column("Facets", style="green")
    table.add_column("Tags")
    for job in jobs:
        facets = ", ".join(facet.value for facet in Facet if job.has_facet(facet))
        table.add_row(job.title, job.company_name, job.location, facets, ", ".join(job.accessibility_tags))
    return table


async def _seeded_service():
    from inclusive_hiring.demo.scenarios import seed_demo_data
    from inclusive_hiring.service import create_service

    service = create_service()
    created = await seed_demo_data(service)
    return service, created


async def _search_demo(text: Optional[str], facets: List[Facet]) -> List[Job]:
    service, _ = await _seeded_service()
    return await service.search_jobs(text, facets)


async def _demo_catalog() -> Tuple[Dict[str, int], List[Job]]:
    service, created = await _seeded_service()
    return created, await service.list_all_jobs()


@app.command()
def seed() -> None:
    """Load the demo marketplace into a fresh store and print its catalog."""
    created, jobs = asyncio.run(_demo_catalog())

    summary = Table(title="Demo Data")
    summary.add_column("Collection", style="cyan")
    summary.add_column("Created", style="green")
    for name, count in created.items():
        summary.add_row(name, str(count))

    console.print(summary)
    console.print(_jobs_table("Demo Catalog", jobs))


@app.command()
def search(
    text: Optional[str] = typer.Argument(None, help="Text to find in title or company"),
    facet: List[Facet] = typer.Option([], "--facet", "-f", help="Required facet (repeatable)"),
) -> None:
    """Search the demo catalog."""
    try:
        jobs = asyncio.run(_search_demo(text, facet))
    except MarketplaceError as e:
        console.print(f"[red]{e.code}[/red]: {e.message}")
        raise typer.Exit(code=1)

    console.print(_jobs_table(f"{len(jobs)} matching job(s)", jobs))


@app.command()
def version() -> None:
    """Show version information."""
    from inclusive_hiring import __version__
    console.print(f"Inclusive Hiring v{__version__}")


def main() -> None:
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
