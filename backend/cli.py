"""
Catalog service CLI.

Command-line interface for running and operating the catalog service.
"""

import asyncio
import json
import sys
import time

import typer
from rich.console import Console
from rich.table import Table

app = typer.Typer(
    name="catalog",
    help="Restaurant catalog service CLI",
    add_completion=False,
)
console = Console()


# =============================================================================
# Service Commands
# =============================================================================

@app.command()
def serve():
    """Run the command consumer and the health probe."""
    from catalog_service.main import main

    main()


@app.command()
def check_config():
    """Validate the current configuration for production use."""
    from shared.config.settings import settings

    table = Table(title="Catalog Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Environment", settings.environment)
    table.add_row("Database", settings.database_url.split("@")[-1])
    table.add_row("Redis", settings.redis_url.split("@")[-1])
    table.add_row("Command stream", settings.command_stream)
    table.add_row("Consumer group", settings.consumer_group)
    table.add_row("Max concurrent commands", str(settings.max_concurrent_commands))
    table.add_row("Health port", str(settings.health_port))
    console.print(table)

    errors = settings.validate_production_config()
    if errors:
        for error in errors:
            console.print(f"[red]✗ {error}[/red]")
        raise typer.Exit(1)
    console.print("[green]✓ Configuration is production-ready[/green]")


# =============================================================================
# Database Commands
# =============================================================================

@app.command()
def db_init():
    """Create all catalog tables."""
    from catalog_service.models import Base
    from shared.infrastructure.db import engine

    console.print("[blue]Creating catalog tables[/blue]")
    try:
        Base.metadata.create_all(bind=engine)
    except Exception as e:
        console.print(f"[red]✗ Table creation failed: {e}[/red]")
        raise typer.Exit(1)
    console.print(f"[green]✓ {len(Base.metadata.tables)} tables created/verified[/green]")


# =============================================================================
# Command Bus
# =============================================================================

@app.command()
def call(
    pattern: str = typer.Argument(..., help="Command pattern, e.g. product.find-one"),
    data: str = typer.Argument("null", help="JSON payload"),
    timeout: float = typer.Option(5.0, "--timeout", "-t", help="Seconds to wait for the reply"),
):
    """Send a command over the bus and print the reply."""
    try:
        payload = json.loads(data)
    except json.JSONDecodeError:
        # A bare id is the most common payload
        payload = data

    async def _call():
        from shared.infrastructure.events import get_redis_pool, close_redis_pool
        from shared.infrastructure.messaging import CommandClient
        from shared.utils.exceptions import RpcError

        client = CommandClient(await get_redis_pool())
        try:
            response = await client.send(pattern, payload, timeout=timeout)
            console.print_json(json.dumps(response, default=str))
        except RpcError as e:
            console.print(f"[red]✗ {e.status}: {e.message}[/red]")
            raise typer.Exit(1)
        except TimeoutError as e:
            console.print(f"[yellow]✗ {e}[/yellow]")
            raise typer.Exit(2)
        finally:
            await close_redis_pool()

    asyncio.run(_call())


@app.command()
def stream_stats():
    """Show command stream and consumer group statistics."""

    async def _stats():
        from shared.config.settings import settings
        from shared.infrastructure.events import get_redis_pool, close_redis_pool

        redis = await get_redis_pool()
        try:
            length = await redis.xlen(settings.command_stream)
            groups = await redis.xinfo_groups(settings.command_stream)
        finally:
            await close_redis_pool()

        table = Table(title=f"Stream '{settings.command_stream}'")
        table.add_column("Group", style="cyan")
        table.add_column("Consumers", style="green")
        table.add_column("Pending", style="yellow")
        table.add_column("Last delivered", style="magenta")

        for group in groups:
            table.add_row(
                str(group.get("name")),
                str(group.get("consumers")),
                str(group.get("pending")),
                str(group.get("last-delivered-id")),
            )

        console.print(f"Entries in stream: {length}")
        console.print(table)

    asyncio.run(_stats())


# =============================================================================
# Health Commands
# =============================================================================

@app.command()
def health(
    url: str = typer.Option(None, help="Health probe base URL"),
):
    """Check service and dependency health."""
    import httpx
    from shared.config.settings import settings

    base_url = url or f"http://localhost:{settings.health_port}"

    table = Table(title="Catalog Health")
    table.add_column("Check", style="cyan")
    table.add_column("Status", style="green")
    table.add_column("Response Time", style="yellow")

    for name, path in (("Liveness", "/health"), ("Readiness", "/health/ready")):
        start = time.perf_counter()
        try:
            response = httpx.get(f"{base_url}{path}", timeout=5.0)
        except httpx.HTTPError as e:
            table.add_row(name, f"✗ {type(e).__name__}", "-")
            continue
        elapsed = (time.perf_counter() - start) * 1000
        if response.status_code == 200:
            table.add_row(name, "✓ Healthy", f"{elapsed:.0f}ms")
        else:
            table.add_row(name, f"✗ Status {response.status_code}", f"{elapsed:.0f}ms")

    console.print(table)


@app.command()
def version():
    """Show version information."""
    from importlib.metadata import PackageNotFoundError, version as package_version

    try:
        service_version = package_version("catalog-service")
    except PackageNotFoundError:
        service_version = "unknown"

    table = Table(title="Catalog Version")
    table.add_column("Component", style="cyan")
    table.add_column("Version", style="green")

    table.add_row("Service", service_version)
    table.add_row("Python", sys.version.split()[0])

    console.print(table)


if __name__ == "__main__":
    app()
