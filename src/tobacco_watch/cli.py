"""Click-based CLI for tobacco-watch.

Thin wrapper around library modules. Every operation delegates to the
acquisition coordinator or the price store.
"""

from __future__ import annotations

import asyncio
import json
import logging
import os

import click
from rich.console import Console
from rich.table import Table

console = Console(stderr=True)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _run_async(coro):
    """Run an async coroutine from synchronous Click code."""
    return asyncio.run(coro)


def _load_config(ctx: click.Context):
    """Load config lazily, caching on first call."""
    if "config" not in ctx.obj:
        from tobacco_watch.core import load_config

        ctx.obj["config"] = load_config(config_path=ctx.obj.get("config_path"))
    return ctx.obj["config"]


async def _create_store_async(config):
    """Create and initialize storage from config."""
    from tobacco_watch.storage import create_store

    return await create_store(config.storage)


def _fail(exc: Exception) -> None:
    raise click.ClickException(f"{type(exc).__name__}: {exc}") from exc


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True),
    envvar="TOBACCO_WATCH_CONFIG",
    default=None,
    help="Path to tobacco-watch.yml config file.",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    default=False,
    help="Enable debug logging.",
)
@click.version_option(package_name="tobacco-watch")
@click.pass_context
def cli(ctx: click.Context, config: str | None, verbose: bool) -> None:
    """Tobacco Watch: tobacco prices, weather and farming advice."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config
    ctx.obj["verbose"] = verbose
    ctx.obj["console"] = console
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


# ---------------------------------------------------------------------------
# fetch / preview
# ---------------------------------------------------------------------------


def _output_scraped_table(prices, title: str) -> None:
    """Render freshly acquired prices as a Rich table."""
    table = Table(title=title)
    table.add_column("Region", style="bold")
    table.add_column("Price (Rp/kg)", justify="right")
    table.add_column("Quality")
    table.add_column("Source")

    for p in prices:
        table.add_row(p.region, f"{p.price:,.0f}", p.quality, p.source)

    console.print(table)


@cli.command()
@click.pass_context
def fetch(ctx: click.Context) -> None:
    """Acquire prices through the provider chain and store them."""
    config = _load_config(ctx)

    async def _run():
        from tobacco_watch.acquisition import create_coordinator
        from tobacco_watch.core import AggregateFailureError

        store = await _create_store_async(config)
        try:
            coordinator = create_coordinator(config, store)
            try:
                batch = await coordinator.acquire_all()
            except AggregateFailureError as exc:
                _fail(exc)
            _output_scraped_table(batch, f"Prices from {batch[0].provider}")
            console.print(f"[green]✓[/green] Stored {len(batch)} prices")
        finally:
            await store.close()

    _run_async(_run())


@cli.command()
@click.argument("region")
@click.pass_context
def preview(ctx: click.Context, region: str) -> None:
    """Acquire fresh prices and show the one for REGION."""
    config = _load_config(ctx)

    async def _run():
        from tobacco_watch.acquisition import create_coordinator
        from tobacco_watch.core import TobaccoWatchError

        store = await _create_store_async(config)
        try:
            coordinator = create_coordinator(config, store)
            try:
                price = await coordinator.preview_region(region)
            except TobaccoWatchError as exc:
                _fail(exc)
            _output_scraped_table([price], f"Current price for {price.region}")
        finally:
            await store.close()

    _run_async(_run())


# ---------------------------------------------------------------------------
# prices / latest
# ---------------------------------------------------------------------------


def _output_records_table(records) -> None:
    """Render stored price records as a Rich table."""
    table = Table(title="Stored Prices")
    table.add_column("ID", justify="right")
    table.add_column("Region", style="bold")
    table.add_column("Price", justify="right")
    table.add_column("Unit")
    table.add_column("Source")
    table.add_column("Recorded")

    for r in records:
        table.add_row(
            str(r.id),
            r.region,
            f"{r.price:,.0f}",
            r.unit,
            r.source,
            r.recorded_at.strftime("%Y-%m-%d %H:%M"),
        )

    console.print(table)


def _output_records_json(records) -> None:
    """Write price records as JSON to stdout."""
    output = [r.model_dump(mode="json") for r in records]
    click.echo(json.dumps(output, indent=2, default=str))


@cli.command()
@click.option(
    "--format",
    "-f",
    "output_format",
    type=click.Choice(["table", "json"], case_sensitive=False),
    default="table",
    help="Output format.",
)
@click.option("--limit", "-n", type=int, default=None, help="Show at most N records.")
@click.pass_context
def prices(ctx: click.Context, output_format: str, limit: int | None) -> None:
    """List stored prices, newest first."""
    config = _load_config(ctx)

    async def _run():
        store = await _create_store_async(config)
        try:
            records = await store.all_ordered_by_recency()
        finally:
            await store.close()

        if limit is not None:
            records = records[:limit]
        if output_format == "json":
            _output_records_json(records)
        elif records:
            _output_records_table(records)
        else:
            console.print("[yellow]No prices stored. Run 'fetch' first.[/yellow]")

    _run_async(_run())


@cli.command()
@click.argument("region")
@click.pass_context
def latest(ctx: click.Context, region: str) -> None:
    """Show the latest stored price for REGION (exact name)."""
    config = _load_config(ctx)

    async def _run():
        from tobacco_watch.core import RegionNotFoundError

        store = await _create_store_async(config)
        try:
            try:
                record = await store.latest_by_region(region)
            except RegionNotFoundError as exc:
                _fail(exc)
            _output_records_table([record])
        finally:
            await store.close()

    _run_async(_run())


# ---------------------------------------------------------------------------
# serve
# ---------------------------------------------------------------------------


@cli.command()
@click.option("--host", type=str, default=None, help="Bind address.")
@click.option("--port", "-p", type=int, default=None, help="Port number.")
@click.option("--reload", is_flag=True, default=False, help="Auto-reload on code changes.")
@click.pass_context
def serve(ctx: click.Context, host: str | None, port: int | None, reload: bool) -> None:
    """Start the REST API server."""
    import uvicorn

    config = _load_config(ctx)
    host = host or config.api.host
    port = port or config.api.port

    # The app factory loads its own config; point it at the same file.
    if ctx.obj.get("config_path"):
        os.environ["TOBACCO_WATCH_CONFIG"] = ctx.obj["config_path"]

    console.print(f"Starting tobacco-watch API on [bold]{host}:{port}[/bold]")
    console.print(f"API docs: http://{host}:{port}/docs")

    uvicorn.run(
        "tobacco_watch.api.app:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
    )


# ---------------------------------------------------------------------------
# status
# ---------------------------------------------------------------------------


@cli.command()
@click.pass_context
def status(ctx: click.Context) -> None:
    """Show configuration and storage statistics."""
    async def _run():
        config = _load_config(ctx)
        store = await _create_store_async(config)
        try:
            stats = await store.get_statistics()
        finally:
            await store.close()

        table = Table(title="Tobacco Watch Status")
        table.add_column("Metric", style="bold")
        table.add_column("Value", justify="right")

        table.add_row("Database path", config.storage.sqlite_path)
        table.add_row(
            "Provider chain",
            " → ".join(p.value for p in config.acquisition.providers),
        )
        table.add_row(
            "Weather API key", "set" if config.weather.api_key else "missing"
        )
        table.add_section()
        table.add_row("Price records", str(stats["price_records"]))
        table.add_row("Regions", str(stats["regions"]))
        table.add_row("Last stored", stats["last_created_at"] or "N/A")
        table.add_row("Weather readings", str(stats["weather_records"]))

        console.print(table)

    _run_async(_run())


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main() -> None:
    """Main entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
