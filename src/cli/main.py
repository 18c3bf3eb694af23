"""CLI commands for InnerTruth."""

import sys
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from cli.config import load_config_model
from cli.logging_config import setup_logging
from db import init_db, set_db_path
from errors import AppError
from llm import LLMError, create_llm_provider
from reflection.store import reap_stale_reflections
from scoring import ScoringEngine, calculate_weekly_summary, get_all_categories
from scoring import store as score_store
from shared_types import PeriodType

console = Console()


def _load_config(ctx: click.Context):
    return ctx.obj["config"]


@click.group()
@click.version_option(version="0.1.0")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.option("--config", "config_path", type=click.Path(dir_okay=False), help="Path to config.yaml")
@click.pass_context
def cli(ctx: click.Context, verbose: bool, config_path: str | None):
    """InnerTruth - category scoring and personality reflections."""
    try:
        config = load_config_model(Path(config_path) if config_path else None)
    except ValueError as e:
        console.print(f"[red]Config error:[/] {e}")
        sys.exit(1)
    setup_logging(json_mode=config.logging.json_output, level="DEBUG" if verbose else config.logging.level)
    if config.paths.db_path:
        set_db_path(config.paths.db_path)
    ctx.obj = {"config": config}


@cli.command()
@click.option("--host", help="Bind address (defaults to config web.host)")
@click.option("--port", type=int, help="Port (defaults to config web.port)")
@click.option("--reload", is_flag=True, help="Auto-reload on code changes")
@click.pass_context
def serve(ctx: click.Context, host: str | None, port: int | None, reload: bool):
    """Run the HTTP API."""
    import uvicorn

    config = _load_config(ctx)
    uvicorn.run(
        "web.app:app",
        host=host or config.web.host,
        port=port or config.web.port,
        reload=reload,
    )


@cli.command("init-db")
def init_db_cmd():
    """Create database tables."""
    init_db()
    console.print("[green]Database ready.[/]")


@cli.command()
def categories():
    """List the scoring categories."""
    table = Table(show_header=True)
    table.add_column("ID", style="cyan")
    table.add_column("Name")
    table.add_column("Tier", style="green")
    table.add_column("Description", style="dim")
    for c in get_all_categories():
        table.add_row(c.id, c.name, str(c.tier), c.description[:60])
    console.print(table)


@cli.command()
@click.argument("user_id")
@click.argument("category_id")
@click.option("--period", type=click.Choice([p.value for p in PeriodType]), default="daily")
@click.option("--lookback-days", type=click.IntRange(1, 30), default=7, help="Days of content to consider")
@click.option("--persist", is_flag=True, help="Store the score for the current period")
@click.pass_context
def score(ctx: click.Context, user_id: str, category_id: str, period: str, lookback_days: int, persist: bool):
    """Score one category for a user."""
    config = _load_config(ctx)
    try:
        llm = create_llm_provider(provider=config.llm.provider, api_key=config.llm.api_key, model=config.llm.model)
    except LLMError as e:
        console.print(f"[red]LLM error:[/] {e}")
        sys.exit(1)

    engine = ScoringEngine(llm, config=config.scoring, temperature=config.llm.temperature)
    try:
        with console.status("Scoring..."):
            if persist:
                result = engine.score_and_persist(user_id, category_id, period, lookback_days)
            else:
                result = engine.score(user_id, category_id, lookback_days)
    except AppError as e:
        console.print(f"[red]Error:[/] {e.message}")
        sys.exit(1)

    console.print(f"\n[bold cyan]{result.score}[/]/100 ([green]{result.confidence_level.value}[/] confidence)")
    console.print(result.reasoning)
    for pattern in result.key_patterns:
        console.print(f"  [dim]-[/] {pattern}")
    if result.dynamic_nudge:
        console.print(f"\n[yellow]Nudge:[/] {result.dynamic_nudge}")


@cli.command()
@click.argument("user_id")
@click.argument("category_id")
@click.option("-n", "--limit", default=14, help="Max scores to show")
def scores(user_id: str, category_id: str, limit: int):
    """Show score history and the weekly summary."""
    rows = score_store.list_scores(user_id, category_id, limit=limit)
    if not rows:
        console.print("[yellow]No scores found.[/]")
        return

    table = Table(show_header=True)
    table.add_column("Period", style="cyan")
    table.add_column("Type", style="green")
    table.add_column("Score", justify="right")
    table.add_column("Delta", justify="right", style="dim")
    table.add_column("Confidence")
    for s in rows:
        delta = "" if s.delta is None else f"{s.delta:+d}"
        table.add_row(s.period_start[:10], s.period_type, str(s.score), delta, s.confidence_level.value)
    console.print(table)

    daily = [s.score for s in reversed(rows) if s.period_type == PeriodType.DAILY.value][-7:]
    summary = calculate_weekly_summary(daily)
    console.print(
        f"\nWeekly: [bold]{summary['weeklyScore']}[/] ({summary['trend']}, delta {summary['delta']:+d})"
    )


@cli.command("reap-stale")
@click.option("--minutes", type=int, help="Age threshold (defaults to config jobs.stale_reflection_minutes)")
@click.pass_context
def reap_stale(ctx: click.Context, minutes: int | None):
    """Fail reflections stuck in pending/processing."""
    config = _load_config(ctx)
    count = reap_stale_reflections(config.jobs.stale_reflection_minutes if minutes is None else minutes)
    console.print(f"[green]Reaped:[/] {count} stale reflection(s)")


if __name__ == "__main__":
    cli()
