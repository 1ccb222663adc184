"""Command line interface for the inventory service."""

from __future__ import annotations

from typing import Optional

import typer
import uvicorn

from . import reports
from .config import Settings, get_settings
from .database import get_engine, init_database, session_scope
from .exceptions import InventoryError
from .log import configure_logging
from .seed import seed_demo_data
from .workorders import WorkOrderService

app = typer.Typer(help="Manage and run the lot-tracked inventory service.")


def _print_header(title: str) -> None:
    typer.secho(title, bold=True, fg=typer.colors.CYAN)


def _resolve_settings() -> Settings:
    settings = get_settings()
    configure_logging(settings)
    init_database(get_engine())
    return settings


@app.command()
def run(
    host: Optional[str] = typer.Option(None, help="Hostname to bind"),
    port: Optional[int] = typer.Option(None, help="Port to expose"),
    reload: Optional[bool] = typer.Option(None, help="Enable auto-reload"),
    log_level: Optional[str] = typer.Option(None, help="Uvicorn log level"),
) -> None:
    """Start the FastAPI service using Uvicorn."""

    settings = _resolve_settings()

    uvicorn.run(
        "lotledger.app:create_app",
        host=host or settings.host,
        port=port or settings.port,
        reload=settings.reload if reload is None else reload,
        log_level=log_level or settings.log_level,
        factory=True,
    )


@app.command()
def init_db() -> None:
    """Create the database and tables."""

    settings = _resolve_settings()
    typer.echo(f"Database initialised at {settings.database_url}")


@app.command()
def seed() -> None:
    """Load the demo catalog (types, items, Frame-A with its BOM) into an empty database."""

    _resolve_settings()
    with session_scope() as session:
        product = seed_demo_data(session)
        if product is None:
            typer.secho("Database already has item types; nothing seeded.", fg=typer.colors.YELLOW)
            return
        typer.secho(f"Seeded demo data, product {product.code} ({product.name})", fg=typer.colors.GREEN)


@app.command()
def show_paths() -> None:
    """Print out important filesystem paths."""

    settings = get_settings()
    typer.echo(f"Database URL: {settings.database_url}")
    typer.echo(f"Config directory: {settings.database_path.parent}")


@app.command()
def stock() -> None:
    """Print on-hand quantity, average cost and value per item."""

    _resolve_settings()
    with session_scope() as session:
        rows = reports.stock_listing(session)
    if not rows:
        typer.echo("No items found.")
        return
    _print_header("Stock on hand")
    for row in rows:
        typer.echo(
            f"- {row.sku:<14} {row.name:<28} {row.on_hand:>12.3f} {row.unit:<4}"
            f" avg={row.avg_cost:.4f} value={row.stock_value:.2f}"
        )


@app.command()
def complete(code: str = typer.Argument(..., help="Work order code, e.g. WO-ABC234")) -> None:
    """Complete an OPEN work order, issuing its components from stock."""

    _resolve_settings()
    try:
        with session_scope() as session:
            completion = WorkOrderService(session).complete(code)
            typer.secho(
                f"Work order {completion.order.code} is {completion.order.status}",
                fg=typer.colors.GREEN,
            )
            for move in completion.moves:
                typer.echo(f"- item #{move.item_id}: {move.qty:g} ({move.reason})")
    except InventoryError as exc:
        typer.secho(exc.message, fg=typer.colors.RED)
        raise typer.Exit(code=1) from exc


def main() -> None:
    """Entry-point for console scripts."""

    app()


if __name__ == "__main__":  # pragma: no cover
    main()
