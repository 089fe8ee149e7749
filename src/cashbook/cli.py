"""Command line entry point for Cashbook."""

from __future__ import annotations

import asyncio
from datetime import date
from pathlib import Path
from typing import Optional

import click

from .config import BaseConfig
from .context import AppContext, create_app_context
from .errors import EntitlementRequired, InvalidEditState, RecordNotFound
from .logging_config import setup_logging
from .services.formatting import format_currency, format_display_date
from .services.ledger_engine import LedgerEngine


def _period_options(func):
    func = click.option("--search", default="", help="Case-insensitive description filter")(func)
    func = click.option("--year", type=int, default=None, help="Defaults to the current year")(func)
    func = click.option(
        "--month", type=click.IntRange(1, 12), default=None, help="Defaults to the current month"
    )(func)
    return func


def _apply_filters(
    engine: LedgerEngine, month: Optional[int], year: Optional[int], search: str = ""
) -> None:
    engine.set_period(month or engine.filters.month, year or engine.filters.year)
    engine.set_search(search)


def _load(engine: LedgerEngine) -> None:
    if not asyncio.run(engine.reload()):
        raise click.ClickException(engine.error or "Could not load transactions")


def _require_active(app: AppContext) -> None:
    try:
        app.require_active()
    except EntitlementRequired as exc:
        raise click.ClickException(exc.message) from exc


@click.group()
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Record income and expenses, review statements, export reports."""

    config = BaseConfig()
    setup_logging(config)
    try:
        ctx.obj = create_app_context(config)
    except RuntimeError as exc:
        raise click.ClickException(str(exc)) from exc


@cli.command("list")
@_period_options
@click.pass_obj
def list_entries(app: AppContext, month: Optional[int], year: Optional[int], search: str) -> None:
    """Show the statement for a month."""

    engine = app.engine
    _apply_filters(engine, month, year, search)
    _load(engine)
    rows = engine.visible()
    if not rows:
        click.echo("No entries for this period.")
    for tx in rows:
        sign = "+" if tx.kind.sign > 0 else "-"
        click.echo(
            f"{tx.id:>6}  {format_display_date(tx.date, app.config)}  "
            f"{sign} {format_currency(tx.amount, app.config):>14}  {tx.description}"
        )
    click.echo(f"Month balance: {format_currency(engine.scoped_sum(), app.config)}")
    click.echo(f"Total balance: {format_currency(engine.global_sum(), app.config)}")


@cli.command()
@click.option("--month", type=click.IntRange(1, 12), default=None)
@click.option("--year", type=int, default=None)
@click.pass_obj
def balance(app: AppContext, month: Optional[int], year: Optional[int]) -> None:
    """Show month income, expenses and balances."""

    engine = app.engine
    _apply_filters(engine, month, year)
    _load(engine)
    summary = engine.summary()
    click.echo(f"Income:        {format_currency(summary['income'], app.config)}")
    click.echo(f"Expenses:      {format_currency(summary['expenses'], app.config)}")
    click.echo(f"Month balance: {format_currency(engine.scoped_sum(), app.config)}")
    click.echo(f"Total balance: {format_currency(engine.global_sum(), app.config)}")


@cli.command()
@click.argument("description")
@click.argument("amount")
@click.option("--kind", type=click.Choice(["inflow", "outflow"]), default="outflow", show_default=True)
@click.option("--date", "occurred_on", default=None, help="YYYY-MM-DD, defaults to today")
@click.pass_obj
def add(app: AppContext, description: str, amount: str, kind: str, occurred_on: Optional[str]) -> None:
    """Record a new entry."""

    _require_active(app)
    engine = app.engine
    try:
        ok = asyncio.run(
            engine.add_entry(
                description=description,
                amount=amount,
                kind=kind,
                occurred_on=occurred_on or date.today(),
            )
        )
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="--date") from exc
    if not ok:
        raise click.ClickException(engine.error or "Could not save transaction")
    click.echo("Saved.")


@cli.command()
@click.argument("record_id", type=int)
@click.option("--description", default=None)
@click.option("--amount", default=None)
@click.option("--kind", type=click.Choice(["inflow", "outflow"]), default=None)
@click.option("--date", "occurred_on", default=None, help="YYYY-MM-DD")
@click.pass_obj
def edit(
    app: AppContext,
    record_id: int,
    description: Optional[str],
    amount: Optional[str],
    kind: Optional[str],
    occurred_on: Optional[str],
) -> None:
    """Change fields of an existing entry."""

    _require_active(app)
    engine = app.engine
    _load(engine)
    try:
        engine.start_edit(record_id)
        for field, value in (
            ("description", description),
            ("amount", amount),
            ("kind", kind),
            ("date", occurred_on),
        ):
            if value is not None:
                engine.update_draft(field, value)
    except RecordNotFound as exc:
        raise click.ClickException(str(exc)) from exc
    except (InvalidEditState, ValueError) as exc:
        raise click.BadParameter(str(exc)) from exc
    if not asyncio.run(engine.commit_edit(record_id)):
        raise click.ClickException(engine.error or "Could not update transaction")
    click.echo("Updated.")


@cli.command()
@click.argument("record_ids", type=int, nargs=-1, required=True)
@click.pass_obj
def delete(app: AppContext, record_ids: tuple[int, ...]) -> None:
    """Delete one or more entries."""

    _require_active(app)
    engine = app.engine
    _load(engine)
    if len(record_ids) == 1:
        ok = asyncio.run(engine.delete_entry(record_ids[0]))
    else:
        for record_id in record_ids:
            if record_id not in engine.selection.selected:
                engine.toggle_selection(record_id)
        ok = asyncio.run(engine.bulk_delete())
    if not ok:
        raise click.ClickException(engine.error or "Could not delete transactions")
    click.echo(f"Deleted {len(record_ids)} entr{'y' if len(record_ids) == 1 else 'ies'}.")


@cli.command()
@click.option("--format", "fmt", type=click.Choice(["csv", "pdf"]), default="csv", show_default=True)
@click.option("--output", type=click.Path(file_okay=False, path_type=Path), default=None)
@_period_options
@click.pass_obj
def export(
    app: AppContext,
    fmt: str,
    output: Optional[Path],
    month: Optional[int],
    year: Optional[int],
    search: str,
) -> None:
    """Export the month statement as CSV or PDF."""

    engine = app.engine
    _apply_filters(engine, month, year, search)
    _load(engine)
    path = engine.export_csv(output) if fmt == "csv" else engine.export_pdf(output)
    if path is None:
        raise click.ClickException(engine.error or "Export failed")
    click.echo(f"Exported {len(engine.visible())} entries to {path}")


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
