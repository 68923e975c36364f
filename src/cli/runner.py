# src/cli/runner.py

"""Headless runners behind the price_watch command line."""

import logging
from pathlib import Path

from rich.console import Console
from rich.table import Table

from src.config.products import load_products
from src.config.settings import Settings
from src.exceptions import ConfigError, PersistenceError
from src.notifications.base import Notifier
from src.notifications.email_notifier import EmailNotifier
from src.notifications.log_notifier import LogNotifier
from src.scrapers.http_fetcher import HttpPageFetcher
from src.services.price_check_orchestrator import (
    PriceCheckOrchestrator,
    RunSummary,
)
from src.storage.history_store import JsonHistoryStore

logger = logging.getLogger("price_watch.cli")

# Status messages go to stderr so stdout only carries the tables
_err = Console(stderr=True)

EXIT_OK = 0
EXIT_FAILURES = 1
EXIT_FATAL = 2


def _print_summary(summary: RunSummary, console: Console) -> None:
    """Render the per-product outcome table."""
    currency = Settings.CURRENCY_SYMBOL
    table = Table(
        title="Price Check",
        show_lines=True,
        title_style="bold cyan",
    )
    table.add_column("#", style="dim", width=4)
    table.add_column("Product", max_width=50)
    table.add_column("Status", justify="center")
    table.add_column("Price", justify="right", style="green")
    table.add_column("Target", justify="right")
    table.add_column("Alert", justify="center")
    table.add_column("Notes", style="dim", overflow="fold")

    for idx, o in enumerate(summary.outcomes, 1):
        if o.succeeded:
            status = "[green]OK[/green]"
            notes = o.notify_error or ""
        else:
            status = "[red]FAILED[/red]"
            notes = f"{o.error_kind}: {o.error}"
        if o.alert_fired:
            alert = (
                "[yellow]not sent[/yellow]"
                if o.notify_error
                else "[bold green]sent[/bold green]"
            )
        else:
            alert = "—"
        table.add_row(
            str(idx),
            o.name,
            status,
            f"{currency}{o.price_text}" if o.price_text else "—",
            f"{currency}{o.target_price}" if o.target_price else "—",
            alert,
            notes,
        )

    console.print(table)


async def run_price_check(
    products_path: Path | None = None,
    history_path: Path | None = None,
    timeout: float | None = None,
    dry_run: bool = False,
    save_snapshots: bool = True,
    console: Console | None = None,
) -> int:
    """Check every configured product and print the outcome table.

    Returns 0 when every product succeeded, 1 when any failed and 2
    when the run could not complete.
    """
    out = console or Console()
    try:
        products = load_products(products_path)
    except ConfigError as exc:
        logger.critical("Invalid product configuration: %s", exc)
        _err.print(f"[red]{exc}[/red]")
        return EXIT_FATAL

    if not products:
        _err.print("[yellow]No products configured.[/yellow]")
        return EXIT_OK

    notifier: Notifier
    if dry_run:
        notifier = LogNotifier()
    else:
        try:
            email = EmailNotifier()
        except ConfigError as exc:
            logger.critical("Invalid e-mail configuration: %s", exc)
            _err.print(f"[red]{exc}[/red]")
            return EXIT_FATAL
        if not email.configured:
            _err.print(
                "[yellow]E-mail not configured; alerts will be "
                "reported but not sent.[/yellow]"
            )
        notifier = email

    orchestrator = PriceCheckOrchestrator(
        fetcher=HttpPageFetcher(save_snapshots=save_snapshots),
        store=JsonHistoryStore(history_path),
        notifier=notifier,
        timeout=timeout,
    )

    _err.print(f"[bold]Checking {len(products)} product(s)...[/bold]")
    try:
        summary = await orchestrator.run(products)
    except PersistenceError as exc:
        logger.critical("Price history unavailable: %s", exc, exc_info=True)
        _err.print(f"[red]Price history error: {exc}[/red]")
        return EXIT_FATAL

    _print_summary(summary, out)
    _err.print(
        f"[green]✓ {len(summary.succeeded)} ok[/green], "
        f"[red]{len(summary.failed)} failed[/red], "
        f"{len(summary.alerts)} alert(s)"
    )
    return EXIT_FAILURES if summary.failed else EXIT_OK


def show_history(
    product_name: str,
    history_path: Path | None = None,
    console: Console | None = None,
) -> int:
    """Print the recorded prices of one product, oldest first."""
    out = console or Console()
    store = JsonHistoryStore(history_path)
    try:
        ledger = store.load()
    except PersistenceError as exc:
        logger.critical("Price history unavailable: %s", exc)
        _err.print(f"[red]Price history error: {exc}[/red]")
        return EXIT_FATAL

    observations = ledger.get(product_name)
    if not observations:
        known = ", ".join(sorted(ledger)) or "none"
        _err.print(f"[yellow]No history for '{product_name}'.[/yellow]")
        _err.print(f"[dim]Tracked products: {known}[/dim]")
        return EXIT_FAILURES

    currency = Settings.CURRENCY_SYMBOL
    table = Table(
        title=f"Price History: {product_name}",
        title_style="bold cyan",
    )
    table.add_column("Recorded (UTC)")
    table.add_column("Price", justify="right", style="green")
    for obs in observations:
        table.add_row(
            obs.timestamp.strftime("%Y-%m-%d %H:%M:%S"),
            f"{currency}{obs.price_text}",
        )
    out.print(table)

    trend = store.trend_summary(ledger, product_name)
    if trend:
        out.print(
            f"[bold]Lowest[/bold] {currency}{trend['min']}  "
            f"[bold]Highest[/bold] {currency}{trend['max']}  "
            f"[bold]Latest[/bold] {currency}{trend['latest']}  "
            f"[dim]({trend['count']} observations)[/dim]"
        )
    return EXIT_OK
