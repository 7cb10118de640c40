"""
Command-line interface for the stockboard portfolio dashboard.

Provides commands for:
- holdings: Compute holdings and portfolio summary from trades and quotes
- add-transaction: Validate and record a trade against a portfolio
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import click

from stockboard import __version__
from stockboard.config import (
    ConfigurationError,
    load_portfolio_config,
    load_settings,
    write_config,
)
from stockboard.data import (
    DataLoadError,
    TransactionValidationError,
    load_quotes,
    load_transactions,
    save_holdings,
    save_summary,
    save_transactions,
)
from stockboard.logging import get_logger
from stockboard.portfolio import compute_portfolio, get_top_movers, record_transaction


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


@click.group()
@click.version_option(version=__version__, prog_name="stockboard")
@click.option(
    "--env-file",
    type=click.Path(dir_okay=False),
    default=None,
    help="Path to a .env file with STOCKBOARD_* settings",
)
@click.pass_context
def main(ctx: click.Context, env_file: Optional[str]):
    """
    Stock portfolio dashboard.

    Derives holdings, weights and returns from a portfolio's trade
    history and a snapshot of live quotes.
    """
    try:
        settings = load_settings(env_file)
    except ConfigurationError as e:
        click.echo(f"Error loading settings: {e}", err=True)
        sys.exit(1)

    _setup_logging(settings.log_level)
    ctx.obj = settings


@main.command()
@click.option(
    "--config", "-c",
    required=True,
    type=click.Path(exists=True),
    help="Path to portfolio configuration YAML file",
)
@click.option(
    "--transactions", "-t",
    required=True,
    type=click.Path(exists=True),
    help="Path to transactions CSV file",
)
@click.option(
    "--quotes", "-q",
    required=True,
    type=click.Path(exists=True),
    help="Path to quotes CSV file",
)
@click.option(
    "--output-dir", "-o",
    type=click.Path(),
    default=None,
    help="Output directory. Defaults to config output_dir.",
)
@click.option(
    "--top", "-n",
    type=int,
    default=3,
    help="Number of top gainers/losers to show",
)
@click.pass_obj
def holdings(settings, config: str, transactions: str, quotes: str, output_dir: Optional[str], top: int):
    """
    Compute holdings and portfolio summary.

    Nets each tracked symbol's trades into open shares, values them at
    the quoted prices and rolls them up into portfolio totals.
    """
    try:
        portfolio = load_portfolio_config(config)
    except ConfigurationError as e:
        click.echo(f"Error loading config: {e}", err=True)
        sys.exit(1)

    out_dir = Path(output_dir or portfolio.output_dir or settings.output_dir)
    out_dir.mkdir(parents=True, exist_ok=True)

    logger = get_logger(out_dir / "decision_log.jsonl")
    logger.log_config_loaded(portfolio, config)

    click.echo(f"Loading transactions for {portfolio.portfolio_id}...")
    try:
        txns = load_transactions(transactions, portfolio_id=portfolio.portfolio_id)
    except DataLoadError as e:
        click.echo(f"Error loading transactions: {e}", err=True)
        sys.exit(1)

    click.echo("Loading quotes...")
    try:
        quote_data = load_quotes(quotes, symbols=portfolio.symbols)
    except DataLoadError as e:
        click.echo(f"Error loading quotes: {e}", err=True)
        sys.exit(1)

    missing = [s for s in portfolio.symbols if s not in quote_data]
    if missing:
        click.echo(f"  Warning: no quotes for {', '.join(missing)}; valued at 0", err=True)

    result = compute_portfolio(portfolio, txns, quote_data)
    logger.log_holdings_computed(portfolio.portfolio_id, result)

    holdings_path = out_dir / f"holdings_{portfolio.portfolio_id}.csv"
    save_holdings(result, holdings_path)
    click.echo(f"  Holdings saved: {holdings_path}")

    summary_path = out_dir / f"summary_{portfolio.portfolio_id}.csv"
    save_summary(result, summary_path, portfolio.portfolio_id)
    click.echo(f"  Summary saved: {summary_path}")

    summary = result.summary
    click.echo()
    click.echo(f"Portfolio {portfolio.name}:")
    click.echo(f"  Total Value:        ${summary.total_value:,.2f}")
    click.echo(f"  Initial Investment: ${summary.initial_investment:,.2f}")
    click.echo(f"  All-Time Return:    ${summary.all_time_return:,.2f} ({summary.all_time_return_percent:.2f}%)")
    click.echo(f"  Daily Change:       ${summary.daily_change:,.2f} ({summary.daily_change_percent:.2f}%)")
    click.echo(f"  Holdings:           {len(result.holdings)}")

    if result.holdings:
        click.echo()
        click.echo(f"  {'Symbol':<8}{'Shares':>12}{'Avg Cost':>12}{'Price':>12}{'Value':>14}{'Weight':>9}{'Return':>10}")
        for h in result.holdings:
            click.echo(
                f"  {h.symbol:<8}{h.shares:>12,.4f}{h.avg_cost:>12,.2f}{h.current_price:>12,.2f}"
                f"{h.value:>14,.2f}{h.weight:>8.2f}%{h.return_percent:>9.2f}%"
            )

        gainers, losers = get_top_movers(result.holdings, top_n=top)
        if gainers:
            click.echo()
            click.echo("  Top gainers: " + ", ".join(f"{h.symbol} ({h.return_percent:+.2f}%)" for h in gainers))
        if losers:
            click.echo("  Top losers:  " + ", ".join(f"{h.symbol} ({h.return_percent:+.2f}%)" for h in losers))


@main.command("add-transaction")
@click.option(
    "--config", "-c",
    required=True,
    type=click.Path(exists=True),
    help="Path to portfolio configuration YAML file",
)
@click.option(
    "--transactions", "-t",
    required=True,
    type=click.Path(dir_okay=False),
    help="Path to transactions CSV file (created if missing)",
)
@click.option("--symbol", "-s", required=True, help="Ticker symbol")
@click.option("--quantity", required=True, type=str, help="Number of shares")
@click.option("--price", required=True, type=str, help="Per-share price")
@click.option(
    "--type", "txn_type",
    required=True,
    type=click.Choice(["BUY", "SELL"], case_sensitive=False),
    help="Trade direction",
)
@click.option(
    "--timestamp",
    type=str,
    default=None,
    help="Trade time (ISO 8601). Defaults to now.",
)
@click.option(
    "--output-dir", "-o",
    type=click.Path(),
    default=None,
    help="Directory for the decision log. Defaults to config output_dir.",
)
@click.pass_obj
def add_transaction(
    settings,
    config: str,
    transactions: str,
    symbol: str,
    quantity: str,
    price: str,
    txn_type: str,
    timestamp: Optional[str],
    output_dir: Optional[str],
):
    """
    Record a trade against a portfolio.

    The symbol is added to the portfolio's tracked stocks if needed.
    """
    try:
        portfolio = load_portfolio_config(config)
    except ConfigurationError as e:
        click.echo(f"Error loading config: {e}", err=True)
        sys.exit(1)

    txn_path = Path(transactions)
    existing = []
    if txn_path.exists():
        try:
            existing = load_transactions(txn_path)
        except DataLoadError as e:
            click.echo(f"Error loading transactions: {e}", err=True)
            sys.exit(1)

    record = {
        "symbol": symbol,
        "quantity": quantity,
        "price": price,
        "type": txn_type,
        "timestamp": timestamp,
    }
    try:
        updated, all_txns = record_transaction(portfolio, existing, record)
    except TransactionValidationError as e:
        click.echo(f"Invalid transaction: {e}", err=True)
        sys.exit(1)

    txn = all_txns[-1]
    save_transactions(all_txns, txn_path)
    if updated is not portfolio:
        write_config(updated, config)
        click.echo(f"  Added {txn.symbol} to portfolio {portfolio.portfolio_id}")

    out_dir = Path(output_dir or portfolio.output_dir or settings.output_dir)
    get_logger(out_dir / "decision_log.jsonl").log_transaction_recorded(txn)

    click.echo(
        f"Recorded {txn.type.value} {txn.quantity} {txn.symbol} @ ${txn.price:,.2f} "
        f"({txn.transaction_id})"
    )


if __name__ == "__main__":
    main()
