"""CLI for RLC Wallet - manage an iExec RLC wallet from the terminal."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

app = typer.Typer(
    name="rlc-wallet",
    help="Single-key wallet for ETH and RLC across several Ethereum networks.",
    no_args_is_help=True,
)
console = Console()

_options: dict = {"config": None, "yes": False}


def _version_callback(value: bool):
    if value:
        from importlib.metadata import version
        console.print(f"rlc-wallet {version('rlc-wallet')}")
        raise typer.Exit()


@app.callback()
def main(
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Configuration file (defaults to ./rlc-wallet.yaml when present)",
        envvar="RLC_WALLET_CONFIG",
    ),
    yes: bool = typer.Option(False, "--yes", "-y", help="Answer yes to every confirmation"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        help="Show version and exit",
        callback=_version_callback,
        is_eager=True,
    ),
):
    """Single-key wallet for ETH and RLC across several Ethereum networks."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    _options["config"] = config
    _options["yes"] = yes


def _run(coro):
    """Run an async manager call to completion on a fresh event loop."""
    return asyncio.run(coro)


def _prompt(message: str) -> bool:
    return typer.confirm(f"{message}?", default=False)


def _manager():
    from rlc_wallet.config import load_config
    from rlc_wallet.wallet.manager import WalletManager, always_yes

    settings = load_config(_options["config"])
    return WalletManager(settings, confirm=always_yes if _options["yes"] else _prompt)


def _fail(what: str, exc: Exception) -> None:
    from rlc_wallet.errors import UserAborted

    if isinstance(exc, UserAborted):
        console.print(f"[yellow]{escape(str(exc))}[/yellow]")
        raise typer.Exit(0)
    console.print(f"[red]{what} failed with {escape(str(exc))}[/red]")
    raise typer.Exit(1)


# ------------------------------------------------------------------
# wallet sub-commands
# ------------------------------------------------------------------

wallet_app = typer.Typer(
    name="wallet",
    help="Create, inspect, fund and spend the wallet.",
    no_args_is_help=True,
)
app.add_typer(wallet_app, name="wallet")


@wallet_app.command("create")
def wallet_create():
    """Generate a new key pair into the wallet file."""
    try:
        mgr = _manager()
        wallet = mgr.create()
    except Exception as e:
        _fail("create()", e)

    console.print(Panel(
        f"[bold green]Wallet ready![/bold green]\n\n"
        f"Address: [cyan]{wallet.address}[/cyan]\n"
        f"File:    {mgr.wallet_path}\n\n"
        f"[dim]The same address works on every configured chain.\n"
        f"Keep the wallet file private: it holds your private key.[/dim]",
        title="RLC Wallet",
    ))


@wallet_app.command("show")
def wallet_show():
    """Show the wallet address and its ETH and nRLC balances."""
    from rlc_wallet.wallet.units import format_amount

    try:
        mgr = _manager()
        wallet = mgr.wallet
        console.print(Panel(
            f"Address:    [cyan]{wallet.address}[/cyan]\n"
            f"Public key: [dim]{wallet.public_key_hex}[/dim]",
            title="Wallet",
        ))
        with console.status("Checking balances..."):
            report = _run(mgr.show())
    except Exception as e:
        _fail("show()", e)

    table = Table(title="Balances")
    table.add_column("Chain", style="cyan")
    table.add_column("ETH", justify="right")
    table.add_column("nRLC", justify="right")
    table.add_column("Status", style="dim")
    table.add_column("Explorer", style="dim")

    for entry in report.entries:
        chain = mgr.chain(entry.chain_name)
        errors = [e for e in (entry.native_error, entry.token_error) if e]
        table.add_row(
            entry.chain_name,
            f"{format_amount(entry.native_balance)} {chain.native_symbol}",
            "-" if entry.token_balance is None else format_amount(entry.token_balance),
            f"[red]{'; '.join(errors)}[/red]" if errors else "[green]OK[/green]",
            chain.address_url(wallet.address) if chain.explorer_url else "",
        )
    console.print(table)
    console.print('[dim]Run "rlc-wallet wallet getETH <chain>" to top up your ETH account[/dim]')
    console.print('[dim]Run "rlc-wallet wallet getRLC <chain>" to top up your nRLC account[/dim]')


def _print_faucets(result) -> None:
    for response in result.responses:
        if response.ok:
            body = json.dumps(response.payload, indent=2, default=str)
            console.print(f"- [bold]{response.source_name}[/bold]:\n{body}\n")
        else:
            console.print(f"- [bold]{response.source_name}[/bold]: [red]{response.error}[/red]\n")


@wallet_app.command("getETH")
def wallet_get_eth(
    chain: str = typer.Argument(help="Chain to request ETH on (e.g. ropsten)"),
):
    """Ask the chain's ETH faucets to fund the wallet."""
    try:
        mgr = _manager()
        address = mgr.wallet.address
        with console.status(f"Requesting ETH from {chain} faucets..."):
            result = _run(mgr.get_eth(chain))
    except Exception as e:
        _fail("getETH()", e)

    console.print(f"[green]Faucets responses for {address}:[/green]\n")
    _print_faucets(result)


@wallet_app.command("getRLC")
def wallet_get_rlc(
    chain: str = typer.Argument(help="Chain to request nRLC on (e.g. ropsten)"),
):
    """Ask the RLC faucets to fund the wallet."""
    try:
        mgr = _manager()
        address = mgr.wallet.address
        with console.status(f"Requesting {chain} faucet for nRLC..."):
            result = _run(mgr.get_rlc(chain))
    except Exception as e:
        _fail("getRLC()", e)

    console.print(f"[green]Faucets responses for {address}:[/green]\n")
    _print_faucets(result)


def _print_receipt(mgr, chain_name: str, receipt, summary: str) -> None:
    chain = mgr.chain(chain_name)
    link = chain.tx_url(receipt.transaction_hash) if chain.explorer_url else receipt.transaction_hash
    console.print(Panel(
        f"[bold green]{summary}[/bold green]\n\n"
        f"Tx: [cyan]{receipt.transaction_hash}[/cyan]\n"
        f"Block: {receipt.block_number}  Gas used: {receipt.gas_used}\n"
        f"Explorer: {link}",
        title="Transaction Confirmed",
    ))


@wallet_app.command("sendETH")
def wallet_send_eth(
    chain: str = typer.Argument(help="Chain to send on"),
    amount: str = typer.Argument(help="Amount of ETH to send (e.g. 0.01)"),
    to: Optional[str] = typer.Argument(None, help="Destination name or 0x address"),
):
    """Send ETH. Asks for confirmation before broadcasting."""
    try:
        mgr = _manager()
        receipt = _run(mgr.send_eth(chain, amount, to))
    except Exception as e:
        _fail("sendETH()", e)

    _print_receipt(mgr, chain, receipt, f"{amount} {chain} ETH sent to {to or mgr.settings.default_destination}")


@wallet_app.command("sendRLC")
def wallet_send_rlc(
    chain: str = typer.Argument(help="Chain to send on"),
    amount: str = typer.Argument(help="Amount of nRLC to send, a whole number (1 RLC = 10^9 nRLC)"),
    to: Optional[str] = typer.Argument(None, help="Destination name or 0x address"),
):
    """Send nRLC. Asks for confirmation before broadcasting."""
    try:
        mgr = _manager()
        receipt = _run(mgr.send_rlc(chain, amount, to))
    except Exception as e:
        _fail("sendRLC()", e)

    _print_receipt(mgr, chain, receipt, f"{amount} {chain} nRLC sent to {to or mgr.settings.default_destination}")


@wallet_app.command("sweep")
def wallet_sweep(
    chain: str = typer.Argument(help="Chain to sweep"),
    to: Optional[str] = typer.Argument(None, help="Destination name or 0x address"),
):
    """Send all nRLC, then all ETH but a small reserve, to one destination."""
    from rlc_wallet.wallet.units import format_amount, from_smallest_unit

    try:
        mgr = _manager()
        result = _run(mgr.sweep(chain, to))
    except Exception as e:
        _fail("sweep()", e)

    chain_info = mgr.chain(chain)
    lines = []
    if result.token_receipt is not None:
        lines.append(f"{result.token_amount} nRLC  tx {result.token_receipt.transaction_hash}")
    if result.native_receipt is not None:
        lines.append(
            f"{format_amount(from_smallest_unit(result.native_amount))} {chain_info.native_symbol}  "
            f"tx {result.native_receipt.transaction_hash}"
        )
    if not lines:
        lines.append("[dim]Nothing to sweep.[/dim]")
    console.print(Panel(
        f"[bold green]Wallet swept to {to or mgr.settings.default_destination}[/bold green]\n\n"
        + "\n".join(lines),
        title="Sweep",
    ))


if __name__ == "__main__":
    app()
