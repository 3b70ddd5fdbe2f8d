"""CLI commands for ogmiosclient.

One-shot queries (tip, pparams, rewards, utxo, evaluate, submit) go over
HTTP; ``mempool`` needs the duplex WebSocket connection.
"""

import asyncio
from pathlib import Path
from typing import Any, Awaitable, Callable

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ogmiosclient import __version__
from ogmiosclient.cli.shared.logging_utils import configure_console_logging, ensure_rotating_log_file
from ogmiosclient.codec.envelope import RpcResponse
from ogmiosclient.config.access import set_config
from ogmiosclient.config.loader import load_config
from ogmiosclient.config.schema import Config
from ogmiosclient.http_client import OgmiosHttpClient
from ogmiosclient.method.tip import Point
from ogmiosclient.utils.exceptions import OgmiosClientError, RpcCallError
from ogmiosclient.ws.client import OgmiosWsClient

app = typer.Typer(
    name="ogmiosclient",
    help="ogmiosclient - JSON-RPC client for Ogmios",
    no_args_is_help=True,
)

console = Console()


def _http_client(config: Config) -> OgmiosHttpClient:
    return OgmiosHttpClient.from_config(config)


async def _ws_client(config: Config) -> OgmiosWsClient:
    return await OgmiosWsClient.connect(config=config)


def _run(action: Callable[[], Awaitable[Any]]) -> Any:
    try:
        return asyncio.run(action())
    except RpcCallError as e:
        console.print(f"[red]{escape(str(e.error))}[/red]")
        raise typer.Exit(1) from e
    except OgmiosClientError as e:
        console.print(f"[red]Error: {escape(e.message)}[/red]")
        raise typer.Exit(1) from e


async def _http_call(config: Config, call: Callable[[OgmiosHttpClient], Awaitable[RpcResponse]]) -> Any:
    async with _http_client(config) as client:
        response = await call(client)
    return response.unwrap()


def version_callback(value: bool):
    if value:
        console.print(f"ogmiosclient v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    version: bool = typer.Option(
        None, "--version", "-v", callback=version_callback, is_eager=True
    ),
    config_path: Path = typer.Option(None, "--config", "-c", help="Config file (default ~/.ogmiosclient/config.json)"),
    log_level: str = typer.Option(None, "--log-level", help="Console log level (TRACE, DEBUG, INFO, WARNING, ERROR)"),
):
    """ogmiosclient - JSON-RPC client for Ogmios."""
    try:
        config = load_config(config_path)
    except ValueError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(1) from e
    if log_level:
        config = config.model_copy(
            update={"logging": config.logging.model_copy(update={"level": log_level.upper()})}
        )
    configure_console_logging(config.logging.level if log_level else "WARNING")
    if config.logging.file:
        ensure_rotating_log_file(config.logging.file, config.logging.level)
    set_config(config, config_path=config_path)
    ctx.obj = config


@app.command()
def tip(ctx: typer.Context):
    """Show the ledger tip."""
    result = _run(lambda: _http_call(ctx.obj, lambda c: c.query_tip()))
    if isinstance(result, Point):
        console.print(f"slot [bold]{result.slot}[/bold]  id {result.id}")
    else:
        console.print("origin")


@app.command()
def pparams(ctx: typer.Context):
    """Show the protocol parameters used to build transactions."""
    params = _run(lambda: _http_call(ctx.obj, lambda c: c.protocol_params()))
    table = Table(title="Protocol parameters")
    table.add_column("Parameter", style="cyan")
    table.add_column("Value")
    table.add_row("minFeeCoefficient", str(params.min_fee_coefficient))
    table.add_row("minFeeConstant", f"{params.min_fee_constant.lovelace} lovelace")
    table.add_row("minUtxoDepositCoefficient", str(params.min_utxo_deposit_coefficient))
    table.add_row("collateralPercentage", str(params.collateral_percentage))
    prices = params.script_execution_prices
    table.add_row("scriptExecutionPrices", f"memory {prices.memory}, cpu {prices.cpu}")
    ref = params.min_fee_reference_scripts
    table.add_row("minFeeReferenceScripts", f"range {ref.range}, base {ref.base}, multiplier {ref.multiplier}")
    models = params.plutus_cost_models
    for name, model in (("plutus:v1", models.plutus_v1), ("plutus:v2", models.plutus_v2), ("plutus:v3", models.plutus_v3)):
        if model is not None:
            table.add_row(f"costModel {name}", f"{len(model)} entries")
    console.print(table)


@app.command()
def rewards(
    ctx: typer.Context,
    key: list[str] = typer.Option(None, "--key", "-k", help="Stake key hash (repeatable)"),
    script: list[str] = typer.Option(None, "--script", "-s", help="Stake script hash (repeatable)"),
):
    """Show reward account summaries."""
    if not key and not script:
        console.print("[red]Give at least one --key or --script[/red]")
        raise typer.Exit(2)
    summaries = _run(
        lambda: _http_call(ctx.obj, lambda c: c.reward_account_summaries(key or None, script or None))
    )
    table = Table(title="Reward accounts")
    table.add_column("Credential", style="cyan")
    table.add_column("Delegate")
    table.add_column("Rewards", justify="right")
    table.add_column("Deposit", justify="right")
    for credential, summary in summaries.items():
        delegate = summary.delegate.id if summary.delegate else "-"
        table.add_row(credential, delegate, str(summary.rewards.lovelace), str(summary.deposit.lovelace))
    console.print(table)


@app.command()
def utxo(
    ctx: typer.Context,
    address: list[str] = typer.Option(..., "--address", "-a", help="Address (repeatable)"),
):
    """List unspent outputs at the given addresses."""
    utxos = _run(lambda: _http_call(ctx.obj, lambda c: c.utxos_by_addresses(address)))
    table = Table(title=f"{len(utxos)} UTxO(s)")
    table.add_column("Output reference", style="cyan")
    table.add_column("Lovelace", justify="right")
    table.add_column("Assets", justify="right")
    for item in utxos:
        assets = sum(len(names) for names in item.value.assets.values())
        table.add_row(f"{item.transaction.id}#{item.index}", str(item.value.lovelace), str(assets))
    console.print(table)


@app.command()
def evaluate(ctx: typer.Context, cbor_hex: str = typer.Argument(..., help="Hex-encoded transaction CBOR")):
    """Evaluate the execution budget of a transaction's scripts."""
    evaluations = _run(lambda: _http_call(ctx.obj, lambda c: c.evaluate(cbor_hex)))
    table = Table(title="Evaluation")
    table.add_column("Validator", style="cyan")
    table.add_column("Memory", justify="right")
    table.add_column("CPU", justify="right")
    for ev in evaluations:
        table.add_row(f"{ev.validator.purpose.value}:{ev.validator.index}", str(ev.budget.memory), str(ev.budget.cpu))
    console.print(table)


@app.command()
def submit(ctx: typer.Context, cbor_hex: str = typer.Argument(..., help="Hex-encoded transaction CBOR")):
    """Submit a signed transaction."""
    result = _run(lambda: _http_call(ctx.obj, lambda c: c.submit(cbor_hex)))
    console.print(f"[green]✓[/green] Submitted {result.transaction.id}")


@app.command()
def mempool(
    ctx: typer.Context,
    count: int = typer.Option(10, "--count", "-n", min=1, help="Stop after this many transactions"),
    full: bool = typer.Option(False, "--full", help="Fetch whole transactions instead of ids"),
):
    """Acquire a mempool snapshot and list its transactions."""

    async def _walk() -> list[Any]:
        client = await _ws_client(ctx.obj)
        async with client:
            return [tx async for tx in client.mempool_transactions(full=full, limit=count)]

    transactions = _run(_walk)
    if not transactions:
        console.print("[dim]Mempool is empty[/dim]")
        return
    for tx in transactions:
        if full:
            console.print(f"{tx.id}  fee {tx.fee.lovelace}  inputs {len(tx.inputs)}  outputs {len(tx.outputs)}")
        else:
            console.print(tx.id)


if __name__ == "__main__":
    app()
