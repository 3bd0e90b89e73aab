import click

from alchemist_indexer.cli import cli
from alchemist_indexer.database import SqlAlchemyEntityStore, get_db_session
from alchemist_indexer.database.models import DailyPositionSnapshotTable
from alchemist_indexer.entities import (
    get_or_create_protocol_stats,
    load_looper_data,
    load_position,
)
from alchemist_indexer.functions import calculate_leverage, calculate_ltv


@cli.command("stats")
def stats() -> None:
    """
    Show protocol-wide totals.
    """

    protocol_stats = get_or_create_protocol_stats(SqlAlchemyEntityStore(get_db_session()()))

    click.echo(f"Positions:        {protocol_stats.total_positions}")
    click.echo(f"Looped positions: {protocol_stats.total_looped_positions}")
    click.echo(f"Total collateral: {protocol_stats.total_collateral}")
    click.echo(f"Total debt:       {protocol_stats.total_debt}")
    click.echo(f"Loop volume:      {protocol_stats.total_loop_volume}")
    click.echo(f"Updated at:       {protocol_stats.updated_at}")


@cli.command("position")
@click.argument("token_id", type=int)
def position(token_id: int) -> None:
    """
    Show a position, its loop data and its most recent daily snapshot.
    """

    store = SqlAlchemyEntityStore(get_db_session()())
    if (position := load_position(store, token_id)) is None:
        raise click.ClickException(f"Position {token_id} not found")

    click.echo(f"Position {position.id} ({position.dialect or 'unknown dialect'})")
    click.echo(f"  owner:      {position.owner_id}")
    click.echo(f"  collateral: {position.collateral}")
    click.echo(f"  debt:       {position.debt}")
    click.echo(f"  leverage:   {calculate_leverage(position.collateral, position.debt)}")
    click.echo(f"  LTV:        {calculate_ltv(position.collateral, position.debt)}%")

    if (looper_data := load_looper_data(store, token_id)) is not None:
        click.echo("Loop data")
        click.echo(f"  initial deposit:  {looper_data.initial_deposit}")
        click.echo(f"  initial leverage: {looper_data.initial_leverage}")
        click.echo(f"  loops:            {looper_data.total_loops}")
        click.echo(f"  avg swap rate:    {looper_data.average_swap_rate}")
        click.echo(f"  current multiple: {looper_data.current_multiple}")
        click.echo(f"  peak multiple:    {looper_data.peak_multiple}")

    snapshots: list[DailyPositionSnapshotTable] = position.snapshots
    if snapshots:
        latest = snapshots[-1]
        click.echo(f"Latest snapshot (day {latest.date})")
        click.echo(f"  collateral: {latest.collateral}")
        click.echo(f"  debt:       {latest.debt}")
        click.echo(f"  leverage:   {latest.leverage}")
        if latest.multiple is not None:
            click.echo(f"  multiple:   {latest.multiple}")
