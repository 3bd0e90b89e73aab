"""
Replay decoded contract events from a JSON Lines file.

Each line holds one decoded log in the format accepted by `ContractEvent.from_dict`. Lines must be
in canonical (block number, log index) order. Large uint256 values should be written as decimal
strings, since JSON integers are limited to 64 bits by the parser.
"""

import pathlib
from collections.abc import Iterable, Iterator

import click
import tqdm
import ujson
from sqlalchemy.orm import Session

from alchemist_indexer.cli import cli
from alchemist_indexer.config import settings
from alchemist_indexer.database import SqlAlchemyEntityStore, get_db_session
from alchemist_indexer.events import ContractEvent
from alchemist_indexer.exceptions import IndexerError, InvalidEventPayload
from alchemist_indexer.indexer import Indexer
from alchemist_indexer.logging import logger


def read_events(lines: Iterable[str]) -> Iterator[ContractEvent]:
    """
    Parse decoded events from JSON lines, skipping blank lines.
    """

    for line_number, line in enumerate(lines, start=1):
        if not line.strip():
            continue
        try:
            data = ujson.loads(line)
        except ujson.JSONDecodeError as exc:
            raise InvalidEventPayload(
                event_name=f"<line {line_number}>", parameter="<json>", reason=str(exc)
            ) from None
        yield ContractEvent.from_dict(data)


def replay_events(
    indexer: Indexer,
    session: Session,
    events: Iterable[ContractEvent],
    commit_every: int = 1,
    progress: tqdm.tqdm | None = None,
) -> int:
    """
    Apply events in order, committing after every `commit_every` events.

    If an event fails, the session is rolled back to the last commit and the exception is re-raised.

    Returns:
        The number of events applied
    """

    processed = 0
    try:
        for event in events:
            indexer.handle(event)
            processed += 1
            if processed % commit_every == 0:
                session.commit()
            if progress is not None:
                progress.update(1)
        session.commit()
    except Exception:
        session.rollback()
        logger.info(f"Rolled back after {processed} events")
        raise

    return processed


@cli.command("replay")
@click.argument(
    "events_file",
    type=click.Path(exists=True, dir_okay=False, path_type=pathlib.Path),
)
@click.option(
    "--dialect",
    "default_dialect",
    default=None,
    help="Dialect for events from contracts missing in the config (defaults to the config value)",
)
@click.option(
    "--commit-every",
    default=1,
    type=click.IntRange(min=1),
    show_default=True,
    help="Number of events per database commit",
)
@click.option(
    "--no-progress-bar",
    "no_progress",
    is_flag=True,
    default=False,
    help="Suppress the progress bar",
)
def replay(
    events_file: pathlib.Path,
    default_dialect: str | None,
    commit_every: int,
    *,
    no_progress: bool,
) -> None:
    """
    Apply decoded events from a JSON Lines file to the database.
    """

    db_session = get_db_session()
    indexer = Indexer(
        store=SqlAlchemyEntityStore(db_session()),
        contracts=settings.contracts,
        default_dialect=default_dialect or settings.default_dialect,
        enforce_ordering=True,
    )

    with (
        events_file.open() as file,
        tqdm.tqdm(
            desc="Replaying events",
            bar_format="{desc}: {n_fmt} events [{elapsed}]",
            leave=False,
            disable=no_progress,
        ) as progress,
    ):
        try:
            processed = replay_events(
                indexer=indexer,
                session=db_session(),
                events=read_events(file),
                commit_every=commit_every,
                progress=progress,
            )
        except IndexerError as exc:
            raise click.ClickException(exc.message or str(exc)) from None

    click.echo(f"Applied {processed} events from {events_file}")
