import itertools
import logging
import os
import tempfile
from collections.abc import Callable, Generator
from typing import Any

# Keep the configuration and database created at import out of the user's home directory
os.environ.setdefault("ALCHEMIST_INDEXER_CONFIG_DIR", tempfile.mkdtemp(prefix="alchemist_indexer_"))

import pytest
from hexbytes import HexBytes
from sqlalchemy import create_engine
from sqlalchemy.orm import Session

from alchemist_indexer.context import VerboseConfig
from alchemist_indexer.database.models import Base
from alchemist_indexer.database.store import SqlAlchemyEntityStore
from alchemist_indexer.events import ContractEvent, EventMetadata
from alchemist_indexer.functions import get_checksum_address
from alchemist_indexer.indexer import Indexer
from alchemist_indexer.logging import logger

ALICE = get_checksum_address("0x1111111111111111111111111111111111111111")
BOB = get_checksum_address("0x2222222222222222222222222222222222222222")
LIQUIDATOR = get_checksum_address("0x3333333333333333333333333333333333333333")
ALCHEMIST_V1_ADDRESS = get_checksum_address("0x00000000000000000000000000000000000000a1")
ALCHEMIST_V3_ADDRESS = get_checksum_address("0x00000000000000000000000000000000000000a3")
LOOPER_ADDRESS = get_checksum_address("0x00000000000000000000000000000000000000b1")

# 2024-01-01 00:00:00 UTC
START_TIMESTAMP = 1704067200

type EventFactory = Callable[..., ContractEvent]


@pytest.fixture(autouse=True)
def _reset_verbose_config():
    """
    Before each test, clear the verbose logging toggles
    """
    VerboseConfig.reset()


@pytest.fixture(scope="session", autouse=True)
def _set_indexer_logging():
    """
    Set the logging level to DEBUG for the test run
    """
    logger.setLevel(logging.DEBUG)


@pytest.fixture
def session() -> Generator[Session, None, None]:
    engine = create_engine("sqlite://")
    Base.metadata.create_all(bind=engine)
    with Session(engine) as session:
        yield session
    engine.dispose()


@pytest.fixture
def store(session: Session) -> SqlAlchemyEntityStore:
    return SqlAlchemyEntityStore(session)


@pytest.fixture
def indexer(store: SqlAlchemyEntityStore) -> Indexer:
    return Indexer(
        store=store,
        contracts={
            ALCHEMIST_V1_ADDRESS: "v1",
            ALCHEMIST_V3_ADDRESS: "v3",
            LOOPER_ADDRESS: "looper",
        },
        default_dialect="v3",
        enforce_ordering=True,
    )


@pytest.fixture
def make_event() -> EventFactory:
    """
    Build events with increasing (block, log index) positions. The block number and timestamp
    advance together, one block every 12 seconds, unless given explicitly.
    """

    log_indices = itertools.count()

    def _make_event(
        name: str,
        params: dict[str, Any],
        *,
        address: str | None = ALCHEMIST_V3_ADDRESS,
        block_number: int = 19_000_000,
        timestamp: int | None = None,
        tx_hash: str | None = None,
    ) -> ContractEvent:
        log_index = next(log_indices)
        if timestamp is None:
            timestamp = START_TIMESTAMP + (block_number - 19_000_000) * 12
        if tx_hash is None:
            tx_hash = "0x" + f"{block_number:x}{log_index:04x}".rjust(64, "0")
        return ContractEvent(
            name=name,
            params=params,
            metadata=EventMetadata(
                block_number=block_number,
                block_timestamp=timestamp,
                transaction_hash=HexBytes(tx_hash),
                log_index=log_index,
                transaction_from=ALICE,
                address=get_checksum_address(address) if address is not None else None,
            ),
        )

    return _make_event
