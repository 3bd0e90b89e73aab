import pytest
from hexbytes import HexBytes

from alchemist_indexer.events import ContractEvent
from alchemist_indexer.exceptions import InvalidEventPayload
from tests.conftest import ALCHEMIST_V3_ADDRESS, ALICE, EventFactory

TX_HASH = "0x" + "12" * 32


def test_from_dict():
    event = ContractEvent.from_dict(
        {
            "event": "Deposit",
            "params": {"sender": ALICE, "tokenId": 1, "amount": "1000", "shares": "990"},
            "blockNumber": 19000000,
            "blockTimestamp": "1704067200",
            "transactionHash": TX_HASH,
            "logIndex": 3,
            "transactionFrom": ALICE.lower(),
            "address": ALCHEMIST_V3_ADDRESS.lower(),
        }
    )

    assert event.name == "Deposit"
    assert event.get_int("amount") == 1000
    assert event.metadata.block_timestamp == 1704067200
    assert event.metadata.transaction_hash == HexBytes(TX_HASH)
    assert event.metadata.transaction_from == ALICE
    assert event.metadata.address == ALCHEMIST_V3_ADDRESS
    assert event.metadata.event_id == f"{TX_HASH}-3"
    assert event.metadata.ordering_key == (19000000, 3)


def test_from_dict_without_address():
    event = ContractEvent.from_dict(
        {
            "event": "Transfer",
            "blockNumber": 1,
            "blockTimestamp": 1,
            "transactionHash": TX_HASH,
            "logIndex": 0,
            "transactionFrom": ALICE,
        }
    )
    assert event.metadata.address is None
    assert event.params == {}


def test_from_dict_missing_metadata():
    with pytest.raises(InvalidEventPayload) as exc_info:
        ContractEvent.from_dict(
            {
                "event": "Transfer",
                "blockNumber": 1,
                "transactionHash": TX_HASH,
                "logIndex": 0,
                "transactionFrom": ALICE,
            }
        )
    assert exc_info.value.event_name == "Transfer"
    assert exc_info.value.parameter == "blockTimestamp"


@pytest.mark.parametrize(
    ("field", "value"),
    [
        ("blockNumber", "latest"),
        ("blockTimestamp", None),
        ("logIndex", "0xzz"),
        ("transactionHash", "0xzz"),
        ("transactionFrom", "0x1234"),
        ("address", "0x12345"),
    ],
)
def test_from_dict_malformed_metadata(field: str, value: object):
    data = {
        "event": "Transfer",
        "blockNumber": 1,
        "blockTimestamp": 1,
        "transactionHash": TX_HASH,
        "logIndex": 0,
        "transactionFrom": ALICE,
        "address": ALCHEMIST_V3_ADDRESS,
    }
    data[field] = value

    with pytest.raises(InvalidEventPayload) as exc_info:
        ContractEvent.from_dict(data)
    assert exc_info.value.event_name == "Transfer"
    assert exc_info.value.parameter == field


def test_from_dict_missing_event_name():
    with pytest.raises(InvalidEventPayload) as exc_info:
        ContractEvent.from_dict({"blockNumber": 1})
    assert exc_info.value.parameter == "event"


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (0, 0),
        (2**256 - 1, 2**256 - 1),
        (str(2**256 - 1), 2**256 - 1),
        ("0xff", 255),
        ("0XFF", 255),
    ],
)
def test_get_int(make_event: EventFactory, value: int | str, expected: int):
    assert make_event("Deposit", {"amount": value}).get_int("amount") == expected


@pytest.mark.parametrize("value", [True, 1.5, None, "ten", "0xzz", "0x", [1]])
def test_get_int_rejects_non_integers(make_event: EventFactory, value: object):
    with pytest.raises(InvalidEventPayload) as exc_info:
        make_event("Deposit", {"amount": value}).get_int("amount")
    assert exc_info.value.parameter == "amount"


def test_get_missing_parameter(make_event: EventFactory):
    event = make_event("Deposit", {})
    with pytest.raises(InvalidEventPayload, match="missing"):
        event.get_int("amount")
    with pytest.raises(InvalidEventPayload, match="missing"):
        event.get_address("sender")
