"""
Inbound event types.

The event delivery layer hands over one `ContractEvent` per decoded log: the event name, its
decoded parameters, and the block and transaction metadata. Dialects translate these into the
normalized operations defined here, which are the only inputs the handlers accept.
"""

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from eth_typing import ChecksumAddress
from hexbytes import HexBytes

from alchemist_indexer.exceptions.events import InvalidEventPayload
from alchemist_indexer.functions import get_checksum_address, get_event_id


@dataclass(frozen=True, slots=True)
class EventMetadata:
    """Block and transaction data attached to a log."""

    block_number: int
    block_timestamp: int
    transaction_hash: HexBytes
    log_index: int
    transaction_from: ChecksumAddress
    address: ChecksumAddress | None = None

    @property
    def event_id(self) -> str:
        return get_event_id(self.transaction_hash, self.log_index)

    @property
    def ordering_key(self) -> tuple[int, int]:
        return self.block_number, self.log_index


@dataclass(frozen=True, slots=True)
class ContractEvent:
    """A decoded contract log."""

    name: str
    params: Mapping[str, Any]
    metadata: EventMetadata

    def get_int(self, parameter: str) -> int:
        """
        Get a uint256 parameter. Decimal and 0x-prefixed hex strings are accepted.
        """

        try:
            value = self.params[parameter]
        except KeyError:
            raise InvalidEventPayload(self.name, parameter, "missing") from None

        match value:
            case bool():
                raise InvalidEventPayload(self.name, parameter, "expected an integer, got a bool")
            case int():
                return value
            case str():
                try:
                    return int(value, 16) if value.startswith(("0x", "0X")) else int(value)
                except ValueError:
                    raise InvalidEventPayload(
                        self.name, parameter, f"{value!r} is not an integer"
                    ) from None
            case _:
                raise InvalidEventPayload(
                    self.name, parameter, f"expected an integer, got {type(value).__name__}"
                )

    def get_address(self, parameter: str) -> ChecksumAddress:
        try:
            value = self.params[parameter]
        except KeyError:
            raise InvalidEventPayload(self.name, parameter, "missing") from None

        try:
            return get_checksum_address(value)
        except (TypeError, ValueError) as exc:
            raise InvalidEventPayload(self.name, parameter, str(exc)) from None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ContractEvent":
        """
        Build an event from a JSON-compatible mapping, e.g. one line of a replay file:

        ```
        {
            "event": "Deposit",
            "params": {"sender": "0x...", "tokenId": 1, "amount": "1000", "shares": "1000"},
            "blockNumber": 19000000,
            "blockTimestamp": 1700000000,
            "transactionHash": "0x...",
            "logIndex": 3,
            "transactionFrom": "0x...",
            "address": "0x..."
        }
        ```
        """

        if "event" not in data:
            raise InvalidEventPayload("<unnamed>", "event", "missing")
        name = str(data["event"])

        def get_field(key: str, converter: Callable[[Any], Any]) -> Any:
            try:
                value = data[key]
            except KeyError:
                raise InvalidEventPayload(name, key, "missing") from None
            try:
                return converter(value)
            except (TypeError, ValueError):
                raise InvalidEventPayload(name, key, f"{value!r} is not valid") from None

        metadata = EventMetadata(
            block_number=get_field("blockNumber", int),
            block_timestamp=get_field("blockTimestamp", int),
            transaction_hash=get_field("transactionHash", HexBytes),
            log_index=get_field("logIndex", int),
            transaction_from=get_field("transactionFrom", get_checksum_address),
            address=(
                get_field("address", get_checksum_address)
                if data.get("address") is not None
                else None
            ),
        )

        return cls(name=name, params=dict(data.get("params", {})), metadata=metadata)


@dataclass(frozen=True, slots=True)
class DepositOperation:
    token_id: int
    amount: int
    shares: int
    depositor: ChecksumAddress


@dataclass(frozen=True, slots=True)
class WithdrawOperation:
    token_id: int
    amount: int
    shares: int
    recipient: ChecksumAddress


@dataclass(frozen=True, slots=True)
class BorrowOperation:
    token_id: int
    amount: int
    recipient: ChecksumAddress


@dataclass(frozen=True, slots=True)
class RepayOperation:
    """
    Debt reduction by the position owner or a third party.

    `debt_delta` is the amount of debt removed from the position. It equals `amount` unless the
    dialect reports a separate credit for repayments made in yield tokens.
    """

    token_id: int
    amount: int
    debt_delta: int
    payer: ChecksumAddress
    credit: int | None = None


@dataclass(frozen=True, slots=True)
class ForceRepayOperation:
    """
    Protocol-initiated repayment reporting the position's new absolute debt.
    """

    token_id: int
    amount: int
    new_debt: int
    payer: ChecksumAddress


@dataclass(frozen=True, slots=True)
class LiquidationOperation:
    token_id: int
    collateral_liquidated: int
    debt_repaid: int
    liquidator: ChecksumAddress
    fee_in_yield: int | None = None
    fee_in_underlying: int | None = None


@dataclass(frozen=True, slots=True)
class PositionTransferOperation:
    token_id: int
    from_: ChecksumAddress
    to: ChecksumAddress


@dataclass(frozen=True, slots=True)
class LoopedPositionCreatedOperation:
    token_id: int
    initial_usdc: int
    final_shares: int
    total_borrowed: int
    total_usdc_swapped: int
    loops_executed: int


@dataclass(frozen=True, slots=True)
class LoopExecutedOperation:
    """
    One or more swap-and-redeposit cycles on an existing position.

    Single loops report `loops_executed=1`; batched loops report their count.
    """

    token_id: int
    borrow_amount: int
    usdc_received: int
    shares_deposited: int
    loops_executed: int = 1
    is_batch: bool = False


type Operation = (
    DepositOperation
    | WithdrawOperation
    | BorrowOperation
    | RepayOperation
    | ForceRepayOperation
    | LiquidationOperation
    | PositionTransferOperation
    | LoopedPositionCreatedOperation
    | LoopExecutedOperation
)
