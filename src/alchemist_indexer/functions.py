"""
Numeric helpers shared by the event handlers.

Balances are plain Python integers, matching the unbounded uint256 values emitted on-chain. Ratios
derived from those balances (leverage, loan-to-value, multiple, swap rate) are `Decimal` values
calculated in a fixed-precision context, so results do not depend on the caller's thread-local
decimal context.
"""

import decimal
import functools
from decimal import Decimal

from cchecksum import to_checksum_address
from eth_typing import ChecksumAddress, HexStr
from hexbytes import HexBytes

from alchemist_indexer.constants import RATIO_PRECISION, SECONDS_PER_DAY

BI_ZERO = 0
BI_ONE = 1
BD_ZERO = Decimal(0)
BD_ONE = Decimal(1)
BD_HUNDRED = Decimal(100)

RATIO_CONTEXT = decimal.Context(prec=RATIO_PRECISION, rounding=decimal.ROUND_HALF_EVEN)


@functools.lru_cache(maxsize=512)
def get_checksum_address(address: HexStr | bytes) -> ChecksumAddress:
    return to_checksum_address(address)


def to_big_decimal(value: int) -> Decimal:
    return Decimal(value)


def _divide(numerator: int, denominator: int) -> Decimal:
    return RATIO_CONTEXT.divide(to_big_decimal(numerator), to_big_decimal(denominator))


def calculate_leverage(collateral: int, debt: int) -> Decimal:
    """
    Calculate the leverage of a position as collateral / (collateral - debt).

    Positions with zero or negative equity have no meaningful leverage, and zero is returned.
    """

    if collateral <= debt:
        return BD_ZERO
    return _divide(collateral, collateral - debt)


def calculate_ltv(collateral: int, debt: int) -> Decimal:
    """
    Calculate the loan-to-value of a position, expressed as a percentage.

    Returns zero for a position without collateral.
    """

    if collateral == BI_ZERO:
        return BD_ZERO
    return RATIO_CONTEXT.multiply(_divide(debt, collateral), BD_HUNDRED)


def calculate_multiple(current: int, initial: int) -> Decimal:
    """
    Calculate the ratio of the current collateral to an initial basis.

    Returns zero if the basis is zero.
    """

    if initial == BI_ZERO:
        return BD_ZERO
    return _divide(current, initial)


def calculate_average_swap_rate(total_swapped: int, total_minted: int) -> Decimal:
    if total_minted == BI_ZERO:
        return BD_ZERO
    return _divide(total_swapped, total_minted)


def get_day_id(timestamp: int) -> int:
    """
    Get the UTC day bucket for a unix timestamp.
    """

    return timestamp // SECONDS_PER_DAY


def get_day_start_timestamp(day_id: int) -> int:
    return day_id * SECONDS_PER_DAY


def get_event_id(tx_hash: HexBytes | bytes | str, log_index: int) -> str:
    """
    Build the unique key for a per-log record from its transaction hash and log index.
    """

    return f"{HexBytes(tx_hash).to_0x_hex()}-{log_index}"


def get_snapshot_id(position_id: str, day_id: int) -> str:
    return f"{position_id}-{day_id}"
