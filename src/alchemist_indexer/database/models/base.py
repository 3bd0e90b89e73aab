from decimal import Decimal
from typing import Annotated, ClassVar

from sqlalchemy import Dialect, String, Text
from sqlalchemy.orm import DeclarativeBase, mapped_column
from sqlalchemy.types import TypeDecorator


class IntMappedToString(TypeDecorator[int]):
    """
    EVM integers can be up to 32 bytes, which exceeds the usual 8 byte limit for most SQL backends.
    Map these values to a 78 character VARCHAR which can hold a string representation of all
    possible values.

    Running balances are updated by signed deltas and are never clamped, so the extra character for
    a leading minus sign is included.
    """

    cache_ok = True
    impl = String(79)

    def process_bind_param(
        self,
        value: int | None,
        dialect: Dialect,  # noqa: ARG002
    ) -> str | None:
        """
        Perform the Python type -> DB type conversion.
        """

        return None if value is None else str(value)

    def process_result_value(
        self,
        value: str | None,
        dialect: Dialect,  # noqa: ARG002
    ) -> int | None:
        """
        Perform the DB type -> Python type conversion.
        """

        return None if value is None else int(value)


class DecimalMappedToString(TypeDecorator[Decimal]):
    """
    Ratios are exact decimals with more significant digits than a SQL float can hold. Store the
    canonical string representation so values survive a round trip unchanged.
    """

    cache_ok = True
    impl = Text

    def process_bind_param(
        self,
        value: Decimal | None,
        dialect: Dialect,  # noqa: ARG002
    ) -> str | None:
        return None if value is None else str(value)

    def process_result_value(
        self,
        value: str | None,
        dialect: Dialect,  # noqa: ARG002
    ) -> Decimal | None:
        return None if value is None else Decimal(value)


Address = Annotated[str, mapped_column(String(42))]
BigInteger = Annotated[int, IntMappedToString]
BigDecimal = Annotated[Decimal, DecimalMappedToString]
TransactionHash = Annotated[str, mapped_column(String(66))]


class Base(DeclarativeBase):
    type_annotation_map: ClassVar = {
        # keys must be Python types (native or Annotated)
        # values must be SQLAlchemy types
        BigInteger: IntMappedToString,
        BigDecimal: DecimalMappedToString,
        str: Text,
    }
