from typing import Annotated

from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import mapped_column

# Positions are keyed by the decimal string of their token ID
PrimaryKeyNaturalId = Annotated[
    str,
    mapped_column(String(78), primary_key=True),
]
PrimaryKeyAddress = Annotated[
    str,
    mapped_column(String(42), primary_key=True),
]
# Event records use "<tx hash>-<log index>", snapshots use "<position id>-<day id>"
PrimaryKeyCompositeId = Annotated[
    str,
    mapped_column(String(96), primary_key=True),
]
ForeignKeyPositionId = Annotated[
    str,
    mapped_column(ForeignKey("positions.id"), index=True),
]
ForeignKeyLooperDataId = Annotated[
    str,
    mapped_column(ForeignKey("looper_position_data.id"), index=True),
]
