__all__ = (
    "MAX_UINT256",
    "PROTOCOL_STATS_ID",
    "RATIO_PRECISION",
    "SECONDS_PER_DAY",
    "ZERO_ADDRESS",
)

from eth_typing import ChecksumAddress, HexAddress, HexStr

MAX_UINT256 = 2**256 - 1

SECONDS_PER_DAY = 86400

# Significant digits kept by ratio arithmetic (decimal128)
RATIO_PRECISION = 34

# Key of the ProtocolStats singleton
PROTOCOL_STATS_ID = "protocol"

# The checksummed form of the zero address is identical to the lowercase form
ZERO_ADDRESS = ChecksumAddress(HexAddress(HexStr("0x0000000000000000000000000000000000000000")))
