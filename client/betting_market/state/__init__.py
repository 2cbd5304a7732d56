from .common import (
    MARKET_ACCOUNT_SIZE,
    MAX_PRICE,
    MIN_PRICE,
    NULL_PUBKEY,
    PAYOUT_SLOTS,
    PRICE_LEVELS,
    MarketResult,
)

from .market import (
    MARKET_LAYOUT_OFFSETS,
    MARKET_RECORD_LEN,
    BettingMarketLayout,
    MarketState,
    Payout,
    decode_market_state,
    encode_market_state,
)
from .oracle_price import (
    PYTH_MAGIC,
    OraclePrice,
)


def account_parser(data):
    if len(data) >= 4 and int.from_bytes(data[:4], byteorder="little") == PYTH_MAGIC:
        return OraclePrice.from_bytes(data)
    return MarketState.from_bytes(data)


__all__ = [
    "MARKET_ACCOUNT_SIZE",
    "MARKET_LAYOUT_OFFSETS",
    "MARKET_RECORD_LEN",
    "MAX_PRICE",
    "MIN_PRICE",
    "NULL_PUBKEY",
    "PAYOUT_SLOTS",
    "PRICE_LEVELS",
    "BettingMarketLayout",
    "MarketResult",
    "MarketState",
    "OraclePrice",
    "Payout",
    "account_parser",
    "decode_market_state",
    "encode_market_state",
]
