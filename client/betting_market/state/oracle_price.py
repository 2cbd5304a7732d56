from dataclasses import dataclass
from typing import Tuple

from podite import I32, I64, U8, U16, U32, U64, Enum, PodPathError, pod
from solders.pubkey import Pubkey

import betting_market.utils.pod  # noqa: F401
from betting_market.errors import MalformedAccount
from .common import MarketResult

PYTH_MAGIC = 0xA1B2C3D4

# the program compares the raw aggregate price against strike * 10^9
STRIKE_PRICE_SCALE = 1_000_000_000


@pod
class PriceStatus(Enum[U32]):
    UNKNOWN = 0
    TRADING = 1
    HALTED = 2
    AUCTION = 3


@pod
class Ema:
    val: I64
    numer: I64
    denom: I64


@pod
class PriceInfo:
    price: I64
    conf: U64
    status: PriceStatus
    corp_act: U32
    pub_slot: U64


@pod
class PythPriceHeader:
    """Leading part of a Pyth v2 price account, up to and including the aggregate."""

    magic: U32
    ver: U32
    atype: U32
    size: U32
    ptype: U32
    expo: I32
    num: U32
    num_qt: U32
    last_slot: U64
    valid_slot: U64
    ema_price: Ema
    ema_conf: Ema
    timestamp: I64
    min_pub: U8
    drv2: U8
    drv3: U16
    drv4: U32
    prod: Pubkey
    next: Pubkey
    prev_slot: U64
    prev_price: I64
    prev_conf: U64
    prev_timestamp: I64
    agg: PriceInfo


PYTH_PRICE_HEADER_LEN = PythPriceHeader.calc_max_size()


@dataclass
class OraclePrice:
    price: float
    confidence: float
    valid_slot: int
    raw_price: int
    exponent: int
    status: PriceStatus

    @classmethod
    def from_bytes(cls, data) -> "OraclePrice":
        if len(data) < PYTH_PRICE_HEADER_LEN:
            raise MalformedAccount(
                f"Oracle price account is {len(data)} bytes, expected at least {PYTH_PRICE_HEADER_LEN}"
            )
        try:
            header = PythPriceHeader.from_bytes(
                bytes(data[:PYTH_PRICE_HEADER_LEN])
            )
        except PodPathError as e:
            raise MalformedAccount(f"Failed to decode oracle price account: {e}") from e
        if header.magic != PYTH_MAGIC:
            raise MalformedAccount(f"Not an oracle price account: magic={header.magic:#x}")

        scale = 10 ** header.expo
        return cls(
            price=header.agg.price * scale,
            confidence=header.agg.conf * scale,
            valid_slot=header.valid_slot,
            raw_price=header.agg.price,
            exponent=header.expo,
            status=header.agg.status,
        )

    def as_tuple(self) -> Tuple[float, float, int]:
        return self.price, self.confidence, self.valid_slot

    def implied_result(self, strike_price: int) -> MarketResult:
        if self.raw_price > strike_price * STRIKE_PRICE_SCALE:
            return MarketResult.YES
        return MarketResult.NO
