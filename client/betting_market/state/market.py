from dataclasses import dataclass, fields
from typing import Dict, List, Tuple

from podite import BYTES_CATALOG, U8, U64, FixedLenArray, FixedLenBytes, PodPathError, pod
from solders.pubkey import Pubkey

import betting_market.utils.pod  # noqa: F401 (registers Pubkey with podite)
from betting_market.errors import MalformedAccount
from .common import (
    NULL_PUBKEY,
    PAYOUT_SLOTS,
    PRICE_LEVELS,
    MarketResult,
)


@pod
class BettingMarketLayout:
    """
    Byte-exact image of the first 90,800 bytes of a market record.

    Every gap in the record is an explicit reserved field, so the absolute
    offset of each field follows from the sizes declared here and nowhere else.
    """

    is_initialized: U8
    result: MarketResult
    yes_token_mint: Pubkey
    no_token_mint: Pubkey
    usd_token_account: Pubkey
    strike_price: U64
    judge: Pubkey
    reserved_0: FixedLenBytes[862]
    buy_amounts_for_yes: FixedLenArray[U64, PRICE_LEVELS]
    reserved_1: FixedLenBytes[192]
    buy_amounts_for_no: FixedLenArray[U64, PRICE_LEVELS]
    reserved_2: FixedLenBytes[7192]
    # legacy per-price fifo tables, written by the program but never surfaced
    user_accounts_for_price: FixedLenBytes[32320]
    reserved_3: FixedLenBytes[7680]
    payout_in_usd_for_price: FixedLenBytes[8080]
    reserved_4: FixedLenBytes[1920]
    payout_amounts_for_price: FixedLenBytes[8080]
    reserved_5: FixedLenBytes[1920]
    payout_user_accounts: FixedLenArray[Pubkey, PAYOUT_SLOTS]
    reserved_6: FixedLenBytes[6800]
    payout_mints: FixedLenArray[Pubkey, PAYOUT_SLOTS]
    reserved_7: FixedLenBytes[6800]
    payout_amounts: FixedLenArray[U64, PAYOUT_SLOTS]


def layout_offsets(cls=BettingMarketLayout) -> Dict[str, Tuple[int, int]]:
    """Maps each field of a static pod to its (offset, length) in bytes."""
    offsets = {}
    offset = 0
    for f in fields(cls):
        size = BYTES_CATALOG.calc_max_size(cls._get_field_type(f.type))
        offsets[f.name] = (offset, size)
        offset += size
    return offsets


MARKET_LAYOUT_OFFSETS = layout_offsets()
MARKET_RECORD_LEN = BettingMarketLayout.calc_max_size()

_RESERVED_FIELDS = tuple(
    name
    for name in MARKET_LAYOUT_OFFSETS
    if name.startswith("reserved_") or name.endswith("_for_price")
)


@dataclass
class Payout:
    user: Pubkey
    mint: Pubkey
    amount: int


@dataclass
class MarketState:
    initialized: bool
    result: MarketResult
    yes_token_mint: Pubkey
    no_token_mint: Pubkey
    usd_token_account: Pubkey
    strike_price: int
    judge: Pubkey
    buy_amounts_for_yes: List[int]
    buy_amounts_for_no: List[int]
    payout_user_accounts: List[Pubkey]
    payout_mints: List[Pubkey]
    payout_amounts: List[int]

    @property
    def is_settled(self) -> bool:
        return self.result != MarketResult.UNDECIDED

    @classmethod
    def from_layout(cls, layout: BettingMarketLayout) -> "MarketState":
        return cls(
            initialized=bool(layout.is_initialized),
            result=layout.result,
            yes_token_mint=layout.yes_token_mint,
            no_token_mint=layout.no_token_mint,
            usd_token_account=layout.usd_token_account,
            strike_price=layout.strike_price,
            judge=layout.judge,
            buy_amounts_for_yes=list(layout.buy_amounts_for_yes),
            buy_amounts_for_no=list(layout.buy_amounts_for_no),
            payout_user_accounts=list(layout.payout_user_accounts),
            payout_mints=list(layout.payout_mints),
            payout_amounts=list(layout.payout_amounts),
        )

    def to_layout(self) -> BettingMarketLayout:
        reserved = {
            name: bytes(MARKET_LAYOUT_OFFSETS[name][1]) for name in _RESERVED_FIELDS
        }
        return BettingMarketLayout(
            is_initialized=int(self.initialized),
            result=self.result,
            yes_token_mint=self.yes_token_mint,
            no_token_mint=self.no_token_mint,
            usd_token_account=self.usd_token_account,
            strike_price=self.strike_price,
            judge=self.judge,
            buy_amounts_for_yes=self.buy_amounts_for_yes,
            buy_amounts_for_no=self.buy_amounts_for_no,
            payout_user_accounts=self.payout_user_accounts,
            payout_mints=self.payout_mints,
            payout_amounts=self.payout_amounts,
            **reserved,
        )

    @classmethod
    def from_bytes(cls, data) -> "MarketState":
        if len(data) < MARKET_RECORD_LEN:
            raise MalformedAccount(
                f"Market record is {len(data)} bytes, expected at least {MARKET_RECORD_LEN}"
            )
        try:
            layout = BettingMarketLayout.from_bytes(bytes(data[:MARKET_RECORD_LEN]))
        except PodPathError as e:
            raise MalformedAccount(f"Failed to decode market record: {e}") from e
        return cls.from_layout(layout)

    def to_bytes(self, size: int = MARKET_RECORD_LEN) -> bytes:
        raw = BettingMarketLayout.to_bytes(self.to_layout())
        return raw.ljust(size, b"\x00")

    def payouts(self) -> List[Payout]:
        """Non-empty payout slots in slot order."""
        return [
            Payout(user, mint, amount)
            for user, mint, amount in zip(
                self.payout_user_accounts, self.payout_mints, self.payout_amounts
            )
            if user != NULL_PUBKEY
        ]

    def summary(self) -> dict:
        return {
            "is_initialized": self.initialized,
            "result": self.result.get_name(),
            "yes_token_mint": str(self.yes_token_mint),
            "no_token_mint": str(self.no_token_mint),
            "usd_token_account": str(self.usd_token_account),
            "strike_price": self.strike_price,
            "judge": str(self.judge),
        }


def decode_market_state(data) -> MarketState:
    return MarketState.from_bytes(data)


def encode_market_state(state: MarketState, size: int = MARKET_RECORD_LEN) -> bytes:
    return state.to_bytes(size)
