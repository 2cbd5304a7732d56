from dataclasses import dataclass, field
from typing import List, Sequence

import pandas as pd

from betting_market.state.common import MAX_PRICE

BOOK_DEPTH = 10


@dataclass(frozen=True)
class PriceLevel:
    price: float
    size: int


@dataclass
class OrderBookView:
    """
    Both sides are stored in descending price order: the best bid is the
    first entry of ``bids`` and the best ask is the last entry of ``asks``.
    """

    bids: List[PriceLevel] = field(default_factory=list)
    asks: List[PriceLevel] = field(default_factory=list)
    spread: float = 0.0

    @property
    def best_bid(self):
        return self.bids[0] if self.bids else None

    @property
    def best_ask(self):
        return self.asks[-1] if self.asks else None

    def to_dataframe(self) -> pd.DataFrame:
        rows = [("ask", level.price, level.size) for level in self.asks]
        rows += [("bid", level.price, level.size) for level in self.bids]
        return pd.DataFrame(rows, columns=["Side", "Price", "Qty"])


def _levels(amounts: Sequence[int], complement: bool) -> List[PriceLevel]:
    levels = []
    for index, amount in enumerate(amounts):
        if amount == 0:
            continue
        price = MAX_PRICE - index if complement else index
        levels.append(PriceLevel(price=price / MAX_PRICE, size=amount))
    return levels


def aggregate(
    buy_amounts_for_yes: Sequence[int],
    buy_amounts_for_no: Sequence[int],
    depth: int = BOOK_DEPTH,
) -> OrderBookView:
    # a resting NO buy at p is a YES offer at 100 - p
    bids = sorted(
        _levels(buy_amounts_for_yes, complement=False),
        key=lambda level: level.price,
        reverse=True,
    )[:depth]
    asks = sorted(
        _levels(buy_amounts_for_no, complement=True),
        key=lambda level: level.price,
        reverse=True,
    )
    asks = asks[-depth:] if depth else []

    spread = 0.0
    if bids and asks:
        spread = asks[-1].price - bids[0].price
    return OrderBookView(bids=bids, asks=asks, spread=spread)
