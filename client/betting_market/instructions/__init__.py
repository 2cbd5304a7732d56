from .common import (
    InstructionCode,
    check_flag,
    check_u64,
)

from .initialize_market import (
    initialize_market_ix,
)

from .offer_trade import (
    TraderAccounts,
    offer_trade_ix,
)

from .payout import (
    payout_ix,
)

from .free_mint import (
    free_mint_ix,
)

from .judge_manually import (
    judge_manually_ix,
)

from .judge_oracle import (
    judge_oracle_ix,
)

from .set_strike_price import (
    set_strike_price_ix,
)

__all__ = [
    "InstructionCode",
    "TraderAccounts",
    "check_flag",
    "check_u64",
    "initialize_market_ix",
    "offer_trade_ix",
    "payout_ix",
    "free_mint_ix",
    "judge_manually_ix",
    "judge_oracle_ix",
    "set_strike_price_ix",
]
