from podite import U8, Enum, pod
from solders.pubkey import Pubkey

# bytes allocated for a market record by initialize_market
MARKET_ACCOUNT_SIZE = 100_000

# prices are integer cents on [0, 100], both ends inclusive
MIN_PRICE = 0
MAX_PRICE = 100
PRICE_LEVELS = MAX_PRICE - MIN_PRICE + 1

PAYOUT_SLOTS = 100

NULL_PUBKEY = Pubkey.default()


@pod
class MarketResult(Enum[U8]):
    UNDECIDED = 0
    YES = 1
    NO = 2
