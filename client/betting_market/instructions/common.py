from podite import U8, Enum, pod
from solders.instruction import AccountMeta
from solders.pubkey import Pubkey

from betting_market.errors import InvalidArgument

U64_MAX = 2**64 - 1


@pod
class InstructionCode(Enum[U8]):
    INITIALIZE_MARKET = 2
    OFFER_TRADE = 3
    PAYOUT = 4
    FREE_MINT = 5
    JUDGE_MANUALLY = 6
    JUDGE_ORACLE = 7
    SET_STRIKE_PRICE = 8


def check_u64(name: str, value) -> int:
    if value is None:
        raise InvalidArgument(f"{name} is required")
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidArgument(f"{name} must be an integer, found {type(value).__name__}")
    if not 0 <= value <= U64_MAX:
        raise InvalidArgument(f"{name}={value} does not fit in a u64")
    return value


def check_flag(name: str, value) -> bool:
    if value is None:
        raise InvalidArgument(f"{name} is required")
    if not isinstance(value, bool) and value not in (0, 1):
        raise InvalidArgument(f"{name} must be a boolean, found {value!r}")
    return bool(value)


def readonly(pubkey: Pubkey, is_signer: bool = False) -> AccountMeta:
    return AccountMeta(pubkey=pubkey, is_signer=is_signer, is_writable=False)


def writable(pubkey: Pubkey, is_signer: bool = False) -> AccountMeta:
    return AccountMeta(pubkey=pubkey, is_signer=is_signer, is_writable=True)
