from dataclasses import dataclass

from podite import U8, U64, pod
from solders.instruction import Instruction
from solders.pubkey import Pubkey
from spl.token.constants import TOKEN_PROGRAM_ID

from .common import InstructionCode, check_flag, check_u64, readonly, writable


@pod
class Params:
    instr: InstructionCode
    is_yes: U8
    price: U64
    amount: U64


@dataclass
class TraderAccounts:
    """Accounts shared by offer_trade and payout, in the order the program reads them."""

    user: Pubkey
    program_authority: Pubkey
    market: Pubkey
    usd_token_mint: Pubkey
    yes_token_mint: Pubkey
    no_token_mint: Pubkey
    user_usd_token_account: Pubkey
    user_yes_token_account: Pubkey
    user_no_token_account: Pubkey
    market_usd_token_account: Pubkey

    def to_account_metas(self):
        return [
            readonly(self.user, is_signer=True),
            readonly(self.program_authority),
            writable(self.market),
            writable(self.usd_token_mint),
            writable(self.yes_token_mint),
            writable(self.no_token_mint),
            writable(self.user_usd_token_account),
            writable(self.user_yes_token_account),
            writable(self.user_no_token_account),
            writable(self.market_usd_token_account),
            readonly(TOKEN_PROGRAM_ID),
        ]


def offer_trade_ix(
    program_id: Pubkey,
    accounts: TraderAccounts,
    is_yes: bool,
    price: int,
    amount: int,
) -> Instruction:
    params = Params(
        instr=InstructionCode.OFFER_TRADE,
        is_yes=int(check_flag("is_yes", is_yes)),
        price=check_u64("price", price),
        amount=check_u64("amount", amount),
    )
    return Instruction(
        program_id=program_id,
        data=Params.to_bytes(params),
        accounts=accounts.to_account_metas(),
    )
